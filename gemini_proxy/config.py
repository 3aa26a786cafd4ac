# gemini_proxy/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

UPSTREAM_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

DEFAULT_MODEL_ID = "gemini-2.0-flash"
DEFAULT_API_ENDPOINT = "streamGenerateContent"
DEFAULT_PORT = 10000


def _env(environ: Mapping[str, str], name: str, default: str = "") -> str:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _float_env(environ: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, str(default)))
    except ValueError:
        return default


def _list_env(environ: Mapping[str, str], name: str, default: str) -> Tuple[str, ...]:
    return tuple(o.strip() for o in _env(environ, name, default).split(",") if o.strip())


@dataclass(frozen=True)
class Settings:
    """Read-only process configuration.

    Built once at startup (usually via :meth:`from_env`) and handed to the app
    and the forwarder. The API key is kept out of ``repr()``.
    """

    api_key: str = field(default="", repr=False)
    default_model_id: str = DEFAULT_MODEL_ID
    default_api_endpoint: str = DEFAULT_API_ENDPOINT
    upstream_base_url: str = UPSTREAM_BASE_URL
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    cors_allow_origins: Tuple[str, ...] = ("*",)
    connect_timeout: float = 10.0
    read_timeout: Optional[float] = None  # None: long generations may stream indefinitely

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=_env(env, "GEMINI_API_KEY"),
            default_model_id=_env(env, "GEMINI_MODEL_ID", DEFAULT_MODEL_ID),
            default_api_endpoint=_env(env, "GENERATE_CONTENT_API", DEFAULT_API_ENDPOINT),
            host=_env(env, "HOST", "0.0.0.0"),
            port=_int_env(env, "PORT", DEFAULT_PORT),
            log_level=_env(env, "LOG_LEVEL", "INFO").upper(),
            cors_allow_origins=_list_env(env, "CORS_ALLOW_ORIGINS", "*"),
            connect_timeout=_float_env(env, "UPSTREAM_CONNECT_TIMEOUT", 10.0) or 10.0,
            read_timeout=_float_env(env, "UPSTREAM_READ_TIMEOUT", None),
        )
