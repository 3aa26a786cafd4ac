from __future__ import annotations

import os
import re
from typing import Dict, Optional

import httpx

from .config import Settings

USER_AGENT: str = os.getenv("OUTBOUND_USER_AGENT", "gemini-proxy/1.0")


def _ua_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    base = {"User-Agent": USER_AGENT}
    if extra:
        base.update(extra)
    return base


def upstream_timeout(settings: Settings) -> httpx.Timeout:
    # read=None lets a streamed generation stay open as long as upstream keeps it open
    return httpx.Timeout(settings.read_timeout, connect=settings.connect_timeout)


def build_client(settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Shared client for every forwarded request. No retries at this layer."""
    return httpx.AsyncClient(
        timeout=upstream_timeout(settings),
        headers=_ua_headers(),
        transport=transport,
    )


_KEY_PARAM_RE = re.compile(r"([?&]key=)[^&#]*")


def mask_key(url: str) -> str:
    """Hide the value of the ``key`` query parameter; the rest of the URL is untouched."""
    return _KEY_PARAM_RE.sub(r"\1***", url)
