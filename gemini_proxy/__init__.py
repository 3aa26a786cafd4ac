"""Gemini Proxy.

A single-route forwarder in front of the Generative Language API:

- config:     Settings (frozen, built from the environment once)
- proxy:      Forwarder + build_target_url (URL derivation, streaming relay)
- errors:     error taxonomy and the FastAPI handlers that render it
- validation: path segment allow-list, inbound JSON checks
- net:        shared httpx client construction

Import either from submodules or via the facade here.
"""

from .config import Settings, UPSTREAM_BASE_URL
from .errors import (
    ConfigurationError, InvalidPathSegmentError, InvalidRequestBodyError, ProxyError,
    StreamRelayError, UpstreamApplicationError, UpstreamTransportError,
)
from .proxy import Forwarder, build_target_url

__all__ = [
    "Settings", "UPSTREAM_BASE_URL",
    "Forwarder", "build_target_url",
    "ProxyError", "ConfigurationError", "InvalidPathSegmentError", "InvalidRequestBodyError",
    "UpstreamTransportError", "UpstreamApplicationError", "StreamRelayError",
]
