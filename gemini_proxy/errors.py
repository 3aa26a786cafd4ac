# gemini_proxy/errors.py
"""
Error taxonomy for the proxy and the handlers that render it.

- ProxyError subclasses carry a status code and are rendered as the JSON
  envelope ``{"error": ..., "details"?: ...}``.
- UpstreamApplicationError is the exception to that rule: the upstream's own
  status, body bytes and content type are passed through untouched.
- StreamRelayError is raised inside the relay and caught there to be logged;
  once streaming has begun the status line is already on the wire.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    error: str
    details: Optional[str] = None


class ProxyError(Exception):
    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def envelope(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(ProxyError):
    status_code = 500


class InvalidPathSegmentError(ProxyError):
    status_code = 400


class InvalidRequestBodyError(ProxyError):
    status_code = 400


class UpstreamTransportError(ProxyError):
    status_code = 500


class StreamRelayError(ProxyError):
    pass


class UpstreamApplicationError(Exception):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, body: bytes, content_type: str = "application/json"):
        super().__init__(f"upstream returned {status_code}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.envelope())


async def _upstream_error_handler(request: Request, exc: UpstreamApplicationError) -> Response:
    return Response(
        content=exc.body,
        status_code=exc.status_code,
        headers={"Content-Type": exc.content_type},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.add_exception_handler(UpstreamApplicationError, _upstream_error_handler)
