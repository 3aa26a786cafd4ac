# gemini_proxy/proxy.py
"""
Forwarder: one inbound request -> one upstream POST -> relayed response.

The upstream URL depends only on (model id, api endpoint, api key). Successful
upstream bodies are relayed chunk by chunk as they arrive; error bodies are
small and are read whole so they can be passed through with their status.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict
from urllib.parse import quote

import httpx
from fastapi import BackgroundTasks
from fastapi.responses import Response, StreamingResponse

from .config import Settings
from .errors import (
    ConfigurationError,
    StreamRelayError,
    UpstreamApplicationError,
    UpstreamTransportError,
)
from .net import mask_key
from .validation import validate_path_segment

log = logging.getLogger("gemini_proxy.proxy")


def build_target_url(base_url: str, model_id: str, api_endpoint: str, api_key: str) -> str:
    return f"{base_url.rstrip('/')}/models/{model_id}:{api_endpoint}?key={quote(api_key, safe='')}"


def _encode_body(body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


async def _upstream_chunks(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        raise StreamRelayError("Error piping Gemini response stream", details=str(e)) from e


class Forwarder:
    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.http = http

    def target_url(self, model_id: str, api_endpoint: str) -> str:
        return build_target_url(self.settings.upstream_base_url, model_id, api_endpoint, self.settings.api_key)

    async def forward(self, model_id: str, api_endpoint: str, body: Any) -> Response:
        """POST ``body`` to ``models/{model_id}:{api_endpoint}`` and relay the answer.

        ``body`` may be raw bytes (sent as-is) or any JSON-serializable value.
        Raises ConfigurationError, InvalidPathSegmentError, UpstreamTransportError
        or UpstreamApplicationError; the app's handlers render them.
        """
        if not self.settings.has_api_key:
            log.error("GEMINI_API_KEY environment variable is not set.")
            raise ConfigurationError("Server configuration error: Gemini API key missing.")

        validate_path_segment(model_id, "modelId")
        validate_path_segment(api_endpoint, "apiEndpoint")

        url = self.target_url(model_id, api_endpoint)
        shown = mask_key(url)
        log.info("Proxying request to: %s", shown)

        request = self.http.build_request(
            "POST",
            url,
            content=_encode_body(body),
            headers={"Content-Type": "application/json"},
        )
        try:
            upstream = await self.http.send(request, stream=True)
        except httpx.HTTPError as e:
            log.error("Proxy request to %s failed: %s", shown, e)
            raise UpstreamTransportError("Failed to proxy request to Gemini API.", details=str(e)) from e

        content_type = upstream.headers.get("Content-Type") or "application/json"

        if not upstream.is_success:
            try:
                await upstream.aread()
            except httpx.HTTPError as e:
                log.error("Reading error body from %s failed: %s", shown, e)
                raise UpstreamTransportError("Failed to proxy request to Gemini API.", details=str(e)) from e
            finally:
                await upstream.aclose()
            log.error("Gemini API returned error (%s): %s", upstream.status_code, upstream.text)
            raise UpstreamApplicationError(upstream.status_code, upstream.content, content_type)

        headers: Dict[str, str] = {"Content-Type": content_type}
        transfer_encoding = upstream.headers.get("Transfer-Encoding")
        if transfer_encoding:
            headers["Transfer-Encoding"] = transfer_encoding

        # covers a response that is dropped before its body is ever iterated
        cleanup = BackgroundTasks()
        cleanup.add_task(upstream.aclose)

        return StreamingResponse(
            self._relay(upstream, shown),
            status_code=upstream.status_code,
            headers=headers,
            background=cleanup,
        )

    async def _relay(self, upstream: httpx.Response, shown: str) -> AsyncIterator[bytes]:
        try:
            async for chunk in _upstream_chunks(upstream):
                yield chunk
        except StreamRelayError as err:
            # status and headers are already sent; the client sees a truncated body
            log.error("%s from %s: %s", err.message, shown, err.details)
        finally:
            await upstream.aclose()
