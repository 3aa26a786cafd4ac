# gemini_proxy/routers/gemini_router.py
from __future__ import annotations

from fastapi import APIRouter, Path, Request
from fastapi.responses import PlainTextResponse, Response

from ..errors import ErrorEnvelope
from ..proxy import Forwarder
from ..validation import parse_json_body

router = APIRouter(tags=["Gemini Proxy"])

_ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Invalid path segment or request body"},
    500: {"model": ErrorEnvelope, "description": "Missing API key or upstream unreachable"},
}


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Gemini Proxy is running!"


@router.get("/healthz")
async def healthz(request: Request):
    settings = request.app.state.settings
    return {
        "ok": True,
        "proxying_to": settings.upstream_base_url,
        "default_model": settings.default_model_id,
        "default_endpoint": settings.default_api_endpoint,
        "api_key_configured": settings.has_api_key,
    }


# e.g. POST /v1beta/models/gemini-2.0-flash/streamGenerateContent
@router.post("/v1beta/models/{model_id}/{api_endpoint}", responses=_ERROR_RESPONSES)
async def proxy_gemini(
    request: Request,
    model_id: str = Path(..., description="Upstream model identifier, e.g. gemini-2.0-flash"),
    api_endpoint: str = Path(..., description="Upstream method, e.g. generateContent or streamGenerateContent"),
) -> Response:
    raw = await request.body()
    parse_json_body(raw)
    forwarder: Forwarder = request.app.state.forwarder
    return await forwarder.forward(model_id, api_endpoint, raw if raw.strip() else b"{}")
