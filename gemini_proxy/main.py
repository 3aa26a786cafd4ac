from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gemini_proxy.config import Settings
from gemini_proxy.errors import register_error_handlers
from gemini_proxy.net import build_client
from gemini_proxy.proxy import Forwarder
from gemini_proxy.routers.gemini_router import router as gemini_router

# ------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------
log = logging.getLogger("gemini_proxy.main")

# httpx logs each request URL at INFO, and the upstream URL carries the API key
_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


APP_TITLE = "Gemini Proxy"
APP_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """Build the app. ``http_client`` is used as-is (and left open) when given."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = http_client is None
        http = build_client(settings) if owned else http_client
        app.state.http = http
        app.state.forwarder = Forwarder(settings, http)
        log.info("Gemini Proxy server listening on port %s", settings.port)
        log.info("Using model: %s", settings.default_model_id)
        log.info("Using endpoint: %s", settings.default_api_endpoint)
        if not settings.has_api_key:
            log.warning("GEMINI_API_KEY is not set; proxied requests will fail with 500.")
        try:
            yield
        finally:
            if owned:
                await http.aclose()

    app = FastAPI(title=APP_TITLE, version=APP_VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(gemini_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
