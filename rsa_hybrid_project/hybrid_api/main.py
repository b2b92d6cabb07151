"""
Main entry point for the hybrid RSA/AES encryption demo.

This module assembles a small REST API using FastAPI.  A client:

    * fetches the server's RSA public key from ``GET /api/public-key``;
    * optionally registers its own public key with
      ``POST /api/register-client``;
    * seals a message under a fresh AES-256 key, wraps that key with
      the server's public key and posts the envelope to
      ``POST /api/send-encrypted``.  If it registered, the reply comes
      back sealed to its own key.

The endpoints themselves live in ``routes.py``; sealing and opening
envelopes is delegated to ``crypto/envelope.py``.

The server keypair is generated when the application starts, not at
import time, and is held on ``app.state.context`` together with the
client key registry.  Run with::

    rsa-hybrid-api
    # or
    uvicorn hybrid_api.main:create_app --factory --port 3000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .context import AppContext
from .errors import HybridApiError
from .logging_config import configure_logging
from .routes import ENDPOINTS, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    context: AppContext = app.state.context
    context.identity.initialize()
    logger.info(
        "server_started",
        extra={
            "fingerprint": context.identity.fingerprint,
            "public_key": context.identity.public_key_pem,
            "endpoints": ENDPOINTS,
        },
    )
    yield


async def handle_api_error(request: Request, exc: HybridApiError) -> JSONResponse:
    logger.warning(
        "request_failed",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(part) for part in err.get("loc", ())[1:]) for err in exc.errors()})
    logger.warning("request_malformed", extra={"path": request.url.path, "fields": fields})
    return JSONResponse(status_code=400, content={"error": "Malformed request body"})


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """Build the FastAPI application.

    ``context`` may be supplied to share an already initialised server
    identity or key registry; otherwise a new one is built from
    ``settings``.
    """
    if context is None:
        context = AppContext.create(settings or get_settings())

    app = FastAPI(title="Hybrid RSA/AES Encryption Demo", lifespan=lifespan)
    app.state.context = context
    app.add_exception_handler(HybridApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.include_router(router)
    return app


def main() -> None:
    """Run the server with uvicorn on the configured host and port."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.service_name)
    logger.info("server_starting", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(
        "hybrid_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
