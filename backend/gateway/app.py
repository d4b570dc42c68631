"""
FastAPI application entry point for the gateway.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.config import Settings, get_settings
from gateway.firebase import FirebaseHandle, bootstrap_firebase
from gateway.middleware import (
    BodySizeLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from gateway.routes import ROUTE_MODULES
from gateway.schemas import ServerStatusResponse
from gateway.store import DocumentStore, FirestoreDocumentStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)

_BOOTSTRAP = object()


def create_app(
    settings: Optional[Settings] = None,
    firebase: Optional[FirebaseHandle] | object = _BOOTSTRAP,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    """
    Build the API.

    ``firebase`` defaults to bootstrapping from settings; pass a handle (or
    None for unauthenticated mode) to inject one.
    """
    settings = settings or get_settings()
    if firebase is _BOOTSTRAP:
        firebase = bootstrap_firebase(settings)
    if store is None:
        if firebase is not None:
            store = FirestoreDocumentStore(firebase.firestore())
        else:
            store = InMemoryDocumentStore()

    app = FastAPI(title="School Gateway", version="0.1.0")
    app.state.settings = settings
    app.state.firebase = firebase
    app.state.store = store

    # Last added runs first.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/health", response_model=ServerStatusResponse)
    def server_status():
        return ServerStatusResponse(
            status="Server is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    for module, path in ROUTE_MODULES:
        app.include_router(module.router, prefix=f"{settings.api_prefix}{path}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            content = {"error": "Route not found"}
        else:
            content = {"error": exc.detail}
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Error: %s", exc, exc_info=exc)
        message = str(exc) if settings.is_development else "An error occurred"
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": message},
        )

    return app


app = create_app()
