from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .api import ROUTERS
from .config import Settings, settings as default_settings
from .errors import PanelError
from .models import now_ms
from .services import seed_admin
from .storage import DocumentStore, build_store

logger = logging.getLogger(__name__)


class BodyLimitMiddleware:
    """
    Caps request bodies at max_body_bytes while they are read, so chunked uploads
    without a Content-Length header are limited too.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise HTTPException(status_code=413, detail="payload too large")
            return message

        await self.app(scope, limited_receive, send)


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or default_settings
    store = store or build_store(settings)

    app = FastAPI(title="Ticket Panel API", version=settings.app_version)
    app.state.settings = settings
    app.state.store = store

    # --- CORS ---
    # Panel UI only; bots call server-to-server.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodyLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    @app.middleware("http")
    async def _limit_body_and_log(request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_body_bytes:
            logger.info("%s %s -> 413", request.method, request.url.path)
            return JSONResponse(status_code=413, content={"detail": "payload too large"})

        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    # --- Startup / shutdown ---
    @app.on_event("startup")
    def _startup() -> None:
        # Must finish before traffic; a login racing it just fails (user not found yet).
        seed_admin(store, settings)

    @app.on_event("shutdown")
    def _shutdown() -> None:
        store.close()

    # --- Error envelope: {"detail": ...} everywhere ---
    @app.exception_handler(PanelError)
    async def panel_error_handler(request, exc: PanelError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc)
            return JSONResponse(status_code=exc.status_code, content={"detail": "internal error"})
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError):
        errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"detail": "invalid input", "errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = f"not found: {request.method} {request.url.path}"
        return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "internal error"})

    # --- Health / meta ---
    @app.get("/health", tags=["meta"])
    def health() -> Dict[str, Any]:
        return {"ok": True, "ts": now_ms()}

    # --- API routers ---
    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(level=getattr(logging, str(default_settings.log_level).upper(), logging.INFO))
    import uvicorn

    uvicorn.run(
        "ticketpanel.main:app",
        host=default_settings.host,
        port=int(default_settings.port),
        reload=bool(default_settings.reload),
    )
