"""Push Dispatcher -- Main Application Entry Point

Creates the FastAPI application, attaches the notification dispatcher,
installs the CORS header middleware and the error-to-response mapping, and
registers the dispatch route under ``settings.dispatch_path``.

Run with::

    uvicorn codarc_push.main:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from codarc_push.api.routes import notifications
from codarc_push.core.config import Settings, settings as default_settings
from codarc_push.core.errors import DispatchError, MethodNotAllowed
from codarc_push.integrations.fcm import FirebasePushBackend
from codarc_push.services.dispatchService import NotificationDispatcher

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

async def _dispatch_error_handler(request: Request, exc: DispatchError) -> Response:
    if isinstance(exc, MethodNotAllowed):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    if exc.status_code >= 500:
        logger.error("Error sending push notification: %s", exc.message)
    else:
        logger.info("Rejected push request: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return await _dispatch_error_handler(request, MethodNotAllowed())
    return await http_exception_handler(request, exc)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    dispatcher: NotificationDispatcher | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the application.

    When ``dispatcher`` is omitted, a Firebase-backed dispatcher is created
    on startup and its Firebase app is deleted on shutdown.
    """
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_backend = None
        if app.state.dispatcher is None:
            owned_backend = FirebasePushBackend.from_settings(settings)
            app.state.dispatcher = NotificationDispatcher(
                owned_backend,
                timeout_seconds=settings.fcm_send_timeout_seconds,
            )

        yield

        if owned_backend is not None:
            owned_backend.close()
            app.state.dispatcher = None

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher

    app.add_exception_handler(DispatchError, _dispatch_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.get("/health", tags=["Health"])
    async def health():
        """Lightweight health check for load balancers and readiness probes."""
        return {"status": "ok", "version": settings.app_version}

    app.include_router(notifications.router, prefix=settings.dispatch_path)

    return app


app = create_app()
