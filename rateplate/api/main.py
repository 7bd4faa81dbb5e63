from __future__ import annotations

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from rateplate.api.problems import register_problem_handlers
from rateplate.api.routes import register_routes
from rateplate.core.config import Settings, get_settings
from rateplate.core.logging import setup_logging
from rateplate.infrastructure.db.session import dispose_engine
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

OPENAPI_TAGS = [
    {"name": "Restaurants", "description": "Restaurant catalogue and ratings"},
    {"name": "authentication", "description": "Registration, login and the current user"},
    {"name": "Events", "description": "Sample events; nothing is stored"},
    {"name": "Observability", "description": "Health probe"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    await logger.ainfo(
        "service_startup",
        environment=settings.environment,
        version=settings.version,
    )
    yield
    await dispose_engine()
    await logger.ainfo("service_shutdown")


async def request_context_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind a request id to every log line of the request and echo it back."""
    request_id = request.headers.get(REQUEST_ID_HEADER, str(uuid4()))
    bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        await logger.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_contextvars()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory for the public API."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Restaurants, ratings and bearer-token authentication.",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.middleware("http")(request_context_middleware)

    register_routes(app)
    register_problem_handlers(app)

    return app


app = create_app()
