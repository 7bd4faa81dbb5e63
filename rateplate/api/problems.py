"""RFC 7807 problem-details responses and their OpenAPI documentation."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from rateplate.api.schemas.common import ProblemDetails
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

PROBLEM_JSON = "application/problem+json"

UNAUTHORIZED_RESPONSE: dict[str, Any] = {
    "model": ProblemDetails,
    "description": "Missing, invalid or expired bearer token",
}
DEFAULT_RESPONSE: dict[str, Any] = {"model": ProblemDetails, "description": "Error"}


def problem_response(
    request: Request,
    status_code: int,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    problem = ProblemDetails(
        title=HTTPStatus(status_code).phrase,
        status=status_code,
        detail=detail,
        instance=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(),
        media_type=PROBLEM_JSON,
        headers=headers,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return problem_response(request, exc.status_code, exc.detail, getattr(exc, "headers", None))


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map data store failures to 503 when the store is unreachable, else 500.

    Driver connection failures (asyncpg raises plain ``OSError`` subclasses
    such as ``ConnectionRefusedError``) never pass through SQLAlchemy's
    wrapping, so they are mapped here alongside ``OperationalError``.
    """
    unavailable = isinstance(exc, (OperationalError, OSError))
    status_code = (
        status.HTTP_503_SERVICE_UNAVAILABLE
        if unavailable
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    await logger.aerror(
        "storage_error",
        error_type=type(exc).__name__,
        status_code=status_code,
        exc_info=exc,
    )
    return problem_response(
        request, status_code, "The data store could not complete the request."
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    await logger.aerror("unhandled_error", error_type=type(exc).__name__, exc_info=exc)
    return problem_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_problem_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(OSError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
