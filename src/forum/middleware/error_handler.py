"""Global error handler: consistent JSON error responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from forum.errors import ERROR_KIND_TO_STATUS, ErrorKind, ForumError
from forum.responses import error_response

logger = structlog.get_logger()

_STATUS_TO_KIND: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.VALIDATION,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION,
}


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(ForumError)
    async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
        """Render domain errors with their stable (kind, message) pair."""
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("internal_error", path=request.url.path, method=request.method, error=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.kind, exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent JSON format."""
        kind = _STATUS_TO_KIND.get(exc.status_code, ErrorKind.INTERNAL)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(kind, str(exc.detail) if exc.detail else "request failed"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors with consistent JSON format."""
        errors = exc.errors()
        message = "invalid request"
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            message = f"{location}: {errors[0].get('msg', 'invalid value')}" if location else message
        return JSONResponse(
            status_code=ERROR_KIND_TO_STATUS[ErrorKind.VALIDATION],
            content=error_response(ErrorKind.VALIDATION, message),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Storage failures never leak driver detail to the caller."""
        logger.error(
            "storage_error",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(ErrorKind.INTERNAL, "internal error"),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: always return JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(ErrorKind.INTERNAL, "Internal server error"),
        )
