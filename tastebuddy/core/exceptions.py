from typing import Optional

from fastapi import Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from tastebuddy.core.config import settings
from tastebuddy.core.error_codes import INTERNAL_ERROR, VALIDATION_ERROR

logger = logging.getLogger("uvicorn.error")


class CustomHTTPException(Exception):
    """A custom HTTPException that we can use for additional context."""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None, debug: str = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        self.headers = headers
        self.debug = debug
        super().__init__(detail)  # Initialize the base Exception with the detail message


def internal_error(detail: str, exc: Optional[BaseException] = None, error_code: str = INTERNAL_ERROR) -> CustomHTTPException:
    """Build a 500 error, keeping the underlying cause only outside production."""
    debug = None
    if exc is not None and not settings.is_production:
        debug = str(exc)
    return CustomHTTPException(
        status_code=500,
        detail=detail,
        error_code=error_code,
        debug=debug,
    )


def _error_body(error: str, error_code: Optional[str] = None, **extra) -> dict:
    body = {"success": False, "error": error}
    if error_code:
        body["error_code"] = error_code
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors and return a structured JSON response."""
    logger.error(f"Validation error on {request.url}: {exc.errors()}")

    errors = exc.errors()
    # Sanitize un-serializable objects in ctx
    for error in errors:
        ctx = error.get("ctx")
        if ctx and isinstance(ctx.get("error"), Exception):
            ctx["error"] = str(ctx["error"])

    message = errors[0].get("msg", "Validation failed") if errors else "Validation failed"

    return JSONResponse(
        status_code=400,
        content=_error_body(message, VALIDATION_ERROR, details=errors),
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Custom HTTP exception handler for better error responses."""
    if isinstance(exc, CustomHTTPException):
        logger.error(f"Custom HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, exc.error_code, debug=exc.debug),
            headers=exc.headers or {},
        )
    elif isinstance(exc, StarletteHTTPException):
        logger.error(f"HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=exc.headers or {},
        )

    logger.error(f"Unexpected error on {request.url}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", INTERNAL_ERROR),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url}: {exc}")
    debug = None if settings.is_production else str(exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", INTERNAL_ERROR, debug=debug),
    )
