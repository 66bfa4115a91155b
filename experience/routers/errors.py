"""
Exception handlers translating cart failures into HTTP responses.

Response body: ``{"code", "message", "details"}``. Unexpected failures are
reported as a generic 500 without details.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from experience.errors import (
    ERROR_INTERNAL,
    ERROR_VALIDATION_FAILED,
    CartError,
    ContextExpiredError,
    NotFoundError,
    ValidationError,
)
from experience.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"

# Only these kinds are exposed; anything else is a server-side failure
STATUS_BY_CODE = {
    ValidationError.code: 400,
    NotFoundError.code: 404,
    ContextExpiredError.code: 410,
}


def _format_validation_error(error: dict) -> str:
    # Drop the leading "body"/"path" segment
    location = ".".join(str(part) for part in error.get("loc", ())[1:])
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"code": INTERNAL_ERROR_CODE, "message": ERROR_INTERNAL},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request body or parameters -> 400."""
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.warning(f"Request validation failed: {request.method} {request.url.path} errors={errors}")
    return JSONResponse(
        status_code=400,
        content={
            "code": ValidationError.code,
            "message": ERROR_VALIDATION_FAILED,
            "details": {"errors": errors},
        },
    )


async def cart_error_handler(request: Request, exc: CartError) -> JSONResponse:
    """Typed cart failures -> 400/404/410, unknown kinds -> 500."""
    status_code = STATUS_BY_CODE.get(exc.code)
    if status_code is None:
        logger.error(f"Service error: {exc.message} code={exc.code} details={exc.details}")
        return _internal_error_response()

    logger.warning(
        f"Service error: {exc.message} code={exc.code} status={status_code} details={exc.details}"
    )
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "message": exc.message, "details": exc.details},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unclassified -> 500."""
    logger.error(f"Unexpected service error: {exc}", exc_info=exc)
    return _internal_error_response()


def register_error_handlers(app: FastAPI) -> None:
    """Install all cart exception handlers on ``app``."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(CartError, cart_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
