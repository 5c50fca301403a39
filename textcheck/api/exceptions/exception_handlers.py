"""
Custom exception handlers for consistent API error responses.

Every error response has the shape ``{"error": <message>}``. Internal details
are logged, never returned to the caller.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from textcheck.api.v1.schemas.detection import TEXT_TOO_SHORT_MSG
from textcheck.core.exceptions import DetectorError
from textcheck.core.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MSG = "Internal error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle HTTPException (unknown routes, wrong methods) with the error shape.
    """
    logger.warning(
        "http_exception",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        detail=exc.detail,
    )
    detail = str(exc.detail) if exc.detail else "An error occurred"
    return _error(exc.status_code, detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Reject missing, non-string, or too-short text with 400.
    """
    logger.warning(
        "validation_exception",
        path=request.url.path,
        method=request.method,
        errors=[e.get("type") for e in exc.errors()],
    )
    return _error(status.HTTP_400_BAD_REQUEST, TEXT_TOO_SHORT_MSG)


async def detector_exception_handler(request: Request, exc: DetectorError) -> JSONResponse:
    """
    Handle a detector that could not produce any verdict (no classifier output
    and the generative fallback failed too).
    """
    logger.error(
        "detector_unavailable",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MSG)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic 500.
    """
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MSG)


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DetectorError, detector_exception_handler)

    # Catch-all for any other exceptions
    app.add_exception_handler(Exception, generic_exception_handler)
