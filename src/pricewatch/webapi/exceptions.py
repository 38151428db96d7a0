"""Custom exception classes and error handling for the Pricewatch API."""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..config.logging import get_logger
from ..exceptions import AlertValidationError
from .models.responses import ErrorResponse

logger = get_logger(__name__)


class ApiException(Exception):
    """Base exception for errors raised by API handlers."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(ApiException):
    """Exception for resource not found errors."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} with identifier '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "identifier": identifier},
        )


class ForbiddenError(ApiException):
    """Exception for acting on a resource owned by someone else."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"Not allowed to modify {resource} '{identifier}'",
            status_code=403,
            details={"resource": resource, "identifier": identifier},
        )


def _error_response(
    request: Request, status_code: int, error: Dict[str, Any]
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    error_response = ErrorResponse(
        success=False,
        error={**error, "status_code": status_code},
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump())


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """Handle API handler exceptions."""
    logger.warning(
        "API exception occurred",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        method=request.method,
    )

    return _error_response(
        request,
        exc.status_code,
        {"type": type(exc).__name__, "message": exc.message, "details": exc.details},
    )


async def alert_validation_exception_handler(
    request: Request, exc: AlertValidationError
) -> JSONResponse:
    """Handle alert writes rejected by the store."""
    logger.warning(
        "Alert validation failed",
        field=exc.field,
        message=exc.message,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
    )

    return _error_response(
        request,
        422,
        {
            "type": "ValidationError",
            "message": exc.message,
            "details": {"field_errors": {exc.field: exc.message}},
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions."""
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        method=request.method,
    )

    return _error_response(
        request,
        exc.status_code,
        {"type": "HTTPException", "message": str(exc.detail)},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "Unexpected exception occurred",
        exception_type=type(exc).__name__,
        message=str(exc),
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )

    # Don't expose internal error details
    return _error_response(
        request,
        500,
        {"type": "InternalServerError", "message": "An unexpected error occurred"},
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""
    app.add_exception_handler(ApiException, api_exception_handler)
    app.add_exception_handler(AlertValidationError, alert_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")
