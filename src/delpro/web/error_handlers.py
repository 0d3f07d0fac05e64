import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from delpro.errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateValueError,
    ExhaustionError,
    InvalidCategoryError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, field: str | None = None
) -> JSONResponse:
    """Create JSON error response with optional type (and offending field) for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    field = None
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, InvalidCategoryError):
        status_code = 400
        error_type = "invalid_category"
    elif isinstance(exc, DuplicateValueError):
        status_code = 400
        error_type = "duplicate_value"
        field = exc.field
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, field=field)


async def exhaustion_error_handler(_: Request, exc: Exception) -> Response:
    """Identifier allocation gave up: a server-side failure, not bad input."""
    logger.error("identifier_allocation_exhausted", error=str(exc))
    return create_json_error_response(status_code=500, message=str(exc), error_type="allocation_failed")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
