"""Exception handlers for FastAPI application"""
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from placehub.decision.error_codes import ErrorKind
from placehub.exceptions import BadRequestError, NotFoundError, PlaceHubError

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
}


def _error_response(request: Request, status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"error": error, "path": str(request.url.path)}),
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing sites, slugs, pages, subscriptions and entities"""
    return _error_response(request, status.HTTP_404_NOT_FOUND, exc.to_dict())


async def bad_request_error_handler(request: Request, exc: BadRequestError) -> JSONResponse:
    """Handle business rule violations"""
    return _error_response(request, status.HTTP_400_BAD_REQUEST, exc.to_dict())


async def placehub_error_handler(request: Request, exc: PlaceHubError) -> JSONResponse:
    """Handle any other domain error by the kind of its error code"""
    status_code = _STATUS_BY_KIND.get(exc.error_code.kind, status.HTTP_400_BAD_REQUEST)
    return _error_response(request, status_code, exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors"""
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle database integrity errors (e.g., unique constraint violations)"""
    error_message = str(exc.orig) if hasattr(exc, "orig") else str(exc)
    logger.warning(f"Integrity error on {request.url.path}: {error_message}")

    if "unique" in error_message.lower() or "duplicate" in error_message.lower():
        return _error_response(
            request,
            status.HTTP_409_CONFLICT,
            {
                "code": "UNIQUE_CONSTRAINT_VIOLATION",
                "message": "A record with this value already exists",
                "details": error_message,
            },
        )

    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        {
            "code": "DATABASE_ERROR",
            "message": "Database constraint violation",
            "details": error_message,
        },
    )
