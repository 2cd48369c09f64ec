"""
Global error handler middleware for the FastAPI application.
Catches and formats all exceptions consistently.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import status

from backoffice.config import settings
from backoffice.domain.models.base import (
    BusinessRuleViolation,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_CODE_STATUS = {
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ILLEGAL_TRANSITION": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
}


def status_for_error_code(error_code: str) -> int:
    """HTTP status for a domain error code; other business rules map to 422."""
    return ERROR_CODE_STATUS.get(error_code, status.HTTP_422_UNPROCESSABLE_ENTITY)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        error_response = self.format_error_response(exc)

        if error_response["status_code"] >= 500:
            logger.error(
                f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
                exc_info=True,
                extra={
                    "request_path": request.url.path,
                    "request_method": request.method,
                }
            )
        else:
            logger.warning(f"{request.method} {request.url.path}: {error_response['message']}")

        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response["status_code"],
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        error_response = {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        if isinstance(exc, EntityNotFoundError):
            error_response.update({
                "error": "Not Found",
                "message": exc.message,
                "error_code": exc.code,
                "status_code": status.HTTP_404_NOT_FOUND
            })
        elif isinstance(exc, ValidationError):
            error_response.update({
                "error": "Bad Request",
                "message": exc.message,
                "error_code": exc.code,
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, (BusinessRuleViolation, DomainException)):
            error_response.update({
                "error": "Conflict" if exc.code == "ILLEGAL_TRANSITION" else "Unprocessable Entity",
                "message": exc.message,
                "error_code": exc.code,
                "status_code": status_for_error_code(exc.code)
            })
        elif isinstance(exc, ValueError):
            error_response.update({
                "error": "Bad Request",
                "message": str(exc),
                "status_code": status.HTTP_400_BAD_REQUEST
            })

        return error_response
