"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    id: Optional[str] = None


class ErrorResponseDTO(BaseDTO):
    """Error body returned by routers and the error middleware."""

    error: str = Field(description="Error category")
    message: str = Field(description="Human-readable message")
    error_code: Optional[str] = Field(default=None, description="Machine-readable code")
    status_code: int = Field(description="HTTP status code")


class TimestampMixin(BaseModel):
    """Mixin for DTOs that expose document timestamps."""

    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
