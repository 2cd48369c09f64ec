"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic
from dataclasses import dataclass
from datetime import datetime

from backoffice.domain.models.base import DomainException, utc_now
from backoffice.domain.models.plans import PlanResult

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        return cls.error_result(str(exc), "UNKNOWN_ERROR")


class PlanRejected(DomainException):
    """Raised inside a use case when the lifecycle resolver refused a transition."""

    def __init__(self, result: PlanResult):
        super().__init__(result.error or "Transition rejected", result.error_code)


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """

    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = utc_now()

        try:
            await self._validate_request(request)
            result = await self._execute_business_logic(request)

            self.execution_end = utc_now()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except DomainException as exc:
            self.execution_end = utc_now()
            logger.warning(f"{type(self).__name__} rejected: [{exc.code}] {exc.message}")
            return self._failure(exc)

        except Exception as exc:
            self.execution_end = utc_now()
            logger.error(f"{type(self).__name__} failed: {exc}", exc_info=True)
            return self._failure(exc)

    def _failure(self, exc: Exception) -> UseCaseResult[R]:
        execution_time = (self.execution_end - self.execution_start).total_seconds()
        error_result = UseCaseResult.from_exception(exc)
        error_result.metadata = {
            "execution_time_seconds": execution_time,
            "failed_at": self.execution_end.isoformat(),
            "exception_type": type(exc).__name__
        }
        return error_result

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if hasattr(request, 'model_validate'):
            # Pydantic models
            request.model_validate(request.model_dump())
        elif hasattr(request, 'validate'):
            request.validate()

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    A rejected plan aborts the command before anything is written.
    """

    async def _execute_business_logic(self, request: T) -> R:
        return await self._execute_command_logic(request)

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    @staticmethod
    def _require_plan(result: PlanResult):
        if not result.success:
            raise PlanRejected(result)
        return result.plan
