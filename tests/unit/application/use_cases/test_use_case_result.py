"""
Unit tests for UseCaseResult and the BaseUseCase error handling.
"""

import pytest

from backoffice.application.use_cases.base_use_case import (
    CommandUseCase,
    PlanRejected,
    QueryUseCase,
    UseCaseResult,
)
from backoffice.domain.models.base import BusinessRuleViolation, EntityNotFoundError
from backoffice.domain.models.plans import PlanResult


class TestUseCaseResult:
    """Test cases for UseCaseResult."""

    def test_success_result(self):
        """Test creating successful result."""
        result = UseCaseResult.success_result({"id": "k1"})

        assert result.success is True
        assert result.data == {"id": "k1"}
        assert result.error is None
        assert result.error_code is None

    def test_error_result(self):
        """Test creating error result."""
        result = UseCaseResult.error_result("Something went wrong", "TEST_ERROR")

        assert result.success is False
        assert result.data is None
        assert result.error == "Something went wrong"
        assert result.error_code == "TEST_ERROR"

    def test_error_result_with_metadata(self):
        metadata = {"attempt": 1}
        result = UseCaseResult.error_result("Error", "ERR_001", metadata)
        assert result.metadata == metadata

    def test_from_domain_exception_keeps_code(self):
        result = UseCaseResult.from_exception(EntityNotFoundError("Contract", "k9"))

        assert result.error == "Contract with id k9 not found"
        assert result.error_code == "ENTITY_NOT_FOUND"

    def test_from_unexpected_exception(self):
        result = UseCaseResult.from_exception(RuntimeError("boom"))

        assert result.error == "boom"
        assert result.error_code == "UNKNOWN_ERROR"


class EchoQuery(QueryUseCase[str, str]):
    """Returns its request, or raises what it is told to."""

    def __init__(self, error: Exception = None):
        super().__init__()
        self.error = error

    async def _execute_business_logic(self, request: str) -> str:
        if self.error is not None:
            raise self.error
        return request.upper()


class RejectingCommand(CommandUseCase[str, str]):
    async def _execute_command_logic(self, request: str) -> str:
        self._require_plan(PlanResult.rejected(
            BusinessRuleViolation("Cannot end contract k1", "ILLEGAL_TRANSITION")
        ))
        return "unreachable"


class TestBaseUseCase:
    """Test cases for BaseUseCase.execute."""

    @pytest.mark.asyncio
    async def test_success_carries_metadata(self):
        result = await EchoQuery().execute("ok")

        assert result.success is True
        assert result.data == "OK"
        assert "execution_time_seconds" in result.metadata
        assert "executed_at" in result.metadata

    @pytest.mark.asyncio
    async def test_domain_error_becomes_failure(self):
        result = await EchoQuery(BusinessRuleViolation("Not allowed", "NOT_ALLOWED")).execute("x")

        assert result.success is False
        assert result.error_code == "NOT_ALLOWED"
        assert result.metadata["exception_type"] == "BusinessRuleViolation"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_unknown(self):
        result = await EchoQuery(KeyError("missing")).execute("x")

        assert result.success is False
        assert result.error_code == "UNKNOWN_ERROR"
        assert result.metadata["exception_type"] == "KeyError"

    @pytest.mark.asyncio
    async def test_rejected_plan_aborts_command(self):
        result = await RejectingCommand().execute("k1")

        assert result.success is False
        assert result.error == "Cannot end contract k1"
        assert result.error_code == "ILLEGAL_TRANSITION"

    def test_plan_rejected_defaults(self):
        exc = PlanRejected(PlanResult(success=False))
        assert exc.message == "Transition rejected"
