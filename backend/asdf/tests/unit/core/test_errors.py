"""Tests for the shared error hierarchy."""

import pytest

from asdf.core.errors import (
    ASDFError,
    ApplicationError,
    ConfigurationError,
    ErrorSeverity,
    InfrastructureError,
    NotFoundError,
)


@pytest.mark.unit
class TestASDFError:
    def test_defaults(self):
        error = ASDFError("Something failed")

        assert error.message == "Something failed"
        assert error.code == "ERROR"
        assert error.details == {}
        assert str(error) == "ERROR: Something failed"

    def test_code_override(self):
        error = ApplicationError("boom", code="CUSTOM")

        assert error.code == "CUSTOM"

    def test_to_dict(self):
        error = InfrastructureError(
            "cache down", details={"host": "redis"}, recovery_hint="Retry later"
        )

        assert error.to_dict() == {
            "error": "INFRASTRUCTURE_ERROR",
            "message": "cache down",
            "severity": "high",
            "details": {"host": "redis"},
            "recovery_hint": "Retry later",
            "retryable": True,
        }
        assert "details" not in error.to_dict(include_details=False)

    def test_with_context_chains(self):
        error = ApplicationError("boom")

        assert error.with_context(request_id="r1") is error
        assert error.context == {"request_id": "r1"}


@pytest.mark.unit
class TestSpecificErrors:
    def test_not_found(self):
        error = NotFoundError("Service", "leaderboard")

        assert error.message == "Service not found: leaderboard"
        assert error.code == "NOT_FOUND"
        assert error.details == {"resource": "Service", "identifier": "leaderboard"}
        assert error.severity == ErrorSeverity.LOW

    def test_configuration_error(self):
        error = ConfigurationError("bad value", config_key="ASDF_ENV")

        assert error.details == {"config_key": "ASDF_ENV"}
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.retryable is False
