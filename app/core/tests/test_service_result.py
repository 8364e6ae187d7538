"""
Tests for ServiceResult and BaseService.
"""

import logging

from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult


class TestServiceResult:
    """Tests for the ServiceResult wrapper."""

    def test_success(self):
        result = ServiceResult.success("card_1")

        assert result.success is True
        assert result.data == "card_1"
        assert result.error is None
        assert bool(result) is True

    def test_ok_alias(self):
        assert ServiceResult.ok(5) == ServiceResult.success(5)

    def test_success_may_carry_none(self):
        result = ServiceResult.success(None)

        assert result.success is True
        assert result.data is None

    def test_failure(self):
        result = ServiceResult.failure("Invalid StripeId", error_code="NO_STRIPE_ID")

        assert result.success is False
        assert result.data is None
        assert result.error == "Invalid StripeId"
        assert result.error_code == "NO_STRIPE_ID"
        assert bool(result) is False

    def test_from_application_error(self):
        """Should keep the error's own message and code."""
        error = BaseApplicationError("Your card was declined.", error_code="REMOTE_REJECTED")

        result = ServiceResult.from_exception(error)

        assert result.error == "Your card was declined."
        assert result.error_code == "REMOTE_REJECTED"

    def test_from_plain_exception(self):
        result = ServiceResult.from_exception(ValueError("bad value"))

        assert result.error == "bad value"
        assert result.error_code == "VALUEERROR"

    def test_to_response(self):
        assert ServiceResult.success({"id": 1}).to_response() == {
            "success": True,
            "data": {"id": 1},
        }
        assert ServiceResult.failure(
            "Required fields missing",
            error_code="VALIDATION_ERROR",
            errors={"plan": ["This field is required."]},
        ).to_response() == {
            "success": False,
            "error": "Required fields missing",
            "error_code": "VALIDATION_ERROR",
            "errors": {"plan": ["This field is required."]},
        }

    def test_map(self):
        assert ServiceResult.success(2).map(lambda n: n * 10).data == 20

        failure = ServiceResult.failure("nope")
        assert failure.map(lambda n: n * 10) is failure


class TestBaseService:
    """Tests for BaseService helpers."""

    def test_logger_named_after_class(self):
        class CardService(BaseService):
            pass

        assert CardService.get_logger().name.endswith(".CardService")

    def test_handle_exception_logs_and_converts(self, caplog):
        error = BaseApplicationError("No such source: invalidId", error_code="REMOTE_REJECTED")

        with caplog.at_level(logging.WARNING):
            result = BaseService.handle_exception(error, "remove card")

        assert result.error == "No such source: invalidId"
        assert result.error_code == "REMOTE_REJECTED"
        assert "remove card" in caplog.text
        assert caplog.records[-1].error_code == "REMOTE_REJECTED"

    def test_validate_required(self):
        assert BaseService.validate_required(name="main", plan="price_monthly") is None

        result = BaseService.validate_required(name="main", plan="  ")
        assert result.error_code == "VALIDATION_ERROR"
        assert result.errors == {"plan": ["This field is required."]}
