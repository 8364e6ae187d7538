"""
Base exception class for application-wide error handling.

This module provides the root of the exception hierarchy used by the
domain apps. It enables:
- Consistent error payloads across the application
- Machine-readable error codes for client handling
- Detailed error information for debugging

Domain apps subclass BaseApplicationError and set default_error_code
(see wallet.exceptions).

Usage:
    from core.exceptions import BaseApplicationError

    class CardDeclinedError(BaseApplicationError):
        default_error_code = "CARD_DECLINED"

    # Raise with message only
    raise CardDeclinedError("Your card was declined.")

    # Raise with additional details
    raise CardDeclinedError(
        "Your card was declined.",
        details={"decline_code": "generic_decline"},
    )

    # Convert to dict for a response payload
    try:
        ...
    except BaseApplicationError as e:
        return e.to_dict()

Note:
    Services usually turn these into ServiceResult failures
    (see core.services.ServiceResult.from_exception).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)

    Example:
        try:
            card = processor.create_card(stripe_id, token)
        except BaseApplicationError as e:
            logger.warning(f"Card not attached: {e.error_code}")
            return ServiceResult.from_exception(e)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for a response payload.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Invalid StripeId",
                "error_code": "NO_STRIPE_ID",
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


__all__ = ["BaseApplicationError"]
