"""
Wallet-specific exceptions for payment profile operations.

Every failure surfaced by the wallet services maps to exactly one of the
classes below. The Stripe adapter is the only place SDK exceptions are
caught; it translates them into this hierarchy so no raw transport error
ever leaves the wallet app.

Exception Hierarchy:
    WalletError (base for wallet domain)
    ├── PaymentValidationError - Caller input insufficient (no remote call made)
    ├── NoStripeIdError - Customer has no remote Stripe customer yet
    ├── RemoteRejectedError - Processor declined the request (permanent)
    ├── RemoteUnavailableError - Transport failure or timeout (transient)
    └── InconsistentStateError - Read-back could not find what was just written

Services convert the first four into ServiceResult failures carrying the
error_code as discriminator. InconsistentStateError is always raised.

Usage:
    from wallet.exceptions import RemoteRejectedError

    try:
        card = processor.create_card(customer.stripe_id, token)
    except RemoteRejectedError as e:
        return ServiceResult.failure(e.message, error_code=e.error_code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


class WalletError(BaseApplicationError):
    """
    Base exception for all wallet operations.

    Attributes:
        is_retryable: Whether the same request may succeed if sent again
    """

    default_error_code: str = "WALLET_ERROR"
    is_retryable: bool = False


class PaymentValidationError(WalletError):
    """
    Raised when the caller supplied insufficient input.

    Detected locally; the remote processor is never contacted.

    Example:
        raise PaymentValidationError("No payment source provided.")
    """

    default_error_code: str = "VALIDATION_ERROR"


class NoStripeIdError(WalletError):
    """
    Raised when an operation needs a remote customer that does not exist.

    This is a state precondition on the Customer, not a malformed request.
    """

    default_error_code: str = "NO_STRIPE_ID"

    def __init__(
        self,
        message: str = "Invalid StripeId",
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code=error_code, details=details)


class RemoteRejectedError(WalletError):
    """
    The processor declined the request.

    Covers declined, expired or invalid cards, insufficient funds and
    unknown or already removed source ids. The message is the processor's
    text, passed through verbatim.

    Attributes:
        stripe_code: Stripe's error code (card_declined, resource_missing, ...)
        decline_code: Card decline code when the issuer supplied one
    """

    default_error_code: str = "REMOTE_REJECTED"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


class RemoteUnavailableError(WalletError):
    """
    The processor could not be reached or answered with garbage.

    Covers connection errors, timeouts, rate limiting, 5xx responses and
    malformed payloads. Nothing is retried automatically; callers may retry
    because remote customer creation is idempotent on the local record.
    """

    default_error_code: str = "REMOTE_UNAVAILABLE"
    is_retryable: bool = True


class InconsistentStateError(WalletError):
    """
    A post-write read-back could not find the data it just wrote.

    Signals a bug or a card id that does not belong to the customer.
    Always fatal: services raise it instead of returning a failure result.

    Example:
        raise InconsistentStateError(
            f"Card {card_id} not found on customer {customer.stripe_id}",
            details={"card_id": card_id, "stripe_id": customer.stripe_id},
        )
    """

    default_error_code: str = "INCONSISTENT_STATE"


__all__ = [
    "WalletError",
    "PaymentValidationError",
    "NoStripeIdError",
    "RemoteRejectedError",
    "RemoteUnavailableError",
    "InconsistentStateError",
]
