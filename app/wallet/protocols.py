"""
Protocol definitions for the remote payment processor.

The wallet services depend on these interfaces rather than on Stripe, so
the processor (and the source of its credentials) can be swapped or faked.

Available Protocols:
    CredentialsProvider: Supplies the processor secret key
    PaymentProcessor: The nine remote operations the wallet consumes

Usage:
    from wallet.protocols import PaymentProcessor

    def default_card(processor: PaymentProcessor, stripe_id: str):
        return processor.retrieve_customer(stripe_id).default_card

Note:
    - Implementations raise wallet.exceptions errors, never SDK errors
    - @runtime_checkable allows isinstance() checks
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wallet.types import (
        CardDetails,
        CardInput,
        ChargeResult,
        CreateChargeParams,
        CreateSubscriptionParams,
        CustomerResult,
        SubscriptionResult,
    )


@runtime_checkable
class CredentialsProvider(Protocol):
    """
    Protocol for processor credential sources.

    Example:
        class VaultCredentials:
            def get_secret_key(self) -> str:
                return vault.read("stripe/secret")
    """

    def get_secret_key(self) -> str:
        """Return the secret API key to authenticate the next request."""
        ...


@runtime_checkable
class PaymentProcessor(Protocol):
    """
    Protocol for the remote payment processor.

    Every method is a single synchronous request/response. Failures are
    raised as RemoteRejectedError or RemoteUnavailableError.
    """

    def create_token(self, card: CardInput) -> str:
        """Exchange raw card fields for a single-use token ID."""
        ...

    def create_customer(
        self,
        email: str | None = None,
        source: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> CustomerResult:
        """Create a remote customer, optionally seeded with a first card token."""
        ...

    def retrieve_customer(self, customer_id: str) -> CustomerResult:
        """Fetch a remote customer including its cards and default source."""
        ...

    def update_default_source(self, customer_id: str, card_id: str) -> CustomerResult:
        """Set the remote customer's default source and return the updated customer."""
        ...

    def create_card(self, customer_id: str, token: str) -> CardDetails:
        """Attach the card behind a token to the customer."""
        ...

    def list_cards(self, customer_id: str) -> list[CardDetails]:
        """List every card attached to the customer."""
        ...

    def delete_card(self, customer_id: str, card_id: str) -> str:
        """Detach a card and return its ID."""
        ...

    def create_charge(self, params: CreateChargeParams) -> ChargeResult:
        """Create a one-off charge."""
        ...

    def create_subscription(self, params: CreateSubscriptionParams) -> SubscriptionResult:
        """Create a subscription on the customer."""
        ...


__all__ = ["CredentialsProvider", "PaymentProcessor"]
