"""
Data types exchanged between the wallet services and the processor.

These are plain dataclasses so the services never touch Stripe SDK objects
directly. The adapter builds them from API responses; the in-memory
processor used in tests builds them by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CardDetails:
    """
    A card attached to a remote customer.

    Attributes:
        id: Card ID (card_xxx), the PaymentMethodRef callers pass around
        brand: Card brand as reported by the processor (Visa, MasterCard, ...)
        last4: Last four digits of the card number
        exp_month: Expiry month
        exp_year: Expiry year
        country: Two-letter issuing country
        raw_response: Full processor payload (for debugging)
    """

    id: str
    brand: str | None = None
    last4: str | None = None
    exp_month: int | None = None
    exp_year: int | None = None
    country: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class CardInput:
    """
    Raw card fields forwarded verbatim to the token endpoint.

    No local validation is done; the processor owns Luhn and expiry checks.
    """

    card_number: str
    expiry_month: int | str
    expiry_year: int | str
    cvc: int | str

    @classmethod
    def from_mapping(cls, params: dict[str, Any]) -> CardInput:
        return cls(
            card_number=str(params.get("card_number", "")),
            expiry_month=params.get("expiry_month", ""),
            expiry_year=params.get("expiry_year", ""),
            cvc=params.get("cvc", ""),
        )

    def __repr__(self) -> str:
        # PAN and CVC stay out of logs and tracebacks.
        return f"CardInput(last4={self.card_number[-4:]!r})"


@dataclass
class CustomerResult:
    """
    Snapshot of a remote customer.

    Attributes:
        id: Customer ID (cus_xxx)
        email: Email stored on the remote customer
        default_source: Card ID the processor treats as default (or None)
        cards: Cards attached to the customer, in processor order
        raw_response: Full processor payload
    """

    id: str
    email: str | None = None
    default_source: str | None = None
    cards: list[CardDetails] = field(default_factory=list)
    raw_response: dict[str, Any] = field(default_factory=dict)

    def find_card(self, card_id: str) -> CardDetails | None:
        """Linear scan; customers hold a handful of cards at most."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    @property
    def default_card(self) -> CardDetails | None:
        if not self.default_source:
            return None
        return self.find_card(self.default_source)


@dataclass
class CreateChargeParams:
    """
    Parameters for a one-off charge.

    Attributes:
        amount_cents: Amount in the smallest currency unit
        currency: ISO 4217 currency code
        customer_id: Remote customer to charge (processor applies its default card)
        source: Explicit card or token to charge; takes precedence over the default
        extra: Additional processor options (description, metadata, ...)
    """

    amount_cents: int
    currency: str
    customer_id: str | None = None
    source: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if not isinstance(self.amount_cents, int) or self.amount_cents <= 0:
            raise ValueError("amount_cents must be a positive integer")
        if not self.currency:
            raise ValueError("currency is required")
        if not self.customer_id and not self.source:
            raise ValueError("customer_id or source is required")


@dataclass
class ChargeResult:
    """
    Receipt for a completed charge.

    Attributes:
        id: Charge ID (ch_xxx)
        amount_cents: Charged amount
        currency: Currency code
        status: succeeded, pending or failed
        paid: Whether the charge was paid
        source_id: Card the processor actually charged
        customer_id: Remote customer, if the charge was made against one
        raw_response: Full processor payload
    """

    id: str
    amount_cents: int
    currency: str
    status: str
    paid: bool = False
    source_id: str | None = None
    customer_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class CreateSubscriptionParams:
    """
    Parameters for a remote subscription.

    Attributes:
        customer_id: Remote customer ID (cus_xxx)
        plan: Plan or price identifier
        quantity: Number of seats
        trial_end: Unix timestamp, "now" to skip any plan trial, or None
        coupon: Optional coupon code
        metadata: Key-value pairs attached to the subscription
    """

    customer_id: str
    plan: str
    quantity: int = 1
    trial_end: int | str | None = None
    coupon: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if not self.customer_id:
            raise ValueError("customer_id is required")
        if not self.plan:
            raise ValueError("plan is required")
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")


@dataclass
class SubscriptionResult:
    """
    Result from remote subscription creation.

    Attributes:
        id: Subscription ID (sub_xxx)
        status: trialing, active, incomplete, ...
        customer_id: Remote customer ID
        plan: Plan or price identifier
        quantity: Number of seats
        trial_end: Unix timestamp of trial end, if any
        raw_response: Full processor payload
    """

    id: str
    status: str
    customer_id: str
    plan: str
    quantity: int = 1
    trial_end: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "CardDetails",
    "CardInput",
    "ChargeResult",
    "CreateChargeParams",
    "CreateSubscriptionParams",
    "CustomerResult",
    "SubscriptionResult",
]
