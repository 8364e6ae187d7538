"""
Customer model and the Billable mixin.

Billable adds the Stripe mirror fields and the caller-facing payment
methods to any model with an ``email``. Customer is the concrete model the
wallet app ships with.

Usage:
    from wallet.models import Customer

    customer = Customer.objects.create(email="jane@example.com")

    result = customer.add_payment_method("tok_visa")
    if result.success:
        card_id = result.data

    customer.charge(1500)
    customer.new_subscription("main", "price_monthly").trial_days(14).create()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from typing import Any

    from core.services import ServiceResult
    from wallet.services import PaymentProfile
    from wallet.services.subscriptions import SubscriptionBuilder
    from wallet.types import CardDetails, ChargeResult


def default_currency() -> str:
    """Preferred currency for new customers (WALLET_CURRENCY setting)."""
    return getattr(settings, "WALLET_CURRENCY", "usd")


class Billable(models.Model):
    """
    Abstract mixin mirroring a remote Stripe customer.

    Fields:
        stripe_id: Stripe Customer ID (cus_xxx), created lazily, at most once
        card_brand: Brand of the remote default card
        card_last_four: Last four digits of the remote default card

    card_brand and card_last_four always describe the remote default card.
    They are written together, only by mirror_default_card(), and only from
    a card read back from Stripe.

    Not thread-safe: the instance is mutated in place by the wallet services.
    """

    stripe_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        unique=True,
        help_text="Stripe Customer ID (cus_xxx)",
    )

    card_brand = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Brand of the default card (mirror of Stripe)",
    )

    card_last_four = models.CharField(
        max_length=4,
        null=True,
        blank=True,
        help_text="Last four digits of the default card (mirror of Stripe)",
    )

    class Meta:
        abstract = True

    # ==========================================================================
    # Local State
    # ==========================================================================

    @property
    def has_stripe_id(self) -> bool:
        return bool(self.stripe_id)

    def preferred_currency(self) -> str:
        """Currency used when a charge does not name one."""
        return getattr(self, "currency", None) or default_currency()

    def set_stripe_id(self, stripe_id: str) -> None:
        """Record the remote customer ID and persist it immediately."""
        self.stripe_id = stripe_id
        self._persist(["stripe_id"])

    def mirror_default_card(self, card: CardDetails | None) -> None:
        """
        Copy the remote default card onto the local record and persist.

        Args:
            card: Card read back from Stripe, or None to clear the mirror
        """
        self.card_brand = card.brand if card else None
        self.card_last_four = card.last4 if card else None
        self._persist(["card_brand", "card_last_four"])

    def _persist(self, fields: list[str]) -> None:
        if self._state.adding:
            self.save()
            return
        if any(f.name == "updated_at" for f in self._meta.concrete_fields):
            fields = [*fields, "updated_at"]
        self.save(update_fields=fields)

    # ==========================================================================
    # Caller-facing API
    # ==========================================================================

    def payment_profile(self) -> PaymentProfile:
        from wallet.services import PaymentProfile

        return PaymentProfile(self)

    def get_stripe_id(self) -> ServiceResult[str]:
        """Return the Stripe Customer ID, creating the customer if needed."""
        return self.payment_profile().ensure_remote_customer()

    def create_token(self, params: dict[str, Any]) -> ServiceResult[str]:
        return self.payment_profile().create_token(params)

    def add_payment_method(
        self,
        source: str | dict[str, Any],
        set_as_default: bool = False,
    ) -> ServiceResult[str]:
        return self.payment_profile().add_payment_method(source, set_as_default=set_as_default)

    def remove_payment_method(self, card_id: str) -> ServiceResult[str]:
        return self.payment_profile().remove_payment_method(card_id)

    def list_payment_methods(self) -> ServiceResult[list[CardDetails]]:
        return self.payment_profile().list_payment_methods()

    def get_payment_method(self, card_id: str) -> ServiceResult[CardDetails | None]:
        return self.payment_profile().get_payment_method(card_id)

    def get_default_payment_method(self) -> ServiceResult[CardDetails | None]:
        return self.payment_profile().get_default_payment_method()

    def promote_default_payment_method(self, card_id: str) -> ServiceResult[Billable]:
        return self.payment_profile().promote_default_payment_method(card_id)

    def charge(
        self,
        amount: int,
        card_id: str | None = None,
        currency: str | None = None,
        **options: Any,
    ) -> ServiceResult[ChargeResult]:
        return self.payment_profile().charge(amount, card_id=card_id, currency=currency, **options)

    def new_subscription(self, name: str, plan: str) -> SubscriptionBuilder:
        return self.payment_profile().new_subscription(name, plan)


class Customer(UUIDPrimaryKeyMixin, Billable, BaseModel):
    """
    A local customer that can hold cards and subscriptions.

    Fields:
        email: Contact email, sent to Stripe when the remote customer is created
        name: Display name
        currency: Preferred ISO 4217 currency for one-off charges
    """

    email = models.EmailField(
        db_index=True,
        help_text="Customer email",
    )

    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Customer display name",
    )

    currency = models.CharField(
        max_length=3,
        default=default_currency,
        help_text="Preferred ISO 4217 currency code (lowercase)",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"

    def __str__(self) -> str:
        return f"Customer({self.id}, {self.email}, stripe_id={self.stripe_id})"
