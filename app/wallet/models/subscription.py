"""
Subscription model for recurring billing.

A Subscription row is written only after Stripe has accepted the
subscription; it is never created speculatively.

Usage:
    from wallet.models import Subscription

    subscription = customer.subscriptions.get(name="main")
    if subscription.on_trial():
        ...
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Subscription(UUIDPrimaryKeyMixin, BaseModel):
    """
    A customer's subscription to a plan.

    Fields:
        customer: Customer paying for the subscription
        name: Caller-chosen name ("main", "add-on", ...)
        stripe_id: Stripe Subscription ID (sub_xxx)
        stripe_plan: Plan or price identifier
        quantity: Number of seats
        trial_ends_at: End of the trial (None when skipped or no trial)
        ends_at: When the subscription ends (None until cancelled)
    """

    customer = models.ForeignKey(
        "wallet.Customer",
        on_delete=models.PROTECT,
        related_name="subscriptions",
        help_text="Customer paying for the subscription",
    )

    name = models.CharField(
        max_length=255,
        help_text="Subscription name, unique per customer by convention",
    )

    stripe_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe Subscription ID (sub_xxx)",
    )

    stripe_plan = models.CharField(
        max_length=255,
        help_text="Stripe plan or price identifier",
    )

    quantity = models.PositiveIntegerField(
        default=1,
        help_text="Number of seats",
    )

    trial_ends_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="End of the trial period",
    )

    ends_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the subscription ends (set on cancellation)",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Subscription"
        verbose_name_plural = "Subscriptions"
        indexes = [
            models.Index(fields=["customer", "name"], name="wallet_subs_custome_8b1f2e_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="wallet_subscription_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Subscription({self.id}, {self.name}, {self.stripe_plan} x{self.quantity})"

    # ==========================================================================
    # Helper Properties
    # ==========================================================================

    def on_trial(self) -> bool:
        """Check if the trial period is still running."""
        return self.trial_ends_at is not None and timezone.now() < self.trial_ends_at

    @property
    def is_cancelled(self) -> bool:
        return self.ends_at is not None

    def on_grace_period(self) -> bool:
        """Cancelled but the paid period has not run out yet."""
        return self.ends_at is not None and timezone.now() < self.ends_at

    @property
    def is_active(self) -> bool:
        """Not cancelled, on trial, or still inside the grace period."""
        return self.ends_at is None or self.on_trial() or self.on_grace_period()
