"""
Fluent builder for new subscriptions.

Usage:
    result = (
        customer.new_subscription("main", "price_monthly")
        .trial_days(14)
        .quantity(3)
        .use_card(card_id)
        .create()
    )
    if result.success:
        subscription = result.data

use_card() is NOT scoped to this subscription. The card is promoted to the
customer's default card before the subscription is created and stays the
default afterwards.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import ServiceResult
from wallet.models import Subscription
from wallet.services.base import EXPECTED_ERRORS, WalletService
from wallet.services.default_method import DefaultMethodCoordinator
from wallet.services.payment_methods import PaymentMethodStore
from wallet.types import CreateSubscriptionParams

if TYPE_CHECKING:
    from datetime import datetime

    from wallet.models import Billable
    from wallet.protocols import PaymentProcessor


logger = logging.getLogger(__name__)


class SubscriptionBuilder(WalletService):
    """
    Accumulates subscription options; create() submits them.

    Every setter returns the builder itself.
    """

    def __init__(
        self,
        owner: Billable,
        name: str,
        plan: str,
        processor: PaymentProcessor | None = None,
        store: PaymentMethodStore | None = None,
        coordinator: DefaultMethodCoordinator | None = None,
    ):
        super().__init__(processor)
        self.owner = owner
        self.name = name
        self.plan = plan
        self.coordinator = coordinator or DefaultMethodCoordinator(self.processor)
        self.store = store or PaymentMethodStore(self.processor, self.coordinator)

        self._quantity = 1
        self._trial_expires: datetime | None = None
        self._skip_trial = False
        self._coupon: str | None = None
        self._metadata: dict[str, str] = {}
        self._card_id: str | None = None

    # =========================================================================
    # Setters
    # =========================================================================

    def quantity(self, quantity: int) -> SubscriptionBuilder:
        self._quantity = quantity
        return self

    def trial_days(self, days: int) -> SubscriptionBuilder:
        """Start with a trial of the given number of days from now."""
        self._trial_expires = timezone.now() + timedelta(days=days)
        return self

    def trial_until(self, trial_until: datetime) -> SubscriptionBuilder:
        self._trial_expires = trial_until
        return self

    def skip_trial(self) -> SubscriptionBuilder:
        """Start billing now, ignoring any trial configured on the plan."""
        self._skip_trial = True
        return self

    def with_coupon(self, coupon: str) -> SubscriptionBuilder:
        self._coupon = coupon
        return self

    def with_metadata(self, metadata: dict[str, str]) -> SubscriptionBuilder:
        self._metadata = dict(metadata)
        return self

    def use_card(self, card_id: str) -> SubscriptionBuilder:
        """
        Pay with this card instead of the current default.

        The card is permanently promoted to default when create() runs.
        """
        self._card_id = card_id
        return self

    # =========================================================================
    # Payload
    # =========================================================================

    @property
    def trial_ends_at(self) -> datetime | None:
        """Trial end stored on the local record."""
        if self._skip_trial:
            return None
        return self._trial_expires

    def _trial_end_for_payload(self) -> int | str | None:
        if self._skip_trial:
            return "now"
        if self._trial_expires is not None:
            return int(self._trial_expires.timestamp())
        return None

    def build_params(self, customer_id: str) -> CreateSubscriptionParams:
        return CreateSubscriptionParams(
            customer_id=customer_id,
            plan=self.plan,
            quantity=self._quantity,
            trial_end=self._trial_end_for_payload(),
            coupon=self._coupon,
            metadata=self._metadata,
        )

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, token: str | None = None) -> ServiceResult[Subscription]:
        """
        Create the subscription on Stripe, then record it locally.

        Steps:
        1. Resolve the remote customer. A new customer is created with the
           token as its first card; for an existing customer the token is
           attached and promoted to default.
        2. Promote the use_card() card to default, if one was set
        3. Create the remote subscription
        4. Save the local Subscription

        Nothing is saved locally if any of steps 1-3 fails.

        Args:
            token: Optional card token to pay with

        Returns:
            ServiceResult with the Subscription, or VALIDATION_ERROR /
            NO_STRIPE_ID / REMOTE_REJECTED / REMOTE_UNAVAILABLE failure

        Raises:
            InconsistentStateError: A promoted card could not be read back
        """
        validation = self.validate_required(name=self.name, plan=self.plan)
        if validation is not None:
            return validation
        quantity = self._quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            return ServiceResult.failure(
                "Quantity must be a positive integer",
                error_code="VALIDATION_ERROR",
                errors={"quantity": ["Ensure this value is an integer greater than or equal to 1."]},
            )

        try:
            if token is not None and not self.owner.stripe_id:
                customer_id = self.store.remote_customer_id(self.owner, token)
            else:
                customer_id = self.store.remote_customer_id(self.owner)
                if token is not None:
                    card_id = self.store.attach_card(self.owner, token)
                    self.coordinator.promote_card(self.owner, card_id)

            if self._card_id:
                self.coordinator.promote_card(self.owner, self._card_id)

            remote = self.processor.create_subscription(self.build_params(customer_id))
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "create subscription")

        subscription = Subscription.objects.create(
            customer=self.owner,
            name=self.name,
            stripe_id=remote.id,
            stripe_plan=self.plan,
            quantity=self._quantity,
            trial_ends_at=self.trial_ends_at,
            ends_at=None,
        )

        logger.info(
            "Subscription created",
            extra={
                "subscription_id": str(subscription.id),
                "stripe_subscription_id": remote.id,
                "stripe_id": customer_id,
                "plan": self.plan,
                "used_card": self._card_id,
            },
        )
        return ServiceResult.success(subscription)
