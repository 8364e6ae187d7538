"""
Caller-facing facade over the wallet services.

PaymentProfile binds one customer to a single processor and exposes the
whole wallet API. Every fallible method returns a ServiceResult; only
InconsistentStateError (and database errors) are raised.

Usage:
    from wallet.services import PaymentProfile

    profile = PaymentProfile(customer)

    result = profile.add_payment_method(
        {"card_number": "4242424242424242", "expiry_month": 1,
         "expiry_year": 2030, "cvc": "123"},
        set_as_default=True,
    )
    if not result.success:
        return result.to_response()

    profile.charge(1500, card_id=result.data)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from core.services import ServiceResult
from wallet.services.charges import ChargeExecutor
from wallet.services.default_method import DefaultMethodCoordinator
from wallet.services.payment_methods import PaymentMethodStore
from wallet.services.subscriptions import SubscriptionBuilder
from wallet.services.tokens import TokenExchange

if TYPE_CHECKING:
    from typing import Any

    from wallet.models import Billable
    from wallet.protocols import PaymentProcessor
    from wallet.types import CardDetails, ChargeResult


class PaymentProfile:
    """
    Payment profile of a single customer.

    Not safe to share across threads: the customer instance is mutated in
    place. Concurrent promotions on the same customer are not serialized.
    """

    def __init__(self, customer: Billable, processor: PaymentProcessor | None = None):
        self.customer = customer
        self.tokens = TokenExchange(processor)
        self.processor = self.tokens.processor
        self.coordinator = DefaultMethodCoordinator(self.processor)
        self.store = PaymentMethodStore(self.processor, self.coordinator)
        self.charges = ChargeExecutor(self.processor)

    def ensure_remote_customer(self, initial_token: str | None = None) -> ServiceResult[str]:
        return self.store.ensure_remote_customer(self.customer, initial_token)

    def create_token(self, params: Mapping[str, Any]) -> ServiceResult[str]:
        return self.tokens.create_token(dict(params))

    def add_payment_method(
        self,
        source: str | Mapping[str, Any],
        set_as_default: bool = False,
    ) -> ServiceResult[str]:
        """
        Add a card from a token or from raw card fields.

        The first card of a new customer becomes the default. Later cards
        become the default only when set_as_default is true.

        Args:
            source: Token ID, or a mapping with card_number, expiry_month,
                expiry_year and cvc
            set_as_default: Promote the new card to default

        Returns:
            ServiceResult with the new card ID
        """
        if isinstance(source, Mapping):
            token_result = self.create_token(source)
            if not token_result.success:
                return token_result
            token = token_result.data
        else:
            token = source

        is_first_card = not self.customer.stripe_id
        attached = self.store.attach(self.customer, token)
        if not attached.success or is_first_card or not set_as_default:
            return attached

        promoted = self.coordinator.promote(self.customer, attached.data)
        if not promoted.success:
            return promoted
        return attached

    def remove_payment_method(self, card_id: str) -> ServiceResult[str]:
        return self.store.remove(self.customer, card_id)

    def list_payment_methods(self) -> ServiceResult[list[CardDetails]]:
        return self.store.list_all(self.customer)

    def get_payment_method(self, card_id: str) -> ServiceResult[CardDetails | None]:
        return self.store.fetch(self.customer, card_id)

    def get_default_payment_method(self) -> ServiceResult[CardDetails | None]:
        return self.coordinator.current_default(self.customer)

    def promote_default_payment_method(self, card_id: str) -> ServiceResult[Billable]:
        return self.coordinator.promote(self.customer, card_id)

    def charge(
        self,
        amount: int,
        card_id: str | None = None,
        currency: str | None = None,
        **options: Any,
    ) -> ServiceResult[ChargeResult]:
        return self.charges.charge(
            self.customer,
            amount,
            card_id=card_id,
            currency=currency,
            **options,
        )

    def new_subscription(self, name: str, plan: str) -> SubscriptionBuilder:
        """
        Begin building a subscription.

        See SubscriptionBuilder.use_card() for the permanent default card
        promotion it performs.
        """
        return SubscriptionBuilder(
            self.customer,
            name,
            plan,
            processor=self.processor,
            store=self.store,
            coordinator=self.coordinator,
        )
