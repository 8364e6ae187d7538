"""
Card storage on the remote customer.

PaymentMethodStore creates the Stripe customer lazily, attaches, lists,
fetches and removes cards. A local customer gets at most one remote
customer: creation is check-then-create on the local stripe_id, which is
saved as soon as Stripe returns it.

Usage:
    from wallet.services import PaymentMethodStore

    store = PaymentMethodStore()
    result = store.attach(customer, "tok_visa")
    if result.success:
        card_id = result.data
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.services import ServiceResult
from wallet.exceptions import InconsistentStateError, NoStripeIdError, WalletError
from wallet.services.base import EXPECTED_ERRORS, WalletService
from wallet.services.default_method import DefaultMethodCoordinator

if TYPE_CHECKING:
    from wallet.models import Billable
    from wallet.protocols import PaymentProcessor
    from wallet.types import CardDetails, CustomerResult


logger = logging.getLogger(__name__)


class PaymentMethodStore(WalletService):
    """Create, list, fetch and delete cards on the remote customer."""

    def __init__(
        self,
        processor: PaymentProcessor | None = None,
        coordinator: DefaultMethodCoordinator | None = None,
    ):
        super().__init__(processor)
        self.coordinator = coordinator or DefaultMethodCoordinator(self.processor)

    # =========================================================================
    # Remote Customer
    # =========================================================================

    def _create_remote_customer(
        self,
        customer: Billable,
        token: str | None = None,
    ) -> CustomerResult:
        remote = self.processor.create_customer(
            email=getattr(customer, "email", None),
            source=token,
            metadata={"customer_id": str(customer.pk)},
        )
        customer.set_stripe_id(remote.id)

        logger.info(
            "Remote customer created",
            extra={
                "customer_id": str(customer.pk),
                "stripe_id": remote.id,
                "seeded": token is not None,
            },
        )

        if token is not None:
            # Stripe makes the seed card the default; mirror it from the response.
            default_card = remote.default_card
            if default_card is None:
                remote = self.processor.retrieve_customer(remote.id)
                default_card = remote.default_card
            if default_card is None:
                raise InconsistentStateError(
                    f"Customer {remote.id} was seeded with a card but has no default card",
                    details={"stripe_id": remote.id},
                )
            customer.mirror_default_card(default_card)

        return remote

    def remote_customer_id(self, customer: Billable, token: str | None = None) -> str:
        """
        Return the customer's Stripe ID, creating the remote customer if needed.

        Args:
            customer: Local customer
            token: Optional card token used as the first card when creating

        Raises:
            RemoteRejectedError: Seed token declined
            RemoteUnavailableError: Stripe unreachable
        """
        if customer.stripe_id:
            return customer.stripe_id
        return self._create_remote_customer(customer, token).id

    def ensure_remote_customer(
        self,
        customer: Billable,
        initial_token: str | None = None,
    ) -> ServiceResult[str]:
        """
        Idempotently create the remote customer.

        An existing stripe_id is returned without any remote call.

        Returns:
            ServiceResult with the Stripe Customer ID
        """
        try:
            return ServiceResult.success(self.remote_customer_id(customer, initial_token))
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "create remote customer")

    # =========================================================================
    # Cards
    # =========================================================================

    def _create_card(self, customer: Billable, token: str) -> str:
        card = self.processor.create_card(customer.stripe_id, token)
        logger.info(
            "Card attached",
            extra={"stripe_id": customer.stripe_id, "card_id": card.id},
        )
        return card.id

    def _mirror_new_default(self, customer: Billable) -> None:
        # Stripe makes a card the default when the customer had none.
        if customer.card_last_four is None:
            self.coordinator.refresh_mirror(customer)

    def _mirror_refresh_failed(
        self,
        customer: Billable,
        card_id: str,
        action: str,
        error: WalletError,
    ) -> ServiceResult:
        logger.error(
            f"Card {action} but default card mirror could not be refreshed",
            extra={"stripe_id": customer.stripe_id, "card_id": card_id},
        )
        return ServiceResult.failure(
            f"Card {card_id} was {action} but the default card could not "
            f"be refreshed: {error.message}",
            error_code=error.error_code,
        )

    def attach_card(self, customer: Billable, token: str) -> str:
        """
        Attach a card, raising on failure.

        A customer without a stripe_id is created with the token as its
        first card (one remote call instead of create + attach); that card
        becomes the default. Otherwise the card is attached and the default
        is left alone, unless the remote customer had no default card, in
        which case Stripe promotes the new card and the mirror follows.

        Returns:
            Card ID (card_xxx)
        """
        if not customer.stripe_id:
            remote = self._create_remote_customer(customer, token)
            return remote.default_card.id

        card_id = self._create_card(customer, token)
        self._mirror_new_default(customer)
        return card_id

    def attach(self, customer: Billable, token: str) -> ServiceResult[str]:
        """
        Attach the card behind a token to the customer.

        Returns:
            ServiceResult with the new card ID, or REMOTE_REJECTED /
            REMOTE_UNAVAILABLE failure
        """
        try:
            if not customer.stripe_id:
                return ServiceResult.success(self.attach_card(customer, token))
            card_id = self._create_card(customer, token)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "attach card")

        try:
            self._mirror_new_default(customer)
        except EXPECTED_ERRORS as e:
            return self._mirror_refresh_failed(customer, card_id, "attached", e)

        return ServiceResult.success(card_id)

    def list_all(self, customer: Billable) -> ServiceResult[list[CardDetails]]:
        """
        List the customer's cards in Stripe's order.

        Returns:
            ServiceResult with a (possibly empty) list; empty without a remote call
            when the customer has no stripe_id
        """
        if not customer.stripe_id:
            return ServiceResult.success([])

        try:
            return ServiceResult.success(self.processor.list_cards(customer.stripe_id))
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "list cards")

    def fetch(self, customer: Billable, card_id: str) -> ServiceResult[CardDetails | None]:
        """
        Fetch one of the customer's cards.

        Returns:
            ServiceResult with CardDetails, or None when the customer has no
            stripe_id or the card is not one of theirs
        """
        if not customer.stripe_id:
            return ServiceResult.success(None)

        try:
            remote = self.processor.retrieve_customer(customer.stripe_id)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "fetch card")
        return ServiceResult.success(remote.find_card(card_id))

    def remove(self, customer: Billable, card_id: str) -> ServiceResult[str]:
        """
        Delete a card from the remote customer.

        Stripe picks a new default when the default card is deleted, so
        the local mirror is refreshed afterwards.

        Returns:
            ServiceResult with the removed card ID, or NO_STRIPE_ID (no
            remote call made) / REMOTE_REJECTED (e.g. "No such source: x") /
            REMOTE_UNAVAILABLE failure
        """
        try:
            if not customer.stripe_id:
                raise NoStripeIdError()
            removed_id = self.processor.delete_card(customer.stripe_id, card_id)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "remove card")

        logger.info(
            "Card removed",
            extra={"stripe_id": customer.stripe_id, "card_id": removed_id},
        )

        try:
            self.coordinator.refresh_mirror(customer)
        except EXPECTED_ERRORS as e:
            return self._mirror_refresh_failed(customer, removed_id, "removed", e)

        return ServiceResult.success(removed_id)
