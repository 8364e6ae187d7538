"""
Default card coordination between Stripe and the local record.

Stripe is the source of truth for which card is the default. The local
card_brand / card_last_four mirror is only ever written from a card read
back from Stripe after the write, never from the caller's input.

Concurrency:
    Two promotions for the same customer are not serialized. The last
    remote write wins and the mirror reflects whichever read-back ran last.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.services import ServiceResult
from wallet.exceptions import InconsistentStateError, NoStripeIdError
from wallet.services.base import EXPECTED_ERRORS, WalletService

if TYPE_CHECKING:
    from wallet.models import Billable
    from wallet.types import CardDetails


logger = logging.getLogger(__name__)


class DefaultMethodCoordinator(WalletService):
    """Reads and writes the default card on both sides in lock-step."""

    def promote_card(self, customer: Billable, card_id: str) -> CardDetails:
        """
        Make a card the customer's default, raising on failure.

        Steps:
        1. Fetch the remote customer
        2. Set its default source to card_id
        3. Find card_id in the updated customer's cards
        4. Mirror brand / last four onto the local record and save

        Args:
            customer: Local customer with a stripe_id
            card_id: Card to promote

        Returns:
            CardDetails of the new default card

        Raises:
            NoStripeIdError: Customer has no remote customer
            RemoteRejectedError: Stripe refused the update (including a card_id
                that does not belong to this customer, e.g. "No such source: x")
            RemoteUnavailableError: Stripe unreachable
            InconsistentStateError: Updated customer does not show card_id as default
        """
        if not customer.stripe_id:
            raise NoStripeIdError()

        current = self.processor.retrieve_customer(customer.stripe_id)
        updated = self.processor.update_default_source(current.id, card_id)

        card = updated.find_card(card_id)
        if card is None or updated.default_source != card_id:
            logger.error(
                "Default card read-back mismatch",
                extra={
                    "stripe_id": customer.stripe_id,
                    "card_id": card_id,
                    "default_source": updated.default_source,
                },
            )
            raise InconsistentStateError(
                f"Card {card_id} is not the default card of {customer.stripe_id} "
                "after update",
                details={
                    "stripe_id": customer.stripe_id,
                    "card_id": card_id,
                    "default_source": updated.default_source,
                },
            )

        customer.mirror_default_card(card)

        logger.info(
            "Default card promoted",
            extra={
                "stripe_id": customer.stripe_id,
                "card_id": card_id,
                "previous_default": current.default_source,
            },
        )
        return card

    def promote(self, customer: Billable, card_id: str) -> ServiceResult[Billable]:
        """
        Make a card the customer's default.

        A card_id that is not one of the customer's cards is refused by
        Stripe at the update and comes back as a REMOTE_REJECTED failure,
        not as InconsistentStateError.

        Returns:
            ServiceResult with the updated customer, or NO_STRIPE_ID /
            REMOTE_REJECTED / REMOTE_UNAVAILABLE failure

        Raises:
            InconsistentStateError: See promote_card()
        """
        try:
            self.promote_card(customer, card_id)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "promote default card")
        return ServiceResult.success(customer)

    def refresh_mirror(self, customer: Billable) -> CardDetails | None:
        """
        Re-read the remote default card and mirror it locally.

        Used after Stripe may have picked a new default on its own
        (e.g. the default card was deleted).
        """
        if not customer.stripe_id:
            return None

        default_card = self.processor.retrieve_customer(customer.stripe_id).default_card
        if (
            (default_card.brand if default_card else None) != customer.card_brand
            or (default_card.last4 if default_card else None) != customer.card_last_four
        ):
            customer.mirror_default_card(default_card)
        return default_card

    def current_default(self, customer: Billable) -> ServiceResult[CardDetails | None]:
        """
        Fetch the customer's default card from Stripe.

        Returns:
            ServiceResult with CardDetails, or None when the customer has
            no remote customer or no default card
        """
        if not customer.stripe_id:
            return ServiceResult.success(None)

        try:
            remote = self.processor.retrieve_customer(customer.stripe_id)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "fetch default card")
        return ServiceResult.success(remote.default_card)
