"""
One-off charges against a customer's cards.

An explicit card ID is always charged as given. Without one, the charge
goes to the remote customer and Stripe uses its default card. With
neither, the charge is refused locally before any remote call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.services import ServiceResult
from wallet.exceptions import PaymentValidationError
from wallet.services.base import EXPECTED_ERRORS, WalletService
from wallet.types import CreateChargeParams

if TYPE_CHECKING:
    from typing import Any

    from wallet.models import Billable
    from wallet.types import ChargeResult


logger = logging.getLogger(__name__)


class ChargeExecutor(WalletService):
    """Performs one-off charges."""

    def build_params(
        self,
        customer: Billable,
        amount: int,
        card_id: str | None = None,
        currency: str | None = None,
        **options: Any,
    ) -> CreateChargeParams:
        """
        Resolve the charge parameters, raising on invalid input.

        Raises:
            PaymentValidationError: Non-positive amount, or no card and no
                remote customer to charge
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise PaymentValidationError(
                "Charge amount must be a positive integer.",
                details={"amount": amount},
            )
        if not card_id and not customer.stripe_id:
            raise PaymentValidationError("No payment source provided.")

        return CreateChargeParams(
            amount_cents=amount,
            currency=currency or customer.preferred_currency(),
            customer_id=customer.stripe_id,
            source=card_id,
            extra=options,
        )

    def charge(
        self,
        customer: Billable,
        amount: int,
        card_id: str | None = None,
        currency: str | None = None,
        **options: Any,
    ) -> ServiceResult[ChargeResult]:
        """
        Charge the customer.

        Args:
            customer: Local customer
            amount: Amount in the smallest currency unit
            card_id: Card to charge; the remote default card is used when omitted
            currency: ISO 4217 code (default: customer's preferred currency)
            **options: Passed through to the processor (description, metadata, ...)

        Returns:
            ServiceResult with the ChargeResult receipt, or VALIDATION_ERROR /
            REMOTE_REJECTED / REMOTE_UNAVAILABLE failure
        """
        try:
            params = self.build_params(customer, amount, card_id, currency, **options)
            receipt = self.processor.create_charge(params)
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "charge")

        logger.info(
            "Charge created",
            extra={
                "charge_id": receipt.id,
                "stripe_id": customer.stripe_id,
                "amount_cents": receipt.amount_cents,
                "currency": receipt.currency,
                "explicit_card": card_id is not None,
            },
        )
        return ServiceResult.success(receipt)
