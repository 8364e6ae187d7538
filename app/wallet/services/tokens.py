"""
Token exchange: raw card fields in, single-use token out.

Nothing is validated locally. The processor decides whether the number,
expiry and CVC are acceptable and its message is returned verbatim.
Tokens are never cached; every call may mint a new one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.services import ServiceResult
from wallet.services.base import EXPECTED_ERRORS, WalletService
from wallet.types import CardInput

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


class TokenExchange(WalletService):
    """Converts raw card data into processor tokens."""

    def exchange(self, card: CardInput | dict[str, Any]) -> str:
        """
        Create a token, raising on failure.

        Args:
            card: CardInput or a mapping with card_number, expiry_month,
                expiry_year and cvc

        Returns:
            Token ID (tok_xxx)

        Raises:
            RemoteRejectedError: Processor refused the card fields
            RemoteUnavailableError: Processor unreachable
        """
        if not isinstance(card, CardInput):
            card = CardInput.from_mapping(card)

        token = self.processor.create_token(card)
        logger.info("Card tokenized", extra={"card_last4": card.card_number[-4:]})
        return token

    def create_token(self, card: CardInput | dict[str, Any]) -> ServiceResult[str]:
        """
        Create a token for raw card fields.

        Returns:
            ServiceResult with the token ID, or REMOTE_REJECTED /
            REMOTE_UNAVAILABLE failure
        """
        try:
            return ServiceResult.success(self.exchange(card))
        except EXPECTED_ERRORS as e:
            return self.handle_exception(e, "create token")
