"""
Shared base for wallet services.

Every wallet service talks to the remote processor through an injected
PaymentProcessor (StripeAdapter by default) and reports expected failures
as ServiceResult failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService
from wallet.adapters import StripeAdapter
from wallet.exceptions import (
    NoStripeIdError,
    PaymentValidationError,
    RemoteRejectedError,
    RemoteUnavailableError,
)

if TYPE_CHECKING:
    from wallet.protocols import PaymentProcessor


# Failures callers are expected to handle. InconsistentStateError is not
# listed; it always propagates.
EXPECTED_ERRORS = (
    PaymentValidationError,
    NoStripeIdError,
    RemoteRejectedError,
    RemoteUnavailableError,
)


class WalletService(BaseService):
    """
    Base class for services that call the payment processor.

    Dependency Injection:
        The processor can be injected for testing or to use another
        credential source.
    """

    def __init__(self, processor: PaymentProcessor | None = None):
        """
        Initialize the service with optional processor injection.

        Args:
            processor: Optional PaymentProcessor (default: StripeAdapter()).
        """
        self.processor = processor or StripeAdapter()
