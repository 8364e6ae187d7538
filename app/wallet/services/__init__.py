"""
Wallet services.

- TokenExchange: Raw card fields to single-use tokens
- PaymentMethodStore: Lazy remote customer creation and card storage
- DefaultMethodCoordinator: Default card kept in lock-step with the local mirror
- ChargeExecutor: One-off charges
- SubscriptionBuilder: Fluent subscription creation
- PaymentProfile: Caller-facing facade for one customer

Usage:
    from wallet.services import PaymentProfile

    result = PaymentProfile(customer).get_default_payment_method()
"""

from wallet.services.base import EXPECTED_ERRORS, WalletService
from wallet.services.charges import ChargeExecutor
from wallet.services.default_method import DefaultMethodCoordinator
from wallet.services.payment_methods import PaymentMethodStore
from wallet.services.profile import PaymentProfile
from wallet.services.subscriptions import SubscriptionBuilder
from wallet.services.tokens import TokenExchange

__all__ = [
    "EXPECTED_ERRORS",
    "ChargeExecutor",
    "DefaultMethodCoordinator",
    "PaymentMethodStore",
    "PaymentProfile",
    "SubscriptionBuilder",
    "TokenExchange",
    "WalletService",
]
