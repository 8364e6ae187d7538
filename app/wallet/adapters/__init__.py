"""
Payment processor adapters.

All remote processor calls made by the wallet go through these adapters
to ensure consistent error handling, timeouts and observability.

Usage:
    from wallet.adapters import StripeAdapter, StaticCredentials

    adapter = StripeAdapter(credentials=StaticCredentials("sk_test_xxx"))
    customer = adapter.create_customer(email="jane@example.com")
"""

from wallet.adapters.credentials import SettingsCredentials, StaticCredentials
from wallet.adapters.stripe_adapter import (
    StripeAdapter,
    card_from_stripe,
    customer_from_stripe,
)

__all__ = [
    "SettingsCredentials",
    "StaticCredentials",
    "StripeAdapter",
    "card_from_stripe",
    "customer_from_stripe",
]
