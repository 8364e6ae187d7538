"""
Wallet domain models.

- Billable: Abstract mixin with Stripe mirror fields and payment methods
- Customer: Local customer record mirroring a Stripe Customer
- Subscription: Subscriptions accepted by Stripe
"""

from wallet.models.customer import Billable, Customer, default_currency
from wallet.models.subscription import Subscription

__all__ = [
    "Billable",
    "Customer",
    "Subscription",
    "default_currency",
]
