"""
Wallet app: stored cards, default card and subscriptions on Stripe.

This app handles:
- Lazy Stripe customer creation for a local Customer
- Card tokenization, attachment, listing and removal
- Keeping the default card mirrored on the local record
- One-off charges
- Subscription creation with an optional card override

Usage:
    from wallet.models import Customer

    customer = Customer.objects.get(email="jane@example.com")
    result = customer.add_payment_method("tok_visa")
    customer.new_subscription("main", "price_monthly").trial_days(14).create()
"""
