"""
Credential sources for the Stripe adapter.

Two sources are provided: one reads the secret key from Django settings at
call time, the other holds a key handed over by the caller (useful when one
process talks to several Stripe accounts). Anything implementing
wallet.protocols.CredentialsProvider can be used instead.

Usage:
    from wallet.adapters import StaticCredentials, StripeAdapter

    adapter = StripeAdapter(credentials=StaticCredentials("sk_test_xxx"))
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class SettingsCredentials:
    """Read STRIPE_SECRET_KEY from Django settings on every request."""

    setting_name = "STRIPE_SECRET_KEY"

    def get_secret_key(self) -> str:
        key = getattr(settings, self.setting_name, "")
        if not key:
            raise ImproperlyConfigured(f"{self.setting_name} is not set")
        return key


class StaticCredentials:
    """Hold a secret key supplied by the caller."""

    def __init__(self, secret_key: str):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key

    def get_secret_key(self) -> str:
        return self._secret_key

    def __repr__(self) -> str:
        return f"StaticCredentials(secret_key='...{self._secret_key[-4:]}')"
