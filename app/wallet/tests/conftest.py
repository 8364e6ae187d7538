"""
Pytest fixtures for wallet tests.

Services are wired to an in-memory FakeStripeProcessor; nothing here talks
to Stripe.

Usage:
    def test_first_card_is_default(profile, customer):
        profile.add_payment_method("tok_visa")
        assert customer.card_last_four == "4242"
"""

from unittest.mock import patch

import pytest
from django.utils import timezone

from wallet.services import PaymentProfile
from wallet.tests.factories import CustomerFactory
from wallet.tests.fakes import FakeStripeProcessor


# =============================================================================
# Processor Fixtures
# =============================================================================


@pytest.fixture
def processor():
    """In-memory Stripe stand-in with per-operation call counters."""
    return FakeStripeProcessor()


@pytest.fixture
def default_processor(processor):
    """Make services built without an explicit processor use the fake."""
    with patch("wallet.services.base.StripeAdapter", return_value=processor):
        yield processor


# =============================================================================
# Customer Fixtures
# =============================================================================


@pytest.fixture
def customer(db):
    """Customer with no remote Stripe customer yet."""
    return CustomerFactory(email="jane@example.com")


@pytest.fixture
def profile(customer, processor):
    """Payment profile for ``customer`` backed by the fake processor."""
    return PaymentProfile(customer, processor=processor)


@pytest.fixture
def carded_customer(customer, profile):
    """Customer with a remote customer and one Visa card (the default)."""
    result = profile.add_payment_method("tok_visa")
    assert result.success
    return customer


@pytest.fixture
def two_card_customer(carded_customer, profile):
    """Customer with a default Visa and a second, non-default MasterCard."""
    result = profile.add_payment_method("tok_mastercard")
    assert result.success
    return carded_customer


@pytest.fixture
def raw_card():
    """Raw card fields accepted by the token endpoint."""
    return {
        "card_number": "4242424242424242",
        "expiry_month": 5,
        "expiry_year": timezone.now().year + 5,
        "cvc": "123",
    }
