"""
Pytest fixtures for Stripe adapter tests.

This module provides fixtures for testing the Stripe adapter, including
mock Stripe API responses and error conditions.

Sections:
    - Mock Stripe Response Fixtures
    - Mock Stripe Error Fixtures
    - Mock Stripe Client Fixtures
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import patch

import pytest
import stripe

from wallet.adapters import StaticCredentials, StripeAdapter


# =============================================================================
# Mock Stripe Response Fixtures
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass
class MockStripeList:
    """Mock Stripe list response with data attribute."""

    items: list[MockStripeObject]
    has_more: bool = False

    @property
    def data(self) -> list[MockStripeObject]:
        return self.items


@pytest.fixture
def mock_card():
    """Create a mock Card response."""

    def _create(
        id: str = "card_test123",
        brand: str = "Visa",
        last4: str = "4242",
        exp_month: int = 12,
        exp_year: int = 2034,
        country: str = "US",
        customer: str = "cus_test123",
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "card",
                "brand": brand,
                "last4": last4,
                "exp_month": exp_month,
                "exp_year": exp_year,
                "country": country,
                "customer": customer,
            }
        )

    return _create


@pytest.fixture
def mock_customer(mock_card):
    """Create a mock Customer response with sources expanded."""

    def _create(
        id: str = "cus_test123",
        email: str | None = "jane@example.com",
        default_source: str | None = "card_test123",
        sources: list[MockStripeObject] | None = None,
    ) -> MockStripeObject:
        if sources is None:
            sources = [mock_card()] if default_source else []
        return MockStripeObject(
            {
                "id": id,
                "object": "customer",
                "email": email,
                "default_source": default_source,
                "sources": MockStripeList(items=sources),
                "metadata": {},
            }
        )

    return _create


@pytest.fixture
def mock_charge():
    """Create a mock Charge response."""

    def _create(
        id: str = "ch_test123",
        amount: int = 1500,
        currency: str = "usd",
        status: str = "succeeded",
        paid: bool = True,
        source: Any = "card_test123",
        customer: str | None = "cus_test123",
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "charge",
                "amount": amount,
                "currency": currency,
                "status": status,
                "paid": paid,
                "source": source,
                "customer": customer,
            }
        )

    return _create


@pytest.fixture
def mock_subscription():
    """Create a mock Subscription response."""

    def _create(
        id: str = "sub_test123",
        status: str = "active",
        customer: str = "cus_test123",
        trial_end: int | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "subscription",
                "status": status,
                "customer": customer,
                "trial_end": trial_end,
            }
        )

    return _create


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError."""

    def _create(
        message: str = "Your card was declined.",
        code: str = "card_declined",
        decline_code: str | None = "generic_decline",
    ) -> stripe.CardError:
        error = stripe.CardError(message=message, param=None, code=code)
        error.decline_code = decline_code
        return error

    return _create


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError."""

    def _create(
        message: str = "No such source: invalidId",
        param: str | None = "id",
        code: str = "resource_missing",
    ) -> stripe.InvalidRequestError:
        return stripe.InvalidRequestError(message=message, param=param, code=code)

    return _create


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(message="Too many requests hit the API too quickly.")


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(message="Could not connect to Stripe.")


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(message="Something went wrong on Stripe's end.")


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(message="Invalid API Key provided: sk_test_****")


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def mock_stripe_http_client():
    """Mock stripe.RequestsClient so no HTTP client is built."""
    with patch("stripe.RequestsClient") as mock, patch.object(stripe, "default_http_client", None):
        yield mock


@pytest.fixture
def mock_stripe_customer(mock_customer, mock_card):
    """Mock stripe.Customer API."""
    with patch("stripe.Customer") as mock:
        mock.create.return_value = mock_customer()
        mock.retrieve.return_value = mock_customer()
        mock.modify.return_value = mock_customer()
        mock.create_source.return_value = mock_card()
        mock.list_sources.return_value = MockStripeList(items=[mock_card()])
        mock.delete_source.return_value = MockStripeObject(
            {"id": "card_test123", "object": "card", "deleted": True}
        )
        yield mock


@pytest.fixture
def mock_stripe_token():
    """Mock stripe.Token API."""
    with patch("stripe.Token") as mock:
        mock.create.return_value = MockStripeObject({"id": "tok_test123", "object": "token"})
        yield mock


@pytest.fixture
def mock_stripe_charge(mock_charge):
    """Mock stripe.Charge API."""
    with patch("stripe.Charge") as mock:
        mock.create.return_value = mock_charge()
        yield mock


@pytest.fixture
def mock_stripe_subscription(mock_subscription):
    """Mock stripe.Subscription API."""
    with patch("stripe.Subscription") as mock:
        mock.create.return_value = mock_subscription()
        yield mock


@pytest.fixture
def adapter():
    """Adapter with a fixed key so settings are not consulted."""
    return StripeAdapter(credentials=StaticCredentials("sk_test_adapter"), timeout=5)
