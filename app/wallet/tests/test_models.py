"""
Tests for wallet models.

Tests cover:
- Billable local state (stripe_id, default card mirror, currency)
- Subscription helpers and constraints
- Billable caller-facing methods
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.test import override_settings
from django.utils import timezone

from wallet.models import Customer, Subscription
from wallet.tests.factories import CustomerFactory, SubscriptionFactory
from wallet.types import CardDetails


# =============================================================================
# Billable Tests
# =============================================================================


@pytest.mark.django_db
class TestBillableState:
    """Tests for Billable's local fields."""

    def test_new_customer_has_no_remote_state(self):
        """Should start without stripe_id or card mirror."""
        customer = CustomerFactory()

        assert customer.has_stripe_id is False
        assert customer.stripe_id is None
        assert customer.card_brand is None
        assert customer.card_last_four is None

    def test_set_stripe_id_persists(self):
        """Should save the stripe_id immediately."""
        customer = CustomerFactory()

        customer.set_stripe_id("cus_123")

        customer.refresh_from_db()
        assert customer.stripe_id == "cus_123"
        assert customer.has_stripe_id is True

    def test_set_stripe_id_on_unsaved_customer(self):
        """Should insert the row when the customer was never saved."""
        customer = Customer(email="new@example.com")

        customer.set_stripe_id("cus_456")

        assert Customer.objects.get(pk=customer.pk).stripe_id == "cus_456"

    def test_mirror_default_card(self):
        """Should write brand and last four together."""
        customer = CustomerFactory()

        customer.mirror_default_card(CardDetails(id="card_1", brand="Visa", last4="4242"))

        customer.refresh_from_db()
        assert (customer.card_brand, customer.card_last_four) == ("Visa", "4242")

    def test_mirror_cleared(self):
        """Should clear both fields together."""
        customer = CustomerFactory(with_card=True)

        customer.mirror_default_card(None)

        customer.refresh_from_db()
        assert (customer.card_brand, customer.card_last_four) == (None, None)

    def test_mirror_touches_updated_at(self):
        """Should bump updated_at along with the mirror."""
        customer = CustomerFactory()
        before = customer.updated_at

        customer.mirror_default_card(CardDetails(id="card_1", brand="Visa", last4="4242"))

        customer.refresh_from_db()
        assert customer.updated_at >= before

    def test_stripe_id_unique(self):
        """Should not allow two customers to share a remote customer."""
        CustomerFactory(stripe_id="cus_dup")

        with pytest.raises(IntegrityError), transaction.atomic():
            CustomerFactory(stripe_id="cus_dup")

    def test_preferred_currency(self):
        """Should use the customer's currency."""
        assert CustomerFactory(currency="eur").preferred_currency() == "eur"

    @override_settings(WALLET_CURRENCY="cad")
    def test_default_currency_from_settings(self):
        """Should default new customers to WALLET_CURRENCY."""
        customer = Customer.objects.create(email="ca@example.com")

        assert customer.currency == "cad"

    def test_str(self):
        customer = CustomerFactory(email="jane@example.com", stripe_id="cus_1")

        assert str(customer) == f"Customer({customer.id}, jane@example.com, stripe_id=cus_1)"


# =============================================================================
# Subscription Tests
# =============================================================================


@pytest.mark.django_db
class TestSubscription:
    """Tests for Subscription helpers."""

    def test_plain_subscription(self):
        """Should be active, not on trial, not cancelled."""
        subscription = SubscriptionFactory()

        assert subscription.on_trial() is False
        assert subscription.is_cancelled is False
        assert subscription.on_grace_period() is False
        assert subscription.is_active is True

    def test_on_trial(self):
        subscription = SubscriptionFactory(trialing=True)

        assert subscription.on_trial() is True
        assert subscription.is_active is True

    def test_trial_over(self):
        subscription = SubscriptionFactory(trial_ends_at=timezone.now() - timedelta(days=1))

        assert subscription.on_trial() is False

    def test_grace_period(self):
        """Cancelled but paid period still running."""
        subscription = SubscriptionFactory(grace_period=True)

        assert subscription.is_cancelled is True
        assert subscription.on_grace_period() is True
        assert subscription.is_active is True

    def test_ended(self):
        subscription = SubscriptionFactory(ended=True)

        assert subscription.is_cancelled is True
        assert subscription.on_grace_period() is False
        assert subscription.is_active is False

    def test_quantity_must_be_positive(self):
        """Should reject a zero quantity at the database level."""
        with pytest.raises(IntegrityError), transaction.atomic():
            SubscriptionFactory(quantity=0)

    def test_related_name(self):
        subscription = SubscriptionFactory()

        assert list(subscription.customer.subscriptions.all()) == [subscription]

    def test_customer_protected(self):
        """Should not delete a customer that still has subscriptions."""
        from django.db.models import ProtectedError

        subscription = SubscriptionFactory()

        with pytest.raises(ProtectedError):
            subscription.customer.delete()
        assert Subscription.objects.count() == 1


# =============================================================================
# Billable API Tests
# =============================================================================


class TestBillableApi:
    """Tests for the payment methods on the model itself."""

    def test_add_and_list(self, customer, default_processor):
        """Should go through the default processor."""
        result = customer.add_payment_method("tok_visa")

        assert result.success is True
        assert customer.card_last_four == "4242"
        assert [card.id for card in customer.list_payment_methods().data] == [result.data]
        assert default_processor.calls["create_customer"] == 1

    def test_get_stripe_id(self, customer, default_processor):
        result = customer.get_stripe_id()

        assert result.data == customer.stripe_id
        assert customer.get_stripe_id().data == result.data
        assert default_processor.calls["create_customer"] == 1

    def test_promote_and_get_default(self, customer, default_processor):
        customer.add_payment_method("tok_visa")
        mastercard_id = customer.add_payment_method("tok_mastercard").data

        customer.promote_default_payment_method(mastercard_id)

        assert customer.get_default_payment_method().data.id == mastercard_id
        assert customer.get_payment_method(mastercard_id).data.brand == "MasterCard"

    def test_remove(self, customer, default_processor):
        card_id = customer.add_payment_method("tok_visa").data

        assert customer.remove_payment_method(card_id).success is True
        assert customer.card_brand is None

    def test_charge_and_subscribe(self, customer, default_processor):
        customer.add_payment_method("tok_visa")

        charge = customer.charge(1500)
        subscription = customer.new_subscription("main", "price_monthly").create()

        assert charge.data.amount_cents == 1500
        assert subscription.data.customer == customer

    def test_create_token(self, customer, default_processor, raw_card):
        assert customer.create_token(raw_card).data.startswith("tok_")
