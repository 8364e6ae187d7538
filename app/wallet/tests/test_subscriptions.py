"""
Tests for SubscriptionBuilder.

Tests cover:
- Setter chaining and payload construction
- Trial handling (trial_days, trial_until, skip_trial)
- use_card() permanently promoting the card to default
- Paying with a token for new and existing customers
- No local Subscription when any remote step fails
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from wallet.exceptions import InconsistentStateError
from wallet.models import Subscription
from wallet.services import SubscriptionBuilder
from wallet.tests.fakes import DECLINED


def card_ids(processor, customer):
    return [card.id for card in processor.customers[customer.stripe_id].cards]


class TestBuilderSetters:
    """Tests for the fluent setters."""

    def test_setters_return_builder(self, profile):
        """Every setter should return the builder itself."""
        builder = profile.new_subscription("main", "price_monthly")

        assert builder.quantity(2) is builder
        assert builder.trial_days(7) is builder
        assert builder.trial_until(timezone.now()) is builder
        assert builder.skip_trial() is builder
        assert builder.with_coupon("WELCOME") is builder
        assert builder.with_metadata({"source": "test"}) is builder
        assert builder.use_card("card_123") is builder

    def test_shares_profile_collaborators(self, profile):
        """Should use the profile's processor, store and coordinator."""
        builder = profile.new_subscription("main", "price_monthly")

        assert isinstance(builder, SubscriptionBuilder)
        assert builder.processor is profile.processor
        assert builder.store is profile.store
        assert builder.coordinator is profile.coordinator

    def test_build_params(self, profile):
        """Should carry every option into the remote payload."""
        params = (
            profile.new_subscription("main", "price_yearly")
            .quantity(3)
            .with_coupon("WELCOME")
            .with_metadata({"team": "blue"})
            .build_params("cus_123")
        )

        assert params.customer_id == "cus_123"
        assert params.plan == "price_yearly"
        assert params.quantity == 3
        assert params.coupon == "WELCOME"
        assert params.metadata == {"team": "blue"}
        assert params.trial_end is None


class TestCreate:
    """Tests for SubscriptionBuilder.create."""

    def test_creates_local_record_after_remote(self, carded_customer, profile, processor):
        """Should save a Subscription mirroring the remote one."""
        result = profile.new_subscription("main", "price_monthly").create()

        assert result.success is True
        subscription = result.data
        assert subscription.customer == carded_customer
        assert subscription.name == "main"
        assert subscription.stripe_plan == "price_monthly"
        assert subscription.quantity == 1
        assert subscription.stripe_id.startswith("sub_")
        assert subscription.trial_ends_at is None
        assert subscription.ends_at is None
        assert carded_customer.subscriptions.count() == 1
        assert processor.calls["create_subscription"] == 1

    def test_trial_days(self, carded_customer, profile, processor):
        """Should start a trial and send its end as a timestamp."""
        before = timezone.now()

        subscription = profile.new_subscription("main", "price_monthly").trial_days(14).create().data

        assert subscription.trial_ends_at >= before + timedelta(days=14)
        assert subscription.on_trial() is True
        params, _ = processor.subscriptions[-1]
        assert params.trial_end == int(subscription.trial_ends_at.timestamp())

    def test_trial_until(self, carded_customer, profile):
        """Should use the given trial end."""
        trial_end = timezone.now() + timedelta(days=30)

        subscription = profile.new_subscription("main", "price_monthly").trial_until(trial_end).create().data

        assert subscription.trial_ends_at == trial_end

    def test_skip_trial(self, carded_customer, profile, processor):
        """Should store no trial and tell Stripe to bill now."""
        subscription = (
            profile.new_subscription("main", "price_monthly")
            .trial_days(7)
            .skip_trial()
            .create()
            .data
        )

        assert subscription.trial_ends_at is None
        assert subscription.on_trial() is False
        params, _ = processor.subscriptions[-1]
        assert params.trial_end == "now"

    def test_quantity(self, carded_customer, profile):
        """Should store the requested quantity."""
        subscription = profile.new_subscription("seats", "price_monthly").quantity(5).create().data

        assert subscription.quantity == 5

    def test_invalid_quantity(self, carded_customer, profile, processor):
        """Should refuse locally without calling Stripe."""
        processor.calls.clear()

        result = profile.new_subscription("main", "price_monthly").quantity(0).create()

        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"
        assert "quantity" in result.errors
        assert processor.total_calls == 0
        assert Subscription.objects.count() == 0

    @pytest.mark.parametrize("quantity", ["3", 2.5, None, True])
    def test_non_integer_quantity(self, carded_customer, profile, processor, quantity):
        """Should return VALIDATION_ERROR instead of raising TypeError."""
        processor.calls.clear()

        result = profile.new_subscription("main", "price_monthly").quantity(quantity).create()

        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"
        assert "quantity" in result.errors
        assert processor.total_calls == 0
        assert Subscription.objects.count() == 0

    def test_missing_plan(self, carded_customer, profile):
        """Should report the missing field."""
        result = profile.new_subscription("main", "").create()

        assert result.error_code == "VALIDATION_ERROR"
        assert result.errors == {"plan": ["This field is required."]}

    def test_remote_failure_saves_nothing(self, carded_customer, profile):
        """Should not write a local record when Stripe refuses."""
        result = profile.new_subscription("main", "price_missing").create()

        assert result.success is False
        assert result.error == "No such price: 'price_missing'"
        assert result.error_code == "REMOTE_REJECTED"
        assert Subscription.objects.count() == 0

    def test_customer_without_card(self, customer, profile, processor):
        """Should create the remote customer, then fail on the missing card."""
        result = profile.new_subscription("main", "price_monthly").create()

        assert result.success is False
        assert result.error_code == "REMOTE_REJECTED"
        assert customer.stripe_id is not None
        assert processor.calls["create_customer"] == 1
        assert Subscription.objects.count() == 0


class TestCreateWithCard:
    """Tests for paying with use_card() or a token."""

    def test_use_card_is_permanent_promotion(self, two_card_customer, profile, processor):
        """Should pay with the card and leave it as the default."""
        _, mastercard_id = card_ids(processor, two_card_customer)

        result = profile.new_subscription("main", "price_monthly").use_card(mastercard_id).create()

        assert result.success is True
        _, paying_card = processor.subscriptions[-1]
        assert paying_card == mastercard_id
        assert profile.get_default_payment_method().data.id == mastercard_id
        two_card_customer.refresh_from_db()
        assert two_card_customer.card_last_four == "4444"

    def test_use_unknown_card(self, carded_customer, profile, processor):
        """Should fail before creating anything remotely."""
        result = profile.new_subscription("main", "price_monthly").use_card("card_nope").create()

        assert result.success is False
        assert result.error == "No such source: card_nope"
        assert processor.calls["create_subscription"] == 0
        assert Subscription.objects.count() == 0

    def test_use_card_read_back_mismatch_raises(self, two_card_customer, profile, processor):
        """Should propagate InconsistentStateError and save nothing."""
        _, mastercard_id = card_ids(processor, two_card_customer)
        processor.stale_default_reads = True

        with pytest.raises(InconsistentStateError):
            profile.new_subscription("main", "price_monthly").use_card(mastercard_id).create()

        assert processor.calls["create_subscription"] == 0
        assert Subscription.objects.count() == 0

    def test_token_seeds_new_customer(self, customer, profile, processor):
        """Should create the remote customer with the token as default card."""
        result = profile.new_subscription("main", "price_monthly").create(token="tok_visa")

        assert result.success is True
        assert processor.calls["create_customer"] == 1
        assert processor.calls["create_card"] == 0
        assert customer.card_brand == "Visa"
        assert customer.card_last_four == "4242"

    def test_token_replaces_default_of_existing_customer(self, carded_customer, profile, processor):
        """Should attach the token's card and make it the default."""
        result = profile.new_subscription("main", "price_monthly").create(token="tok_mastercard")

        assert result.success is True
        _, paying_card = processor.subscriptions[-1]
        assert paying_card == card_ids(processor, carded_customer)[-1]
        assert carded_customer.card_last_four == "4444"

    def test_declined_token(self, customer, profile, processor):
        """Should fail without creating a remote customer or subscription."""
        result = profile.new_subscription("main", "price_monthly").create(token="tok_chargeDeclined")

        assert result.success is False
        assert result.error == DECLINED
        assert customer.stripe_id is None
        assert processor.calls["create_subscription"] == 0
        assert Subscription.objects.count() == 0
