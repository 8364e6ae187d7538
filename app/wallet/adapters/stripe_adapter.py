"""
Stripe API adapter for wallet operations.

This module provides the StripeAdapter class which implements
wallet.protocols.PaymentProcessor on top of the Stripe SDK. All Stripe
calls made by the wallet go through this adapter to ensure consistent
error handling, timeouts and observability.

Features:
- Configurable timeout on all API calls
- Automatic error translation to wallet exceptions
- Structured logging with timing metrics
- Injectable credentials (settings or a caller-held key)

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key (read by SettingsCredentials)
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from wallet.adapters import StripeAdapter

    adapter = StripeAdapter()
    customer = adapter.create_customer(email="jane@example.com", source="tok_visa")
    card = customer.default_card
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import stripe
from django.conf import settings

from wallet.adapters.credentials import SettingsCredentials
from wallet.exceptions import RemoteRejectedError, RemoteUnavailableError
from wallet.types import (
    CardDetails,
    CardInput,
    ChargeResult,
    CreateChargeParams,
    CreateSubscriptionParams,
    CustomerResult,
    SubscriptionResult,
)

if TYPE_CHECKING:
    from wallet.protocols import CredentialsProvider


# =============================================================================
# Response Converters
# =============================================================================


def _object_id(value: Any) -> str | None:
    """Return the ID of an expandable field, whether expanded or not."""
    if value is None or isinstance(value, str):
        return value
    return getattr(value, "id", None)


def _to_dict(obj: Any) -> dict[str, Any]:
    to_dict = getattr(obj, "to_dict", None)
    return to_dict() if callable(to_dict) else {}


def card_from_stripe(card: Any) -> CardDetails:
    """Build CardDetails from a Stripe Card object."""
    return CardDetails(
        id=card.id,
        brand=getattr(card, "brand", None),
        last4=getattr(card, "last4", None),
        exp_month=getattr(card, "exp_month", None),
        exp_year=getattr(card, "exp_year", None),
        country=getattr(card, "country", None),
        raw_response=_to_dict(card),
    )


def customer_from_stripe(customer: Any) -> CustomerResult:
    """Build CustomerResult from a Stripe Customer with sources expanded."""
    sources = getattr(customer, "sources", None)
    source_list = getattr(sources, "data", None) or []
    return CustomerResult(
        id=customer.id,
        email=getattr(customer, "email", None),
        default_source=_object_id(getattr(customer, "default_source", None)),
        cards=[
            card_from_stripe(source)
            for source in source_list
            if getattr(source, "object", "card") == "card"
        ],
        raw_response=_to_dict(customer),
    )


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    Holds no per-customer state; one instance can serve every request.
    The secret key is fetched from the credentials provider for each call
    and sent per request, so several adapters with different keys can
    coexist in one process.

    Usage:
        adapter = StripeAdapter()
        token = adapter.create_token(CardInput("4242424242424242", 1, 2030, "123"))
        card = adapter.create_card("cus_xxx", token)
    """

    def __init__(
        self,
        credentials: CredentialsProvider | None = None,
        timeout: int | None = None,
    ):
        """
        Initialize the adapter.

        Args:
            credentials: Source of the secret key (default: Django settings)
            timeout: Request timeout in seconds (default: STRIPE_API_TIMEOUT_SECONDS)
        """
        self.credentials = credentials or SettingsCredentials()
        self.timeout = timeout or getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        self.http_client = stripe.RequestsClient(timeout=self.timeout)

    # =========================================================================
    # Configuration
    # =========================================================================

    def _configure_stripe(self) -> str:
        """
        Install this adapter's HTTP client and return the API key to use.

        The SDK keeps one process-wide client, so the last adapter used
        decides the timeout of in-flight calls made through it.

        Raises:
            ImproperlyConfigured: No secret key configured. Raised before any
                request is made and not translated into a wallet error.
        """
        if stripe.default_http_client is not self.http_client:
            stripe.default_http_client = self.http_client
        return self.credentials.get_secret_key()

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def _log_completed(
        self,
        log_context: dict[str, Any],
        start_time: float,
        level: int = logging.INFO,
        **fields: Any,
    ) -> None:
        duration_ms = (time.time() - start_time) * 1000
        self.get_logger().log(
            level,
            "Stripe operation completed",
            extra={**log_context, **fields, "duration_ms": duration_ms},
        )

    # =========================================================================
    # Tokens
    # =========================================================================

    def create_token(self, card: CardInput) -> str:
        """
        Exchange raw card fields for a single-use token.

        The fields are forwarded verbatim; Stripe validates the number,
        expiry and CVC and its rejection message is passed through.

        Args:
            card: Raw card fields

        Returns:
            Token ID (tok_xxx)

        Raises:
            RemoteRejectedError: Card number, expiry or CVC refused
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "create_token",
            "card_last4": card.card_number[-4:],
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            token = stripe.Token.create(
                api_key=api_key,
                card={
                    "number": card.card_number,
                    "exp_month": card.expiry_month,
                    "exp_year": card.expiry_year,
                    "cvc": card.cvc,
                },
            )
            self._log_completed(log_context, start_time, token_id=token.id)
            return token.id

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    # =========================================================================
    # Customers
    # =========================================================================

    def create_customer(
        self,
        email: str | None = None,
        source: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> CustomerResult:
        """
        Create a Stripe Customer.

        When a source token is given Stripe attaches the card and marks it
        as the customer's default source.

        Args:
            email: Customer email
            source: Optional card token to seed the customer with
            metadata: Key-value pairs to attach to the customer

        Returns:
            CustomerResult with cards and default source

        Raises:
            RemoteRejectedError: Token declined or invalid
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "create_customer",
            "with_source": source is not None,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            create_params: dict[str, Any] = {"metadata": metadata or {}}
            if email:
                create_params["email"] = email
            if source:
                create_params["source"] = source

            customer = stripe.Customer.create(
                api_key=api_key,
                expand=["sources"],
                **create_params,
            )
            self._log_completed(log_context, start_time, customer_id=customer.id)
            return customer_from_stripe(customer)

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    def retrieve_customer(self, customer_id: str) -> CustomerResult:
        """
        Retrieve a Stripe Customer with its card sources.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)

        Returns:
            CustomerResult with cards and default source

        Raises:
            RemoteRejectedError: Customer not found
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "retrieve_customer",
            "customer_id": customer_id,
        }

        start_time = time.time()
        logger.debug("Starting Stripe operation", extra=log_context)

        try:
            customer = stripe.Customer.retrieve(
                customer_id,
                api_key=api_key,
                expand=["sources"],
            )
            result = customer_from_stripe(customer)
            self._log_completed(
                log_context,
                start_time,
                level=logging.DEBUG,
                card_count=len(result.cards),
            )
            return result

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    def update_default_source(self, customer_id: str, card_id: str) -> CustomerResult:
        """
        Set the customer's default source.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)
            card_id: Card to promote (card_xxx)

        Returns:
            Updated CustomerResult

        Raises:
            RemoteRejectedError: Card does not belong to the customer
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "update_default_source",
            "customer_id": customer_id,
            "card_id": card_id,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            customer = stripe.Customer.modify(
                customer_id,
                api_key=api_key,
                default_source=card_id,
                expand=["sources"],
            )
            result = customer_from_stripe(customer)
            self._log_completed(
                log_context,
                start_time,
                default_source=result.default_source,
            )
            return result

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    # =========================================================================
    # Cards
    # =========================================================================

    def create_card(self, customer_id: str, token: str) -> CardDetails:
        """
        Attach a card to an existing customer.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)
            token: Card token (tok_xxx)

        Returns:
            CardDetails for the new card

        Raises:
            RemoteRejectedError: Card declined, expired or token invalid
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "create_card",
            "customer_id": customer_id,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            card = stripe.Customer.create_source(
                customer_id,
                api_key=api_key,
                source=token,
            )
            self._log_completed(log_context, start_time, card_id=card.id)
            return card_from_stripe(card)

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    def list_cards(self, customer_id: str) -> list[CardDetails]:
        """
        List the cards attached to a customer.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)

        Returns:
            List of CardDetails in Stripe's order

        Raises:
            RemoteRejectedError: Customer not found
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "list_cards",
            "customer_id": customer_id,
        }

        start_time = time.time()
        logger.debug("Starting Stripe operation", extra=log_context)

        try:
            cards = stripe.Customer.list_sources(
                customer_id,
                api_key=api_key,
                object="card",
                limit=100,
            )
            result = [card_from_stripe(card) for card in cards.data]
            self._log_completed(
                log_context,
                start_time,
                level=logging.DEBUG,
                count=len(result),
            )
            return result

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    def delete_card(self, customer_id: str, card_id: str) -> str:
        """
        Detach a card from a customer.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)
            card_id: Card ID (card_xxx)

        Returns:
            ID of the deleted card

        Raises:
            RemoteRejectedError: No such source (e.g. "No such source: card_xxx")
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "delete_card",
            "customer_id": customer_id,
            "card_id": card_id,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            deleted = stripe.Customer.delete_source(
                customer_id,
                card_id,
                api_key=api_key,
            )
            self._log_completed(log_context, start_time)
            return deleted.id

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    # =========================================================================
    # Charges & Subscriptions
    # =========================================================================

    def create_charge(self, params: CreateChargeParams) -> ChargeResult:
        """
        Create a one-off charge.

        With only customer_id set Stripe charges the customer's default
        source. An explicit source is always charged as given.

        Args:
            params: Charge parameters

        Returns:
            ChargeResult receipt

        Raises:
            RemoteRejectedError: Card declined or insufficient funds
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "create_charge",
            "amount_cents": params.amount_cents,
            "currency": params.currency,
            "customer_id": params.customer_id,
            "source": params.source,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            charge_params: dict[str, Any] = {
                **params.extra,
                "amount": params.amount_cents,
                "currency": params.currency,
            }
            if params.customer_id:
                charge_params["customer"] = params.customer_id
            if params.source:
                charge_params["source"] = params.source

            charge = stripe.Charge.create(api_key=api_key, **charge_params)
            self._log_completed(
                log_context,
                start_time,
                charge_id=charge.id,
                status=charge.status,
            )

            return ChargeResult(
                id=charge.id,
                amount_cents=charge.amount,
                currency=charge.currency,
                status=charge.status,
                paid=bool(getattr(charge, "paid", False)),
                source_id=_object_id(getattr(charge, "source", None)),
                customer_id=_object_id(getattr(charge, "customer", None)),
                raw_response=_to_dict(charge),
            )

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    def create_subscription(self, params: CreateSubscriptionParams) -> SubscriptionResult:
        """
        Create a subscription for a customer.

        The customer's current default source pays the first invoice.

        Args:
            params: Subscription parameters

        Returns:
            SubscriptionResult

        Raises:
            RemoteRejectedError: Unknown plan or first payment declined
            RemoteUnavailableError: Stripe unreachable
        """
        api_key = self._configure_stripe()
        logger = self.get_logger()

        log_context = {
            "operation": "create_subscription",
            "customer_id": params.customer_id,
            "plan": params.plan,
            "quantity": params.quantity,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            subscription_params: dict[str, Any] = {
                "customer": params.customer_id,
                "items": [{"price": params.plan, "quantity": params.quantity}],
                "metadata": params.metadata,
            }
            if params.trial_end is not None:
                subscription_params["trial_end"] = params.trial_end
            if params.coupon:
                subscription_params["coupon"] = params.coupon

            subscription = stripe.Subscription.create(
                api_key=api_key,
                **subscription_params,
            )
            self._log_completed(
                log_context,
                start_time,
                subscription_id=subscription.id,
                status=subscription.status,
            )

            return SubscriptionResult(
                id=subscription.id,
                status=subscription.status,
                customer_id=_object_id(subscription.customer) or params.customer_id,
                plan=params.plan,
                quantity=params.quantity,
                trial_end=getattr(subscription, "trial_end", None),
                raw_response=_to_dict(subscription),
            )

        except Exception as e:
            self._handle_stripe_error(e, log_context, (time.time() - start_time) * 1000)
            raise

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to wallet exceptions.

        Processor refusals keep Stripe's human-readable message verbatim.
        Everything else, including responses we could not parse, becomes
        RemoteUnavailableError.

        Args:
            error: The exception raised during the call
            log_context: Logging context dict
            duration_ms: Operation duration for logging

        Raises:
            RemoteRejectedError: Card, request, authentication or permission error
            RemoteUnavailableError: Rate limit, connection, server or unknown error
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.CardError):
            decline_code = getattr(error, "decline_code", None)
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "stripe_code": error.code, "decline_code": decline_code},
            )
            raise RemoteRejectedError(
                error.user_message or str(error),
                stripe_code=error.code,
                decline_code=decline_code,
            ) from error

        elif isinstance(error, stripe.InvalidRequestError):
            logger.warning(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise RemoteRejectedError(
                error.user_message or str(error),
                stripe_code=error.code,
            ) from error

        elif isinstance(error, (stripe.AuthenticationError, stripe.PermissionError)):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise RemoteRejectedError(
                error.user_message or "Stripe authentication failed",
                stripe_code="authentication_error",
            ) from error

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise RemoteUnavailableError(
                "Stripe rate limit exceeded. Please retry.",
                details={"stripe_code": "rate_limit"},
            ) from error

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe",
                extra=log_context,
                exc_info=True,
            )
            raise RemoteUnavailableError(
                "Could not connect to Stripe. Please retry.",
                details={"stripe_code": "api_connection_error"},
            ) from error

        elif isinstance(error, stripe.StripeError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise RemoteUnavailableError(
                "Stripe service error. Please retry.",
                details={"stripe_code": "api_error"},
            ) from error

        else:
            logger.error(
                f"Unexpected response from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise RemoteUnavailableError(
                f"Malformed response from Stripe: {error}",
                details={"stripe_code": "malformed_response"},
            ) from error
