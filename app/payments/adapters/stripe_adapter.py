"""
Stripe API adapter for payment gateway operations.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions. All Stripe calls go through this adapter to
ensure consistent error handling, timeouts, currency conversion and
observability. It contains no business logic.

Features:
- One method per remote capability, returning typed result dataclasses
- Automatic error classification into GatewayError subclasses
- Major-unit to minor-unit currency conversion (the only place it happens)
- Structured logging with timing metrics
- Optional idempotency keys on create operations
- Lazy configuration: missing keys fail on the first call, not at startup

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_WEBHOOK_SECRET: Webhook signing secret
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- STRIPE_DEFAULT_CURRENCY: Currency used when callers pass none (default: 'usd')

Usage:
    from decimal import Decimal
    from payments.adapters import CreatePaymentIntentParams, StripeAdapter

    gateway = StripeAdapter()
    result = gateway.create_payment_intent(
        CreatePaymentIntentParams(
            amount=Decimal("12.50"),
            currency="usd",
            customer_id="cus_123",
        )
    )
    result.amount_cents  # 1250
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

import stripe
from django.conf import settings

from payments.exceptions import (
    GatewayAuthenticationError,
    GatewayCardDeclinedError,
    GatewayConfigurationError,
    GatewayInvalidRequestError,
    GatewayNetworkError,
    GatewayRateLimitError,
    GatewayUnknownError,
    PaymentValidationError,
    WebhookSignatureError,
)
from payments.state_machines import PaymentIntentStatus

if TYPE_CHECKING:
    from collections.abc import Callable


DEFAULT_CURRENCY = "usd"

CONNECTED_ACCOUNT_CAPABILITIES = ("card_payments", "transfers")


def default_currency() -> str:
    """Currency used when a caller does not specify one."""
    return getattr(settings, "STRIPE_DEFAULT_CURRENCY", DEFAULT_CURRENCY) or DEFAULT_CURRENCY


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """
    Convert a major-unit amount to Stripe's integer minor units.

    Multiplies by 100 and rounds half-up to the nearest integer.

    Example:
        to_minor_units(Decimal("12.50"))  # 1250
        to_minor_units(0.125)             # 13

    Raises:
        PaymentValidationError: amount is not a finite number
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise PaymentValidationError(
            "Amount must be a number",
            details={"amount": str(amount)},
        )
    if not value.is_finite():
        raise PaymentValidationError(
            "Amount must be a finite number",
            details={"amount": str(amount)},
        )
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_amount(amount: Any) -> None:
    if amount is None or to_minor_units(amount) <= 0:
        raise PaymentValidationError(
            "amount must be positive",
            details={"amount": str(amount)},
        )


def _require(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PaymentValidationError(
            f"{name} is required",
            details={"field": name},
        )


# =============================================================================
# Parameter Types
# =============================================================================


@dataclass
class CreateCustomerParams:
    """
    Parameters for creating a Stripe Customer.

    Attributes:
        email: Customer email (optional)
        phone: Customer phone (optional)
        name: Customer display name (optional)
        metadata: Key-value pairs to attach (e.g. local user_id)
        idempotency_key: Key for idempotent creation (optional)
    """

    email: str | None = None
    phone: str | None = None
    name: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None


@dataclass
class CreateConnectedAccountParams:
    """
    Parameters for creating a Stripe Connect account.

    Attributes:
        email: Account holder email
        kind: Stripe account type, 'express' or 'custom' (default: 'express')
        country: Two-letter country code (default: 'US')
        capabilities: Capabilities requested on creation
            (default: card_payments and transfers)
        metadata: Key-value pairs to attach
        idempotency_key: Key for idempotent creation (optional)
    """

    email: str | None = None
    kind: str = "express"
    country: str = "US"
    capabilities: tuple[str, ...] = CONNECTED_ACCOUNT_CAPABILITIES
    metadata: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in ("express", "custom", "standard"):
            raise PaymentValidationError(
                "kind must be one of express, custom, standard",
                details={"kind": self.kind},
            )


@dataclass
class CreateChargeParams:
    """
    Parameters for creating a Stripe Charge.

    Attributes:
        amount: Amount in major units (e.g. Decimal("10.00"))
        customer_id: Stripe Customer ID (optional)
        source: Card/source ID or token (optional)
        currency: ISO 4217 currency code (default: STRIPE_DEFAULT_CURRENCY)
        description: Charge description (optional)
        idempotency_key: Key for idempotent creation (optional)
    """

    amount: Decimal
    customer_id: str | None = None
    source: str | None = None
    currency: str | None = None
    description: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        validate_amount(self.amount)
        self.currency = (self.currency or default_currency()).lower()
        if not self.customer_id and not self.source:
            raise PaymentValidationError(
                "customer_id or source is required",
                details={"fields": ["customer_id", "source"]},
            )


@dataclass
class CreateTransferParams:
    """
    Parameters for creating a Stripe Transfer to a connected account.

    Attributes:
        amount: Amount in major units
        destination_account: Stripe Connect account ID (acct_xxx)
        currency: ISO 4217 currency code (default: STRIPE_DEFAULT_CURRENCY)
        description: Transfer description (optional)
        idempotency_key: Key for idempotent creation (optional)
    """

    amount: Decimal
    destination_account: str
    currency: str | None = None
    description: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        validate_amount(self.amount)
        _require(self.destination_account, "destination_account")
        self.currency = (self.currency or default_currency()).lower()


@dataclass
class CreatePaymentIntentParams:
    """
    Parameters for creating a Stripe PaymentIntent.

    Attributes:
        amount: Amount in major units
        currency: ISO 4217 currency code (default: STRIPE_DEFAULT_CURRENCY)
        customer_id: Stripe Customer ID (optional)
        payment_method_types: Allowed payment method types (optional,
            Stripe decides when omitted)
        payment_method: Payment method to attach (optional)
        setup_future_usage: Keep the payment method on the customer for
            reuse (default: 'on_session')
        metadata: Key-value pairs to attach
        idempotency_key: Key for idempotent creation (optional)
    """

    amount: Decimal
    currency: str | None = None
    customer_id: str | None = None
    payment_method_types: list[str] | None = None
    payment_method: str | None = None
    setup_future_usage: str = "on_session"
    metadata: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        validate_amount(self.amount)
        self.currency = (self.currency or default_currency()).lower()


@dataclass
class CreateTopUpParams:
    """
    Parameters for topping up the platform balance.

    Attributes:
        amount: Amount in major units
        currency: ISO 4217 currency code (default: STRIPE_DEFAULT_CURRENCY)
        description: Top-up description (optional)
        statement_descriptor: Bank statement text, e.g. "Top-up" (optional)
        idempotency_key: Key for idempotent creation (optional)
    """

    amount: Decimal
    currency: str | None = None
    description: str | None = None
    statement_descriptor: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        validate_amount(self.amount)
        self.currency = (self.currency or default_currency()).lower()


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class CustomerResult:
    """Result from Stripe Customer operations."""

    id: str
    email: str | None = None
    phone: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class DeletedResult:
    """Result from Stripe delete operations."""

    id: str
    deleted: bool


@dataclass
class ConnectedAccountResult:
    """
    Result from Stripe Connect account operations.

    Attributes:
        id: Account ID (acct_xxx)
        type: express / custom / standard
        email: Account email
        charges_enabled: Whether Stripe has enabled charges
        payouts_enabled: Whether Stripe has enabled payouts
        raw_response: Full Stripe response dict
    """

    id: str
    type: str | None = None
    email: str | None = None
    charges_enabled: bool = False
    payouts_enabled: bool = False
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class AccountLinkResult:
    """Result from Stripe AccountLink creation (onboarding URL)."""

    url: str
    expires_at: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class SourceResult:
    """
    Result from attaching a source (card) to a customer.

    Attributes:
        id: Card/source ID (card_xxx / src_xxx)
        customer_id: Owning Stripe Customer ID
        brand: Card brand (Visa, Mastercard, ...)
        last4: Last four digits
        exp_month / exp_year: Expiry
        raw_response: Full Stripe response dict
    """

    id: str
    customer_id: str | None = None
    brand: str | None = None
    last4: str | None = None
    exp_month: int | None = None
    exp_year: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentMethodPage:
    """One page of payment methods; cursors are Stripe object IDs."""

    data: list[dict[str, Any]] = field(default_factory=list)
    has_more: bool = False


@dataclass
class ChargeResult:
    """Result from Stripe Charge operations."""

    id: str
    amount_cents: int
    currency: str
    status: str | None = None
    paid: bool = False
    customer_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferResult:
    """
    Result from Stripe Transfer operations.

    Attributes:
        id: Transfer ID (tr_xxx)
        amount_cents: Amount transferred in cents
        currency: Currency code
        destination_account: Destination Stripe account ID
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    destination_account: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResult:
    """
    Result from Stripe Refund operations.

    Attributes:
        id: Refund ID (re_xxx)
        amount_cents: Refunded amount in cents
        currency: Currency code
        status: Refund status (succeeded, pending, failed)
        charge_id: Refunded charge ID (if any)
        payment_intent_id: Refunded PaymentIntent ID (if any)
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    status: str | None = None
    charge_id: str | None = None
    payment_intent_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentIntentResult:
    """
    Result from Stripe PaymentIntent operations.

    Attributes:
        id: PaymentIntent ID (pi_xxx)
        status: Current status (requires_payment_method, succeeded, etc.)
        amount_cents: Amount in cents
        currency: Currency code
        client_secret: Secret for client-side confirmation
        customer_id: Stripe Customer ID (if any)
        raw_response: Full Stripe response dict
    """

    id: str
    status: str
    amount_cents: int
    currency: str
    client_secret: str | None = None
    customer_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def requires_capture(self) -> bool:
        return self.status == PaymentIntentStatus.REQUIRES_CAPTURE

    @property
    def is_terminal(self) -> bool:
        return self.status in PaymentIntentStatus.terminal_states()


@dataclass
class TopUpResult:
    """Result from Stripe Topup operations."""

    id: str
    amount_cents: int
    currency: str
    status: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayEvent:
    """
    A verified webhook event.

    Attributes:
        id: Event ID (evt_xxx)
        type: Event type, e.g. "account.external_account.created"
        account: Connected account the event belongs to (Connect events)
        data_object: The event's data.object payload
        raw: Full event dict as delivered
    """

    id: str
    type: str
    account: str | None = None
    data_object: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, event: dict[str, Any]) -> GatewayEvent:
        data_object = (event.get("data") or {}).get("object") or {}
        return cls(
            id=event.get("id") or "",
            type=event.get("type") or "",
            account=event.get("account") or data_object.get("account"),
            data_object=data_object,
            raw=event,
        )


# =============================================================================
# Idempotency Key Generator
# =============================================================================


class IdempotencyKeyGenerator:
    """
    Generate idempotency keys for Stripe API calls.

    Format: "{operation}:{entity_id}:{attempt}:{hash}"

    Keys are deterministic: the same (operation, entity_id, attempt)
    always yields the same key, so a retried create returns the original
    Stripe object instead of creating a second one.

    Example:
        key = IdempotencyKeyGenerator.generate(
            operation="create_customer",
            entity_id=user.id,
        )
        # "create_customer:550e8400-e29b-41d4-a716-446655440000:1:a1b2c3d4"
    """

    @staticmethod
    def generate(
        operation: str,
        entity_id: uuid.UUID | str,
        attempt: int = 1,
    ) -> str:
        """
        Generate a deterministic idempotency key.

        Args:
            operation: The Stripe operation (create_customer, create_account, ...)
            entity_id: The domain entity ID (user id, ...)
            attempt: Attempt number (default: 1)

        Returns:
            Formatted idempotency key string
        """
        entity_str = str(entity_id)
        hash_input = f"{operation}:{entity_str}:{attempt}:{settings.SECRET_KEY}"
        short_hash = hashlib.sha256(hash_input.encode()).hexdigest()[:8]

        return f"{operation}:{entity_str}:{attempt}:{short_hash}"


# =============================================================================
# Stripe Adapter
# =============================================================================


def _as_dict(stripe_object: Any) -> dict[str, Any]:
    if stripe_object is None:
        return {}
    if hasattr(stripe_object, "to_dict"):
        return stripe_object.to_dict()
    return dict(stripe_object)


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    Holds only configuration; safe to share between threads and Celery
    workers. Pass api_key / webhook_secret to override settings (tests,
    multi-account setups).

    Usage:
        gateway = StripeAdapter()
        customer = gateway.create_customer(CreateCustomerParams(email="a@b.com"))
        gateway.create_transfer(
            CreateTransferParams(amount=Decimal("5"), destination_account="acct_1")
        )
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        timeout: int | None = None,
    ):
        self._api_key = api_key
        self._webhook_secret = webhook_secret
        self._timeout = timeout

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def api_key(self) -> str:
        return self._api_key or getattr(settings, "STRIPE_SECRET_KEY", "")

    @property
    def webhook_secret(self) -> str:
        return self._webhook_secret or getattr(settings, "STRIPE_WEBHOOK_SECRET", "")

    def _configure_stripe(self) -> None:
        """Configure the Stripe client with API key and timeout."""
        if not self.api_key:
            raise GatewayConfigurationError(
                "STRIPE_SECRET_KEY is not configured",
                stripe_code="missing_api_key",
            )
        stripe.api_key = self.api_key
        stripe.max_network_retries = 0
        timeout = self._timeout or getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def _execute(
        self,
        operation: str,
        log_context: dict[str, Any],
        call: Callable[[], Any],
    ) -> Any:
        """
        Run one Stripe call with logging and error translation.

        Args:
            operation: Operation name for logs
            log_context: Extra structured logging fields
            call: Zero-argument callable performing the SDK request

        Returns:
            The raw Stripe SDK response
        """
        self._configure_stripe()
        logger = self.get_logger()
        log_context = {"operation": operation, **log_context}

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            response = call()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_stripe_error(e, log_context, duration_ms)
            raise  # Never reached, _handle_stripe_error always raises

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Stripe operation completed",
            extra={
                **log_context,
                "stripe_id": getattr(response, "id", None),
                "duration_ms": duration_ms,
            },
        )
        return response

    @staticmethod
    def _idempotency(key: str | None) -> dict[str, str]:
        return {"idempotency_key": key} if key else {}

    # =========================================================================
    # Customers
    # =========================================================================

    def create_customer(self, params: CreateCustomerParams) -> CustomerResult:
        """
        Create a Stripe Customer.

        Raises:
            GatewayError: classified Stripe failure
        """
        customer_params: dict[str, Any] = {}
        if params.email:
            customer_params["email"] = params.email
        if params.phone:
            customer_params["phone"] = params.phone
        if params.name:
            customer_params["name"] = params.name
        if params.metadata:
            customer_params["metadata"] = params.metadata

        customer = self._execute(
            "create_customer",
            {"idempotency_key": params.idempotency_key},
            lambda: stripe.Customer.create(
                **customer_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        raw = _as_dict(customer)
        return CustomerResult(
            id=raw["id"],
            email=raw.get("email"),
            phone=raw.get("phone"),
            raw_response=raw,
        )

    def delete_customer(self, customer_id: str) -> DeletedResult:
        """Delete a Stripe Customer."""
        _require(customer_id, "customer_id")
        response = self._execute(
            "delete_customer",
            {"customer_id": customer_id},
            lambda: stripe.Customer.delete(customer_id),
        )
        raw = _as_dict(response)
        return DeletedResult(id=raw.get("id", customer_id), deleted=bool(raw.get("deleted")))

    def list_customers(self, limit: int = 100) -> list[CustomerResult]:
        """
        List Stripe Customers (most recent first).

        Args:
            limit: Maximum number to return (Stripe caps at 100)
        """
        customers = self._execute(
            "list_customers",
            {"limit": limit},
            lambda: stripe.Customer.list(limit=min(max(limit, 1), 100)),
        )
        return [
            CustomerResult(
                id=raw["id"],
                email=raw.get("email"),
                phone=raw.get("phone"),
                raw_response=raw,
            )
            for raw in (_as_dict(customer) for customer in customers.data)
        ]

    def attach_source(self, customer_id: str, source_token: str) -> SourceResult:
        """
        Attach a tokenized card/source to a customer.

        Args:
            customer_id: Stripe Customer ID (cus_xxx)
            source_token: Single-use source or card token (tok_xxx / src_xxx)
        """
        _require(customer_id, "customer_id")
        _require(source_token, "source_token")

        source = self._execute(
            "attach_source",
            {"customer_id": customer_id},
            lambda: stripe.Customer.create_source(customer_id, source=source_token),
        )
        raw = _as_dict(source)
        return SourceResult(
            id=raw["id"],
            customer_id=raw.get("customer") or customer_id,
            brand=raw.get("brand"),
            last4=raw.get("last4"),
            exp_month=raw.get("exp_month"),
            exp_year=raw.get("exp_year"),
            raw_response=raw,
        )

    def list_payment_methods(
        self,
        customer_id: str,
        limit: int = 10,
        starting_after: str | None = None,
        ending_before: str | None = None,
    ) -> PaymentMethodPage:
        """
        List a customer's card payment methods.

        Cursors are forwarded verbatim; ordering is defined by Stripe.
        """
        _require(customer_id, "customer_id")
        list_params: dict[str, Any] = {
            "customer": customer_id,
            "type": "card",
            "limit": limit,
        }
        if starting_after:
            list_params["starting_after"] = starting_after
        if ending_before:
            list_params["ending_before"] = ending_before

        methods = self._execute(
            "list_payment_methods",
            {"customer_id": customer_id, "limit": limit},
            lambda: stripe.PaymentMethod.list(**list_params),
        )
        return PaymentMethodPage(
            data=[_as_dict(method) for method in methods.data],
            has_more=bool(getattr(methods, "has_more", False)),
        )

    # =========================================================================
    # Connected Accounts
    # =========================================================================

    def create_connected_account(
        self,
        params: CreateConnectedAccountParams,
    ) -> ConnectedAccountResult:
        """
        Create a Stripe Connect account with the requested capabilities.
        """
        account_params: dict[str, Any] = {
            "type": params.kind,
            "country": params.country,
            "capabilities": {
                capability: {"requested": True} for capability in params.capabilities
            },
        }
        if params.email:
            account_params["email"] = params.email
        if params.metadata:
            account_params["metadata"] = params.metadata

        account = self._execute(
            "create_connected_account",
            {"kind": params.kind, "idempotency_key": params.idempotency_key},
            lambda: stripe.Account.create(
                **account_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        raw = _as_dict(account)
        return ConnectedAccountResult(
            id=raw["id"],
            type=raw.get("type"),
            email=raw.get("email"),
            charges_enabled=bool(raw.get("charges_enabled")),
            payouts_enabled=bool(raw.get("payouts_enabled")),
            raw_response=raw,
        )

    def create_onboarding_link(
        self,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> AccountLinkResult:
        """
        Create an account_onboarding AccountLink for a connected account.

        Args:
            account_id: Stripe Connect account ID (acct_xxx)
            refresh_url: Redirect when the link expires or is invalid
            return_url: Redirect when the user leaves the flow
        """
        _require(account_id, "account_id")
        _require(refresh_url, "refresh_url")
        _require(return_url, "return_url")

        link = self._execute(
            "create_onboarding_link",
            {"account_id": account_id},
            lambda: stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
            ),
        )
        raw = _as_dict(link)
        return AccountLinkResult(
            url=raw["url"],
            expires_at=raw.get("expires_at"),
            raw_response=raw,
        )

    # =========================================================================
    # Money Movement
    # =========================================================================

    def create_charge(self, params: CreateChargeParams) -> ChargeResult:
        """
        Create a Stripe Charge.

        Raises:
            GatewayCardDeclinedError: Card was declined
            GatewayInvalidRequestError: Invalid parameters
        """
        amount_cents = to_minor_units(params.amount)
        charge_params: dict[str, Any] = {
            "amount": amount_cents,
            "currency": params.currency,
        }
        if params.customer_id:
            charge_params["customer"] = params.customer_id
        if params.source:
            charge_params["source"] = params.source
        if params.description:
            charge_params["description"] = params.description

        charge = self._execute(
            "create_charge",
            {
                "amount_cents": amount_cents,
                "currency": params.currency,
                "customer_id": params.customer_id,
                "idempotency_key": params.idempotency_key,
            },
            lambda: stripe.Charge.create(
                **charge_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        raw = _as_dict(charge)
        return ChargeResult(
            id=raw["id"],
            amount_cents=raw.get("amount", amount_cents),
            currency=raw.get("currency", params.currency),
            status=raw.get("status"),
            paid=bool(raw.get("paid")),
            customer_id=raw.get("customer"),
            raw_response=raw,
        )

    def create_refund(self, charge_id: str) -> RefundResult:
        """Fully refund a Charge."""
        _require(charge_id, "charge_id")
        refund = self._execute(
            "create_refund",
            {"charge_id": charge_id},
            lambda: stripe.Refund.create(charge=charge_id),
        )
        return self._refund_result(_as_dict(refund))

    def create_transfer(self, params: CreateTransferParams) -> TransferResult:
        """
        Create a transfer to a connected Stripe account.

        Raises:
            GatewayInvalidRequestError: Invalid destination or insufficient balance
        """
        amount_cents = to_minor_units(params.amount)
        transfer_params: dict[str, Any] = {
            "amount": amount_cents,
            "currency": params.currency,
            "destination": params.destination_account,
        }
        if params.description:
            transfer_params["description"] = params.description

        transfer = self._execute(
            "create_transfer",
            {
                "amount_cents": amount_cents,
                "destination_account": params.destination_account,
                "idempotency_key": params.idempotency_key,
            },
            lambda: stripe.Transfer.create(
                **transfer_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        raw = _as_dict(transfer)
        return TransferResult(
            id=raw["id"],
            amount_cents=raw.get("amount", amount_cents),
            currency=raw.get("currency", params.currency),
            destination_account=raw.get("destination", params.destination_account),
            raw_response=raw,
        )

    def create_top_up(self, params: CreateTopUpParams) -> TopUpResult:
        """Add funds to the platform balance from the platform's bank account."""
        amount_cents = to_minor_units(params.amount)
        topup_params: dict[str, Any] = {
            "amount": amount_cents,
            "currency": params.currency,
        }
        if params.description:
            topup_params["description"] = params.description
        if params.statement_descriptor:
            topup_params["statement_descriptor"] = params.statement_descriptor

        topup = self._execute(
            "create_top_up",
            {"amount_cents": amount_cents, "currency": params.currency},
            lambda: stripe.Topup.create(
                **topup_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        raw = _as_dict(topup)
        return TopUpResult(
            id=raw["id"],
            amount_cents=raw.get("amount", amount_cents),
            currency=raw.get("currency", params.currency),
            status=raw.get("status"),
            raw_response=raw,
        )

    # =========================================================================
    # Payment Intents
    # =========================================================================

    def create_payment_intent(self, params: CreatePaymentIntentParams) -> PaymentIntentResult:
        """
        Create a Stripe PaymentIntent.

        setup_future_usage keeps the confirmed payment method on the
        customer so it can be reused without re-entry.
        """
        amount_cents = to_minor_units(params.amount)
        intent_params: dict[str, Any] = {
            "amount": amount_cents,
            "currency": params.currency,
            "setup_future_usage": params.setup_future_usage,
        }
        if params.customer_id:
            intent_params["customer"] = params.customer_id
        if params.payment_method:
            intent_params["payment_method"] = params.payment_method
        if params.payment_method_types:
            intent_params["payment_method_types"] = list(params.payment_method_types)
        if params.metadata:
            intent_params["metadata"] = params.metadata

        intent = self._execute(
            "create_payment_intent",
            {
                "amount_cents": amount_cents,
                "currency": params.currency,
                "customer_id": params.customer_id,
                "idempotency_key": params.idempotency_key,
            },
            lambda: stripe.PaymentIntent.create(
                **intent_params,
                **self._idempotency(params.idempotency_key),
            ),
        )
        return self._payment_intent_result(_as_dict(intent))

    def capture_payment_intent(
        self,
        payment_intent_id: str,
        amount: Decimal | None = None,
    ) -> PaymentIntentResult:
        """
        Capture a PaymentIntent in requires_capture.

        Args:
            payment_intent_id: Stripe PaymentIntent ID (pi_xxx)
            amount: Amount to capture in major units (None captures the full amount)
        """
        _require(payment_intent_id, "payment_intent_id")
        capture_params: dict[str, Any] = {}
        if amount is not None:
            capture_params["amount_to_capture"] = to_minor_units(amount)

        intent = self._execute(
            "capture_payment_intent",
            {"payment_intent_id": payment_intent_id, **capture_params},
            lambda: stripe.PaymentIntent.capture(payment_intent_id, **capture_params),
        )
        return self._payment_intent_result(_as_dict(intent))

    def cancel_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        """Cancel a PaymentIntent that has not succeeded yet."""
        _require(payment_intent_id, "payment_intent_id")
        intent = self._execute(
            "cancel_payment_intent",
            {"payment_intent_id": payment_intent_id},
            lambda: stripe.PaymentIntent.cancel(payment_intent_id),
        )
        return self._payment_intent_result(_as_dict(intent))

    def refund_payment_intent(self, payment_intent_id: str) -> RefundResult:
        """Fully refund a succeeded PaymentIntent."""
        _require(payment_intent_id, "payment_intent_id")
        refund = self._execute(
            "refund_payment_intent",
            {"payment_intent_id": payment_intent_id},
            lambda: stripe.Refund.create(payment_intent=payment_intent_id),
        )
        return self._refund_result(_as_dict(refund))

    @staticmethod
    def _payment_intent_result(raw: dict[str, Any]) -> PaymentIntentResult:
        return PaymentIntentResult(
            id=raw["id"],
            status=raw.get("status", ""),
            amount_cents=raw.get("amount", 0),
            currency=raw.get("currency", ""),
            client_secret=raw.get("client_secret"),
            customer_id=raw.get("customer"),
            raw_response=raw,
        )

    @staticmethod
    def _refund_result(raw: dict[str, Any]) -> RefundResult:
        return RefundResult(
            id=raw["id"],
            amount_cents=raw.get("amount", 0),
            currency=raw.get("currency", ""),
            status=raw.get("status"),
            charge_id=raw.get("charge"),
            payment_intent_id=raw.get("payment_intent"),
            raw_response=raw,
        )

    # =========================================================================
    # Webhook Verification
    # =========================================================================

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature: str,
        secret: str | None = None,
    ) -> GatewayEvent:
        """
        Verify and parse a Stripe webhook event.

        Args:
            payload: Raw, unmodified request body bytes
            signature: Stripe-Signature header value
            secret: Signing secret (default: STRIPE_WEBHOOK_SECRET)

        Returns:
            GatewayEvent built from the verified payload

        Raises:
            WebhookSignatureError: Missing/malformed header, mismatch, bad JSON
            GatewayConfigurationError: No signing secret configured
        """
        secret = secret or self.webhook_secret
        if not secret:
            raise GatewayConfigurationError(
                "STRIPE_WEBHOOK_SECRET is not configured",
                stripe_code="missing_webhook_secret",
            )
        if not signature:
            raise WebhookSignatureError(
                "Missing Stripe-Signature header",
                error_code="WEBHOOK_SIGNATURE_MISSING",
            )

        try:
            stripe.Webhook.construct_event(payload, signature, secret)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(
                "Invalid webhook signature",
                details={"error": str(e)},
            )
        except ValueError as e:
            raise WebhookSignatureError(
                "Invalid webhook payload",
                error_code="WEBHOOK_PAYLOAD_INVALID",
                details={"error": str(e)},
            )

        body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        return GatewayEvent.from_dict(json.loads(body))

    # =========================================================================
    # Error Handling
    # =========================================================================

    def _handle_stripe_error(
        self,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to classified GatewayError subclasses.

        Raises:
            GatewayCardDeclinedError: DECLINED
            GatewayInvalidRequestError: INVALID_REQUEST
            GatewayAuthenticationError: AUTHENTICATION_FAILURE
            GatewayRateLimitError: RATE_LIMITED
            GatewayNetworkError: NETWORK_ERROR
            GatewayUnknownError: UNKNOWN
        """
        logger = self.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, PaymentValidationError):
            raise error

        if isinstance(error, stripe.CardError):
            decline_code = getattr(error, "decline_code", None)
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "decline_code": decline_code},
            )
            raise GatewayCardDeclinedError(
                str(error.user_message or error),
                stripe_code=error.code,
                decline_code=decline_code,
            )

        elif isinstance(error, stripe.InvalidRequestError):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise GatewayInvalidRequestError(
                str(error.user_message or error),
                stripe_code=error.code,
            )

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise GatewayRateLimitError(
                "Stripe rate limit exceeded. Please retry.",
                stripe_code="rate_limit",
            )

        elif isinstance(error, stripe.APIConnectionError):
            logger.error("Connection error to Stripe", extra=log_context, exc_info=True)
            raise GatewayNetworkError(
                "Could not connect to Stripe. Please retry.",
                stripe_code="api_connection_error",
            )

        elif isinstance(error, stripe.APIError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise GatewayNetworkError(
                "Stripe service error. Please retry.",
                stripe_code="api_error",
            )

        elif isinstance(error, (stripe.AuthenticationError, stripe.PermissionError)):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise GatewayAuthenticationError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            )

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayUnknownError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            )
