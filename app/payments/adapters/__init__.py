"""
Payment adapters for external services.

All Stripe API calls go through these adapters to ensure consistent
error handling, timeouts, currency conversion and observability.

Usage:
    from payments.adapters import StripeAdapter, CreatePaymentIntentParams

    result = StripeAdapter().create_payment_intent(
        CreatePaymentIntentParams(amount=Decimal("50.00"), customer_id="cus_123")
    )
"""

from payments.adapters.stripe_adapter import (
    DEFAULT_CURRENCY,
    AccountLinkResult,
    ChargeResult,
    ConnectedAccountResult,
    CreateChargeParams,
    CreateConnectedAccountParams,
    CreateCustomerParams,
    CreatePaymentIntentParams,
    CreateTopUpParams,
    CreateTransferParams,
    CustomerResult,
    DeletedResult,
    GatewayEvent,
    IdempotencyKeyGenerator,
    PaymentIntentResult,
    PaymentMethodPage,
    RefundResult,
    SourceResult,
    StripeAdapter,
    TopUpResult,
    TransferResult,
    to_minor_units,
    validate_amount,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "AccountLinkResult",
    "ChargeResult",
    "ConnectedAccountResult",
    "CreateChargeParams",
    "CreateConnectedAccountParams",
    "CreateCustomerParams",
    "CreatePaymentIntentParams",
    "CreateTopUpParams",
    "CreateTransferParams",
    "CustomerResult",
    "DeletedResult",
    "GatewayEvent",
    "IdempotencyKeyGenerator",
    "PaymentIntentResult",
    "PaymentMethodPage",
    "RefundResult",
    "SourceResult",
    "StripeAdapter",
    "TopUpResult",
    "TransferResult",
    "to_minor_units",
    "validate_amount",
]
