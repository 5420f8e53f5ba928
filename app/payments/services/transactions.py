"""
Money movement on top of the Stripe adapter.

TransactionService performs charges, refunds, transfers, top-ups and
the PaymentIntent lifecycle. It keeps no local payment state: Stripe is
the source of truth, and operations that are invalid for a resource's
current state are rejected by Stripe (GatewayInvalidRequestError).

Amounts are major units (Decimal("12.50")); conversion to cents happens
in the adapter only.

Usage:
    from payments.services import TransactionService

    service = TransactionService()
    intent = service.create_payment_intent(Decimal("12.50"), "usd", "cus_123")
    service.capture_payment_intent(intent.id)
    service.create_transfer(seller.id, Decimal("10.00"))
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from core.helpers import validate_uuid
from core.services import BaseService

from payments.adapters import (
    ChargeResult,
    CreateChargeParams,
    CreatePaymentIntentParams,
    CreateTopUpParams,
    CreateTransferParams,
    PaymentIntentResult,
    PaymentMethodPage,
    RefundResult,
    StripeAdapter,
    TopUpResult,
    TransferResult,
    validate_amount,
)
from payments.exceptions import PaymentNotFoundError, PaymentValidationError
from payments.services.account_store import PaymentAccountStore


class TransactionService(BaseService):
    """
    Stateless money operations.

    Collaborators:
        gateway: StripeAdapter
        store: PaymentAccountStore (transfer destination lookup only)
    """

    def __init__(
        self,
        gateway: StripeAdapter | None = None,
        store: PaymentAccountStore | None = None,
    ):
        self.gateway = gateway or StripeAdapter()
        self.store = store or PaymentAccountStore()

    # =========================================================================
    # Charges
    # =========================================================================

    def create_charge(self, params: CreateChargeParams) -> ChargeResult:
        return self.gateway.create_charge(params)

    def create_refund(self, charge_id: str) -> RefundResult:
        """Fully refund a charge."""
        return self.gateway.create_refund(charge_id)

    # =========================================================================
    # Transfers
    # =========================================================================

    def create_transfer(
        self,
        user_id: uuid.UUID | str,
        amount: Decimal,
        currency: str | None = None,
        description: str | None = None,
        idempotency_key: str | None = None,
    ) -> TransferResult:
        """
        Transfer funds to the user's linked Stripe account.

        The destination must already be linked; this never provisions one.

        Raises:
            PaymentValidationError: invalid user_id or amount
            PaymentNotFoundError: the user has no linkage (Stripe is not called)
            GatewayError: Stripe rejected or failed the transfer
        """
        if not user_id or not validate_uuid(user_id):
            raise PaymentValidationError(
                "Please enter a valid user id",
                error_code="INVALID_USER_ID",
                details={"user_id": str(user_id)},
            )
        validate_amount(amount)

        payment_account = self.store.get_by_user(user_id)
        if payment_account is None:
            raise PaymentNotFoundError(
                "No payment account linked to this user",
                details={"user_id": str(user_id)},
            )

        params = CreateTransferParams(
            amount=amount,
            destination_account=payment_account.external_id,
            currency=currency,
            description=description,
            idempotency_key=idempotency_key,
        )
        transfer = self.gateway.create_transfer(params)

        self.get_logger().info(
            "Transfer created",
            extra={
                "user_id": str(user_id),
                "transfer_id": transfer.id,
                "amount_cents": transfer.amount_cents,
                "destination_account": transfer.destination_account,
            },
        )
        return transfer

    # =========================================================================
    # Top-ups
    # =========================================================================

    def create_top_up(
        self,
        amount: Decimal,
        currency: str | None = None,
        description: str | None = None,
        statement_descriptor: str | None = None,
        idempotency_key: str | None = None,
    ) -> TopUpResult:
        """Add funds to the platform balance."""
        return self.gateway.create_top_up(
            CreateTopUpParams(
                amount=amount,
                currency=currency,
                description=description,
                statement_descriptor=statement_descriptor,
                idempotency_key=idempotency_key,
            )
        )

    # =========================================================================
    # Payment Intents
    # =========================================================================

    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str | None = None,
        customer_id: str | None = None,
        payment_method_types: list[str] | None = None,
        payment_method: str | None = None,
        idempotency_key: str | None = None,
    ) -> PaymentIntentResult:
        """
        Create a PaymentIntent whose payment method is kept for reuse
        (setup_future_usage="on_session").
        """
        return self.gateway.create_payment_intent(
            CreatePaymentIntentParams(
                amount=amount,
                currency=currency,
                customer_id=customer_id,
                payment_method_types=payment_method_types,
                payment_method=payment_method,
                idempotency_key=idempotency_key,
            )
        )

    def capture_payment_intent(
        self,
        payment_intent_id: str,
        amount: Decimal | None = None,
    ) -> PaymentIntentResult:
        return self.gateway.capture_payment_intent(payment_intent_id, amount=amount)

    def cancel_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        return self.gateway.cancel_payment_intent(payment_intent_id)

    def refund_payment_intent(self, payment_intent_id: str) -> RefundResult:
        return self.gateway.refund_payment_intent(payment_intent_id)

    # =========================================================================
    # Payment methods
    # =========================================================================

    def get_customer_sources(
        self,
        customer_id: str,
        limit: int = 10,
        starting_after: str | None = None,
        ending_before: str | None = None,
    ) -> PaymentMethodPage:
        """
        List the customer's saved cards, one page at a time.

        Cursors are Stripe payment method ids and are passed through as-is.
        """
        return self.gateway.list_payment_methods(
            customer_id,
            limit=limit,
            starting_after=starting_after,
            ending_before=ending_before,
        )
