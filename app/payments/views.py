"""
DRF views for payments app.

This module provides API views for:
- Linking the current user to a Stripe customer or connected account
- Attaching and listing cards
- Charges, refunds, transfers and top-ups
- PaymentIntent lifecycle

Related files:
    - services/: AccountLinker, TransactionService
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    POST /api/v1/payments/customers/ - Get or create Stripe customer
    GET  /api/v1/payments/sources/ - List saved cards
    POST /api/v1/payments/sources/ - Attach card
    POST /api/v1/payments/connected-account/ - Get or create connected account
    POST /api/v1/payments/connected-account/onboarding-link/ - Onboarding URL
    POST /api/v1/payments/charges/ - Create charge
    POST /api/v1/payments/charges/<charge_id>/refund/ - Refund charge
    POST /api/v1/payments/transfers/ - Transfer to a linked user (staff)
    POST /api/v1/payments/top-ups/ - Top up platform balance (staff)
    POST /api/v1/payments/payment-intents/ - Create PaymentIntent
    POST /api/v1/payments/payment-intents/<id>/capture|cancel|refund/

Security:
    - All endpoints require authentication
    - Non-staff callers may only charge or create intents for their own
      linked customer
    - Platform-funded operations (transfers, top-ups) and actions on
      existing charges and PaymentIntents require staff
    - Application errors are rendered by core.exception_handler
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.adapters import CreateChargeParams
from payments.exceptions import PaymentValidationError
from payments.serializers import (
    AttachSourceSerializer,
    CapturePaymentIntentSerializer,
    ChargeSerializer,
    ConnectedAccountRequestSerializer,
    CustomerRequestSerializer,
    OnboardingLinkSerializer,
    PaymentAccountSerializer,
    PaymentIntentSerializer,
    SourceListQuerySerializer,
    TopUpSerializer,
    TransferSerializer,
)
from payments.services import AccountLinker, PaymentAccountStore, TransactionService

logger = logging.getLogger(__name__)


def check_customer_ownership(request, customer_id: str | None) -> None:
    """
    Reject a customer_id that is not the caller's own linked customer.

    Staff may act on any customer. Requests without a customer_id are
    not restricted here.
    """
    if not customer_id or request.user.is_staff:
        return

    payment_account = PaymentAccountStore().get_by_user(request.user.id)
    if payment_account is None or payment_account.external_id != customer_id:
        logger.warning(
            "Rejected request for another user's customer",
            extra={"user_id": str(request.user.id), "customer_id": customer_id},
        )
        raise PermissionDenied("customer_id does not belong to the current user.")


# =============================================================================
# Account Linkage
# =============================================================================


class CustomerView(APIView):
    """
    Get or create the current user's Stripe customer.

    POST /api/v1/payments/customers/

    Request body (optional):
        {"email": "jane@example.com", "phone": "+15555550100"}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get or create Stripe customer",
        tags=["Payments - Accounts"],
        request=CustomerRequestSerializer,
        responses={200: PaymentAccountSerializer},
    )
    def post(self, request):
        serializer = CustomerRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment_account = AccountLinker().get_or_create_customer(
            request.user.id, **serializer.validated_data
        )
        return Response(PaymentAccountSerializer(payment_account).data)


class SourceView(APIView):
    """
    Saved cards of the current user's customer.

    GET /api/v1/payments/sources/?limit=10&starting_after=pm_xxx
    POST /api/v1/payments/sources/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List saved cards",
        tags=["Payments - Sources"],
        parameters=[SourceListQuerySerializer],
    )
    def get(self, request):
        query = SourceListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        payment_account = AccountLinker().get_payment_account(request.user.id)
        page = TransactionService().get_customer_sources(
            payment_account.external_id, **query.validated_data
        )
        return Response(asdict(page))

    @extend_schema(
        summary="Attach card",
        tags=["Payments - Sources"],
        request=AttachSourceSerializer,
        responses={200: PaymentAccountSerializer},
    )
    def post(self, request):
        serializer = AttachSourceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment_account = AccountLinker().attach_source(
            request.user.id, **serializer.validated_data
        )
        return Response(PaymentAccountSerializer(payment_account).data)


class ConnectedAccountView(APIView):
    """
    Get or create the current user's Stripe connected account.

    POST /api/v1/payments/connected-account/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get or create connected account",
        tags=["Payments - Accounts"],
        request=ConnectedAccountRequestSerializer,
        responses={200: PaymentAccountSerializer},
    )
    def post(self, request):
        serializer = ConnectedAccountRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment_account = AccountLinker().get_or_create_connected_account(
            request.user.id, **serializer.validated_data
        )
        return Response(PaymentAccountSerializer(payment_account).data)


class OnboardingLinkView(APIView):
    """
    Create a Stripe onboarding link, creating the connected account if needed.

    POST /api/v1/payments/connected-account/onboarding-link/

    Returns:
        {"url": "https://connect.stripe.com/setup/...", "expires_at": 1700000000}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Create onboarding link",
        tags=["Payments - Accounts"],
        request=OnboardingLinkSerializer,
    )
    def post(self, request):
        serializer = OnboardingLinkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        link = AccountLinker().create_onboarding_link(
            request.user.id, **serializer.validated_data
        )
        return Response({"url": link.url, "expires_at": link.expires_at})


# =============================================================================
# Charges, Transfers, Top-ups
# =============================================================================


class ChargeView(APIView):
    """
    POST /api/v1/payments/charges/

    Request body:
        {"amount": "10.00", "customer_id": "cus_123", "currency": "usd"}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Create charge",
        tags=["Payments - Charges"],
        request=ChargeSerializer,
    )
    def post(self, request):
        serializer = ChargeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check_customer_ownership(request, serializer.validated_data.get("customer_id"))

        charge = TransactionService().create_charge(
            CreateChargeParams(**serializer.validated_data)
        )
        return Response(asdict(charge), status=status.HTTP_201_CREATED)


class ChargeRefundView(APIView):
    """POST /api/v1/payments/charges/<charge_id>/refund/"""

    permission_classes = [IsAdminUser]

    @extend_schema(summary="Refund charge", tags=["Payments - Charges"], request=None)
    def post(self, request, charge_id: str):
        refund = TransactionService().create_refund(charge_id)
        return Response(asdict(refund), status=status.HTTP_201_CREATED)


class TransferView(APIView):
    """
    Transfer funds to a user's linked Stripe account.

    POST /api/v1/payments/transfers/

    Request body:
        {"user_id": "<uuid>", "amount": "25.00"}
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        summary="Create transfer",
        tags=["Payments - Transfers"],
        request=TransferSerializer,
    )
    def post(self, request):
        serializer = TransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        transfer = TransactionService().create_transfer(**serializer.validated_data)
        return Response(asdict(transfer), status=status.HTTP_201_CREATED)


class TopUpView(APIView):
    """POST /api/v1/payments/top-ups/"""

    permission_classes = [IsAdminUser]

    @extend_schema(
        summary="Top up platform balance",
        tags=["Payments - Transfers"],
        request=TopUpSerializer,
    )
    def post(self, request):
        serializer = TopUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        top_up = TransactionService().create_top_up(**serializer.validated_data)
        return Response(asdict(top_up), status=status.HTTP_201_CREATED)


# =============================================================================
# Payment Intents
# =============================================================================


class PaymentIntentView(APIView):
    """
    POST /api/v1/payments/payment-intents/

    The response includes client_secret for client-side confirmation.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Create PaymentIntent",
        tags=["Payments - Payment Intents"],
        request=PaymentIntentSerializer,
    )
    def post(self, request):
        serializer = PaymentIntentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check_customer_ownership(request, serializer.validated_data.get("customer_id"))

        intent = TransactionService().create_payment_intent(**serializer.validated_data)
        return Response(asdict(intent), status=status.HTTP_201_CREATED)


class PaymentIntentActionView(APIView):
    """
    Lifecycle actions on an existing PaymentIntent.

    POST /api/v1/payments/payment-intents/<payment_intent_id>/capture/
    POST /api/v1/payments/payment-intents/<payment_intent_id>/cancel/
    POST /api/v1/payments/payment-intents/<payment_intent_id>/refund/

    Stripe rejects actions that are invalid for the intent's current
    status; those come back as 400 GATEWAY_INVALID_REQUEST.
    """

    permission_classes = [IsAdminUser]

    ACTIONS = ("capture", "cancel", "refund")

    @extend_schema(
        summary="Capture, cancel or refund PaymentIntent",
        tags=["Payments - Payment Intents"],
        request=CapturePaymentIntentSerializer,
    )
    def post(self, request, payment_intent_id: str, action: str):
        if action not in self.ACTIONS:
            raise PaymentValidationError(
                f"Unknown action: {action}",
                details={"allowed": list(self.ACTIONS)},
            )

        service = TransactionService()
        if action == "capture":
            serializer = CapturePaymentIntentSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            result = service.capture_payment_intent(
                payment_intent_id, amount=serializer.validated_data.get("amount")
            )
        elif action == "cancel":
            result = service.cancel_payment_intent(payment_intent_id)
        else:
            result = service.refund_payment_intent(payment_intent_id)

        logger.info(
            f"PaymentIntent {action} requested",
            extra={"payment_intent_id": payment_intent_id, "user_id": str(request.user.id)},
        )
        return Response(asdict(result))
