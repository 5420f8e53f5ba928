"""
DRF serializers for payments app.

This module provides serializers for:
- PaymentAccount display
- Request validation for linkage and money movement endpoints

Amounts are accepted in major units with two decimal places
("12.50"); the Stripe adapter converts them to cents.

Related files:
    - models/payment_account.py: PaymentAccount
    - views.py: Payment API views
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from payments.models import PaymentAccount

MIN_AMOUNT = Decimal("0.01")


def amount_field(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=MIN_AMOUNT,
        **kwargs,
    )


def currency_field() -> serializers.CharField:
    return serializers.CharField(
        min_length=3, max_length=3, required=False, allow_blank=False
    )


# =============================================================================
# Response Serializers
# =============================================================================


class PaymentAccountSerializer(serializers.ModelSerializer):
    """
    PaymentAccount serializer for API responses.

    Fields:
        id: PaymentAccount UUID
        user: Owning user UUID
        type: customer or connected_account
        account: Stripe resource blob (id, card summary, card_holder_name, ...)
    """

    class Meta:
        model = PaymentAccount
        fields = ["id", "user", "type", "account", "created_at", "updated_at"]
        read_only_fields = fields


# =============================================================================
# Linkage Request Serializers
# =============================================================================


class CustomerRequestSerializer(serializers.Serializer):
    """Optional overrides for the Stripe customer's contact details."""

    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=32, required=False)


class AttachSourceSerializer(CustomerRequestSerializer):
    """
    Attach a tokenized card to the current user's customer.

    Request body:
        {"source_token": "tok_visa", "card_holder_name": "Jane Doe"}
    """

    source_token = serializers.CharField(max_length=255)
    card_holder_name = serializers.CharField(max_length=255)


class SourceListQuerySerializer(serializers.Serializer):
    """Cursor pagination for saved cards."""

    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    starting_after = serializers.CharField(required=False)
    ending_before = serializers.CharField(required=False)

    def validate(self, attrs):
        if attrs.get("starting_after") and attrs.get("ending_before"):
            raise serializers.ValidationError(
                "Use either starting_after or ending_before, not both."
            )
        return attrs


class ConnectedAccountRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)


class OnboardingLinkSerializer(ConnectedAccountRequestSerializer):
    """
    Request an onboarding URL.

    All fields are optional; URLs default to the configured
    STRIPE_CONNECT_REFRESH_URL / STRIPE_CONNECT_RETURN_URL.
    """

    account_id = serializers.CharField(max_length=255, required=False)
    refresh_url = serializers.URLField(required=False)
    return_url = serializers.URLField(required=False)


# =============================================================================
# Money Movement Request Serializers
# =============================================================================


class ChargeSerializer(serializers.Serializer):
    """Create a charge against a customer or a one-off source."""

    amount = amount_field()
    currency = currency_field()
    customer_id = serializers.CharField(max_length=255, required=False)
    source = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(max_length=500, required=False)
    idempotency_key = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        if not attrs.get("customer_id") and not attrs.get("source"):
            raise serializers.ValidationError("customer_id or source is required.")
        return attrs


class TransferSerializer(serializers.Serializer):
    """Transfer funds to a user's linked Stripe account."""

    user_id = serializers.UUIDField()
    amount = amount_field()
    currency = currency_field()
    description = serializers.CharField(max_length=500, required=False)
    idempotency_key = serializers.CharField(max_length=255, required=False)


class TopUpSerializer(serializers.Serializer):
    amount = amount_field()
    currency = currency_field()
    description = serializers.CharField(max_length=500, required=False)
    statement_descriptor = serializers.CharField(max_length=15, required=False)
    idempotency_key = serializers.CharField(max_length=255, required=False)


class PaymentIntentSerializer(serializers.Serializer):
    """
    Create a PaymentIntent.

    Request body:
        {"amount": "12.50", "currency": "usd", "customer_id": "cus_123"}
    """

    amount = amount_field()
    currency = currency_field()
    customer_id = serializers.CharField(max_length=255, required=False)
    payment_method = serializers.CharField(max_length=255, required=False)
    payment_method_types = serializers.ListField(
        child=serializers.CharField(max_length=64),
        required=False,
        allow_empty=False,
    )
    idempotency_key = serializers.CharField(max_length=255, required=False)


class CapturePaymentIntentSerializer(serializers.Serializer):
    """Amount to capture; omit to capture the full authorized amount."""

    amount = amount_field(required=False)
