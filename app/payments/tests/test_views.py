"""
Tests for payments API views.

Services are patched at the view module so these tests cover request
validation, permissions and the mapping of errors to HTTP statuses.
"""

import uuid
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.urls import reverse
from rest_framework import status

from payments.adapters import (
    AccountLinkResult,
    ChargeResult,
    CustomerResult,
    PaymentIntentResult,
    PaymentMethodPage,
    RefundResult,
    StripeAdapter,
    TopUpResult,
    TransferResult,
)
from payments.exceptions import (
    GatewayCardDeclinedError,
    GatewayConfigurationError,
    GatewayInvalidRequestError,
    GatewayRateLimitError,
    PaymentNotFoundError,
)
from payments.models import PaymentAccount
from payments.tests.factories import PaymentAccountFactory


def intent(status_value="requires_payment_method"):
    return PaymentIntentResult(
        id="pi_1",
        status=status_value,
        amount_cents=1250,
        currency="usd",
        client_secret="pi_1_secret",
    )


@pytest.fixture
def transactions():
    with patch("payments.views.TransactionService") as service_cls:
        yield service_cls.return_value


@pytest.fixture
def linker():
    with patch("payments.views.AccountLinker") as linker_cls:
        yield linker_cls.return_value


class TestAuthentication:
    @pytest.mark.parametrize(
        "url_name",
        ["payments:customer", "payments:sources", "payments:charges", "payments:payment_intents"],
    )
    def test_anonymous_rejected(self, api_client, url_name):
        response = api_client.post(reverse(url_name), {}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize("url_name", ["payments:transfers", "payments:top_ups"])
    def test_platform_operations_require_staff(self, authenticated_client, url_name):
        response = authenticated_client.post(reverse(url_name), {}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestCustomerView:
    """POST /api/v1/payments/customers/"""

    def test_creates_customer_end_to_end(self, authenticated_client, user):
        gateway = MagicMock(spec=StripeAdapter)
        gateway.create_customer.return_value = CustomerResult(
            id="cus_view", raw_response={"id": "cus_view", "object": "customer"}
        )

        with patch("payments.services.account_linker.StripeAdapter", return_value=gateway):
            response = authenticated_client.post(reverse("payments:customer"), {}, format="json")
            again = authenticated_client.post(reverse("payments:customer"), {}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["type"] == "customer"
        assert response.data["account"]["id"] == "cus_view"
        assert again.data["id"] == response.data["id"]
        assert gateway.create_customer.call_count == 1
        assert PaymentAccount.objects.filter(user=user).count() == 1

    def test_invalid_email(self, authenticated_client, linker):
        response = authenticated_client.post(
            reverse("payments:customer"), {"email": "not-an-email"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        linker.get_or_create_customer.assert_not_called()

    def test_missing_stripe_key_is_503(self, authenticated_client, linker):
        linker.get_or_create_customer.side_effect = GatewayConfigurationError(
            "STRIPE_SECRET_KEY is not configured"
        )

        response = authenticated_client.post(reverse("payments:customer"), {}, format="json")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data["error_code"] == "GATEWAY_NOT_CONFIGURED"


class TestSourceView:
    """GET/POST /api/v1/payments/sources/"""

    def test_attach_source(self, authenticated_client, linker, linked_customer, user):
        linker.attach_source.return_value = linked_customer

        response = authenticated_client.post(
            reverse("payments:sources"),
            {"source_token": "tok_visa", "card_holder_name": "Jane Doe"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        linker.attach_source.assert_called_once_with(
            user.id, source_token="tok_visa", card_holder_name="Jane Doe"
        )

    def test_attach_requires_holder_name(self, authenticated_client, linker):
        response = authenticated_client.post(
            reverse("payments:sources"), {"source_token": "tok_visa"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "card_holder_name" in response.data

    def test_declined_card_is_402(self, authenticated_client, linker):
        linker.attach_source.side_effect = GatewayCardDeclinedError(
            "Your card was declined.", decline_code="insufficient_funds"
        )

        response = authenticated_client.post(
            reverse("payments:sources"),
            {"source_token": "tok_chargeDeclined", "card_holder_name": "Jane Doe"},
            format="json",
        )

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        assert response.data["details"]["kind"] == "declined"
        assert response.data["details"]["decline_code"] == "insufficient_funds"

    def test_list_sources(self, authenticated_client, linker, transactions, linked_customer):
        linker.get_payment_account.return_value = linked_customer
        transactions.get_customer_sources.return_value = PaymentMethodPage(
            data=[{"id": "pm_1"}], has_more=True
        )

        response = authenticated_client.get(
            reverse("payments:sources"), {"limit": 1, "starting_after": "pm_0"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"data": [{"id": "pm_1"}], "has_more": True}
        transactions.get_customer_sources.assert_called_once_with(
            "cus_linked", limit=1, starting_after="pm_0"
        )

    def test_list_rejects_both_cursors(self, authenticated_client, linker):
        response = authenticated_client.get(
            reverse("payments:sources"), {"starting_after": "pm_1", "ending_before": "pm_2"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_without_linkage_is_404(self, authenticated_client, linker):
        linker.get_payment_account.side_effect = PaymentNotFoundError("No payment account")

        response = authenticated_client.get(reverse("payments:sources"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "PAYMENT_NOT_FOUND"


class TestOnboardingLinkView:
    def test_returns_url(self, authenticated_client, linker):
        linker.create_onboarding_link.return_value = AccountLinkResult(
            url="https://connect.stripe.com/setup/e/abc", expires_at=1700000000
        )

        response = authenticated_client.post(
            reverse("payments:onboarding_link"), {}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "url": "https://connect.stripe.com/setup/e/abc",
            "expires_at": 1700000000,
        }


class TestChargeViews:
    def test_create_charge(self, authenticated_client, transactions, linked_customer):
        transactions.create_charge.return_value = ChargeResult(
            id="ch_1", amount_cents=1000, currency="usd", paid=True
        )

        response = authenticated_client.post(
            reverse("payments:charges"),
            {"amount": "10.00", "customer_id": "cus_linked", "idempotency_key": "order-7"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        params = transactions.create_charge.call_args.args[0]
        assert params.amount == Decimal("10.00")
        assert params.customer_id == "cus_linked"
        assert params.idempotency_key == "order-7"

    def test_other_users_customer_is_forbidden(
        self, authenticated_client, transactions, linked_customer
    ):
        PaymentAccountFactory(account={"id": "cus_victim", "object": "customer"})

        response = authenticated_client.post(
            reverse("payments:charges"),
            {"amount": "500.00", "customer_id": "cus_victim"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert transactions.mock_calls == []

    def test_unlinked_user_cannot_name_a_customer(self, authenticated_client, transactions):
        PaymentAccountFactory(account={"id": "cus_victim", "object": "customer"})

        response = authenticated_client.post(
            reverse("payments:charges"),
            {"amount": "500.00", "customer_id": "cus_victim"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert transactions.mock_calls == []

    def test_one_off_source_needs_no_linkage(self, authenticated_client, transactions):
        transactions.create_charge.return_value = ChargeResult(
            id="ch_2", amount_cents=1000, currency="usd", paid=True
        )

        response = authenticated_client.post(
            reverse("payments:charges"),
            {"amount": "10.00", "source": "tok_visa"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_staff_may_charge_any_customer(self, staff_client, transactions):
        transactions.create_charge.return_value = ChargeResult(
            id="ch_3", amount_cents=1000, currency="usd", paid=True
        )

        response = staff_client.post(
            reverse("payments:charges"),
            {"amount": "10.00", "customer_id": "cus_anyone"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert transactions.create_charge.call_args.args[0].customer_id == "cus_anyone"

    @pytest.mark.parametrize(
        "payload",
        [{"amount": "0.00", "customer_id": "cus_1"}, {"amount": "10.00"}],
    )
    def test_invalid_charge(self, authenticated_client, transactions, payload):
        response = authenticated_client.post(reverse("payments:charges"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        transactions.create_charge.assert_not_called()

    def test_refund_charge(self, staff_client, transactions):
        transactions.create_refund.return_value = RefundResult(
            id="re_1", amount_cents=1000, currency="usd", charge_id="ch_1"
        )

        response = staff_client.post(
            reverse("payments:charge_refund", kwargs={"charge_id": "ch_1"})
        )

        assert response.status_code == status.HTTP_201_CREATED
        transactions.create_refund.assert_called_once_with("ch_1")

    def test_refund_requires_staff(self, authenticated_client, transactions):
        response = authenticated_client.post(
            reverse("payments:charge_refund", kwargs={"charge_id": "ch_someone_else"})
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert transactions.mock_calls == []


class TestTransferView:
    def test_staff_transfer(self, staff_client, transactions):
        target = uuid.uuid4()
        transactions.create_transfer.return_value = TransferResult(
            id="tr_1", amount_cents=2500, currency="usd", destination_account="acct_1"
        )

        response = staff_client.post(
            reverse("payments:transfers"),
            {"user_id": str(target), "amount": "25.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        transactions.create_transfer.assert_called_once_with(
            user_id=target, amount=Decimal("25.00")
        )

    def test_unlinked_destination_is_404(self, staff_client, transactions):
        transactions.create_transfer.side_effect = PaymentNotFoundError("No payment account")

        response = staff_client.post(
            reverse("payments:transfers"),
            {"user_id": str(uuid.uuid4()), "amount": "25.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rate_limited_is_429(self, staff_client, transactions):
        transactions.create_transfer.side_effect = GatewayRateLimitError("slow down")

        response = staff_client.post(
            reverse("payments:transfers"),
            {"user_id": str(uuid.uuid4()), "amount": "25.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data["details"]["kind"] == "rate_limited"


class TestTopUpView:
    def test_forwards_idempotency_key(self, staff_client, transactions):
        transactions.create_top_up.return_value = TopUpResult(
            id="tu_1", amount_cents=5000, currency="usd", status="pending"
        )

        response = staff_client.post(
            reverse("payments:top_ups"),
            {"amount": "50.00", "idempotency_key": "topup-2024-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        transactions.create_top_up.assert_called_once_with(
            amount=Decimal("50.00"), idempotency_key="topup-2024-01"
        )


class TestPaymentIntentViews:
    def test_create(self, authenticated_client, transactions, linked_customer):
        transactions.create_payment_intent.return_value = intent()

        response = authenticated_client.post(
            reverse("payments:payment_intents"),
            {"amount": "12.50", "currency": "usd", "customer_id": "cus_linked"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["client_secret"] == "pi_1_secret"
        transactions.create_payment_intent.assert_called_once_with(
            amount=Decimal("12.50"), currency="usd", customer_id="cus_linked"
        )

    def test_create_for_other_users_customer_is_forbidden(
        self, authenticated_client, transactions, linked_customer
    ):
        response = authenticated_client.post(
            reverse("payments:payment_intents"),
            {"amount": "12.50", "customer_id": "cus_victim"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert transactions.mock_calls == []

    @pytest.mark.parametrize("action", ["capture", "cancel", "refund"])
    def test_actions_require_staff(self, authenticated_client, transactions, action):
        response = authenticated_client.post(
            reverse(
                "payments:payment_intent_action",
                kwargs={"payment_intent_id": "pi_someone_else", "action": action},
            )
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert transactions.mock_calls == []

    def test_capture(self, staff_client, transactions):
        transactions.capture_payment_intent.return_value = intent("succeeded")

        response = staff_client.post(
            reverse(
                "payments:payment_intent_action",
                kwargs={"payment_intent_id": "pi_1", "action": "capture"},
            ),
            {"amount": "5.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "succeeded"
        transactions.capture_payment_intent.assert_called_once_with(
            "pi_1", amount=Decimal("5.00")
        )

    def test_cancel(self, staff_client, transactions):
        transactions.cancel_payment_intent.return_value = intent("canceled")

        response = staff_client.post(
            reverse(
                "payments:payment_intent_action",
                kwargs={"payment_intent_id": "pi_1", "action": "cancel"},
            )
        )

        assert response.status_code == status.HTTP_200_OK
        transactions.cancel_payment_intent.assert_called_once_with("pi_1")

    def test_invalid_state_is_400(self, staff_client, transactions):
        transactions.refund_payment_intent.side_effect = GatewayInvalidRequestError(
            "PaymentIntent has not succeeded",
            stripe_code="charge_not_refundable",
        )

        response = staff_client.post(
            reverse(
                "payments:payment_intent_action",
                kwargs={"payment_intent_id": "pi_1", "action": "refund"},
            )
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "GATEWAY_INVALID_REQUEST"

    def test_unknown_action(self, staff_client, transactions):
        response = staff_client.post(
            reverse(
                "payments:payment_intent_action",
                kwargs={"payment_intent_id": "pi_1", "action": "explode"},
            )
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["details"]["allowed"] == ["capture", "cancel", "refund"]
        assert transactions.mock_calls == []
