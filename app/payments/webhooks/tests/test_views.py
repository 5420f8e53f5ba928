"""
Tests for the Stripe webhook endpoint.
"""

import pytest
from django.urls import reverse


@pytest.fixture
def webhook_url():
    return reverse("payments:stripe_webhook")


class TestStripeWebhookView:
    """Tests for POST /api/v1/payments/webhooks/stripe/."""

    def test_valid_event_returns_acknowledgement(
        self, client, webhook_url, linked_connected_account, user, make_event, sign
    ):
        payload, header = sign(make_event())

        response = client.post(
            webhook_url,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header,
        )

        body = response.json()
        user.refresh_from_db()
        assert response.status_code == 200
        assert body["message"] == "Done"
        assert body["handled"] is True
        assert body["event"]["type"] == "account.external_account.created"
        assert user.is_gateway_connected is True

    def test_invalid_signature_returns_400(
        self, client, webhook_url, linked_connected_account, user, make_event, sign
    ):
        payload, _ = sign(make_event())

        response = client.post(
            webhook_url,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE="t=1,v1=deadbeef",
        )

        user.refresh_from_db()
        assert response.status_code == 400
        assert response.json()["error_code"] == "WEBHOOK_SIGNATURE_INVALID"
        assert user.is_gateway_connected is False

    def test_missing_header_returns_400(self, client, webhook_url, make_event, sign):
        payload, _ = sign(make_event())

        response = client.post(webhook_url, data=payload, content_type="application/json")

        assert response.status_code == 400
        assert response.json()["error_code"] == "WEBHOOK_SIGNATURE_MISSING"

    def test_missing_secret_returns_503(self, client, webhook_url, settings, make_event, sign):
        payload, header = sign(make_event())
        settings.STRIPE_WEBHOOK_SECRET = ""

        response = client.post(
            webhook_url,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header,
        )

        assert response.status_code == 503
        assert response.json()["error_code"] == "GATEWAY_NOT_CONFIGURED"

    def test_get_not_allowed(self, client, webhook_url):
        assert client.get(webhook_url).status_code == 405

    def test_unknown_event_type(self, db, client, webhook_url, make_event, sign):
        payload, header = sign(make_event(event_type="payout.paid"))

        response = client.post(
            webhook_url,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header,
        )

        assert response.status_code == 200
        assert response.json()["handled"] is False
