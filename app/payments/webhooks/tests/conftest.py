"""
Pytest fixtures for webhook tests.

Events are signed with the real Stripe scheme so the adapter's
verification runs unmodified.
"""

import hashlib
import hmac
import json
import time

import pytest


@pytest.fixture
def webhook_secret(settings):
    settings.STRIPE_WEBHOOK_SECRET = "whsec_webhook_tests"
    return settings.STRIPE_WEBHOOK_SECRET


@pytest.fixture
def make_event():
    """Build a Stripe event dict."""

    def _make(
        event_type="account.external_account.created",
        account="acct_linked",
        event_id="evt_test_1",
        data_object=None,
    ):
        event = {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {
                "object": data_object
                or {"id": "ba_test_1", "object": "bank_account", "last4": "6789"}
            },
        }
        if account:
            event["account"] = account
        return event

    return _make


@pytest.fixture
def sign(webhook_secret):
    """Serialize an event and return (payload bytes, Stripe-Signature header)."""

    def _sign(event, secret=None):
        payload = json.dumps(event)
        timestamp = int(time.time())
        digest = hmac.new(
            (secret or webhook_secret).encode(),
            f"{timestamp}.{payload}".encode(),
            hashlib.sha256,
        ).hexdigest()
        return payload.encode(), f"t={timestamp},v1={digest}"

    return _sign
