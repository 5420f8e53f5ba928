"""
Pytest fixtures shared by all payments test packages.

Usage:
    def test_transfer(linked_connected_account, fake_gateway):
        ...
"""

from unittest.mock import MagicMock

import pytest

from payments.adapters import StripeAdapter
from payments.tests.factories import PaymentAccountFactory


@pytest.fixture
def fake_gateway():
    """StripeAdapter double; configure return values per test."""
    return MagicMock(spec=StripeAdapter)


@pytest.fixture
def linked_customer(db, user):
    """PaymentAccount linking `user` to a Stripe customer."""
    return PaymentAccountFactory(
        user=user,
        account={"id": "cus_linked", "object": "customer", "email": user.email},
    )


@pytest.fixture
def linked_connected_account(db, user):
    """PaymentAccount linking `user` to a Stripe connected account."""
    return PaymentAccountFactory(
        user=user,
        connected=True,
        account={"id": "acct_linked", "object": "account", "type": "express"},
    )
