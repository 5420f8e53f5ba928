"""
Tests for the PaymentAccount model.
"""

import pytest
from django.db import IntegrityError

from payments.models import PaymentAccount, PaymentAccountType
from payments.tests.factories import PaymentAccountFactory


class TestPaymentAccount:
    """Tests for PaymentAccount fields and constraints."""

    def test_external_id_follows_account_blob(self, db):
        account = PaymentAccountFactory(account={"id": "cus_abc", "object": "customer"})

        assert account.external_id == "cus_abc"

        account.account = {"id": "cus_def"}
        account.save()
        account.refresh_from_db()

        assert account.external_id == "cus_def"

    def test_missing_id_gives_empty_external_id(self, db):
        account = PaymentAccountFactory(account={})

        assert account.external_id == ""

    def test_one_account_per_user(self, linked_customer, user):
        with pytest.raises(IntegrityError):
            PaymentAccount.objects.create(
                user=user,
                type=PaymentAccountType.CONNECTED_ACCOUNT,
                account={"id": "acct_second"},
            )

    def test_type_helpers(self, db):
        customer = PaymentAccountFactory()
        connected = PaymentAccountFactory(connected=True)

        assert customer.is_customer is True
        assert customer.is_connected_account is False
        assert connected.is_connected_account is True
        assert connected.external_id.startswith("acct_")

    def test_str(self, linked_customer):
        assert str(linked_customer) == "PaymentAccount(cus_linked, customer)"
