"""
PaymentAccount model linking a user to a Stripe resource.

A PaymentAccount is the local record of "which Stripe object belongs to
this user". The Stripe object is either a Customer (payer, holds cards)
or a Connected Account (payee, receives transfers).

Usage:
    from payments.models import PaymentAccount, PaymentAccountType

    account = PaymentAccount.objects.create(
        user=user,
        type=PaymentAccountType.CUSTOMER,
        account={"id": "cus_123", "email": "user@example.com"},
    )
    account.external_id  # "cus_123"

Invariant:
    At most one PaymentAccount per user. The user field is a OneToOneField,
    so a concurrent second insert fails with IntegrityError at the database.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


class PaymentAccountType(models.TextChoices):
    """
    Stripe API family that owns PaymentAccount.account["id"].

    CONNECTED_ACCOUNT: Stripe Connect account (acct_xxx)
    CUSTOMER: Stripe Customer (cus_xxx)
    """

    CONNECTED_ACCOUNT = "connected_account", "Connected Account"
    CUSTOMER = "customer", "Customer"


class PaymentAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    Links a user to their Stripe customer or connected account.

    Fields:
        user: OneToOne link to the user (uniqueness enforced by the database)
        type: Which Stripe resource family the account blob belongs to
        account: Stripe resource representation; always contains "id",
            plus provider fields and local-only fields such as
            card_holder_name
        external_id: Indexed copy of account["id"] for webhook lookups

    Note:
        The account blob is merged, never replaced wholesale. Use
        payments.merge.merge_external_resource to compute new values.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payment_account",
        help_text="User this payment account belongs to",
    )

    type = models.CharField(
        max_length=32,
        choices=PaymentAccountType.choices,
        db_index=True,
        help_text="Stripe resource family of the linked account",
    )

    account = models.JSONField(
        default=dict,
        help_text="Stripe resource representation (always includes 'id')",
    )

    external_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Stripe resource ID (cus_xxx or acct_xxx)",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment Account"
        verbose_name_plural = "Payment Accounts"

    def __str__(self) -> str:
        return f"PaymentAccount({self.external_id}, {self.type})"

    def save(self, *args, **kwargs):
        """Keep external_id in sync with the account blob."""
        self.external_id = str((self.account or {}).get("id") or "")
        super().save(*args, **kwargs)

    @property
    def is_customer(self) -> bool:
        return self.type == PaymentAccountType.CUSTOMER

    @property
    def is_connected_account(self) -> bool:
        return self.type == PaymentAccountType.CONNECTED_ACCOUNT
