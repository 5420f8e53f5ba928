"""
Persistence of PaymentAccount linkage rows.

The store is the only code that reads or writes PaymentAccount. The
one-to-one constraint on PaymentAccount.user enforces a single linkage
per user; a losing concurrent insert surfaces as
DuplicatePaymentAccountError so the caller can re-read the winner's row.

Usage:
    from payments.services import PaymentAccountStore

    store = PaymentAccountStore()
    account = store.get_by_user(user_id)
    if account is None:
        account = store.create(user_id, PaymentAccountType.CUSTOMER, {"id": "cus_1"})
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import IntegrityError

from core.services import BaseService

from payments.exceptions import DuplicatePaymentAccountError
from payments.models import PaymentAccount

if TYPE_CHECKING:
    from typing import Any


class PaymentAccountStore(BaseService):
    """Read/write access to PaymentAccount rows."""

    def get_by_user(self, user_id: uuid.UUID | str) -> PaymentAccount | None:
        """Return the user's PaymentAccount of any type, or None."""
        return (
            PaymentAccount.objects.select_related("user")
            .filter(user_id=user_id)
            .first()
        )

    def get_by_external_id(self, external_id: str) -> PaymentAccount | None:
        """Return the PaymentAccount whose Stripe id is external_id, or None."""
        if not external_id:
            return None
        return (
            PaymentAccount.objects.select_related("user")
            .filter(external_id=external_id)
            .first()
        )

    def create(
        self,
        user_id: uuid.UUID | str,
        account_type: str,
        account: dict[str, Any],
    ) -> PaymentAccount:
        """
        Insert a new PaymentAccount.

        The insert runs in its own savepoint so a unique violation leaves
        any enclosing transaction usable.

        Raises:
            DuplicatePaymentAccountError: the user already has a PaymentAccount
        """
        try:
            with self.atomic():
                payment_account = PaymentAccount.objects.create(
                    user_id=user_id,
                    type=account_type,
                    account=account,
                )
        except IntegrityError as e:
            self.get_logger().info(
                "PaymentAccount already exists for user",
                extra={"user_id": str(user_id), "type": account_type},
            )
            raise DuplicatePaymentAccountError(
                "User already has a payment account",
                details={"user_id": str(user_id), "error": str(e)},
            )

        self.get_logger().info(
            "Created PaymentAccount",
            extra={
                "payment_account_id": str(payment_account.id),
                "user_id": str(user_id),
                "type": account_type,
                "external_id": payment_account.external_id,
            },
        )
        return payment_account

    def update_account(
        self,
        payment_account: PaymentAccount,
        account: dict[str, Any],
    ) -> PaymentAccount:
        """Replace the stored blob on an existing row (callers merge first)."""
        payment_account.account = account
        payment_account.save(update_fields=["account", "external_id", "updated_at"])
        return payment_account
