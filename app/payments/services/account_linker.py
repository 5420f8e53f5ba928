"""
Idempotent linkage of users to Stripe customers and connected accounts.

AccountLinker is the entry point for anything that needs "the Stripe
object for this user". Every operation is lookup-first: when a
PaymentAccount already exists it is returned without calling Stripe.

Creation flow:
    1. Validate arguments (no side effects on failure)
    2. Look up the user's PaymentAccount, return it if present
    3. Resolve the user (NotFoundError if missing)
    4. Create the Stripe resource with a deterministic idempotency key
    5. Persist; on a unique violation re-read and return the winner's row

A Stripe resource created by a request that then loses the insert race
is not deleted. The deterministic idempotency key makes both racers
receive the same Stripe object while Stripe's idempotency window lasts.

Usage:
    from payments.services import AccountLinker

    linker = AccountLinker()
    account = linker.get_or_create_customer(user.id)
    account = linker.attach_source(user.id, "tok_visa", "Jane Doe")
    link = linker.create_onboarding_link(user.id)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.conf import settings

from authentication.services import UserService
from core.exceptions import NotFoundError
from core.helpers import validate_uuid
from core.services import BaseService

from payments.adapters import (
    AccountLinkResult,
    CreateConnectedAccountParams,
    CreateCustomerParams,
    IdempotencyKeyGenerator,
    StripeAdapter,
)
from payments.exceptions import (
    DuplicatePaymentAccountError,
    GatewayError,
    PaymentNotFoundError,
    PaymentValidationError,
)
from payments.merge import merge_external_resource
from payments.models import PaymentAccount, PaymentAccountType
from payments.services.account_store import PaymentAccountStore

if TYPE_CHECKING:
    from typing import Any


DEFAULT_ONBOARDING_REFRESH_URL = "https://app.page.link/stripefailed"
DEFAULT_ONBOARDING_RETURN_URL = "https://app.page.link/stripesuccess"


@dataclass
class ProvisioningSummary:
    """
    Outcome of a bulk provisioning run.

    Attributes:
        created: Users that received a new Stripe customer
        skipped: Users that were already linked
        failed: Users whose Stripe call failed
        failures: user_id -> error code for each failure
    """

    created: int = 0
    skipped: int = 0
    failed: int = 0
    failures: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "skipped": self.skipped,
            "failed": self.failed,
            "failures": self.failures,
        }


def _validate_user_id(user_id: Any) -> None:
    if not user_id or not validate_uuid(user_id):
        raise PaymentValidationError(
            "Please enter a valid user id",
            error_code="INVALID_USER_ID",
            details={"user_id": str(user_id)},
        )


def _validate_required(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PaymentValidationError(
            f"{name} is required",
            details={"field": name},
        )


class AccountLinker(BaseService):
    """
    Get-or-create linkage between users and Stripe resources.

    Collaborators are injected so tests can substitute doubles:
        gateway: StripeAdapter
        store: PaymentAccountStore
        users: UserService
    """

    def __init__(
        self,
        gateway: StripeAdapter | None = None,
        store: PaymentAccountStore | None = None,
        users: UserService | None = None,
    ):
        self.gateway = gateway or StripeAdapter()
        self.store = store or PaymentAccountStore()
        self.users = users or UserService()

    # =========================================================================
    # Get-or-create
    # =========================================================================

    def get_or_create_customer(
        self,
        user_id: uuid.UUID | str,
        email: str | None = None,
        phone: str | None = None,
    ) -> PaymentAccount:
        """
        Return the user's PaymentAccount, creating a Stripe Customer if none exists.

        An existing linkage of any type is returned as-is.

        Args:
            user_id: Local user id
            email: Customer email (defaults to the user's email)
            phone: Customer phone (defaults to the user's phone number)

        Raises:
            PaymentValidationError: user_id is not a valid id
            NotFoundError: No such user
            GatewayError: Stripe rejected or failed the create
        """
        _validate_user_id(user_id)

        existing = self.store.get_by_user(user_id)
        if existing is not None:
            return existing

        user = self.users.find_by_id(user_id)
        customer = self.gateway.create_customer(
            CreateCustomerParams(
                email=email or user.email or None,
                phone=phone or user.phone_number or None,
                metadata={"user_id": str(user.id)},
                idempotency_key=IdempotencyKeyGenerator.generate(
                    operation="create_customer",
                    entity_id=user.id,
                ),
            )
        )
        return self._persist(user.id, PaymentAccountType.CUSTOMER, customer.raw_response)

    def get_or_create_connected_account(
        self,
        user_id: uuid.UUID | str,
        email: str | None = None,
    ) -> PaymentAccount:
        """
        Return the user's PaymentAccount, creating a Stripe Connect account if none exists.

        The account requests the card_payments and transfers capabilities.

        Raises:
            PaymentValidationError: user_id is not a valid id
            NotFoundError: No such user
            GatewayError: Stripe rejected or failed the create
        """
        _validate_user_id(user_id)

        existing = self.store.get_by_user(user_id)
        if existing is not None:
            return existing

        user = self.users.find_by_id(user_id)
        account = self.gateway.create_connected_account(
            CreateConnectedAccountParams(
                email=email or user.email or None,
                kind=getattr(settings, "STRIPE_CONNECT_ACCOUNT_TYPE", "express"),
                country=getattr(settings, "STRIPE_CONNECT_COUNTRY", "US"),
                metadata={"user_id": str(user.id)},
                idempotency_key=IdempotencyKeyGenerator.generate(
                    operation="create_connected_account",
                    entity_id=user.id,
                ),
            )
        )
        return self._persist(
            user.id, PaymentAccountType.CONNECTED_ACCOUNT, account.raw_response
        )

    def _persist(
        self,
        user_id: uuid.UUID,
        account_type: str,
        resource: dict[str, Any],
    ) -> PaymentAccount:
        try:
            return self.store.create(user_id, account_type, resource)
        except DuplicatePaymentAccountError:
            winner = self.store.get_by_user(user_id)
            if winner is None:
                raise PaymentNotFoundError(
                    "Payment account disappeared after a concurrent create",
                    details={"user_id": str(user_id)},
                )
            self.get_logger().info(
                "Concurrent PaymentAccount create resolved to existing row",
                extra={
                    "user_id": str(user_id),
                    "external_id": winner.external_id,
                    "discarded_external_id": resource.get("id"),
                },
            )
            return winner

    # =========================================================================
    # Sources
    # =========================================================================

    def attach_source(
        self,
        user_id: uuid.UUID | str,
        source_token: str,
        card_holder_name: str,
        email: str | None = None,
        phone: str | None = None,
    ) -> PaymentAccount:
        """
        Attach a card to the user's Stripe customer.

        Creates the customer first when the user has no linkage. The card
        summary is stored under account["card"] and card_holder_name is
        kept alongside it; previously stored fields are preserved.

        Raises:
            PaymentValidationError: missing user_id, source_token or card_holder_name
            GatewayError: Stripe rejected the source
        """
        _validate_user_id(user_id)
        _validate_required(source_token, "source_token")
        _validate_required(card_holder_name, "card_holder_name")

        payment_account = self.get_or_create_customer(user_id, email=email, phone=phone)
        source = self.gateway.attach_source(payment_account.external_id, source_token)

        merged = merge_external_resource(
            payment_account.account,
            {"card": source.raw_response},
            {"card_holder_name": card_holder_name},
        )
        payment_account = self.store.update_account(payment_account, merged)

        self.get_logger().info(
            "Attached source to payment account",
            extra={
                "user_id": str(user_id),
                "external_id": payment_account.external_id,
                "source_id": source.id,
            },
        )
        return payment_account

    # =========================================================================
    # Connected account onboarding
    # =========================================================================

    def create_onboarding_link(
        self,
        user_id: uuid.UUID | str,
        email: str | None = None,
        account_id: str | None = None,
        refresh_url: str | None = None,
        return_url: str | None = None,
    ) -> AccountLinkResult:
        """
        Create a Stripe onboarding link for the user's connected account.

        When account_id is omitted the connected account is resolved or
        created first.

        Raises:
            PaymentValidationError: the user's linkage is a customer, not a
                connected account
        """
        _validate_user_id(user_id)

        if not account_id:
            payment_account = self.get_or_create_connected_account(user_id, email=email)
            if not payment_account.is_connected_account:
                raise PaymentValidationError(
                    "User is linked to a customer, not a connected account",
                    error_code="NOT_A_CONNECTED_ACCOUNT",
                    details={
                        "user_id": str(user_id),
                        "type": payment_account.type,
                    },
                )
            account_id = payment_account.external_id

        return self.gateway.create_onboarding_link(
            account_id,
            refresh_url=refresh_url
            or getattr(settings, "STRIPE_CONNECT_REFRESH_URL", "")
            or DEFAULT_ONBOARDING_REFRESH_URL,
            return_url=return_url
            or getattr(settings, "STRIPE_CONNECT_RETURN_URL", "")
            or DEFAULT_ONBOARDING_RETURN_URL,
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_payment_account(self, user_id: uuid.UUID | str) -> PaymentAccount:
        """
        Raises:
            PaymentNotFoundError: the user has no linkage
        """
        _validate_user_id(user_id)
        payment_account = self.store.get_by_user(user_id)
        if payment_account is None:
            raise PaymentNotFoundError(
                "No payment account linked to this user",
                details={"user_id": str(user_id)},
            )
        return payment_account

    # =========================================================================
    # Bulk provisioning
    # =========================================================================

    def provision_customers(self, page_size: int = 100) -> ProvisioningSummary:
        """
        Ensure every user has a PaymentAccount.

        Already linked users are skipped without calling Stripe. A Stripe
        failure for one user is logged and counted; the run continues.
        """
        summary = ProvisioningSummary()
        page = 1

        while True:
            users, pagination = self.users.list_users(page=page, page_size=page_size)
            for user in users:
                if self.store.get_by_user(user.id) is not None:
                    summary.skipped += 1
                    continue
                try:
                    self.get_or_create_customer(user.id)
                except GatewayError as e:
                    summary.failed += 1
                    summary.failures[str(user.id)] = e.error_code
                    self.get_logger().warning(
                        "Customer provisioning failed",
                        extra={
                            "user_id": str(user.id),
                            "error_code": e.error_code,
                            "kind": e.kind.value,
                        },
                    )
                except (NotFoundError, PaymentNotFoundError) as e:
                    # user deleted after the page was read
                    summary.failed += 1
                    summary.failures[str(user.id)] = e.error_code
                    self.get_logger().warning(
                        "Customer provisioning skipped missing user",
                        extra={"user_id": str(user.id), "error_code": e.error_code},
                    )
                else:
                    summary.created += 1

            if not pagination["has_next"]:
                break
            page += 1

        self.get_logger().info(
            "Customer provisioning finished",
            extra={
                "created_count": summary.created,
                "skipped_count": summary.skipped,
                "failed_count": summary.failed,
            },
        )
        return summary
