"""
Celery tasks for payment account maintenance.

This module provides administrative background tasks:
- Bulk provisioning of Stripe customers for users without a linkage
- Bulk deletion of Stripe customers (test/sandbox cleanup only)

Usage:
    from payments.tasks import provision_gateway_customers

    provision_gateway_customers.delay(page_size=100)
"""

from __future__ import annotations

import logging

from celery import shared_task

from payments.exceptions import GatewayError, GatewayNetworkError, GatewayRateLimitError

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MAX_CLEANUP_RETRIES = 3


# =============================================================================
# Provisioning Tasks
# =============================================================================


@shared_task(acks_late=True)
def provision_gateway_customers(page_size: int = 100) -> dict:
    """
    Create a Stripe customer for every user that has no PaymentAccount.

    Safe to run repeatedly: linked users are skipped and customer creates
    use deterministic idempotency keys.

    Args:
        page_size: Number of users loaded per page

    Returns:
        Dict with created/skipped/failed counts and per-user failures
    """
    from payments.services import AccountLinker

    logger.info("Starting customer provisioning", extra={"page_size": page_size})
    summary = AccountLinker().provision_customers(page_size=page_size)
    return summary.to_dict()


@shared_task(
    autoretry_for=(GatewayNetworkError, GatewayRateLimitError),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": MAX_CLEANUP_RETRIES},
    acks_late=True,
)
def delete_gateway_customers(limit: int = 100) -> dict:
    """
    Delete up to `limit` of the most recent Stripe customers.

    Administrative cleanup for sandbox accounts; never part of the normal
    flow. Local PaymentAccount rows are left untouched.

    Args:
        limit: Maximum number of customers to delete (Stripe caps at 100)

    Returns:
        Dict with deleted/failed counts
    """
    from payments.adapters import StripeAdapter

    gateway = StripeAdapter()
    deleted = 0
    failed = 0

    for customer in gateway.list_customers(limit=limit):
        try:
            result = gateway.delete_customer(customer.id)
        except GatewayError as e:
            failed += 1
            logger.warning(
                "Failed to delete Stripe customer",
                extra={"customer_id": customer.id, "error_code": e.error_code},
            )
            continue
        if result.deleted:
            deleted += 1

    logger.info(
        "Stripe customer cleanup finished",
        extra={"deleted_count": deleted, "failed_count": failed},
    )
    return {"deleted": deleted, "failed": failed}
