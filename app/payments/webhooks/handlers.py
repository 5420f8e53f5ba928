"""
Webhook event handlers for Stripe events.

This module provides a handler registry and implementations for
processing Stripe webhook events. Handlers receive a verified
GatewayEvent plus the collaborators they may touch; they never call
Stripe.

Handlers must be idempotent: Stripe redelivers events, and the same
event can arrive any number of times.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    @register_handler("custom.event")
    def handle_custom_event(event, context) -> ServiceResult:
        ...

    result = dispatch_webhook(event, context)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from core.services import ServiceResult

if TYPE_CHECKING:
    from authentication.services import UserService

    from payments.adapters import GatewayEvent
    from payments.services import PaymentAccountStore


logger = logging.getLogger(__name__)


@dataclass
class HandlerContext:
    """Collaborators available to webhook handlers."""

    store: PaymentAccountStore
    users: UserService


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[GatewayEvent, HandlerContext], ServiceResult]] = {}


def register_handler(event_type: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        event_type: The Stripe event type (e.g., "account.external_account.created")
    """

    def decorator(
        func: Callable[[GatewayEvent, HandlerContext], ServiceResult],
    ) -> Callable:
        WEBHOOK_HANDLERS[event_type] = func
        logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(event: GatewayEvent, context: HandlerContext) -> ServiceResult | None:
    """
    Dispatch a webhook event to the appropriate handler.

    Returns:
        The handler's ServiceResult, or None when no handler is registered
        for the event type (the event is acknowledged and ignored)
    """
    handler = WEBHOOK_HANDLERS.get(event.type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {event.type}",
            extra={"stripe_event_id": event.id},
        )
        return None

    logger.info(
        f"Dispatching {event.type} to handler",
        extra={"stripe_event_id": event.id},
    )
    return handler(event, context)


# =============================================================================
# Connected Account Handlers
# =============================================================================


@register_handler("account.external_account.created")
def handle_external_account_created(
    event: GatewayEvent,
    context: HandlerContext,
) -> ServiceResult:
    """
    A bank account or card was added to a connected account.

    Marks the owning user as gateway-connected. Events for accounts with
    no local PaymentAccount (not linked yet, or another platform's) are
    ignored.
    """
    account_id = event.account
    if not account_id:
        logger.warning(
            "account.external_account.created without account id",
            extra={"stripe_event_id": event.id},
        )
        return ServiceResult.success({"updated": False})

    payment_account = context.store.get_by_external_id(account_id)
    if payment_account is None:
        logger.info(
            "No PaymentAccount for connected account, ignoring",
            extra={"stripe_event_id": event.id, "account_id": account_id},
        )
        return ServiceResult.success({"updated": False})

    context.users.set_gateway_connected(payment_account.user_id, True)
    return ServiceResult.success(
        {"updated": True, "user_id": str(payment_account.user_id)}
    )
