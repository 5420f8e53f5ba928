"""
Verification and dispatch of inbound Stripe webhooks.

Events are verified against the raw request body, then handled
synchronously. Nothing is mutated when verification fails.

Usage:
    from payments.webhooks.processor import WebhookProcessor

    ack = WebhookProcessor().process(request.body, request.headers["Stripe-Signature"])
    return JsonResponse(ack.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from authentication.services import UserService
from core.services import BaseService

from payments.adapters import StripeAdapter
from payments.services import PaymentAccountStore
from payments.webhooks.handlers import HandlerContext, dispatch_webhook

if TYPE_CHECKING:
    from typing import Any


@dataclass
class WebhookAcknowledgement:
    """
    Response body returned to Stripe.

    Attributes:
        event: The verified event as delivered
        handled: Whether a handler is registered for the event type
        updated: Whether the handler changed local state; not part of
            the response body
    """

    event: dict[str, Any] = field(default_factory=dict)
    handled: bool = False
    updated: bool = False
    message: str = "Done"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "event": self.event, "handled": self.handled}


class WebhookProcessor(BaseService):
    """
    Verify a webhook delivery and run its handler.

    Collaborators:
        gateway: StripeAdapter (signature verification only)
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

    def process(self, payload: bytes, signature: str) -> WebhookAcknowledgement:
        """
        Args:
            payload: Raw request body, exactly as received
            signature: Stripe-Signature header value

        Raises:
            WebhookSignatureError: Missing/invalid signature or payload
            GatewayConfigurationError: No webhook secret configured
        """
        event = self.gateway.verify_webhook_signature(payload, signature)

        self.get_logger().info(
            f"Received Stripe webhook: {event.type}",
            extra={
                "stripe_event_id": event.id,
                "event_type": event.type,
                "account_id": event.account,
            },
        )

        result = dispatch_webhook(
            event,
            HandlerContext(store=self.store, users=self.users),
        )
        if result is None:
            return WebhookAcknowledgement(event=event.raw)

        updated = bool((result.data or {}).get("updated"))
        self.get_logger().info(
            f"Handled Stripe webhook: {event.type}",
            extra={"stripe_event_id": event.id, "updated": updated},
        )
        return WebhookAcknowledgement(event=event.raw, handled=True, updated=updated)
