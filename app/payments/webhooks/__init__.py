"""
Webhook handling for events from Stripe.

Webhooks are verified and handled synchronously; handlers are looked up
in a registry keyed by event type.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_webhook, register_handler
from payments.webhooks.processor import WebhookAcknowledgement, WebhookProcessor
from payments.webhooks.views import stripe_webhook

__all__ = [
    "WebhookAcknowledgement",
    "WebhookProcessor",
    "dispatch_webhook",
    "register_handler",
    "stripe_webhook",
]
