"""
Webhook endpoint views for Stripe.

The view verifies the signature against the raw body, handles the event
synchronously and answers with a JSON acknowledgement.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.exceptions import BaseApplicationError

from payments.exceptions import WebhookSignatureError
from payments.webhooks.processor import WebhookProcessor


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive a Stripe webhook event.

    Security:
    - Signature verification prevents spoofed webhooks
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Returns:
        JsonResponse with status:
        - 200: {"message": "Done", "event": {...}, "handled": bool}
        - 400: Missing or invalid signature, malformed payload
        - 503: Webhook secret not configured

    Example Stripe-Signature header:
        t=1614556800,v1=xxx,v0=yyy
    """
    signature = request.headers.get("Stripe-Signature", "")

    try:
        acknowledgement = WebhookProcessor().process(request.body, signature)
    except WebhookSignatureError as e:
        logger.warning(
            "Webhook signature verification failed",
            extra={"error_code": e.error_code},
        )
        return JsonResponse(e.to_dict(), status=e.status_code)
    except BaseApplicationError as e:
        logger.error(
            f"Webhook could not be processed: {e.error_code}",
            extra={"error_code": e.error_code},
        )
        return JsonResponse(e.to_dict(), status=e.status_code)

    return JsonResponse(acknowledgement.to_dict(), status=200)
