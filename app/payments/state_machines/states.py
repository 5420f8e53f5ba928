"""
Provider-side state enums.

Stripe owns these lifecycles; nothing here is enforced locally. Invalid
transitions (e.g. capturing an intent that is not in requires_capture)
are rejected by Stripe and surface as GatewayInvalidRequestError.

PaymentIntent States:
    requires_payment_method → requires_confirmation → requires_capture → succeeded
    requires_confirmation → requires_action → requires_capture
    any non-terminal state → canceled
"""

from django.db import models


class PaymentIntentStatus(models.TextChoices):
    """
    Status values reported by Stripe for a PaymentIntent.

    Terminal states: SUCCEEDED, CANCELED
    """

    REQUIRES_PAYMENT_METHOD = "requires_payment_method", "Requires Payment Method"
    REQUIRES_CONFIRMATION = "requires_confirmation", "Requires Confirmation"
    REQUIRES_ACTION = "requires_action", "Requires Action"
    PROCESSING = "processing", "Processing"
    REQUIRES_CAPTURE = "requires_capture", "Requires Capture"
    SUCCEEDED = "succeeded", "Succeeded"
    CANCELED = "canceled", "Canceled"

    @classmethod
    def terminal_states(cls) -> frozenset[str]:
        return frozenset({cls.SUCCEEDED, cls.CANCELED})
