"""
Payments app configuration.

This app links users to Stripe customers and connected accounts, moves
money through Stripe and ingests Stripe webhooks.
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        # Populate the webhook handler registry
        from payments.webhooks import handlers  # noqa: F401
