"""
Tests for the payments app.

Service tests live beside their packages:
- adapters/tests: StripeAdapter (Stripe SDK patched)
- services/tests: PaymentAccountStore, AccountLinker, TransactionService
- webhooks/tests: WebhookProcessor, handlers, webhook view

This package holds model, merge, task and API view tests.
"""
