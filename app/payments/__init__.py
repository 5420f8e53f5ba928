"""
Payments app for Stripe integration.

This app handles:
- Linking users to Stripe customers (payers) and connected accounts (payees)
- Attaching cards and listing saved payment methods
- Charges, refunds, transfers, top-ups and the PaymentIntent lifecycle
- Stripe webhook verification and handling

Related apps:
    - authentication: User model and UserService

Usage:
    from payments.services import AccountLinker, TransactionService

    account = AccountLinker().get_or_create_customer(user.id)
    intent = TransactionService().create_payment_intent(
        Decimal("12.50"), "usd", account.external_id
    )
"""
