"""
Payment domain models.

- PaymentAccount: Link between a user and a Stripe customer/connected account
- PaymentAccountType: Stripe resource family of a PaymentAccount
"""

from payments.models.payment_account import PaymentAccount, PaymentAccountType

__all__ = [
    "PaymentAccount",
    "PaymentAccountType",
]
