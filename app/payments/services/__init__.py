"""
Payment services.

This module provides:
- PaymentAccountStore: Persistence of user <-> Stripe linkage rows
- AccountLinker: Idempotent get-or-create of customers and connected accounts
- TransactionService: Charges, refunds, transfers, top-ups, PaymentIntents

Usage:
    from payments.services import AccountLinker, TransactionService

    account = AccountLinker().get_or_create_customer(user.id)
    TransactionService().create_transfer(user.id, Decimal("10.00"))
"""

from payments.services.account_linker import AccountLinker, ProvisioningSummary
from payments.services.account_store import PaymentAccountStore
from payments.services.transactions import TransactionService

__all__ = [
    "AccountLinker",
    "PaymentAccountStore",
    "ProvisioningSummary",
    "TransactionService",
]
