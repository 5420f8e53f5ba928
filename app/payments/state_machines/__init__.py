"""
State enums for resources whose lifecycle is owned by Stripe.
"""

from payments.state_machines.states import PaymentIntentStatus

__all__ = [
    "PaymentIntentStatus",
]
