"""
Payment-specific exceptions for payment operations.

This module provides the exception hierarchy for the payments app:
domain errors raised by the linkage and transaction services, and
classified gateway errors raised by the Stripe adapter.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - No linked PaymentAccount for the operation
    ├── PaymentValidationError - Missing/malformed arguments (no side effects)
    ├── WebhookSignatureError - Webhook signature verification failed
    └── PaymentProcessingError
        └── GatewayError - Base for all classified Stripe failures
            ├── GatewayInvalidRequestError - INVALID_REQUEST (permanent)
            ├── GatewayAuthenticationError - AUTHENTICATION_FAILURE (permanent)
            ├── GatewayCardDeclinedError - DECLINED (permanent)
            ├── GatewayRateLimitError - RATE_LIMITED (transient, retry)
            ├── GatewayNetworkError - NETWORK_ERROR (transient, retry)
            ├── GatewayUnknownError - UNKNOWN
            └── GatewayConfigurationError - Stripe keys not configured

    DuplicatePaymentAccountError - Unique constraint hit on create (ConflictError)

Usage:
    from payments.exceptions import GatewayError, PaymentNotFoundError

    try:
        TransactionService().create_transfer(user_id, Decimal("10.00"))
    except PaymentNotFoundError:
        ...
    except GatewayError as e:
        if e.is_retryable:
            schedule_retry()
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    Example:
        try:
            linker.attach_source(user_id, token, "Jane Doe")
        except PaymentError as e:
            logger.error(f"Payment operation failed: {e}")
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError):
    """
    Raised when a payment entity cannot be found.

    Use for:
    - No PaymentAccount linked to the user (e.g. transfer destination)
    - A created PaymentAccount vanished between insert and re-read
    """

    default_error_code: str = "PAYMENT_NOT_FOUND"
    status_code: int = 404


class PaymentValidationError(PaymentError):
    """
    Raised when payment arguments are missing or malformed.

    Always raised before any database or Stripe call.
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"
    status_code: int = 400


class WebhookSignatureError(PaymentError):
    """
    Webhook signature could not be verified.

    Raised for a missing or malformed Stripe-Signature header, a signature
    mismatch, or a payload that is not valid JSON. No state is touched.
    """

    default_error_code: str = "WEBHOOK_SIGNATURE_INVALID"
    status_code: int = 400


class PaymentProcessingError(PaymentError):
    """Raised when payment processing fails."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"
    status_code: int = 502


# =============================================================================
# Gateway (Stripe) Exceptions
# =============================================================================


class GatewayErrorKind(str, Enum):
    """Classification of remote gateway failures."""

    INVALID_REQUEST = "invalid_request"
    AUTHENTICATION_FAILURE = "authentication_failure"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    DECLINED = "declined"
    UNKNOWN = "unknown"


class GatewayError(PaymentProcessingError):
    """
    Base exception for all classified Stripe errors.

    Attributes:
        kind: GatewayErrorKind classification
        stripe_code: Stripe's internal error code
        decline_code: Card decline code (if applicable)
        is_retryable: Whether the operation can be retried

    The adapter never retries. Callers that do must supply an
    idempotency key, otherwise a retried create can duplicate the
    remote resource.
    """

    default_error_code: str = "GATEWAY_ERROR"
    kind: GatewayErrorKind = GatewayErrorKind.UNKNOWN
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["kind"] = self.kind.value
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class GatewayInvalidRequestError(GatewayError):
    """
    Invalid request parameters sent to Stripe.

    Also covers operations the provider rejects for the resource's current
    state, e.g. capturing a PaymentIntent that is not in requires_capture.
    """

    default_error_code: str = "GATEWAY_INVALID_REQUEST"
    kind = GatewayErrorKind.INVALID_REQUEST
    status_code: int = 400


class GatewayAuthenticationError(GatewayError):
    """Stripe rejected the API key. Operational issue, never retry."""

    default_error_code: str = "GATEWAY_AUTHENTICATION_FAILED"
    kind = GatewayErrorKind.AUTHENTICATION_FAILURE


class GatewayCardDeclinedError(GatewayError):
    """
    Card was declined by the issuing bank.

    The decline_code attribute contains the specific reason
    (generic_decline, insufficient_funds, expired_card, ...).
    """

    default_error_code: str = "CARD_DECLINED"
    kind = GatewayErrorKind.DECLINED
    status_code: int = 402


class GatewayUnknownError(GatewayError):
    """Unexpected error that could not be classified."""

    default_error_code: str = "GATEWAY_UNKNOWN_ERROR"
    kind = GatewayErrorKind.UNKNOWN


class GatewayConfigurationError(GatewayError):
    """
    Stripe credentials are not configured.

    Raised lazily on the first gateway call so the process can start
    without Stripe settings.
    """

    default_error_code: str = "GATEWAY_NOT_CONFIGURED"
    kind = GatewayErrorKind.AUTHENTICATION_FAILURE
    status_code: int = 503


# -----------------------------------------------------------------------------
# Transient Errors (safe to retry with backoff)
# -----------------------------------------------------------------------------


class GatewayRateLimitError(GatewayError):
    """Rate limited by the Stripe API."""

    default_error_code: str = "GATEWAY_RATE_LIMITED"
    kind = GatewayErrorKind.RATE_LIMITED
    is_retryable: bool = True
    status_code: int = 429


class GatewayNetworkError(GatewayError):
    """
    Stripe could not be reached or answered with a server error.

    IMPORTANT: The operation may have succeeded on Stripe's side.
    Retry only with the same idempotency key.
    """

    default_error_code: str = "GATEWAY_UNAVAILABLE"
    kind = GatewayErrorKind.NETWORK_ERROR
    is_retryable: bool = True


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class DuplicatePaymentAccountError(ConflictError):
    """
    Raised by the store when a user already has a PaymentAccount.

    AccountLinker catches this and re-reads the existing row; it is never
    surfaced to AccountLinker's callers.
    """

    default_error_code: str = "PAYMENT_ACCOUNT_EXISTS"


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Payment domain
    "PaymentError",
    "PaymentNotFoundError",
    "PaymentValidationError",
    "PaymentProcessingError",
    "WebhookSignatureError",
    # Gateway
    "GatewayErrorKind",
    "GatewayError",
    "GatewayInvalidRequestError",
    "GatewayAuthenticationError",
    "GatewayCardDeclinedError",
    "GatewayUnknownError",
    "GatewayConfigurationError",
    "GatewayRateLimitError",
    "GatewayNetworkError",
    # Concurrency control
    "DuplicatePaymentAccountError",
]
