"""
URL configuration for the payments app.

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
See payments/views.py for the endpoint reference.
"""

from django.urls import path

from payments import views
from payments.webhooks.views import stripe_webhook

app_name = "payments"

urlpatterns = [
    # Account linkage
    path("customers/", views.CustomerView.as_view(), name="customer"),
    path("sources/", views.SourceView.as_view(), name="sources"),
    path(
        "connected-account/",
        views.ConnectedAccountView.as_view(),
        name="connected_account",
    ),
    path(
        "connected-account/onboarding-link/",
        views.OnboardingLinkView.as_view(),
        name="onboarding_link",
    ),
    # Money movement
    path("charges/", views.ChargeView.as_view(), name="charges"),
    path(
        "charges/<str:charge_id>/refund/",
        views.ChargeRefundView.as_view(),
        name="charge_refund",
    ),
    path("transfers/", views.TransferView.as_view(), name="transfers"),
    path("top-ups/", views.TopUpView.as_view(), name="top_ups"),
    path("payment-intents/", views.PaymentIntentView.as_view(), name="payment_intents"),
    path(
        "payment-intents/<str:payment_intent_id>/<str:action>/",
        views.PaymentIntentActionView.as_view(),
        name="payment_intent_action",
    ),
    # Webhook endpoints
    path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
]
