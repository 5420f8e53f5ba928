"""
URL configuration for the payment gateway service.

URL Structure:
    /                              - ReDoc API documentation
    /schema/                       - OpenAPI schema (YAML)
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /api/v1/auth/token/            - Obtain JWT pair (email + password)
    /api/v1/auth/token/refresh/    - Refresh JWT access token
    /api/v1/payments/              - Payment endpoints
        customers/                 - Get or create Stripe customer (POST)
        sources/                   - List cards (GET) / attach card (POST)
        connected-account/         - Get or create connected account (POST)
        connected-account/onboarding-link/ - Stripe onboarding URL (POST)
        charges/                   - Create charge (POST)
        charges/{id}/refund/       - Refund charge (POST)
        transfers/                 - Transfer to a linked user (POST)
        top-ups/                   - Top up platform balance (POST)
        payment-intents/           - Create PaymentIntent (POST)
        payment-intents/{id}/capture|cancel|refund/ - Lifecycle (POST)
        webhooks/stripe/           - Stripe webhook endpoint (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Payment Gateway Admin"
admin.site.site_title = "Payment Gateway"
admin.site.index_title = "Payment accounts"
