"""
Payment admin configuration.

PaymentAccount rows are created by AccountLinker only; the admin is
read-only so the account blob and external_id never drift apart.
"""

from django.contrib import admin

from payments.models import PaymentAccount


@admin.register(PaymentAccount)
class PaymentAccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for PaymentAccount.

    Provides visibility into which Stripe object each user is linked to.
    """

    list_display = [
        "id",
        "user",
        "type",
        "external_id",
        "card_holder_name",
        "created_at",
    ]
    list_filter = ["type", "created_at"]
    search_fields = ["id", "external_id", "user__email"]
    readonly_fields = ["id", "user", "type", "account", "external_id", "created_at", "updated_at"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "user", "type", "external_id"),
            },
        ),
        (
            "Stripe resource",
            {
                "fields": ("account",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Card holder")
    def card_holder_name(self, obj: PaymentAccount) -> str:
        return (obj.account or {}).get("card_holder_name", "")

    def has_add_permission(self, request) -> bool:
        return False
