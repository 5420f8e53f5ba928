# Generated manually - PaymentAccount linkage table

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentAccount",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("connected_account", "Connected Account"),
                            ("customer", "Customer"),
                        ],
                        db_index=True,
                        help_text="Stripe resource family of the linked account",
                        max_length=32,
                    ),
                ),
                (
                    "account",
                    models.JSONField(
                        default=dict,
                        help_text="Stripe resource representation (always includes 'id')",
                    ),
                ),
                (
                    "external_id",
                    models.CharField(
                        db_index=True,
                        help_text="Stripe resource ID (cus_xxx or acct_xxx)",
                        max_length=255,
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        help_text="User this payment account belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_account",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment Account",
                "verbose_name_plural": "Payment Accounts",
                "ordering": ["-created_at"],
            },
        ),
    ]
