"""
Authentication models.

This module defines the User model consumed by the payments app.
Only the fields the gateway linkage needs are modelled here:
- email / phone_number: forwarded when creating gateway customers
- is_gateway_connected: flipped by the Stripe webhook processor once a
  connected account has a payout destination

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: UserService (lookup, connection flag, pagination)
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from authentication.managers import UserManager


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        id: UUID primary key
        email: Primary identifier, unique, used for login
        phone_number: Optional contact number forwarded to Stripe
        is_gateway_connected: Whether the user's Stripe connected account
            has an external (payout) account attached
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword'
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    phone_number = models.CharField(
        max_length=32,
        blank=True,
        default="",
        help_text="User's phone number in E.164 format",
    )

    is_gateway_connected = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the user's Stripe connected account can receive payouts",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email
