"""
User services consumed by the payments app.

The payments layer never touches the User model directly. It goes
through this narrow interface:
- find_by_id: resolve a user before provisioning a gateway resource
- set_gateway_connected: flip the connection flag from webhook handlers
- list_users: page through users for bulk customer provisioning

Related files:
    - models.py: User
    - payments/services/account_linker.py: main consumer
    - payments/webhooks/handlers.py: connection flag updates
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.exceptions import NotFoundError, ValidationError
from core.helpers import calculate_pagination, validate_uuid

if TYPE_CHECKING:
    from uuid import UUID

    from authentication.models import User

logger = logging.getLogger(__name__)


class UserService:
    """
    Read/update access to users for other apps.

    Usage:
        users = UserService()
        user = users.find_by_id(user_id)
        users.set_gateway_connected(user.id, True)
        page, pagination = users.list_users(page=1, page_size=100)
    """

    def _get_model(self):
        from authentication.models import User

        return User

    def find_by_id(self, user_id: UUID | str) -> User:
        """
        Get a user by primary key.

        Raises:
            ValidationError: user_id is missing or not a UUID
            NotFoundError: No user with that id
        """
        if not validate_uuid(user_id):
            raise ValidationError(
                "Please enter a valid user id",
                error_code="INVALID_USER_ID",
                details={"user_id": str(user_id)},
            )

        user = self._get_model().objects.filter(id=user_id).first()
        if not user:
            raise NotFoundError(
                f"User {user_id} not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": str(user_id)},
            )
        return user

    def set_gateway_connected(self, user_id: UUID | str, connected: bool = True) -> int:
        """
        Set the user's is_gateway_connected flag.

        Uses a single UPDATE so redelivered webhooks are harmless.

        Returns:
            Number of rows updated (0 or 1)
        """
        updated = (
            self._get_model()
            .objects.filter(id=user_id)
            .update(is_gateway_connected=connected)
        )
        if not updated:
            logger.warning(
                "Gateway connection flag not updated, user missing",
                extra={"user_id": str(user_id)},
            )
        else:
            logger.info(
                "Gateway connection flag updated",
                extra={"user_id": str(user_id), "is_gateway_connected": connected},
            )
        return updated

    def list_users(self, page: int = 1, page_size: int = 100) -> tuple[list[User], dict]:
        """
        Return one page of users ordered by join date (oldest first).

        Args:
            page: 1-indexed page number
            page_size: Number of users per page

        Returns:
            Tuple of (users on the page, pagination metadata)
        """
        queryset = self._get_model().objects.order_by("date_joined", "id")
        pagination = calculate_pagination(queryset.count(), page, page_size)
        if page > pagination["total_pages"]:
            return [], pagination

        offset = (pagination["page"] - 1) * page_size
        return list(queryset[offset : offset + page_size]), pagination
