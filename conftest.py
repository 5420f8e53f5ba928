"""
Root pytest configuration for the Django project.

pytest-django loads config.test_settings (see pyproject.toml). This module
provides project-wide fixtures; app-specific fixtures live next to the app's tests.
"""

import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """A regular user with email and phone number."""
    from authentication.tests.factories import UserFactory

    return UserFactory(phone_number="+15555550100")


@pytest.fixture
def staff_user(db):
    from authentication.tests.factories import UserFactory

    return UserFactory(is_staff=True)


@pytest.fixture
def authenticated_client(api_client, user):
    """DRF test client authenticated as `user`."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
