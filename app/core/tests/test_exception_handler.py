"""
Tests for the DRF application exception handler.
"""

from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import application_exception_handler
from core.exceptions import ConflictError, NotFoundError, ValidationError


class TestApplicationExceptionHandler:
    """Application errors keep their status code and payload."""

    def test_not_found(self):
        response = application_exception_handler(
            NotFoundError("User missing", error_code="USER_NOT_FOUND"), {}
        )

        assert response.status_code == 404
        assert response.data == {"error": "User missing", "error_code": "USER_NOT_FOUND"}

    def test_details_included(self):
        response = application_exception_handler(
            ValidationError("Bad id", details={"user_id": "x"}), {}
        )

        assert response.status_code == 400
        assert response.data["details"] == {"user_id": "x"}

    def test_conflict(self):
        response = application_exception_handler(ConflictError("exists"), {})

        assert response.status_code == 409
        assert response.data["error_code"] == "CONFLICT"

    def test_drf_exceptions_use_default_handler(self):
        response = application_exception_handler(NotAuthenticated(), {})

        assert response.status_code == 401

    def test_unknown_exceptions_are_not_handled(self):
        assert application_exception_handler(RuntimeError("boom"), {}) is None
