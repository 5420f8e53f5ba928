"""
Tests for authentication app.

This package contains test modules for:
- test_managers.py: UserManager tests
- test_services.py: UserService tests (lookup, connection flag, pagination)

Usage:
    pytest authentication/tests/
"""
