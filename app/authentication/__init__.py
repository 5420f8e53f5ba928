"""
Authentication application.

Owns the User model. The payments app consumes users only through
UserService: find by id, update the gateway-connected flag, and list
users page by page.

Usage:
    from authentication.models import User
    from authentication.services import UserService
"""
