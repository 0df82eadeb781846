"""Domain services."""

from .auth_service import AuthService, OAuthAdapter
from .base import Service

__all__ = [
    "AuthService",
    "OAuthAdapter",
    "Service",
]
