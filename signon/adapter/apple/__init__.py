"""Sign in with Apple adapter."""

from .client import AppleAdapter

__all__ = ["AppleAdapter"]
