"""Domain value objects for signon."""

from signon.domain.value.types import (
    AuthAction,
    AuthorizationRedirect,
    Profile,
    Provider,
    TokenBundle,
    ValueObject,
)

__all__ = [
    "AuthAction",
    "AuthorizationRedirect",
    "Profile",
    "Provider",
    "TokenBundle",
    "ValueObject",
]
