"""Domain value objects for signon.

Value objects are immutable and defined by their values, not identity.
They are what adapters hand back to the host application.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

TokenBundle = dict[str, Any]


class ValueObject(BaseModel):
    """Immutable model compared by value; safe to hand to host code."""

    model_config = ConfigDict(frozen=True)


class Provider(str, Enum):
    """Supported identity providers.

    Each adapter class carries one of these as its explicit provider tag.
    The value doubles as the storage namespace for the adapter's state.
    """

    TELEGRAM = "telegram"
    APPLE = "apple"


class Profile(ValueObject):
    """Normalized user profile.

    Generic structure for user info returned from any identity provider.
    Built fresh on every get_user_profile() call, never persisted.
    """

    identifier: str  # Provider-scoped unique user id
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = None
    profile_url: str | None = None

    @field_validator("identifier", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> str:
        """Accept numeric ids (Telegram) and normalize them to strings."""
        if v is None or v == "":
            raise ValueError("Profile identifier is required")
        return str(v)


class AuthAction(ValueObject):
    """Something the host application must do to continue an authentication flow."""

    pass


class AuthorizationRedirect(AuthAction):
    """Redirect the user agent to the provider's authorization endpoint."""

    url: str
