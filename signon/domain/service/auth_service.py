"""Authentication domain service."""

from collections.abc import Mapping
from typing import Any, ClassVar

from signon.domain.error import NotSupportedError
from signon.domain.value.types import AuthAction, Profile, Provider, TokenBundle

from .base import Service


class OAuthAdapter:
    """Generic adapter interface for all identity providers.

    Every capability has a default body. Optional capabilities raise
    NotSupportedError so that providers only implement what they offer.
    """

    provider: ClassVar[Provider]

    async def authenticate(
        self, params: Mapping[str, Any] | None = None
    ) -> AuthAction | None:
        """Begin or finish the authentication flow.

        Args:
            params: Query/form parameters of the inbound HTTP request

        Returns:
            Action the host must perform to continue (redirect, widget),
            or None once the user is authenticated
        """
        raise NotImplementedError

    def is_connected(self) -> bool:
        """Whether a completed authentication is stored for this provider."""
        raise NotImplementedError

    def disconnect(self) -> None:
        """Forget all stored authentication state."""
        raise NotImplementedError

    def get_access_token(self) -> TokenBundle:
        """Return the stored tokens."""
        raise NotImplementedError

    def set_access_token(self, tokens: Mapping[str, Any]) -> None:
        """Replace the stored session with the given tokens."""
        raise NotImplementedError

    async def maintain_token(self) -> None:
        """Keep the stored token usable. Nothing to do by default."""
        return None

    async def get_user_profile(self) -> Profile:
        """Return the authenticated user's profile."""
        raise NotSupportedError("get_user_profile", self.provider.value)

    async def get_user_contacts(self) -> list[Profile]:
        """Return the authenticated user's contacts."""
        raise NotSupportedError("get_user_contacts", self.provider.value)

    async def get_user_pages(self) -> list[dict[str, Any]]:
        """Return the pages the authenticated user administers."""
        raise NotSupportedError("get_user_pages", self.provider.value)

    async def get_user_activity(self, stream: str) -> list[dict[str, Any]]:
        """Return the authenticated user's activity stream."""
        raise NotSupportedError("get_user_activity", self.provider.value)

    async def set_user_status(self, status: str | Mapping[str, Any]) -> Any:
        """Post a status update on behalf of the user."""
        raise NotSupportedError("set_user_status", self.provider.value)

    async def set_page_status(
        self, status: str | Mapping[str, Any], page_id: str
    ) -> Any:
        """Post a status update to a page."""
        raise NotSupportedError("set_page_status", self.provider.value)

    async def api_request(
        self,
        url: str,
        method: str = "GET",
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Make a signed request to the provider API."""
        raise NotSupportedError("api_request", self.provider.value)


class AuthService(Service):
    """Domain service for multi-provider authentication operations.

    Coordinates authentication across the configured identity providers
    (Telegram, Apple).
    """

    def __init__(self, adapters: dict[Provider, OAuthAdapter]) -> None:
        """Initialize auth service.

        Args:
            adapters: Map of provider to adapter implementation
        """
        self.adapters = adapters

    def get_adapter(self, provider: Provider) -> OAuthAdapter:
        """Look up the adapter for a provider.

        Raises:
            ValueError: If provider not configured
        """
        adapter = self.adapters.get(provider)
        if not adapter:
            raise ValueError(f"Unsupported provider: {provider}")
        return adapter

    async def authenticate(
        self, provider: Provider, params: Mapping[str, Any] | None = None
    ) -> AuthAction | None:
        """Run one step of the login flow for any provider.

        Args:
            provider: Identity provider to use
            params: Parameters of the inbound HTTP request

        Returns:
            Action for the host to perform, or None when authenticated

        Raises:
            ValueError: If provider not configured
        """
        return await self.get_adapter(provider).authenticate(params)

    async def get_user_profile(self, provider: Provider) -> Profile:
        """Fetch the normalized profile once the flow has completed.

        Raises:
            ValueError: If provider not configured
        """
        return await self.get_adapter(provider).get_user_profile()

    def connected_providers(self) -> list[Provider]:
        """Providers with a completed authentication in storage."""
        return [
            provider
            for provider, adapter in self.adapters.items()
            if adapter.is_connected()
        ]

    def disconnect(self, provider: Provider) -> None:
        """Clear stored state for one provider.

        Raises:
            ValueError: If provider not configured
        """
        self.get_adapter(provider).disconnect()
