"""Adapter infrastructure providers."""

from dishka import Scope, provide

from signon.adapter.registry import create_adapters
from signon.adapter.storage import Storage
from signon.config import Settings
from signon.domain.service.auth_service import OAuthAdapter
from signon.domain.value.types import Provider
from signon.util.di.base import ProviderBase


class AdapterProvider(ProviderBase):
    """Provider that builds an adapter for each configured identity provider."""

    @provide(scope=Scope.REQUEST)
    def get_adapters(
        self, settings: Settings, storage: Storage
    ) -> dict[Provider, OAuthAdapter]:
        """Provide dictionary of adapters by provider.

        Adapters are built per request so they share the request's storage.

        Raises:
            InvalidCredentialsError: If a configured provider lacks credentials
        """
        return dict(create_adapters(settings, storage))
