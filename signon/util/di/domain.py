"""Domain DI providers."""

from dishka import Scope, provide

from signon.domain.service.auth_service import AuthService, OAuthAdapter
from signon.domain.value.types import Provider
from signon.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Domain services, one per request since adapters hold request state."""

    @provide(scope=Scope.REQUEST)
    def get_auth_service(
        self, adapters: dict[Provider, OAuthAdapter]
    ) -> AuthService:
        """Provide the multi-provider auth service."""
        return AuthService(adapters)
