"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from signon.config import Settings
from signon.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings provider, loaded from SIGNON_* environment variables and .env."""

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide library settings from environment."""
        return Settings()
