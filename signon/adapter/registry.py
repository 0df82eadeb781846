"""Adapter lookup by provider tag."""

import httpx

from signon.adapter.apple.client import AppleAdapter
from signon.adapter.base import AbstractAdapter
from signon.adapter.storage import Storage
from signon.adapter.telegram.client import TelegramAdapter
from signon.config import Settings
from signon.domain.value.types import Provider

ADAPTER_CLASSES: dict[Provider, type[AbstractAdapter]] = {
    Provider.TELEGRAM: TelegramAdapter,
    Provider.APPLE: AppleAdapter,
}


def create_adapter(
    provider: Provider,
    settings: Settings,
    storage: Storage,
    http_client: httpx.AsyncClient | None = None,
) -> AbstractAdapter:
    """Construct the adapter for a configured provider.

    Raises:
        ConfigurationError: If the provider has no settings section
        InvalidCredentialsError: If its credentials are incomplete
    """
    return ADAPTER_CLASSES[provider](
        settings.provider_config(provider), storage=storage, http_client=http_client
    )


def create_adapters(
    settings: Settings,
    storage: Storage,
    http_client: httpx.AsyncClient | None = None,
) -> dict[Provider, AbstractAdapter]:
    """Construct adapters for every configured provider, sharing one storage."""
    return {
        provider: create_adapter(provider, settings, storage, http_client)
        for provider in settings.configured_providers()
    }
