"""Dependency injection module."""

from typing import Type

from signon.util.di.base import Component, ProviderBase
from signon.util.di.core import ProdConfigProvider
from signon.util.di.domain import ProdDomainProvider
from signon.util.di.infrastructure import (
    AdapterProvider,
    ProdStorageProvider,
    StorageProvider,
)
from signon.util.error import DependencyInjectionError

PROVIDERS: list[Type[ProviderBase]] = [
    # Concrete providers
    ProdConfigProvider,
    ProdDomainProvider,
    AdapterProvider,
    # Mockable components
    StorageProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider entry to the class to instantiate.

    Concrete providers (no subclasses) are returned unchanged. For a
    mockable component the subclass matching use_mock is returned.

    Args:
        base: Entry from PROVIDERS
        use_mock: Whether to pick the mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If the component has no such implementation
    """
    if not base.is_mockable():
        return base

    impl = base.implementation(use_mock)
    if impl is None:
        kind = "mock" if use_mock else "production"
        component_name = base.__mock_component__ or base.__name__
        raise DependencyInjectionError(
            f"No {kind} implementation for {component_name}"
        )

    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "AdapterProvider",
    "StorageProvider",
    "ProdStorageProvider",
]
