"""Infrastructure DI providers."""

from signon.util.di.infrastructure.adapter import AdapterProvider
from signon.util.di.infrastructure.storage import ProdStorageProvider, StorageProvider

__all__ = [
    "AdapterProvider",
    "ProdStorageProvider",
    "StorageProvider",
]
