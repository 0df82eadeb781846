"""Mock storage providers for testing."""

from dishka import Scope, provide

from signon.adapter.storage import InMemoryStorage, Storage
from signon.util.di.infrastructure.storage import StorageProvider


class MockStorageProvider(StorageProvider):
    """Mock storage provider using in-memory storage.

    Uses REQUEST scope to ensure test isolation - each test gets fresh storage.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_storage(self) -> Storage:
        """Provide in-memory storage."""
        return InMemoryStorage()
