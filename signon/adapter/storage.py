"""Authentication state storage.

Authentication flows span multiple HTTP requests (redirect -> callback),
so adapters keep their state in a store that outlives the adapter
instance. The host application decides where that store lives, usually
the web session.
"""

from collections.abc import MutableMapping
from typing import Any, Protocol

from signon.domain.value.types import Provider


class Storage(Protocol):
    """Protocol for key-value storage of authentication state.

    Implementations must give read-after-write consistency within a
    request; adapters do no locking of their own.
    """

    def get(self, key: str) -> Any:
        """Return the value stored under key, or None."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...

    def delete_match(self, prefix: str) -> None:
        """Remove every key starting with prefix."""
        ...


class MappingStorage:
    """Storage backed by any mutable mapping.

    Pass the web framework's session dict to persist state across the
    redirect round trip.

    Attributes:
        _data: Underlying mapping
    """

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self._data = data

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def delete_match(self, prefix: str) -> None:
        for key in [k for k in self._data if k.startswith(prefix)]:
            del self._data[key]


class InMemoryStorage(MappingStorage):
    """Process-local storage.

    Only suitable for tests and single-process scripts: state does not
    survive a restart and is not shared between workers.
    """

    def __init__(self) -> None:
        super().__init__({})


class DataStoreMixin:
    """Provider-scoped access to a Storage.

    Keys are namespaced as "<provider>.<name>" so several adapters can
    share one session.
    """

    provider: Provider
    storage: Storage

    def _storage_key(self, name: str) -> str:
        return f"{self.provider.value}.{name}"

    def store_data(self, name: str, value: Any) -> None:
        self.storage.set(self._storage_key(name), value)

    def get_stored_data(self, name: str) -> Any:
        return self.storage.get(self._storage_key(name))

    def delete_stored_data(self, name: str) -> None:
        self.storage.delete(self._storage_key(name))

    def clear_stored_data(self) -> None:
        """Remove everything stored for this provider."""
        self.storage.delete_match(f"{self.provider.value}.")
