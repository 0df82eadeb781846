"""Storage infrastructure providers."""

from dishka import Scope, from_context

from signon.adapter.storage import Storage
from signon.util.di.base import ProviderBase


class StorageProvider(ProviderBase):
    """Storage component base."""

    __mock_component__ = "storage"


class ProdStorageProvider(StorageProvider):
    """Production storage provider.

    The host passes its session-backed Storage when entering the request
    scope:

        async with container(context={Storage: MappingStorage(session)}) as c:
            auth = await c.get(AuthService)
    """

    __is_mock__ = False

    storage = from_context(provides=Storage, scope=Scope.REQUEST)
