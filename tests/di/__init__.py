"""Mock providers for testing."""

from .storage import MockStorageProvider
from .container import build_test_container

__all__ = [
    "MockStorageProvider",
    "build_test_container",
]
