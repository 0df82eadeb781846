"""Generic OAuth 2.0 adapter."""

from .client import OAuth2Adapter, QueryEncoding

__all__ = ["OAuth2Adapter", "QueryEncoding"]
