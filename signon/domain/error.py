"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotSupportedError(DomainError):
    """Raised when a capability is invoked on an adapter that does not implement it.

    Always safe to catch and treat as "feature unavailable".
    """

    def __init__(self, capability: str, provider: str):
        self.capability = capability
        self.provider = provider
        super().__init__(f"Provider {provider} does not support {capability}")
