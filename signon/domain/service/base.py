"""Base service class for domain services."""


class Service:
    """Base class for domain services.

    Services coordinate adapters; provider specific logic stays in the
    adapter layer.
    """

    pass
