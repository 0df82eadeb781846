"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Components the test container can swap for a mock
Component = Literal["storage"]


class ProviderBase(Provider):
    """dishka provider carrying mock-selection metadata.

    A provider with subclasses is a mockable component: one subclass is the
    production implementation, another (in tests/di) the mock.

    Attributes:
        __mock_component__: Component name (None for concrete providers)
        __is_mock__: Whether this is a mock implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        return bool(cls.__subclasses__())

    @classmethod
    def implementation(cls, use_mock: bool) -> type["ProviderBase"] | None:
        """Subclass whose __is_mock__ equals use_mock, if any."""
        return next(
            (c for c in cls.__subclasses__() if c.__is_mock__ == use_mock),
            None,
        )
