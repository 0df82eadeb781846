"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """A provider section is missing from the settings."""

    pass


class DependencyInjectionError(UtilError):
    """No DI provider implementation matches the requested component."""

    pass
