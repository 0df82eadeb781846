"""Logging configuration for hosts embedding signon."""

import logging
import sys

from signon.config import Settings

# Chatty below WARNING; adapters already log each provider request
QUIET_LOGGERS = ("httpx", "httpcore")


def adapter_channels(settings: Settings) -> list[str]:
    """Logger names the configured adapters write to.

    An adapter logs to its config's logger_channel, or to
    "signon.adapter.<provider>" when none is set.
    """
    channels = ["signon"]

    for provider in settings.configured_providers():
        config = settings.provider_config(provider)
        channels.append(config.logger_channel or f"signon.adapter.{provider.value}")

    return channels


def setup_logging(settings: Settings) -> None:
    """Configure stdout logging for signon and its HTTP stack.

    Args:
        settings: Library settings; debug switches every adapter channel
            to DEBUG
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    channels = adapter_channels(settings)
    for channel in channels:
        logging.getLogger(channel).setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"channels={', '.join(channels)}"
    )
