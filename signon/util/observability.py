"""Observability configuration using Logfire.

Adapters open logfire spans around provider round trips:
- oauth2.exchange_code: authorization code exchange
- oauth2.refresh_token: refresh token grant
- apple.verify_id_token: JWKS signature verification

Call configure_logfire() once at startup to send them somewhere.
"""

import logfire

from signon.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for signon.

    Token Configuration:
    - Set SIGNON_OBSERVABILITY__LOGFIRE_TOKEN to enable cloud sending
    - Explicitly control it with SIGNON_OBSERVABILITY__SEND_TO_LOGFIRE

    Args:
        settings: Library settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs = {
        "service_name": "signon",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        providers=[p.value for p in settings.configured_providers()],
    )


def instrument_httpx() -> None:
    """Trace outbound provider requests (token, keys endpoints)."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
