"""Library configuration."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from signon.domain.value.types import Provider
from signon.util.error import ConfigurationError


class ProviderKeys(BaseModel):
    """Application credentials issued by the provider.

    Which fields are required depends on the provider:
    - Telegram: id (bot name), secret (bot token)
    - Apple: id (services id), team_id, key_id, key_content or key_file
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str | None = None
    key: str | None = None  # Alias some providers use for the client id
    secret: str | None = None
    team_id: str | None = None
    key_id: str | None = None
    key_file: str | None = None
    key_content: str | None = None


class ProviderEndpoints(BaseModel):
    """Overrides for the provider's API endpoints."""

    model_config = ConfigDict(frozen=True)

    api_base_url: str | None = None
    authorize_url: str | None = None
    access_token_url: str | None = None


class ProviderConfig(BaseModel):
    """Per-adapter configuration.

    Immutable once the adapter is constructed. Adapters that need to derive
    values (Apple's client secret) replace it with an updated copy.

    Unknown keys are rejected. The hybridauth style names (curl_options,
    curlOptions, authorizeUrlParameters, loggerChannel) are accepted as
    aliases.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    keys: ProviderKeys = ProviderKeys()

    # URL the provider redirects back to
    callback: str | None = None

    # Space separated; falls back to the adapter default when unset
    scope: str | None = None

    # Keyword arguments for httpx.AsyncClient (timeout, proxy, verify, headers)
    http_options: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("http_options", "curl_options", "curlOptions"),
    )

    # Extra query parameters appended to the authorization URL
    authorize_url_parameters: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "authorize_url_parameters", "authorizeUrlParameters"
        ),
    )

    endpoints: ProviderEndpoints | None = None

    # Telegram widget nonce
    nonce: str | None = None

    # Logger name; defaults to signon.adapter.<provider>
    logger_channel: str | None = Field(
        default=None,
        validation_alias=AliasChoices("logger_channel", "loggerChannel"),
    )

    # Send a PKCE S256 challenge with the authorization request
    pkce: bool = False


class AppleConfig(ProviderConfig):
    """Sign in with Apple configuration."""

    # When False the id_token payload is decoded without checking its
    # signature or expiry.
    verify_token_signature: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "verify_token_signature", "verifyTokenSignature"
        ),
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via SIGNON_OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Library settings.

    Provider sections are optional; only configured providers get an
    adapter. Set environment variables to configure:

        SIGNON_TELEGRAM__KEYS__ID=mybot
        SIGNON_TELEGRAM__KEYS__SECRET=123456:ABC...
        SIGNON_TELEGRAM__CALLBACK=https://example.com/auth/telegram

        SIGNON_APPLE__KEYS__ID=com.example.web
        SIGNON_APPLE__KEYS__TEAM_ID=ABCDE12345
        SIGNON_APPLE__KEYS__KEY_ID=XYZ987
        SIGNON_APPLE__KEYS__KEY_FILE=/run/secrets/AuthKey.p8
        SIGNON_APPLE__CALLBACK=https://example.com/auth/apple
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNON_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows SIGNON_APPLE__KEYS__ID syntax
        extra="ignore",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    telegram: ProviderConfig | None = None
    apple: AppleConfig | None = None

    observability: ObservabilitySettings = ObservabilitySettings()

    def provider_config(self, provider: Provider) -> ProviderConfig:
        """Return the configuration section for a provider.

        Raises:
            ConfigurationError: If the provider is not configured
        """
        config = getattr(self, provider.value, None)
        if config is None:
            raise ConfigurationError(f"Provider {provider.value} is not configured")
        return config

    def configured_providers(self) -> list[Provider]:
        """Providers that have a configuration section."""
        return [p for p in Provider if getattr(self, p.value, None) is not None]
