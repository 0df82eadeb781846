"""Base adapter shared by every provider implementation."""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

import httpx
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from signon.adapter.error import (
    HttpClientFailureError,
    HttpRequestFailedError,
    InvalidArgumentError,
)
from signon.adapter.http import is_success
from signon.adapter.storage import DataStoreMixin, InMemoryStorage, Storage
from signon.config import ProviderConfig
from signon.domain.service.auth_service import OAuthAdapter
from signon.domain.value.types import TokenBundle

_http_url = TypeAdapter(AnyHttpUrl)


class AbstractAdapter(DataStoreMixin, OAuthAdapter):
    """Provider adapter with configuration, storage and HTTP transport.

    Construction runs the adapter lifecycle in a fixed order:
    1. Validate and keep the configuration
    2. Acquire the HTTP client, storage and logger
    3. configure() - read and check provider credentials
    4. initialize() - derive defaults from configuration and stored tokens

    Subclasses set the `provider` tag and implement configure(),
    initialize(), authenticate() and is_connected().
    """

    config_model: ClassVar[type[ProviderConfig]] = ProviderConfig

    # Fields get_access_token() may return
    token_names: ClassVar[tuple[str, ...]] = (
        "access_token",
        "access_token_secret",
        "token_type",
        "refresh_token",
        "expires_in",
        "expires_at",
    )

    # When False, non-2xx responses are handed to the caller unchecked
    validate_api_response_http_code: ClassVar[bool] = True

    api_documentation: ClassVar[str] = ""

    def __init__(
        self,
        config: ProviderConfig | Mapping[str, Any],
        storage: Storage | None = None,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the adapter.

        Args:
            config: Provider configuration (model or plain mapping)
            storage: Authentication state store (creates in-memory if None)
            http_client: Client for provider requests; when None a client is
                opened per request from config.http_options
            logger: Logger (defaults to the configured logger channel)

        Raises:
            InvalidArgumentError: If the configuration is malformed
            InvalidCredentialsError: If required credentials are missing
        """
        self.config = self._validate_config(config)
        self.callback = ""
        self.storage = storage if storage is not None else InMemoryStorage()
        self.http_client = http_client
        self.http_options = {"timeout": 10.0, **self.config.http_options}
        self.logger = logger or logging.getLogger(
            self.config.logger_channel or f"signon.adapter.{self.provider.value}"
        )

        # Parameters of the inbound request handled by authenticate()
        self.request_params: dict[str, Any] = {}

        self.configure()

        self.logger.debug(f"Initializing {type(self).__name__}")

        self.initialize()

    def configure(self) -> None:
        """Load and validate the adapter's credentials."""
        raise NotImplementedError

    def initialize(self) -> None:
        """Set up defaults derived from configuration and stored state."""
        raise NotImplementedError

    @classmethod
    def _validate_config(
        cls, config: ProviderConfig | Mapping[str, Any]
    ) -> ProviderConfig:
        if isinstance(config, cls.config_model):
            return config
        if isinstance(config, ProviderConfig):
            config = config.model_dump(exclude_unset=True)
        try:
            return cls.config_model.model_validate(config)
        except ValidationError as e:
            raise InvalidArgumentError(
                f"Invalid {cls.provider.value} configuration: {e}"
            ) from e

    def disconnect(self) -> None:
        """Forget all stored authentication state. Safe to call twice."""
        self.clear_stored_data()

    def get_access_token(self) -> TokenBundle:
        """Return the allow-listed tokens that are present in storage."""
        tokens: TokenBundle = {}

        for name in self.token_names:
            value = self.get_stored_data(name)
            if value:
                tokens[name] = value

        return tokens

    def set_access_token(self, tokens: Mapping[str, Any]) -> None:
        """Replace the stored session with the given tokens.

        Args:
            tokens: Token fields to store, as returned by get_access_token()
        """
        self.clear_stored_data()

        for name, value in tokens.items():
            self.store_data(name, value)

        # Re-derive token dependent defaults
        self.initialize()

    def set_callback(self, callback: str | None) -> None:
        """Set the URL the provider redirects back to.

        Raises:
            InvalidArgumentError: If callback is not an absolute http(s) URL
        """
        try:
            _http_url.validate_python(callback)
        except ValidationError as e:
            raise InvalidArgumentError("A valid callback url is required.") from e

        self.callback = callback or ""

    async def send_request(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Send an HTTP request to the provider.

        Transport failures (connection, timeout, TLS) are raised as
        HttpClientFailureError. Status codes are not checked here, see
        validate_api_response().
        """
        self.logger.debug(f"{method} {url}")

        try:
            if self.http_client is not None:
                return await self.http_client.request(method, url, **kwargs)

            async with httpx.AsyncClient(**self.http_options) as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"HTTP request to {url} failed: {e}")
            raise HttpClientFailureError(f"HTTP error: {e}.") from e

    def validate_api_response(self, response: httpx.Response, error: str = "") -> None:
        """Validate a provider response's status code.

        Error responses are beyond the scope of RFC 6749, so any status
        outside 2xx counts as an error.

        Args:
            response: Provider response
            error: Context prepended to the exception message

        Raises:
            HttpRequestFailedError: If the status code is not 2xx
        """
        if not self.validate_api_response_http_code:
            return

        if is_success(response):
            return

        prefix = f"{error}. " if error else ""
        self.logger.error(
            f"{prefix}Provider returned HTTP {response.status_code}: {response.text}"
        )
        raise HttpRequestFailedError(
            f"{prefix}HTTP error {response.status_code}. "
            f"Provider response: {response.text}.",
            status_code=response.status_code,
            body=response.text,
        )
