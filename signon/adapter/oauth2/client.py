"""Generic OAuth 2.0 authorization code grant engine.

Implements RFC 6749 section 4.1 for providers to plug into:

    UNAUTHENTICATED --authenticate()--> AWAITING_CALLBACK
    AWAITING_CALLBACK --authenticate(code)--> AUTHENTICATED

Providers subclass OAuth2Adapter, set their endpoints and override the
extension points (initialize, validate_access_token_exchange,
get_user_profile) where their protocol differs.
"""

import secrets
import time
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote, quote_plus, urlencode

import httpx
import logfire

from signon.adapter.base import AbstractAdapter
from signon.adapter.error import (
    AuthorizationDeniedError,
    InvalidAccessTokenError,
    InvalidAuthorizationCodeError,
    InvalidAuthorizationStateError,
    InvalidCredentialsError,
)
from signon.adapter.http import parse_response_body
from signon.adapter.oauth2.pkce import generate_pkce_pair
from signon.config import ProviderEndpoints
from signon.domain.value.types import AuthorizationRedirect


class QueryEncoding(str, Enum):
    """How spaces and reserved characters are encoded in the authorize URL."""

    RFC1738 = "rfc1738"  # Spaces as "+"
    RFC3986 = "rfc3986"  # Spaces as "%20"


class OAuth2Adapter(AbstractAdapter):
    """Base class for OAuth 2.0 providers.

    Stored state: access_token, token_type, refresh_token, expires_in,
    expires_at, plus authorization_state and code_verifier while the user is
    away at the provider.
    """

    # Provider endpoints, overridable per instance via config.endpoints
    api_base_url: str = ""
    authorize_url: str = ""
    access_token_url: str = ""

    # Default scope when the config does not set one
    scope: str = ""

    authorize_url_encoding: QueryEncoding = QueryEncoding.RFC1738

    # Send and check a random state parameter (CSRF protection)
    supports_request_state: bool = True

    token_exchange_method: str = "POST"
    token_refresh_method: str = "POST"

    def configure(self) -> None:
        """Read client credentials, scope, callback and endpoint overrides.

        Raises:
            InvalidCredentialsError: If client id or secret is missing
            InvalidArgumentError: If the callback is not a valid URL
        """
        keys = self.config.keys
        self.client_id = keys.id or keys.key
        self.client_secret = keys.secret

        if not self.client_id or not self.client_secret:
            raise InvalidCredentialsError(
                f"Your application id is required in order to connect to {self.provider.value}"
            )

        self.scope = self.config.scope or self.scope

        self.set_callback(self.config.callback)
        self.set_api_endpoints(self.config.endpoints)

    def initialize(self) -> None:
        """Build request defaults from credentials and stored tokens."""
        self.authorize_url_parameters: dict[str, str] = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.callback,
            "scope": self.scope,
        }

        self.token_exchange_parameters: dict[str, str] = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "redirect_uri": self.callback,
        }
        self.token_exchange_headers: dict[str, str] = {}

        self.token_refresh_parameters: dict[str, str] = {}
        self.token_refresh_headers: dict[str, str] = {}

        refresh_token = self.get_stored_data("refresh_token")
        if refresh_token:
            self.token_refresh_parameters = {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            }

        self.api_request_parameters: dict[str, Any] = {}
        self.api_request_headers: dict[str, str] = {}

        access_token = self.get_stored_data("access_token")
        if access_token:
            self.api_request_headers["Authorization"] = f"Bearer {access_token}"

    def set_api_endpoints(self, endpoints: ProviderEndpoints | None) -> None:
        """Override the class default endpoints with configured ones."""
        if endpoints is None:
            return

        self.api_base_url = endpoints.api_base_url or self.api_base_url
        self.authorize_url = endpoints.authorize_url or self.authorize_url
        self.access_token_url = endpoints.access_token_url or self.access_token_url

    async def authenticate(
        self, params: Mapping[str, Any] | None = None
    ) -> AuthorizationRedirect | None:
        """Run one step of the authorization code flow.

        Without a `code` parameter this begins the flow and returns the
        redirect to the provider. With one it finishes the flow: checks the
        state, exchanges the code and stores the tokens.

        Args:
            params: Query/form parameters of the inbound request

        Returns:
            Redirect to the authorization endpoint, or None when done

        Raises:
            AuthorizationDeniedError: If the user declined
            InvalidAuthorizationCodeError: If the provider reported an error
            InvalidAuthorizationStateError: If the state does not match
            InvalidAccessTokenError: If no access token was issued
            HttpClientFailureError, HttpRequestFailedError: On transport errors
        """
        self.request_params = dict(params or {})

        self.logger.info(f"{type(self).__name__}.authenticate()")

        if self.is_connected():
            return None

        try:
            self.authenticate_check_error()

            code = self.request_params.get("code")
            if not code:
                return self.authenticate_begin()

            await self.authenticate_finish(code)
        except Exception as e:
            self.logger.error(
                f"{self.provider.value} authentication failed: {e}", exc_info=True
            )
            self.clear_stored_data()
            raise

        return None

    def authenticate_check_error(self) -> None:
        """Raise if the provider redirected back with an error."""
        error = self.request_params.get("error")
        if not error:
            return

        details = " ".join(
            str(part)
            for part in (
                error,
                self.request_params.get("error_description"),
                self.request_params.get("error_uri"),
            )
            if part
        )
        message = f"Provider returned an error: {details}"

        if error == "access_denied":
            raise AuthorizationDeniedError(message)

        raise InvalidAuthorizationCodeError(message)

    def authenticate_begin(self) -> AuthorizationRedirect:
        url = self.get_authorize_url()

        self.logger.debug(
            f"{type(self).__name__}.authenticate_begin(), redirecting user to: {url}"
        )

        return AuthorizationRedirect(url=url)

    async def authenticate_finish(self, code: str) -> None:
        self.logger.debug(
            f"{type(self).__name__}.authenticate_finish(), callback url: {self.callback}"
        )

        state = self.request_params.get("state")
        expected_state = self.get_stored_data("authorization_state")

        if self.supports_request_state and (
            not expected_state or expected_state != state
        ):
            self.delete_stored_data("authorization_state")
            raise InvalidAuthorizationStateError(
                f"The authorization state [state={str(state)[:100]}] of this page "
                "is either invalid or has already been consumed."
            )

        response = await self.exchange_code_for_access_token(code)

        self.validate_access_token_exchange(response)

        self.initialize()

    def get_authorize_url(self, parameters: Mapping[str, str] | None = None) -> str:
        """Build the authorization URL.

        Parameters are merged in order: adapter defaults, configured
        authorize_url_parameters, then the given parameters.
        """
        params = {
            **self.authorize_url_parameters,
            **self.config.authorize_url_parameters,
            **(parameters or {}),
        }

        if self.supports_request_state:
            if "state" not in params:
                params["state"] = secrets.token_hex(20)
            self.store_data("authorization_state", params["state"])

        if self.config.pkce:
            verifier, challenge = generate_pkce_pair()
            self.store_data("code_verifier", verifier)
            params["code_challenge"] = challenge
            params["code_challenge_method"] = "S256"

        quote_via = (
            quote
            if self.authorize_url_encoding is QueryEncoding.RFC3986
            else quote_plus
        )

        return f"{self.authorize_url}?{urlencode(params, quote_via=quote_via)}"

    async def exchange_code_for_access_token(self, code: str) -> httpx.Response:
        """Exchange the authorization code at the token endpoint.

        Raises:
            HttpClientFailureError, HttpRequestFailedError: On HTTP failure
        """
        parameters = {**self.token_exchange_parameters, "code": code}

        code_verifier = self.get_stored_data("code_verifier")
        if code_verifier:
            parameters["code_verifier"] = code_verifier

        with logfire.span(
            "oauth2.exchange_code",
            provider=self.provider.value,
            url=self.access_token_url,
        ):
            response = await self.send_request(
                self.token_exchange_method,
                self.access_token_url,
                headers=self.token_exchange_headers,
                **self._payload(self.token_exchange_method, parameters),
            )

        self.validate_api_response(
            response, "Unable to exchange code for API access token"
        )

        return response

    def validate_access_token_exchange(
        self, response: httpx.Response
    ) -> dict[str, Any]:
        """Parse the token response and store its tokens.

        Extension point: providers override this to keep extra fields.

        Returns:
            Parsed token response

        Raises:
            InvalidAccessTokenError: If the response has no access_token
        """
        data = self._parse_token_response(response)

        self.store_data("access_token", data["access_token"])
        self.store_data("token_type", data.get("token_type"))
        self._store_refresh_and_expiry(data)

        self.delete_stored_data("authorization_state")
        self.delete_stored_data("code_verifier")

        self.initialize()

        return data

    def is_connected(self) -> bool:
        return (
            bool(self.get_stored_data("access_token"))
            and not self.has_access_token_expired()
        )

    def has_access_token_expired(self) -> bool:
        """Whether the stored expiry time has passed.

        Tokens without a known expiry are treated as valid.
        """
        expires_at = self.get_stored_data("expires_at")
        if not expires_at:
            return False

        return int(expires_at) <= time.time()

    def is_refresh_token_available(self) -> bool:
        return bool(self.token_refresh_parameters.get("refresh_token"))

    async def refresh_access_token(
        self, parameters: Mapping[str, str] | None = None
    ) -> httpx.Response | None:
        """Obtain a new access token with the stored refresh token.

        Args:
            parameters: Replacement refresh request parameters

        Returns:
            Token endpoint response, or None when no refresh token is stored
        """
        if parameters:
            self.token_refresh_parameters = dict(parameters)

        if not self.is_refresh_token_available():
            return None

        with logfire.span("oauth2.refresh_token", provider=self.provider.value):
            response = await self.send_request(
                self.token_refresh_method,
                self.access_token_url,
                headers=self.token_refresh_headers,
                **self._payload(
                    self.token_refresh_method, self.token_refresh_parameters
                ),
            )

        self.validate_api_response(response, "Unable to refresh the access token")

        self.validate_refresh_access_token(response)

        return response

    def validate_refresh_access_token(self, response: httpx.Response) -> dict[str, Any]:
        data = self._parse_token_response(response)

        self.store_data("access_token", data["access_token"])
        self._store_refresh_and_expiry(data)

        self.initialize()

        return data

    async def maintain_token(self) -> None:
        """Refresh the access token once it has expired."""
        if self.has_access_token_expired():
            await self.refresh_access_token()

    async def api_request(
        self,
        url: str,
        method: str = "GET",
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Make a signed request to the provider API.

        Args:
            url: Absolute URL, or a path relative to api_base_url
            method: HTTP method
            parameters: Query parameters (GET/DELETE) or form fields
            headers: Extra headers

        Returns:
            Parsed response body

        Raises:
            HttpClientFailureError, HttpRequestFailedError: On HTTP failure
        """
        if not url.startswith(("http://", "https://")):
            url = f"{self.api_base_url.rstrip('/')}/{url.lstrip('/')}"

        await self.maintain_token()

        parameters = {**self.api_request_parameters, **(parameters or {})}
        headers = {**self.api_request_headers, **(headers or {})}

        response = await self.send_request(
            method, url, headers=headers, **self._payload(method, parameters)
        )

        self.validate_api_response(
            response, f"Signed API request to {url} has returned an error"
        )

        return parse_response_body(response.text)

    def _parse_token_response(self, response: httpx.Response) -> dict[str, Any]:
        data = parse_response_body(response.text)

        if not isinstance(data, dict) or not data.get("access_token"):
            raise InvalidAccessTokenError(
                f"Provider returned no access_token: {response.text}"
            )

        return data

    def _store_refresh_and_expiry(self, data: Mapping[str, Any]) -> None:
        if data.get("refresh_token"):
            self.store_data("refresh_token", data["refresh_token"])

        if data.get("expires_in") is not None:
            expires_in = int(data["expires_in"])
            self.store_data("expires_in", expires_in)
            self.store_data("expires_at", int(time.time()) + expires_in)

    @staticmethod
    def _payload(method: str, parameters: Mapping[str, Any]) -> dict[str, Any]:
        if method.upper() in ("GET", "DELETE"):
            return {"params": dict(parameters)}
        return {"data": dict(parameters)}
