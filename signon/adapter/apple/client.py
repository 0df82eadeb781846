"""Sign in with Apple adapter.

Configuration:

    AppleAdapter({
        "callback": "https://example.com/auth/apple",
        "keys": {
            "id": "com.example.web",       # Services ID
            "team_id": "ABCDE12345",
            "key_id": "XYZ987ABCD",
            "key_file": "/run/secrets/AuthKey_XYZ987ABCD.p8",  # or key_content
        },
        "scope": "name email",
    })

Apple posts the callback (response_mode=form_post), so hand the form
fields to authenticate(). The user's name is only sent on first consent,
in the `user` form field.

See: https://developer.apple.com/documentation/sign_in_with_apple/sign_in_with_apple_rest_api
"""

import json
from typing import Any, ClassVar

import httpx
import logfire

from signon.adapter.apple.client_secret import create_client_secret
from signon.adapter.apple.jwks import decode_id_token, decode_unverified_payload
from signon.adapter.error import UnexpectedValueError
from signon.adapter.oauth2.client import OAuth2Adapter, QueryEncoding
from signon.config import AppleConfig
from signon.domain.value.types import Profile, Provider


class AppleAdapter(OAuth2Adapter):
    """Sign in with Apple (OpenID Connect) adapter.

    Stored state: the OAuth 2.0 tokens plus id_token.
    """

    provider: ClassVar[Provider] = Provider.APPLE

    config_model: ClassVar[type[AppleConfig]] = AppleConfig

    token_names: ClassVar[tuple[str, ...]] = (
        "access_token",
        "id_token",
        "access_token_secret",
        "token_type",
        "refresh_token",
        "expires_in",
        "expires_at",
    )

    api_documentation: ClassVar[str] = (
        "https://developer.apple.com/documentation/sign_in_with_apple"
    )

    scope = "name email"
    api_base_url = "https://appleid.apple.com/auth/"
    authorize_url = "https://appleid.apple.com/auth/authorize"
    access_token_url = "https://appleid.apple.com/auth/token"

    # Apple requires %20 rather than + for spaces in query parameters
    authorize_url_encoding = QueryEncoding.RFC3986

    config: AppleConfig

    def configure(self) -> None:
        """Sign the client secret, then load the OAuth 2.0 configuration.

        Raises:
            InvalidCredentialsError: If team_id, id, key_id or the private
                key is missing or unusable
        """
        secret = create_client_secret(self.config.keys)

        self.config = self.config.model_copy(
            update={"keys": self.config.keys.model_copy(update={"secret": secret})}
        )

        super().configure()

    def initialize(self) -> None:
        super().initialize()

        # The callback is delivered as a POST
        self.authorize_url_parameters["response_mode"] = "form_post"

    def validate_access_token_exchange(
        self, response: httpx.Response
    ) -> dict[str, Any]:
        data = super().validate_access_token_exchange(response)

        self.store_data("id_token", data.get("id_token"))

        return data

    async def get_user_profile(self) -> Profile:
        """Build the profile from the stored identity token.

        The token is verified against Apple's published keys unless
        verify_token_signature is turned off.

        Raises:
            UnexpectedValueError: If no id_token is stored or it has no sub
            ExpiredTokenError: If the token has expired
            TokenVerificationError: If no published key verifies the token
            HttpClientFailureError, HttpRequestFailedError: If the keys
                cannot be fetched
        """
        id_token = self.get_stored_data("id_token")
        if not id_token:
            raise UnexpectedValueError("Missing id_token.")

        if not self.config.verify_token_signature:
            payload = decode_unverified_payload(id_token)
        else:
            payload = await self.verify_id_token(id_token)

        if "sub" not in payload:
            raise UnexpectedValueError("Missing token payload.")

        self.store_data("expires_at", payload.get("exp"))

        profile: dict[str, Any] = {
            "identifier": payload["sub"],
            "email": payload.get("email"),
        }
        profile.update(self._parse_user_name())

        return Profile(**profile)

    async def verify_id_token(self, id_token: str) -> dict[str, Any]:
        """Fetch Apple's JSON Web Key Set and verify the token with it.

        Keys are fetched on every call; Apple rotates them without notice.
        """
        jwks = await self.api_request("keys")

        keys = jwks.get("keys", []) if isinstance(jwks, dict) else []

        with logfire.span("apple.verify_id_token", key_count=len(keys)):
            try:
                return decode_id_token(id_token, keys)
            except Exception as e:
                logfire.error("Apple id_token verification failed", error=str(e))
                raise

    def _parse_user_name(self) -> dict[str, str]:
        """Read the name Apple sends with the first authorization only."""
        raw_user = self.request_params.get("user")
        if not raw_user:
            return {}

        try:
            user = json.loads(raw_user) if isinstance(raw_user, str) else raw_user
        except ValueError:
            self.logger.warning("Ignoring malformed Apple user payload")
            return {}

        if not isinstance(user, dict) or not user:
            return {}

        name = user.get("name")
        if not isinstance(name, dict):
            return {}

        first_name = name.get("firstName")
        last_name = name.get("lastName")

        fields = {"first_name": first_name, "last_name": last_name}
        display_name = " ".join(part for part in (first_name, last_name) if part)
        if display_name:
            fields["display_name"] = display_name

        return {k: v for k, v in fields.items() if v}
