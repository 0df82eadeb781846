"""Identity token verification against a published JSON Web Key Set."""

import json
from base64 import urlsafe_b64decode
from collections.abc import Iterable, Mapping
from typing import Any

import jwt
from jwcrypto import jwk
from jwcrypto.common import JWException

from signon.adapter.error import (
    ExpiredTokenError,
    TokenVerificationError,
    UnexpectedValueError,
)

# Allowed clock skew between us and the provider, in seconds
ID_TOKEN_LEEWAY = 120


def public_key_pem(key: Mapping[str, Any]) -> bytes:
    """Convert a public JWK ({kty, n, e, ...}) to PEM."""
    return jwk.JWK(**key).export_to_pem()


def decode_id_token(
    id_token: str,
    keys: Iterable[Mapping[str, Any]],
    leeway: int = ID_TOKEN_LEEWAY,
) -> dict[str, Any]:
    """Verify an RS256 identity token with the first key that accepts it.

    Keys are tried in order. An expired token stops the search right away,
    even if later keys were never tried. Any other failure moves on to the
    next key.

    Args:
        id_token: Compact serialized JWT
        keys: JWK dicts from the provider's keys endpoint
        leeway: Clock skew tolerance for exp/iat/nbf

    Returns:
        Verified claims, or an empty dict when there are no keys

    Raises:
        ExpiredTokenError: If a key verified the signature but exp has passed
        TokenVerificationError: If no key verified the token, chained from
            the last failure
    """
    last_error: Exception | None = None

    for key in keys:
        try:
            return jwt.decode(
                id_token,
                public_key_pem(key),
                algorithms=["RS256"],
                leeway=leeway,
                # The audience is the client id and is not checked here
                options={"verify_aud": False},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError(str(e)) from e
        except (jwt.PyJWTError, JWException, ValueError, TypeError) as e:
            last_error = e

    if last_error is not None:
        raise TokenVerificationError(str(last_error)) from last_error

    return {}


def decode_unverified_payload(id_token: str) -> dict[str, Any]:
    """Decode a JWT payload without checking signature or expiry.

    Only for deployments that explicitly opt out of signature checks.

    Raises:
        UnexpectedValueError: If the token is not a decodable JWT
    """
    try:
        payload = id_token.split(".")[1]
        padding = "=" * (-len(payload) % 4)
        claims = json.loads(urlsafe_b64decode(payload + padding))
    except (IndexError, ValueError) as e:
        raise UnexpectedValueError(f"Malformed id_token payload: {e}") from e

    if not isinstance(claims, dict):
        raise UnexpectedValueError("Malformed id_token payload.")

    return claims
