"""Sign in with Apple client secret generation.

Apple does not issue a static client secret. Instead the client signs a
short JWT with the private key downloaded from the developer portal:

    header:  {"alg": "ES256", "kid": <key id>}
    claims:  {"iss": <team id>, "iat": now, "exp": now + 180 days,
              "aud": "https://appleid.apple.com", "sub": <client id>}

See: https://developer.apple.com/documentation/accountorganizationaldatasharing/creating-a-client-secret
"""

import time
from pathlib import Path

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from signon.adapter.error import InvalidCredentialsError
from signon.config import ProviderKeys

APPLE_AUDIENCE = "https://appleid.apple.com"

# Apple rejects secrets valid for more than six months
CLIENT_SECRET_LIFETIME = 86400 * 180


def load_private_key(keys: ProviderKeys) -> ec.EllipticCurvePrivateKey:
    """Load the ES256 signing key from inline content or a key file.

    Args:
        keys: Provider keys carrying key_content or key_file

    Returns:
        Parsed P-256 private key

    Raises:
        InvalidCredentialsError: If no key is configured, the file is
            missing or unreadable, or the content is not an EC private key
            in PEM format
    """
    key_content = keys.key_content

    if not key_content:
        if not keys.key_file:
            raise InvalidCredentialsError(
                "Missing parameter key_content or key_file: "
                "your key is required to generate the JWS token."
            )

        key_path = Path(keys.key_file)
        if not key_path.is_file():
            raise InvalidCredentialsError(f"Your key file {keys.key_file} does not exist.")

        try:
            key_content = key_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidCredentialsError(
                f"Your key file {keys.key_file} could not be read: {e}"
            ) from e

    try:
        private_key = serialization.load_pem_private_key(
            key_content.encode("utf-8"), password=None
        )
    except (ValueError, TypeError) as e:
        raise InvalidCredentialsError(
            f"Your key could not be loaded as a PEM private key: {e}"
        ) from e

    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise InvalidCredentialsError("Your key must be an EC (P-256) private key.")

    return private_key


def create_client_secret(keys: ProviderKeys, now: int | None = None) -> str:
    """Sign a client secret JWT for the token endpoint.

    Args:
        keys: team_id, id (or key), key_id and the private key source
        now: Issue time as unix seconds (defaults to time.time())

    Returns:
        Compact serialized ES256 JWS

    Raises:
        InvalidCredentialsError: Naming the first missing or invalid field
    """
    # 10-character Team ID
    team_id = keys.team_id
    if not team_id:
        raise InvalidCredentialsError(
            "Missing parameter team_id: your team id is required to generate the JWS token."
        )

    # Services ID, e.g. com.example.web
    client_id = keys.id or keys.key
    if not client_id:
        raise InvalidCredentialsError(
            "Missing parameter id: your client id is required to generate the JWS token."
        )

    # 10-character Key ID from the developer portal
    key_id = keys.key_id
    if not key_id:
        raise InvalidCredentialsError(
            "Missing parameter key_id: your key id is required to generate the JWS token."
        )

    private_key = load_private_key(keys)

    if now is None:
        now = int(time.time())

    claims = {
        "iat": now,
        "exp": now + CLIENT_SECRET_LIFETIME,
        "iss": team_id,
        "aud": APPLE_AUDIENCE,
        "sub": client_id,
    }

    return jwt.encode(claims, private_key, algorithm="ES256", headers={"kid": key_id})
