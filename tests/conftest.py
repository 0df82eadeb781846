"""Test configuration and fixtures."""

import time
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwcrypto import jwk

from signon.adapter.telegram.widget import build_data_check_string, compute_hash

BOT_TOKEN = "123456:AAH-test-bot-token"
BOT_NAME = "examplebot"

APPLE_CLIENT_ID = "com.example.web"
APPLE_TEAM_ID = "ABCDE12345"
APPLE_KEY_ID = "XYZ987ABCD"


def sign_telegram_params(
    params: dict[str, Any], bot_token: str = BOT_TOKEN
) -> dict[str, Any]:
    """Add the hash Telegram would compute for these widget fields.

    Mimics the widget redirect for testing purposes.
    """
    signed = dict(params)
    signed["hash"] = compute_hash(build_data_check_string(params), bot_token)
    return signed


def telegram_login_params(**overrides: Any) -> dict[str, Any]:
    """Signed widget redirect parameters for a user who just logged in."""
    params = {
        "id": "42",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "username": "ada",
        "photo_url": "https://t.me/i/userpic/320/ada.jpg",
        "auth_date": str(int(time.time())),
    }
    params.update(overrides)
    return sign_telegram_params({k: v for k, v in params.items() if v is not None})


def public_jwk(private_key: rsa.RSAPrivateKey, kid: str) -> dict[str, Any]:
    """Public JWK as published on a provider's keys endpoint."""
    data = jwk.JWK.from_pyca(private_key.public_key()).export_public(as_dict=True)
    data.update({"kid": kid, "use": "sig", "alg": "RS256"})
    return data


def make_id_token(
    private_key: rsa.RSAPrivateKey, kid: str = "apple-key-1", **claims: Any
) -> str:
    """Sign an identity token the way Apple does."""
    now = int(time.time())
    payload = {
        "iss": "https://appleid.apple.com",
        "aud": APPLE_CLIENT_ID,
        "iat": now,
        "exp": now + 600,
        "sub": "001234.abcdef.1234",
        "email": "ada@privaterelay.appleid.com",
    }
    payload.update(claims)
    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})


@pytest.fixture(scope="session")
def apple_private_key_pem() -> str:
    """P-256 key in the PKCS#8 PEM format Apple's .p8 downloads use."""
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Key standing in for Apple's identity token signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key() -> rsa.RSAPrivateKey:
    """A second, unrelated signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def telegram_config() -> dict[str, Any]:
    return {
        "callback": "https://example.com/auth/telegram",
        "keys": {"id": BOT_NAME, "secret": BOT_TOKEN},
    }


@pytest.fixture
def apple_keys(apple_private_key_pem: str) -> dict[str, Any]:
    return {
        "id": APPLE_CLIENT_ID,
        "team_id": APPLE_TEAM_ID,
        "key_id": APPLE_KEY_ID,
        "key_content": apple_private_key_pem,
    }


@pytest.fixture
def apple_config(apple_keys: dict[str, Any]) -> dict[str, Any]:
    return {
        "callback": "https://example.com/auth/apple",
        "keys": apple_keys,
    }
