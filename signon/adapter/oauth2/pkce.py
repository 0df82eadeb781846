"""PKCE (Proof Key for Code Exchange, RFC 7636) helpers."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256


def generate_pkce_pair() -> tuple[str, str]:
    """Generate a PKCE verifier and its S256 challenge.

    The challenge goes out with the authorization request; the verifier is
    kept in storage until the code is exchanged.

    Returns:
        Tuple of (verifier, challenge), both unpadded base64url strings
    """
    # 64 random bytes -> 86 character verifier (RFC 7636 allows 43-128)
    verifier = urlsafe_b64encode(secrets.token_bytes(64)).rstrip(b"=").decode("ascii")

    return verifier, create_challenge(verifier)


def create_challenge(verifier: str) -> str:
    """Compute the S256 code challenge for a verifier."""
    digest = sha256(verifier.encode("ascii")).digest()
    return urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
