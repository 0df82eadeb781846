"""Telegram Login Widget data verification.

The widget redirects back with the user's fields and a `hash`:

    hash = hex(HMAC_SHA256(data_check_string, SHA256(bot_token)))

where data_check_string is every non-empty "key=value" pair except hash,
sorted as whole strings and joined with newlines.

See: https://core.telegram.org/widgets/login#checking-authorization
"""

import hashlib
import hmac
import html
import time
from collections.abc import Mapping
from typing import Any

from signon.adapter.error import InvalidAuthorizationCodeError
from signon.domain.value.types import AuthAction

# Fields the widget sends, hash included
AUTH_FIELDS = (
    "id",
    "first_name",
    "last_name",
    "username",
    "photo_url",
    "auth_date",
    "hash",
)

# Login data older than this is rejected
MAX_AUTH_AGE = 86400

WIDGET_SCRIPT_URL = "https://telegram.org/js/telegram-widget.js?22"


class LoginWidget(AuthAction):
    """Render Telegram's login widget; it posts back to callback_url."""

    bot_id: str
    callback_url: str
    nonce: str | None = None

    def render(self) -> str:
        """Return the widget's script tag."""
        nonce_attr = f' nonce="{html.escape(self.nonce)}"' if self.nonce else ""
        return (
            f'<script async src="{WIDGET_SCRIPT_URL}"'
            f' data-telegram-login="{html.escape(self.bot_id)}"'
            ' data-size="large"'
            f' data-auth-url="{html.escape(self.callback_url)}"'
            ' data-request-access="write"'
            f"{nonce_attr}></script>"
        )


def parse_auth_data(params: Mapping[str, Any]) -> dict[str, Any]:
    """Pick exactly the widget fields from request parameters.

    Missing fields are kept as None so the stored map always has the same
    shape; None values never enter the check string.
    """
    return {field: params.get(field) for field in AUTH_FIELDS}


def _is_empty(value: Any) -> bool:
    return value in (None, "", "0", 0)


def build_data_check_string(auth_data: Mapping[str, Any]) -> str:
    """Build the string the widget hash is computed over.

    Pairs are sorted as complete "key=value" strings, not by key. Empty
    values (None, "", "0") are left out.
    """
    pairs = [
        f"{key}={value}"
        for key, value in auth_data.items()
        if key != "hash" and not _is_empty(value)
    ]
    return "\n".join(sorted(pairs))


def compute_hash(data_check_string: str, bot_token: str) -> str:
    """HMAC-SHA256 of the check string keyed with SHA256(bot_token), as hex."""
    secret_key = hashlib.sha256(bot_token.encode("utf-8")).digest()
    return hmac.new(
        secret_key, data_check_string.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_auth_data(
    auth_data: Mapping[str, Any], bot_token: str, now: int | None = None
) -> None:
    """Check that login data was signed by Telegram and is recent.

    Args:
        auth_data: Parsed widget fields including hash
        bot_token: Bot token the data must be signed with
        now: Current unix time (defaults to time.time())

    Raises:
        InvalidAuthorizationCodeError: If the hash does not match or the
            data is older than MAX_AUTH_AGE
    """
    check_hash = str(auth_data.get("hash") or "")
    expected_hash = compute_hash(build_data_check_string(auth_data), bot_token)

    if not hmac.compare_digest(
        expected_hash.encode("utf-8"), check_hash.encode("utf-8")
    ):
        raise InvalidAuthorizationCodeError(
            "Provider returned an error: Data is NOT from Telegram"
        )

    if now is None:
        now = int(time.time())

    try:
        auth_date = int(auth_data.get("auth_date") or 0)
    except (TypeError, ValueError):
        auth_date = 0

    if now - auth_date > MAX_AUTH_AGE:
        raise InvalidAuthorizationCodeError(
            "Provider returned an error: Data is outdated"
        )
