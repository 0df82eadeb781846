"""Telegram login adapter.

To set up Telegram, create a bot by talking to @BotFather in the Telegram
app and link it to your site's domain:

    /newbot
    My Bot Title
    nameofmynewbot
    /setdomain
    @nameofmynewbot
    mydomain.com

Configuration:

    TelegramAdapter({
        "callback": "https://mydomain.com/auth/telegram",
        "keys": {"id": "nameofmynewbot", "secret": "<bot token>"},
    })

There is no token exchange: the widget hands back signed user data which
is verified locally with the bot token.
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from signon.adapter.base import AbstractAdapter
from signon.adapter.error import (
    InvalidAuthorizationCodeError,
    InvalidCredentialsError,
    UnexpectedApiResponseError,
)
from signon.adapter.telegram.widget import (
    LoginWidget,
    parse_auth_data,
    verify_auth_data,
)
from signon.domain.value.types import Profile, Provider


class TelegramAdapter(AbstractAdapter):
    """Telegram Login Widget adapter.

    Stored state: auth_data, the verified widget fields.
    """

    provider: ClassVar[Provider] = Provider.TELEGRAM

    api_documentation: ClassVar[str] = "https://core.telegram.org/bots"

    def configure(self) -> None:
        """Read the bot name and token.

        Raises:
            InvalidCredentialsError: If either is missing
        """
        self.bot_id = self.config.keys.id
        self.bot_secret = self.config.keys.secret
        self.callback_url = self.config.callback or ""

        if not self.bot_id or not self.bot_secret:
            raise InvalidCredentialsError(
                f"Your application id is required in order to connect to {self.provider.value}"
            )

    def initialize(self) -> None:
        pass

    async def authenticate(
        self, params: Mapping[str, Any] | None = None
    ) -> LoginWidget | None:
        """Show the login widget, or verify the data it sent back.

        Args:
            params: Query/form parameters of the inbound request

        Returns:
            Widget to render when the request carries no hash, else None

        Raises:
            InvalidAuthorizationCodeError: If the data is forged or outdated
        """
        self.request_params = dict(params or {})

        self.logger.info(f"{type(self).__name__}.authenticate()")

        if not self.request_params.get("hash"):
            return self.authenticate_begin()

        self.authenticate_check_error()
        self.authenticate_finish()

        return None

    def is_connected(self) -> bool:
        return bool(self.get_stored_data("auth_data"))

    async def get_user_profile(self) -> Profile:
        """Map the stored widget fields to a Profile.

        Raises:
            UnexpectedApiResponseError: If no user id is stored
        """
        data = self.get_stored_data("auth_data") or {}

        if data.get("id") in (None, ""):
            raise UnexpectedApiResponseError(
                "Provider API returned an unexpected response."
            )

        username = data.get("username")

        return Profile(
            identifier=data["id"],
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            display_name=username,
            photo_url=data.get("photo_url"),
            # Only some accounts have usernames
            profile_url=f"https://t.me/{username}" if username else None,
        )

    def authenticate_begin(self) -> LoginWidget:
        self.logger.debug(
            f"{type(self).__name__}.authenticate_begin(), rendering login widget"
        )

        return LoginWidget(
            bot_id=self.bot_id,
            callback_url=self.callback_url,
            nonce=self.config.nonce or None,
        )

    def authenticate_check_error(self) -> None:
        try:
            verify_auth_data(parse_auth_data(self.request_params), self.bot_secret)
        except InvalidAuthorizationCodeError as e:
            self.logger.error(f"Telegram login data rejected: {e}")
            raise

    def authenticate_finish(self) -> None:
        self.logger.debug(
            f"{type(self).__name__}.authenticate_finish(), callback url: {self.callback_url}"
        )

        self.store_data("auth_data", parse_auth_data(self.request_params))

        self.initialize()
