"""Unit tests for the Telegram adapter."""

import time

import pytest

from signon.adapter.error import (
    InvalidAuthorizationCodeError,
    InvalidCredentialsError,
    UnexpectedApiResponseError,
)
from signon.adapter.storage import InMemoryStorage
from signon.adapter.telegram import LoginWidget, TelegramAdapter
from signon.domain.error import NotSupportedError
from signon.domain.value import Provider
from tests.conftest import BOT_NAME, telegram_login_params


class TestTelegramAdapter:
    """Tests for TelegramAdapter."""

    @pytest.fixture
    def storage(self):
        return InMemoryStorage()

    @pytest.fixture
    def adapter(self, telegram_config, storage):
        return TelegramAdapter(telegram_config, storage=storage)


class TestConfigure(TestTelegramAdapter):
    """Tests for credential loading."""

    def test_provider_tag(self, adapter):
        """Adapter identifies itself with an explicit provider tag."""
        assert adapter.provider is Provider.TELEGRAM

    def test_missing_bot_token(self, telegram_config):
        """Construction fails without the bot token."""
        telegram_config["keys"] = {"id": BOT_NAME}

        with pytest.raises(
            InvalidCredentialsError, match="required in order to connect to telegram"
        ):
            TelegramAdapter(telegram_config)

    def test_missing_bot_name(self, telegram_config):
        """Construction fails without the bot name."""
        telegram_config["keys"] = {"secret": "123:abc"}

        with pytest.raises(InvalidCredentialsError):
            TelegramAdapter(telegram_config)


class TestAuthenticate(TestTelegramAdapter):
    """Tests for authenticate."""

    @pytest.mark.asyncio
    async def test_returns_widget_without_hash(self, adapter):
        """First step hands back the login widget."""
        action = await adapter.authenticate()

        assert isinstance(action, LoginWidget)
        assert action.bot_id == BOT_NAME
        assert action.callback_url == "https://example.com/auth/telegram"
        assert not adapter.is_connected()

    @pytest.mark.asyncio
    async def test_widget_carries_configured_nonce(self, telegram_config):
        """Configured nonce is passed to the widget."""
        telegram_config["nonce"] = "abc123"
        adapter = TelegramAdapter(telegram_config)

        action = await adapter.authenticate({})

        assert action.nonce == "abc123"

    @pytest.mark.asyncio
    async def test_valid_login_connects(self, adapter, storage):
        """Verified data is stored and the adapter becomes connected."""
        result = await adapter.authenticate(telegram_login_params())

        assert result is None
        assert adapter.is_connected()
        assert storage.get("telegram.auth_data")["username"] == "ada"

    @pytest.mark.asyncio
    async def test_tampered_login_rejected(self, adapter):
        """Forged data raises and nothing is stored."""
        params = telegram_login_params()
        params["id"] = "43"

        with pytest.raises(InvalidAuthorizationCodeError, match="NOT from Telegram"):
            await adapter.authenticate(params)

        assert not adapter.is_connected()

    @pytest.mark.asyncio
    async def test_outdated_login_rejected(self, adapter):
        """Data older than a day raises."""
        old = str(int(time.time()) - 2 * 86400)

        with pytest.raises(InvalidAuthorizationCodeError, match="Data is outdated"):
            await adapter.authenticate(telegram_login_params(auth_date=old))

        assert not adapter.is_connected()


class TestGetUserProfile(TestTelegramAdapter):
    """Tests for get_user_profile."""

    @pytest.mark.asyncio
    async def test_maps_widget_fields(self, adapter):
        """Profile fields come from the verified widget data."""
        await adapter.authenticate(telegram_login_params())

        profile = await adapter.get_user_profile()

        assert profile.identifier == "42"
        assert profile.first_name == "Ada"
        assert profile.last_name == "Lovelace"
        assert profile.display_name == "ada"
        assert profile.photo_url == "https://t.me/i/userpic/320/ada.jpg"
        assert profile.profile_url == "https://t.me/ada"

    @pytest.mark.asyncio
    async def test_without_username(self, adapter):
        """Accounts without a username have no profile URL."""
        await adapter.authenticate(telegram_login_params(username=None))

        profile = await adapter.get_user_profile()

        assert profile.display_name is None
        assert profile.profile_url is None

    @pytest.mark.asyncio
    async def test_requires_stored_login(self, adapter):
        """Profile lookup before login fails."""
        with pytest.raises(UnexpectedApiResponseError):
            await adapter.get_user_profile()

    @pytest.mark.asyncio
    async def test_survives_new_adapter_instance(self, telegram_config, storage):
        """State lives in storage, not in the adapter."""
        await TelegramAdapter(telegram_config, storage=storage).authenticate(
            telegram_login_params()
        )

        profile = await TelegramAdapter(telegram_config, storage=storage).get_user_profile()

        assert profile.identifier == "42"


class TestDisconnect(TestTelegramAdapter):
    """Tests for disconnect."""

    @pytest.mark.asyncio
    async def test_clears_state(self, adapter, storage):
        """Disconnect forgets the login and can be repeated."""
        await adapter.authenticate(telegram_login_params())

        adapter.disconnect()
        adapter.disconnect()

        assert not adapter.is_connected()
        assert storage.get("telegram.auth_data") is None


class TestUnsupportedCapabilities(TestTelegramAdapter):
    """Telegram only offers login and profile."""

    @pytest.mark.asyncio
    async def test_contacts_not_supported(self, adapter):
        with pytest.raises(NotSupportedError, match="telegram does not support"):
            await adapter.get_user_contacts()

    @pytest.mark.asyncio
    async def test_api_request_not_supported(self, adapter):
        with pytest.raises(NotSupportedError):
            await adapter.api_request("getMe")

    @pytest.mark.asyncio
    async def test_maintain_token_is_noop(self, adapter):
        assert await adapter.maintain_token() is None
