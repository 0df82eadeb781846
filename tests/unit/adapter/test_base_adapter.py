"""Unit tests for the shared adapter lifecycle."""

import logging

import httpx
import pytest

from signon.adapter.error import HttpRequestFailedError, InvalidArgumentError
from signon.adapter.storage import InMemoryStorage
from signon.adapter.telegram import TelegramAdapter
from signon.config import ProviderConfig, ProviderKeys


class TestConstruction:
    """Tests for adapter construction."""

    def test_accepts_config_model(self):
        config = ProviderConfig(keys=ProviderKeys(id="bot", secret="123:abc"))

        adapter = TelegramAdapter(config)

        assert adapter.config is config

    @pytest.mark.parametrize(
        "config",
        [
            {"keys": 5},
            {"keys": {"id": "bot", "secret": "s"}, "pkce": "sometimes"},
            {"keys": {"id": "bot", "secret": "s"}, "http_options": "fast"},
        ],
    )
    def test_malformed_config(self, config):
        """Malformed configuration is an argument error."""
        with pytest.raises(InvalidArgumentError, match="Invalid telegram configuration"):
            TelegramAdapter(config)

    def test_default_storage_is_private(self, telegram_config):
        """Adapters without storage do not share state."""
        first = TelegramAdapter(telegram_config)
        second = TelegramAdapter(telegram_config)

        assert isinstance(first.storage, InMemoryStorage)
        assert first.storage is not second.storage

    def test_default_logger_channel(self, telegram_config):
        adapter = TelegramAdapter(telegram_config)

        assert adapter.logger.name == "signon.adapter.telegram"

    def test_configured_logger_channel(self, telegram_config):
        telegram_config["logger_channel"] = "myapp.auth"

        adapter = TelegramAdapter(telegram_config)

        assert adapter.logger.name == "myapp.auth"

    def test_explicit_logger(self, telegram_config):
        logger = logging.getLogger("custom")

        assert TelegramAdapter(telegram_config, logger=logger).logger is logger

    def test_http_options_merge_over_defaults(self, telegram_config):
        telegram_config["http_options"] = {"verify": False}

        adapter = TelegramAdapter(telegram_config)

        assert adapter.http_options == {"timeout": 10.0, "verify": False}


class TestTokenStorage:
    """Tests for get_access_token and set_access_token."""

    @pytest.fixture
    def adapter(self, telegram_config):
        return TelegramAdapter(telegram_config)

    def test_only_allowed_truthy_tokens(self, adapter):
        """Unknown names and empty values are not returned."""
        adapter.store_data("access_token", "at")
        adapter.store_data("refresh_token", "")
        adapter.store_data("auth_data", {"id": "1"})

        assert adapter.get_access_token() == {"access_token": "at"}

    def test_set_replaces_previous_state(self, adapter):
        adapter.store_data("auth_data", {"id": "1"})

        adapter.set_access_token({"access_token": "new"})

        assert adapter.get_stored_data("auth_data") is None
        assert adapter.get_access_token() == {"access_token": "new"}


class TestValidateApiResponse:
    """Tests for validate_api_response."""

    @pytest.fixture
    def adapter(self, telegram_config):
        return TelegramAdapter(telegram_config)

    def test_accepts_2xx(self, adapter):
        adapter.validate_api_response(httpx.Response(204))

    def test_rejects_redirect(self, adapter):
        """Anything outside 2xx is an error."""
        with pytest.raises(HttpRequestFailedError) as exc_info:
            adapter.validate_api_response(httpx.Response(302), "Lookup failed")

        assert exc_info.value.status_code == 302
        assert str(exc_info.value).startswith("Lookup failed. HTTP error 302.")

    def test_check_can_be_disabled(self, telegram_config):
        class LenientAdapter(TelegramAdapter):
            validate_api_response_http_code = False

        adapter = LenientAdapter(telegram_config)

        adapter.validate_api_response(httpx.Response(500, text="oops"))


class TestSendRequest:
    """Tests for send_request without an injected client."""

    @pytest.mark.asyncio
    async def test_opens_client_from_http_options(self, telegram_config):
        """A client is opened per request with the configured options."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        telegram_config["http_options"] = {
            "transport": httpx.MockTransport(handler),
            "headers": {"User-Agent": "signon-test"},
        }
        adapter = TelegramAdapter(telegram_config)

        response = await adapter.send_request("GET", "https://api.telegram.org/getMe")

        assert response.status_code == 200
        assert seen[0].headers["User-Agent"] == "signon-test"
