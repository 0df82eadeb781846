"""Unit tests for Logfire configuration."""

from unittest.mock import patch

import pytest

from signon.config import ObservabilitySettings, ProviderConfig, ProviderKeys, Settings
from signon.util.observability import configure_logfire, instrument_httpx


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        telegram=ProviderConfig(keys=ProviderKeys(id="bot", secret="1:a")),
    )


class TestConfigureLogfire:
    """Tests for configure_logfire."""

    def test_console_only_without_token(self, settings):
        with patch("signon.util.observability.logfire") as mock_logfire:
            configure_logfire(settings)

        kwargs = mock_logfire.configure.call_args.kwargs
        assert kwargs["service_name"] == "signon"
        assert kwargs["environment"] == "test"
        assert kwargs["send_to_logfire"] is False
        assert "token" not in kwargs
        mock_logfire.info.assert_called_once_with(
            "Observability configured",
            environment="test",
            send_to_logfire=False,
            providers=["telegram"],
        )

    def test_token_enables_sending(self, settings):
        settings = settings.model_copy(
            update={"observability": ObservabilitySettings(logfire_token="tok")}
        )

        with patch("signon.util.observability.logfire") as mock_logfire:
            configure_logfire(settings)

        kwargs = mock_logfire.configure.call_args.kwargs
        assert kwargs["send_to_logfire"] is True
        assert kwargs["token"] == "tok"

    def test_explicit_setting_wins(self, settings):
        settings = settings.model_copy(
            update={
                "observability": ObservabilitySettings(
                    logfire_token="tok", send_to_logfire=False
                )
            }
        )

        with patch("signon.util.observability.logfire") as mock_logfire:
            configure_logfire(settings)

        assert mock_logfire.configure.call_args.kwargs["send_to_logfire"] is False


def test_instrument_httpx():
    with patch("signon.util.observability.logfire") as mock_logfire:
        instrument_httpx()

    mock_logfire.instrument_httpx.assert_called_once_with()
