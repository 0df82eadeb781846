"""Telegram login adapter."""

from .client import TelegramAdapter
from .widget import LoginWidget

__all__ = ["LoginWidget", "TelegramAdapter"]
