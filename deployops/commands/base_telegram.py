"""
Base command for Telegram-related operations.

Provides a shared way to obtain a TelegramAdapter from uploader settings.
"""

from __future__ import annotations

from deployops.adapters.telegram import TelegramAdapter
from deployops.config import UploaderSettings


class BaseTelegramCommand:
    """Base for commands that talk to the Telegram Bot API."""

    @staticmethod
    def get_telegram_adapter(settings: UploaderSettings) -> TelegramAdapter:
        """Return a TelegramAdapter for the configured system bot."""
        return TelegramAdapter(bot_token=settings.system_telegram_bot_token)
