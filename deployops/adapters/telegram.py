"""
Telegram adapter for the log uploader.

Uses python-telegram-bot's ``Bot`` directly: outbound calls for messages and
documents, and a plain ``getUpdates`` long-polling loop to wait for the
``/logs`` command that tells the uploader where to deliver.
"""

from __future__ import annotations

import asyncio
import math
import re
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from telegram import Bot, Message, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, NetworkError, RetryAfter, TelegramError

from deployops.constants.telegram import LOGS_COMMAND, POLL_TIMEOUT_SECONDS
from deployops.exceptions import DestinationTimeoutError, TransmitError
from deployops.infra.logging_config import get_logger
from deployops.schemas.destination import Destination

logger = get_logger("telegram")


def _seconds(delay: Union[int, float, timedelta]) -> float:
    """Flood-control delay in seconds; newer library versions report a timedelta."""
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    return float(delay)


def command_pattern(command: str = LOGS_COMMAND) -> re.Pattern[str]:
    """Match ``command`` anywhere in a message, optionally as ``/cmd@botname``."""
    return re.compile(rf"{re.escape(command)}(?:@\w+)?\b")


def destination_from_message(message: Message) -> Destination:
    """The chat a message came from, plus its forum topic when it has one."""
    return Destination(
        chat_id=message.chat_id,
        topic_id=message.message_thread_id or None,
    )


class TelegramAdapter:
    """Send messages/documents and wait for a bot command via the Bot API."""

    def __init__(self, bot_token: str, retry_delay: float = 1.0) -> None:
        self._bot_token = bot_token
        self._retry_delay = retry_delay
        self._bot: Optional[Bot] = None

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=self._bot_token)
        return self._bot

    async def shutdown(self) -> None:
        if self._bot is None:
            return
        try:
            await self._bot.shutdown()
        except TelegramError as e:
            logger.warning("Failed to shut down Telegram bot cleanly: %s", e)
        self._bot = None

    async def send_message(self, destination: Destination, text: str) -> str:
        """Send plain text; returns the Telegram message id."""
        try:
            sent = await self._get_bot().send_message(
                text=text, **destination.send_kwargs()
            )
        except TelegramError as e:
            raise TransmitError(f"Failed to send message: {e}") from e
        return str(sent.message_id)

    async def send_document(
        self, destination: Destination, path: Path, caption: str
    ) -> str:
        """Upload ``path`` with a MarkdownV2 caption; returns the message id."""
        try:
            with path.open("rb") as document:
                sent = await self._get_bot().send_document(
                    document=document,
                    filename=path.name,
                    caption=caption,
                    parse_mode=ParseMode.MARKDOWN_V2,
                    **destination.send_kwargs(),
                )
        except TelegramError as e:
            raise TransmitError(f"Failed to upload document: {e}") from e
        return str(sent.message_id)

    async def wait_for_command(
        self,
        command: str = LOGS_COMMAND,
        timeout: Optional[float] = None,
        poll_timeout: int = POLL_TIMEOUT_SECONDS,
    ) -> Destination:
        """
        Long-poll until a message containing ``command`` arrives.

        Every other message is logged and skipped. The matching update is
        confirmed so a later run does not see it again.

        Args:
            command: Bot command to wait for.
            timeout: Overall bound in seconds; None waits forever.
            poll_timeout: Long-polling window of each getUpdates call.

        Returns:
            Destination: chat (and topic) the command was sent from.

        Raises:
            DestinationTimeoutError: ``timeout`` elapsed without a match.
            TransmitError: Telegram rejected the polling request.
        """
        pattern = command_pattern(command)
        bot = self._get_bot()
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        offset: Optional[int] = None

        logger.info("Waiting for %s command...", command)
        while True:
            window = poll_timeout
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise DestinationTimeoutError(
                        f"No {command} command received within {timeout:g} seconds"
                    )
                window = min(poll_timeout, max(1, math.ceil(remaining)))

            try:
                updates = await bot.get_updates(
                    offset=offset,
                    timeout=window,
                    allowed_updates=[Update.MESSAGE],
                )
            except RetryAfter as e:
                logger.warning("Flood control, retrying in %s seconds", e.retry_after)
                await asyncio.sleep(_seconds(e.retry_after))
                continue
            except BadRequest as e:
                raise TransmitError(f"Failed to poll for updates: {e}") from e
            except NetworkError as e:
                logger.warning("Polling error: %s", e)
                await asyncio.sleep(self._retry_delay)
                continue
            except TelegramError as e:
                raise TransmitError(f"Failed to poll for updates: {e}") from e

            for update in updates:
                offset = update.update_id + 1
                message = update.effective_message
                if message is None:
                    continue
                text = message.text or message.caption or ""
                if pattern.search(text):
                    destination = destination_from_message(message)
                    logger.info(
                        "Detected %s in chat %s (topic %s)",
                        command,
                        destination.chat_id,
                        destination.topic_id,
                    )
                    await self._confirm_updates(offset)
                    return destination
                logger.info(
                    "Ignoring message in chat %s: %s", message.chat_id, text
                )

    async def _confirm_updates(self, offset: int) -> None:
        try:
            await self._get_bot().get_updates(offset=offset, timeout=0)
        except TelegramError as e:
            logger.warning("Could not confirm processed updates: %s", e)
