"""
Command to forward a service's log file from its server to Telegram.

The destination chat/topic comes from settings when both identifiers are
valid. Otherwise the bot waits for a ``/logs`` command and delivers to the
chat (and topic) it was sent from, for that one run.
"""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from deployops.adapters.remote_shell import RemoteShell
from deployops.adapters.telegram import TelegramAdapter
from deployops.commands.base_telegram import BaseTelegramCommand
from deployops.config import UploaderSettings
from deployops.constants.secrets import ServiceName
from deployops.constants.telegram import (
    ACK_MESSAGE,
    CAPTION_TEMPLATE,
    FAILURE_MESSAGE,
    LOGS_COMMAND,
)
from deployops.exceptions import ConfigurationError, DeployOpsError
from deployops.infra.logging_config import get_logger
from deployops.schemas.destination import Destination
from deployops.schemas.server import ServerConfig
from deployops.utils.identifiers import has_valid_ids, parse_id
from deployops.utils.markdown import escape_markdown

TEMP_DIR_PREFIX = "deployops-logs-"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_caption(service: str, host: str, file_name: str, timestamp: str) -> str:
    """MarkdownV2 document caption; every interpolated field is escaped."""
    return CAPTION_TEMPLATE.format(
        service=escape_markdown(service.upper()),
        timestamp=escape_markdown(timestamp),
        host=escape_markdown(host),
        file_name=escape_markdown(file_name),
    )


@dataclass
class UploadResult:
    """Outcome of a successful upload."""

    destination: Destination
    message_id: str
    detected: bool = False
    remote_deleted: bool = False


class UploadLogsCommand(BaseTelegramCommand):
    """
    Command to download LOGS_FILE_PATH from the service's server and send it
    to Telegram as a document.
    """

    def __init__(
        self,
        settings: UploaderSettings,
        telegram: Optional[TelegramAdapter] = None,
        remote: Optional[RemoteShell] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.settings = settings
        self.telegram = telegram or self.get_telegram_adapter(settings)
        self.remote = remote or RemoteShell()
        self.clock = clock
        self.logger = get_logger("upload_logs")

    async def execute(self) -> UploadResult:
        """
        Validate settings, resolve the destination and upload.

        Returns:
            UploadResult: where the document went and its message id.

        Raises:
            MissingConfigurationError: required settings or server fields absent.
            ConfigurationError: a configured chat/topic id is not a whole number.
            UnknownServiceError: LOGS_SERVICE_NAME is not supported.
            DestinationTimeoutError: no /logs command arrived in time.
            TransferError: the log file could not be downloaded.
            TransmitError: Telegram rejected a call.
        """
        self.settings.validate_required()
        service = self.settings.service()
        server = self.settings.server_config()

        self.logger.info("Uploading %s logs...", service.value)
        try:
            if has_valid_ids(self.settings.chat_id, self.settings.topic_id):
                destination = self._configured_destination()
                return await self.upload(destination, server, service)
            return await self._upload_on_command(server, service)
        finally:
            await self.telegram.shutdown()

    def _configured_destination(self) -> Destination:
        try:
            return Destination(
                chat_id=parse_id(self.settings.chat_id),
                topic_id=parse_id(self.settings.topic_id),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    async def _upload_on_command(
        self, server: ServerConfig, service: ServiceName
    ) -> UploadResult:
        self.logger.info(
            "Chat/topic not configured. Send %s in the target chat or topic.",
            LOGS_COMMAND,
        )
        destination = await self.telegram.wait_for_command(
            LOGS_COMMAND, timeout=self.settings.listen_timeout
        )
        try:
            await self.telegram.send_message(
                destination, ACK_MESSAGE.format(service=service.value)
            )
            result = await self.upload(destination, server, service)
        except DeployOpsError as e:
            await self._notify_failure(destination, service, e)
            raise
        result.detected = True
        return result

    async def upload(
        self, destination: Destination, server: ServerConfig, service: ServiceName
    ) -> UploadResult:
        """Download the log file into a private temp dir and send it."""
        remote_path = self.settings.logs_file_path
        file_name = PurePosixPath(remote_path).name or "logs"
        temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        try:
            local_path = self.remote.download(server, remote_path, temp_dir / file_name)
            caption = build_caption(
                service.value, server.host, file_name, format_timestamp(self.clock())
            )

            self.logger.info("Uploading to Telegram...")
            message_id = await self.telegram.send_document(
                destination, local_path, caption
            )
            self.logger.info(
                "Successfully uploaded logs to Telegram, message id %s", message_id
            )

            result = UploadResult(destination=destination, message_id=message_id)
            if self.settings.logs_delete_remote_file:
                result.remote_deleted = self._delete_remote(server, remote_path)
            return result
        finally:
            self._cleanup(temp_dir)

    def _delete_remote(self, server: ServerConfig, remote_path: str) -> bool:
        try:
            self.remote.remove(server, remote_path)
        except DeployOpsError as e:
            self.logger.warning("Failed to delete remote log file: %s", e)
            return False
        return True

    async def _notify_failure(
        self, destination: Destination, service: ServiceName, error: Exception
    ) -> None:
        try:
            await self.telegram.send_message(
                destination, FAILURE_MESSAGE.format(service=service.value, error=error)
            )
        except DeployOpsError as e:
            self.logger.warning("Failed to report the error to Telegram: %s", e)

    def _cleanup(self, temp_dir: Path) -> None:
        try:
            shutil.rmtree(temp_dir)
        except OSError as e:
            self.logger.warning("Failed to cleanup temporary file: %s", e)
            return
        self.logger.debug("Cleaned up temporary file")
