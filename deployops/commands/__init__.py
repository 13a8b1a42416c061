"""Run-to-completion commands behind the CLI entry points."""

from deployops.commands.base_telegram import BaseTelegramCommand
from deployops.commands.configure_secrets_command import ConfigureSecretsCommand
from deployops.commands.upload_logs_command import UploadLogsCommand

__all__ = ["BaseTelegramCommand", "ConfigureSecretsCommand", "UploadLogsCommand"]
