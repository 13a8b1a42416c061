"""Console entry points: configure-github-secrets and upload-logs."""

from __future__ import annotations

import asyncio
import sys

import click
from rich.console import Console
from rich.markup import escape

from deployops.commands.configure_secrets_command import ConfigureSecretsCommand
from deployops.commands.upload_logs_command import UploadLogsCommand
from deployops.config import (
    DEFAULT_ENV_FILE,
    get_secrets_settings,
    get_uploader_settings,
    load_env_file,
)
from deployops.constants.secrets import WORKFLOW_HINT
from deployops.exceptions import DeployOpsError
from deployops.infra.logging_config import setup_logging

console = Console(highlight=False)

env_file_option = click.option(
    "--env-file",
    default=DEFAULT_ENV_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Optional dotenv file loaded before reading the environment.",
)


def _fail(error: DeployOpsError) -> None:
    console.print(f"❌ [red]{escape(str(error))}[/red]")
    if error.hint:
        console.print(escape(error.hint))
    sys.exit(1)


@click.command()
@env_file_option
def configure_secrets_cmd(env_file: str):
    """Push deployment settings to the repository's GitHub Actions secrets"""
    load_env_file(env_file)
    try:
        settings = get_secrets_settings()
        setup_logging(settings.log_level)
        report = ConfigureSecretsCommand(settings).execute()
    except DeployOpsError as e:
        _fail(e)

    console.print(f"🔧 Repository: [cyan]{escape(report.repository)}[/cyan]")
    for name in report.set_secrets:
        console.print(f"✅ Set secret: {name}")
    if report.verification_error:
        console.print(
            f"⚠️  Could not verify secrets: {escape(report.verification_error)}"
        )
    elif report.unverified:
        console.print("⚠️  Some secrets might be missing:")
        for name in report.unverified:
            console.print(f"   ✗ {name}")
    else:
        console.print("✅ All required secrets are configured")
    console.print(f"📝 {WORKFLOW_HINT}")


@click.command()
@env_file_option
def upload_logs_cmd(env_file: str):
    """Send a service's log file from its server to Telegram"""
    load_env_file(env_file)
    try:
        settings = get_uploader_settings()
        setup_logging(settings.log_level)
        result = asyncio.run(UploadLogsCommand(settings).execute())
    except DeployOpsError as e:
        _fail(e)

    topic = (
        f" (topic {result.destination.topic_id})"
        if result.destination.topic_id is not None
        else ""
    )
    console.print(
        f"✅ Uploaded logs to chat {result.destination.chat_id}{topic}, "
        f"message id {result.message_id}"
    )
    if result.remote_deleted:
        console.print("🗑️ Deleted the log file on the server")
