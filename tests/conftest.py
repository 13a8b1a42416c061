"""Global test configuration and fixtures."""

import logging

import pytest

from deployops.constants.secrets import REQUIRED_SECRETS
from deployops.infra.logging_config import ROOT_LOGGER_NAME
from tests.fixtures.settings_fixtures import (  # noqa: F401
    secrets_env,
    secrets_settings,
    server_config,
    uploader_env,
    uploader_settings,
)

UPLOADER_VARS = [
    "SYSTEM_TELEGRAM_BOT_TOKEN",
    "LOGS_SERVICE_NAME",
    "LOGS_FILE_PATH",
    "DEEP_ASSISTANT_HEADQUATERS_TELEGRAM_CHAT_ID",
    "DEEP_ASSISTANT_HEADQUATERS_TELEGRAM_LOGS_TOPIC_ID",
    "LOGS_DELETE_REMOTE_FILE",
    "LOGS_LISTEN_TIMEOUT_SECONDS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell and .env out of every test."""
    for name in REQUIRED_SECRETS + UPLOADER_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs attach a handler bound to CliRunner's stderr; drop it after."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
