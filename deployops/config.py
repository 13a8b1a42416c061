from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Optional, TypeVar

from dotenv import load_dotenv
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from deployops.constants.secrets import (
    ENV_FILE_HINT,
    REQUIRED_SECRETS,
    SERVICE_ENV_PREFIXES,
    ServiceName,
)
from deployops.constants.telegram import DEFAULT_LISTEN_TIMEOUT_SECONDS
from deployops.exceptions import (
    ConfigurationError,
    MissingConfigurationError,
    UnknownServiceError,
)
from deployops.schemas.server import ServerConfig

DEFAULT_ENV_FILE = ".env"

_SERVER_QUARTET = ("user", "password", "host", "port")

_SettingsT = TypeVar("_SettingsT", bound="_BaseToolSettings")


def load_env_file(env_file: str | Path = DEFAULT_ENV_FILE) -> bool:
    """
    Load ``env_file`` into os.environ when it exists.

    Variables already set in the process environment win. Returns True if the
    file was found.
    """
    path = Path(env_file)
    if not path.is_file():
        return False
    load_dotenv(path, override=False)
    return True


class _BaseToolSettings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    log_level: str = Field(default="INFO")

    def _missing(self, env_names: list[str]) -> list[str]:
        return [name for name in env_names if not getattr(self, name.lower())]


class SecretsSettings(_BaseToolSettings):
    """Values pushed as GitHub Actions secrets by configure-github-secrets."""

    api_gateway_server_user: Optional[str] = None
    api_gateway_server_password: Optional[str] = None
    api_gateway_server_host: Optional[str] = None
    api_gateway_server_port: Optional[str] = None
    api_gateway_server_root_path: Optional[str] = None
    api_gateway_server_docker_compose_path: Optional[str] = None
    telegram_bot_server_user: Optional[str] = None
    telegram_bot_server_password: Optional[str] = None
    telegram_bot_server_host: Optional[str] = None
    telegram_bot_server_port: Optional[str] = None
    telegram_bot_server_root_path: Optional[str] = None
    telegram_bot_server_docker_compose_path: Optional[str] = None

    def missing_secrets(self) -> list[str]:
        return self._missing(REQUIRED_SECRETS)

    def validate_required(self) -> None:
        """Raise MissingConfigurationError listing every absent secret."""
        missing = self.missing_secrets()
        if missing:
            raise MissingConfigurationError(missing, hint=ENV_FILE_HINT)

    def secret_values(self) -> dict[str, str]:
        """Secret name -> value, in the order they are pushed."""
        return {name: getattr(self, name.lower()) for name in REQUIRED_SECRETS}


class UploaderSettings(_BaseToolSettings):
    """Settings of the upload-logs tool."""

    system_telegram_bot_token: Optional[str] = None
    logs_service_name: Optional[str] = None
    logs_file_path: Optional[str] = None

    # Kept as raw strings: validity is decided by has_valid_ids.
    deep_assistant_headquaters_telegram_chat_id: Optional[str] = None
    deep_assistant_headquaters_telegram_logs_topic_id: Optional[str] = None

    logs_delete_remote_file: bool = False
    logs_listen_timeout_seconds: float = Field(
        default=DEFAULT_LISTEN_TIMEOUT_SECONDS, ge=0
    )

    api_gateway_server_user: Optional[str] = None
    api_gateway_server_password: Optional[str] = None
    api_gateway_server_host: Optional[str] = None
    api_gateway_server_port: Optional[str] = None
    telegram_bot_server_user: Optional[str] = None
    telegram_bot_server_password: Optional[str] = None
    telegram_bot_server_host: Optional[str] = None
    telegram_bot_server_port: Optional[str] = None

    REQUIRED_VARS: ClassVar[list[str]] = [
        "SYSTEM_TELEGRAM_BOT_TOKEN",
        "LOGS_SERVICE_NAME",
        "LOGS_FILE_PATH",
    ]

    @property
    def chat_id(self) -> Optional[str]:
        return self.deep_assistant_headquaters_telegram_chat_id

    @property
    def topic_id(self) -> Optional[str]:
        return self.deep_assistant_headquaters_telegram_logs_topic_id

    @property
    def listen_timeout(self) -> Optional[float]:
        """Listen bound in seconds, None when disabled."""
        return self.logs_listen_timeout_seconds or None

    def validate_required(self) -> None:
        missing = self._missing(self.REQUIRED_VARS)
        if missing:
            raise MissingConfigurationError(missing, hint=ENV_FILE_HINT)

    def service(self) -> ServiceName:
        try:
            return ServiceName(self.logs_service_name)
        except ValueError as e:
            supported = ", ".join(s.value for s in ServiceName)
            raise UnknownServiceError(
                f"Unknown service: {self.logs_service_name}. "
                f"Supported services: {supported}"
            ) from e

    def server_config(self) -> ServerConfig:
        """Connection quartet of the configured service's server."""
        service = self.service()
        prefix = SERVICE_ENV_PREFIXES[service].lower()
        values = {key: getattr(self, f"{prefix}_{key}") for key in _SERVER_QUARTET}
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise MissingConfigurationError(
                missing,
                message=f"Missing server configuration for {service.value}",
                hint=ENV_FILE_HINT,
            )
        return ServerConfig(**values)


def _load(settings_cls: type[_SettingsT]) -> _SettingsT:
    """Build ``settings_cls`` from the environment, reporting bad values by name."""
    try:
        return settings_cls()
    except ValidationError as e:
        lines = ["Invalid environment variables:"]
        for error in e.errors():
            name = ".".join(str(part) for part in error["loc"]).upper()
            lines.append(f"   - {name}: {error['msg']}")
        raise ConfigurationError("\n".join(lines)) from e


def get_secrets_settings() -> SecretsSettings:
    return _load(SecretsSettings)


def get_uploader_settings() -> UploaderSettings:
    return _load(UploaderSettings)
