"""
Error types raised by the deploy tooling.

Every fatal condition maps to one of these; the CLI turns any DeployOpsError
into exit status 1. Cleanup and verification problems are never raised, they
are logged as warnings by the commands.
"""

from __future__ import annotations

from typing import Iterable, Optional


class DeployOpsError(Exception):
    """Base error. ``hint`` carries an optional remediation message."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(DeployOpsError):
    """Configuration is present but unusable."""


class MissingConfigurationError(ConfigurationError):
    """One or more required settings are absent or empty."""

    def __init__(
        self,
        missing: Iterable[str],
        message: str = "Missing required environment variables",
        hint: Optional[str] = None,
    ) -> None:
        self.missing = list(missing)
        lines = [f"{message}:"] + [f"   - {key}" for key in self.missing]
        super().__init__("\n".join(lines), hint=hint)


class UnknownServiceError(ConfigurationError):
    """LOGS_SERVICE_NAME is not a supported service."""


class MissingDependencyError(DeployOpsError):
    """A required external tool is not installed."""


class NotAuthenticatedError(DeployOpsError):
    """An external tool is installed but has no valid session."""


class RepositoryResolutionError(DeployOpsError):
    """The GitHub repository could not be derived from the git remote."""


class SecretSetError(DeployOpsError):
    """Setting a repository secret failed."""

    def __init__(self, secret: str, reason: str) -> None:
        self.secret = secret
        super().__init__(f"Failed to set secret {secret}: {reason}")


class TransferError(DeployOpsError):
    """The remote log file could not be copied locally."""


class TransmitError(DeployOpsError):
    """The Telegram Bot API rejected an outbound call."""


class DestinationTimeoutError(DeployOpsError):
    """No /logs command arrived before the listen timeout."""


class RemoteCommandError(DeployOpsError):
    """A command run on a remote server over ssh failed."""
