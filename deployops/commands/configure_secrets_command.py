"""
Command to push deployment settings to GitHub Actions repository secrets.

Validates local settings, checks the GitHub CLI, resolves the repository from
the git remote, sets every secret, then reads the list back as a sanity check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from deployops.adapters.github_cli import GitHubCli
from deployops.config import SecretsSettings
from deployops.constants.secrets import REQUIRED_SECRETS
from deployops.infra.logging_config import get_logger


@dataclass
class SecretsReport:
    """Outcome of a configure run."""

    repository: str
    set_secrets: list[str] = field(default_factory=list)
    verified: list[str] = field(default_factory=list)
    unverified: list[str] = field(default_factory=list)
    verification_error: Optional[str] = None

    @property
    def fully_verified(self) -> bool:
        return self.verification_error is None and not self.unverified


class ConfigureSecretsCommand:
    """
    Command to configure the repository secrets the deploy workflows read.
    Aborts on the first failed secret; secrets already set stay set.
    """

    def __init__(self, settings: SecretsSettings, gh: Optional[GitHubCli] = None) -> None:
        self.settings = settings
        self.gh = gh or GitHubCli()
        self.logger = get_logger("configure_secrets")

    def execute(self) -> SecretsReport:
        """
        Run the configuration.

        Returns:
            SecretsReport: repository, secrets set and read-back result.

        Raises:
            MissingConfigurationError: a required value is missing locally.
            MissingDependencyError: gh is not installed.
            NotAuthenticatedError: gh has no valid session.
            RepositoryResolutionError: the origin remote is not a GitHub URL.
            SecretSetError: gh failed to set a secret.
        """
        self.settings.validate_required()
        self.gh.ensure_installed()
        self.gh.ensure_authenticated()
        repo = self.gh.detect_repository()

        self.logger.info("Configuring GitHub Secrets")
        self.logger.info("Repository: %s", repo)

        report = SecretsReport(repository=repo)
        for name, value in self.settings.secret_values().items():
            self.gh.set_secret(repo, name, value)
            report.set_secrets.append(name)
            self.logger.info("Set secret: %s", name)
        self.logger.info("All secrets configured successfully")

        self._verify(report)
        return report

    def _verify(self, report: SecretsReport) -> None:
        """Read the secret list back. Failures here are only logged."""
        self.logger.info("Verifying secrets...")
        try:
            configured = set(self.gh.list_secrets(report.repository))
        except Exception as e:
            report.verification_error = str(e) or type(e).__name__
            self.logger.warning("Could not verify secrets: %s", e)
            return

        report.verified = [s for s in REQUIRED_SECRETS if s in configured]
        report.unverified = [s for s in REQUIRED_SECRETS if s not in configured]
        if report.unverified:
            self.logger.warning(
                "Some secrets might be missing: %s", ", ".join(report.unverified)
            )
        else:
            self.logger.info("All required secrets are configured")
