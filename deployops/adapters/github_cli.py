"""
GitHub CLI adapter.

Wraps the ``gh`` and ``git`` executables. Commands are run as argument lists,
secret values travel on stdin so they never show up in the process table.
"""

from __future__ import annotations

import re
import subprocess
from typing import Optional, Sequence

from deployops.constants.secrets import GH_INSTALL_HINT, GH_LOGIN_HINT
from deployops.exceptions import (
    DeployOpsError,
    MissingDependencyError,
    NotAuthenticatedError,
    RepositoryResolutionError,
    SecretSetError,
)
from deployops.infra.logging_config import get_logger

logger = get_logger("github_cli")

GITHUB_REMOTE_RE = re.compile(r"github\.com[:/]([^/]+)/(.+?)(\.git)?$")


def parse_repository(remote_url: str) -> str:
    """Return ``owner/name`` for a GitHub remote URL (ssh or https)."""
    match = GITHUB_REMOTE_RE.search(remote_url.strip())
    if not match:
        raise RepositoryResolutionError(
            f"Could not parse repository info from remote URL: {remote_url}"
        )
    return f"{match.group(1)}/{match.group(2)}"


def _error_text(error: subprocess.CalledProcessError) -> str:
    stderr = (error.stderr or "").strip()
    return stderr or str(error)


class GitHubCli:
    """Thin wrapper around the gh executable scoped to one repository."""

    def __init__(self, gh_bin: str = "gh", git_bin: str = "git") -> None:
        self.gh_bin = gh_bin
        self.git_bin = git_bin

    def _run(
        self, args: Sequence[str], input_text: Optional[str] = None
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            list(args),
            input=input_text,
            capture_output=True,
            text=True,
            check=True,
        )

    def ensure_installed(self) -> str:
        """Return ``gh --version`` output or raise MissingDependencyError."""
        try:
            result = self._run([self.gh_bin, "--version"])
        except (OSError, subprocess.CalledProcessError) as e:
            raise MissingDependencyError(
                "GitHub CLI (gh) is not installed.", hint=GH_INSTALL_HINT
            ) from e
        version = result.stdout.splitlines()[0] if result.stdout else ""
        logger.debug("Found %s", version)
        return version

    def ensure_authenticated(self) -> None:
        try:
            self._run([self.gh_bin, "auth", "status"])
        except (OSError, subprocess.CalledProcessError) as e:
            raise NotAuthenticatedError(
                "You are not authenticated with GitHub CLI.", hint=GH_LOGIN_HINT
            ) from e

    def remote_url(self, remote: str = "origin") -> str:
        try:
            result = self._run([self.git_bin, "remote", "get-url", remote])
        except (OSError, subprocess.CalledProcessError) as e:
            raise RepositoryResolutionError(
                "Could not determine repository. Make sure you are in a git "
                "repository with a GitHub remote."
            ) from e
        return result.stdout.strip()

    def detect_repository(self, remote: str = "origin") -> str:
        """Resolve ``owner/name`` from the git remote."""
        return parse_repository(self.remote_url(remote))

    def set_secret(self, repo: str, name: str, value: str) -> None:
        try:
            self._run(
                [self.gh_bin, "secret", "set", name, "--repo", repo],
                input_text=value,
            )
        except subprocess.CalledProcessError as e:
            raise SecretSetError(name, _error_text(e)) from e
        except OSError as e:
            raise SecretSetError(name, str(e)) from e

    def list_secrets(self, repo: str) -> list[str]:
        """Names of the secrets configured on ``repo``."""
        try:
            result = self._run([self.gh_bin, "secret", "list", "--repo", repo])
        except subprocess.CalledProcessError as e:
            raise DeployOpsError(f"Could not list secrets: {_error_text(e)}") from e
        except OSError as e:
            raise DeployOpsError(f"Could not list secrets: {e}") from e
        names = []
        for line in result.stdout.strip().splitlines():
            name = line.split("\t")[0].strip()
            if name:
                names.append(name)
        return names
