"""Adapters for the external tools and APIs the deploy tooling drives."""

from deployops.adapters.github_cli import GitHubCli
from deployops.adapters.remote_shell import RemoteShell
from deployops.adapters.telegram import TelegramAdapter

__all__ = ["GitHubCli", "RemoteShell", "TelegramAdapter"]
