"""Tests for ConfigureSecretsCommand."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from deployops.adapters.github_cli import GitHubCli
from deployops.commands.configure_secrets_command import ConfigureSecretsCommand
from deployops.config import SecretsSettings
from deployops.constants.secrets import REQUIRED_SECRETS
from deployops.exceptions import (
    MissingConfigurationError,
    NotAuthenticatedError,
    RepositoryResolutionError,
    SecretSetError,
)


class FakeGh:
    """Stands in for the gh/git executables behind subprocess.run."""

    def __init__(self, remote_url="git@github.com:acme/widgets.git"):
        self.remote_url = remote_url
        self.calls = []
        self.fail_on_secret = None
        self.list_output = None
        self.list_error = None

    def __call__(self, args, input=None, **kwargs):
        self.calls.append((args, input))
        if args[:2] == ["git", "remote"]:
            return subprocess.CompletedProcess(
                args, 0, stdout=self.remote_url + "\n", stderr=""
            )
        if args[1:3] == ["secret", "set"]:
            if args[3] == self.fail_on_secret:
                raise subprocess.CalledProcessError(1, args, stderr="HTTP 422")
        if args[1:3] == ["secret", "list"]:
            if self.list_error:
                raise self.list_error
            return subprocess.CompletedProcess(
                args, 0, stdout=self.list_output or "", stderr=""
            )
        return subprocess.CompletedProcess(
            args, 0, stdout="gh version 2.50.0\n", stderr=""
        )

    def secrets_set(self):
        return [args[3] for args, _ in self.calls if args[1:3] == ["secret", "set"]]


@pytest.fixture
def fake_gh():
    fake = FakeGh()
    with patch("deployops.adapters.github_cli.subprocess.run", side_effect=fake):
        yield fake


def test_configure_all_secrets(secrets_settings, secrets_env, fake_gh):
    fake_gh.list_output = "".join(
        f"{name}\tUpdated today\n" for name in REQUIRED_SECRETS
    )

    report = ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()

    assert report.repository == "acme/widgets"
    assert report.set_secrets == REQUIRED_SECRETS
    assert fake_gh.secrets_set() == REQUIRED_SECRETS
    assert report.fully_verified is True
    for args, stdin in fake_gh.calls:
        if args[1:3] == ["secret", "set"]:
            assert args[-2:] == ["--repo", "acme/widgets"]
            assert stdin == secrets_env[args[3]]


def test_verification_failure_is_not_fatal(secrets_settings, fake_gh):
    fake_gh.list_error = subprocess.CalledProcessError(1, ["gh"], stderr="HTTP 502")

    report = ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()

    assert report.repository == "acme/widgets"
    assert fake_gh.secrets_set() == REQUIRED_SECRETS
    assert "HTTP 502" in report.verification_error
    assert report.fully_verified is False


def test_undecodable_secret_list_is_not_fatal(secrets_settings, fake_gh):
    fake_gh.list_error = UnicodeDecodeError(
        "utf-8", b"\xff", 0, 1, "invalid start byte"
    )

    report = ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()

    assert fake_gh.secrets_set() == REQUIRED_SECRETS
    assert "can't decode" in report.verification_error
    assert report.fully_verified is False


def test_verification_reports_unlisted_secrets(secrets_settings, fake_gh):
    fake_gh.list_output = "API_GATEWAY_SERVER_USER\tUpdated today\nOTHER\tx\n"

    report = ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()

    assert report.verified == ["API_GATEWAY_SERVER_USER"]
    assert report.unverified == REQUIRED_SECRETS[1:]


def test_first_failure_aborts_remaining(secrets_settings, fake_gh):
    fake_gh.fail_on_secret = "API_GATEWAY_SERVER_PORT"

    with pytest.raises(SecretSetError, match="API_GATEWAY_SERVER_PORT"):
        ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()

    assert fake_gh.secrets_set() == REQUIRED_SECRETS[:4]
    assert not any(args[1:3] == ["secret", "list"] for args, _ in fake_gh.calls)


def test_missing_keys_fail_before_any_call(monkeypatch, secrets_env):
    monkeypatch.delenv("API_GATEWAY_SERVER_HOST")
    monkeypatch.delenv("TELEGRAM_BOT_SERVER_ROOT_PATH")
    gh = MagicMock(spec=GitHubCli)

    with pytest.raises(MissingConfigurationError) as exc_info:
        ConfigureSecretsCommand(SecretsSettings(), gh).execute()

    assert exc_info.value.missing == [
        "API_GATEWAY_SERVER_HOST",
        "TELEGRAM_BOT_SERVER_ROOT_PATH",
    ]
    assert gh.mock_calls == []


def test_not_authenticated_stops_before_repository(secrets_settings):
    gh = MagicMock(spec=GitHubCli)
    gh.ensure_authenticated.side_effect = NotAuthenticatedError("nope")

    with pytest.raises(NotAuthenticatedError):
        ConfigureSecretsCommand(secrets_settings, gh).execute()

    gh.detect_repository.assert_not_called()
    gh.set_secret.assert_not_called()


def test_unparsable_remote(secrets_settings):
    fake = FakeGh(remote_url="git@gitlab.com:acme/widgets.git")
    with patch("deployops.adapters.github_cli.subprocess.run", side_effect=fake):
        with pytest.raises(RepositoryResolutionError):
            ConfigureSecretsCommand(secrets_settings, GitHubCli()).execute()
    assert fake.secrets_set() == []
