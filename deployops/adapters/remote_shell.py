"""
Password-based scp/ssh against the service servers.

``sshpass -e`` reads the password from the SSHPASS environment variable of the
child process, so it never appears on a command line.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from deployops.exceptions import RemoteCommandError, TransferError
from deployops.infra.logging_config import get_logger
from deployops.schemas.server import ServerConfig

logger = get_logger("remote_shell")

SSH_OPTIONS = ["-o", "StrictHostKeyChecking=no"]


class RemoteShell:
    """Runs scp/ssh through sshpass for one-off transfers and commands."""

    def __init__(
        self, sshpass_bin: str = "sshpass", timeout: Optional[float] = None
    ) -> None:
        self.sshpass_bin = sshpass_bin
        self.timeout = timeout

    def _run(
        self, server: ServerConfig, args: Sequence[str]
    ) -> subprocess.CompletedProcess[str]:
        env = dict(os.environ)
        env["SSHPASS"] = server.password.get_secret_value()
        return subprocess.run(
            [self.sshpass_bin, "-e", *args],
            env=env,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def download(self, server: ServerConfig, remote_path: str, local_path: Path) -> Path:
        """Copy ``remote_path`` from the server to ``local_path``."""
        logger.info("Downloading logs from %s...", server.host)
        args = [
            "scp",
            "-P",
            str(server.port),
            *SSH_OPTIONS,
            f"{server.login}:{remote_path}",
            str(local_path),
        ]
        try:
            result = self._run(server, args)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise TransferError(f"Failed to download logs: {e}") from e
        if result.returncode != 0:
            detail = result.stderr.strip() or f"scp exited with {result.returncode}"
            raise TransferError(f"Failed to download logs: {detail}")
        if not local_path.is_file():
            raise TransferError(
                "Failed to download logs: Failed to download log file"
            )
        logger.info("Downloaded logs to: %s", local_path)
        return local_path

    def remove(self, server: ServerConfig, remote_path: str) -> None:
        """Delete ``remote_path`` on the server."""
        args = [
            "ssh",
            "-p",
            str(server.port),
            *SSH_OPTIONS,
            server.login,
            f"rm -f -- {shlex.quote(remote_path)}",
        ]
        try:
            result = self._run(server, args)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise RemoteCommandError(f"Failed to delete {remote_path}: {e}") from e
        if result.returncode != 0:
            detail = result.stderr.strip() or f"ssh exited with {result.returncode}"
            raise RemoteCommandError(f"Failed to delete {remote_path}: {detail}")
        logger.info("Deleted %s on %s", remote_path, server.host)
