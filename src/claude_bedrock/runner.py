"""Blocking subprocess runner behind a small capability interface."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Iterator, Mapping
from typing import Protocol

from claude_bedrock.types import CommandResult

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Everything the pipeline needs from the operating system's processes."""

    def which(self, name: str) -> str | None: ...

    def run(
        self,
        cmd: list[str],
        env: Mapping[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> CommandResult: ...

    def stream(self, cmd: list[str], env: Mapping[str, str] | None = None) -> Iterator[str]: ...

    def run_attached(self, cmd: list[str], env: Mapping[str, str] | None = None) -> int: ...


def _merged_env(env: Mapping[str, str] | None) -> dict[str, str]:
    """Inherit the current environment, then apply overrides."""
    return {**os.environ, **(env or {})}


class SubprocessRunner:
    """Runs commands with :mod:`subprocess`, one at a time."""

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def run(
        self,
        cmd: list[str],
        env: Mapping[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> CommandResult:
        """Run a command to completion and capture its output.

        A missing executable or OS failure is reported as exit code -1
        rather than raised.
        """
        start = time.monotonic()
        logger.debug("run: %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                env=_merged_env(env),
                timeout=timeout_sec,
            )
        except FileNotFoundError:
            return CommandResult(
                command=cmd,
                exit_code=-1,
                stdout="",
                stderr=f"Command not found: {cmd[0]}",
                duration_sec=time.monotonic() - start,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=cmd,
                exit_code=None,
                stdout="",
                stderr=f"Timed out after {timeout_sec}s: {cmd[0]}",
                duration_sec=time.monotonic() - start,
            )
        except OSError as exc:
            return CommandResult(
                command=cmd,
                exit_code=-1,
                stdout="",
                stderr=f"OS error running {cmd[0]}: {exc}",
                duration_sec=time.monotonic() - start,
            )

        result = CommandResult(
            command=cmd,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_sec=time.monotonic() - start,
        )
        logger.debug("exit=%s after %.2fs: %s", result.exit_code, result.duration_sec, cmd[0])
        return result

    def stream(self, cmd: list[str], env: Mapping[str, str] | None = None) -> Iterator[str]:
        """Yield stdout and stderr lines, merged, as the command prints them."""
        logger.debug("stream: %s", " ".join(cmd))
        with subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            env=_merged_env(env),
        ) as proc:
            assert proc.stdout is not None
            for line in proc.stdout:
                yield line.rstrip("\n")
        logger.debug("exit=%s: %s", proc.returncode, cmd[0])

    def run_attached(self, cmd: list[str], env: Mapping[str, str] | None = None) -> int:
        """Run a command sharing this process's terminal; return its exit code."""
        logger.debug("attached: %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, env=_merged_env(env), check=False).returncode
        except OSError as exc:
            logger.debug("could not start %s: %s", cmd[0], exc)
            return -1
