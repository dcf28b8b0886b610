"""Checks for the executables the launch depends on."""

from __future__ import annotations

import logging

from claude_bedrock.config import LauncherSettings
from claude_bedrock.errors import MissingDependencyError, VersionTooOldError
from claude_bedrock.prompts import Prompter, confirm_yes, say
from claude_bedrock.runner import CommandRunner
from claude_bedrock.versioning import is_at_least, parse_aws_version

logger = logging.getLogger(__name__)


def ensure_assistant(runner: CommandRunner, settings: LauncherSettings, prompter: Prompter) -> str:
    """Return the path to ``claude``, offering to install it when missing."""
    name = settings.assistant_command
    found = runner.which(name)
    if found:
        return found

    say("It appears Claude Code is not installed.")
    say()
    if not confirm_yes(prompter, "Would you like to install it? (y/n) "):
        raise MissingDependencyError(
            "Exiting. Claude Code is required to run this script."
            " Either it is not installed or not in your PATH."
        )

    say("Installing Claude Code...")
    code = runner.run_attached(settings.install_command)
    if code != 0:
        raise MissingDependencyError(f"Claude Code installation failed (exit={code}).")
    say()
    say("Installation complete!")

    found = runner.which(name)
    if not found:
        raise MissingDependencyError(
            f"Claude Code was installed but '{name}' is still not on your PATH."
            " Open a new shell or add the install directory to PATH, then retry."
        )
    return found


def ensure_aws_cli(runner: CommandRunner, settings: LauncherSettings) -> str:
    found = runner.which(settings.aws_command)
    if not found:
        raise MissingDependencyError(
            "AWS CLI is not installed.\n"
            "Exiting. AWS CLI is required to run this script."
            " Either it is not installed or not in your PATH."
        )
    return found


def ensure_aws_version(runner: CommandRunner, settings: LauncherSettings) -> str:
    """Return the AWS CLI version, or raise if it is below the minimum."""
    result = runner.run([settings.aws_command, "--version"], timeout_sec=30)
    # AWS CLI v1 prints its banner on stderr.
    version = parse_aws_version(result.stdout or result.stderr)
    logger.debug("aws version %r (minimum %s)", version, settings.min_aws_version)
    if not is_at_least(version, settings.min_aws_version):
        raise VersionTooOldError(version, settings.min_aws_version)
    return version


def run_preflight(runner: CommandRunner, settings: LauncherSettings, prompter: Prompter) -> str:
    """Run every check in order; return the AWS CLI version."""
    ensure_assistant(runner, settings, prompter)
    ensure_aws_cli(runner, settings)
    return ensure_aws_version(runner, settings)
