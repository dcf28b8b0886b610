"""AWS SSO session check and login."""

from __future__ import annotations

import logging

from claude_bedrock.config import LauncherSettings
from claude_bedrock.prompts import say
from claude_bedrock.runner import CommandRunner

logger = logging.getLogger(__name__)


def session_is_valid(runner: CommandRunner, settings: LauncherSettings, profile: str) -> bool:
    result = runner.run(
        [settings.aws_command, "sts", "get-caller-identity"],
        env={"AWS_PROFILE": profile},
        timeout_sec=60,
    )
    logger.debug("get-caller-identity exit=%s", result.exit_code)
    return result.ok


def is_login_noise(line: str, settings: LauncherSettings) -> bool:
    return any(marker in line for marker in settings.login_noise)


def ensure_session(runner: CommandRunner, settings: LauncherSettings, profile: str) -> bool:
    """Log in through SSO unless the profile already has a live session.

    Returns True when a login was started. The login result is not
    verified again.
    """
    say("Checking AWS SSO session...")
    if session_is_valid(runner, settings, profile):
        say("✓ AWS SSO session is valid")
        say()
        return False

    say("AWS SSO session expired or not found.")
    say("Opening browser for authentication...")
    say()
    for line in runner.stream([settings.aws_command, "sso", "login", "--profile", profile]):
        if not is_login_noise(line, settings):
            say(line)
    say()
    say("✓ Successfully authenticated")
    say()
    return True
