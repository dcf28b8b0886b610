"""AWS profile lookup in the shared config and credentials files."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from claude_bedrock.config import LauncherSettings
from claude_bedrock.errors import ProfileNotFoundError

logger = logging.getLogger(__name__)


def aws_config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    return Path(env.get("AWS_CONFIG_FILE") or Path.home() / ".aws" / "config").expanduser()


def aws_credentials_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    return Path(env.get("AWS_SHARED_CREDENTIALS_FILE") or Path.home() / ".aws" / "credentials").expanduser()


def _has_header(path: Path, header: str) -> bool:
    """True if a line of ``path`` starts with ``header``."""
    if not path.is_file():
        return False
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("could not read %s: %s", path, exc)
        return False
    pattern = re.compile(rf"^{re.escape(header)}", re.MULTILINE)
    return pattern.search(text) is not None


def profile_exists(
    profile: str,
    config_path: Path,
    credentials_path: Path,
) -> bool:
    """Check both files for the profile's section header.

    The config file names sections ``[profile NAME]``; the credentials
    file names them ``[NAME]``.
    """
    if _has_header(config_path, f"[profile {profile}]"):
        logger.debug("profile %s found in %s", profile, config_path)
        return True
    if _has_header(credentials_path, f"[{profile}]"):
        logger.debug("profile %s found in %s", profile, credentials_path)
        return True
    return False


def require_profile(
    profile: str,
    settings: LauncherSettings,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Raise :class:`ProfileNotFoundError` unless the profile is configured."""
    if profile_exists(profile, aws_config_path(environ), aws_credentials_path(environ)):
        return
    raise ProfileNotFoundError(
        f"AWS profile '{profile}' not found in ~/.aws/config or ~/.aws/credentials\n"
        "\n"
        f"Please configure the '{profile}' profile in ~/.aws/config"
        " (as [profile NAME]) or ~/.aws/credentials (as [NAME]).\n"
        f"{settings.docs_hint}"
    )
