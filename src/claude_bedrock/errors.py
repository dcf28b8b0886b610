"""Fatal launcher errors.

Every stage raises one of these; the CLI is the only place that prints them
and turns them into an exit status.
"""

from __future__ import annotations


class LauncherError(Exception):
    """Base class for conditions that stop the launch."""

    exit_code = 1


class ConfigError(LauncherError):
    """Invalid flag value or settings combination."""


class InvalidModelNameError(LauncherError):
    """``--model-name`` did not name a known mode."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid model name '{name}'. Must contain 'opus', 'sonnet', or 'opusplan'."
        )
        self.name = name


class MissingDependencyError(LauncherError):
    """A required executable is not on PATH."""


class VersionTooOldError(LauncherError):
    """The AWS CLI is older than the supported minimum."""

    def __init__(self, found: str, minimum: str) -> None:
        super().__init__(
            f"AWS CLI version {found or '(unknown)'} is too old.\n"
            f"Minimum required version: {minimum} (for Bedrock support)\n"
            f"Current version: {found or '(unknown)'}\n"
            "Please upgrade AWS CLI to the minimum required version."
        )
        self.found = found
        self.minimum = minimum


class ProfileNotFoundError(LauncherError):
    """The AWS profile has no section in either config file."""


class ModelQueryError(LauncherError):
    """Listing Bedrock inference profiles failed."""


class ModelNotFoundError(LauncherError):
    """No inference profile matched a required model family."""
