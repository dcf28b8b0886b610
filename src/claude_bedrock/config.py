"""Settings loading, validation, and defaults for claude-bedrock."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from rich.console import Console
from rich.logging import RichHandler

from claude_bedrock.types import ModelFamily

CONFIG_ENV_VAR = "CLAUDE_BEDROCK_CONFIG"
DEFAULTS_ENV_VAR = "CLAUDE_BEDROCK_USE_DEFAULTS"
# Name the toggle had before the rename; still honored.
LEGACY_DEFAULTS_ENV_VAR = "ALBEDO_CLAUDE_USE_DEFAULTS"
DEFAULTS_ENV_VARS = (DEFAULTS_ENV_VAR, LEGACY_DEFAULTS_ENV_VAR)
LOG_LEVEL_ENV_VAR = "CLAUDE_BEDROCK_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


class LauncherSettings(BaseModel):
    """Site-wide settings. Nothing here is settable per invocation."""

    region: str = "us-west-2"
    default_profile: str = "prod-it01-bedrock"
    profiles: list[str] = Field(default_factory=lambda: ["prod-it01-bedrock", "dev01"])
    min_aws_version: str = "2.1.0"
    vendor_marker: str = "anthropic"
    search_tokens: dict[ModelFamily, str] = Field(
        default_factory=lambda: {
            ModelFamily.OPUS: "opus-4-5",
            ModelFamily.SONNET: "sonnet-4-5",
            ModelFamily.HAIKU: "haiku-4-5",
        }
    )
    fallback_haiku_model: str = "anthropic.claude-3-5-haiku-20241022-v1:0"
    output_token_choices: list[int] = Field(default_factory=lambda: [4096, 8192, 16384, 32768])
    thinking_token_choices: list[int] = Field(default_factory=lambda: [1024, 2048, 4096, 8192])
    assistant_command: str = "claude"
    aws_command: str = "aws"
    install_command: list[str] = Field(
        default_factory=lambda: ["bash", "-c", "curl -fsSL https://claude.ai/install.sh | bash"]
    )
    docs_hint: str = "For more information, please see the 'GSW Development Environment' Notion Page."
    # Lines from `aws sso login` that only report WSL interop noise.
    login_noise: list[str] = Field(
        default_factory=lambda: ["WSL Interop", "binfmt_misc", "tcgetpgrp"]
    )

    @model_validator(mode="after")
    def _check_choices(self) -> LauncherSettings:
        if len(self.profiles) < 1:
            raise ValueError("profiles must list at least one profile")
        if self.default_profile not in self.profiles:
            raise ValueError(
                f"default_profile '{self.default_profile}' is not one of {self.profiles}"
            )
        if not self.output_token_choices or not self.thinking_token_choices:
            raise ValueError("token choices must not be empty")
        if self.default_thinking_tokens >= min(self.output_token_choices):
            raise ValueError(
                "the first thinking token choice must be below every output token choice"
            )
        missing = [f.value for f in ModelFamily if f not in self.search_tokens]
        if missing:
            raise ValueError(f"search_tokens missing families: {', '.join(missing)}")
        return self

    @property
    def default_output_tokens(self) -> int:
        return self.output_token_choices[0]

    @property
    def default_thinking_tokens(self) -> int:
        return self.thinking_token_choices[0]

    def search_token(self, family: ModelFamily) -> str:
        return self.search_tokens[family]


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and return parsed YAML from a file.

    Returns an empty dict on parse errors (with a warning to stderr).
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        print(
            f"Warning: failed to parse config '{path}': {exc}\n"
            f"  Falling back to default settings.",
            file=sys.stderr,
        )
        return {}
    except OSError as exc:
        print(
            f"Warning: could not read config '{path}': {exc}\n"
            f"  Falling back to default settings.",
            file=sys.stderr,
        )
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(environ: dict[str, str] | None = None) -> LauncherSettings:
    """Load settings from the first available source.

    Search order:
    1. Path named by ``CLAUDE_BEDROCK_CONFIG``
    2. Home directory ~/.claude-bedrock.yml
    3. Built-in defaults
    """
    env = os.environ if environ is None else environ
    candidates: list[Path] = []

    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.home() / ".claude-bedrock.yml")

    for path in candidates:
        if path.is_file():
            return _parse_settings(_load_yaml(path), path)

    return LauncherSettings()


def _parse_settings(raw: dict[str, Any], path: Path) -> LauncherSettings:
    """Validate a raw YAML dict, falling back to defaults when invalid."""
    try:
        return LauncherSettings(**raw)
    except (ValidationError, TypeError) as exc:
        print(
            f"Warning: invalid settings in '{path}': {exc}\n"
            f"  Falling back to default settings.",
            file=sys.stderr,
        )
        return LauncherSettings()


def env_flag_enabled(name: str, environ: dict[str, str] | None = None) -> bool:
    """True when an environment toggle is set to a truthy word."""
    env = os.environ if environ is None else environ
    return env.get(name, "").strip().lower() in _TRUTHY


def configure_logging(environ: dict[str, str] | None = None) -> None:
    """Route package loggers to stderr at the level named in the environment."""
    env = os.environ if environ is None else environ
    level_name = env.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("claude_bedrock")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
