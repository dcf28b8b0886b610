"""Environment assembly and the final process replacement."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import NoReturn

from claude_bedrock.errors import ConfigError
from claude_bedrock.types import LaunchConfig, LaunchPlan, ModelFamily

logger = logging.getLogger(__name__)

_FAMILY_ENV = {
    ModelFamily.OPUS: "ANTHROPIC_DEFAULT_OPUS_MODEL",
    ModelFamily.SONNET: "ANTHROPIC_DEFAULT_SONNET_MODEL",
    ModelFamily.HAIKU: "ANTHROPIC_DEFAULT_HAIKU_MODEL",
}


def launch_env(config: LaunchConfig) -> dict[str, str]:
    """Variables Claude Code needs for this config, keyed by mode."""
    if config.mode is None or config.max_output_tokens is None or config.max_thinking_tokens is None:
        raise ConfigError("Launch configuration is incomplete.")

    env = {
        "AWS_PROFILE": config.profile,
        "AWS_REGION": config.region,
        "CLAUDE_CODE_USE_BEDROCK": "1",
    }
    for family in (*config.mode.families, ModelFamily.HAIKU):
        arn = config.routing.get(family)
        if not arn:
            raise ConfigError(f"No routing identifier resolved for {family.value}.")
        env[_FAMILY_ENV[family]] = arn
    env["ANTHROPIC_MODEL"] = config.mode.value
    env["CLAUDE_CODE_MAX_OUTPUT_TOKENS"] = str(config.max_output_tokens)
    env["MAX_THINKING_TOKENS"] = str(config.max_thinking_tokens)
    return env


def build_launch_plan(
    config: LaunchConfig,
    assistant: str = "claude",
    base_env: Mapping[str, str] | None = None,
) -> LaunchPlan:
    """Command and full environment for the exec; the current env is inherited."""
    overrides = launch_env(config)
    inherited = os.environ if base_env is None else base_env
    return LaunchPlan(
        command=[assistant, *config.passthrough],
        env={**inherited, **overrides},
        overrides=overrides,
    )


def replace_process(plan: LaunchPlan) -> NoReturn:
    """Replace this process with ``plan.command``. Never returns."""
    logger.debug("exec: %s", " ".join(plan.command))
    os.execvpe(plan.command[0], plan.command, plan.env)
