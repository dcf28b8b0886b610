"""Flag-to-exec pipeline: each stage takes and returns a LaunchConfig."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from claude_bedrock.args import parse_args
from claude_bedrock.config import DEFAULTS_ENV_VARS, LauncherSettings, env_flag_enabled
from claude_bedrock.configure import apply_defaults, enforce_token_limits, initial_config, interactive_configure
from claude_bedrock.launcher import build_launch_plan
from claude_bedrock.models import resolve_models
from claude_bedrock.preflight import run_preflight
from claude_bedrock.profiles import require_profile
from claude_bedrock.prompts import Prompter, console, say
from claude_bedrock.runner import CommandRunner
from claude_bedrock.session import ensure_session
from claude_bedrock.types import LaunchConfig, LaunchPlan, ModelFamily

logger = logging.getLogger(__name__)

_RULE = "=" * 62


def print_banner() -> None:
    console.print(_RULE)
    console.print("[bold]Claude Code[/bold] on [bold]AWS Bedrock[/bold]", justify="center")
    console.print(_RULE)
    say("You are about to use Claude Code with Albedo's AWS Bedrock")
    say("               It is ITAR compliant!")
    console.print(_RULE)
    say()


def print_summary(config: LaunchConfig) -> None:
    """Show the resolved profile, models and limits before the exec."""
    rows = [
        ("AWS SSO profile", config.profile),
        ("Region", config.region),
        ("Model mode", config.model_label),
    ]
    families = config.mode.families if config.mode is not None else ()
    for family in (*families, ModelFamily.HAIKU):
        rows.append((f"{family.value.capitalize()} ARN", config.routing.get(family) or ""))
    rows.append(("Max output", f"{config.max_output_tokens} tokens"))
    rows.append(("Max thinking", f"{config.max_thinking_tokens} tokens"))
    for label, value in rows:
        say(f"{label:<16s}: {value}")
    say()


def prepare_launch(
    argv: list[str],
    runner: CommandRunner,
    prompter: Prompter,
    settings: LauncherSettings,
    environ: Mapping[str, str] | None = None,
) -> LaunchPlan:
    """Run every stage up to, but not including, the exec.

    Any fatal condition raises a :class:`~claude_bedrock.errors.LauncherError`
    before a plan is returned.
    """
    env = os.environ if environ is None else environ

    args = parse_args(argv)
    use_defaults = args.use_defaults or any(env_flag_enabled(name, dict(env)) for name in DEFAULTS_ENV_VARS)
    config = initial_config(args, settings, use_defaults)
    config = apply_defaults(config, args, settings)

    aws_version = run_preflight(runner, settings, prompter)
    logger.debug("preflight ok (aws %s)", aws_version)

    print_banner()
    if config.profile_from_flag:
        say(f"Using profile: {config.profile} (set via --profile argument)")
        say()

    config = interactive_configure(config, settings, prompter)
    config = enforce_token_limits(config, settings)

    require_profile(config.profile, settings, env)
    ensure_session(runner, settings, config.profile)
    config = resolve_models(runner, config, settings)

    print_summary(config)
    return build_launch_plan(config, assistant=settings.assistant_command, base_env=env)
