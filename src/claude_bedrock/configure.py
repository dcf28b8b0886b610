"""Mode and token-limit resolution: defaults shortcut, flags, and menus."""

from __future__ import annotations

import logging

from claude_bedrock.args import CliArgs
from claude_bedrock.config import LauncherSettings
from claude_bedrock.errors import ConfigError, InvalidModelNameError
from claude_bedrock.prompts import Menu, MenuOption, Prompter, choose, console, say
from claude_bedrock.types import LaunchConfig, ModelMode

logger = logging.getLogger(__name__)

HIGH_LIMIT_WARNING = "Higher token limits may result in slower response times and potential timeouts."

_OUTPUT_PREAMBLE = (
    "Higher value → Claude can return longer, more complete responses (e.g. full code snippets,"
    " detailed explanations). This comes at the cost of:",
    "  • Higher latency (responses take longer to stream back).",
    "  • Greater risk of hitting AWS Bedrock model limits or timeouts if you set it too high.",
    "",
    "Lower value → Claude's responses are cut off sooner. This improves:",
    "  • Response time (faster output).",
    "  But you may get truncated answers, especially for code completions or explanations.",
    "",
)

# Checked in order: "opusplan" contains "opus", so it must win first.
_MODE_PRIORITY = (ModelMode.OPUSPLAN, ModelMode.OPUS, ModelMode.SONNET)


def mode_from_name(name: str) -> ModelMode:
    """Derive the mode from a free-form model name by substring match."""
    lowered = name.lower()
    for mode in _MODE_PRIORITY:
        if mode.value in lowered:
            return mode
    raise InvalidModelNameError(name)


def parse_token_count(flag: str, raw: str, choices: list[int]) -> int:
    """Parse a token flag value; it must be one of the menu choices."""
    allowed = ", ".join(str(c) for c in choices)
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{flag} must be one of {allowed}, got '{raw}'") from None
    if value not in choices:
        raise ConfigError(f"{flag} must be one of {allowed}, got {value}")
    return value


def initial_config(args: CliArgs, settings: LauncherSettings, use_defaults: bool) -> LaunchConfig:
    """Build the starting config from parsed flags."""
    return LaunchConfig(
        profile=args.profile if args.profile is not None else settings.default_profile,
        region=settings.region,
        profile_from_flag=args.profile is not None,
        use_defaults=use_defaults,
        passthrough=args.passthrough,
    )


def apply_defaults(config: LaunchConfig, args: CliArgs, settings: LauncherSettings) -> LaunchConfig:
    """Apply the defaults shortcut, or take mode and tokens from flags.

    In defaults mode every flag-supplied model or token value is ignored.
    """
    if config.use_defaults:
        config = config.with_mode(ModelMode.OPUSPLAN).with_tokens(
            settings.default_output_tokens, settings.default_thinking_tokens
        )
        say(
            f"Using default settings: {config.model_label}, {config.max_output_tokens} output tokens,"
            f" {config.max_thinking_tokens} thinking tokens"
        )
        return config

    if args.model_name:
        config = config.with_mode(mode_from_name(args.model_name))
        logger.debug("mode %s from --model-name %r", config.mode, args.model_name)
    if args.max_output_tokens is not None:
        config = config.with_tokens(
            max_output_tokens=parse_token_count(
                "--max-output-tokens", args.max_output_tokens, settings.output_token_choices
            )
        )
    if args.max_thinking_tokens is not None:
        config = config.with_tokens(
            max_thinking_tokens=parse_token_count(
                "--max-thinking-tokens", args.max_thinking_tokens, settings.thinking_token_choices
            )
        )
    return config


def _fmt(tokens: int) -> str:
    return f"{tokens:,} tokens"


def profile_menu(settings: LauncherSettings) -> Menu[str]:
    ordered = [settings.default_profile] + [p for p in settings.profiles if p != settings.default_profile]
    return Menu(
        title="Select the AWS profile to use:",
        options=[MenuOption(label=p, value=p) for p in ordered],
    )


def model_menu() -> Menu[ModelMode]:
    return Menu(
        title="Select the Claude model to use:",
        options=[
            MenuOption(
                label="OpusPlan - Auto-switch between Opus (planning) and Sonnet (execution)",
                value=ModelMode.OPUSPLAN,
                selected="OpusPlan",
            ),
            MenuOption(label="Opus 4.5 - Force Opus for all operations", value=ModelMode.OPUS, selected="Opus 4.5"),
            MenuOption(
                label="Sonnet 4.5 - Force Sonnet for all operations", value=ModelMode.SONNET, selected="Sonnet 4.5"
            ),
        ],
    )


def _token_menu(title: str, choices: list[int], preamble: tuple[str, ...] = ()) -> Menu[int]:
    # The largest non-default choice carries the latency/timeout warning.
    largest = max(choices)
    options = []
    for c in choices:
        risky = c == largest and c != choices[0]
        options.append(MenuOption(label=_fmt(c), value=c, warning=HIGH_LIMIT_WARNING if risky else None))
    return Menu(
        title=title,
        options=options,
        preamble=preamble,
    )


def output_menu(settings: LauncherSettings) -> Menu[int]:
    return _token_menu("Configure Maximum Output Tokens:", settings.output_token_choices, _OUTPUT_PREAMBLE)


def thinking_menu(settings: LauncherSettings) -> Menu[int]:
    return _token_menu("Configure Maximum Thinking Tokens:", settings.thinking_token_choices)


def interactive_configure(
    config: LaunchConfig,
    settings: LauncherSettings,
    prompter: Prompter,
) -> LaunchConfig:
    """Ask for whatever flags and defaults left unresolved."""
    if config.use_defaults:
        return config

    if not config.profile_from_flag and len(settings.profiles) > 1:
        config = config.with_profile(choose(profile_menu(settings), prompter))
    if config.mode is None:
        config = config.with_mode(choose(model_menu(), prompter))
    if config.max_output_tokens is None:
        config = config.with_tokens(max_output_tokens=choose(output_menu(settings), prompter))
    if config.max_thinking_tokens is None:
        config = config.with_tokens(max_thinking_tokens=choose(thinking_menu(settings), prompter))
    return config


def enforce_token_limits(config: LaunchConfig, settings: LauncherSettings) -> LaunchConfig:
    """Keep thinking tokens strictly below output tokens.

    A violating thinking limit is reset to the default with a notice; the
    settings guarantee the default is below every output choice.
    """
    output = config.max_output_tokens or settings.default_output_tokens
    thinking = config.max_thinking_tokens or settings.default_thinking_tokens
    config = config.with_tokens(output, thinking)
    if thinking < output:
        return config

    default = settings.default_thinking_tokens
    console.print(
        f"[red]ERROR: Maximum thinking tokens ({thinking}) must be less than"
        f" maximum output tokens ({output}).[/red]"
    )
    say(f"Setting thinking tokens to a safe default ({default:,}).")
    say(f"Adjusted to: {_fmt(default)}")
    return config.with_tokens(max_thinking_tokens=default)
