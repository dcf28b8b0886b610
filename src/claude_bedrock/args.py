"""Command-line flag parsing with passthrough of everything else."""

from __future__ import annotations

from dataclasses import dataclass

from claude_bedrock.errors import ConfigError

# Flags that consume the next token as their value.
VALUE_FLAGS = {
    "--profile": "profile",
    "--model-name": "model_name",
    "--max-output-tokens": "max_output_tokens",
    "--max-thinking-tokens": "max_thinking_tokens",
}
DEFAULTS_FLAG = "--defaults"
END_OF_FLAGS = "--"


@dataclass(frozen=True)
class CliArgs:
    """Recognized flag values plus the tokens destined for ``claude``.

    Values are raw strings; nothing is validated here.
    """

    profile: str | None = None
    use_defaults: bool = False
    model_name: str | None = None
    max_output_tokens: str | None = None
    max_thinking_tokens: str | None = None
    passthrough: tuple[str, ...] = ()


def parse_args(argv: list[str]) -> CliArgs:
    """Walk ``argv`` once, pulling out our flags.

    Unknown flags are not rejected; they are forwarded in their original
    order. A repeated flag keeps its last value. A bare ``--`` ends our
    flags: it and everything after it are forwarded as-is.
    """
    values: dict[str, str] = {}
    use_defaults = False
    passthrough: list[str] = []

    tokens = iter(argv)
    for token in tokens:
        if token == END_OF_FLAGS:
            passthrough.append(token)
            passthrough.extend(tokens)
            break
        if token == DEFAULTS_FLAG:
            use_defaults = True
        elif token in VALUE_FLAGS:
            value = next(tokens, None)
            if value is None:
                raise ConfigError(f"{token} requires a value")
            values[VALUE_FLAGS[token]] = value
        else:
            passthrough.append(token)

    return CliArgs(
        use_defaults=use_defaults,
        passthrough=tuple(passthrough),
        **values,
    )
