"""CLI entry point using Typer."""

from __future__ import annotations

import click
import typer
from typer.core import TyperCommand

from claude_bedrock.config import configure_logging, load_settings
from claude_bedrock.errors import LauncherError
from claude_bedrock.launcher import replace_process
from claude_bedrock.pipeline import prepare_launch
from claude_bedrock.prompts import TyperPrompter
from claude_bedrock.runner import SubprocessRunner

RAW_ARGS_KEY = "claude_bedrock.raw_args"


class PassthroughCommand(TyperCommand):
    """Keeps the untouched argument list, since click drops a bare ``--``."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS_KEY] = list(args)
        return super().parse_args(ctx, args)


app = typer.Typer(
    name="claude-bedrock",
    help="Launch Claude Code against AWS Bedrock.",
    add_completion=False,
)

# Our own flags are parsed by hand so that everything else, including
# --help and --version, reaches claude untouched.
_PASSTHROUGH_CONTEXT = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


@app.command(cls=PassthroughCommand, context_settings=_PASSTHROUGH_CONTEXT)
def main(ctx: typer.Context) -> None:
    """Configure profile, model and token limits, then exec claude.

    Flags: --profile PROFILE, --defaults, --model-name NAME,
    --max-output-tokens N, --max-thinking-tokens N. Anything else is
    passed to claude.
    """
    configure_logging()
    settings = load_settings()
    argv = ctx.meta.get(RAW_ARGS_KEY, list(ctx.args))

    try:
        plan = prepare_launch(argv, SubprocessRunner(), TyperPrompter(), settings)
    except LauncherError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(exc.exit_code) from None
    except KeyboardInterrupt:
        typer.echo("\nInterrupted.", err=True)
        raise typer.Exit(130) from None

    try:
        replace_process(plan)
    except OSError as exc:
        typer.echo(f"ERROR: could not start {plan.command[0]}: {exc}", err=True)
        raise typer.Exit(1) from None


def app_main() -> None:
    """Entry point for the console script."""
    app()
