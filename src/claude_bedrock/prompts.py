"""Interactive prompts and numbered menus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

T = TypeVar("T")

# Shared stdout console for everything the user reads.
console = Console(highlight=False, soft_wrap=True, emoji=False)

WARNING_PREFIX = "⚠️  WARNING:"


def say(msg: str = "") -> None:
    """Print plain text; brackets in ``msg`` are not treated as markup."""
    console.print(escape(msg))


def warn(msg: str) -> None:
    console.print(f"[yellow]{escape(msg)}[/yellow]")


class Prompter(Protocol):
    """Reads one line of user input for a prompt string."""

    def ask(self, prompt: str) -> str: ...


class TyperPrompter:
    """Prompter backed by :func:`typer.prompt`; blank input returns ``""``."""

    def ask(self, prompt: str) -> str:
        return typer.prompt(prompt, default="", show_default=False, prompt_suffix="")


@dataclass(frozen=True)
class MenuOption(Generic[T]):
    """One numbered entry in a menu."""

    label: str
    value: T
    selected: str = ""
    warning: str | None = None

    @property
    def confirmation(self) -> str:
        return self.selected or self.label


@dataclass(frozen=True)
class Menu(Generic[T]):
    """A numbered menu whose first option is the default."""

    title: str
    options: list[MenuOption[T]]
    preamble: tuple[str, ...] = ()

    def render(self) -> list[str]:
        lines = list(self.preamble)
        lines.append(self.title)
        lines.append("=" * (len(self.title) + 1))
        for idx, opt in enumerate(self.options, start=1):
            suffix = " (default)" if idx == 1 else ""
            lines.append(f"{idx}) {opt.label}{suffix}")
        lines.append("")
        return lines

    @property
    def prompt(self) -> str:
        return f"Enter your choice [1-{len(self.options)}] (press Enter for default): "

    def pick(self, answer: str) -> MenuOption[T]:
        """Map raw input to an option; anything unrecognized means the default."""
        choice = answer.strip()
        if choice.isdigit():
            idx = int(choice)
            if 1 <= idx <= len(self.options):
                return self.options[idx - 1]
        return self.options[0]


def choose(menu: Menu[T], prompter: Prompter) -> T:
    """Show ``menu``, read one answer, confirm the selection, return its value."""
    for line in menu.render():
        say(line)
    option = menu.pick(prompter.ask(menu.prompt))
    is_default = option is menu.options[0]
    say(f"Selected: {option.confirmation}" + (" (default)" if is_default else ""))
    if option.warning:
        warn(f"{WARNING_PREFIX} {option.warning}")
    say()
    return option.value


def confirm_yes(prompter: Prompter, prompt: str) -> bool:
    """True only for a single ``y`` or ``Y``."""
    return prompter.ask(prompt).strip() in ("y", "Y")
