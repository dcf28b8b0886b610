"""Shared data types for the launch pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace


class ModelFamily(str, enum.Enum):
    """Model tiers that map to a Bedrock inference profile."""

    OPUS = "opus"
    SONNET = "sonnet"
    HAIKU = "haiku"


class ModelMode(str, enum.Enum):
    """Which primary model family (or pair) Claude Code runs with."""

    OPUSPLAN = "opusplan"
    OPUS = "opus"
    SONNET = "sonnet"

    @property
    def families(self) -> tuple[ModelFamily, ...]:
        """Primary families whose routing identifiers this mode requires."""
        if self is ModelMode.OPUSPLAN:
            return (ModelFamily.OPUS, ModelFamily.SONNET)
        if self is ModelMode.OPUS:
            return (ModelFamily.OPUS,)
        return (ModelFamily.SONNET,)

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS = {
    ModelMode.OPUSPLAN: "OpusPlan (Opus + Sonnet)",
    ModelMode.OPUS: "Opus 4.5",
    ModelMode.SONNET: "Sonnet 4.5",
}


@dataclass
class CommandResult:
    """Result from running a single external command."""

    command: list[str]
    exit_code: int | None
    stdout: str
    stderr: str
    duration_sec: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class RoutingIdentifiers:
    """Resolved inference profile ARNs, one slot per family."""

    opus: str | None = None
    sonnet: str | None = None
    haiku: str | None = None

    def get(self, family: ModelFamily) -> str | None:
        return getattr(self, family.value)


@dataclass(frozen=True)
class LaunchConfig:
    """Configuration for one invocation.

    Each pipeline stage returns an updated copy through one of the
    ``with_*`` helpers; nothing mutates a config in place.
    """

    profile: str
    region: str
    profile_from_flag: bool = False
    use_defaults: bool = False
    mode: ModelMode | None = None
    max_output_tokens: int | None = None
    max_thinking_tokens: int | None = None
    passthrough: tuple[str, ...] = ()
    routing: RoutingIdentifiers = field(default_factory=RoutingIdentifiers)

    @property
    def model_label(self) -> str:
        return self.mode.label if self.mode is not None else "(unresolved)"

    def with_profile(self, profile: str) -> LaunchConfig:
        return replace(self, profile=profile)

    def with_mode(self, mode: ModelMode) -> LaunchConfig:
        return replace(self, mode=mode)

    def with_tokens(
        self,
        max_output_tokens: int | None = None,
        max_thinking_tokens: int | None = None,
    ) -> LaunchConfig:
        return replace(
            self,
            max_output_tokens=(
                self.max_output_tokens if max_output_tokens is None else max_output_tokens
            ),
            max_thinking_tokens=(
                self.max_thinking_tokens if max_thinking_tokens is None else max_thinking_tokens
            ),
        )

    def with_routing(self, routing: RoutingIdentifiers) -> LaunchConfig:
        return replace(self, routing=routing)


@dataclass(frozen=True)
class LaunchPlan:
    """Fully resolved command and environment for the final exec."""

    command: list[str]
    env: dict[str, str]
    overrides: dict[str, str] = field(default_factory=dict)
