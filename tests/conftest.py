"""Shared fixtures for claude-bedrock tests."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from pathlib import Path

import pytest

from claude_bedrock.config import LauncherSettings
from claude_bedrock.types import CommandResult

OPUS_ARN = "arn:aws:bedrock:us-west-2:123456789012:inference-profile/us.anthropic.claude-opus-4-5-20251101-v1:0"
SONNET_ARN = "arn:aws:bedrock:us-west-2:123456789012:inference-profile/us.anthropic.claude-sonnet-4-5-20250929-v1:0"
HAIKU_ARN = "arn:aws:bedrock:us-west-2:123456789012:inference-profile/us.anthropic.claude-haiku-4-5-20251001-v1:0"
LLAMA_ARN = "arn:aws:bedrock:us-west-2:123456789012:inference-profile/us.meta.llama3-3-70b-instruct-v1:0"

AWS_BANNER = "aws-cli/2.15.30 Python/3.11.8 Linux/6.1.0 exe/x86_64.ubuntu.22\n"


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(command=[], exit_code=0, stdout=stdout, stderr="")


def fail(stderr: str = "boom", exit_code: int = 255) -> CommandResult:
    return CommandResult(command=[], exit_code=exit_code, stdout="", stderr=stderr)


def profiles_json(*arns: str) -> str:
    return json.dumps({"inferenceProfileSummaries": [{"inferenceProfileArn": a} for a in arns]})


class FakeRunner:
    """Scripted stand-in for :class:`claude_bedrock.runner.SubprocessRunner`.

    ``results`` maps a command prefix to the result returned for any
    command starting with it; the longest matching prefix wins.
    """

    def __init__(
        self,
        results: Mapping[tuple[str, ...], CommandResult] | None = None,
        which: Mapping[str, str] | None = None,
        stream_lines: list[str] | None = None,
        attached_code: int = 0,
        installs: Mapping[str, str] | None = None,
    ) -> None:
        self.paths = dict(which if which is not None else {"claude": "/usr/bin/claude", "aws": "/usr/bin/aws"})
        self.results = dict(results or {})
        self.stream_lines = list(stream_lines or [])
        self.attached_code = attached_code
        self.installs = dict(installs or {})
        self.calls: list[tuple[list[str], dict[str, str]]] = []

    def which(self, name: str) -> str | None:
        return self.paths.get(name)

    def run(self, cmd, env=None, timeout_sec=None) -> CommandResult:
        self.calls.append((list(cmd), dict(env or {})))
        best: tuple[str, ...] | None = None
        for prefix in self.results:
            if tuple(cmd[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return ok()
        result = self.results[best]
        return CommandResult(
            command=list(cmd),
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def stream(self, cmd, env=None) -> Iterator[str]:
        self.calls.append((list(cmd), dict(env or {})))
        yield from self.stream_lines

    def run_attached(self, cmd, env=None) -> int:
        self.calls.append((list(cmd), dict(env or {})))
        if self.attached_code == 0:
            self.paths.update(self.installs)
        return self.attached_code

    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _ in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(cmd[: len(prefix)]) == prefix for cmd in self.commands())


class ScriptedPrompter:
    """Answers prompts from a queue and fails on any prompt it did not expect."""

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.prompts: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {prompt!r}")
        return self.answers.pop(0)


@pytest.fixture
def settings() -> LauncherSettings:
    return LauncherSettings()


@pytest.fixture
def happy_runner() -> FakeRunner:
    """A runner where every external command succeeds."""
    return FakeRunner(
        results={
            ("aws", "--version"): ok(AWS_BANNER),
            ("aws", "sts", "get-caller-identity"): ok('{"Account": "123456789012"}'),
            ("aws", "bedrock", "list-inference-profiles"): ok(
                profiles_json(LLAMA_ARN, OPUS_ARN, SONNET_ARN, HAIKU_ARN)
            ),
        }
    )


@pytest.fixture
def aws_files(tmp_path: Path) -> dict[str, str]:
    """AWS config and credentials files; returns env vars pointing at them."""
    config = tmp_path / "config"
    config.write_text(
        "[default]\nregion = us-west-2\n\n"
        "[profile prod-it01-bedrock]\nsso_session = corp\nregion = us-west-2\n",
        encoding="utf-8",
    )
    credentials = tmp_path / "credentials"
    credentials.write_text(
        "[dev01]\naws_access_key_id = AKIAEXAMPLE\naws_secret_access_key = secret\n",
        encoding="utf-8",
    )
    return {
        "AWS_CONFIG_FILE": str(config),
        "AWS_SHARED_CREDENTIALS_FILE": str(credentials),
    }
