"""Bedrock inference profile lookup for each model family."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from claude_bedrock.config import LauncherSettings
from claude_bedrock.errors import ModelNotFoundError, ModelQueryError
from claude_bedrock.prompts import warn
from claude_bedrock.runner import CommandRunner
from claude_bedrock.types import LaunchConfig, ModelFamily, ModelMode, RoutingIdentifiers

logger = logging.getLogger(__name__)

_FAMILY_LABELS = {
    ModelFamily.OPUS: "Opus 4.5",
    ModelFamily.SONNET: "Sonnet 4.5",
    ModelFamily.HAIKU: "Haiku 4.5",
}


def list_inference_profiles(
    runner: CommandRunner,
    settings: LauncherSettings,
    profile: str,
    region: str,
) -> list[str]:
    """Return the ARNs of every system-defined inference profile in ``region``."""
    cmd = [
        settings.aws_command,
        "bedrock",
        "list-inference-profiles",
        "--type-equals",
        "SYSTEM_DEFINED",
        "--output",
        "json",
    ]
    result = runner.run(cmd, env={"AWS_PROFILE": profile, "AWS_REGION": region}, timeout_sec=120)
    if not result.ok:
        detail = result.stderr.strip() or f"exit={result.exit_code}"
        raise ModelQueryError(f"Could not list Bedrock inference profiles in {region}: {detail}")

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise ModelQueryError(f"Unexpected output from list-inference-profiles: {exc}") from None

    summaries = data.get("inferenceProfileSummaries", []) if isinstance(data, dict) else []
    arns = [
        s["inferenceProfileArn"]
        for s in summaries
        if isinstance(s, dict) and isinstance(s.get("inferenceProfileArn"), str)
    ]
    logger.debug("%d inference profiles in %s", len(arns), region)
    return arns


def find_routing_identifier(arns: Iterable[str], vendor: str, search: str) -> str | None:
    """First ARN containing both ``vendor`` and ``search``, ignoring case."""
    vendor, search = vendor.lower(), search.lower()
    for arn in arns:
        lowered = arn.lower()
        if vendor in lowered and search in lowered:
            return arn
    return None


def resolve_routing(
    arns: list[str],
    mode: ModelMode,
    settings: LauncherSettings,
    region: str,
) -> RoutingIdentifiers:
    """Pick ARNs for the fast family and every primary family ``mode`` needs.

    The fast family falls back to a fixed model id; a missing primary
    family is fatal.
    """
    haiku = find_routing_identifier(arns, settings.vendor_marker, settings.search_token(ModelFamily.HAIKU))
    if haiku is None:
        warn(f"WARNING: Couldn't find {_FAMILY_LABELS[ModelFamily.HAIKU]} inference profile in {region}.")
        warn("Falling back to legacy Haiku 3.5 model ID.")
        haiku = settings.fallback_haiku_model

    found: dict[str, str] = {}
    missing: list[str] = []
    for family in mode.families:
        arn = find_routing_identifier(arns, settings.vendor_marker, settings.search_token(family))
        if arn is None:
            missing.append(_FAMILY_LABELS[family])
        else:
            logger.debug("%s -> %s", family.value, arn)
            found[family.value] = arn

    if missing:
        raise ModelNotFoundError(
            f"Couldn't find {' and/or '.join(missing)} inference profile"
            f"{'s' if len(missing) > 1 else ''} in {region}."
        )
    return RoutingIdentifiers(haiku=haiku, **found)


def resolve_models(runner: CommandRunner, config: LaunchConfig, settings: LauncherSettings) -> LaunchConfig:
    if config.mode is None:
        raise ModelQueryError("Model mode was not resolved before the model lookup.")
    arns = list_inference_profiles(runner, settings, config.profile, config.region)
    return config.with_routing(resolve_routing(arns, config.mode, settings, config.region))
