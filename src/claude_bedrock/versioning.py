"""Version banner parsing and natural version ordering.

Versions are compared the way ``sort -V`` orders them: the string is split
into runs of digits and non-digits, digit runs compare as integers and the
rest compare as text. ``2.10.0`` therefore sorts after ``2.9.0``.

>>> is_at_least("2.10.0", "2.1.0")
True
>>> is_at_least("2.0.9", "2.1.0")
False
"""

from __future__ import annotations

import re

_RUN_RE = re.compile(r"\d+|\D+")


def parse_aws_version(banner: str) -> str:
    """Extract the version from ``aws --version`` output.

    ``aws-cli/2.15.30 Python/3.11.8 Linux/6.1 exe/x86_64`` gives ``2.15.30``.
    Returns ``""`` when the banner has no ``/``.
    """
    first = banner.strip().splitlines()[0] if banner.strip() else ""
    if "/" not in first:
        return ""
    return first.split("/", 1)[1].split(" ", 1)[0].strip()


def version_key(version: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key for natural version ordering.

    Text runs sort before digit runs at the same position, and a version
    that is a prefix of another sorts first.
    """
    key: list[tuple[int, int, str]] = []
    for run in _RUN_RE.findall(version.strip()):
        if run.isdigit():
            key.append((1, int(run), ""))
        else:
            key.append((0, 0, run))
    return tuple(key)


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as ``left`` sorts before, equal to, or after ``right``."""
    a, b = version_key(left), version_key(right)
    return (a > b) - (a < b)


def is_at_least(version: str, minimum: str) -> bool:
    if not version.strip():
        return False
    return compare_versions(version, minimum) >= 0
