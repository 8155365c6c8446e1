"""Version normalization and ordering for theme releases."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

from packaging.version import InvalidVersion, Version

_PREFIX_RE = re.compile(r"^[^0-9]+")
_LEADING_NUMBERS_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)*)(.*)$", re.DOTALL)

_UNKNOWN_SUFFIX = 0
_DEV_ONLY = 1
_PRE_PHASES = {"a": 2, "b": 3, "rc": 4}
_FINAL = 5

# (valid, epoch, release, phase, phase number, post, dev, build suffix, local)
VersionKey = tuple[int, int, tuple[int, ...], int, int, int, tuple[int, int], str, str]


class Ordering(int, Enum):
    """Result of comparing two version strings."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def normalize(tag: str) -> str:
    """Strip a leading non-numeric prefix such as ``v`` or ``release-``."""
    return _PREFIX_RE.sub("", (tag or "").strip())


def compare(left: str, right: str) -> Ordering:
    """Compare two version strings with dotted-numeric semantics.

    Missing segments count as zero, so ``2.0`` equals ``2.0.0``. PEP 440
    pre-, post- and dev-releases rank as ``packaging`` ranks them; a build
    suffix PEP 440 does not recognise (``1.0-custom``) ranks below every
    recognised form of the same release. Anything that does not start with a
    digit after normalization sorts below every real version. Every input maps
    to one sort key, so the order is total. Never raises.
    """
    return _sign(version_key(left), version_key(right))


def is_newer(installed: str, candidate: str) -> bool:
    """Return True when ``candidate`` orders strictly above ``installed``."""
    return compare(installed, candidate) is Ordering.LESS


def version_key(tag: str) -> VersionKey:
    """Sort key for ``tag``; equal keys mean equal versions."""
    text = normalize(tag)
    parsed = _parse_pep440(text)
    if parsed is not None:
        return _pep440_key(parsed)
    match = _LEADING_NUMBERS_RE.match(text)
    if match is None:
        return (0, 0, (), 0, 0, -1, (0, 0), "", "")
    numbers = _trimmed(int(part) for part in match.group(1).split("."))
    suffix = match.group(2).lstrip(".-+_ ").lower()
    return (1, 0, numbers, _UNKNOWN_SUFFIX, 0, -1, (1, 0), suffix, "")


def _pep440_key(version: Version) -> VersionKey:
    if version.pre is not None:
        phase, phase_number = _PRE_PHASES[version.pre[0]], version.pre[1]
    elif version.dev is not None and version.post is None:
        phase, phase_number = _DEV_ONLY, 0
    else:
        phase, phase_number = _FINAL, 0
    post = version.post if version.post is not None else -1
    # within one phase a .devN build precedes the build it leads up to
    dev = (0, version.dev) if version.dev is not None else (1, 0)
    return (
        1,
        version.epoch,
        _trimmed(version.release),
        phase,
        phase_number,
        post,
        dev,
        "",
        version.local or "",
    )


def _trimmed(parts: Iterable[int]) -> tuple[int, ...]:
    numbers = list(parts)
    while len(numbers) > 1 and numbers[-1] == 0:
        numbers.pop()
    return tuple(numbers)


def _parse_pep440(text: str) -> Version | None:
    if not text:
        return None
    try:
        return Version(text)
    except InvalidVersion:
        return None


def _sign(left: VersionKey, right: VersionKey) -> Ordering:
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL
