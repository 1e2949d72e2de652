"""Helpers for Cargo version strings and requirements."""

from __future__ import annotations

import re
from typing import Tuple

_SEMVER = re.compile(
    r"^(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)

ANY_VERSION = "*"


def version_sort_key(version: str) -> Tuple[object, ...]:
    """Return a key that orders versions the way semver does.

    Pre-releases sort before the matching release. Strings that are not
    semver fall back to plain string order after every valid version.
    """
    match = _SEMVER.match(version.strip())
    if match is None:
        return (1, version)
    core = tuple(int(match.group(part) or 0) for part in ("major", "minor", "patch"))
    pre = match.group("pre")
    if pre is None:
        return (0, core, 1, ())
    identifiers = tuple(
        (0, int(ident), "") if ident.isdigit() else (1, 0, ident) for ident in pre.split(".")
    )
    return (0, core, 0, identifiers)


def is_any_version(req: str | None) -> bool:
    """True when ``req`` places no constraint on the version."""
    if req is None:
        return True
    return req.strip() in {"", ANY_VERSION}


__all__ = ["ANY_VERSION", "is_any_version", "version_sort_key"]
