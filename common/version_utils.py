# common/version_utils.py
# -*- coding: utf-8 -*-
"""
Parsing and comparison of tool version strings such as `v18.18.0`.

Versions are compared as `(major, minor, patch)` integer tuples, so
`v18.9.0` is lower than `v18.18.0` even though it sorts higher as text.
"""

import re
from typing import Tuple

VersionTuple = Tuple[int, int, int]

_VERSION_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(version_str: str) -> VersionTuple:
    """
    Parse a version string into a `(major, minor, patch)` tuple.

    A leading `v` and surrounding whitespace are ignored, missing components
    default to 0 and anything after the patch number (pre-release or build
    suffixes) is dropped.

    Raises:
        ValueError: If the string does not start with a version number.
    """
    match = _VERSION_RE.match(version_str.strip())
    if not match:
        raise ValueError(f"Unrecognised version string: {version_str!r}")
    major, minor, patch = match.groups()
    return int(major), int(minor or 0), int(patch or 0)


def version_at_least(actual: str, minimum: str) -> bool:
    """True when `actual` is equal to or newer than `minimum`."""
    return parse_version(actual) >= parse_version(minimum)
