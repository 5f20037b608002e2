"""
Utility functions for zserv.

Byte-size literal parsing and the path model shared by the filesystem views:
no leading slash, forward-slash separated, "." denotes the root.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import re
import time
from datetime import datetime
from typing import Dict, Tuple

from .errors import FormatError, NotFound

ROOT = "."

_LIMIT_PATTERN = re.compile(r"([0-9]+)([KMG]?)")

_MULTIPLIERS: Dict[str, int] = {
    "": 1,
    "K": 1024,
    "M": 1024 ** 2,
    "G": 1024 ** 3,
}

# Largest value a signed 64-bit byte count can hold
MAX_LIMIT = 2 ** 63 - 1


def parse_limit(literal: str) -> int:
    """
    Parse a byte-size literal such as "1500", "256M" or "4G".

    The whole string must match: one or more decimal digits, optionally
    followed by exactly one of K, M, G (powers of 1024).

    Args:
        literal: Size literal

    Returns:
        Size in bytes

    Raises:
        FormatError: If the literal does not match the grammar or exceeds MAX_LIMIT
    """
    if not isinstance(literal, str):
        raise FormatError(f"limit must be a string, got {type(literal).__name__}")
    match = _LIMIT_PATTERN.fullmatch(literal)
    if match is None:
        raise FormatError(f"limit string is in invalid format: {literal!r}")
    digits, unit = match.groups()
    value = int(digits) * _MULTIPLIERS[unit]
    if value > MAX_LIMIT:
        raise FormatError(f"limit string is out of range: {literal!r}")
    return value


def split_path(path: str) -> Tuple[str, ...]:
    """
    Split a path into its components, dropping empty and "." parts.

    Raises:
        NotFound: If the path contains a ".." component
    """
    parts = []
    for part in path.replace("\\", "/").split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            raise NotFound(f"invalid path: {path!r}")
        parts.append(part)
    return tuple(parts)


def clean_path(path: str) -> str:
    """
    Normalize a path to the filesystem path model.

    Examples:
        clean_path("/a//b/") -> "a/b"
        clean_path("") -> "."
    """
    parts = split_path(path)
    if not parts:
        return ROOT
    return "/".join(parts)


def join_path(base: str, path: str) -> str:
    """Join two normalized paths, treating "." as the empty path."""
    base = clean_path(base)
    path = clean_path(path)
    if base == ROOT:
        return path
    if path == ROOT:
        return base
    return f"{base}/{path}"


def parent_path(path: str) -> str:
    """Return the parent of a normalized path ("." for top-level names)."""
    if path == ROOT or "/" not in path:
        return ROOT
    return path.rsplit("/", 1)[0]


def base_name(path: str) -> str:
    """Return the last component of a normalized path."""
    return path.rsplit("/", 1)[-1]


def dos_time_to_timestamp(date_time) -> float:
    """Convert a ZIP (DOS) date_time tuple to a Unix timestamp."""
    try:
        return time.mktime(datetime(*date_time).timetuple())
    except (ValueError, OverflowError):
        return 0.0
