"""
Error types for the zserv archive filesystem.
Every error derives from ZservError and from the built-in exception callers already expect.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io


class ZservError(Exception):
    """Base class for all zserv errors."""


class FormatError(ZservError, ValueError):
    """A byte-size literal does not match the size grammar."""


class ConfigError(ZservError, ValueError):
    """Conflicting or out-of-range configuration values."""


class NotFound(ZservError, FileNotFoundError):
    """Path is absent from the archive index, or is not a valid path."""


class SizeLimitExceeded(ZservError, OSError):
    """Entry is too large to be materialized in buffering mode."""


class UnsupportedSeek(ZservError, io.UnsupportedOperation):
    """Seek request outside the patterns a streaming handle supports."""


class ArchiveIOError(ZservError, OSError):
    """The archive could not be read (corrupt data, truncated file, I/O failure)."""
