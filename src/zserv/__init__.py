"""
zserv: Serve ZIP archives as read-only filesystems

A Python library and command line tool that exposes the contents of a ZIP
archive as a browsable filesystem and serves it over HTTP, without extracting
anything to disk.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT

Public API:
    - open_archive_fs: Open an archive in streaming or buffering mode.
    - resolve_root / detect_root: Narrow the served tree.
    - ServeConfig: Options for serving an archive.
    - parse_limit: Parse byte-size literals such as "256M".

Example usage:
    from zserv import ServeConfig, open_archive_fs, detect_root
    config = ServeConfig(buffer_files=True, max_buffer_size=parse_limit('64M'))
    with open_archive_fs('site.zip', config) as fs:
        root = detect_root(fs)
        with root.open('index.html') as f:
            html = f.read()
"""

import zserv.handlers
from .api.config_api import ServeConfig
from .archive_fs import open_archive_fs, resolve_root
from .core.archive_index import ArchiveEntry, ArchiveIndex
from .core.base_handler import ArchiveFilesystem, DirectoryHandle, FilesystemView, SubFilesystem
from .core.errors import (
    ArchiveIOError,
    ConfigError,
    FormatError,
    NotFound,
    SizeLimitExceeded,
    UnsupportedSeek,
    ZservError,
)
from .core.root_detection import detect_root
from .core.utils import parse_limit
from .handlers import BufferingArchiveFS, StreamingArchiveFS

__version__ = '0.1.0'
__all__ = [
    "ArchiveEntry",
    "ArchiveFilesystem",
    "ArchiveIndex",
    "ArchiveIOError",
    "BufferingArchiveFS",
    "ConfigError",
    "DirectoryHandle",
    "FilesystemView",
    "FormatError",
    "NotFound",
    "ServeConfig",
    "SizeLimitExceeded",
    "StreamingArchiveFS",
    "SubFilesystem",
    "UnsupportedSeek",
    "ZservError",
    "detect_root",
    "open_archive_fs",
    "parse_limit",
    "resolve_root",
]
