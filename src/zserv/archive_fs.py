"""
zserv: serve the contents of a ZIP archive as a read-only filesystem.

This module wires the pieces together: byte source, archive index, the
filesystem variant selected by the configuration, and the served root.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os

import zserv.handlers
from .api.config_api import ServeConfig
from .core.archive_index import ArchiveIndex
from .core.base_handler import FilesystemView
from .core.errors import ZservError
from .core.handler_manager import FilesystemManager
from .core.logging import debug_print
from .core.root_detection import detect_root
from .core.source import BytesSource, FileSource
from .core.utils import ROOT


def _make_source(archive):
    if isinstance(archive, (str, os.PathLike)):
        return FileSource.from_path(os.fspath(archive))
    if isinstance(archive, (bytes, bytearray, memoryview)):
        return BytesSource(archive)
    # Any seekable binary file object
    return archive


def open_archive_fs(archive, config: ServeConfig = None):
    """
    Open an archive as a filesystem in the mode the config selects.

    Args:
        archive: Path to the archive, its bytes, or a seekable binary file object
        config: Serving options (defaults to ServeConfig())

    Returns:
        An ArchiveFilesystem; close it to release the archive

    Raises:
        ArchiveIOError: If the archive cannot be opened or is not a ZIP file
    """
    config = config or ServeConfig()
    source = _make_source(archive)
    try:
        index = ArchiveIndex(source)
    except Exception:
        if source is not archive:
            source.close()
        raise
    debug_print(f"opened archive with {len(index)} entries in {config.mode} mode", level=1)
    return FilesystemManager.create_filesystem(config.mode, index, config)


def resolve_root(fs: FilesystemView, config: ServeConfig) -> FilesystemView:
    """
    Narrow a filesystem to the root the config asks for.

    An explicit root that does not exist is an error. A failed root detection
    is logged and the undetected view is served instead.
    """
    if config.root != ROOT:
        debug_print(f"opening sub-filesystem at {config.root}", level=1)
        return fs.sub(config.root)
    if config.detect_root:
        try:
            detected = detect_root(fs)
        except (ZservError, OSError) as e:
            debug_print(f"auto-detection of website root failed: {e}", level=0, exc=e)
            return fs
        debug_print(f"Detect root as: {getattr(detected, 'prefix', ROOT)}", level=1)
        return detected
    return fs
