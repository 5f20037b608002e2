"""
Archive index for zserv.
Builds the directory tree of a ZIP archive from its central directory and opens
decompressing streams for individual members.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import zipfile
import zlib
from typing import Dict, List, NamedTuple, Set

from .errors import ArchiveIOError, NotFound
from .logging import debug_print
from .utils import ROOT, base_name, clean_path, dos_time_to_timestamp, parent_path, split_path

# Errors zipfile and its decompressors raise on damaged archive data
_ARCHIVE_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError, NotImplementedError)


class ArchiveEntry(NamedTuple):
    """Information about an entry in an archive."""
    path: str
    size: int
    modified: float
    is_dir: bool

    @property
    def name(self) -> str:
        return base_name(self.path)


class EntryStream:
    """
    Forward-only decompressing stream for one archive member.
    Translates archive read failures into ArchiveIOError.
    """

    def __init__(self, raw, path: str):
        self._raw = raw
        self.path = path

    def read(self, size=-1):
        try:
            return self._raw.read(size)
        except _ARCHIVE_ERRORS as e:
            debug_print(f"Exception in EntryStream.read ({self.path}): {e}", level=1, exc=e)
            raise ArchiveIOError(f"error reading {self.path}: {e}") from e

    def close(self):
        self._raw.close()

    @property
    def closed(self):
        return self._raw.closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class ArchiveIndex:
    """
    Read-only index over a ZIP archive.

    Paths follow the filesystem path model ("." is the root). Directories that
    appear only as prefixes of member names are synthesized.
    """

    def __init__(self, source):
        """
        Args:
            source: Seekable binary file-like object (usually an ArchiveSource)
        """
        self.source = source
        try:
            self._zip = zipfile.ZipFile(source, "r")
        except _ARCHIVE_ERRORS as e:
            debug_print(f"Exception in ArchiveIndex.__init__: {e}", level=1, exc=e)
            raise ArchiveIOError(f"cannot open ZIP archive: {e}") from e
        self._entries: Dict[str, ArchiveEntry] = {ROOT: ArchiveEntry(ROOT, 0, 0.0, True)}
        self._members: Dict[str, zipfile.ZipInfo] = {}
        self._children: Dict[str, Set[str]] = {ROOT: set()}
        for info in self._zip.infolist():
            self._add_member(info)
        debug_print(f"[ArchiveIndex] indexed {len(self._entries) - 1} entries", level=2)

    def _add_member(self, info: zipfile.ZipInfo):
        try:
            parts = split_path(info.filename)
        except NotFound:
            debug_print(f"[ArchiveIndex] skipping unsafe member name {info.filename!r}", level=1)
            return
        if not parts:
            return
        path = "/".join(parts)
        self._add_parents(path)
        if info.is_dir():
            if path in self._entries and not self._entries[path].is_dir:
                debug_print(f"[ArchiveIndex] directory {path!r} shadows a file member", level=1)
                del self._members[path]
            self._entries[path] = ArchiveEntry(path, 0, dos_time_to_timestamp(info.date_time), True)
            self._children.setdefault(path, set())
            return
        if path in self._entries and self._entries[path].is_dir:
            debug_print(f"[ArchiveIndex] skipping file member {path!r} that collides with a directory", level=1)
            return
        self._entries[path] = ArchiveEntry(path, info.file_size, dos_time_to_timestamp(info.date_time), False)
        self._members[path] = info

    def _add_parents(self, path: str):
        child = path
        parent = parent_path(child)
        while True:
            self._children.setdefault(parent, set()).add(base_name(child))
            if parent == ROOT:
                break
            if parent in self._entries and not self._entries[parent].is_dir:
                # A file member named like a directory prefix; the directory wins
                debug_print(f"[ArchiveIndex] file member {parent!r} replaced by directory", level=1)
                del self._members[parent]
                del self._entries[parent]
            if parent not in self._entries:
                self._entries[parent] = ArchiveEntry(parent, 0, 0.0, True)
            child = parent
            parent = parent_path(child)

    def __len__(self):
        return len(self._entries) - 1

    def stat(self, path: str) -> ArchiveEntry:
        """
        Look up an entry.

        Raises:
            NotFound: If the path is not in the archive
        """
        path = clean_path(path)
        entry = self._entries.get(path)
        if entry is None:
            raise NotFound(f"file does not exist: {path}")
        return entry

    def children(self, path: str) -> List[ArchiveEntry]:
        """
        List the immediate children of a directory, sorted by name.

        Raises:
            NotFound: If the path is missing
            NotADirectoryError: If the path is a file
        """
        entry = self.stat(path)
        if not entry.is_dir:
            raise NotADirectoryError(f"not a directory: {entry.path}")
        prefix = "" if entry.path == ROOT else entry.path + "/"
        return [self._entries[prefix + name] for name in sorted(self._children.get(entry.path, ()))]

    def open_stream(self, path: str) -> EntryStream:
        """
        Open a decompressing stream for a file member.

        Raises:
            NotFound: If the path is missing
            IsADirectoryError: If the path is a directory
            ArchiveIOError: If the member cannot be opened
        """
        entry = self.stat(path)
        if entry.is_dir:
            raise IsADirectoryError(f"cannot open directory as file: {entry.path}")
        info = self._members[entry.path]
        try:
            raw = self._zip.open(info, "r")
        except _ARCHIVE_ERRORS as e:
            debug_print(f"Exception in ArchiveIndex.open_stream ({entry.path}): {e}", level=1, exc=e)
            raise ArchiveIOError(f"error opening {entry.path}: {e}") from e
        return EntryStream(raw, entry.path)

    def close(self):
        """Close the ZIP reader and the underlying source."""
        self._zip.close()
        if hasattr(self.source, "close"):
            self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
