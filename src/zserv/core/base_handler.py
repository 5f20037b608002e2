"""
Base filesystem views for zserv.
Defines the open / stat / listdir contract consumed by the HTTP server, the
path-prefixed SubFilesystem view and the ArchiveFilesystem base class that the
streaming and buffering variants implement.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from abc import ABC, abstractmethod
from typing import List

from .archive_index import ArchiveEntry, ArchiveIndex
from .errors import NotFound
from .logging import debug_print
from .utils import ROOT, clean_path, join_path


class DirectoryHandle:
    """Handle returned by open() for a directory. Identical in every variant."""

    def __init__(self, fs: "FilesystemView", path: str, entry: ArchiveEntry):
        self._fs = fs
        self._path = path
        self._entry = entry
        self._closed = False

    @property
    def name(self) -> str:
        return self._entry.name

    def stat(self) -> ArchiveEntry:
        return self._entry

    def read_dir(self) -> List[ArchiveEntry]:
        """Children of the directory, sorted by name."""
        if self._closed:
            raise ValueError("I/O operation on closed directory.")
        return self._fs.scandir(self._path)

    def read(self, size=-1):
        raise IsADirectoryError(f"is a directory: {self._entry.path}")

    def seekable(self):
        return False

    def close(self):
        self._closed = True

    @property
    def closed(self):
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FilesystemView(ABC):
    """
    Read-only hierarchical view. Paths have no leading slash, are
    forward-slash separated, and "." denotes the root.
    """

    @abstractmethod
    def open(self, path: str):
        """Open a file handle or a DirectoryHandle."""

    @abstractmethod
    def stat(self, path: str) -> ArchiveEntry:
        """Return entry metadata or raise NotFound."""

    @abstractmethod
    def scandir(self, path: str = ROOT) -> List[ArchiveEntry]:
        """Return child entries sorted by name."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def listdir(self, path: str = ROOT) -> List[str]:
        """Return child names sorted."""
        return [entry.name for entry in self.scandir(path)]

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except NotFound:
            return False
        return True

    def is_dir(self, path: str) -> bool:
        try:
            return self.stat(path).is_dir
        except NotFound:
            return False

    def sub(self, path: str) -> "FilesystemView":
        """
        Return a view rooted at path.

        Raises:
            NotFound: If the path is missing
            NotADirectoryError: If the path is a file
        """
        path = clean_path(path)
        if path == ROOT:
            return self
        return SubFilesystem(self, path)


class SubFilesystem(FilesystemView):
    """View of a parent filesystem with every path prefixed. Never copies or mutates anything."""

    def __init__(self, parent: FilesystemView, prefix: str):
        prefix = clean_path(prefix)
        if not parent.stat(prefix).is_dir:
            raise NotADirectoryError(f"not a directory: {prefix}")
        self.parent = parent
        self.prefix = prefix

    @property
    def name(self) -> str:
        return self.parent.name

    def _full(self, path: str) -> str:
        return join_path(self.prefix, path)

    def open(self, path: str):
        return self.parent.open(self._full(path))

    def stat(self, path: str) -> ArchiveEntry:
        return self.parent.stat(self._full(path))

    def scandir(self, path: str = ROOT) -> List[ArchiveEntry]:
        return self.parent.scandir(self._full(path))

    def sub(self, path: str) -> FilesystemView:
        path = clean_path(path)
        if path == ROOT:
            return self
        return SubFilesystem(self.parent, self._full(path))

    def __repr__(self):
        return f"SubFilesystem({self.parent!r}, {self.prefix!r})"


class ArchiveFilesystem(FilesystemView):
    """
    Base class for archive filesystem variants.
    Concrete variants set `mode` and implement _open_file(); they are registered
    with FilesystemManager automatically when defined.
    """
    mode = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.mode:
            from .handler_manager import FilesystemManager
            FilesystemManager.register_filesystem(cls.mode, cls)

    def __init__(self, index: ArchiveIndex):
        self.index = index

    @classmethod
    def from_config(cls, index: ArchiveIndex, config):
        return cls(index)

    def open(self, path: str):
        path = clean_path(path)
        debug_print(f"open: {path}", level=2)
        try:
            entry = self.index.stat(path)
        except NotFound as e:
            debug_print(f"error opening {path}: {e}", level=2)
            raise
        if entry.is_dir:
            return DirectoryHandle(self, path, entry)
        return self._open_file(entry)

    @abstractmethod
    def _open_file(self, entry: ArchiveEntry):
        """Wrap the decompressing stream of a file entry in a handle."""

    def stat(self, path: str) -> ArchiveEntry:
        return self.index.stat(path)

    def scandir(self, path: str = ROOT) -> List[ArchiveEntry]:
        return self.index.children(path)

    def close(self):
        self.index.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"{type(self).__name__}({len(self.index)} entries)"
