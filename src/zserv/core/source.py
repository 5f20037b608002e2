"""
Random-access byte sources backing an open archive.

A source is read-only once constructed. Reads go through read_at(), which takes an
explicit offset, so any number of threads may read from the same source. The
file-like facade (read/seek/tell) exists for zipfile, which keeps its own cursor
and serializes member reads under its own lock.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import errno
import io
import os
import threading
from abc import ABC, abstractmethod

from .errors import ArchiveIOError
from .logging import debug_print


class ArchiveSource(ABC):
    """Read-only positional byte source with a file-like facade."""

    def __init__(self, size: int):
        self._size = size
        self._position = 0
        self._closed = False

    @property
    def size(self) -> int:
        return self._size

    @abstractmethod
    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to size bytes starting at offset without touching the cursor."""

    # --- file-like facade ---
    def read(self, size=-1):
        if self._closed:
            raise ValueError("I/O operation on closed source.")
        if size is None or size < 0:
            size = self._size - self._position
        data = self.read_at(self._position, size)
        self._position += len(data)
        return data

    def seek(self, offset, whence=io.SEEK_SET):
        if self._closed:
            raise ValueError("I/O operation on closed source.")
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            position = self._size + offset
        else:
            raise ValueError(f"invalid whence ({whence})")
        if position < 0:
            raise OSError(errno.EINVAL, f"negative seek position {position}")
        self._position = position
        return position

    def tell(self):
        return self._position

    def seekable(self):
        return True

    def readable(self):
        return True

    def writable(self):
        return False

    def flush(self):
        pass

    def close(self):
        self._closed = True

    @property
    def closed(self):
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class BytesSource(ArchiveSource):
    """Source over an in-memory bytes-like object."""

    def __init__(self, data):
        self._data = memoryview(bytes(data))
        super().__init__(len(self._data))

    def read_at(self, offset: int, size: int) -> bytes:
        if offset >= self._size or size <= 0:
            return b""
        return self._data[offset:offset + size].tobytes()

    def close(self):
        if not self._closed:
            self._data.release()
        super().close()


class FileSource(ArchiveSource):
    """
    Source over a file descriptor.

    Uses os.pread where the platform has it; elsewhere falls back to seek+read under a lock.
    """

    def __init__(self, fd: int, size: int, name: str = None):
        super().__init__(size)
        self._fd = fd
        self.name = name
        self._lock = None if hasattr(os, "pread") else threading.Lock()

    @classmethod
    def from_path(cls, path: str) -> "FileSource":
        debug_print(f"[FileSource.from_path] path={path}", level=2)
        try:
            fd = os.open(path, os.O_RDONLY | getattr(os, "O_BINARY", 0))
        except OSError as e:
            debug_print(f"Exception in FileSource.from_path: {e}", level=1, exc=e)
            raise ArchiveIOError(f"cannot open input file: {e}") from e
        try:
            size = os.fstat(fd).st_size
        except OSError as e:
            os.close(fd)
            raise ArchiveIOError(f"cannot stat input file: {e}") from e
        return cls(fd, size, name=path)

    def read_at(self, offset: int, size: int) -> bytes:
        if self._closed:
            raise ValueError("I/O operation on closed source.")
        if offset >= self._size or size <= 0:
            return b""
        size = min(size, self._size - offset)
        chunks = []
        try:
            while size > 0:
                if self._lock is None:
                    chunk = os.pread(self._fd, size, offset)
                else:
                    with self._lock:
                        os.lseek(self._fd, offset, os.SEEK_SET)
                        chunk = os.read(self._fd, size)
                if not chunk:
                    break
                chunks.append(chunk)
                offset += len(chunk)
                size -= len(chunk)
        except OSError as e:
            debug_print(f"Exception in FileSource.read_at: {e}", level=1, exc=e)
            raise ArchiveIOError(f"error reading archive: {e}") from e
        return b"".join(chunks)

    def close(self):
        if not self._closed:
            os.close(self._fd)
        super().close()
