"""
Buffering entry handle for zserv.
MaterializedEntryReader decompresses a whole archive entry into memory when it is
opened, then offers ordinary random access over the bytes.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io

from .errors import SizeLimitExceeded
from .logging import debug_print


def check_size_limit(entry, max_size: int):
    """
    Raise SizeLimitExceeded unless the entry's reported size is strictly below max_size.
    Directories are never checked.
    """
    if not entry.is_dir and entry.size >= max_size:
        debug_print(f"Buffer size exceeded for entry: {entry.path}, size: {entry.size}", level=1)
        raise SizeLimitExceeded(
            f"size exceeds maximum allowed buffer size: {entry.path} ({entry.size} >= {max_size} bytes)")


class MaterializedEntryReader:
    """
    Fully buffered, fully seekable read-only handle over one archive file entry.
    No live stream is held once construction finishes.
    """

    def __init__(self, stream, entry, max_size: int):
        """
        Args:
            stream: Decompressing stream for the entry; always closed by the constructor
            entry: ArchiveEntry of a non-directory entry
            max_size: Entries of this size or larger are rejected

        Raises:
            SizeLimitExceeded: If the entry is too large; no bytes are read in that case
        """
        if entry.is_dir:
            stream.close()
            raise IsADirectoryError(f"cannot buffer a directory: {entry.path}")
        self._entry = entry
        self._closed = False
        try:
            check_size_limit(entry, max_size)
            data = stream.read(entry.size)
            # A size header that understates the content would bypass the cap
            if stream.read(1):
                raise SizeLimitExceeded(
                    f"entry {entry.path} holds more data than its reported size {entry.size}")
        finally:
            stream.close()
        self._buffer = io.BytesIO(data)
        debug_print(f"[MaterializedEntryReader] {entry.path}: buffered {len(data)} bytes", level=3)

    @property
    def name(self) -> str:
        return self._entry.name

    def stat(self):
        return self._entry

    def getvalue(self) -> bytes:
        self._check_closed()
        return self._buffer.getvalue()

    def _check_closed(self):
        if self._closed:
            raise ValueError("I/O operation on closed file.")

    def read(self, size=-1):
        self._check_closed()
        return self._buffer.read(size)

    def readinto(self, b):
        self._check_closed()
        return self._buffer.readinto(b)

    def seek(self, offset, whence=io.SEEK_SET):
        self._check_closed()
        return self._buffer.seek(offset, whence)

    def tell(self):
        self._check_closed()
        return self._buffer.tell()

    def readable(self):
        return True

    def seekable(self):
        return True

    def writable(self):
        return False

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._buffer.close()

    @property
    def closed(self):
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
