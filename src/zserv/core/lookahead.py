"""
Streaming entry handle for zserv.

LookaheadEntryReader keeps the first 2 * SNIFF_SIZE bytes of an entry in memory and
leaves the rest in the live decompressing stream. This is enough for content-type
sniffing and for the two seeks an HTTP file server issues (rewind before the first
read, and seek-to-end to learn the size), while memory stays bounded per handle
regardless of entry size.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io

from .errors import UnsupportedSeek
from .logging import debug_print

SNIFF_SIZE = 512
LOOKAHEAD_SIZE = 2 * SNIFF_SIZE

SNIFFING = "sniffing"
STREAMING = "streaming"


def _read_fully(stream, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class LookaheadEntryReader:
    """
    Read-only handle over one archive file entry with a small lookahead buffer.

    The handle is a two-state machine. In SNIFFING, reads drain the lookahead
    buffer; in STREAMING they go straight to the live stream. The switch happens
    once the lookahead is exhausted.

    Only two seeks are supported:
        seek(0, SEEK_SET) rewinds to the start of the lookahead.
        seek(0, SEEK_END) returns the entry size without reading.
    """

    def __init__(self, stream, entry):
        """
        Args:
            stream: Forward-only decompressing stream for the entry
            entry: ArchiveEntry of a non-directory entry
        """
        if entry.is_dir:
            raise IsADirectoryError(f"cannot stream a directory: {entry.path}")
        self._stream = stream
        self._entry = entry
        self._closed = False
        try:
            self._lookahead = _read_fully(stream, LOOKAHEAD_SIZE)
        except Exception:
            stream.close()
            raise
        self._buffer = io.BytesIO(self._lookahead)
        self._state = SNIFFING if self._lookahead else STREAMING
        debug_print(f"[LookaheadEntryReader] {entry.path}: buffered {len(self._lookahead)} bytes", level=3)

    @property
    def lookahead(self) -> bytes:
        """Leading bytes of the entry, at most LOOKAHEAD_SIZE of them."""
        return self._lookahead

    @property
    def state(self) -> str:
        return self._state

    @property
    def name(self) -> str:
        return self._entry.name

    def stat(self):
        return self._entry

    def _check_closed(self):
        if self._closed:
            raise ValueError("I/O operation on closed file.")

    def read(self, size=-1):
        self._check_closed()
        if self._state == STREAMING:
            return self._stream.read(size)
        if size is None or size < 0:
            data = self._buffer.read()
            self._state = STREAMING
            return data + self._stream.read()
        data = self._buffer.read(size)
        if self._buffer.tell() >= len(self._lookahead):
            self._state = STREAMING
            if len(data) < size:
                data += self._stream.read(size - len(data))
        return data

    def readinto(self, b):
        data = self.read(len(b))
        b[:len(data)] = data
        return len(data)

    def seek(self, offset, whence=io.SEEK_SET):
        self._check_closed()
        if whence == io.SEEK_SET and offset == 0:
            # The live stream cannot rewind. After streaming past the lookahead,
            # reads return the lookahead again and then resume where the stream is.
            self._buffer.seek(0)
            if self._lookahead:
                self._state = SNIFFING
            return 0
        if whence == io.SEEK_END and offset == 0:
            return self._entry.size
        raise UnsupportedSeek(f"unsupported seek parameters: offset={offset}, whence={whence}")

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
        self._stream.close()

    @property
    def closed(self):
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
