"""
Buffering archive filesystem for zserv.
Serves file entries fully materialized in memory, refusing entries whose
reported size reaches the configured cap.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from zserv.core.base_handler import ArchiveFilesystem
from zserv.core.buffering import MaterializedEntryReader, check_size_limit


class BufferingArchiveFS(ArchiveFilesystem):
    """Archive filesystem whose file handles are decompressed into memory at open time."""
    mode = "buffering"

    def __init__(self, index, max_buffer_size: int):
        super().__init__(index)
        if max_buffer_size < 0:
            raise ValueError(f"max_buffer_size must be non-negative, got {max_buffer_size}")
        self.max_buffer_size = max_buffer_size

    @classmethod
    def from_config(cls, index, config):
        return cls(index, config.max_buffer_size)

    def _open_file(self, entry):
        # Refuse before the stream is opened
        check_size_limit(entry, self.max_buffer_size)
        return MaterializedEntryReader(self.index.open_stream(entry.path), entry, self.max_buffer_size)
