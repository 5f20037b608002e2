"""
Streaming archive filesystem for zserv.
Serves file entries through a LookaheadEntryReader, so only a small prefix of
each open entry is ever held in memory.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from zserv.core.base_handler import ArchiveFilesystem
from zserv.core.lookahead import LookaheadEntryReader


class StreamingArchiveFS(ArchiveFilesystem):
    """Archive filesystem whose file handles stream from the archive."""
    mode = "streaming"

    def _open_file(self, entry):
        return LookaheadEntryReader(self.index.open_stream(entry.path), entry)
