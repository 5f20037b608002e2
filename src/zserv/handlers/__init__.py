"""
Archive filesystem variants for zserv.
Importing this package registers every variant with FilesystemManager.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from .streaming_handler import StreamingArchiveFS
from .buffering_handler import BufferingArchiveFS

__all__ = ["StreamingArchiveFS", "BufferingArchiveFS"]
