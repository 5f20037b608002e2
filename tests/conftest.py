"""
Shared fixtures for the zserv tests.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import os
import sys
import zipfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest
from zserv.core.archive_index import ArchiveIndex
from zserv.core.global_config import GlobalConfig
from zserv.core.source import BytesSource
from zserv.handlers import BufferingArchiveFS, StreamingArchiveFS

LARGE_BUFFER_SIZE = 256 * 1024 * 1024 * 1024


def create_zip(entries, compression=zipfile.ZIP_DEFLATED):
    """Build a ZIP archive in memory from (name, content) pairs."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=compression) as zip_file:
        for name, content in entries:
            zip_file.writestr(name, content)
    return buffer.getvalue()


def create_both_filesystems(entries, max_buffer_size=LARGE_BUFFER_SIZE):
    """Return a buffering and a streaming filesystem over the same archive."""
    data = create_zip(entries)
    return [
        BufferingArchiveFS(ArchiveIndex(BytesSource(data)), max_buffer_size),
        StreamingArchiveFS(ArchiveIndex(BytesSource(data))),
    ]


@pytest.fixture(autouse=True)
def debug_level():
    # Allow debug level to be set via environment variable for tests
    GlobalConfig.load_environment()
    yield
    GlobalConfig.reset()


@pytest.fixture
def zip_entries():
    return [
        ("Hello", b"World"),
        ("Tom", b"Jerry"),
        ("Boom/Boom", b"Boom/Boom"),
        ("Repeated", b"yep9a8hlnk" * 1000),
    ]


@pytest.fixture
def filesystems(zip_entries):
    fses = create_both_filesystems(zip_entries)
    yield fses
    for fs in fses:
        fs.close()
