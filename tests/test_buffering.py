"""
Unit tests for the buffering entry handle (MaterializedEntryReader) and BufferingArchiveFS.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import os
import unittest

from conftest import create_zip
from zserv.core.archive_index import ArchiveEntry, ArchiveIndex
from zserv.core.base_handler import DirectoryHandle
from zserv.core.buffering import MaterializedEntryReader
from zserv.core.errors import SizeLimitExceeded
from zserv.core.source import BytesSource
from zserv.handlers import BufferingArchiveFS


class RecordingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.read_calls = 0

    def read(self, size=-1):
        self.read_calls += 1
        return super().read(size)


def entry_for(content, path="file.bin"):
    return ArchiveEntry(path, len(content), 0.0, False)


class TestMaterializedEntryReader(unittest.TestCase):
    def test_read_all(self):
        data = os.urandom(4096)
        with MaterializedEntryReader(io.BytesIO(data), entry_for(data), 4097) as reader:
            self.assertEqual(reader.read(), data)

    def test_size_equal_to_cap_is_refused_without_reading(self):
        data = b"x" * 100
        stream = RecordingStream(data)
        with self.assertRaises(SizeLimitExceeded):
            MaterializedEntryReader(stream, entry_for(data), 100)
        self.assertEqual(stream.read_calls, 0)
        self.assertTrue(stream.closed)

    def test_size_below_cap_is_accepted(self):
        data = b"x" * 99
        with MaterializedEntryReader(io.BytesIO(data), entry_for(data), 100) as reader:
            self.assertEqual(reader.read(), data)

    def test_zero_cap_refuses_empty_entry(self):
        with self.assertRaises(SizeLimitExceeded):
            MaterializedEntryReader(io.BytesIO(b""), entry_for(b""), 0)

    def test_stream_closed_after_construction(self):
        stream = io.BytesIO(b"abc")
        MaterializedEntryReader(stream, entry_for(b"abc"), 10)
        self.assertTrue(stream.closed)

    def test_understated_size_is_refused(self):
        entry = ArchiveEntry("liar.bin", 3, 0.0, False)
        with self.assertRaises(SizeLimitExceeded):
            MaterializedEntryReader(io.BytesIO(b"0123456789"), entry, 100)

    def test_all_seek_modes(self):
        data = b"0123456789"
        reader = MaterializedEntryReader(io.BytesIO(data), entry_for(data), 1024)
        self.assertEqual(reader.seek(5), 5)
        self.assertEqual(reader.tell(), 5)
        self.assertEqual(reader.read(2), b"56")
        self.assertEqual(reader.seek(-3, io.SEEK_CUR), 4)
        self.assertEqual(reader.read(1), b"4")
        self.assertEqual(reader.seek(-2, io.SEEK_END), 8)
        self.assertEqual(reader.read(), b"89")
        self.assertEqual(reader.seek(0, io.SEEK_END), len(data))
        self.assertEqual(reader.read(), b"")
        reader.seek(0)
        self.assertEqual(reader.read(3), b"012")
        reader.close()
        self.assertTrue(reader.closed)
        with self.assertRaises(ValueError):
            reader.read()

    def test_directory_entry_is_rejected(self):
        with self.assertRaises(IsADirectoryError):
            MaterializedEntryReader(io.BytesIO(b""), ArchiveEntry("d", 0, 0.0, True), 10)

    def test_size_limit_is_os_error(self):
        with self.assertRaises(OSError):
            MaterializedEntryReader(io.BytesIO(b"abc"), entry_for(b"abc"), 1)


class TestBufferingArchiveFS(unittest.TestCase):
    def setUp(self):
        self.small = b"s" * 99
        self.exact = b"e" * 100
        self.large = b"l" * 1000
        data = create_zip([
            ("small.txt", self.small),
            ("exact.txt", self.exact),
            ("dir/large.txt", self.large),
        ])
        self.fs = BufferingArchiveFS(ArchiveIndex(BytesSource(data)), 100)

    def tearDown(self):
        self.fs.close()

    def test_small_entry_round_trips(self):
        with self.fs.open("small.txt") as handle:
            self.assertIsInstance(handle, MaterializedEntryReader)
            self.assertEqual(handle.read(), self.small)

    def test_entries_at_or_above_cap_fail(self):
        for name in ("exact.txt", "dir/large.txt"):
            with self.assertRaises(SizeLimitExceeded, msg=name):
                self.fs.open(name)

    def test_directories_ignore_cap(self):
        fs = BufferingArchiveFS(self.fs.index, 0)
        with fs.open("dir") as handle:
            self.assertIsInstance(handle, DirectoryHandle)
            self.assertEqual([e.name for e in handle.read_dir()], ["large.txt"])
        self.assertEqual(fs.listdir("."), ["dir", "exact.txt", "small.txt"])

    def test_stat_reports_uncompressed_size(self):
        self.assertEqual(self.fs.stat("dir/large.txt").size, len(self.large))

    def test_negative_cap_is_rejected(self):
        with self.assertRaises(ValueError):
            BufferingArchiveFS(self.fs.index, -1)


if __name__ == "__main__":
    unittest.main()
