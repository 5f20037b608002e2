"""
Tests for website root detection.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import pytest
from conftest import create_both_filesystems
from zserv import ServeConfig, resolve_root
from zserv.core.base_handler import FilesystemView
from zserv.core.errors import ArchiveIOError
from zserv.core.root_detection import EXCLUDED_FILES, TRAVERSE_LIMIT, detect_root, get_single_child


def assert_detected_root_has_entries(entries, expected):
    for fs in create_both_filesystems(entries):
        with fs:
            root = detect_root(fs)
            assert root is not None, fs.name
            assert sorted(root.listdir(".")) == sorted(expected), fs.name


def test_detect_root_in_normal_case():
    entries = [
        ("www.website.com/abc/1.html", b""),
        ("www.website.com/abc/2.html", b""),
        ("www.website.com/def/1.html", b""),
        ("www.website.com/def/2.html", b""),
        ("www.website.com/index.html", b""),
    ]
    assert_detected_root_has_entries(entries, ["abc", "def", "index.html"])


def test_detect_root_in_base_case():
    entries = [
        ("abc/1.html", b""),
        ("def/1.html", b""),
        ("def/2.html", b""),
        ("index.html", b""),
        ("abc/2.html", b""),
    ]
    assert_detected_root_has_entries(entries, ["abc", "def", "index.html"])
    for fs in create_both_filesystems(entries):
        with fs:
            assert detect_root(fs) is fs


def test_detect_root_with_excluded_files():
    entries = [
        ("def/1.html", b""),
        ("def/index.html", b""),
        ("wget.log", b""),
        ("nohup.out", b""),
    ]
    assert EXCLUDED_FILES == {"wget.log", "nohup.out"}
    assert_detected_root_has_entries(entries, ["1.html", "index.html"])


def test_excluded_files_stay_in_served_tree():
    entries = [("wget.log", b"log"), ("site/index.html", b"<html>")]
    for fs in create_both_filesystems(entries):
        with fs:
            assert fs.listdir(".") == ["site", "wget.log"]
            assert detect_root(fs).listdir(".") == ["index.html"]


def test_single_file_child_stops_descent():
    entries = [("wrapper/only.html", b"<html>")]
    for fs in create_both_filesystems(entries):
        with fs:
            root = detect_root(fs)
            assert root.listdir(".") == ["only.html"]
            assert get_single_child(root) is None


def test_empty_archive_keeps_root():
    for fs in create_both_filesystems([]):
        with fs:
            assert detect_root(fs) is fs


def test_depth_is_bounded():
    entries = [("a/b/c/d/e/f/g/index.html", b"<html>")]
    assert TRAVERSE_LIMIT == 5
    for fs in create_both_filesystems(entries):
        with fs:
            root = detect_root(fs)
            assert root.prefix == "a/b/c/d/e"
            assert root.listdir(".") == ["f"]
            assert detect_root(fs, max_depth=1).prefix == "a"


def test_custom_exclusions():
    entries = [("README.txt", b"readme"), ("site/index.html", b"<html>")]
    for fs in create_both_filesystems(entries):
        with fs:
            assert detect_root(fs) is fs
            assert detect_root(fs, excluded={"README.txt"}).listdir() == ["index.html"]


class FailingView(FilesystemView):
    def open(self, path):
        raise ArchiveIOError("corrupt archive")

    def stat(self, path):
        raise ArchiveIOError("corrupt archive")

    def scandir(self, path="."):
        raise ArchiveIOError("corrupt archive")


def test_listing_errors_propagate():
    with pytest.raises(ArchiveIOError):
        detect_root(FailingView())


def test_resolve_root_falls_back_when_detection_fails():
    view = FailingView()
    assert resolve_root(view, ServeConfig(detect_root=True)) is view


def test_resolve_root_uses_detection():
    entries = [("www.website.com/index.html", b"<html>")]
    for fs in create_both_filesystems(entries):
        with fs:
            root = resolve_root(fs, ServeConfig(detect_root=True))
            assert root.listdir() == ["index.html"]
