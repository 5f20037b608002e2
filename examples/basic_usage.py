#!/usr/bin/env python3
"""
zserv Example Script

This script demonstrates the basic usage of the zserv library: open an
archive, find its content root, list it and peek at a file.

Author: Tim Hosking
GitHub: https://github.com/Munger
"""

import argparse
import sys

from zserv import ServeConfig, ZservError, detect_root, open_archive_fs, parse_limit


def list_tree(fs, path=".", indent=0):
    """Print the tree below path."""
    for entry in fs.scandir(path):
        if entry.is_dir:
            print(f"{'  ' * indent}{entry.name}/")
            child = entry.name if path == "." else f"{path}/{entry.name}"
            list_tree(fs, child, indent + 1)
        else:
            print(f"{'  ' * indent}{entry.name} ({entry.size} bytes)")


def peek(fs, path, size=200):
    """Print the first bytes of a file."""
    with fs.open(path) as handle:
        print(f"\n{path} ({handle.seek(0, 2)} bytes):")
        print(handle.read(size).decode("utf-8", "replace"))


def main():
    parser = argparse.ArgumentParser(description="zserv example")
    parser.add_argument("archive", help="ZIP archive to inspect")
    parser.add_argument("--buffer", action="store_true", help="Use buffering mode")
    parser.add_argument("--limit", default="64M", help="Buffering size cap")
    parser.add_argument("--peek", help="File to print, relative to the detected root")
    args = parser.parse_args()

    try:
        config = ServeConfig(buffer_files=args.buffer, max_buffer_size=parse_limit(args.limit))
        with open_archive_fs(args.archive, config) as fs:
            root = detect_root(fs)
            print(f"Content root: {getattr(root, 'prefix', '.')}")
            list_tree(root)
            if args.peek:
                peek(root, args.peek)
    except ZservError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
