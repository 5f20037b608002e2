"""
Command line entry point for zserv.

Usage:
    zserv [-p PORT] [-H HOST] [-b] [-Z SIZE] [-r ROOT | -R] [-v] ARCHIVE

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import argparse
import sys

from .api.config_api import DEFAULT_HOST, DEFAULT_MAX_BUFFER_SIZE, DEFAULT_PORT, ServeConfig
from .archive_fs import open_archive_fs, resolve_root
from .core.errors import ZservError
from .core.global_config import GlobalConfig
from .core.logging import debug_print
from .server import serve


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zserv",
        description="Serve the contents of a ZIP archive over HTTP without extracting it.",
    )
    parser.add_argument("archive", help="ZIP archive to serve")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    parser.add_argument("-H", "--host", default=DEFAULT_HOST, help="Host address to bind to")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-b", "--buffer", action="store_true",
                        help="Load files completely into memory before serving them")
    parser.add_argument("-Z", "--max-buffer-size", default=DEFAULT_MAX_BUFFER_SIZE,
                        help="Maximum file size allowed in buffering mode (e.g. 1500, 64K, 256M, 4G)")
    parser.add_argument("-r", "--root", default=".", help="Root of the website served relative to ZIP file")
    parser.add_argument("-R", "--detect-root", action="store_true",
                        help="Auto detect root folder as first folder containing multiple entries")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        GlobalConfig.set_debug_level(max(GlobalConfig.get_debug_level(), 1))
    GlobalConfig.load_environment()

    try:
        config = ServeConfig.from_args(args)
    except ZservError as e:
        print(f"zserv: invalid options: {e}", file=sys.stderr)
        return 1

    try:
        fs = open_archive_fs(args.archive, config)
    except ZservError as e:
        print(f"zserv: cannot open archive {args.archive}: {e}", file=sys.stderr)
        return 1

    with fs:
        try:
            webfs = resolve_root(fs, config)
        except (ZservError, OSError) as e:
            print(f"zserv: cannot open webserver root {config.root!r}: {e}", file=sys.stderr)
            return 1
        try:
            serve(webfs, config)
        except OSError as e:
            debug_print(f"cannot bind to {config.host}:{config.port}: {e}", level=0, exc=e)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
