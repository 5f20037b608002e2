"""
HTTP file server for zserv.

Serves a FilesystemView over HTTP GET/HEAD: content type by extension or
sniffing, Content-Length from seek-to-end, single byte ranges, directory
listings and index.html. Each request opens its own handle.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import html
import io
import re
import urllib.parse
from email.utils import formatdate
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Tuple

from .api.config_api import ServeConfig
from .core.base_handler import DirectoryHandle, FilesystemView
from .core.content_type import DEFAULT_TYPE, SNIFF_LEN, guess_content_type
from .core.errors import NotFound, UnsupportedSeek, ZservError
from .core.logging import debug_print
from .core.utils import ROOT, clean_path, join_path

COPY_BUFSIZE = 64 * 1024
INDEX_PAGE = "index.html"

_RANGE_PATTERN = re.compile(r"bytes=(\d*)-(\d*)")


def parse_range(header: Optional[str], size: int) -> Optional[Tuple[int, int]]:
    """
    Parse a single-range Range header.

    Returns:
        (start, length), or None to serve the whole entity

    Raises:
        ValueError: If the range cannot be satisfied
    """
    if not header:
        return None
    match = _RANGE_PATTERN.fullmatch(header.strip())
    if match is None:
        # Multiple ranges and other units are answered with the full entity
        return None
    first, last = match.groups()
    if not first and not last:
        return None
    if not first:
        suffix = int(last)
        if suffix == 0:
            raise ValueError("empty suffix range")
        start = max(size - suffix, 0)
        return start, size - start
    start = int(first)
    if start >= size:
        raise ValueError(f"range start {start} beyond size {size}")
    end = size - 1 if not last else min(int(last), size - 1)
    if end < start:
        return None
    return start, end - start + 1


def skip_forward(handle, offset: int):
    """Position a fresh handle at offset, reading and discarding when it cannot seek there."""
    if offset == 0:
        return
    try:
        handle.seek(offset)
        return
    except UnsupportedSeek:
        pass
    remaining = offset
    while remaining > 0:
        chunk = handle.read(min(COPY_BUFSIZE, remaining))
        if not chunk:
            break
        remaining -= len(chunk)


class ArchiveRequestHandler(BaseHTTPRequestHandler):
    """Request handler serving files from a FilesystemView."""

    server_version = "zserv/0.1.0"

    def __init__(self, *args, fs: FilesystemView = None, **kwargs):
        if fs is None:
            raise ValueError("ArchiveRequestHandler requires a filesystem via the 'fs' argument.")
        self.fs = fs
        super().__init__(*args, **kwargs)

    def do_GET(self):
        self._serve(send_body=True)

    def do_HEAD(self):
        self._serve(send_body=False)

    # --- request dispatch ---
    def _serve(self, send_body: bool):
        url_path = urllib.parse.urlsplit(self.path).path
        try:
            path = clean_path(urllib.parse.unquote(url_path))
            handle = self.fs.open(path)
        except NotFound:
            self.send_error(HTTPStatus.NOT_FOUND, "File not found")
            return
        except (ZservError, OSError) as e:
            self.report_error("error opening %s: %s", url_path, e)
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, explain=str(e))
            return
        with handle:
            if isinstance(handle, DirectoryHandle):
                self._serve_directory(handle, path, url_path, send_body)
            elif url_path.endswith("/") and path != ROOT:
                self._redirect(url_path.rstrip("/"))
            else:
                self._serve_file(handle, send_body)

    def _redirect(self, location: str):
        query = urllib.parse.urlsplit(self.path).query
        if query:
            location = f"{location}?{query}"
        self.send_response(HTTPStatus.MOVED_PERMANENTLY)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _serve_directory(self, handle: DirectoryHandle, path: str, url_path: str, send_body: bool):
        if not url_path.endswith("/"):
            self._redirect(url_path + "/")
            return
        index_path = join_path(path, INDEX_PAGE)
        if self.fs.exists(index_path) and not self.fs.is_dir(index_path):
            try:
                index = self.fs.open(index_path)
            except (ZservError, OSError) as e:
                self.report_error("error opening %s: %s", index_path, e)
                self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, explain=str(e))
                return
            with index:
                self._serve_file(index, send_body)
            return
        body = self._render_listing(handle, url_path)
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)

    def _render_listing(self, handle: DirectoryHandle, url_path: str) -> bytes:
        try:
            entries = handle.read_dir()
        except (ZservError, OSError) as e:
            self.report_error("error reading directory %s: %s", url_path, e)
            entries = []
        title = html.escape(urllib.parse.unquote(url_path), quote=False)
        lines = [
            "<!DOCTYPE HTML>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>Directory listing for {title}</title>",
            "</head>",
            "<body>",
            "<pre>",
        ]
        for entry in entries:
            name = entry.name + ("/" if entry.is_dir else "")
            href = urllib.parse.quote(name, errors="surrogatepass")
            lines.append(f'<a href="{href}">{html.escape(name, quote=False)}</a>')
        lines.extend(["</pre>", "</body>", "</html>", ""])
        return "\n".join(lines).encode("utf-8", "surrogateescape")

    def _serve_file(self, handle, send_body: bool):
        entry = handle.stat()
        try:
            size = handle.seek(0, io.SEEK_END)
            handle.seek(0)
            ctype = guess_content_type(entry.name)
            if ctype == DEFAULT_TYPE:
                ctype = guess_content_type(entry.name, handle.read(SNIFF_LEN))
            handle.seek(0)
        except (ZservError, OSError) as e:
            self.report_error("error reading %s: %s", entry.path, e)
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, explain=str(e))
            return

        try:
            byte_range = parse_range(self.headers.get("Range"), size)
        except ValueError:
            self.send_response(HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE)
            self.send_header("Content-Range", f"bytes */{size}")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        if byte_range is None:
            start, length = 0, size
            self.send_response(HTTPStatus.OK)
        else:
            start, length = byte_range
            self.send_response(HTTPStatus.PARTIAL_CONTENT)
            self.send_header("Content-Range", f"bytes {start}-{start + length - 1}/{size}")
        self.send_header("Content-Type", ctype)
        self.send_header("Content-Length", str(length))
        self.send_header("Accept-Ranges", "bytes")
        if entry.modified > 0:
            self.send_header("Last-Modified", formatdate(entry.modified, usegmt=True))
        self.end_headers()
        if not send_body:
            return
        try:
            skip_forward(handle, start)
            self._copy(handle, length)
        except (ConnectionResetError, BrokenPipeError) as e:
            debug_print(f"client went away while sending {entry.path}: {e}", level=1)
        except (ZservError, OSError) as e:
            # Headers are gone already; all we can do is drop the connection
            self.report_error("error sending %s: %s", entry.path, e)
            self.close_connection = True

    def _copy(self, handle, length: int):
        remaining = length
        while remaining > 0:
            chunk = handle.read(min(COPY_BUFSIZE, remaining))
            if not chunk:
                break
            self.wfile.write(chunk)
            remaining -= len(chunk)

    # --- logging ---
    def log_message(self, format, *args):
        debug_print(f"{self.address_string()} [{getattr(self, 'command', '')}] {format % args}", level=1)

    def report_error(self, format, *args):
        """Log a request failure regardless of verbosity."""
        debug_print(f"{self.address_string()} [{getattr(self, 'command', '')}] {getattr(self, 'path', '')}: {format % args}", level=0)


def make_server(fs: FilesystemView, config: ServeConfig) -> ThreadingHTTPServer:
    """Bind a threading HTTP server for fs at config.host:config.port."""
    handler = partial(ArchiveRequestHandler, fs=fs)
    return ThreadingHTTPServer((config.host, config.port), handler)


def serve(fs: FilesystemView, config: ServeConfig):
    """Serve fs until interrupted."""
    with make_server(fs, config) as httpd:
        host, port = httpd.server_address[:2]
        debug_print(f"zserv binding to http://{host}:{port}", level=0)
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            debug_print("Keyboard interrupt received, exiting.", level=0)
