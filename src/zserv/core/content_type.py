"""
Content-type detection for zserv.

sniff_content_type() implements the common part of the WHATWG MIME sniffing
algorithm, looking at no more than the first SNIFF_LEN bytes. guess_content_type()
prefers the file extension and falls back to sniffing.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import mimetypes
from typing import List, Optional, Tuple

SNIFF_LEN = 512

DEFAULT_TYPE = "application/octet-stream"

# Leading whitespace the HTML and XML signatures skip over
_WHITESPACE = b"\t\n\x0c\r "

# Tags that identify HTML when they appear first, followed by a space or '>'
_HTML_TAGS: List[bytes] = [
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1", b"<DIV",
    b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B", b"<BODY", b"<BR",
    b"<P", b"<!--",
]

# (mask, pattern, skip leading whitespace, content type)
_MASKED_SIGNATURES: List[Tuple[bytes, bytes, bool, str]] = [
    (b"\xff\xff\xff\xff\xff", b"<?xml", True, "text/xml; charset=utf-8"),
    (b"\xff\xff\xff\xff\xff", b"%PDF-", False, "application/pdf"),
    (b"\xff" * 11, b"%!PS-Adobe-", False, "application/postscript"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", b"RIFF\x00\x00\x00\x00WEBP", False, "image/webp"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", b"RIFF\x00\x00\x00\x00WAVE", False, "audio/wave"),
]

_EXACT_SIGNATURES: List[Tuple[bytes, str]] = [
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\x0d\x0a\x1a\x0a", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
]


def _is_tag_terminator(byte: int) -> bool:
    return byte in (0x20, 0x3e)


def _match_html(data: bytes) -> bool:
    upper = data.upper()
    for tag in _HTML_TAGS:
        if len(upper) <= len(tag):
            continue
        if upper.startswith(tag) and _is_tag_terminator(upper[len(tag)]):
            return True
    return False


def _match_masked(data: bytes, mask: bytes, pattern: bytes) -> bool:
    if len(data) < len(pattern):
        return False
    return all((data[i] & mask[i]) == pattern[i] for i in range(len(pattern)))


def _is_binary(data: bytes) -> bool:
    for byte in data:
        if byte <= 0x08 or byte == 0x0b or 0x0e <= byte <= 0x1a or 0x1c <= byte <= 0x1f:
            return True
    return False


def sniff_content_type(data: bytes) -> str:
    """
    Determine the content type of data from its leading bytes.

    Returns:
        A MIME type; "application/octet-stream" when nothing matches and the data looks binary
    """
    data = bytes(data[:SNIFF_LEN])
    stripped = data.lstrip(_WHITESPACE)
    if _match_html(stripped):
        return "text/html; charset=utf-8"
    for mask, pattern, skip_ws, ctype in _MASKED_SIGNATURES:
        if _match_masked(stripped if skip_ws else data, mask, pattern):
            return ctype
    for signature, ctype in _EXACT_SIGNATURES:
        if data.startswith(signature):
            return ctype
    if _is_binary(data):
        return DEFAULT_TYPE
    return "text/plain; charset=utf-8"


def guess_content_type(name: str, head: Optional[bytes] = None) -> str:
    """
    Content type for a file: by extension first, then by sniffing head.

    Args:
        name: File name or path
        head: Leading bytes of the content, if available
    """
    ctype, _ = mimetypes.guess_type(name, strict=False)
    if ctype:
        if ctype.startswith("text/") and "charset" not in ctype:
            ctype += "; charset=utf-8"
        return ctype
    if head is None:
        return DEFAULT_TYPE
    return sniff_content_type(head)
