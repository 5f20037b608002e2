"""
End-to-end tests for the HTTP file server over both filesystem variants.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import threading
import urllib.error
import urllib.request

import pytest
from conftest import create_both_filesystems
from zserv import ServeConfig
from zserv.server import make_server, parse_range

REPEATED_100 = "<p>ABCDEFGHIJKLMNOPQRSTUVWXYZ</p>" * 100
REPEATED_10000 = "<p>ABCDEFGHIJKLMNOPQRSTUVWXYZ</p>" * 10000

ENTRIES = [
    ("small.html", f"<html><body>{REPEATED_100}</body></html>\n".encode()),
    ("big.html", f"<html><body>{REPEATED_10000}</body></html>\n".encode()),
    ("nest/ed.html", b"<html><body>Hello</body></html>"),
    ("nest/ed/nest/ed.html", b"alwiehgweioghlafknewi;foghiEGNLAERI"),
    ("site/index.html", b"<html><body>index</body></html>"),
    ("noext", b"<html><body>sniffed</body></html>"),
]


class RunningServer:
    def __init__(self, fs):
        self.httpd = make_server(fs, ServeConfig(host="127.0.0.1", port=0))
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self.thread.start()

    @property
    def base_url(self):
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    def get(self, path, headers=None, method="GET"):
        request = urllib.request.Request(self.base_url + path, headers=headers or {}, method=method)
        return urllib.request.urlopen(request, timeout=10)

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()
        self.thread.join()


@pytest.fixture(params=["buffering", "streaming"])
def server(request):
    buffering, streaming = create_both_filesystems(ENTRIES)
    fs = buffering if request.param == "buffering" else streaming
    running = RunningServer(fs)
    yield running
    running.stop()
    buffering.close()
    streaming.close()


def test_basic_download(server):
    for name, body in ENTRIES:
        with server.get("/" + name) as response:
            assert response.status == 200
            assert response.read() == body, name
            assert int(response.headers["Content-Length"]) == len(body)
            assert response.headers["Accept-Ranges"] == "bytes"


def test_content_types(server):
    with server.get("/big.html") as response:
        assert response.headers["Content-Type"].startswith("text/html")
    with server.get("/noext") as response:
        assert response.headers["Content-Type"].startswith("text/html")
        assert response.read() == dict(ENTRIES)["noext"]


def test_head_request(server):
    with server.get("/big.html", method="HEAD") as response:
        assert response.status == 200
        assert int(response.headers["Content-Length"]) == len(dict(ENTRIES)["big.html"])
        assert response.read() == b""


def test_byte_range(server):
    body = dict(ENTRIES)["big.html"]
    with server.get("/big.html", headers={"Range": "bytes=5000-5099"}) as response:
        assert response.status == 206
        assert response.read() == body[5000:5100]
        assert response.headers["Content-Range"] == f"bytes 5000-5099/{len(body)}"
    with server.get("/big.html", headers={"Range": "bytes=-10"}) as response:
        assert response.read() == body[-10:]


def test_unsatisfiable_range(server):
    with pytest.raises(urllib.error.HTTPError) as info:
        server.get("/small.html", headers={"Range": "bytes=999999-"})
    assert info.value.code == 416


def test_missing_file_is_404(server):
    with pytest.raises(urllib.error.HTTPError) as info:
        server.get("/missing.html")
    assert info.value.code == 404


def test_directory_listing_after_redirect(server):
    with server.get("/nest") as response:
        assert response.geturl().endswith("/nest/")
        listing = response.read().decode()
    assert 'href="ed.html"' in listing
    assert 'href="ed/"' in listing


def test_directory_index_page(server):
    with server.get("/site/") as response:
        assert response.read() == dict(ENTRIES)["site/index.html"]


def test_size_limit_is_a_server_error():
    buffering, _ = create_both_filesystems(ENTRIES, max_buffer_size=100)
    running = RunningServer(buffering)
    try:
        with pytest.raises(urllib.error.HTTPError) as info:
            running.get("/big.html")
        assert info.value.code == 500
        with running.get("/nest/ed/nest/ed.html") as response:
            assert response.read() == dict(ENTRIES)["nest/ed/nest/ed.html"]
    finally:
        running.stop()
        buffering.close()


def test_parse_range():
    assert parse_range(None, 100) is None
    assert parse_range("bytes=0-9", 100) == (0, 10)
    assert parse_range("bytes=90-", 100) == (90, 10)
    assert parse_range("bytes=90-500", 100) == (90, 10)
    assert parse_range("bytes=-20", 100) == (80, 20)
    assert parse_range("bytes=-500", 100) == (0, 100)
    assert parse_range("bytes=0-1,5-6", 100) is None
    assert parse_range("items=0-1", 100) is None
    with pytest.raises(ValueError):
        parse_range("bytes=100-", 100)
    with pytest.raises(ValueError):
        parse_range("bytes=-0", 100)
