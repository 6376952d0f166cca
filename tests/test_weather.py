import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from sasluice.weather import build_weather_url, format_payload, main

_BODY = b'{"properties":{"parameter":{"T2M":{"20260101":27.1}}}}'


class _RecordingHandler(BaseHTTPRequestHandler):
    paths = []

    def do_GET(self):
        type(self).paths.append(self.path)
        self.send_response(200)
        self.send_header("Content-Length", str(len(_BODY)))
        self.end_headers()
        self.wfile.write(_BODY)

    def log_message(self, *args):
        pass


@pytest.fixture
def server_url():
    _RecordingHandler.paths = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
    threading.Thread(target=server.serve_forever, daemon=True).start()
    yield f"http://127.0.0.1:{server.server_address[1]}/"
    server.shutdown()
    server.server_close()


def test_build_weather_url_matches_query_layout():
    url = build_weather_url(
        "https://api.example.com",
        ["T2M", "PRECTOTCORR", "WS2M"],
        100.5,
        13.7,
        "20260101",
        "20260105",
    )
    assert url == (
        "https://api.example.com?parameters=T2M,PRECTOTCORR,WS2M&community=AG"
        "&longitude=100.5&latitude=13.7&start=20260101&end=20260105&format=JSON"
    )


def test_build_weather_url_single_parameter():
    url = build_weather_url("https://api.example.com", ("T2M",), "1.0", "2.0", "a", "b")
    assert url.split("?", 1)[1].split("&")[0] == "parameters=T2M"
    assert url.endswith("&format=JSON")


def test_format_payload_puts_header_before_text():
    framed = format_payload("payload text")
    assert framed.splitlines() == [
        "",
        "--- REAL-TIME METEOROLOGICAL PAYLOAD FROM NASA SECTOR ---",
        "payload text",
    ]


def test_main_prints_fetched_payload(server_url, capsys):
    assert main(["--base", server_url, "--timeout", "5"]) == 0
    out = capsys.readouterr().out
    assert "--- REAL-TIME METEOROLOGICAL PAYLOAD FROM NASA SECTOR ---" in out
    assert _BODY.decode() in out
    assert "parameters=T2M,PRECTOTCORR,WS2M" in _RecordingHandler.paths[0]


def test_main_reports_failure(capsys):
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    assert main(["--base", f"http://127.0.0.1:{port}/", "--timeout", "5"]) == 0
    captured = capsys.readouterr()
    assert "NASA Request Failed" in captured.err
    assert "PAYLOAD FROM NASA SECTOR" not in captured.out