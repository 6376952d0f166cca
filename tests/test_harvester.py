import socket
import threading

import pytest

from sasluice.harvester import (
    CoreOfflineError,
    RemoteUnreachableError,
    build_request,
    frame_chunk,
    harvest_once,
)


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _serve_feed(server, payload, requests):
    client, _ = server.accept()
    with client:
        buf = b""
        try:
            while b"\r\n\r\n" not in buf:
                part = client.recv(1024)
                if not part:
                    break
                buf += part
            requests.append(buf)
            client.sendall(payload)
        except OSError:
            requests.append(buf)


def _sink(server, received):
    client, _ = server.accept()
    with client:
        chunks = []
        while part := client.recv(4096):
            chunks.append(part)
        received.append(b"".join(chunks))


def _parse_frames(data: bytes):
    frames = []
    prefix = b"POST /LIVE_STREAM HTTP/1.1\r\nContent-Length: "
    while data:
        assert data.startswith(prefix)
        head_end = data.index(b"\r\n\r\n")
        length = int(data[len(prefix):head_end])
        start = head_end + 4
        frames.append(data[start:start + length])
        data = data[start + length:]
    return frames


def test_build_request_default():
    assert build_request() == (
        b"GET /earthquakes/feed/v1.0/summary/all_hour.geojson HTTP/1.1\r\n"
        b"Host: earthquake.usgs.gov\r\n"
        b"User-Agent: SluiceBenchHarvester/1.0\r\n"
        b"Connection: close\r\n\r\n"
    )


def test_build_request_custom():
    request = build_request("feed.example.com", "/data.json")
    assert request.startswith(b"GET /data.json HTTP/1.1\r\nHost: feed.example.com\r\n")
    assert request.endswith(b"\r\n\r\n")


def test_frame_chunk():
    assert frame_chunk(b"hello") == (
        b"POST /LIVE_STREAM HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"
    )


def test_frame_chunk_stops_body_at_nul():
    framed = frame_chunk(b"ab\0cd")
    assert framed.endswith(b"Content-Length: 5\r\n\r\nab")


def test_harvest_forwards_whole_feed():
    payload = bytes(range(1, 256)) * 40
    requests, received = [], []
    with socket.create_server(("127.0.0.1", 0)) as feed, socket.create_server(
        ("127.0.0.1", 0)
    ) as core:
        feed_thread = threading.Thread(target=_serve_feed, args=(feed, payload, requests))
        core_thread = threading.Thread(target=_sink, args=(core, received))
        feed_thread.start()
        core_thread.start()
        forwarded = harvest_once(
            feed.getsockname()[:2],
            core.getsockname()[:2],
            "feed.example.com",
            "/all.json",
            0,
        )
        feed_thread.join(5)
        core_thread.join(5)

    assert forwarded == len(payload)
    assert requests[0] == build_request("feed.example.com", "/all.json")
    frames = _parse_frames(received[0])
    assert b"".join(frames) == payload
    assert all(len(frame) <= 4095 for frame in frames)


def test_harvest_core_offline():
    requests = []
    with socket.create_server(("127.0.0.1", 0)) as feed:
        feed_thread = threading.Thread(target=_serve_feed, args=(feed, b"data", requests))
        feed_thread.start()
        with pytest.raises(CoreOfflineError):
            harvest_once(feed.getsockname()[:2], ("127.0.0.1", _free_port()), delay=0)
        feed_thread.join(5)
    assert requests[0] == build_request()


def test_harvest_remote_unreachable():
    with pytest.raises(RemoteUnreachableError):
        harvest_once(("127.0.0.1", _free_port()), ("127.0.0.1", _free_port()), delay=0)