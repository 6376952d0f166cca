"""Sluice screening engine: screens incoming measurements and serves the verdict."""

from __future__ import annotations

import argparse
import re
import socket
import threading

SLUICE_INPUT_PORT = 8081
HTML_OUTPUT_PORT = 8082
BUFFER_SIZE = 4096
MAX_ALLOWED_LENGTH = 4096

INITIAL_VERDICT = '{"verdict":0,"amplitude":0.0,"measured_length":0,"breed":1}'

_INCOMING = re.compile(
    r'\{"breed":\s*([+-]?\d+)(?:,"measured_length":\s*([+-]?\d+))?'
)


class Sluice:
    """Screens measurements against the length gate and keeps running totals."""

    def __init__(self, max_allowed_length: int = MAX_ALLOWED_LENGTH) -> None:
        self.max_allowed_length = max_allowed_length
        self.total_scrutinized = 0
        self.total_admitted = 0
        self._verdict = INITIAL_VERDICT
        self._lock = threading.Lock()

    def scrutinize(self, incoming_json: str) -> str:
        """Screen one translated packet, store and return the verdict JSON."""
        breed, length = 1, 0
        match = _INCOMING.match(incoming_json)
        if match:
            breed = int(match.group(1))
            if match.group(2) is not None:
                length = int(match.group(2))

        with self._lock:
            self.total_scrutinized += 1
            verdict, amplitude = -1, 0.0
            if 0 < length <= self.max_allowed_length:
                verdict = 1
                self.total_admitted += 1
                amplitude = (self.max_allowed_length - length) / self.max_allowed_length
            self._verdict = (
                f'{{"verdict":{verdict},"amplitude":{amplitude:.3f},'
                f'"measured_length":{length},"breed":{breed},'
                f'"total":{self.total_scrutinized},"admitted":{self.total_admitted}}}'
            )
            return self._verdict

    def verdict_json(self) -> str:
        """The most recent verdict as JSON text."""
        with self._lock:
            return self._verdict


def http_response(body: str) -> bytes:
    """Wrap a JSON body in an HTTP 200 response open to any origin."""
    encoded = body.encode("utf-8")
    head = (
        "HTTP/1.1 200 OK\r\n"
        "Content-Type: application/json\r\n"
        "Access-Control-Allow-Origin: *\r\n"
        f"Content-Length: {len(encoded)}\r\n\r\n"
    )
    return head.encode("ascii") + encoded


def serve_input(sluice: Sluice, address: tuple[str, int]) -> None:
    """Accept translated packets forever and screen each one."""
    with socket.create_server(address, backlog=10) as server:
        while True:
            try:
                client, _ = server.accept()
            except OSError:
                continue
            with client:
                try:
                    data = client.recv(BUFFER_SIZE - 1)
                except OSError:
                    continue
                sluice.scrutinize(data.decode("latin-1"))


def serve_web(sluice: Sluice, address: tuple[str, int]) -> None:
    """Answer every connection with the latest verdict as an HTTP response."""
    with socket.create_server(address, backlog=10) as server:
        while True:
            try:
                client, _ = server.accept()
            except OSError:
                continue
            with client:
                try:
                    client.recv(BUFFER_SIZE)
                    client.sendall(http_response(sluice.verdict_json()))
                except OSError:
                    continue


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-sluice",
        description="Screen bridge packets and serve the latest verdict over HTTP.",
    )
    parser.add_argument("--host", default="", help="interface to listen on")
    parser.add_argument("--input-port", type=int, default=SLUICE_INPUT_PORT)
    parser.add_argument("--web-port", type=int, default=HTML_OUTPUT_PORT)
    args = parser.parse_args(argv)

    sluice = Sluice()
    print(
        f"🌊 Step 3: Quantum Sluice Engine Live [Port {args.input_port}]. "
        "Processing data and hosting for HTML...",
        flush=True,
    )
    threading.Thread(
        target=serve_web, args=(sluice, (args.host, args.web_port)), daemon=True
    ).start()
    try:
        serve_input(sluice, (args.host, args.input_port))
    except KeyboardInterrupt:
        pass
    return 0