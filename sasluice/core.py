"""Production core: filters live stream traffic and serves running metrics over HTTP."""

from __future__ import annotations

import argparse
import random
import socket
import threading
from dataclasses import dataclass

PORT = 8082
BUFFER_SIZE = 8192
BACKLOG = 30
CLEAN_FRACTION = 0.02
INITIAL_PUE = 1.012

CORS_PREFLIGHT = (
    b"HTTP/1.1 204 No Content\r\n"
    b"Access-Control-Allow-Origin: *\r\n"
    b"Access-Control-Allow-Methods: GET, POST, OPTIONS\r\n"
    b"Connection: close\r\n\r\n"
)
RESPONSE_HEAD = (
    "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
    "Access-Control-Allow-Origin: *\r\nConnection: close\r\n\r\n"
)

_POLL_INTERVAL = 0.2
_CLIENT_TIMEOUT = 5.0


@dataclass
class ProductionMetrics:
    """Running totals of the production core."""

    opex_efficiency: float = INITIAL_PUE
    live_bytes_processed: int = 0
    noise_filtered_bytes: int = 0
    system_stalled: bool = False


class SluiceCore:
    """Accepts stream and dashboard requests and keeps the production metrics."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.metrics = ProductionMetrics()
        self.server_address: tuple[str, int] | None = None
        self.ready = threading.Event()
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self._stop = threading.Event()

    def _render(self) -> str:
        m = self.metrics
        return (
            f'{{"pue": {m.opex_efficiency:.3f}, "cycles": {m.live_bytes_processed}, '
            f'"pruned": {m.noise_filtered_bytes}, "state": {int(m.system_stalled)}}}'
        )

    def handle(self, request: bytes) -> bytes:
        """Apply one raw request to the metrics and return the HTTP response bytes."""
        text = request.split(b"\0", 1)[0]
        if text.startswith(b"OPTIONS"):
            return CORS_PREFLIGHT

        with self._lock:
            m = self.metrics
            if b"/stall" in text:
                m.system_stalled = True
                print("[Live Core Event] System execution explicitly STALLED.")
            elif b"/telemetry" in text or b"GET / " in text:
                m.system_stalled = False

            if b"/LIVE_STREAM" in text and not m.system_stalled:
                incoming_bulk = len(request)
                clean_targets = int(incoming_bulk * CLEAN_FRACTION)
                junk_noise = incoming_bulk - clean_targets
                m.live_bytes_processed += clean_targets
                m.noise_filtered_bytes += junk_noise
                m.opex_efficiency = 1.0 + self._rng.randrange(12) / 1000.0
                print(
                    "[Data Crunch] Processing authentic network load: "
                    f"Got {incoming_bulk} bytes -> Dropped {junk_noise} bytes of noise."
                )
            body = self._render()

        return (RESPONSE_HEAD + body).encode("ascii")

    def payload(self) -> str:
        """The current metrics as JSON text."""
        with self._lock:
            return self._render()

    def serve(self, address: tuple[str, int]) -> None:
        """Answer connections until shutdown() is called; raises OSError if binding fails."""
        with socket.create_server(address, backlog=BACKLOG) as server:
            server.settimeout(_POLL_INTERVAL)
            self.server_address = server.getsockname()[:2]
            print(
                f"[Production Core] Sluice-Bench active on Port {self.server_address[1]}. "
                "Waiting for real-world streams...",
                flush=True,
            )
            self.ready.set()
            while not self._stop.is_set():
                try:
                    client, _ = server.accept()
                except OSError:
                    continue
                with client:
                    client.settimeout(_CLIENT_TIMEOUT)
                    try:
                        request = client.recv(BUFFER_SIZE - 1)
                        client.sendall(self.handle(request))
                    except OSError:
                        continue

    def shutdown(self) -> None:
        """Ask a running serve() loop to stop."""
        self._stop.set()


def _run(core: SluiceCore, address: tuple[str, int]) -> None:
    try:
        core.serve(address)
    except OSError:
        print(f"[Fatal] Could not map to communication port {address[1]}.", flush=True)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-core",
        description="Filter live stream traffic and serve the production metrics.",
    )
    parser.add_argument("--host", default="", help="interface to listen on")
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    core = SluiceCore()
    worker = threading.Thread(target=_run, args=(core, (args.host, args.port)), daemon=True)
    worker.start()

    print(
        "[System Operational] Reading live global data networks. Press [ENTER] to safely close.",
        flush=True,
    )
    try:
        input()
    except (EOFError, KeyboardInterrupt):
        pass

    core.shutdown()
    worker.join()
    return 0