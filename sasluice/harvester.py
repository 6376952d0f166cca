"""Live feed harvester: streams a remote event feed into the production core."""

from __future__ import annotations

import argparse
import socket
import sys
import time

REMOTE_HOST = "earthquake.usgs.gov"
REMOTE_PORT = 80
REMOTE_PATH = "/earthquakes/feed/v1.0/summary/all_hour.geojson"
CORE_HOST = "127.0.0.1"
CORE_PORT = 8082
USER_AGENT = "SluiceBenchHarvester/1.0"
CHUNK_SIZE = 4096
CHUNK_DELAY = 0.05
RETRY_DELAY = 5.0
CYCLE_DELAY = 10.0

RULE = "=" * 52


class RemoteUnreachableError(ConnectionError):
    """The remote feed could not be reached."""


class CoreOfflineError(ConnectionError):
    """The local production core is not accepting connections."""


def build_request(host: str = REMOTE_HOST, path: str = REMOTE_PATH) -> bytes:
    """The HTTP request sent to the remote feed."""
    return (
        f"GET {path} HTTP/1.1\r\n"
        f"Host: {host}\r\n"
        f"User-Agent: {USER_AGENT}\r\n"
        "Connection: close\r\n\r\n"
    ).encode("ascii")


def frame_chunk(chunk: bytes) -> bytes:
    """Wrap a received chunk in the stream header understood by the core.

    The declared length is that of the whole chunk; the body ends at the first NUL.
    """
    body = chunk.split(b"\0", 1)[0]
    header = b"POST /LIVE_STREAM HTTP/1.1\r\nContent-Length: %d\r\n\r\n" % len(chunk)
    return header + body


def harvest_once(
    remote_address: tuple[str, int],
    core_address: tuple[str, int],
    host: str = REMOTE_HOST,
    path: str = REMOTE_PATH,
    delay: float = CHUNK_DELAY,
) -> int:
    """Run one harvest cycle and return the number of feed bytes forwarded.

    Raises socket.gaierror when the feed host cannot be resolved,
    RemoteUnreachableError when it cannot be reached and CoreOfflineError
    when the core refuses the connection.
    """
    try:
        remote = socket.create_connection(remote_address)
    except socket.gaierror:
        raise
    except OSError as exc:
        raise RemoteUnreachableError(f"cannot reach {remote_address}: {exc}") from exc

    with remote:
        print("[Live Feed] Connected! Pumping global geo-stream payload data...", flush=True)
        remote.sendall(build_request(host, path))

        try:
            core = socket.create_connection(core_address)
        except OSError as exc:
            raise CoreOfflineError(f"cannot reach core at {core_address}: {exc}") from exc

        forwarded = 0
        with core:
            while True:
                try:
                    chunk = remote.recv(CHUNK_SIZE - 1)
                except OSError:
                    break
                if not chunk:
                    break
                try:
                    core.sendall(frame_chunk(chunk))
                except OSError:
                    break
                forwarded += len(chunk)
                if delay > 0:
                    time.sleep(delay)
        return forwarded


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-harvester",
        description="Stream a live remote feed into the production core.",
    )
    parser.add_argument("--host", default=REMOTE_HOST)
    parser.add_argument("--port", type=int, default=REMOTE_PORT)
    parser.add_argument("--path", default=REMOTE_PATH)
    parser.add_argument("--core-host", default=CORE_HOST)
    parser.add_argument("--core-port", type=int, default=CORE_PORT)
    parser.add_argument("--delay", type=float, default=CHUNK_DELAY)
    parser.add_argument("--retry", type=float, default=RETRY_DELAY)
    parser.add_argument("--interval", type=float, default=CYCLE_DELAY)
    parser.add_argument("--cycles", type=int, default=None, help="stop after this many cycles")
    args = parser.parse_args(argv)

    print(RULE)
    print("     SA-SLUICE LIVE EARTHDATA EXTRACTION BLOCK      ")
    print(RULE, flush=True)

    completed = 0
    try:
        while args.cycles is None or completed < args.cycles:
            completed += 1
            print("[Live Feed] Connecting to global USGS satellite/sensor node...", flush=True)
            try:
                harvest_once(
                    (args.host, args.port),
                    (args.core_host, args.core_port),
                    args.host,
                    args.path,
                    args.delay,
                )
            except socket.gaierror:
                print("[Error] DNS lookup failed for live feed host.", file=sys.stderr)
                time.sleep(args.retry)
                continue
            except RemoteUnreachableError:
                print("[Error] Live remote network feed unreachable. Retrying...", flush=True)
                time.sleep(args.retry)
                continue
            except CoreOfflineError:
                print(
                    "[Warning] Local sa_sluice_core engine is offline. "
                    f"Start it on port {args.core_port}.",
                    flush=True,
                )
            print(
                "[Live Feed] Batch complete. Refreshing stream cycle in "
                f"{args.interval:g} seconds...",
                flush=True,
            )
            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    return 0