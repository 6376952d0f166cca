"""Language bridge: turns raw collector frames into JSON lines for the sluice."""

from __future__ import annotations

import argparse
import socket
import struct

COLLECTOR_IN_PORT = 8080
SLUICE_OUT_PORT = 8081
BUFFER_SIZE = 4096

_HEADER = struct.Struct(">BH")


def translate_frame(frame: bytes) -> str:
    """Turn a binary collector frame (breed byte, big-endian length) into a JSON line."""
    if len(frame) < _HEADER.size:
        raise ValueError(f"frame too short: {len(frame)} bytes, need {_HEADER.size}")
    breed, length = _HEADER.unpack_from(frame)
    return f'{{"breed":{breed},"measured_length":{length}}}\n'


def forward(payload: str, address: tuple[str, int]) -> bool:
    """Send a payload to the sluice; return whether the connection succeeded."""
    try:
        with socket.create_connection(address) as conn:
            conn.sendall(payload.encode("ascii"))
    except OSError:
        return False
    return True


def serve(listen_address: tuple[str, int], sluice_address: tuple[str, int]) -> None:
    """Accept collector frames forever, forwarding each translated frame."""
    with socket.create_server(listen_address, backlog=10) as server:
        while True:
            try:
                client, _ = server.accept()
            except OSError:
                continue
            with client:
                try:
                    data = client.recv(BUFFER_SIZE)
                except OSError:
                    continue
                if len(data) >= _HEADER.size:
                    forward(translate_frame(data), sluice_address)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-bridge",
        description="Translate collector frames into JSON and forward them to the sluice.",
    )
    parser.add_argument("--host", default="", help="interface to listen on")
    parser.add_argument("--port", type=int, default=COLLECTOR_IN_PORT)
    parser.add_argument("--sluice-host", default="127.0.0.1")
    parser.add_argument("--sluice-port", type=int, default=SLUICE_OUT_PORT)
    args = parser.parse_args(argv)

    print(
        f"🔗 Step 2: Language Bridge Online [Port {args.port}]. Awaiting Collector data...",
        flush=True,
    )
    try:
        serve((args.host, args.port), (args.sluice_host, args.sluice_port))
    except KeyboardInterrupt:
        pass
    return 0