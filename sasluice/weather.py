"""Weather collector: fetches a multi-variable climate payload and prints it."""

from __future__ import annotations

import argparse
import http.client
import sys
from collections.abc import Iterable

from sasluice.collector import DEFAULT_TIMEOUT, fetch_text

NASA_BASE = "https://nasa.gov"
DEFAULT_PARAMETERS = ("T2M", "PRECTOTCORR", "WS2M")
DEFAULT_LONGITUDE = 100.5
DEFAULT_LATITUDE = 13.7
DEFAULT_START = "20260101"
DEFAULT_END = "20260105"
PAYLOAD_HEADER = "--- REAL-TIME METEOROLOGICAL PAYLOAD FROM NASA SECTOR ---"


def build_weather_url(
    base: str,
    parameters: Iterable[str],
    longitude: float | str,
    latitude: float | str,
    start: str,
    end: str,
) -> str:
    """Build the query URL for the given variables, location and date range."""
    query = "&".join(
        [
            f"parameters={','.join(parameters)}",
            "community=AG",
            f"longitude={longitude}",
            f"latitude={latitude}",
            f"start={start}",
            f"end={end}",
            "format=JSON",
        ]
    )
    return f"{base}?{query}"


def format_payload(text: str) -> str:
    """Frame a fetched payload under its report header."""
    return f"\n{PAYLOAD_HEADER}\n{text}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-weather",
        description="Fetch meteorological data and print the raw payload.",
    )
    parser.add_argument("--base", default=NASA_BASE)
    parser.add_argument("--parameter", action="append", dest="parameters")
    parser.add_argument("--longitude", default=DEFAULT_LONGITUDE)
    parser.add_argument("--latitude", default=DEFAULT_LATITUDE)
    parser.add_argument("--start", default=DEFAULT_START)
    parser.add_argument("--end", default=DEFAULT_END)
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    args = parser.parse_args(argv)

    url = build_weather_url(
        args.base,
        args.parameters or DEFAULT_PARAMETERS,
        args.longitude,
        args.latitude,
        args.start,
        args.end,
    )
    print("Fetching meteorological data streams directly from NASA Server...")
    try:
        text = fetch_text(url, timeout=args.timeout)
    except (OSError, ValueError, http.client.HTTPException) as exc:
        print(f"NASA Request Failed: {exc}", file=sys.stderr)
    else:
        print(format_payload(text))
    return 0