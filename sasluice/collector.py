"""Climate collector: fetches a temperature reading and binds it to engine metrics."""

from __future__ import annotations

import argparse
import http.client
import re
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass

USER_AGENT = "libcurl-agent/1.0"
DEFAULT_TIMEOUT = 30.0
NASA_ENDPOINT = (
    "https://nasa.gov?"
    "parameters=T2M&community=AG&longitude=100.5&latitude=13.7"
    "&start=20260101&end=20260101&format=JSON"
)

SEARCH_KEY = '"20260101":'
OPERATIONAL_PUE = 1.031
FALLBACK_TEMPERATURE = -3.4
LIVE_MODE = "LIVE_DATA_FROM_NASA"
FALLBACK_MODE = "SIMULATION_MODE_FALLBACK"

_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


@dataclass
class EngineMetrics:
    """State of the telemetry engine."""

    real_temperature: float
    operational_pue: float
    mode_status: str


def fetch_text(url: str, user_agent: str = USER_AGENT, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch a URL and return its body as text, whatever the HTTP status."""
    request = urllib.request.Request(url, headers={"User-Agent": user_agent})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read()
    except urllib.error.HTTPError as err:
        body = err.read()
    return body.decode("utf-8", errors="replace")


def extract_metrics(raw_json: str) -> EngineMetrics:
    """Find the reading for the target date; fall back to simulated values."""
    position = raw_json.find(SEARCH_KEY)
    if position >= 0:
        match = _NUMBER.match(raw_json, position + len(SEARCH_KEY))
        if match:
            return EngineMetrics(float(match.group(1)), OPERATIONAL_PUE, LIVE_MODE)
    return EngineMetrics(FALLBACK_TEMPERATURE, OPERATIONAL_PUE, FALLBACK_MODE)


def format_report(metrics: EngineMetrics) -> str:
    """Render the console report block for the given metrics."""
    rule = "=" * 44
    return "\n".join(
        [
            rule,
            f" ENGINE OPERATION MODE : {metrics.mode_status}",
            f" EXTRACTED CORE TEMP   : {metrics.real_temperature:.2f} °C",
            f" EFFICIENCY PUE METRIC : {metrics.operational_pue:.3f}",
            rule,
        ]
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sasluice-collector",
        description="Fetch a temperature reading and report the engine metrics.",
    )
    parser.add_argument("--endpoint", default=NASA_ENDPOINT)
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    args = parser.parse_args(argv)

    print("[SYSTEM] Connecting to NASA meteorological arrays...")
    try:
        raw = fetch_text(args.endpoint, timeout=args.timeout)
    except (OSError, ValueError, http.client.HTTPException) as exc:
        print(f"[CONNECTION FAILED] {exc}", file=sys.stderr)
        raw = ""

    print()
    print(format_report(extract_metrics(raw)))
    return 0