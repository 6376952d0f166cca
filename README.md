# sasluice

sasluice is a set of small TCP services and command-line tools. They translate raw telemetry frames into JSON, screen the values against a length gate, and publish the results as JSON over HTTP. They can also fetch climate and event feeds. The package uses only the Python standard library and needs Python 3.10 or later.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

### `sasluice-bridge`

The bridge listens for binary frames, on port 8080 by default. A frame is a breed byte followed by a big-endian 16-bit length. The bridge reads up to 4096 bytes from each connection. If it gets at least three bytes, it turns the frame into a JSON line, `{"breed":B,"measured_length":L}\n`. It then forwards that line to the sluice on `127.0.0.1:8081`.

Options:

- `--host`: the interface to listen on.
- `--port`: the port to listen on.
- `--sluice-host` and `--sluice-port`: where the JSON lines are sent.

### `sasluice-sluice`

The sluice reads JSON lines on port 8081 (`--input-port`). It screens each `measured_length`:

- A length from 1 to 4096 is admitted with verdict `1` and an amplitude of `(4096 - length) / 4096`.
- Any other length gets verdict `-1` and an amplitude of `0.000`.

A second listener runs on port 8082 (`--web-port`). It answers every connection with the latest verdict as an HTTP 200 JSON response. That response carries `Access-Control-Allow-Origin: *`. The verdict looks like this:

```
{"verdict":1,"amplitude":0.938,"measured_length":256,"breed":2,"total":1,"admitted":1}
```

### `sasluice-core`

The core is a production metrics service on port 8082 (`--host`, `--port`). It reads one request of up to 8191 bytes per connection and handles it as follows:

- An `OPTIONS` request gets a `204 No Content` CORS pre-flight reply.
- A request containing `/stall` stalls the core.
- A request containing `/telemetry` or `GET / ` resumes it.
- A `/LIVE_STREAM` request, when the core is not stalled, counts 2% of its bytes (rounded down) as processed. The rest are counted as filtered noise. The PUE figure is set to a random value from 1.000 to 1.011.

Every other request gets the current metrics:

```
{"pue": 1.012, "cycles": 0, "pruned": 0, "state": 0}
```

Press Enter to stop the core.

### `sasluice-harvester`

The harvester fetches `/earthquakes/feed/v1.0/summary/all_hour.geojson` from `earthquake.usgs.gov:80` over plain HTTP. It wraps each received chunk in a `POST /LIVE_STREAM` frame and sends the frames to the core on `127.0.0.1:8082`. It waits 0.05 s between chunks, and 10 s between cycles. If the host cannot be resolved or reached, it waits 5 s and tries again.

Options:

- `--host`, `--port` and `--path`: the feed to fetch.
- `--core-host` and `--core-port`: where the core is.
- `--delay`: the wait between chunks.
- `--interval`: the wait between cycles.
- `--retry`: the wait before trying again after a failure.
- `--cycles`: stop after this many cycles.

### `sasluice-collector`

The collector queries a meteorological endpoint (`--endpoint`, `--timeout`) and looks for the value after `"20260101":`. It then prints an engine report with the mode, the temperature and the PUE. If the request fails or the value is missing, the report shows `SIMULATION_MODE_FALLBACK` with −3.4 °C and PUE 1.031.

### `sasluice-weather`

This command builds a query for the weather variables you ask for and prints the fetched payload unchanged. By default it asks for `T2M`, `PRECTOTCORR` and `WS2M` from 2026-01-01 to 2026-01-05.

Options:

- `--parameter`: a variable to ask for. It can be given more than once.
- `--longitude` and `--latitude`: the location.
- `--start` and `--end`: the date range.
- `--base`: the endpoint to query.
- `--timeout`: how long to wait for the endpoint.

## Using the pieces from Python

```python
from sasluice.bridge import translate_frame
from sasluice.quantum_sluice import Sluice
from sasluice.collector import extract_metrics, format_report

line = translate_frame(bytes([2, 0x01, 0x00]))
# '{"breed":2,"measured_length":256}\n'

sluice = Sluice()
sluice.scrutinize(line)
print(sluice.verdict_json())

print(format_report(extract_metrics('{"20260101": 27.5}')))
```

`translate_frame` raises `ValueError` for frames shorter than three bytes. `SluiceCore.handle` takes the raw request bytes and returns the HTTP response bytes, so the core's rules can be used without a socket.

## What it does not do

- None of the commands sends binary frames to the bridge. The frames have to come from some other producer.
- There is no web page. The HTTP endpoints only return JSON.
- `sasluice-sluice` and `sasluice-core` both default to port 8082, so running both on one host needs a different port for one of them.
- Nothing is stored. All totals live in memory and are lost when a service stops.