"""Parser for AFAD ASCII strong-motion files (.asc), one component per file.

The header is a run of ``KEY: value`` lines; the first purely numeric line
starts the sample block (one value per line, although several values per
line are accepted).  Keys read:

    STATION_CODE                              4614
    STATION_LATITUDE_DEGREE                   37.485
    STATION_LONGITUDE_DEGREE                  37.300
    DATE_TIME_FIRST_SAMPLE_YYYYMMDD_HHMMSS    20230206_011700.000
    SAMPLING_INTERVAL_S                       0.010
    NDATA                                     15000
    STREAM                                    E   (or HNE / N / Z ...)
    UNITS                                     cm/s^2
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

import numpy as np

from motionconv.errors import InconsistentAxes, MalformedHeader, UnexpectedEof
from motionconv.harmonize.axis_map import parse_axis
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.base import AxisTrace, assemble_waveform, parse_float, parse_int, read_text

REQUIRED_KEYS = (
    "STATION_CODE",
    "DATE_TIME_FIRST_SAMPLE_YYYYMMDD_HHMMSS",
    "SAMPLING_INTERVAL_S",
    "NDATA",
    "STREAM",
    "UNITS",
)

_KEY_RE = re.compile(r"^(?P<key>[A-Z0-9_]+)\s*:\s*(?P<value>.*)$")
_NUMBER_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")


def extract_afad(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    """Merge the three component files of one AFAD recording."""
    traces = []
    for entry in recording.entries:
        trace = parse_asc_file(entry.path)
        if entry.axis is not None and trace.axis is not entry.axis:
            raise InconsistentAxes(
                f"File declared as '{entry.axis.value}' holds stream '{trace.axis.value}'", entry.path
            )
        traces.append(trace)
    return assemble_waveform(traces, SourceFormat.TK_AFAD_ASC, settings)


def parse_asc_file(path: Path) -> AxisTrace:
    """Parse one AFAD component file into an AxisTrace (source units)."""
    lines = read_text(path).splitlines()

    header: dict[str, str] = {}
    data_start = None
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        first = stripped.split()[0]
        if _NUMBER_RE.match(first):
            data_start = i
            break
        m = _KEY_RE.match(stripped)
        if m:
            header[m.group("key")] = m.group("value").strip()

    missing = [k for k in REQUIRED_KEYS if not header.get(k)]
    if missing:
        raise MalformedHeader(f"Missing header key(s): {', '.join(missing)}", path)
    if data_start is None:
        raise UnexpectedEof("No samples after the AFAD header", path)

    ndata = parse_int(header["NDATA"], path, "NDATA")
    interval = parse_float(header["SAMPLING_INTERVAL_S"], path, "SAMPLING_INTERVAL_S")
    if interval <= 0:
        raise MalformedHeader(f"SAMPLING_INTERVAL_S must be positive: '{header['SAMPLING_INTERVAL_S']}'", path)

    axis = parse_axis(header["STREAM"])
    if axis is None:
        raise MalformedHeader(f"Unknown stream '{header['STREAM']}'", path)

    values: list[float] = []
    for n, line in enumerate(lines[data_start:], start=data_start + 1):
        for token in line.split():
            values.append(parse_float(token, path, f"line {n}"))
    if len(values) < ndata:
        raise UnexpectedEof(f"NDATA is {ndata} but only {len(values)} samples follow", path)
    if len(values) > ndata:
        raise MalformedHeader(f"NDATA is {ndata} but {len(values)} samples follow", path)

    return AxisTrace(
        axis=axis,
        values=np.asarray(values, dtype=np.float64),
        sampling_rate=1.0 / interval,
        unit=header["UNITS"],
        station_code=header["STATION_CODE"],
        start_time=_parse_first_sample(header["DATE_TIME_FIRST_SAMPLE_YYYYMMDD_HHMMSS"], path),
        latitude=_optional_float(header.get("STATION_LATITUDE_DEGREE"), path, "STATION_LATITUDE_DEGREE"),
        longitude=_optional_float(header.get("STATION_LONGITUDE_DEGREE"), path, "STATION_LONGITUDE_DEGREE"),
        source_path=path,
    )


def _parse_first_sample(raw: str, path: Path) -> datetime:
    for fmt in ("%Y%m%d_%H%M%S.%f", "%Y%m%d_%H%M%S"):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    raise MalformedHeader(f"Invalid first-sample time '{raw}'", path)


def _optional_float(raw: str | None, path: Path, what: str) -> float | None:
    if raw is None or raw == "":
        return None
    return parse_float(raw, path, what)
