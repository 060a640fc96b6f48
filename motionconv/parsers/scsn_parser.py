"""Parser for SCSN / CSMIP Volume 2 corrected accelerograms (.V2).

One file holds the three components one after another.  Each component
block carries, among free-text lines, the lines we need:

    Station No. 24278  34.390N, 118.079W   Sylmar - County Hospital
    Rcrd of Mon Jan 17, 1994 12:31:00.0 GMT
    Chan  1:  360 Deg
     6000 points of accel data equally spaced at  .010 sec, in cm/sec2.  (Format: 8F10.3)
    <6000 values, 8 fields of 10 characters per line>
     6000 points of veloc data ...
    ...
    /&

Velocity and displacement blocks are skipped.  Channels oriented south, west or down
(``180 Deg``, ``270 Deg``, ``Down``) are negated.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path

from motionconv.errors import MalformedHeader
from motionconv.harmonize.axis_map import orientation_to_axis
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.base import AxisTrace, assemble_waveform, parse_float, read_fixed_values, read_text, single_entry

logger = logging.getLogger(__name__)

FIELD_WIDTH = 10

_STATION_RE = re.compile(
    r"Station\s+No\.\s*(?P<code>\S+?),?\s+(?P<lat>\d+(?:\.\d+)?)(?P<ns>[NS]),?\s+(?P<lon>\d+(?:\.\d+)?)(?P<ew>[EW])"
)
_RECORD_TIME_RE = re.compile(
    r"Rcrd\s+of\s+\w{3}\s+(?P<mon>\w{3})\s+(?P<day>\d{1,2}),\s*(?P<year>\d{4})\s+"
    r"(?P<h>\d{1,2}):(?P<m>\d{2}):(?P<s>\d{1,2}(?:\.\d*)?)"
)
_CHANNEL_RE = re.compile(r"Chan\s+\d+\s*:\s*(?P<orient>Up|Down|\d+(?:\.\d+)?\s*(?:Deg)?)", re.IGNORECASE)
_ACCEL_RE = re.compile(
    r"(?P<n>\d+)\s+points\s+of\s+accel\w*\s+data\s+equally\s+spaced\s+at\s+(?P<dt>\d*\.?\d+)\s+sec,?\s+in\s+(?P<unit>[A-Za-z0-9/^]+)",
    re.IGNORECASE,
)


def extract_scsn(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    return assemble_waveform(parse_v2_file(single_entry(recording).path), SourceFormat.US_SCSN_V2, settings)


def parse_v2_file(path: Path) -> list[AxisTrace]:
    """Parse every acceleration block of a V2 file into AxisTraces."""
    lines = read_text(path).splitlines()

    traces: list[AxisTrace] = []
    context: dict = {}
    i = 0
    while i < len(lines):
        line = lines[i]

        m = _STATION_RE.search(line)
        if m:
            lat = float(m.group("lat")) * (1 if m.group("ns") == "N" else -1)
            lon = float(m.group("lon")) * (1 if m.group("ew") == "E" else -1)
            context.update(station_code=m.group("code"), latitude=lat, longitude=lon)

        m = _RECORD_TIME_RE.search(line)
        if m:
            context["start_time"] = _parse_record_time(m, path)

        m = _CHANNEL_RE.search(line)
        if m:
            oriented = orientation_to_axis(m.group("orient"))
            if oriented is None:
                raise MalformedHeader(f"Unknown channel orientation '{m.group('orient')}'", path)
            context["axis"], context["polarity"] = oriented

        m = _ACCEL_RE.search(line)
        if m:
            trace, i = _read_accel_block(lines, i, m, context, path)
            traces.append(trace)
            context.pop("axis")
            continue
        i += 1

    if not traces:
        raise MalformedHeader("No acceleration data block found", path)
    logger.debug("Read %d acceleration block(s) from %s", len(traces), path)
    return traces


def _read_accel_block(lines: list[str], i: int, m: re.Match, context: dict, path: Path) -> tuple[AxisTrace, int]:
    """Read the block announced on line i; returns the trace and the next line index."""
    missing = [k for k in ("station_code", "start_time", "axis") if k not in context]
    if missing:
        raise MalformedHeader(f"Acceleration block at line {i + 1} lacks {', '.join(missing)}", path)

    count = int(m.group("n"))
    dt = parse_float(m.group("dt"), path, "sampling interval")
    if dt <= 0:
        raise MalformedHeader(f"Sampling interval must be positive at line {i + 1}", path)
    values, next_line = read_fixed_values(lines, i + 1, count, FIELD_WIDTH, path, f"accel block at line {i + 1}")

    return AxisTrace(
        axis=context["axis"],
        values=values * context.get("polarity", 1),
        sampling_rate=1.0 / dt,
        unit=m.group("unit"),
        station_code=context["station_code"],
        start_time=context["start_time"],
        latitude=context.get("latitude"),
        longitude=context.get("longitude"),
        source_path=path,
    ), next_line


def _parse_record_time(m: re.Match, path: Path) -> datetime:
    try:
        day = datetime.strptime(f"{m.group('mon')} {m.group('day')} {m.group('year')}", "%b %d %Y")
    except ValueError:
        raise MalformedHeader(f"Invalid record date in '{m.group(0)}'", path) from None
    seconds = float(m.group("s"))
    return day + timedelta(hours=int(m.group("h")), minutes=int(m.group("m")), seconds=seconds)
