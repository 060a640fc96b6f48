"""Parser for GeoNet Volume 1 (.V1A) and Volume 2 (.V2A) strong-motion files.

A file holds three component blocks back to back.  Each block is:

    16 text lines      line 2 starts with the site code, one line reads
                       "Component N28E" (or S62E, UP ...)
    4 integer lines    10 fields of 8 chars; ints[0:6] = year, month, day,
                       hour, minute, second of the first sample;
                       ints[33] = acceleration sample count
                       (V2A: ints[34], ints[35] = velocity, displacement counts)
    10 real lines      6 fields of 13 chars; reals[0] = latitude,
                       reals[1] = longitude, reals[5] = sampling interval (s)
    data               10 fields of 8 chars per line, accelerations in mm/s^2
                       (V2A: followed by velocity and displacement blocks)

Components pointing south, west or down are negated so that every canonical
axis is positive north, east and up.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from motionconv.errors import MalformedHeader, UnexpectedEof
from motionconv.harmonize.axis_map import orientation_to_axis
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.base import AxisTrace, assemble_waveform, read_fixed_values, read_text, single_entry

logger = logging.getLogger(__name__)

TEXT_LINES = 16
INT_LINES, INT_WIDTH = 4, 8
REAL_LINES, REAL_WIDTH = 10, 13
DATA_WIDTH = 8
UNIT = "mm/s^2"

_SITE_RE = re.compile(r"^\s*(?:Site\s+)?(?P<code>[A-Za-z0-9]+)")
_COMPONENT_RE = re.compile(r"Component\s+(?P<orient>\S+)", re.IGNORECASE)


def extract_geonet_v1a(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    path = single_entry(recording).path
    return assemble_waveform(parse_geonet_file(path, volume=1), SourceFormat.NZ_GEONET_V1A, settings)


def extract_geonet_v2a(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    path = single_entry(recording).path
    return assemble_waveform(parse_geonet_file(path, volume=2), SourceFormat.NZ_GEONET_V2A, settings)


def parse_geonet_file(path: Path, volume: int) -> list[AxisTrace]:
    """Parse all component blocks of a GeoNet V1A/V2A file."""
    lines = read_text(path).splitlines()
    traces = []
    i = 0
    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue
        trace, i = _parse_component(lines, i, path, volume)
        traces.append(trace)

    if not traces:
        raise UnexpectedEof("No component blocks found", path)
    logger.debug("Read %d component(s) from %s", len(traces), path)
    return traces


def _parse_component(lines: list[str], start: int, path: Path, volume: int) -> tuple[AxisTrace, int]:
    header_end = start + TEXT_LINES + INT_LINES + REAL_LINES
    if header_end > len(lines):
        raise UnexpectedEof(f"Component header at line {start + 1} is truncated", path)

    text = lines[start : start + TEXT_LINES]
    m = _SITE_RE.match(text[1])
    if not m:
        raise MalformedHeader(f"No site code on line {start + 2}", path)
    station_code = m.group("code")

    orientation = None
    for line in text:
        cm = _COMPONENT_RE.search(line)
        if cm:
            orientation = cm.group("orient")
            break
    if orientation is None:
        raise MalformedHeader(f"No 'Component' line in block at line {start + 1}", path)
    oriented = orientation_to_axis(orientation)
    if oriented is None:
        raise MalformedHeader(f"Unknown component orientation '{orientation}'", path)
    axis, polarity = oriented

    i = start + TEXT_LINES
    ints, i = read_fixed_values(lines, i, INT_LINES * 10, INT_WIDTH, path, f"integer header at line {i + 1}")
    reals, i = read_fixed_values(lines, i, REAL_LINES * 6, REAL_WIDTH, path, f"real header at line {i + 1}")

    try:
        start_time = datetime(*(int(v) for v in ints[:6]))
    except (ValueError, OverflowError):
        raise MalformedHeader(f"Invalid first-sample time {ints[:6].tolist()}", path) from None

    accel_count = int(ints[33])
    interval = float(reals[5])
    if accel_count <= 0:
        raise MalformedHeader(f"Acceleration sample count must be positive, got {accel_count}", path)
    if interval <= 0:
        raise MalformedHeader(f"Sampling interval must be positive, got {interval}", path)

    values, i = read_fixed_values(lines, i, accel_count, DATA_WIDTH, path, f"acceleration block of {station_code} {orientation}")

    if volume == 2:
        for index, what in ((34, "velocity"), (35, "displacement")):
            count = int(ints[index])
            if count > 0:
                _, i = read_fixed_values(lines, i, count, DATA_WIDTH, path, f"{what} block")

    trace = AxisTrace(
        axis=axis,
        values=values * polarity,
        sampling_rate=1.0 / interval,
        unit=UNIT,
        station_code=station_code,
        start_time=start_time,
        latitude=float(reals[0]),
        longitude=float(reals[1]),
        source_path=path,
    )
    return trace, i
