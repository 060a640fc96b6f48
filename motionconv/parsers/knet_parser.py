"""Parser for NIED K-NET / KiK-net ASCII files (.NS, .EW, .UD).

Each file holds one component: a 17-line header ending with ``Memo.``, then
integer counts.  Decoding is done by obspy's KNET reader; this module maps
its trace onto an AxisTrace:

    stats.station        Station Code
    stats.knet.stla/stlo Station Lat. / Station Long.
    stats.starttime      Record Time, converted by obspy from JST to UTC
                         with the logger's 15 s delay removed
    stats.sampling_rate  Sampling Freq(Hz)
    stats.channel        Dir. (NS, EW, UD; KiK-net NS1, EW2 ...)
    stats.calib          Scale Factor numerator / denominator

Amplitude in gal = counts * calib.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from obspy import read

from motionconv.errors import InconsistentAxes, InvalidNumericField, MalformedHeader, SourceReadError, UnexpectedEof
from motionconv.harmonize.axis_map import parse_axis
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.base import AxisTrace, assemble_waveform, read_text

logger = logging.getLogger(__name__)

HEADER_LINES = 17


def extract_knet(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    """Merge the three component files of one K-NET recording."""
    traces = []
    for entry in recording.entries:
        trace = parse_knet_file(entry.path)
        if entry.axis is not None and trace.axis is not entry.axis:
            raise InconsistentAxes(
                f"File declared as '{entry.axis.value}' records direction '{trace.axis.value}'", entry.path
            )
        traces.append(trace)
    return assemble_waveform(traces, SourceFormat.JP_NIED_KNET, settings)


def parse_knet_file(path: Path) -> AxisTrace:
    """Parse one K-NET component file into an AxisTrace in gal."""
    lines = read_text(path).splitlines()
    if len(lines) < HEADER_LINES:
        raise UnexpectedEof(f"K-NET header needs {HEADER_LINES} lines, found {len(lines)}", path)
    if not lines[HEADER_LINES - 1].startswith("Memo"):
        raise MalformedHeader(f"Header line {HEADER_LINES} should start with 'Memo.': {lines[HEADER_LINES - 1]!r}", path)
    if not any(line.strip() for line in lines[HEADER_LINES:]):
        raise UnexpectedEof("No samples after the K-NET header", path)

    try:
        stream = read(str(path), format="KNET")
    except OSError as e:
        raise SourceReadError(path, e) from e
    except Exception as e:
        raise MalformedHeader(f"Unreadable K-NET file: {e}", path) from e

    tr = stream[0]
    stats = tr.stats
    axis = parse_axis(stats.channel)
    if axis is None:
        raise MalformedHeader(f"Unknown direction '{stats.channel}'", path)
    if not stats.station:
        raise MalformedHeader("Empty station code", path)
    if not stats.sampling_rate > 0:
        raise MalformedHeader(f"Sampling frequency must be positive, got {stats.sampling_rate}", path)
    if not stats.calib or not np.isfinite(stats.calib):
        raise MalformedHeader(f"Invalid scale factor (calib={stats.calib})", path)

    values = np.asarray(tr.data, dtype=np.float64) * stats.calib
    if not np.all(np.isfinite(values)):
        raise InvalidNumericField("Non-finite samples", path)
    logger.debug("Read K-NET %s %s: %d samples", stats.station, stats.channel, stats.npts)

    return AxisTrace(
        axis=axis,
        values=values,
        sampling_rate=float(stats.sampling_rate),
        unit="gal",
        station_code=stats.station,
        start_time=stats.starttime.datetime,
        latitude=_knet_header(stats, "stla"),
        longitude=_knet_header(stats, "stlo"),
        source_path=path,
    )


def _knet_header(stats, key: str) -> float | None:
    value = stats.get("knet", {}).get(key)
    return None if value is None else float(value)
