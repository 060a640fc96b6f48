"""Parser for Taiwan P-Alert SAC files (.sac).

A P-Alert event file holds the three components as consecutive binary SAC
traces, each a 632-byte header followed by NPTS float32 samples.  The file
is cut into traces from each header's NPTS and every trace is decoded with
obspy's SAC reader (byte order, undefined values and the reference time are
handled there).

Samples are in gal; a defined SCALE header (obspy's calib) is applied as gain.  The axis
comes from the last letter of KCMPNM (HLN, HLE, HLZ ...), or from
CMPINC/CMPAZ when the component name is not set.
"""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path

import numpy as np
from obspy import read

from motionconv.errors import InvalidNumericField, MalformedHeader, UnexpectedEof
from motionconv.harmonize.axis_map import azimuth_to_axis, parse_axis
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import Axis, GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.base import AxisTrace, assemble_waveform, read_bytes, single_entry

logger = logging.getLogger(__name__)

HEADER_SIZE = 632
UNDEFINED = -12345


def extract_palert(recording: Recording, settings: GlobalSettings) -> CanonicalWaveform:
    path = single_entry(recording).path
    return assemble_waveform(parse_sac_file(path), SourceFormat.TW_PALERT_SAC, settings)


def parse_sac_file(path: Path) -> list[AxisTrace]:
    """Parse every SAC trace stored back to back in one file."""
    raw = read_bytes(path)
    if not raw:
        raise UnexpectedEof("Empty SAC file", path)
    traces = []
    offset = 0
    while offset < len(raw):
        trace, offset = _parse_trace(raw, offset, path)
        traces.append(trace)
    logger.debug("Read %d SAC trace(s) from %s", len(traces), path)
    return traces


def _parse_trace(raw: bytes, offset: int, path: Path) -> tuple[AxisTrace, int]:
    if offset + HEADER_SIZE > len(raw):
        raise UnexpectedEof(f"SAC header at byte {offset} is truncated", path)

    npts = _read_sac(raw[offset : offset + HEADER_SIZE], path, headonly=True, fsize=False).stats.npts
    if npts <= 0:
        raise MalformedHeader(f"NPTS must be positive, got {npts} (trace at byte {offset})", path)
    end = offset + HEADER_SIZE + 4 * npts
    if end > len(raw):
        raise UnexpectedEof(f"NPTS is {npts} but only {(len(raw) - offset - HEADER_SIZE) // 4} samples follow", path)

    tr = _read_sac(raw[offset:end], path)
    stats, sac = tr.stats, tr.stats.sac

    values = np.asarray(tr.data, dtype=np.float64)
    values = values * float(stats.calib)
    if not np.all(np.isfinite(values)):
        raise InvalidNumericField(f"Non-finite samples in trace at byte {offset}", path)

    rate = float(stats.sampling_rate)
    if not (math.isfinite(rate) and rate > 0):
        raise MalformedHeader(f"DELTA must be positive, got {stats.delta}", path)

    station = (stats.station or "").strip()
    if not station or station == str(UNDEFINED):
        raise MalformedHeader("KSTNM is not set", path)

    axis, polarity = _component_axis(stats.channel, sac, path)
    trace = AxisTrace(
        axis=axis,
        values=values * polarity,
        sampling_rate=rate,
        unit="gal",
        station_code=station,
        start_time=_start_time(tr, path),
        latitude=_defined(sac, "stla"),
        longitude=_defined(sac, "stlo"),
        source_path=path,
    )
    return trace, end


def _read_sac(chunk: bytes, path: Path, **kwargs):
    try:
        return read(io.BytesIO(chunk), format="SAC", **kwargs)[0]
    except Exception as e:
        raise MalformedHeader(f"Not a readable SAC trace: {e}", path) from e


def _component_axis(kcmpnm: str, sac, path: Path) -> tuple[Axis, int]:
    name = (kcmpnm or "").strip()
    if name and name != str(UNDEFINED):
        axis = parse_axis(name)
        if axis is not None:
            return axis, 1
    inc, az = _defined(sac, "cmpinc"), _defined(sac, "cmpaz")
    if inc == 0.0:
        return Axis.UD, 1
    if inc == 180.0:
        return Axis.UD, -1
    if inc == 90.0 and az is not None:
        return azimuth_to_axis(az)
    raise MalformedHeader(f"Cannot tell the component of trace '{name}'", path)


def _start_time(tr, path: Path):
    """First-sample time (reference time + B) as a naive UTC datetime."""
    sac = tr.stats.sac
    for key in ("nzyear", "nzjday", "nzhour", "nzmin", "nzsec"):
        if _defined(sac, key) is None:
            raise MalformedHeader(f"Reference time field {key.upper()} is not set", path)
    begin = _defined(sac, "b")
    if begin is not None and not math.isfinite(begin):
        raise MalformedHeader(f"B is not finite: {begin}", path)
    try:
        return tr.stats.starttime.datetime
    except (ValueError, OverflowError) as e:
        raise MalformedHeader(f"Invalid first-sample time: {e}", path) from e


def _defined(sac, key: str) -> float | None:
    value = sac.get(key)
    if value is None:
        return None
    value = float(value)
    if math.isfinite(value) and abs(value - UNDEFINED) < 1e-3:
        return None
    return value
