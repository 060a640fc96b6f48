"""Shared helpers for the source-format parsers.

Every parser reduces its file(s) to one ``AxisTrace`` per component and hands
the three traces to ``assemble_waveform``, which checks they agree and builds
the CanonicalWaveform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import numpy as np

from motionconv.config import CANONICAL_UNIT
from motionconv.errors import InconsistentAxes, InvalidNumericField, MalformedHeader, SourceReadError, UnexpectedEof
from motionconv.harmonize.axis_map import gal_factor, normalize_unit
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import AXES, Axis, FileEntry, GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform, WaveformMetadata

logger = logging.getLogger(__name__)


@dataclass
class AxisTrace:
    """One acceleration component read from a source file."""

    axis: Axis
    values: np.ndarray
    sampling_rate: float  # Hz
    unit: str  # as written in the source
    station_code: str = ""
    start_time: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    source_path: Path | None = None

    @property
    def sample_count(self) -> int:
        return len(self.values)


def read_text(path: Path, encoding: str = "latin-1") -> str:
    """Read a whole text file, turning OS failures into SourceReadError."""
    try:
        with open(path, encoding=encoding, newline="") as f:
            return f.read()
    except OSError as e:
        raise SourceReadError(path, e) from e


def read_bytes(path: Path) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise SourceReadError(path, e) from e


def parse_float(raw: str, path: Path, what: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise InvalidNumericField(f"{what}: '{raw.strip()}' is not a number", path) from None
    if not np.isfinite(value):
        raise InvalidNumericField(f"{what}: '{raw.strip()}' is not finite", path)
    return value


def parse_int(raw: str, path: Path, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise InvalidNumericField(f"{what}: '{raw.strip()}' is not an integer", path) from None


def split_fixed(line: str, width: int) -> list[str]:
    """Cut a fixed-width line into non-blank fields."""
    line = line.rstrip("\r\n")
    fields = (line[i : i + width] for i in range(0, len(line), width))
    return [f for f in fields if f.strip()]


def read_fixed_values(
    lines: list[str],
    start: int,
    count: int,
    width: int,
    path: Path,
    what: str,
) -> tuple[np.ndarray, int]:
    """Read ``count`` fixed-width numbers starting at line ``start``.

    Returns the values and the index of the first line after them.
    """
    values: list[float] = []
    i = start
    while len(values) < count:
        if i >= len(lines):
            raise UnexpectedEof(f"{what}: expected {count} values, found {len(values)}", path)
        for field in split_fixed(lines[i], width):
            values.append(parse_float(field, path, what))
        i += 1
    if len(values) != count:
        raise MalformedHeader(f"{what}: expected {count} values, last line overruns with {len(values)}", path)
    return np.asarray(values, dtype=np.float64), i


def assemble_waveform(
    traces: list[AxisTrace],
    source: SourceFormat,
    settings: GlobalSettings,
) -> CanonicalWaveform:
    """Merge one trace per axis into a CanonicalWaveform.

    Raises:
        InconsistentAxes: axes missing or repeated, or sample counts or
            sampling rates differ between axes.
        MalformedHeader: the amplitude unit is unknown or the start time
            could not be read.
    """
    by_axis: dict[Axis, AxisTrace] = {}
    for trace in traces:
        if trace.axis in by_axis:
            raise InconsistentAxes(
                f"Component {trace.axis.value} appears twice "
                f"({by_axis[trace.axis].source_path}, {trace.source_path})"
            )
        by_axis[trace.axis] = trace
    missing = [a.value for a in AXES if a not in by_axis]
    if missing:
        raise InconsistentAxes(f"Missing component(s) {', '.join(missing)} in {_describe(traces)}")

    ordered = [by_axis[a] for a in AXES]
    counts = {t.sample_count for t in ordered}
    if len(counts) != 1:
        detail = ", ".join(f"{t.axis.value}={t.sample_count}" for t in ordered)
        raise InconsistentAxes(f"Sample counts differ ({detail}) in {_describe(traces)}")
    rates = [t.sampling_rate for t in ordered]
    if not np.allclose(rates, rates[0], rtol=1e-6):
        detail = ", ".join(f"{t.axis.value}={t.sampling_rate:g}Hz" for t in ordered)
        raise InconsistentAxes(f"Sampling rates differ ({detail}) in {_describe(traces)}")

    ref = ordered[0]
    if ref.start_time is None:
        raise MalformedHeader("Start time not found", ref.source_path)

    samples = {}
    unit = normalize_unit(ref.unit)
    for trace in ordered:
        values = np.asarray(trace.values, dtype=np.float64)
        if settings.unit_conversion:
            factor = gal_factor(trace.unit)
            if factor is None:
                raise MalformedHeader(f"Unknown amplitude unit '{trace.unit}'", trace.source_path)
            values = values * factor
        if settings.acc_calculate and len(values):
            values = values - values.mean()
        samples[trace.axis] = values
    if settings.unit_conversion:
        unit = CANONICAL_UNIT

    metadata = WaveformMetadata(
        station_code=ref.station_code,
        start_time=ref.start_time,
        latitude=ref.latitude,
        longitude=ref.longitude,
        unit=unit,
        source_format=source,
    )
    logger.debug("Assembled %s waveform for %s: %d samples at %g Hz",
                 source.value, ref.station_code, ref.sample_count, ref.sampling_rate)
    return CanonicalWaveform(
        sampling_rate=float(ref.sampling_rate),
        ns=samples[Axis.NS],
        ew=samples[Axis.EW],
        ud=samples[Axis.UD],
        metadata=metadata,
    )


def _describe(traces: list[AxisTrace]) -> str:
    paths = sorted({str(t.source_path) for t in traces if t.source_path is not None})
    return ", ".join(paths) or "recording"


def single_entry(recording: Recording) -> FileEntry:
    """The only file of a single-file recording."""
    if len(recording.entries) != 1:
        raise InconsistentAxes(f"Expected one file, got {len(recording.entries)}: {', '.join(map(str, recording.paths))}")
    return recording.entries[0]
