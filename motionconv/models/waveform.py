"""Canonical waveform shared by every extractor and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from motionconv.models.core import AXES, Axis, SourceFormat


@dataclass(frozen=True)
class WaveformMetadata:
    """Station and recording metadata carried through to the renderers."""

    station_code: str
    start_time: datetime
    latitude: float | None = None
    longitude: float | None = None
    unit: str = "gal"
    source_format: SourceFormat | None = None

    @property
    def start_time_str(self) -> str:
        """Start time as 'YYYY MM DD hh mm ss', the JMA initial-time layout."""
        return self.start_time.strftime("%Y %m %d %H %M %S")


@dataclass(frozen=True, eq=False)
class CanonicalWaveform:
    """Three equal-length acceleration series plus metadata.

    Arrays are copied to float64 and frozen on construction, so a waveform
    never changes once an extractor has built it.
    """

    sampling_rate: float  # Hz
    ns: np.ndarray
    ew: np.ndarray
    ud: np.ndarray
    metadata: WaveformMetadata

    def __post_init__(self):
        if not self.sampling_rate > 0:
            raise ValueError(f"Sampling rate must be positive, got {self.sampling_rate}")
        lengths = set()
        for axis in AXES:
            arr = np.array(getattr(self, axis.value), dtype=np.float64)
            arr.setflags(write=False)
            object.__setattr__(self, axis.value, arr)
            lengths.add(len(arr))
        if len(lengths) != 1:
            raise ValueError(f"Axis lengths differ: {sorted(lengths)}")

    @property
    def element_count(self) -> int:
        return len(self.ns)

    @property
    def sampling_interval(self) -> float:
        return 1.0 / self.sampling_rate

    @property
    def duration_s(self) -> float:
        return self.element_count / self.sampling_rate

    @property
    def axis_samples(self) -> dict[Axis, np.ndarray]:
        return {axis: getattr(self, axis.value) for axis in AXES}
