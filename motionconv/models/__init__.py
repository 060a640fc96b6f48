"""Data models for conversion jobs and canonical waveforms."""

from motionconv.models.core import (
    AXES,
    Axis,
    Configuration,
    ConversionJob,
    FileEntry,
    FileGroup,
    GlobalSettings,
    SourceFormat,
    TargetFormat,
)
from motionconv.models.waveform import CanonicalWaveform, WaveformMetadata

__all__ = [
    "AXES",
    "Axis",
    "Configuration",
    "ConversionJob",
    "FileEntry",
    "FileGroup",
    "GlobalSettings",
    "SourceFormat",
    "TargetFormat",
    "CanonicalWaveform",
    "WaveformMetadata",
]
