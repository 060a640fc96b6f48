"""Core data models for conversion jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from motionconv.config import INSTITUTIONS, MULTI_AXIS_FORMATS, NAME_FORMAT, SOURCE_EXTENSIONS, TARGET_EXTENSIONS


class Axis(Enum):
    NS = "ns"
    EW = "ew"
    UD = "ud"


AXES: tuple[Axis, ...] = (Axis.NS, Axis.EW, Axis.UD)


class SourceFormat(Enum):
    """File layout of an original network recording."""

    JP_NIED_KNET = "jp_nied_knet"
    US_SCSN_V2 = "us_scsn_v2"
    NZ_GEONET_V1A = "nz_geonet_v1a"
    NZ_GEONET_V2A = "nz_geonet_v2a"
    TW_PALERT_SAC = "tw_palert_sac"
    TK_AFAD_ASC = "tk_afad_asc"

    def acceptable_extensions(self) -> tuple[str, ...]:
        return SOURCE_EXTENSIONS[self.value]

    @property
    def is_multi_axis(self) -> bool:
        """True when NS/EW/UD are split across three files."""
        return self.value in MULTI_AXIS_FORMATS

    @property
    def institution(self) -> str:
        return INSTITUTIONS[self.value]


class TargetFormat(Enum):
    JP_JMA_CSV = "jp_jma_csv"
    JP_STERA3D_TXT = "jp_stera3d_txt"

    @property
    def extension(self) -> str:
        return TARGET_EXTENSIONS[self.value]


@dataclass(frozen=True)
class GlobalSettings:
    """Settings shared by every conversion in a configuration."""

    name_format: str = NAME_FORMAT
    acc_calculate: bool = False  # remove per-axis mean after extraction
    unit_conversion: bool = True  # normalize amplitudes to gal


@dataclass(frozen=True)
class FileEntry:
    """One physical source file declared in the configuration."""

    path: Path
    axis: Axis | None = None  # only for multi-axis formats
    grouping_key: int | None = None  # shared key = same logical recording

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, '' when absent."""
        return self.path.suffix.lstrip(".").lower()


@dataclass(frozen=True)
class FileGroup:
    entries: tuple[FileEntry, ...] = ()


@dataclass(frozen=True)
class ConversionJob:
    """A named conversion from one source format to one target format."""

    name: str
    source_format: SourceFormat
    target_format: TargetFormat
    groups: tuple[FileGroup, ...] = ()

    @property
    def entries(self) -> list[FileEntry]:
        return [entry for group in self.groups for entry in group.entries]


@dataclass(frozen=True)
class Configuration:
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    jobs: tuple[ConversionJob, ...] = ()
