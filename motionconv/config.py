"""Paths, constants, and configuration."""

from __future__ import annotations

# Configuration documents accepted by the CLI
CONFIG_FILE_EXTENSIONS = ("toml", "yaml", "yml")

# Only naming scheme supported for converted files
NAME_FORMAT = "yyyymmdd-hhmmss-sn-n"

# Source format token → acceptable file extensions (lowercase, no dot)
SOURCE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "jp_nied_knet": ("ns", "ew", "ud"),
    "us_scsn_v2": ("v2",),
    "nz_geonet_v1a": ("v1a",),
    "nz_geonet_v2a": ("v2a",),
    "tw_palert_sac": ("sac",),
    "tk_afad_asc": ("asc",),
}

# Source format token → institution token used in output filenames
INSTITUTIONS: dict[str, str] = {
    "jp_nied_knet": "knet",
    "us_scsn_v2": "scsn",
    "nz_geonet_v1a": "geonet",
    "nz_geonet_v2a": "geonet",
    "tw_palert_sac": "palert",
    "tk_afad_asc": "afad",
}

# Formats that split NS/EW/UD across three files
MULTI_AXIS_FORMATS = frozenset({"jp_nied_knet", "tk_afad_asc"})

# Target format token → output file extension
TARGET_EXTENSIONS: dict[str, str] = {
    "jp_jma_csv": "csv",
    "jp_stera3d_txt": "txt",
}

# Process exit codes (2 is reserved by click for usage errors)
EXIT_OK = 0
EXIT_PARSE_FAILURE = 3
EXIT_VALIDATION_FAILURE = 4
EXIT_IO_FAILURE = 5
EXIT_EXTRACTION_FAILURE = 6

# Parallel extraction
DEFAULT_WORKERS = 4

# Canonical amplitude unit
CANONICAL_UNIT = "gal"
