"""Axis and unit harmonization: network-specific labels → canonical form."""

from __future__ import annotations

import math
import re

from motionconv.models.core import Axis

# Component labels seen in configurations and file headers
AXIS_ALIASES: dict[str, Axis] = {
    "ns": Axis.NS,
    "n-s": Axis.NS,
    "n": Axis.NS,
    "north": Axis.NS,
    "ew": Axis.EW,
    "e-w": Axis.EW,
    "e": Axis.EW,
    "east": Axis.EW,
    "ud": Axis.UD,
    "u-d": Axis.UD,
    "z": Axis.UD,
    "u": Axis.UD,
    "up": Axis.UD,
    "down": Axis.UD,
    "vertical": Axis.UD,
}

# Unit label normalization table
UNIT_MAP = {
    "gal": "gal",
    "cm/s2": "gal",
    "cm/s^2": "gal",
    "cm/s/s": "gal",
    "cm/sec2": "gal",
    "cm/sec/sec": "gal",
    "mm/s2": "mm/s^2",
    "mm/s^2": "mm/s^2",
    "mm/s/s": "mm/s^2",
    "m/s2": "m/s^2",
    "m/s^2": "m/s^2",
}

# Multiplier from a normalized unit to gal
GAL_FACTORS: dict[str, float] = {
    "gal": 1.0,
    "mm/s^2": 0.1,
    "m/s^2": 100.0,
}

# Bearings like "N28E", "S62E", "N90W" or a plain azimuth "360"
_BEARING_RE = re.compile(r"^(?P<from>[NS])(?P<deg>\d+(?:\.\d+)?)(?P<to>[EW])$")


def parse_axis(label: str) -> Axis | None:
    """Map a component label (``ns``, ``E-W``, ``HNZ`` ...) to an Axis."""
    key = label.strip().lower()
    if key in AXIS_ALIASES:
        return AXIS_ALIASES[key]
    # Channel codes such as HNN / HLE / HNZ / EHZ end with the orientation letter
    if len(key) == 3 and key.isalpha():
        return AXIS_ALIASES.get(key[-1])
    # KiK-net numbered channels: NS1, EW2, UD1 ...
    m = re.match(r"^(ns|ew|ud)\d$", key)
    if m:
        return AXIS_ALIASES[m.group(1)]
    return None


def azimuth_to_axis(azimuth: float) -> tuple[Axis, int]:
    """Closest horizontal axis for an azimuth in degrees from north.

    Returns the axis and its polarity: +1 when the channel points north or
    east, -1 when it points south or west.
    """
    az = azimuth % 360.0
    if az <= 45.0 or az >= 315.0:
        return Axis.NS, 1
    if az < 135.0:
        return Axis.EW, 1
    if az <= 225.0:
        return Axis.NS, -1
    return Axis.EW, -1


def orientation_to_axis(label: str) -> tuple[Axis, int] | None:
    """Map a header orientation (``Up``, ``180 Deg``, ``N62W``) to an axis and polarity."""
    text = label.strip().upper().replace(" ", "")
    if not text:
        return None
    if text in ("UP", "UD", "Z", "VERT", "VERTICAL"):
        return Axis.UD, 1
    if text == "DOWN":
        return Axis.UD, -1
    if text.endswith("DEG"):
        text = text[:-3]
    try:
        azimuth = float(text)
    except ValueError:
        pass
    else:
        return azimuth_to_axis(azimuth) if math.isfinite(azimuth) else None
    m = _BEARING_RE.match(text)
    if m:
        deg = float(m.group("deg"))
        # Bearing measured from N or S towards E or W
        azimuth = deg if m.group("from") == "N" else 180.0 - deg
        if m.group("to") == "W":
            azimuth = -azimuth
        return azimuth_to_axis(azimuth)
    axis = parse_axis(text)
    return None if axis is None else (axis, 1)


def normalize_unit(unit: str) -> str:
    """Normalize a unit string to a standard form."""
    return UNIT_MAP.get(unit.strip().lower().replace(" ", ""), unit.strip())


def gal_factor(unit: str) -> float | None:
    """Multiplier converting values in ``unit`` to gal, None when unknown."""
    return GAL_FACTORS.get(normalize_unit(unit))
