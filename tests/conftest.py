"""Shared fixtures for motionconv tests.

Source files are written synthetically into ``tmp_path`` in the layouts
the parsers read; the ``write_*`` fixtures return factory functions.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import numpy as np
import pytest

KNET_DIRECTIONS = {"ns": "N-S", "ew": "E-W", "ud": "U-D"}
AFAD_STREAMS = {"ns": "N", "ew": "E", "ud": "Z"}


def _chunks(values, size):
    for i in range(0, len(values), size):
        yield values[i : i + size]


def make_knet_text(
    axis: str,
    counts: list[int],
    station: str = "ISK005",
    record_time: str = "2024/01/01 16:10:18",
    freq: str = "100Hz",
    scale: str = "1(gal)/100",
    direction: str | None = None,
) -> str:
    header = [
        ("Origin Time", "2024/01/01 16:10:00"),
        ("Lat.", "37.495"),
        ("Long.", "137.270"),
        ("Depth. (km)", "16"),
        ("Mag.", "7.6"),
        ("Station Code", station),
        ("Station Lat.", "37.2985"),
        ("Station Long.", "136.7653"),
        ("Station Height(m)", "25"),
        ("Record Time", record_time),
        ("Sampling Freq(Hz)", freq),
        ("Duration Time(s)", "300"),
        ("Dir.", direction or KNET_DIRECTIONS[axis]),
        ("Scale Factor", scale),
        ("Max. Acc. (gal)", "852.645"),
        ("Last Correction", "2024/01/01 16:10:03"),
        ("Memo.", ""),
    ]
    lines = [f"{label:<18}{value}" for label, value in header]
    for chunk in _chunks(counts, 8):
        lines.append(" ".join(f"{c:8d}" for c in chunk))
    return "\n".join(lines) + "\n"


def make_afad_text(
    axis: str,
    values: list[float],
    station: str = "4614",
    first_sample: str = "20230206_011700.000",
    interval: str = "0.01",
    ndata: int | None = None,
    units: str = "cm/s^2",
) -> str:
    lines = [
        "EVENT_NAME: Kahramanmaras",
        f"STATION_CODE: {station}",
        "STATION_LATITUDE_DEGREE: 37.485",
        "STATION_LONGITUDE_DEGREE: 37.300",
        f"DATE_TIME_FIRST_SAMPLE_YYYYMMDD_HHMMSS: {first_sample}",
        f"SAMPLING_INTERVAL_S: {interval}",
        f"NDATA: {len(values) if ndata is None else ndata}",
        f"STREAM: {AFAD_STREAMS[axis]}",
        f"UNITS: {units}",
    ]
    lines += [f"{v:.6f}" for v in values]
    return "\n".join(lines) + "\n"


def make_v2_text(
    channels: dict[str, list[float]],
    station: str = "24278",
    dt: str = ".010",
    orientation: dict[str, str] | None = None,
) -> str:
    orientation = {"ns": "360 Deg", "ew": "90 Deg", "ud": "Up", **(orientation or {})}
    lines = []
    for n, (axis, values) in enumerate(channels.items(), start=1):
        lines += [
            "CORRECTED ACCELEROGRAM DATA",
            "Northridge Earthquake",
            f"Station No. {station}  34.390N, 118.079W   Sylmar - County Hospital",
            "Rcrd of Mon Jan 17, 1994 12:31:00.0 GMT",
            f"Chan  {n}:  {orientation[axis]}",
            f" {len(values)} points of accel data equally spaced at  {dt} sec, in cm/sec2.  (Format: 8F10.3)",
        ]
        lines += ["".join(f"{v:10.3f}" for v in chunk) for chunk in _chunks(values, 8)]
        lines.append(f" {len(values)} points of veloc data equally spaced at  {dt} sec, in cm/sec.  (Format: 8F10.3)")
        lines += ["".join(f"{0.0:10.3f}" for _ in chunk) for chunk in _chunks(values, 8)]
        lines.append("/&")
    return "\n".join(lines) + "\n"


def make_geonet_text(
    components: dict[str, list[float]],
    volume: int = 1,
    site: str = "CMWZ",
    start: tuple[int, ...] = (2016, 11, 13, 11, 2, 56),
    interval: float = 0.01,
    orientation: dict[str, str] | None = None,
) -> str:
    orientation = {"ns": "N28E", "ew": "S62E", "ud": "UP", **(orientation or {})}
    lines = []
    for axis, values in components.items():
        text = [f"text line {k}" for k in range(16)]
        text[0] = "Processed strong motion data"
        text[1] = f"{site} Wellington Central"
        text[12] = f"Component {orientation[axis]}"
        lines += text

        ints = [0] * 40
        ints[0:6] = list(start)
        ints[33] = len(values)
        if volume == 2:
            ints[34] = len(values)
            ints[35] = len(values)
        lines += ["".join(f"{v:8d}" for v in chunk) for chunk in _chunks(ints, 10)]

        reals = [0.0] * 60
        reals[0], reals[1], reals[5] = -41.29, 174.78, interval
        lines += ["".join(f"{v:13.6f}" for v in chunk) for chunk in _chunks(reals, 6)]

        blocks = [values] + ([[0.0] * len(values)] * 2 if volume == 2 else [])
        for block in blocks:
            lines += ["".join(f"{v:8.3f}" for v in chunk) for chunk in _chunks(block, 10)]
    return "\n".join(lines) + "\n"


def make_sac_trace(
    component: str,
    values: list[float],
    station: str = "W021",
    delta: float = 0.01,
    start: datetime = datetime(2024, 4, 2, 23, 58, 9),
    scale: float | None = None,
    byteorder: str = "<",
    begin: float = 0.0,
    jday: int | None = None,
) -> bytes:
    floats = np.full(70, -12345.0, dtype=f"{byteorder}f4")
    ints = np.full(40, -12345, dtype=f"{byteorder}i4")
    chars = bytearray(b"-12345  " * 24)

    floats[0] = delta
    floats[5] = begin
    floats[31], floats[32] = 23.97, 121.60
    if scale is not None:
        floats[3] = scale
    ints[0] = start.year
    ints[1] = start.timetuple().tm_yday if jday is None else jday
    ints[2], ints[3], ints[4] = start.hour, start.minute, start.second
    ints[5] = start.microsecond // 1000
    ints[6] = 6
    ints[9] = len(values)
    chars[0:8] = f"{station:<8}".encode()
    chars[160:168] = f"{component:<8}".encode()

    data = np.asarray(values, dtype=f"{byteorder}f4")
    return floats.tobytes() + ints.tobytes() + bytes(chars) + data.tobytes()


@pytest.fixture
def samples():
    """Three short, distinct acceleration series."""
    return {
        "ns": [1.0, -2.0, 3.5, 0.25, -1.5, 2.0, 0.0, 4.0, -3.0, 1.25],
        "ew": [0.5, 0.5, -0.5, 1.0, 2.0, -2.0, 3.0, 0.0, 1.5, -1.0],
        "ud": [-0.25, 0.75, 0.0, 0.5, -1.0, 1.0, 0.25, -0.5, 0.0, 2.5],
    }


@pytest.fixture
def write_knet(tmp_path):
    def write(name: str, axis: str, counts: list[int], **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(make_knet_text(axis, counts, **kwargs))
        return path

    return write


@pytest.fixture
def knet_station(write_knet):
    """stationA.ns/.ew/.ud with 0.01 gal per count."""
    counts = {
        "ns": [100, -200, 350, 25, -150, 200, 0, 400, -300, 125],
        "ew": [50, 50, -50, 100, 200, -200, 300, 0, 150, -100],
        "ud": [-25, 75, 0, 50, -100, 100, 25, -50, 0, 250],
    }
    return {axis: write_knet(f"stationA.{axis}", axis, c) for axis, c in counts.items()}


@pytest.fixture
def write_afad(tmp_path):
    def write(name: str, axis: str, values: list[float], **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(make_afad_text(axis, values, **kwargs))
        return path

    return write


@pytest.fixture
def write_v2(tmp_path):
    def write(name: str, channels: dict[str, list[float]], **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(make_v2_text(channels, **kwargs))
        return path

    return write


@pytest.fixture
def write_geonet(tmp_path):
    def write(name: str, components: dict[str, list[float]], **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(make_geonet_text(components, **kwargs))
        return path

    return write


@pytest.fixture
def write_sac(tmp_path):
    def write(name: str, traces: dict[str, list[float]], **kwargs) -> Path:
        path = tmp_path / name
        path.write_bytes(b"".join(make_sac_trace(comp, values, **kwargs) for comp, values in traces.items()))
        return path

    return write
