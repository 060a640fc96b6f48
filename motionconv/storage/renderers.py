"""Render canonical waveforms as JMA CSV or STERA-3D TXT text."""

from __future__ import annotations

import io

import pandas as pd

from motionconv.models.core import SourceFormat, TargetFormat
from motionconv.models.waveform import CanonicalWaveform

SAMPLE_DECIMALS = 3


def waveform_to_dataframe(waveform: CanonicalWaveform) -> pd.DataFrame:
    """Three-column (NS, EW, UD) sample table."""
    return pd.DataFrame({"ns": waveform.ns, "ew": waveform.ew, "ud": waveform.ud})


def render(waveform: CanonicalWaveform, target: TargetFormat) -> str:
    if target is TargetFormat.JP_JMA_CSV:
        return render_jma_csv(waveform)
    if target is TargetFormat.JP_STERA3D_TXT:
        return render_stera3d_txt(waveform)
    raise ValueError(f"No renderer for {target}")


def render_jma_csv(waveform: CanonicalWaveform) -> str:
    """JMA CSV: seven header lines then one ``ns,ew,ud`` row per sample."""
    meta = waveform.metadata
    header = [
        f" SITE CODE= {meta.station_code}",
        f" LAT.= {_coordinate(meta.latitude)}",
        f" LON.= {_coordinate(meta.longitude)}",
        f" SAMPLING RATE= {waveform.sampling_rate:g}Hz",
        f" UNIT  = {meta.unit}",
        f" INITIAL TIME = {meta.start_time_str}",
        " NS, EW, UD",
    ]
    buf = io.StringIO()
    buf.write("\n".join(header) + "\n")
    waveform_to_dataframe(waveform).to_csv(
        buf, header=False, index=False, float_format=f"%.{SAMPLE_DECIMALS}f", lineterminator="\n"
    )
    return buf.getvalue()


def render_stera3d_txt(waveform: CanonicalWaveform) -> str:
    """STERA-3D TXT: sampling interval (s), element count, then ``ns ew ud`` rows."""
    buf = io.StringIO()
    buf.write(f"{waveform.sampling_interval:g}\n")
    buf.write(f"{waveform.element_count}\n")
    waveform_to_dataframe(waveform).to_csv(
        buf, sep=" ", header=False, index=False, float_format=f"%.{SAMPLE_DECIMALS}f", lineterminator="\n"
    )
    return buf.getvalue()


def output_filename(waveform: CanonicalWaveform, source: SourceFormat, target: TargetFormat) -> str:
    """``yyyymmdd-hhmmss-<station>-<institution>.<ext>``"""
    start = waveform.metadata.start_time
    station = waveform.metadata.station_code.replace("/", "_").replace(" ", "_") or "unknown"
    return f"{start:%Y%m%d}-{start:%H%M%S}-{station}-{source.institution}.{target.extension}"


def _coordinate(value: float | None) -> str:
    return "" if value is None else str(round(value, 6))
