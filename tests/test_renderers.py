"""Tests for output rendering and naming."""

from __future__ import annotations

from datetime import datetime

import numpy as np
import pytest

from motionconv.models.core import AXES, SourceFormat, TargetFormat
from motionconv.models.waveform import CanonicalWaveform, WaveformMetadata
from motionconv.storage.renderers import output_filename, render


@pytest.fixture
def waveform():
    meta = WaveformMetadata(
        station_code="ISK005",
        start_time=datetime(2024, 1, 1, 16, 10, 18),
        latitude=37.2985,
        longitude=136.7653,
        source_format=SourceFormat.JP_NIED_KNET,
    )
    return CanonicalWaveform(
        sampling_rate=100.0,
        ns=[1.0, -2.0, 3.5],
        ew=[0.5, 0.5, -0.5],
        ud=[-0.25, 0.75, 0.0],
        metadata=meta,
    )


class TestRender:
    def test_jma_csv(self, waveform):
        lines = render(waveform, TargetFormat.JP_JMA_CSV).splitlines()
        assert lines[:7] == [
            " SITE CODE= ISK005",
            " LAT.= 37.2985",
            " LON.= 136.7653",
            " SAMPLING RATE= 100Hz",
            " UNIT  = gal",
            " INITIAL TIME = 2024 01 01 16 10 18",
            " NS, EW, UD",
        ]
        assert lines[7:] == ["1.000,0.500,-0.250", "-2.000,0.500,0.750", "3.500,-0.500,0.000"]

    def test_stera3d_txt(self, waveform):
        lines = render(waveform, TargetFormat.JP_STERA3D_TXT).splitlines()
        assert lines[0] == "0.01"
        assert lines[1] == "3"
        assert lines[2:] == ["1.000 0.500 -0.250", "-2.000 0.500 0.750", "3.500 -0.500 0.000"]

    def test_missing_coordinates_left_blank(self, waveform):
        meta = WaveformMetadata(station_code="X", start_time=waveform.metadata.start_time)
        wf = CanonicalWaveform(50.0, waveform.ns, waveform.ew, waveform.ud, meta)
        lines = render(wf, TargetFormat.JP_JMA_CSV).splitlines()
        assert lines[1] == " LAT.= "
        assert lines[3] == " SAMPLING RATE= 50Hz"


class TestOutputFilename:
    @pytest.mark.parametrize(
        "source, target, expected",
        [
            (SourceFormat.JP_NIED_KNET, TargetFormat.JP_JMA_CSV, "20240101-161018-ISK005-knet.csv"),
            (SourceFormat.NZ_GEONET_V2A, TargetFormat.JP_STERA3D_TXT, "20240101-161018-ISK005-geonet.txt"),
            (SourceFormat.TK_AFAD_ASC, TargetFormat.JP_JMA_CSV, "20240101-161018-ISK005-afad.csv"),
        ],
    )
    def test_name(self, waveform, source, target, expected):
        assert output_filename(waveform, source, target) == expected


class TestCanonicalWaveform:
    def test_unequal_lengths_rejected(self, waveform):
        with pytest.raises(ValueError, match="lengths differ"):
            CanonicalWaveform(100.0, [1.0, 2.0], [1.0], [1.0, 2.0], waveform.metadata)

    def test_non_positive_rate_rejected(self, waveform):
        with pytest.raises(ValueError, match="positive"):
            CanonicalWaveform(0.0, [1.0], [1.0], [1.0], waveform.metadata)

    def test_derived_values(self, waveform):
        assert waveform.element_count == 3
        assert waveform.duration_s == pytest.approx(0.03)
        assert waveform.ns.dtype == np.float64
        assert list(waveform.axis_samples) == list(AXES)
