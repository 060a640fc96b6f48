"""Tests for axis and orientation normalization."""

from __future__ import annotations

import pytest

from motionconv.harmonize.axis_map import azimuth_to_axis, orientation_to_axis, parse_axis
from motionconv.models.core import Axis


class TestParseAxis:
    @pytest.mark.parametrize(
        "label, axis",
        [("ns", Axis.NS), ("E-W", Axis.EW), ("HLZ", Axis.UD), ("NS1", Axis.NS), ("EW2", Axis.EW)],
    )
    def test_known_labels(self, label, axis):
        assert parse_axis(label) is axis

    def test_unknown(self):
        assert parse_axis("radial") is None


class TestAzimuthToAxis:
    @pytest.mark.parametrize(
        "azimuth, expected",
        [
            (0.0, (Axis.NS, 1)),
            (360.0, (Axis.NS, 1)),
            (90.0, (Axis.EW, 1)),
            (180.0, (Axis.NS, -1)),
            (270.0, (Axis.EW, -1)),
            (-90.0, (Axis.EW, -1)),
        ],
    )
    def test_polarity(self, azimuth, expected):
        assert azimuth_to_axis(azimuth) == expected


class TestOrientationToAxis:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("360 Deg", (Axis.NS, 1)),
            ("90 Deg", (Axis.EW, 1)),
            ("180 Deg", (Axis.NS, -1)),
            ("270 Deg", (Axis.EW, -1)),
            ("Up", (Axis.UD, 1)),
            ("Down", (Axis.UD, -1)),
            ("N28E", (Axis.NS, 1)),
            ("S62E", (Axis.EW, 1)),
            ("N62W", (Axis.EW, -1)),
            ("S10W", (Axis.NS, -1)),
        ],
    )
    def test_header_labels(self, label, expected):
        assert orientation_to_axis(label) == expected

    @pytest.mark.parametrize("label", ["", "nan Deg", "sideways"])
    def test_unusable(self, label):
        assert orientation_to_axis(label) is None
