"""Tests for angle and conformal-latitude helpers."""

import math

import pytest

from projections.ellipsoid import WGS84Ellipsoid
from projections.geomath import (
    ang_diff,
    ang_normalize,
    sincosd,
    signbit,
    tand,
    taupf,
    tauf,
)


class TestAngNormalize:
    @pytest.mark.parametrize("angle, expected", [
        (0.0, 0.0),
        (190.0, -170.0),
        (-190.0, 170.0),
        (360.0, 0.0),
        (720.5, 0.5),
    ])
    def test_reduces_into_range(self, angle, expected):
        assert ang_normalize(angle) == pytest.approx(expected, abs=1e-12)

    def test_half_turn_keeps_sign(self):
        assert ang_normalize(180.0) == 180.0
        assert ang_normalize(-180.0) == -180.0
        assert ang_normalize(540.0) == 180.0
        assert ang_normalize(-540.0) == -180.0


class TestAngDiff:
    def test_across_antimeridian(self):
        assert ang_diff(170.0, -170.0) == pytest.approx(20.0)
        assert ang_diff(-170.0, 170.0) == pytest.approx(-20.0)

    def test_plain_difference(self):
        assert ang_diff(-75.0, -73.985278) == pytest.approx(1.014722, abs=1e-12)

    def test_identical(self):
        assert ang_diff(33.0, 33.0) == 0.0


class TestSinCosD:
    def test_exact_at_right_angles(self):
        assert sincosd(90.0) == (1.0, 0.0)
        assert sincosd(180.0) == (0.0, -1.0)
        assert sincosd(-90.0) == (-1.0, 0.0)
        assert sincosd(270.0) == (-1.0, 0.0)

    def test_matches_math(self):
        s, c = sincosd(30.0)
        assert s == pytest.approx(0.5, abs=1e-15)
        assert c == pytest.approx(math.sqrt(3) / 2, abs=1e-15)

    def test_negative_zero_sine(self):
        s, _ = sincosd(-0.0)
        assert signbit(s)

    def test_tand_is_finite_at_pole(self):
        assert math.isfinite(tand(90.0))
        assert tand(90.0) > 1e30
        assert tand(45.0) == pytest.approx(1.0, abs=1e-15)


class TestConformalLatitude:
    @pytest.mark.parametrize("lat", [0.0, 1.0, 33.3, 60.0, 84.0, 89.9999])
    def test_tauf_inverts_taupf(self, lat):
        es = WGS84Ellipsoid.es
        tau = math.tan(math.radians(lat))
        assert tauf(taupf(tau, es), es) == pytest.approx(tau, rel=1e-14, abs=1e-15)

    def test_conformal_latitude_is_smaller(self):
        es = WGS84Ellipsoid.es
        tau = math.tan(math.radians(45.0))
        assert taupf(tau, es) < tau


def test_signbit():
    assert signbit(-0.0)
    assert not signbit(0.0)
    assert signbit(-1e-300)
