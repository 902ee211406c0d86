"""Tests for the MGRS codec."""

import dataclasses
import re

import numpy as np
import pytest
from pyproj import Geod

from common.errors import (
    InvalidZone,
    MalformedMgrs,
    OutOfProjectionDomain,
    PrecisionOutOfRange,
)
from coords.latlon import LatLon
from coords.mgrs import MAX_PRECISION, Mgrs, utm_row, validate_precision
from coords.utmups import UtmUps
from coords.zones import LATITUDE_BANDS, latitude_band

EMPIRE_STATE = LatLon(40.748333, -73.985278)
GEOD = Geod(ellps="WGS84")


def _distance(p, q):
    return GEOD.inv(p.longitude, p.latitude, q.longitude, q.latitude)[2]


class TestEncode:
    @pytest.mark.parametrize("precision, expected", [
        (0, "18TWL"),
        (1, "18TWL81"),
        (3, "18TWL856113"),
        (5, "18TWL8566411315"),
        (6, "18TWL856641113154"),
    ])
    def test_empire_state(self, precision, expected):
        assert str(EMPIRE_STATE.to_mgrs(precision)) == expected

    def test_digits_are_prefixes(self):
        full = EMPIRE_STATE.to_mgrs(MAX_PRECISION)
        for p in range(MAX_PRECISION):
            m = EMPIRE_STATE.to_mgrs(p)
            assert m.easting_digits == full.easting_digits[:p]
            assert m.northing_digits == full.northing_digits[:p]

    def test_poles(self):
        assert str(LatLon(90.0, 0.0).to_mgrs(5)) == "ZAH0000000000"
        assert str(LatLon(-90.0, 0.0).to_mgrs(5)) == "BAN0000000000"

    def test_polar_east_is_z(self):
        m = LatLon(85.0, 10.0).to_mgrs(5)
        assert m.zone == 0
        assert m.band == "Z"
        assert _distance(m.to_latlon(), LatLon(85.0, 10.0)) < 2.0

    def test_equator_takes_northern_band(self):
        assert str(LatLon(0.0, 3.0).to_mgrs(5)) == "31NEA0000000000"

    def test_negative_zero_takes_southern_band(self):
        assert str(LatLon(-0.0, 3.0).to_mgrs(5)) == "31MEV0000099999"

    def test_equator_from_south(self):
        grid = UtmUps(31, "S", 500_000.0, 10_000_000.0)
        assert str(grid.to_mgrs(5)) == "31MEV0000099999"

    def test_upper_easting_limit_pulled_inside(self):
        grid = UtmUps(18, "N", 900_000.0, 4_511_315.422)
        assert str(grid.to_mgrs(5)) == "18TZL9999911315"

    def test_margin_outside_mgrs_limits(self):
        grid = UtmUps(18, "N", 50_000.0, 4_000_000.0)
        with pytest.raises(OutOfProjectionDomain) as exc:
            grid.to_mgrs(5)
        assert exc.value.system == "MGRS/UTM"
        assert exc.value.field == "easting"

    def test_create(self):
        m = Mgrs.create(18, "N", 585664.121, 4511315.422, 5)
        assert str(m) == "18TWL8566411315"

    @pytest.mark.parametrize("precision", [-1, 12, 2.5, True, "5"])
    def test_bad_precision(self, precision):
        with pytest.raises(PrecisionOutOfRange):
            EMPIRE_STATE.to_mgrs(precision)

    def test_validate_precision(self):
        assert validate_precision(0) == 0
        assert validate_precision(11) == 11


class TestParse:
    def test_empire_state(self):
        m = Mgrs.parse("18TWL856641113154")
        assert m.zone == 18
        assert m.band == "T"
        assert m.square == "WL"
        assert m.precision == 6
        grid = m.to_utmups()
        assert grid.easting == pytest.approx(585664.1, abs=1e-9)
        assert grid.northing == pytest.approx(4511315.4, abs=1e-9)
        assert m.is_north and m.is_utm

    def test_lenient_text(self):
        assert str(Mgrs.parse("  18twl8566411315\n")) == "18TWL8566411315"

    def test_single_digit_zone(self):
        m = Mgrs.parse("4QFJ1234")
        assert m.zone == 4
        assert str(m) == "04QFJ1234"
        assert m.grid_zone_designation == "04Q"

    def test_ups(self):
        m = Mgrs.parse("ZAH")
        assert m.zone == 0
        assert m.precision == 0
        assert m.grid_zone_designation == "Z"
        assert m.to_utmups().easting == 2_000_000.0
        assert m.to_utmups().northing == 2_000_000.0

    def test_southern(self):
        m = Mgrs.parse("56HLH3417561254")
        assert not m.is_north
        assert 6_000_000.0 < m.northing < 7_000_000.0

    @pytest.mark.parametrize("text, reason", [
        ("", "Empty"),
        ("   ", "Empty"),
        ("INVALID", "INV"),
        ("123TWL", "More than 2 digits"),
        ("61TWL", "not in [1,60]"),
        ("0TWL", "not in [1,60]"),
        ("18", "Too short"),
        ("18T", "no 100 km square"),
        ("18TW", "Missing row letter"),
        ("18T1L00", "Missing row letter"),
        ("18TWL12A4", "non-digit"),
        ("4QFJ12345", "even number"),
        ("18IWL", "Band letter"),
        ("18TIL", "Column letter"),
        ("18TWI", "Row letter"),
        ("18TWA00", "not in zone/band"),
        ("18TWL" + "1" * 24, "More than 22 digits"),
        ("18TWL١٢", "non-ASCII"),
        ("CAA", "Band letter"),
    ])
    def test_malformed(self, text, reason):
        with pytest.raises(MalformedMgrs, match=re.escape(reason)):
            Mgrs.parse(text)

    def test_not_text(self):
        with pytest.raises(MalformedMgrs):
            Mgrs.parse(18)


class TestRoundTrip:
    @pytest.mark.parametrize("text", [
        "18TWL8566411315",
        "18TWL856641113154",
        "04QFJ1234",
        "31NEA0000000000",
        "31MEV0000099999",
        "ZAH0000000000",
        "BAN0000000000",
        "33XVG7400",
    ])
    def test_text_is_stable(self, text):
        m = Mgrs.parse(text)
        assert str(m) == text
        assert str(m.to_utmups().to_mgrs(m.precision)) == text

    @pytest.mark.parametrize("lat, lon", [
        (40.748333, -73.985278),
        (-33.8688, 151.2093),
        (0.0, 0.0),
        (60.5, 4.5),
        (78.5, 20.0),
        (84.5, -120.0),
        (-85.0, 45.0),
        (90.0, 0.0),
        (-90.0, 0.0),
        (10.0, 180.0),
    ])
    def test_full_precision(self, lat, lon):
        p = LatLon(lat, lon)
        assert _distance(p, p.to_mgrs(MAX_PRECISION).to_latlon()) < 1e-3

    def test_decode_is_south_west_corner(self):
        grid = EMPIRE_STATE.to_utmups()
        corner = EMPIRE_STATE.to_mgrs(3).to_utmups()
        assert corner.easting == 585_600.0
        assert corner.northing == 4_511_300.0
        assert 0 <= grid.easting - corner.easting < 100
        assert 0 <= grid.northing - corner.northing < 100


class TestValueType:
    def test_with_precision(self):
        m = Mgrs.parse("18TWL856641113154")
        assert str(m.with_precision(3)) == "18TWL856113"
        assert str(m.with_precision(8)) == "18TWL8566410011315400"
        assert m.with_precision(6) == m

    def test_resolution(self):
        assert Mgrs.parse("18TWL8566411315").resolution.to("m").magnitude == 1.0
        assert Mgrs.parse("18TWL").resolution.to("km").magnitude == 100.0

    def test_components(self):
        m = Mgrs(18, "t", "wl", "85664", "11315")
        assert str(m) == "18TWL8566411315"
        assert m == Mgrs.parse("18TWL8566411315")
        assert m.easting == 585_664.0

    def test_component_errors(self):
        with pytest.raises(MalformedMgrs, match="digit counts differ"):
            Mgrs(18, "T", "WL", "856", "11")
        with pytest.raises(MalformedMgrs, match="two letters"):
            Mgrs(18, "T", "W")
        with pytest.raises(InvalidZone):
            Mgrs(61, "T", "WL")

    def test_dict(self):
        m = Mgrs.parse("18TWL8566411315")
        assert Mgrs.from_dict(m.to_dict()) == m
        assert Mgrs.from_dict({"mgrs": "18TWL8566411315"}) == m

    def test_immutable(self):
        m = Mgrs.parse("ZAH")
        with pytest.raises(dataclasses.FrozenInstanceError):
            m.band = "Y"


class TestRowTable:
    def test_rows_near_middle_of_band(self):
        # Band T (index 5) covers rows 44..53
        assert utm_row(5, 4, 11) == 51
        assert utm_row(5, 4, 4) == 44

    def test_missing_row(self):
        assert utm_row(5, 4, 15) == 100


def _band_boundary_points(rng, count):
    # Band edges 72S..72N plus the X band start, approached from the north
    edges = np.arange(-72.0, 80.0, 8.0)
    lats = rng.choice(edges, count) + rng.uniform(0.0, 0.05, count)
    lons = rng.uniform(-180.0, 180.0, count)
    return [LatLon(float(lat), float(lon)) for lat, lon in zip(lats, lons)]


class TestBandConsistency:
    @pytest.mark.parametrize("lat, lon, bands", [
        # 56N is the U/V edge; zone 41 central meridian
        (56.001, 63.0, {0: "U", 2: "U", 3: "V", 5: "V"}),
        # 56S is the E/F edge; zone 19 central meridian
        (-55.999, -69.0, {0: "E", 1: "E", 2: "F", 5: "F"}),
    ])
    def test_band_follows_square_corner(self, lat, lon, bands):
        grid = LatLon(lat, lon).to_utmups()
        for precision, band in bands.items():
            m = grid.to_mgrs(precision)
            assert m.band == band, (precision, str(m))

    @pytest.mark.parametrize("lat, lon", [
        (56.001, 63.0),
        (56.001, 60.01),
        (-55.999, -69.0),
        (-55.999, -71.99),
        (72.02, 8.5),
        (8.0001, 3.0),
    ])
    def test_reencode_after_decode(self, lat, lon):
        grid = LatLon(lat, lon).to_utmups()
        for p in range(MAX_PRECISION + 1):
            decoded = Mgrs.parse(str(grid.to_mgrs(p)))
            for q in range(p + 1):
                expected = str(grid.to_mgrs(q))
                assert str(decoded.to_utmups().to_mgrs(q)) == expected
                assert str(decoded.with_precision(q)) == expected

    def test_reencode_random_points(self):
        rng = np.random.default_rng(20260419)
        count = 300
        points = [
            LatLon(float(lat), float(lon))
            for lat, lon in zip(rng.uniform(-79.9, 83.9, count), rng.uniform(-180.0, 180.0, count))
        ]
        points += _band_boundary_points(rng, count)
        for point in points:
            grid = point.to_utmups()
            p = int(rng.integers(0, MAX_PRECISION + 1))
            q = int(rng.integers(0, p + 1))
            text = str(grid.to_mgrs(p))
            decoded = Mgrs.parse(text)
            expected = str(grid.to_mgrs(q))
            assert str(decoded.to_utmups().to_mgrs(q)) == expected, (point, p, q, text)
            assert str(decoded.with_precision(q)) == expected, (point, p, q, text)

    def test_band_matches_corner_latitude(self):
        rng = np.random.default_rng(7)
        for point in _band_boundary_points(rng, 200):
            for precision in (0, 1, 2, 3):
                m = point.to_mgrs(precision)
                corner = m.to_latlon()
                assert m.band == LATITUDE_BANDS[latitude_band(corner.latitude) + 10], (point, str(m))

    def test_with_precision_canonicalizes_band(self):
        # The square starting at 7100 km is legal under bands V and W
        v = Mgrs.parse("32VLS")
        w = Mgrs.parse("32WLS")
        assert v.to_utmups() == w.to_utmups()
        assert str(v.with_precision(0)) == str(w.with_precision(0))
        assert str(v.with_precision(2)) == str(w.with_precision(2))

    @pytest.mark.parametrize("text, canonical", [
        ("41VLC", "41ULC"),
        ("44FLC69", "44ELC69"),
        ("16FCC4991", "16ECC4991"),
    ])
    def test_square_starting_in_southern_band(self, text, canonical):
        m = Mgrs.parse(text)
        assert str(m.to_utmups().to_mgrs(m.precision)) == canonical
        assert str(m.with_precision(m.precision)) == canonical
        assert str(Mgrs.parse(canonical).to_utmups().to_mgrs(m.precision)) == canonical
