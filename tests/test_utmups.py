"""Tests for UtmUps construction, validation and conversion."""

import dataclasses
import math

import numpy as np
import pytest
from pyproj import Transformer

from common.errors import (
    InvalidHemisphere,
    InvalidZone,
    OutOfProjectionDomain,
    ZoneMismatch,
)
from common.units import Q_
from coords.latlon import LatLon
from coords.utmups import Hemisphere, UtmUps

EMPIRE_STATE = LatLon(40.748333, -73.985278)


@pytest.fixture
def empire_grid():
    return EMPIRE_STATE.to_utmups()


class TestHemisphere:
    @pytest.mark.parametrize("value, expected", [
        ("N", Hemisphere.NORTH),
        ("s", Hemisphere.SOUTH),
        (" north ", Hemisphere.NORTH),
        ("South", Hemisphere.SOUTH),
        (True, Hemisphere.NORTH),
        (False, Hemisphere.SOUTH),
        (np.bool_(True), Hemisphere.NORTH),
        (Hemisphere.SOUTH, Hemisphere.SOUTH),
    ])
    def test_coerce(self, value, expected):
        assert Hemisphere.coerce(value) is expected

    @pytest.mark.parametrize("value", ["E", "", 1, None, "NS"])
    def test_rejects(self, value):
        with pytest.raises(InvalidHemisphere):
            Hemisphere.coerce(value)


class TestForward:
    def test_empire_state(self, empire_grid):
        assert empire_grid.zone == 18
        assert empire_grid.hemisphere is Hemisphere.NORTH
        assert empire_grid.easting == pytest.approx(585664.121, abs=1e-3)
        assert empire_grid.northing == pytest.approx(4511315.422, abs=1e-3)

    def test_matches_proj_in_southern_zone(self):
        p = LatLon(-33.8688, 151.2093)
        grid = UtmUps.from_latlon(p)
        assert grid.zone == 56
        assert not grid.is_north
        x, y = Transformer.from_crs("EPSG:4326", "EPSG:32756", always_xy=True).transform(
            p.longitude, p.latitude
        )
        assert math.hypot(grid.easting - x, grid.northing - y) < 1e-3

    def test_matches_proj_in_ups(self):
        p = LatLon(86.0, -45.0)
        grid = p.to_utmups()
        assert grid.is_ups
        x, y = Transformer.from_crs("EPSG:4326", "EPSG:32661", always_xy=True).transform(
            p.longitude, p.latitude
        )
        assert math.hypot(grid.easting - x, grid.northing - y) < 1e-3

    def test_zone_override(self):
        grid = EMPIRE_STATE.to_utmups(zone=19)
        assert grid.zone == 19
        assert grid.easting < 500_000
        back = grid.to_latlon()
        assert back.latitude == pytest.approx(EMPIRE_STATE.latitude, abs=1e-9)
        assert back.longitude == pytest.approx(EMPIRE_STATE.longitude, abs=1e-9)

    def test_zone_override_mismatch(self):
        with pytest.raises(ZoneMismatch):
            EMPIRE_STATE.to_utmups(zone=30)
        with pytest.raises(ZoneMismatch):
            EMPIRE_STATE.to_utmups(zone=0)

    def test_poles(self):
        north = LatLon(90.0, 0.0).to_utmups()
        south = LatLon(-90.0, 0.0).to_utmups()
        assert (north.zone, north.easting, north.northing) == (0, 2_000_000.0, 2_000_000.0)
        assert (south.zone, south.easting, south.northing) == (0, 2_000_000.0, 2_000_000.0)
        assert north.is_north and not south.is_north


class TestValidation:
    @pytest.mark.parametrize("zone", [-1, 61, 2.5, True, "18"])
    def test_invalid_zone(self, zone):
        with pytest.raises(InvalidZone):
            UtmUps(zone, "N", 500_000.0, 4_000_000.0)

    def test_invalid_hemisphere(self):
        with pytest.raises(InvalidHemisphere):
            UtmUps(18, "X", 500_000.0, 4_000_000.0)

    @pytest.mark.parametrize("zone, hemi, easting, northing, field", [
        (18, "N", -1.0, 4_000_000.0, "easting"),
        (18, "N", 1_000_001.0, 4_000_000.0, "easting"),
        (18, "N", 500_000.0, 9_600_001.0, "northing"),
        (18, "S", 500_000.0, 899_999.0, "northing"),
        (0, "N", 1_199_999.0, 2_000_000.0, "easting"),
        (0, "S", 2_000_000.0, 3_300_001.0, "northing"),
    ])
    def test_out_of_domain(self, zone, hemi, easting, northing, field):
        with pytest.raises(OutOfProjectionDomain) as exc:
            UtmUps(zone, hemi, easting, northing)
        assert exc.value.field == field

    def test_margin_is_accepted(self):
        UtmUps(18, "N", 0.0, 0.0)
        UtmUps(18, "S", 1_000_000.0, 10_000_000.0)
        with pytest.raises(OutOfProjectionDomain):
            UtmUps(18, "S", 1_000_001.0, 10_000_000.0)

    def test_quantities(self):
        grid = UtmUps(18, "N", Q_(585.664121, "km"), Q_(4511.315422, "km"))
        assert grid.easting == pytest.approx(585664.121)
        with pytest.raises(ValueError):
            UtmUps(18, "N", Q_(1, "degree"), 4_000_000.0)

    def test_immutable(self, empire_grid):
        with pytest.raises(dataclasses.FrozenInstanceError):
            empire_grid.zone = 19


class TestProperties:
    def test_utm(self, empire_grid):
        assert empire_grid.is_utm
        assert not empire_grid.is_ups
        assert empire_grid.central_meridian == -75.0
        assert empire_grid.grid_convergence == pytest.approx(
            1.014722 * math.sin(math.radians(40.748333)), abs=1e-3
        )
        assert 0.9996 < empire_grid.point_scale < 0.9998

    def test_ups(self):
        grid = UtmUps(0, "S", 2_000_000.0, 2_000_000.0)
        assert grid.central_meridian is None
        assert grid.point_scale == pytest.approx(0.994)


class TestSerialization:
    def test_str(self):
        assert str(UtmUps(18, "N", 585664.121, 4511315.422)) == "18n 585664.121 4511315.422"
        assert str(UtmUps(0, "S", 2_000_000.0, 2_000_000.0)) == "0s 2000000.0 2000000.0"

    def test_dict_round_trip(self, empire_grid):
        data = empire_grid.to_dict()
        assert data["hemisphere"] == "N"
        assert UtmUps.from_dict(data) == empire_grid

    @pytest.mark.parametrize("key", ["north", "is_north", "northp"])
    def test_dict_boolean_aliases(self, key):
        grid = UtmUps.from_dict({"zone": 56, key: False, "easting": 334_000.0, "northing": 6_252_000.0})
        assert grid.hemisphere is Hemisphere.SOUTH

    def test_dict_missing_hemisphere(self):
        with pytest.raises(KeyError):
            UtmUps.from_dict({"zone": 18, "easting": 500_000.0, "northing": 0.0})
