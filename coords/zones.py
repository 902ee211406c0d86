"""
UTM/UPS Zone Selection and Grid Layout.

This module decides which projection a point belongs to and turns engine
output into grid coordinates:

- 60 UTM zones, each 6° wide, between 80°S and 84°N, with the Norway and
  Svalbard exceptions;
- 2 UPS zones (zone number 0) poleward of those limits;
- false eastings/northings and the legal coordinate ranges per
  (system, hemisphere).

All grid limits are multiples of the 100 km MGRS tile and are expressed
here in tile units so the MGRS codec shares exactly the same numbers.

References
----------
- NGA.SIG.0012_2.0.0_UTMUPS (2014): The Universal Grids and the
  Transverse Mercator and Polar Stereographic Map Projections.
"""

import math
from dataclasses import dataclass
from numbers import Integral
from typing import Optional, Tuple

from common.errors import InvalidZone, OutOfProjectionDomain, ZoneMismatch
from common.logging_config import get_logger
from projections.base import GeodeticPoint
from projections.geomath import HD, ang_diff, ang_normalize, signbit
from projections.polar_stereographic import PolarStereographic
from projections.transverse_mercator import TransverseMercator

logger = get_logger(__name__)

UPS = 0
MIN_ZONE = 0
MIN_UTM_ZONE = 1
MAX_UTM_ZONE = 60
MAX_ZONE = 60

# Grid layout in units of the 100 km tile
TILE = 100_000
MIN_UTM_COL = 1
MAX_UTM_COL = 9
MIN_UTM_S_ROW = 10
MAX_UTM_S_ROW = 100
MIN_UTM_N_ROW = 0
MAX_UTM_N_ROW = 95
MIN_UPS_S_IND = 8
MAX_UPS_S_IND = 32
MIN_UPS_N_IND = 13
MAX_UPS_N_IND = 27
UPS_EASTING = 20
UTM_EASTING = 5
UTM_N_SHIFT = (MAX_UTM_S_ROW - MIN_UTM_N_ROW) * TILE

# Indexed by grid_index(): UPS S, UPS N, UTM S, UTM N
FALSE_EASTING = (UPS_EASTING, UPS_EASTING, UTM_EASTING, UTM_EASTING)
FALSE_NORTHING = (UPS_EASTING, UPS_EASTING, MAX_UTM_S_ROW, MIN_UTM_N_ROW)
MIN_EASTING = (MIN_UPS_S_IND, MIN_UPS_N_IND, MIN_UTM_COL, MIN_UTM_COL)
MAX_EASTING = (MAX_UPS_S_IND, MAX_UPS_N_IND, MAX_UTM_COL, MAX_UTM_COL)
MIN_NORTHING = (
    MIN_UPS_S_IND,
    MIN_UPS_N_IND,
    MIN_UTM_S_ROW,
    MIN_UTM_S_ROW - MAX_UTM_S_ROW - MIN_UTM_N_ROW,
)
MAX_NORTHING = (
    MAX_UPS_S_IND,
    MAX_UPS_N_IND,
    MAX_UTM_N_ROW + MAX_UTM_S_ROW - MIN_UTM_N_ROW,
    MAX_UTM_N_ROW,
)

# UTM applies for latitudes in [-80, 84)
UTM_MIN_LATITUDE = -80
UTM_MAX_LATITUDE = 84

# Latitude bands C..X, 8° each (X is 12°), omitting I and O
LATITUDE_BANDS = "CDEFGHJKLMNPQRSTUVWX"


@dataclass(frozen=True)
class ZoneException:
    """A widened zone within one latitude band.

    Attributes
    ----------
    band : str
        Latitude band letter the rule applies to.
    lon_min, lon_max : int
        Half-open range [lon_min, lon_max) of integer-degree longitudes.
    zone : int
        Zone assigned inside that range.
    """
    band: str
    lon_min: int
    lon_max: int
    zone: int

    def matches(self, band_index: int, lon_int: int) -> bool:
        return (LATITUDE_BANDS[band_index + 10] == self.band
                and self.lon_min <= lon_int < self.lon_max)


# Checked in order before the regular 6° formula
ZONE_EXCEPTIONS = (
    # Norway: 32V extends west over 3°E-6°E
    ZoneException(band="V", lon_min=3, lon_max=6, zone=32),
    # Svalbard: 31X, 33X, 35X and 37X are widened to 9° or 12°
    ZoneException(band="X", lon_min=0, lon_max=9, zone=31),
    ZoneException(band="X", lon_min=9, lon_max=21, zone=33),
    ZoneException(band="X", lon_min=21, lon_max=33, zone=35),
    ZoneException(band="X", lon_min=33, lon_max=42, zone=37),
)


@dataclass(frozen=True)
class GridPoint:
    """A point placed on the UTM/UPS grid.

    Attributes
    ----------
    zone : int
        UTM zone 1..60, or 0 for UPS.
    northp : bool
        True for the northern hemisphere.
    easting, northing : float
        Grid coordinates in meters, false origin applied.
    convergence : float
        Meridian convergence in degrees.
    scale : float
        Point scale factor.
    """
    zone: int
    northp: bool
    easting: float
    northing: float
    convergence: float
    scale: float


def grid_index(utmp: bool, northp: bool) -> int:
    """Index into the per-(system, hemisphere) limit tables."""
    return (2 if utmp else 0) + (1 if northp else 0)


def validate_zone(zone) -> int:
    """Return zone as an int, or raise InvalidZone."""
    if isinstance(zone, bool) or not isinstance(zone, Integral):
        raise InvalidZone(zone)
    if not MIN_ZONE <= zone <= MAX_ZONE:
        raise InvalidZone(zone)
    return int(zone)


def central_meridian(zone: int) -> float:
    """Central meridian of a UTM zone in degrees."""
    return 6.0 * zone - 183.0


def latitude_band(lat: float) -> int:
    """Latitude band index in [-10, 9]; band letter is LATITUDE_BANDS[index + 10]."""
    ilat = math.floor(lat)
    return max(-10, min(9, int((ilat + 80) / 8) - 10))


def standard_zone(lat: float, lon: float) -> int:
    """Zone a point belongs to by the UTM/UPS rules.

    Parameters
    ----------
    lat, lon : float
        Geodetic coordinates in degrees.

    Returns
    -------
    int
        UTM zone 1..60, or 0 (UPS) outside [-80, 84).
    """
    if not UTM_MIN_LATITUDE <= lat < UTM_MAX_LATITUDE:
        return UPS

    lon_int = math.floor(ang_normalize(lon))
    if lon_int == HD:
        lon_int = -HD
    band = latitude_band(lat)
    for exception in ZONE_EXCEPTIONS:
        if exception.matches(band, lon_int):
            return exception.zone
    return (lon_int + 186) // 6


def domain_bounds(utmp: bool, northp: bool) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Legal (easting, northing) ranges in meters, including one tile of slop."""
    ind = grid_index(utmp, northp)
    slop = TILE
    return (
        (MIN_EASTING[ind] * TILE - slop, MAX_EASTING[ind] * TILE + slop),
        (MIN_NORTHING[ind] * TILE - slop, MAX_NORTHING[ind] * TILE + slop),
    )


def check_coords(utmp: bool, northp: bool, easting: float, northing: float) -> None:
    """Verify that grid coordinates lie in the domain of their zone.

    Raises
    ------
    OutOfProjectionDomain
        If easting or northing falls outside the allowed range.
    """
    system = "UTM" if utmp else "UPS"
    (emin, emax), (nmin, nmax) = domain_bounds(utmp, northp)
    if not emin <= easting <= emax:
        raise OutOfProjectionDomain("easting", easting, (emin, emax), system, northp)
    if not nmin <= northing <= nmax:
        raise OutOfProjectionDomain("northing", northing, (nmin, nmax), system, northp)


def forward(lat: float, lon: float, zone: Optional[int] = None) -> GridPoint:
    """Place a geodetic point on the UTM/UPS grid.

    Parameters
    ----------
    lat, lon : float
        Geodetic coordinates in degrees; latitude already validated.
    zone : int, optional
        Explicit zone override: 0 forces UPS, 1..60 a UTM zone.

    Returns
    -------
    GridPoint
        Zone, hemisphere and grid coordinates.

    Raises
    ------
    InvalidZone
        If the override is not an integer in [0, 60].
    ZoneMismatch
        If the override cannot represent the point.
    """
    northp = not signbit(lat)
    if zone is None:
        zone = standard_zone(lat, lon)
        override = False
    else:
        zone = validate_zone(zone)
        override = True
    utmp = zone != UPS

    if utmp:
        lon0 = central_meridian(zone)
        dlon = ang_diff(lon0, lon)
        if abs(dlon) > 60:
            raise ZoneMismatch(
                zone, lat, lon,
                f"longitude more than 60° from the central meridian {lon0:g}°"
            )
        projected = TransverseMercator.utm().forward(lon0, lat, lon)
    else:
        if abs(lat) < 70:
            raise ZoneMismatch(
                zone, lat, lon,
                f"latitude more than 20° from the {'N' if northp else 'S'} pole"
            )
        projected = PolarStereographic.ups().forward(northp, lat, lon)

    ind = grid_index(utmp, northp)
    easting = projected.x + FALSE_EASTING[ind] * TILE
    northing = projected.y + FALSE_NORTHING[ind] * TILE

    try:
        check_coords(utmp, northp, easting, northing)
    except OutOfProjectionDomain as e:
        if not override:
            raise
        raise ZoneMismatch(zone, lat, lon, str(e)) from e

    if override:
        logger.debug(
            f"Forced zone {zone} for ({lat}, {lon}): "
            f"scale={projected.scale:.6f}, convergence={projected.convergence:.4f}°"
        )

    return GridPoint(
        zone=zone,
        northp=northp,
        easting=easting,
        northing=northing,
        convergence=projected.convergence,
        scale=projected.scale,
    )


def reverse(zone: int, northp: bool, easting: float, northing: float) -> GeodeticPoint:
    """Recover geodetic coordinates from grid coordinates.

    Dispatches to polar stereographic for zone 0 and to Transverse Mercator
    with the zone's central meridian otherwise, after removing the false
    origin (10000 km for southern UTM northings).
    """
    utmp = zone != UPS
    ind = grid_index(utmp, northp)
    x = easting - FALSE_EASTING[ind] * TILE
    y = northing - FALSE_NORTHING[ind] * TILE
    if utmp:
        return TransverseMercator.utm().reverse(central_meridian(zone), x, y)
    return PolarStereographic.ups().reverse(northp, x, y)
