"""
Coordinate Value Types and Conversions.

Three immutable views of one position on the WGS84 ellipsoid:
- LatLon: geodetic latitude/longitude in degrees
- UtmUps: zone, hemisphere, easting and northing (the pivot representation)
- Mgrs: truncated alphanumeric grid reference, precision 0..11

Conversions run LatLon <-> UtmUps <-> Mgrs; the zone selector decides which
projection engine applies.
"""

from coords.latlon import LatLon
from coords.utmups import Hemisphere, UtmUps
from coords.mgrs import MAX_PRECISION, Mgrs
from coords.zones import UPS, ZONE_EXCEPTIONS, latitude_band, standard_zone

__all__ = [
    "LatLon",
    "Hemisphere",
    "UtmUps",
    "Mgrs",
    "MAX_PRECISION",
    "UPS",
    "ZONE_EXCEPTIONS",
    "latitude_band",
    "standard_zone",
]
