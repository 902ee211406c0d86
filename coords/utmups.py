"""
UTM/UPS Grid Coordinates.

`UtmUps` is the pivot representation of the system: every conversion
between geodetic coordinates and MGRS passes through it. An instance
always satisfies the domain limits of its zone and hemisphere.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np
import pint

from common.errors import InvalidHemisphere
from common.units import to_meters
from coords import zones
from coords.latlon import LatLon


class Hemisphere(Enum):
    """Hemisphere of a grid coordinate."""
    NORTH = "N"
    SOUTH = "S"

    @classmethod
    def coerce(cls, value: Any) -> 'Hemisphere':
        """Interpret N/S, north/south (any case) or a bool (True = north).

        Raises
        ------
        InvalidHemisphere
            For anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (bool, np.bool_)):
            return cls.NORTH if value else cls.SOUTH
        if isinstance(value, str):
            name = value.strip().upper()
            if name in ("N", "NORTH"):
                return cls.NORTH
            if name in ("S", "SOUTH"):
                return cls.SOUTH
        raise InvalidHemisphere(value)

    @property
    def northp(self) -> bool:
        return self is Hemisphere.NORTH


@dataclass(frozen=True)
class UtmUps:
    """A UTM or UPS grid coordinate.

    Attributes
    ----------
    zone : int
        UTM zone 1..60, or 0 for UPS.
    hemisphere : Hemisphere
        Accepts anything `Hemisphere.coerce` understands.
    easting : float
        Easting in METERS, false easting included.
    northing : float
        Northing in METERS, false northing included.

    Raises
    ------
    InvalidZone
        If zone is not an integer in [0, 60].
    InvalidHemisphere
        If hemisphere cannot be interpreted.
    OutOfProjectionDomain
        If easting or northing lies outside the zone's domain.

    Examples
    --------
    >>> str(UtmUps(18, "N", 585664.121, 4511315.422))
    '18n 585664.121 4511315.422'
    """
    zone: int
    hemisphere: Hemisphere
    easting: float
    northing: float

    def __post_init__(self):
        zone = zones.validate_zone(self.zone)
        hemisphere = Hemisphere.coerce(self.hemisphere)
        easting = to_meters(self.easting, "easting")
        northing = to_meters(self.northing, "northing")

        zones.check_coords(zone != zones.UPS, hemisphere.northp, easting, northing)

        object.__setattr__(self, "zone", zone)
        object.__setattr__(self, "hemisphere", hemisphere)
        object.__setattr__(self, "easting", easting)
        object.__setattr__(self, "northing", northing)

    @classmethod
    def create(
        cls,
        zone: int,
        hemisphere: Any,
        easting: Union[float, pint.Quantity],
        northing: Union[float, pint.Quantity]
    ) -> 'UtmUps':
        return cls(zone, hemisphere, easting, northing)

    @classmethod
    def from_latlon(cls, latlon: LatLon, zone: Optional[int] = None) -> 'UtmUps':
        """Project a geodetic position onto the grid.

        Parameters
        ----------
        latlon : LatLon
            Position to convert.
        zone : int, optional
            Zone override: 0 forces UPS, 1..60 forces a UTM zone.

        Returns
        -------
        UtmUps
            Grid coordinate in the standard zone, or in the requested one.

        Raises
        ------
        InvalidZone
            If the override is outside [0, 60].
        ZoneMismatch
            If the override cannot represent the point.
        """
        point = zones.forward(latlon.latitude, latlon.longitude, zone)
        return cls(
            point.zone,
            Hemisphere.NORTH if point.northp else Hemisphere.SOUTH,
            point.easting,
            point.northing,
        )

    def _reverse(self):
        return zones.reverse(self.zone, self.is_north, self.easting, self.northing)

    def to_latlon(self) -> LatLon:
        point = self._reverse()
        return LatLon(point.latitude, point.longitude)

    def to_mgrs(self, precision: int):
        """Encode as an MGRS reference of the given precision (0..11)."""
        from coords.mgrs import Mgrs
        return Mgrs.from_utmups(self, precision)

    @property
    def is_north(self) -> bool:
        return self.hemisphere.northp

    @property
    def is_ups(self) -> bool:
        return self.zone == zones.UPS

    @property
    def is_utm(self) -> bool:
        return not self.is_ups

    @property
    def central_meridian(self) -> Optional[float]:
        """Central meridian in degrees, None for UPS."""
        return zones.central_meridian(self.zone) if self.is_utm else None

    @property
    def grid_convergence(self) -> float:
        """Meridian convergence in degrees (grid north relative to true north)."""
        return self._reverse().convergence

    @property
    def point_scale(self) -> float:
        return self._reverse().scale

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zone": self.zone,
            "hemisphere": self.hemisphere.value,
            "easting": self.easting,
            "northing": self.northing,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'UtmUps':
        """Create from a mapping.

        The hemisphere may be given as ``hemisphere`` or as one of the
        boolean aliases ``north``, ``is_north`` and ``northp``.
        """
        for key in ("hemisphere", "north", "is_north", "northp"):
            if key in data:
                hemisphere = data[key]
                break
        else:
            raise KeyError("UtmUps mapping is missing 'hemisphere'")
        return cls(data["zone"], hemisphere, data["easting"], data["northing"])

    def __str__(self) -> str:
        return f"{self.zone}{'n' if self.is_north else 's'} {self.easting} {self.northing}"
