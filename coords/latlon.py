"""
Geodetic Coordinates.

`LatLon` is the entry point of every conversion: a validated, immutable
pair of geodetic latitude and longitude on the WGS84 ellipsoid.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import pint

from common.errors import OutOfRange
from common.units import to_degrees
from projections.geomath import HD, QD, ang_normalize, signbit


@dataclass(frozen=True)
class LatLon:
    """A geodetic position on the WGS84 ellipsoid.

    Attributes
    ----------
    latitude : float
        Geodetic latitude in DEGREES. Range: [-90, 90].
    longitude : float
        Longitude in DEGREES, stored normalized to (-180, 180].

    Notes
    -----
    - Latitude is positive north, negative south; ``-0.0`` counts as south.
    - Longitude is positive east, negative west. Any finite longitude is
      accepted and reduced by multiples of 360.
    - Pint angle quantities are accepted for either field.

    Examples
    --------
    >>> LatLon(40.748333, -73.985278).to_utmups().zone
    18
    >>> LatLon(10.0, -180.0).longitude
    180.0
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate and normalize."""
        lat = to_degrees(self.latitude, "latitude")
        lon = to_degrees(self.longitude, "longitude")

        if not (math.isfinite(lat) and -QD <= lat <= QD):
            raise OutOfRange("latitude", self.latitude, (-QD, QD))
        if not math.isfinite(lon):
            raise OutOfRange("longitude", self.longitude, (-math.inf, math.inf))

        lon = ang_normalize(lon)
        if lon == -HD:
            lon = float(HD)

        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    @classmethod
    def create(cls, latitude: float, longitude: float) -> 'LatLon':
        """Validate two numbers (degrees) into a LatLon.

        Raises
        ------
        OutOfRange
            If latitude is outside [-90, 90] or either value is not finite.
        """
        return cls(latitude, longitude)

    @classmethod
    def from_quantities(
        cls,
        latitude: Union[float, pint.Quantity],
        longitude: Union[float, pint.Quantity]
    ) -> 'LatLon':
        """Create from pint angle quantities (degrees, radians, arcminutes...)."""
        return cls(to_degrees(latitude, "latitude"), to_degrees(longitude, "longitude"))

    @property
    def is_north(self) -> bool:
        """True unless the sign bit of latitude is set."""
        return not signbit(self.latitude)

    def to_utmups(self, zone: Optional[int] = None):
        """Project onto the UTM/UPS grid.

        Parameters
        ----------
        zone : int, optional
            Zone override; 0 forces UPS. Defaults to the standard zone.

        Returns
        -------
        UtmUps
        """
        from coords.utmups import UtmUps
        return UtmUps.from_latlon(self, zone=zone)

    def to_mgrs(self, precision: int):
        """Encode as an MGRS reference of the given precision (0..11)."""
        from coords.mgrs import Mgrs
        return Mgrs.from_latlon(self, precision)

    @classmethod
    def from_utmups(cls, value) -> 'LatLon':
        return value.to_latlon()

    @classmethod
    def from_mgrs(cls, value) -> 'LatLon':
        """Decode an Mgrs value or MGRS text (south-west corner of its square)."""
        from coords.mgrs import Mgrs
        if isinstance(value, str):
            value = Mgrs.parse(value)
        return value.to_latlon()

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LatLon':
        """Create from a mapping with ``latitude``/``longitude`` (or ``lat``/``lon``)."""
        try:
            lat = data["latitude"] if "latitude" in data else data["lat"]
            lon = data["longitude"] if "longitude" in data else data["lon"]
        except KeyError as e:
            raise KeyError(f"LatLon mapping is missing {e.args[0]!r}") from e
        return cls(lat, lon)

    def __str__(self) -> str:
        return f"{self.latitude} {self.longitude}"
