"""
Reference Ellipsoid Model.

This module defines the ellipsoid every projection in the system is built
on. The parameters are fixed to WGS84; derived quantities are exposed as
properties so the projection engines never recompute them inconsistently.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: WGS84 reference ellipsoid (not spherical approximation)

References
----------
- NIMA TR8350.2: WGS84 parameters
- Karney, C.F.F. (2011). Transverse Mercator with an accuracy of a few
  nanometers. Journal of Geodesy, 85(8), 475-485.
"""

from dataclasses import dataclass

import numpy as np

from common.constants import GeodeticConstants


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    f : float
        Flattening: f = (a - b) / a
    name : str
        Identifier for the ellipsoid.

    Derived Parameters
    ------------------
    e2 : float
        First eccentricity squared: e² = f(2 - f)
    es : float
        Eccentricity, carrying the sign of the flattening.
    e2m : float
        1 - e²
    n : float
        Third flattening: n = f / (2 - f)
    """
    a: float
    f: float
    name: str

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)

    @property
    def es(self) -> float:
        """Signed eccentricity (negative for prolate ellipsoids)."""
        return float(np.copysign(np.sqrt(np.abs(self.e2)), self.f))

    @property
    def e2m(self) -> float:
        """One minus the first eccentricity squared."""
        return 1 - self.e2

    @property
    def n(self) -> float:
        """Third flattening."""
        return self.f / (2 - self.f)


# WGS84 ellipsoid - the only reference used by this system
WGS84Ellipsoid = EllipsoidParameters(
    a=GeodeticConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=GeodeticConstants.EARTH_FLATTENING.value,
    name="WGS84"
)
