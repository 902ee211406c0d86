"""
Polar Stereographic Projection.

The ellipsoidal polar stereographic projection used by the Universal Polar
Stereographic (UPS) grid, which replaces UTM north of 84°N and south of
80°S. The projection is conformal and centered on a pole with a fixed
scale factor there.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395, §21.
- Karney, C.F.F. (2011). Transverse Mercator with an accuracy of a few
  nanometers. Journal of Geodesy, 85(8), 475-485 (conformal latitude).
"""

import math
from functools import lru_cache

from common.constants import GeodeticConstants
from projections.base import GeodeticPoint, ProjectedPoint, ProjectionAdapter
from projections.ellipsoid import EllipsoidParameters, WGS84Ellipsoid
from projections.geomath import (
    EPSILON,
    QD,
    ang_normalize,
    atan2d,
    eatanhe,
    sincosd,
    tand,
    taupf,
    tauf,
)


class PolarStereographic(ProjectionAdapter):
    """Polar stereographic projection about either pole.

    Parameters
    ----------
    central_scale : float
        Scale factor at the pole (default: 0.994 for UPS).
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Notes
    -----
    ``origin`` is True for the north polar aspect. In the north aspect
    grid north points along the 180° meridian; in the south aspect along
    the 0° meridian.
    """

    def __init__(
        self,
        central_scale: float = GeodeticConstants.UPS_CENTRAL_SCALE.value,
        ellipsoid: EllipsoidParameters = WGS84Ellipsoid
    ):
        self._k0 = central_scale
        self._ellipsoid = ellipsoid
        self._a = ellipsoid.a
        self._es = ellipsoid.es
        self._e2 = ellipsoid.e2
        self._e2m = ellipsoid.e2m
        self._c = (1 - ellipsoid.f) * math.exp(eatanhe(1.0, self._es))

    @classmethod
    @lru_cache(maxsize=None)
    def ups(cls) -> 'PolarStereographic':
        """The shared UPS instance (WGS84, k0 = 0.994)."""
        return cls()

    @property
    def name(self) -> str:
        return f"Polar Stereographic (k0={self._k0}, {self._ellipsoid.name})"

    @property
    def central_scale(self) -> float:
        return self._k0

    def forward(self, northp: bool, lat: float, lon: float) -> ProjectedPoint:
        lat = lat if northp else -lat
        tau = tand(lat)
        secphi = math.hypot(1.0, tau)
        taup = taupf(tau, self._es)
        rho = math.hypot(1.0, taup) + abs(taup)
        if taup >= 0:
            rho = 1 / rho if lat != QD else 0.0
        rho *= 2 * self._k0 * self._a / self._c

        if lat != QD:
            k = (rho / self._a) * secphi * math.sqrt(self._e2m + self._e2 / (secphi * secphi))
        else:
            k = self._k0

        x, y = sincosd(lon)
        x *= rho
        y *= -rho if northp else rho
        gamma = ang_normalize(lon if northp else -lon)

        return ProjectedPoint(x=x, y=y, convergence=gamma, scale=k)

    def reverse(self, northp: bool, x: float, y: float) -> GeodeticPoint:
        rho = math.hypot(x, y)
        t = rho / (2 * self._k0 * self._a / self._c) if rho != 0 else EPSILON * EPSILON
        taup = (1 / t - t) / 2
        tau = tauf(taup, self._es)
        secphi = math.hypot(1.0, tau)

        if rho != 0:
            k = (rho / self._a) * secphi * math.sqrt(self._e2m + self._e2 / (secphi * secphi))
        else:
            k = self._k0

        lat = math.degrees(math.atan(tau))
        if not northp:
            lat = -lat
        lon = atan2d(x, -y if northp else y)
        gamma = ang_normalize(lon if northp else -lon)

        return GeodeticPoint(latitude=lat, longitude=lon, convergence=gamma, scale=k)
