"""
Projection Engines for Grid Reference Conversion.

This package provides the numerical core of the system:
- The WGS84 ellipsoid model and its derived parameters
- Angle and conformal-latitude helpers
- Transverse Mercator (Krüger series) for UTM zones
- Polar stereographic for UPS zones

The engines are stateless after construction; shared instances are
obtained with `TransverseMercator.utm()` and `PolarStereographic.ups()`.
"""

from projections.ellipsoid import EllipsoidParameters, WGS84Ellipsoid
from projections.base import GeodeticPoint, ProjectedPoint, ProjectionAdapter
from projections.transverse_mercator import KrugerSeries, TransverseMercator
from projections.polar_stereographic import PolarStereographic

__all__ = [
    "EllipsoidParameters",
    "WGS84Ellipsoid",
    "GeodeticPoint",
    "ProjectedPoint",
    "ProjectionAdapter",
    "KrugerSeries",
    "TransverseMercator",
    "PolarStereographic",
]
