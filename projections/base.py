"""
Projection Interface and Result Records.

Both grid projections used by the system (Transverse Mercator for UTM and
polar stereographic for UPS) are conformal. Besides the planar position
each engine reports the two local distortion descriptors of a conformal
map: the meridian convergence (angle between grid north and true north)
and the point scale.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProjectedPoint:
    """Planar result of a forward projection.

    Attributes
    ----------
    x : float
        Easting relative to the projection origin, meters.
    y : float
        Northing relative to the projection origin, meters.
    convergence : float
        Meridian convergence in degrees, clockwise from true north to
        grid north.
    scale : float
        Point scale factor (dimensionless).
    """
    x: float
    y: float
    convergence: float
    scale: float


@dataclass(frozen=True)
class GeodeticPoint:
    """Geodetic result of an inverse projection.

    Attributes
    ----------
    latitude : float
        Geodetic latitude in degrees.
    longitude : float
        Longitude in degrees, reduced to [-180, 180].
    convergence : float
        Meridian convergence in degrees.
    scale : float
        Point scale factor (dimensionless).
    """
    latitude: float
    longitude: float
    convergence: float
    scale: float


class ProjectionAdapter(ABC):
    """Abstract base class for the grid projection engines.

    The ``origin`` argument selects the aspect of the projection: the
    central meridian (degrees) for Transverse Mercator, the hemisphere
    (True for north) for polar stereographic. Engines carry no false
    easting or northing; grid offsets are applied by the zone selector.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the projection."""
        pass

    @property
    @abstractmethod
    def central_scale(self) -> float:
        """Scale factor on the central meridian or at the pole."""
        pass

    @abstractmethod
    def forward(self, origin: Any, lat: float, lon: float) -> ProjectedPoint:
        """Project geodetic coordinates (degrees) onto the plane.

        Parameters
        ----------
        origin : float or bool
            Projection aspect, see the class docstring.
        lat, lon : float
            Geodetic coordinates in degrees.

        Returns
        -------
        ProjectedPoint
            Planar coordinates in meters with convergence and scale.
        """
        pass

    @abstractmethod
    def reverse(self, origin: Any, x: float, y: float) -> GeodeticPoint:
        """Recover geodetic coordinates from planar ones.

        Parameters
        ----------
        origin : float or bool
            Projection aspect, see the class docstring.
        x, y : float
            Planar coordinates in meters.

        Returns
        -------
        GeodeticPoint
            Latitude and longitude in degrees with convergence and scale.
        """
        pass
