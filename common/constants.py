"""
Geodetic Constants for Grid Reference Conversion.

This module provides the fixed parameters of the reference ellipsoid and
the grid systems built on it. All constants are defined in SI units and
traceable to authoritative sources.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- UTM/UPS grid parameters: NGA.SIG.0012_2.0.0_UTMUPS, 2014
- MGRS: NGA.STND.0037_2.0.0_GRIDS, 2014
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A geodetic constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used throughout the system.

    All constants are class attributes with full metadata including
    uncertainty bounds and authoritative sources.

    Earth Geometry (WGS84)
    ----------------------
    These constants define the reference ellipsoid used for every
    projection. The ellipsoid is fixed; there is no runtime option to
    select another one.

    Grid Scale Factors
    ------------------
    Central scale factors of the Transverse Mercator (UTM) and polar
    stereographic (UPS) projections.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    # =========================================================================
    # Grid Scale Factors
    # Reference: NGA.SIG.0012_2.0.0_UTMUPS
    # =========================================================================

    UTM_CENTRAL_SCALE: Final[Constant] = Constant(
        value=9996.0 / 10_000.0,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="NGA.SIG.0012_2.0.0_UTMUPS",
        description="Scale factor on the central meridian of a UTM zone"
    )

    UPS_CENTRAL_SCALE: Final[Constant] = Constant(
        value=994.0 / 1000.0,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="NGA.SIG.0012_2.0.0_UTMUPS",
        description="Scale factor at the pole of a UPS projection"
    )

    # =========================================================================
    # Angular Units
    # =========================================================================

    QUARTER_TURN_DEG: Final[int] = 90
    HALF_TURN_DEG: Final[int] = 180
    FULL_TURN_DEG: Final[int] = 360
