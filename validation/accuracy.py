"""
Conversion Accuracy Checks.

This module verifies that conversions reproduce positions to within a
tolerance (1 mm by default), measured as geodesic distance on WGS84.

Test Categories
---------------
1. Round trips (LatLon -> UtmUps -> LatLon, UtmUps -> Mgrs -> UtmUps)
2. Text stability (MGRS parse then render gives the same text)
3. Independent reference (PROJ utm/ups through pyproj)
4. Zone-boundary continuity (a shared zone override across a boundary)

References
----------
- Karney, C.F.F. (2013). Algorithms for geodesics. Journal of Geodesy,
  87(1), 43-55 (the geodesic solver behind pyproj.Geod).
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Geod, Transformer

from common.logging_config import get_logger
from coords.latlon import LatLon
from coords.mgrs import MAX_PRECISION, Mgrs
from coords.utmups import UtmUps
from coords.zones import UPS

logger = get_logger(__name__)

# Create the geodesic calculator for WGS84
_wgs84_geod = Geod(ellps='WGS84')

DEFAULT_TOLERANCE_M = 1e-3


class AccuracyError(RuntimeError):
    """Raised by a strict checker when a check fails."""


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the test.
    passed : bool
        Whether the test passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


@dataclass
class ErrorStatistics:
    """Summary of a set of position errors.

    Attributes
    ----------
    count : int
        Number of samples.
    mean_m : float
        Mean error in meters.
    max_m : float
        Maximum error in meters.
    num_above_tolerance : int
        Samples whose error exceeds the tolerance.
    """
    count: int
    mean_m: float
    max_m: float
    num_above_tolerance: int

    @classmethod
    def from_errors(cls, errors: NDArray[np.float64], tolerance_m: float) -> 'ErrorStatistics':
        errors = np.asarray(errors, dtype=np.float64)
        if errors.size == 0:
            return cls(count=0, mean_m=0.0, max_m=0.0, num_above_tolerance=0)
        return cls(
            count=int(errors.size),
            mean_m=float(np.mean(errors)),
            max_m=float(np.max(errors)),
            num_above_tolerance=int(np.sum(errors > tolerance_m)),
        )


def geodesic_distance(p: LatLon, q: LatLon) -> float:
    """Geodesic distance between two positions in meters."""
    _, _, distance_m = _wgs84_geod.inv(p.longitude, p.latitude, q.longitude, q.latitude)
    return float(distance_m)


def geodesic_distance_batch(
    lat1: NDArray[np.float64],
    lon1: NDArray[np.float64],
    lat2: NDArray[np.float64],
    lon2: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Geodesic distances for arrays of point pairs (degrees in, meters out)."""
    _, _, distances = _wgs84_geod.inv(lon1, lat1, lon2, lat2)
    return np.asarray(distances, dtype=np.float64)


@lru_cache(maxsize=None)
def _transformers(zone: int, northp: bool) -> Tuple[Transformer, Transformer]:
    if zone == UPS:
        proj = "+proj=ups +ellps=WGS84 +units=m +no_defs"
    else:
        proj = f"+proj=utm +zone={zone} +ellps=WGS84 +units=m +no_defs"
    if not northp:
        proj = proj.replace("+ellps", "+south +ellps")
    crs_geo = CRS.from_epsg(4326)  # WGS84
    crs_proj = CRS.from_proj4(proj)
    return (
        Transformer.from_crs(crs_geo, crs_proj, always_xy=True),
        Transformer.from_crs(crs_proj, crs_geo, always_xy=True),
    )


class ReferenceProjector:
    """UTM/UPS conversions computed by PROJ, used as an independent reference.

    PROJ's ``utm`` uses its own extended Transverse Mercator
    implementation, so agreement with it checks the Krüger series here
    against separately written code.
    """

    def forward(self, latlon: LatLon, zone: int, northp: bool) -> Tuple[float, float]:
        """Easting and northing (meters) of a position in the given zone."""
        to_proj, _ = _transformers(zone, northp)
        x, y = to_proj.transform(latlon.longitude, latlon.latitude)
        return float(x), float(y)

    def reverse(self, grid: UtmUps) -> LatLon:
        _, to_geo = _transformers(grid.zone, grid.is_north)
        lon, lat = to_geo.transform(grid.easting, grid.northing)
        return LatLon(float(lat), float(lon))


class AccuracyChecker:
    """Checker for conversion accuracy.

    Parameters
    ----------
    tolerance_m : float
        Largest acceptable position error in meters.
    strict_mode : bool
        If True, raise AccuracyError on a failed check.
    log_violations : bool
        Whether to log failed checks.
    """

    def __init__(
        self,
        tolerance_m: float = DEFAULT_TOLERANCE_M,
        strict_mode: bool = False,
        log_violations: bool = True
    ):
        self.tolerance_m = tolerance_m
        self.strict_mode = strict_mode
        self.log_violations = log_violations
        self.reference = ReferenceProjector()
        self._logger = get_logger("AccuracyChecker")

    def _finish(self, test_name: str, errors: Sequence[float], what: str) -> ValidationResult:
        stats = ErrorStatistics.from_errors(np.asarray(errors, dtype=np.float64), self.tolerance_m)
        passed = stats.num_above_tolerance == 0
        result = ValidationResult(
            test_name=test_name,
            passed=passed,
            message=(
                f"{what}: {stats.num_above_tolerance} of {stats.count} errors above "
                f"{self.tolerance_m * 1000:g} mm (max {stats.max_m * 1000:.6f} mm)"
            ),
            details={
                'count': stats.count,
                'mean_error_m': stats.mean_m,
                'max_error_m': stats.max_m,
                'num_violations': stats.num_above_tolerance,
                'tolerance_m': self.tolerance_m,
            },
        )
        return self._report(result)

    def _report(self, result: ValidationResult) -> ValidationResult:
        if not result.passed:
            if self.log_violations:
                self._logger.warning(result.message)
            if self.strict_mode:
                raise AccuracyError(result.message)
        return result

    def check_all(self, points: Iterable[LatLon]) -> List[ValidationResult]:
        """Run the round-trip and reference checks on a set of positions.

        Parameters
        ----------
        points : iterable of LatLon
            Positions to test.

        Returns
        -------
        List[ValidationResult]
            Results of all checks.
        """
        points = list(points)
        grids = [p.to_utmups() for p in points]
        return [
            self.check_latlon_round_trip(points),
            self.check_mgrs_round_trip(grids),
            self.check_mgrs_text(str(g.to_mgrs(p)) for g in grids for p in (0, 5, MAX_PRECISION)),
            self.check_reference_forward(points),
            self.check_reference_reverse(grids),
        ]

    def check_latlon_round_trip(self, points: Iterable[LatLon]) -> ValidationResult:
        """LatLon -> UtmUps -> LatLon reproduces the position."""
        errors = [geodesic_distance(p, p.to_utmups().to_latlon()) for p in points]
        return self._finish("latlon_round_trip", errors, "LatLon round trip")

    def check_mgrs_round_trip(
        self,
        grids: Iterable[UtmUps],
        precision: int = MAX_PRECISION
    ) -> ValidationResult:
        """UtmUps -> Mgrs -> UtmUps stays within the square of the precision.

        The planar error is reduced by the side of the square, so only
        the excess over the truncation counts against the tolerance.
        """
        side = 1e5 / 10 ** precision
        errors = []
        for grid in grids:
            back = grid.to_mgrs(precision).to_utmups()
            de = grid.easting - back.easting
            dn = grid.northing - back.northing
            if back.is_north != grid.is_north:
                # Folded across the equator, compare in the input hemisphere
                dn = grid.northing - (back.northing + (-1e7 if grid.is_north else 1e7))
            errors.append(max(0.0, math.hypot(de, dn) - side * math.sqrt(2)))
        return self._finish("mgrs_round_trip", errors, f"MGRS round trip at precision {precision}")

    def check_mgrs_text(self, texts: Iterable[str]) -> ValidationResult:
        """Parsing then rendering MGRS text gives it back unchanged."""
        texts = list(texts)
        mismatches = [t for t in texts if str(Mgrs.parse(t)) != t]
        result = ValidationResult(
            test_name="mgrs_text",
            passed=not mismatches,
            message=f"MGRS text round trip: {len(mismatches)} of {len(texts)} changed",
            details={'count': len(texts), 'mismatches': mismatches[:10]},
        )
        return self._report(result)

    def check_reference_forward(self, points: Iterable[LatLon]) -> ValidationResult:
        """Forward projection agrees with PROJ in the same zone."""
        errors = []
        for p in points:
            grid = p.to_utmups()
            x, y = self.reference.forward(p, grid.zone, grid.is_north)
            errors.append(math.hypot(grid.easting - x, grid.northing - y))
        return self._finish("reference_forward", errors, "Forward projection vs PROJ")

    def check_reference_reverse(self, grids: Iterable[UtmUps]) -> ValidationResult:
        """Inverse projection agrees with PROJ."""
        errors = [geodesic_distance(g.to_latlon(), self.reference.reverse(g)) for g in grids]
        return self._finish("reference_reverse", errors, "Inverse projection vs PROJ")

    def check_zone_boundary_continuity(
        self,
        latitude: float,
        boundary_longitude: float,
        zone: int,
        offset_deg: float = 1e-4
    ) -> ValidationResult:
        """Two points straddling a zone boundary, placed in one shared zone.

        The planar separation divided by the mean point scale must match
        the geodesic separation.

        Parameters
        ----------
        latitude : float
            Latitude of both points in degrees.
        boundary_longitude : float
            Longitude of the zone boundary in degrees.
        zone : int
            Zone override applied to both points.
        offset_deg : float
            Each point lies this far from the boundary.
        """
        west = LatLon(latitude, boundary_longitude - offset_deg)
        east = LatLon(latitude, boundary_longitude + offset_deg)
        gw = west.to_utmups(zone=zone)
        ge = east.to_utmups(zone=zone)
        planar = math.hypot(ge.easting - gw.easting, ge.northing - gw.northing)
        scale = (gw.point_scale + ge.point_scale) / 2
        error = abs(planar / scale - geodesic_distance(west, east))
        return self._finish("zone_boundary_continuity", [error], f"Zone {zone} boundary continuity")
