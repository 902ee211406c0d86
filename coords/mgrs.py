"""
Military Grid Reference System (MGRS) Codec.

An MGRS reference is a truncated view of a UTM/UPS coordinate:

    18T        grid zone designation (zone + latitude band; band only for UPS)
    WL         100 km square identification (column letter, row letter)
    8566411315 easting and northing digits, equal count, 0..11 each

Decoding is two-stage. The zone and band are resolved first; the band then
selects which cycle of the 20-letter row alphabet the row letter refers
to, which pins down the 100 km square. The digits finally locate the
south-west corner of the sub-square they describe.

Precision p gives a resolution of 100 km / 10**p, from 100 km (p = 0)
down to 1 micrometer (p = 11).

References
----------
- NGA.STND.0037_2.0.0_GRIDS (2014): Universal Grids and Grid Reference
  Systems.
- Karney, C.F.F. GeographicLib MGRS documentation (band and row tables).
"""

import math
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import pint

from common.errors import MalformedMgrs, OutOfProjectionDomain, PrecisionOutOfRange
from common.logging_config import get_logger
from common.units import meters
from coords import zones
from coords.latlon import LatLon
from coords.utmups import Hemisphere, UtmUps
from coords.zones import (
    LATITUDE_BANDS,
    MAX_EASTING,
    MAX_NORTHING,
    MAX_UTM_S_ROW,
    MIN_EASTING,
    MIN_NORTHING,
    MIN_UPS_N_IND,
    MIN_UPS_S_IND,
    MIN_UTM_COL,
    MIN_UTM_N_ROW,
    TILE,
    UPS,
    UPS_EASTING,
    UTM_N_SHIFT,
    grid_index,
)

logger = get_logger(__name__)

MIN_PRECISION = 0
MAX_PRECISION = 11
BASE = 10
# Digits are computed in micrometers
MULT = 1_000_000

UTM_ROW_PERIOD = 20
UTM_EVEN_ROW_SHIFT = 5

# Column letters cycle every 3 zones, row letters every 2
UTM_COLS = ("ABCDEFGH", "JKLMNPQR", "STUVWXYZ")
UTM_ROWS = "ABCDEFGHJKLMNPQRSTUV"

# UPS letters by band A, B (south) and Y, Z (north)
UPS_BANDS = "ABYZ"
UPS_COLS = ("JKLPQRSTUXYZ", "ABCFGHJKLPQR", "RSTUXYZ", "ABCFGHJ")
UPS_ROWS = ("ABCDEFGHJKLMNPQRSTUVWXYZ", "ABCDEFGHJKLMNP")

# Smallest latitude (degrees) distinguishable from the equator
_BAND_EPSILON = 2.0 ** -46
# Smallest step below 1e7 m, used to pull points off an open upper limit
_EDGE_EPSILON = 2.0 ** -28


def validate_precision(precision: Any) -> int:
    """Return precision as an int in [0, 11], or raise PrecisionOutOfRange."""
    if isinstance(precision, bool) or not isinstance(precision, Integral):
        raise PrecisionOutOfRange(precision)
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise PrecisionOutOfRange(precision)
    return int(precision)


def utm_row(band_idx: int, col_idx: int, row_idx: int) -> int:
    """Resolve a row letter index to an absolute UTM row.

    Parameters
    ----------
    band_idx : int
        Latitude band index in [-10, 9].
    col_idx : int
        Column index within the zone, 0..7.
    row_idx : int
        Row index modulo the 20-row period.

    Returns
    -------
    int
        Row (100 km multiple of northing, negative south of the equator),
        or MAX_UTM_S_ROW if no row with that letter lies in the band.

    Notes
    -----
    Rows are chosen as close as possible to the middle of the band. Two
    northings (7100 km and 8000 km) cut band boundaries inside a square;
    those squares are accepted in both bands.
    """
    c = 100 * (8 * band_idx + 4) / 90
    northp = band_idx >= 0
    min_row = math.floor(c - 4.3 - 0.1 * northp) if band_idx > -10 else -90
    max_row = math.floor(c + 4.4 - 0.1 * northp) if band_idx < 9 else 94
    # Truncating division, as for the row table this reproduces
    base_row = int((min_row + max_row) / 2) - UTM_ROW_PERIOD // 2
    row_idx = (row_idx - base_row + MAX_UTM_S_ROW) % UTM_ROW_PERIOD + base_row

    if not min_row <= row_idx <= max_row:
        safe_band = band_idx if band_idx >= 0 else -band_idx - 1
        safe_row = row_idx if row_idx >= 0 else -row_idx - 1
        safe_col = col_idx if col_idx < 4 else -col_idx + 7
        if not ((safe_row == 70 and safe_band == 8 and safe_col >= 2)
                or (safe_row == 71 and safe_band == 7 and safe_col <= 2)
                or (safe_row == 79 and safe_band == 9 and safe_col >= 1)
                or (safe_row == 80 and safe_band == 8 and safe_col <= 1)):
            row_idx = MAX_UTM_S_ROW

    return row_idx


def _mgrs_coords(utmp: bool, northp: bool, x: float, y: float) -> Tuple[bool, float, float]:
    """Apply the MGRS limits to grid coordinates.

    The limits are closed below and open above. A coordinate lying exactly
    on an upper limit is pulled inside, and UTM northings are folded into
    the hemisphere whose row numbering covers them.

    Returns
    -------
    tuple
        (northp, easting, northing) after adjustment.

    Raises
    ------
    OutOfProjectionDomain
        If a coordinate is outside the MGRS limits.
    """
    ind = grid_index(utmp, northp)
    system = "MGRS/UTM" if utmp else "MGRS/UPS"
    x_int = math.floor(x / TILE)
    y_int = math.floor(y / TILE)

    if not MIN_EASTING[ind] <= x_int < MAX_EASTING[ind]:
        if x == MAX_EASTING[ind] * TILE:
            x -= _EDGE_EPSILON
        else:
            raise OutOfProjectionDomain(
                "easting", x, (MIN_EASTING[ind] * TILE, MAX_EASTING[ind] * TILE), system, northp
            )

    if not MIN_NORTHING[ind] <= y_int < MAX_NORTHING[ind]:
        if y == MAX_NORTHING[ind] * TILE:
            y -= _EDGE_EPSILON
        else:
            raise OutOfProjectionDomain(
                "northing", y, (MIN_NORTHING[ind] * TILE, MAX_NORTHING[ind] * TILE), system, northp
            )

    if utmp:
        if northp and y_int < MIN_UTM_N_ROW:
            northp = False
            y += UTM_N_SHIFT
        elif not northp and y_int >= MAX_UTM_S_ROW:
            if y == MAX_UTM_S_ROW * TILE:
                # On the equator, keep the southern hemisphere
                y -= _EDGE_EPSILON
            else:
                northp = True
                y -= UTM_N_SHIFT

    return northp, x, y


def _micrometers(value: float) -> int:
    """Largest integer n with n / 10**6 <= value.

    Plain flooring of ``value * 10**6`` can land one below a value that
    came from decoding n micrometers; this keeps such values exact.
    """
    n = math.floor(value * MULT)
    while (n + 1) / MULT <= value:
        n += 1
    while n / MULT > value:
        n -= 1
    return n


def _band_latitude(zone: int, northp: bool, x: float, y: float) -> float:
    """Latitude good enough to pick the band of a UTM coordinate.

    A cheap estimate from the northing is used when it is unambiguous;
    otherwise the full inverse projection is run.
    """
    ys = (y if northp else y - UTM_N_SHIFT) / TILE
    if abs(ys) < 1:
        return 0.9 * ys

    lat_poleward = 0.901 * ys + (0.135 if ys > 0 else -0.135)
    lat_eastward = 0.902 * ys * (1 - 1.85e-6 * ys * ys)
    if zones.latitude_band(lat_poleward) == zones.latitude_band(lat_eastward):
        return lat_poleward

    logger.debug(f"Band estimate ambiguous for zone {zone} ({x}, {y}), using inverse projection")
    return zones.reverse(zone, northp, x, y).latitude


def _letter_index(letters: str, letter: str, what: str, label: str) -> int:
    idx = letters.find(letter) if len(letter) == 1 else -1
    if idx < 0:
        raise MalformedMgrs(f"{what} letter {letter!r} not in {label} set {letters}")
    return idx


@dataclass(frozen=True)
class Mgrs:
    """An MGRS grid reference.

    Attributes
    ----------
    zone : int
        UTM zone 1..60, or 0 for UPS.
    band : str
        Latitude band letter (C..X without I and O) for UTM; A, B, Y or Z
        for UPS.
    square : str
        The two 100 km square identification letters.
    easting_digits, northing_digits : str
        Zero-padded digits within the square, of equal length (precision).

    Notes
    -----
    Construction validates every component and decodes the reference, so
    an inconsistent value cannot exist. Decoding yields the south-west
    corner of the square described, never its center.

    Examples
    --------
    >>> m = Mgrs.parse("18twl8566411315")
    >>> str(m), m.precision
    ('18TWL8566411315', 5)
    >>> m.to_utmups().easting
    585664.0
    """
    zone: int
    band: str
    square: str
    easting_digits: str = ""
    northing_digits: str = ""
    _grid: Optional[UtmUps] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        zone = zones.validate_zone(self.zone)
        for name in ("band", "square", "easting_digits", "northing_digits"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.isascii():
                raise MalformedMgrs(f"{name} must be ASCII text, got {value!r}")
        band = self.band.upper()
        square = self.square.upper()
        easting_digits = self.easting_digits
        northing_digits = self.northing_digits

        utmp = zone != UPS
        if utmp:
            band_idx = _letter_index(LATITUDE_BANDS, band, "Band", "UTM")
            northp = band_idx >= 10
        else:
            band_idx = _letter_index(UPS_BANDS, band, "Band", "UPS")
            northp = band_idx >= 2

        if len(square) != 2:
            raise MalformedMgrs(f"100 km square must be two letters, got {square!r}")
        if utmp:
            col_idx = _letter_index(UTM_COLS[(zone - 1) % 3], square[0], "Column", "UTM")
            row_idx = _letter_index(UTM_ROWS, square[1], "Row", "UTM")
        else:
            col_idx = _letter_index(UPS_COLS[band_idx], square[0], "Column", "UPS")
            row_idx = _letter_index(
                UPS_ROWS[northp], square[1], "Row", f"UPS {'N' if northp else 'S'}"
            )

        if len(easting_digits) != len(northing_digits):
            raise MalformedMgrs(
                f"Easting and northing digit counts differ "
                f"({len(easting_digits)} != {len(northing_digits)})"
            )
        digits = easting_digits + northing_digits
        if digits and not digits.isdigit():
            raise MalformedMgrs(f"Encountered a non-digit in {digits}")
        if len(easting_digits) > MAX_PRECISION:
            raise MalformedMgrs(f"More than {2 * MAX_PRECISION} digits in {digits}")

        if utmp:
            if (zone - 1) % 2:
                row_idx = (row_idx + UTM_ROW_PERIOD - UTM_EVEN_ROW_SHIFT) % UTM_ROW_PERIOD
            row_idx = utm_row(band_idx - 10, col_idx, row_idx)
            if row_idx == MAX_UTM_S_ROW:
                raise MalformedMgrs(f"Block {square} not in zone/band {zone:02d}{band}")
            if not northp:
                row_idx += MAX_UTM_S_ROW
            col_idx += MIN_UTM_COL
        else:
            if band_idx % 2:
                col_idx += UPS_EASTING
            else:
                col_idx += MIN_UPS_N_IND if northp else MIN_UPS_S_IND
            row_idx += MIN_UPS_N_IND if northp else MIN_UPS_S_IND

        unit = BASE ** len(easting_digits)
        x = TILE * (col_idx * unit + int(easting_digits or 0)) / unit
        y = TILE * (row_idx * unit + int(northing_digits or 0)) / unit
        grid = UtmUps(zone, Hemisphere.NORTH if northp else Hemisphere.SOUTH, x, y)

        object.__setattr__(self, "zone", zone)
        object.__setattr__(self, "band", band)
        object.__setattr__(self, "square", square)
        object.__setattr__(self, "_grid", grid)

    @classmethod
    def parse(cls, text: str) -> 'Mgrs':
        """Parse MGRS text.

        Surrounding whitespace is ignored and letters may be in either
        case. Up to two zone digits are allowed; none means UPS.

        Parameters
        ----------
        text : str
            MGRS reference such as ``"18TWL8566411315"`` or ``"ZAH"``.

        Returns
        -------
        Mgrs

        Raises
        ------
        MalformedMgrs
            On any grammar, letter or digit violation. A bare grid zone
            designation (no square letters) is rejected.
        """
        if not isinstance(text, str):
            raise MalformedMgrs(f"expected text, got {type(text).__name__}")
        value = text.strip()
        if not value.isascii():
            raise MalformedMgrs("String contains non-ASCII characters", text)
        value = value.upper()
        if not value:
            raise MalformedMgrs("Empty string", text)
        if value.startswith("INV"):
            raise MalformedMgrs("Starts with 'INV'", text)

        p = 0
        while p < len(value) and value[p].isdigit():
            p += 1
        if p > 2:
            raise MalformedMgrs(f"More than 2 digits at start of MGRS {value[:p]}", text)
        zone = int(value[:p]) if p else UPS
        if p and not zones.MIN_UTM_ZONE <= zone <= zones.MAX_UTM_ZONE:
            raise MalformedMgrs(f"Zone {zone} not in [1,60]", text)

        rest = value[p:]
        if not rest:
            raise MalformedMgrs(f"Too short: {value}", text)
        if len(rest) == 1:
            raise MalformedMgrs(f"Grid zone designation {value} has no 100 km square", text)
        if len(rest) < 3 or not rest[1:3].isalpha():
            raise MalformedMgrs(f"Missing row letter in {value}", text)

        digits = rest[3:]
        if digits and not digits.isdigit():
            raise MalformedMgrs(f"Encountered a non-digit in {digits}", text)
        if len(digits) % 2:
            raise MalformedMgrs(f"Not an even number of digits in {digits}", text)
        half = len(digits) // 2
        return cls(zone, rest[0], rest[1:3], digits[:half], digits[half:])

    @classmethod
    def from_utmups(cls, grid: UtmUps, precision: int) -> 'Mgrs':
        """Encode a grid coordinate, truncating to the given precision.

        Parameters
        ----------
        grid : UtmUps
            Coordinate to encode.
        precision : int
            Digits per axis, 0..11.

        Returns
        -------
        Mgrs

        Raises
        ------
        PrecisionOutOfRange
            If precision is not an integer in [0, 11].
        OutOfProjectionDomain
            If the coordinate lies outside the MGRS limits of its zone
            (possible for values within the one-tile UTM/UPS margin).
        """
        precision = validate_precision(precision)
        utmp = grid.is_utm

        northp, x, y = _mgrs_coords(utmp, grid.is_north, grid.easting, grid.northing)
        d = BASE ** (MAX_PRECISION - precision)
        # South-west corner of the encoded square, in micrometers
        ix = _micrometers(x)
        iy = _micrometers(y)
        ix -= ix % d
        iy -= iy % d
        m = MULT * TILE
        xh = ix // m
        yh = iy // m

        if utmp:
            # The band belongs to the corner so that decoding and encoding
            # again at this or a lower precision gives the same letter
            lat = _band_latitude(grid.zone, northp, ix / MULT, iy / MULT)
            # Latitudes this close to the equator take the hemisphere's band
            if abs(lat) < _BAND_EPSILON:
                band_idx = 0 if northp else -1
            else:
                band_idx = zones.latitude_band(lat)
            col_idx = xh - MIN_UTM_COL
            row_idx = utm_row(band_idx, col_idx, yh % UTM_ROW_PERIOD)
            expected = yh - (MIN_UTM_N_ROW if northp else MAX_UTM_S_ROW)
            if row_idx != expected:
                raise OutOfProjectionDomain(
                    "northing", grid.northing,
                    (expected * TILE, (expected + 1) * TILE), "MGRS/UTM", northp
                )
            zone_m = grid.zone - 1
            band = LATITUDE_BANDS[band_idx + 10]
            square = (UTM_COLS[zone_m % 3][col_idx]
                      + UTM_ROWS[(yh + (UTM_EVEN_ROW_SHIFT if zone_m % 2 else 0)) % UTM_ROW_PERIOD])
        else:
            eastp = xh >= UPS_EASTING
            band_idx = (2 if northp else 0) + (1 if eastp else 0)
            min_ind = MIN_UPS_N_IND if northp else MIN_UPS_S_IND
            band = UPS_BANDS[band_idx]
            square = (UPS_COLS[band_idx][xh - (UPS_EASTING if eastp else min_ind)]
                      + UPS_ROWS[northp][yh - min_ind])

        easting_digits = str((ix - m * xh) // d).zfill(precision) if precision else ""
        northing_digits = str((iy - m * yh) // d).zfill(precision) if precision else ""
        return cls(grid.zone, band, square, easting_digits, northing_digits)

    @classmethod
    def from_latlon(cls, latlon: LatLon, precision: int) -> 'Mgrs':
        """Encode a geodetic position through its standard UTM/UPS zone."""
        precision = validate_precision(precision)
        return cls.from_utmups(UtmUps.from_latlon(latlon), precision)

    @classmethod
    def create(
        cls,
        zone: int,
        hemisphere: Any,
        easting: Union[float, pint.Quantity],
        northing: Union[float, pint.Quantity],
        precision: int
    ) -> 'Mgrs':
        """Encode grid coordinates given as separate values."""
        return cls.from_utmups(UtmUps(zone, hemisphere, easting, northing), precision)

    def to_utmups(self) -> UtmUps:
        """South-west corner of the square as a grid coordinate."""
        return self._grid

    def to_latlon(self) -> LatLon:
        return self._grid.to_latlon()

    def with_precision(self, precision: int) -> 'Mgrs':
        """Same reference at another precision.

        Lowering the precision truncates the digit strings (the result
        contains this square); raising it appends zeros (the result is the
        south-west sub-square of this one). The reference is encoded again
        from its south-west corner, so the band letter is the one
        ``from_utmups`` gives at the new precision.
        """
        return Mgrs.from_utmups(self._grid, precision)

    @property
    def precision(self) -> int:
        return len(self.easting_digits)

    @property
    def resolution(self) -> pint.Quantity:
        """Side of the square described, as a length."""
        return meters(TILE / BASE ** self.precision)

    @property
    def grid_zone_designation(self) -> str:
        return f"{self.zone:02d}{self.band}" if self.is_utm else self.band

    @property
    def is_utm(self) -> bool:
        return self.zone != UPS

    @property
    def is_north(self) -> bool:
        return self._grid.is_north

    @property
    def easting(self) -> float:
        return self._grid.easting

    @property
    def northing(self) -> float:
        return self._grid.northing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zone": self.zone,
            "band": self.band,
            "square": self.square,
            "easting_digits": self.easting_digits,
            "northing_digits": self.northing_digits,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Mgrs':
        """Create from components, or from a mapping holding ``mgrs`` text."""
        if "mgrs" in data:
            return cls.parse(data["mgrs"])
        return cls(
            data["zone"],
            data["band"],
            data["square"],
            data.get("easting_digits", ""),
            data.get("northing_digits", ""),
        )

    def __str__(self) -> str:
        return f"{self.grid_zone_designation}{self.square}{self.easting_digits}{self.northing_digits}"
