"""
Error Types for Grid Reference Conversion.

Every failure a conversion can produce is one of the exceptions below.
They all derive from `GridReferenceError`, which is itself a `ValueError`,
so callers can catch a single type. Each error carries the name of the
offending field and its value so messages are actionable.

Conversions are deterministic: the same input always fails the same way
and no operation retries internally.
"""

from typing import Any, Optional, Tuple


class GridReferenceError(ValueError):
    """Base class for all conversion errors.

    Attributes
    ----------
    field : str
        Name of the offending input field.
    value : Any
        The offending value.
    """

    def __init__(self, message: str, field: str = "", value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class OutOfRange(GridReferenceError):
    """A geodetic coordinate lies outside its valid range."""

    def __init__(self, field: str, value: Any, bounds: Tuple[float, float]):
        self.bounds = bounds
        super().__init__(
            f"{field.capitalize()} {value} outside of valid range "
            f"[{bounds[0]:g}, {bounds[1]:g}]",
            field=field,
            value=value,
        )


class InvalidZone(GridReferenceError):
    """A zone number outside [0, 60] (0 designates UPS)."""

    def __init__(self, value: Any):
        super().__init__(
            f"Zone {value!r} not in range [0, 60]",
            field="zone",
            value=value,
        )


class InvalidHemisphere(GridReferenceError):
    """A hemisphere that is neither north nor south."""

    def __init__(self, value: Any):
        super().__init__(
            f"Hemisphere {value!r} is not one of N/S",
            field="hemisphere",
            value=value,
        )


class OutOfProjectionDomain(GridReferenceError):
    """Easting or northing outside the legal range of its zone/hemisphere.

    Attributes
    ----------
    bounds : tuple of float
        The allowed (min, max) range in meters.
    system : str
        "UTM", "UPS", "MGRS/UTM" or "MGRS/UPS".
    """

    def __init__(
        self,
        field: str,
        value: float,
        bounds: Tuple[float, float],
        system: str,
        northp: bool
    ):
        self.bounds = bounds
        self.system = system
        super().__init__(
            f"{field.capitalize()} {value / 1000.0:.2f}km not in {system} range "
            f"for {'N' if northp else 'S'} hemisphere "
            f"[{bounds[0] / 1000.0:.2f}km, {bounds[1] / 1000.0:.2f}km]",
            field=field,
            value=value,
        )


class ZoneMismatch(GridReferenceError):
    """An explicit zone override that cannot hold the requested point."""

    def __init__(self, zone: int, latitude: float, longitude: float, reason: str):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Latitude {latitude}, longitude {longitude} cannot be placed in "
            f"{'UPS' if zone == 0 else f'UTM zone {zone}'}: {reason}",
            field="zone",
            value=zone,
        )


class PrecisionOutOfRange(GridReferenceError):
    """An MGRS precision outside [0, 11]."""

    def __init__(self, value: Any):
        super().__init__(
            f"Precision {value!r} not in range [0, 11]",
            field="precision",
            value=value,
        )


class MalformedMgrs(GridReferenceError):
    """MGRS text (or MGRS components) violating the grammar.

    Attributes
    ----------
    text : str, optional
        The text being parsed, when available.
    """

    def __init__(self, reason: str, text: Optional[str] = None):
        self.text = text
        message = f"MGRS string is invalid: {reason}"
        super().__init__(message, field="mgrs", value=text)
