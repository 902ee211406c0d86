"""
Common utilities and infrastructure for the grid reference conversion system.

This package provides foundational components used across all modules:
- Geodetic constants with provenance
- Unit registry for angle and length inputs
- Error types raised by every conversion
- Logging configuration
"""

from common.constants import Constant, GeodeticConstants
from common.units import ureg, Q_, to_degrees, to_meters
from common.errors import (
    GridReferenceError,
    OutOfRange,
    InvalidZone,
    InvalidHemisphere,
    OutOfProjectionDomain,
    ZoneMismatch,
    PrecisionOutOfRange,
    MalformedMgrs,
)
from common.logging_config import get_logger

__all__ = [
    "Constant",
    "GeodeticConstants",
    "ureg",
    "Q_",
    "to_degrees",
    "to_meters",
    "GridReferenceError",
    "OutOfRange",
    "InvalidZone",
    "InvalidHemisphere",
    "OutOfProjectionDomain",
    "ZoneMismatch",
    "PrecisionOutOfRange",
    "MalformedMgrs",
    "get_logger",
]
