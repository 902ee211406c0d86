"""
Validation Framework for Grid Reference Conversion.

This module provides accuracy checks against geodesic distance and an
independent PROJ reference.
"""

from validation.accuracy import (
    AccuracyChecker,
    AccuracyError,
    ErrorStatistics,
    ReferenceProjector,
    ValidationResult,
    geodesic_distance,
    geodesic_distance_batch,
)

__all__ = [
    "AccuracyChecker",
    "AccuracyError",
    "ErrorStatistics",
    "ReferenceProjector",
    "ValidationResult",
    "geodesic_distance",
    "geodesic_distance_batch",
]
