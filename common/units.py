"""
Unit Registry for Grid Reference Conversion.

This module provides a centralized unit system using the `pint` library.
Inputs to the value types may be given either as bare numbers (degrees for
angles, meters for lengths) or as pint quantities in any compatible unit;
anything with the wrong dimensionality is rejected.

Example Usage
-------------
>>> from common.units import Q_, to_degrees, to_meters
>>> to_degrees(Q_(0.5, 'radian'))
28.64788975654116
>>> to_meters(Q_(585.664121, 'km'))
585664.121
"""

from typing import Union

import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity

Number = Union[int, float]


def _convert(value: Union[Number, pint.Quantity], unit: str, name: str) -> float:
    if isinstance(value, pint.Quantity):
        try:
            return float(value.to(unit).magnitude)
        except pint.DimensionalityError as e:
            raise ValueError(
                f"{name.capitalize()} has incompatible units. "
                f"Expected {unit}, got {value.units}"
            ) from e
    return float(value)


def to_degrees(value: Union[Number, pint.Quantity], name: str = "angle") -> float:
    """Return an angle in degrees.

    Parameters
    ----------
    value : float or pint.Quantity
        Bare numbers are taken to be degrees already.
    name : str
        Field name used in error messages.

    Returns
    -------
    float
        The angle in degrees.

    Raises
    ------
    ValueError
        If a quantity is not an angle.
    """
    return _convert(value, "degree", name)


def to_meters(value: Union[Number, pint.Quantity], name: str = "length") -> float:
    """Return a length in meters.

    Parameters
    ----------
    value : float or pint.Quantity
        Bare numbers are taken to be meters already.
    name : str
        Field name used in error messages.

    Returns
    -------
    float
        The length in meters.

    Raises
    ------
    ValueError
        If a quantity is not a length.
    """
    return _convert(value, "meter", name)


def meters(value: Number) -> pint.Quantity:
    """Wrap a length in meters as a quantity."""
    return Q_(value, "meter")
