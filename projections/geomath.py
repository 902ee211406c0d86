"""
Angle and Conformal Latitude Utilities.

Small numerical building blocks shared by the projection engines:
angle reduction that is exact at the ±180° seam, an error-free longitude
difference, and the conversions between geodetic and conformal latitude
expressed through their tangents (tau and tau').

References
----------
- Karney, C.F.F. (2011). Transverse Mercator with an accuracy of a few
  nanometers. Journal of Geodesy, 85(8), 475-485. Eqs. (7)-(9), (19)-(21).
"""

import math
import sys
from typing import Sequence, Tuple

import numpy as np

from common.constants import GeodeticConstants

QD = GeodeticConstants.QUARTER_TURN_DEG
HD = GeodeticConstants.HALF_TURN_DEG
TD = GeodeticConstants.FULL_TURN_DEG

EPSILON = sys.float_info.epsilon

# tauf gives up refining beyond this, tau is effectively infinite
_TAU_MAX = 2 / math.sqrt(EPSILON)
_TAUF_TOLERANCE = math.sqrt(EPSILON) / 10
_TAUF_ITERATIONS = 5
_TAN_OVERFLOW = 1 / (EPSILON * EPSILON)


def polyval(coeffs: Sequence[float], x: float) -> float:
    """Evaluate a polynomial with coefficients ordered highest power first."""
    return float(np.polyval(coeffs, x))


def ang_normalize(x: float) -> float:
    """Reduce an angle to [-180, 180].

    ±180 keeps the sign of the input so that -180 and 180 stay distinct.
    """
    y = math.remainder(x, TD)
    return math.copysign(HD, x) if abs(y) == HD else y


def _error_free_sum(u: float, v: float) -> Tuple[float, float]:
    s = u + v
    up = s - v
    vpp = s - up
    up -= u
    vpp -= v
    t = -(up + vpp) if s != 0 else s
    return s, t


def ang_diff(x: float, y: float) -> float:
    """Compute y - x reduced to [-180, 180], accurate to the last bit.

    Parameters
    ----------
    x, y : float
        Longitudes in degrees.

    Returns
    -------
    float
        The difference in degrees. At ±180 the sign is chosen so the
        result is consistent with the unreduced difference.
    """
    d, t = _error_free_sum(math.remainder(-x, TD), math.remainder(y, TD))
    d, t = _error_free_sum(math.remainder(d, TD), t)
    if d == 0 or abs(d) == HD:
        d = math.copysign(d, y - x if t == 0 else -t)
    return d


def eatanhe(x: float, es: float) -> float:
    """Evaluate e·atanh(e·x), continued analytically for prolate ellipsoids."""
    if es > 0:
        return es * math.atanh(es * x)
    return -es * math.atan(es * x)


def taupf(tau: float, es: float) -> float:
    """Tangent of the conformal latitude from the tangent of the geodetic latitude."""
    tau1 = math.hypot(1.0, tau)
    sig = math.sinh(eatanhe(tau / tau1, es))
    return math.hypot(1.0, sig) * tau - sig * tau1


def tauf(taup: float, es: float) -> float:
    """Tangent of the geodetic latitude from the tangent of the conformal latitude.

    Inverts `taupf` with Newton's method; converges to full precision in
    at most two steps for the Earth and is capped at five.
    """
    e2m = 1 - es * es
    if abs(taup) > 70:
        tau = taup * math.exp(eatanhe(1.0, es))
    else:
        tau = taup / e2m
    stol = _TAUF_TOLERANCE * max(1.0, abs(taup))
    if not abs(tau) < _TAU_MAX:
        return tau
    for _ in range(_TAUF_ITERATIONS):
        taupa = taupf(tau, es)
        dtau = ((taup - taupa) * (1 + e2m * tau * tau)
                / (e2m * math.hypot(1.0, tau) * math.hypot(1.0, taupa)))
        tau += dtau
        if not abs(dtau) >= stol:
            break
    return tau


def sincosd(angle_deg: float) -> Tuple[float, float]:
    """Sine and cosine of an angle in degrees, exact at multiples of 90°."""
    r = math.fmod(angle_deg, TD)
    q = int(math.copysign(math.floor(abs(r / QD) + 0.5), r)) if math.isfinite(r) else 0
    r = math.radians(r - QD * q)
    s, c = math.sin(r), math.cos(r)
    q %= 4
    if q == 1:
        s, c = c, -s
    elif q == 2:
        s, c = -s, -c
    elif q == 3:
        s, c = -c, s
    c += 0.0
    if s == 0:
        s = math.copysign(s, angle_deg)
    return s, c


def tand(angle_deg: float) -> float:
    """Tangent of an angle in degrees; ±90° map to a large finite value."""
    s, c = sincosd(angle_deg)
    if c != 0:
        return s / c
    return -_TAN_OVERFLOW if s < 0 else _TAN_OVERFLOW


def atan2d(y: float, x: float) -> float:
    """atan2 in degrees, exact for the cardinal directions."""
    return math.degrees(math.atan2(y, x))


def signbit(x: float) -> bool:
    """True when x carries a negative sign, including -0.0."""
    return math.copysign(1.0, x) < 0
