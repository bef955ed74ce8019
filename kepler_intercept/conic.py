"""
Conic section scalar formulas.

All functions take the semi-latus rectum p, which stays finite for every conic
(including the parabola), instead of the semi-major axis.
"""
import math

from .constants import EPSILON, PI
from .math_utils import zero


def circular(e: float, tol: float = EPSILON) -> bool:
    return zero(e, tol)


def parabolic(e: float, tol: float = EPSILON) -> bool:
    return zero(e - 1.0, tol)


def closed(e: float, tol: float = EPSILON) -> bool:
    """Circular or elliptic orbit (bound, periodic)."""
    return e < 1.0 and not parabolic(e, tol)


def hyperbolic(e: float, tol: float = EPSILON) -> bool:
    return e > 1.0 and not parabolic(e, tol)


def semi_major_axis(p: float, e: float) -> float:
    """Semi-major axis, negative for hyperbolic orbits and infinite for parabolic ones."""
    if parabolic(e):
        return math.inf
    return p / (1.0 - e * e)


def periapsis(p: float, e: float) -> float:
    return p / (1.0 + e)


def apoapsis(p: float, e: float) -> float:
    """Apoapsis radius, infinite for open orbits."""
    if not closed(e):
        return math.inf
    return p / (1.0 - e)


def mean_motion(mu: float, p: float, e: float) -> float:
    """
    Rate of change of the mean anomaly.

    For the parabola the mean anomaly is defined by Barker's equation
    M = D + D^3/3 with D = tan(f/2), which gives n = 2 sqrt(mu / p^3).
    """
    if parabolic(e):
        return 2.0 * math.sqrt(mu / p**3)
    a = abs(semi_major_axis(p, e))
    return math.sqrt(mu / a**3)


def period(mu: float, p: float, e: float) -> float:
    """Orbital period of a closed orbit, infinite otherwise."""
    if not closed(e):
        return math.inf
    return 2.0 * PI / mean_motion(mu, p, e)


def periapsis_velocity(mu: float, p: float, e: float) -> float:
    """Speed at periapsis, the maximum speed along the conic."""
    return math.sqrt(mu / p) * (1.0 + e)


def max_true_anomaly(e: float) -> float:
    """Largest reachable |f|: pi on closed and parabolic orbits, the asymptote angle on hyperbolae."""
    if not hyperbolic(e):
        return PI
    return math.acos(-1.0 / e)


def radius(p: float, e: float, f: float) -> float:
    return p / (1.0 + e * math.cos(f))
