"""
Vector primitives and the shared approximate comparison.

Every "is this zero" decision in the intercept pipeline goes through ``zero``
so the numerical robustness of the whole package is tuned by a single
tolerance (``kepler_intercept.constants.EPSILON`` unless overridden).
"""
import numpy as np

from .constants import EPSILON


def zero(x: float, tol: float = EPSILON) -> bool:
    """True if |x| is below the tolerance."""
    return abs(x) < tol


def sign(x: float) -> int:
    # int() so numpy scalars work, numpy can not subtract booleans
    return int(x > 0.0) - int(x < 0.0)


def clamp(lo: float, hi: float, x: float) -> float:
    return min(hi, max(lo, x))


def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.cross(a, b)


def mag(a: np.ndarray) -> float:
    return float(np.linalg.norm(a))


def unit(a: np.ndarray) -> np.ndarray:
    """Unit vector along a (zero vector stays zero)."""
    n = np.linalg.norm(a)
    if n == 0.0:
        return np.zeros_like(a, dtype=float)
    return np.asarray(a, dtype=float) / n
