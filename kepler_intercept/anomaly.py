"""
Anomaly conversions for all conic sections.

The eccentric anomaly is E on ellipses, the hyperbolic anomaly H on
hyperbolae and D = tan(f/2) on parabolae. The mean anomaly is respectively
M = E - e sin(E), M = e sinh(H) - H and M = D + D^3/3 (Barker's equation),
so that M = n (t - t_pe) for every conic with n from ``conic.mean_motion``.

The closed-form conversions are plain numpy and broadcast over arrays. Solving
Kepler's equation uses Newton-Raphson with a fixed number of iterations run
through ``jax.lax.scan``, jit-compiled, and broadcast over arrays of mean
anomaly as well.
"""
from functools import partial

import jax
import jax.numpy as jnp
from jax import jit
import numpy as np

from . import conic
from .constants import KEPLER_HIGH_ECCENTRICITY, KEPLER_MAX_ITER, PI, TWO_PI


@partial(jit, static_argnames=('max_iter',))
def solve_kepler(M, e, max_iter: int = KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration with jax.lax.scan.

    M is wrapped to [-pi, pi] before iterating and the whole revolutions are
    added back, so E is continuous in M.
    """
    M = jnp.asarray(M, dtype=float)
    revs = TWO_PI * jnp.round(M / TWO_PI)
    M_wrapped = M - revs

    # Initial guess, pi (with the sign of M) for high eccentricity
    E = jnp.where(e < KEPLER_HIGH_ECCENTRICITY, M_wrapped, jnp.pi * jnp.sign(M_wrapped))

    def body_fn(E, _):
        f = E - e * jnp.sin(E) - M_wrapped
        fp = 1.0 - e * jnp.cos(E)
        E_new = E - f / fp
        return E_new, None

    E_final, _ = jax.lax.scan(body_fn, E, None, length=max_iter)
    return E_final + revs


@partial(jit, static_argnames=('max_iter',))
def solve_kepler_hyperbolic(M, e, max_iter: int = KEPLER_MAX_ITER):
    """
    Solve the hyperbolic Kepler equation M = e*sinh(H) - H for H.

    The initial guess sign(M) * log(2|M|/e + 1.8) lies close to the root for
    both small and large |M|.
    """
    M = jnp.asarray(M, dtype=float)
    H = jnp.sign(M) * jnp.log(2.0 * jnp.abs(M) / e + 1.8)

    def body_fn(H, _):
        f = e * jnp.sinh(H) - H - M
        fp = e * jnp.cosh(H) - 1.0
        H_new = H - f / fp
        return H_new, None

    H_final, _ = jax.lax.scan(body_fn, H, None, length=max_iter)
    return H_final


@jit
def solve_barker(M):
    """Solve Barker's equation M = D + D^3/3 for D = tan(f/2) (Cardano's formula)."""
    M = jnp.asarray(M, dtype=float)
    q = 1.5 * M
    s = jnp.sqrt(q * q + 1.0)
    return jnp.cbrt(q + s) + jnp.cbrt(q - s)


def _as_output(x, like):
    """Return a float for scalar input, a numpy array otherwise."""
    if np.ndim(like) == 0:
        return float(x)
    return np.asarray(x, dtype=float)


def wrap_angle(f):
    """Wrap angles to [-pi, pi] (broadcasts over arrays)."""
    return f - TWO_PI * np.round(np.asarray(f) / TWO_PI)


def true_to_eccentric(e: float, f):
    if conic.parabolic(e):
        return np.tan(0.5 * f)
    if conic.hyperbolic(e):
        return 2.0 * np.arctanh(np.sqrt((e - 1.0) / (e + 1.0)) * np.tan(0.5 * f))
    return 2.0 * np.arctan2(np.sqrt(1.0 - e) * np.sin(0.5 * f), np.sqrt(1.0 + e) * np.cos(0.5 * f))


def eccentric_to_true(e: float, E):
    if conic.parabolic(e):
        return 2.0 * np.arctan(E)
    if conic.hyperbolic(e):
        return 2.0 * np.arctan(np.sqrt((e + 1.0) / (e - 1.0)) * np.tanh(0.5 * E))
    return 2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(0.5 * E), np.sqrt(1.0 - e) * np.cos(0.5 * E))


def eccentric_to_mean(e: float, E):
    if conic.parabolic(e):
        return E + E**3 / 3.0
    if conic.hyperbolic(e):
        return e * np.sinh(E) - E
    return E - e * np.sin(E)


def mean_to_eccentric(e: float, M):
    """Eccentric (hyperbolic, parabolic) anomaly for mean anomaly M."""
    if conic.parabolic(e):
        E = solve_barker(M)
    elif conic.hyperbolic(e):
        E = solve_kepler_hyperbolic(M, e)
    else:
        E = solve_kepler(M, e)
    return _as_output(E, M)


def true_to_mean(e: float, f):
    """Mean anomaly for true anomaly f; on closed orbits f is wrapped to [-pi, pi] first."""
    if conic.closed(e):
        f = wrap_angle(f)
    return eccentric_to_mean(e, true_to_eccentric(e, f))


def mean_to_true(e: float, M):
    return eccentric_to_true(e, mean_to_eccentric(e, M))


def eccentric_anomaly_rate(e: float, E, n: float):
    """Time derivative of the eccentric anomaly for mean motion n."""
    if conic.parabolic(e):
        return n / (1.0 + E * E)
    if conic.hyperbolic(e):
        return n / (e * np.cosh(E) - 1.0)
    return n / (1.0 - e * np.cos(E))


def true_anomaly_from_radius(p: float, e: float, r: float) -> float:
    """
    Non-negative true anomaly at which the conic reaches radius r.

    Radii at or below periapsis give 0, radii at or beyond apoapsis give pi.
    On a circular orbit the answer is 0 up to the orbit radius and pi above it.
    """
    if conic.circular(e):
        return 0.0 if r <= p else PI
    if r <= conic.periapsis(p, e):
        return 0.0
    if r >= conic.apoapsis(p, e):
        return PI
    cos_f = (p / r - 1.0) / e
    return float(np.arccos(np.clip(cos_f, -1.0, 1.0)))
