"""
Orbital elements representation for two-body orbits.
"""
from typing import NamedTuple


class OrbitalElements(NamedTuple):
    """
    Conic orbital elements of a Keplerian orbit.

    The semi-latus rectum is used instead of the semi-major axis so that
    parabolic orbits can be described too. All angular quantities are in radians.

    Attributes:
        p: Semi-latus rectum (distance units, > 0)
        e: Eccentricity (dimensionless, >= 0)
        i: Inclination relative to reference plane (radians)
        Omega: Longitude of the ascending node (radians)
        omega: Argument of periapsis (radians)
        periapsis_time: Time of periapsis passage (time units)

    Note:
        - For circular orbits: e = 0
        - For elliptical orbits: 0 < e < 1
        - For parabolic orbits: e = 1
        - For hyperbolic orbits: e > 1
    """
    p: float  # semi-latus rectum
    e: float  # eccentricity
    i: float  # inclination (rad)
    Omega: float  # longitude of ascending node (rad)
    omega: float  # argument of periapsis (rad)
    periapsis_time: float = 0.0  # time of periapsis passage
