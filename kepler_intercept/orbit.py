import math

import numpy as np
import pydantic
from pydantic import ConfigDict, field_validator

from . import anomaly, conic
from .math_utils import cross, dot, mag, unit, zero
from .orbital_elements import OrbitalElements
from .state import CartesianState


class Orbit(pydantic.BaseModel):
    """
    An immutable Keplerian (two-body) orbit.

    The orbit is described by its conic section (semi-latus rectum and
    eccentricity), the time of periapsis passage and an orthonormal triad:
    the major axis points towards periapsis, the minor axis is 90 degrees
    ahead in the direction of motion and the normal axis is along the angular
    momentum.

    A radial orbit (zero angular momentum) is stored with a semi-latus rectum
    of zero and a zero normal axis. Radial orbits can be constructed from a
    state vector but are not handled by the intercept pipeline.

    Attributes:
        mu: Gravitational parameter of the central body
        semi_latus_rectum: Semi-latus rectum p
        eccentricity: Eccentricity e
        periapsis_time: Time of periapsis passage
        major_axis: Unit vector towards periapsis
        minor_axis: Unit vector in the orbital plane, 90 degrees ahead of the major axis
        normal_axis: Unit vector along the angular momentum
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # numpy axis vectors

    mu: float
    semi_latus_rectum: float
    eccentricity: float
    periapsis_time: float = 0.0
    major_axis: np.ndarray
    minor_axis: np.ndarray
    normal_axis: np.ndarray

    @field_validator('mu')
    @classmethod
    def validate_mu(cls, v):
        if not v > 0.0:
            raise ValueError("mu must be positive")
        return v

    @field_validator('semi_latus_rectum')
    @classmethod
    def validate_semi_latus_rectum(cls, v):
        if v < 0.0:
            raise ValueError("semi_latus_rectum must be non-negative")
        return v

    @field_validator('eccentricity')
    @classmethod
    def validate_eccentricity(cls, v):
        if v < 0.0:
            raise ValueError("eccentricity must be non-negative")
        return v

    @field_validator('major_axis', 'minor_axis', 'normal_axis', mode='before')
    @classmethod
    def validate_axis(cls, v):
        v = np.asarray(v, dtype=float)
        if v.shape != (3,):
            raise ValueError("orbit axes must be 3-vectors")
        return v

    @classmethod
    def from_elements(cls, mu: float, p: float, e: float, i: float = 0.0, an: float = 0.0,
                      arg: float = 0.0, periapsis_time: float = 0.0) -> 'Orbit':
        """
        Create an orbit from conic orbital elements.

        Args:
            mu: Gravitational parameter
            p: Semi-latus rectum
            e: Eccentricity
            i: Inclination (radians)
            an: Longitude of the ascending node (radians)
            arg: Argument of periapsis (radians)
            periapsis_time: Time of periapsis passage

        Returns:
            Orbit
        """
        if not p > 0.0:
            raise ValueError("semi-latus rectum must be positive")

        cos_an, sin_an = math.cos(an), math.sin(an)
        cos_arg, sin_arg = math.cos(arg), math.sin(arg)
        cos_i, sin_i = math.cos(i), math.sin(i)

        major = [cos_an * cos_arg - sin_an * sin_arg * cos_i,
                 sin_an * cos_arg + cos_an * sin_arg * cos_i,
                 sin_arg * sin_i]
        minor = [-cos_an * sin_arg - sin_an * cos_arg * cos_i,
                 -sin_an * sin_arg + cos_an * cos_arg * cos_i,
                 cos_arg * sin_i]
        normal = [sin_an * sin_i, -cos_an * sin_i, cos_i]

        return cls(mu=mu, semi_latus_rectum=p, eccentricity=e, periapsis_time=periapsis_time,
                   major_axis=major, minor_axis=minor, normal_axis=normal)

    @classmethod
    def from_orbital_elements(cls, elements: OrbitalElements, mu: float) -> 'Orbit':
        return cls.from_elements(mu, elements.p, elements.e, elements.i, elements.Omega,
                                 elements.omega, elements.periapsis_time)

    @classmethod
    def from_state(cls, mu: float, position, velocity, epoch: float = 0.0) -> 'Orbit':
        """
        Create the orbit passing through a position and velocity at a given epoch.

        A circular orbit has no periapsis, the position at epoch is used as its
        major axis (so the periapsis time equals the epoch). Eccentricities within
        the shared tolerance of 0 or 1 are snapped to exactly circular or parabolic.

        Args:
            mu: Gravitational parameter
            position: Position vector at epoch
            velocity: Velocity vector at epoch
            epoch: Time of the state

        Returns:
            Orbit
        """
        r = np.asarray(position, dtype=float)
        v = np.asarray(velocity, dtype=float)
        r_mag = mag(r)
        v2 = dot(v, v)

        h = cross(r, v)
        h2 = dot(h, h)

        if r_mag == 0.0 or v2 == 0.0 or zero(h2 / (r_mag**2 * v2)):
            # radial orbit
            return cls(mu=mu, semi_latus_rectum=0.0, eccentricity=1.0, periapsis_time=epoch,
                       major_axis=unit(r), minor_axis=unit(v), normal_axis=np.zeros(3))

        normal = h / math.sqrt(h2)
        p = h2 / mu

        e_vec = ((v2 - mu / r_mag) * r - dot(r, v) * v) / mu
        e = mag(e_vec)

        if conic.circular(e):
            e = 0.0
            major = r / r_mag
        else:
            if conic.parabolic(e):
                e = 1.0
            major = e_vec / mag(e_vec)
        minor = cross(normal, major)

        f = math.atan2(dot(r, minor), dot(r, major))
        M = float(anomaly.true_to_mean(e, f))
        n = conic.mean_motion(mu, p, e)

        return cls(mu=mu, semi_latus_rectum=p, eccentricity=e, periapsis_time=epoch - M / n,
                   major_axis=major, minor_axis=minor, normal_axis=normal)

    @property
    def p(self) -> float:
        return self.semi_latus_rectum

    @property
    def e(self) -> float:
        return self.eccentricity

    @property
    def radial(self) -> bool:
        return self.semi_latus_rectum == 0.0

    @property
    def closed(self) -> bool:
        return conic.closed(self.eccentricity)

    @property
    def circular(self) -> bool:
        return conic.circular(self.eccentricity)

    @property
    def parabolic(self) -> bool:
        return conic.parabolic(self.eccentricity)

    @property
    def hyperbolic(self) -> bool:
        return conic.hyperbolic(self.eccentricity)

    @property
    def mean_motion(self) -> float:
        return conic.mean_motion(self.mu, self.semi_latus_rectum, self.eccentricity)

    @property
    def period(self) -> float:
        """Orbital period (infinite for open orbits)."""
        return conic.period(self.mu, self.semi_latus_rectum, self.eccentricity)

    @property
    def periapsis(self) -> float:
        return conic.periapsis(self.semi_latus_rectum, self.eccentricity)

    @property
    def apoapsis(self) -> float:
        return conic.apoapsis(self.semi_latus_rectum, self.eccentricity)

    @property
    def periapsis_velocity(self) -> float:
        return conic.periapsis_velocity(self.mu, self.semi_latus_rectum, self.eccentricity)

    @property
    def max_true_anomaly(self) -> float:
        return conic.max_true_anomaly(self.eccentricity)

    def mean_anomaly_at(self, t):
        return (np.asarray(t, dtype=float) - self.periapsis_time) * self.mean_motion

    def eccentric_anomaly_at(self, t):
        """Eccentric anomaly at time t (broadcasts over arrays of time)."""
        M = self.mean_anomaly_at(t)
        return anomaly.mean_to_eccentric(self.eccentricity, M if np.ndim(M) else float(M))

    def _perifocal(self, x, y):
        x = np.asarray(x, dtype=float)[..., None]
        y = np.asarray(y, dtype=float)[..., None]
        return x * self.major_axis + y * self.minor_axis

    def position_eccentric(self, E):
        """Position at eccentric anomaly E (an (..., 3) array for array input)."""
        p, e = self.semi_latus_rectum, self.eccentricity
        if self.parabolic:
            x = 0.5 * p * (1.0 - E * E)
            y = p * E
        elif self.hyperbolic:
            a = p / (e * e - 1.0)
            b = p / math.sqrt(e * e - 1.0)
            x = a * (e - np.cosh(E))
            y = b * np.sinh(E)
        else:
            a = p / (1.0 - e * e)
            b = p / math.sqrt(1.0 - e * e)
            x = a * (np.cos(E) - e)
            y = b * np.sin(E)
        return self._perifocal(x, y)

    def velocity_eccentric(self, E):
        """Velocity at eccentric anomaly E (an (..., 3) array for array input)."""
        p, e = self.semi_latus_rectum, self.eccentricity
        E_dot = anomaly.eccentric_anomaly_rate(e, E, self.mean_motion)
        if self.parabolic:
            vx = -p * E * E_dot
            vy = p * E_dot
        elif self.hyperbolic:
            a = p / (e * e - 1.0)
            b = p / math.sqrt(e * e - 1.0)
            vx = -a * np.sinh(E) * E_dot
            vy = b * np.cosh(E) * E_dot
        else:
            a = p / (1.0 - e * e)
            b = p / math.sqrt(1.0 - e * e)
            vx = -a * np.sin(E) * E_dot
            vy = b * np.cos(E) * E_dot
        return self._perifocal(vx, vy)

    def position_true(self, f):
        """Position at true anomaly f."""
        r = self.semi_latus_rectum / (1.0 + self.eccentricity * np.cos(f))
        return self._perifocal(r * np.cos(f), r * np.sin(f))

    def get_state(self, t) -> CartesianState:
        """
        Get the Cartesian state (position and velocity) at time t.

        Args:
            t: Time (float or array of times)

        Returns:
            CartesianState with position and velocity vectors
            (arrays of shape (n, 3) for n times)
        """
        E = self.eccentric_anomaly_at(t)
        return CartesianState(r=self.position_eccentric(E), v=self.velocity_eccentric(E))

    def __repr__(self) -> str:
        return (f"Orbit(mu={self.mu}, p={self.semi_latus_rectum}, e={self.eccentricity}, "
                f"periapsis_time={self.periapsis_time})")
