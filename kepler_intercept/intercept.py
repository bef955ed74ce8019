"""
Relative state of two orbits at one instant.
"""
import numpy as np
import pydantic
from pydantic import ConfigDict

from .math_utils import dot, mag


class Intercept(pydantic.BaseModel):
    """
    Positions and velocities of two orbits at a common time.

    Attributes:
        positions: Positions of orbit1 and orbit2, shape (2, 3)
        velocities: Velocities of orbit1 and orbit2, shape (2, 3)
        relative_position: Position of orbit2 relative to orbit1
        relative_velocity: Velocity of orbit2 relative to orbit1
        distance: Magnitude of the relative position
        speed: Closing speed, the relative velocity projected on the relative
            position (negative when approaching, zero at zero distance)
        E1: Eccentric anomaly of orbit1
        E2: Eccentric anomaly of orbit2
        time: Time of the sample
        mu: Gravitational parameter
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # numpy state vectors

    positions: np.ndarray
    velocities: np.ndarray
    relative_position: np.ndarray
    relative_velocity: np.ndarray
    distance: float
    speed: float
    E1: float
    E2: float
    time: float
    mu: float

    def __repr__(self) -> str:
        return f"Intercept(time={self.time}, distance={self.distance}, speed={self.speed})"


def evaluate_intercept(orbit1, orbit2, t: float) -> Intercept:
    """
    Evaluate both orbits at time t.

    Args:
        orbit1: First orbit
        orbit2: Second orbit
        t: Time

    Returns:
        Intercept
    """
    E1 = orbit1.eccentric_anomaly_at(t)
    E2 = orbit2.eccentric_anomaly_at(t)

    positions = np.stack([orbit1.position_eccentric(E1), orbit2.position_eccentric(E2)])
    velocities = np.stack([orbit1.velocity_eccentric(E1), orbit2.velocity_eccentric(E2)])

    dr = positions[1] - positions[0]
    dv = velocities[1] - velocities[0]
    distance = mag(dr)
    speed = dot(dr, dv) / distance if distance > 0.0 else 0.0

    return Intercept(positions=positions, velocities=velocities,
                     relative_position=dr, relative_velocity=dv,
                     distance=distance, speed=speed,
                     E1=E1, E2=E2, time=float(t), mu=orbit1.mu)
