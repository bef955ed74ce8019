"""
Cartesian state representation.
"""
from typing import NamedTuple

import numpy as np


class CartesianState(NamedTuple):
    """
    Cartesian state of an orbiting body relative to the central body.

    Attributes:
        r: Position vector [x, y, z]
        v: Velocity vector [vx, vy, vz]

    Examples:
        >>> import numpy as np
        >>> state = CartesianState(
        ...     r=np.array([1.0, 0.0, 0.0]),
        ...     v=np.array([0.0, 1.0, 0.0])
        ... )
        >>> print(state.r)
        [1. 0. 0.]
    """
    r: np.ndarray  # position [x, y, z]
    v: np.ndarray  # velocity [vx, vy, vz]
