"""
Numeric constants for kepler_intercept.

This module contains the angular constants and the tolerances shared by the
whole intercept pipeline.
"""

import math
import sys

# Angles
PI = math.pi
TWO_PI = 2.0 * math.pi

# Tolerances
DBL_EPSILON = sys.float_info.epsilon  # machine epsilon, used for coplanar detection
EPSILON = 1.0e-9  # default tolerance of the shared "approximately zero" predicate

# Kepler solver
KEPLER_MAX_ITER = 50  # fixed Newton iteration count (lax.scan length)
KEPLER_HIGH_ECCENTRICITY = 0.8  # start elliptic Newton iteration at pi above this

# Capacity
TIMES_PER_INTERCEPT = 4  # time intervals considered per requested intercept
MAX_SEARCHES_PER_INTERVAL = 4  # searches resumed within one time interval
