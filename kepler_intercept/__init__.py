# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements
from .state import CartesianState

from .constants import (
    # Constants
    PI,
    TWO_PI,
    EPSILON,
    DBL_EPSILON,
)

from .anomaly import (
    # Kepler equation
    solve_kepler,
    solve_kepler_hyperbolic,
    solve_barker,
    true_to_mean,
    mean_to_true,
    true_anomaly_from_radius,
)

from .orbit import (
    # Orbit model
    Orbit,
)

from .ranges import (
    # True anomaly ranges
    AngleRange,
    RangePair,
    EMPTY_RANGE,
    FULL_RANGE,
    NO_RANGES,
    intersect_ranges,
    intersect_orbit_ranges,
)

from .times import (
    # Time intervals
    TimeInterval,
    intercept_times,
)

from .intercept import (
    # Intercept record
    Intercept,
    evaluate_intercept,
)

from .search import (
    # Closest approach search
    SearchPhase,
    SearchResult,
    intercept_search,
)

from .config import (
    InterceptConfig,
    make_intercept_config,
)

from .pipeline import (
    intercept_orbit,
    find_intercepts,
)

__all__ = [
    # Constants
    "PI",
    "TWO_PI",
    "EPSILON",
    "DBL_EPSILON",

    # Named tuples
    "OrbitalElements",
    "CartesianState",

    # Kepler equation
    "solve_kepler",
    "solve_kepler_hyperbolic",
    "solve_barker",
    "true_to_mean",
    "mean_to_true",
    "true_anomaly_from_radius",

    # Orbit model
    "Orbit",

    # True anomaly ranges
    "AngleRange",
    "RangePair",
    "EMPTY_RANGE",
    "FULL_RANGE",
    "NO_RANGES",
    "intersect_ranges",
    "intersect_orbit_ranges",

    # Time intervals
    "TimeInterval",
    "intercept_times",

    # Intercepts
    "Intercept",
    "evaluate_intercept",
    "SearchPhase",
    "SearchResult",
    "intercept_search",
    "InterceptConfig",
    "make_intercept_config",
    "intercept_orbit",
    "find_intercepts",
]
