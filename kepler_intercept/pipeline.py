"""
Intercept prediction for a pair of orbits over a time window.

True anomaly ranges where the orbits may come close are computed for each
orbit, converted into time intervals where both orbits are inside their
ranges and each interval is searched for an intercept.
"""
import logging
from typing import List

from .config import DEFAULT_MAX_INTERCEPTS, DEFAULT_MAX_STEPS, InterceptConfig
from .constants import EPSILON, MAX_SEARCHES_PER_INTERVAL, TIMES_PER_INTERCEPT
from .intercept import Intercept
from .ranges import intersect_orbit_ranges
from .search import intercept_search
from .times import intercept_times

logger = logging.getLogger(__name__)


def intercept_orbit(orbit1, orbit2, t0: float, t1: float, threshold: float,
                    target_distance: float = 0.0,
                    max_intercepts: int = DEFAULT_MAX_INTERCEPTS,
                    max_steps: int = DEFAULT_MAX_STEPS, *,
                    tol: float = EPSILON) -> List[Intercept]:
    """
    Find the times within (t0..t1) where orbit2 is within threshold of the
    target distance from orbit1.

    At most one intercept is reported per time interval, the first one found.

    Args:
        orbit1: First orbit
        orbit2: Second orbit
        t0: Start of the search window
        t1: End of the search window
        threshold: Distance threshold, must be positive
        target_distance: Distance to cross, e.g. a sphere of influence radius
            (0.0 for the closest approach)
        max_intercepts: Maximum number of intercepts returned
        max_steps: Maximum number of samples per search
        tol: Tolerance of the approximate comparisons

    Returns:
        List of at most max_intercepts Intercepts in ascending time

    Raises:
        ValueError: If threshold is not positive
    """
    if not threshold > 0.0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    t0, t1 = float(t0), float(t1)
    threshold, target_distance = float(threshold), float(target_distance)

    # ranges have to cover every point within the target distance plus threshold
    reach = threshold + max(0.0, target_distance)
    ranges1 = intersect_orbit_ranges(orbit1, orbit2, reach, tol=tol)
    ranges2 = intersect_orbit_ranges(orbit2, orbit1, reach, tol=tol)
    if ranges1.count == 0 or ranges2.count == 0:
        logger.debug("orbits can not intercept (%d, %d ranges)", ranges1.count, ranges2.count)
        return []

    times = intercept_times(orbit1, orbit2, t0, t1, ranges1, ranges2,
                            TIMES_PER_INTERCEPT * max_intercepts, tol=tol)

    intercepts: List[Intercept] = []
    for interval in times:
        t = interval.begin
        for _ in range(MAX_SEARCHES_PER_INTERVAL):
            if not (t < interval.end and len(intercepts) < max_intercepts):
                break

            result = intercept_search(orbit1, orbit2, t, interval.end, threshold,
                                      target_distance, max_steps, tol=tol)
            if abs(result.intercept.distance - target_distance) <= threshold:
                intercepts.append(result.intercept)
                # TODO: keep searching the rest of the interval, it may hold more than one approach
                break

            if not result.consumed > t:
                break
            t = result.consumed

    logger.debug("%d intercepts in %d time intervals", len(intercepts), len(times))
    return intercepts


def find_intercepts(orbit1, orbit2, t0: float, t1: float, config: InterceptConfig) -> List[Intercept]:
    """intercept_orbit with the parameters taken from an InterceptConfig."""
    return intercept_orbit(orbit1, orbit2, t0, t1, config.threshold,
                           target_distance=config.target_distance,
                           max_intercepts=config.max_intercepts,
                           max_steps=config.max_steps,
                           tol=config.tol)
