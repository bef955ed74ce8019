"""
Conversion of true anomaly ranges into absolute time intervals.
"""
import logging
from typing import List, NamedTuple

from . import anomaly
from .constants import EPSILON, PI, TWO_PI
from .math_utils import clamp, zero
from .ranges import RangePair

logger = logging.getLogger(__name__)


class TimeInterval(NamedTuple):
    begin: float
    end: float

    def shift(self, dt: float) -> 'TimeInterval':
        return TimeInterval(self.begin + dt, self.end + dt)


def time_at_true_anomaly(orbit, f: float) -> float:
    """
    Time at true anomaly f on the revolution around the periapsis time.

    True anomalies below -pi (ranges through apoapsis) map to the previous
    revolution, so a range stays contiguous in time.
    """
    M = float(anomaly.true_to_mean(orbit.eccentricity, f))
    if f < -PI:
        M -= TWO_PI
    return orbit.periapsis_time + M / orbit.mean_motion


def _range_times(orbit, ranges: RangePair, t0: float, t1: float) -> List[TimeInterval]:
    """Time intervals of the non-empty ranges, relative to the revolution around the periapsis time."""
    if orbit.closed:
        f_min, f_max = -TWO_PI, PI
    else:
        # true anomaly reachable within (t0..t1)
        f_min = float(anomaly.mean_to_true(orbit.eccentricity, float(orbit.mean_anomaly_at(t0))))
        f_max = float(anomaly.mean_to_true(orbit.eccentricity, float(orbit.mean_anomaly_at(t1))))

    return [TimeInterval(time_at_true_anomaly(orbit, clamp(f_min, f_max, r.begin)),
                         time_at_true_anomaly(orbit, clamp(f_min, f_max, r.end)))
            for r in ranges.ranges]


def _nearest_revolution(orbit, t0: float) -> int:
    """Number of whole periods from the periapsis time to the periapsis nearest to t0."""
    if not orbit.closed:
        return 0
    x = (t0 - orbit.periapsis_time) / orbit.period
    return int(x + (-0.5 if x < 0.0 else 0.5))


def intercept_times(orbit1, orbit2, t0: float, t1: float,
                    ranges1: RangePair, ranges2: RangePair,
                    max_times: int, *, tol: float = EPSILON) -> List[TimeInterval]:
    """
    Find the time intervals within (t0..t1) where orbit1 is inside ranges1
    and orbit2 is inside ranges2 at the same time.

    Closed orbits repeat their ranges every period, open orbits pass them
    only once. Overlapping or touching intervals are merged.

    Args:
        orbit1: First orbit
        orbit2: Second orbit
        t0: Start of the search window
        t1: End of the search window
        ranges1: True anomaly ranges on orbit1
        ranges2: True anomaly ranges on orbit2
        max_times: Maximum number of intervals returned
        tol: Tolerance for touching intervals

    Returns:
        List of at most max_times ordered, disjoint TimeIntervals inside (t0..t1)
    """
    if ranges1.count == 0 or ranges2.count == 0 or max_times <= 0 or not t0 < t1:
        return []

    orbits = (orbit1, orbit2)
    windows = (_range_times(orbit1, ranges1, t0, t1), _range_times(orbit2, ranges2, t0, t1))
    periods = tuple(orbit.period if orbit.closed else 0.0 for orbit in orbits)
    revolution = [_nearest_revolution(orbit, t0) for orbit in orbits]
    index = [0, 0]

    times: List[TimeInterval] = []
    t = t0
    while t < t1 and len(times) < max_times:
        current = [windows[o][index[o]].shift(revolution[o] * periods[o]) for o in range(2)]

        t_begin = max(t, current[0].begin, current[1].begin)
        t_end = min(t1, current[0].end, current[1].end)
        t = max(t, t_end)

        if t_begin < t_end:
            if times and (t_begin <= times[-1].end or zero(t_begin - times[-1].end, tol)):
                times[-1] = TimeInterval(times[-1].begin, max(times[-1].end, t_end))
            else:
                times.append(TimeInterval(t_begin, t_end))

        # advance the orbit whose interval ends first
        advance = 0 if current[0].end < current[1].end else 1
        index[advance] += 1
        if index[advance] == len(windows[advance]):
            if not orbits[advance].closed:
                break
            index[advance] = 0
            revolution[advance] += 1

    logger.debug("%d intercept time intervals in (%g..%g)", len(times), t0, t1)
    return times
