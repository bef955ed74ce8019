"""
True anomaly ranges along which two orbits may come close to each other.

A range is a half-open interval of true anomaly (begin, end) and is empty
whenever ``not begin < end``. Ranges come in pairs; of a pair only the first
range may begin below -pi, representing a range through apoapsis of a closed
orbit shifted down by a full revolution (so it stays contiguous). All other
range endpoints lie in [-pi, pi].
"""
import math
from typing import NamedTuple

import numpy as np

from . import anomaly
from .constants import DBL_EPSILON, EPSILON, PI, TWO_PI
from .math_utils import clamp, cross, dot, zero


class AngleRange(NamedTuple):
    begin: float
    end: float

    @property
    def empty(self) -> bool:
        return not self.begin < self.end

    def contains(self, f: float) -> bool:
        return self.begin <= f <= self.end


EMPTY_RANGE = AngleRange(1.0, -1.0)
FULL_RANGE = AngleRange(-PI, PI)


class RangePair(NamedTuple):
    """
    Up to two disjoint true anomaly ranges on one orbit.

    Attributes:
        first: First range, the only one that may start below -pi
        second: Second range, inside [-pi, pi]
    """
    first: AngleRange = EMPTY_RANGE
    second: AngleRange = EMPTY_RANGE

    @property
    def count(self) -> int:
        """Number of non-empty ranges."""
        return (not self.first.empty) + (not self.second.empty)

    @property
    def ranges(self):
        return [r for r in self if not r.empty]

    def contains(self, f: float) -> bool:
        """True if f (or f shifted down a revolution, for a range through apoapsis) is in the pair."""
        for r in self.ranges:
            if r.contains(f) or (r.begin < -PI and r.contains(f - TWO_PI)):
                return True
        return False


NO_RANGES = RangePair()


def _pair(f0: float, f1: float, f2: float, f3: float) -> RangePair:
    return RangePair(AngleRange(f0, f1), AngleRange(f2, f3))


def intersect_ranges(ranges1: RangePair, ranges2: RangePair, closed: bool, *, tol: float = EPSILON) -> RangePair:
    """
    Set intersection of two range pairs on the same orbit.

    The overlap is taken slot by slot, a pair holding a single range
    contributes that range to both slots. The result is then normalised:

    * on a closed orbit, ranges touching apoapsis from both sides are joined
      into one range below -pi,
    * ranges touching periapsis from both sides are joined,
    * a second range extending past pi is shifted down a revolution and
      stored first,
    * an empty first range is replaced by the second one,
    * a range spanning a full revolution collapses to [-pi, pi].

    Args:
        ranges1: First range pair
        ranges2: Second range pair
        closed: True if the orbit is closed (periodic true anomaly)
        tol: Tolerance for touching range endpoints

    Returns:
        RangePair with the empty ranges replaced by EMPTY_RANGE
    """
    slots1 = (ranges1.first, ranges1.second if not ranges1.second.empty else ranges1.first)
    slots2 = (ranges2.first, ranges2.second if not ranges2.second.empty else ranges2.first)

    fs = []
    for a, b in zip(slots1, slots2):
        fs.extend((max(a.begin, b.begin), min(a.end, b.end)))
    f0, f1, f2, f3 = fs

    if closed and (f0 <= -PI or zero(f0 + PI, tol)) and (f3 >= PI or zero(f3 - PI, tol)):
        # touching at apoapsis, join below -pi
        f0, f1 = min(f0, f2 - TWO_PI), max(f1, f3 - TWO_PI)
        f2, f3 = EMPTY_RANGE

    if (f1 >= f2 or zero(f1 - f2, tol)) and f2 < f3:
        # touching at periapsis
        f1 = f3
        f2, f3 = EMPTY_RANGE

    if f2 < f3 and f3 > PI:
        # second range through apoapsis goes first
        f0, f1, f2, f3 = f2 - TWO_PI, f3 - TWO_PI, f0, f1

    if f2 < f3 and not f0 < f1:
        f0, f1 = f2, f3
        f2, f3 = EMPTY_RANGE

    if f1 - f0 >= TWO_PI:
        f0, f1 = FULL_RANGE

    if not f0 < f1:
        f0, f1 = EMPTY_RANGE
    if not f2 < f3:
        f2, f3 = EMPTY_RANGE
    return _pair(f0, f1, f2, f3)


def _radius_ranges(orbit1, orbit2, threshold: float, tol: float) -> RangePair:
    """True anomaly ranges where orbit1 is between periapsis and apoapsis (+/- threshold) of orbit2."""
    p1, e1 = orbit1.semi_latus_rectum, orbit1.eccentricity
    pe2, ap2 = orbit2.periapsis, orbit2.apoapsis
    closed1 = orbit1.closed

    max_f = orbit1.max_true_anomaly
    f_pe = 0.0 if orbit1.circular else anomaly.true_anomaly_from_radius(p1, e1, pe2 - threshold)
    if orbit1.circular or not orbit2.closed:
        f_ap = max_f
    else:
        f_ap = anomaly.true_anomaly_from_radius(p1, e1, ap2 + threshold)

    f_lo, f_hi = min(f_ap, f_pe), max(f_ap, f_pe)

    if closed1 and zero(f_lo, tol) and not f_hi < PI:
        # anywhere on the orbit
        return RangePair(AngleRange(-TWO_PI, TWO_PI))
    if zero(f_lo, tol):
        # around periapsis
        return RangePair(AngleRange(-f_hi, f_hi))
    if closed1 and not f_hi < PI:
        # around apoapsis
        return _pair(-TWO_PI, -f_lo, f_lo, TWO_PI)
    return _pair(-f_hi, -f_lo, f_lo, f_hi)


def _node_ranges(orbit1, orbit2, threshold: float) -> RangePair:
    """True anomaly ranges where orbit1 is within threshold of the orbital plane of orbit2."""
    nodes = cross(orbit1.normal_axis, orbit2.normal_axis)
    N2 = dot(nodes, nodes)
    if N2 < DBL_EPSILON:
        # coplanar (or retrograde coplanar)
        return RangePair(FULL_RANGE)
    N = math.sqrt(N2)

    p1, e1 = orbit1.semi_latus_rectum, orbit1.eccentricity
    rel_incl = math.asin(clamp(-1.0, 1.0, N))

    f_an = math.copysign(math.acos(clamp(-1.0, 1.0, dot(orbit1.major_axis, nodes) / N)),
                         dot(orbit1.minor_axis, nodes))
    f_dn = f_an - math.copysign(PI, f_an)

    bands = []
    for f_node in (min(f_an, f_dn), max(f_an, f_dn)):
        denom = 1.0 + e1 * math.cos(f_node)
        if denom <= 0.0:
            # node beyond the asymptotes of an open orbit
            bands.append(EMPTY_RANGE)
            continue
        r = p1 / denom
        # right spherical triangle: sin(offset angle) = threshold / r = sin(rel_incl) sin(delta_f)
        delta_f = math.asin(clamp(-1.0, 1.0, min(threshold / r, 1.0) / math.sin(rel_incl)))
        bands.append(AngleRange(f_node - delta_f, f_node + delta_f))

    if bands[0].empty:
        return RangePair(bands[1])
    return RangePair(*bands)


def intersect_orbit_ranges(orbit1, orbit2, threshold: float, *, tol: float = EPSILON) -> RangePair:
    """
    Find 0, 1 or 2 ranges of true anomaly on orbit1 where orbit1 may be closer
    than threshold to orbit2.

    orbit1 has to be within threshold of the radius band between the periapsis
    and apoapsis of orbit2 and within threshold of the orbital plane of orbit2.
    Radial orbits are not handled and yield no ranges.

    Args:
        orbit1: Orbit whose true anomaly ranges are computed
        orbit2: The other orbit
        threshold: Distance threshold
        tol: Tolerance for touching range endpoints

    Returns:
        RangePair (count 0, 1 or 2)
    """
    if orbit1.radial or orbit2.radial:
        return NO_RANGES

    if (orbit1.closed and orbit1.apoapsis <= orbit2.periapsis - threshold) or \
            (orbit2.closed and orbit2.apoapsis <= orbit1.periapsis - threshold):
        return NO_RANGES

    radius_ranges = _radius_ranges(orbit1, orbit2, threshold, tol)
    node_ranges = _node_ranges(orbit1, orbit2, threshold)
    if node_ranges.count == 0:
        return NO_RANGES
    return intersect_ranges(radius_ranges, node_ranges, orbit1.closed, tol=tol)


def sample_range(r: AngleRange, num: int) -> np.ndarray:
    """Evenly spaced true anomalies strictly inside a range."""
    return np.linspace(r.begin, r.end, num + 2)[1:-1]
