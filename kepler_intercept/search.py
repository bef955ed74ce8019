"""
Adaptive search for the closest approach of two orbits within a time interval.

The search walks forward in time with a step bounded below by a minimum step
and above by the time needed to close the remaining distance at the maximum
relative speed, so the threshold band around the target distance can not be
stepped over. When the closing speed changes sign between two samples the
search steps back and halves the minimum step. Once the orbits are
approaching and within threshold of the target distance, a single linear
relative-motion step lands on the target distance (or the linear closest
approach).

The search is a state machine: ``search_step`` takes a ``SearchState`` to
the next one until the phase is CONVERGED or EXHAUSTED, or the step budget
runs out.
"""
import enum
import logging
import math
from dataclasses import dataclass, replace
from typing import NamedTuple, Optional

from .constants import EPSILON
from .intercept import Intercept, evaluate_intercept
from .math_utils import dot, sign, zero

logger = logging.getLogger(__name__)


class SearchPhase(enum.Enum):
    SEARCHING = "searching"
    REFINING = "refining"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class SearchProblem:
    """Constants of one search."""
    orbit1: object
    orbit2: object
    t0: float
    t1: float
    threshold: float
    target_distance: float
    max_steps: int
    vmax: float  # upper bound of the relative speed
    tol: float = EPSILON


@dataclass(frozen=True, slots=True)
class SearchState:
    time: float  # time of the next sample
    min_dt: float
    horizon: float
    furthest: float  # furthest time evaluated so far
    prev_time: float = math.nan
    prev_sign: int = 0
    prev_side: int = 0
    step: int = 0
    phase: SearchPhase = SearchPhase.SEARCHING
    sample: Optional[Intercept] = None

    @property
    def done(self) -> bool:
        return self.phase in (SearchPhase.CONVERGED, SearchPhase.EXHAUSTED)


class SearchResult(NamedTuple):
    intercept: Intercept
    consumed: float  # search may resume from here


def make_search_problem(orbit1, orbit2, t0: float, t1: float, threshold: float,
                        target_distance: float, max_steps: int, *, tol: float = EPSILON) -> SearchProblem:
    if not threshold > 0.0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    vmax = orbit1.periapsis_velocity + orbit2.periapsis_velocity
    return SearchProblem(orbit1=orbit1, orbit2=orbit2, t0=float(t0), t1=float(t1), threshold=float(threshold),
                         target_distance=float(target_distance), max_steps=int(max_steps),
                         vmax=float(vmax), tol=tol)


def initial_state(problem: SearchProblem) -> SearchState:
    min_dt = (problem.t1 - problem.t0) / max(1, problem.max_steps // 2)
    return SearchState(time=problem.t0, min_dt=min_dt, horizon=problem.t1, furthest=problem.t0)


def linear_step(sample: Intercept, target_distance: float) -> float:
    """
    Time for the linear relative motion to reach the target distance.

    Returns the smallest positive root of |dr + dv tau| = target_distance or,
    when that distance is never reached, the time of the linear closest
    approach. Zero or negative values mean no step forward is possible.
    """
    dr, dv = sample.relative_position, sample.relative_velocity
    a = dot(dv, dv)
    if a == 0.0:
        return 0.0
    b = dot(dr, dv)
    c = dot(dr, dr) - target_distance**2
    disc = b * b - a * c
    if disc < 0.0:
        return max(0.0, -b / a)
    root = math.sqrt(disc)
    taus = [tau for tau in ((-b - root) / a, (-b + root) / a) if tau > 0.0]
    return min(taus) if taus else 0.0


def search_step(problem: SearchProblem, state: SearchState) -> SearchState:
    """Evaluate the sample at state.time and decide the next state."""
    t = state.time
    sample = evaluate_intercept(problem.orbit1, problem.orbit2, t)
    furthest = max(state.furthest, t)
    step = state.step + 1

    target = problem.target_distance
    threshold = problem.threshold

    if state.phase is SearchPhase.REFINING:
        # keep whichever of the last two samples is closer to the target
        best = sample
        if state.sample is not None and abs(state.sample.distance - target) < abs(sample.distance - target):
            best = state.sample
        return replace(state, sample=best, furthest=furthest, step=step, phase=SearchPhase.CONVERGED)

    miss = abs(sample.distance - target)
    side = sign(sample.distance - target)
    sgn = sign(sample.speed) * side
    elapsed = t - state.prev_time

    if zero((sample.distance - max(0.0, target))**2 / threshold**2, problem.tol):
        return replace(state, sample=sample, furthest=furthest, step=step, phase=SearchPhase.CONVERGED)

    if sgn < 0 and miss < threshold:
        # approaching within threshold of the target distance
        tau = linear_step(sample, target)
        if not tau > 0.0:
            return replace(state, sample=sample, furthest=furthest, step=step, phase=SearchPhase.CONVERGED)
        return replace(state, sample=sample, furthest=furthest, step=step,
                       time=min(t + tau, problem.t1), phase=SearchPhase.REFINING)

    if sgn > 0 and state.prev_sign < 0 and \
            (elapsed * problem.vmax + threshold > miss or side != state.prev_side) and \
            elapsed > (problem.t1 - state.horizon) / max(1, problem.max_steps - state.step):
        # closest approach (or target crossing) stepped over, go back with a smaller step
        min_dt = 0.5 * elapsed
        return replace(state, sample=sample, furthest=furthest, step=step,
                       horizon=max(t, state.horizon), min_dt=min_dt,
                       time=state.prev_time + min_dt)

    if t >= problem.t1:
        return replace(state, sample=sample, furthest=furthest, step=step, phase=SearchPhase.EXHAUSTED)

    dt = max(state.min_dt, abs(miss - threshold) / problem.vmax)
    return replace(state, sample=sample, furthest=furthest, step=step,
                   prev_time=t, prev_sign=sgn, prev_side=side,
                   time=min(t + dt, problem.t1))


def intercept_search(orbit1, orbit2, t0: float, t1: float, threshold: float,
                     target_distance: float = 0.0, max_steps: int = 100, *,
                     tol: float = EPSILON) -> SearchResult:
    """
    Search (t0..t1) for the closest approach of the two orbits, or for the
    crossing of the target distance.

    The returned intercept is the last sample evaluated. It is within
    threshold of the target distance only if the search converged, callers
    have to check the distance themselves.

    Args:
        orbit1: First orbit
        orbit2: Second orbit
        t0: Start of the interval
        t1: End of the interval
        threshold: Distance threshold, must be positive
        target_distance: Distance to cross (0.0 for the closest approach)
        max_steps: Maximum number of samples evaluated
        tol: Tolerance of the convergence test

    Returns:
        SearchResult with the intercept and the time up to which the
        interval has been searched

    Raises:
        ValueError: If threshold is not positive
    """
    problem = make_search_problem(orbit1, orbit2, t0, t1, threshold, target_distance, max_steps, tol=tol)
    state = initial_state(problem)

    while state.step < max(1, max_steps):
        state = search_step(problem, state)
        if state.done:
            break

    logger.debug("search (%g..%g) %s after %d steps at t=%g, distance %g",
                 t0, t1, state.phase.value, state.step, state.sample.time, state.sample.distance)
    return SearchResult(intercept=state.sample, consumed=max(state.furthest, state.sample.time))
