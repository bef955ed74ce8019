"""
Command-line interface for intercept prediction.

Usage:
    # Closest approaches of two orbits read from a JSON file
    python -m kepler_intercept pair.json --t0 0.0 --t1 10.0 --threshold 0.01

    # Crossing of a sphere of influence radius, with a separation dump
    python -m kepler_intercept pair.json --t1 10.0 --threshold 0.01 --target-distance 0.15 --dump separation.txt

The JSON file holds the gravitational parameter and the elements of both
orbits (angles in degrees):

    {
        "mu": 1.0,
        "orbit1": {"p": 1.0, "e": 0.0, "i": 0.0, "an": 0.0, "arg": 0.0, "periapsis_time": 0.0},
        "orbit2": {"p": 1.0, "e": 0.0, "i": 90.0, "an": 0.0, "arg": 0.0, "periapsis_time": 0.0}
    }
"""

import argparse
import logging
import math
import sys
from pathlib import Path

import pydantic

from kepler_intercept.config import (
    DEFAULT_MAX_INTERCEPTS,
    DEFAULT_MAX_STEPS,
    DEFAULT_TARGET_DISTANCE,
    make_intercept_config,
)
from kepler_intercept.diagnostics import dump_separation, sample_separation
from kepler_intercept.orbit import Orbit
from kepler_intercept.pipeline import find_intercepts


class ElementSet(pydantic.BaseModel):
    """Orbital elements of one orbit, angles in degrees."""
    p: float = pydantic.Field(gt=0.0)
    e: float = pydantic.Field(ge=0.0)
    i: float = 0.0
    an: float = 0.0
    arg: float = 0.0
    periapsis_time: float = 0.0

    def to_orbit(self, mu: float) -> Orbit:
        return Orbit.from_elements(mu, self.p, self.e, math.radians(self.i), math.radians(self.an),
                                   math.radians(self.arg), self.periapsis_time)


class OrbitPair(pydantic.BaseModel):
    mu: float = pydantic.Field(gt=0.0)
    orbit1: ElementSet
    orbit2: ElementSet


def load_orbit_pair(path: Path):
    """Read a JSON orbit pair file and build both orbits."""
    pair = OrbitPair.model_validate_json(Path(path).read_text(encoding="utf-8"))
    return pair.orbit1.to_orbit(pair.mu), pair.orbit2.to_orbit(pair.mu)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m kepler_intercept",
        description="Predict intercepts (close approaches) of two Keplerian orbits.",
    )
    parser.add_argument("pair", type=Path, help="JSON file with mu and the elements of both orbits.")
    parser.add_argument("--t0", type=float, default=0.0, help="Start of the search window.")
    parser.add_argument("--t1", type=float, required=True, help="End of the search window.")
    parser.add_argument("--threshold", type=float, required=True, help="Distance threshold.")
    parser.add_argument(
        "--target-distance",
        type=float,
        default=DEFAULT_TARGET_DISTANCE,
        help="Distance to cross, e.g. a sphere of influence radius (default: closest approach).",
    )
    parser.add_argument(
        "--max-intercepts",
        type=int,
        default=DEFAULT_MAX_INTERCEPTS,
        help=f"Maximum number of intercepts reported (default: {DEFAULT_MAX_INTERCEPTS}).",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=DEFAULT_MAX_STEPS,
        help=f"Maximum number of samples per search (default: {DEFAULT_MAX_STEPS}).",
    )
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Write sampled distance and closing speed over the window to this file.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        orbit1, orbit2 = load_orbit_pair(args.pair)
        config = make_intercept_config(
            args.threshold,
            args.target_distance,
            args.max_intercepts,
            args.max_steps,
        )
    except (OSError, pydantic.ValidationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    intercepts = find_intercepts(orbit1, orbit2, args.t0, args.t1, config)

    if args.dump is not None:
        dump_separation(args.dump, sample_separation(orbit1, orbit2, args.t0, args.t1))
        print(f"Saved separation to {args.dump}")

    print(f"{len(intercepts)} intercept(s) in ({args.t0}..{args.t1})")
    for k, intercept in enumerate(intercepts):
        print(f"  [{k}] t = {intercept.time:.9f}  distance = {intercept.distance:.9g}  "
              f"speed = {intercept.speed:.9g}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
