"""Sampling, dumping and plotting of the separation of two orbits over time."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np


class SeparationSamples(NamedTuple):
    time: np.ndarray
    distance: np.ndarray
    speed: np.ndarray  # closing speed, negative when approaching


def sample_separation(orbit1, orbit2, t0: float, t1: float, num: int = 100) -> SeparationSamples:
    """Distance and closing speed of orbit2 relative to orbit1 at num evenly spaced times."""
    t = np.linspace(t0, t1, max(2, num))
    state1 = orbit1.get_state(t)
    state2 = orbit2.get_state(t)

    dr = state2.r - state1.r
    dv = state2.v - state1.v
    distance = np.linalg.norm(dr, axis=-1)
    radial = np.einsum('ij,ij->i', dr, dv)
    speed = np.divide(radial, distance, out=np.zeros_like(radial), where=distance > 0.0)
    return SeparationSamples(time=t, distance=distance, speed=speed)


def dump_separation(path: Path, samples: SeparationSamples) -> None:
    """Write time, distance and closing speed as tab separated columns."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(path, np.column_stack(samples), delimiter="\t", fmt="%.9f")


def plot_separation(
    samples: SeparationSamples,
    intercepts: Sequence = (),
    threshold: Optional[float] = None,
    target_distance: float = 0.0,
    save_path: Optional[Path] = None,
    show: bool = False,
):
    """
    Plot distance and closing speed against time.

    Intercepts are marked on the distance plot, the threshold band around the
    target distance is shaded when a threshold is given.
    """
    fig, (ax_dist, ax_speed) = plt.subplots(2, 1, sharex=True, figsize=(8, 6))
    ax_dist.plot(samples.time, samples.distance, color="tab:blue", linewidth=1.2)
    ax_dist.grid(True, linestyle="--", alpha=0.3)
    ax_dist.set_ylabel("distance")

    if threshold is not None:
        lo = max(0.0, target_distance - threshold)
        ax_dist.axhspan(lo, target_distance + threshold, color="tab:orange", alpha=0.2)
    if intercepts:
        ax_dist.scatter([i.time for i in intercepts], [i.distance for i in intercepts],
                        color="red", s=30, zorder=3)

    ax_speed.plot(samples.time, samples.speed, color="tab:green", linewidth=1.2)
    ax_speed.axhline(0.0, color="gray", linewidth=0.8)
    ax_speed.grid(True, linestyle="--", alpha=0.3)
    ax_speed.set_ylabel("closing speed")
    ax_speed.set_xlabel("time")

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    return fig
