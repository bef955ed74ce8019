from __future__ import annotations

from dataclasses import dataclass

from kepler_intercept.constants import EPSILON

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_TARGET_DISTANCE = 0.0  # 0.0 searches for the closest approach
DEFAULT_MAX_INTERCEPTS = 4
DEFAULT_MAX_STEPS = 100  # samples per search
DEFAULT_TOLERANCE = EPSILON


@dataclass(frozen=True, slots=True)
class InterceptConfig:
    threshold: float
    target_distance: float = DEFAULT_TARGET_DISTANCE
    max_intercepts: int = DEFAULT_MAX_INTERCEPTS
    max_steps: int = DEFAULT_MAX_STEPS
    tol: float = DEFAULT_TOLERANCE


def make_intercept_config(
    threshold: float,
    target_distance: float | None = DEFAULT_TARGET_DISTANCE,
    max_intercepts: int = DEFAULT_MAX_INTERCEPTS,
    max_steps: int = DEFAULT_MAX_STEPS,
    *,
    tol: float | None = DEFAULT_TOLERANCE,
) -> InterceptConfig:
    """Normalize CLI-style inputs into an InterceptConfig."""
    if not threshold > 0.0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    target = DEFAULT_TARGET_DISTANCE if target_distance is None else float(target_distance)
    if target < 0.0:
        raise ValueError(f"target distance must be non-negative, got {target_distance}")
    if max_intercepts < 1:
        raise ValueError(f"max_intercepts must be at least 1, got {max_intercepts}")
    if max_steps < 2:
        raise ValueError(f"max_steps must be at least 2, got {max_steps}")
    tolerance = DEFAULT_TOLERANCE if tol is None or tol <= 0.0 else tol
    return InterceptConfig(
        threshold=float(threshold),
        target_distance=target,
        max_intercepts=int(max_intercepts),
        max_steps=int(max_steps),
        tol=tolerance,
    )
