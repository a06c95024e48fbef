"""Per-action motion metrics and the interactive (median) speed."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .constants import MAX_SLOPE
from .errors import EmptyActionsError


def update_intensity_and_speed(actions: pd.DataFrame) -> pd.DataFrame:
    """Derive slope, intensity and speed from each action and its predecessor.

    Actions must already be sorted by `at`. The first action has no
    predecessor and keeps zeros for all three columns.
    """
    work = actions.copy()
    at = work["at"].to_numpy(dtype=float)
    pos = work["pos"].to_numpy(dtype=float)

    slope = np.zeros(len(work), dtype=float)
    intensity = np.zeros(len(work), dtype=np.int64)
    speed = np.zeros(len(work), dtype=float)

    if len(work) > 1:
        dt_ms = np.diff(at)
        dp = np.abs(np.diff(pos))
        with np.errstate(divide="ignore", invalid="ignore"):
            step_slope = np.clip(1.0 / (2.0 * dt_ms / 1000.0), 0.0, MAX_SLOPE)
            step_speed = np.where(dt_ms > 0, dp / dt_ms * 1000.0, 0.0)
        slope[1:] = step_slope
        intensity[1:] = np.floor(step_slope * dp).astype(np.int64)
        speed[1:] = step_speed

    work["slope"] = slope
    work["intensity"] = intensity
    work["speed"] = speed
    return work


def median_speed(actions: pd.DataFrame) -> int:
    """Median of per-action speeds, truncated to an int.

    The first action's zero speed is included, which pulls the median
    toward zero on short scripts.
    """
    speeds = np.sort(actions["speed"].to_numpy(dtype=float))
    if speeds.size == 0:
        raise EmptyActionsError("median speed needs at least one action")

    mid = speeds.size // 2
    if speeds.size % 2 != 0:
        return int(speeds[mid])
    return int((speeds[mid - 1] + speeds[mid]) / 2)
