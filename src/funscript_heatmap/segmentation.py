"""Time-bin segmentation of actions with sliding-window position spread."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .constants import BACKFILL_THRESHOLD_MS, DEFAULT_NUM_SEGMENTS, POSITION_WINDOW_SIZE

SEGMENT_COLUMNS = ("count", "intensity_sum", "y_top", "y_bottom", "last_action_at")


@dataclass(frozen=True)
class SegmentationConfig:
    """Segment binning settings."""

    num_segments: int = DEFAULT_NUM_SEGMENTS
    window_size: int = POSITION_WINDOW_SIZE
    backfill_threshold_ms: int = BACKFILL_THRESHOLD_MS


def build_segments(
    actions: pd.DataFrame,
    config: SegmentationConfig = SegmentationConfig(),
) -> pd.DataFrame:
    """Bin actions into `num_segments` time slices, then backfill empty ones."""
    binned = bin_actions(actions, num_segments=config.num_segments, window_size=config.window_size)
    return backfill_segments(binned, backfill_threshold_ms=config.backfill_threshold_ms)


def bin_actions(
    actions: pd.DataFrame,
    *,
    num_segments: int = DEFAULT_NUM_SEGMENTS,
    window_size: int = POSITION_WINDOW_SIZE,
) -> pd.DataFrame:
    """Assign each action to a time bin spanning [0, last action].

    Count and intensity accumulate per bin; the position spread and
    timestamp are overwritten by the last action landing in the bin.
    """
    if num_segments < 1:
        raise ValueError("num_segments must be >= 1")
    if window_size < 1:
        raise ValueError("window_size must be >= 1")

    count = np.zeros(num_segments, dtype=np.int64)
    intensity_sum = np.zeros(num_segments, dtype=np.int64)
    y_top = np.zeros(num_segments, dtype=float)
    y_bottom = np.zeros(num_segments, dtype=float)
    last_action_at = np.zeros(num_segments, dtype=np.int64)

    if actions.empty:
        return _segments_frame(count, intensity_sum, y_top, y_bottom, last_action_at)

    max_at = int(actions["at"].iloc[-1])
    window: deque[int] = deque(maxlen=window_size)

    for row in actions[["at", "pos", "intensity"]].itertuples(index=False):
        window.append(int(row.pos))
        average_top, average_bottom = _position_spread(window)

        segment = int(float(row.at) / float(max_at + 1) * num_segments)
        # Float rounding can land the last action one past the end.
        segment = min(segment, num_segments - 1)

        last_action_at[segment] = int(row.at)
        count[segment] += 1
        intensity_sum[segment] += int(row.intensity)
        y_top[segment] = average_top
        y_bottom[segment] = average_bottom

    return _segments_frame(count, intensity_sum, y_top, y_bottom, last_action_at)


def backfill_segments(
    segments: pd.DataFrame,
    *,
    backfill_threshold_ms: int = BACKFILL_THRESHOLD_MS,
) -> pd.DataFrame:
    """Copy the last populated segment into following empty segments.

    The gap is measured from `int(i / num_segments)`, which is always 0, so
    in practice every empty segment after a populated one is filled.
    """
    count = segments["count"].to_numpy(dtype=np.int64, copy=True)
    intensity_sum = segments["intensity_sum"].to_numpy(dtype=np.int64, copy=True)
    y_top = segments["y_top"].to_numpy(dtype=float, copy=True)
    y_bottom = segments["y_bottom"].to_numpy(dtype=float, copy=True)
    last_action_at = segments["last_action_at"].to_numpy(dtype=np.int64, copy=True)

    num_segments = len(count)
    if num_segments == 0:
        return segments.copy()

    last = (count[0], intensity_sum[0], y_top[0], y_bottom[0], last_action_at[0])
    for i in range(num_segments):
        segment_ts = int(i / num_segments)
        if count[i] == 0:
            if segment_ts - last[4] < backfill_threshold_ms:
                count[i], intensity_sum[i], y_top[i], y_bottom[i] = last[:4]
        else:
            last = (count[i], intensity_sum[i], y_top[i], y_bottom[i], last_action_at[i])

    return _segments_frame(count, intensity_sum, y_top, y_bottom, last_action_at)


def _position_spread(window: deque[int]) -> tuple[float, float]:
    ordered = sorted(window)
    half = len(ordered) // 2
    top_half = ordered[half:]
    bottom_half = ordered[:half]
    average_top = float(np.mean(top_half))
    average_bottom = float(np.mean(bottom_half)) if bottom_half else 0.0
    return average_top, average_bottom


def _segments_frame(
    count: np.ndarray,
    intensity_sum: np.ndarray,
    y_top: np.ndarray,
    y_bottom: np.ndarray,
    last_action_at: np.ndarray,
) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "count": count,
            "intensity_sum": intensity_sum,
            "y_top": y_top,
            "y_bottom": y_bottom,
            "last_action_at": last_action_at,
        },
        columns=list(SEGMENT_COLUMNS),
    )
