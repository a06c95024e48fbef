"""Gradient table built from segments and queried per heatmap column."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from .colors import blend_hcl, segment_color


@dataclass(frozen=True)
class GradientTable:
    """Ordered color stops spanning positions 0..1."""

    positions: np.ndarray
    colors: np.ndarray
    y_ranges: np.ndarray

    def __len__(self) -> int:
        return len(self.positions)

    def interpolated_color(self, t: float | np.ndarray) -> np.ndarray:
        """HCL blend between the enclosing stops; the last stop at or past its position."""
        t = np.asarray(t, dtype=float)
        lower, fraction, past_end = self._locate(t)
        blended = blend_hcl(self.colors[lower], self.colors[lower + 1], fraction)
        return np.where(past_end[..., np.newaxis], self.colors[-1], blended)

    def y_range(self, t: float | np.ndarray) -> np.ndarray:
        """Lower enclosing stop's (top, bottom) range; not interpolated."""
        t = np.asarray(t, dtype=float)
        lower, _, past_end = self._locate(t)
        return np.where(past_end[..., np.newaxis], self.y_ranges[-1], self.y_ranges[lower])

    def _locate(self, t: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        positions = self.positions
        past_end = (t >= positions[-1]) | (t < positions[0])
        lower = np.clip(np.searchsorted(positions, t, side="right") - 1, 0, len(positions) - 2)
        span = positions[lower + 1] - positions[lower]
        fraction = np.clip((t - positions[lower]) / span, 0.0, 1.0)
        return lower, fraction, past_end


def build_gradient_table(segments: pd.DataFrame) -> GradientTable:
    """One stop per segment, colored by the segment's mean intensity."""
    num_segments = len(segments)
    if num_segments < 2:
        raise ValueError("gradient table needs at least two segments")

    count = segments["count"].to_numpy(dtype=np.int64)
    intensity_sum = segments["intensity_sum"].to_numpy(dtype=float)

    colors = np.empty((num_segments, 3), dtype=float)
    for i in range(num_segments):
        mean_intensity = intensity_sum[i] / count[i] if count[i] > 0 else 0.0
        colors[i] = segment_color(float(mean_intensity))

    return GradientTable(
        positions=np.arange(num_segments, dtype=float) / (num_segments - 1),
        colors=colors,
        y_ranges=segments[["y_top", "y_bottom"]].to_numpy(dtype=float),
    )
