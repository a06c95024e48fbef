"""Rasterize a gradient table into an RGBA heatmap strip and encode it as PNG."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
import numpy as np

from .colors import to_rgba8
from .constants import COLOR_TICK, DEFAULT_HEIGHT, DEFAULT_WIDTH, TICK_INTERVAL_MS
from .errors import IOFailure
from .gradient import GradientTable


def render_heatmap(
    gradient: GradientTable,
    max_at: int,
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> np.ndarray:
    """Paint one vertical color band per column, then overlay 10-minute ticks.

    Returns a `height x width x 4` uint8 array; pixels outside the bands stay
    fully transparent.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")

    x_pos = np.arange(width, dtype=float) / width
    column_rgba = to_rgba8(gradient.interpolated_color(x_pos))
    y_ranges = gradient.y_range(x_pos)

    top = np.trunc(y_ranges[:, 0] / 100.0 * height).astype(np.int64)
    bottom = np.trunc(y_ranges[:, 1] / 100.0 * height).astype(np.int64)
    start = np.clip(np.minimum(height - top, height - bottom), 0, height)
    stop = np.clip(np.maximum(height - top, height - bottom), 0, height)

    rows = np.arange(height)[:, np.newaxis]
    band = (rows >= start) & (rows < stop)

    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[band] = np.broadcast_to(column_rgba, (height, width, 4))[band]

    _draw_ticks(image, max_at)
    return image


def write_heatmap(image: np.ndarray, path: str | Path) -> Path:
    """Encode the raster as PNG at `path`."""
    path = Path(path)
    try:
        plt.imsave(path, image, format="png")
    except OSError as exc:
        raise IOFailure(f"Could not write heatmap {path}: {exc}") from exc
    return path


def _draw_ticks(image: np.ndarray, max_at: int) -> None:
    height, width = image.shape[:2]
    tick_rgba = to_rgba8(to_rgb(COLOR_TICK))

    ts = TICK_INTERVAL_MS
    while ts < max_at:
        x = int(ts / max_at * width)
        image[height // 2 : height, max(x - 1, 0) : min(x + 1, width)] = tick_rgba
        ts += TICK_INTERVAL_MS
