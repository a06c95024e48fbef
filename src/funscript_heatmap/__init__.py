"""Funscript interactive heatmap package."""

from .colors import blend_hcl, blend_lab, blend_rgb, segment_color
from .config import (
    FunscriptHeatmapConfig,
    HeatmapSettings,
    PathSettings,
    clear_config_cache,
    default_project_config,
    find_project_root,
    load_config,
    resolve_output_dir,
)
from .constants import (
    BACKFILL_THRESHOLD_MS,
    DEFAULT_HEIGHT,
    DEFAULT_NUM_SEGMENTS,
    DEFAULT_WIDTH,
    POSITION_WINDOW_SIZE,
    TICK_INTERVAL_MS,
)
from .errors import EmptyActionsError, HeatmapError, IOFailure, MalformedInputError
from .funscript import Script, load_funscript, parse_funscript, trim_actions
from .gradient import GradientTable, build_gradient_table
from .metrics import median_speed, update_intensity_and_speed
from .pipeline import HeatmapGenerator, HeatmapResult
from .render import render_heatmap, write_heatmap
from .segmentation import (
    SegmentationConfig,
    backfill_segments,
    bin_actions,
    build_segments,
)

__all__ = [
    "BACKFILL_THRESHOLD_MS",
    "DEFAULT_HEIGHT",
    "DEFAULT_NUM_SEGMENTS",
    "DEFAULT_WIDTH",
    "EmptyActionsError",
    "FunscriptHeatmapConfig",
    "GradientTable",
    "HeatmapError",
    "HeatmapGenerator",
    "HeatmapResult",
    "HeatmapSettings",
    "IOFailure",
    "MalformedInputError",
    "POSITION_WINDOW_SIZE",
    "PathSettings",
    "Script",
    "SegmentationConfig",
    "TICK_INTERVAL_MS",
    "backfill_segments",
    "bin_actions",
    "blend_hcl",
    "blend_lab",
    "blend_rgb",
    "build_gradient_table",
    "build_segments",
    "clear_config_cache",
    "default_project_config",
    "find_project_root",
    "load_config",
    "load_funscript",
    "median_speed",
    "parse_funscript",
    "render_heatmap",
    "resolve_output_dir",
    "segment_color",
    "trim_actions",
    "update_intensity_and_speed",
    "write_heatmap",
]
