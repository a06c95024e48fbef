"""End-to-end heatmap and interactive speed generation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np

from .config import FunscriptHeatmapConfig, default_project_config
from .constants import DEFAULT_HEIGHT, DEFAULT_NUM_SEGMENTS, DEFAULT_WIDTH
from .errors import EmptyActionsError
from .funscript import Script, load_funscript, parse_funscript
from .gradient import build_gradient_table
from .metrics import median_speed, update_intensity_and_speed
from .render import render_heatmap, write_heatmap
from .segmentation import SegmentationConfig, build_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatmapResult:
    """Outputs of a single generation."""

    image: np.ndarray
    interactive_speed: int
    script: Script


@dataclass(frozen=True)
class HeatmapGenerator:
    """Stateless generator: configuration only, each call works on its own data."""

    scene_duration_ms: int
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    num_segments: int = DEFAULT_NUM_SEGMENTS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.num_segments < 2:
            raise ValueError("num_segments must be >= 2")

    @classmethod
    def from_scene_duration(cls, scene_duration_s: float, **kwargs: int) -> HeatmapGenerator:
        return cls(scene_duration_ms=int(scene_duration_s * 1000), **kwargs)

    @classmethod
    def from_config(
        cls,
        scene_duration_s: float,
        config: FunscriptHeatmapConfig | None = None,
    ) -> HeatmapGenerator:
        """Build a generator with dimensions from project config."""
        settings = (config or default_project_config()).heatmap
        return cls.from_scene_duration(
            scene_duration_s,
            width=settings.width,
            height=settings.height,
            num_segments=settings.num_segments,
        )

    def generate(self, data: bytes | str, *, source: str = "<funscript>") -> HeatmapResult:
        """Parse funscript JSON and produce the heatmap raster and median speed."""
        script = parse_funscript(data, scene_duration_ms=self.scene_duration_ms, source=source)
        return self._generate_from_script(script, source)

    def generate_file(self, funscript_path: str | Path, heatmap_path: str | Path) -> HeatmapResult:
        """Read a funscript file, generate, and write the heatmap PNG."""
        script = load_funscript(funscript_path, scene_duration_ms=self.scene_duration_ms)
        result = self._generate_from_script(script, str(funscript_path))
        write_heatmap(result.image, heatmap_path)
        return result

    def _generate_from_script(self, script: Script, source: str) -> HeatmapResult:
        if script.is_empty:
            raise EmptyActionsError(f"no valid actions in funscript {source}")

        script.actions = update_intensity_and_speed(script.actions)

        segments = build_segments(script.actions, SegmentationConfig(num_segments=self.num_segments))
        gradient = build_gradient_table(segments)
        max_at = int(script.actions["at"].iloc[-1])
        image = render_heatmap(gradient, max_at, width=self.width, height=self.height)

        interactive_speed = median_speed(script.actions)
        script.average_speed = interactive_speed
        logger.debug(
            "Generated heatmap for %s: %d actions, interactive speed %d",
            source,
            len(script.actions),
            interactive_speed,
        )
        return HeatmapResult(image=image, interactive_speed=interactive_speed, script=script)
