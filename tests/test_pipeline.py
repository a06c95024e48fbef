from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from funscript_heatmap.config import FunscriptHeatmapConfig, HeatmapSettings
from funscript_heatmap.errors import EmptyActionsError, IOFailure, MalformedInputError
from funscript_heatmap.pipeline import HeatmapGenerator


def _funscript(actions: list[dict[str, int]]) -> str:
    return json.dumps({"version": "1.0", "inverted": False, "range": 100, "actions": actions})


STROKES = _funscript([{"at": 0, "pos": 0}, {"at": 1000, "pos": 100}, {"at": 2000, "pos": 0}])


def test_generate_end_to_end() -> None:
    result = HeatmapGenerator(scene_duration_ms=3000).generate(STROKES)

    assert result.image.shape == (60, 1280, 4)
    assert result.image.dtype == np.uint8
    assert result.interactive_speed == 100
    assert result.script.average_speed == 100
    assert result.script.actions["intensity"].tolist() == [0, 50, 50]


def test_generate_paints_band_after_first_stroke() -> None:
    image = HeatmapGenerator(scene_duration_ms=3000).generate(STROKES).image

    # Early bins carry the first action's zero spread.
    assert not image[:, 10].any()
    # Middle bins are backfilled from the full 0-100 stroke.
    assert (image[:, 1000, 3] == 255).all()


def test_from_scene_duration_converts_seconds() -> None:
    generator = HeatmapGenerator.from_scene_duration(2.5)
    assert generator.scene_duration_ms == 2500
    assert (generator.width, generator.height, generator.num_segments) == (1280, 60, 600)


def test_from_config_uses_heatmap_settings() -> None:
    config = FunscriptHeatmapConfig(heatmap=HeatmapSettings(width=200, height=20, num_segments=50))
    generator = HeatmapGenerator.from_config(3.0, config)

    result = generator.generate(STROKES)
    assert result.image.shape == (20, 200, 4)
    assert result.interactive_speed == 100


def test_generate_without_valid_actions_fails() -> None:
    generator = HeatmapGenerator(scene_duration_ms=1000)

    with pytest.raises(EmptyActionsError):
        generator.generate(_funscript([]))
    with pytest.raises(EmptyActionsError):
        generator.generate(_funscript([{"at": 1000, "pos": 10}, {"at": -1, "pos": 5}]))


def test_generate_missing_actions_is_malformed() -> None:
    with pytest.raises(MalformedInputError):
        HeatmapGenerator(scene_duration_ms=1000).generate('{"version": "1.0"}')


def test_single_action_script() -> None:
    result = HeatmapGenerator(scene_duration_ms=1000, width=64, height=8).generate(
        _funscript([{"at": 0, "pos": 80}])
    )
    assert result.interactive_speed == 0
    assert result.image.shape == (8, 64, 4)


def test_generator_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError):
        HeatmapGenerator(scene_duration_ms=1000, num_segments=1)
    with pytest.raises(ValueError):
        HeatmapGenerator(scene_duration_ms=1000, width=0)


def test_generate_file_writes_png(tmp_path: Path) -> None:
    source = tmp_path / "scene.funscript"
    source.write_text(STROKES, encoding="utf-8")
    target = tmp_path / "scene.png"

    result = HeatmapGenerator(scene_duration_ms=3000).generate_file(source, target)

    assert result.interactive_speed == 100
    assert target.read_bytes()[:4] == b"\x89PNG"


def test_generate_file_does_not_write_on_failure(tmp_path: Path) -> None:
    source = tmp_path / "empty.funscript"
    source.write_text(_funscript([]), encoding="utf-8")
    target = tmp_path / "empty.png"

    with pytest.raises(EmptyActionsError):
        HeatmapGenerator(scene_duration_ms=3000).generate_file(source, target)
    assert not target.exists()


def test_generate_file_missing_input(tmp_path: Path) -> None:
    with pytest.raises(IOFailure):
        HeatmapGenerator(scene_duration_ms=3000).generate_file(
            tmp_path / "nope.funscript", tmp_path / "nope.png"
        )
