"""Heatmap settings: defaults, pyproject, YAML file, and environment overrides."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
import tomllib
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_HEIGHT, DEFAULT_NUM_SEGMENTS, DEFAULT_WIDTH


DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_CONFIG_FILE = "config/funscript_heatmap.yaml"

# Environment variable -> (section, key).
ENV_OVERRIDES = {
    "FUNSCRIPT_HEATMAP_WIDTH": ("heatmap", "width"),
    "FUNSCRIPT_HEATMAP_HEIGHT": ("heatmap", "height"),
    "FUNSCRIPT_HEATMAP_NUM_SEGMENTS": ("heatmap", "num_segments"),
    "FUNSCRIPT_HEATMAP_OUTPUT_DIR": ("paths", "output_dir"),
}


class HeatmapSettings(BaseModel):
    """Raster dimensions and time-bin count."""

    width: int = Field(default=DEFAULT_WIDTH, gt=0)
    height: int = Field(default=DEFAULT_HEIGHT, gt=0)
    num_segments: int = Field(default=DEFAULT_NUM_SEGMENTS, ge=2)


class PathSettings(BaseModel):
    output_dir: str = DEFAULT_OUTPUT_DIR

    @field_validator("output_dir")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("output_dir must not be empty")
        return cleaned


class FunscriptHeatmapConfig(BaseModel):
    """Typed configuration model for heatmap generation."""

    model_config = ConfigDict(extra="ignore")
    heatmap: HeatmapSettings = Field(default_factory=HeatmapSettings)
    paths: PathSettings = Field(default_factory=PathSettings)


def find_project_root(start: Path | None = None) -> Path:
    """Nearest directory holding `pyproject.toml`, else the starting directory."""
    cursor = (start or Path.cwd()).resolve()
    for candidate in (cursor, *cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return cursor


def load_config(
    project_root: Path | None = None,
    config_file: str | Path | None = None,
) -> FunscriptHeatmapConfig:
    """Merge config layers with OmegaConf and validate with Pydantic.

    Later layers win: built-in defaults, `[tool.funscript_heatmap]` in
    pyproject.toml, the YAML file, then `FUNSCRIPT_HEATMAP_*` variables.
    An explicit `config_file` must exist; the default one is optional.
    """
    root = project_root or find_project_root()
    merged = OmegaConf.merge(
        FunscriptHeatmapConfig().model_dump(),
        _pyproject_layer(root),
        _file_layer(root, config_file),
        _env_layer(),
    )
    try:
        return FunscriptHeatmapConfig.model_validate(OmegaConf.to_container(merged, resolve=True))
    except ValidationError as exc:
        raise ValueError(f"Invalid funscript_heatmap config: {exc}") from exc


@lru_cache(maxsize=1)
def default_project_config() -> FunscriptHeatmapConfig:
    """Cached config for the current project."""
    return load_config()


def clear_config_cache() -> None:
    default_project_config.cache_clear()


def resolve_output_dir(
    output_dir: str | Path | None = None,
    config: FunscriptHeatmapConfig | None = None,
) -> Path:
    """Explicit or configured output directory, relative paths anchored at the project root."""
    if output_dir is None:
        output_dir = (config or default_project_config()).paths.output_dir
    path = Path(output_dir).expanduser()
    if path.is_absolute():
        return path.resolve()
    return (find_project_root() / path).resolve()


def _pyproject_layer(project_root: Path) -> dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}
    with pyproject_path.open("rb") as handle:
        section = tomllib.load(handle).get("tool", {}).get("funscript_heatmap", {})
    return section if isinstance(section, dict) else {}


def _file_layer(project_root: Path, config_file: str | Path | None) -> dict[str, Any]:
    if config_file is None:
        cfg_path = project_root / DEFAULT_CONFIG_FILE
        if not cfg_path.exists():
            return {}
    else:
        cfg_path = Path(config_file)
        if not cfg_path.is_absolute():
            cfg_path = project_root / cfg_path
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")

    raw = OmegaConf.to_container(OmegaConf.load(cfg_path), resolve=True)
    return raw if isinstance(raw, dict) else {}


def _env_layer() -> dict[str, Any]:
    overrides: dict[str, dict[str, str]] = {}
    for env_name, (section, key) in ENV_OVERRIDES.items():
        if value := os.getenv(env_name):
            overrides.setdefault(section, {})[key] = value.strip()
    return overrides
