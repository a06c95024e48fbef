"""Exception types raised by heatmap generation."""

from __future__ import annotations


class HeatmapError(Exception):
    """Base class for heatmap generation failures."""


class IOFailure(HeatmapError, OSError):
    """Reading the funscript or writing the heatmap failed."""


class MalformedInputError(HeatmapError, ValueError):
    """The funscript could not be parsed or has no `actions` field."""


class EmptyActionsError(HeatmapError, ValueError):
    """No valid actions remain after timestamp trimming."""
