from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from funscript_heatmap.colors import BACKGROUND, GREEN, YELLOW
from funscript_heatmap.gradient import build_gradient_table


def _segments() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "count": [1, 0, 2],
            "intensity_sum": [60, 0, 240],
            "y_top": [80.0, 0.0, 60.0],
            "y_bottom": [20.0, 0.0, 40.0],
            "last_action_at": [0, 0, 900],
        }
    )


def test_gradient_stops_from_segments() -> None:
    gradient = build_gradient_table(_segments())

    assert len(gradient) == 3
    assert gradient.positions.tolist() == [0.0, 0.5, 1.0]
    assert gradient.colors[0].tolist() == list(GREEN)
    assert gradient.colors[1].tolist() == list(BACKGROUND)
    assert gradient.colors[2].tolist() == list(YELLOW)
    assert gradient.y_ranges.tolist() == [[80.0, 20.0], [0.0, 0.0], [60.0, 40.0]]


def test_query_at_stop_positions_returns_unblended_colors() -> None:
    gradient = build_gradient_table(_segments())

    for i, position in enumerate(gradient.positions):
        assert gradient.interpolated_color(position).tolist() == gradient.colors[i].tolist()


def test_query_at_or_past_end_returns_last_stop() -> None:
    gradient = build_gradient_table(_segments())

    for t in (1.0, 1.5):
        assert gradient.interpolated_color(t).tolist() == list(YELLOW)
        assert gradient.y_range(t).tolist() == [60.0, 40.0]


def test_y_range_is_a_step_function_of_the_lower_stop() -> None:
    gradient = build_gradient_table(_segments())

    assert gradient.y_range(0.0).tolist() == [80.0, 20.0]
    assert gradient.y_range(0.49).tolist() == [80.0, 20.0]
    assert gradient.y_range(0.75).tolist() == [0.0, 0.0]


def test_between_stops_color_is_blended() -> None:
    gradient = build_gradient_table(_segments())
    mid = gradient.interpolated_color(0.25)

    assert not np.allclose(mid, GREEN)
    assert not np.allclose(mid, BACKGROUND)


def test_vector_queries_match_scalar_queries() -> None:
    gradient = build_gradient_table(_segments())
    xs = np.array([0.0, 0.1, 0.5, 0.9, 1.0])

    colors = gradient.interpolated_color(xs)
    ranges = gradient.y_range(xs)
    assert colors.shape == (5, 3)
    assert ranges.shape == (5, 2)
    for i, x in enumerate(xs):
        assert np.allclose(colors[i], gradient.interpolated_color(x))
        assert ranges[i].tolist() == gradient.y_range(x).tolist()


def test_gradient_needs_two_segments() -> None:
    with pytest.raises(ValueError):
        build_gradient_table(_segments().head(1))
