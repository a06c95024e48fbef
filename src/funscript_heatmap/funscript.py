"""Funscript loading: parse, sort, and trim actions to the scene duration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import IOFailure, MalformedInputError

logger = logging.getLogger(__name__)

ACTION_COLUMNS = ("at", "pos", "slope", "intensity", "speed")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ActionRecord(BaseModel):
    """A single timed move as stored in the funscript document."""

    model_config = ConfigDict(extra="ignore", strict=True)

    at: int = Field(ge=INT64_MIN, le=INT64_MAX)
    pos: int = Field(ge=INT64_MIN, le=INT64_MAX)


class FunscriptDocument(BaseModel):
    """Raw funscript JSON document."""

    model_config = ConfigDict(extra="ignore")

    version: str = ""
    inverted: bool = False
    range: int = 0
    actions: list[ActionRecord]


@dataclass
class Script:
    """A loaded funscript with its actions as a DataFrame."""

    version: str
    inverted: bool
    range: int
    actions: pd.DataFrame
    average_speed: int = 0

    @property
    def is_empty(self) -> bool:
        return self.actions.empty


def parse_funscript(
    data: bytes | str,
    *,
    scene_duration_ms: int,
    source: str = "<funscript>",
) -> Script:
    """Parse funscript JSON, sort actions by time, and drop out-of-scene timestamps."""
    try:
        document = FunscriptDocument.model_validate_json(data)
    except ValidationError as exc:
        raise MalformedInputError(f"Malformed funscript {source}: {exc}") from exc

    actions = pd.DataFrame(
        {
            "at": pd.Series([a.at for a in document.actions], dtype="int64"),
            "pos": pd.Series([a.pos for a in document.actions], dtype="int64"),
        }
    )
    actions = actions.sort_values("at", kind="stable").reset_index(drop=True)
    actions = trim_actions(actions, scene_duration_ms=scene_duration_ms, source=source)

    for col in ("slope", "speed"):
        actions[col] = 0.0
    actions["intensity"] = 0
    actions = actions[list(ACTION_COLUMNS)]

    return Script(
        version=document.version,
        inverted=document.inverted,
        range=document.range,
        actions=actions,
    )


def load_funscript(path: str | Path, *, scene_duration_ms: int) -> Script:
    """Read a funscript file from disk and parse it."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise IOFailure(f"Could not read funscript {path}: {exc}") from exc
    return parse_funscript(data, scene_duration_ms=scene_duration_ms, source=str(path))


def trim_actions(
    actions: pd.DataFrame, *, scene_duration_ms: int, source: str = "<funscript>"
) -> pd.DataFrame:
    """Keep actions with 0 <= at < scene_duration_ms, warning once on the first bad one."""
    valid = (actions["at"] >= 0) & (actions["at"] < scene_duration_ms)
    if not valid.all():
        first_bad = int(actions.loc[~valid, "at"].iloc[0])
        logger.warning(
            "Invalid timestamp %d in %s: subsequent invalid timestamps will not be logged",
            first_bad,
            source,
        )
    return actions.loc[valid].reset_index(drop=True)
