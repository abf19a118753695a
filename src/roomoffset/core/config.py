"""Configuration for room offset reconstruction."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Tuple

# Defaults of the filled-region bridge
FILL_PATTERN_NAME = "Solid fill"
TRANSPARENCY = 50  # Percent, passed through to the renderer
HALLWAY_NAME_PATTERN = ("HALL", "CORRIDOR")
SAME_CATEGORY_NAME_PATTERN = ("OFFICE",)
ROOM_NAME_FILTER = "OFFICE"
DEFAULT_THICKNESS = 0.5  # Feet, used when a wall type carries no width
PARALLEL_TOLERANCE = 1e-4  # Same length units as the model
HALLWAY_OFFSET = 0.5  # Feet, separation lines move toward the room

_CAMEL_CASE_KEYS = {
    "fillPatternName": "fill_pattern_name",
    "transparency": "transparency_hint",
    "transparencyHint": "transparency_hint",
    "hallwayNamePattern": "hallway_name_pattern",
    "sameCategoryNamePattern": "same_category_name_pattern",
    "roomNameFilter": "room_name_filter",
    "defaultThickness": "default_thickness",
    "parallelTolerance": "parallel_tolerance",
}

_PATTERN_SEPARATOR = re.compile(r"[|,]")


def _as_pattern(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        parts = _PATTERN_SEPARATOR.split(value)
    else:
        parts = list(value)
    return tuple(str(part).strip().upper() for part in parts if str(part).strip())


@dataclass(frozen=True)
class OffsetConfig:
    """Typed options of an offset run.

    Attributes:
        fill_pattern_name: Fill pattern handed to the region renderer.
        transparency_hint: Transparency (0-100) handed to the region renderer.
        hallway_name_pattern: Name fragments identifying hallway spaces.
        same_category_name_pattern: Name fragments identifying spaces of the
            same broad category as the source space (demising neighbours).
        room_name_filter: Name fragment selecting spaces in a batch run.
        default_thickness: Thickness of walls whose type carries no width.
        parallel_tolerance: Cross-product magnitude below which two offset
            lines are treated as parallel.
    """

    fill_pattern_name: str = FILL_PATTERN_NAME
    transparency_hint: int = TRANSPARENCY
    hallway_name_pattern: Tuple[str, ...] = HALLWAY_NAME_PATTERN
    same_category_name_pattern: Tuple[str, ...] = SAME_CATEGORY_NAME_PATTERN
    room_name_filter: str = ROOM_NAME_FILTER
    default_thickness: float = DEFAULT_THICKNESS
    parallel_tolerance: float = PARALLEL_TOLERANCE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OffsetConfig":
        """Build a config from snake_case or camelCase keys.

        Unknown keys are ignored. Name patterns may be given as a list or as
        a single string separated by "|" or ",".

        Raises:
            ValueError: If a numeric option cannot be converted.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known or value is None:
                continue
            values[name] = value

        for name in ("hallway_name_pattern", "same_category_name_pattern"):
            if name in values:
                values[name] = _as_pattern(values[name])

        try:
            if "transparency_hint" in values:
                values["transparency_hint"] = int(values["transparency_hint"])
            for name in ("default_thickness", "parallel_tolerance"):
                if name in values:
                    values[name] = float(values[name])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid offset configuration: {e}") from e

        return cls(**values)


def matches_any(name: str, pattern: Tuple[str, ...]) -> bool:
    """Case-insensitive substring match of a name against a vocabulary."""
    if not name:
        return False
    upper = name.upper()
    return any(fragment.upper() in upper for fragment in pattern)
