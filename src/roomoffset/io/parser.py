"""Parser for plan JSON files.

This module provides functionality to parse JSON files containing spaces,
their boundary loops and the walls bounding them, and to write offset
results back to JSON for the external region renderer.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import DEFAULT_THICKNESS, OffsetConfig
from ..core.model import Plan, Point, Segment, Space, Wall
from ..engine.api import BatchResult, SeparationLine, SpaceFailure, SpaceResult


def _parse_point(value: Any, elevation: float) -> Point:
    """Parse a point given as [x, y] or [x, y, z].

    The z-coordinate is always replaced by the space's level elevation.

    Raises:
        ValueError: If the point is not a list of 2 or 3 numbers.
    """
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise ValueError(f"Invalid point: {value!r}")
    x, y = float(value[0]), float(value[1])
    return Point(x, y, elevation)


def _parse_loop(loop_data: list, elevation: float) -> tuple:
    segments = []
    for index, segment_data in enumerate(loop_data):
        segments.append(
            Segment(
                start=_parse_point(segment_data["start"], elevation),
                end=_parse_point(segment_data["end"], elevation),
                element_id=segment_data.get("element"),
                index=index,
            )
        )
    return tuple(segments)


def parse_plan(data: Dict[str, Any], default_thickness: float = DEFAULT_THICKNESS) -> Plan:
    """Build a Plan from already decoded JSON data.

    Raises:
        ValueError: If a wall or space entry is malformed.
    """
    walls = {}
    for wall_id, wall_data in data.get("walls", {}).items():
        try:
            thickness = wall_data.get("thickness")
            walls[wall_id] = Wall(
                id=wall_id,
                type_name=wall_data.get("type", ""),
                function=wall_data.get("function"),
                thickness=float(thickness) if thickness is not None else None,
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid wall data for {wall_id}: {e}") from e

    spaces = {}
    for space_id, space_data in data.get("spaces", {}).items():
        try:
            elevation = float(space_data.get("level_elevation", 0.0))

            location = space_data.get("location")
            if location is not None:
                location = _parse_point(location, elevation)

            loops = tuple(
                _parse_loop(loop_data, elevation)
                for loop_data in space_data.get("loops", [])
            )

            spaces[space_id] = Space(
                id=space_id,
                name=space_data.get("name", space_id),
                number=str(space_data.get("number", "")),
                level_elevation=elevation,
                location=location,
                loops=loops,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid space data for {space_id}: {e}") from e

    return Plan(spaces=spaces, walls=walls, default_thickness=default_thickness)


def load_plan(path: str, default_thickness: float = DEFAULT_THICKNESS) -> Plan:
    """Load a plan from a JSON file.

    Args:
        path: Path to the JSON file containing plan data.
        default_thickness: Thickness of walls whose type carries no width.

    Returns:
        Plan object representing the spaces and walls.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        data = json.load(f)

    return parse_plan(data, default_thickness)


def load_config(path: Optional[str]) -> OffsetConfig:
    """Load an offset configuration JSON file, or the defaults if no path."""
    if path is None:
        return OffsetConfig()

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        return OffsetConfig.from_dict(json.load(f))


def _point_to_list(point: Point) -> list:
    return [point.x, point.y, point.z]


def result_to_dict(result: SpaceResult) -> Dict[str, Any]:
    """Convert a space result to a JSON-serializable dictionary."""
    return {
        "success": True,
        "space_id": result.space.id,
        "space_name": result.space.name,
        "original_area": result.report.original_area,
        "effective_area": result.report.effective_area,
        "area_difference": result.report.delta,
        "is_simple": result.is_simple,
        "offsets": [
            {
                "index": line.segment_index,
                "element_id": classification.element_id,
                "classification": classification.role.value,
                "wall_thickness": classification.thickness,
                "offset_distance": classification.magnitude,
                "degenerate": line.degenerate,
            }
            for classification, line in zip(result.classifications, result.offset_lines)
        ],
        "polygon": [_point_to_list(vertex) for vertex in result.polygon.vertices],
        "parallel_fallbacks": [fallback.vertex_index for fallback in result.polygon.fallbacks],
    }


def failure_to_dict(failure: SpaceFailure) -> Dict[str, Any]:
    return {
        "success": False,
        "space_id": failure.space.id,
        "space_name": failure.space.name,
        "error": failure.error,
        "error_kind": failure.kind,
    }


def separation_line_to_dict(line: SeparationLine) -> Dict[str, Any]:
    return {
        "element_id": line.element_id,
        "classification": line.role.value,
        "offset_distance": line.offset,
        "length": line.length,
        "start": _point_to_list(line.start),
        "end": _point_to_list(line.end),
    }


def batch_to_dict(batch: BatchResult, config: OffsetConfig) -> Dict[str, Any]:
    """Convert a batch result to a dictionary, successes first."""
    results = [result_to_dict(result) for result in batch.successes]
    results.extend(failure_to_dict(failure) for failure in batch.failures)
    return {
        "total_rooms": batch.total,
        "success_count": len(batch.successes),
        "fail_count": len(batch.failures),
        "fill_pattern_name": config.fill_pattern_name,
        "transparency": config.transparency_hint,
        "results": results,
    }


def save_results(data: Dict[str, Any], output_path: str) -> None:
    """Save a result dictionary to a JSON file.

    Args:
        data: Dictionary produced by result_to_dict or batch_to_dict.
        output_path: Path where to save the JSON file.
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

