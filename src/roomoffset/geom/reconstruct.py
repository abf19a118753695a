"""Closed polygon reconstruction from offset lines.

Consecutive offset lines are intersected as infinite lines; each
intersection becomes one vertex of the reconstructed polygon. When two
consecutive lines are (near-)parallel the upstream line's end point is used
instead, so the polygon always has one vertex per line. Degenerate lines are
skipped when choosing the pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.config import PARALLEL_TOLERANCE
from ..core.errors import ParallelIntersectionFallback
from ..core.model import Point
from .offset import OffsetLine

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconstructedPolygon:
    """Ordered, implicitly closed vertex list of an offset boundary.

    Attributes:
        vertices: Polygon vertices; vertex i joins offset line i-1 to line i.
        fallbacks: Vertices that used the parallel-line fallback.
    """

    vertices: Tuple[Point, ...]
    fallbacks: Tuple[ParallelIntersectionFallback, ...] = ()

    def __len__(self) -> int:
        return len(self.vertices)

    def edges(self) -> List[Tuple[Point, Point]]:
        """Return the closing edge list (last vertex back to the first)."""
        count = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % count]) for i in range(count)]


def cross(a: Point, b: Point) -> float:
    """Planar cross product of two direction vectors."""
    return a.x * b.y - a.y * b.x


def line_intersection(
    first: OffsetLine, second: OffsetLine, tolerance: float = PARALLEL_TOLERANCE
) -> Optional[Point]:
    """Intersect the infinite lines through two offset lines.

    Args:
        first: The upstream line; the result takes its z-coordinate.
        second: The downstream line.
        tolerance: Denominator magnitude below which the lines are parallel.

    Returns:
        The intersection point, or None if the lines are (near-)parallel.
    """
    d1 = first.direction
    d2 = second.direction

    denominator = cross(d1, d2)
    if abs(denominator) < tolerance:
        return None

    offset = second.start - first.start
    t = (offset.x * d2.y - offset.y * d2.x) / denominator

    return Point(
        first.start.x + t * d1.x,
        first.start.y + t * d1.y,
        first.start.z,
    )


def _usable_line(offset_lines: Sequence[OffsetLine], index: int, step: int) -> int:
    """Walk from index in the given direction to the first non-degenerate line.

    Returns index unchanged when every line in the loop is degenerate.
    """
    count = len(offset_lines)
    for k in range(count):
        candidate = (index + k * step) % count
        if not offset_lines[candidate].degenerate:
            return candidate
    return index


def reconstruct(
    offset_lines: Sequence[OffsetLine], tolerance: float = PARALLEL_TOLERANCE
) -> ReconstructedPolygon:
    """Rebuild the closed polygon bounded by a loop of offset lines.

    Vertex i is the intersection of line i-1 and line i (vertex 0 pairs the
    last line with the first). Degenerate lines are skipped when pairing, so
    both vertices around a zero-length segment land on the corner formed by
    its nearest non-degenerate neighbours. Winding order follows the input;
    nothing is reversed or normalized.

    Args:
        offset_lines: Offset lines in boundary loop order.
        tolerance: Parallel tolerance passed to line_intersection.

    Returns:
        ReconstructedPolygon with exactly one vertex per line.
    """
    count = len(offset_lines)
    vertices = []
    fallbacks = []

    for i in range(count):
        previous_index = _usable_line(offset_lines, (i - 1) % count, -1)
        next_index = _usable_line(offset_lines, i, 1)
        previous = offset_lines[previous_index]
        current = offset_lines[next_index]

        vertex = line_intersection(previous, current, tolerance)
        if vertex is None:
            record = ParallelIntersectionFallback(
                vertex_index=i,
                previous_index=previous_index,
                next_index=next_index,
                denominator=cross(previous.direction, current.direction),
            )
            LOGGER.debug("Parallel offset lines, using end point: %s", record)
            fallbacks.append(record)
            vertex = previous.end

        vertices.append(vertex)

    return ReconstructedPolygon(tuple(vertices), tuple(fallbacks))
