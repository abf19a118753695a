"""Error kinds raised or recorded by the offset pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class RoomOffsetError(Exception):
    """Base class for errors raised by the offset pipeline."""

    pass


class NoBoundaryError(RoomOffsetError):
    """Raised when a space has no boundary loop, or an empty one."""

    def __init__(self, space_id: str):
        super().__init__(f"Space '{space_id}' has no boundary segments")
        self.space_id = space_id


class DegenerateSegmentError(RoomOffsetError):
    """Raised when a zero-length segment cannot be given a direction."""

    def __init__(self, segment_index: int):
        super().__init__(f"Segment {segment_index} has zero length")
        self.segment_index = segment_index


class UnresolvedAdjacencyError(RoomOffsetError):
    """Raised when a bounding element cannot be resolved to a known wall."""

    def __init__(self, element_id: Optional[str]):
        super().__init__(f"Boundary element '{element_id}' could not be resolved")
        self.element_id = element_id


@dataclass(frozen=True)
class ParallelIntersectionFallback:
    """Record of a vertex whose neighbouring offset lines were parallel.

    Not an exception: the reconstructor keeps the upstream line's end point
    as the vertex and records this entry.

    Attributes:
        vertex_index: Index of the affected vertex in the reconstructed polygon.
        previous_index: Index of the upstream offset line.
        next_index: Index of the downstream offset line.
        denominator: Cross product of the two direction vectors.
    """

    vertex_index: int
    previous_index: int
    next_index: int
    denominator: float
