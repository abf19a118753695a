"""Perpendicular offsetting of boundary segments.

This module moves each boundary segment perpendicular to its own direction,
away from the interior of its space, by the magnitude its classification
prescribes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..core.errors import DegenerateSegmentError
from ..core.model import Point, Segment

if TYPE_CHECKING:
    from ..engine.classifier import Classification

LOGGER = logging.getLogger(__name__)

MIN_SEGMENT_LENGTH = 1e-9  # Shorter segments have no usable direction


@dataclass(frozen=True)
class OffsetLine:
    """A boundary segment translated perpendicular to its direction.

    Attributes:
        start: Offset start point.
        end: Offset end point.
        segment_index: Index of the segment the line was derived from.
        magnitude: Distance the segment was moved away from the interior.
        degenerate: True if the source segment had zero length and the line
            collapses to a single point.
    """

    start: Point
    end: Point
    segment_index: int
    magnitude: float
    degenerate: bool = False

    @property
    def direction(self) -> Point:
        return self.end - self.start


def interior_normal(segment: Segment, interior_point: Point) -> Point:
    """Return the unit normal of a segment pointing toward the interior.

    Raises:
        DegenerateSegmentError: If the segment has zero length.
    """
    if segment.length < MIN_SEGMENT_LENGTH:
        raise DegenerateSegmentError(segment.index)

    direction = segment.direction.normalized()
    perpendicular = Point(-direction.y, direction.x, 0.0)

    # Flip so that the normal faces the interior reference point
    to_interior = interior_point - segment.midpoint
    if perpendicular.dot(to_interior) < 0:
        perpendicular = perpendicular * -1.0

    return perpendicular


def translate(segment: Segment, interior_point: Point, distance: float) -> tuple:
    """Move a segment by ``distance`` along its interior normal.

    Positive distances move toward the interior, negative ones away from it.

    Returns:
        Tuple of (start, end) of the translated segment.

    Raises:
        DegenerateSegmentError: If the segment has zero length.
    """
    vector = interior_normal(segment, interior_point) * distance
    return segment.start + vector, segment.end + vector


def project(
    segment: Segment, classification: Classification, interior_point: Point
) -> OffsetLine:
    """Offset one segment away from the interior by its classified magnitude.

    Args:
        segment: The boundary segment to offset.
        classification: Classification carrying the offset magnitude.
        interior_point: Point on the interior side of the space, shared by
            every segment of the loop.

    Returns:
        The offset line for the segment.

    Raises:
        DegenerateSegmentError: If the segment has zero length.
    """
    start, end = translate(segment, interior_point, -classification.magnitude)
    return OffsetLine(start, end, segment.index, classification.magnitude)


def project_loop(
    segments: Sequence[Segment],
    classifications: Sequence[Classification],
    interior_point: Point,
    elevation: Optional[float] = None,
) -> List[OffsetLine]:
    """Offset every segment of a loop, preserving loop order.

    When ``elevation`` is given, every point is forced to that z first. A
    zero-length segment yields a degenerate line collapsed onto its start
    point instead of aborting the loop, so the result always has one line
    per segment.

    Args:
        segments: Ordered boundary loop.
        classifications: One classification per segment, same order.
        interior_point: Interior reference point of the space.
        elevation: Reference elevation of the space, if any.

    Returns:
        List of offset lines, one per segment.
    """
    if len(segments) != len(classifications):
        raise ValueError(
            f"Expected one classification per segment, got {len(classifications)} "
            f"for {len(segments)} segments"
        )

    lines = []
    for segment, classification in zip(segments, classifications):
        if elevation is not None:
            segment = Segment(
                segment.start.with_z(elevation),
                segment.end.with_z(elevation),
                segment.element_id,
                segment.index,
            )

        try:
            lines.append(project(segment, classification, interior_point))
        except DegenerateSegmentError as e:
            LOGGER.debug("Keeping degenerate segment as a point: %s", e)
            lines.append(
                OffsetLine(
                    segment.start,
                    segment.start,
                    segment.index,
                    classification.magnitude,
                    degenerate=True,
                )
            )

    return lines
