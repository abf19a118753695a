"""Polygon area utilities for offset boundaries.

This module computes polygon areas with the shoelace formula and compares
the original boundary of a space with its reconstructed offset boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from shapely.geometry import Polygon

from ..core.model import Point


@dataclass(frozen=True)
class AreaReport:
    """Original and effective area of a space.

    Attributes:
        original_area: Area enclosed by the original boundary.
        effective_area: Area enclosed by the reconstructed offset boundary.
        delta: effective_area - original_area.
    """

    original_area: float
    effective_area: float
    delta: float


def signed_area(points: Sequence[Point]) -> float:
    """Calculate the signed shoelace area of a closed polygon.

    Positive for counter-clockwise winding, negative for clockwise. Fewer
    than three points enclose no area.
    """
    count = len(points)
    if count < 3:
        return 0.0

    total = 0.0
    for i in range(count):
        p1 = points[i]
        p2 = points[(i + 1) % count]
        total += p1.x * p2.y - p2.x * p1.y

    return total / 2.0


def area(points: Sequence[Point]) -> float:
    """Calculate the absolute shoelace area of a closed polygon."""
    return abs(signed_area(points))


def evaluate(original: Sequence[Point], effective: Sequence[Point]) -> AreaReport:
    """Compare the original boundary area with the reconstructed one.

    Args:
        original: Vertices of the original boundary (segment start points).
        effective: Vertices of the reconstructed polygon.

    Returns:
        AreaReport with both areas and their signed difference.
    """
    original_area = area(original)
    effective_area = area(effective)
    return AreaReport(original_area, effective_area, effective_area - original_area)


def is_simple(points: Sequence[Point]) -> bool:
    """Check that the points form a valid, non self-intersecting polygon."""
    if len(points) < 3:
        return False
    return Polygon([(p.x, p.y) for p in points]).is_valid
