"""Geometry utilities for room offset reconstruction.

This module provides the perpendicular offsetting of boundary segments,
the reconstruction of a closed polygon from the offset lines, and the
shoelace area of original and reconstructed boundaries.
"""

from .offset import OffsetLine, project, project_loop
from .polygon import AreaReport, area, evaluate, is_simple, signed_area
from .reconstruct import ReconstructedPolygon, line_intersection, reconstruct

__all__ = [
    "OffsetLine",
    "project",
    "project_loop",
    "ReconstructedPolygon",
    "line_intersection",
    "reconstruct",
    "AreaReport",
    "area",
    "signed_area",
    "evaluate",
    "is_simple",
]
