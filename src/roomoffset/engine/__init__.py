"""Engine module for room offset reconstruction.

This module provides the segment classifier and the API that runs the
offset pipeline for one space or a whole batch of spaces.
"""

from .api import (
    BatchResult,
    SeparationLine,
    SpaceFailure,
    SpaceResult,
    classify_and_offset_boundary,
    offset_space,
    run_batch,
    run_for_spaces,
    separation_lines,
)
from .classifier import Classification, SpaceContext, WallRole, classify, neighbour_role

__all__ = [
    "Classification",
    "SpaceContext",
    "WallRole",
    "classify",
    "neighbour_role",
    "BatchResult",
    "SeparationLine",
    "SpaceFailure",
    "SpaceResult",
    "classify_and_offset_boundary",
    "offset_space",
    "run_batch",
    "run_for_spaces",
    "separation_lines",
]
