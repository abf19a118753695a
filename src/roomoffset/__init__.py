"""Room Offset - offset room boundaries and effective areas of floor plan spaces."""

__version__ = "0.1.0"

from .core.config import OffsetConfig
from .core.model import Plan, Point, Segment, Space, SpaceDescriptor, Wall
from .engine.api import classify_and_offset_boundary, run_batch, run_for_spaces

__all__ = [
    "OffsetConfig",
    "Plan",
    "Point",
    "Segment",
    "Space",
    "SpaceDescriptor",
    "Wall",
    "classify_and_offset_boundary",
    "run_batch",
    "run_for_spaces",
]
