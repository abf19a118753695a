"""Core data models for room offset reconstruction."""

from .config import OffsetConfig
from .errors import (
    DegenerateSegmentError,
    NoBoundaryError,
    ParallelIntersectionFallback,
    RoomOffsetError,
    UnresolvedAdjacencyError,
)
from .model import Plan, Point, Segment, Space, SpaceDescriptor, Wall
from .topology import AdjacencyIndex, build_adjacency_index

__all__ = [
    "OffsetConfig",
    "Plan",
    "Point",
    "Segment",
    "Space",
    "SpaceDescriptor",
    "Wall",
    "AdjacencyIndex",
    "build_adjacency_index",
    "RoomOffsetError",
    "NoBoundaryError",
    "DegenerateSegmentError",
    "UnresolvedAdjacencyError",
    "ParallelIntersectionFallback",
]
