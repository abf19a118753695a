"""Core data models for room offset reconstruction.

This module defines the value types that flow through the pipeline
(points and boundary segments), the in-memory plan model used outside a
host application, and the collaborator protocols the engine consumes.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Optional, Protocol, Sequence, Set, Tuple

from shapely.geometry import MultiPoint

from .errors import UnresolvedAdjacencyError

EXTERIOR_TYPE_KEYWORD = "EXTERIOR"
EXTERIOR_FUNCTION = "exterior"
DEFAULT_WALL_THICKNESS = 0.5


@dataclass(frozen=True)
class Point:
    """Represents a point in model space.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point.
        z: The elevation of the point (held at the space's reference elevation).
    """

    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def dot(self, other: Point) -> float:
        """Planar dot product (z is ignored)."""
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Point:
        """Return the planar unit vector with the same direction.

        Raises:
            ZeroDivisionError: If the vector has zero length.
        """
        length = self.length()
        if length == 0.0:
            raise ZeroDivisionError("Cannot normalize a zero-length vector")
        return Point(self.x / length, self.y / length, 0.0)

    def midpoint(self, other: Point) -> Point:
        return Point(
            (self.x + other.x) / 2.0,
            (self.y + other.y) / 2.0,
            (self.z + other.z) / 2.0,
        )

    def with_z(self, z: float) -> Point:
        return replace(self, z=z)

    def is_close(self, other: Point, tolerance: float = 1e-9) -> bool:
        """Check if two points are equal within tolerance."""
        return (
            abs(self.x - other.x) <= tolerance
            and abs(self.y - other.y) <= tolerance
            and abs(self.z - other.z) <= tolerance
        )


ORIGIN = Point(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Segment:
    """Represents one boundary segment of a space.

    Attributes:
        start: Starting point of the segment.
        end: Ending point of the segment.
        element_id: ID of the bounding element (a wall), or None if the
            boundary is not backed by a resolvable element.
        index: Position of the segment within its boundary loop.
    """

    start: Point
    end: Point
    element_id: Optional[str]
    index: int

    @property
    def direction(self) -> Point:
        return self.end - self.start

    @property
    def length(self) -> float:
        return self.direction.length()

    @property
    def midpoint(self) -> Point:
        return self.start.midpoint(self.end)


@dataclass(frozen=True)
class SpaceDescriptor:
    """Lightweight identity of a space as seen by adjacency queries."""

    id: str
    name: str


Loop = Tuple[Segment, ...]


class BoundaryProvider(Protocol):
    """Supplies the ordered boundary loops of a space."""

    def boundary_loops(self, space_id: str) -> Optional[Sequence[Sequence[Segment]]]:
        """Return the boundary loops of a space, outer loop first, or None."""
        ...


class AdjacencyQuery(Protocol):
    """Read-only facts about bounding elements and their neighbours.

    Implementations must be safe for concurrent reads.
    """

    def spaces_sharing_element(self, element_id: str) -> Set[SpaceDescriptor]:
        """Return every space bounded by the element.

        Raises:
            UnresolvedAdjacencyError: If the element cannot be resolved.
        """
        ...

    def is_exterior_element(self, element_id: str) -> bool:
        ...

    def thickness_of(self, element_id: str) -> float:
        ...


class InteriorReferencePoint(Protocol):
    """Supplies a point known to lie on the interior side of a space."""

    def center_of(self, space_id: str) -> Point:
        ...


@dataclass(frozen=True)
class Wall:
    """Represents a bounding element of the plan.

    Attributes:
        id: Unique identifier for the wall.
        type_name: Name of the wall type (e.g. "Exterior - 8in Masonry").
        function: Wall function, "exterior", "interior" or None if unknown.
        thickness: Wall thickness in model units, or None if the type
            carries no width.
    """

    id: str
    type_name: str
    function: Optional[str]
    thickness: Optional[float]

    @property
    def is_exterior(self) -> bool:
        if EXTERIOR_TYPE_KEYWORD in (self.type_name or "").upper():
            return True
        return (self.function or "").lower() == EXTERIOR_FUNCTION


@dataclass(frozen=True)
class Space:
    """Represents a room of the plan.

    Attributes:
        id: Unique identifier for the space.
        name: Human-readable name of the space (e.g. "OFFICE 101").
        number: Room number as shown on drawings.
        level_elevation: Reference elevation applied to every boundary point.
        location: Explicit located point of the space, if any.
        loops: Boundary loops, outer loop first.
    """

    id: str
    name: str
    number: str
    level_elevation: float
    location: Optional[Point]
    loops: Tuple[Loop, ...]

    @property
    def descriptor(self) -> SpaceDescriptor:
        return SpaceDescriptor(id=self.id, name=self.name)


@dataclass(frozen=True)
class Plan:
    """Represents a complete set of spaces and their bounding walls.

    A plan implements BoundaryProvider, AdjacencyQuery and
    InteriorReferencePoint, so it can stand in for a live host model.

    Attributes:
        spaces: Mapping of space ID to Space objects.
        walls: Mapping of wall ID to Wall objects.
        default_thickness: Thickness used for walls whose type has no width.
    """

    spaces: Mapping[str, Space]
    walls: Mapping[str, Wall]
    default_thickness: float = DEFAULT_WALL_THICKNESS

    def boundary_loops(self, space_id: str) -> Optional[Sequence[Loop]]:
        space = self.spaces.get(space_id)
        if space is None:
            return None
        return space.loops

    def _wall(self, element_id: Optional[str]) -> Wall:
        if element_id is None or element_id not in self.walls:
            raise UnresolvedAdjacencyError(element_id)
        return self.walls[element_id]

    def spaces_sharing_element(self, element_id: str) -> Set[SpaceDescriptor]:
        # Linear scan; batches should go through core.topology.AdjacencyIndex.
        self._wall(element_id)
        sharing = set()
        for space in self.spaces.values():
            if any(
                segment.element_id == element_id
                for loop in space.loops
                for segment in loop
            ):
                sharing.add(space.descriptor)
        return sharing

    def is_exterior_element(self, element_id: str) -> bool:
        return self._wall(element_id).is_exterior

    def thickness_of(self, element_id: str) -> float:
        wall = self._wall(element_id)
        if wall.thickness is None:
            return self.default_thickness
        return wall.thickness

    def center_of(self, space_id: str) -> Point:
        """Return the interior reference point of a space.

        Priority: explicit located point, then the bounding-box midpoint of
        the boundary, then the origin.
        """
        space = self.spaces.get(space_id)
        if space is None:
            return ORIGIN
        if space.location is not None:
            return space.location.with_z(space.level_elevation)

        coords = [
            (point.x, point.y)
            for loop in space.loops
            for segment in loop
            for point in (segment.start, segment.end)
        ]
        if not coords:
            return ORIGIN

        min_x, min_y, max_x, max_y = MultiPoint(coords).bounds
        return Point((min_x + max_x) / 2.0, (min_y + max_y) / 2.0, space.level_elevation)
