"""Boundary segment classification.

Each segment of a space's boundary is assigned a role from the facts known
about its bounding element (exterior flag, thickness, neighbouring spaces)
and the offset magnitude that role implies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..core.config import OffsetConfig, matches_any
from ..core.errors import UnresolvedAdjacencyError
from ..core.model import AdjacencyQuery, Segment, SpaceDescriptor

LOGGER = logging.getLogger(__name__)


class WallRole(Enum):
    """Adjacency role of a boundary segment."""

    EXTERIOR = "Exterior"
    HALLWAY = "Hallway"
    DEMISING = "Demising"
    UNCLASSIFIED = "Unclassified"


@dataclass(frozen=True)
class Classification:
    """Role of a segment plus the offset magnitude to apply.

    Attributes:
        role: Adjacency role of the segment.
        magnitude: Distance the segment is moved away from the interior.
        element_id: ID of the bounding element, if any.
        thickness: Thickness of the bounding element, or None if unresolved.
    """

    role: WallRole
    magnitude: float
    element_id: Optional[str] = None
    thickness: Optional[float] = None


@dataclass(frozen=True)
class SpaceContext:
    """Everything the classifier needs to know about the enclosing space.

    Attributes:
        space: Identity of the space whose boundary is classified.
        adjacency: Read-only adjacency collaborator.
        config: Name vocabularies used for hallway and demising detection.
    """

    space: SpaceDescriptor
    adjacency: AdjacencyQuery
    config: OffsetConfig = field(default_factory=OffsetConfig)


def _neighbours(segment: Segment, context: SpaceContext) -> set:
    sharing = context.adjacency.spaces_sharing_element(segment.element_id)
    return {other for other in sharing if other.id != context.space.id}


def neighbour_role(segment: Segment, context: SpaceContext) -> Optional[WallRole]:
    """Role implied by the spaces on the other side of a segment's element.

    Only the hallway and demising rules are applied; the exterior flag of the
    element is not consulted.

    Raises:
        UnresolvedAdjacencyError: If the segment has no resolvable element.
    """
    if segment.element_id is None:
        raise UnresolvedAdjacencyError(segment.element_id)

    config = context.config
    neighbours = _neighbours(segment, context)

    if any(matches_any(other.name, config.hallway_name_pattern) for other in neighbours):
        return WallRole.HALLWAY

    categories = tuple(
        fragment
        for fragment in config.same_category_name_pattern
        if matches_any(context.space.name, (fragment,))
    )
    if categories and any(matches_any(other.name, categories) for other in neighbours):
        return WallRole.DEMISING

    return None


def classify(segment: Segment, context: SpaceContext) -> Classification:
    """Classify one boundary segment.

    Rules, in priority order:
    1. exterior element -> Exterior, offset by the element thickness
    2. a neighbour named like a hallway -> Hallway, offset by the thickness
    3. a neighbour matching the same category fragment as the space
       -> Demising, no offset
    4. anything else -> Unclassified, no offset

    A segment whose element cannot be resolved is Unclassified.

    Args:
        segment: The boundary segment to classify.
        context: The enclosing space and its adjacency collaborator.

    Returns:
        Classification of the segment.
    """
    element_id = segment.element_id
    adjacency = context.adjacency

    try:
        if element_id is None:
            raise UnresolvedAdjacencyError(element_id)

        thickness = adjacency.thickness_of(element_id)

        if adjacency.is_exterior_element(element_id):
            return Classification(WallRole.EXTERIOR, thickness, element_id, thickness)

        role = neighbour_role(segment, context)

        if role is WallRole.HALLWAY:
            return Classification(WallRole.HALLWAY, thickness, element_id, thickness)

        if role is WallRole.DEMISING:
            return Classification(WallRole.DEMISING, 0.0, element_id, thickness)

        return Classification(WallRole.UNCLASSIFIED, 0.0, element_id, thickness)

    except UnresolvedAdjacencyError as e:
        LOGGER.debug("Segment %d of %s left unclassified: %s", segment.index, context.space.id, e)
        return Classification(WallRole.UNCLASSIFIED, 0.0, element_id, None)
