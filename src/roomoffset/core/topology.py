"""Adjacency analysis for room offset reconstruction.

This module precomputes which spaces share each bounding element, so the
classifier can answer neighbour queries with a single lookup instead of
scanning every space for every segment.
"""

from __future__ import annotations

from typing import Dict, Set

import networkx as nx

from .errors import UnresolvedAdjacencyError
from .model import Plan, SpaceDescriptor


class AdjacencyIndex:
    """Element-to-space adjacency built once per batch.

    The index is a bipartite NetworkX graph whose nodes are elements
    (``kind="element"``) and spaces (``kind="space"``); an edge means the
    element bounds the space. Exterior flags and thicknesses are resolved
    up front, so the index is read-only after construction and safe for
    concurrent reads.
    """

    def __init__(
        self,
        graph: nx.Graph,
        exterior: Dict[str, bool],
        thickness: Dict[str, float],
    ):
        self.graph = graph
        self._exterior = exterior
        self._thickness = thickness

    def _check(self, element_id: str) -> None:
        if element_id is None or element_id not in self._thickness:
            raise UnresolvedAdjacencyError(element_id)

    def spaces_sharing_element(self, element_id: str) -> Set[SpaceDescriptor]:
        self._check(element_id)
        node = ("element", element_id)
        if node not in self.graph:
            return set()
        return {
            self.graph.nodes[neighbour]["descriptor"]
            for neighbour in self.graph.neighbors(node)
        }

    def is_exterior_element(self, element_id: str) -> bool:
        self._check(element_id)
        return self._exterior[element_id]

    def thickness_of(self, element_id: str) -> float:
        self._check(element_id)
        return self._thickness[element_id]


def build_adjacency_index(plan: Plan) -> AdjacencyIndex:
    """Build the element-to-space adjacency index of a plan.

    Segments whose element is missing or unknown to the plan are left out,
    so lookups for them raise UnresolvedAdjacencyError.

    Args:
        plan: Plan object containing spaces and walls.

    Returns:
        AdjacencyIndex answering AdjacencyQuery calls.
    """
    graph = nx.Graph()

    for wall_id in plan.walls:
        graph.add_node(("element", wall_id), kind="element")

    for space_id, space in plan.spaces.items():
        graph.add_node(("space", space_id), kind="space", descriptor=space.descriptor)
        for loop in space.loops:
            for segment in loop:
                if segment.element_id in plan.walls:
                    graph.add_edge(("element", segment.element_id), ("space", space_id))

    exterior = {wall_id: wall.is_exterior for wall_id, wall in plan.walls.items()}
    thickness = {wall_id: plan.thickness_of(wall_id) for wall_id in plan.walls}

    return AdjacencyIndex(graph, exterior, thickness)
