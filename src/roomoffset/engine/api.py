"""Core API for room offset reconstruction.

This module runs the single-space pipeline (classify, offset, reconstruct,
evaluate) and the batch orchestration over many spaces, and derives the
room separation lines used to pull hallway boundaries into a room.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, Union

from ..core.config import HALLWAY_OFFSET, OffsetConfig, matches_any
from ..core.errors import DegenerateSegmentError, NoBoundaryError, UnresolvedAdjacencyError
from ..core.model import (
    AdjacencyQuery,
    BoundaryProvider,
    InteriorReferencePoint,
    Plan,
    Point,
    Segment,
    SpaceDescriptor,
)
from ..core.topology import build_adjacency_index
from ..geom.offset import OffsetLine, project_loop, translate
from ..geom.polygon import AreaReport, evaluate, is_simple
from ..geom.reconstruct import ReconstructedPolygon, reconstruct
from .classifier import Classification, SpaceContext, WallRole, classify, neighbour_role

LOGGER = logging.getLogger(__name__)


class SpaceSource(BoundaryProvider, InteriorReferencePoint, Protocol):
    """A collaborator supplying both boundary loops and interior points."""


SpaceFilter = Union[str, Callable[[SpaceDescriptor], bool], None]


@dataclass(frozen=True)
class SpaceResult:
    """Outcome of the offset pipeline for one space.

    Attributes:
        space: The processed space.
        classifications: One classification per boundary segment.
        offset_lines: One offset line per boundary segment.
        polygon: The reconstructed offset boundary.
        report: Original and effective area.
        is_simple: Whether the reconstructed polygon is non self-intersecting.
    """

    space: SpaceDescriptor
    classifications: Tuple[Classification, ...]
    offset_lines: Tuple[OffsetLine, ...]
    polygon: ReconstructedPolygon
    report: AreaReport
    is_simple: bool


@dataclass(frozen=True)
class SpaceFailure:
    """A space the batch could not process."""

    space: SpaceDescriptor
    error: str
    kind: str


@dataclass
class BatchResult:
    """Per-space results of a batch run, in input order."""

    successes: List[SpaceResult] = field(default_factory=list)
    failures: List[SpaceFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successes) + len(self.failures)


@dataclass(frozen=True)
class SeparationLine:
    """A boundary segment moved toward the interior of its room.

    Attributes:
        start: Start point of the separation line.
        end: End point of the separation line.
        element_id: ID of the wall the line was derived from.
        role: Classification role of the wall.
        offset: Distance moved toward the interior.
        length: Length of the line.
    """

    start: Point
    end: Point
    element_id: Optional[str]
    role: WallRole
    offset: float
    length: float


def _outer_loop(boundaries: BoundaryProvider, space_id: str) -> Sequence[Segment]:
    loops = boundaries.boundary_loops(space_id)
    if not loops or not loops[0]:
        raise NoBoundaryError(space_id)
    return loops[0]


def offset_space(
    space: SpaceDescriptor,
    loop: Sequence[Segment],
    adjacency: AdjacencyQuery,
    interior_point: Point,
    config: Optional[OffsetConfig] = None,
) -> SpaceResult:
    """Run classify, offset, reconstruct and evaluate on one boundary loop.

    All points are held at the elevation of ``interior_point``.

    Args:
        space: The space the loop bounds.
        loop: The ordered outer boundary loop.
        adjacency: Adjacency collaborator used for classification.
        interior_point: Interior reference point of the space.
        config: Offset configuration.

    Returns:
        SpaceResult for the space.

    Raises:
        NoBoundaryError: If the loop is empty.
    """
    if not loop:
        raise NoBoundaryError(space.id)
    if config is None:
        config = OffsetConfig()

    context = SpaceContext(space, adjacency, config)
    classifications = tuple(classify(segment, context) for segment in loop)

    lines = project_loop(loop, classifications, interior_point, interior_point.z)
    polygon = reconstruct(lines, config.parallel_tolerance)

    original = [segment.start.with_z(interior_point.z) for segment in loop]
    report = evaluate(original, polygon.vertices)

    return SpaceResult(
        space=space,
        classifications=classifications,
        offset_lines=tuple(lines),
        polygon=polygon,
        report=report,
        is_simple=is_simple(polygon.vertices),
    )


def classify_and_offset_boundary(
    plan: Plan,
    space_id: str,
    config: Optional[OffsetConfig] = None,
    adjacency: Optional[AdjacencyQuery] = None,
) -> SpaceResult:
    """Compute the offset boundary and area report of one space.

    Args:
        plan: Plan supplying boundaries, adjacency and interior points.
        space_id: ID of the space to process.
        config: Offset configuration.
        adjacency: Precomputed adjacency index; the plan itself by default.

    Returns:
        SpaceResult for the space.

    Raises:
        KeyError: If the space is not part of the plan.
        NoBoundaryError: If the space has no boundary loop.
    """
    if space_id not in plan.spaces:
        raise KeyError(f"Space '{space_id}' does not exist")

    space = plan.spaces[space_id]
    loop = _outer_loop(plan, space_id)
    return offset_space(
        space.descriptor,
        loop,
        adjacency if adjacency is not None else plan,
        plan.center_of(space_id),
        config,
    )


def _run_one(
    space: SpaceDescriptor,
    source: SpaceSource,
    adjacency: AdjacencyQuery,
    config: OffsetConfig,
) -> Union[SpaceResult, SpaceFailure]:
    try:
        loop = _outer_loop(source, space.id)
        return offset_space(space, loop, adjacency, source.center_of(space.id), config)
    except NoBoundaryError as e:
        LOGGER.warning("Skipping %s: %s", space.id, e)
        return SpaceFailure(space, str(e), type(e).__name__)
    except Exception as e:
        LOGGER.warning("Offset failed for %s: %s", space.id, e)
        return SpaceFailure(space, str(e), type(e).__name__)


def run_for_spaces(
    spaces: Sequence[SpaceDescriptor],
    source: SpaceSource,
    config: Optional[OffsetConfig] = None,
    adjacency: Optional[AdjacencyQuery] = None,
    max_workers: Optional[int] = None,
) -> BatchResult:
    """Run the offset pipeline over several spaces, isolating failures.

    A failing space is recorded in ``failures`` and never aborts its
    siblings. Wrapping the batch in a single host transaction is left to the
    caller.

    Args:
        spaces: Spaces to process.
        source: Collaborator supplying boundary loops and interior points.
        config: Offset configuration.
        adjacency: Adjacency collaborator; ``source`` by default.
        max_workers: Run spaces on a thread pool of this size when above 1.

    Returns:
        BatchResult with successes and failures in input order.
    """
    if config is None:
        config = OffsetConfig()
    if adjacency is None:
        adjacency = source

    LOGGER.info("Offsetting %d spaces", len(spaces))

    def run(space: SpaceDescriptor) -> Union[SpaceResult, SpaceFailure]:
        return _run_one(space, source, adjacency, config)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            outcomes = list(executor.map(run, spaces))
    else:
        outcomes = [run(space) for space in spaces]

    result = BatchResult()
    for outcome in outcomes:
        if isinstance(outcome, SpaceFailure):
            result.failures.append(outcome)
        else:
            result.successes.append(outcome)

    LOGGER.info(
        "Offset %d/%d spaces (%d failed)",
        len(result.successes),
        result.total,
        len(result.failures),
    )
    return result


def select_spaces(
    plan: Plan, space_filter: SpaceFilter, config: OffsetConfig
) -> List[SpaceDescriptor]:
    """Select the spaces of a plan matching a filter.

    A string filter is a case-insensitive name fragment; a callable is a
    predicate on SpaceDescriptor; None uses ``config.room_name_filter``.
    """
    if space_filter is None:
        space_filter = config.room_name_filter

    descriptors = [space.descriptor for space in plan.spaces.values()]
    if callable(space_filter):
        return [space for space in descriptors if space_filter(space)]
    return [space for space in descriptors if matches_any(space.name, (space_filter,))]


def run_batch(
    plan: Plan,
    space_filter: SpaceFilter = None,
    config: Optional[OffsetConfig] = None,
    max_workers: Optional[int] = None,
) -> BatchResult:
    """Run the offset pipeline over every matching space of a plan.

    The adjacency index is built once for the whole batch.

    Args:
        plan: Plan to process.
        space_filter: Name fragment or predicate selecting spaces.
        config: Offset configuration.
        max_workers: Thread pool size for parallel processing.

    Returns:
        BatchResult for the selected spaces.
    """
    if config is None:
        config = OffsetConfig()

    spaces = select_spaces(plan, space_filter, config)
    index = build_adjacency_index(plan)
    return run_for_spaces(spaces, plan, config, adjacency=index, max_workers=max_workers)


def separation_lines(
    plan: Plan,
    space_id: str,
    hallway_offset: float = HALLWAY_OFFSET,
    include_demising: bool = False,
    config: Optional[OffsetConfig] = None,
    adjacency: Optional[AdjacencyQuery] = None,
) -> List[SeparationLine]:
    """Derive room separation lines for the hallway walls of a space.

    Every segment of every boundary loop that borders a hallway (or a
    demising neighbour when ``include_demising`` is set) is moved toward the
    interior of the space by ``hallway_offset``. Only the neighbouring spaces
    count, so an exterior-typed wall shared with a corridor still gets a line.
    Segments without a resolved wall, and zero-length segments, are skipped.

    Args:
        plan: Plan supplying boundaries, adjacency and interior points.
        space_id: ID of the space.
        hallway_offset: Distance the lines move toward the room.
        include_demising: Also create lines for demising walls.
        config: Offset configuration.
        adjacency: Precomputed adjacency index; the plan itself by default.

    Returns:
        Separation lines in boundary order.

    Raises:
        KeyError: If the space is not part of the plan.
        NoBoundaryError: If the space has no boundary loop.
    """
    if space_id not in plan.spaces:
        raise KeyError(f"Space '{space_id}' does not exist")
    if config is None:
        config = OffsetConfig()

    loops = plan.boundary_loops(space_id)
    if not loops or not any(loops):
        raise NoBoundaryError(space_id)

    context = SpaceContext(
        plan.spaces[space_id].descriptor,
        adjacency if adjacency is not None else plan,
        config,
    )
    interior_point = plan.center_of(space_id)
    wanted = {WallRole.HALLWAY}
    if include_demising:
        wanted.add(WallRole.DEMISING)

    lines = []
    for loop in loops:
        for segment in loop:
            try:
                role = neighbour_role(segment, context)
            except UnresolvedAdjacencyError as e:
                LOGGER.debug("No separation line for %s: %s", space_id, e)
                continue
            if role not in wanted:
                continue
            try:
                start, end = translate(segment, interior_point, hallway_offset)
            except DegenerateSegmentError as e:
                LOGGER.debug("No separation line for %s: %s", space_id, e)
                continue
            lines.append(
                SeparationLine(
                    start=start,
                    end=end,
                    element_id=segment.element_id,
                    role=role,
                    offset=hallway_offset,
                    length=(end - start).length(),
                )
            )

    return lines
