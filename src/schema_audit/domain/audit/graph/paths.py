# graph/paths.py

import logging
from collections import deque
from dataclasses import dataclass
from enum import StrEnum

from .builder import RelationGraph

logger = logging.getLogger(__name__)


class QueryCost(StrEnum):
    """
    Estimated cost of resolving a path in a single content query.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RankedPath:
    """
    A recorded chain of distinct entities and its estimated query cost.
    """

    entities: tuple[str, ...]
    cost: QueryCost

    @property
    def hops(self) -> int:
        """
        Number of references followed along the path.

        Returns:
            int: One less than the number of entities.
        """
        return len(self.entities) - 1


@dataclass(frozen=True)
class PathExploration:
    """
    Result of a bounded path search.

    ``truncated`` is set when any cap stopped the search from exploring
    everything it could reach.
    """

    paths: tuple[RankedPath, ...]
    max_depth: int
    truncated: bool


def explore_paths(
    graph: RelationGraph,
    *,
    min_length: int = 4,
    max_length: int = 7,
    max_fan_out: int = 12,
    max_queue: int = 5_000,
    max_paths_per_start: int = 25,
    max_total_paths: int = 200,
    high_cost_depth: int = 6,
    medium_cost_depth: int = 5,
) -> PathExploration:
    """
    Find long chains of distinct entities with a capped breadth-first search.

    Each node is used as a start in declaration order. Partial paths never
    revisit an entity, so self-references and cycles add no work. Only the
    longest path is kept for each (start, end) pair; the first one found
    wins a tie.

    Args:
        graph: Relation graph to search.
        min_length: Entities a path needs before it is recorded.
        max_length: Entities a path may grow to.
        max_fan_out: Neighbours followed from any one entity.
        max_queue: Partial paths enqueued per start entity.
        max_paths_per_start: Distinct endpoints recorded per start entity.
        max_total_paths: Paths recorded across the whole graph.
        high_cost_depth: Entities at which a path costs ``high``.
        medium_cost_depth: Entities at which a path costs ``medium``.

    Returns:
        PathExploration: Recorded paths ranked longest-first.
    """
    best: dict[tuple[str, str], tuple[str, ...]] = {}
    truncated = False

    for start in graph.nodes:
        if len(best) >= max_total_paths:
            truncated = True
            break

        per_start = 0
        enqueued = 1
        queue: deque[tuple[str, ...]] = deque([(start,)])

        while queue:
            path = queue.popleft()

            if len(path) >= min_length:
                key = (start, path[-1])
                if key in best:
                    if len(path) > len(best[key]):
                        best[key] = path
                elif per_start < max_paths_per_start and len(best) < max_total_paths:
                    best[key] = path
                    per_start += 1
                else:
                    truncated = True

            if len(path) >= max_length:
                continue

            candidates = [
                target for target in graph.neighbours(path[-1]) if target not in path
            ]
            if len(candidates) > max_fan_out:
                truncated = True
                candidates = candidates[:max_fan_out]

            for target in candidates:
                if enqueued >= max_queue:
                    truncated = True
                    break
                queue.append((*path, target))
                enqueued += 1

    if truncated:
        logger.debug(
            "Path exploration hit a cap with %d path(s) recorded",
            len(best),
        )

    ranked = sorted(best.values(), key=len, reverse=True)
    paths = tuple(
        RankedPath(
            entities=entities,
            cost=estimate_cost(
                len(entities),
                high_cost_depth=high_cost_depth,
                medium_cost_depth=medium_cost_depth,
            ),
        )
        for entities in ranked
    )
    return PathExploration(
        paths=paths,
        max_depth=max((len(path.entities) for path in paths), default=0),
        truncated=truncated,
    )


def estimate_cost(
    depth: int,
    *,
    high_cost_depth: int = 6,
    medium_cost_depth: int = 5,
) -> QueryCost:
    """
    Map a path depth, counted in entities, to a query cost tier.

    Args:
        depth: Number of entities in the path.
        high_cost_depth: Depth at which cost becomes high.
        medium_cost_depth: Depth at which cost becomes medium.

    Returns:
        QueryCost: The cost tier for the depth.
    """
    if depth >= high_cost_depth:
        return QueryCost.HIGH
    if depth >= medium_cost_depth:
        return QueryCost.MEDIUM
    return QueryCost.LOW
