# graph/nesting.py

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from .builder import RelationGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NestingResult:
    """
    Deepest containment chain starting at one entity.
    """

    depth: int
    path: tuple[str, ...]
    has_list_nesting: bool


def compute_nesting_depths(
    graph: RelationGraph,
    *,
    max_depth: int = 10,
    max_expansions: int = 50_000,
) -> dict[str, NestingResult]:
    """
    Compute the deepest containment chain for every node in a composition graph.

    An entity that embeds nothing has depth 1. Following an edge back onto
    the chain being walked contributes nothing, so cycles end at their
    current partial depth. Results are memoised for the duration of this
    call only, and only when they were computed without meeting the current
    chain, the depth bound or the expansion budget. When two children reach
    the same depth, the one declared first supplies the example path.

    A walk stops early once its chain fills the remaining depth. Edge visits
    are counted across the whole call; once ``max_expansions`` is spent,
    each entity keeps the deepest chain found so far.

    Args:
        graph: Composition graph over sub-structures.
        max_depth: Upper bound on any reported depth.
        max_expansions: Edge visits allowed across the whole call.

    Returns:
        dict[str, NestingResult]: Result per node, in node order.
    """
    list_hops = _list_hops(graph)
    memo: dict[str, NestingResult] = {}
    on_path: set[str] = set()
    remaining = max_expansions

    def walk(name: str, budget: int) -> tuple[NestingResult, bool]:
        nonlocal remaining

        cached = memo.get(name)
        if cached is not None and cached.depth <= budget:
            return cached, True

        on_path.add(name)
        best = NestingResult(depth=1, path=(name,), has_list_nesting=False)
        clean = True

        for target in graph.neighbours(name):
            if remaining <= 0 or budget <= 1:
                clean = False
                break
            remaining -= 1

            if target in on_path:
                clean = False
                continue

            child, child_clean = walk(target, budget - 1)
            clean = clean and child_clean

            if child.depth + 1 > best.depth:
                best = NestingResult(
                    depth=child.depth + 1,
                    path=(name, *child.path),
                    has_list_nesting=list_hops.get((name, target), False)
                    or child.has_list_nesting,
                )

            # No later child can beat a chain that already fills the budget
            if best.depth >= budget:
                clean = False
                break

        on_path.discard(name)
        if clean:
            memo[name] = best
        return best, clean

    results = {name: walk(name, max_depth)[0] for name in graph.nodes}

    if remaining <= 0:
        logger.debug(
            "Nesting walk stopped after %d expansions across %d sub-structure(s)",
            max_expansions,
            len(results),
        )

    return results


def find_composing_roots(
    graph: RelationGraph,
    name: str,
    *,
    roots: Iterable[str],
) -> tuple[str, ...]:
    """
    List the standalone entities that embed ``name`` directly or transitively.

    Args:
        graph: Composition graph spanning standalone entities and
            sub-structures.
        name: Sub-structure to trace upwards from.
        roots: Names of the standalone entities.

    Returns:
        tuple[str, ...]: Embedding standalone entities in discovery order.
    """
    root_set = frozenset(roots)
    seen = {name}
    found: list[str] = []
    queue = deque([name])

    while queue:
        for referrer in graph.referrers(queue.popleft()):
            if referrer in seen:
                continue
            seen.add(referrer)
            if referrer in root_set:
                found.append(referrer)
            queue.append(referrer)

    return tuple(found)


def _list_hops(graph: RelationGraph) -> dict[tuple[str, str], bool]:
    """
    Map each (source, target) hop to whether any inducing field is a list.

    Returns:
        dict[tuple[str, str], bool]: List flag per hop.
    """
    hops: dict[tuple[str, str], bool] = {}
    for edge in graph.edges:
        key = (edge.source, edge.target)
        hops[key] = hops.get(key, False) or edge.is_list
    return hops
