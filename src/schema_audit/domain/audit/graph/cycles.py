# graph/cycles.py

import logging
from collections.abc import Iterator

from .builder import RelationGraph

logger = logging.getLogger(__name__)

# Fewest distinct entities that make a closed path a true cycle
MIN_CYCLE_LENGTH = 3


def find_bidirectional_pairs(graph: RelationGraph) -> tuple[tuple[str, str], ...]:
    """
    Find pairs of entities that reference each other directly.

    Two-way references are an intended modelling pattern, so they are
    reported here and never as cycles. Each unordered pair appears once,
    with its names sorted.

    Args:
        graph: Relation graph to inspect.

    Returns:
        tuple[tuple[str, str], ...]: Sorted name pairs in discovery order.
    """
    pairs: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()

    for source in graph.nodes:
        for target in graph.neighbours(source):
            if source == target:
                continue

            key = _pair_key(source, target)
            if key in seen:
                continue
            seen.add(key)

            if graph.has_edge(target, source):
                pairs.append(key)

    return tuple(pairs)


def find_cycles(
    graph: RelationGraph,
    *,
    max_length: int = 6,
    max_cycles: int = 50,
    max_expansions: int = 50_000,
) -> tuple[tuple[str, ...], ...]:
    """
    Find closed reference paths through three or more distinct entities.

    Walks simple paths depth-first with an explicit stack. A cycle is only
    searched from its earliest-declared entity, so each one is reported
    starting there with its direction preserved; cycles over the same set
    of entities are reported once. Paths longer than ``max_length`` are not
    extended and the whole search stops after ``max_expansions`` edge
    visits or ``max_cycles`` results.

    Args:
        graph: Relation graph to inspect.
        max_length: Most entities a cycle may contain.
        max_cycles: Most cycles returned.
        max_expansions: Edge visits allowed across the search.

    Returns:
        tuple[tuple[str, ...], ...]: Cycles in discovery order.
    """
    order = {name: index for index, name in enumerate(graph.nodes)}
    seen: set[tuple[str, ...]] = set()
    cycles: list[tuple[str, ...]] = []
    budget = max_expansions

    for start in graph.nodes:
        if budget <= 0 or len(cycles) >= max_cycles:
            break

        floor = order[start]
        path = [start]
        on_path = {start}
        stack = [_later_neighbours(graph, start, order, floor)]

        while stack and budget > 0 and len(cycles) < max_cycles:
            neighbour = next(stack[-1], None)

            if neighbour is None:
                stack.pop()
                on_path.discard(path.pop())
                continue

            budget -= 1

            if neighbour == start:
                if len(path) >= MIN_CYCLE_LENGTH:
                    _record_cycle(path, seen, cycles)
                continue

            if neighbour in on_path or len(path) >= max_length:
                continue

            path.append(neighbour)
            on_path.add(neighbour)
            stack.append(_later_neighbours(graph, neighbour, order, floor))

    if budget <= 0:
        logger.debug(
            "Cycle search stopped after %d expansions with %d cycle(s) found",
            max_expansions,
            len(cycles),
        )

    return tuple(cycles)


def _later_neighbours(
    graph: RelationGraph,
    name: str,
    order: dict[str, int],
    floor: int,
) -> Iterator[str]:
    """
    Iterate the neighbours of ``name`` declared no earlier than the start.

    Returns:
        Iterator[str]: Eligible neighbours in insertion order.
    """
    return (target for target in graph.neighbours(name) if order[target] >= floor)


def _record_cycle(
    path: list[str],
    seen: set[tuple[str, ...]],
    cycles: list[tuple[str, ...]],
) -> None:
    key = tuple(sorted(path))
    if key not in seen:
        seen.add(key)
        cycles.append(tuple(path))


def _pair_key(first: str, second: str) -> tuple[str, str]:
    return (first, second) if first <= second else (second, first)
