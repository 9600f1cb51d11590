# graph/test_nesting.py

import logging

import pytest

from schema_audit.domain.audit.graph import (
    build_relation_graph,
    compute_nesting_depths,
    find_composing_roots,
)
from schema_audit.schemas import SchemaEntity, SchemaField

pytestmark = pytest.mark.unit


def _component(name: str, *embeds: str, lists: tuple[str, ...] = ()) -> SchemaEntity:
    """
    Create a sub-structure embedding other sub-structures by field type.

    Args:
        name: Sub-structure name.
        *embeds: Names of embedded sub-structures, in field order.
        lists: Embedded names held as list fields.

    Returns:
        SchemaEntity: Sub-structure entity.
    """
    return SchemaEntity(
        name=name,
        is_component=True,
        fields=tuple(
            SchemaField(name=target.lower(), type=target, is_list=target in lists)
            for target in embeds
        ),
    )


def _graph(*entities: SchemaEntity):
    return build_relation_graph(entities, composition=True)


def test_leaf_component_has_depth_one() -> None:
    """
    ARRANGE: Button embeds nothing
    ACT:     compute_nesting_depths
    ASSERT:  depth 1
    """
    actual = compute_nesting_depths(_graph(_component("Button")))

    assert actual["Button"].depth == 1


def test_chain_depth_counts_every_level() -> None:
    """
    ARRANGE: Hero -> Card -> Button
    ACT:     compute_nesting_depths
    ASSERT:  Hero depth 3 with the full path
    """
    graph = _graph(
        _component("Hero", "Card"),
        _component("Card", "Button"),
        _component("Button"),
    )

    actual = compute_nesting_depths(graph)["Hero"]

    assert (actual.depth, actual.path) == (3, ("Hero", "Card", "Button"))


def test_cycle_contributes_partial_depth() -> None:
    """
    ARRANGE: A embeds B and B embeds A
    ACT:     compute_nesting_depths
    ASSERT:  both report depth 2
    """
    graph = _graph(_component("A", "B"), _component("B", "A"))

    actual = compute_nesting_depths(graph)

    assert (actual["A"].depth, actual["B"].depth) == (2, 2)


def test_self_embedding_component_has_depth_one() -> None:
    """
    ARRANGE: Tree embeds itself
    ACT:     compute_nesting_depths
    ASSERT:  depth 1
    """
    actual = compute_nesting_depths(_graph(_component("Tree", "Tree")))

    assert actual["Tree"].depth == 1


def test_depth_never_exceeds_max_depth() -> None:
    """
    ARRANGE: twelve sub-structures nested in a line, max_depth=5
    ACT:     compute_nesting_depths
    ASSERT:  every depth is at most 5 and the outermost reaches 5
    """
    names = [f"C{index}" for index in range(1, 13)]
    components = [
        _component(name, *names[index + 1 : index + 2]) for index, name in enumerate(names)
    ]

    actual = compute_nesting_depths(_graph(*components), max_depth=5)

    assert max(result.depth for result in actual.values()) == 5


def test_depth_is_bounded_in_dense_cyclic_graph() -> None:
    """
    ARRANGE: six sub-structures all embedding each other, max_depth=4
    ACT:     compute_nesting_depths
    ASSERT:  every depth is between 1 and 4
    """
    names = [f"C{index}" for index in range(6)]
    components = [_component(name, *names) for name in names]

    actual = compute_nesting_depths(_graph(*components), max_depth=4)

    assert all(1 <= result.depth <= 4 for result in actual.values())


def test_dense_cyclic_graph_at_default_depth_completes() -> None:
    """
    ARRANGE: fourteen sub-structures all embedding each other
    ACT:     compute_nesting_depths with default bounds
    ASSERT:  every sub-structure reaches the depth bound
    """
    names = [f"C{index}" for index in range(14)]
    components = [_component(name, *names) for name in names]

    actual = compute_nesting_depths(_graph(*components))

    assert {result.depth for result in actual.values()} == {10}


def test_dense_cyclic_graph_paths_hold_distinct_entities() -> None:
    """
    ARRANGE: fourteen sub-structures all embedding each other
    ACT:     compute_nesting_depths with default bounds
    ASSERT:  no path repeats an entity
    """
    names = [f"C{index}" for index in range(14)]
    components = [_component(name, *names) for name in names]

    actual = compute_nesting_depths(_graph(*components))

    assert all(len(set(result.path)) == len(result.path) for result in actual.values())


def test_spent_expansion_budget_keeps_partial_depths() -> None:
    """
    ARRANGE: Hero -> Card -> Button with a budget of one edge visit
    ACT:     compute_nesting_depths
    ASSERT:  Hero reaches Card only, Card stops at itself
    """
    graph = _graph(
        _component("Hero", "Card"),
        _component("Card", "Button"),
        _component("Button"),
    )

    actual = compute_nesting_depths(graph, max_expansions=1)

    assert (actual["Hero"].depth, actual["Card"].depth) == (2, 1)


def test_spent_expansion_budget_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """
    ARRANGE: two-level chain with a budget of zero edge visits
    ACT:     compute_nesting_depths
    ASSERT:  debug message records the stop
    """
    caplog.set_level(logging.DEBUG, logger="schema_audit.domain.audit.graph.nesting")
    graph = _graph(_component("Hero", "Card"), _component("Card"))

    compute_nesting_depths(graph, max_expansions=0)

    assert "Nesting walk stopped" in caplog.text


def test_nesting_paths_hold_distinct_entities() -> None:
    """
    ARRANGE: six sub-structures all embedding each other
    ACT:     compute_nesting_depths
    ASSERT:  no example path repeats an entity
    """
    names = [f"C{index}" for index in range(6)]
    components = [_component(name, *names) for name in names]

    actual = compute_nesting_depths(_graph(*components))

    assert all(len(set(result.path)) == len(result.path) for result in actual.values())


def test_list_hop_marks_list_nesting() -> None:
    """
    ARRANGE: Gallery holds a list of Slides
    ACT:     compute_nesting_depths
    ASSERT:  Gallery has list nesting
    """
    graph = _graph(_component("Gallery", "Slide", lists=("Slide",)), _component("Slide"))

    actual = compute_nesting_depths(graph)["Gallery"]

    assert actual.has_list_nesting


def test_single_hop_without_list_has_no_list_nesting() -> None:
    """
    ARRANGE: Hero embeds a single Button
    ACT:     compute_nesting_depths
    ASSERT:  no list nesting
    """
    graph = _graph(_component("Hero", "Button"), _component("Button"))

    actual = compute_nesting_depths(graph)["Hero"]

    assert not actual.has_list_nesting


def test_first_declared_child_wins_tie() -> None:
    """
    ARRANGE: Card embeds Image then Button, both leaves
    ACT:     compute_nesting_depths
    ASSERT:  example path goes through Image
    """
    graph = _graph(
        _component("Card", "Image", "Button"),
        _component("Image"),
        _component("Button"),
    )

    actual = compute_nesting_depths(graph)["Card"]

    assert actual.path == ("Card", "Image")


def test_find_composing_roots_walks_up_to_models() -> None:
    """
    ARRANGE: Page model embeds Hero, Hero embeds Button
    ACT:     find_composing_roots for Button
    ASSERT:  Page is the only root
    """
    page = SchemaEntity(name="Page", fields=(SchemaField(name="hero", type="Hero"),))
    graph = _graph(page, _component("Hero", "Button"), _component("Button"))

    actual = find_composing_roots(graph, "Button", roots=["Page"])

    assert actual == ("Page",)


def test_find_composing_roots_unused_component_has_none() -> None:
    """
    ARRANGE: Button embedded by nothing
    ACT:     find_composing_roots
    ASSERT:  empty tuple
    """
    graph = _graph(_component("Button"))

    actual = find_composing_roots(graph, "Button", roots=["Page"])

    assert actual == ()
