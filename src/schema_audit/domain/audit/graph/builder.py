# graph/builder.py

from collections.abc import Iterable
from dataclasses import dataclass

from schema_audit.schemas import SchemaEntity, SchemaField


@dataclass(frozen=True)
class RelationEdge:
    """
    A directed reference induced by one field.
    """

    source: str
    target: str
    field_name: str
    is_list: bool


@dataclass(frozen=True)
class DanglingReference:
    """
    A reference field whose target entity does not exist in the schema.
    """

    source: str
    field_name: str
    target: str

    def describe(self) -> str:
        """
        Render the reference as ``Source.field -> Target``.

        Returns:
            str: Display form of the dangling reference.
        """
        return f"{self.source}.{self.field_name} -> {self.target}"


@dataclass(frozen=True)
class RelationGraph:
    """
    Directed relation graph over a set of entities.

    ``adjacency`` maps every node to its distinct targets in field
    declaration order and ``reverse`` maps every node to the entities that
    reference it. ``edges`` keeps one record per inducing field, so parallel
    edges remain available for explanations.
    """

    nodes: tuple[str, ...]
    adjacency: dict[str, tuple[str, ...]]
    reverse: dict[str, tuple[str, ...]]
    edges: tuple[RelationEdge, ...]
    dangling: tuple[DanglingReference, ...]
    self_references: tuple[str, ...]

    def neighbours(self, name: str) -> tuple[str, ...]:
        """
        Distinct targets referenced by ``name``.

        Returns:
            tuple[str, ...]: Targets in insertion order, empty if unknown.
        """
        return self.adjacency.get(name, ())

    def referrers(self, name: str) -> tuple[str, ...]:
        """
        Distinct entities that reference ``name``.

        Returns:
            tuple[str, ...]: Sources in insertion order, empty if unknown.
        """
        return self.reverse.get(name, ())

    def has_edge(self, source: str, target: str) -> bool:
        """
        Check whether ``source`` references ``target``.

        Returns:
            bool: True when an edge exists.
        """
        return target in self.adjacency.get(source, ())

    def edges_from(self, name: str) -> tuple[RelationEdge, ...]:
        """
        Field-level edges leaving ``name`` in declaration order.

        Returns:
            tuple[RelationEdge, ...]: Edges whose source is ``name``.
        """
        return tuple(edge for edge in self.edges if edge.source == name)

    @property
    def edge_count(self) -> int:
        """
        Number of distinct (source, target) pairs.

        Returns:
            int: Count of deduplicated edges, self-loops included.
        """
        return sum(len(targets) for targets in self.adjacency.values())


def build_relation_graph(
    entities: Iterable[SchemaEntity],
    *,
    known_names: Iterable[str] | None = None,
    composition: bool = False,
) -> RelationGraph:
    """
    Build the relation graph induced by reference fields.

    Only references whose target is one of ``entities`` become edges. A
    target missing from both ``entities`` and ``known_names`` is recorded
    as a dangling reference; a target that exists elsewhere in the schema
    simply lies outside this graph. With ``composition`` set, a field whose
    type names one of the entities is treated as an embedding edge as well.

    Args:
        entities: Entities forming the graph's nodes.
        known_names: Every entity name in the schema, for dangling checks.
        composition: Whether type-named embeddings also produce edges.

    Returns:
        RelationGraph: Immutable graph with forward and reverse indexes.
    """
    entity_list = tuple(entities)
    nodes = tuple(dict.fromkeys(entity.name for entity in entity_list))
    node_set = frozenset(nodes)
    known = node_set | frozenset(known_names or ())

    adjacency: dict[str, dict[str, None]] = {name: {} for name in nodes}
    reverse: dict[str, dict[str, None]] = {name: {} for name in nodes}
    edges: list[RelationEdge] = []
    dangling: list[DanglingReference] = []

    for entity in entity_list:
        for field in entity.fields:
            if _is_dangling(field, known):
                dangling.append(
                    DanglingReference(entity.name, field.name, field.related_entity),
                )
                continue

            target = _edge_target(field, node_set, composition)
            if target is None:
                continue

            edges.append(RelationEdge(entity.name, target, field.name, field.is_list))
            adjacency[entity.name][target] = None
            reverse[target][entity.name] = None

    return RelationGraph(
        nodes=nodes,
        adjacency={name: tuple(targets) for name, targets in adjacency.items()},
        reverse={name: tuple(sources) for name, sources in reverse.items()},
        edges=tuple(edges),
        dangling=tuple(dangling),
        self_references=tuple(
            name for name in nodes if name in adjacency[name]
        ),
    )


def _is_dangling(field: SchemaField, known: frozenset[str]) -> bool:
    """
    Check whether a reference field points at an entity nobody declared.

    Returns:
        bool: True for references with an unknown target.
    """
    return field.is_reference and field.related_entity not in known


def _edge_target(
    field: SchemaField,
    node_set: frozenset[str],
    composition: bool,
) -> str | None:
    """
    Resolve the graph node a field points at, if any.

    Returns:
        str | None: Target node name, or None when the field adds no edge.
    """
    if field.is_reference and field.related_entity in node_set:
        return field.related_entity
    if composition and field.type in node_set:
        return field.type
    return None
