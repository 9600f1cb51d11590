# audit/view.py

from dataclasses import dataclass

from schema_audit.schemas import (
    ContentCount,
    SchemaEntity,
    SchemaEnumeration,
    SchemaSnapshot,
)

from .rules import (
    SYSTEM_MODEL_NAMES,
    is_system_component,
    is_system_enum,
    is_system_model,
)

_NO_CONTENT = ContentCount()


@dataclass(frozen=True)
class SchemaView:
    """
    The audited part of a schema snapshot.

    Platform-internal entities and enumerations are removed; everything
    else keeps its declaration order.
    """

    models: tuple[SchemaEntity, ...]
    components: tuple[SchemaEntity, ...]
    enumerations: tuple[SchemaEnumeration, ...]
    content_counts: dict[str, ContentCount]
    known_names: frozenset[str]

    @property
    def entities(self) -> tuple[SchemaEntity, ...]:
        """
        Audited models followed by audited sub-structures.

        Returns:
            tuple[SchemaEntity, ...]: All audited entities.
        """
        return self.models + self.components

    def entries_for(self, name: str) -> int:
        """
        Total entries stored for an entity.

        Args:
            name: Entity name.

        Returns:
            int: Draft plus published entries, zero when unknown.
        """
        return self.content_counts.get(name, _NO_CONTENT).total


def build_schema_view(snapshot: SchemaSnapshot) -> SchemaView:
    """
    Project a snapshot onto the entities and enumerations worth auditing.

    Args:
        snapshot: Materialised schema from the acquisition collaborator.

    Returns:
        SchemaView: Filtered, immutable view of the snapshot.
    """
    models = tuple(
        model
        for model in snapshot.models
        if not model.is_system and not is_system_model(model.name)
    )
    components = tuple(
        component
        for component in snapshot.components
        if not component.is_system and not is_system_component(component.name)
    )
    enumerations = tuple(
        enumeration
        for enumeration in snapshot.enumerations
        if not is_system_enum(enumeration.name)
    )
    return SchemaView(
        models=models,
        components=components,
        enumerations=enumerations,
        content_counts=dict(snapshot.content_counts),
        # platform models exist even when the snapshot leaves them out
        known_names=SYSTEM_MODEL_NAMES
        | frozenset(entity.name for entity in snapshot.entities),
    )
