# schemas/snapshot.py

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(StrEnum):
    """
    Type tag of a schema field.

    Attributes:
        SCALAR: Plain value field (text, number, boolean, rich text, ...).
        ENUMERATION: Field restricted to an enumerated value set.
        REFERENCE: Field pointing at another entity.
    """

    SCALAR = "scalar"
    ENUMERATION = "enumeration"
    REFERENCE = "reference"


class SchemaField(BaseModel):
    """
    A named, typed attribute of a schema entity.

    The field kind is derived from the payload when not given explicitly: a
    field with a related entity is a reference, a field carrying enumerated
    values is an enumeration, anything else is a scalar.
    """

    name: str
    type: str = "String"
    kind: FieldKind = FieldKind.SCALAR
    related_entity: str | None = Field(default=None, alias="relatedModel")
    is_list: bool = Field(default=False, alias="isList")
    is_required: bool = Field(default=False, alias="isRequired")
    is_unique: bool = Field(default=False, alias="isUnique")
    description: str | None = None
    enum_values: tuple[str, ...] = Field(default=(), alias="enumValues")

    @model_validator(mode="before")
    @classmethod
    def _derive_kind(cls, data: object) -> object:
        """
        Fill in the field kind from the reference and enumeration markers.

        Args:
            data: Raw field payload.

        Returns:
            object: Payload with a ``kind`` entry when it could be derived.
        """
        if not isinstance(data, dict) or data.get("kind"):
            return data

        related = data.get("related_entity") or data.get("relatedModel")
        values = data.get("enum_values") or data.get("enumValues")

        if related:
            kind = FieldKind.REFERENCE
        elif values:
            kind = FieldKind.ENUMERATION
        else:
            kind = FieldKind.SCALAR

        return {**data, "kind": kind}

    @property
    def is_reference(self) -> bool:
        """
        Check whether this field points at another entity.

        Returns:
            bool: True for reference fields with a target name.
        """
        return self.kind is FieldKind.REFERENCE and bool(self.related_entity)

    model_config = ConfigDict(
        frozen=True,
        # accept both snake_case names and the collaborator's camelCase keys
        populate_by_name=True,
        # ignore introspection details the audit does not use
        extra="ignore",
    )


class SchemaEntity(BaseModel):
    """
    A named schema unit: a standalone content type or a reusable sub-structure.
    """

    name: str
    fields: tuple[SchemaField, ...] = ()
    is_component: bool = Field(default=False, alias="isComponent")
    is_system: bool = Field(default=False, alias="isSystem")
    plural_api_id: str | None = Field(default=None, alias="pluralApiId")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class SchemaEnumeration(BaseModel):
    """
    A named enumeration with its ordered values.
    """

    name: str
    values: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore")


class ContentCount(BaseModel):
    """
    Draft and published entry counts for one entity.
    """

    draft: int = 0
    published: int = 0

    @property
    def total(self) -> int:
        """
        Total number of entries across both stages.

        Returns:
            int: Sum of draft and published counts.
        """
        return self.draft + self.published

    model_config = ConfigDict(frozen=True, extra="ignore")


class SchemaSnapshot(BaseModel):
    """
    Materialised schema handed over by the acquisition collaborator.

    Holds the ordered entities (standalone models and sub-structures), the
    ordered enumerations and the per-entity content counts. The snapshot is
    immutable for the duration of an audit run.
    """

    entities: tuple[SchemaEntity, ...] = ()
    enumerations: tuple[SchemaEnumeration, ...] = Field(default=(), alias="enums")
    content_counts: dict[str, ContentCount] = Field(
        default_factory=dict,
        alias="entryCounts",
    )

    @property
    def models(self) -> tuple[SchemaEntity, ...]:
        """
        Standalone content types, in declaration order.

        Returns:
            tuple[SchemaEntity, ...]: Entities not flagged as sub-structures.
        """
        return tuple(entity for entity in self.entities if not entity.is_component)

    @property
    def components(self) -> tuple[SchemaEntity, ...]:
        """
        Reusable sub-structures, in declaration order.

        Returns:
            tuple[SchemaEntity, ...]: Entities flagged as sub-structures.
        """
        return tuple(entity for entity in self.entities if entity.is_component)

    def with_content_counts(
        self,
        counts: dict[str, ContentCount],
    ) -> "SchemaSnapshot":
        """
        Return a copy whose content counts are overlaid with ``counts``.

        Args:
            counts: Fetched counts keyed by entity name.

        Returns:
            SchemaSnapshot: New snapshot with merged content counts.
        """
        merged = {**self.content_counts, **counts}
        return self.model_copy(update={"content_counts": merged})

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
