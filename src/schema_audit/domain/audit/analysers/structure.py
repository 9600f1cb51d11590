# audit/analysers/structure.py

from collections import Counter

from schema_audit.schemas import SchemaEntity

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import join_names, limit_items
from ..models import AuditSettings, CheckpointExample, CheckpointResult
from ..rules import (
    CAMEL_CASE_RULE,
    INLINE_MEDIA_RULE,
    MODEL_PURPOSE_RULES,
    REQUIRED_FIELD_RULES,
    SECTION_SPECIFIC_RULE,
    SYSTEM_FIELD_NAMES,
    VAGUE_MODEL_RULES,
    first_match,
)
from ..view import SchemaView

DISTINCT_CONTENT_TYPES = "Distinct Content Types"
FIELD_COUNT_AND_NAMING = "Field Count & Naming"
HUGE_MODELS = "Huge Models"
MISSING_REQUIRED_FIELDS = "Missing Required Fields"
ASSET_CENTRALIZATION = "Asset Centralization"
USE_OF_COMPONENTS = "Use of Components"


def analyse_distinct_content_types(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade models whose names are too generic to describe their content.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by vaguely named models.
    """
    vague = tuple(
        model.name for model in view.models if first_match(VAGUE_MODEL_RULES, model.name)
    )
    purposes = Counter(
        label
        for model in view.models
        if (label := first_match(MODEL_PURPOSE_RULES, model.name)) is not None
    )
    status = derive_status(
        len(vague),
        warning_limit=settings.vague_name_warning_limit,
    )

    findings = [f"{len(view.models):,} content type(s) defined."]
    if purposes:
        findings.append(
            "Recognised purposes: "
            + ", ".join(f"{label} ({count})" for label, count in purposes.most_common()),
        )

    if not vague:
        findings.append("Every content type has a specific name.")
        return assemble_checkpoint(DISTINCT_CONTENT_TYPES, status, findings=findings)

    findings.append(f"{len(vague):,} content type(s) have generic names.")
    return assemble_checkpoint(
        DISTINCT_CONTENT_TYPES,
        status,
        findings=findings,
        examples=(
            CheckpointExample(items=(name,), details="Generic content type name")
            for name in limit_items(vague, settings.example_limit)
        ),
        action_items=(
            "Rename generic models after the content they hold, such as Article or Product.",
        ),
    )


def analyse_field_naming(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade section-numbered fields, crowded models and inconsistent naming.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Field limits and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by the sum of the three problems.
    """
    sectioned = {
        model.name: _matching_fields(model, SECTION_SPECIFIC_RULE.pattern.match)
        for model in view.models
    }
    sectioned = {name: fields for name, fields in sectioned.items() if fields}
    crowded = tuple(
        model for model in view.models if len(model.fields) > settings.large_model_fields
    )
    misnamed = {
        model.name: _matching_fields(
            model,
            lambda name: not CAMEL_CASE_RULE.pattern.match(name),
        )
        for model in view.models
    }
    misnamed = {name: fields for name, fields in misnamed.items() if fields}

    count = len(sectioned) + len(crowded) + len(misnamed)
    status = derive_status(
        count,
        warning_limit=settings.field_naming_warning_limit,
    )

    if not count:
        return assemble_checkpoint(
            FIELD_COUNT_AND_NAMING,
            status,
            findings=("Field counts are manageable and names are consistent.",),
        )

    findings = []
    examples = []
    actions = []

    if sectioned:
        findings.append(f"{len(sectioned):,} model(s) use section-numbered fields.")
        examples.extend(
            CheckpointExample(items=(name, *fields), details="Section-specific fields")
            for name, fields in sectioned.items()
        )
        actions.append("Replace numbered section fields with a repeatable component.")
    if crowded:
        findings.append(
            f"{len(crowded):,} model(s) have more than {settings.large_model_fields} fields.",
        )
        examples.extend(
            CheckpointExample(items=(model.name,), details=f"{len(model.fields)} fields")
            for model in crowded
        )
        actions.append("Group related fields of large models into components.")
    if misnamed:
        findings.append(f"{len(misnamed):,} model(s) have fields that are not camelCase.")
        examples.extend(
            CheckpointExample(items=(name, *fields), details="Not camelCase")
            for name, fields in misnamed.items()
        )
        actions.append("Rename fields to camelCase for consistent API output.")

    return assemble_checkpoint(
        FIELD_COUNT_AND_NAMING,
        status,
        findings=findings,
        examples=limit_items(examples, settings.example_limit),
        action_items=actions,
    )


def analyse_huge_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade models with so many fields that editing them becomes a chore.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Field limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by huge models.
    """
    huge = find_huge_models(view, settings)
    status = derive_status(
        len(huge),
        warning_limit=settings.huge_model_warning_limit,
    )

    if not huge:
        return assemble_checkpoint(
            HUGE_MODELS,
            status,
            findings=(f"No model has more than {settings.huge_model_fields} fields.",),
        )

    return assemble_checkpoint(
        HUGE_MODELS,
        status,
        findings=(
            f"{len(huge):,} model(s) have more than {settings.huge_model_fields} fields.",
        ),
        examples=(
            CheckpointExample(items=(model.name,), details=f"{len(model.fields)} fields")
            for model in limit_items(
                sorted(huge, key=lambda model: len(model.fields), reverse=True),
                settings.example_limit,
            )
        ),
        action_items=(
            "Split huge models by editorial task or move field groups into components.",
        ),
    )


def analyse_missing_required_fields(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade models whose identifying fields are optional.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by affected models.
    """
    affected = {
        model.name: tuple(
            f"{field.name} ({reason})"
            for field in model.fields
            if not field.is_required
            and (reason := first_match(REQUIRED_FIELD_RULES, field.name)) is not None
        )
        for model in view.models
    }
    affected = {name: fields for name, fields in affected.items() if fields}
    status = derive_status(
        len(affected),
        warning_limit=settings.missing_required_warning_limit,
    )

    if not affected:
        return assemble_checkpoint(
            MISSING_REQUIRED_FIELDS,
            status,
            findings=("Identifying fields are required wherever they appear.",),
        )

    return assemble_checkpoint(
        MISSING_REQUIRED_FIELDS,
        status,
        findings=(
            f"{len(affected):,} model(s) leave identifying fields optional.",
        ),
        examples=(
            CheckpointExample(items=(name,), details=", ".join(fields))
            for name, fields in limit_items(affected.items(), settings.example_limit)
        ),
        action_items=(
            "Make title, slug and type fields required so entries stay addressable.",
        ),
    )


def analyse_asset_centralization(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade media stored as plain URL strings instead of asset references.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by inline media fields.
    """
    inline = tuple(
        f"{entity.name}.{field.name}"
        for entity in view.entities
        for field in entity.fields
        if not field.is_reference
        and field.type == "String"
        and INLINE_MEDIA_RULE.pattern.match(field.name)
    )
    status = derive_status(
        len(inline),
        warning_limit=settings.inline_media_warning_limit,
    )

    if not inline:
        return assemble_checkpoint(
            ASSET_CENTRALIZATION,
            status,
            findings=("Media is referenced through the asset library.",),
        )

    return assemble_checkpoint(
        ASSET_CENTRALIZATION,
        status,
        findings=(f"{len(inline):,} field(s) store media as plain URLs.",),
        examples=(
            CheckpointExample(items=(location,), details="Inline media URL")
            for location in limit_items(inline, settings.example_limit)
        ),
        action_items=(
            "Replace URL fields with asset references so media is managed centrally.",
        ),
    )


def analyse_component_usage(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade sub-structures that no entity embeds.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by unused sub-structures.
    """
    usage = artifacts.component_usage
    unused = tuple(name for name, users in usage.items() if not users)
    status = derive_status(
        len(unused),
        warning_limit=settings.unused_component_warning_limit,
    )

    findings = [f"{len(usage):,} component(s) defined."]
    if not unused:
        if usage:
            findings.append("Every component is used by at least one entity.")
        return assemble_checkpoint(USE_OF_COMPONENTS, status, findings=findings)

    findings.append(f"{len(unused):,} component(s) are not used by any entity.")
    return assemble_checkpoint(
        USE_OF_COMPONENTS,
        status,
        findings=findings,
        examples=(
            CheckpointExample(items=(name,), details="Not embedded anywhere")
            for name in limit_items(unused, settings.example_limit)
        ),
        action_items=(f"Remove or adopt {join_names(unused, 3)}.",),
    )


def find_huge_models(
    view: SchemaView,
    settings: AuditSettings,
) -> tuple[SchemaEntity, ...]:
    """
    Models with more fields than the huge-model limit.

    Returns:
        tuple[SchemaEntity, ...]: Huge models in declaration order.
    """
    return tuple(
        model for model in view.models if len(model.fields) > settings.huge_model_fields
    )


def _matching_fields(model: SchemaEntity, predicate) -> tuple[str, ...]:
    return tuple(
        field.name
        for field in model.fields
        if field.name not in SYSTEM_FIELD_NAMES and predicate(field.name)
    )
