# audit/analysers/enums.py

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import join_names, limit_items
from ..models import AuditSettings, CheckpointExample, CheckpointResult
from ..rules import TENANCY_ENUM_RULE
from ..view import SchemaView

SINGLE_VALUE_ENUMS = "Single-Value Enums"
OVERSIZED_ENUMS = "Oversized Enums"
DUPLICATE_ENUMS = "Duplicate Enums"
UNUSED_ENUMS = "Unused Enums"
ENUM_BASED_TENANCY = "Enum-Based Tenancy"


def analyse_single_value_enums(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade enumerations offering only one value.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by single-value enumerations.
    """
    single = tuple(
        enumeration for enumeration in view.enumerations if len(enumeration.values) == 1
    )
    status = derive_status(
        len(single),
        warning_limit=settings.single_value_warning_limit,
    )

    if not single:
        return assemble_checkpoint(
            SINGLE_VALUE_ENUMS,
            status,
            findings=("Every enumeration offers more than one value.",),
        )

    return assemble_checkpoint(
        SINGLE_VALUE_ENUMS,
        status,
        findings=(f"{len(single):,} enumeration(s) have exactly one value.",),
        examples=(
            CheckpointExample(
                items=(enumeration.name,),
                details=f"Only value: {enumeration.values[0]}",
            )
            for enumeration in limit_items(single, settings.example_limit)
        ),
        action_items=(
            "Replace single-value enumerations with a boolean or remove the field.",
        ),
    )


def analyse_oversized_enums(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade enumerations with too many values to pick from comfortably.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Value limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by oversized enumerations.
    """
    limit = settings.oversized_enum_values
    oversized = tuple(
        enumeration
        for enumeration in view.enumerations
        if len(enumeration.values) > limit
    )
    status = derive_status(
        len(oversized),
        warning_limit=settings.oversized_enum_warning_limit,
    )

    if not oversized:
        return assemble_checkpoint(
            OVERSIZED_ENUMS,
            status,
            findings=(f"No enumeration has more than {limit} values.",),
        )

    return assemble_checkpoint(
        OVERSIZED_ENUMS,
        status,
        findings=(f"{len(oversized):,} enumeration(s) have more than {limit} values.",),
        examples=(
            CheckpointExample(
                items=(enumeration.name,),
                details=f"{len(enumeration.values)} values",
            )
            for enumeration in limit_items(oversized, settings.example_limit)
        ),
        action_items=(
            "Move long value lists into a standalone model editors can manage.",
        ),
    )


def analyse_duplicate_enums(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade enumerations whose values largely repeat each other.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by duplicate groups.
    """
    groups = artifacts.enumeration_groups
    status = derive_status(
        len(groups),
        warning_limit=settings.duplicate_enum_warning_limit,
    )

    if not groups:
        return assemble_checkpoint(
            DUPLICATE_ENUMS,
            status,
            findings=("No enumerations with overlapping values.",),
        )

    return assemble_checkpoint(
        DUPLICATE_ENUMS,
        status,
        findings=(f"{len(groups):,} group(s) of enumerations share most values.",),
        examples=(
            CheckpointExample(
                items=group.members,
                details=f"Shared values: {join_names(group.shared, 6)}",
                shared_items=group.shared,
            )
            for group in limit_items(groups, settings.example_limit)
        ),
        action_items=("Merge each group into one shared enumeration.",),
    )


def analyse_unused_enums(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade enumerations no field uses.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by unused enumerations.
    """
    unused = tuple(
        name for name, locations in artifacts.enumeration_usage.items() if not locations
    )
    status = derive_status(
        len(unused),
        warning_limit=settings.unused_enum_warning_limit,
    )

    if not unused:
        return assemble_checkpoint(
            UNUSED_ENUMS,
            status,
            findings=("Every enumeration is used by at least one field.",),
        )

    return assemble_checkpoint(
        UNUSED_ENUMS,
        status,
        findings=(f"{len(unused):,} enumeration(s) are not used by any field.",),
        examples=(
            CheckpointExample(items=(name,), details="Not referenced")
            for name in limit_items(unused, settings.example_limit)
        ),
        action_items=(f"Remove {join_names(unused, 3)} if no longer needed.",),
    )


def analyse_enum_tenancy(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade enumerations used to split content by brand, site or tenant.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Warning limit and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by tenancy enumerations in use.
    """
    usage = artifacts.enumeration_usage
    tenancy = tuple(
        enumeration
        for enumeration in view.enumerations
        if TENANCY_ENUM_RULE.pattern.search(enumeration.name) and usage.get(enumeration.name)
    )
    status = derive_status(
        len(tenancy),
        warning_limit=settings.tenancy_warning_limit,
    )

    if not tenancy:
        return assemble_checkpoint(
            ENUM_BASED_TENANCY,
            status,
            findings=("Content is not partitioned by a tenancy enumeration.",),
        )

    return assemble_checkpoint(
        ENUM_BASED_TENANCY,
        status,
        findings=(
            f"{len(tenancy):,} enumeration(s) partition content by tenant.",
        ),
        examples=(
            CheckpointExample(
                items=(enumeration.name, *usage[enumeration.name]),
                details=(
                    f"{len(enumeration.values)} tenants:"
                    f" {join_names(enumeration.values, 5)}"
                ),
            )
            for enumeration in limit_items(tenancy, settings.example_limit)
        ),
        action_items=(
            "Model tenants as a standalone model so new ones need no schema change.",
            "Consider separate environments or projects for strongly isolated tenants.",
        ),
    )
