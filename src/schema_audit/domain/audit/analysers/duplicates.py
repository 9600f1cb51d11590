# audit/analysers/duplicates.py

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import join_names, limit_items
from ..models import AuditSettings, CheckpointExample, CheckpointResult
from ..similarity import FieldPattern, SimilarityGroup, SimilarityPair
from ..view import SchemaView

REDUNDANT_MODELS = "Redundant Models"
OVERLAPPING_MODELS = "Overlapping Models"
DUPLICATE_COMPONENTS = "Duplicate Components"
DUPLICATE_FIELD_PATTERNS = "Duplicate Field Patterns"


def analyse_redundant_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade models that look like copies of each other.

    Versioned names (``HomePage``, ``HomePage2``) are reported first; groups
    of models whose fields are nearly identical follow.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by versioned groups plus
            redundant groups.
    """
    versioned = artifacts.versioned_groups
    redundant = artifacts.similarity.redundant
    status = derive_status(
        len(versioned) + len(redundant),
        warning_limit=settings.redundant_warning_limit,
    )

    if not versioned and not redundant:
        return assemble_checkpoint(
            REDUNDANT_MODELS,
            status,
            findings=("No redundant models detected.",),
        )

    findings = []
    if versioned:
        findings.append(f"{len(versioned):,} group(s) of versioned model names.")
    if redundant:
        findings.append(
            f"{len(redundant):,} group(s) of models share at least"
            f" {settings.redundant_ratio:.0%} of their fields.",
        )

    examples = [
        CheckpointExample(items=group, details="Versioned copies of one model")
        for group in versioned
    ] + [_redundant_example(group) for group in redundant]

    return assemble_checkpoint(
        REDUNDANT_MODELS,
        status,
        findings=findings,
        examples=limit_items(examples, settings.example_limit),
        action_items=(
            "Merge redundant models and migrate their entries into one.",
            "Use a type or variant field instead of copying a model per version.",
        ),
    )


def analyse_overlapping_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade model pairs that share a large part of their fields.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by overlapping pairs.
    """
    overlapping = artifacts.similarity.overlapping
    status = derive_status(
        len(overlapping),
        warning_limit=settings.overlapping_warning_limit,
    )

    if not overlapping:
        return assemble_checkpoint(
            OVERLAPPING_MODELS,
            status,
            findings=("No models with substantially overlapping fields.",),
        )

    return assemble_checkpoint(
        OVERLAPPING_MODELS,
        status,
        findings=(
            f"{len(overlapping):,} model pair(s) share at least"
            f" {settings.overlapping_ratio:.0%} of their fields.",
        ),
        examples=(
            _pair_example(pair)
            for pair in limit_items(overlapping, settings.example_limit)
        ),
        action_items=(
            "Extract the shared fields into a reusable component.",
        ),
    )


def analyse_duplicate_components(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade sub-structures whose fields largely repeat each other.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by duplicate groups.
    """
    groups = artifacts.component_groups
    status = derive_status(
        len(groups),
        warning_limit=settings.duplicate_component_warning_limit,
    )

    if not groups:
        return assemble_checkpoint(
            DUPLICATE_COMPONENTS,
            status,
            findings=("No duplicate components detected.",),
        )

    return assemble_checkpoint(
        DUPLICATE_COMPONENTS,
        status,
        findings=(f"{len(groups):,} group(s) of components with overlapping fields.",),
        examples=(
            CheckpointExample(
                items=group.members,
                details=f"{group.ratio:.0%} overlap",
                shared_items=group.shared,
            )
            for group in limit_items(groups, settings.example_limit)
        ),
        action_items=(
            "Consolidate each group into one component with optional fields.",
        ),
    )


def analyse_duplicate_field_patterns(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade groups of fields repeated across models instead of a component.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by repeated field patterns.
    """
    patterns = artifacts.field_patterns
    status = derive_status(
        len(patterns),
        warning_limit=settings.field_pattern_warning_limit,
    )

    if not patterns:
        return assemble_checkpoint(
            DUPLICATE_FIELD_PATTERNS,
            status,
            findings=("No repeated field groups detected.",),
        )

    named = sum(1 for pattern in patterns if pattern.label)
    return assemble_checkpoint(
        DUPLICATE_FIELD_PATTERNS,
        status,
        findings=(
            f"{len(patterns):,} field group(s) repeated across models.",
            f"{named:,} of them match a well-known component pattern.",
        ),
        examples=(
            CheckpointExample(items=pattern.entities, details=describe_pattern(pattern))
            for pattern in limit_items(patterns, settings.example_limit)
        ),
        action_items=tuple(
            f"Create a {pattern.label} component" for pattern in patterns if pattern.label
        )[: settings.action_limit]
        or ("Extract repeated field groups into components.",),
    )


def describe_pattern(pattern: FieldPattern) -> str:
    """
    Describe a repeated field group for findings and scoring details.

    Returns:
        str: e.g. ``SEO (metaTitle, metaDescription, ogImage) in 3 models``.
    """
    label = pattern.label or "Fields"
    return (
        f"{label} ({', '.join(pattern.fields)}) in {len(pattern.entities)} models"
    )


def _pair_example(pair: SimilarityPair) -> CheckpointExample:
    overlap = pair.overlap
    return CheckpointExample(
        items=(pair.first, pair.second),
        details=(
            f"{overlap.ratio:.0%} overlap, {len(overlap.shared)} shared fields:"
            f" {join_names(overlap.shared, 6)}"
        ),
        shared_items=overlap.shared,
        unique_to_first=overlap.only_first,
        unique_to_second=overlap.only_second,
    )


def _redundant_example(group: SimilarityGroup) -> CheckpointExample:
    return CheckpointExample(
        items=group.members,
        details=(
            f"At least {group.ratio:.0%} overlap, {len(group.shared)} fields shared:"
            f" {join_names(group.shared, 6)}"
        ),
        shared_items=group.shared,
    )
