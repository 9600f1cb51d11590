# audit/analysers/relationships.py

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import format_pair, format_path, join_names, limit_items
from ..models import (
    AuditSettings,
    CheckpointExample,
    CheckpointResult,
    CheckpointStatus,
)
from ..view import SchemaView

TWO_WAY_REFERENCES = "Two-Way References"
RECURSIVE_CHAINS = "Recursive Chains"
DANGLING_REFERENCES = "Dangling References"
ORPHAN_MODELS = "Orphan Models"
HUB_MODELS = "Hub Models"


def analyse_two_way_references(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Report model pairs that reference each other directly.

    Two-way references are an intended modelling pattern, so this topic is
    informational and always graded ``good``.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Informational checkpoint listing the pairs.
    """
    pairs = artifacts.bidirectional_pairs

    if not pairs:
        return assemble_checkpoint(
            TWO_WAY_REFERENCES,
            CheckpointStatus.GOOD,
            findings=("No two-way references between models.",),
        )

    return assemble_checkpoint(
        TWO_WAY_REFERENCES,
        CheckpointStatus.GOOD,
        findings=(
            f"{len(pairs):,} model pair(s) reference each other, allowing"
            " navigation in both directions.",
        ),
        examples=(
            CheckpointExample(items=pair, details=format_pair(pair))
            for pair in limit_items(pairs, settings.example_limit)
        ),
    )


def analyse_recursive_chains(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade closed reference chains through three or more models.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by the number of cycles.
    """
    cycles = artifacts.cycles
    status = derive_status(
        len(cycles),
        warning_limit=settings.cycle_warning_limit,
    )

    if not cycles:
        return assemble_checkpoint(
            RECURSIVE_CHAINS,
            status,
            findings=("No recursive reference chains between models.",),
        )

    longest = max(len(cycle) for cycle in cycles)
    return assemble_checkpoint(
        RECURSIVE_CHAINS,
        status,
        findings=(
            f"{len(cycles):,} recursive reference chain(s) found.",
            f"Longest chain spans {longest} models.",
        ),
        examples=(
            CheckpointExample(items=cycle, details=format_path((*cycle, cycle[0])))
            for cycle in limit_items(cycles, settings.example_limit)
        ),
        action_items=(
            "Make one reference in each chain one-directional, or resolve it"
            " with a separate query.",
            "Limit query depth on recursive relations to avoid unbounded payloads.",
        ),
    )


def analyse_dangling_references(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade reference fields pointing at entities missing from the schema.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by the number of dangling fields.
    """
    dangling = artifacts.entity_graph.dangling
    status = derive_status(
        len(dangling),
        warning_limit=settings.dangling_warning_limit,
    )

    if not dangling:
        return assemble_checkpoint(
            DANGLING_REFERENCES,
            status,
            findings=("Every reference points at an existing entity.",),
        )

    missing = tuple(dict.fromkeys(reference.target for reference in dangling))
    return assemble_checkpoint(
        DANGLING_REFERENCES,
        status,
        findings=(
            f"{len(dangling):,} reference field(s) point at entities that do not exist.",
            f"Missing targets: {join_names(missing, settings.example_limit)}",
        ),
        examples=(
            CheckpointExample(
                items=(reference.source, reference.target),
                details=reference.describe(),
            )
            for reference in limit_items(dangling, settings.example_limit)
        ),
        action_items=(
            "Remove the fields or restore the entities they reference.",
        ),
    )


def analyse_orphan_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade models that hold no content and are referenced by nothing.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by the number of orphans.
    """
    orphans = find_orphan_models(view, artifacts, settings)
    status = derive_status(
        len(orphans),
        warning_limit=settings.orphan_warning_limit,
    )

    if not orphans:
        return assemble_checkpoint(
            ORPHAN_MODELS,
            status,
            findings=("Every model holds content or is referenced by another entity.",),
        )

    return assemble_checkpoint(
        ORPHAN_MODELS,
        status,
        findings=(
            f"{len(orphans):,} model(s) have no entries and no incoming references.",
        ),
        examples=(
            CheckpointExample(items=(name,), details="No entries, no referrers")
            for name in limit_items(orphans, settings.example_limit)
        ),
        action_items=(
            f"Review whether {join_names(orphans, 3)} are still needed.",
            "Archive or delete models that are no longer part of the content plan.",
        ),
    )


def analyse_hub_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    List models referenced by many other entities.

    Hubs are worth knowing about before changing a model, but they are not
    a defect, so this topic is always graded ``good``.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Informational checkpoint listing hub models.
    """
    graph = artifacts.entity_graph
    hubs = sorted(
        (
            (model.name, _external_referrers(graph.referrers(model.name), model.name))
            for model in view.models
        ),
        key=lambda hub: len(hub[1]),
        reverse=True,
    )
    hubs = [hub for hub in hubs if len(hub[1]) >= settings.hub_min_connections]

    if not hubs:
        return assemble_checkpoint(
            HUB_MODELS,
            CheckpointStatus.GOOD,
            findings=(
                f"No model is referenced by {settings.hub_min_connections} or"
                " more entities.",
            ),
        )

    return assemble_checkpoint(
        HUB_MODELS,
        CheckpointStatus.GOOD,
        findings=(
            f"{len(hubs):,} model(s) are referenced by"
            f" {settings.hub_min_connections} or more entities.",
        ),
        examples=(
            CheckpointExample(
                items=(name, *referrers),
                details=f"Referenced by {len(referrers)} entities",
            )
            for name, referrers in limit_items(hubs, settings.example_limit)
        ),
    )


def find_orphan_models(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> tuple[str, ...]:
    """
    Names of models without enough entries and without external referrers.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Entry threshold.

    Returns:
        tuple[str, ...]: Orphan model names in declaration order.
    """
    graph = artifacts.entity_graph
    return tuple(
        model.name
        for model in view.models
        if view.entries_for(model.name) < settings.orphan_entry_limit
        and not _external_referrers(graph.referrers(model.name), model.name)
    )


def _external_referrers(referrers: tuple[str, ...], name: str) -> tuple[str, ...]:
    return tuple(referrer for referrer in referrers if referrer != name)
