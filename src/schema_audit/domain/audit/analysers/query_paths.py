# audit/analysers/query_paths.py

from collections import Counter

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import format_path, limit_items
from ..graph import QueryCost
from ..models import (
    AuditSettings,
    CheckpointExample,
    CheckpointResult,
    CheckpointStatus,
)
from ..view import SchemaView

DEEP_QUERY_PATHS = "Deep Query Paths"


def analyse_deep_query_paths(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade long reference chains that make nested queries expensive.

    Any path with a ``high`` estimated cost escalates the topic straight to
    ``issue``; otherwise the number of recorded paths decides the grade.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Thresholds and display limits.

    Returns:
        CheckpointResult: Checkpoint listing the deepest paths.
    """
    exploration = artifacts.paths
    paths = exploration.paths

    if not paths:
        return assemble_checkpoint(
            DEEP_QUERY_PATHS,
            CheckpointStatus.GOOD,
            findings=(
                f"No reference chains of {settings.path_min_length} or more models.",
            ),
        )

    costs = Counter(path.cost for path in paths)
    if costs[QueryCost.HIGH]:
        status = CheckpointStatus.ISSUE
    else:
        status = derive_status(
            len(paths),
            warning_limit=settings.deep_path_warning_limit,
        )

    findings = [
        f"{len(paths):,} reference chain(s) of {settings.path_min_length} or more models.",
        f"Deepest chain spans {exploration.max_depth} models.",
        (
            f"Estimated cost: {costs[QueryCost.HIGH]} high,"
            f" {costs[QueryCost.MEDIUM]} medium, {costs[QueryCost.LOW]} low."
        ),
    ]
    if exploration.truncated:
        findings.append("Search limits were reached; more chains may exist.")

    return assemble_checkpoint(
        DEEP_QUERY_PATHS,
        status,
        findings=findings,
        examples=(
            CheckpointExample(
                items=path.entities,
                details=f"{format_path(path.entities)} ({path.hops} hops, {path.cost} cost)",
            )
            for path in limit_items(paths, settings.example_limit)
        ),
        action_items=(
            "Query deep relations in separate requests instead of one nested query.",
            "Flatten intermediate models that only exist to link others.",
        ),
    )
