# audit/analysers/component_nesting.py

from ..artifacts import AuditArtifacts
from ..checkpoints import assemble_checkpoint, derive_status
from ..formatters import format_path, join_names, limit_items
from ..graph import NestingResult, find_composing_roots
from ..models import AuditSettings, CheckpointExample, CheckpointResult
from ..view import SchemaView

NESTED_COMPONENTS = "Nested Components"


def analyse_nested_components(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> CheckpointResult:
    """
    Grade sub-structures that embed other sub-structures too deeply.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Flag depth and display limits.

    Returns:
        CheckpointResult: Checkpoint graded by the number of deep
            sub-structures.
    """
    deep = sorted(
        (
            (name, result)
            for name, result in artifacts.nesting.items()
            if result.depth >= settings.nesting_flag_depth
        ),
        key=lambda item: item[1].depth,
        reverse=True,
    )
    status = derive_status(
        len(deep),
        warning_limit=settings.nested_component_warning_limit,
    )

    if not deep:
        return assemble_checkpoint(
            NESTED_COMPONENTS,
            status,
            findings=(
                f"No sub-structure nests {settings.nesting_flag_depth} or more levels deep.",
            ),
        )

    models = [model.name for model in view.models]
    listed = sum(1 for _, result in deep if result.has_list_nesting)

    return assemble_checkpoint(
        NESTED_COMPONENTS,
        status,
        findings=(
            f"{len(deep):,} sub-structure(s) nest {settings.nesting_flag_depth}"
            " or more levels deep.",
            f"Deepest nesting: {deep[0][1].depth} levels.",
            f"{listed:,} of them repeat a nested list along the way.",
        ),
        examples=(
            CheckpointExample(
                items=result.path,
                details=_describe(
                    result,
                    find_composing_roots(artifacts.entity_graph, name, roots=models),
                    settings,
                ),
            )
            for name, result in limit_items(deep, settings.example_limit)
        ),
        action_items=(
            "Flatten nested sub-structures that editors rarely change independently.",
            "Replace deep nesting with references to standalone models.",
        ),
    )


def _describe(
    result: NestingResult,
    roots: tuple[str, ...],
    settings: AuditSettings,
) -> str:
    details = f"{format_path(result.path)} ({result.depth} levels"
    if result.has_list_nesting:
        details += ", includes lists"
    details += ")"
    if roots:
        details += f"; used by {join_names(roots, settings.example_limit)}"
    return details
