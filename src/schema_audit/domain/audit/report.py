# audit/report.py

import logging
from datetime import UTC, datetime

from schema_audit.schemas import (
    ArtifactsOutput,
    AuditReport,
    CheckpointOutput,
    ContributionOutput,
    DimensionOutput,
    ExampleOutput,
    PathOutput,
    SimilarityOutput,
)

from .artifacts import AuditArtifacts
from .models import (
    CheckpointResult,
    CheckpointStatus,
    DimensionScore,
    MaturityAssessment,
)
from .view import SchemaView

logger = logging.getLogger(__name__)


def build_audit_report(
    checkpoints: tuple[CheckpointResult, ...],
    maturity: MaturityAssessment,
    checkpoint_health: DimensionScore,
    *,
    view: SchemaView,
    artifacts: AuditArtifacts,
) -> AuditReport:
    """
    Convert internal dataclass results into a Pydantic AuditReport.

    Args:
        checkpoints: Checkpoint results in report order.
        maturity: Dimension scores and composite maturity level.
        checkpoint_health: Score derived from checkpoint statuses.
        view: Audited part of the schema, for summary counts.
        artifacts: Detector output, exported for downstream renderers.

    Returns:
        AuditReport: Machine-readable report envelope.
    """
    outputs = tuple(_convert_checkpoint(result) for result in checkpoints)

    return AuditReport(
        generated_at=datetime.now(UTC).isoformat(),
        entity_count=len(view.entities),
        enumeration_count=len(view.enumerations),
        checkpoints_analysed=len(outputs),
        checkpoints_with_issues=_count_status(checkpoints, CheckpointStatus.ISSUE),
        checkpoints_with_warnings=_count_status(checkpoints, CheckpointStatus.WARNING),
        checkpoints=outputs,
        dimensions=tuple(_convert_dimension(score) for score in maturity.dimensions),
        checkpoint_health=_convert_dimension(checkpoint_health),
        overall_score=maturity.overall_score,
        maturity_level=int(maturity.level),
        maturity_label=maturity.level.label,
        narrative=maturity.narrative,
        next_level_actions=maturity.next_level_actions,
        artifacts=convert_artifacts(artifacts),
    )


def convert_artifacts(artifacts: AuditArtifacts) -> ArtifactsOutput:
    """
    Export raw detector output as plain data.

    Detectors that fail here are left out of the export rather than
    failing the report; the checkpoints that use them already degraded.

    Args:
        artifacts: Detector output for the run.

    Returns:
        ArtifactsOutput: Pairs, cycles, paths, similarity groups and
            dangling references.
    """
    return ArtifactsOutput(
        bidirectional_pairs=_collect(lambda: artifacts.bidirectional_pairs),
        cycles=_collect(lambda: artifacts.cycles),
        deep_paths=_collect(lambda: _convert_paths(artifacts)),
        similarity_groups=_collect(lambda: _convert_similarity(artifacts)),
        dangling_references=_collect(
            lambda: tuple(
                reference.describe() for reference in artifacts.entity_graph.dangling
            ),
        ),
    )


def _convert_checkpoint(result: CheckpointResult) -> CheckpointOutput:
    """
    Convert an internal CheckpointResult to a Pydantic CheckpointOutput.

    Args:
        result: Internal checkpoint result to convert.

    Returns:
        CheckpointOutput: Pydantic-serialisable checkpoint output.
    """
    examples = tuple(
        ExampleOutput(
            items=example.items,
            details=example.details,
            shared_items=example.shared_items,
            unique_to_first=example.unique_to_first,
            unique_to_second=example.unique_to_second,
        )
        for example in result.examples
    )
    return CheckpointOutput(
        status=str(result.status),
        title=result.title,
        findings=result.findings,
        examples=examples,
        action_items=result.action_items,
    )


def _convert_dimension(score: DimensionScore) -> DimensionOutput:
    breakdown = tuple(
        ContributionOutput(reason=item.reason, value=item.value, details=item.details)
        for item in score.breakdown
    )
    return DimensionOutput(
        name=score.name,
        score=score.score,
        raw_score=score.raw_score,
        baseline=score.baseline,
        assessment=score.assessment,
        formula=score.formula,
        breakdown=breakdown,
    )


def _convert_paths(artifacts: AuditArtifacts) -> tuple[PathOutput, ...]:
    return tuple(
        PathOutput(entities=path.entities, hops=path.hops, cost=str(path.cost))
        for path in artifacts.paths.paths
    )


def _convert_similarity(artifacts: AuditArtifacts) -> tuple[SimilarityOutput, ...]:
    similarity = artifacts.similarity
    versioned = tuple(
        SimilarityOutput(members=group, tier="versioned", ratio=1.0, shared_items=())
        for group in artifacts.versioned_groups
    )
    redundant = tuple(
        SimilarityOutput(
            members=group.members,
            tier="redundant",
            ratio=float(group.ratio),
            shared_items=group.shared,
        )
        for group in similarity.redundant
    )
    overlapping = tuple(
        SimilarityOutput(
            members=(pair.first, pair.second),
            tier=str(pair.tier),
            ratio=float(pair.overlap.ratio),
            shared_items=pair.overlap.shared,
        )
        for pair in similarity.overlapping
    )
    components = tuple(
        SimilarityOutput(
            members=group.members,
            tier="duplicate_component",
            ratio=float(group.ratio),
            shared_items=group.shared,
        )
        for group in artifacts.component_groups
    )
    enumerations = tuple(
        SimilarityOutput(
            members=group.members,
            tier="duplicate_enumeration",
            ratio=float(group.ratio),
            shared_items=group.shared,
        )
        for group in artifacts.enumeration_groups
    )
    return versioned + redundant + overlapping + components + enumerations


def _count_status(
    checkpoints: tuple[CheckpointResult, ...],
    status: CheckpointStatus,
) -> int:
    return sum(1 for result in checkpoints if result.status is status)


def _collect(compute):
    try:
        return compute()
    except Exception:
        logger.error("Artifact export failed", exc_info=True)
        return ()
