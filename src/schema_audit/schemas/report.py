# schemas/report.py

from pydantic import BaseModel, ConfigDict


class ExampleOutput(BaseModel):
    """
    A concrete example backing a checkpoint status.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    items: tuple[str, ...]
    details: str | None = None
    shared_items: tuple[str, ...] = ()
    unique_to_first: tuple[str, ...] = ()
    unique_to_second: tuple[str, ...] = ()


class CheckpointOutput(BaseModel):
    """
    Graded result for one audit topic.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    status: str
    title: str
    findings: tuple[str, ...]
    examples: tuple[ExampleOutput, ...]
    action_items: tuple[str, ...]


class ContributionOutput(BaseModel):
    """
    One signed, reasoned change applied to a dimension score.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    reason: str
    value: int
    details: str | None = None


class DimensionOutput(BaseModel):
    """
    Score for one scoring axis together with its explanation.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    name: str
    score: int
    raw_score: int
    baseline: int
    assessment: str
    formula: str
    breakdown: tuple[ContributionOutput, ...]


class PathOutput(BaseModel):
    """
    A deep relation path with its estimated query cost.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    entities: tuple[str, ...]
    hops: int
    cost: str


class SimilarityOutput(BaseModel):
    """
    Entities or enumerations whose item sets overlap.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    members: tuple[str, ...]
    tier: str
    ratio: float
    shared_items: tuple[str, ...]


class ArtifactsOutput(BaseModel):
    """
    Raw detector output for topics that render concrete examples.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    bidirectional_pairs: tuple[tuple[str, str], ...]
    cycles: tuple[tuple[str, ...], ...]
    deep_paths: tuple[PathOutput, ...]
    similarity_groups: tuple[SimilarityOutput, ...]
    dangling_references: tuple[str, ...]


class AuditReport(BaseModel):
    """
    Machine-readable envelope for a complete schema audit.

    Contains summary counts, the graded checkpoints, the dimension scores
    with their contribution breakdowns, the composite maturity level and
    the raw detector artifacts, serialisable as JSON for downstream
    renderers and exporters.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    generated_at: str
    entity_count: int
    enumeration_count: int
    checkpoints_analysed: int
    checkpoints_with_issues: int
    checkpoints_with_warnings: int
    checkpoints: tuple[CheckpointOutput, ...]
    dimensions: tuple[DimensionOutput, ...]
    checkpoint_health: DimensionOutput
    overall_score: int
    maturity_level: int
    maturity_label: str
    narrative: str
    next_level_actions: tuple[str, ...]
    artifacts: ArtifactsOutput
