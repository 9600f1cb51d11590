# audit/models.py

from dataclasses import dataclass
from enum import IntEnum, StrEnum


@dataclass(frozen=True)
class AuditSettings:
    """
    Configuration values controlling detector caps and checkpoint thresholds.
    """

    # Maximum entities in a path explored by the cycle search
    cycle_max_length: int = 6
    # Maximum distinct cycles reported
    cycle_limit: int = 50
    # Node expansions allowed per cycle search before it stops
    cycle_expansion_budget: int = 50_000
    # Paths shorter than this many entities are not recorded
    path_min_length: int = 4
    # Longest path (in entities) the explorer will build
    path_max_length: int = 7
    # Neighbours explored per node during path exploration
    path_max_fan_out: int = 12
    # Partial paths enqueued per start node
    path_max_queue: int = 5_000
    # Paths recorded per start node
    path_max_per_start: int = 25
    # Paths recorded across the whole graph
    path_max_total: int = 200
    # Path depth (in entities) at which query cost is high
    path_high_cost_depth: int = 6
    # Path depth (in entities) at which query cost is medium
    path_medium_cost_depth: int = 5
    # Hard bound on sub-structure nesting depth
    nesting_max_depth: int = 10
    # Edge visits allowed per nesting walk before it stops
    nesting_expansion_budget: int = 50_000
    # Sub-structures nested at least this deep are flagged
    nesting_flag_depth: int = 3
    # Field-overlap ratio at which two models are redundant
    redundant_ratio: float = 0.85
    # Shared fields required before two models are redundant
    redundant_min_shared: int = 4
    # Field-overlap ratio at which two models overlap
    overlapping_ratio: float = 0.70
    # Shared fields required before two models overlap
    overlapping_min_shared: int = 3
    # Value-overlap ratio at which two enumerations are duplicates
    enum_overlap_ratio: float = 0.5
    # Shared values required before two enumerations are duplicates
    enum_min_shared: int = 3
    # Field-overlap ratio at which two sub-structures are duplicates
    component_overlap_ratio: float = 0.6
    # Shared fields required before two sub-structures are duplicates
    component_min_shared: int = 3
    # Name similarity (0-100) for grouping versioned model names
    version_name_cutoff: int = 90
    # Entities sharing an ad-hoc field combination before it is flagged
    pattern_min_entities: int = 3
    # Entities carrying a named field pattern before it is flagged
    named_pattern_min_entities: int = 2
    # Entities with more non-reference fields are skipped by the pattern scan
    pattern_field_ceiling: int = 30
    # Field combinations examined by the pattern scan
    pattern_combination_cap: int = 20_000
    # Enumerations with more values than this are oversized
    oversized_enum_values: int = 20
    # Models with more fields than this are huge
    huge_model_fields: int = 25
    # Models with more fields than this are flagged in the naming review
    large_model_fields: int = 20
    # Orphan models need fewer entries than this
    orphan_entry_limit: int = 1
    # Models referenced by at least this many others are hubs
    hub_min_connections: int = 3
    # Maximum example rows shown per checkpoint
    example_limit: int = 5
    # Maximum action items shown per checkpoint
    action_limit: int = 5
    # Lowest value a dimension score can reach
    score_floor: int = 20
    # Starting value of every dimension score
    score_baseline: int = 100
    # Offending-item counts up to these limits grade a checkpoint as a
    # warning; larger counts are issues
    cycle_warning_limit: int = 2
    dangling_warning_limit: int = 2
    orphan_warning_limit: int = 3
    deep_path_warning_limit: int = 2
    nested_component_warning_limit: int = 2
    redundant_warning_limit: int = 1
    overlapping_warning_limit: int = 2
    duplicate_component_warning_limit: int = 1
    field_pattern_warning_limit: int = 2
    single_value_warning_limit: int = 2
    oversized_enum_warning_limit: int = 1
    duplicate_enum_warning_limit: int = 1
    unused_enum_warning_limit: int = 2
    tenancy_warning_limit: int = 1
    vague_name_warning_limit: int = 2
    field_naming_warning_limit: int = 3
    huge_model_warning_limit: int = 2
    missing_required_warning_limit: int = 3
    inline_media_warning_limit: int = 2
    unused_component_warning_limit: int = 2


def default_settings() -> AuditSettings:
    """
    Return default audit thresholds.

    Returns:
        AuditSettings: Default configuration values.
    """
    return AuditSettings()


class CheckpointStatus(StrEnum):
    """
    Closed set of checkpoint grades.
    """

    GOOD = "good"
    WARNING = "warning"
    ISSUE = "issue"


@dataclass(frozen=True)
class CheckpointExample:
    """
    A concrete example shown alongside a checkpoint.
    """

    items: tuple[str, ...]
    details: str | None = None
    shared_items: tuple[str, ...] = ()
    unique_to_first: tuple[str, ...] = ()
    unique_to_second: tuple[str, ...] = ()


@dataclass(frozen=True)
class CheckpointResult:
    """
    Uniform result of one audit topic.
    """

    status: CheckpointStatus
    title: str
    findings: tuple[str, ...]
    examples: tuple[CheckpointExample, ...] = ()
    action_items: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoreContribution:
    """
    One signed, reasoned change applied to a score.
    """

    reason: str
    value: int
    details: str | None = None


@dataclass(frozen=True)
class DimensionScore:
    """
    Score for one axis with the contributions that produced it.

    ``raw_score`` is the baseline plus every contribution before clamping;
    ``score`` is the clamped value shown to readers.
    """

    name: str
    score: int
    raw_score: int
    baseline: int
    assessment: str
    breakdown: tuple[ScoreContribution, ...]

    @property
    def formula(self) -> str:
        """
        Human-readable reconciliation of baseline, contributions and score.

        Returns:
            str: Formula such as ``100 - 8 + 5 = 97``.
        """
        terms = "".join(
            f" + {item.value}" if item.value >= 0 else f" - {abs(item.value)}"
            for item in self.breakdown
        )
        formula = f"{self.baseline}{terms} = {self.raw_score}"
        if self.raw_score != self.score:
            formula += f" (clamped to {self.score})"
        return formula


class MaturityLevel(IntEnum):
    """
    Ordered qualitative maturity levels.
    """

    CHAOTIC = 1
    REACTIVE = 2
    DEFINED = 3
    MANAGED = 4
    OPTIMIZED = 5

    @property
    def label(self) -> str:
        """
        Display label for the level.

        Returns:
            str: Title-cased level name.
        """
        return self.name.title()


@dataclass(frozen=True)
class MaturityAssessment:
    """
    Composite score across all dimensions and its qualitative level.
    """

    dimensions: tuple[DimensionScore, ...]
    overall_score: int
    level: MaturityLevel
    narrative: str
    next_level_actions: tuple[str, ...]

    @property
    def formula(self) -> str:
        """
        Explain how the overall score was averaged.

        Returns:
            str: Formula such as ``Average of 4 dimensions: (...) / 4 = 80``.
        """
        scores = " + ".join(str(dimension.score) for dimension in self.dimensions)
        count = len(self.dimensions)
        return f"Average of {count} dimensions: ({scores}) / {count} = {self.overall_score}"
