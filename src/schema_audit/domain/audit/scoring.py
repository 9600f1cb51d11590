# audit/scoring.py

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .models import (
    AuditSettings,
    CheckpointResult,
    CheckpointStatus,
    DimensionScore,
    MaturityAssessment,
    MaturityLevel,
    ScoreContribution,
)

logger = logging.getLogger(__name__)

# Dimensions scoring below this surface their worst contribution as an action
ACTION_SCORE_THRESHOLD = 65

# Points deducted per checkpoint by status
CHECKPOINT_DEDUCTIONS = {
    CheckpointStatus.WARNING: 8,
    CheckpointStatus.ISSUE: 15,
}

_LEVEL_BOUNDARIES: tuple[tuple[int, MaturityLevel], ...] = (
    (85, MaturityLevel.OPTIMIZED),
    (70, MaturityLevel.MANAGED),
    (55, MaturityLevel.DEFINED),
    (40, MaturityLevel.REACTIVE),
)

_NARRATIVES = {
    MaturityLevel.OPTIMIZED: (
        "Content platform is optimized with reusable patterns, clean separation"
        " and strong editorial clarity."
    ),
    MaturityLevel.MANAGED: (
        "Schema is well-managed with clear structure and content properly"
        " separated from presentation."
    ),
    MaturityLevel.DEFINED: (
        "Foundational standards exist but content/design coupling or complexity"
        " needs attention."
    ),
    MaturityLevel.REACTIVE: (
        "Schema supports current needs but mixing content with layout limits"
        " flexibility."
    ),
    MaturityLevel.CHAOTIC: (
        "Content model lacks structure; presentation and content are intertwined."
    ),
}

Assess = Callable[[int, Sequence[ScoreContribution]], str]


@dataclass(frozen=True)
class ScoringSignals:
    """
    Detector findings the scorer reduces into dimension scores.

    Everything here is already computed; the scorer only counts and weighs.
    """

    model_count: int = 0
    component_count: int = 0
    enumeration_count: int = 0
    total_fields: int = 0
    duplicate_models: tuple[str, ...] = ()
    duplicate_model_groups: int = 0
    orphan_models: tuple[str, ...] = ()
    deep_paths: tuple[tuple[str, ...], ...] = ()
    max_nesting_depth: int = 0
    bidirectional_pairs: tuple[tuple[str, str], ...] = ()
    reuse_rate: int = 0
    unused_components: tuple[str, ...] = ()
    missing_components: tuple[str, ...] = ()
    well_designed_components: tuple[str, ...] = ()
    average_fields: float = 0.0
    required_ratio: float = 0.0
    documented_models: int = 0
    complex_models: tuple[str, ...] = ()
    editor_friendly_models: int = 0
    coupled_fields: tuple[str, ...] = ()
    layout_components: tuple[str, ...] = ()


def capped_penalty(count: int, per_item: int, cap: int | None = None) -> int:
    """
    Penalty proportional to a count, optionally capped.

    Args:
        count: Number of offending items.
        per_item: Points per item.
        cap: Largest penalty allowed, or None for no cap.

    Returns:
        int: Non-negative magnitude to subtract.
    """
    penalty = max(count, 0) * per_item
    return penalty if cap is None else min(penalty, cap)


def capped_bonus(count: int, per_item: int, cap: int | None = None) -> int:
    """
    Bonus proportional to a count, optionally capped.

    Returns:
        int: Non-negative magnitude to add.
    """
    return capped_penalty(count, per_item, cap)


def score_dimension(
    name: str,
    contributions: Iterable[ScoreContribution],
    *,
    baseline: int = 100,
    floor: int = 20,
    assess: Assess,
) -> DimensionScore:
    """
    Apply contributions to a baseline and clamp the result.

    The unclamped sum is kept as ``raw_score`` so the breakdown always
    reconciles with the formula shown to readers.

    Args:
        name: Dimension name.
        contributions: Signed, reasoned score changes.
        baseline: Starting value.
        floor: Lowest value the score may take.
        assess: Produces the one-line assessment from the clamped score.

    Returns:
        DimensionScore: Clamped score with its full breakdown.
    """
    breakdown = tuple(contributions)
    raw_score = baseline + sum(item.value for item in breakdown)
    score = max(floor, min(100, raw_score))
    return DimensionScore(
        name=name,
        score=score,
        raw_score=raw_score,
        baseline=baseline,
        assessment=assess(score, breakdown),
        breakdown=breakdown,
    )


def score_isolated(
    name: str,
    reducer: Callable[..., DimensionScore],
    *args: object,
    baseline: int = 100,
) -> DimensionScore:
    """
    Run a dimension reducer, degrading to a neutral score if it fails.

    Args:
        name: Dimension name, used for the fallback and the log entry.
        reducer: Callable producing the dimension score.
        *args: Arguments passed to ``reducer``.
        baseline: Score reported when the reducer fails.

    Returns:
        DimensionScore: The reducer's result, or a neutral fallback.
    """
    try:
        return reducer(*args)
    except Exception:
        logger.error("Scoring of %s failed", name, exc_info=True)
        return DimensionScore(
            name=name,
            score=baseline,
            raw_score=baseline,
            baseline=baseline,
            assessment="Could not be evaluated.",
            breakdown=(),
        )


def structure_contributions(signals: ScoringSignals) -> tuple[ScoreContribution, ...]:
    """
    Contributions for duplicate models, orphans, nesting and two-way references.

    Args:
        signals: Detector findings for the run.

    Returns:
        tuple[ScoreContribution, ...]: Structure contributions in order.
    """
    contributions: list[ScoreContribution] = []

    if signals.duplicate_model_groups:
        contributions.append(
            ScoreContribution(
                f"{signals.duplicate_model_groups} duplicate model pattern(s) detected",
                -capped_penalty(signals.duplicate_model_groups, 8),
                f"Models with 70%+ similar fields: {_names(signals.duplicate_models, 4)}",
            ),
        )

    if signals.orphan_models:
        contributions.append(
            ScoreContribution(
                f"{len(signals.orphan_models)} orphan model(s) with no content or references",
                -capped_penalty(len(signals.orphan_models), 4, 20),
                f"Models: {_names(signals.orphan_models, 4)}",
            ),
        )

    if signals.deep_paths:
        contributions.append(
            ScoreContribution(
                f"{len(signals.deep_paths)} relation chain(s) with 5+ levels",
                -capped_penalty(len(signals.deep_paths), 6),
                f"Deepest: {' → '.join(signals.deep_paths[0])}",
            ),
        )
    elif signals.max_nesting_depth > 3:
        contributions.append(
            ScoreContribution(
                f"Max nesting depth is {signals.max_nesting_depth} levels",
                -capped_penalty(signals.max_nesting_depth - 3, 3),
                "Consider flattening for query performance",
            ),
        )

    if signals.bidirectional_pairs:
        pairs = ", ".join(
            " ↔ ".join(pair) for pair in signals.bidirectional_pairs[:3]
        )
        contributions.append(
            ScoreContribution(
                f"{len(signals.bidirectional_pairs)} bidirectional relation(s)"
                " enable flexible navigation",
                capped_bonus(len(signals.bidirectional_pairs), 3, 10),
                pairs,
            ),
        )

    if not contributions:
        contributions.append(
            ScoreContribution(
                "Clean structure with no detected issues",
                0,
                "No duplicate models, orphans, or deep nesting",
            ),
        )

    return tuple(contributions)


def reuse_contributions(signals: ScoringSignals) -> tuple[ScoreContribution, ...]:
    """
    Contributions for component reuse and missing componentization.

    Args:
        signals: Detector findings for the run.

    Returns:
        tuple[ScoreContribution, ...]: Reuse contributions in order.
    """
    contributions: list[ScoreContribution] = []
    rate = signals.reuse_rate

    if rate < 50:
        contributions.append(
            ScoreContribution(
                f"Component reuse score is {rate}%",
                -round((50 - rate) * 0.6),
                "Components are defined but not widely reused",
            ),
        )
    elif rate >= 70:
        contributions.append(
            ScoreContribution(
                f"Strong component reuse ({rate}%)",
                round((rate - 70) * 0.3),
                "Components are well-utilized across models",
            ),
        )

    if signals.unused_components:
        contributions.append(
            ScoreContribution(
                f"{len(signals.unused_components)} unused component(s)",
                -capped_penalty(len(signals.unused_components), 4, 16),
                f"Components: {_names(signals.unused_components, 4)}",
            ),
        )

    if signals.missing_components:
        contributions.append(
            ScoreContribution(
                f"{len(signals.missing_components)} field pattern(s) should be componentized",
                -capped_penalty(len(signals.missing_components), 5, 15),
                "; ".join(signals.missing_components[:2]),
            ),
        )
        if signals.component_count == 0:
            contributions.append(
                ScoreContribution(
                    "No components defined despite duplicate patterns",
                    -15,
                    "Consider creating components for repeated field groups",
                ),
            )

    if len(signals.well_designed_components) >= 3:
        contributions.append(
            ScoreContribution(
                f"{len(signals.well_designed_components)} well-designed,"
                " reusable component(s)",
                capped_bonus(len(signals.well_designed_components), 2, 10),
                _names(signals.well_designed_components, 3),
            ),
        )

    return tuple(contributions)


def editorial_contributions(signals: ScoringSignals) -> tuple[ScoreContribution, ...]:
    """
    Contributions for content/design separation and editor ergonomics.

    A schema without custom models takes a single fixed deduction.

    Args:
        signals: Detector findings for the run.

    Returns:
        tuple[ScoreContribution, ...]: Editorial clarity contributions.
    """
    if signals.model_count == 0:
        return (ScoreContribution("No custom models defined", -50),)

    contributions = list(_decoupling_contributions(signals))

    average = signals.average_fields
    if average <= 12:
        contributions.append(
            ScoreContribution(
                f"Models are concise (avg {average:.1f} fields)",
                8,
                "Editors see manageable forms",
            ),
        )
    elif average > 25:
        contributions.append(
            ScoreContribution(
                f"Models are complex (avg {average:.1f} fields)",
                -min(round((average - 25) * 1.5), 20),
                "Editors face overwhelming forms",
            ),
        )

    ratio = signals.required_ratio
    if ratio > 0.6:
        contributions.append(
            ScoreContribution(
                f"High required-field ratio ({ratio * 100:.0f}%)",
                -round((ratio - 0.6) * 30),
                "Editors have little flexibility",
            ),
        )
    elif ratio <= 0.3:
        contributions.append(
            ScoreContribution(
                f"Balanced required fields ({ratio * 100:.0f}%)",
                5,
                "Good mix of required and optional fields",
            ),
        )

    documented = signals.documented_models
    coverage = documented / signals.model_count
    if coverage >= 0.7:
        contributions.append(
            ScoreContribution(
                f"Good documentation ({documented}/{signals.model_count} models)",
                8,
                "Field descriptions guide editors",
            ),
        )
    elif coverage < 0.3:
        contributions.append(
            ScoreContribution(
                f"Limited documentation ({documented}/{signals.model_count} models)",
                -10,
                "Editors lack guidance on most fields",
            ),
        )

    if signals.complex_models:
        contributions.append(
            ScoreContribution(
                f"{len(signals.complex_models)} complex model(s) slow editors",
                -capped_penalty(len(signals.complex_models), 5, 20),
                f"Models: {_names(signals.complex_models, 3)}",
            ),
        )

    if signals.editor_friendly_models >= 5:
        contributions.append(
            ScoreContribution(
                f"{signals.editor_friendly_models} editor-friendly models",
                6,
                "Simple, well-scoped content types",
            ),
        )

    return tuple(contributions)


def scalability_contributions(signals: ScoringSignals) -> tuple[ScoreContribution, ...]:
    """
    Contributions for schema size and modularity.

    Args:
        signals: Detector findings for the run.

    Returns:
        tuple[ScoreContribution, ...]: Scalability contributions in order.
    """
    contributions: list[ScoreContribution] = []
    models = signals.model_count

    if models > 50:
        contributions.append(
            ScoreContribution(
                f"Large schema with {models} models",
                -min((models - 50) * 2, 25),
                "May face governance challenges",
            ),
        )
    elif models > 30:
        contributions.append(
            ScoreContribution(
                f"Schema has {models} models",
                -min(models - 30, 10),
                "Approaching complexity threshold",
            ),
        )
    elif models <= 20:
        contributions.append(
            ScoreContribution(
                f"Focused schema ({models} models)",
                5,
                "Room for growth without complexity",
            ),
        )

    if signals.total_fields > 600:
        contributions.append(
            ScoreContribution(
                f"{signals.total_fields} total fields across schema",
                -min(round((signals.total_fields - 600) / 30), 15),
                "High field count increases maintenance burden",
            ),
        )

    if signals.component_count >= 5:
        contributions.append(
            ScoreContribution(
                f"{signals.component_count} components for modular content",
                5,
                "Good foundation for reusability",
            ),
        )
    elif signals.component_count == 0 and models > 10:
        contributions.append(
            ScoreContribution(
                "No components for a schema with 10+ models",
                -8,
                "Consider componentization for scalability",
            ),
        )

    if signals.enumeration_count:
        contributions.append(
            ScoreContribution(
                f"{signals.enumeration_count} enum(s) for controlled options",
                3,
                "Enums ensure consistent values",
            ),
        )

    return tuple(contributions)


def assess_maturity(
    signals: ScoringSignals,
    settings: AuditSettings,
) -> MaturityAssessment:
    """
    Score every dimension and combine them into a maturity level.

    The overall score is the rounded mean of the dimension scores. Each
    dimension below the action threshold contributes its first deduction
    as a next-level action, up to three in total.

    Args:
        signals: Detector findings for the run.
        settings: Score baseline and floor.

    Returns:
        MaturityAssessment: Dimension scores, overall score and level.
    """
    dimensions = tuple(
        score_isolated(
            name,
            _score,
            name,
            reducer,
            signals,
            settings,
            assess,
            baseline=settings.score_baseline,
        )
        for name, reducer, assess in _dimension_table(signals)
    )

    overall = round(sum(dimension.score for dimension in dimensions) / len(dimensions))
    level = level_for(overall)
    return MaturityAssessment(
        dimensions=dimensions,
        overall_score=overall,
        level=level,
        narrative=_NARRATIVES[level],
        next_level_actions=_next_level_actions(dimensions, level),
    )


def score_checkpoints(
    results: Iterable[CheckpointResult],
    settings: AuditSettings,
) -> DimensionScore:
    """
    Score the run by how many checkpoints raised warnings or issues.

    Args:
        results: Checkpoint results of the run.
        settings: Score baseline and floor.

    Returns:
        DimensionScore: Checkpoint health with one deduction per topic.
    """
    contributions = tuple(
        ScoreContribution(
            f"{result.title} is {result.status}",
            -CHECKPOINT_DEDUCTIONS[result.status],
            result.findings[0] if result.findings else None,
        )
        for result in results
        if result.status in CHECKPOINT_DEDUCTIONS
    )
    return score_dimension(
        "Checkpoint Health",
        contributions,
        baseline=settings.score_baseline,
        floor=settings.score_floor,
        assess=_assess_checkpoints,
    )


def level_for(score: int) -> MaturityLevel:
    """
    Map an overall score to its maturity level.

    Returns:
        MaturityLevel: Highest level whose boundary the score reaches.
    """
    for boundary, level in _LEVEL_BOUNDARIES:
        if score >= boundary:
            return level
    return MaturityLevel.CHAOTIC


def _score(
    name: str,
    reducer: Callable[[ScoringSignals], tuple[ScoreContribution, ...]],
    signals: ScoringSignals,
    settings: AuditSettings,
    assess: Assess,
) -> DimensionScore:
    return score_dimension(
        name,
        reducer(signals),
        baseline=settings.score_baseline,
        floor=settings.score_floor,
        assess=assess,
    )


def _dimension_table(signals: ScoringSignals) -> tuple[tuple[str, Callable, Assess], ...]:
    editorial_assess = (
        _assess_editorial if signals.model_count else _assess_no_models
    )
    return (
        ("Structure", structure_contributions, _assess_structure),
        ("Reuse", reuse_contributions, _assess_reuse),
        ("Editorial Clarity", editorial_contributions, editorial_assess),
        ("Scalability", scalability_contributions, _assess_scalability),
    )


def _decoupling_contributions(
    signals: ScoringSignals,
) -> tuple[ScoreContribution, ...]:
    coupled = signals.coupled_fields
    count = len(coupled)

    if count == 0:
        contributions = [
            ScoreContribution(
                "Content is well-separated from presentation",
                12,
                "No layout/styling fields on content models",
            ),
        ]
    elif count <= 3:
        contributions = [
            ScoreContribution(
                f"{count} layout/styling field(s) on content models",
                -5,
                ", ".join(coupled),
            ),
        ]
    elif count <= 8:
        contributions = [
            ScoreContribution(
                f"{count} layout/styling fields mixed with content",
                -12,
                f"Examples: {_names(coupled, 3)}",
            ),
        ]
    else:
        contributions = [
            ScoreContribution(
                f"{count}+ layout/styling fields tightly coupled to content",
                -20,
                "Content and presentation are intertwined, limiting channel flexibility",
            ),
        ]

    if signals.layout_components and count < 5:
        contributions.append(
            ScoreContribution(
                f"{len(signals.layout_components)} layout/style component(s)"
                " properly isolate presentation",
                6,
                ", ".join(signals.layout_components),
            ),
        )

    return tuple(contributions)


def _next_level_actions(
    dimensions: Sequence[DimensionScore],
    level: MaturityLevel,
) -> tuple[str, ...]:
    actions = []
    for dimension in dimensions:
        if dimension.score >= ACTION_SCORE_THRESHOLD:
            continue
        deduction = next((item for item in dimension.breakdown if item.value < 0), None)
        if deduction is not None:
            actions.append(f"Fix: {deduction.reason}")

    if not actions and level < MaturityLevel.OPTIMIZED:
        actions.append(
            "Maintain current standards and continue separating content from"
            " presentation concerns.",
        )
    return tuple(actions[:3])


def _names(names: Sequence[str], limit: int) -> str:
    shown = ", ".join(names[:limit])
    return f"{shown}..." if len(names) > limit else shown


def _assess_structure(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    if score >= 75:
        return "Models follow clear patterns with minimal duplication and shallow nesting."
    if score >= 55:
        issues = sum(1 for item in breakdown if item.value < 0)
        return (
            f"Structure works but has {issues} issue(s) that could slow queries"
            " or confuse editors."
        )
    return (
        "Schema needs consolidation; structural issues create friction for"
        " both developers and editors."
    )


def _assess_reuse(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    if score >= 70:
        return "Components drive most repetitive content, reducing duplication."
    if score >= 45:
        return "Some reuse exists; expand component coverage to reduce copy-paste patterns."
    return "Content relies on copy-paste patterns; introduce shared components."


def _assess_editorial(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    if score >= 70:
        return "Content is well-separated from layout; editors focus on meaning, not styling."
    if score >= 50:
        return "Some layout/config fields mixed into content models; consider separating."
    return "Content and presentation are tightly coupled, limiting channel flexibility."


def _assess_no_models(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    return "No custom models to evaluate."


def _assess_scalability(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    if score >= 70:
        return "Schema can grow without major refactors."
    if score >= 50:
        return "Growth is possible but requires oversight."
    return "Complexity will increase quickly unless structure is simplified."


def _assess_checkpoints(score: int, breakdown: Sequence[ScoreContribution]) -> str:
    if not breakdown:
        return "Every checkpoint passed."
    return f"{len(breakdown)} checkpoint(s) need attention."
