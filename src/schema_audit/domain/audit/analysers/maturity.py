# audit/analysers/maturity.py

from statistics import fmean

from schema_audit.schemas import SchemaField

from ..artifacts import AuditArtifacts
from ..models import AuditSettings, MaturityAssessment
from ..rules import (
    CONFIG_FIELD_RULES,
    CONTENT_MODEL_RULES,
    LAYOUT_COMPONENT_RULE,
    PRESENTATION_FIELD_RULES,
    STYLING_ENUM_NAME_RULE,
    STYLING_ENUM_VALUE_RULE,
    matches_any,
)
from ..scoring import ScoringSignals, assess_maturity
from ..view import SchemaView
from .duplicates import describe_pattern
from .relationships import find_orphan_models
from .structure import find_huge_models

# Entities embedding a component before it counts as well-designed
WELL_DESIGNED_USAGE = 3
# Models with at most this many fields are editor-friendly
EDITOR_FRIENDLY_FIELDS = 10
# Reuse rate points per average embedding of a component
REUSE_POINTS_PER_USE = 25


def assess_schema_maturity(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> MaturityAssessment:
    """
    Score the schema's maturity from the run's detector output.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Score baseline and floor.

    Returns:
        MaturityAssessment: Dimension scores, overall score and level.
    """
    return assess_maturity(build_scoring_signals(view, artifacts, settings), settings)


def build_scoring_signals(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> ScoringSignals:
    """
    Collect the counts and names the scorer reduces.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Detector thresholds.

    Returns:
        ScoringSignals: Findings for every scoring dimension.
    """
    models = view.models
    similarity = artifacts.similarity
    groups = (
        artifacts.versioned_groups
        + tuple(group.members for group in similarity.redundant)
        + tuple((pair.first, pair.second) for pair in similarity.overlapping)
    )
    usage = artifacts.component_usage
    model_fields = [field for model in models for field in model.fields]

    return ScoringSignals(
        model_count=len(models),
        component_count=len(view.components),
        enumeration_count=len(view.enumerations),
        total_fields=sum(len(entity.fields) for entity in view.entities),
        duplicate_models=tuple(dict.fromkeys(name for group in groups for name in group)),
        duplicate_model_groups=len(groups),
        orphan_models=find_orphan_models(view, artifacts, settings),
        deep_paths=tuple(
            path.entities
            for path in artifacts.paths.paths
            if len(path.entities) >= settings.path_medium_cost_depth
        ),
        max_nesting_depth=max(
            (result.depth for result in artifacts.nesting.values()),
            default=0,
        ),
        bidirectional_pairs=artifacts.bidirectional_pairs,
        reuse_rate=_reuse_rate(usage),
        unused_components=tuple(name for name, users in usage.items() if not users),
        missing_components=tuple(
            describe_pattern(pattern) for pattern in artifacts.field_patterns
        ),
        well_designed_components=tuple(
            name for name, users in usage.items() if len(users) >= WELL_DESIGNED_USAGE
        ),
        average_fields=fmean(len(model.fields) for model in models) if models else 0.0,
        required_ratio=(
            sum(1 for field in model_fields if field.is_required) / len(model_fields)
            if model_fields
            else 0.0
        ),
        documented_models=sum(
            1 for model in models if any(field.description for field in model.fields)
        ),
        complex_models=tuple(model.name for model in find_huge_models(view, settings)),
        editor_friendly_models=sum(
            1 for model in models if len(model.fields) <= EDITOR_FRIENDLY_FIELDS
        ),
        coupled_fields=find_coupled_fields(view),
        layout_components=tuple(
            component.name
            for component in view.components
            if LAYOUT_COMPONENT_RULE.pattern.search(component.name)
        ),
    )


def find_coupled_fields(view: SchemaView) -> tuple[str, ...]:
    """
    Presentation and display-toggle fields placed on content models.

    Models named like content (articles, products, ...) are checked; when
    none are recognised every model is checked instead.

    Args:
        view: Audited part of the schema.

    Returns:
        tuple[str, ...]: ``Model.field`` locations in declaration order.
    """
    content_models = tuple(
        model for model in view.models if matches_any(CONTENT_MODEL_RULES, model.name)
    )
    values = {enumeration.name: enumeration.values for enumeration in view.enumerations}

    return tuple(
        f"{model.name}.{field.name}"
        for model in content_models or view.models
        for field in model.fields
        if _is_coupled(field, values)
    )


def _is_coupled(field: SchemaField, values: dict[str, tuple[str, ...]]) -> bool:
    if matches_any(PRESENTATION_FIELD_RULES, field.name):
        return True
    if matches_any(CONFIG_FIELD_RULES, field.name):
        return True

    options = field.enum_values or values.get(field.type, ())
    if not options:
        return False
    return bool(
        STYLING_ENUM_NAME_RULE.pattern.search(field.name)
        or STYLING_ENUM_VALUE_RULE.pattern.search(" ".join(options)),
    )


def _reuse_rate(usage: dict[str, tuple[str, ...]]) -> int:
    if not usage:
        return 0
    average = fmean(len(users) for users in usage.values())
    return min(100, round(average * REUSE_POINTS_PER_USE))
