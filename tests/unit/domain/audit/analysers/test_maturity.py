# analysers/test_maturity.py

import pytest

from schema_audit.domain.audit.analysers.maturity import (
    assess_schema_maturity,
    build_scoring_signals,
    find_coupled_fields,
)
from schema_audit.domain.audit.artifacts import AuditArtifacts
from schema_audit.domain.audit.models import MaturityLevel, default_settings
from schema_audit.domain.audit.view import build_schema_view
from schema_audit.schemas import (
    SchemaEntity,
    SchemaEnumeration,
    SchemaField,
    SchemaSnapshot,
)

pytestmark = pytest.mark.unit


def _view(*entities: SchemaEntity, enumerations: tuple[SchemaEnumeration, ...] = ()):
    return build_schema_view(SchemaSnapshot(entities=entities, enumerations=enumerations))


def _signals(*entities: SchemaEntity):
    settings = default_settings()
    view = _view(*entities)
    return build_scoring_signals(view, AuditArtifacts(view, settings), settings)


def test_coupled_fields_found_on_content_models() -> None:
    """
    ARRANGE: Article with backgroundColor and showAuthor fields
    ACT:     find_coupled_fields
    ASSERT:  both fields reported
    """
    article = SchemaEntity(
        name="Article",
        fields=(
            SchemaField(name="title"),
            SchemaField(name="backgroundColor"),
            SchemaField(name="showAuthor", type="Boolean"),
        ),
    )

    actual = find_coupled_fields(_view(article))

    assert actual == ("Article.backgroundColor", "Article.showAuthor")


def test_styling_enum_field_is_coupled() -> None:
    """
    ARRANGE: Product with a field typed by an enumeration of dark/light
    ACT:     find_coupled_fields
    ASSERT:  field reported
    """
    product = SchemaEntity(name="Product", fields=(SchemaField(name="mood", type="Mood"),))
    mood = SchemaEnumeration(name="Mood", values=("dark", "light"))

    actual = find_coupled_fields(_view(product, enumerations=(mood,)))

    assert actual == ("Product.mood",)


def test_non_content_models_checked_when_none_recognised() -> None:
    """
    ARRANGE: only a Settings model with a theme field
    ACT:     find_coupled_fields
    ASSERT:  field reported
    """
    settings = SchemaEntity(name="Settings", fields=(SchemaField(name="theme"),))

    actual = find_coupled_fields(_view(settings))

    assert actual == ("Settings.theme",)


def test_signals_reuse_rate_from_component_usage() -> None:
    """
    ARRANGE: Quote embedded by two models
    ACT:     build_scoring_signals
    ASSERT:  reuse rate of 50
    """
    actual = _signals(
        SchemaEntity(name="Article", fields=(SchemaField(name="quote", type="Quote"),)),
        SchemaEntity(name="Review", fields=(SchemaField(name="quote", type="Quote"),)),
        SchemaEntity(name="Quote", is_component=True),
    )

    assert actual.reuse_rate == 50


def test_signals_required_ratio() -> None:
    """
    ARRANGE: Article with one required field out of four
    ACT:     build_scoring_signals
    ASSERT:  required ratio of 0.25
    """
    article = SchemaEntity(
        name="Article",
        fields=(
            SchemaField(name="title", is_required=True),
            SchemaField(name="slug"),
            SchemaField(name="body"),
            SchemaField(name="summary"),
        ),
    )

    actual = _signals(article)

    assert actual.required_ratio == 0.25


def test_signals_count_documented_models() -> None:
    """
    ARRANGE: one model with a described field, one without
    ACT:     build_scoring_signals
    ASSERT:  one documented model
    """
    actual = _signals(
        SchemaEntity(
            name="Article",
            fields=(SchemaField(name="title", description="Headline shown on cards"),),
        ),
        SchemaEntity(name="Author", fields=(SchemaField(name="name"),)),
    )

    assert actual.documented_models == 1


def test_assess_schema_maturity_for_empty_schema() -> None:
    """
    ARRANGE: empty schema
    ACT:     assess_schema_maturity
    ASSERT:  Managed level
    """
    settings = default_settings()
    view = _view()

    actual = assess_schema_maturity(view, AuditArtifacts(view, settings), settings)

    assert actual.level is MaturityLevel.MANAGED
