# analysers/test_enums.py

import pytest

from schema_audit.domain.audit.analysers.enums import (
    analyse_duplicate_enums,
    analyse_enum_tenancy,
    analyse_oversized_enums,
    analyse_single_value_enums,
    analyse_unused_enums,
)
from schema_audit.domain.audit.artifacts import AuditArtifacts
from schema_audit.domain.audit.models import (
    AuditSettings,
    CheckpointStatus,
    default_settings,
)
from schema_audit.domain.audit.view import build_schema_view
from schema_audit.schemas import (
    SchemaEntity,
    SchemaEnumeration,
    SchemaField,
    SchemaSnapshot,
)

pytestmark = pytest.mark.unit


def _enum(name: str, *values: str) -> SchemaEnumeration:
    return SchemaEnumeration(name=name, values=values)


def _using(*enum_names: str) -> SchemaEntity:
    return SchemaEntity(
        name="Article",
        fields=tuple(
            SchemaField(name=name[0].lower() + name[1:], type=name) for name in enum_names
        ),
    )


def _run(
    analyser,
    *enumerations: SchemaEnumeration,
    entities: tuple[SchemaEntity, ...] = (),
    settings: AuditSettings | None = None,
):
    """
    Run one analyser over a snapshot holding the given enumerations.

    Args:
        analyser: Checkpoint analyser under test.
        *enumerations: Snapshot enumerations.
        entities: Snapshot entities.
        settings: Optional thresholds.

    Returns:
        CheckpointResult: The analyser's result.
    """
    active = settings or default_settings()
    snapshot = SchemaSnapshot(entities=entities, enumerations=enumerations)
    view = build_schema_view(snapshot)
    return analyser(view, AuditArtifacts(view, active), active)


def test_single_value_enum_is_never_good() -> None:
    """
    ARRANGE: enumeration with exactly one value
    ACT:     analyse_single_value_enums
    ASSERT:  status is not good
    """
    actual = _run(analyse_single_value_enums, _enum("Visibility", "public"))

    assert actual.status is not CheckpointStatus.GOOD


def test_single_value_enum_is_a_warning_by_default() -> None:
    """
    ARRANGE: enumeration with exactly one value
    ACT:     analyse_single_value_enums
    ASSERT:  warning naming the only value
    """
    actual = _run(analyse_single_value_enums, _enum("Visibility", "public"))

    assert (actual.status, actual.examples[0].details) == (
        CheckpointStatus.WARNING,
        "Only value: public",
    )


def test_many_single_value_enums_are_an_issue() -> None:
    """
    ARRANGE: three single-value enumerations
    ACT:     analyse_single_value_enums
    ASSERT:  issue
    """
    actual = _run(
        analyse_single_value_enums,
        _enum("A", "x"),
        _enum("B", "y"),
        _enum("C", "z"),
    )

    assert actual.status is CheckpointStatus.ISSUE


def test_oversized_enum_is_a_warning() -> None:
    """
    ARRANGE: enumeration with 21 values
    ACT:     analyse_oversized_enums
    ASSERT:  warning
    """
    actual = _run(
        analyse_oversized_enums,
        _enum("Country", *(f"C{index}" for index in range(21))),
    )

    assert actual.status is CheckpointStatus.WARNING


def test_enum_at_value_limit_is_not_oversized() -> None:
    """
    ARRANGE: enumeration with exactly 20 values
    ACT:     analyse_oversized_enums
    ASSERT:  good
    """
    actual = _run(
        analyse_oversized_enums,
        _enum("Country", *(f"C{index}" for index in range(20))),
    )

    assert actual.status is CheckpointStatus.GOOD


def test_overlapping_enums_are_duplicates() -> None:
    """
    ARRANGE: two enumerations sharing three values, ignoring case
    ACT:     analyse_duplicate_enums
    ASSERT:  warning with shared values
    """
    actual = _run(
        analyse_duplicate_enums,
        _enum("ButtonColor", "Red", "Green", "Blue", "Black"),
        _enum("TextColor", "red", "green", "blue"),
    )

    assert (actual.status, actual.examples[0].shared_items) == (
        CheckpointStatus.WARNING,
        ("blue", "green", "red"),
    )


def test_unused_enum_is_reported() -> None:
    """
    ARRANGE: Layout enumeration used by no field
    ACT:     analyse_unused_enums
    ASSERT:  warning naming Layout
    """
    actual = _run(analyse_unused_enums, _enum("Layout", "grid", "list"))

    assert (actual.status, actual.examples[0].items) == (
        CheckpointStatus.WARNING,
        ("Layout",),
    )


def test_used_enum_is_good() -> None:
    """
    ARRANGE: Layout enumeration used by Article.layout
    ACT:     analyse_unused_enums
    ASSERT:  good
    """
    actual = _run(
        analyse_unused_enums,
        _enum("Layout", "grid", "list"),
        entities=(_using("Layout"),),
    )

    assert actual.status is CheckpointStatus.GOOD


def test_tenancy_enum_in_use_is_a_warning() -> None:
    """
    ARRANGE: Brand enumeration used by Article.brand
    ACT:     analyse_enum_tenancy
    ASSERT:  warning listing the using field
    """
    actual = _run(
        analyse_enum_tenancy,
        _enum("Brand", "acme", "globex"),
        entities=(_using("Brand"),),
    )

    assert (actual.status, actual.examples[0].items) == (
        CheckpointStatus.WARNING,
        ("Brand", "Article.brand"),
    )


def test_unused_tenancy_enum_is_good() -> None:
    """
    ARRANGE: Brand enumeration used by no field
    ACT:     analyse_enum_tenancy
    ASSERT:  good
    """
    actual = _run(analyse_enum_tenancy, _enum("Brand", "acme", "globex"))

    assert actual.status is CheckpointStatus.GOOD


def test_single_value_warning_limit_follows_settings() -> None:
    """
    ARRANGE: one single-value enumeration, warning limit of zero
    ACT:     analyse_single_value_enums
    ASSERT:  issue instead of warning
    """
    actual = _run(
        analyse_single_value_enums,
        _enum("Visibility", "public"),
        settings=AuditSettings(single_value_warning_limit=0),
    )

    assert actual.status is CheckpointStatus.ISSUE


def test_single_value_warning_limit_can_be_raised() -> None:
    """
    ARRANGE: three single-value enumerations, warning limit of three
    ACT:     analyse_single_value_enums
    ASSERT:  warning instead of issue
    """
    actual = _run(
        analyse_single_value_enums,
        _enum("Visibility", "public"),
        _enum("Region", "eu"),
        _enum("Tier", "gold"),
        settings=AuditSettings(single_value_warning_limit=3),
    )

    assert actual.status is CheckpointStatus.WARNING


def test_example_limit_follows_settings() -> None:
    """
    ARRANGE: one single-value enumeration, example limit of zero
    ACT:     analyse_single_value_enums
    ASSERT:  finding reported without examples
    """
    actual = _run(
        analyse_single_value_enums,
        _enum("Visibility", "public"),
        settings=AuditSettings(example_limit=0),
    )

    assert (len(actual.findings), actual.examples) == (1, ())
