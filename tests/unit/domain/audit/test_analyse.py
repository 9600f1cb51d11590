# audit/test_analyse.py

import json
import logging

import httpx
import pytest

from schema_audit.adapters import HygraphConfig
from schema_audit.domain.audit import analyse
from schema_audit.domain.audit.analyse import audit_schema, audit_with_live_counts
from schema_audit.domain.audit.analysers import CHECKPOINTS
from schema_audit.schemas import (
    AuditReport,
    SchemaEntity,
    SchemaEnumeration,
    SchemaField,
    SchemaSnapshot,
)

pytestmark = pytest.mark.unit


def _model(name: str, *targets: str) -> SchemaEntity:
    return SchemaEntity(
        name=name,
        fields=(SchemaField(name="title", is_required=True),)
        + tuple(
            SchemaField(name=target[0].lower() + target[1:], related_entity=target)
            for target in targets
        ),
    )


def _checkpoint(report: AuditReport, title: str):
    return next(checkpoint for checkpoint in report.checkpoints if checkpoint.title == title)


def test_audit_schema_returns_audit_report() -> None:
    """
    ARRANGE: empty snapshot
    ACT:     audit_schema
    ASSERT:  returns AuditReport instance
    """
    actual = audit_schema(SchemaSnapshot())

    assert isinstance(actual, AuditReport)


def test_empty_schema_passes_every_checkpoint() -> None:
    """
    ARRANGE: empty snapshot
    ACT:     audit_schema
    ASSERT:  every checkpoint is good
    """
    actual = audit_schema(SchemaSnapshot())

    assert {checkpoint.status for checkpoint in actual.checkpoints} == {"good"}


def test_empty_schema_logs_no_errors(caplog: pytest.LogCaptureFixture) -> None:
    """
    ARRANGE: empty snapshot
    ACT:     audit_schema
    ASSERT:  nothing logged at error level
    """
    audit_schema(SchemaSnapshot())

    assert not [record for record in caplog.records if record.levelno >= logging.ERROR]


def test_report_lists_every_checkpoint() -> None:
    """
    ARRANGE: empty snapshot
    ACT:     audit_schema
    ASSERT:  one checkpoint per registered topic, in order
    """
    expected = [title for title, _ in CHECKPOINTS]

    actual = audit_schema(SchemaSnapshot())

    assert [checkpoint.title for checkpoint in actual.checkpoints] == expected


def test_mutual_references_produce_pair_and_no_cycle() -> None:
    """
    ARRANGE: Article and Author reference each other
    ACT:     audit_schema
    ASSERT:  one bidirectional pair and no cycles in the artifacts
    """
    snapshot = SchemaSnapshot(
        entities=(_model("Article", "Author"), _model("Author", "Article")),
    )

    actual = audit_schema(snapshot).artifacts

    assert (actual.bidirectional_pairs, actual.cycles) == ((("Article", "Author"),), ())


def test_three_model_loop_produces_cycle_and_no_pair() -> None:
    """
    ARRANGE: X -> Y -> Z -> X
    ACT:     audit_schema
    ASSERT:  one cycle and no bidirectional pairs in the artifacts
    """
    snapshot = SchemaSnapshot(
        entities=(_model("X", "Y"), _model("Y", "Z"), _model("Z", "X")),
    )

    actual = audit_schema(snapshot).artifacts

    assert (actual.cycles, actual.bidirectional_pairs) == ((("X", "Y", "Z"),), ())


def test_single_value_enum_checkpoint_is_not_good() -> None:
    """
    ARRANGE: snapshot with a single-value enumeration
    ACT:     audit_schema
    ASSERT:  Single-Value Enums checkpoint is warning or issue
    """
    snapshot = SchemaSnapshot(
        enumerations=(SchemaEnumeration(name="Visibility", values=("public",)),),
    )

    actual = _checkpoint(audit_schema(snapshot), "Single-Value Enums")

    assert actual.status in {"warning", "issue"}


def test_dangling_reference_reported_in_artifacts() -> None:
    """
    ARRANGE: Article references a Writer nobody declared
    ACT:     audit_schema
    ASSERT:  dangling reference exported
    """
    snapshot = SchemaSnapshot(entities=(_model("Article", "Writer"),))

    actual = audit_schema(snapshot).artifacts.dangling_references

    assert actual == ("Article.writer -> Writer",)


def test_self_referencing_chain_terminates() -> None:
    """
    ARRANGE: six models in a line, each also referencing itself
    ACT:     audit_schema
    ASSERT:  a high-cost path is exported
    """
    names = [f"Level{index}" for index in range(1, 7)]
    entities = tuple(
        _model(name, name, *names[index + 1 : index + 2]) for index, name in enumerate(names)
    )

    actual = audit_schema(SchemaSnapshot(entities=entities)).artifacts.deep_paths

    assert any(path.cost == "high" and len(path.entities) >= 4 for path in actual)


def test_report_is_json_serialisable() -> None:
    """
    ARRANGE: snapshot with references and an enumeration
    ACT:     audit_schema, dump to JSON
    ASSERT:  JSON round-trips to a dict with checkpoints
    """
    snapshot = SchemaSnapshot(
        entities=(_model("Article", "Author"), _model("Author", "Article")),
        enumerations=(SchemaEnumeration(name="Visibility", values=("public",)),),
    )

    actual = json.loads(audit_schema(snapshot).model_dump_json())

    assert len(actual["checkpoints"]) == len(CHECKPOINTS)


def test_report_scores_stay_in_range() -> None:
    """
    ARRANGE: snapshot with a loop, a dangling reference and a single-value enum
    ACT:     audit_schema
    ASSERT:  every dimension score between 20 and 100
    """
    snapshot = SchemaSnapshot(
        entities=(
            _model("X", "Y"),
            _model("Y", "Z"),
            _model("Z", "X", "Missing"),
        ),
        enumerations=(SchemaEnumeration(name="Visibility", values=("public",)),),
    )

    actual = audit_schema(snapshot)

    scores = [dimension.score for dimension in (*actual.dimensions, actual.checkpoint_health)]
    assert all(20 <= score <= 100 for score in scores)


def test_audit_runs_are_independent() -> None:
    """
    ARRANGE: two different snapshots
    ACT:     audit_schema on each, then the first again
    ASSERT:  the repeated run matches the first
    """
    first = SchemaSnapshot(entities=(_model("X", "Y"), _model("Y", "Z"), _model("Z", "X")))
    second = SchemaSnapshot(entities=(_model("Article", "Author"), _model("Author")))

    expected = audit_schema(first).model_dump(exclude={"generated_at"})
    audit_schema(second)
    actual = audit_schema(first).model_dump(exclude={"generated_at"})

    assert actual == expected


def test_failing_checkpoint_does_not_abort_run(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: one registered checkpoint that raises
    ACT:     audit_schema
    ASSERT:  failing topic degrades to good, the other topics still run
    """

    def broken(*args: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(analyse, "CHECKPOINTS", (("Broken Topic", broken), *CHECKPOINTS))

    actual = audit_schema(SchemaSnapshot())

    assert (actual.checkpoints[0].findings, actual.checkpoints_analysed) == (
        ("Broken Topic could not be evaluated.",),
        len(CHECKPOINTS) + 1,
    )


def test_failing_signal_collection_still_scores(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: maturity assessment that raises
    ACT:     audit_schema
    ASSERT:  report still carries four dimensions
    """

    def broken(*args: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(analyse, "assess_schema_maturity", broken)

    actual = audit_schema(SchemaSnapshot())

    assert len(actual.dimensions) == 4


async def test_audit_with_live_counts_uses_fetched_counts() -> None:
    """
    ARRANGE: Archive model without counts, content API reporting 3 entries
    ACT:     audit_with_live_counts
    ASSERT:  Archive is not reported as an orphan
    """

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": {
                    "draft": {"aggregate": {"count": 1}},
                    "published": {"aggregate": {"count": 2}},
                },
            },
            request=request,
        )

    snapshot = SchemaSnapshot(entities=(_model("Archive"),))

    report = await audit_with_live_counts(
        snapshot,
        config=HygraphConfig(endpoint="https://content.example.com/graphql"),
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    actual = _checkpoint(report, "Orphan Models")

    assert actual.status == "good"
