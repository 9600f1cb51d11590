# audit/analyse.py

import logging
from collections.abc import Callable

import httpx

from schema_audit.adapters import HygraphConfig, fetch_content_counts
from schema_audit.schemas import AuditReport, SchemaSnapshot

from .analysers import CHECKPOINTS, assess_schema_maturity
from .artifacts import AuditArtifacts
from .checkpoints import run_checkpoint
from .models import (
    AuditSettings,
    CheckpointResult,
    MaturityAssessment,
    default_settings,
)
from .report import build_audit_report
from .scoring import ScoringSignals, assess_maturity, score_checkpoints
from .view import SchemaView, build_schema_view

logger = logging.getLogger(__name__)


def audit_schema(
    snapshot: SchemaSnapshot,
    settings: AuditSettings | None = None,
) -> AuditReport:
    """
    Run the complete audit on a schema snapshot.

    Filters platform-internal entities, executes every checkpoint in
    isolation, scores the schema and builds a structured report. Nothing is
    shared between runs.

    Args:
        snapshot: Materialised schema to audit.
        settings: Optional audit thresholds (defaults to standard settings).

    Returns:
        AuditReport: The completed audit report.
    """
    active_settings = settings or default_settings()
    view = build_schema_view(snapshot)
    artifacts = AuditArtifacts(view, active_settings)

    checkpoints = _run_checkpoints(view, artifacts, active_settings)
    maturity = _assess(view, artifacts, active_settings)

    report = build_audit_report(
        checkpoints,
        maturity,
        score_checkpoints(checkpoints, active_settings),
        view=view,
        artifacts=artifacts,
    )

    logger.info(
        "Schema audit complete: %d issue(s) and %d warning(s) across %d checkpoints,"
        " maturity %s (%d)",
        report.checkpoints_with_issues,
        report.checkpoints_with_warnings,
        report.checkpoints_analysed,
        report.maturity_label,
        report.overall_score,
    )

    return report


async def audit_with_live_counts(
    snapshot: SchemaSnapshot,
    *,
    config: HygraphConfig,
    settings: AuditSettings | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> AuditReport:
    """
    Refresh content counts from the content API, then audit the snapshot.

    Counts that cannot be fetched keep whatever the snapshot already held.

    Args:
        snapshot: Materialised schema to audit.
        config: Content API endpoint, credentials and limits.
        settings: Optional audit thresholds (defaults to standard settings).
        client_factory: Factory for the HTTP client; defaults to make_client.

    Returns:
        AuditReport: The completed audit report.
    """
    counts = await fetch_content_counts(
        snapshot.entities,
        config=config,
        client_factory=client_factory,
    )
    return audit_schema(snapshot.with_content_counts(counts), settings)


def _run_checkpoints(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> tuple[CheckpointResult, ...]:
    """
    Execute every checkpoint, each isolated from the others' failures.

    Args:
        view: Audited part of the schema.
        artifacts: Detector output for the run.
        settings: Audit thresholds.

    Returns:
        tuple[CheckpointResult, ...]: Checkpoint results in report order.
    """
    return tuple(
        run_checkpoint(title, analyser, view, artifacts, settings)
        for title, analyser in CHECKPOINTS
    )


def _assess(
    view: SchemaView,
    artifacts: AuditArtifacts,
    settings: AuditSettings,
) -> MaturityAssessment:
    try:
        return assess_schema_maturity(view, artifacts, settings)
    except Exception:
        logger.error("Collecting scoring signals failed", exc_info=True)
        return assess_maturity(ScoringSignals(), settings)
