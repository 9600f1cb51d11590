# audit/__init__.py

from .analyse import audit_schema, audit_with_live_counts
from .artifacts import AuditArtifacts
from .checkpoints import assemble_checkpoint, derive_status, run_checkpoint
from .models import (
    AuditSettings,
    CheckpointExample,
    CheckpointResult,
    CheckpointStatus,
    DimensionScore,
    MaturityAssessment,
    MaturityLevel,
    ScoreContribution,
    default_settings,
)
from .report import build_audit_report
from .scoring import ScoringSignals, assess_maturity, score_checkpoints, score_dimension
from .view import SchemaView, build_schema_view

__all__ = [
    # analyse
    "audit_schema",
    "audit_with_live_counts",
    # artifacts
    "AuditArtifacts",
    # checkpoints
    "assemble_checkpoint",
    "derive_status",
    "run_checkpoint",
    # models
    "AuditSettings",
    "CheckpointExample",
    "CheckpointResult",
    "CheckpointStatus",
    "DimensionScore",
    "MaturityAssessment",
    "MaturityLevel",
    "ScoreContribution",
    "default_settings",
    # report
    "build_audit_report",
    # scoring
    "ScoringSignals",
    "assess_maturity",
    "score_checkpoints",
    "score_dimension",
    # view
    "SchemaView",
    "build_schema_view",
]
