# schema_audit/__init__.py

from .domain import AuditSettings, audit_schema, audit_with_live_counts, default_settings
from .adapters import HygraphConfig
from .schemas import AuditReport, SchemaSnapshot

__all__ = [
    "audit_schema",
    "audit_with_live_counts",
    "default_settings",
    "AuditReport",
    "AuditSettings",
    "HygraphConfig",
    "SchemaSnapshot",
]
