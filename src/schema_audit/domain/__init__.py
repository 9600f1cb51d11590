# domain/__init__.py

from .audit import AuditSettings, audit_schema, audit_with_live_counts, default_settings

__all__ = [
    "AuditSettings",
    "audit_schema",
    "audit_with_live_counts",
    "default_settings",
]
