# schemas/__init__.py

from .report import (
    ArtifactsOutput,
    AuditReport,
    CheckpointOutput,
    ContributionOutput,
    DimensionOutput,
    ExampleOutput,
    PathOutput,
    SimilarityOutput,
)
from .snapshot import (
    ContentCount,
    FieldKind,
    SchemaEntity,
    SchemaEnumeration,
    SchemaField,
    SchemaSnapshot,
)

__all__ = [
    # snapshot
    "ContentCount",
    "FieldKind",
    "SchemaEntity",
    "SchemaEnumeration",
    "SchemaField",
    "SchemaSnapshot",
    # report
    "ArtifactsOutput",
    "AuditReport",
    "CheckpointOutput",
    "ContributionOutput",
    "DimensionOutput",
    "ExampleOutput",
    "PathOutput",
    "SimilarityOutput",
]
