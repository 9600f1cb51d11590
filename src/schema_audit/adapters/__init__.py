# adapters/__init__.py

from .hygraph import HygraphConfig, fetch_content_counts

__all__ = [
    "HygraphConfig",
    "fetch_content_counts",
]
