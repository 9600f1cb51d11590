# hygraph/__init__.py

from .api import build_count_query, fetch_content_counts
from .config import HygraphConfig

__all__ = [
    "HygraphConfig",
    "build_count_query",
    "fetch_content_counts",
]
