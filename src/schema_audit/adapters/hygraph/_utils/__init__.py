# _utils/__init__.py

from .retry import parse_retry_after, retry_delay

__all__ = ["parse_retry_after", "retry_delay"]
