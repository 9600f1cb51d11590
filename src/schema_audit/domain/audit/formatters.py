# audit/formatters.py

from collections.abc import Iterable
from itertools import islice

PATH_SEPARATOR = " → "
PAIR_SEPARATOR = " ↔ "


def limit_items(items: Iterable, limit: int) -> tuple:
    """
    Take at most ``limit`` items.

    Returns:
        tuple: The leading items.
    """
    return tuple(islice(items, max(limit, 0)))


def format_path(entities: Iterable[str]) -> str:
    """
    Render a chain of entity names with arrows.

    Returns:
        str: e.g. ``Page → Section → Card``.
    """
    return PATH_SEPARATOR.join(entities)


def format_pair(pair: Iterable[str]) -> str:
    """
    Render two mutually referencing entity names.

    Returns:
        str: e.g. ``Article ↔ Author``.
    """
    return PAIR_SEPARATOR.join(pair)


def join_names(names: Iterable[str], limit: int) -> str:
    """
    Comma-join names, noting how many were left out.

    Args:
        names: Names to render.
        limit: Names shown before the remainder is summarised.

    Returns:
        str: e.g. ``A, B, C (+2 more)``.
    """
    all_names = tuple(names)
    shown = ", ".join(all_names[:limit])
    hidden = len(all_names) - limit
    return f"{shown} (+{hidden} more)" if hidden > 0 else shown
