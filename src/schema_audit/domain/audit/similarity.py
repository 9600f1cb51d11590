# audit/similarity.py

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from itertools import combinations

from rapidfuzz import fuzz, utils

from schema_audit.schemas import SchemaEntity

from .models import AuditSettings
from .rules import NAMED_FIELD_PATTERNS, SYSTEM_FIELD_NAMES, VERSION_SUFFIX_RULE

logger = logging.getLogger(__name__)

# Size of the ad-hoc field combinations examined by the pattern scan
PATTERN_WIDTH = 3


class SimilarityTier(StrEnum):
    """
    Classification of two overlapping entities.
    """

    REDUNDANT = "redundant"
    OVERLAPPING = "overlapping"


@dataclass(frozen=True)
class Overlap:
    """
    Comparison of two item sets.

    ``ratio`` divides the shared count by the smaller set's size, so a small
    set fully contained in a larger one scores 1.0.
    """

    shared: tuple[str, ...]
    only_first: tuple[str, ...]
    only_second: tuple[str, ...]
    ratio: float


@dataclass(frozen=True)
class SimilarityPair:
    """
    Two entities whose field sets overlap enough to report.
    """

    first: str
    second: str
    tier: SimilarityTier
    overlap: Overlap


@dataclass(frozen=True)
class SimilarityGroup:
    """
    Items grouped because their value or field sets overlap.

    ``shared`` holds the items common to every member.
    """

    members: tuple[str, ...]
    shared: tuple[str, ...]
    ratio: float


@dataclass(frozen=True)
class SimilarityReport:
    """
    Redundant entity groups and overlapping entity pairs.
    """

    redundant: tuple[SimilarityGroup, ...]
    overlapping: tuple[SimilarityPair, ...]


@dataclass(frozen=True)
class FieldPattern:
    """
    A group of fields repeated across several entities.

    ``label`` names a well-known pattern and is None for ad-hoc ones.
    """

    fields: tuple[str, ...]
    entities: tuple[str, ...]
    label: str | None = None


def compare_sets(first: Iterable[str], second: Iterable[str]) -> Overlap:
    """
    Compare two item sets.

    The shared items are sorted, so they are identical whichever order the
    sets are passed in; the ratio is zero when either set is empty.

    Args:
        first: Items of the first set.
        second: Items of the second set.

    Returns:
        Overlap: Shared and exclusive items with the overlap ratio.
    """
    first_set = set(first)
    second_set = set(second)
    shared = first_set & second_set
    smaller = min(len(first_set), len(second_set))
    return Overlap(
        shared=tuple(sorted(shared)),
        only_first=tuple(sorted(first_set - second_set)),
        only_second=tuple(sorted(second_set - first_set)),
        ratio=len(shared) / smaller if smaller else 0.0,
    )


def classify_overlap(
    overlap: Overlap,
    settings: AuditSettings,
) -> SimilarityTier | None:
    """
    Place an overlap into the highest tier whose thresholds it meets.

    Args:
        overlap: Result of ``compare_sets``.
        settings: Tier thresholds.

    Returns:
        SimilarityTier | None: Matching tier, or None when below both.
    """
    shared = len(overlap.shared)
    if (
        overlap.ratio >= settings.redundant_ratio
        and shared >= settings.redundant_min_shared
    ):
        return SimilarityTier.REDUNDANT
    if (
        overlap.ratio >= settings.overlapping_ratio
        and shared >= settings.overlapping_min_shared
    ):
        return SimilarityTier.OVERLAPPING
    return None


def find_similar_entities(
    entities: Sequence[SchemaEntity],
    settings: AuditSettings,
    *,
    grouped: Iterable[Iterable[str]] = (),
) -> SimilarityReport:
    """
    Compare the field names of every pair of entities.

    Field names are compared case-insensitively and platform-managed fields
    are ignored. Pairs already placed together in ``grouped`` are skipped.
    Redundant matches are grouped around a seed: each entity not yet in a
    redundant group seeds one, and every later ungrouped entity redundant
    with the seed joins it, so each redundant entity is reported once.
    Overlapping pairs are reported unless both sides share a redundant group.

    Args:
        entities: Entities to compare, in declaration order.
        settings: Tier thresholds.
        grouped: Name groups already reported by a higher-priority check.

    Returns:
        SimilarityReport: Redundant groups and overlapping pairs.
    """
    group_of = {
        name: index for index, group in enumerate(grouped) for name in group
    }
    field_sets = {entity.name: field_keys(entity) for entity in entities}
    names = list(field_sets)

    def excluded(first: str, second: str) -> bool:
        return first in group_of and group_of[first] == group_of.get(second)

    redundant: list[SimilarityGroup] = []
    redundant_of: dict[str, int] = {}

    for index, seed in enumerate(names):
        if seed in redundant_of:
            continue

        members = [seed]
        shared = set(field_sets[seed])
        ratios: list[float] = []

        for other in names[index + 1 :]:
            if other in redundant_of or excluded(seed, other):
                continue
            overlap = compare_sets(field_sets[seed], field_sets[other])
            if classify_overlap(overlap, settings) is SimilarityTier.REDUNDANT:
                members.append(other)
                shared &= field_sets[other]
                ratios.append(overlap.ratio)

        if ratios:
            redundant_of.update((member, len(redundant)) for member in members)
            redundant.append(
                SimilarityGroup(tuple(members), tuple(sorted(shared)), min(ratios)),
            )

    overlapping: list[SimilarityPair] = []
    for first, second in combinations(names, 2):
        if excluded(first, second):
            continue
        if first in redundant_of and redundant_of[first] == redundant_of.get(second):
            continue

        overlap = compare_sets(field_sets[first], field_sets[second])
        if classify_overlap(overlap, settings) is SimilarityTier.OVERLAPPING:
            overlapping.append(
                SimilarityPair(first, second, SimilarityTier.OVERLAPPING, overlap),
            )

    return SimilarityReport(tuple(redundant), tuple(overlapping))


def find_versioned_entities(
    names: Sequence[str],
    *,
    score_cutoff: int = 90,
) -> tuple[tuple[str, ...], ...]:
    """
    Group names that differ only by a trailing version marker.

    Every name carrying a marker (``HomePage2``, ``Home_Page_v3``) seeds a
    group of the names whose base, once normalised, scores at least
    ``score_cutoff`` against the seed's base.

    Args:
        names: Entity names in declaration order.
        score_cutoff: Minimum rapidfuzz ratio (0-100) to join a group.

    Returns:
        tuple[tuple[str, ...], ...]: Groups of two or more names, each in
            declaration order.
    """
    bases = {name: _normalised_base(name) for name in names}
    assigned: set[str] = set()
    groups: list[tuple[str, ...]] = []

    for seed in names:
        if seed in assigned or not VERSION_SUFFIX_RULE.pattern.match(seed):
            continue

        members = tuple(
            name
            for name in names
            if name not in assigned
            and fuzz.ratio(bases[seed], bases[name]) >= score_cutoff
        )
        if len(members) > 1:
            assigned.update(members)
            groups.append(members)

    return tuple(groups)


def find_similar_groups(
    named_sets: Sequence[tuple[str, Iterable[str]]],
    *,
    min_ratio: float,
    min_shared: int,
) -> tuple[SimilarityGroup, ...]:
    """
    Greedily group items whose sets overlap with a seed item.

    Each unassigned item in turn seeds a group; later unassigned items join
    when their overlap with the seed meets both thresholds.

    Args:
        named_sets: ``(name, items)`` pairs in declaration order.
        min_ratio: Minimum overlap ratio with the seed.
        min_shared: Minimum shared items with the seed.

    Returns:
        tuple[SimilarityGroup, ...]: Groups of two or more members.
    """
    entries = [(name, frozenset(items)) for name, items in named_sets]
    assigned: set[int] = set()
    groups: list[SimilarityGroup] = []

    for index, (seed, seed_items) in enumerate(entries):
        if index in assigned:
            continue

        members = [seed]
        shared = set(seed_items)
        ratios: list[float] = []

        for other_index in range(index + 1, len(entries)):
            if other_index in assigned:
                continue
            name, items = entries[other_index]
            overlap = compare_sets(seed_items, items)
            if overlap.ratio >= min_ratio and len(overlap.shared) >= min_shared:
                assigned.add(other_index)
                members.append(name)
                shared &= items
                ratios.append(overlap.ratio)

        if ratios:
            assigned.add(index)
            groups.append(
                SimilarityGroup(tuple(members), tuple(sorted(shared)), min(ratios)),
            )

    return tuple(groups)


def find_field_patterns(
    entities: Sequence[SchemaEntity],
    settings: AuditSettings,
) -> tuple[FieldPattern, ...]:
    """
    Find groups of fields repeated across entities.

    Well-known patterns are checked first. Ad-hoc three-field combinations
    of non-reference fields are then counted, skipping entities with more
    than ``pattern_field_ceiling`` such fields and stopping once
    ``pattern_combination_cap`` combinations have been examined.
    Combinations overlapping a reported well-known pattern are dropped and
    combinations held by exactly the same entities are merged.

    Args:
        entities: Entities to scan.
        settings: Thresholds and scan caps.

    Returns:
        tuple[FieldPattern, ...]: Well-known patterns followed by ad-hoc
            ones, the latter ordered by how many entities share them.
    """
    named = _find_named_patterns(entities, settings)
    covered = [frozenset(field.lower() for field in pattern.fields) for pattern in named]

    holders = _count_combinations(entities, settings)

    merged: dict[tuple[str, ...], set[str]] = {}
    for combo, names in holders.items():
        if len(names) < settings.pattern_min_entities:
            continue
        combo_set = frozenset(combo)
        if any(known <= combo_set or combo_set <= known for known in covered):
            continue
        merged.setdefault(tuple(names), set()).update(combo)

    adhoc = sorted(
        (
            FieldPattern(tuple(sorted(fields)), names)
            for names, fields in merged.items()
        ),
        key=lambda pattern: len(pattern.entities),
        reverse=True,
    )
    return named + tuple(adhoc)


def field_keys(entity: SchemaEntity, *, references: bool = True) -> frozenset[str]:
    """
    Lower-cased names of an entity's own fields.

    Args:
        entity: Entity to read.
        references: Whether reference fields are included.

    Returns:
        frozenset[str]: Comparable field names without platform fields.
    """
    return frozenset(
        field.name.lower()
        for field in entity.fields
        if field.name not in SYSTEM_FIELD_NAMES
        and (references or not field.is_reference)
    )


def _find_named_patterns(
    entities: Sequence[SchemaEntity],
    settings: AuditSettings,
) -> tuple[FieldPattern, ...]:
    field_sets = [(entity.name, field_keys(entity)) for entity in entities]
    found: list[FieldPattern] = []

    for pattern in NAMED_FIELD_PATTERNS:
        wanted = {field.lower() for field in pattern.fields}
        names = tuple(name for name, keys in field_sets if wanted <= keys)
        if len(names) >= settings.named_pattern_min_entities:
            found.append(FieldPattern(pattern.fields, names, pattern.label))

    return tuple(found)


def _count_combinations(
    entities: Sequence[SchemaEntity],
    settings: AuditSettings,
) -> dict[tuple[str, ...], list[str]]:
    holders: dict[tuple[str, ...], list[str]] = defaultdict(list)
    examined = 0

    for entity in entities:
        keys = sorted(field_keys(entity, references=False))
        if len(keys) > settings.pattern_field_ceiling:
            logger.debug(
                "Skipping %s in pattern scan: %d fields exceeds ceiling of %d",
                entity.name,
                len(keys),
                settings.pattern_field_ceiling,
            )
            continue

        for combo in combinations(keys, PATTERN_WIDTH):
            if examined >= settings.pattern_combination_cap:
                logger.debug(
                    "Pattern scan stopped after %d combinations",
                    examined,
                )
                return holders
            examined += 1
            holders[combo].append(entity.name)

    return holders


def _normalised_base(name: str) -> str:
    match = VERSION_SUFFIX_RULE.pattern.match(name)
    base = match.group(1) if match else name
    return "".join(utils.default_process(base).split())
