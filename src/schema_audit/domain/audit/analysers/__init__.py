# audit/analysers/__init__.py

from .component_nesting import NESTED_COMPONENTS, analyse_nested_components
from .duplicates import (
    DUPLICATE_COMPONENTS,
    DUPLICATE_FIELD_PATTERNS,
    OVERLAPPING_MODELS,
    REDUNDANT_MODELS,
    analyse_duplicate_components,
    analyse_duplicate_field_patterns,
    analyse_overlapping_models,
    analyse_redundant_models,
    describe_pattern,
)
from .enums import (
    DUPLICATE_ENUMS,
    ENUM_BASED_TENANCY,
    OVERSIZED_ENUMS,
    SINGLE_VALUE_ENUMS,
    UNUSED_ENUMS,
    analyse_duplicate_enums,
    analyse_enum_tenancy,
    analyse_oversized_enums,
    analyse_single_value_enums,
    analyse_unused_enums,
)
from .maturity import assess_schema_maturity, build_scoring_signals, find_coupled_fields
from .query_paths import DEEP_QUERY_PATHS, analyse_deep_query_paths
from .relationships import (
    DANGLING_REFERENCES,
    HUB_MODELS,
    ORPHAN_MODELS,
    RECURSIVE_CHAINS,
    TWO_WAY_REFERENCES,
    analyse_dangling_references,
    analyse_hub_models,
    analyse_orphan_models,
    analyse_recursive_chains,
    analyse_two_way_references,
    find_orphan_models,
)
from .structure import (
    ASSET_CENTRALIZATION,
    DISTINCT_CONTENT_TYPES,
    FIELD_COUNT_AND_NAMING,
    HUGE_MODELS,
    MISSING_REQUIRED_FIELDS,
    USE_OF_COMPONENTS,
    analyse_asset_centralization,
    analyse_component_usage,
    analyse_distinct_content_types,
    analyse_field_naming,
    analyse_huge_models,
    analyse_missing_required_fields,
    find_huge_models,
)

# Every checkpoint of an audit run, in report order
CHECKPOINTS = (
    (TWO_WAY_REFERENCES, analyse_two_way_references),
    (RECURSIVE_CHAINS, analyse_recursive_chains),
    (DANGLING_REFERENCES, analyse_dangling_references),
    (ORPHAN_MODELS, analyse_orphan_models),
    (HUB_MODELS, analyse_hub_models),
    (DEEP_QUERY_PATHS, analyse_deep_query_paths),
    (NESTED_COMPONENTS, analyse_nested_components),
    (REDUNDANT_MODELS, analyse_redundant_models),
    (OVERLAPPING_MODELS, analyse_overlapping_models),
    (DUPLICATE_COMPONENTS, analyse_duplicate_components),
    (DUPLICATE_FIELD_PATTERNS, analyse_duplicate_field_patterns),
    (SINGLE_VALUE_ENUMS, analyse_single_value_enums),
    (OVERSIZED_ENUMS, analyse_oversized_enums),
    (DUPLICATE_ENUMS, analyse_duplicate_enums),
    (UNUSED_ENUMS, analyse_unused_enums),
    (ENUM_BASED_TENANCY, analyse_enum_tenancy),
    (DISTINCT_CONTENT_TYPES, analyse_distinct_content_types),
    (FIELD_COUNT_AND_NAMING, analyse_field_naming),
    (HUGE_MODELS, analyse_huge_models),
    (MISSING_REQUIRED_FIELDS, analyse_missing_required_fields),
    (ASSET_CENTRALIZATION, analyse_asset_centralization),
    (USE_OF_COMPONENTS, analyse_component_usage),
)

__all__ = [
    "CHECKPOINTS",
    "analyse_asset_centralization",
    "analyse_component_usage",
    "analyse_dangling_references",
    "analyse_deep_query_paths",
    "analyse_distinct_content_types",
    "analyse_duplicate_components",
    "analyse_duplicate_enums",
    "analyse_duplicate_field_patterns",
    "analyse_enum_tenancy",
    "analyse_field_naming",
    "analyse_huge_models",
    "analyse_hub_models",
    "analyse_missing_required_fields",
    "analyse_nested_components",
    "analyse_orphan_models",
    "analyse_overlapping_models",
    "analyse_oversized_enums",
    "analyse_recursive_chains",
    "analyse_redundant_models",
    "analyse_single_value_enums",
    "analyse_two_way_references",
    "analyse_unused_enums",
    "assess_schema_maturity",
    "build_scoring_signals",
    "describe_pattern",
    "find_coupled_fields",
    "find_huge_models",
    "find_orphan_models",
]
