# graph/__init__.py

from .builder import DanglingReference, RelationEdge, RelationGraph, build_relation_graph
from .cycles import find_bidirectional_pairs, find_cycles
from .nesting import NestingResult, compute_nesting_depths, find_composing_roots
from .paths import PathExploration, QueryCost, RankedPath, estimate_cost, explore_paths

__all__ = [
    # builder
    "DanglingReference",
    "RelationEdge",
    "RelationGraph",
    "build_relation_graph",
    # cycles
    "find_bidirectional_pairs",
    "find_cycles",
    # nesting
    "NestingResult",
    "compute_nesting_depths",
    "find_composing_roots",
    # paths
    "PathExploration",
    "QueryCost",
    "RankedPath",
    "estimate_cost",
    "explore_paths",
]
