# audit/artifacts.py

from functools import cached_property

from .graph import (
    NestingResult,
    PathExploration,
    RelationGraph,
    build_relation_graph,
    compute_nesting_depths,
    explore_paths,
    find_bidirectional_pairs,
    find_cycles,
)
from .models import AuditSettings
from .similarity import (
    FieldPattern,
    SimilarityGroup,
    SimilarityReport,
    field_keys,
    find_field_patterns,
    find_similar_entities,
    find_similar_groups,
    find_versioned_entities,
)
from .view import SchemaView


class AuditArtifacts:
    """
    Detector output shared by the checkpoints of one audit run.

    Each artifact is computed on first access and then reused, so a detector
    that fails raises inside the checkpoint that asked for it and nowhere
    else. An instance belongs to a single run and is never shared.
    """

    def __init__(self, view: SchemaView, settings: AuditSettings) -> None:
        self.view = view
        self.settings = settings

    @cached_property
    def model_graph(self) -> RelationGraph:
        """
        Reference graph between standalone models.
        """
        return build_relation_graph(
            self.view.models,
            known_names=self.view.known_names,
        )

    @cached_property
    def entity_graph(self) -> RelationGraph:
        """
        Reference and embedding graph across every audited entity.
        """
        return build_relation_graph(
            self.view.entities,
            known_names=self.view.known_names,
            composition=True,
        )

    @cached_property
    def component_graph(self) -> RelationGraph:
        """
        Embedding graph between sub-structures.
        """
        return build_relation_graph(
            self.view.components,
            known_names=self.view.known_names,
            composition=True,
        )

    @cached_property
    def bidirectional_pairs(self) -> tuple[tuple[str, str], ...]:
        return find_bidirectional_pairs(self.model_graph)

    @cached_property
    def cycles(self) -> tuple[tuple[str, ...], ...]:
        return find_cycles(
            self.model_graph,
            max_length=self.settings.cycle_max_length,
            max_cycles=self.settings.cycle_limit,
            max_expansions=self.settings.cycle_expansion_budget,
        )

    @cached_property
    def paths(self) -> PathExploration:
        settings = self.settings
        return explore_paths(
            self.model_graph,
            min_length=settings.path_min_length,
            max_length=settings.path_max_length,
            max_fan_out=settings.path_max_fan_out,
            max_queue=settings.path_max_queue,
            max_paths_per_start=settings.path_max_per_start,
            max_total_paths=settings.path_max_total,
            high_cost_depth=settings.path_high_cost_depth,
            medium_cost_depth=settings.path_medium_cost_depth,
        )

    @cached_property
    def nesting(self) -> dict[str, NestingResult]:
        return compute_nesting_depths(
            self.component_graph,
            max_depth=self.settings.nesting_max_depth,
            max_expansions=self.settings.nesting_expansion_budget,
        )

    @cached_property
    def versioned_groups(self) -> tuple[tuple[str, ...], ...]:
        return find_versioned_entities(
            [model.name for model in self.view.models],
            score_cutoff=self.settings.version_name_cutoff,
        )

    @cached_property
    def similarity(self) -> SimilarityReport:
        return find_similar_entities(
            self.view.models,
            self.settings,
            grouped=self.versioned_groups,
        )

    @cached_property
    def component_groups(self) -> tuple[SimilarityGroup, ...]:
        return find_similar_groups(
            [(component.name, field_keys(component)) for component in self.view.components],
            min_ratio=self.settings.component_overlap_ratio,
            min_shared=self.settings.component_min_shared,
        )

    @cached_property
    def enumeration_groups(self) -> tuple[SimilarityGroup, ...]:
        return find_similar_groups(
            [
                (enumeration.name, {value.lower() for value in enumeration.values})
                for enumeration in self.view.enumerations
            ],
            min_ratio=self.settings.enum_overlap_ratio,
            min_shared=self.settings.enum_min_shared,
        )

    @cached_property
    def field_patterns(self) -> tuple[FieldPattern, ...]:
        return find_field_patterns(self.view.models, self.settings)

    @cached_property
    def enumeration_usage(self) -> dict[str, tuple[str, ...]]:
        """
        ``Entity.field`` locations using each audited enumeration.
        """
        usage: dict[str, list[str]] = {
            enumeration.name: [] for enumeration in self.view.enumerations
        }
        for entity in self.view.entities:
            for field in entity.fields:
                if field.type in usage:
                    usage[field.type].append(f"{entity.name}.{field.name}")
        return {name: tuple(locations) for name, locations in usage.items()}

    @cached_property
    def component_usage(self) -> dict[str, tuple[str, ...]]:
        """
        Entities embedding each audited sub-structure.
        """
        graph = self.entity_graph
        return {
            component.name: tuple(
                referrer
                for referrer in graph.referrers(component.name)
                if referrer != component.name
            )
            for component in self.view.components
        }
