"""
Catalog Analytics Pipeline
==========================

Runs every stage over one pre-loaded catalog:
normalize -> fill missing fields -> genre fan-out -> aggregate -> hierarchy,
plus keywords, engagement clusters and slice highlights.

Every run rebuilds everything from the raw records; there is no incremental path.
"""

import logging
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from . import config
from .clustering import EngagementClusterer
from .hierarchy import HierarchyNode, aggregate_leaf_tuples, build_hierarchy, tuples_to_sequences
from .highlights import build_slice_index, slice_examples
from .keywords import KeywordIndex, analyze_keywords
from .models import ClusterModel, Entry
from .normalize import expand_genres, extract_dual_metrics, fill_missing_fields, normalize_row

__all__ = ["PipelineResult", "CatalogAnalyticsPipeline", "run_pipeline"]

logger = logging.getLogger(__name__)


class PipelineResult(NamedTuple):
    entries: List[Entry]
    expanded: List[Entry]
    aggregates: Dict[tuple, float]
    hierarchy: HierarchyNode
    keywords: KeywordIndex
    clusters: Optional[ClusterModel]
    slice_index: Dict[tuple, List[dict]]
    total_value: float


class CatalogAnalyticsPipeline:
    """Main pipeline class; options are fixed per instance and passed in explicitly."""

    def __init__(self, metric_mode=config.DEFAULT_METRIC_MODE, split_genres=True,
                 cluster_count=config.DEFAULT_CLUSTER_COUNT, random_state=None, init="random",
                 collapse_duplicate_genres=False):
        if metric_mode not in config.VALUE_FIELDS:
            raise ValueError(
                f"Unknown metric mode {metric_mode!r}; expected one of {sorted(config.VALUE_FIELDS)}"
            )
        if init not in config.INIT_STRATEGIES:
            raise ValueError(f"Unknown init strategy {init!r}; expected one of {config.INIT_STRATEGIES}")
        if cluster_count < 1:
            raise ValueError(f"cluster_count must be at least 1, got {cluster_count}")
        self.metric_mode = metric_mode
        self.split_genres = split_genres
        self.cluster_count = cluster_count
        self.random_state = random_state
        self.init = init
        self.collapse_duplicate_genres = collapse_duplicate_genres
        self.result = None

    def normalize(self, records_by_category: Mapping[str, Iterable]):
        """
        Normalize every raw record.

        Returns:
            tuple: (entries, dual-metric records), index-aligned
        """
        entries = []
        dual = []
        for category, records in records_by_category.items():
            count = 0
            for raw in records:
                entry = normalize_row(raw, category, self.metric_mode, self.collapse_duplicate_genres)
                entries.append(entry)
                dual.append(extract_dual_metrics(raw, entry))
                count += 1
            logger.info("Loaded %d %s records", count, category)

        filled = fill_missing_fields(entries)
        dual = [record._replace(entry=entry) for record, entry in zip(dual, filled)]
        return filled, dual

    def run(self, records_by_category: Mapping[str, Iterable]) -> PipelineResult:
        """
        Run the complete analytics pipeline.

        Args:
            records_by_category: {'Movie': [row, ...], 'TV': [row, ...]}

        Returns:
            PipelineResult
        """
        entries, dual = self.normalize(records_by_category)
        expanded = expand_genres(entries, self.split_genres)
        logger.info("%d entries, %d after genre fan-out", len(entries), len(expanded))

        aggregates = aggregate_leaf_tuples(expanded)
        hierarchy = build_hierarchy(tuples_to_sequences(aggregates))
        keywords = analyze_keywords(expanded)

        # clustered per source row, not per fan-out copy
        clusterer = EngagementClusterer(self.cluster_count, random_state=self.random_state, init=self.init)
        clusters = clusterer.fit(dual)

        self.result = PipelineResult(
            entries=entries,
            expanded=expanded,
            aggregates=aggregates,
            hierarchy=hierarchy,
            keywords=keywords,
            clusters=clusters,
            slice_index=build_slice_index(expanded),
            total_value=float(sum(e.metric_value for e in expanded)),
        )
        return self.result

    def _require_result(self) -> PipelineResult:
        if self.result is None:
            raise RuntimeError("Pipeline has not been run yet; call run() first")
        return self.result

    def top_keywords(self, category, genre, language=None, limit=config.DEFAULT_KEYWORD_LIMIT):
        return self._require_result().keywords.top_keywords(category, genre, language, limit)

    def slice_examples(self, category, genre=None, language=None, count=config.SLICE_TITLES_COUNT, rng=None):
        return slice_examples(self._require_result().slice_index, category, genre, language, count, rng)


def run_pipeline(records_by_category: Mapping[str, Iterable], **options) -> PipelineResult:
    return CatalogAnalyticsPipeline(**options).run(records_by_category)
