from .models import Entry, DualMetricRecord, ClusterPoint, ClusterSummary, ClusterModel
from .normalize import normalize_row, expand_genres, fill_missing_fields, extract_dual_metrics
from .hierarchy import HierarchyNode, aggregate_leaf_tuples, build_hierarchy, tuples_to_sequences
from .keywords import KeywordIndex, analyze_keywords
from .clustering import cluster_engagement, kmeans
from .pipeline import CatalogAnalyticsPipeline, PipelineResult, run_pipeline

__all__ = [
    "Entry",
    "DualMetricRecord",
    "ClusterPoint",
    "ClusterSummary",
    "ClusterModel",
    "normalize_row",
    "expand_genres",
    "fill_missing_fields",
    "extract_dual_metrics",
    "HierarchyNode",
    "aggregate_leaf_tuples",
    "build_hierarchy",
    "tuples_to_sequences",
    "KeywordIndex",
    "analyze_keywords",
    "cluster_engagement",
    "kmeans",
    "CatalogAnalyticsPipeline",
    "PipelineResult",
    "run_pipeline",
]
