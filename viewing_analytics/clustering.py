"""
Engagement segmentation
=======================

Titles are placed on two percentile-rank axes:
- x: engagement depth (metric_a / metric_b, e.g. hours per view)
- y: reach (metric_a, e.g. total hours)

and grouped with k-means. Each cluster is labelled by the quadrant its
centroid falls in.
"""

import logging
import math
from collections import Counter
from typing import Iterable, List, Optional

import numpy as np

from . import config
from .models import ClusterModel, ClusterPoint, ClusterSummary, DualMetricRecord

__all__ = [
    "percentile_ranks",
    "distinct_points",
    "initial_centroids",
    "kmeans",
    "dedupe_records",
    "quadrant_for",
    "EngagementClusterer",
    "cluster_engagement",
    "rerank_points",
]

logger = logging.getLogger(__name__)


def _make_rng(random_state):
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def _distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    diff = points[:, None, :] - centroids[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=2))


def percentile_ranks(values) -> np.ndarray:
    """Position in ascending (stable) order divided by N-1; a single value ranks 0."""
    values = np.asarray(values, dtype=float)
    n = len(values)
    ranks = np.zeros(n)
    if n == 0:
        return ranks
    order = np.argsort(values, kind="stable")
    ranks[order] = np.arange(n) / (n - 1 if n > 1 else 1)
    return ranks


def distinct_points(points: np.ndarray) -> np.ndarray:
    """Unique rows in order of first appearance."""
    if len(points) == 0:
        return points
    _, first = np.unique(points, axis=0, return_index=True)
    return points[np.sort(first)]


def initial_centroids(points: np.ndarray, k: int, rng, init: str = "random") -> np.ndarray:
    """
    Pick k distinct starting centroids.

    'random' draws k distinct points uniformly; 'farthest' draws one point and
    then repeatedly adds the point farthest from every centroid chosen so far.
    """
    distinct = distinct_points(points)
    if init == "random":
        picks = rng.choice(len(distinct), size=k, replace=False)
        return distinct[picks].copy()

    chosen = [int(rng.integers(len(distinct)))]
    while len(chosen) < k:
        nearest = _distances(distinct, distinct[chosen]).min(axis=1)
        chosen.append(int(nearest.argmax()))
    return distinct[chosen].copy()


def kmeans(points, k: int = config.DEFAULT_CLUSTER_COUNT,
           max_iterations: int = config.MAX_KMEANS_ITERATIONS,
           random_state=None, init: str = "random"):
    """
    Lloyd's k-means with Euclidean distance.

    Args:
        points: (n, d) array-like of coordinates
        k (int): requested cluster count; lowered to the number of distinct points
        max_iterations (int): cap on assignment passes
        random_state: seed or numpy Generator used for initialization
        init (str): 'random' or 'farthest'

    Returns:
        tuple: (assignments, centroids, iterations, converged). Assignment ties go
        to the lowest centroid index; an emptied cluster keeps its centroid.
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
    if init not in config.INIT_STRATEGIES:
        raise ValueError(f"Unknown init strategy {init!r}; expected one of {config.INIT_STRATEGIES}")

    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or len(points) == 0:
        raise ValueError("kmeans needs a non-empty 2-D array of points")

    n_distinct = len(distinct_points(points))
    if k > n_distinct:
        logger.warning("Only %d distinct points; reducing k from %d to %d", n_distinct, k, n_distinct)
        k = n_distinct

    centroids = initial_centroids(points, k, _make_rng(random_state), init)
    assignments = None
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        new_assignments = _distances(points, centroids).argmin(axis=1)
        if assignments is not None and np.array_equal(new_assignments, assignments):
            converged = True
            break
        assignments = new_assignments
        # centroids move only after every point has been assigned
        for i in range(k):
            members = points[assignments == i]
            if len(members):
                centroids[i] = members.mean(axis=0)

    return assignments, centroids, iterations, converged


def dedupe_records(records: Iterable[DualMetricRecord]) -> List[DualMetricRecord]:
    """
    Merge records sharing (category, title, release year), summing both metrics.
    The first record's entry is kept.
    """
    merged = {}
    for record in records:
        entry = record.entry
        key = (entry.category, entry.title, entry.release_year or "")
        existing = merged.get(key)
        if existing is None:
            merged[key] = record
        else:
            merged[key] = existing._replace(
                metric_a=existing.metric_a + record.metric_a,
                metric_b=existing.metric_b + record.metric_b,
            )
    return list(merged.values())


def quadrant_for(x: float, y: float):
    """Return (quadrant key, display label) for a centroid position."""
    return config.QUADRANTS[(x >= 0.5, y >= 0.5)]


def _genre_label(genre: str) -> str:
    return genre[:1].upper() + genre[1:] if genre else genre


def _summarize(index: int, centroid, members: List[ClusterPoint]) -> ClusterSummary:
    x, y = float(centroid[0]), float(centroid[1])
    quadrant, label = quadrant_for(x, y)
    genres = Counter(_genre_label(p.entry.primary_genre) for p in members)
    return ClusterSummary(
        index=index,
        x=x,
        y=y,
        count=len(members),
        total_metric=float(sum(p.metric_a for p in members)),
        top_genres=[g for g, _ in genres.most_common(3)],
        mean_ratio=float(np.mean([p.ratio for p in members])) if members else None,
        quadrant=quadrant,
        label=label,
    )


class EngagementClusterer:
    """Deduplicate, rank and cluster dual-metric records."""

    def __init__(self, k=config.DEFAULT_CLUSTER_COUNT, max_iterations=config.MAX_KMEANS_ITERATIONS,
                 random_state=None, init="random"):
        self.k = k
        self.max_iterations = max_iterations
        self.random_state = random_state
        self.init = init
        self.model = None

    def fit(self, records: Iterable[DualMetricRecord]) -> Optional[ClusterModel]:
        """
        Returns:
            ClusterModel, or None when no record has both metrics positive
        """
        merged = dedupe_records(records)
        qualified = [r for r in merged if r.metric_a > 0 and r.metric_b > 0]
        if not qualified:
            logger.warning("No records with both metrics positive; skipping clustering")
            self.model = None
            return None

        ratios = np.array([r.metric_a / r.metric_b for r in qualified])
        xs = percentile_ranks(ratios)
        ys = percentile_ranks([r.metric_a for r in qualified])

        assignments, centroids, iterations, converged = kmeans(
            np.column_stack([xs, ys]),
            self.k,
            max_iterations=self.max_iterations,
            random_state=self.random_state,
            init=self.init,
        )

        points = [
            ClusterPoint(
                x=float(xs[i]),
                y=float(ys[i]),
                cluster=int(assignments[i]),
                size=math.sqrt(record.metric_a),
                entry=record.entry,
                metric_a=record.metric_a,
                metric_b=record.metric_b,
                ratio=float(ratios[i]),
            )
            for i, record in enumerate(qualified)
        ]
        clusters = [
            _summarize(i, centroid, [p for p in points if p.cluster == i])
            for i, centroid in enumerate(centroids)
        ]
        logger.info("Clustered %d titles into %d clusters in %d iterations (converged: %s)",
                    len(points), len(clusters), iterations, converged)
        self.model = ClusterModel(points, clusters, len(centroids), iterations, converged)
        return self.model


def cluster_engagement(records: Iterable[DualMetricRecord], k=config.DEFAULT_CLUSTER_COUNT,
                       max_iterations=config.MAX_KMEANS_ITERATIONS, random_state=None,
                       init="random") -> Optional[ClusterModel]:
    return EngagementClusterer(k, max_iterations, random_state, init).fit(records)


def rerank_points(points: List[ClusterPoint], category: Optional[str] = None) -> List[ClusterPoint]:
    """
    Restrict points to one category and recompute both ranks within it, so a
    filtered view stays spread over [0, 1]. An empty filter keeps every point.
    """
    subset = points
    if category is not None:
        subset = [p for p in points if p.entry.category.lower() == category.lower()] or points
    if not subset:
        return []
    xs = percentile_ranks([p.ratio for p in subset])
    ys = percentile_ranks([p.metric_a for p in subset])
    return [p._replace(x=float(x), y=float(y)) for p, x, y in zip(subset, xs, ys)]
