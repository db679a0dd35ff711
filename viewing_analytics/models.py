"""Plain record types passed between the analytics stages."""

from typing import List, NamedTuple, Optional, Tuple


class Entry(NamedTuple):
    """One normalized catalog row. Produced once per normalization pass, never mutated."""

    category: str
    language: str
    genres: Tuple[str, ...]
    primary_genre: str
    metric_value: float
    release_year: Optional[str] = None
    runtime_minutes: Optional[int] = None
    title: str = ""
    country: str = ""
    poster_url: Optional[str] = None
    summary: str = ""


class DualMetricRecord(NamedTuple):
    """An entry with both engagement metrics (metric_a = hours, metric_b = views)."""

    entry: Entry
    metric_a: float
    metric_b: float


class ClusterPoint(NamedTuple):
    x: float
    y: float
    cluster: int
    size: float
    entry: Entry
    metric_a: float
    metric_b: float
    ratio: float


class ClusterSummary(NamedTuple):
    index: int
    x: float
    y: float
    count: int
    total_metric: float
    top_genres: List[str]
    mean_ratio: Optional[float]
    quadrant: str
    label: str


class ClusterModel(NamedTuple):
    points: List[ClusterPoint]
    clusters: List[ClusterSummary]
    k: int
    iterations: int
    converged: bool
