"""
Leaf aggregation and the Category -> Genre -> Language tree used for the
layered (sunburst-style) view.
"""

import logging
from typing import Dict, Iterable, Tuple

import pandas as pd

from . import config
from .models import Entry

__all__ = [
    "entries_to_frame",
    "aggregate_leaf_tuples",
    "tuples_to_sequences",
    "HierarchyNode",
    "build_hierarchy",
    "prune_empty_branches",
    "build_hierarchy_from_entries",
]

logger = logging.getLogger(__name__)

AggregationKey = Tuple[str, str, str]
_KEY_COLUMNS = ["category", "primary_genre", "language"]


def entries_to_frame(entries: Iterable[Entry]) -> pd.DataFrame:
    """One row per entry, columns named after the Entry fields."""
    return pd.DataFrame.from_records([e._asdict() for e in entries], columns=list(Entry._fields))


def aggregate_leaf_tuples(entries: Iterable[Entry]) -> Dict[AggregationKey, float]:
    """
    Sum metric_value per (category, primary_genre, language).

    Keys keep first-seen order; buckets whose sum is not positive are dropped.
    """
    df = entries_to_frame(entries)
    if df.empty:
        return {}
    sums = df.groupby(_KEY_COLUMNS, sort=False)["metric_value"].sum()
    sums = sums[sums > 0]
    return {tuple(key): float(value) for key, value in sums.items()}


def tuples_to_sequences(aggregates: Dict[AggregationKey, float]):
    """(cat, genre, lang) -> value becomes ((cat, genre, lang, END_TOKEN), value)."""
    return [((category, genre, language, config.END_TOKEN), value)
            for (category, genre, language), value in aggregates.items()]


class HierarchyNode:
    """Tree node. Only terminal nodes carry a value; ancestors derive totals on read."""

    def __init__(self, name, value=None):
        self.name = name
        self.value = value
        self.children = []
        self._index = {}

    def child(self, name):
        return self._index.get(name)

    def add_child(self, name):
        """Return the child called name, creating it at the end if absent."""
        node = self._index.get(name)
        if node is None:
            node = HierarchyNode(name)
            self.children.append(node)
            self._index[name] = node
        return node

    def set_children(self, children):
        self.children = list(children)
        self._index = {c.name: c for c in self.children}

    def total(self) -> float:
        return (self.value or 0) + sum(c.total() for c in self.children)

    def find(self, *path):
        node = self
        for name in path:
            node = node.child(name)
            if node is None:
                return None
        return node

    def walk(self, depth=0):
        """Yield (depth, node) pairs in pre-order."""
        yield depth, self
        for c in self.children:
            yield from c.walk(depth + 1)

    def leaves(self):
        return [node for _, node in self.walk() if not node.children]

    def to_dict(self) -> dict:
        out = {"name": self.name, "children": [c.to_dict() for c in self.children]}
        if self.value is not None:
            out["value"] = self.value
        return out

    def __repr__(self):
        return f"HierarchyNode({self.name!r}, value={self.value!r}, children={len(self.children)})"


def prune_empty_branches(node: HierarchyNode) -> HierarchyNode:
    """Drop, bottom-up, every node with no positive value and no surviving child."""
    kept = []
    for child in node.children:
        prune_empty_branches(child)
        if child.children or (child.value or 0) > 0:
            kept.append(child)
    node.set_children(kept)
    return node


def build_hierarchy(sequences) -> HierarchyNode:
    """
    Build the pruned tree from (path, value) pairs.

    Args:
        sequences: iterable of (path, value); path is a tuple of names or a
            '|'-joined string. END_TOKEN in the path assigns the value to the
            node built so far instead of adding a level.

    Returns:
        HierarchyNode: sentinel root; has no children when nothing positive remains
    """
    root = HierarchyNode(config.ROOT_NAME)
    for path, size in sequences:
        parts = path.split("|") if isinstance(path, str) else list(path)
        node = root
        for name in parts:
            if name == config.END_TOKEN:
                node.value = (node.value or 0) + size
                break
            node = node.add_child(name)
    prune_empty_branches(root)
    if not root.children:
        logger.warning("Hierarchy is empty: no bucket has a positive value")
    return root


def build_hierarchy_from_entries(entries: Iterable[Entry]) -> HierarchyNode:
    return build_hierarchy(tuples_to_sequences(aggregate_leaf_tuples(entries)))
