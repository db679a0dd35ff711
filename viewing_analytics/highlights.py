"""Example titles (with posters) for each hierarchy slice."""

import random
from typing import Dict, Iterable, List, Optional

from . import config
from .models import Entry

__all__ = ["build_slice_index", "slice_examples"]


def build_slice_index(entries: Iterable[Entry]) -> Dict[tuple, List[dict]]:
    """
    Map (cat,), (cat, genre) and (cat, genre, lang) to unique example titles.
    Entries without both a title and a poster are skipped.
    """
    index: Dict[tuple, List[dict]] = {}
    for entry in entries:
        if not entry.title or not entry.poster_url:
            continue
        example = {"title": entry.title, "poster": entry.poster_url, "year": entry.release_year or ""}
        keys = [
            (entry.category,),
            (entry.category, entry.primary_genre),
            (entry.category, entry.primary_genre, entry.language),
        ]
        for key in keys:
            bucket = index.setdefault(key, [])
            if any(e["title"] == example["title"] and e["poster"] == example["poster"] for e in bucket):
                continue
            bucket.append(example)
    return index


def slice_examples(index: Dict[tuple, List[dict]], category: str, genre: Optional[str] = None,
                   language: Optional[str] = None, count: int = config.SLICE_TITLES_COUNT,
                   rng: Optional[random.Random] = None) -> List[dict]:
    """
    Pick `count` examples from the most specific slice that exists.
    Returns [] when that slice has fewer than `count` examples.
    """
    keys = []
    if genre and language:
        keys.append((category, genre, language))
    if genre:
        keys.append((category, genre))
    keys.append((category,))

    entries = next((index[k] for k in keys if k in index), [])
    if len(entries) < count:
        return []
    pool = list(entries)
    (rng or random.Random()).shuffle(pool)
    return pool[:count]
