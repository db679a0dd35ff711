"""
Value-weighted keyword tables per (category, genre) and (category, genre, language).

Every surviving token of an entry's title (and, for long-form content, its
summary) adds one to the token's count and the entry's metric_value to its
weight. Ranking is by weight, so keywords reflect what was watched rather than
what was merely listed.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from . import config
from .models import Entry
from .utils import strip_html

__all__ = ["tokenize", "KeywordIndex", "analyze_keywords"]

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"[^\w]+")
_ALPHA_RE = re.compile(r"^[a-z]+$")


def tokenize(text) -> List[str]:
    """Lowercase alphabetic tokens longer than 3 characters."""
    if not text:
        return []
    words = _SPLIT_RE.split(str(text).lower())
    return [w for w in words if len(w) > 3 and _ALPHA_RE.match(w)]


class KeywordIndex:
    """Holds the genre-level and language-level token tables."""

    def __init__(self):
        self.by_genre: Dict[tuple, Dict[str, dict]] = {}
        self.by_language: Dict[tuple, Dict[str, dict]] = {}

    def add(self, entry: Entry, words: List[str]):
        keys = [(self.by_genre, (entry.category, entry.primary_genre))]
        if entry.language:
            keys.append((self.by_language, (entry.category, entry.primary_genre, entry.language)))
        for table, key in keys:
            tokens = table.setdefault(key, {})
            for word in words:
                stat = tokens.setdefault(word, {"count": 0, "weight": 0.0})
                stat["count"] += 1
                stat["weight"] += entry.metric_value

    def table_for(self, category: str, genre: str, language: Optional[str] = None):
        if language:
            table = self.by_language.get((category, genre, language))
            if table:
                return table
        return self.by_genre.get((category, genre))

    def top_keywords(self, category: str, genre: str, language: Optional[str] = None,
                     limit: int = config.DEFAULT_KEYWORD_LIMIT) -> List[str]:
        """
        Highest-weight tokens for a slice.

        Uses the language table when it exists and has tokens, otherwise the
        genre table. The genre's own name is never returned. Ties keep
        insertion order.
        """
        table = self.table_for(category, genre, language)
        if not table:
            return []
        genre_lower = genre.lower()
        ranked = sorted(
            (word for word in table if word != genre_lower),
            key=lambda word: table[word]["weight"],
            reverse=True,
        )
        return ranked[:limit]

    def __len__(self):
        return len(self.by_genre) + len(self.by_language)


def _entry_words(entry: Entry, long_form_categories) -> Optional[List[str]]:
    parts = []
    if entry.category in long_form_categories and entry.summary:
        parts.append(strip_html(entry.summary))
    if entry.title:
        parts.append(entry.title)
    text = " ".join(parts)
    if not text:
        return None

    title_tokens = tokenize(entry.title)
    single_title = title_tokens[0] if len(title_tokens) == 1 else None
    return [
        w for w in tokenize(text)
        if w not in config.STOP_WORDS
        and w not in config.LANGUAGE_WORDS
        and w != single_title
    ]


def analyze_keywords(entries: Iterable[Entry],
                     long_form_categories=config.LONG_FORM_CATEGORIES) -> KeywordIndex:
    """
    Build the keyword tables for a collection of entries.

    Args:
        entries: normalized (optionally genre-expanded) entries
        long_form_categories: categories whose summary text is tokenized too

    Returns:
        KeywordIndex
    """
    index = KeywordIndex()
    for entry in entries:
        words = _entry_words(entry, long_form_categories)
        if words is not None:
            index.add(entry, words)
    logger.info("Keyword tables built: %d genre groups, %d language groups",
                len(index.by_genre), len(index.by_language))
    return index
