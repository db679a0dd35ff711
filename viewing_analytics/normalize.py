"""
Record normalization
====================

Turns one heterogeneous catalog row into a canonical ``Entry``. Every field is
resolved through the candidate lists in ``config``; anything malformed degrades
to a documented default instead of raising.
"""

import logging
import math
import re
from collections import defaultdict
from typing import Iterable, List

import numpy as np

from . import config
from .models import DualMetricRecord, Entry
from .utils import clean_text, normalize_poster, round_half_up, sanitize_title

__all__ = [
    "to_number",
    "pick_metric",
    "parse_runtime_minutes",
    "normalize_country_name",
    "country_heuristic",
    "infer_language",
    "split_genres",
    "normalize_row",
    "normalize_records",
    "expand_genres",
    "fill_missing_fields",
    "extract_dual_metrics",
]

logger = logging.getLogger(__name__)

_GENRE_SPLIT_RE = re.compile(r"\s*[,|/;]\s*")
_GENRE_PUNCT_RE = re.compile(r"[().,;!?']")
_COUNTRY_SPLIT_RE = re.compile(r"[,/|;]+")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")
_RUNTIME_JUNK_RE = re.compile(r"[^0-9.\-]")
_LEADING_DIGITS_RE = re.compile(r"\s*(\d+)")
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


# ---------- field helpers ----------

def _first_text(raw, fields) -> str:
    """First non-empty value among the candidate fields, as a trimmed string."""
    for field in fields:
        value = clean_text(raw.get(field))
        if value:
            return value
    return ""


def to_number(value) -> float:
    """Coerce a cell to float, stripping thousands separators. Failures give NaN."""
    if value is None:
        return math.nan
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        s = value
    else:
        s = str(value).replace(",", "").strip()
        if not s:
            return math.nan
    try:
        return float(s)
    except (OverflowError, ValueError, TypeError):
        return math.nan


def pick_metric(raw, metric_mode: str = config.DEFAULT_METRIC_MODE) -> float:
    """
    Read the active metric from the first candidate column present in the row.

    Args:
        raw: row mapping
        metric_mode (str): key of config.VALUE_FIELDS ('hours' or 'views')

    Returns:
        float: non-negative finite value, 0.0 when missing or malformed
    """
    try:
        fields = config.VALUE_FIELDS[metric_mode]
    except KeyError:
        raise ValueError(
            f"Unknown metric mode {metric_mode!r}; expected one of {sorted(config.VALUE_FIELDS)}"
        ) from None
    field = next((f for f in fields if f in raw), None)
    num = to_number(raw[field]) if field is not None else math.nan
    if not math.isfinite(num) or num < 0:
        return 0.0
    return num


def parse_runtime_minutes(value):
    """
    '1:30:00' -> 90, '45' -> 45, 'abc' -> None.

    Colon parts are read by their leading digits ('1:30 min' -> 90); a part
    without any digits makes the whole value unparseable.
    """
    s = clean_text(value)
    if not s:
        return None
    if ":" in s:
        matches = [_LEADING_DIGITS_RE.match(p) for p in s.split(":")]
        if not all(matches):
            return None
        hours, minutes, seconds = ([int(m.group(1)) for m in matches] + [0, 0, 0])[:3]
        total = hours * 60 + minutes + seconds // 60
        return total if total > 0 else None
    num = to_number(_RUNTIME_JUNK_RE.sub("", s))
    if not math.isfinite(num) or num <= 0:
        return None
    minutes = round_half_up(num)
    return minutes if minutes > 0 else None


def _first_runtime(raw):
    for field in config.RUNTIME_FIELDS:
        minutes = parse_runtime_minutes(raw.get(field))
        if minutes is not None:
            return minutes
    return None


def normalize_country_name(value) -> str:
    """'US, CA' -> 'United States, Canada'. Longer tokens are left as they are."""
    s = clean_text(value)
    if not s:
        return ""
    parts = [p.strip() for p in _COUNTRY_SPLIT_RE.split(s) if p.strip()]
    mapped = [
        config.COUNTRY_NAMES.get(p.lower(), p) if len(p) == 2 else p
        for p in parts
    ]
    return ", ".join(mapped)


def country_heuristic(language) -> str:
    key = clean_text(language).lower()
    if not key:
        return ""
    return config.LANGUAGE_COUNTRIES.get(key, "")


def infer_language(title) -> str:
    """Guess a language from the title alone. Returns '' when nothing matches."""
    s = clean_text(title)
    if not s:
        return ""
    lower = s.lower()
    for key, label in config.LANGUAGE_INFERS.items():
        if key in lower:
            return label
    if _NON_ASCII_RE.search(s):
        return config.NON_ENGLISH
    return ""


def split_genres(value, collapse_duplicates: bool = False):
    """
    Split a raw genre cell into canonical genre names.

    Duplicates that appear after alias mapping (e.g. 'Science, Fiction') are kept
    unless collapse_duplicates is set, since each copy becomes its own fan-out entry.
    """
    s = clean_text(value)
    genres = []
    for token in _GENRE_SPLIT_RE.split(s) if s else []:
        cleaned = _GENRE_PUNCT_RE.sub("", token).strip()
        if not cleaned:
            continue
        canonical = config.GENRE_ALIASES.get(cleaned.lower(), cleaned)
        if collapse_duplicates and canonical in genres:
            continue
        genres.append(canonical)
    return tuple(genres) or (config.UNSPECIFIED_GENRE,)


# ---------- row normalization ----------

def normalize_row(raw, category: str, metric_mode: str = config.DEFAULT_METRIC_MODE,
                  collapse_duplicate_genres: bool = False) -> Entry:
    """
    Canonicalize one raw catalog row.

    Args:
        raw: mapping of column name -> cell value (schema varies per source)
        category (str): content type the row was loaded as ('Movie' or 'TV')
        metric_mode (str): which metric column family feeds metric_value
        collapse_duplicate_genres (bool): drop repeated canonical genres

    Returns:
        Entry: country may still be '' here; fill_missing_fields marks it 'Unknown'
    """
    if raw is None:
        raw = {}

    title = sanitize_title(_first_text(raw, config.TITLE_FIELDS))
    raw_language = _first_text(raw, config.LANGUAGE_FIELDS)
    language = raw_language or infer_language(title) or config.DEFAULT_LANGUAGE

    genres = split_genres(_first_text(raw, config.GENRE_FIELDS), collapse_duplicate_genres)

    release_year = _first_text(raw, config.RELEASE_YEAR_FIELDS)[:4] or None

    country = normalize_country_name(_first_text(raw, config.COUNTRY_FIELDS))
    if not country:
        country = country_heuristic(raw_language)

    return Entry(
        category=category,
        language=language,
        genres=genres,
        primary_genre=genres[0],
        metric_value=pick_metric(raw, metric_mode),
        release_year=release_year,
        runtime_minutes=_first_runtime(raw),
        title=title,
        country=country,
        poster_url=normalize_poster(_first_text(raw, config.POSTER_FIELDS)) or None,
        summary=_first_text(raw, config.SUMMARY_FIELDS),
    )


def normalize_records(records: Iterable, category: str, metric_mode: str = config.DEFAULT_METRIC_MODE,
                      collapse_duplicate_genres: bool = False) -> List[Entry]:
    entries = [
        normalize_row(raw, category, metric_mode, collapse_duplicate_genres)
        for raw in records
    ]
    logger.info("Normalized %d %s records (metric mode: %s)", len(entries), category, metric_mode)
    return entries


def expand_genres(entries: Iterable[Entry], split: bool = True) -> List[Entry]:
    """
    Fan a multi-genre entry out into one entry per genre.

    Each copy carries the full metric_value: a title counts towards every
    genre it is listed under rather than being divided between them.
    """
    if not split:
        return list(entries)
    return [entry._replace(primary_genre=genre) for entry in entries for genre in entry.genres]


def fill_missing_fields(entries: Iterable[Entry]) -> List[Entry]:
    """
    Educated guesses for fields still missing after normalization:
    - runtime: median runtime of the same category
    - release year: a 19xx/20xx year found in the title
    - country: 'Unknown'
    """
    entries = list(entries)
    runtimes = defaultdict(list)
    for entry in entries:
        if entry.runtime_minutes:
            runtimes[entry.category].append(entry.runtime_minutes)
    fallbacks = {
        category: round_half_up(float(np.median(values)))
        for category, values in runtimes.items()
    }

    filled = []
    for entry in entries:
        changes = {}
        if not entry.runtime_minutes and fallbacks.get(entry.category):
            changes["runtime_minutes"] = fallbacks[entry.category]
        if not entry.release_year:
            match = _YEAR_RE.search(entry.title)
            if match:
                changes["release_year"] = match.group(0)
        if not entry.country:
            changes["country"] = config.UNKNOWN_COUNTRY
        filled.append(entry._replace(**changes) if changes else entry)
    return filled


def extract_dual_metrics(raw, entry: Entry) -> DualMetricRecord:
    """Pair an entry with both its hours and views metrics for clustering."""
    if raw is None:
        raw = {}
    return DualMetricRecord(entry, pick_metric(raw, "hours"), pick_metric(raw, "views"))
