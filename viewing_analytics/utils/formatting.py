import math

__all__ = ["round_half_up", "format_value", "format_share", "pluralize", "describe_slice"]

_SUFFIXES = [(1e9, "B"), (1e6, "M"), (1e3, "K")]

# Words that keep their form (or take an irregular one) when pluralized
_PLURAL_EXCEPTIONS = {
    "comedy": "comedies",
    "tv": "TV shows",
    "sci-fi": "sci-fi",
    "espionage": "espionage",
    "children": "children",
}

_MODE_PHRASES = {
    "hours": "of all viewing time went to ",
    "views": "of all streams came from ",
}


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_value(v) -> str:
    """
    Compact human-readable number: 950 -> '950', 1500 -> '1.5K', 2_000_000 -> '2M'.
    Non-positive and non-finite values render as '0'.
    """
    try:
        v = float(v)
    except (TypeError, ValueError):
        return "0"
    if not math.isfinite(v) or v <= 0:
        return "0"
    for divisor, suffix in _SUFFIXES:
        if v >= divisor:
            s = f"{v / divisor:.2f}".rstrip("0").rstrip(".")
            return s + suffix
    return str(round_half_up(v))


def format_share(value: float, total: float) -> str:
    """Percentage of total with one decimal; tiny slices read '<0.1'."""
    if not total:
        return "0.0"
    raw = 100 * value / total
    if raw < 0.1:
        return "<0.1"
    return f"{raw:.1f}"


def pluralize(word: str) -> str:
    if not word:
        return ""
    lower = word.lower()
    if lower in _PLURAL_EXCEPTIONS:
        return _PLURAL_EXCEPTIONS[lower]
    if word.endswith("y") and not (len(word) > 1 and word[-2].lower() in "aeiou"):
        return word[:-1] + "ies"
    if word.endswith("s"):
        return word + "es"
    return word + "s"


def _format_category(category: str) -> str:
    return "TV" if category.lower() == "tv" else category.lower()


def _join(*parts) -> str:
    return " ".join(p for p in parts if p)


def describe_slice(category=None, genre=None, language=None, metric_mode="hours") -> str:
    """
    Sentence fragment describing one hierarchy slice, e.g.
    describe_slice("Movie", "Drama", "Korean") ->
        'of all viewing time went to Korean drama movies.'
    """
    phrase = _MODE_PHRASES.get(metric_mode, _MODE_PHRASES["hours"])
    genre_lower = genre.lower() if genre else ""
    fmt = _format_category(category) if category else ""

    if genre_lower == "children" and fmt in ("TV", "movie"):
        target = "children's TV" if fmt == "TV" else "children's movies"
        cat = _join(language, target)
    elif category and genre:
        if fmt == "TV":
            cat = _join(language, "TV", pluralize(genre_lower))
        elif fmt == "movie":
            cat = _join(language, genre_lower, "movies")
        else:
            cat = _join(language, genre_lower, pluralize(fmt))
    elif category and language:
        if fmt == "TV":
            cat = f"{language} TV shows"
        elif fmt == "movie":
            cat = f"{language} movies"
        else:
            cat = f"{language} {pluralize(fmt)}"
    elif category:
        cat = "TV shows" if fmt == "TV" else "movies" if fmt == "movie" else pluralize(fmt)
    elif genre:
        cat = pluralize(genre_lower)
    elif language:
        cat = f"{language} titles"
    else:
        cat = "all titles"
    return phrase + cat + "."
