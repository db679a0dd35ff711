from .text_cleaning import clean_text, sanitize_title, strip_html, normalize_poster
from .formatting import round_half_up, format_value, format_share, pluralize, describe_slice

__all__ = [
    "clean_text",
    "sanitize_title",
    "strip_html",
    "normalize_poster",
    "round_half_up",
    "format_value",
    "format_share",
    "pluralize",
    "describe_slice",
]
