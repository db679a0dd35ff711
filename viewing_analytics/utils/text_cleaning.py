import re

from bs4 import BeautifulSoup

__all__ = ["clean_text", "sanitize_title", "strip_html", "normalize_poster"]

_WS_RE = re.compile(r"\s+")
_COMMENT_TAIL_RE = re.compile(r"//.*$")
_UNDERSCORE_RE = re.compile(r"_+")
_TRAILING_COLON_RE = re.compile(r":+\s*$")
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)


def clean_text(text) -> str:
    """Coerce to string and collapse whitespace. None and NaN become ''."""
    if text is None or (isinstance(text, float) and text != text):
        return ""
    return _WS_RE.sub(" ", str(text)).strip()


def sanitize_title(title) -> str:
    """
    Tidy a catalog title for display and de-duplication:
    - drop anything after '//'
    - underscores to spaces
    - strip trailing colons
    - collapse whitespace
    """
    s = clean_text(title)
    if not s:
        return ""
    s = _COMMENT_TAIL_RE.sub("", s)
    s = _UNDERSCORE_RE.sub(" ", s)
    s = _TRAILING_COLON_RE.sub("", s)
    return _WS_RE.sub(" ", s).strip()


def strip_html(markup) -> str:
    """Return the visible text of an HTML fragment (episode summaries carry <p>/<b> tags)."""
    s = clean_text(markup)
    if not s:
        return ""
    text = BeautifulSoup(s, "html.parser").get_text(" ")
    return _WS_RE.sub(" ", text).strip()


def normalize_poster(url) -> str:
    s = clean_text(url)
    if not s or s.lower() == "n/a":
        return ""
    if not _HTTP_RE.match(s):
        return ""
    return s
