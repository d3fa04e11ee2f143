"""
Fuzzy Matching Engine - Relevance scoring between a query and a label.

Scores are 0-100. Short brand-like queries ("yt", "ytm", "gm") are matched
against the label's acronym first; everything else goes through rapidfuzz's
token set ratio, which ignores token order and duplicated words.

The engine is pure: no I/O and no mutable state, so ranking passes running
on different threads can share it freely.
"""

import re

from rapidfuzz import fuzz

ACRONYM_MIN_QUERY_LENGTH = 2
ACRONYM_MAX_QUERY_LENGTH = 4
DEFAULT_MIN_QUERY_LENGTH = 3

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")
_TOKEN_SEPARATOR = re.compile(r"[\W_]+")


def build_acronym(text: str) -> str:
    """
    Build the first-letter acronym of a label.

    Splits on whitespace, non-alphanumeric runs, and camel-case boundaries:
      "YouTube Music" -> "ytm"
      "Google-Maps"   -> "gm"
      "WhatsApp"      -> "wa"
    """
    if not text or not text.strip():
        return ""

    separated = _CAMEL_BOUNDARY.sub(" ", text)
    tokens = [t for t in _TOKEN_SEPARATOR.split(separated) if t]
    return "".join(token[0] for token in tokens).lower()


def is_acronym_match(query: str, label: str, alias: str | None = None) -> bool:
    """True if the query is exactly the acronym of the label or alias."""
    q = query.strip().lower()
    if not ACRONYM_MIN_QUERY_LENGTH <= len(q) <= ACRONYM_MAX_QUERY_LENGTH:
        return False
    if build_acronym(label) == q:
        return True
    return bool(alias) and build_acronym(alias) == q


def score(
    query: str,
    label: str,
    alias: str | None = None,
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
) -> int:
    """
    Compute the relevance of a label (and optional alias) for a query.

    Args:
        query: Raw query text
        label: Candidate display label (e.g. app name)
        alias: Optional user nickname; can only raise the score
        min_query_length: Queries shorter than this score 0 unless they
            hit the acronym fast path

    Returns:
        Integer score in 0..100
    """
    normalized = query.strip().lower()

    if is_acronym_match(normalized, label, alias):
        return 100

    if len(normalized) < min_query_length:
        return 0

    best = fuzz.token_set_ratio(normalized, label.lower())
    if alias:
        best = max(best, fuzz.token_set_ratio(normalized, alias.lower()))

    return int(round(best))
