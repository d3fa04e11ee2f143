"""
Match priority ranking for direct (non-fuzzy) matches.

Priority levels (lower is better):
  0. Nickname matches the query
  1. Text starts with the query
  2. A word in the text starts with the query
  3. Text contains the query
  4. No match

Multi-word queries only match when the text starts with the whole query.
"""

import re

PRIORITY_NICKNAME = 0
PRIORITY_STARTS_WITH = 1
PRIORITY_WORD_STARTS_WITH = 2
PRIORITY_CONTAINS = 3
PRIORITY_NO_MATCH = 4

_WHITESPACE = re.compile(r"\s+")


def _tokens(normalized_query: str) -> list[str]:
    return [t for t in _WHITESPACE.split(normalized_query) if t]


def match_priority(text: str, query: str) -> int:
    """Return the match priority of text for query (see module docstring)."""
    if not query or not query.strip():
        return PRIORITY_NO_MATCH

    normalized_query = query.strip().lower()
    tokens = _tokens(normalized_query)
    normalized_text = text.lower()

    if len(tokens) > 1:
        if normalized_text.startswith(normalized_query):
            return PRIORITY_STARTS_WITH
        return PRIORITY_NO_MATCH

    if normalized_text.startswith(normalized_query):
        return PRIORITY_STARTS_WITH
    if any(word.startswith(normalized_query) for word in _WHITESPACE.split(normalized_text)):
        return PRIORITY_WORD_STARTS_WITH
    if normalized_query in normalized_text:
        return PRIORITY_CONTAINS
    return PRIORITY_NO_MATCH


def match_priority_with_nickname(text: str, nickname: str | None, query: str) -> int:
    """Like match_priority, but any nickname match outranks every text match."""
    if nickname and match_priority(nickname, query) != PRIORITY_NO_MATCH:
        return PRIORITY_NICKNAME
    return match_priority(text, query)


def is_match(priority: int) -> bool:
    return priority < PRIORITY_NO_MATCH
