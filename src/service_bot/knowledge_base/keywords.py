"""Keyword extraction for knowledge entry questions."""

from __future__ import annotations

import re

STOP_WORDS = frozenset(
    {"a", "an", "the", "is", "are", "in", "on", "at", "to", "for", "with", "by"}
)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def extract_keywords(question: str) -> set[str]:
    """Extract lowercase keywords from a question.

    Punctuation is removed, tokens of three characters or fewer and stop
    words are dropped, and duplicates are collapsed.

    Args:
        question: Question text.

    Returns:
        Set of keyword tokens.
    """

    words = _PUNCTUATION_RE.sub("", question.lower()).split()
    return {word for word in words if len(word) > 3 and word not in STOP_WORDS}
