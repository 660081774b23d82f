"""Score-based matching of free-text queries against the knowledge store.

Every entry is scored with simple substring rules over its question, keywords
and category. This is a full scan per query, which is fine for a help-desk
sized corpus but grows linearly with the number of entries.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .models import KnowledgeEntry
from .seed import DEFAULT_RESPONSE
from .store import KnowledgeStore

QUESTION_MATCH_SCORE = 10
KEYWORD_IN_QUERY_SCORE = 5
TOKEN_IN_KEYWORD_SCORE = 2
TOKEN_IN_QUESTION_SCORE = 3
CATEGORY_MATCH_SCORE = 3

SCORE_THRESHOLD = 1
MIN_TOKEN_LENGTH = 3


def normalize_query(query: str) -> str:
    return query.strip().lower()


def tokenize_query(normalized_query: str) -> list[str]:
    """Split a normalized query, dropping tokens of two characters or fewer."""
    return [t for t in normalized_query.split() if len(t) >= MIN_TOKEN_LENGTH]


def score_entry(entry: KnowledgeEntry, normalized_query: str, tokens: list[str]) -> int:
    """
    Score one entry against a normalized query.

    Args:
        entry: Entry to score
        normalized_query: Lowercased, stripped query
        tokens: Query tokens from `tokenize_query`

    Returns:
        Non-negative score
    """
    question = entry.question.lower()
    score = 0

    if normalized_query in question:
        score += QUESTION_MATCH_SCORE

    for keyword in entry.keywords:
        if keyword in normalized_query:
            score += KEYWORD_IN_QUERY_SCORE
        # Independent of the rule above; both can apply to the same keyword.
        if any(token in keyword for token in tokens):
            score += TOKEN_IN_KEYWORD_SCORE

    score += TOKEN_IN_QUESTION_SCORE * sum(1 for token in tokens if token in question)

    if entry.category and entry.category.lower() in normalized_query:
        score += CATEGORY_MATCH_SCORE

    return score


class QueryEngine:
    """
    Finds the best matching entry for a user query.

    Searches never mutate the store; each one works on a snapshot.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        score_threshold: int = SCORE_THRESHOLD,
        default_response: str = DEFAULT_RESPONSE,
    ):
        self.store = store
        self.score_threshold = score_threshold
        self._default_response = default_response

    def rank(self, query: str, limit: Optional[int] = None) -> list[tuple[KnowledgeEntry, int]]:
        """
        Rank entries scoring above the threshold.

        Args:
            query: Raw user query
            limit: Maximum number of results (all if None)

        Returns:
            (entry, score) pairs, best first; equal scores keep store order
        """
        normalized = normalize_query(query)
        if not normalized:
            return []

        tokens = tokenize_query(normalized)
        scored = [
            (entry, score_entry(entry, normalized, tokens))
            for entry in self.store.snapshot()
        ]
        # sorted() is stable, so earlier entries win ties.
        ranked = sorted(
            (pair for pair in scored if pair[1] > self.score_threshold),
            key=lambda pair: pair[1],
            reverse=True,
        )
        return ranked[:limit] if limit is not None else ranked

    def search(self, query: str) -> Optional[KnowledgeEntry]:
        """
        Return the best matching entry, or None if nothing clears the threshold.

        Args:
            query: Raw user query

        Returns:
            Best entry or None
        """
        ranked = self.rank(query, limit=1)
        if not ranked:
            logger.debug(f"🔍 No match for query '{query[:50]}'")
            return None

        entry, score = ranked[0]
        logger.debug(f"🔍 Query '{query[:50]}' matched '{entry.id}' (score {score})")
        return entry

    def default_response(self) -> str:
        return self._default_response

    def reply(self, query: str) -> str:
        """Answer a user utterance, falling back to the default response."""
        entry = self.search(query)
        return entry.answer if entry else self.default_response()
