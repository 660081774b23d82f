"""
Heuristic segmentation of styled document blocks into knowledge entries.

Documents converted from word processors rarely mark up which paragraphs are
questions. The segmenter reconstructs question/answer pairs from formatting
hints: headings become categories, and a question-like block starts a new
entry whose answer is made of the blocks that follow it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

import pydantic
from loguru import logger

from .errors import ValidationError
from .keywords import extract_keywords
from .models import DEFAULT_CATEGORY, DocumentBlock, KnowledgeEntry

QUESTION_MAX_LENGTH = 150
ANSWER_SEPARATOR = "\n\n"


class BlockKind(Enum):
    QUESTION = "question"
    OTHER = "other"


class BlockClassifier(ABC):
    """Decides whether a block reads as a question."""

    @abstractmethod
    def classify(self, block: DocumentBlock) -> BlockKind:
        raise NotImplementedError


class HeuristicBlockClassifier(BlockClassifier):
    """
    Formatting-based classifier.

    A block is a question if it ends with '?', is bold, or is shorter than
    `max_length` characters. Any one condition is enough.
    """

    def __init__(self, max_length: int = QUESTION_MAX_LENGTH):
        self.max_length = max_length

    def classify(self, block: DocumentBlock) -> BlockKind:
        text = block.text.strip()
        if text.endswith("?") or block.is_bold or len(text) < self.max_length:
            return BlockKind.QUESTION
        return BlockKind.OTHER


class SegmenterState(Enum):
    AWAITING_QUESTION = "awaiting_question"
    COLLECTING_ANSWER = "collecting_answer"


def build_entry(
    question: str, answer: str, category: Optional[str] = DEFAULT_CATEGORY
) -> KnowledgeEntry:
    """Create an imported entry with keywords extracted from its question.

    Raises:
        ValidationError: If the question or answer is empty.
    """
    try:
        return KnowledgeEntry(
            question=question,
            answer=answer,
            keywords=extract_keywords(question),
            category=category,
        )
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid entry for question {question!r}: {e}") from e


class StructuralSegmenter:
    """
    Two-state machine turning a block stream into knowledge entries.

    An answer always takes the first block after its question, then ends at
    the next question-like block. Blocks seen before the first question are
    discarded.
    """

    def __init__(
        self,
        classifier: Optional[BlockClassifier] = None,
        default_category: str = DEFAULT_CATEGORY,
    ):
        self.classifier = classifier or HeuristicBlockClassifier()
        self.default_category = default_category

    def segment(self, blocks: Iterable[DocumentBlock]) -> list[KnowledgeEntry]:
        """
        Segment blocks into entries, in document order.

        Args:
            blocks: Ordered document blocks

        Returns:
            Extracted entries (possibly empty)
        """
        blocks = [block for block in blocks if block.text.strip()]

        entries: list[KnowledgeEntry] = []
        state = SegmenterState.AWAITING_QUESTION
        category = self.default_category
        question = ""
        question_category = category
        answer_parts: list[str] = []

        for index, block in enumerate(blocks):
            text = block.text.strip()

            if block.is_heading:
                # A trailing heading has nothing to categorize.
                if index < len(blocks) - 1:
                    category = text
                continue

            is_question = self.classifier.classify(block) is BlockKind.QUESTION

            if (
                state is SegmenterState.COLLECTING_ANSWER
                and answer_parts
                and is_question
            ):
                state = SegmenterState.AWAITING_QUESTION

            if state is SegmenterState.AWAITING_QUESTION:
                if not is_question:
                    continue
                self._flush(entries, question, answer_parts, question_category)
                question = text
                question_category = category
                answer_parts = []
                state = SegmenterState.COLLECTING_ANSWER
            else:
                answer_parts.append(text)

        self._flush(entries, question, answer_parts, question_category)

        logger.info(
            f"🧩 Segmented {len(blocks)} blocks into {len(entries)} entries"
        )
        return entries

    def _flush(
        self,
        entries: list[KnowledgeEntry],
        question: str,
        answer_parts: list[str],
        category: str,
    ) -> None:
        if not question:
            return
        answer = ANSWER_SEPARATOR.join(answer_parts)
        try:
            entries.append(build_entry(question, answer, category))
        except ValidationError as e:
            logger.debug(f"Dropped segmented entry: {e}")
