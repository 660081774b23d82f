"""Data models shared by the knowledge base components."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY = "General"


class Provenance(str, Enum):
    """Where a knowledge entry came from."""

    SEEDED = "seeded"
    IMPORTED = "imported"


class KnowledgeEntry(BaseModel):
    """
    One question/answer record.

    Entries are frozen; updating knowledge means importing a new entry.
    `id` may be unset until the entry is merged into a store, which assigns
    one.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    question: str
    answer: str
    keywords: frozenset[str] = Field(default_factory=frozenset)
    category: Optional[str] = DEFAULT_CATEGORY
    provenance: Provenance = Provenance.IMPORTED

    @field_validator("question", "answer")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_payload(self) -> dict:
        """Serialize to one item of the structured import payload."""
        payload = {
            "question": self.question,
            "answer": self.answer,
            "keywords": sorted(self.keywords),
        }
        if self.id is not None:
            payload = {"id": self.id, **payload}
        if self.category is not None:
            payload["category"] = self.category
        return payload


class DocumentBlock(BaseModel):
    """One styled unit of document content fed to the segmenter."""

    model_config = ConfigDict(frozen=True)

    text: str
    is_bold: bool = False
    heading_level: int = Field(0, ge=0)

    @property
    def is_heading(self) -> bool:
        return self.heading_level > 0
