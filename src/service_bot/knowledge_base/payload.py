"""
Structured import payload handling.

The payload is a JSON array of objects shaped like
`{"id"?: str, "question": str, "answer": str, "keywords": [str], "category"?: str}`.
It is both the import format and the export format, so an exported store can
be merged back in.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

import pydantic
from pydantic import BaseModel, Field, TypeAdapter, field_validator

from .errors import ParseError
from .models import DEFAULT_CATEGORY, KnowledgeEntry


class EntryPayload(BaseModel):
    """One item of the structured import payload."""

    id: Optional[str] = None
    question: str
    answer: str
    keywords: list[str]
    category: Optional[str] = Field(DEFAULT_CATEGORY)

    @field_validator("question", "answer")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("id")
    @classmethod
    def _blank_id_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def to_entry(self) -> KnowledgeEntry:
        return KnowledgeEntry(
            id=self.id,
            question=self.question,
            answer=self.answer,
            keywords=frozenset(self.keywords),
            category=self.category if self.category is not None else DEFAULT_CATEGORY,
        )


_PAYLOAD_ADAPTER = TypeAdapter(list[EntryPayload])


def parse_payload(data: str | bytes | Any) -> list[KnowledgeEntry]:
    """
    Parse and validate a structured import payload.

    Args:
        data: Raw JSON text/bytes, or an already-decoded Python object

    Returns:
        Entries in payload order (an empty list for `[]`)

    Raises:
        ParseError: If the payload is not an array of valid entry objects
    """
    try:
        if isinstance(data, (str, bytes, bytearray)):
            items = _PAYLOAD_ADAPTER.validate_json(data)
        else:
            if not isinstance(data, list):
                raise ParseError(
                    f"Payload must be a JSON array, got {type(data).__name__}"
                )
            items = _PAYLOAD_ADAPTER.validate_python(data)
    except pydantic.ValidationError as e:
        raise ParseError(
            f"Malformed knowledge payload ({e.error_count()} errors): {e}"
        ) from e

    return [item.to_entry() for item in items]


def dump_payload(entries: Iterable[KnowledgeEntry]) -> list[dict]:
    """Serialize entries into the structured payload format."""
    return [entry.to_payload() for entry in entries]


def dump_payload_json(entries: Iterable[KnowledgeEntry]) -> str:
    """Serialize entries into indented payload JSON."""
    return json.dumps(dump_payload(entries), indent=2, ensure_ascii=False)
