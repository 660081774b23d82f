"""
Conversion of rich documents into styled blocks.

The segmenter never sees the raw container format; converters turn uploaded
bytes into an ordered list of DocumentBlock objects (paragraph text, a bold
flag and a heading level).
"""

from __future__ import annotations

import io
import re
from abc import ABC, abstractmethod

from docx import Document
from loguru import logger

from .errors import ConversionError
from .models import DocumentBlock

_HEADING_STYLE_RE = re.compile(r"^heading\s*(\d+)$", re.IGNORECASE)


class DocumentConverter(ABC):
    """Turns an opaque document blob into document blocks."""

    #: File suffixes this converter accepts.
    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def convert(self, content: bytes) -> list[DocumentBlock]:
        raise NotImplementedError


def _heading_level(style_name: str) -> int:
    """Map a Word paragraph style name to a heading level (0 for body text).

    Args:
        style_name: Paragraph style name, e.g. 'Heading 2' or 'Title'.

    Returns:
        Heading level.
    """

    if style_name.strip().lower() == "title":
        return 1
    match = _HEADING_STYLE_RE.match(style_name.strip())
    return int(match.group(1)) if match else 0


class DocxConverter(DocumentConverter):
    """Word (.docx) converter backed by python-docx."""

    suffixes = (".docx",)

    def convert(self, content: bytes) -> list[DocumentBlock]:
        """
        Convert .docx bytes into blocks, one per paragraph.

        A paragraph counts as bold when any of its non-blank runs is bold,
        either directly or through the paragraph style.

        Args:
            content: Raw .docx file content

        Returns:
            Blocks in document order

        Raises:
            ConversionError: If the content is not a readable .docx document
        """
        if not content:
            raise ConversionError("Document is empty")

        try:
            document = Document(io.BytesIO(content))
        except Exception as e:
            logger.error(f"❌ Failed to open Word document: {e}")
            raise ConversionError(
                "Failed to process the Word document. Please check the format."
            ) from e

        blocks = []
        for paragraph in document.paragraphs:
            style = paragraph.style
            style_name = style.name if style is not None and style.name else ""
            style_bold = bool(style is not None and style.font.bold)
            is_bold = any(
                run.text.strip() and (run.bold or style_bold) for run in paragraph.runs
            )
            blocks.append(
                DocumentBlock(
                    text=paragraph.text,
                    is_bold=is_bold,
                    heading_level=_heading_level(style_name),
                )
            )

        logger.debug(f"📄 Converted Word document into {len(blocks)} blocks")
        return blocks
