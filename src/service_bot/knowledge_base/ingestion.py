"""
Document ingestion pipeline for the knowledge base.

Handles conversion, segmentation and merging of uploaded documents, plus
structured (already tagged) JSON imports.
"""

import asyncio
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from loguru import logger

from .converter import DocumentConverter, DocxConverter
from .errors import ConversionError
from .models import KnowledgeEntry
from .payload import parse_payload
from .segmenter import StructuralSegmenter
from .store import KnowledgeStore

FINISHED_STATUSES = frozenset({"completed", "empty", "error"})


class IngestionPipeline:
    """
    Coordinates document ingestion: conversion + segmentation + merge.

    Conversion and segmentation run in a worker thread so queries keep being
    served. Documents are ingested one at a time in arrival order, and each
    document results in exactly one merge of its full batch.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        segmenter: Optional[StructuralSegmenter] = None,
        converters: Optional[Iterable[DocumentConverter]] = None,
        timeout: float = 60.0,
        max_statuses: int = 100,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            store: Store that receives extracted entries
            segmenter: Segmenter for converted documents
            converters: Document converters (defaults to the Word converter)
            timeout: Seconds allowed for converting and segmenting one document
            max_statuses: Finished task statuses kept before the oldest are dropped
        """
        self.store = store
        self.segmenter = segmenter or StructuralSegmenter()
        self.converters: dict[str, DocumentConverter] = {}
        for converter in converters or [DocxConverter()]:
            for suffix in converter.suffixes:
                self.converters[suffix] = converter
        self.timeout = timeout
        self._queue_lock = asyncio.Lock()
        self._tasks: dict[str, asyncio.Task[None]] = {}  # Track background tasks
        self._status: dict[str, dict[str, Any]] = {}
        self.max_statuses = max_statuses

    @property
    def supported_suffixes(self) -> list[str]:
        return sorted(self.converters)

    def get_converter(self, filename: str) -> DocumentConverter:
        """
        Pick the converter for a file name.

        Raises:
            ConversionError: If no converter handles the file's suffix
        """
        suffix = Path(filename).suffix.lower()
        converter = self.converters.get(suffix)
        if converter is None:
            raise ConversionError(
                f"Unsupported file format: {suffix or filename}. "
                f"Currently supported: {', '.join(self.supported_suffixes)}"
            )
        return converter

    async def extract_entries(self, filename: str, content: bytes) -> list[KnowledgeEntry]:
        """
        Convert and segment a document without touching the store.

        Args:
            filename: Original filename (selects the converter)
            content: File content as bytes

        Returns:
            Extracted entries, possibly empty

        Raises:
            ConversionError: If conversion fails or exceeds the timeout
        """
        converter = self.get_converter(filename)

        def _convert_and_segment() -> list[KnowledgeEntry]:
            blocks = converter.convert(content)
            return self.segmenter.segment(blocks)

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_convert_and_segment), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise ConversionError(
                f"Processing '{filename}' took longer than {self.timeout:g}s"
            ) from e

    def _set_status(self, task_id: str, **fields: Any) -> dict[str, Any]:
        status = self._status.setdefault(task_id, {"task_id": task_id})
        status.update(fields, updated_at=datetime.now().isoformat())
        if fields.get("status") in FINISHED_STATUSES:
            self._prune_statuses()
        return dict(status)

    def _prune_statuses(self) -> None:
        # Dicts keep insertion order, so the first finished ones are the oldest.
        finished = [
            task_id
            for task_id, status in self._status.items()
            if status.get("status") in FINISHED_STATUSES
        ]
        for task_id in finished[: max(0, len(finished) - self.max_statuses)]:
            del self._status[task_id]

    async def ingest_document(
        self, filename: str, content: bytes, task_id: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Ingest a single document and merge what it yields.

        Args:
            filename: Original filename
            content: File content as bytes
            task_id: Status key (generated if not given)

        Returns:
            Final status with 'status' ('completed' or 'empty'),
            'entries_found' and 'entries_added'

        Raises:
            ConversionError: If the document cannot be converted
        """
        task_id = task_id or uuid.uuid4().hex
        self._set_status(task_id, filename=filename, status="queued")

        async with self._queue_lock:
            self._set_status(task_id, status="processing")
            try:
                entries = await self.extract_entries(filename, content)
                added = self.store.merge(entries) if entries else 0
            except Exception as e:
                logger.error(f"❌ Ingestion failed for '{filename}': {e}")
                self._set_status(task_id, status="error", error=str(e))
                raise

        if not entries:
            logger.warning(f"⚠️ No question-answer pairs found in '{filename}'")
            return self._set_status(
                task_id, status="empty", entries_found=0, entries_added=0
            )

        logger.success(f"✅ Successfully ingested '{filename}': {added} entries added")
        return self._set_status(
            task_id,
            status="completed",
            entries_found=len(entries),
            entries_added=added,
        )

    async def _run_background(self, task_id: str, filename: str, content: bytes) -> None:
        try:
            await self.ingest_document(filename, content, task_id=task_id)
        except Exception as e:
            # The failure is recorded in the task status by ingest_document.
            logger.debug(f"Background ingestion '{task_id}' ended with error: {e}")

    def ingest_document_background(self, filename: str, content: bytes) -> dict[str, Any]:
        """
        Start document ingestion as a background task.

        The file type is checked up front so unsupported uploads fail
        immediately instead of producing a failed task.

        Args:
            filename: Original filename
            content: File content as bytes

        Returns:
            Task info with 'task_id' and 'status'

        Raises:
            ConversionError: If the file type is not supported
        """
        self.get_converter(filename)

        task_id = uuid.uuid4().hex
        info = self._set_status(task_id, filename=filename, status="queued")

        task = asyncio.create_task(self._run_background(task_id, filename, content))
        self._tasks[task_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(task_id, None))

        logger.info(f"🚀 Started background ingestion for '{filename}' ({task_id})")
        return info

    def get_status(self, task_id: str) -> Optional[dict[str, Any]]:
        status = self._status.get(task_id)
        return dict(status) if status else None

    async def wait(self, task_id: str) -> Optional[dict[str, Any]]:
        """Wait for a background ingestion to finish and return its status."""
        task = self._tasks.get(task_id)
        if task is not None:
            await task
        return self.get_status(task_id)

    def import_payload(self, data: Any) -> int:
        """
        Merge a structured import payload directly, skipping segmentation.

        Args:
            data: JSON text/bytes or decoded JSON array

        Returns:
            Number of entries added (0 for an empty array)

        Raises:
            ParseError: If the payload is malformed; the store is untouched
        """
        entries = parse_payload(data)
        if not entries:
            logger.info("📥 Structured import contained no entries")
            return 0
        return self.store.merge(entries)
