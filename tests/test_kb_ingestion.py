"""Unit tests for Word document conversion and the ingestion pipeline.

Documents are built in memory with python-docx (no server required).
"""

from __future__ import annotations

import asyncio
import json
import time
import unittest
from pathlib import Path
import sys


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from docx_fixtures import TROUBLESHOOTING_DOC, build_docx  # noqa: E402

from service_bot.knowledge_base.converter import (  # noqa: E402
    DocumentConverter,
    DocxConverter,
)
from service_bot.knowledge_base.errors import ConversionError, ParseError  # noqa: E402
from service_bot.knowledge_base.ingestion import IngestionPipeline  # noqa: E402
from service_bot.knowledge_base.models import DocumentBlock  # noqa: E402
from service_bot.knowledge_base.store import KnowledgeStore  # noqa: E402


class TestDocxConverter(unittest.TestCase):
    """Tests for `DocxConverter.convert`."""

    def test_blocks_carry_style(self) -> None:
        blocks = DocxConverter().convert(build_docx(TROUBLESHOOTING_DOC))
        blocks = [b for b in blocks if b.text.strip()]

        self.assertEqual(
            [b.text for b in blocks],
            [
                "Troubleshooting",
                "Device won't boot?",
                "Try step 1.",
                "Is it under warranty?",
                "Yes, 12 months.",
            ],
        )
        self.assertEqual(blocks[0].heading_level, 1)
        self.assertEqual([b.heading_level for b in blocks[1:]], [0, 0, 0, 0])
        self.assertEqual([b.is_bold for b in blocks[1:]], [True, False, True, False])

    def test_corrupt_document(self) -> None:
        with self.assertRaises(ConversionError):
            DocxConverter().convert(b"this is not a zip container")

    def test_empty_document(self) -> None:
        with self.assertRaises(ConversionError):
            DocxConverter().convert(b"")


class SlowConverter(DocumentConverter):
    suffixes = (".slow",)

    def convert(self, content: bytes) -> list[DocumentBlock]:
        time.sleep(0.5)
        return []


class TestIngestionPipeline(unittest.IsolatedAsyncioTestCase):
    """Tests for `IngestionPipeline`."""

    def setUp(self) -> None:
        self.store = KnowledgeStore()
        self.pipeline = IngestionPipeline(self.store)

    async def test_ingest_document_merges_entries(self) -> None:
        result = await self.pipeline.ingest_document(
            "manual.docx", build_docx(TROUBLESHOOTING_DOC)
        )

        self.assertEqual(result["status"], "completed")
        self.assertEqual(result["entries_found"], 2)
        self.assertEqual(result["entries_added"], 2)
        self.assertEqual(self.store.stats(), {"total": 7, "imported": 2, "default": 5})

        imported = self.store.snapshot()[5:]
        self.assertEqual(
            [e.question for e in imported],
            ["Device won't boot?", "Is it under warranty?"],
        )
        self.assertEqual({e.category for e in imported}, {"Troubleshooting"})

    async def test_document_without_pairs_is_empty_not_error(self) -> None:
        content = build_docx([("heading", "Only a title")])

        result = await self.pipeline.ingest_document("empty.docx", content)

        self.assertEqual(result["status"], "empty")
        self.assertEqual(result["entries_added"], 0)
        self.assertEqual(self.store.imported_count, 0)

    async def test_unsupported_format(self) -> None:
        with self.assertRaises(ConversionError):
            await self.pipeline.ingest_document("notes.txt", b"Q? A.")
        self.assertEqual(self.store.imported_count, 0)

    async def test_corrupt_document_merges_nothing(self) -> None:
        with self.assertRaises(ConversionError):
            await self.pipeline.ingest_document("broken.docx", b"garbage")
        self.assertEqual(self.store.imported_count, 0)

    async def test_background_ingestion(self) -> None:
        info = self.pipeline.ingest_document_background(
            "manual.docx", build_docx(TROUBLESHOOTING_DOC)
        )
        self.assertEqual(info["status"], "queued")

        status = await self.pipeline.wait(info["task_id"])

        self.assertEqual(status["status"], "completed")
        self.assertEqual(status["entries_added"], 2)
        self.assertEqual(self.store.imported_count, 2)

    async def test_background_failure_is_recorded(self) -> None:
        info = self.pipeline.ingest_document_background("broken.docx", b"garbage")

        status = await self.pipeline.wait(info["task_id"])

        self.assertEqual(status["status"], "error")
        self.assertIn("error", status)
        self.assertEqual(self.store.imported_count, 0)

    async def test_background_rejects_unsupported_format_immediately(self) -> None:
        with self.assertRaises(ConversionError):
            self.pipeline.ingest_document_background("notes.pdf", b"%PDF")

    async def test_concurrent_ingestions_are_serialized(self) -> None:
        first = build_docx(TROUBLESHOOTING_DOC)
        second = build_docx(
            [("bold", "How do I update firmware?"), ("text", "Use the app.")]
        )

        info_1 = self.pipeline.ingest_document_background("one.docx", first)
        info_2 = self.pipeline.ingest_document_background("two.docx", second)
        await asyncio.gather(
            self.pipeline.wait(info_1["task_id"]), self.pipeline.wait(info_2["task_id"])
        )

        self.assertEqual(
            [e.question for e in self.store.snapshot()[5:]],
            ["Device won't boot?", "Is it under warranty?", "How do I update firmware?"],
        )

    async def test_conversion_timeout(self) -> None:
        pipeline = IngestionPipeline(
            self.store, converters=[SlowConverter()], timeout=0.05
        )
        with self.assertRaises(ConversionError):
            await pipeline.ingest_document("doc.slow", b"data")
        self.assertEqual(self.store.imported_count, 0)

    async def test_extract_entries_does_not_merge(self) -> None:
        entries = await self.pipeline.extract_entries(
            "manual.docx", build_docx(TROUBLESHOOTING_DOC)
        )
        self.assertEqual(len(entries), 2)
        self.assertEqual(self.store.imported_count, 0)

    async def test_queries_run_while_ingesting(self) -> None:
        pipeline = IngestionPipeline(
            self.store, converters=[SlowConverter()], timeout=5
        )
        info = pipeline.ingest_document_background("doc.slow", b"data")
        await asyncio.sleep(0)

        # The store stays readable while conversion runs in a worker thread.
        self.assertEqual(len(self.store.snapshot()), 5)

        status = await pipeline.wait(info["task_id"])
        self.assertEqual(status["status"], "empty")

    async def test_finished_statuses_are_capped(self) -> None:
        pipeline = IngestionPipeline(self.store, max_statuses=2)
        content = build_docx(TROUBLESHOOTING_DOC)

        for task_id in ("first", "second", "third"):
            await pipeline.ingest_document("manual.docx", content, task_id=task_id)

        self.assertIsNone(pipeline.get_status("first"))
        self.assertEqual(pipeline.get_status("second")["status"], "completed")
        self.assertEqual(pipeline.get_status("third")["status"], "completed")

    async def test_unfinished_statuses_are_kept(self) -> None:
        pipeline = IngestionPipeline(self.store, max_statuses=1)
        pipeline._set_status("pending", filename="a.docx", status="queued")
        pipeline._set_status("done-1", filename="b.docx", status="completed")
        pipeline._set_status("done-2", filename="c.docx", status="empty")

        self.assertEqual(pipeline.get_status("pending")["status"], "queued")
        self.assertIsNone(pipeline.get_status("done-1"))
        self.assertEqual(pipeline.get_status("done-2")["status"], "empty")

    def test_import_payload(self) -> None:
        payload = json.dumps(
            [{"question": "Q?", "answer": "A", "keywords": ["qq"]}] * 3
        )
        self.assertEqual(self.pipeline.import_payload(payload), 3)
        self.assertEqual(self.pipeline.import_payload("[]"), 0)
        self.assertEqual(self.store.imported_count, 3)

    def test_import_payload_malformed_leaves_store_untouched(self) -> None:
        with self.assertRaises(ParseError):
            self.pipeline.import_payload('{"question": "Q?"}')
        self.assertEqual(self.store.stats(), {"total": 5, "imported": 0, "default": 5})


if __name__ == "__main__":
    unittest.main()
