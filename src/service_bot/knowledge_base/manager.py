"""
Main knowledge base manager interface.

Coordinates the store, query engine and ingestion pipeline for the assistant.
"""

from typing import Any, Dict, Iterable, List, Optional
from loguru import logger

from ..config_manager.knowledge_base import KnowledgeBaseConfig
from .ingestion import IngestionPipeline
from .models import KnowledgeEntry
from .query import QueryEngine
from .seed import GREETING
from .segmenter import HeuristicBlockClassifier, StructuralSegmenter
from .store import KnowledgeStore


class KnowledgeBaseManager:
    """
    High-level manager for the assistant's knowledge base.

    Owns the single KnowledgeStore and hands it to the query engine and the
    ingestion pipeline. The application creates one manager and passes it to
    whatever needs it.
    """

    def __init__(
        self,
        config: Optional[KnowledgeBaseConfig] = None,
        seed_entries: Optional[Iterable[KnowledgeEntry]] = None,
    ):
        """
        Initialize the knowledge base manager.

        Args:
            config: Knowledge base settings (defaults if None)
            seed_entries: Built-in entries (the service manual seed set if None)
        """
        self.config = config or KnowledgeBaseConfig()
        self.store = KnowledgeStore(seed_entries)
        self.engine = QueryEngine(
            self.store, score_threshold=self.config.score_threshold
        )

        segmenter = StructuralSegmenter(
            classifier=HeuristicBlockClassifier(self.config.question_max_length),
            default_category=self.config.default_category,
        )
        self.ingestion = IngestionPipeline(
            store=self.store,
            segmenter=segmenter,
            timeout=self.config.ingestion_timeout_seconds,
        )

        logger.info("🧠 Knowledge Base Manager initialized")

    def search(self, query: str) -> Optional[KnowledgeEntry]:
        """
        Find the entry that best answers a query.

        Args:
            query: User query

        Returns:
            Best matching entry, or None
        """
        return self.engine.search(query)

    def reply(self, message: str) -> str:
        """
        Produce the assistant's answer to a user message.

        Args:
            message: User message

        Returns:
            The matching entry's answer, or the default response
        """
        return self.engine.reply(message)

    def default_response(self) -> str:
        return self.engine.default_response()

    def greeting(self) -> str:
        return GREETING

    def import_payload(self, data: Any) -> int:
        """
        Import a structured JSON payload.

        Args:
            data: JSON text/bytes or decoded JSON array

        Returns:
            Number of entries added
        """
        added = self.ingestion.import_payload(data)
        logger.info(f"📤 Structured import added {added} entries")
        return added

    async def ingest_document(
        self, filename: str, content: bytes, background: bool = True
    ) -> Dict[str, Any]:
        """
        Ingest a rich document into the knowledge base.

        Args:
            filename: Original filename
            content: File content as bytes
            background: Whether to run ingestion in background (default: True)

        Returns:
            Task info if background=True, final ingestion status otherwise
        """
        if background:
            return self.ingestion.ingest_document_background(filename, content)
        return await self.ingestion.ingest_document(filename, content)

    async def preview_document(self, filename: str, content: bytes) -> List[Dict]:
        """
        Extract entries from a document without importing them.

        Args:
            filename: Original filename
            content: File content as bytes

        Returns:
            Extracted entries in the structured payload format
        """
        entries = await self.ingestion.extract_entries(filename, content)
        return [entry.to_payload() for entry in entries]

    def get_ingestion_status(self, task_id: str) -> Optional[Dict[str, Any]]:
        return self.ingestion.get_status(task_id)

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the knowledge base.

        Returns:
            Dictionary with 'total', 'imported' and 'default' entry counts
        """
        return self.store.stats()

    def export(self) -> List[Dict]:
        return self.store.export()

    def export_json(self) -> str:
        return self.store.export_json()

    def reset(self) -> None:
        """Remove all imported entries and restore the seed set."""
        self.store.reset()

    def format_match(self, entry: Optional[KnowledgeEntry]) -> Optional[Dict[str, Any]]:
        """
        Format a search result for API responses.

        Args:
            entry: Matched entry or None

        Returns:
            Serializable dictionary, or None
        """
        if entry is None:
            return None
        return {
            **entry.to_payload(),
            "provenance": entry.provenance.value,
        }
