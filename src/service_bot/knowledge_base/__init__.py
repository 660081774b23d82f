"""
Knowledge base module for question/answer storage and retrieval.

Provides scored keyword matching over a small in-memory corpus, and heuristic
extraction of question/answer pairs from Word documents.
"""

from .manager import KnowledgeBaseManager
from .store import KnowledgeStore
from .query import QueryEngine
from .segmenter import StructuralSegmenter, HeuristicBlockClassifier, BlockKind
from .ingestion import IngestionPipeline
from .converter import DocxConverter
from .keywords import extract_keywords
from .models import KnowledgeEntry, DocumentBlock, Provenance
from .errors import (
    KnowledgeBaseError,
    ParseError,
    ConversionError,
    ValidationError,
    ConcurrencyViolation,
)

__all__ = [
    "KnowledgeBaseManager",
    "KnowledgeStore",
    "QueryEngine",
    "StructuralSegmenter",
    "HeuristicBlockClassifier",
    "BlockKind",
    "IngestionPipeline",
    "DocxConverter",
    "extract_keywords",
    "KnowledgeEntry",
    "DocumentBlock",
    "Provenance",
    "KnowledgeBaseError",
    "ParseError",
    "ConversionError",
    "ValidationError",
    "ConcurrencyViolation",
]
