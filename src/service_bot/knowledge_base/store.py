"""
In-memory knowledge store.

Holds the ordered entry collection that the query engine scans. Insertion
order matters: it breaks ties between equally scored entries.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Optional

from loguru import logger

from .errors import ConcurrencyViolation, ParseError
from .models import KnowledgeEntry, Provenance
from .payload import dump_payload, dump_payload_json
from .seed import SEED_ENTRIES


class KnowledgeStore:
    """
    Owns the knowledge entries for one assistant.

    Entries are kept in a tuple that is replaced wholesale on every mutation,
    so a snapshot taken by a reader never contains part of a batch. Mutations
    are serialized by a lock.
    """

    def __init__(self, seed_entries: Optional[Iterable[KnowledgeEntry]] = None):
        """
        Initialize the store with its seed entries.

        Args:
            seed_entries: Built-in entries (defaults to the service manual seed set)
        """
        seeds = tuple(SEED_ENTRIES if seed_entries is None else seed_entries)
        self._seed: tuple[KnowledgeEntry, ...] = self._prepare_seed(seeds)
        self._entries: tuple[KnowledgeEntry, ...] = self._seed
        self._imported_count = 0
        self._id_counter = itertools.count(1)
        self._lock = threading.Lock()
        self._writer: Optional[int] = None

        logger.info(f"📚 Knowledge store initialized with {len(self._seed)} seed entries")

    @staticmethod
    def _prepare_seed(
        seeds: tuple[KnowledgeEntry, ...],
    ) -> tuple[KnowledgeEntry, ...]:
        prepared = []
        seen: set[str] = set()
        for index, entry in enumerate(seeds, 1):
            entry_id = entry.id or f"seed-{index}"
            if entry_id in seen:
                raise ValueError(f"Duplicate seed entry id: '{entry_id}'")
            seen.add(entry_id)
            prepared.append(
                entry.model_copy(
                    update={"id": entry_id, "provenance": Provenance.SEEDED}
                )
            )
        return tuple(prepared)

    @contextmanager
    def _mutation(self, operation: str) -> Iterator[None]:
        if self._writer == threading.get_ident():
            raise ConcurrencyViolation(
                f"Cannot {operation} while this thread is already mutating the store"
            )
        with self._lock:
            self._writer = threading.get_ident()
            try:
                yield
            finally:
                self._writer = None

    @property
    def imported_count(self) -> int:
        return self._imported_count

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> tuple[KnowledgeEntry, ...]:
        """Return the current entries in insertion order."""
        return self._entries

    def get(self, entry_id: str) -> Optional[KnowledgeEntry]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def merge(self, new_entries: Iterable[KnowledgeEntry]) -> int:
        """
        Append a batch of imported entries.

        Entries without an id, or whose id is already taken, get a fresh id
        built from a per-batch identifier and the store's monotonic counter.
        Content is never deduplicated.

        Args:
            new_entries: Entries to append, in order

        Returns:
            Number of entries appended

        Raises:
            ParseError: If any item of the batch is not a KnowledgeEntry.
                Nothing is appended in that case.
            ConcurrencyViolation: If called re-entrantly during a mutation
        """
        batch = list(new_entries)
        invalid = [
            index for index, e in enumerate(batch) if not isinstance(e, KnowledgeEntry)
        ]
        if invalid:
            raise ParseError(
                f"Batch rejected: items at positions {invalid} are not knowledge entries"
            )

        with self._mutation("merge"):
            batch_id = uuid.uuid4().hex[:8]
            taken = {e.id for e in self._entries}
            imported = []
            for entry in batch:
                entry_id = entry.id
                if entry_id is None or entry_id in taken:
                    entry_id = f"imported-{batch_id}-{next(self._id_counter)}"
                taken.add(entry_id)
                imported.append(
                    entry.model_copy(
                        update={"id": entry_id, "provenance": Provenance.IMPORTED}
                    )
                )

            self._entries = self._entries + tuple(imported)
            self._imported_count += len(imported)

        logger.info(
            f"📥 Merged {len(imported)} entries (batch {batch_id}), "
            f"store now holds {len(self._entries)}"
        )
        return len(imported)

    def reset(self) -> None:
        """Drop every import and restore the seed entries."""
        with self._mutation("reset"):
            self._entries = tuple(self._seed)
            self._imported_count = 0

        logger.warning("🗑️ Knowledge store reset to seed entries")

    def stats(self) -> Dict[str, int]:
        """
        Get entry counts.

        Returns:
            Dictionary with 'total', 'imported' and 'default'
        """
        with self._lock:
            total = len(self._entries)
            imported = self._imported_count
        return {"total": total, "imported": imported, "default": total - imported}

    def export(self) -> list[dict]:
        """Export the current entries in the structured import payload format."""
        return dump_payload(self.snapshot())

    def export_json(self) -> str:
        return dump_payload_json(self.snapshot())
