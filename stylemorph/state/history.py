"""Ledger of completed try-on generations."""

from typing import Iterable

from ..models import GenerationRecord
from .library import AssetLibrary


class HistoryLedger:
    """Newest-first record of generations.

    Entries hold image handles by value and are never tied to the
    continued existence of the assets they were made from.
    """

    def __init__(self):
        self._records: AssetLibrary[GenerationRecord] = AssetLibrary()

    def append(self, records: Iterable[GenerationRecord]) -> list[GenerationRecord]:
        """Add a batch ahead of existing entries, preserving batch order."""
        return self._records.insert_batch_front(records)

    def remove(self, record_id: str) -> GenerationRecord | None:
        return self._records.remove(record_id)

    def find(self, record_id: str) -> GenerationRecord | None:
        return self._records.find(record_id)

    def list(self) -> list[GenerationRecord]:
        return self._records.list()

    def __len__(self) -> int:
        return len(self._records)
