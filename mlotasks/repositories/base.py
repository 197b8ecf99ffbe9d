"""Shared plumbing for the in-memory repositories."""

import logging
from typing import Any, Iterable, List, Optional, Type

from mlotasks.models.base import Record
from mlotasks.storage.base import StorageAdapter, StoredRecord

logger = logging.getLogger(__name__)


class Repository:
    """Owner of one collection's in-memory state and its persistence round-trip.

    Mutations follow persist-before-apply: the next state is computed, written
    through the storage adapter, and only then committed in memory. A failed
    write therefore leaves the in-memory state untouched.

    Stored records that fail validation are not loaded. They are kept verbatim
    in `invalid_records` and written back with every save, so they stay in
    storage until fixed.
    """

    def __init__(self, storage: StorageAdapter):
        self.storage = storage
        self.loading = False
        self.load_failed = False
        self.error: Optional[str] = None
        self.invalid_records: List[Any] = []

    def init(self) -> None:
        """Prepare storage and load the collection (failures are recorded, not raised)."""
        try:
            self.storage.init()
        except Exception as e:
            self._record_failure(f"initialize {type(self).__name__}", e)
            self.load_failed = True
            return
        self.load()

    def load(self) -> None:
        raise NotImplementedError

    def _record_failure(self, action: str, error: Exception) -> None:
        logger.error(f"Failed to {action}: {type(error).__name__}: {str(error)}")
        self.error = str(error)

    def _parse_records(self, model: Type[Record], records: Iterable[Any], kind: str) -> List[Any]:
        """Validate stored records one by one, setting aside the ones that fail."""
        parsed = []
        invalid = []
        for record in records:
            try:
                parsed.append(model.from_storage(record))
            except (TypeError, ValueError) as e:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning(f"Skipping invalid {kind} record {record_id!r}: {type(e).__name__}: {str(e)}")
                invalid.append(record)

        self.invalid_records = invalid
        if invalid:
            self.error = f"{len(invalid)} invalid {kind} record(s) were not loaded"
        return parsed

    def _to_storage(self, records: Iterable[Record]) -> List[StoredRecord]:
        return [record.to_storage() for record in records] + list(self.invalid_records)
