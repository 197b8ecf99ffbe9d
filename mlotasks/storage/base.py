"""Storage contract shared by every repository.

Records cross this boundary as JSON-shaped dicts with camelCase keys, the same
shape used by the export payload. Implementations hold no domain logic.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from mlotasks.errors import InvalidFormatError

StoredRecord = Dict[str, Any]


def validate_import_payload(payload: Any) -> None:
    """Check an import payload for its version marker and tasks section.

    Raises:
        InvalidFormatError: If the payload is not a mapping or misses `version`/`tasks`
    """
    if not isinstance(payload, Mapping):
        raise InvalidFormatError("Invalid import data format")
    if not payload.get("version") or payload.get("tasks") is None:
        raise InvalidFormatError("Invalid import data format")


class StorageAdapter(ABC):
    """Capability interface for persisting tasks, contexts, settings and views."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the backend (create schema, check reachability, ...)."""

    # Tasks

    @abstractmethod
    def get_tasks(self) -> List[StoredRecord]:
        """Return all tasks ([] when nothing is stored)."""

    @abstractmethod
    def save_tasks(self, tasks: List[StoredRecord]) -> None:
        """Replace the full task collection."""

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[StoredRecord]:
        """Return one task, or None if absent."""

    @abstractmethod
    def create_task(self, task: StoredRecord) -> StoredRecord:
        """Append a task and return it."""

    @abstractmethod
    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> StoredRecord:
        """Merge `updates` into a task, keeping its id, and return the result.

        Raises:
            NotFoundError: If no task has this id
        """

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Remove a task (no error if absent)."""

    # Contexts

    @abstractmethod
    def get_contexts(self) -> List[StoredRecord]:
        """Return all contexts ([] when nothing is stored)."""

    @abstractmethod
    def save_contexts(self, contexts: List[StoredRecord]) -> None:
        """Replace the full context collection."""

    # Settings

    @abstractmethod
    def get_settings(self) -> StoredRecord:
        """Return the settings record ({} when nothing is stored)."""

    @abstractmethod
    def save_settings(self, settings: StoredRecord) -> None:
        """Replace the settings record."""

    # Views

    @abstractmethod
    def get_views(self) -> List[StoredRecord]:
        """Return all views ([] when nothing is stored)."""

    @abstractmethod
    def save_views(self, views: List[StoredRecord]) -> None:
        """Replace the full view collection."""

    # Whole store

    @abstractmethod
    def clear_all(self) -> None:
        """Remove all persisted state for every record kind."""

    @abstractmethod
    def export_data(self) -> StoredRecord:
        """Return `{version, exportDate, tasks, contexts, settings, views}`."""

    @abstractmethod
    def import_data(self, payload: Mapping[str, Any]) -> None:
        """Validate `payload` and overwrite every section it contains.

        Raises:
            InvalidFormatError: If `version` or `tasks` is missing
        """
