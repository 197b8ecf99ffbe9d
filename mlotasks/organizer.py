"""Composition root wiring one storage adapter into every repository."""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from mlotasks.engine.views import apply_view
from mlotasks.models.task import Task
from mlotasks.models.settings import Settings
from mlotasks.repositories import ContextRepository, SettingsRepository, TaskRepository, ViewRepository
from mlotasks.storage.base import StorageAdapter, StoredRecord
from mlotasks.storage.factory import create_storage

logger = logging.getLogger(__name__)


class Organizer:
    """Tasks, contexts, views and settings sharing a single storage adapter."""

    def __init__(self, storage: StorageAdapter):
        self.storage = storage
        self.tasks = TaskRepository(storage)
        self.contexts = ContextRepository(storage)
        self.views = ViewRepository(storage)
        self.settings = SettingsRepository(storage)

    def init(self) -> None:
        """Initialize storage and load every collection.

        Load failures are recorded on the individual repositories.
        """
        self.tasks.init()
        self.contexts.init()
        self.settings.init()
        self.views.init()

        if self.settings.settings.debug_mode:
            logging.getLogger("mlotasks").setLevel(logging.DEBUG)
        logger.info(
            f"Organizer ready: {len(self.tasks.tasks)} tasks, "
            f"{len(self.contexts.contexts)} contexts, {len(self.views.views)} views"
        )

    @property
    def errors(self) -> List[str]:
        return [
            repo.error
            for repo in (self.tasks, self.contexts, self.views, self.settings)
            if repo.error is not None
        ]

    def view_tasks(self, view_id: Optional[str] = None, now: Optional[datetime] = None) -> List[Task]:
        """Tasks shown by a view (the current view when `view_id` is None).

        The active context filter applies on top of the view's own filters.
        """
        view = self.views.get(view_id) if view_id else self.views.current_view
        if view is None:
            return []
        return apply_view(
            view,
            self.tasks.tasks,
            now=now,
            active_context_ids=self.contexts.active_context_ids,
        )

    def export_all(self) -> StoredRecord:
        return self.tasks.export_all()

    def import_all(self, payload: Mapping[str, Any]) -> None:
        """Import a full backup and reload every collection.

        Raises:
            InvalidFormatError: If version or tasks are missing
        """
        self.tasks.import_all(payload)
        self.contexts.load()
        self.settings.load()
        self.views.load()
        if self.views.current_view is None:
            self.views.set_current_view(self.views.views[0].id if self.views.views else None)
        logger.info(f"Imported backup version {payload.get('version')}")

    def clear_all(self) -> None:
        """Wipe the store and every in-memory collection."""
        self.tasks.clear_all()
        self.contexts.contexts = []
        self.contexts.invalid_records = []
        self.contexts.active_context_ids = []
        self.views.views = []
        self.views.invalid_records = []
        self.views.current_view_id = None
        self.settings.settings = Settings()


def build_organizer(**factory_kwargs: Any) -> Organizer:
    """Create an Organizer over the configured storage backend (not yet initialized)."""
    return Organizer(create_storage(**factory_kwargs))
