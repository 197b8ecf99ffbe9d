"""View repository: saved filter/sort/group configurations and the built-ins."""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from mlotasks.errors import BuiltInProtectedError, NotFoundError, StorageError
from mlotasks.models.constants import BUILT_IN_VIEWS
from mlotasks.models.dates import utc_now
from mlotasks.models.task_factory import create_view_base
from mlotasks.models.view import View
from mlotasks.repositories.base import Repository
from mlotasks.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


def build_default_views(now: Optional[datetime] = None) -> List[View]:
    """Fresh copies of the six built-in views."""
    now = now or utc_now()
    return [create_view_base(definition, now=now, built_in=True) for definition in BUILT_IN_VIEWS]


class ViewRepository(Repository):
    """Repository for View operations."""

    def __init__(self, storage: StorageAdapter):
        super().__init__(storage)
        self.views: List[View] = []
        self.current_view_id: Optional[str] = None

    def init(self) -> None:
        """Load views, seeding the built-ins when none are stored.

        Seeding is skipped when loading failed, so a read error never
        overwrites stored views. Calling this again is harmless.
        """
        super().init()
        if self.load_failed:
            return

        if not self.views:
            try:
                self.create_default_views()
            except StorageError:
                # Already logged and recorded on self.error
                return

        if self.current_view_id is None and self.views:
            self.current_view_id = self.views[0].id

    def load(self) -> List[View]:
        self.loading = True
        self.error = None
        self.load_failed = False
        try:
            self.views = self._parse_records(View, self.storage.get_views(), "view")
            logger.debug(f"Loaded {len(self.views)} views")
        except Exception as e:
            self._record_failure("load views", e)
            self.load_failed = True
            self.views = []
        finally:
            self.loading = False
        return self.views

    def _commit(self, views: List[View], action: str) -> None:
        try:
            self.storage.save_views(self._to_storage(views))
        except Exception as e:
            self._record_failure(action, e)
            raise
        self.views = views

    # ---- CRUD ----

    def create(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> View:
        view = create_view_base({**(data or {}), **fields})
        self._commit([*self.views, view], f"create view {view.id}")
        logger.debug(f"Created view {view.id}: {view.name}")
        return view

    def create_default_views(self) -> List[View]:
        """Append the built-in views in a single write."""
        defaults = build_default_views()
        self._commit([*self.views, *defaults], "create default views")
        logger.info(f"Seeded {len(defaults)} built-in views")
        return defaults

    def update(self, view_id: str, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> View:
        """Shallow-merge `partial` into a view (id is never changed).

        Raises:
            NotFoundError: If no view has this id
        """
        current = self.get(view_id)
        if current is None:
            error = NotFoundError("View", view_id)
            self.error = str(error)
            raise error

        updated = current.merged(
            {**(partial or {}), **fields},
            id=view_id,
            is_built_in=current.is_built_in,
            modified_at=utc_now(),
        )
        self._commit([updated if v.id == view_id else v for v in self.views], f"update view {view_id}")
        return updated

    def delete(self, view_id: str) -> None:
        """Delete a custom view.

        If it was the current view, the first remaining view becomes current.

        Raises:
            BuiltInProtectedError: If the view is built-in
        """
        view = self.get(view_id)
        if view is None:
            return
        if view.is_built_in:
            error = BuiltInProtectedError("Cannot delete built-in views")
            self.error = str(error)
            raise error

        remaining = [v for v in self.views if v.id != view_id]
        self._commit(remaining, f"delete view {view_id}")

        if self.current_view_id == view_id:
            self.current_view_id = remaining[0].id if remaining else None
        logger.debug(f"Deleted view {view_id}")

    # ---- lookups ----

    def get(self, view_id: Optional[str]) -> Optional[View]:
        if not view_id:
            return None
        return next((v for v in self.views if v.id == view_id), None)

    @property
    def current_view(self) -> Optional[View]:
        return self.get(self.current_view_id)

    def set_current_view(self, view_id: Optional[str]) -> None:
        self.current_view_id = view_id

    def builtin_views(self) -> List[View]:
        return [v for v in self.views if v.is_built_in]

    def custom_views(self) -> List[View]:
        return [v for v in self.views if not v.is_built_in]
