"""Context repository: CRUD, hierarchy scan and the active-context filter set."""

import logging
from typing import Any, Iterable, List, Mapping, Optional

from mlotasks.errors import NotFoundError
from mlotasks.models.constants import DEFAULT_CONTEXTS
from mlotasks.models.context import Context
from mlotasks.models.dates import utc_now
from mlotasks.models.task_factory import create_context_base
from mlotasks.repositories.base import Repository
from mlotasks.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class ContextRepository(Repository):
    """Repository for Context operations."""

    def __init__(self, storage: StorageAdapter):
        super().__init__(storage)
        self.contexts: List[Context] = []
        self.active_context_ids: List[str] = []

    def load(self) -> List[Context]:
        self.loading = True
        self.error = None
        self.load_failed = False
        try:
            self.contexts = self._parse_records(Context, self.storage.get_contexts(), "context")
            logger.debug(f"Loaded {len(self.contexts)} contexts")
        except Exception as e:
            self._record_failure("load contexts", e)
            self.load_failed = True
            self.contexts = []
        finally:
            self.loading = False
        return self.contexts

    def _commit(self, contexts: List[Context], action: str) -> None:
        try:
            self.storage.save_contexts(self._to_storage(contexts))
        except Exception as e:
            self._record_failure(action, e)
            raise
        self.contexts = contexts

    # ---- CRUD ----

    def create(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> Context:
        context = create_context_base({**(data or {}), **fields})
        self._commit([*self.contexts, context], f"create context {context.id}")
        logger.debug(f"Created context {context.id}: {context.name}")
        return context

    def update(self, context_id: str, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> Context:
        """Shallow-merge `partial` into a context (id is never changed).

        Raises:
            NotFoundError: If no context has this id
        """
        current = self.get(context_id)
        if current is None:
            error = NotFoundError("Context", context_id)
            self.error = str(error)
            raise error

        updated = current.merged({**(partial or {}), **fields}, id=context_id, modified_at=utc_now())
        self._commit(
            [updated if c.id == context_id else c for c in self.contexts],
            f"update context {context_id}",
        )
        return updated

    def delete(self, context_id: str) -> None:
        """Delete a context and drop it from the active set.

        Child contexts and tasks referencing it keep the now-dangling id.
        """
        if self.get(context_id) is None:
            return
        self._commit([c for c in self.contexts if c.id != context_id], f"delete context {context_id}")
        self.active_context_ids = [cid for cid in self.active_context_ids if cid != context_id]
        logger.debug(f"Deleted context {context_id}")

    def create_default_contexts(self) -> List[Context]:
        """Create the standard @Work/@Home/@Computer/@Phone/@Errands contexts."""
        return [self.create(defaults) for defaults in DEFAULT_CONTEXTS]

    # ---- lookups ----

    def get(self, context_id: Optional[str]) -> Optional[Context]:
        if not context_id:
            return None
        return next((c for c in self.contexts if c.id == context_id), None)

    def root_contexts(self) -> List[Context]:
        return [c for c in self.contexts if not c.parent_id]

    def children_of(self, parent_id: str) -> List[Context]:
        return [c for c in self.contexts if c.parent_id == parent_id]

    def active_contexts(self) -> List[Context]:
        """Active contexts in selection order (unknown ids are skipped)."""
        return [c for c in (self.get(cid) for cid in self.active_context_ids) if c is not None]

    def is_context_open(self, context_id: str) -> bool:
        """Whether the context is currently available.

        Schedules are stored but not evaluated yet: every known context is open.
        """
        return self.get(context_id) is not None

    def available_contexts(self) -> List[Context]:
        return [c for c in self.contexts if self.is_context_open(c.id)]

    # ---- active-context filter set ----

    def set_active_contexts(self, context_ids: Iterable[str]) -> None:
        self.active_context_ids = list(dict.fromkeys(context_ids))

    def toggle_context(self, context_id: str) -> None:
        if context_id in self.active_context_ids:
            self.active_context_ids = [cid for cid in self.active_context_ids if cid != context_id]
        else:
            self.active_context_ids = [*self.active_context_ids, context_id]

    def clear_active_contexts(self) -> None:
        self.active_context_ids = []
