"""Task repository: hierarchy maintenance, CRUD and derived queries."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from mlotasks.engine import queries
from mlotasks.engine.scoring import Scorer, recompute_scores
from mlotasks.errors import NotFoundError
from mlotasks.models.dates import utc_now
from mlotasks.models.task import Task
from mlotasks.models.task_factory import create_task_base
from mlotasks.repositories.base import Repository
from mlotasks.storage.base import StorageAdapter, validate_import_payload

logger = logging.getLogger(__name__)


class TaskRepository(Repository):
    """Repository for Task operations."""

    def __init__(self, storage: StorageAdapter):
        super().__init__(storage)
        self.tasks: List[Task] = []
        self.selected_task_id: Optional[str] = None

    # ---- loading / persistence ----

    def load(self) -> List[Task]:
        """Load all tasks from storage.

        On failure the collection becomes empty and the error is recorded.
        Individual records that fail validation are skipped (see `invalid_records`).
        """
        self.loading = True
        self.error = None
        self.load_failed = False
        try:
            self.tasks = self._parse_records(Task, self.storage.get_tasks(), "task")
            logger.debug(f"Loaded {len(self.tasks)} tasks")
        except Exception as e:
            self._record_failure("load tasks", e)
            self.load_failed = True
            self.tasks = []
        finally:
            self.loading = False
        return self.tasks

    def _commit(self, tasks: List[Task], action: str) -> None:
        try:
            self.storage.save_tasks(self._to_storage(tasks))
        except Exception as e:
            self._record_failure(action, e)
            raise
        self.tasks = tasks

    def _require(self, task_id: str) -> Task:
        task = self.get(task_id)
        if task is None:
            error = NotFoundError("Task", task_id)
            self.error = str(error)
            raise error
        return task

    @staticmethod
    def _replace(tasks: List[Task], updated: Task) -> List[Task]:
        return [updated if task.id == updated.id else task for task in tasks]

    # ---- CRUD ----

    def create(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> Task:
        """Create a task and register it with its parent.

        Args:
            data: Task fields (camelCase or snake_case); `fields` are merged over it

        Returns:
            The created Task

        Raises:
            NotFoundError: If the given parent does not exist
        """
        given: Dict[str, Any] = {**(data or {}), **fields}
        parent_id = Task.normalize_keys(given).get("parent_id") or None
        parent = None
        if parent_id is not None:
            parent = self._require(parent_id)

        now = utc_now()
        task = create_task_base(given, order=queries.next_order(self.tasks, parent_id), now=now)
        next_tasks = list(self.tasks) + [task]

        if parent is not None and task.id not in parent.child_ids:
            next_tasks = self._replace(
                next_tasks,
                parent.merged({}, child_ids=[*parent.child_ids, task.id], modified_at=now),
            )

        self._commit(next_tasks, f"create task {task.id}")
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task

    def update(self, task_id: str, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> Task:
        """Shallow-merge `partial` into a task.

        The id never changes, even if `partial` carries one, and `modifiedAt`
        is always refreshed.

        Raises:
            NotFoundError: If no task has this id
        """
        current = self._require(task_id)
        updated = current.merged({**(partial or {}), **fields}, id=task_id, modified_at=utc_now())

        self._commit(self._replace(self.tasks, updated), f"update task {task_id}")
        logger.debug(f"Updated task {task_id}: {updated.title[:50]}")
        return updated

    def delete(self, task_id: str, cascade: bool = False) -> List[str]:
        """Delete a task, optionally with all of its descendants.

        Without `cascade` the children stay in the collection and keep pointing
        at the removed parent id.

        Returns:
            Ids removed from the collection ([] if `task_id` does not exist)
        """
        task = self.get(task_id)
        if task is None:
            return []

        removed = [task_id]
        if cascade:
            removed.extend(queries.descendant_ids(self.tasks, task_id))
        removed_set = set(removed)
        next_tasks = [t for t in self.tasks if t.id not in removed_set]

        parent = queries.find_task(next_tasks, task.parent_id)
        if parent is not None:
            next_tasks = self._replace(
                next_tasks,
                parent.merged(
                    {},
                    child_ids=[cid for cid in parent.child_ids if cid != task_id],
                    modified_at=utc_now(),
                ),
            )

        self._commit(next_tasks, f"delete task {task_id}")

        if self.selected_task_id in removed_set:
            self.selected_task_id = None
        logger.debug(f"Deleted task {task_id} ({len(removed)} removed)")
        return removed

    def toggle_complete(self, task_id: str) -> Optional[Task]:
        """Flip completion, setting or clearing `completedDate` accordingly."""
        task = self.get(task_id)
        if task is None:
            return None

        is_completed = not task.is_completed
        return self.update(
            task_id,
            is_completed=is_completed,
            completed_date=utc_now() if is_completed else None,
        )

    def mark_reviewed(self, task_id: str, when: Optional[datetime] = None) -> Task:
        """Record a review of the task, restarting its review period."""
        return self.update(task_id, last_reviewed=when or utc_now())

    def move(self, task_id: str, new_parent_id: Optional[str], order: Optional[int] = None) -> Task:
        """Re-parent a task, keeping both parents' `child_ids` in sync.

        Args:
            task_id: Task to move
            new_parent_id: New parent, or None to make it a root task
            order: Sibling rank in the new scope (appended when None)

        Raises:
            NotFoundError: If the task or the new parent does not exist
            ValueError: If the new parent is the task itself or one of its descendants
        """
        task = self._require(task_id)
        new_parent = self._require(new_parent_id) if new_parent_id else None
        if new_parent_id == task_id or (
            new_parent_id and new_parent_id in queries.descendant_ids(self.tasks, task_id)
        ):
            raise ValueError(f"Cannot move task {task_id} under itself or its descendants")

        now = utc_now()
        siblings = [t for t in self.tasks if t.id != task_id]
        if order is None:
            order = queries.next_order(siblings, new_parent_id)

        next_tasks = list(self.tasks)
        old_parent = queries.find_task(next_tasks, task.parent_id)
        if old_parent is not None and old_parent.id != new_parent_id:
            next_tasks = self._replace(
                next_tasks,
                old_parent.merged(
                    {},
                    child_ids=[cid for cid in old_parent.child_ids if cid != task_id],
                    modified_at=now,
                ),
            )
        if new_parent is not None and task_id not in new_parent.child_ids:
            next_tasks = self._replace(
                next_tasks,
                new_parent.merged({}, child_ids=[*new_parent.child_ids, task_id], modified_at=now),
            )

        moved = task.merged({}, parent_id=new_parent_id, order=order, is_in_inbox=False, modified_at=now)
        next_tasks = self._replace(next_tasks, moved)

        self._commit(next_tasks, f"move task {task_id}")
        logger.debug(f"Moved task {task_id} under {new_parent_id}")
        return moved

    def recompute_scores(self, scorer: Optional[Scorer] = None) -> List[Task]:
        """Recompute `computed_score` for every task and persist any change.

        The default scorer keeps existing scores, so nothing is written.
        """
        rescored = recompute_scores(self.tasks, scorer)
        if any(new is not old for new, old in zip(rescored, self.tasks)):
            self._commit(rescored, "recompute task scores")
        return self.tasks

    # ---- lookups and derived queries ----

    def get(self, task_id: Optional[str]) -> Optional[Task]:
        return queries.find_task(self.tasks, task_id)

    def root_tasks(self) -> List[Task]:
        return queries.root_tasks(self.tasks)

    def children_of(self, parent_id: str) -> List[Task]:
        return queries.child_tasks(self.tasks, parent_id)

    def active_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return queries.active_tasks(self.tasks, now)

    def inbox_tasks(self) -> List[Task]:
        return queries.inbox_tasks(self.tasks)

    def overdue_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return queries.overdue_tasks(self.tasks, now)

    def goal_tasks(self) -> List[Task]:
        return queries.goal_tasks(self.tasks)

    def review_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return queries.review_tasks(self.tasks, now)

    # ---- selection ----

    def select(self, task_id: Optional[str]) -> None:
        self.selected_task_id = task_id

    def clear_selection(self) -> None:
        self.selected_task_id = None

    @property
    def selected_task(self) -> Optional[Task]:
        return self.get(self.selected_task_id)

    # ---- export / import ----

    def export_all(self) -> Dict[str, Any]:
        """Export every record kind through the storage adapter."""
        try:
            return self.storage.export_data()
        except Exception as e:
            self._record_failure("export data", e)
            raise

    def import_all(self, payload: Mapping[str, Any]) -> List[Task]:
        """Overwrite stored data with `payload`, then reload tasks.

        Raises:
            InvalidFormatError: If `version` or `tasks` is missing
        """
        try:
            validate_import_payload(payload)
            self.storage.import_data(payload)
        except Exception as e:
            self._record_failure("import data", e)
            raise
        return self.load()

    def clear_all(self) -> None:
        """Remove all persisted data and empty the collection."""
        try:
            self.storage.clear_all()
        except Exception as e:
            self._record_failure("clear data", e)
            raise
        self.tasks = []
        self.invalid_records = []
        self.selected_task_id = None
