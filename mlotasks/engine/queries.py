"""Derived task subsets for mlotasks.

Pure functions over a task collection. Anything time-dependent takes an
optional `now` (aware UTC); it defaults to the current instant so callers can
pin time in tests.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from mlotasks.models.dates import combine_utc, ensure_utc, utc_now, whole_days_between
from mlotasks.models.task import Task


def resolve_now(now: Optional[datetime]) -> datetime:
    return ensure_utc(now) if now is not None else utc_now()


def find_task(tasks: Iterable[Task], task_id: Optional[str]) -> Optional[Task]:
    if not task_id:
        return None
    return next((task for task in tasks if task.id == task_id), None)


def root_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Tasks without a parent."""
    return [task for task in tasks if not task.parent_id]


def child_tasks(tasks: Iterable[Task], parent_id: Optional[str]) -> List[Task]:
    """Tasks whose parent is `parent_id`, in sibling order."""
    return sorted(
        (task for task in tasks if task.parent_id == parent_id),
        key=lambda task: task.order,
    )


def next_order(tasks: Iterable[Task], parent_id: Optional[str]) -> int:
    """Order for a new task appended under `parent_id` (root scope when None)."""
    orders = [task.order for task in tasks if (task.parent_id or None) == (parent_id or None)]
    if not orders:
        return 0
    return max(orders) + 1


def descendant_ids(tasks: Iterable[Task], task_id: str) -> List[str]:
    """All transitive descendants of `task_id`, parents before their children.

    Children are taken from both `child_ids` and `parent_id` back-references, so
    a stale `child_ids` list cannot hide a descendant. Iterative, so depth is unbounded.
    """
    tasks = list(tasks)
    children_by_parent: Dict[str, List[str]] = {}
    for task in tasks:
        children_by_parent.setdefault(task.id, []).extend(task.child_ids)
        if task.parent_id:
            children_by_parent.setdefault(task.parent_id, []).append(task.id)

    seen: Set[str] = {task_id}
    result: List[str] = []
    stack = list(reversed(children_by_parent.get(task_id, [])))
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        result.append(current)
        stack.extend(reversed(children_by_parent.get(current, [])))
    return result


def start_instant(task: Task) -> Optional[datetime]:
    if task.start_date is None:
        return None
    return combine_utc(task.start_date, task.start_time)


def due_instant(task: Task) -> Optional[datetime]:
    if task.due_date is None:
        return None
    return combine_utc(task.due_date, task.due_time)


def is_active(task: Task, now: Optional[datetime] = None) -> bool:
    """Not completed and already startable.

    `depends_on` is not consulted.
    """
    if task.is_completed:
        return False
    start = start_instant(task)
    return start is None or start <= resolve_now(now)


def active_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    now = resolve_now(now)
    return [task for task in tasks if is_active(task, now)]


def inbox_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Unfiled tasks: no parent and flagged as in the inbox."""
    return [task for task in tasks if not task.parent_id and task.is_in_inbox is True]


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    if task.is_completed:
        return False
    due = due_instant(task)
    return due is not None and due < resolve_now(now)


def overdue_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    now = resolve_now(now)
    return [task for task in tasks if is_overdue(task, now)]


def goal_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [task for task in tasks if task.goal_type is not None]


def needs_review(task: Task, now: Optional[datetime] = None) -> bool:
    """True once `review_period` whole days have passed since the last review.

    Tasks with a review period that were never reviewed are always due.
    """
    if not task.review_period:
        return False
    if task.last_reviewed is None:
        return True
    return whole_days_between(task.last_reviewed, resolve_now(now)) >= task.review_period


def review_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    now = resolve_now(now)
    return [task for task in tasks if needs_review(task, now)]
