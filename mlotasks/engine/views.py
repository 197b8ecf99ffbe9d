"""Evaluate a View configuration against a task collection.

Filter keys understood here:
- isActive, needsReview: derived predicates (see engine.queries)
- hasGoalType: goal_type presence
- contexts: task has any of the given context ids
- any other Task field (camelCase or snake_case): equality
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mlotasks.engine.queries import is_active, needs_review, resolve_now
from mlotasks.models.task import Task
from mlotasks.models.view import SortDirection, View

logger = logging.getLogger(__name__)

_DERIVED_FILTERS = {"isActive", "hasGoalType", "needsReview", "contexts"}


def _known_filters(view: View) -> Dict[str, Any]:
    known: Dict[str, Any] = {}
    for name, criterion in view.filters.items():
        if name in _DERIVED_FILTERS or Task.field_name_for(name) in Task.model_fields:
            known[name] = criterion
        else:
            logger.warning(f"View {view.id} has unknown filter {name!r}; ignoring it")
    return known


def _matches(task: Task, name: str, criterion: Any, now: datetime) -> bool:
    if name == "isActive":
        return is_active(task, now) == bool(criterion)
    if name == "needsReview":
        return needs_review(task, now) == bool(criterion)
    if name == "hasGoalType":
        return (task.goal_type is not None) == bool(criterion)
    if name == "contexts":
        wanted = set(criterion) if isinstance(criterion, (list, tuple, set)) else {criterion}
        return bool(wanted & set(task.contexts))
    return getattr(task, Task.field_name_for(name)) == criterion


def field_value(task: Task, field: str) -> Any:
    """Read a task field by camelCase or snake_case name (None if absent)."""
    return getattr(task, Task.field_name_for(field), None)


def sort_tasks(tasks: Iterable[Task], field: str, direction: str = SortDirection.ASC.value) -> List[Task]:
    """Stable sort on one field; tasks without a value always go last."""
    tasks = list(tasks)
    present = [task for task in tasks if field_value(task, field) is not None]
    missing = [task for task in tasks if field_value(task, field) is None]
    present.sort(key=lambda task: field_value(task, field), reverse=direction == SortDirection.DESC.value)
    return present + missing


def apply_view(
    view: View,
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    active_context_ids: Optional[Iterable[str]] = None,
) -> List[Task]:
    """Filter and sort tasks the way `view` describes.

    Args:
        view: View configuration
        tasks: Full task collection
        now: Reference instant for derived predicates
        active_context_ids: When non-empty, keep only tasks tagged with one of these

    Returns:
        Matching tasks in display order
    """
    now = resolve_now(now)
    tasks = list(tasks)
    filters = _known_filters(view)
    contexts = set(active_context_ids or [])

    selected = []
    for task in tasks:
        if not view.show_completed and task.is_completed:
            continue
        if contexts and not contexts & set(task.contexts):
            continue
        if all(_matches(task, name, criterion, now) for name, criterion in filters.items()):
            selected.append(task)

    return sort_tasks(selected, view.sorting.field, view.sorting.direction)


def group_tasks(view: View, tasks: Iterable[Task]) -> Dict[Any, List[Task]]:
    """Group tasks by the view's grouping field, keeping first-seen group order.

    Without a grouping every task lands in a single `None` group. List values
    are grouped by their tuple form.
    """
    tasks = list(tasks)
    if view.grouping is None:
        return {None: tasks}

    groups: Dict[Any, List[Task]] = {}
    for task in tasks:
        key = field_value(task, view.grouping.field)
        if isinstance(key, list):
            key = tuple(key)
        groups.setdefault(key, []).append(task)
    return groups


def outline_rows(tasks: Iterable[Task]) -> List[Tuple[Task, int]]:
    """Depth-first outline of `tasks` as (task, depth) rows.

    Tasks whose parent is not in `tasks` are shown at depth 0, and siblings
    keep the order they were given in.
    """
    tasks = list(tasks)
    ids = {task.id for task in tasks}
    children: Dict[Optional[str], List[Task]] = {}
    for task in tasks:
        parent = task.parent_id if task.parent_id in ids else None
        children.setdefault(parent, []).append(task)

    rows: List[Tuple[Task, int]] = []
    seen = set()
    stack = [(task, 0) for task in reversed(children.get(None, []))]
    while stack:
        task, depth = stack.pop()
        if task.id in seen:
            continue
        seen.add(task.id)
        rows.append((task, depth))
        stack.extend((child, depth + 1) for child in reversed(children.get(task.id, [])))
    return rows
