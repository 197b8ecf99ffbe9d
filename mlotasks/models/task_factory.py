"""Record creation factories for mlotasks.

This module centralizes creation logic so that every new task, context and
view gets the same defaults regardless of the caller.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from mlotasks.models.constants import (
    DEFAULT_COMPUTED_SCORE,
    DEFAULT_CONTEXT_NAME,
    DEFAULT_IMPORTANCE,
    DEFAULT_TASK_TITLE,
    DEFAULT_URGENCY,
    DEFAULT_VIEW_NAME,
    DEFAULT_VIEW_SORTING,
)
from mlotasks.models.context import Context
from mlotasks.models.dates import utc_now
from mlotasks.models.ids import generate_id
from mlotasks.models.task import Task, TaskType
from mlotasks.models.view import View, ViewType


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "title": DEFAULT_TASK_TITLE,
        "notes": "",
        "parent_id": None,
        "type": TaskType.TASK.value,
        "importance": DEFAULT_IMPORTANCE,
        "urgency": DEFAULT_URGENCY,
        "start_date": None,
        "start_time": None,
        "due_date": None,
        "due_time": None,
        "contexts": [],
        "tags": [],
        "flags": [],
        "is_starred": False,
        "is_in_inbox": False,
        "color": None,
        "goal_type": None,
        "review_period": None,
        "recurrence": None,
        "depends_on": [],
    }


def create_task_base(data: Mapping[str, Any], order: int, now: Optional[datetime] = None) -> Task:
    """Create a task from caller input, applying defaults.

    Only the user-editable fields in `data` are honored; identity, status and
    timestamps are always assigned here. Falsy values fall back to defaults,
    except for importance/urgency where only a missing/None value does.

    Args:
        data: Caller input (camelCase or snake_case keys)
        order: Sibling rank to use when `data` has no explicit order
        now: Creation instant (defaults to current UTC time)

    Returns:
        Task object with defaults applied
    """
    now = now or utc_now()
    given = Task.normalize_keys(data)
    fields = create_task_defaults()

    for key, default in fields.items():
        value = given.get(key)
        if key in ("importance", "urgency"):
            fields[key] = default if value is None else value
        else:
            fields[key] = value or default

    explicit_order = given.get("order")

    return Task(
        id=generate_id("task"),
        child_ids=[],
        order=order if explicit_order is None else explicit_order,
        computed_score=DEFAULT_COMPUTED_SCORE,
        completed_date=None,
        is_completed=False,
        is_active=False,
        project_progress=0,
        last_reviewed=None,
        created_at=now,
        modified_at=now,
        **fields,
    )


def create_context_base(data: Mapping[str, Any], now: Optional[datetime] = None) -> Context:
    """Create a context from caller input, applying defaults."""
    now = now or utc_now()
    given = Context.normalize_keys(data)
    return Context(
        id=generate_id("context"),
        name=given.get("name") or DEFAULT_CONTEXT_NAME,
        icon=given.get("icon") or None,
        color=given.get("color") or None,
        parent_id=given.get("parent_id") or None,
        schedule=given.get("schedule") or None,
        created_at=now,
        modified_at=now,
    )


def create_view_base(data: Mapping[str, Any], now: Optional[datetime] = None, built_in: bool = False) -> View:
    """Create a view from caller input, applying defaults.

    Display flags default to True only when absent/None, so an explicit
    False is kept. `isBuiltIn` in `data` is ignored; only the seeding of the
    built-in views passes `built_in=True`.
    """
    now = now or utc_now()
    given = View.normalize_keys(data)
    show_completed = given.get("show_completed")
    show_hierarchy = given.get("show_hierarchy")
    return View(
        id=generate_id("view"),
        name=given.get("name") or DEFAULT_VIEW_NAME,
        type=given.get("type") or ViewType.CUSTOM.value,
        is_built_in=built_in,
        filters=given.get("filters") or {},
        sorting=given.get("sorting") or dict(DEFAULT_VIEW_SORTING),
        grouping=given.get("grouping") or None,
        columns=given.get("columns") or [],
        show_completed=True if show_completed is None else show_completed,
        show_hierarchy=True if show_hierarchy is None else show_hierarchy,
        created_at=now,
        modified_at=now,
    )
