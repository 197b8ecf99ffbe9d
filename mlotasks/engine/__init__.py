"""Derived-state engine for mlotasks."""

from mlotasks.engine.queries import (
    active_tasks,
    child_tasks,
    descendant_ids,
    due_instant,
    find_task,
    goal_tasks,
    inbox_tasks,
    is_active,
    is_overdue,
    needs_review,
    next_order,
    overdue_tasks,
    review_tasks,
    root_tasks,
    start_instant,
)
from mlotasks.engine.scoring import Scorer, keep_score, recompute_scores
from mlotasks.engine.views import apply_view, group_tasks, outline_rows, sort_tasks

__all__ = [
    "active_tasks",
    "child_tasks",
    "descendant_ids",
    "due_instant",
    "find_task",
    "goal_tasks",
    "inbox_tasks",
    "is_active",
    "is_overdue",
    "needs_review",
    "next_order",
    "overdue_tasks",
    "review_tasks",
    "root_tasks",
    "start_instant",
    "Scorer",
    "keep_score",
    "recompute_scores",
    "apply_view",
    "group_tasks",
    "outline_rows",
    "sort_tasks",
]
