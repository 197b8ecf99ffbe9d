"""Data models for mlotasks."""

from mlotasks.models.task import Task, TaskType
from mlotasks.models.context import Context
from mlotasks.models.view import View, ViewType, ViewSorting, ViewGrouping, SortDirection
from mlotasks.models.settings import Settings, default_settings
from mlotasks.models.ids import generate_id

__all__ = [
    "Task",
    "TaskType",
    "Context",
    "View",
    "ViewType",
    "ViewSorting",
    "ViewGrouping",
    "SortDirection",
    "Settings",
    "default_settings",
    "generate_id",
]
