"""In-memory repositories for mlotasks."""

from mlotasks.repositories.task_repository import TaskRepository
from mlotasks.repositories.context_repository import ContextRepository
from mlotasks.repositories.view_repository import ViewRepository, build_default_views
from mlotasks.repositories.settings_repository import SettingsRepository

__all__ = [
    "TaskRepository",
    "ContextRepository",
    "ViewRepository",
    "build_default_views",
    "SettingsRepository",
]
