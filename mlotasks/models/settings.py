"""User settings record for mlotasks."""

from typing import Any, Dict, Optional

from mlotasks.models.base import Record


class Settings(Record):
    """Flat settings record.

    Every key has a default so a partially stored record always loads. Keys
    unknown to this version are preserved as extras.
    """

    # Appearance
    theme: str = "light"
    font_size: str = "medium"
    compact_mode: bool = False

    # Behavior
    auto_save: bool = True
    confirm_delete: bool = True
    show_completed_tasks: bool = True

    # Notifications
    enable_notifications: bool = False
    notify_on_due_date: bool = True
    notify_before_due_date: int = 24  # hours

    # Quick add
    quick_add_position: str = "top"  # 'top' or 'bottom'
    quick_add_default_context: Optional[str] = None

    # Views
    default_view: str = "outline"
    remember_last_view: bool = True

    # Storage
    storage_type: str = "localStorage"

    # Advanced
    debug_mode: bool = False


def default_settings() -> Dict[str, Any]:
    """Default settings in stored (camelCase) form."""
    return Settings().to_storage()
