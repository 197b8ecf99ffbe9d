"""Task data model for mlotasks."""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from mlotasks.models.base import Record
from mlotasks.models.dates import ensure_utc, parse_instant, utc_now

_DATE_TIME_PAIRS = (("start_date", "start_time"), ("due_date", "due_time"))


def _present_key(data: Dict[str, Any], name: str) -> Optional[str]:
    for key in (name, to_camel(name)):
        if key in data:
            return key
    return None


class TaskType(str, Enum):
    """Known task types. The field itself accepts any string."""
    TASK = "task"
    PROJECT = "project"
    FOLDER = "folder"


class Task(Record):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (immutable)")
    title: str = Field("New Task", description="Task title")
    notes: str = Field("", description="Free-form notes")

    # Hierarchy
    parent_id: Optional[str] = Field(None, description="Parent task id (weak reference)")
    child_ids: List[str] = Field(default_factory=list, description="Ordered child task ids")
    order: int = Field(0, description="Rank among siblings (ascending)")

    # Classification
    type: str = Field(TaskType.TASK.value, description="Task type (task, project, ...)")
    goal_type: Optional[str] = Field(None, description="Goal horizon; presence marks a goal")
    flags: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_starred: bool = False

    # Priority
    importance: float = Field(100, description="Importance (default 100)")
    urgency: float = Field(100, description="Urgency (default 100)")
    computed_score: float = Field(0, description="Derived rank, see engine.scoring")

    # Scheduling
    start_date: Optional[date] = None
    start_time: Optional[time] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    completed_date: Optional[datetime] = Field(None, description="Set exactly while completed")
    recurrence: Optional[Dict[str, Any]] = Field(None, description="Opaque periodic rule")

    # Status
    is_completed: bool = False
    is_active: bool = False
    project_progress: float = Field(0, ge=0, le=100)

    # Organization
    contexts: List[str] = Field(default_factory=list, description="Context ids (weak references)")
    is_in_inbox: bool = False
    color: Optional[str] = None

    # Goals & review
    review_period: Optional[int] = Field(None, description="Review interval in days")
    last_reviewed: Optional[datetime] = None

    # Dependencies (declared, not enforced)
    depends_on: List[str] = Field(default_factory=list)

    # Metadata
    created_at: datetime = Field(default_factory=utc_now, description="Creation instant (UTC); defaults to load time")
    modified_at: datetime = Field(default_factory=utc_now, description="Last modification instant (UTC)")

    @model_validator(mode="before")
    @classmethod
    def _split_instants(cls, data):
        """Split full ISO instants in startDate/dueDate into a date and a time.

        "2024-06-15T18:00:00.000Z" becomes dueDate 2024-06-15 plus dueTime
        18:00 (UTC) unless a time is given separately. Midnight instants keep
        no time.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for date_name, time_name in _DATE_TIME_PAIRS:
            date_key = _present_key(data, date_name)
            if date_key is None:
                continue
            value = data[date_key]
            if isinstance(value, str) and "T" in value:
                instant = parse_instant(value)
            elif isinstance(value, datetime):
                instant = ensure_utc(value)
            else:
                continue

            data[date_key] = instant.date()
            time_key = _present_key(data, time_name)
            if instant.time() != time(0, 0) and (time_key is None or data[time_key] in (None, "")):
                data[time_key or time_name] = instant.time()
        return data

    @field_validator("start_date", "due_date", "start_time", "due_time", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return None if v == "" else v

    @field_validator("project_progress", mode="before")
    @classmethod
    def _clamp_progress(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return min(max(v, 0), 100)
        return v

    @field_validator("completed_date", "last_reviewed", "created_at", "modified_at")
    @classmethod
    def _instant_utc(cls, v):
        return ensure_utc(v)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_goal(self) -> bool:
        return self.goal_type is not None
