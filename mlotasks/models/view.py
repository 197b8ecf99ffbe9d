"""View (saved filter/sort/group configuration) data model for mlotasks."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from mlotasks.models.base import Record
from mlotasks.models.dates import ensure_utc, utc_now


class ViewType(str, Enum):
    """Semantic view types."""
    OUTLINE = "outline"
    TODO = "todo"
    INBOX = "inbox"
    ACTIVE = "active"
    GOALS = "goals"
    REVIEW = "review"
    CUSTOM = "custom"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ViewSorting(Record):
    field: str = "order"
    direction: SortDirection = SortDirection.ASC


class ViewGrouping(Record):
    field: str


class View(Record):
    """View model."""

    id: str = Field(..., description="Unique view identifier")
    name: str = Field("New View", description="Display name")
    type: str = Field(ViewType.CUSTOM.value, description="Semantic view type")
    is_built_in: bool = Field(False, description="Built-in views cannot be deleted")

    filters: Dict[str, Any] = Field(default_factory=dict, description="Predicate name -> criterion")
    sorting: ViewSorting = Field(default_factory=ViewSorting)
    grouping: Optional[ViewGrouping] = None
    columns: List[str] = Field(default_factory=list)

    show_completed: bool = True
    show_hierarchy: bool = True

    created_at: datetime = Field(default_factory=utc_now)
    modified_at: datetime = Field(default_factory=utc_now)

    @field_validator("grouping", mode="before")
    @classmethod
    def _grouping_from_field_name(cls, v):
        if isinstance(v, str):
            return {"field": v}
        return v

    @field_validator("created_at", "modified_at")
    @classmethod
    def _instant_utc(cls, v):
        return ensure_utc(v)
