"""Context (tag/location) data model for mlotasks."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from mlotasks.models.base import Record
from mlotasks.models.dates import ensure_utc, utc_now


class Context(Record):
    """Context model.

    Hierarchy is expressed only through `parent_id`; children are found by
    scanning, there is no back-pointer list.
    """

    id: str = Field(..., description="Unique context identifier")
    name: str = Field("New Context", description="Display name, e.g. '@Home'")
    icon: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = Field(None, description="Parent context id (weak reference)")
    schedule: Optional[Dict[str, Any]] = Field(None, description="Opening hours (not evaluated)")
    created_at: datetime = Field(default_factory=utc_now)
    modified_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "modified_at")
    @classmethod
    def _instant_utc(cls, v):
        return ensure_utc(v)
