"""Shared pydantic base for persisted records.

Records use snake_case attributes in Python and camelCase keys on the wire
(storage entries, export payloads, HTTP bodies).
"""

from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

R = TypeVar("R", bound="Record")


class Record(BaseModel):
    """Base model for everything that crosses the storage boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )

    @classmethod
    def from_storage(cls: Type[R], data: Mapping[str, Any]) -> R:
        """Build a record from its stored (camelCase) form."""
        return cls.model_validate(dict(data))

    def to_storage(self) -> Dict[str, Any]:
        """Serialize to the stored (camelCase, JSON-safe) form."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def field_name_for(cls, key: str) -> str:
        """Resolve a camelCase or snake_case key to the attribute name.

        Unknown keys are returned unchanged (they are kept as extras).
        """
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return key

    @classmethod
    def normalize_keys(cls, partial: Mapping[str, Any]) -> Dict[str, Any]:
        return {cls.field_name_for(key): value for key, value in partial.items()}

    def merged(self: R, partial: Mapping[str, Any], **overrides: Any) -> R:
        """Return a new record with `partial` shallow-merged over this one.

        `overrides` are applied last and win over `partial`.
        """
        data = self.model_dump()
        data.update(self.normalize_keys(partial))
        data.update(overrides)
        return type(self).model_validate(data)
