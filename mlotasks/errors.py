"""Exception taxonomy for mlotasks."""


class MloTasksError(Exception):
    """Base class for all mlotasks errors."""


class NotFoundError(MloTasksError, LookupError):
    """Raised when an update/delete target does not exist."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} with id \"{entity_id}\" not found")


class InvalidFormatError(MloTasksError, ValueError):
    """Raised when an import payload is missing its version marker or tasks."""


class BuiltInProtectedError(MloTasksError):
    """Raised when deleting a built-in view."""


class StorageError(MloTasksError):
    """Raised when the underlying persistence call fails."""


class StorageQuotaExceededError(StorageError):
    """Raised when the local store has no room left."""
