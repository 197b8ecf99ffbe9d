"""Storage backends for mlotasks."""

from mlotasks.storage.base import StorageAdapter, validate_import_payload
from mlotasks.storage.local import LocalStorage
from mlotasks.storage.api import ApiStorage, ApiRequestError
from mlotasks.storage.factory import create_storage

__all__ = [
    "StorageAdapter",
    "validate_import_payload",
    "LocalStorage",
    "ApiStorage",
    "ApiRequestError",
    "create_storage",
]
