"""Storage selection.

Picks the concrete adapter once, at process start, so it can be injected into
every repository.
"""

import logging
from typing import Optional

from mlotasks.config import STORAGE_TYPE_API, STORAGE_TYPE_LOCAL, get_storage_type
from mlotasks.storage.api import ApiStorage
from mlotasks.storage.base import StorageAdapter
from mlotasks.storage.local import LocalStorage

logger = logging.getLogger(__name__)


def create_storage(
    storage_type: Optional[str] = None,
    api_base_url: Optional[str] = None,
    api_token: Optional[str] = None,
    database_url: Optional[str] = None,
) -> StorageAdapter:
    """Create the storage adapter for the configured backend.

    Args:
        storage_type: 'localStorage' or 'api'. If None, reads MLO_STORAGE_TYPE.
        api_base_url: API root for the 'api' backend
        api_token: Bearer token for the 'api' backend
        database_url: SQLAlchemy URL for the 'localStorage' backend

    Returns:
        A new StorageAdapter (never shared implicitly)
    """
    resolved = storage_type or get_storage_type()

    if resolved == STORAGE_TYPE_API:
        logger.info("Using API storage adapter")
        return ApiStorage(base_url=api_base_url, token=api_token)

    if resolved != STORAGE_TYPE_LOCAL:
        logger.warning(f"Unknown storage type {resolved!r}, falling back to localStorage")
    logger.info("Using local storage adapter")
    return LocalStorage(database_url=database_url)
