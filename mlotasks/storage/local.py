"""Local key-value storage backed by SQLAlchemy.

One row per record kind, each holding a JSON-serialized value:
- mlo_tasks: list of all tasks
- mlo_contexts: list of all contexts
- mlo_settings: settings object
- mlo_views: list of view configurations
"""

import copy
import json
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from mlotasks.config import get_database_url
from mlotasks.database.database import build_engine, build_session_factory, init_db
from mlotasks.database.models import StorageEntryDB
from mlotasks.errors import NotFoundError, StorageError, StorageQuotaExceededError
from mlotasks.models.constants import EXPORT_VERSION
from mlotasks.models.dates import utc_now
from mlotasks.storage.base import StorageAdapter, StoredRecord, validate_import_payload

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "tasks": "mlo_tasks",
    "contexts": "mlo_contexts",
    "settings": "mlo_settings",
    "views": "mlo_views",
}

QUOTA_EXCEEDED_MESSAGE = "Storage quota exceeded. Please delete some data."


def _is_quota_error(error: Exception) -> bool:
    text = str(error).lower()
    return "database or disk is full" in text or "disk full" in text or "quota" in text


class LocalStorage(StorageAdapter):
    """Storage adapter keeping one JSON document per record kind."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        """Initialize the local store.

        Args:
            database_url: SQLAlchemy URL. If None, reads MLO_DATABASE_URL.
            engine: Pre-built engine (takes precedence over `database_url`).
        """
        self.database_url = database_url or get_database_url()
        self.engine = engine or build_engine(self.database_url)
        self.SessionLocal = build_session_factory(self.engine)
        self.keys = dict(STORAGE_KEYS)
        self._ready = False

    def init(self) -> None:
        if self._ready:
            return
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize local storage: {type(e).__name__}: {str(e)}")
            raise StorageError(f"Failed to initialize local storage: {e}") from e
        self._ready = True
        logger.debug(f"Local storage ready at {self.database_url}")

    # ---- low-level helpers ----

    def _get_item(self, key: str, default: Any) -> Any:
        self.init()
        session = self.SessionLocal()
        try:
            entry = session.get(StorageEntryDB, key)
            raw = entry.value if entry else None
        except SQLAlchemyError as e:
            logger.error(f"Error reading storage key \"{key}\": {type(e).__name__}: {str(e)}")
            raise StorageError(f"Error reading storage key \"{key}\": {e}") from e
        finally:
            session.close()

        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except ValueError as e:
            # Corrupt entries read as the default
            logger.error(f"Error parsing storage key \"{key}\": {str(e)}")
            return copy.deepcopy(default)

    def _set_item(self, key: str, value: Any) -> None:
        self.init()
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for storage key \"{key}\" is not JSON serializable: {e}") from e

        session = self.SessionLocal()
        try:
            entry = session.get(StorageEntryDB, key)
            if entry is None:
                session.add(StorageEntryDB(key=key, value=payload))
            else:
                entry.value = payload
            session.commit()
        except OperationalError as e:
            session.rollback()
            logger.error(f"Error writing storage key \"{key}\": {type(e).__name__}: {str(e)}")
            if _is_quota_error(e):
                raise StorageQuotaExceededError(QUOTA_EXCEEDED_MESSAGE) from e
            raise StorageError(f"Error writing storage key \"{key}\": {e}") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error writing storage key \"{key}\": {type(e).__name__}: {str(e)}")
            raise StorageError(f"Error writing storage key \"{key}\": {e}") from e
        finally:
            session.close()

    # ---- tasks ----

    def get_tasks(self) -> List[StoredRecord]:
        return self._get_item(self.keys["tasks"], [])

    def save_tasks(self, tasks: List[StoredRecord]) -> None:
        self._set_item(self.keys["tasks"], tasks)

    def get_task(self, task_id: str) -> Optional[StoredRecord]:
        return next((task for task in self.get_tasks() if task.get("id") == task_id), None)

    def create_task(self, task: StoredRecord) -> StoredRecord:
        tasks = self.get_tasks()
        tasks.append(task)
        self.save_tasks(tasks)
        return task

    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> StoredRecord:
        tasks = self.get_tasks()
        index = next((i for i, task in enumerate(tasks) if task.get("id") == task_id), None)
        if index is None:
            raise NotFoundError("Task", task_id)

        tasks[index] = {
            **tasks[index],
            **updates,
            "id": task_id,
            "modifiedAt": utc_now().isoformat(),
        }
        self.save_tasks(tasks)
        return tasks[index]

    def delete_task(self, task_id: str) -> None:
        tasks = self.get_tasks()
        self.save_tasks([task for task in tasks if task.get("id") != task_id])

    # ---- contexts / settings / views ----

    def get_contexts(self) -> List[StoredRecord]:
        return self._get_item(self.keys["contexts"], [])

    def save_contexts(self, contexts: List[StoredRecord]) -> None:
        self._set_item(self.keys["contexts"], contexts)

    def get_settings(self) -> StoredRecord:
        return self._get_item(self.keys["settings"], {})

    def save_settings(self, settings: StoredRecord) -> None:
        self._set_item(self.keys["settings"], settings)

    def get_views(self) -> List[StoredRecord]:
        return self._get_item(self.keys["views"], [])

    def save_views(self, views: List[StoredRecord]) -> None:
        self._set_item(self.keys["views"], views)

    # ---- whole store ----

    def clear_all(self) -> None:
        self.init()
        session = self.SessionLocal()
        try:
            session.query(StorageEntryDB).filter(
                StorageEntryDB.key.in_(list(self.keys.values()))
            ).delete(synchronize_session=False)
            session.commit()
            logger.debug("Cleared local storage")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to clear local storage: {type(e).__name__}: {str(e)}")
            raise StorageError(f"Failed to clear local storage: {e}") from e
        finally:
            session.close()

    def export_data(self) -> StoredRecord:
        return {
            "version": EXPORT_VERSION,
            "exportDate": utc_now().isoformat(),
            "tasks": self.get_tasks(),
            "contexts": self.get_contexts(),
            "settings": self.get_settings(),
            "views": self.get_views(),
        }

    def import_data(self, payload: Mapping[str, Any]) -> None:
        validate_import_payload(payload)

        if payload.get("tasks") is not None:
            self.save_tasks(payload["tasks"])
        if payload.get("contexts") is not None:
            self.save_contexts(payload["contexts"])
        if payload.get("settings") is not None:
            self.save_settings(payload["settings"])
        if payload.get("views") is not None:
            self.save_views(payload["views"])
        logger.debug(f"Imported data version {payload.get('version')}")
