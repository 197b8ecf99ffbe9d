"""Remote HTTP storage for mlotasks.

Each storage operation maps to one HTTP call:

    GET    /tasks            get_tasks
    PUT    /tasks            save_tasks      body {"tasks": [...]}
    GET    /tasks/{id}       get_task
    POST   /tasks            create_task
    PATCH  /tasks/{id}       update_task
    DELETE /tasks/{id}       delete_task
    GET    /contexts         get_contexts
    PUT    /contexts         save_contexts   body {"contexts": [...]}
    GET    /settings         get_settings
    PUT    /settings         save_settings
    GET    /views            get_views
    PUT    /views            save_views      body {"views": [...]}
    DELETE /data             clear_all
    GET    /export           export_data
    POST   /import           import_data
"""

import logging
from typing import Any, List, Mapping, Optional

import requests

from mlotasks.config import get_api_base_url, get_api_timeout, get_api_token
from mlotasks.errors import NotFoundError, StorageError
from mlotasks.storage.base import StorageAdapter, StoredRecord, validate_import_payload

logger = logging.getLogger(__name__)

_BODY_METHODS = ("POST", "PUT", "PATCH")


class ApiRequestError(StorageError):
    """Non-2xx response from the storage API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiStorage(StorageAdapter):
    """Storage adapter talking to a remote HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API client.

        Args:
            base_url: API root. If None, reads MLO_API_BASE_URL.
            token: Bearer token. If None, reads MLO_API_TOKEN (optional).
            timeout: Per-request timeout in seconds. If None, reads MLO_API_TIMEOUT_SEC.
            session: Pre-configured requests session (mainly for tests).
        """
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.token = token if token is not None else get_api_token()
        self.timeout = timeout if timeout is not None else get_api_timeout()
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if self.token:
            self.session.headers.update({"Authorization": f"Bearer {self.token}"})

    def init(self) -> None:
        logger.info(f"API storage initialized with base URL: {self.base_url}")

    def _request(self, method: str, endpoint: str, data: Any = None) -> Any:
        """Send one request and decode its JSON body.

        Returns:
            Decoded JSON, or None for empty/non-JSON responses

        Raises:
            ApiRequestError: On non-2xx responses
            StorageError: On transport failures
        """
        url = f"{self.base_url}{endpoint}"
        body = data if data is not None and method in _BODY_METHODS else None

        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"API request error ({method} {endpoint}): {type(e).__name__}: {str(e)}")
            raise StorageError(f"API request error ({method} {endpoint}): {e}") from e

        if not response.ok:
            message = f"API request failed: {response.status_code} {response.reason}"
            logger.error(f"{message} ({method} {endpoint})")
            raise ApiRequestError(message, status_code=response.status_code)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StorageError(f"Invalid JSON from {method} {endpoint}: {e}") from e

    # ---- tasks ----

    def get_tasks(self) -> List[StoredRecord]:
        return self._request("GET", "/tasks") or []

    def save_tasks(self, tasks: List[StoredRecord]) -> None:
        self._request("PUT", "/tasks", {"tasks": tasks})

    def get_task(self, task_id: str) -> Optional[StoredRecord]:
        try:
            return self._request("GET", f"/tasks/{task_id}")
        except ApiRequestError as e:
            if e.status_code == 404:
                return None
            raise

    def create_task(self, task: StoredRecord) -> StoredRecord:
        return self._request("POST", "/tasks", task) or task

    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> StoredRecord:
        try:
            return self._request("PATCH", f"/tasks/{task_id}", dict(updates))
        except ApiRequestError as e:
            if e.status_code == 404:
                raise NotFoundError("Task", task_id) from e
            raise

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    # ---- contexts / settings / views ----

    def get_contexts(self) -> List[StoredRecord]:
        return self._request("GET", "/contexts") or []

    def save_contexts(self, contexts: List[StoredRecord]) -> None:
        self._request("PUT", "/contexts", {"contexts": contexts})

    def get_settings(self) -> StoredRecord:
        return self._request("GET", "/settings") or {}

    def save_settings(self, settings: StoredRecord) -> None:
        self._request("PUT", "/settings", settings)

    def get_views(self) -> List[StoredRecord]:
        return self._request("GET", "/views") or []

    def save_views(self, views: List[StoredRecord]) -> None:
        self._request("PUT", "/views", {"views": views})

    # ---- whole store ----

    def clear_all(self) -> None:
        self._request("DELETE", "/data")

    def export_data(self) -> StoredRecord:
        return self._request("GET", "/export") or {}

    def import_data(self, payload: Mapping[str, Any]) -> None:
        validate_import_payload(payload)
        self._request("POST", "/import", dict(payload))
