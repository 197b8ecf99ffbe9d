"""FastAPI reference backend for the mlotasks HTTP storage protocol.

Serves the endpoints `ApiStorage` calls, backed by a `LocalStorage`.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from mlotasks.errors import InvalidFormatError, NotFoundError, StorageError
from mlotasks.models.dates import utc_now
from mlotasks.storage.base import StorageAdapter
from mlotasks.storage.local import LocalStorage

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

app = FastAPI(
    title="mlotasks API",
    description="Storage backend for hierarchical task, context and view data",
    version=API_VERSION,
)


@lru_cache(maxsize=1)
def get_storage() -> StorageAdapter:
    """Storage dependency (one LocalStorage per process; override in tests)."""
    storage = LocalStorage()
    storage.init()
    return storage


# Request models
class TasksPayload(BaseModel):
    """Full task collection."""
    tasks: List[Dict[str, Any]] = Field(default_factory=list, description="Task records (camelCase)")


class ContextsPayload(BaseModel):
    """Full context collection."""
    contexts: List[Dict[str, Any]] = Field(default_factory=list, description="Context records (camelCase)")


class ViewsPayload(BaseModel):
    """Full view collection."""
    views: List[Dict[str, Any]] = Field(default_factory=list, description="View records (camelCase)")


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidFormatError)
async def invalid_format_handler(request: Request, exc: InvalidFormatError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(status_code=500, content={"detail": f"Storage error: {str(exc)}"})


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


# ---- tasks ----

@app.get("/tasks")
def list_tasks(storage: StorageAdapter = Depends(get_storage)):
    return storage.get_tasks()


@app.put("/tasks", status_code=204)
def replace_tasks(payload: TasksPayload, storage: StorageAdapter = Depends(get_storage)):
    storage.save_tasks(payload.tasks)
    return Response(status_code=204)


@app.get("/tasks/{task_id}")
def get_task(task_id: str, storage: StorageAdapter = Depends(get_storage)):
    task = storage.get_task(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


@app.post("/tasks", status_code=201)
def create_task(task: Dict[str, Any] = Body(...), storage: StorageAdapter = Depends(get_storage)):
    if not task.get("id"):
        raise InvalidFormatError("Task id is required")
    return storage.create_task(task)


@app.patch("/tasks/{task_id}")
def update_task(task_id: str, updates: Dict[str, Any] = Body(...), storage: StorageAdapter = Depends(get_storage)):
    return storage.update_task(task_id, updates)


@app.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: str, storage: StorageAdapter = Depends(get_storage)):
    storage.delete_task(task_id)
    return Response(status_code=204)


# ---- contexts / settings / views ----

@app.get("/contexts")
def list_contexts(storage: StorageAdapter = Depends(get_storage)):
    return storage.get_contexts()


@app.put("/contexts", status_code=204)
def replace_contexts(payload: ContextsPayload, storage: StorageAdapter = Depends(get_storage)):
    storage.save_contexts(payload.contexts)
    return Response(status_code=204)


@app.get("/settings")
def get_settings(storage: StorageAdapter = Depends(get_storage)):
    return storage.get_settings()


@app.put("/settings", status_code=204)
def replace_settings(settings: Dict[str, Any] = Body(...), storage: StorageAdapter = Depends(get_storage)):
    storage.save_settings(settings)
    return Response(status_code=204)


@app.get("/views")
def list_views(storage: StorageAdapter = Depends(get_storage)):
    return storage.get_views()


@app.put("/views", status_code=204)
def replace_views(payload: ViewsPayload, storage: StorageAdapter = Depends(get_storage)):
    storage.save_views(payload.views)
    return Response(status_code=204)


# ---- whole store ----

@app.delete("/data", status_code=204)
def clear_data(storage: StorageAdapter = Depends(get_storage)):
    storage.clear_all()
    logger.info("Cleared all data")
    return Response(status_code=204)


@app.get("/export")
def export_data(storage: StorageAdapter = Depends(get_storage)):
    return storage.export_data()


@app.post("/import")
def import_data(payload: Dict[str, Any] = Body(...), storage: StorageAdapter = Depends(get_storage)):
    storage.import_data(payload)
    return {"status": "imported", "version": payload.get("version"), "importedAt": utc_now().isoformat()}
