"""Workspace file endpoints ("My Computer").

Thin HTTP adapter over the workspace store.  ``InvalidPathError`` (400) and
``WorkspaceFileNotFoundError`` (404) are translated by the exception
handlers registered in ``app.py``.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from gencomputer.runtime.deps import Store
from gencomputer.runtime.models.api import (
    ErrorResponse,
    FileContentResponse,
    FileDeleteRequest,
    FileListResponse,
    FileWriteRequest,
    FileWriteResponse,
    SuccessResponse,
)

router = APIRouter(prefix="/files", tags=["files"])

_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("", response_model=FileListResponse)
async def list_files(store: Store) -> FileListResponse:
    """List files directly under the workspace root, sorted by name."""
    return FileListResponse(files=await store.list_files())


@router.get("/content", response_model=FileContentResponse, responses=_ERRORS)
async def read_file(store: Store, path: str = Query("", description="Workspace-relative path.")) -> FileContentResponse:
    return FileContentResponse(content=await store.read(path))


@router.put("/content", response_model=FileWriteResponse, responses=_ERRORS)
async def write_file(body: FileWriteRequest, store: Store) -> FileWriteResponse:
    """Create or overwrite a file.  Parent folders are created as needed."""
    saved_at = await store.write(body.path, body.content)
    return FileWriteResponse(saved_at=saved_at)


@router.delete("", response_model=SuccessResponse, responses=_ERRORS)
async def delete_file(body: FileDeleteRequest, store: Store) -> SuccessResponse:
    await store.delete(body.path)
    return SuccessResponse()
