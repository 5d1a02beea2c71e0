"""FastAPI dependency injection for the runtime's shared components.

Usage in route handlers::

    @router.get("/files")
    async def list_files(store: Store) -> FileListResponse:
        ...

All components are created once in the app lifespan and stored on
``app.state``.  Dependencies raise HTTP 503 if the lifespan has not set
them (e.g. a test forgot to wire ``app.state``).
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from gencomputer.runtime.execution.invoker import AgentInvoker
from gencomputer.runtime.execution.usage import UsageAccumulator
from gencomputer.runtime.settings import GenComputerSettings, get_settings
from gencomputer.runtime.simulator.writer import ExperienceWriter
from gencomputer.runtime.store.base import WorkspaceStore


def _state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Runtime component '{name}' is not initialised.",
        )
    return value


def get_store(request: Request) -> WorkspaceStore:
    return _state(request, "store")


def get_usage(request: Request) -> UsageAccumulator:
    return _state(request, "usage")


def get_invoker(request: Request) -> AgentInvoker:
    return _state(request, "invoker")


def get_writer(request: Request) -> ExperienceWriter:
    return _state(request, "writer")


# -- Annotated type aliases for concise route signatures ---------------------

Settings = Annotated[GenComputerSettings, Depends(get_settings)]
"""Annotated dependency: cached service settings."""

Store = Annotated[WorkspaceStore, Depends(get_store)]
"""Annotated dependency: sandboxed workspace store."""

Usage = Annotated[UsageAccumulator, Depends(get_usage)]
"""Annotated dependency: process-lifetime usage accumulator."""

Invoker = Annotated[AgentInvoker, Depends(get_invoker)]
"""Annotated dependency: external agent invoker."""

Writer = Annotated[ExperienceWriter, Depends(get_writer)]
"""Annotated dependency: smart simulator output writer."""
