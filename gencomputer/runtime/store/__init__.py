"""Workspace store implementations."""

from gencomputer.runtime.store.base import (
    InvalidPathError,
    WorkspaceFileNotFoundError,
    WorkspaceStore,
    kind_for,
)
from gencomputer.runtime.store.local import LocalWorkspaceStore

__all__ = [
    "InvalidPathError",
    "LocalWorkspaceStore",
    "WorkspaceFileNotFoundError",
    "WorkspaceStore",
    "kind_for",
]
