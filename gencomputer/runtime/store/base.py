"""Workspace store interface.

The workspace store owns the shared "My Computer" folder.  It is the only
component allowed to touch that folder, and it validates every
caller-supplied path before any filesystem call is made:

- empty, absolute and ``..``-bearing paths are rejected outright;
- the remaining path is joined to the root and normalised (string-only,
  no syscall), then accepted only if it equals the root or lives strictly
  below ``root + os.sep``.

The store keeps no in-memory state between calls.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gencomputer.runtime.models.enums import FileKind

if TYPE_CHECKING:
    from datetime import datetime

    from gencomputer.runtime.models.workspace import WorkspaceFile


class InvalidPathError(ValueError):
    """Raised when a path is empty or would escape the workspace root."""


class WorkspaceFileNotFoundError(LookupError):
    """Raised when reading or deleting a file that does not exist."""


FILE_KINDS: dict[str, FileKind] = {
    ".md": FileKind.MARKDOWN,
    ".markdown": FileKind.MARKDOWN,
    ".tsx": FileKind.TSX,
    ".jsx": FileKind.TSX,
    ".txt": FileKind.TEXT,
    ".csv": FileKind.TEXT,
    ".json": FileKind.TEXT,
    ".log": FileKind.TEXT,
}


def kind_for(name: str) -> FileKind:
    """Infer the file kind from the (lowercased) extension."""
    _, ext = os.path.splitext(name)
    return FILE_KINDS.get(ext.lower(), FileKind.FILE)


@runtime_checkable
class WorkspaceStore(Protocol):
    """Async protocol for sandboxed workspace file access."""

    async def list_files(self) -> list[WorkspaceFile]:
        """List regular files directly under the root, sorted by name."""
        ...

    async def read(self, path: str) -> str:
        """Read a UTF-8 file.  Raises ``WorkspaceFileNotFoundError`` if missing."""
        ...

    async def write(self, path: str, content: str) -> datetime:
        """Create or overwrite a file; returns its modification time."""
        ...

    async def delete(self, path: str) -> None:
        """Delete a file.  Raises ``WorkspaceFileNotFoundError`` if missing."""
        ...

    async def exists(self, path: str) -> bool: ...

    async def ensure_defaults(self) -> None:
        """Create the root and the welcome note if they are missing."""
        ...
