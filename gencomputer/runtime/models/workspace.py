"""Workspace file metadata.

The workspace ("My Computer") is a flat folder shared by the human and the
agent.  Nothing is cached: every listing re-reads the directory.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from gencomputer.runtime.models.enums import FileKind


class WorkspaceFile(BaseModel):
    """One file in the workspace root."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    path: str
    kind: FileKind
    size: int
    updated_at: datetime
