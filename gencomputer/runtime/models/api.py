"""API request / response schemas.

These thin schemas sit between HTTP and the managers.  Field names are
snake_case in Python and camelCase on the wire (``savedAt``,
``agentMode``, ...) because that is what the desktop frontend reads.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gencomputer.runtime.models.agent import AgentInvocationResult, UsageReport
from gencomputer.runtime.models.enums import AgentMode
from gencomputer.runtime.models.profile import SimulationResult
from gencomputer.runtime.models.workspace import WorkspaceFile


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


class CommandRequest(_CamelModel):
    command: str = Field(min_length=1, description="Free-text request typed into the desktop.")


class CommandResponse(_CamelModel):
    """Always ``success=True`` when a fallback ran; see ``mode`` and ``error``."""

    success: bool = True
    message: str
    command: str
    mode: AgentMode
    result: AgentInvocationResult | SimulationResult | None = None
    error: str | None = None
    debug_log_path: str | None = None


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class StatusResponse(_CamelModel):
    status: str = "running"
    authenticated: bool
    agent_mode: AgentMode
    auth_error: str | None = None
    debug_enabled: bool
    workspace_dir: str


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class FileListResponse(_CamelModel):
    success: bool = True
    files: list[WorkspaceFile]


class FileContentResponse(_CamelModel):
    success: bool = True
    content: str


class FileWriteRequest(_CamelModel):
    path: str
    content: str = ""


class FileWriteResponse(_CamelModel):
    success: bool = True
    saved_at: datetime


class FileDeleteRequest(_CamelModel):
    path: str


class SuccessResponse(_CamelModel):
    success: bool = True


class ErrorResponse(_CamelModel):
    success: bool = False
    error: str


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


class UsageResponse(_CamelModel):
    success: bool
    summary: UsageReport | None = None
    message: str | None = None


# ---------------------------------------------------------------------------
# Markdown helpers
# ---------------------------------------------------------------------------


class MarkdownRenderRequest(_CamelModel):
    markdown: str = ""


class MarkdownRenderResponse(_CamelModel):
    html: str


class MarkdownSerializeRequest(_CamelModel):
    html: str = ""


class MarkdownSerializeResponse(_CamelModel):
    markdown: str
