"""Data models for the runtime."""

from gencomputer.runtime.models.agent import (
    AgentInvocationResult,
    AggregateUsage,
    AuthStatus,
    ModelUsage,
    UsageRecord,
    UsageReport,
    UsageSummary,
)
from gencomputer.runtime.models.api import (
    CommandRequest,
    CommandResponse,
    ErrorResponse,
    FileContentResponse,
    FileDeleteRequest,
    FileListResponse,
    FileWriteRequest,
    FileWriteResponse,
    MarkdownRenderRequest,
    MarkdownRenderResponse,
    MarkdownSerializeRequest,
    MarkdownSerializeResponse,
    StatusResponse,
    SuccessResponse,
    UsageResponse,
)
from gencomputer.runtime.models.enums import AgentMode, FileKind, SimulatorOutput
from gencomputer.runtime.models.profile import ContentProfile, SimulationResult
from gencomputer.runtime.models.workspace import WorkspaceFile

__all__ = [
    # Agent
    "AgentInvocationResult",
    # Enums
    "AgentMode",
    "AggregateUsage",
    "AuthStatus",
    # API schemas
    "CommandRequest",
    "CommandResponse",
    # Simulator
    "ContentProfile",
    "ErrorResponse",
    "FileContentResponse",
    "FileDeleteRequest",
    "FileKind",
    "FileListResponse",
    "FileWriteRequest",
    "FileWriteResponse",
    "MarkdownRenderRequest",
    "MarkdownRenderResponse",
    "MarkdownSerializeRequest",
    "MarkdownSerializeResponse",
    "ModelUsage",
    "SimulationResult",
    "SimulatorOutput",
    "StatusResponse",
    "SuccessResponse",
    "UsageRecord",
    "UsageReport",
    "UsageResponse",
    "UsageSummary",
    # Workspace
    "WorkspaceFile",
]
