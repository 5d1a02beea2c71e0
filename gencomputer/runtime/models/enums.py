"""Shared enumerations used across the runtime."""

from __future__ import annotations

from enum import StrEnum

# -- Command handling --------------------------------------------------------


class AgentMode(StrEnum):
    """How a command was (or will be) handled."""

    REAL = "REAL"
    SIMULATED = "SIMULATED"
    SIMULATED_FALLBACK = "SIMULATED_FALLBACK"


class SimulatorOutput(StrEnum):
    """Where the smart simulator puts its output."""

    NOTE = "note"
    COMPONENT = "component"


# -- Workspace ---------------------------------------------------------------


class FileKind(StrEnum):
    """Workspace file kind, derived from the extension."""

    MARKDOWN = "markdown"
    TSX = "tsx"
    TEXT = "text"
    FILE = "file"
