"""External agent execution: prompt, subprocess invocation, usage, auth probe."""

from gencomputer.runtime.execution.auth import check_agent_auth
from gencomputer.runtime.execution.invoker import (
    AgentError,
    AgentInvoker,
    AgentOutputEmptyError,
    AgentTimeoutError,
    AgentUnavailableError,
    parse_agent_output,
)
from gencomputer.runtime.execution.prompt import build_agent_prompt, render_agent_prompt
from gencomputer.runtime.execution.usage import UsageAccumulator

__all__ = [
    "AgentError",
    "AgentInvoker",
    "AgentOutputEmptyError",
    "AgentTimeoutError",
    "AgentUnavailableError",
    "UsageAccumulator",
    "build_agent_prompt",
    "check_agent_auth",
    "parse_agent_output",
    "render_agent_prompt",
]
