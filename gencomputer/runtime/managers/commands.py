"""Command handling: real agent first, simulator on any agent failure.

Modes reported back to the desktop:

- ``REAL``: the agent ran and confirmed.
- ``SIMULATED``: the real agent is disabled; the simulator ran.
- ``SIMULATED_FALLBACK``: the agent raised an ``AgentError``; the simulator
  ran instead and the agent's error message is attached for diagnostics.

Errors raised by the simulator itself are not agent errors and propagate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from gencomputer.runtime.execution.invoker import AgentError
from gencomputer.runtime.models.api import CommandResponse
from gencomputer.runtime.models.enums import AgentMode

if TYPE_CHECKING:
    from gencomputer.runtime.execution.invoker import AgentInvoker
    from gencomputer.runtime.simulator.writer import ExperienceWriter


async def process_command(
    command: str,
    *,
    use_real_agent: bool,
    invoker: AgentInvoker,
    writer: ExperienceWriter,
) -> CommandResponse:
    """Handle one desktop command and describe what happened."""
    logger.info("Received command: {}", command)

    if not use_real_agent:
        simulated = await writer.generate(command)
        return CommandResponse(
            message="Command processed successfully (simulated)",
            command=command,
            mode=AgentMode.SIMULATED,
            result=simulated,
        )

    try:
        result = await invoker.invoke(command)
    except AgentError as exc:
        logger.warning("Agent failed ({}), falling back to simulator: {}", type(exc).__name__, exc)
        fallback = await writer.generate(command)
        return CommandResponse(
            message="Fallback to simulated agent (real agent error)",
            command=command,
            mode=AgentMode.SIMULATED_FALLBACK,
            result=fallback,
            error=str(exc),
            debug_log_path=exc.debug_log_path,
        )

    return CommandResponse(
        message="Command processed by agent",
        command=command,
        mode=AgentMode.REAL,
        result=result,
    )
