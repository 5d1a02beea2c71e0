"""Desktop command endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from gencomputer.runtime.deps import Invoker, Settings, Writer
from gencomputer.runtime.managers.commands import process_command
from gencomputer.runtime.models.api import CommandRequest, CommandResponse

router = APIRouter(tags=["commands"])


@router.post("/command", response_model=CommandResponse)
async def run_command(body: CommandRequest, settings: Settings, invoker: Invoker, writer: Writer) -> CommandResponse:
    """Run the agent for a command, or the simulator when the agent is off or fails."""
    return await process_command(
        body.command,
        use_real_agent=settings.use_real_agent,
        invoker=invoker,
        writer=writer,
    )
