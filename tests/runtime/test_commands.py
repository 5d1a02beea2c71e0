"""Unit tests for the command manager (real agent vs. simulator fallback)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from gencomputer.runtime.execution.invoker import AgentInvoker, AgentOutputEmptyError, AgentTimeoutError
from gencomputer.runtime.managers.commands import process_command
from gencomputer.runtime.models.agent import AgentInvocationResult
from gencomputer.runtime.models.enums import AgentMode
from gencomputer.runtime.simulator.writer import ExperienceWriter
from gencomputer.runtime.store.local import LocalWorkspaceStore


@pytest.fixture
def writer(store: LocalWorkspaceStore) -> ExperienceWriter:
    return ExperienceWriter(store)


@pytest.fixture
def invoker() -> MagicMock:
    mock = MagicMock(spec=AgentInvoker)
    mock.invoke = AsyncMock(return_value=AgentInvocationResult(output_text="DONE"))
    return mock


async def test_simulated_when_agent_disabled(invoker: MagicMock, writer: ExperienceWriter, store) -> None:
    response = await process_command("plan a trip", use_real_agent=False, invoker=invoker, writer=writer)

    assert response.success is True
    assert response.mode == AgentMode.SIMULATED
    assert response.command == "plan a trip"
    assert response.result.note_path == "travel-plan-a-trip.md"
    assert response.error is None
    invoker.invoke.assert_not_called()
    assert await store.exists("travel-plan-a-trip.md")


async def test_real_agent_success(invoker: MagicMock, writer: ExperienceWriter, store) -> None:
    response = await process_command("plan a trip", use_real_agent=True, invoker=invoker, writer=writer)

    assert response.mode == AgentMode.REAL
    assert response.result.output_text == "DONE"
    invoker.invoke.assert_awaited_once_with("plan a trip")
    assert await store.list_files() == []


@pytest.mark.parametrize(
    "error",
    [
        AgentTimeoutError("Agent timed out after 45 seconds", debug_log_path="/logs/x-timeout.log"),
        AgentOutputEmptyError("Agent returned no output."),
    ],
)
async def test_fallback_on_agent_error(invoker: MagicMock, writer: ExperienceWriter, store, error) -> None:
    invoker.invoke.side_effect = error

    response = await process_command("buy apples", use_real_agent=True, invoker=invoker, writer=writer)

    assert response.success is True
    assert response.mode == AgentMode.SIMULATED_FALLBACK
    assert response.error == str(error)
    assert response.debug_log_path == error.debug_log_path
    assert response.result.profile.category == "shopping"
    assert await store.exists(response.result.note_path)


async def test_non_agent_errors_propagate(invoker: MagicMock, writer: ExperienceWriter) -> None:
    invoker.invoke.side_effect = KeyError("bug")
    with pytest.raises(KeyError):
        await process_command("x", use_real_agent=True, invoker=invoker, writer=writer)


async def test_response_uses_camel_case(invoker: MagicMock, writer: ExperienceWriter) -> None:
    invoker.invoke.side_effect = AgentTimeoutError("slow", debug_log_path="/tmp/a.log")
    response = await process_command("x", use_real_agent=True, invoker=invoker, writer=writer)
    data = response.model_dump(mode="json", by_alias=True)
    assert data["mode"] == "SIMULATED_FALLBACK"
    assert data["debugLogPath"] == "/tmp/a.log"
    assert "notePath" in data["result"]
