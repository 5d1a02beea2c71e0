"""Shared fixtures for runtime tests.

Everything runs against a temporary directory; no agent CLI is required.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from gencomputer.runtime.app import app
from gencomputer.runtime.execution.invoker import AgentInvoker
from gencomputer.runtime.execution.usage import UsageAccumulator
from gencomputer.runtime.models.agent import AuthStatus
from gencomputer.runtime.settings import GenComputerSettings, get_settings
from gencomputer.runtime.simulator.writer import ExperienceWriter
from gencomputer.runtime.store.local import LocalWorkspaceStore


@pytest.fixture
def settings(tmp_path) -> GenComputerSettings:
    return GenComputerSettings(
        project_root=str(tmp_path),
        workspace_dir=str(tmp_path / "my-computer"),
        frontend_src=str(tmp_path / "frontend" / "src"),
        log_dir=str(tmp_path / "logs"),
        use_real_agent=False,
    )


@pytest.fixture
def store(settings: GenComputerSettings) -> LocalWorkspaceStore:
    return LocalWorkspaceStore(settings.workspace_path)


@pytest.fixture
def usage() -> UsageAccumulator:
    return UsageAccumulator()


@pytest.fixture
async def client(
    settings: GenComputerSettings, store: LocalWorkspaceStore, usage: UsageAccumulator
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with temp-dir components.

    The app lifespan does NOT run under ``ASGITransport``, so state fields
    are pre-set here and ``get_settings`` is overridden.
    """
    app.dependency_overrides[get_settings] = lambda: settings

    app.state.store = store
    app.state.usage = usage
    app.state.invoker = AgentInvoker(settings, usage)
    app.state.writer = ExperienceWriter(store, settings.simulator_output)
    app.state.auth_status = AuthStatus(authenticated=False)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
