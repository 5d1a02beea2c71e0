"""Tests for the startup agent authentication probe."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

from gencomputer.runtime.execution.auth import check_agent_auth, has_credential_files
from gencomputer.runtime.settings import GenComputerSettings


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


def _agent(tmp_path: Path, settings: GenComputerSettings, body: str, **overrides) -> GenComputerSettings:
    script = tmp_path / "fake_agent.py"
    script.write_text("import sys, time\n" + textwrap.dedent(body), encoding="utf-8")
    return settings.model_copy(update={"agent_command": [sys.executable, str(script)], **overrides})


def test_has_credential_files(home: Path) -> None:
    assert has_credential_files(home) is False
    creds = home / ".gemini" / "oauth_creds.json"
    creds.parent.mkdir()
    creds.write_text("{}", encoding="utf-8")
    assert has_credential_files(home) is True


async def test_missing_cli(settings: GenComputerSettings, home: Path) -> None:
    settings = settings.model_copy(update={"agent_command": ["definitely-not-an-agent-cli-xyz"]})
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is False
    assert status.error == "Agent CLI not found"


async def test_missing_relative_script(settings: GenComputerSettings, home: Path) -> None:
    settings = settings.model_copy(update={"agent_command": ["bundle/missing.js"]})
    status = await check_agent_auth(settings, home=home)
    assert status.error == "Agent CLI not found"


async def test_auth_ok(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    settings = _agent(tmp_path, settings, 'print("AUTH_OK")\n')
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is True
    assert status.error is None


async def test_prompt_is_passed(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    settings = _agent(
        tmp_path,
        settings,
        """
        if "AUTH_OK" in sys.argv[sys.argv.index("--prompt") + 1] and sys.argv[-1] == "text":
            print("AUTH_OK")
        """,
    )
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is True


async def test_credential_files_count_as_authenticated(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    creds = home / ".config" / "gemini" / "api_keys.json"
    creds.parent.mkdir(parents=True)
    creds.write_text("{}", encoding="utf-8")
    settings = _agent(tmp_path, settings, "sys.exit(1)\n")

    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is True


async def test_login_required(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    settings = _agent(tmp_path, settings, 'print("Please Login with Google", file=sys.stderr)\nsys.exit(1)\n')
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is False
    assert status.error == "Agent CLI requires authentication"


async def test_other_failure(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    settings = _agent(tmp_path, settings, 'print("weird failure", file=sys.stderr)\nsys.exit(5)\n')
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is False
    assert status.error == "Agent CLI exited with code 5"
    assert status.details == "weird failure"


async def test_timeout(tmp_path: Path, settings: GenComputerSettings, home: Path) -> None:
    settings = _agent(tmp_path, settings, "time.sleep(30)\n", auth_timeout=0.5)
    status = await check_agent_auth(settings, home=home)
    assert status.authenticated is False
    assert status.error == "Timeout waiting for agent CLI"
