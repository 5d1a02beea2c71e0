"""Startup probe: is the agent CLI installed and logged in?

Runs once at startup when the real agent is enabled.  The probe never
raises; the outcome is an ``AuthStatus`` shown by ``GET /api/status``.
"""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from gencomputer.runtime.execution.invoker import AgentTimeoutError, AgentUnavailableError, run_agent_process
from gencomputer.runtime.models.agent import AuthStatus

if TYPE_CHECKING:
    from gencomputer.runtime.settings import GenComputerSettings

AUTH_PROMPT = "Respond with the single word AUTH_OK if your credentials are active. Do not include quotes or additional text."

CREDENTIAL_FILES = (
    ".gemini/oauth_creds.json",
    ".gemini/google_accounts.json",
    ".gemini/api_keys.json",
    ".config/gemini/oauth_creds.json",
    ".config/gemini/google_accounts.json",
    ".config/gemini/api_keys.json",
)

_LOGIN_HINT = re.compile(r"login", re.IGNORECASE)


def has_credential_files(home: Path | None = None) -> bool:
    home = home or Path.home()
    return any((home / relative).is_file() for relative in CREDENTIAL_FILES)


def _resolve_executable(command: list[str], cwd: str) -> str | None:
    if not command:
        return None
    executable = command[0]
    if os.sep in executable or (os.altsep and os.altsep in executable):
        candidate = Path(cwd) / executable
        return str(candidate) if candidate.exists() else None
    return shutil.which(executable)


async def check_agent_auth(settings: GenComputerSettings, *, home: Path | None = None) -> AuthStatus:
    """Probe the agent CLI with an ``AUTH_OK`` prompt."""
    if _resolve_executable(settings.agent_command, settings.project_root) is None:
        return AuthStatus(
            authenticated=False,
            error="Agent CLI not found",
            details=f"Could not locate {settings.agent_command[:1]}; check GENCOMP_AGENT_COMMAND.",
        )

    logger.info("Checking agent CLI authentication...")
    args = [*settings.agent_command, "--yolo", "--prompt", AUTH_PROMPT, "--output-format", "text"]
    try:
        result = await run_agent_process(args, cwd=settings.project_root, timeout=settings.auth_timeout)
    except AgentTimeoutError:
        return AuthStatus(authenticated=False, error="Timeout waiting for agent CLI")
    except AgentUnavailableError as exc:
        return AuthStatus(authenticated=False, error=str(exc))

    if result.returncode == 0 and "AUTH_OK" in result.stdout:
        return AuthStatus(authenticated=True, message="Agent CLI is authenticated and ready.")

    if has_credential_files(home):
        return AuthStatus(authenticated=True, message="Agent credentials detected on disk.")

    if _LOGIN_HINT.search(result.stdout) or _LOGIN_HINT.search(result.stderr):
        return AuthStatus(
            authenticated=False,
            error="Agent CLI requires authentication",
            details="Run the agent CLI interactively once and complete the login flow.",
        )

    return AuthStatus(
        authenticated=False,
        error=f"Agent CLI exited with code {result.returncode}",
        details=result.stderr.strip() or result.stdout.strip() or None,
    )
