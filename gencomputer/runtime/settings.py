"""Service configuration loaded from GENCOMP_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from gencomputer.runtime.models.enums import AgentMode, SimulatorOutput


class GenComputerSettings(BaseSettings):
    """Generative Computer runtime settings.

    All fields are read from environment variables with the ``GENCOMP_``
    prefix.  For example, ``GENCOMP_USE_REAL_AGENT=true`` maps to
    ``use_real_agent``.

    Credentials for the external agent CLI are **not** managed here -- the
    agent reads them from its own config directory (see ``execution.auth``).
    """

    model_config = SettingsConfigDict(
        env_prefix="GENCOMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3001

    # -- Layout ----------------------------------------------------------------
    project_root: str = "."
    """Working directory handed to the agent process."""

    workspace_dir: str = "./runtime/my-computer"
    """Shared "My Computer" folder.  Every file route is confined to it."""

    frontend_src: str = "./runtime/frontend/src"
    """Frontend source tree holding ``agent-components/`` and ``agent-manifest.ts``."""

    # -- Agent -----------------------------------------------------------------
    use_real_agent: bool = False
    agent_command: list[str] = ["node", "bundle/gemini.js"]
    """Executable plus leading arguments.  JSON list in the environment."""

    agent_timeout: float = 45.0
    """Seconds before a running agent process is killed."""

    auth_timeout: float = 20.0

    debug_agent: bool = False
    """Write one log file per agent invocation under ``log_dir``."""

    log_dir: str = "./logs/agent"

    # -- Simulator -------------------------------------------------------------
    simulator_output: SimulatorOutput = SimulatorOutput.NOTE

    # -- Helpers ---------------------------------------------------------------

    @property
    def agent_mode(self) -> AgentMode:
        return AgentMode.REAL if self.use_real_agent else AgentMode.SIMULATED

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace_dir).resolve()

    @property
    def agent_components_path(self) -> Path:
        return Path(self.frontend_src).resolve() / "agent-components"

    @property
    def agent_manifest_path(self) -> Path:
        return Path(self.frontend_src).resolve() / "agent-manifest.ts"


@lru_cache(maxsize=1)
def get_settings() -> GenComputerSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return GenComputerSettings()
