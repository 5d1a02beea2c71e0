"""Agent invoker -- runs the external coding-agent CLI for one command.

The agent is an opaque executable (``GENCOMP_AGENT_COMMAND``).  Each call:

1. Builds the prompt (``execution.prompt``).
2. Spawns ``<agent_command> --yolo --prompt <prompt> --output-format json``
   with the project root as CWD, stdin closed, stdout/stderr piped.
3. Drains both pipes while racing process exit against ``agent_timeout``;
   on timeout the process is killed and the call fails.  Files the agent
   already wrote are *not* rolled back.
4. Parses the JSON envelope (``response`` + optional ``stats``), records
   stats, and returns an ``AgentInvocationResult``.

Every failure raises an ``AgentError`` subclass; the command manager treats
any of them as "fall back to the simulator".
"""

from __future__ import annotations

import json
import os
import re
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
from anyio import to_thread
from loguru import logger

from gencomputer.runtime.execution.prompt import build_agent_prompt
from gencomputer.runtime.models.agent import AgentInvocationResult

if TYPE_CHECKING:
    from anyio.abc import ByteReceiveStream

    from gencomputer.runtime.execution.usage import UsageAccumulator
    from gencomputer.runtime.settings import GenComputerSettings

API_ERROR_PATTERN = re.compile(r"Error when talking to [\w .-]*API", re.IGNORECASE)
DONE_PATTERN = re.compile(r"DONE\b")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class AgentError(RuntimeError):
    """Base class for agent failures that should trigger the simulator fallback."""

    def __init__(self, message: str, *, debug_log_path: str | None = None) -> None:
        super().__init__(message)
        self.debug_log_path = debug_log_path


class AgentUnavailableError(AgentError):
    """Agent missing, failed to start, exited non-zero, or reported an API error."""


class AgentTimeoutError(AgentUnavailableError):
    """Agent did not exit within ``agent_timeout`` and was killed."""


class AgentOutputEmptyError(AgentError):
    """Agent exited 0 but produced no usable response text."""


# ---------------------------------------------------------------------------
# Output parsing
# ---------------------------------------------------------------------------


def parse_agent_output(raw_output: str) -> dict | None:
    """Parse the JSON envelope, starting at the first ``{``.

    The CLI may print banner lines before the JSON; anything before the first
    brace is ignored.  Returns None for plain-text or malformed output.
    """
    trimmed = (raw_output or "").strip()
    start = trimmed.find("{")
    if start == -1:
        return None
    try:
        parsed = json.loads(trimmed[start:])
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse agent JSON output: {}", exc)
        return None
    return parsed if isinstance(parsed, dict) else None


@dataclass
class ProcessOutput:
    returncode: int
    stdout: str
    stderr: str


# ---------------------------------------------------------------------------
# Invoker
# ---------------------------------------------------------------------------


class AgentInvoker:
    """Spawn the agent CLI with a bounded timeout.

    Parameters
    ----------
    settings:
        Agent command, timeout, project root and debug-log options.
    usage:
        Accumulator that receives the ``stats`` of each run.
    """

    def __init__(self, settings: GenComputerSettings, usage: UsageAccumulator) -> None:
        self._settings = settings
        self._usage = usage

    @property
    def timeout(self) -> float:
        return self._settings.agent_timeout

    async def build_prompt(self, command: str) -> str:
        return await build_agent_prompt(command, self._settings)

    def build_args(self, prompt: str) -> list[str]:
        return [*self._settings.agent_command, "--yolo", "--prompt", prompt, "--output-format", "json"]

    async def invoke(self, command: str) -> AgentInvocationResult:
        """Run the agent for ``command``.  Raises ``AgentError`` on any failure."""
        logger.info("Invoking agent for command: {}", command)
        prompt = await self.build_prompt(command)
        args = self.build_args(prompt)
        header = f"User command: {command}\nArgs: {json.dumps(args)}\n"

        try:
            output = await run_agent_process(args, cwd=self._settings.project_root, timeout=self.timeout)
        except AgentTimeoutError as exc:
            exc.debug_log_path = await self._debug_log("timeout", header + f"Error: {exc}\n")
            raise
        except AgentUnavailableError as exc:
            exc.debug_log_path = await self._debug_log("spawn-error", header + f"Error: {exc}\n")
            raise

        transcript = header + f"Stdout:\n{output.stdout}\n\nStderr:\n{output.stderr}\n"

        if output.returncode != 0:
            logger.error("Agent failed with exit code {}", output.returncode)
            message = (output.stderr or output.stdout or f"Exit code {output.returncode}").strip()
            log_path = await self._debug_log(f"exit-{output.returncode}", transcript)
            raise AgentUnavailableError(
                f"Agent CLI exited with code {output.returncode}: {message}",
                debug_log_path=log_path,
            )

        raw = output.stdout.strip()
        parsed = parse_agent_output(raw)
        response = parsed.get("response") if parsed else None
        response_text = raw if response is None else str(response)
        stats = parsed.get("stats") if parsed and isinstance(parsed.get("stats"), dict) else None

        if stats:
            self._usage.record(stats)

        if API_ERROR_PATTERN.search(output.stderr):
            log_path = await self._debug_log("api-error", transcript)
            raise AgentUnavailableError(
                "Agent API reported an error while processing the command.",
                debug_log_path=log_path,
            )

        if not response_text.strip():
            log_path = await self._debug_log("empty-output", transcript)
            raise AgentOutputEmptyError("Agent returned no output.", debug_log_path=log_path)

        if not DONE_PATTERN.search(response_text):
            logger.warning("Agent finished without DONE confirmation")

        log_path = await self._debug_log("success", transcript)
        logger.info("Agent completed successfully")
        return AgentInvocationResult(
            output_text=response_text,
            raw_output=output.stdout,
            usage_stats=stats,
            debug_log_path=log_path,
        )

    # -- Debug logs ------------------------------------------------------------

    async def _debug_log(self, kind: str, contents: str) -> str | None:
        """Write one invocation log when ``debug_agent`` is on.  Never raises."""
        if not self._settings.debug_agent:
            return None
        stamp = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        path = Path(self._settings.log_dir) / f"{stamp}-{kind}.log"
        try:
            await to_thread.run_sync(partial(_write_log, path, contents))
        except OSError as exc:
            logger.warning("Failed to write agent debug log: {}", exc)
            return None
        logger.info("Agent debug log written to {}", path)
        return str(path)


async def _drain(stream: ByteReceiveStream | None, sink: bytearray, label: str) -> None:
    if stream is None:
        return
    async for chunk in stream:
        sink.extend(chunk)
        logger.debug("Agent {}: {}", label, chunk.decode("utf-8", errors="replace").rstrip())


def _write_log(path: Path, contents: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


async def run_agent_process(args: list[str], *, cwd: str, timeout: float) -> ProcessOutput:
    """Run the agent CLI with stdin closed and both pipes drained.

    Raises ``AgentTimeoutError`` (process killed) or ``AgentUnavailableError``
    when the executable cannot be started.
    """
    env = {**os.environ, "FORCE_COLOR": "0", "NODE_NO_WARNINGS": "1"}
    try:
        process = await anyio.open_process(args, cwd=cwd, env=env, stdin=subprocess.DEVNULL)
    except OSError as exc:
        logger.error("Failed to start agent: {}", exc)
        raise AgentUnavailableError(f"Failed to start agent: {exc}") from exc

    stdout = bytearray()
    stderr = bytearray()
    async with process:
        try:
            with anyio.fail_after(timeout):
                async with anyio.create_task_group() as tg:
                    tg.start_soon(_drain, process.stdout, stdout, "stdout")
                    tg.start_soon(_drain, process.stderr, stderr, "stderr")
                returncode = await process.wait()
        except TimeoutError:
            process.kill()
            logger.error("Agent timed out after {}s, killed", timeout)
            raise AgentTimeoutError(f"Agent timed out after {timeout:g} seconds") from None

    return ProcessOutput(
        returncode=returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
