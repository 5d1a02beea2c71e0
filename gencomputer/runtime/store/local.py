"""Local filesystem workspace store.

Layout::

    {workspace_dir}/welcome.md
    {workspace_dir}/<any user or agent file>

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  Two concurrent writes to the same path
therefore leave exactly one of the two payloads on disk (last rename wins),
never an interleaving of both.
"""

from __future__ import annotations

import contextlib
import os
import re
import tempfile
from datetime import UTC, datetime
from functools import partial
from pathlib import Path

from anyio import to_thread
from loguru import logger

from gencomputer.runtime.models.workspace import WorkspaceFile
from gencomputer.runtime.store.base import InvalidPathError, WorkspaceFileNotFoundError, kind_for

WELCOME_NOTE = "welcome.md"

DEFAULT_WELCOME_MARKDOWN = """\
# Welcome to the Generative Computer!

You and your agent now share this desktop workspace. Files you create here live under **My Computer** and stay editable by both of you.

## Getting Started

- Type a command below to ask the agent for help
- Open files from **My Computer** to edit them in place
- Ask the agent to create new notes, plans, or React components

## Tips

- Close and reopen files from **My Computer** whenever you need a clean view
- Every file shows its real name so you can reference it in future requests
- Markdown documents render live previews as you edit
"""

_SEPARATORS = re.compile(r"[\\/]+")

# mkstemp creates 0600 files; saved files get the usual umask-derived mode instead.
_UMASK = os.umask(0)
os.umask(_UMASK)
_FILE_MODE = 0o666 & ~_UMASK


class LocalWorkspaceStore:
    """Local filesystem implementation of the WorkspaceStore protocol."""

    def __init__(self, root: str | Path) -> None:
        # abspath/normpath are pure string operations: no syscall besides getcwd.
        self._root = os.path.normpath(os.path.abspath(root))

    @property
    def root(self) -> Path:
        return Path(self._root)

    # -- Path confinement ------------------------------------------------------

    def resolve(self, relative_path: str) -> Path:
        """Map a caller-supplied path to an absolute path inside the root.

        Raises ``InvalidPathError`` without touching the filesystem.
        """
        candidate = (relative_path or "").strip()
        if not candidate:
            msg = "Missing file path"
            raise InvalidPathError(msg)

        if "\x00" in candidate:
            msg = f"Invalid workspace path: {relative_path!r}"
            raise InvalidPathError(msg)

        if os.path.isabs(candidate) or candidate[0] in "/\\" or re.match(r"^[A-Za-z]:", candidate):
            msg = f"Absolute paths are not allowed: {relative_path}"
            raise InvalidPathError(msg)

        if ".." in _SEPARATORS.split(candidate):
            msg = f"Invalid workspace path: {relative_path}"
            raise InvalidPathError(msg)

        resolved = os.path.normpath(os.path.join(self._root, candidate))
        prefix = self._root if self._root.endswith(os.sep) else self._root + os.sep
        if resolved != self._root and not resolved.startswith(prefix):
            msg = f"Invalid workspace path: {relative_path}"
            raise InvalidPathError(msg)
        return Path(resolved)

    def relative(self, path: Path) -> str:
        return Path(path).relative_to(self._root).as_posix()

    # -- Read ------------------------------------------------------------------

    async def list_files(self) -> list[WorkspaceFile]:
        entries = await to_thread.run_sync(partial(_scan_files, Path(self._root)))
        files = [
            WorkspaceFile(
                name=name,
                path=name,
                kind=kind_for(name),
                size=stat.st_size,
                updated_at=_mtime(stat),
            )
            for name, stat in entries
        ]
        files.sort(key=lambda f: f.name)
        return files

    async def read(self, path: str) -> str:
        target = self.resolve(path)
        try:
            return await to_thread.run_sync(partial(_read_file, target))
        except FileNotFoundError:
            raise WorkspaceFileNotFoundError(f"File not found: {path}") from None
        except IsADirectoryError:
            raise InvalidPathError(f"Not a file: {path}") from None

    async def exists(self, path: str) -> bool:
        target = self.resolve(path)
        return await to_thread.run_sync(target.is_file)

    # -- Write -----------------------------------------------------------------

    async def write(self, path: str, content: str) -> datetime:
        target = self.resolve(path)
        if target == self.root:
            raise InvalidPathError(f"Not a file: {path}")
        try:
            stat = await to_thread.run_sync(partial(_atomic_write, target, content))
        except IsADirectoryError:
            raise InvalidPathError(f"Not a file: {path}") from None
        logger.debug("Workspace: wrote {} ({} bytes)", self.relative(target), stat.st_size)
        return _mtime(stat)

    async def delete(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await to_thread.run_sync(partial(_remove_file, target))
        except FileNotFoundError:
            raise WorkspaceFileNotFoundError(f"File not found: {path}") from None
        except IsADirectoryError:
            raise InvalidPathError(f"Not a file: {path}") from None
        logger.debug("Workspace: deleted {}", self.relative(target))

    async def ensure_defaults(self) -> None:
        created = await to_thread.run_sync(partial(_ensure_defaults, Path(self._root)))
        if created:
            logger.info("Created default welcome note at {}", Path(self._root) / WELCOME_NOTE)


# -- Sync helpers (run in thread pool) -----------------------------------------


def _mtime(stat: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat.st_mtime, tz=UTC)


def _scan_files(root: Path) -> list[tuple[str, os.stat_result]]:
    """Return ``(name, stat)`` for regular files directly under ``root``."""
    if not root.is_dir():
        return []
    with os.scandir(root) as it:
        return [(entry.name, entry.stat()) for entry in it if entry.is_file() and not _is_temp(entry.name)]


def _is_temp(name: str) -> bool:
    # In-flight ``_atomic_write`` temp files.
    return name.startswith(".") and name.endswith(".tmp")


def _read_file(path: Path) -> str:
    """Read file contents.  Raises ``FileNotFoundError`` if missing.

    Bytes that are not valid UTF-8 (images, archives) become U+FFFD.
    """
    if path.is_dir():
        raise IsADirectoryError(path)
    with path.open(encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def _atomic_write(path: Path, data: str) -> os.stat_result:
    """Write data atomically: temp file + rename.

    Ensures readers never see a partially-written file.  The temp file is
    created in the same directory so ``os.replace`` is atomic on POSIX.
    """
    if path.is_dir():
        raise IsADirectoryError(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(data)
        os.chmod(tmp_path, _FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
    return path.stat()


def _remove_file(path: Path) -> None:
    if path.is_dir():
        raise IsADirectoryError(path)
    path.unlink()


def _ensure_defaults(root: Path) -> bool:
    root.mkdir(parents=True, exist_ok=True)
    welcome = root / WELCOME_NOTE
    if welcome.exists():
        return False
    _atomic_write(welcome, DEFAULT_WELCOME_MARKDOWN)
    return True
