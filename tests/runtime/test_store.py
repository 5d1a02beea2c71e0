"""Unit tests for LocalWorkspaceStore.

No agent or network required -- uses a temporary directory.
"""

from __future__ import annotations

import os
import stat
from datetime import UTC
from unittest.mock import patch

import anyio
import pytest

from gencomputer.runtime.models.enums import FileKind
from gencomputer.runtime.store import local as local_store
from gencomputer.runtime.store.base import InvalidPathError, WorkspaceFileNotFoundError, kind_for
from gencomputer.runtime.store.local import DEFAULT_WELCOME_MARKDOWN, WELCOME_NOTE, LocalWorkspaceStore

ESCAPING_PATHS = [
    "",
    "   ",
    "../secret.txt",
    "notes/../../secret.txt",
    "..\\secret.txt",
    "..",
    "/etc/passwd",
    "\\server\\share",
    "C:/Windows/win.ini",
    "notes\x00.md",
]


@pytest.fixture
def store(tmp_path) -> LocalWorkspaceStore:
    return LocalWorkspaceStore(tmp_path / "workspace")


async def test_write_and_read_exact(store: LocalWorkspaceStore) -> None:
    content = "# Notes\r\nline two\n\nünïcödé ✨\n"
    saved_at = await store.write("notes.md", content)
    assert saved_at.tzinfo == UTC
    assert await store.read("notes.md") == content


async def test_read_binary_file_replaces_undecodable_bytes(store: LocalWorkspaceStore) -> None:
    store.root.mkdir(parents=True)
    (store.root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
    content = await store.read("logo.png")
    assert content.startswith("\ufffdPNG\r\n")
    assert "\ufffd" in content[4:]


async def test_written_file_mode_follows_umask(store: LocalWorkspaceStore) -> None:
    await store.write("shared.md", "x")
    umask = os.umask(0)
    os.umask(umask)
    mode = stat.S_IMODE((store.root / "shared.md").stat().st_mode)
    assert mode == 0o666 & ~umask


async def test_write_empty_content(store: LocalWorkspaceStore) -> None:
    await store.write("empty.txt", "")
    assert await store.read("empty.txt") == ""


async def test_write_creates_parent_folders(store: LocalWorkspaceStore) -> None:
    await store.write("projects/2024/plan.md", "plan")
    assert (store.root / "projects" / "2024" / "plan.md").read_text(encoding="utf-8") == "plan"
    assert await store.exists("projects/2024/plan.md") is True


async def test_overwrite_replaces_content(store: LocalWorkspaceStore) -> None:
    await store.write("a.md", "first version, longer")
    await store.write("a.md", "second")
    assert await store.read("a.md") == "second"


async def test_read_not_found(store: LocalWorkspaceStore) -> None:
    with pytest.raises(WorkspaceFileNotFoundError):
        await store.read("missing.md")


async def test_read_directory_is_invalid(store: LocalWorkspaceStore) -> None:
    await store.write("folder/file.md", "x")
    with pytest.raises(InvalidPathError):
        await store.read("folder")


async def test_delete(store: LocalWorkspaceStore) -> None:
    await store.write("gone.md", "bye")
    await store.delete("gone.md")
    assert await store.exists("gone.md") is False

    with pytest.raises(WorkspaceFileNotFoundError):
        await store.delete("gone.md")


async def test_delete_directory_is_invalid(store: LocalWorkspaceStore) -> None:
    await store.write("folder/file.md", "x")
    with pytest.raises(InvalidPathError):
        await store.delete("folder")
    assert await store.exists("folder/file.md") is True


async def test_list_files_missing_root(store: LocalWorkspaceStore) -> None:
    assert await store.list_files() == []


async def test_list_files_sorted_top_level_only(store: LocalWorkspaceStore) -> None:
    await store.write("b.md", "b")
    await store.write("a.tsx", "export default null;")
    await store.write("c.csv", "x,y")
    await store.write("d.bin", "?")
    await store.write("sub/nested.md", "hidden from listing")

    files = await store.list_files()
    assert [f.name for f in files] == ["a.tsx", "b.md", "c.csv", "d.bin"]
    assert [f.kind for f in files] == [FileKind.TSX, FileKind.MARKDOWN, FileKind.TEXT, FileKind.FILE]
    assert files[1].path == "b.md"
    assert files[1].size == 1
    assert files[1].updated_at.tzinfo == UTC


async def test_list_files_skips_temp_files(store: LocalWorkspaceStore) -> None:
    await store.write("real.md", "x")
    (store.root / ".real.md.abc123.tmp").write_text("partial", encoding="utf-8")
    assert [f.name for f in await store.list_files()] == ["real.md"]


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("a.md", FileKind.MARKDOWN),
        ("A.MARKDOWN", FileKind.MARKDOWN),
        ("x.jsx", FileKind.TSX),
        ("log.log", FileKind.TEXT),
        ("data.json", FileKind.TEXT),
        ("noext", FileKind.FILE),
    ],
)
def test_kind_for(name: str, kind: FileKind) -> None:
    assert kind_for(name) == kind


@pytest.mark.parametrize("path", ESCAPING_PATHS)
def test_resolve_rejects_escaping_paths(store: LocalWorkspaceStore, path: str) -> None:
    with pytest.raises(InvalidPathError):
        store.resolve(path)


def test_resolve_allows_nested_paths(store: LocalWorkspaceStore) -> None:
    assert store.resolve("notes/today.md") == store.root / "notes" / "today.md"
    assert store.resolve("./plan.md") == store.root / "plan.md"


@pytest.mark.parametrize("path", ESCAPING_PATHS)
async def test_escaping_paths_never_touch_filesystem(store: LocalWorkspaceStore, path: str) -> None:
    with (
        patch.object(local_store, "_read_file") as read_file,
        patch.object(local_store, "_atomic_write") as atomic_write,
        patch.object(local_store, "_remove_file") as remove_file,
    ):
        with pytest.raises(InvalidPathError):
            await store.read(path)
        with pytest.raises(InvalidPathError):
            await store.write(path, "pwned")
        with pytest.raises(InvalidPathError):
            await store.delete(path)

    read_file.assert_not_called()
    atomic_write.assert_not_called()
    remove_file.assert_not_called()


async def test_escape_attempt_leaves_outside_file_untouched(store: LocalWorkspaceStore, tmp_path) -> None:
    outside = tmp_path / "secret.txt"
    outside.write_text("keep me", encoding="utf-8")

    with pytest.raises(InvalidPathError):
        await store.write("../secret.txt", "overwritten")
    with pytest.raises(InvalidPathError):
        await store.delete("../secret.txt")

    assert outside.read_text(encoding="utf-8") == "keep me"


async def test_concurrent_writes_leave_one_whole_payload(store: LocalWorkspaceStore) -> None:
    payloads = [str(i) * 200_000 for i in range(8)]

    async with anyio.create_task_group() as tg:
        for payload in payloads:
            tg.start_soon(store.write, "race.txt", payload)

    assert await store.read("race.txt") in payloads
    assert [f.name for f in await store.list_files()] == ["race.txt"]


async def test_ensure_defaults_creates_welcome_once(store: LocalWorkspaceStore) -> None:
    await store.ensure_defaults()
    assert await store.read(WELCOME_NOTE) == DEFAULT_WELCOME_MARKDOWN

    await store.write(WELCOME_NOTE, "edited")
    await store.ensure_defaults()
    assert await store.read(WELCOME_NOTE) == "edited"
