"""Tests for WorkspaceSearcher limits, skipping and cancellation."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from paramhint.config import Settings
from paramhint.workspace.cancellation import CancellationTokenSource
from paramhint.workspace.fakes import InMemoryWorkspace
from paramhint.workspace.searcher import WorkspaceSearcher

HINTED = "def g(count: int):\n    pass\n"
UNHINTED = "def g(count):\n    pass\n"


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[arg-type]


async def test_finds_first_hint() -> None:
    workspace = InMemoryWorkspace({"a.py": UNHINTED, "b.py": HINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    assert await searcher.find_hint_of_similar_param("count", "") == "int"
    assert workspace.opened == ["a.py", "b.py"]


async def test_stops_at_first_hit() -> None:
    workspace = InMemoryWorkspace(
        {"a.py": HINTED, "b.py": "def g(count: str):\n    pass\n"}
    )
    searcher = WorkspaceSearcher(workspace, _settings())
    assert await searcher.find_hint_of_similar_param("count", "") == "int"
    assert workspace.opened == ["a.py"]


async def test_limit_bounds_documents_searched() -> None:
    workspace = InMemoryWorkspace({"a.py": UNHINTED, "b.py": HINTED})
    searcher = WorkspaceSearcher(
        workspace, _settings(workspace_search_limit=1)
    )
    assert await searcher.find_hint_of_similar_param("count", "") is None
    assert workspace.opened == ["a.py"]


async def test_zero_limit_searches_nothing() -> None:
    workspace = InMemoryWorkspace({"a.py": HINTED})
    searcher = WorkspaceSearcher(
        workspace, _settings(workspace_search_limit=0)
    )
    assert await searcher.find_hint_of_similar_param("count", "") is None
    assert workspace.find_files_calls == 0


async def test_only_source_files_are_searched() -> None:
    workspace = InMemoryWorkspace({"notes.txt": HINTED, "b.py": UNHINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    assert await searcher.find_hint_of_similar_param("count", "") is None
    assert workspace.opened == ["b.py"]


async def test_active_document_is_excluded() -> None:
    workspace = InMemoryWorkspace({"pkg/active.py": HINTED})
    searcher = WorkspaceSearcher(
        workspace, _settings(), active_document=Path("pkg/active.py")
    )
    assert await searcher.find_hint_of_similar_param("count", "") is None
    assert workspace.opened == []


async def test_missing_document_is_skipped() -> None:
    class _Vanishing(InMemoryWorkspace):
        async def open_document(self, ref):  # type: ignore[no-untyped-def]
            if ref.path.name == "gone.py":
                self.opened.append("gone.py")
                raise FileNotFoundError("No such file: 'gone.py'")
            return await super().open_document(ref)

    workspace = _Vanishing({"gone.py": HINTED, "b.py": HINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    assert await searcher.find_hint_of_similar_param("count", "") == "int"
    assert workspace.opened == ["gone.py", "b.py"]


async def test_non_builtin_hint_must_be_imported() -> None:
    workspace = InMemoryWorkspace(
        {"a.py": "def g(where: pathlib.Path):\n    pass\n"}
    )
    searcher = WorkspaceSearcher(workspace, _settings())
    assert (
        await searcher.find_hint_of_similar_param(
            "where", "from pathlib import Path\n"
        )
        == "Path"
    )
    assert await searcher.find_hint_of_similar_param("where", "") is None


async def test_aliased_import_does_not_count() -> None:
    workspace = InMemoryWorkspace(
        {"a.py": "def g(arr: np):\n    pass\n"}
    )
    searcher = WorkspaceSearcher(workspace, _settings())
    text = "import numpy as np\n"
    assert await searcher.find_hint_of_similar_param("arr", text) is None


async def test_cancelled_token_resolves_to_none() -> None:
    workspace = InMemoryWorkspace({"a.py": HINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    source = CancellationTokenSource()
    source.cancel()
    assert (
        await searcher.find_hint_of_similar_param("count", "", source.token)
        is None
    )
    assert workspace.opened == []


async def test_cancel_during_open_stops_search() -> None:
    """A token cancelled while a document loads ends the search."""
    workspace = InMemoryWorkspace(
        {f"m{i}.py": HINTED for i in range(3)}, open_delay=0.05
    )
    searcher = WorkspaceSearcher(workspace, _settings())
    source = CancellationTokenSource()
    task = asyncio.create_task(
        searcher.find_hint_of_similar_param("count", "", source.token)
    )
    while not workspace.opened:
        await asyncio.sleep(0)
    source.cancel()
    assert await task is None
    assert workspace.opened == ["m0.py"]


async def test_searcher_cancel_during_open_stops_search() -> None:
    workspace = InMemoryWorkspace(
        {f"m{i}.py": HINTED for i in range(3)}, open_delay=0.05
    )
    searcher = WorkspaceSearcher(workspace, _settings())
    task = asyncio.create_task(
        searcher.find_hint_of_similar_param("count", "")
    )
    while not workspace.opened:
        await asyncio.sleep(0)
    searcher.cancel()
    assert await task is None
    assert workspace.opened == ["m0.py"]


async def test_cancel_stops_searches() -> None:
    workspace = InMemoryWorkspace({"a.py": HINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    searcher.cancel()
    searcher.cancel()  # second call is a no-op
    assert await searcher.find_hint_of_similar_param("count", "") is None
    assert workspace.find_files_calls == 0


async def test_enumeration_failure_resolves_to_none() -> None:
    class _Broken(InMemoryWorkspace):
        async def find_files(self, *args, **kwargs):  # type: ignore[no-untyped-def]
            raise PermissionError("Permission denied: '/'")

    searcher = WorkspaceSearcher(_Broken(), _settings())
    assert await searcher.find_hint_of_similar_param("count", "") is None


async def test_unexpected_open_failure_is_logged_as_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    class _Buggy(InMemoryWorkspace):
        async def open_document(self, ref):  # type: ignore[no-untyped-def]
            if ref.path.name == "a.py":
                raise ValueError("bad document")
            return await super().open_document(ref)

    workspace = _Buggy({"a.py": HINTED, "b.py": HINTED})
    searcher = WorkspaceSearcher(workspace, _settings())
    with caplog.at_level(logging.DEBUG, logger="paramhint.workspace.searcher"):
        assert await searcher.find_hint_of_similar_param("count", "") == "int"
    (record,) = [r for r in caplog.records if "Skipping" in r.getMessage()]
    assert record.levelno == logging.WARNING
    assert "(internal)" in record.getMessage()
