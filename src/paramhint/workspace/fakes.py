"""In-memory fake workspace for testing.

Dict-backed implementation of the Workspace protocol. No file system,
no threads; documents are plain strings keyed by path. Calls are
counted so tests can assert what a search did (or did not) touch.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pathspec

from paramhint.workspace.cancellation import CancellationToken
from paramhint.workspace.documents import DocumentRef, TextDocument


class InMemoryWorkspace:
    """Dict-backed Workspace for testing."""

    def __init__(
        self,
        documents: dict[str, str] | None = None,
        *,
        unreadable: set[str] | None = None,
        open_delay: float = 0.0,
    ) -> None:
        self._store: dict[str, str] = dict(documents or {})
        self._unreadable = set(unreadable or ())
        self._open_delay = open_delay
        self.find_files_calls = 0
        self.opened: list[str] = []

    def add(self, path: str, text: str) -> None:
        self._store[path] = text

    async def find_files(
        self,
        include: str,
        exclude: str | None = None,
        max_results: int | None = None,
        token: CancellationToken | None = None,
    ) -> list[DocumentRef]:
        self.find_files_calls += 1
        if token is not None:
            token.raise_if_cancelled()
        include_spec = pathspec.PathSpec.from_lines("gitignore", [include])
        exclude_spec = pathspec.PathSpec.from_lines(
            "gitignore", [exclude] if exclude else []
        )
        refs: list[DocumentRef] = []
        for path in self._store:
            if not include_spec.match_file(path):
                continue
            if exclude_spec.match_file(path):
                continue
            refs.append(DocumentRef(path=Path(path)))
            if max_results is not None and len(refs) >= max_results:
                break
        return refs

    async def open_document(self, ref: DocumentRef) -> TextDocument:
        key = ref.path.as_posix()
        self.opened.append(key)
        if self._open_delay:
            await asyncio.sleep(self._open_delay)
        if key in self._unreadable:
            raise PermissionError(f"Permission denied: '{key}'")
        if key not in self._store:
            raise FileNotFoundError(f"No such file: '{key}'")
        return TextDocument(self._store[key], path=ref.path)
