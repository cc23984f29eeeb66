"""Document and workspace access.

The inference code only needs whole-document text, a way to map an
offset back to its line, and a bounded list of sibling source files.
:class:`Document` and :class:`Workspace` describe that surface as
protocols so editor integrations can plug in their own objects;
:class:`TextDocument` and :class:`FileSystemWorkspace` are the
implementations used by the CLI and tests.
"""

from __future__ import annotations

import asyncio
import bisect
import logging
from pathlib import Path
from typing import Protocol

import pathspec
from pydantic import BaseModel

from paramhint.config import Settings
from paramhint.workspace.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class Position(BaseModel):
    """Zero-based line and character of a location in a document."""

    line: int
    character: int


class TextLine(BaseModel):
    """A single line of a document, without its line break."""

    line_number: int
    text: str


class DocumentRef(BaseModel):
    """Reference to a document that has not been read yet."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


class Document(Protocol):
    def get_text(self) -> str: ...
    def line_at(self, position: Position | int) -> TextLine: ...
    def position_at(self, offset: int) -> Position: ...


class Workspace(Protocol):
    async def find_files(
        self,
        include: str,
        exclude: str | None = None,
        max_results: int | None = None,
        token: CancellationToken | None = None,
    ) -> list[DocumentRef]: ...
    async def open_document(self, ref: DocumentRef) -> Document: ...


class TextDocument:
    """A document backed by an in-memory string."""

    def __init__(self, text: str, path: Path | None = None) -> None:
        self._text = text
        self.path = path
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(i + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def get_text(self) -> str:
        return self._text

    def line_at(self, position: Position | int) -> TextLine:
        """The line at a position or zero-based line number."""
        line = position.line if isinstance(position, Position) else position
        if not 0 <= line < self.line_count:
            raise IndexError(f"line {line} out of range")
        start = self._line_starts[line]
        end = (
            self._line_starts[line + 1] - 1
            if line + 1 < self.line_count
            else len(self._text)
        )
        return TextLine(
            line_number=line,
            text=self._text[start:end].rstrip("\r"),
        )

    def position_at(self, offset: int) -> Position:
        """Map a character offset to a position, clamped to the text."""
        offset = max(0, min(offset, len(self._text)))
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(
            line=line, character=offset - self._line_starts[line]
        )


class FileSystemWorkspace:
    """Source files below a root directory.

    * Skips hidden directories and ``settings.skip_directories``.
    * Honours the root ``.gitignore``.
    * Matches include/exclude globs with ``pathspec`` relative to root.
    """

    def __init__(
        self,
        root: Path,
        settings: Settings | None = None,
    ) -> None:
        self.root = root
        self._settings = settings if settings is not None else Settings()

    async def find_files(
        self,
        include: str,
        exclude: str | None = None,
        max_results: int | None = None,
        token: CancellationToken | None = None,
    ) -> list[DocumentRef]:
        """Enumerate files matching *include*, up to *max_results*."""
        paths = await asyncio.to_thread(
            self._find_files, include, exclude, max_results, token
        )
        return [DocumentRef(path=p) for p in paths]

    async def open_document(self, ref: DocumentRef) -> TextDocument:
        """Read a document; raises OSError / UnicodeDecodeError."""
        text = await asyncio.to_thread(
            ref.path.read_text, encoding="utf-8"
        )
        return TextDocument(text, path=ref.path)

    def _find_files(
        self,
        include: str,
        exclude: str | None,
        max_results: int | None,
        token: CancellationToken | None,
    ) -> list[Path]:
        include_spec = pathspec.PathSpec.from_lines(
            "gitignore", [include]
        )
        exclude_spec = pathspec.PathSpec.from_lines(
            "gitignore", [exclude] if exclude else []
        )
        gitignore_spec = _load_gitignore(self.root)
        skip_dirs = set(self._settings.skip_directories)
        resolved_root = self.root.resolve()

        found: list[Path] = []
        stack = [self.root]
        while stack:
            if token is not None:
                token.raise_if_cancelled()
            current = stack.pop()
            try:
                items = sorted(current.iterdir())
            except OSError:
                logger.debug("Cannot list %s", current, exc_info=True)
                continue
            subdirs: list[Path] = []
            for item in items:
                if item.is_symlink():
                    if not item.resolve().is_relative_to(resolved_root):
                        continue
                rel = item.relative_to(self.root).as_posix()
                if item.is_dir():
                    if item.name.startswith(".") or item.name in skip_dirs:
                        continue
                    if gitignore_spec.match_file(rel + "/"):
                        continue
                    subdirs.append(item)
                elif item.is_file():
                    if gitignore_spec.match_file(rel):
                        continue
                    if not include_spec.match_file(rel):
                        continue
                    if exclude_spec.match_file(rel):
                        continue
                    found.append(item)
                    if max_results is not None and len(found) >= max_results:
                        return found
            # Depth-first, visiting subdirectories in sorted order
            stack.extend(reversed(subdirs))
        return found


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore patterns using pathspec."""
    gitignore = root / ".gitignore"
    if not gitignore.exists():
        return pathspec.PathSpec.from_lines("gitignore", [])
    try:
        with open(gitignore, encoding="utf-8") as f:
            return pathspec.PathSpec.from_lines("gitignore", f)
    except OSError:
        return pathspec.PathSpec.from_lines("gitignore", [])
