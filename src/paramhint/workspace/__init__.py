"""Workspace access: documents, file enumeration and cross-file search."""

from paramhint.workspace.cancellation import (
    CancellationToken,
    CancellationTokenSource,
)
from paramhint.workspace.documents import (
    Document,
    DocumentRef,
    FileSystemWorkspace,
    Position,
    TextDocument,
    TextLine,
    Workspace,
)

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "Document",
    "DocumentRef",
    "FileSystemWorkspace",
    "Position",
    "TextDocument",
    "TextLine",
    "Workspace",
]
