"""Search other source files of the workspace for hinted parameters."""

from __future__ import annotations

import logging
from pathlib import Path

from paramhint.config import Settings
from paramhint.constants import is_builtin_type
from paramhint.inference.search import find_import, hint_of_similar_param
from paramhint.resilience.errors import classify_error, is_skippable
from paramhint.workspace.cancellation import (
    CancellationToken,
    CancellationTokenSource,
)
from paramhint.workspace.documents import DocumentRef, Workspace

logger = logging.getLogger(__name__)


class WorkspaceSearcher:
    """Searches documents, excluding the active one, for hints.

    A search stops at the first hit, after ``workspace_search_limit``
    documents, or when cancelled through :meth:`cancel` or the token
    passed to the search. Cancelled searches resolve to ``None``.
    """

    def __init__(
        self,
        workspace: Workspace,
        settings: Settings,
        active_document: Path | None = None,
    ) -> None:
        self._workspace = workspace
        self._settings = settings
        self._active_document = active_document
        self._token_source = CancellationTokenSource()

    async def find_hint_of_similar_param(
        self,
        param: str,
        active_document_text: str,
        token: CancellationToken | None = None,
    ) -> str | None:
        """Find a previously hinted parameter with the same name.

        Hints that are not built-in types are only accepted when they
        resolve against the imports of the *active* document.
        """
        max_results = self._settings.workspace_search_limit
        if max_results <= 0 or self._cancelled(token):
            return None

        try:
            refs = await self._workspace.find_files(
                self._settings.source_glob,
                self._exclude_glob(),
                max_results,
                token if token is not None else self._token_source.token,
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "Workspace file enumeration failed (%s)",
                classify_error(exc).value,
                exc_info=True,
            )
            return None

        for ref in refs[:max_results]:
            if self._cancelled(token):
                return None
            if self._is_active(ref):
                continue
            try:
                document = await self._workspace.open_document(ref)
            except Exception as exc:  # noqa: BLE001
                # Unexpected failures are skipped too, but loudly
                log = logger.debug if is_skippable(exc) else logger.warning
                log(
                    "Skipping %s (%s)",
                    ref.path,
                    classify_error(exc).value,
                    exc_info=True,
                )
                continue
            if self._cancelled(token):
                return None

            hint = hint_of_similar_param(param, document.get_text())
            if hint is None:
                continue
            if not is_builtin_type(hint):
                hint = find_import(
                    hint, active_document_text, check_as_imports=False
                )
            if hint:
                logger.debug("Found hint %r for %r in %s", hint, param, ref.path)
                return hint
        return None

    def cancel(self) -> None:
        """Stops all searches."""
        if not self._token_source.is_cancelled:
            self._token_source.cancel()

    def _cancelled(self, token: CancellationToken | None) -> bool:
        if self._token_source.is_cancelled:
            return True
        return token is not None and token.is_cancellation_requested

    def _exclude_glob(self) -> str | None:
        if self._active_document is None:
            return None
        return f"**/{self._active_document.name}"

    def _is_active(self, ref: DocumentRef) -> bool:
        return (
            self._active_document is not None
            and ref.path == self._active_document
        )
