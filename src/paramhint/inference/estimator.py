"""Estimate type hints for a parameter from the text around it."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from paramhint.config import Settings, SettingsWatcher
from paramhint.constants import (
    LIKELY_TYPES,
    TYPE_GUESSES,
    EstimateStage,
    PythonType,
)
from paramhint.inference.schemas import TypingImport, VariableSearchResult
from paramhint.inference.search import (
    class_with_same_name,
    find_same_named_variable,
    hint_of_similar_param,
    is_ambiguous,
    is_valid_name,
)
from paramhint.inference.typing_hints import TypingHintProvider
from paramhint.logger import EstimateLogger
from paramhint.workspace.cancellation import CancellationTokenSource
from paramhint.workspace.documents import Workspace
from paramhint.workspace.searcher import WorkspaceSearcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HintAccumulator:
    """Ordered hints without duplicates."""

    def __init__(self) -> None:
        self._hints: list[str] = []
        self._provided: set[str] = set()

    def __len__(self) -> int:
        return len(self._hints)

    @property
    def hints(self) -> list[str]:
        return list(self._hints)

    def add(self, hint: str) -> bool:
        """Append *hint* unless already provided; True if appended."""
        hint = hint.strip()
        if not hint or hint in self._provided:
            return False
        self._hints.append(hint)
        self._provided.add(hint)
        return True

    def try_add(self, hint: str | None) -> bool:
        """Add *hint* if there is one; True if a hint was found."""
        if not hint:
            return False
        self.add(hint)
        return True


class HintEstimate(BaseModel):
    """Result of one estimation: ordered hints, most likely first."""

    model_config = ConfigDict(frozen=True)

    param: str
    hints: list[str] = Field(default_factory=list)
    stage: EstimateStage = EstimateStage.NONE
    typing_import: TypingImport = Field(default_factory=TypingImport)

    def remaining(self) -> list[PythonType]:
        """Built-in types not hinted yet, in enumeration order."""
        return [t for t in PythonType if t.value not in self.hints]

    def remaining_typing_hints(self) -> list[str]:
        """Typing hints (``List[``...) not hinted yet."""
        provider = TypingHintProvider(self.typing_import)
        return [
            h for h in provider.get_remaining_hints() if h not in self.hints
        ]

    def all_candidates(self) -> list[str]:
        """Hints, then remaining built-ins, then remaining typing hints."""
        return (
            self.hints
            + [t.value for t in self.remaining()]
            + self.remaining_typing_hints()
        )


class TypeHintEstimator:
    """Provides type hints for parameters.

    Strategies in order of precedence; the first stage that finds
    something decides the result:

    1. the parameter name ends with ``_<type>``
    2. a parameter with the same name is hinted in the document, or a
       class with the same name exists
    3. a variable with the same name is assigned a detectable value
    4. the parameter name ends with a type, or is a well-known name
    5. a parameter with the same name is hinted in another document

    The workspace search starts right away and is cancelled when a
    local stage decides. Each strategy is isolated: one that raises is
    logged and counts as finding nothing.
    """

    def __init__(
        self,
        workspace: Workspace | None = None,
        settings: SettingsWatcher | Settings | None = None,
        estimate_logger: EstimateLogger | None = None,
    ) -> None:
        if isinstance(settings, Settings):
            settings = SettingsWatcher(settings)
        self._workspace = workspace
        self._settings = settings if settings is not None else SettingsWatcher()
        self._estimate_logger = estimate_logger

    async def estimate(
        self,
        param: str,
        document_text: str,
        *,
        active_document: Path | None = None,
        settings: Settings | None = None,
    ) -> HintEstimate:
        """Estimate hints for *param*. Never raises."""
        started = time.perf_counter()
        cfg = settings if settings is not None else self._settings.current
        try:
            result = await self._estimate(
                param, document_text, active_document, cfg
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Type hint estimation failed for %r", param, exc_info=True
            )
            self._log_error("estimate", exc)
            result = HintEstimate(param=param)

        if self._estimate_logger is not None:
            self._estimate_logger.log_estimate(
                param,
                result.hints,
                result.stage.value,
                round((time.perf_counter() - started) * 1000, 3),
            )
        return result

    async def _estimate(
        self,
        param: str,
        document_text: str,
        active_document: Path | None,
        cfg: Settings,
    ) -> HintEstimate:
        if not is_valid_name(param):
            logger.debug("Not a parameter name: %r", param)
            return HintEstimate(param=param)

        hints = HintAccumulator()
        typing_provider = TypingHintProvider()
        token_source = CancellationTokenSource()

        workspace_search: asyncio.Task[str | None] | None = None
        if self._workspace is not None and cfg.workspace_search_active:
            searcher = WorkspaceSearcher(
                self._workspace, cfg, active_document
            )
            workspace_search = asyncio.create_task(
                self._guard(
                    "workspace search",
                    searcher.find_hint_of_similar_param(
                        param, document_text, token_source.token
                    ),
                )
            )

        try:
            typing_imported, variable_result = await asyncio.gather(
                self._guard(
                    "typing import detection",
                    typing_provider.detect_typing_import(document_text),
                ),
                self._guard(
                    "variable search",
                    asyncio.to_thread(
                        find_same_named_variable, param, document_text
                    ),
                ),
            )
            stage = self._local_estimate(
                param,
                document_text,
                hints,
                typing_provider,
                bool(typing_imported),
                variable_result,
            )

            if workspace_search is not None:
                if stage == EstimateStage.NONE:
                    hint = await workspace_search
                    if hints.try_add(hint):
                        stage = EstimateStage.WORKSPACE
                else:
                    token_source.cancel()
        finally:
            if workspace_search is not None and not workspace_search.done():
                token_source.cancel()
                await workspace_search

        return HintEstimate(
            param=param,
            hints=hints.hints,
            stage=stage,
            typing_import=typing_provider.typing_import,
        )

    def _local_estimate(
        self,
        param: str,
        document_text: str,
        hints: HintAccumulator,
        typing_provider: TypingHintProvider,
        typing_imported: bool,
        variable_result: VariableSearchResult | None,
    ) -> EstimateStage:
        """Run the document-local stages in precedence order."""
        type_name = _type_param_ends_with(param, "_")
        if type_name is not None:
            hints.add(type_name)
            if typing_imported:
                hints.try_add(typing_provider.get_hint(type_name))
            return EstimateStage.PARAM_SUFFIX

        if hints.try_add(
            self._attempt(
                "similar param search",
                hint_of_similar_param,
                param,
                document_text,
            )
        ):
            return EstimateStage.SIMILAR_PARAM
        if hints.try_add(
            self._attempt(
                "class search", class_with_same_name, param, document_text
            )
        ):
            return EstimateStage.CLASS_NAME

        if (
            variable_result is not None
            and self._attempt("ternary check", is_ambiguous, variable_result)
            is False
        ):
            hints.add(variable_result.type_name)
            if typing_imported:
                for hint in (
                    self._attempt(
                        "typing hints",
                        typing_provider.get_hints,
                        variable_result,
                    )
                    or []
                ):
                    hints.add(hint)
            hints.try_add(_type_guess_for(param))
            return EstimateStage.VARIABLE

        type_name = _type_param_ends_with(param, "")
        if type_name is not None:
            hints.add(type_name)
            if typing_imported:
                hints.try_add(typing_provider.get_hint(type_name))
            return EstimateStage.NAME_FALLBACK
        if hints.try_add(_type_guess_for(param)):
            return EstimateStage.NAME_FALLBACK
        return EstimateStage.NONE

    async def _guard(self, name: str, awaitable: Awaitable[T]) -> T | None:
        """Await a strategy; failures count as no-match."""
        try:
            return await awaitable
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s failed", name, exc_info=True)
            self._log_error(name, exc)
            return None

    def _attempt(
        self, name: str, func: Callable[..., T], *args: Any
    ) -> T | None:
        """Call a strategy; failures count as no-match."""
        try:
            return func(*args)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s failed", name, exc_info=True)
            self._log_error(name, exc)
            return None

    def _log_error(self, component: str, exc: Exception) -> None:
        if self._estimate_logger is not None:
            self._estimate_logger.log_error(
                component, f"{type(exc).__name__}: {exc}"
            )


def _type_param_ends_with(param: str, separator: str) -> PythonType | None:
    """The likely type *param* ends with, e.g. ``items_list`` → list."""
    param_upper = param.upper()
    for type_name in LIKELY_TYPES:
        if param_upper.endswith(f"{separator}{type_name.value.upper()}"):
            return type_name
    return None


def _type_guess_for(param: str) -> PythonType | None:
    return TYPE_GUESSES.get(param.lower())
