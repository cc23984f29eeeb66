"""Environment-based configuration and settings change notification."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any, TypeAlias

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from paramhint.constants import (
    DEFAULT_SOURCE_GLOB,
    DEFAULT_WORKSPACE_SEARCH_LIMIT,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Reads from .env file and PARAMHINT_* environment variables."""

    # Workspace search
    workspace_search_enabled: bool = True
    workspace_search_limit: int = DEFAULT_WORKSPACE_SEARCH_LIMIT
    source_glob: str = DEFAULT_SOURCE_GLOB
    skip_directories: Annotated[list[str], NoDecode] = [
        "node_modules",
        "vendor",
        ".venv",
        "venv",
        "__pycache__",
        "build",
        "dist",
        ".git",
        ".svn",
        ".hg",
        ".tox",
        ".mypy_cache",
    ]

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None

    @field_validator("workspace_search_limit", mode="before")
    @classmethod
    def _round_limit(cls, v: Any) -> Any:
        """Accept non-integer limits by rounding them."""
        if isinstance(v, float):
            return round(v)
        if isinstance(v, str):
            try:
                return round(float(v))
            except ValueError:
                return v
        return v

    @field_validator("workspace_search_limit")
    @classmethod
    def _clamp_limit(cls, v: int) -> int:
        if v < 0:
            logger.warning(
                "Negative workspace_search_limit %d, "
                "disabling workspace search",
                v,
            )
            return 0
        return v

    @field_validator("skip_directories", mode="before")
    @classmethod
    def _parse_skip_dirs(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            )
        return level

    @property
    def workspace_search_active(self) -> bool:
        """Search is on and allowed to look at one or more files."""
        return (
            self.workspace_search_enabled
            and self.workspace_search_limit > 0
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "PARAMHINT_",
        "extra": "ignore",
    }


SettingsListener: TypeAlias = Callable[[Settings], None]


class SettingsWatcher:
    """Holds the current settings snapshot and notifies on change.

    Consumers read :attr:`current` at the start of each operation
    instead of caching values across operations.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._current = settings if settings is not None else Settings()
        self._listeners: list[SettingsListener] = []

    @property
    def current(self) -> Settings:
        return self._current

    def subscribe(
        self, listener: SettingsListener
    ) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def update(self, settings: Settings) -> None:
        """Swap in a new snapshot and notify listeners."""
        self._current = settings
        self._notify()

    def reload(self, **overrides: Any) -> Settings:
        """Re-read the environment (plus overrides) and notify."""
        self.update(Settings(**overrides))
        return self._current

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._current)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "Settings listener %r failed",
                    listener,
                    exc_info=True,
                )
