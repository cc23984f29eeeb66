"""Structured JSON logger for estimate tracking."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from paramhint.constants import ERROR_TRUNCATION_CHARS


class EstimateLogger:
    """Structured JSON logger, one record per estimate."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("paramhint.estimates")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._logger.propagate = False

        log_file = (log_dir / "paramhint.log").resolve()
        if not any(
            isinstance(h, logging.FileHandler)
            and Path(h.baseFilename) == log_file
            for h in self._logger.handlers
        ):
            handler = logging.FileHandler(log_file)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    @property
    def log_file(self) -> Path:
        return self._log_dir / "paramhint.log"

    def log_estimate(
        self,
        param: str,
        hints: list[str],
        stage: str,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "estimate",
                "timestamp": datetime.now(UTC).isoformat(),
                "param": param,
                "hints": hints,
                "stage": stage,
                "duration_ms": duration_ms,
            })
        )

    def log_error(
        self,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )

    def close(self) -> None:
        """Detach and close this logger's file handlers."""
        for handler in list(self._logger.handlers):
            if isinstance(handler, logging.FileHandler):
                self._logger.removeHandler(handler)
                handler.close()
