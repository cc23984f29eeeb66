"""Singleton logging configuration.

setup_logging() configures the root logger once; the CLI calls it
before doing any work. Library callers (editor integrations) leave
logging configuration to their host and only get module loggers.

Idempotent (guarded by a module-level flag).
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Loggers kept at WARNING even when the root logger is more verbose
_SUPPRESSED_LOGGERS = ("asyncio",)

_setup_done = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger. Second call is a no-op."""
    global _setup_done  # noqa: PLW0603
    if _setup_done:
        return
    _setup_done = True

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.WARNING)
