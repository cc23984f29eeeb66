"""Error classification for structured error handling.

Classifies exceptions by category to enable:
- Structured logging (which failures are per-file vs internal)
- Skipping a single document without aborting a workspace search
- Isolating a failing estimation strategy from the others
"""

from __future__ import annotations

import asyncio
import re
from enum import Enum


class OperationCancelled(Exception):  # noqa: N818
    """Raised when a cancellation token has been triggered."""


class ErrorClass(Enum):
    IO = "io"  # unreadable or missing file
    DECODE = "decode"  # not a text document
    CANCELLED = "cancelled"  # caller stopped the search
    MALFORMED_INPUT = "malformed_input"  # bad pattern input
    INTERNAL = "internal"  # unclassified


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks exception types first, falls back to string matching
    for untyped exceptions raised by workspace implementations.
    """
    # 1. Structured exception types
    if isinstance(error, (OperationCancelled, asyncio.CancelledError)):
        return ErrorClass.CANCELLED
    if isinstance(error, UnicodeDecodeError):
        return ErrorClass.DECODE
    if isinstance(error, OSError):
        return ErrorClass.IO
    if isinstance(error, re.error):
        return ErrorClass.MALFORMED_INPUT

    # 2. Fall back to string matching
    msg = str(error).lower()

    if "cancel" in msg:
        return ErrorClass.CANCELLED
    if "decode" in msg or "codec" in msg:
        return ErrorClass.DECODE
    if any(
        s in msg
        for s in ("no such file", "permission denied", "not found")
    ):
        return ErrorClass.IO

    return ErrorClass.INTERNAL


_SKIPPABLE = frozenset({
    ErrorClass.IO,
    ErrorClass.DECODE,
    ErrorClass.CANCELLED,
})


def is_skippable(error: BaseException) -> bool:
    """Return True if the failure only affects a single document."""
    return classify_error(error) in _SKIPPABLE
