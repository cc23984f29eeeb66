"""Cooperative cancellation for workspace searches.

A :class:`CancellationTokenSource` owns the right to cancel; the
:class:`CancellationToken` it hands out is passed down to every async
call and checked at each yield point. Cancellation is a request, not
an interruption: work in flight finishes its current step.
"""

from __future__ import annotations

from paramhint.resilience.errors import OperationCancelled


class CancellationToken:
    """Read-only view of a cancellation request."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelled("operation was cancelled")


class CancellationTokenSource:
    """Creates a token and signals cancellation to it."""

    def __init__(self) -> None:
        self._token = CancellationToken()

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancelled(self) -> bool:
        return self._token.is_cancellation_requested

    def cancel(self) -> None:
        self._token._cancelled = True  # noqa: SLF001
