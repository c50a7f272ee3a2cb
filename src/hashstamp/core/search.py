"""Search limits and results shared by both stamp search engines.

Both engines call :meth:`BudgetTracker.check` between attempts. Grammar B's
search has no natural end, so callers bound it here.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol

from hashstamp.core.exceptions import SearchExhaustedError
from hashstamp.core.settings import Settings


@dataclass(frozen=True)
class SearchResult:
    """A finished stamp and the number of digests computed to find it."""

    stamp: str
    attempts: int


class CancelSignal(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class SearchBudget:
    """Caller-supplied limits for a single search."""

    max_attempts: int | None = None
    timeout: float | None = None
    cancel: CancelSignal | None = None

    @classmethod
    def from_settings(cls, config: Settings) -> SearchBudget:
        return cls(max_attempts=config.max_attempts, timeout=config.timeout_seconds)

    @property
    def unbounded(self) -> bool:
        return self.max_attempts is None and self.timeout is None and self.cancel is None

    def start(self) -> BudgetTracker:
        return BudgetTracker(self)


class BudgetTracker:
    """Running state of a :class:`SearchBudget` for one search."""

    # Clock reads are far slower than a counter compare; sample every N attempts
    CLOCK_INTERVAL = 1024

    def __init__(self, budget: SearchBudget) -> None:
        self._budget = budget
        self._started = time.monotonic()
        self._deadline = None if budget.timeout is None else self._started + budget.timeout

    def check(self, attempts: int) -> None:
        """Raise :class:`SearchExhaustedError` once any limit is reached."""
        budget = self._budget
        if budget.max_attempts is not None and attempts >= budget.max_attempts:
            self._stop("attempt budget exhausted", attempts)
        if attempts % self.CLOCK_INTERVAL:
            return
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._stop("deadline reached", attempts)
        if budget.cancel is not None and budget.cancel.is_set():
            self._stop("search cancelled", attempts)

    def _stop(self, reason: str, attempts: int) -> None:
        raise SearchExhaustedError(
            "Stamp search stopped before a solution was found",
            {"reason": reason, "attempts": attempts},
        )
