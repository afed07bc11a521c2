"""Progress reporting for publish runs.

The host owns the progress widget; the pipeline only drives it through the
``ProgressSink`` protocol. ``ProgressCounter`` is a thread-safe sink used by
the CLI and the tests: ticks arrive from worker threads during archive
assembly and from the multipart reader during upload.
"""

import threading
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class ProgressSink(Protocol):
    """Budgeted progress bar driven by the pipeline."""

    def expand_to(self, total: int) -> None: ...

    def expand_by(self, units: int) -> None: ...

    def tick(self) -> None: ...

    def fill(self) -> None: ...


class ProgressCounter:
    """Monotonic counter implementing ``ProgressSink``.

    The counter owns the budget arithmetic: ticks beyond the declared total
    are clamped, and ``fill`` completes the bar exactly once.

    Example:
        >>> progress = ProgressCounter(on_change=lambda p: print(f"{p.percent:.0f}%"))
        >>> progress.expand_by(4)
        >>> progress.tick()
        25%
    """

    def __init__(self, on_change: Optional[Callable[["ProgressCounter"], None]] = None):
        self._lock = threading.Lock()
        self._on_change = on_change
        self.total = 0
        self.value = 0
        self.filled = False

    def expand_to(self, total: int) -> None:
        with self._lock:
            self.total = max(self.total, total)
        self._notify()

    def expand_by(self, units: int) -> None:
        if units < 0:
            raise ValueError(f"Cannot expand progress by a negative amount: {units}")
        with self._lock:
            self.total += units
        self._notify()

    def tick(self) -> None:
        with self._lock:
            if self.filled or self.value >= self.total:
                return
            self.value += 1
        self._notify()

    def fill(self) -> None:
        with self._lock:
            if self.filled:
                return
            self.value = self.total
            self.filled = True
        self._notify()

    @property
    def percent(self) -> float:
        """Completion in percent (100 once filled)."""
        if self.filled:
            return 100.0
        if self.total == 0:
            return 0.0
        return 100.0 * self.value / self.total

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
