"""
Monitor — progress reporting and cooperative cancellation.

The checks receive a monitor as an injected dependency and never hold
global state.  They only call three methods on it:

  set_indeterminate(flag)   — total work is unknown until enumeration ends.
  increment_progress(n)     — n more functions visited.
  is_cancelled()            — polled once per function.

``CancellableMonitor`` is safe to share between the worker thread running
a check and a foreground thread that requests cancellation.
``NULL_MONITOR`` never cancels and discards progress.
"""
from __future__ import annotations

import threading
from typing import Protocol


class TaskMonitor(Protocol):
    def set_indeterminate(self, indeterminate: bool) -> None:
        ...

    def increment_progress(self, n: int = 1) -> None:
        ...

    def is_cancelled(self) -> bool:
        ...


class CancellableMonitor:
    """Thread-safe monitor with a cancel switch and a progress counter."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._progress = 0
        self._indeterminate = False

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def set_indeterminate(self, indeterminate: bool) -> None:
        with self._lock:
            self._indeterminate = indeterminate

    def increment_progress(self, n: int = 1) -> None:
        with self._lock:
            self._progress += n

    @property
    def progress(self) -> int:
        with self._lock:
            return self._progress

    @property
    def indeterminate(self) -> bool:
        with self._lock:
            return self._indeterminate


class _NullMonitor:
    def set_indeterminate(self, indeterminate: bool) -> None:
        pass

    def increment_progress(self, n: int = 1) -> None:
        pass

    def is_cancelled(self) -> bool:
        return False


NULL_MONITOR: TaskMonitor = _NullMonitor()
