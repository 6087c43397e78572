"""
Module: progress

Purpose:
    Conversion progress as an integer percentage (0-100).
    Purely observational: listeners are notified, nothing in the
    pipeline reads the value back.

Key Classes:
    - ProgressReporter: Percentage counter with listener callbacks

Key Functions:
    - percent_complete(): Rounded percentage for step i of n
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)

ProgressListener = Callable[[int], None]


def percent_complete(completed: int, total: int) -> int:
    """
    Percentage of completed steps, rounded half up.

    Example:
        >>> percent_complete(1, 8)
        13
    """
    if total <= 0:
        return 0
    return min(100, int(math.floor(100 * completed / total + 0.5)))


class ProgressReporter:
    """
    Progress counter for one conversion at a time.

    Within a run the value never decreases and never exceeds 100. It is
    reset to 0 when a run starts and again when it ends, whether it
    succeeded or failed.

    Usage:
        reporter = ProgressReporter()
        reporter.subscribe(lambda pct: print(f"Converting: {pct}%"))
        reporter.start(total=4)
        for ...:
            reporter.advance()   # 25, 50, 75, 100
        reporter.reset()         # 0
    """

    def __init__(self) -> None:
        self._listeners: List[ProgressListener] = []
        self._lock = threading.Lock()
        self._value = 0
        self._completed = 0
        self._total = 0

    @property
    def value(self) -> int:
        """Current percentage."""
        return self._value

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a callback receiving each new percentage."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: ProgressListener) -> None:
        """Remove a previously registered callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self, total: int) -> None:
        """Begin a run of ``total`` steps at 0%."""
        if total < 0:
            raise ValueError(f"total must be non-negative: {total}")
        with self._lock:
            self._total = total
            self._completed = 0
        self._set(0)

    def advance(self) -> int:
        """
        Record one completed step.

        Returns:
            The new percentage
        """
        with self._lock:
            if self._completed < self._total:
                self._completed += 1
            pct = max(self._value, percent_complete(self._completed, self._total))
        self._set(pct)
        return pct

    def complete(self) -> None:
        """Force the run to 100%."""
        with self._lock:
            self._completed = self._total
        if self._value != 100:
            self._set(100)

    def reset(self) -> None:
        """Return to 0% and forget the current run."""
        with self._lock:
            self._total = 0
            self._completed = 0
        self._set(0)

    def _set(self, value: int) -> None:
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(f"Progress listener failed at {value}%")
