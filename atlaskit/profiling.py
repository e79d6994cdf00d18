"""Timing helpers: a start/stop timer, per-key running statistics and scoped profiling."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

__all__ = [
    "TimerError",
    "ProfileData",
    "Timer",
    "ProfileRegistry",
    "ProfileHelper",
]

Clock = Callable[[], float]
"""A callable returning a monotonic time in seconds."""

_T = TypeVar("_T")


class TimerError(RuntimeError):
    """Raised when a timer is started twice or stopped without being started."""


class ProfileData:
    """Running statistics for one profiled operation, in milliseconds."""

    __slots__ = ("_current", "_total", "_count")

    def __init__(self) -> None:
        self._current = 0.0
        self._total = 0.0
        self._count = 0

    def add_time(self, t: float) -> None:
        """Record one measurement."""
        self._current = t
        self._total += t
        self._count += 1

    def current(self) -> float:
        """The most recent measurement, or 0 if there is none."""
        return self._current

    def average(self) -> float:
        """The mean of all measurements, or 0 if there are none."""
        return self._total / self._count if self._count else 0.0

    def clear(self) -> None:
        """Forget every measurement."""
        self._current = 0.0
        self._total = 0.0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __str__(self) -> str:
        return f"cur = {self.current():g}ms\nave = {self.average():g}ms"

    def __repr__(self) -> str:
        return (
            f"ProfileData(current={self._current!r}, "
            f"average={self.average()!r}, count={self._count})"
        )


class Timer:
    """Measures the time between :meth:`start` and :meth:`stop`."""

    def __init__(self, clock: Clock = time.perf_counter) -> None:
        self._clock = clock
        self._started_at: float | None = None
        self._elapsed_ms = 0.0

    @property
    def running(self) -> bool:
        """Whether the timer has been started and not yet stopped."""
        return self._started_at is not None

    def start(self) -> None:
        """Start timing; raises TimerError if already running."""
        if self._started_at is not None:
            raise TimerError("timer already started")
        self._started_at = self._clock()

    def stop(self) -> float:
        """Stop timing and return the elapsed milliseconds; raises TimerError if not running."""
        if self._started_at is None:
            raise TimerError("timer not started")
        end = self._clock()
        self._elapsed_ms = (end - self._started_at) * 1000.0
        self._started_at = None
        return self._elapsed_ms

    def elapsed_ms(self) -> float:
        """Milliseconds taken by the last completed start/stop pair."""
        return self._elapsed_ms


class ProfileRegistry:
    """A mapping from operation names to their :class:`ProfileData`, created on demand."""

    def __init__(self, clock: Clock = time.perf_counter) -> None:
        self.clock = clock
        self._data: dict[str, ProfileData] = {}

    def __getitem__(self, key: str) -> ProfileData:
        data = self._data.get(key)
        if data is None:
            data = self._data[key] = ProfileData()
        return data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        """Remove every recorded operation."""
        self._data.clear()

    @contextmanager
    def scope(self, key: str) -> Iterator[Timer]:
        """Time the enclosed block and record it under ``key``, even if it raises."""
        timer = Timer(self.clock)
        timer.start()
        try:
            yield timer
        finally:
            self[key].add_time(timer.stop())


class ProfileHelper:
    """Accumulates the time of several calls and records the total under one key on exit."""

    def __init__(self, registry: ProfileRegistry, key: str) -> None:
        self._registry = registry
        self._key = key
        self._timer = Timer(registry.clock)
        self._total = 0.0

    def call(self, func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        """Call ``func`` with the given arguments, adding its duration to the total."""
        self._timer.start()
        try:
            return func(*args, **kwargs)
        finally:
            self._total += self._timer.stop()

    def begin(self) -> None:
        """Start timing a manually delimited section."""
        self._timer.start()

    def end(self) -> None:
        """Finish the section started by :meth:`begin` and add it to the total."""
        self._total += self._timer.stop()

    def total_time(self) -> float:
        """Milliseconds accumulated so far."""
        return self._total

    def __enter__(self) -> ProfileHelper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._registry[self._key].add_time(self._total)