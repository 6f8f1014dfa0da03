# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Half-open time interval ``[start, start + duration)``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.errors import ArgumentError


@dataclass(frozen=True)
class TimeInterval:
    """Interval starting at ``start`` and lasting ``duration`` microseconds.

    The start is included and the finish is excluded.

    Raises:
        ArgumentError: If ``duration`` is negative.
    """
    start: AtomicTime
    duration: int

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ArgumentError(f"Negative duration {self.duration}")

    @classmethod
    def between(cls, start: AtomicTime, stop: AtomicTime) -> TimeInterval:
        """Interval from ``start`` up to (excluding) ``stop``."""
        if stop.before(start):
            raise ArgumentError(f"Stop {stop} before start {start}")
        return cls(start, stop.subtract(start))

    @property
    def finish(self) -> AtomicTime:
        return self.start.add(self.duration)

    def is_null(self) -> bool:
        return self.duration <= 0

    def contains(self, t: AtomicTime) -> bool:
        return t.at_or_after(self.start) and t.before(self.finish)

    def contains_interval(self, other: TimeInterval) -> bool:
        """True if ``other`` starts inside this interval and ends within it.

        A zero-length interval at the start is contained, one at the finish
        is not.
        """
        return (self.contains(other.start)
                and self.finish.at_or_after(other.finish)
                and other.duration >= 0)

    def __contains__(self, item) -> bool:
        if isinstance(item, TimeInterval):
            return self.contains_interval(item)
        return self.contains(item)

    def starts_before(self, other: TimeInterval) -> bool:
        return self.start.before(other.start)

    def starts_at_or_before(self, other: TimeInterval) -> bool:
        return self.start.at_or_before(other.start)

    def starts_after(self, other: TimeInterval) -> bool:
        return self.start.after(other.start)

    def starts_at_or_after(self, other: TimeInterval) -> bool:
        return self.start.at_or_after(other.start)

    def compare_start_to(self, other: TimeInterval) -> int:
        return self.start.compare_to(other.start)

    def intersection(self, other: TimeInterval) -> Optional[TimeInterval]:
        """Common part of both intervals, or None if they are apart.

        Abutting intervals intersect in a zero-length interval.
        """
        start = self.start.latest(other.start)
        finish = self.finish.earliest(other.finish)
        if start.after(finish):
            return None
        return TimeInterval.between(start, finish)

    def __str__(self) -> str:
        return f"{self.start} to {self.finish}"
