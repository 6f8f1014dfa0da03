# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
TimeConstraint: an ordered union of half-open time intervals.

Constraints describe availability windows (visibility, ephemeris coverage,
planning restrictions). They are immutable; the set operations build new
constraints with a single sweep over the interval boundaries of both
operands. Results are ascending and never overlap or touch.
"""
from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, Union

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.time_interval import TimeInterval

_FAR = (2**63 - 1) // 2


class TimeConstraint:
    """Ordered collection of disjoint time intervals.

    Args:
        intervals: Interval or intervals in ascending order. Callers that
            build constraints from raw intervals are responsible for the
            ordering; the set operations always produce canonical results.
    """

    def __init__(
        self, intervals: Union[TimeInterval, Iterable[TimeInterval], None] = None,
    ) -> None:
        if intervals is None:
            self._intervals: tuple[TimeInterval, ...] = ()
        elif isinstance(intervals, TimeInterval):
            self._intervals = (intervals,)
        else:
            self._intervals = tuple(intervals)

    @classmethod
    def between(cls, start: AtomicTime, finish: AtomicTime) -> TimeConstraint:
        return cls(TimeInterval.between(start, finish))

    @classmethod
    def of_duration(cls, start: AtomicTime, duration: int) -> TimeConstraint:
        return cls(TimeInterval(start, duration))

    # ------------------------------------------------------------------- #
    # Container protocol
    # ------------------------------------------------------------------- #

    def __iter__(self) -> Iterator[TimeInterval]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeConstraint):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __repr__(self) -> str:
        body = ", ".join(
            f"[{i.start.microseconds_since_1958}, {i.finish.microseconds_since_1958})"
            for i in self._intervals
        )
        return f"TimeConstraint({body})"

    def is_empty(self) -> bool:
        return not self._intervals

    # ------------------------------------------------------------------- #
    # Membership
    # ------------------------------------------------------------------- #

    def contains(self, t: AtomicTime) -> bool:
        return any(interval.contains(t) for interval in self._intervals)

    def contains_interval(self, interval: TimeInterval) -> bool:
        """True if a single member interval covers ``interval``."""
        return any(member.contains_interval(interval) for member in self._intervals)

    def contains_span(self, start: AtomicTime, duration: int) -> bool:
        return self.contains_interval(TimeInterval(start, duration))

    def contains_between(self, start: AtomicTime, finish: AtomicTime) -> bool:
        return self.contains_interval(TimeInterval.between(start, finish))

    def __contains__(self, item) -> bool:
        if isinstance(item, TimeInterval):
            return self.contains_interval(item)
        return self.contains(item)

    # ------------------------------------------------------------------- #
    # Placement queries
    # ------------------------------------------------------------------- #

    def earliest(self) -> Optional[AtomicTime]:
        return self._intervals[0].start if self._intervals else None

    def latest(self) -> Optional[AtomicTime]:
        return self._intervals[-1].finish if self._intervals else None

    def _fitting(self, duration: int) -> Iterator[TimeInterval]:
        return (i for i in self._intervals if i.duration >= duration)

    def earliest_for(self, duration: int) -> Optional[AtomicTime]:
        """Earliest start of a span of ``duration`` inside one member."""
        for interval in self._fitting(duration):
            return interval.start
        return None

    def latest_for(self, duration: int) -> Optional[AtomicTime]:
        """Latest start of a span of ``duration`` inside one member."""
        latest = None
        for interval in self._fitting(duration):
            latest = interval.finish.add(-duration)
        return latest

    def nearest_for(self, duration: int, t: AtomicTime) -> Optional[AtomicTime]:
        """Valid start for a span of ``duration`` closest to ``t``.

        Members are scanned in order; on equal distance the candidate found
        first is kept.
        """
        nearest = None
        dist = _FAR
        for interval in self._fitting(duration):
            start = interval.start
            finish = interval.finish.add(-duration)
            if t.at_or_after(start) and t.at_or_before(finish):
                return t
            if start.at_or_after(t) and start.subtract(t) < dist:
                nearest = start
                dist = start.subtract(t)
            if finish.at_or_before(t) and t.subtract(finish) < dist:
                nearest = finish
                dist = t.subtract(finish)
        return nearest

    def earliest_not_before(self, duration: int, t: AtomicTime) -> Optional[AtomicTime]:
        """Earliest valid start at or after ``t``."""
        for interval in self._fitting(duration):
            finish = interval.finish.add(-duration)
            if t.at_or_before(finish):
                return t if t.at_or_after(interval.start) else interval.start
        return None

    def latest_not_after(self, duration: int, t: AtomicTime) -> Optional[AtomicTime]:
        """Latest valid start at or before ``t``."""
        for interval in reversed(self._intervals):
            if interval.duration < duration:
                continue
            finish = interval.finish.add(-duration)
            if t.at_or_after(interval.start):
                return t if t.at_or_before(finish) else finish
        return None

    # ------------------------------------------------------------------- #
    # Set operations
    # ------------------------------------------------------------------- #

    def union(self, other: Union[TimeConstraint, TimeInterval]) -> TimeConstraint:
        return self._merge(other, lambda a, b: a or b)

    def intersection(self, other: Union[TimeConstraint, TimeInterval]) -> TimeConstraint:
        return self._merge(other, lambda a, b: a and b)

    def exclude(self, other: Union[TimeConstraint, TimeInterval]) -> TimeConstraint:
        return self._merge(other, lambda a, b: a and not b)

    def neither(self, other: Union[TimeConstraint, TimeInterval]) -> TimeConstraint:
        """Gaps covered by neither operand, between their first and last bounds."""
        return self._merge(other, lambda a, b: not a and not b)

    __or__ = union
    __and__ = intersection
    __sub__ = exclude

    def _merge(
        self,
        other: Union[TimeConstraint, TimeInterval],
        op: Callable[[bool, bool], bool],
    ) -> TimeConstraint:
        if isinstance(other, TimeInterval):
            other = TimeConstraint(other)
        events1 = _boundaries(self._intervals)
        events2 = _boundaries(other._intervals)
        t1 = next(events1, None)
        t2 = next(events2, None)
        s1 = s2 = out = False
        start = None
        result: list[TimeInterval] = []

        while t1 is not None or t2 is not None:
            if t1 is not None and (t2 is None or t1.before(t2)):
                s1 = not s1
                t = t1
                t1 = next(events1, None)
            elif t2 is not None and (t1 is None or t1.after(t2)):
                s2 = not s2
                t = t2
                t2 = next(events2, None)
            else:
                s1 = not s1
                s2 = not s2
                t = t2
                t1 = next(events1, None)
                t2 = next(events2, None)

            last_out = out
            out = op(s1, s2)
            if out and not last_out:
                start = t
            elif not out and last_out and t.after(start):
                result.append(TimeInterval.between(start, t))

        return TimeConstraint(result)


def _boundaries(intervals: Iterable[TimeInterval]) -> Iterator[AtomicTime]:
    """Alternating start and finish events of ordered intervals."""
    for interval in intervals:
        yield interval.start
        yield interval.finish
