# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Text and day-count representations of AtomicTime.

SimpleTimeFormat reads and writes ISO-like calendar strings
(``2010-01-15T00:00:00.250 TDB``, ``1993-06-30T23:59:60Z``). MjdTimeFormat
and Mjd2000TimeFormat map times onto fractional day counts. Every format
is immutable and bound to one TimeScale; precision settings travel in a
TimeFormatConfig rather than in shared state.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.calendar import CivilFields, from_fields, to_fields
from flightdyn.domain.errors import ArgumentError, FormatError
from flightdyn.domain.leap_seconds import LeapSecondTable, default_table
from flightdyn.domain.time_scales import TimeScale

_US_PER_S = 1_000_000
_US_PER_DAY = 86_400_000_000

MJD_1958: int = 36204
"""Modified Julian Date of 1958-01-01."""

MJD2000_1958: int = -15340
"""MJD2000 day number of 1958-01-01."""

_DATE_TIME = r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"


# --------------------------------------------------------------------------- #
# Calendar strings
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class TimeFormatConfig:
    """Precision settings for SimpleTimeFormat.

    Attributes:
        decimals: Number of fractional-second digits written, 0 to 6.
        rounding: Round to ``decimals`` instead of truncating.
        strict_fraction: When parsing, require exactly ``decimals`` digits
            (and no fraction at all when ``decimals`` is 0).
    """
    decimals: int = 0
    rounding: bool = False
    strict_fraction: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.decimals <= 6:
            raise ArgumentError(
                f"Number of decimals must be between 0 and 6, got {self.decimals}"
            )


def round_decimals(value: int, decimals: int) -> int:
    """Round a microsecond count to ``decimals`` fractional-second digits."""
    if decimals >= 6:
        return value
    factor = 1
    for _ in range(decimals, 5):
        value //= 10
        factor *= 10
    return ((value + 5) // 10) * 10 * factor


class SimpleTimeFormat:
    """Calendar-string format for one time scale.

    Args:
        scale: Scale the fields are expressed in. UTC strings may carry
            second 60 and end in ``Z``, the others end in `` <SCALE>``.
        config: Precision settings.
        table: Leap-second table for UTC, the bundled one by default.
    """

    def __init__(
        self,
        scale: TimeScale = TimeScale.TAI,
        config: Optional[TimeFormatConfig] = None,
        table: Optional[LeapSecondTable] = None,
    ) -> None:
        self._scale = scale
        self._config = config or TimeFormatConfig()
        self._table = table
        self._pattern = re.compile(_DATE_TIME + self._fraction_pattern())

    @property
    def scale(self) -> TimeScale:
        return self._scale

    @property
    def config(self) -> TimeFormatConfig:
        return self._config

    def with_config(self, **changes) -> SimpleTimeFormat:
        """Return a copy with some precision settings replaced."""
        return SimpleTimeFormat(
            self._scale, replace(self._config, **changes), self._table,
        )

    def _fraction_pattern(self) -> str:
        decimals = self._config.decimals
        if not self._config.strict_fraction:
            return r"(?:\.(\d{1,6}))?"
        if decimals == 0:
            return ""
        return r"\.(\d{%d})" % decimals

    def _suffix(self) -> str:
        if self._scale is TimeScale.UTC:
            return self._scale.suffix
        return " " + self._scale.suffix

    def format(self, t: AtomicTime) -> str:
        decimals = self._config.decimals
        value = self._scale.tai_to_scale(t.microseconds_since_1958)
        if self._config.rounding:
            value = round_decimals(value, decimals)
        f = to_fields(value, self._scale.has_leap_seconds, self._table)
        text = (f"{f.year:04d}-{f.month:02d}-{f.day:02d}"
                f"T{f.hour:02d}:{f.minute:02d}:{f.second:02d}")
        if decimals > 0:
            fraction = (value % _US_PER_S) // 10 ** (6 - decimals)
            text += "." + str(fraction).zfill(decimals)
        return text + self._suffix()

    def parse(self, text: str) -> AtomicTime:
        """Parse a calendar string on this scale.

        Raises:
            FormatError: If the suffix, layout or any field is invalid.
        """
        suffix = self._scale.suffix
        stripped = text.strip()
        if not stripped.endswith(suffix):
            raise FormatError(
                f"Time {text!r} does not end with time scale {suffix!r}"
            )
        body = stripped[: -len(suffix)].strip()
        match = self._pattern.fullmatch(body)
        if match is None:
            raise FormatError(f"Time {text!r} does not match yyyy-mm-ddThh:mm:ss")
        groups = match.groups()
        fraction = groups[6] if len(groups) > 6 and groups[6] else ""
        fields = CivilFields(*(int(g) for g in groups[:6]),
                             int(fraction.ljust(6, "0")) if fraction else 0)
        try:
            value = from_fields(fields, self._scale.has_leap_seconds, self._table)
        except ArgumentError as exc:
            raise FormatError(f"Invalid time {text!r}: {exc}") from exc
        return AtomicTime(self._scale.scale_to_tai(value))


# --------------------------------------------------------------------------- #
# Day counts
# --------------------------------------------------------------------------- #

class _DayCountFormat:
    """Fractional day count on a scale, zero at ``-_epoch_day`` after 1958."""

    _epoch_day: int = 0

    def __init__(
        self,
        scale: TimeScale = TimeScale.TAI,
        table: Optional[LeapSecondTable] = None,
    ) -> None:
        self._scale = scale
        self._table = table

    @property
    def scale(self) -> TimeScale:
        return self._scale

    def _leap_table(self) -> LeapSecondTable:
        return self._table or default_table()

    def to_value(self, t: AtomicTime) -> float:
        tai = t.microseconds_since_1958
        if self._scale.has_leap_seconds:
            table = self._leap_table()
            leap = table.leap_seconds(tai)
            if table.is_leap_second(tai):
                tai = (tai // _US_PER_S) * _US_PER_S
            value = tai - leap * _US_PER_S
        else:
            value = self._scale.tai_to_scale(tai)
        return (value + self._epoch_day * _US_PER_DAY) / _US_PER_DAY

    def from_value(self, days: float) -> AtomicTime:
        value = int((days - self._epoch_day) * _US_PER_DAY)
        if self._scale.has_leap_seconds:
            return AtomicTime(self._leap_table().utc_to_tai(value))
        return AtomicTime(self._scale.scale_to_tai(value))

    def format(self, t: AtomicTime) -> str:
        return repr(self.to_value(t))

    def parse(self, text: str) -> AtomicTime:
        try:
            days = float(text.strip())
        except ValueError as exc:
            raise FormatError(f"Invalid day count {text!r}") from exc
        return self.from_value(days)


class MjdTimeFormat(_DayCountFormat):
    """Modified Julian Date (days since 1858-11-17T00:00:00)."""

    _epoch_day = MJD_1958


class Mjd2000TimeFormat(_DayCountFormat):
    """Days since 2000-01-01T00:00:00 on the scale."""

    _epoch_day = MJD2000_1958
