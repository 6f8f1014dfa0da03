# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Proleptic Gregorian calendar fields for 1958-based microsecond counts.

With leap seconds enabled the count is TAI and the fields are UTC, so the
inserted second shows up as second 60. Without them the count is read
directly as a uniform scale (TAI, TT, TDB).
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from flightdyn.domain.errors import ArgumentError
from flightdyn.domain.leap_seconds import LeapSecondTable, MS_1958_UNIX, default_table

_US_PER_S = 1_000_000
_S_1958_UNIX = MS_1958_UNIX // 1000


class CivilFields(NamedTuple):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: int = 0


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date.

    Days beyond the end of the month roll over into the next one.
    """
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of :func:`days_from_civil`."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def to_fields(
    value: int,
    leap_seconds: bool = False,
    table: Optional[LeapSecondTable] = None,
) -> CivilFields:
    """Split a microsecond count into calendar fields.

    Args:
        value: Microseconds since 1958-01-01T00:00:00 on the scale.
        leap_seconds: Treat ``value`` as TAI and produce UTC fields.
        table: Leap-second table, the bundled one by default.
    """
    seconds = value // _US_PER_S
    micro = value % _US_PER_S
    is_leap = False
    if leap_seconds:
        table = table or default_table()
        if table.is_leap_second(seconds * _US_PER_S):
            seconds -= 1
            is_leap = True
        seconds -= table.leap_seconds(seconds * _US_PER_S)

    days, second_of_day = divmod(seconds + _S_1958_UNIX, 86400)
    year, month, day = civil_from_days(days)
    hour, rest = divmod(second_of_day, 3600)
    minute, second = divmod(rest, 60)
    if is_leap:
        second += 1
    return CivilFields(year, month, day, hour, minute, second, micro)


def _check(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ArgumentError(f"{name} {value} outside [{low}, {high}]")


def from_fields(
    fields: CivilFields | tuple,
    leap_seconds: bool = False,
    table: Optional[LeapSecondTable] = None,
) -> int:
    """Combine calendar fields into a 1958-based microsecond count.

    Raises:
        ArgumentError: If a field is out of range. Second 60 is only valid
            with ``leap_seconds``.
    """
    year, month, day, hour, minute, second, micro = CivilFields(*fields)
    _check("Month", month, 1, 12)
    _check("Day", day, 1, 31)
    _check("Hour", hour, 0, 23)
    _check("Minute", minute, 0, 59)
    _check("Second", second, 0, 60 if leap_seconds else 59)
    _check("Microsecond", micro, 0, _US_PER_S - 1)

    extra = 0
    if second == 60:
        second = 59
        extra = _US_PER_S
    unix_seconds = (days_from_civil(year, month, day) * 86400
                    + hour * 3600 + minute * 60 + second)
    if leap_seconds:
        table = table or default_table()
        value = table.unix_to_tai(unix_seconds * _US_PER_S + micro)
    else:
        value = (unix_seconds - _S_1958_UNIX) * _US_PER_S + micro
    return value + extra
