# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""UTC leap-second table and the TAI <-> UTC mappings built on it.

TAI values are integer microseconds since 1958-01-01T00:00:00 TAI. UTC is
expressed either as Unix microseconds (since 1970-01-01T00:00:00Z) or as
microseconds since 1958-01-01T00:00:00 on the UTC scale. The table is only
defined from 1972-01-01T00:00:00Z on, when TAI-UTC became an integral
number of seconds (10 s).
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

from flightdyn.domain.errors import FormatError, RangeError

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #

LEAP_1972: int = 10
"""TAI-UTC in seconds on 1972-01-01."""

MS_1958_UNIX: int = -((1970 - 1958) * 365 + 3) * 86400 * 1000
"""Unix milliseconds of 1958-01-01T00:00:00."""

MS_1972_UNIX: int = 2 * 365 * 86400 * 1000
"""Unix milliseconds of 1972-01-01T00:00:00Z."""

US_1958_UNIX: int = MS_1958_UNIX * 1000

US_1972_UNIX: int = MS_1972_UNIX * 1000

TAI_1972: int = (MS_1972_UNIX - MS_1958_UNIX + LEAP_1972 * 1000) * 1000
"""TAI microseconds of 1972-01-01T00:00:00Z."""

_US_PER_S = 1_000_000

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# --------------------------------------------------------------------------- #
# Table
# --------------------------------------------------------------------------- #

def _month_to_unix_ms(month: str, source: str, line: Optional[int]) -> int:
    try:
        year_text, month_text = month.split("-")
        start = datetime(int(year_text), int(month_text), 1, tzinfo=timezone.utc)
    except ValueError as exc:
        raise FormatError(
            f"Invalid leap-second month {month!r}, expected yyyy-mm",
            source=source, line=line,
        ) from exc
    delta = start - _UNIX_EPOCH
    return (delta.days * 86400 + delta.seconds) * 1000


class LeapSecondTable:
    """Leap seconds inserted into UTC since 1972.

    Each entry is the TAI microsecond value at which a new TAI-UTC offset
    becomes effective, i.e. the end of the inserted 23:59:60 second.

    Args:
        months: ``"yyyy-mm"`` strings naming the month that starts right
            after each leap second, in ascending order.
        source: Label used in error messages.
    """

    def __init__(self, months: Iterable[str], source: str = "<table>") -> None:
        entries: list[int] = []
        for i, month in enumerate(months):
            unix_ms = _month_to_unix_ms(month, source, i + 1)
            tai = (unix_ms + (i + 1 + LEAP_1972) * 1000 - MS_1958_UNIX) * 1000
            if entries and tai <= entries[-1]:
                raise FormatError(
                    f"Leap-second months not ascending at {month!r}",
                    source=source, line=i + 1,
                )
            entries.append(tai)
        self._entries: tuple[int, ...] = tuple(entries)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "LeapSecondTable":
        """Load a table from a JSON file.

        Args:
            path: JSON file with an ``entries`` list of ``{"month": ...}``
                objects. Defaults to the bundled table, which is cached.

        Returns:
            The leap-second table.
        """
        if path is None:
            return default_table()
        return cls._read(Path(path))

    @classmethod
    def _read(cls, path: Path) -> "LeapSecondTable":
        with open(path) as f:
            data = json.load(f)
        try:
            entries = data["entries"]
            months = [entry["month"] for entry in entries]
        except (KeyError, TypeError) as exc:
            raise FormatError(
                "Leap-second file must hold an 'entries' list of months",
                source=str(path),
            ) from exc
        table = cls(months, source=str(path))
        for i, entry in enumerate(entries):
            expected = LEAP_1972 + i + 1
            if "tai_utc" in entry and int(entry["tai_utc"]) != expected:
                raise FormatError(
                    f"TAI-UTC for {entry['month']} is {entry['tai_utc']}, "
                    f"expected {expected}",
                    source=str(path), line=i + 1,
                )
        logger.debug("Loaded %d leap seconds from %s", len(table), path)
        return table

    @property
    def entries(self) -> Sequence[int]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------- #
    # Queries on TAI
    # ------------------------------------------------------------------- #

    @staticmethod
    def check_tai(tai: int) -> None:
        """Raise RangeError if ``tai`` precedes 1972-01-01T00:00:00Z."""
        if tai < TAI_1972:
            raise RangeError(
                f"Time {tai} precedes 1972-01-01T00:00:00Z, "
                "leap seconds are undefined",
                value=tai,
            )

    def is_leap_second(self, tai: int) -> bool:
        """Return True if ``tai`` falls inside an inserted 23:59:60 second."""
        self.check_tai(tai)
        next_second = tai // _US_PER_S + 1
        return any(next_second == entry // _US_PER_S for entry in self._entries)

    def leap_seconds(self, tai: int) -> int:
        """Return TAI-UTC in whole seconds at ``tai``."""
        self.check_tai(tai)
        i = len(self._entries)
        while i > 0 and tai < self._entries[i - 1]:
            i -= 1
        return LEAP_1972 + i

    # ------------------------------------------------------------------- #
    # Conversions
    # ------------------------------------------------------------------- #

    def tai_to_unix(self, tai: int, freeze: bool = False) -> int:
        """Convert TAI microseconds to Unix microseconds.

        During a leap second the Unix value runs on into the following
        second. With ``freeze`` it stays at the start of that second instead,
        so the whole leap second aliases onto the following midnight.
        """
        self.check_tai(tai)
        tai_seconds = tai // _US_PER_S
        is_leap = False
        i = len(self._entries)
        while i > 0 and tai < self._entries[i - 1]:
            if tai_seconds + 1 == self._entries[i - 1] // _US_PER_S:
                is_leap = True
            i -= 1
        if freeze and is_leap:
            tai = tai_seconds * _US_PER_S
        return tai + US_1958_UNIX - (LEAP_1972 + i) * _US_PER_S

    def unix_to_tai(self, unix: int) -> int:
        """Convert Unix microseconds to TAI microseconds."""
        if unix < US_1972_UNIX:
            raise RangeError(
                f"Unix time {unix} precedes 1972-01-01T00:00:00Z, "
                "leap seconds are undefined",
                value=unix,
            )
        n = len(self._entries)
        tai = unix - US_1958_UNIX + _US_PER_S * (LEAP_1972 + n)
        for i in range(n, 0, -1):
            if tai < self._entries[i - 1]:
                tai -= _US_PER_S
        return tai

    def tai_to_utc(self, tai: int) -> int:
        """Convert TAI to UTC microseconds since 1958, freezing leap seconds."""
        return self.tai_to_unix(tai, True) - US_1958_UNIX

    def utc_to_tai(self, utc: int) -> int:
        """Convert UTC microseconds since 1958 to TAI microseconds."""
        return self.unix_to_tai(utc + US_1958_UNIX)


# --------------------------------------------------------------------------- #
# Bundled table
# --------------------------------------------------------------------------- #

_DEFAULT_TABLE: Optional[LeapSecondTable] = None


def default_table() -> LeapSecondTable:
    """Load and cache the leap-second table from bundled JSON."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is not None:
        return _DEFAULT_TABLE

    data_path = Path(__file__).parent.parent / "data" / "leap_seconds.json"
    _DEFAULT_TABLE = LeapSecondTable._read(data_path)
    return _DEFAULT_TABLE
