# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tabulated ephemeris blocks and ordered sets of them.

A block is one contiguous table of samples with its interpolator (one OEM
segment, or one Horizons file). An EphemerisSet chains blocks and finds
the one covering a query time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

from flightdyn.domain.errors import RangeError
from flightdyn.domain.interpolation import Interpolator, make_interpolator
from flightdyn.domain.state import State


@dataclass(frozen=True)
class EphemerisRecord:
    """One tabulated sample: time (MJD2000 TDB) and state."""
    tdb: float
    state: State

    @property
    def position(self) -> np.ndarray:
        return self.state.position


class TabulatedBlock:
    """Samples of one ephemeris segment with their interpolator.

    Args:
        x: Sample times, MJD2000 TDB, non-decreasing.
        fs: States, shape (6, N), km and km/s.
        method: ``"HERMITE"`` or ``"LAGRANGE"``.
        degree: Interpolation degree.
        start: Start of the usable span, the first sample by default.
        end: End of the usable span, the last sample by default.
    """

    def __init__(
        self,
        x: Sequence[float],
        fs,
        method: str,
        degree: int,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> None:
        self._interpolator: Interpolator = make_interpolator(method, x, fs, degree)
        self._x = np.asarray(x, dtype=np.float64)
        self._fs = np.asarray(fs, dtype=np.float64)
        self.method = method.upper()
        self.degree = degree
        self.start_time = float(self._x[0]) if start is None else start
        self.end_time = float(self._x[-1]) if end is None else end

    @property
    def sample_count(self) -> int:
        return self._interpolator.sample_count

    def contains(self, tdb: float) -> bool:
        """True if ``tdb`` lies within the tabulated samples."""
        return self._interpolator.contains(tdb)

    def interpolate(self, tdb: float) -> State:
        return self._interpolator.interpolate(tdb)

    def __iter__(self) -> Iterator[EphemerisRecord]:
        for i in range(len(self._x)):
            yield EphemerisRecord(float(self._x[i]), State.from_array(self._fs[:, i]))

    def __len__(self) -> int:
        return len(self._x)


class EphemerisSet:
    """Ordered chain of tabulated blocks.

    The last block used is remembered, so runs of queries in one block
    skip the search.
    """

    def __init__(self, blocks: Sequence[TabulatedBlock] = ()) -> None:
        self._blocks: list[TabulatedBlock] = []
        self._current: Optional[TabulatedBlock] = None
        for block in blocks:
            self.add_block(block)

    def add_block(self, block: TabulatedBlock) -> None:
        self._blocks.append(block)

    @property
    def blocks(self) -> Sequence[TabulatedBlock]:
        return tuple(self._blocks)

    @property
    def start_time(self) -> float:
        return self._blocks[0].start_time

    @property
    def end_time(self) -> float:
        return self._blocks[-1].end_time

    def contains(self, tdb: float) -> bool:
        return bool(self._blocks) and self.start_time <= tdb <= self.end_time

    def interpolate(self, tdb: float) -> State:
        """State at ``tdb`` (MJD2000 TDB).

        Raises:
            RangeError: If no block covers ``tdb``.
        """
        block = self._current
        if block is not None and block.contains(tdb):
            return block.interpolate(tdb)

        lower = 0
        upper = len(self._blocks) - 1
        while lower <= upper:
            mid = (lower + upper) // 2
            block = self._blocks[mid]
            if block.start_time > tdb:
                upper = mid - 1
            elif block.end_time < tdb:
                lower = mid + 1
            elif block.contains(tdb):
                self._current = block
                return block.interpolate(tdb)
            else:
                break
        raise RangeError(f"Time not covered by orbit file: {tdb}", value=tdb)

    def records(self) -> Iterator[EphemerisRecord]:
        for block in self._blocks:
            yield from block

    def __len__(self) -> int:
        return len(self._blocks)
