# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""CCSDS Unsegmented time Code (CUC) with 4 coarse and 2 fine octets.

CUC times count 1/65536 s ticks from an agency epoch (TAI 1958 by default).
They are not exact multiples of a microsecond, so conversions round to the
nearest tick or microsecond. Since a microsecond is shorter than half a
tick, ``coarse(to_atomic(c, f)) == c`` and ``fine(to_atomic(c, f)) == f``
hold for every valid pair.

Reference: CCSDS 301.0-B-4 (Time Code Formats).
"""
from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.errors import ArgumentError

FINE_BITS = 16
COARSE_BITS = 32

FINE_MOD = 1 << FINE_BITS
COARSE_MOD = 1 << COARSE_BITS
CUC_MOD = 1 << (COARSE_BITS + FINE_BITS)

_RESOLUTION = 1_000_000


class CucConverter:
    """Convert between AtomicTime and CUC coarse/fine fields.

    Args:
        epoch: Epoch of the CUC count in microseconds since 1958 TAI.
    """

    def __init__(self, epoch: int = 0) -> None:
        self._epoch = epoch

    @property
    def epoch(self) -> int:
        return self._epoch

    @staticmethod
    def to_microseconds(cuc: int) -> int:
        """Microseconds since the epoch for a 48-bit CUC value."""
        coarse, fine = divmod(cuc, FINE_MOD)
        return coarse * _RESOLUTION + (fine * _RESOLUTION + FINE_MOD // 2) // FINE_MOD

    def to_atomic(self, coarse: int, fine: int) -> AtomicTime:
        """Build a time from coarse seconds and fine ticks.

        Raises:
            ArgumentError: If ``coarse`` is outside [0, 2^32) or ``fine``
                outside [0, 2^16).
        """
        if not (0 <= coarse < COARSE_MOD and 0 <= fine < FINE_MOD):
            raise ArgumentError(f"Invalid CUC fields coarse={coarse} fine={fine}")
        us = coarse * _RESOLUTION + (fine * _RESOLUTION + FINE_MOD // 2) // FINE_MOD
        return AtomicTime(us + self._epoch)

    def to_atomic_cuc(self, cuc: int) -> AtomicTime:
        if not 0 <= cuc < CUC_MOD:
            raise ArgumentError(f"Invalid CUC value {cuc}")
        coarse, fine = divmod(cuc, FINE_MOD)
        return self.to_atomic(coarse, fine)

    def _since_epoch(self, t: AtomicTime) -> int:
        us = t.microseconds_since_1958 - self._epoch
        if us < 0:
            raise ArgumentError(f"Time {t.microseconds_since_1958} before CUC epoch")
        return us

    def _ticks(self, t: AtomicTime) -> int:
        return (self._since_epoch(t) * FINE_MOD + _RESOLUTION // 2) // _RESOLUTION

    def coarse(self, t: AtomicTime) -> int:
        """Whole seconds since the epoch, after rounding to the nearest tick."""
        return self._ticks(t) // FINE_MOD

    def fine(self, t: AtomicTime) -> int:
        """Fractional second in 1/65536 s ticks, rounded to nearest.

        A fraction within half a tick of the next second carries into
        :meth:`coarse` and gives 0.
        """
        return self._ticks(t) % FINE_MOD

    def cuc_value(self, t: AtomicTime) -> int:
        return self._ticks(t)
