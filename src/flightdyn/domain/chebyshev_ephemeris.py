# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""JPL DE405 planetary ephemeris from Chebyshev coefficient blocks.

The ASCII ``ascp`` files hold consecutive 32-day blocks. Each block starts
with its number and coefficient count (1018), then the start and end Julian
Dates (TDB), then the coefficients. Only the first 816 coefficients (the
planets, Moon and Sun) are used.

Times are MJD2000 TDB (JD - 2451544.5). Positions are km and velocities
km/s, in the ICRF.

References:
    Newhall, X X (1989). "Numerical Representation of Planetary Ephemerides."
    JPL DE405 header (GROUP 1050 layout table).
"""
from __future__ import annotations

import math
from typing import Iterable, Iterator, Sequence

import numpy as np

from flightdyn.domain.errors import ArgumentError, FormatError, RangeError
from flightdyn.domain.state import Body, State

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #

JD_MJD2000: float = 2451544.5
"""Julian Date of MJD2000 day 0."""

EM_RATIO: float = 81.3005600000000044
"""Earth mass / Moon mass."""

DAYS_PER_BLOCK: int = 32

BLOCK_SIZE: int = 1018
"""Coefficient count of a DE405 block."""

VALUES_USED: int = 816

_SECONDS_PER_DAY = 86400

# Layout per internal body 1..13 (GROUP 1050). Index 0 is unused; START
# counts from 1 and includes the two block times.
_START = (0, 3, 171, 231, 309, 342, 366, 387, 405, 423, 441, 753, 819, 899)
_NCOEFF = (0, 14, 10, 13, 11, 8, 7, 6, 6, 6, 13, 11, 10, 10)
_NSETS = (0, 4, 2, 2, 1, 1, 1, 1, 1, 1, 8, 2, 4, 4)

# Internal DE405 bodies used by the compositions below.
_EMB = 3
_MOON_GEO = 10


# --------------------------------------------------------------------------- #
# Block
# --------------------------------------------------------------------------- #

class ChebyshevBlock:
    """Coefficients of one 32-day DE405 block.

    Args:
        coefficients: The first 816 coefficients of the block.
        start: Block start, MJD2000 TDB.
        end: Block end, MJD2000 TDB.
    """

    def __init__(self, coefficients: Sequence[float], start: float, end: float) -> None:
        self._coeffs = np.asarray(coefficients, dtype=np.float64)
        self.start = start
        self.end = end

    def state(self, mjd2000: float, body: int) -> State:
        """Evaluate the series of internal body ``body`` (1..13) at a time."""
        ncoeff = _NCOEFF[body]
        nsets = _NSETS[body]
        start = _START[body]

        offset = mjd2000 - self.start
        sub_length = DAYS_PER_BLOCK // nsets
        subinterval = min(int(math.floor(offset) / sub_length), nsets - 1)
        x = 2.0 * (offset - subinterval * sub_length) / sub_length - 1.0
        first = (start - 3) + subinterval * 3 * ncoeff

        pc = np.zeros(ncoeff)
        vc = np.zeros(ncoeff)
        pc[0] = 1.0
        pc[1] = x
        vc[1] = 1.0
        if ncoeff > 2:
            vc[2] = 4.0 * x
        for j in range(2, ncoeff):
            pc[j] = 2.0 * x * pc[j - 1] - pc[j - 2]
        for j in range(3, ncoeff):
            vc[j] = 2.0 * x * vc[j - 1] + 2.0 * pc[j - 1] - vc[j - 2]

        coeffs = self._coeffs[first:first + 3 * ncoeff].reshape(3, ncoeff)
        deriv_scale = nsets * 2.0 / DAYS_PER_BLOCK / _SECONDS_PER_DAY
        position = coeffs @ pc
        velocity = (coeffs @ vc) * deriv_scale
        return State.from_vectors(position, velocity)


# --------------------------------------------------------------------------- #
# Parsing
# --------------------------------------------------------------------------- #

class _Tokens:
    """Whitespace-separated tokens of a text, tracking their line numbers."""

    def __init__(self, lines: Iterable[str], source: str) -> None:
        self._source = source
        self._iter = self._generate(lines)
        self.line = 0
        self._peeked: tuple[int, str] | None = None

    @staticmethod
    def _generate(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
        for number, line in enumerate(lines, start=1):
            for token in line.split():
                yield number, token

    def has_next(self) -> bool:
        if self._peeked is None:
            self._peeked = next(self._iter, None)
        return self._peeked is not None

    def next(self) -> str:
        if not self.has_next():
            raise FormatError("Unexpected end of data", self._source, self.line)
        self.line, token = self._peeked
        self._peeked = None
        return token

    def next_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError as exc:
            raise FormatError(f"Invalid integer {token!r}", self._source, self.line) from exc

    def next_float(self) -> float:
        """Next number, accepting Fortran ``D`` exponents."""
        token = self.next()
        try:
            return float(token.replace("D", "E").replace("d", "e"))
        except ValueError as exc:
            raise FormatError(f"Invalid number {token!r}", self._source, self.line) from exc

    def skip(self, n: int) -> None:
        for _ in range(n):
            self.next()


def parse_blocks(lines: Iterable[str], source: str = "<stream>") -> list[ChebyshevBlock]:
    """Parse DE405 ASCII blocks.

    Raises:
        FormatError: On a wrong block size, non-contiguous blocks, a bad
            number or truncated data.
    """
    tokens = _Tokens(lines, source)
    blocks: list[ChebyshevBlock] = []
    while tokens.has_next():
        tokens.next_int()  # block number
        size = tokens.next_int()
        if size != BLOCK_SIZE:
            raise FormatError(f"Invalid block size {size}", source, tokens.line)
        start = tokens.next_float() - JD_MJD2000
        end = tokens.next_float() - JD_MJD2000
        if blocks and start != blocks[-1].end:
            raise FormatError("Block time intervals not contiguous", source, tokens.line)
        values = [tokens.next_float() for _ in range(VALUES_USED)]
        tokens.skip(BLOCK_SIZE - VALUES_USED)
        blocks.append(ChebyshevBlock(values, start, end))
    if not blocks:
        raise FormatError("No ephemeris blocks found", source)
    return blocks


# --------------------------------------------------------------------------- #
# Store
# --------------------------------------------------------------------------- #

class ChebyshevEphemerisStore:
    """Barycentric and geocentric planetary states from DE405 blocks.

    Implements the PlanetaryEphemeris port.
    """

    def __init__(self, blocks: Sequence[ChebyshevBlock]) -> None:
        if not blocks:
            raise ArgumentError("At least one ephemeris block is required")
        self._blocks = list(blocks)

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: str = "<stream>") -> ChebyshevEphemerisStore:
        return cls(parse_blocks(lines, source))

    @classmethod
    def from_text(cls, text: str, source: str = "<string>") -> ChebyshevEphemerisStore:
        return cls(parse_blocks(text.splitlines(), source))

    @property
    def start_time(self) -> float:
        return self._blocks[0].start

    @property
    def end_time(self) -> float:
        return self._blocks[-1].end

    def __len__(self) -> int:
        return len(self._blocks)

    def _state(self, tdb: float, body: int) -> State:
        index = int(math.floor((tdb - self.start_time) / DAYS_PER_BLOCK))
        if index == len(self._blocks) and tdb == self.end_time:
            index -= 1
        if not 0 <= index < len(self._blocks):
            raise RangeError(
                f"Time {tdb} outside ephemeris range "
                f"[{self.start_time}, {self.end_time}]",
                value=tdb,
            )
        return self._blocks[index].state(tdb, body)

    def _bary_earth(self, tdb: float) -> State:
        f = 1.0 / (1.0 + EM_RATIO)
        return self._state(tdb, _EMB) - self._state(tdb, _MOON_GEO) * f

    @staticmethod
    def _check_body(body: int) -> Body:
        try:
            body = Body(body)
        except ValueError as exc:
            raise ArgumentError(f"Unknown body {body}") from exc
        if body is Body.SPACECRAFT:
            raise ArgumentError("Planetary ephemeris has no spacecraft state")
        return body

    def barycentric_state(self, tdb: float, body: int) -> State:
        """State relative to the solar-system barycentre.

        Args:
            tdb: Time, MJD2000 TDB.
            body: Body number (see Body), not SPACECRAFT.
        """
        body = self._check_body(body)
        if body is Body.EARTH:
            return self._bary_earth(tdb)
        if body is Body.MOON:
            return self._bary_earth(tdb) + self._state(tdb, _MOON_GEO)
        if body is Body.EM_BARY:
            return self._state(tdb, _EMB)
        if body is Body.SS_BARY:
            return State.zero()
        return self._state(tdb, int(body))

    def geocentric_state(self, tdb: float, body: int) -> State:
        """State relative to the centre of the Earth."""
        body = self._check_body(body)
        if body is Body.EARTH:
            return State.zero()
        if body is Body.MOON:
            return self._state(tdb, _MOON_GEO)
        if body is Body.EM_BARY:
            return self._state(tdb, _MOON_GEO) * (1.0 / (1.0 + EM_RATIO))
        if body is Body.SS_BARY:
            return -self._bary_earth(tdb)
        return self.barycentric_state(tdb, body) - self._bary_earth(tdb)
