# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Cursor over the significant lines of a text ephemeris file."""
from __future__ import annotations

from typing import Iterable, NoReturn, Optional

from flightdyn.domain.errors import FormatError


class LineReader:
    """Steps through trimmed lines, skipping blank and ``COMMENT`` lines.

    ``line`` is None once the input is exhausted. ``line_number`` counts
    every physical line read, including skipped ones.

    Args:
        lines: Raw lines of the file.
        source: File name or stream label used in error messages.
    """

    def __init__(self, lines: Iterable[str], source: str = "<stream>") -> None:
        self._lines = iter(lines)
        self.source = source
        self.line: Optional[str] = None
        self.line_number = 0

    def next_line(self) -> Optional[str]:
        """Advance to the next significant line and return it."""
        while True:
            raw = next(self._lines, None)
            self.line_number += 1
            if raw is None:
                self.line = None
                return None
            text = raw.strip()
            if text and not text.startswith("COMMENT"):
                self.line = text
                return text

    def require_line(self) -> str:
        """Current line, raising FormatError at end of input."""
        if self.line is None:
            self.error("Unexpected end of file")
        return self.line

    def error(self, message: str) -> NoReturn:
        raise FormatError(message, source=self.source, line=self.line_number)
