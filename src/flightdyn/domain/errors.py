# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Exception hierarchy for the flight-dynamics core.

Every error raised by flightdyn derives from FlightDynError. The concrete
classes also derive from the matching built-in (ValueError, LookupError) so
callers that only know the standard library still catch them.
"""
from __future__ import annotations


class FlightDynError(Exception):
    """Root of all flightdyn errors."""


class FormatError(FlightDynError, ValueError):
    """Malformed or structurally invalid input data.

    Args:
        message: Human-readable description.
        source: File name or stream label the data came from.
        line: 1-based line number of the offending input, if known.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.line = line
        super().__init__(self._render())

    def _render(self) -> str:
        context = []
        if self.source is not None:
            context.append(f"source={self.source}")
        if self.line is not None:
            context.append(f"line={self.line}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class RangeError(FlightDynError, ValueError):
    """A time or value outside the domain a table or ephemeris covers."""

    def __init__(self, message: str, value: object = None) -> None:
        self.value = value
        super().__init__(message)


class EphemerisLookupError(FlightDynError, LookupError):
    """No ephemeris (or station) is registered for the requested key."""

    def __init__(self, message: str, key: object = None) -> None:
        self.key = key
        super().__init__(message)


class ArgumentError(FlightDynError, ValueError):
    """An argument violates a documented precondition."""
