# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for ephemeris sources and providers.

Readers and stores implement these so the state resolvers do not depend on
any particular file format.
"""
from typing import Callable, Optional, Protocol, TypeVar, runtime_checkable

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.state import State

K = TypeVar("K")
V = TypeVar("V")

Provider = Callable[[K], Optional[V]]
"""Function returning the value for a key, or None if there is none."""


@runtime_checkable
class EphemerisSource(Protocol):
    """Port for a tabulated ephemeris of one object (MJD2000 TDB times)."""

    @property
    def start_time(self) -> float:
        ...

    @property
    def end_time(self) -> float:
        ...

    def contains(self, tdb: float) -> bool:
        ...

    def interpolate(self, tdb: float) -> State:
        """State of the object at ``tdb``."""
        ...


@runtime_checkable
class PlanetaryEphemeris(Protocol):
    """Port for solar-system body states (MJD2000 TDB times)."""

    @property
    def start_time(self) -> float:
        ...

    @property
    def end_time(self) -> float:
        ...

    def barycentric_state(self, tdb: float, body: int) -> State:
        ...

    def geocentric_state(self, tdb: float, body: int) -> State:
        ...


@runtime_checkable
class TimeFormat(Protocol):
    """Port for text representations of AtomicTime."""

    def format(self, t: AtomicTime) -> str:
        ...

    def parse(self, text: str) -> AtomicTime:
        ...
