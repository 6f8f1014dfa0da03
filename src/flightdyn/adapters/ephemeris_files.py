# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
File adapters for ephemeris data.

Reads DE405 coefficient files, CCSDS OEM orbit files and Horizons vector
tables from disk or open text streams, and serves a directory of Horizons
files (one per NAIF id) as a provider.
"""
import logging
import time
from pathlib import Path
from typing import Optional, TextIO, Union

from flightdyn.adapters.provider_cache import DEFAULT_CACHE_SIZE, LRUCachedProvider
from flightdyn.domain.ccsds_oem import OemEphemeris, parse_oem
from flightdyn.domain.chebyshev_ephemeris import ChebyshevEphemerisStore, parse_blocks
from flightdyn.domain.horizons import HorizonsEphemeris, parse_horizons
from flightdyn.domain.relative_state import RelativeStateResolver, SpacecraftEphemerides

_log = logging.getLogger(__name__)

Source = Union[str, Path, TextIO]


def _read(source: Source, parse):
    if isinstance(source, (str, Path)):
        with open(source, encoding="utf-8") as f:
            return parse(f, str(source))
    return parse(source, getattr(source, "name", "<stream>"))


def read_de405(source: Source) -> ChebyshevEphemerisStore:
    """Read a DE405 ASCII (``ascp``) file or stream."""
    started = time.perf_counter()
    store = _read(source, lambda lines, name: ChebyshevEphemerisStore(parse_blocks(lines, name)))
    _log.info(
        "Read %d DE405 blocks covering MJD2000 %.1f to %.1f in %.0f ms",
        len(store), store.start_time, store.end_time,
        (time.perf_counter() - started) * 1000.0,
    )
    return store


def read_oem(source: Source) -> OemEphemeris:
    """Read a CCSDS OEM file or stream."""
    started = time.perf_counter()
    ephemeris = _read(source, parse_oem)
    _log.info(
        "Read %d OEM segments from %s in %.0f ms",
        len(ephemeris), ephemeris.source, (time.perf_counter() - started) * 1000.0,
    )
    return ephemeris


def read_horizons(source: Source) -> HorizonsEphemeris:
    """Read a Horizons vector table file or stream."""
    return _read(source, parse_horizons)


class HorizonsDirectoryProvider:
    """Provider of Horizons ephemerides stored as ``<directory>/<naif_id>``.

    Returns None, with a warning, for ids that have no file.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, naif_id: int) -> Optional[HorizonsEphemeris]:
        path = self._directory / str(naif_id)
        if not path.is_file():
            _log.warning("No Horizons file for NAIF id %s in %s", naif_id, self._directory)
            return None
        return read_horizons(path)


class CachedRelativeStateResolver(RelativeStateResolver):
    """Resolver over a directory of Horizons files with an LRU cache.

    Args:
        directory: Directory holding one Horizons file per NAIF id.
        ephemerides: Spacecraft and planetary ephemerides.
        cache_size: Number of Horizons ephemerides kept in memory.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        ephemerides: SpacecraftEphemerides,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        self._cache = LRUCachedProvider(HorizonsDirectoryProvider(directory), cache_size)
        super().__init__(self._cache, ephemerides)

    @classmethod
    def from_directory(
        cls,
        directory: Union[str, Path],
        ephemerides: SpacecraftEphemerides,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> "CachedRelativeStateResolver":
        return cls(directory, ephemerides, cache_size)

    @property
    def cache(self) -> LRUCachedProvider:
        return self._cache

    def set_cache_size(self, cache_size: int) -> None:
        self._cache.set_cache_size(cache_size)
