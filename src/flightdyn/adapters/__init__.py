# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for ephemeris files, ground-station XML and provider caching.

File and stream I/O is confined to this layer.
"""
from flightdyn.adapters.provider_cache import DEFAULT_CACHE_SIZE, LRUCachedProvider
from flightdyn.adapters.ephemeris_files import (
    CachedRelativeStateResolver,
    HorizonsDirectoryProvider,
    read_de405,
    read_horizons,
    read_oem,
)
from flightdyn.adapters.ground_stations import load_stations, read_ground_stations

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "LRUCachedProvider",
    "CachedRelativeStateResolver",
    "HorizonsDirectoryProvider",
    "read_de405",
    "read_horizons",
    "read_oem",
    "load_stations",
    "read_ground_stations",
]
