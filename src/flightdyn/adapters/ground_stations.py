# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ground-station XML adapter.

Reads documents of the form::

    <ground_stations>
      <ground_station id="NNO">
        <name>New Norcia</name>
        <longitude>116.1915</longitude>
        <latitude>-31.0482</latitude>
        <altitude>0.2524</altitude>
      </ground_station>
    </ground_stations>

Longitudes and latitudes are degrees (west longitudes may be negative),
altitudes km above the WGS-84 ellipsoid.
"""
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, TextIO, Union

from flightdyn.domain.earth_sites import EarthSites, WGS84, Ellipsoid
from flightdyn.domain.errors import FormatError

_log = logging.getLogger(__name__)

DEFAULT_STATIONS = Path(__file__).parent.parent / "data" / "ground_stations.xml"


def _number(station: ET.Element, tag: str, source: str) -> float:
    elem = station.find(tag)
    if elem is None or elem.text is None:
        return 0.0
    try:
        return float(elem.text.strip())
    except ValueError as exc:
        raise FormatError(
            f"Number format: {tag}={elem.text.strip()!r} for station "
            f"{station.get('id')!r}",
            source=source,
        ) from exc


def load_stations(
    root: ET.Element, sites: EarthSites, source: str = "<xml>",
) -> EarthSites:
    """Add the ``ground_station`` elements under ``root`` to ``sites``."""
    if root.tag != "ground_stations":
        raise FormatError(f"Expected <ground_stations>, found <{root.tag}>", source=source)
    for station in root.iter("ground_station"):
        station_id = station.get("id")
        if station_id is None:
            raise FormatError("ground_station without id attribute", source=source)
        name_elem = station.find("name")
        name = (name_elem.text or "").strip() if name_elem is not None else ""
        longitude = _number(station, "longitude", source)
        if longitude < 0:
            longitude += 360.0
        latitude = _number(station, "latitude", source)
        altitude = _number(station, "altitude", source)
        sites.add_station(station_id, name, longitude, latitude, altitude)
    return sites


def read_ground_stations(
    source: Union[str, Path, TextIO, None] = None,
    ellipsoid: Ellipsoid = WGS84,
) -> EarthSites:
    """Read ground stations from XML, the bundled list by default.

    Raises:
        FormatError: If the XML is malformed or a number cannot be parsed.
    """
    if source is None:
        source = DEFAULT_STATIONS
    name = str(source) if isinstance(source, (str, Path)) else getattr(source, "name", "<stream>")
    try:
        tree = ET.parse(source)
    except ET.ParseError as exc:
        line: Optional[int] = exc.position[0] if exc.position else None
        raise FormatError(f"Malformed XML: {exc}", source=name, line=line) from exc
    sites = load_stations(tree.getroot(), EarthSites(ellipsoid), name)
    _log.info("Read %d ground stations from %s", len(sites), name)
    return sites
