# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the Horizons vector-table reader and the directory provider."""

import logging

import numpy as np
import pytest

JD0 = 2455211.5  # 2010-01-15T00:00:00 TDB, MJD2000 3667.0
P0 = np.array([-1.355602858867110e9, -1.216198913429524e8, 8.093800097202687e6])
V = np.array([1.5, -9.25, 0.375])

HEADER = """\
*******************************************************************************
 Revised: Jan 15, 2010             Saturn                            699 / 6
*******************************************************************************
Ephemeris / WWW_USER Fri Jan 15 10:12:04 2010 Pasadena, USA      / Horizons
*******************************************************************************
Target body name: Saturn (699)                    {source: SAT360xl}
Center body name: Solar System Barycenter (0)     {source: DE405}
Center-site name: BODY CENTER
*******************************************************************************
Start time      : A.D. 2010-Jan-15 00:00:00.0000 CT
Stop  time      : A.D. 2010-Jan-25 00:00:00.0000 CT
Step-size       : 1440 minutes
*******************************************************************************
Output units    : KM-S
Output format   : 02
Reference frame : ICRF/J2000.0
Output type     : GEOMETRIC cartesian states
Coordinate systm: Earth Mean Equator and Equinox of Reference Epoch
*******************************************************************************
"""


def _position(day):
    return P0 + V * day * 86400.0


def _records(days=11):
    lines = ["$$SOE"]
    for d in range(days):
        lines.append(f"{JD0 + d:.9f} = A.D. 2010-Jan-{15 + d:02d} 00:00:00.0000 (CT)")
        lines.append(" ".join(f"{c:.15E}" for c in _position(d)))
        lines.append(" ".join(f"{c:.15E}" for c in V))
    lines.append("$$EOE")
    lines.append("*" * 79)
    return lines


def _lines(header=HEADER, records=None):
    return header.splitlines() + (_records() if records is None else records)


def _parse(lines, source="699"):
    from flightdyn.domain.horizons import parse_horizons

    return parse_horizons(lines, source)


class TestParseHorizons:
    """Header checks and records."""

    def test_records(self):
        ephemeris = _parse(_lines())
        assert ephemeris.object_name == "Saturn (699)"
        assert ephemeris.source == "699"
        assert ephemeris.method == "HERMITE"
        assert ephemeris.degree == 10
        assert len(ephemeris) == 11
        assert ephemeris.start_time == 3667.0
        assert ephemeris.end_time == 3677.0
        first = next(iter(ephemeris))
        assert first.tdb == 3667.0
        np.testing.assert_allclose(first.position, P0)

    def test_interpolates_linear_motion(self):
        ephemeris = _parse(_lines())
        for day in (0.0, 0.5, 4.25, 10.0):
            s = ephemeris.interpolate(3667.0 + day)
            np.testing.assert_allclose(s.position, _position(day), rtol=1e-12, atol=1e-3)
            np.testing.assert_allclose(s.velocity, V, atol=1e-9)

    def test_out_of_range(self):
        from flightdyn.domain.errors import RangeError

        ephemeris = _parse(_lines())
        with pytest.raises(RangeError):
            ephemeris.interpolate(3677.5)

    def test_logs_read_time(self, caplog):
        with caplog.at_level(logging.INFO, logger="flightdyn.domain.horizons"):
            _parse(_lines())
        assert "Reading Horizons file 699 took" in caplog.text
        assert "(11 records)" in caplog.text

    def test_implements_port(self):
        from flightdyn.ports import EphemerisSource

        assert isinstance(_parse(_lines()), EphemerisSource)


class TestParseHorizonsErrors:
    """Rejected headers and records."""

    def test_wrong_units(self):
        from flightdyn.domain.errors import FormatError

        header = HEADER.replace("Output units    : KM-S", "Output units    : AU-D")
        with pytest.raises(FormatError, match="Invalid value for: Output units") as exc_info:
            _parse(_lines(header))
        assert exc_info.value.line == 14
        assert exc_info.value.source == "699"

    def test_wrong_center(self):
        from flightdyn.domain.errors import FormatError

        header = HEADER.replace("Solar System Barycenter (0)", "Sun (10)")
        with pytest.raises(FormatError, match="Center body name"):
            _parse(_lines(header))

    def test_missing_key(self):
        from flightdyn.domain.errors import FormatError

        header = HEADER.replace("Reference frame : ICRF/J2000.0\n", "")
        with pytest.raises(FormatError, match="invalid header; expected key: Reference frame"):
            _parse(_lines(header))

    def test_julian_date_out_of_range(self):
        from flightdyn.domain.errors import FormatError

        records = _records()
        records[1] = "1" + records[1][1:]
        with pytest.raises(FormatError, match="Julian Date out of range"):
            _parse(_lines(records=records))

    def test_bad_vector(self):
        from flightdyn.domain.errors import FormatError

        records = _records()
        records[2] = "1.0 two 3.0"
        with pytest.raises(FormatError, match="Invalid vector"):
            _parse(_lines(records=records))

    def test_short_vector(self):
        from flightdyn.domain.errors import FormatError

        records = _records()
        records[3] = "1.0 2.0"
        with pytest.raises(FormatError, match="Expected 3 vector components, found 2"):
            _parse(_lines(records=records))

    def test_no_records(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="no records"):
            _parse(_lines(records=["$$SOE", "$$EOE"]))

    def test_missing_end_marker(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="Unexpected end of file"):
            _parse(_lines(records=_records()[:-2]))


class TestHorizonsFiles:
    """File adapter and directory provider."""

    def test_read_path(self, tmp_path):
        from flightdyn.adapters.ephemeris_files import read_horizons

        path = tmp_path / "699"
        path.write_text("\n".join(_lines()) + "\n")
        ephemeris = read_horizons(path)
        assert ephemeris.source == str(path)
        assert len(ephemeris) == 11

    def test_directory_provider(self, tmp_path):
        from flightdyn.adapters.ephemeris_files import HorizonsDirectoryProvider

        (tmp_path / "699").write_text("\n".join(_lines()) + "\n")
        provider = HorizonsDirectoryProvider(tmp_path)
        assert provider.directory == tmp_path
        assert provider(699).object_name == "Saturn (699)"

    def test_directory_provider_missing_file(self, tmp_path, caplog):
        from flightdyn.adapters.ephemeris_files import HorizonsDirectoryProvider

        provider = HorizonsDirectoryProvider(tmp_path)
        with caplog.at_level(logging.WARNING, logger="flightdyn.adapters.ephemeris_files"):
            assert provider(399) is None
        assert "No Horizons file for NAIF id 399" in caplog.text
