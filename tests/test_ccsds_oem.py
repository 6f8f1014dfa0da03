# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the CCSDS OEM reader."""

import io
import logging
from datetime import datetime, timedelta

import numpy as np
import pytest

MJD2000_2010 = 3653.0
P0 = np.array([7000.0, -1200.0, 300.0])
V = np.array([0.5, 7.25, -1.0])

HEADER = [
    "CCSDS_OEM_VERS = 1.0",
    "CREATION_DATE = 2010-01-01T00:00:00",
    "ORIGINATOR = ESOC",
]


def _epoch(minutes):
    t = datetime(2010, 1, 1) + timedelta(minutes=minutes)
    return t.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]


def _position(minutes):
    return P0 + V * minutes * 60.0


def _segment(start, stop, step=10, useable=None, interpolation=None):
    """Metadata and linear-motion data lines between ``start`` and ``stop`` minutes."""
    lines = [
        "META_START",
        "OBJECT_NAME = SAT",
        "OBJECT_ID = 2010-001A",
        "CENTER_NAME = EARTH",
        "REF_FRAME = EME2000",
        "TIME_SYSTEM = TDB",
        f"START_TIME = {_epoch(start)}",
    ]
    if useable is not None:
        lines.append(f"USEABLE_START_TIME = {_epoch(useable[0])}")
        lines.append(f"USEABLE_STOP_TIME = {_epoch(useable[1])}")
    lines.append(f"STOP_TIME = {_epoch(stop)}")
    if interpolation is not None:
        lines.append(f"INTERPOLATION = {interpolation[0]}")
        lines.append(f"INTERPOLATION_DEGREE = {interpolation[1]}")
    lines.append("META_STOP")
    for m in range(start, stop + 1, step):
        p = _position(m)
        lines.append(" ".join([_epoch(m)] + [f"{c:.6f}" for c in p] + [f"{c:.6f}" for c in V]))
    return lines


def _oem(*segments):
    lines = list(HEADER)
    for segment in segments:
        lines += segment
    return lines


def _parse(lines, source="sat.oem"):
    from flightdyn.domain.ccsds_oem import parse_oem

    return parse_oem(lines, source)


def _day(minutes):
    return MJD2000_2010 + minutes / 1440.0


class TestParseTime:
    """OEM epochs on the TDB scale."""

    def test_values(self):
        from flightdyn.domain.ccsds_oem import parse_time

        assert parse_time("2010-01-01T00:00:00") == pytest.approx(MJD2000_2010, abs=1e-9)
        assert parse_time("2010-01-01T12:00:00.000") == pytest.approx(3653.5, abs=1e-9)
        assert parse_time("2000-01-01T00:00:00") == pytest.approx(0.0, abs=1e-9)

    def test_invalid(self):
        from flightdyn.domain.ccsds_oem import parse_time
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError):
            parse_time("01/01/2010 00:00")


class TestParseOem:
    """Header, metadata and data sections."""

    def test_single_segment(self):
        ephemeris = _parse(_oem(_segment(0, 120)))
        assert len(ephemeris) == 1
        assert ephemeris.object_name == "SAT"
        assert ephemeris.object_id == "2010-001A"
        meta = ephemeris.metadata[0]
        assert meta.interpolation == "LAGRANGE"
        assert meta.degree == 8
        assert meta.start_time == pytest.approx(_day(0), abs=1e-9)
        assert meta.stop_time == pytest.approx(_day(120), abs=1e-9)
        assert ephemeris.blocks[0].sample_count == 13

    def test_interpolates_linear_motion(self):
        ephemeris = _parse(_oem(_segment(0, 120)))
        for minutes in (0, 35, 61.5, 120):
            s = ephemeris.interpolate(_day(minutes))
            np.testing.assert_allclose(s.position, _position(minutes), atol=1e-4)
            np.testing.assert_allclose(s.velocity, V, atol=1e-6)

    def test_comments_and_blank_lines(self):
        lines = _oem(_segment(0, 120))
        lines.insert(3, "COMMENT generated for testing")
        lines.insert(5, "")
        lines.insert(12, "COMMENT  inside metadata")
        lines.append("")
        ephemeris = _parse(lines)
        assert ephemeris.blocks[0].sample_count == 13

    def test_segments_with_useable_span_and_method(self):
        ephemeris = _parse(_oem(
            _segment(0, 120),
            _segment(120, 240, useable=(130, 230), interpolation=("HERMITE", 5)),
        ))
        assert len(ephemeris) == 2
        second = ephemeris.metadata[1]
        assert second.interpolation == "HERMITE"
        assert second.degree == 5
        block = ephemeris.blocks[1]
        assert block.method == "HERMITE"
        assert block.start_time == pytest.approx(_day(130), abs=1e-9)
        assert ephemeris.end_time == pytest.approx(_day(230), abs=1e-9)
        np.testing.assert_allclose(
            ephemeris.interpolate(_day(200)).position, _position(200), atol=1e-4)

    def test_gap_between_useable_spans(self):
        from flightdyn.domain.errors import RangeError

        ephemeris = _parse(_oem(
            _segment(0, 120),
            _segment(120, 240, useable=(130, 230)),
        ))
        with pytest.raises(RangeError, match="Time not covered by orbit file"):
            ephemeris.interpolate(_day(125))

    def test_implements_port(self):
        from flightdyn.ports import EphemerisSource

        assert isinstance(_parse(_oem(_segment(0, 120))), EphemerisSource)

    def test_logs_file_name(self, caplog):
        with caplog.at_level(logging.INFO, logger="flightdyn.domain.ccsds_oem"):
            _parse(_oem(_segment(0, 120)), "orbit.oem")
        assert "Reading CCSDS orbit file: orbit.oem" in caplog.text


class TestParseOemErrors:
    """Every deviation is a FormatError with source and line."""

    def test_unknown_format(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        lines[0] = "CCSDS_OPM_VERS = 2.0"
        with pytest.raises(FormatError, match="Unknown orbit file format") as exc_info:
            _parse(lines)
        assert exc_info.value.line == 1
        assert exc_info.value.source == "sat.oem"

    def test_unsupported_version(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        lines[0] = "CCSDS_OEM_VERS = 2.0"
        with pytest.raises(FormatError, match="Unsupported OEM version = 2.0"):
            _parse(lines)

    def test_wrong_center(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        lines[6] = "CENTER_NAME = MARS"
        with pytest.raises(FormatError, match="expected value=EARTH, found: MARS") as exc_info:
            _parse(lines)
        assert exc_info.value.line == 7

    def test_missing_keyword(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        del lines[7]
        with pytest.raises(FormatError, match="Expected keyword: REF_FRAME, found: TIME_SYSTEM"):
            _parse(lines)

    def test_interpolation_without_degree(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120, interpolation=("LAGRANGE", 7)))
        lines.remove("INTERPOLATION_DEGREE = 7")
        with pytest.raises(FormatError, match="Expected keyword: INTERPOLATION_DEGREE"):
            _parse(lines)

    def test_unsupported_interpolation(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="SPLINE"):
            _parse(_oem(_segment(0, 120, interpolation=("SPLINE", 3))))

    def test_short_data_line(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        lines[-1] = " ".join(lines[-1].split()[:5])
        with pytest.raises(FormatError, match="found 5 fields") as exc_info:
            _parse(lines)
        assert exc_info.value.line == len(lines)

    def test_bad_number(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        fields = lines[-2].split()
        fields[3] = "x.y"
        lines[-2] = " ".join(fields)
        with pytest.raises(FormatError, match="Invalid state vector"):
            _parse(lines)

    def test_bad_epoch(self):
        from flightdyn.domain.errors import FormatError

        lines = _oem(_segment(0, 120))
        lines[-1] = lines[-1].replace("2010-01-01", "2010-13-01", 1)
        with pytest.raises(FormatError, match="Invalid time"):
            _parse(lines)

    def test_empty_segment(self):
        from flightdyn.domain.errors import FormatError

        first = _segment(0, 120)
        lines = list(HEADER) + first[:first.index("META_STOP") + 1] + first
        with pytest.raises(FormatError, match="contains no data"):
            _parse(lines)

    def test_truncated(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="Unexpected end of file"):
            _parse(HEADER + ["META_START", "OBJECT_NAME = SAT"])


class TestReadOem:
    """File adapter."""

    def test_read_path(self, tmp_path, caplog):
        from flightdyn.adapters.ephemeris_files import read_oem

        path = tmp_path / "sat.oem"
        path.write_text("\n".join(_oem(_segment(0, 120), _segment(120, 240))) + "\n")
        with caplog.at_level(logging.INFO, logger="flightdyn.adapters.ephemeris_files"):
            ephemeris = read_oem(path)
        assert len(ephemeris) == 2
        assert ephemeris.source == str(path)
        assert "Read 2 OEM segments" in caplog.text

    def test_read_stream(self):
        from flightdyn.adapters.ephemeris_files import read_oem

        ephemeris = read_oem(io.StringIO("\n".join(_oem(_segment(0, 120)))))
        assert ephemeris.source == "<stream>"
        assert ephemeris.start_time == pytest.approx(MJD2000_2010, abs=1e-9)
