# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the DE405 Chebyshev ephemeris store."""

import io
import logging
import random

import numpy as np
import pytest

JD_START = 2451536.5  # MJD2000 -8.0
SECONDS_PER_DAY = 86400.0

# Coefficient index (0-based, after the two block times) of the first x
# coefficient of internal bodies 1 (Mercury) and 4 (Mars).
MERCURY = 0
MARS = 306


def _fortran(value):
    return f"{value:.16E}".replace("E", "D")


def _block_text(number, jd_start, coefficients, size=1018):
    """One ascp block: header, times, then three numbers per line."""
    values = [jd_start, jd_start + 32.0] + list(coefficients)
    values += [0.0] * (size - len(values))
    lines = [f"{number:6d}{size:6d}"]
    for i in range(0, len(values), 3):
        lines.append("  ".join(_fortran(v) for v in values[i:i + 3]))
    return "\n".join(lines) + "\n"


def _coefficients(**assignments):
    coefficients = [0.0] * 1016
    for index, value in assignments.items():
        coefficients[int(index[1:])] = value
    return coefficients


def _store(*blocks):
    from flightdyn.domain.chebyshev_ephemeris import ChebyshevEphemerisStore

    return ChebyshevEphemerisStore.from_text("".join(blocks), "test.405")


class TestChebyshevEvaluation:
    """Series evaluation on synthetic blocks with known coefficients."""

    def test_linear_series(self):
        from flightdyn.domain.state import Body

        # Mars: 11 coefficients per component, one set per block
        c = _coefficients(**{
            f"i{MARS}": 1.0e8, f"i{MARS + 1}": 2.0e6,
            f"i{MARS + 11}": -3.0e7, f"i{MARS + 12}": 5.0e5,
            f"i{MARS + 22}": 4.0e6,
        })
        store = _store(_block_text(1, JD_START, c))
        scale = 2.0 / (32 * SECONDS_PER_DAY)
        for offset in (0.0, 4.0, 16.0, 24.0, 31.5):
            x = 2.0 * offset / 32.0 - 1.0
            s = store.barycentric_state(-8.0 + offset, Body.MARS)
            np.testing.assert_allclose(
                s.position, [1.0e8 + 2.0e6 * x, -3.0e7 + 5.0e5 * x, 4.0e6], atol=1e-6)
            np.testing.assert_allclose(
                s.velocity, [2.0e6 * scale, 5.0e5 * scale, 0.0], atol=1e-9)

    def test_higher_order_terms(self):
        from flightdyn.domain.state import Body

        c = _coefficients(**{f"i{MARS + 2}": 1.0e5, f"i{MARS + 3}": 1.0e4})
        store = _store(_block_text(1, JD_START, c))
        scale = 2.0 / (32 * SECONDS_PER_DAY)
        for offset in (1.0, 10.0, 23.0):
            x = 2.0 * offset / 32.0 - 1.0
            t2 = 2 * x * x - 1
            t3 = 4 * x ** 3 - 3 * x
            s = store.barycentric_state(-8.0 + offset, Body.MARS)
            assert abs(s.position[0] - (1.0e5 * t2 + 1.0e4 * t3)) < 1e-6
            expected_v = (1.0e5 * 4 * x + 1.0e4 * (12 * x * x - 3)) * scale
            assert abs(s.velocity[0] - expected_v) < 1e-9

    def test_sub_intervals(self):
        from flightdyn.domain.state import Body

        # Mercury: 14 coefficients, four 8-day sets per block
        c = _coefficients(**{f"i{MERCURY + k * 42}": (k + 1) * 1000.0 for k in range(4)})
        store = _store(_block_text(1, JD_START, c))
        for offset, expected in [(0.0, 1000.0), (7.9, 1000.0), (8.0, 2000.0),
                                 (17.0, 3000.0), (31.0, 4000.0), (32.0, 4000.0)]:
            assert store.barycentric_state(-8.0 + offset, Body.MERCURY).position[0] == expected

    def test_sub_interval_velocity_scale(self):
        from flightdyn.domain.state import Body

        c = _coefficients(**{f"i{MERCURY + 1}": 8.0})
        store = _store(_block_text(1, JD_START, c))
        v = store.barycentric_state(-6.0, Body.MERCURY).velocity[0]
        assert abs(v - 8.0 * 4 * 2.0 / (32 * SECONDS_PER_DAY)) < 1e-15

    def test_block_lookup(self):
        from flightdyn.domain.state import Body

        first = _coefficients(**{f"i{MARS}": 1.0})
        second = _coefficients(**{f"i{MARS}": 2.0})
        store = _store(_block_text(1, JD_START, first),
                       _block_text(2, JD_START + 32.0, second))
        assert len(store) == 2
        assert store.start_time == -8.0
        assert store.end_time == 56.0
        assert store.barycentric_state(23.999, Body.MARS).position[0] == 1.0
        assert store.barycentric_state(24.0, Body.MARS).position[0] == 2.0
        assert store.barycentric_state(56.0, Body.MARS).position[0] == 2.0

    def test_out_of_range(self):
        from flightdyn.domain.errors import RangeError
        from flightdyn.domain.state import Body

        store = _store(_block_text(1, JD_START, _coefficients()))
        with pytest.raises(RangeError, match="outside ephemeris range") as exc_info:
            store.barycentric_state(-8.001, Body.MARS)
        assert exc_info.value.value == -8.001
        with pytest.raises(RangeError):
            store.geocentric_state(24.001, Body.MARS)


class TestBodyComposition:
    """Earth/Moon/EMB/SSB identities."""

    @pytest.fixture
    def store(self):
        rng = random.Random(405)
        c = [rng.uniform(-1.0e8, 1.0e8) for _ in range(816)]
        return _store(_block_text(1, JD_START, c))

    def test_barycentric(self, store):
        from flightdyn.domain.chebyshev_ephemeris import EM_RATIO
        from flightdyn.domain.state import Body, State

        f = 1.0 / (1.0 + EM_RATIO)
        for t in (-7.5, 3.25, 20.0):
            emb = store.barycentric_state(t, Body.EM_BARY)
            moon_geo = store.geocentric_state(t, Body.MOON)
            earth = store.barycentric_state(t, Body.EARTH)
            moon = store.barycentric_state(t, Body.MOON)
            np.testing.assert_allclose(earth.as_array(), (emb - moon_geo * f).as_array(), rtol=1e-14)
            np.testing.assert_allclose(moon.as_array(), (earth + moon_geo).as_array(), rtol=1e-14)
            assert store.barycentric_state(t, Body.SS_BARY) == State.zero()

    def test_geocentric(self, store):
        from flightdyn.domain.chebyshev_ephemeris import EM_RATIO
        from flightdyn.domain.state import Body, State

        f = 1.0 / (1.0 + EM_RATIO)
        for t in (-7.5, 3.25, 20.0):
            earth = store.barycentric_state(t, Body.EARTH)
            moon_geo = store.geocentric_state(t, Body.MOON)
            assert store.geocentric_state(t, Body.EARTH) == State.zero()
            np.testing.assert_allclose(
                store.geocentric_state(t, Body.EM_BARY).as_array(), (moon_geo * f).as_array())
            np.testing.assert_allclose(
                store.geocentric_state(t, Body.SS_BARY).as_array(), (-earth).as_array())
            for body in (Body.MERCURY, Body.MARS, Body.SATURN, Body.SUN):
                np.testing.assert_allclose(
                    store.geocentric_state(t, body).as_array(),
                    (store.barycentric_state(t, body) - earth).as_array(),
                    rtol=1e-12, atol=1e-6)

    def test_moon_relative_to_earth(self, store):
        from flightdyn.domain.state import Body

        t = 5.0
        diff = store.barycentric_state(t, Body.MOON) - store.barycentric_state(t, Body.EARTH)
        np.testing.assert_allclose(
            diff.as_array(), store.geocentric_state(t, Body.MOON).as_array(),
            rtol=1e-9, atol=1e-6)

    @pytest.mark.parametrize("body", [0, 14, -1])
    def test_invalid_bodies(self, store, body):
        from flightdyn.domain.errors import ArgumentError

        with pytest.raises(ArgumentError):
            store.barycentric_state(0.0, body)
        with pytest.raises(ArgumentError):
            store.geocentric_state(0.0, body)

    def test_implements_port(self, store):
        from flightdyn.ports import PlanetaryEphemeris

        assert isinstance(store, PlanetaryEphemeris)


class TestChebyshevParsing:
    """Block structure errors."""

    def test_wrong_block_size(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="Invalid block size 1017") as exc_info:
            _store(_block_text(1, JD_START, _coefficients(), size=1017))
        assert exc_info.value.line == 1
        assert exc_info.value.source == "test.405"

    def test_not_contiguous(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="not contiguous"):
            _store(_block_text(1, JD_START, _coefficients()),
                   _block_text(2, JD_START + 33.0, _coefficients()))

    def test_bad_number_reports_line(self):
        from flightdyn.domain.errors import FormatError

        text = _block_text(1, JD_START, _coefficients()).splitlines()
        text[5] = "0.0D+00 garbage 0.0D+00"
        with pytest.raises(FormatError, match="Invalid number 'garbage'") as exc_info:
            _store("\n".join(text))
        assert exc_info.value.line == 6

    def test_truncated_block(self):
        from flightdyn.domain.errors import FormatError

        text = _block_text(1, JD_START, _coefficients()).splitlines()[:100]
        with pytest.raises(FormatError, match="Unexpected end of data"):
            _store("\n".join(text))

    def test_empty(self):
        from flightdyn.domain.errors import FormatError

        with pytest.raises(FormatError, match="No ephemeris blocks"):
            _store("")

    def test_lowercase_and_e_exponents(self):
        from flightdyn.domain.chebyshev_ephemeris import ChebyshevEphemerisStore

        text = _block_text(1, JD_START, _coefficients()).replace("D", "d", 30)
        store = ChebyshevEphemerisStore.from_lines(io.StringIO(text))
        assert store.start_time == -8.0

    def test_store_needs_blocks(self):
        from flightdyn.domain.chebyshev_ephemeris import ChebyshevEphemerisStore
        from flightdyn.domain.errors import ArgumentError

        with pytest.raises(ArgumentError):
            ChebyshevEphemerisStore([])


class TestReadDe405:
    """File adapter."""

    def test_read_path(self, tmp_path, caplog):
        from flightdyn.adapters.ephemeris_files import read_de405
        from flightdyn.domain.state import Body

        path = tmp_path / "ascp_short.405"
        path.write_text(
            _block_text(1, JD_START, _coefficients(**{f"i{MARS}": 7.0}))
            + _block_text(2, JD_START + 32.0, _coefficients(**{f"i{MARS}": 7.0})))
        with caplog.at_level(logging.INFO, logger="flightdyn.adapters.ephemeris_files"):
            store = read_de405(path)
        assert len(store) == 2
        assert store.barycentric_state(30.0, Body.MARS).position[0] == 7.0
        assert "Read 2 DE405 blocks" in caplog.text

    def test_read_stream(self):
        from flightdyn.adapters.ephemeris_files import read_de405

        store = read_de405(io.StringIO(_block_text(1, JD_START, _coefficients())))
        assert store.end_time == 24.0

    def test_error_names_file(self, tmp_path):
        from flightdyn.adapters.ephemeris_files import read_de405
        from flightdyn.domain.errors import FormatError

        path = tmp_path / "broken.405"
        path.write_text("1 1000\n")
        with pytest.raises(FormatError, match="broken.405"):
            read_de405(path)
