"""
Tests for the frequency / phase response (filterviz/response.py)

Tests cover:
- linear and logarithmic frequency grids
- magnitude and phase against scipy.signal.freqz
- flat (pure gain) responses and their display scaling
- ±π/2 phase boundary samples
- axis helpers
"""

import math

import numpy as np
import pytest
from scipy.signal import freqz

from filterviz.coefficients import CoefficientSet, FilterConfig
from filterviz.response import (compute_response, display_scale, frequency_grid,
                                frequency_to_axis, log_grid_frequencies, _resolve_phase_boundaries)


@pytest.mark.unit
class TestFrequencyGrid:
    """Test the ω samples."""

    def test_linear(self):
        """Test ω = π k / M for k = 1..M."""
        w = frequency_grid(8, log_scale=False)
        assert w == pytest.approx(np.pi * np.arange(1, 9) / 8)

    def test_log_ends_at_pi(self):
        """Test the warped grid is increasing and ends at π."""
        w = frequency_grid(1000, log_scale=True, log_base=1000.0)
        assert w[-1] == pytest.approx(np.pi)
        assert np.all(np.diff(w) > 0)
        assert w[0] == pytest.approx(np.pi * (1000 ** 0.001 - 1) / 999)

    def test_log_is_denser_at_low_frequencies(self):
        """Test more log samples fall below π/10 than linear ones."""
        lin = frequency_grid(512, False)
        log = frequency_grid(512, True)
        assert (log < np.pi / 10).sum() > (lin < np.pi / 10).sum()


@pytest.mark.unit
class TestComputeResponse:
    """Test magnitude and phase."""

    def test_matches_freqz(self, small_config):
        """Test an IIR response against scipy for the same ω grid."""
        c = CoefficientSet.from_lists([0.2, 0.3, 0.05], [0.0, 0.6, -0.2], small_config)
        curve = compute_response(c, small_config)
        _, h = freqz([0.2, 0.3, 0.05], [1.0, -0.6, 0.2], worN=curve.omega)
        assert curve.gain == pytest.approx(np.abs(h), rel=1e-9)
        assert curve.phase == pytest.approx(np.angle(h), abs=1e-9)
        assert curve.magnitude_db == pytest.approx(20 * np.log10(np.abs(h)), abs=1e-9)

    def test_lengths_and_indices(self, small_config):
        """Test every array has M samples indexed from 1."""
        curve = compute_response(CoefficientSet.default(small_config), small_config)
        assert len(curve) == small_config.num_frequencies
        assert curve.frequency_index[0] == 1
        assert curve.frequency_index[-1] == small_config.num_frequencies
        assert curve.omega[-1] == pytest.approx(np.pi)

    def test_identity_is_flat_zero_db(self, small_config):
        """Test a0 = 1 gives 0 dB, zero phase everywhere."""
        curve = compute_response(CoefficientSet.default(small_config), small_config)
        assert curve.is_flat
        assert curve.highest_db == pytest.approx(0.0)
        assert np.allclose(curve.phase, 0.0)
        assert not curve.gain_above_zero
        assert curve.highest_gain == pytest.approx(1.0)

    def test_pure_gain_flat(self, small_config):
        """Test a0 = 2 is flat at 20 log10 2."""
        c = CoefficientSet.from_lists([2.0], [], small_config)
        curve = compute_response(c, small_config)
        assert curve.is_flat
        assert curve.highest_db == pytest.approx(20 * math.log10(2.0))
        assert curve.gain_above_zero

    def test_floor_clamp(self, small_config):
        """Test an exact zero at Nyquist is limited to the floor."""
        c = CoefficientSet.from_lists([1.0, 1.0], [], small_config)     # zero at z = -1
        curve = compute_response(c, small_config)
        assert curve.magnitude_db[-1] == small_config.db_floor
        assert curve.lowest_db == small_config.db_floor

    def test_all_zero_numerator(self, small_config):
        """Test a silent filter sits on the floor without errors."""
        c = CoefficientSet.from_lists([0.0], [], small_config)
        curve = compute_response(c, small_config)
        assert np.all(curve.magnitude_db == small_config.db_floor)
        assert curve.highest_gain == 0.0

    def test_log_scale_flag(self):
        """Test the warped curve records its mode."""
        cfg = FilterConfig(num_frequencies=256)
        c = CoefficientSet.from_lists([1.0], [0.0, 0.5], cfg)
        curve = compute_response(c, cfg, log_scale=True)
        assert curve.log_scale
        _, h = freqz([1.0], [1.0, -0.5], worN=curve.omega)
        assert curve.gain == pytest.approx(np.abs(h))

    def test_highest_gain_of_one_pole(self, small_config):
        """Test 1 / (1 - 0.5 z^-1) peaks at DC with gain close to 2."""
        c = CoefficientSet.from_lists([1.0], [0.0, 0.5], small_config)
        curve = compute_response(c, small_config)
        assert curve.highest_gain == pytest.approx(2.0, rel=1e-3)
        assert curve.highest_gain == curve.gain[0]

    def test_frequencies_hz(self, small_config):
        """Test ω maps to Hz up to Nyquist."""
        curve = compute_response(CoefficientSet.default(small_config), small_config)
        hz = curve.frequencies_hz(44_100)
        assert hz[-1] == pytest.approx(22_050)

    def test_unwrapped_phase_is_continuous(self, small_config):
        """Test unwrapping removes 2π jumps of a pure delay."""
        c = CoefficientSet.from_lists([0.0, 0.0, 0.0, 0.0, 0.0, 1.0], [], small_config)
        curve = compute_response(c, small_config)
        unwrapped = curve.unwrapped_phase()
        assert np.max(np.abs(np.diff(unwrapped))) < np.pi
        assert unwrapped == pytest.approx(-5 * curve.omega, abs=1e-9)


@pytest.mark.unit
class TestPhaseBoundary:
    """Test the ±π/2 boundary resolution."""

    def test_takes_sign_of_earlier_neighbour(self):
        """Test a boundary sample follows the previous regular sample."""
        h = np.array([1 - 1j, 0 + 2j, 1 + 1j])
        phase = np.angle(h)
        out = _resolve_phase_boundaries(h, phase)
        assert out[1] == pytest.approx(-np.pi / 2)
        assert out[0] == phase[0] and out[2] == phase[2]

    def test_first_sample_uses_following_neighbour(self):
        """Test a leading boundary sample looks forward."""
        h = np.array([0 - 1j, 0 + 1j, 1 + 1j])
        out = _resolve_phase_boundaries(h, np.angle(h))
        assert out[:2] == pytest.approx([np.pi / 2, np.pi / 2])

    def test_all_boundary_falls_back_to_imaginary_sign(self):
        """Test without neighbours the sign of Im(H) decides."""
        h = np.array([0 + 1j, 0 - 3j])
        out = _resolve_phase_boundaries(h, np.angle(h))
        assert out == pytest.approx([np.pi / 2, -np.pi / 2])

    def test_no_boundary_untouched(self):
        """Test regular samples keep atan2."""
        h = np.array([1 + 1j, -1 - 1j])
        phase = np.angle(h)
        assert _resolve_phase_boundaries(h, phase) is phase


@pytest.mark.unit
class TestDisplayScale:
    """Test zero-line placement and dB scaling."""

    def test_flat_zero_db_centred(self, small_config):
        """Test 0 dB flat response sits mid-plot with unit scaling."""
        curve = compute_response(CoefficientSet.default(small_config), small_config)
        scale = display_scale(curve, plot_top=10.0, plot_height=200.0)
        assert scale.zero_line == pytest.approx(110.0)
        assert scale.pixels_per_db == 1.0

    def test_flat_positive_gain_bottom(self, small_config):
        """Test a flat +6 dB line puts 0 dB at the bottom edge."""
        curve = compute_response(CoefficientSet.from_lists([2.0], [], small_config), small_config)
        scale = display_scale(curve, 10.0, 200.0)
        assert scale.zero_line == pytest.approx(210.0)
        assert scale.to_y(curve.highest_db) == pytest.approx(10.0)

    def test_flat_negative_gain_top(self, small_config):
        """Test a flat -6 dB line puts 0 dB at the top edge."""
        curve = compute_response(CoefficientSet.from_lists([0.5], [], small_config), small_config)
        scale = display_scale(curve, 10.0, 200.0)
        assert scale.zero_line == pytest.approx(10.0)
        assert scale.to_y(curve.lowest_db) == pytest.approx(210.0)

    def test_dynamic_range_fills_plot(self, small_config):
        """Test the highest dB maps to the top and the lowest to the bottom."""
        c = CoefficientSet.from_lists([1.0], [0.0, 0.5], small_config)
        curve = compute_response(c, small_config)
        scale = display_scale(curve, 0.0, 300.0)
        assert scale.to_y(curve.highest_db) == pytest.approx(0.0)
        assert scale.to_y(curve.lowest_db) == pytest.approx(300.0)


@pytest.mark.unit
class TestAxisHelpers:
    """Test frequency axis helpers."""

    def test_linear_axis(self):
        """Test Nyquist maps to 1 and half of it to 0.5."""
        assert frequency_to_axis(22_050, 44_100) == pytest.approx(1.0)
        assert frequency_to_axis(11_025, 44_100) == pytest.approx(0.5)

    def test_log_axis_endpoints(self):
        """Test the warped axis spans [0, 1]."""
        assert frequency_to_axis(0.0, 44_100, log_scale=True) == pytest.approx(0.0)
        assert frequency_to_axis(22_050, 44_100, log_scale=True) == pytest.approx(1.0)

    def test_log_axis_inverts_grid(self):
        """Test the axis position of a grid frequency equals k / M."""
        w = frequency_grid(100, log_scale=True)
        hz = w / np.pi * 22_050
        assert frequency_to_axis(hz, 44_100, log_scale=True) == pytest.approx(np.arange(1, 101) / 100)

    def test_grid_lines(self):
        """Test 10, 20, ... 90, 100, ... below Nyquist."""
        lines = log_grid_frequencies(44_100)
        assert lines[:10] == [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
        assert lines[-1] == 20_000
        assert all(f < 22_050 for f in lines)
