"""
Tests for the direct-form IIR core (filterviz/iir.py)

Tests cover:
- impulse responses of simple filters
- determinism, reset and history-buffer wrap-around
- block path against the per-sample path and scipy.signal.lfilter
"""

import numpy as np
import pytest
from scipy.signal import lfilter

from filterviz.coefficients import CoefficientSet, FilterConfig
from filterviz.iir import IIRFilterCore


def run(core, xs):
    return np.array([core.step(x) for x in xs])


@pytest.mark.unit
class TestStep:
    """Test the per-sample recursion."""

    def test_identity_passes_input(self, identity, noise):
        """Test a0 = 1 reproduces the excitation."""
        core = IIRFilterCore(identity)
        assert run(core, noise[:64]) == pytest.approx(noise[:64])

    def test_one_pole_impulse(self, one_pole):
        """Test y[n] = x[n] + 0.5 y[n-1] decays as 0.5^n."""
        core = IIRFilterCore(one_pole)
        impulse = np.zeros(20)
        impulse[0] = 1.0
        assert run(core, impulse) == pytest.approx(0.5 ** np.arange(20))

    def test_fir_delay(self, config):
        """Test a pure delay of 5 samples uses the oldest history slot."""
        core = IIRFilterCore(CoefficientSet.from_lists([0, 0, 0, 0, 0, 1.0], [], config))
        xs = np.arange(1.0, 13.0)
        out = run(core, xs)
        assert out[:5] == pytest.approx(np.zeros(5))
        assert out[5:] == pytest.approx(xs[:-5])

    def test_matches_lfilter(self, config, noise):
        """Test many samples (buffer wrap-around) against scipy."""
        c = CoefficientSet.from_lists([0.3, 0.2, -0.1, 0.05], [0.0, 0.5, -0.2, 0.0, 0.0, 0.1], config)
        core = IIRFilterCore(c)
        expected = lfilter([0.3, 0.2, -0.1, 0.05], [1.0, -0.5, 0.2, 0.0, 0.0, -0.1], noise[:500])
        assert run(core, noise[:500]) == pytest.approx(expected)

    def test_output_and_pointer(self, one_pole):
        """Test the last output and pointer advance."""
        core = IIRFilterCore(one_pole)
        core.step(1.0)
        core.step(0.0)
        assert core.output == pytest.approx(0.5)
        assert core.write_pointer == 2

    def test_determinism(self, one_pole, noise):
        """Test identical state and input give identical output."""
        a, b = IIRFilterCore(one_pole), IIRFilterCore(one_pole)
        assert np.array_equal(run(a, noise[:200]), run(b, noise[:200]))

    def test_reset_restarts_response(self, one_pole, noise):
        """Test reset makes the next impulse response identical to a fresh core."""
        core = IIRFilterCore(one_pole)
        run(core, noise[:37])
        core.reset()
        assert core.output == 0.0
        assert not core.prev_inputs.any() and not core.prev_outputs.any()
        fresh = IIRFilterCore(one_pole)
        assert run(core, noise[:50]) == pytest.approx(run(fresh, noise[:50]))

    def test_set_coefficients_keeps_history(self, identity, one_pole):
        """Test swapping coefficients does not clear the buffers."""
        core = IIRFilterCore(identity)
        core.step(1.0)
        core.set_coefficients(one_pole)
        assert core.step(0.0) == pytest.approx(0.0 + 0.5 * 1.0)

    def test_mismatched_order_rejected(self, identity):
        """Test a snapshot with another slot count is refused."""
        core = IIRFilterCore(identity)
        other = CoefficientSet.default(FilterConfig(num_coeffs=8))
        with pytest.raises(ValueError):
            core.set_coefficients(other)


@pytest.mark.unit
class TestProcess:
    """Test the block path."""

    def test_block_equals_steps(self, config, noise):
        """Test block and per-sample outputs agree, including carried state."""
        c = CoefficientSet.from_lists([0.5, -0.25, 0.1], [0.0, 0.7, -0.3, 0.1], config)
        per_sample = IIRFilterCore(c)
        block = IIRFilterCore(c)

        expected = run(per_sample, noise[:300])
        got = np.concatenate([block.process(noise[:7]), block.process(noise[7:128]),
                              block.process(noise[128:300])])
        assert got == pytest.approx(expected)
        assert block.write_pointer == per_sample.write_pointer
        assert block.prev_outputs == pytest.approx(per_sample.prev_outputs)
        assert block.prev_inputs == pytest.approx(per_sample.prev_inputs)

    def test_steps_continue_a_block(self, config, noise):
        """Test the per-sample path picks up after a block."""
        c = CoefficientSet.from_lists([1.0, 0.3], [0.0, -0.4, 0.2], config)
        mixed = IIRFilterCore(c)
        reference = IIRFilterCore(c)
        head = mixed.process(noise[:100])
        tail = run(mixed, noise[100:160])
        assert np.concatenate([head, tail]) == pytest.approx(run(reference, noise[:160]))

    def test_empty_block(self, identity):
        """Test an empty block leaves the state alone."""
        core = IIRFilterCore(identity)
        assert core.process(np.zeros(0)).size == 0
        assert core.write_pointer == 0
