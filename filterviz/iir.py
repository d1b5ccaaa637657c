# iir.py — direct-form IIR core with circular history buffers
# ------------------------------------------------------------
#   y[n] = Σ_{i<L} a_i x[n-i] + Σ_{1<=j<L} b_j y[n-j]      (L = K/2)
# step()    : one sample, pure-Python loop over the L-slot ring buffers
# process() : a whole block through scipy.signal.lfilter, with the ring
#             buffers converted to / from lfilter initial conditions so
#             both paths continue each other seamlessly
# ------------------------------------------------------------
from __future__ import annotations

import numpy as np
from scipy.signal import lfilter, lfiltic

from .coefficients import CoefficientSet

__all__ = ["IIRFilterCore"]


class IIRFilterCore:
    """Sample-by-sample realisation of one coefficient snapshot."""

    def __init__(self, coeffs: CoefficientSet | None = None):
        coeffs = coeffs or CoefficientSet.default()
        self.order = coeffs.config.order
        self.prev_inputs = np.zeros(self.order, dtype=np.float64)
        self.prev_outputs = np.zeros(self.order, dtype=np.float64)
        self.write_pointer = 0
        self.output = 0.0
        self.set_coefficients(coeffs)

    def set_coefficients(self, coeffs: CoefficientSet) -> None:
        if coeffs.config.order != self.order:
            raise ValueError(f"snapshot has {coeffs.config.order} slots per side, core has {self.order}")
        self.coefficients = coeffs
        self._a = coeffs.feedforward
        self._b = coeffs.feedback

    def reset(self) -> None:
        self.prev_inputs.fill(0.0)
        self.prev_outputs.fill(0.0)
        self.output = 0.0

    # ------------------------------------------------------------------
    # Per-sample path
    # ------------------------------------------------------------------
    def step(self, excitation: float) -> float:
        """Push one input sample and return the raw (unlimited) output."""
        n = self.order
        wp = self.write_pointer
        a, b = self._a, self._b
        xin, yout = self.prev_inputs, self.prev_outputs

        xin[wp] = excitation
        acc = 0.0
        for i in range(n):
            acc += a[i] * xin[(wp - i) % n]
        for j in range(1, n):
            acc += b[j] * yout[(wp - j) % n]

        yout[wp] = acc
        self.write_pointer = (wp + 1) % n
        self.output = float(acc)
        return self.output

    # ------------------------------------------------------------------
    # Block path
    # ------------------------------------------------------------------
    def _lfilter_coefficients(self) -> tuple[np.ndarray, np.ndarray]:
        num = np.asarray(self._a, dtype=np.float64)
        den = np.concatenate(([1.0], -np.asarray(self._b[1:], dtype=np.float64)))
        return num, den

    def process(self, block: np.ndarray) -> np.ndarray:
        """Filter *block*; state carries over exactly as with repeated step()."""
        x = np.asarray(block, dtype=np.float64)
        if x.size == 0:
            return np.zeros(0, dtype=np.float64)

        n = self.order
        wp = self.write_pointer
        num, den = self._lfilter_coefficients()

        # most recent first: x[-1], x[-2], …
        lags = (wp - np.arange(1, n)) % n
        zi = lfiltic(num, den, self.prev_outputs[lags], self.prev_inputs[lags])
        y, _ = lfilter(num, den, x, zi=zi)

        tail = min(len(x), n)
        for k in range(len(x) - tail, len(x)):
            slot = (wp + k) % n
            self.prev_inputs[slot] = x[k]
            self.prev_outputs[slot] = y[k]
        self.write_pointer = (wp + len(x)) % n
        self.output = float(y[-1])
        return y
