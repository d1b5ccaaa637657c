# response.py — frequency / phase response on the unit circle
# ------------------------------------------------------------
#   H(ω) = Σ a_j e^{-iωj} / (1 - Σ_{j≥1} b_j e^{-iωj})
# evaluated directly at M points over (0, π]; with K slots and M in
# the thousands a direct O(M·K) sum beats an FFT.
#   • linear or logarithmically warped frequency grid
#   • dB magnitude limited to [db_floor, db_ceiling]
#   • atan2 phase with the ±π/2 boundary resolved from neighbours
#   • display scaling, including the flat (pure gain) response
# ------------------------------------------------------------
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

import numpy as np
from loguru import logger

from .coefficients import CoefficientSet, FilterConfig
from .utils import round_to

__all__ = [
    "ResponseCurve",
    "DisplayScale",
    "frequency_grid",
    "compute_response",
    "display_scale",
    "frequency_to_axis",
    "log_grid_frequencies",
]

_FLAT_DECIMALS: Final = 4


@dataclass(frozen=True, slots=True)
class ResponseCurve:
    """One full recomputation of the response; never updated in place."""

    frequency_index: np.ndarray     # k = 1..M
    omega: np.ndarray               # rad / sample
    magnitude_db: np.ndarray
    phase: np.ndarray               # rad, (-π, π]
    gain: np.ndarray                # |H|
    log_scale: bool
    highest_gain: float
    highest_db: float
    lowest_db: float
    gain_above_zero: bool

    def __len__(self) -> int:
        return len(self.omega)

    @property
    def is_flat(self) -> bool:
        return round_to(self.highest_db, _FLAT_DECIMALS) == round_to(self.lowest_db, _FLAT_DECIMALS)

    def frequencies_hz(self, sample_rate: float) -> np.ndarray:
        return self.omega / math.pi * (sample_rate / 2.0)

    def unwrapped_phase(self) -> np.ndarray:
        return np.unwrap(self.phase)


@dataclass(frozen=True, slots=True)
class DisplayScale:
    """Vertical mapping of a magnitude plot: ``y = zero_line - db * pixels_per_db``."""

    zero_line: float
    pixels_per_db: float

    def to_y(self, db):
        return self.zero_line - np.asarray(db) * self.pixels_per_db


# ------------------------------------------------------------------
# Frequency grid
# ------------------------------------------------------------------

def frequency_grid(num_frequencies: int, log_scale: bool = False, log_base: float = 1000.0) -> np.ndarray:
    """Angular frequencies for k = 1..M (ω_M = π)."""
    k = np.arange(1, num_frequencies + 1, dtype=np.float64)
    if log_scale:
        return math.pi * (np.power(log_base, k / num_frequencies) - 1.0) / (log_base - 1.0)
    return math.pi * k / num_frequencies


def frequency_to_axis(freq_hz, sample_rate: float, log_scale: bool = False, log_base: float = 1000.0):
    """Normalised x position in [0, 1] of *freq_hz* on the (warped) axis."""
    nyquist = sample_rate / 2.0
    f = np.asarray(freq_hz, dtype=np.float64)
    if log_scale:
        return np.log(f * (log_base - 1.0) / nyquist + 1.0) / math.log(log_base)
    return f / nyquist


def log_grid_frequencies(sample_rate: float) -> list[int]:
    """Grid lines 10, 20, … 90, 100, 200, … strictly below Nyquist."""
    nyquist = sample_rate / 2.0
    lines = []
    decade = 10
    while decade < nyquist:
        for m in range(1, 10):
            f = m * decade
            if f >= nyquist:
                break
            lines.append(f)
        decade *= 10
    return lines


# ------------------------------------------------------------------
# Response
# ------------------------------------------------------------------

def _resolve_phase_boundaries(h: np.ndarray, phase: np.ndarray) -> np.ndarray:
    """Give ±π/2 samples (Re exactly 0) the sign of their nearest regular neighbour."""
    boundary = (h.real == 0.0) & (h.imag != 0.0)
    if not boundary.any():
        return phase

    n = len(h)
    idx = np.arange(n)
    previous = np.maximum.accumulate(np.where(boundary, -1, idx))
    following = np.minimum.accumulate(np.where(boundary, n, idx)[::-1])[::-1]
    source = np.where(previous >= 0, previous, following)

    padded = np.append(phase, 0.0)           # index n: no neighbour at all
    sign = np.sign(padded[source])
    sign = np.where(sign != 0.0, sign, np.sign(h.imag))

    out = phase.copy()
    out[boundary] = sign[boundary] * (math.pi / 2.0)
    return out


def compute_response(coeffs: CoefficientSet, config: FilterConfig | None = None,
                     log_scale: bool = False) -> ResponseCurve:
    config = config or coeffs.config
    m = config.num_frequencies
    omega = frequency_grid(m, log_scale, config.log_base)

    a, b = coeffs.as_arrays()
    lags = np.arange(len(a))
    basis = np.exp(-1j * np.outer(omega, lags))          # (M, L)

    numerator = basis @ a
    fb = b.copy()
    fb[0] = 0.0
    denominator = 1.0 - basis @ fb

    with np.errstate(divide="ignore", invalid="ignore"):
        h = numerator / denominator
    singular = ~np.isfinite(h)
    if singular.any():
        logger.debug("{} response samples sit on a pole", int(singular.sum()))
        h = np.where(singular, np.inf + 0j, h)

    gain = np.abs(h)
    with np.errstate(divide="ignore"):
        db = 20.0 * np.log10(gain)
    db = np.clip(np.nan_to_num(db, nan=config.db_ceiling, neginf=config.db_floor, posinf=config.db_ceiling),
                 config.db_floor, config.db_ceiling)

    phase = np.where(singular, 0.0, np.arctan2(h.imag, h.real))
    phase = _resolve_phase_boundaries(np.where(singular, 1.0 + 0j, h), phase)

    return ResponseCurve(
        frequency_index=np.arange(1, m + 1),
        omega=omega,
        magnitude_db=db,
        phase=phase,
        gain=gain,
        log_scale=log_scale,
        highest_gain=float(gain.max()),
        highest_db=float(db.max()),
        lowest_db=float(db.min()),
        gain_above_zero=bool((db > 0.0).any()),
    )


def display_scale(curve: ResponseCurve, plot_top: float, plot_height: float) -> DisplayScale:
    """Zero-dB line and dB→pixel factor for a plot spanning *plot_height* pixels.

    A flat curve has no dynamic range: 0 dB is centred, or pinned to the
    bottom (positive gain) / top (negative gain) edge so the line fills the plot.
    """
    hi = curve.highest_db
    lo = curve.lowest_db
    bottom = plot_top + plot_height

    if curve.is_flat:
        if round_to(hi, _FLAT_DECIMALS) == 0.0:
            return DisplayScale(plot_top + plot_height / 2.0, 1.0)
        if hi > 0.0:
            return DisplayScale(bottom, plot_height / hi)
        return DisplayScale(plot_top, plot_height / -lo)

    scaling = plot_height / (hi - lo)
    return DisplayScale(bottom - (0.0 - lo) * scaling, scaling)
