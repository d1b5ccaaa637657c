# engine.py — high-level API that wires coefficient edits through analysis
# -------------------------------------------------------------------------
# Control side
#   set_coefficients / edit → calculate() → roots, stability, response,
#   equation text
# Audio side
#   render_block() reads one immutable AudioSnapshot (published by a single
#   reference assignment) and drives the IIR core; it never touches the
#   analysis path.
# -------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger

from .analysis import PoleZeroAnalysis, StabilityState, analyze_roots
from .coefficients import CoefficientSet, FilterConfig, parse_coefficient_text
from .equations import TransferFunctionText, difference_equation, transfer_function
from .iir import IIRFilterCore
from .response import DisplayScale, ResponseCurve, compute_response, display_scale
from .rootfinder import RootSet
from .utils import output_limit

__all__ = ["AudioSnapshot", "FilterEngine"]


@dataclass(frozen=True, slots=True)
class AudioSnapshot:
    """Everything the audio callback needs, swapped in as one reference."""

    coefficients: CoefficientSet
    stable: bool
    output_scaling: float


class FilterEngine:
    """One filter: coefficient state, its analysis and its audio renderer.

    Parameters
    ----------
    config : FilterConfig, optional
        Slot count and response resolution; defaults to ``FilterConfig()``.
    coefficients : CoefficientSet, optional
        Initial snapshot; defaults to the identity filter.
    seed : int, default 0
        Seed of the white-noise excitation used by ``render_block``.
    log_scale : bool, default False
        Logarithmic frequency warping of the response curve.
    auto_scale : bool, default True
        Scale audio by ``1 / highest_gain``.
    """

    def __init__(self, config: Optional[FilterConfig] = None,
                 coefficients: Optional[CoefficientSet] = None, *,
                 seed: int = 0, log_scale: bool = False, auto_scale: bool = True):
        if coefficients is not None and config is not None and coefficients.config != config:
            raise ValueError("coefficients were built for a different FilterConfig")
        self.config = config or (coefficients.config if coefficients is not None else FilterConfig())
        self._coefficients = coefficients or CoefficientSet.default(self.config)

        self._log_scale = log_scale
        self._auto_scale = auto_scale
        self._playing = False

        self._analysis: Optional[PoleZeroAnalysis] = None
        self._converged = False
        self._curve: Optional[ResponseCurve] = None
        self._difference_equation = ""
        self._transfer_function = TransferFunctionText("0", "1")

        self._core = IIRFilterCore(self._coefficients)
        self._rng = np.random.default_rng(seed)
        self._was_stable = False
        self._snapshot = AudioSnapshot(self._coefficients, False, 1.0)

        self.calculate()

    # ==================================================
    #                  coefficient input
    # ==================================================
    @property
    def coefficients(self) -> CoefficientSet:
        return self._coefficients

    def set_coefficients(self, coefficients: CoefficientSet) -> None:
        """Store a new snapshot; call ``calculate()`` to refresh the analysis."""
        if coefficients.config != self.config:
            raise ValueError("coefficients were built for a different FilterConfig")
        self._coefficients = coefficients

    def edit(self, name: str, text: str) -> None:
        """Text edit of one slot (``"a1"``, ``"b3"`` …) followed by a full recompute.

        Malformed text reads as 0; an unknown name raises ValueError.
        """
        value = parse_coefficient_text(text)
        self._coefficients = self._coefficients.with_value(name, value)
        self.calculate()

    # ==================================================
    #                  analysis
    # ==================================================
    def calculate(self) -> None:
        """Recompute roots, stability, response and equations, in that order."""
        coeffs = self._coefficients

        result = analyze_roots(coeffs, self.config)
        self._converged = result.converged
        if result.converged or self._analysis is None:
            self._analysis = result
        else:
            logger.warning("keeping the previous pole/zero analysis until the next successful recompute")

        self._curve = compute_response(coeffs, self.config, self._log_scale)
        self._difference_equation = difference_equation(coeffs)
        self._transfer_function = transfer_function(coeffs)
        self._publish()

    def _publish(self) -> None:
        self._snapshot = AudioSnapshot(self._coefficients, self.is_stable(), self.output_scaling)

    def get_roots(self) -> tuple[RootSet, RootSet]:
        """``(zeros, poles)`` of the last valid analysis."""
        return self._analysis.zeros, self._analysis.poles

    @property
    def analysis(self) -> PoleZeroAnalysis:
        return self._analysis

    @property
    def stability(self) -> StabilityState:
        if not self._converged:
            return StabilityState.UNSTABLE
        return self._analysis.stability

    def is_stable(self) -> bool:
        return self.stability is StabilityState.STABLE

    def get_response_curve(self) -> ResponseCurve:
        return self._curve

    def get_highest_gain_magnitude(self) -> float:
        return self._curve.highest_gain

    def display_scale(self, plot_top: float, plot_height: float) -> DisplayScale:
        return display_scale(self._curve, plot_top, plot_height)

    @property
    def difference_equation(self) -> str:
        return self._difference_equation

    @property
    def transfer_function(self) -> TransferFunctionText:
        return self._transfer_function

    # ==================================================
    #                  player controls
    # ==================================================
    @property
    def log_scale(self) -> bool:
        return self._log_scale

    def set_log_scale(self, enabled: bool) -> None:
        self._log_scale = bool(enabled)
        self._curve = compute_response(self._coefficients, self.config, self._log_scale)
        self._publish()

    @property
    def auto_scale(self) -> bool:
        return self._auto_scale

    def set_auto_scale(self, enabled: bool) -> None:
        self._auto_scale = bool(enabled)
        self._publish()

    @property
    def playing(self) -> bool:
        return self._playing

    def set_playing(self, enabled: bool) -> None:
        self._playing = bool(enabled)

    @property
    def output_scaling(self) -> float:
        """``1 / highest_gain`` with auto-scale on, else 1."""
        if not self._auto_scale or self._curve is None:
            return 1.0
        peak = self._curve.highest_gain
        if peak <= 0.0:
            return 1.0
        return 1.0 / peak

    # ==================================================
    #                  audio
    # ==================================================
    def _sync_core(self) -> AudioSnapshot:
        snap = self._snapshot
        if snap.coefficients is not self._core.coefficients:
            self._core.set_coefficients(snap.coefficients)
        # stale history from an unstable filter would replay; clear it on entry
        if snap.stable and not self._was_stable:
            self._core.reset()
        self._was_stable = snap.stable
        return snap

    def step_filter(self, excitation: float) -> float:
        """One sample of the current filter limited to [-1, 1]; no gating or scaling.

        The unlimited value is available from ``IIRFilterCore.step``.
        """
        self._sync_core()
        return output_limit(self._core.step(excitation))

    def noise(self, num_samples: int) -> np.ndarray:
        """Uniform white noise in [-0.5, 0.5)."""
        return self._rng.random(num_samples) - 0.5

    def render_block(self, num_samples: int, excitation: Optional[np.ndarray] = None) -> np.ndarray:
        """Produce one audio block the way the player callback does.

        The filter runs only while stable; output is silent unless playing,
        scaled by ``output_scaling`` and limited to [-1, 1].
        """
        snap = self._sync_core()
        if excitation is None:
            excitation = self.noise(num_samples)
        else:
            excitation = np.asarray(excitation, dtype=np.float64)
            if excitation.shape != (num_samples,):
                raise ValueError(f"excitation must have shape ({num_samples},)")

        if not snap.stable:
            return np.zeros(num_samples)

        y = self._core.process(excitation)
        if not self._playing:
            return np.zeros(num_samples)
        return np.clip(y * snap.output_scaling, -1.0, 1.0)

    def limited_sample(self, excitation: float) -> float:
        """Per-sample counterpart of ``render_block`` for callback-style hosts."""
        snap = self._sync_core()
        if not snap.stable:
            return 0.0
        out = self._core.step(excitation)
        if not self._playing:
            return 0.0
        return output_limit(out * snap.output_scaling)
