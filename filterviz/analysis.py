# analysis.py — zeros, poles and stability of the current filter
# ----------------------------------------------------------------
# Transfer function of  y[n] = Σ a_i x[n-i] + Σ b_j y[n-j]  in positive
# powers of z:
#     zeros : a[0] z^N + a[1] z^(N-1) + … + a[N]          (N = top a lag)
#     poles : z^M - b[1] z^(M-1) - … - b[M]               (M = top b lag)
# Stability compares every pole modulus, rounded to a fixed number of
# decimals, against the unit circle.
# ----------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from .coefficients import CoefficientSet, FilterConfig
from .polynomial import Polynomial
from .rootfinder import RootSet, RootStatus
from .utils import round_to

__all__ = [
    "StabilityState",
    "PoleZeroAnalysis",
    "zero_polynomial",
    "pole_polynomial",
    "find_zeros",
    "find_poles",
    "classify_stability",
    "analyze_roots",
]


class StabilityState(Enum):
    STABLE = "stable"
    MARGINAL = "marginally stable"
    UNSTABLE = "unstable"


@dataclass(frozen=True, slots=True)
class PoleZeroAnalysis:
    zeros: RootSet
    poles: RootSet
    stability: StabilityState
    converged: bool

    @property
    def is_stable(self) -> bool:
        return self.converged and self.stability is StabilityState.STABLE


# ------------------------------------------------------------------
# Polynomials
# ------------------------------------------------------------------

def zero_polynomial(coeffs: CoefficientSet) -> Polynomial:
    n = coeffs.highest_feedforward_order()
    a = coeffs.feedforward
    return Polynomial([a[n - p] for p in range(n + 1)])


def pole_polynomial(coeffs: CoefficientSet) -> Polynomial:
    m = coeffs.highest_feedback_order()
    b = coeffs.feedback
    c = [0.0] * (m + 1)
    c[m] = 1.0
    for j in range(1, m + 1):
        c[m - j] = -b[j]
    return Polynomial(c)


def find_zeros(coeffs: CoefficientSet) -> RootSet:
    """Roots of the numerator; an all-zero or constant numerator has none."""
    return zero_polynomial(coeffs).find_roots()


def find_poles(coeffs: CoefficientSet) -> RootSet:
    return pole_polynomial(coeffs).find_roots()


# ------------------------------------------------------------------
# Stability
# ------------------------------------------------------------------

def classify_stability(poles: RootSet, decimals: int = 4) -> StabilityState:
    """Classify pole moduli rounded to *decimals* places against 1."""
    state = StabilityState.STABLE
    for modulus in poles.moduli:
        rounded = round_to(float(modulus), decimals)
        if rounded > 1.0:
            return StabilityState.UNSTABLE
        if rounded == 1.0:
            state = StabilityState.MARGINAL
    return state


def analyze_roots(coeffs: CoefficientSet, config: FilterConfig | None = None) -> PoleZeroAnalysis:
    config = config or coeffs.config
    zeros = find_zeros(coeffs)
    poles = find_poles(coeffs)

    if zeros.status is RootStatus.FAILED_TO_CONVERGE:
        logger.warning("zero search did not converge ({} of {} roots)", len(zeros), zeros.degree)

    converged = poles.ok
    if not converged:
        logger.warning("pole search did not converge ({} of {} roots); "
                       "treating the filter as unstable", len(poles), poles.degree)
        stability = StabilityState.UNSTABLE
    else:
        stability = classify_stability(poles, config.stability_decimals)

    logger.debug("{} zeros, {} poles, {}", len(zeros), len(poles), stability.value)
    return PoleZeroAnalysis(zeros, poles, stability, converged)
