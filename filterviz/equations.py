# equations.py — text of the difference equation and transfer function
# ---------------------------------------------------------------------
#   y[n] = x[n] + 0.5x[n - 1] - 0.25y[n - 2]
#   H(z) = (1 + 0.5z^-1) / (1 - 0.25z^-2)
# Zero coefficients are left out and unit magnitudes print without the
# number.
# ---------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass

from .coefficients import CoefficientSet

__all__ = ["difference_equation", "transfer_function", "TransferFunctionText"]


def _number(value: float) -> str:
    return f"{value:.10g}"


def _join(terms: list[tuple[float, str]]) -> str:
    """Chain signed terms as ``a + b - c``; magnitudes of 1 are implied."""
    out = ""
    for value, symbol in terms:
        magnitude = abs(value)
        body = symbol if magnitude == 1.0 and symbol else _number(magnitude) + symbol
        if not out:
            out = ("-" if value < 0.0 else "") + body
        else:
            out += (" - " if value < 0.0 else " + ") + body
    return out


def difference_equation(coeffs: CoefficientSet) -> str:
    terms: list[tuple[float, str]] = []
    for i, a in enumerate(coeffs.feedforward):
        if a != 0.0:
            terms.append((a, "x[n]" if i == 0 else f"x[n - {i}]"))
    for j, b in enumerate(coeffs.feedback):
        if j and b != 0.0:
            terms.append((b, f"y[n - {j}]"))
    return "y[n] = " + (_join(terms) or "0")


@dataclass(frozen=True, slots=True)
class TransferFunctionText:
    numerator: str
    denominator: str

    @property
    def has_denominator(self) -> bool:
        return self.denominator != "1"

    def __str__(self) -> str:
        if not self.has_denominator:
            return f"H(z) = {self.numerator}"
        return f"H(z) = ({self.numerator}) / ({self.denominator})"


def transfer_function(coeffs: CoefficientSet) -> TransferFunctionText:
    num_terms: list[tuple[float, str]] = []
    for i, a in enumerate(coeffs.feedforward):
        if a != 0.0:
            # the constant term always shows its number
            num_terms.append((a, "" if i == 0 else f"z^-{i}"))

    denominator = "1"
    den_terms = [(-b, f"z^-{j}") for j, b in enumerate(coeffs.feedback) if j and b != 0.0]
    if den_terms:
        denominator = _join([(1.0, "")] + den_terms)

    return TransferFunctionText(_join(num_terms) or "0", denominator)
