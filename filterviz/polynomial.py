# polynomial.py — real-coefficient polynomial with evaluation and algebra
# -----------------------------------------------------------------------
# Coefficients are stored in order of increasing power; the degree is
# trimmed after every mutation so the leading coefficient is never below
# DBL_EPSILON in magnitude (the zero polynomial is degree 0, value 0).
#   • real / imaginary / complex evaluation (Horner, Birge-Vieta)
#   • derivative, integral, long division, + - * / operators
#   • root finding via the Jenkins-Traub solver
# -----------------------------------------------------------------------
from __future__ import annotations

from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .rootfinder import PolynomialRootFinder, RootSet
from .utils import DBL_EPSILON

__all__ = ["Polynomial"]

Number = Union[int, float]


class Polynomial:
    """Polynomial ``Σ c[i] x^i`` with real coefficients."""

    __slots__ = ("_coefficients", "_degree")

    def __init__(self, coefficients: Sequence[float] = (0.0,), degree: Optional[int] = None):
        self._coefficients = [0.0]
        self._degree = 0
        self.set_coefficients(coefficients, degree)

    # ---------- constructors ----------
    @classmethod
    def scalar(cls, value: float) -> "Polynomial":
        return cls([value])

    @classmethod
    def linear(cls, x_coefficient: float, scalar: float) -> "Polynomial":
        return cls([scalar, x_coefficient])

    @classmethod
    def quadratic(cls, x_squared: float, x_coefficient: float, scalar: float) -> "Polynomial":
        return cls([scalar, x_coefficient, x_squared])

    @classmethod
    def from_roots(cls, real_roots: Iterable[float] = (),
                   complex_pairs: Iterable[tuple[float, float]] = ()) -> "Polynomial":
        """Monic polynomial with the given real roots and conjugate pairs ``(re, im)``."""
        poly = cls.scalar(1.0)
        for r in real_roots:
            poly.include_real_root(r)
        for re, im in complex_pairs:
            poly.include_complex_conjugate_root_pair(re, im)
        return poly

    # ---------- storage ----------
    def set_coefficients(self, coefficients: Sequence[float], degree: Optional[int] = None) -> None:
        """Store ``coefficients[0..degree]`` and trim negligible leading terms."""
        if degree is None:
            degree = len(coefficients) - 1
        if degree < 0:
            raise ValueError("a polynomial needs at least one coefficient")
        if len(coefficients) < degree + 1:
            raise ValueError(f"need {degree + 1} coefficients for degree {degree}")
        self._coefficients = [float(c) for c in coefficients[: degree + 1]]
        self._degree = degree
        self._adjust_degree()

    def _adjust_degree(self) -> None:
        while self._degree > 0 and abs(self._coefficients[self._degree]) < DBL_EPSILON:
            self._degree -= 1
        del self._coefficients[self._degree + 1:]

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def coefficients(self) -> np.ndarray:
        return np.array(self._coefficients, dtype=np.float64)

    def is_zero(self) -> bool:
        return self._degree == 0 and self._coefficients[0] == 0.0

    def copy(self) -> "Polynomial":
        return Polynomial(self._coefficients)

    def __len__(self) -> int:
        return self._degree + 1

    def __getitem__(self, power: int) -> float:
        return self._coefficients[power]

    def __setitem__(self, power: int, value: float) -> None:
        self._coefficients[power] = float(value)
        self._adjust_degree()

    def __repr__(self) -> str:
        return f"Polynomial({self._coefficients!r})"

    # ==================================================
    #                  evaluation
    # ==================================================
    def evaluate_real(self, x: float) -> float:
        c = self._coefficients
        value = c[self._degree]
        for i in range(self._degree - 1, -1, -1):
            value = value * x + c[i]
        return value

    def evaluate_real_with_derivative(self, x: float) -> tuple[float, float]:
        """Value and first derivative at *x* in one Horner pass."""
        c = self._coefficients
        value = c[self._degree]
        deriv = 0.0
        for i in range(self._degree - 1, -1, -1):
            deriv = deriv * x + value
            value = value * x + c[i]
        return value, deriv

    def evaluate_imaginary(self, xi: float) -> tuple[float, float]:
        """Value at the purely imaginary point ``i*xi`` as ``(re, im)``.

        Powers of i cycle 1, i, -1, -i, so even terms feed the real part and
        odd terms the imaginary part with alternating signs.
        """
        c = self._coefficients
        re = 0.0
        im = 0.0
        power = 1.0
        for i in range(self._degree + 1):
            term = c[i] * power
            quadrant = i % 4
            if quadrant == 0:
                re += term
            elif quadrant == 1:
                im += term
            elif quadrant == 2:
                re -= term
            else:
                im -= term
            power *= xi
        return re, im

    def evaluate_complex(self, re: float, im: float) -> tuple[float, float]:
        """Value at ``re + i*im``; complex Horner pass."""
        c = self._coefficients
        pr = c[self._degree]
        pi = 0.0
        for i in range(self._degree - 1, -1, -1):
            pr, pi = pr * re - pi * im + c[i], pr * im + pi * re
        return pr, pi

    def evaluate_complex_with_derivative(self, re: float, im: float
                                         ) -> tuple[float, float, float, float]:
        """Value and derivative at ``re + i*im`` as ``(pr, pi, dr, di)``.

        Birge-Vieta: the derivative accumulates the intermediate Horner values.
        """
        c = self._coefficients
        pr = c[self._degree]
        pi = 0.0
        dr = 0.0
        di = 0.0
        for i in range(self._degree - 1, -1, -1):
            dr, di = dr * re - di * im + pr, dr * im + di * re + pi
            pr, pi = pr * re - pi * im + c[i], pr * im + pi * re
        return pr, pi, dr, di

    def __call__(self, x: Union[Number, complex]):
        if isinstance(x, complex):
            pr, pi = self.evaluate_complex(x.real, x.imag)
            return complex(pr, pi)
        return self.evaluate_real(float(x))

    # ==================================================
    #                  calculus
    # ==================================================
    def derivative(self) -> "Polynomial":
        if self._degree == 0:
            return Polynomial.scalar(0.0)
        c = self._coefficients
        return Polynomial([i * c[i] for i in range(1, self._degree + 1)])

    def integral(self) -> "Polynomial":
        """Antiderivative with a zero constant of integration."""
        c = self._coefficients
        return Polynomial([0.0] + [c[i] / (i + 1) for i in range(self._degree + 1)])

    # ==================================================
    #                  roots
    # ==================================================
    def find_roots(self) -> RootSet:
        return PolynomialRootFinder().find_roots(self._coefficients, self._degree)

    def include_real_root(self, root: float) -> None:
        """Multiply by ``(x - root)``."""
        if self.is_zero():
            self._coefficients[0] = 1.0
        c = self._coefficients
        out = [0.0] * (self._degree + 2)
        for i, ci in enumerate(c):
            out[i + 1] += ci
            out[i] -= root * ci
        self._coefficients = out
        self._degree += 1
        self._adjust_degree()

    def include_complex_conjugate_root_pair(self, re: float, im: float) -> None:
        """Multiply by ``(x - (re + i im)) (x - (re - i im))``."""
        if self.is_zero():
            self._coefficients[0] = 1.0
        b = -2.0 * re
        a = re * re + im * im
        c = self._coefficients
        out = [0.0] * (self._degree + 3)
        for i, ci in enumerate(c):
            out[i + 2] += ci
            out[i + 1] += b * ci
            out[i] += a * ci
        self._coefficients = out
        self._degree += 2
        self._adjust_degree()

    # ==================================================
    #                  division
    # ==================================================
    def divide(self, divisor: "Polynomial") -> tuple["Polynomial", "Polynomial"]:
        """Long division; returns ``(quotient, remainder)``."""
        if divisor.is_zero():
            raise ZeroDivisionError("polynomial division by the zero polynomial")

        if self._degree < divisor._degree:
            return Polynomial.scalar(0.0), self.copy()

        remainder = list(self._coefficients)
        d = divisor._coefficients
        dn = divisor._degree
        lead = d[dn]
        quotient = [0.0] * (self._degree - dn + 1)

        for q in range(self._degree - dn, -1, -1):
            factor = remainder[q + dn] / lead
            quotient[q] = factor
            for j in range(dn + 1):
                remainder[q + j] -= factor * d[j]

        rem = remainder[:dn] if dn > 0 else [0.0]
        return Polynomial(quotient), Polynomial(rem)

    # ==================================================
    #                  arithmetic
    # ==================================================
    @staticmethod
    def _coerce(other) -> Optional["Polynomial"]:
        if isinstance(other, Polynomial):
            return other
        if isinstance(other, (int, float, np.floating, np.integer)):
            return Polynomial.scalar(float(other))
        return None

    def _add(self, other: "Polynomial", sign: float) -> "Polynomial":
        size = max(self._degree, other._degree) + 1
        out = [0.0] * size
        for i, ci in enumerate(self._coefficients):
            out[i] += ci
        for i, ci in enumerate(other._coefficients):
            out[i] += sign * ci
        return Polynomial(out)

    def _mul(self, other: "Polynomial") -> "Polynomial":
        out = [0.0] * (self._degree + other._degree + 1)
        for i, ci in enumerate(self._coefficients):
            for j, cj in enumerate(other._coefficients):
                out[i + j] += ci * cj
        return Polynomial(out)

    def __add__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is None else self._add(other, 1.0)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is None else self._add(other, -1.0)

    def __rsub__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is None else other._add(self, -1.0)

    def __mul__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is None else self._mul(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        """Quotient of the long division (division by a scalar scales)."""
        if isinstance(other, (int, float, np.floating, np.integer)):
            if other == 0:
                raise ZeroDivisionError("polynomial division by zero")
            return Polynomial([c / float(other) for c in self._coefficients])
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.divide(other)[0]

    def __iadd__(self, other):
        result = self + other
        if result is NotImplemented:
            return NotImplemented
        self._coefficients, self._degree = result._coefficients, result._degree
        return self

    def __isub__(self, other):
        result = self - other
        if result is NotImplemented:
            return NotImplemented
        self._coefficients, self._degree = result._coefficients, result._degree
        return self

    def __imul__(self, other):
        result = self * other
        if result is NotImplemented:
            return NotImplemented
        self._coefficients, self._degree = result._coefficients, result._degree
        return self

    def __itruediv__(self, other):
        result = self / other
        if result is NotImplemented:
            return NotImplemented
        self._coefficients, self._degree = result._coefficients, result._degree
        return self

    def __pos__(self) -> "Polynomial":
        return self.copy()

    def __neg__(self) -> "Polynomial":
        return Polynomial([-c for c in self._coefficients])

    def __eq__(self, other) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._degree == other._degree and self._coefficients == other._coefficients

    __hash__ = None  # mutable
