# rootfinder.py — Jenkins-Traub three-stage root finder for real polynomials
# ----------------------------------------------------------------------------
#  * Based on the RPOLY algorithm (Collected Algorithms from ACM, no. 493)
#      Jenkins & Traub, "A three-stage algorithm for real polynomials using
#      quadratic iteration", SIAM J. Numer. Anal. 7 (1970), 545-566
#  * Stage 1: five no-shift K-polynomial steps
#  * Stage 2: fixed-shift steps on a complex shift of modulus `bnd`, rotated
#    by 94° on every retry
#  * Stage 3: variable-shift quadratic or real iteration, then deflation
#  * Degree <= 2 is finished in closed form
# Machine constants are the single-precision ones the tuned thresholds assume.
# ----------------------------------------------------------------------------
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional, Sequence

import numpy as np
from loguru import logger

__all__ = [
    "RootStatus",
    "RootSet",
    "PolynomialRootFinder",
    "solve_quadratic",
]

# ---------- machine constants ----------
_BASE: Final = 2.0
_ETA: Final = float(np.finfo(np.float32).eps)        # FLT_EPSILON
_ETA_N: Final = 10.0 * _ETA
_ETA_N_SQUARED: Final = 100.0 * _ETA
_MAXIMUM_FLOAT: Final = float(np.finfo(np.float32).max)
_MINIMUM_FLOAT: Final = float(np.finfo(np.float32).tiny)

# ---------- shift rotation (94°) ----------
_XX_INITIAL: Final = 0.70710678
_COSR: Final = -0.069756474
_SINR: Final = 0.99756405

# ---------- iteration budgets ----------
_NO_SHIFT_STEPS: Final = 5
_MAX_SHIFTS: Final = 20
_FIXED_SHIFT_STEPS: Final = 20
_QUADRATIC_STEPS: Final = 20
_REAL_STEPS: Final = 10
_BETA_INITIAL: Final = 0.25

# ---------- polishing on the undeflated polynomial ----------
_POLISH_STEPS: Final = 4
_POLISH_REACH: Final = 1e-2          # largest step, relative to |root|


class RootStatus(Enum):
    SUCCESS = "success"
    LEADING_COEFFICIENT_IS_ZERO = "leading coefficient is zero"
    SCALAR_VALUE_HAS_NO_ROOTS = "scalar value has no roots"
    FAILED_TO_CONVERGE = "failed to converge"


@dataclass(frozen=True, slots=True)
class RootSet:
    """Roots of one polynomial as parallel real/imaginary arrays.

    Parameters
    ----------
    real, imag : np.ndarray
        Parts of the roots that were found, in extraction order.
    status : RootStatus
        Outcome of the search.
    degree : int
        Degree of the polynomial that was solved (the number of roots a
        complete search returns).
    """

    real: np.ndarray
    imag: np.ndarray
    status: RootStatus
    degree: int

    @classmethod
    def empty(cls, status: RootStatus = RootStatus.SCALAR_VALUE_HAS_NO_ROOTS,
              degree: int = 0) -> "RootSet":
        return cls(np.zeros(0), np.zeros(0), status, degree)

    def __len__(self) -> int:
        return len(self.real)

    @property
    def roots(self) -> np.ndarray:
        return self.real + 1j * self.imag

    @property
    def moduli(self) -> np.ndarray:
        return np.hypot(self.real, self.imag)

    @property
    def complete(self) -> bool:
        return len(self.real) == self.degree

    @property
    def ok(self) -> bool:
        """True for a full solve, and for a scalar, which has no roots to find."""
        return self.status in (RootStatus.SUCCESS, RootStatus.SCALAR_VALUE_HAS_NO_ROOTS)


# ------------------------------------------------------------------
# Closed-form helpers
# ------------------------------------------------------------------

def solve_quadratic(a: float, b: float, c: float) -> tuple[float, float, float, float]:
    """Zeros of ``a x^2 + b x + c`` as ``(sr, si, lr, li)``.

    The larger real zero comes from the overflow-safe quadratic formula and the
    smaller one from the product of the zeros ``c / a``, which avoids the
    cancellation of the textbook formula. Complex zeros are returned as a
    conjugate pair with ``si >= 0``.
    """
    if a == 0.0:
        sr = -c / b if b != 0.0 else 0.0
        return sr, 0.0, 0.0, 0.0
    if c == 0.0:
        return 0.0, 0.0, -b / a, 0.0

    # discriminant, scaled to avoid overflow
    half_b = b / 2.0
    if abs(half_b) < abs(c):
        e = -a if c < 0.0 else a
        e = half_b * (half_b / abs(c)) - e
        d = math.sqrt(abs(e)) * math.sqrt(abs(c))
    else:
        e = 1.0 - (a / half_b) * (c / half_b)
        d = math.sqrt(abs(e)) * abs(half_b)

    if e >= 0.0:
        # real zeros
        if half_b >= 0.0:
            d = -d
        lr = (-half_b + d) / a
        sr = (c / lr) / a if lr != 0.0 else 0.0
        return sr, 0.0, lr, 0.0

    # complex conjugate zeros
    sr = -half_b / a
    si = abs(d / a)
    return sr, si, sr, -si


def _quadratic_synthetic_division(n_plus_one: int, u: float, v: float,
                                  p: list[float], q: list[float]) -> tuple[float, float]:
    """Divide p by ``1, u, v``; quotient into q, remainder returned as (a, b)."""
    b = p[0]
    q[0] = b
    a = p[1] - u * b
    q[1] = a
    for i in range(2, n_plus_one):
        c = p[i] - u * a - v * b
        q[i] = c
        b = a
        a = c
    return a, b


def _polish_root(coeffs: list[float], re: float, im: float) -> tuple[float, float]:
    """Newton steps for one root against the undeflated polynomial.

    *coeffs* are in order of increasing power. Value and derivative come from
    one Birge-Vieta pass; a step is taken only while it shrinks the residual
    and stays within ``_POLISH_REACH`` of the root, so repeated and clustered
    roots keep their three-stage estimates. Real roots stay real and a
    conjugate pair stays conjugate.
    """
    n = len(coeffs) - 1

    def evaluate(zr: float, zi: float) -> tuple[float, float, float, float]:
        pr = coeffs[n]
        pi = 0.0
        dr = di = 0.0
        for i in range(n - 1, -1, -1):
            dr, di = dr * zr - di * zi + pr, dr * zi + di * zr + pi
            pr, pi = pr * zr - pi * zi + coeffs[i], pr * zi + pi * zr
        return pr, pi, dr, di

    pr, pi, dr, di = evaluate(re, im)
    residual = math.hypot(pr, pi)
    for _ in range(_POLISH_STEPS):
        den = dr * dr + di * di
        if residual == 0.0 or den == 0.0:
            break
        step_r = (pr * dr + pi * di) / den
        step_i = (pi * dr - pr * di) / den
        if math.hypot(step_r, step_i) > _POLISH_REACH * math.hypot(re, im):
            break
        nr, ni = re - step_r, im - step_i
        qr, qi, er, ei = evaluate(nr, ni)
        new_residual = math.hypot(qr, qi)
        if new_residual >= residual:
            break
        re, im = nr, ni
        pr, pi, dr, di, residual = qr, qi, er, ei, new_residual
    return re, im


# ======================================================
class PolynomialRootFinder:
    """Finds every root of a real-coefficient polynomial.

    An instance keeps its working vectors between the internal stages of one
    ``find_roots`` call; use one instance per thread.
    """

    def __init__(self) -> None:
        self._reset_state(0)

    def _reset_state(self, degree: int) -> None:
        size = degree + 1
        self._p = [0.0] * size
        self._qp = [0.0] * size
        self._k = [0.0] * size
        self._qk = [0.0] * size
        self._svk = [0.0] * size
        self._degree = degree
        self._n = degree
        self._n_plus_one = size
        self._real_s = self._imag_s = 0.0
        self._u = self._v = 0.0
        self._a = self._b = self._c = self._d = 0.0
        self._a1 = self._a3 = self._a7 = 0.0
        self._e = self._f = self._g = self._h = 0.0
        self._real_sz = self._imag_sz = 0.0
        self._real_lz = self._imag_lz = 0.0
        self._are = _ETA
        self._mre = _ETA

    # ==================================================
    #                  public API
    # ==================================================
    def find_roots(self, coefficients: Sequence[float], degree: Optional[int] = None) -> RootSet:
        """Find the roots of ``Σ coefficients[i] x^i``.

        Parameters
        ----------
        coefficients : Sequence[float]
            Coefficients in order of increasing power.
        degree : int, optional
            Degree of the polynomial; defaults to ``len(coefficients) - 1``.

        Returns
        -------
        RootSet
            ``SUCCESS`` carries exactly ``degree`` roots. ``FAILED_TO_CONVERGE``
            carries the roots that were extracted before the shift budget ran out.
        """
        if degree is None:
            degree = len(coefficients) - 1
        if degree < 0 or len(coefficients) < degree + 1:
            raise ValueError(f"need {degree + 1} coefficients for degree {degree}")

        coeffs = [float(c) for c in coefficients[: degree + 1]]
        if not all(math.isfinite(c) for c in coeffs):
            raise ValueError("polynomial coefficients must be finite")

        if degree == 0:
            return RootSet.empty(RootStatus.SCALAR_VALUE_HAS_NO_ROOTS, 0)
        if coeffs[degree] == 0.0:
            return RootSet.empty(RootStatus.LEADING_COEFFICIENT_IS_ZERO, degree)

        self._reset_state(degree)
        real = [0.0] * degree
        imag = [0.0] * degree
        p = self._p

        lo = _MINIMUM_FLOAT / _ETA
        xx = _XX_INITIAL
        yy = -xx

        # reversed copy: p[0] is the leading coefficient
        for i in range(degree + 1):
            p[degree - i] = coeffs[i]

        status = RootStatus.FAILED_TO_CONVERGE
        self._strip_zero_roots(real, imag)

        # Each pass either finishes (n <= 2) or extracts one or two roots; the
        # budget is the degree, i.e. about twice the passes usually needed.
        for _ in range(degree):
            n = self._n
            if n <= 2:
                if n == 1:
                    real[degree - 1] = -p[1] / p[0]
                    imag[degree - 1] = 0.0
                elif n == 2:
                    sr, si, lr, li = solve_quadratic(p[0], p[1], p[2])
                    real[degree - 2], imag[degree - 2] = sr, si
                    real[degree - 1], imag[degree - 1] = lr, li
                self._n = 0
                status = RootStatus.SUCCESS
                break

            self._scale_coefficients(lo)
            bnd = self._root_modulus_bound()
            self._no_shift_steps()

            # saved K polynomial for restarts with a new shift
            saved_k = self._k[:n]

            for attempt in range(1, _MAX_SHIFTS + 1):
                # double shift to a non-real point of modulus bnd, rotated 94°
                xxx = _COSR * xx - _SINR * yy
                yy = _SINR * xx + _COSR * yy
                xx = xxx
                self._real_s = bnd * xx
                self._imag_s = bnd * yy
                self._u = -2.0 * self._real_s
                self._v = bnd

                nz = self._fixed_shift(_FIXED_SHIFT_STEPS * attempt)
                if nz:
                    j = degree - self._n
                    real[j] = self._real_sz
                    imag[j] = self._imag_sz
                    if nz != 1:
                        real[j + 1] = self._real_lz
                        imag[j + 1] = self._imag_lz
                    self._n_plus_one -= nz
                    self._n = self._n_plus_one - 1
                    p[: self._n_plus_one] = self._qp[: self._n_plus_one]
                    self._strip_zero_roots(real, imag)
                    break

                self._k[:n] = saved_k

        found = degree - self._n
        if status is not RootStatus.SUCCESS:
            logger.debug("root finder stopped with {} of {} roots", found, degree)
        # single-precision stopping tolerances leave ~1e-4 errors; refine in double
        for i in range(found):
            real[i], imag[i] = _polish_root(coeffs, real[i], imag[i])
        return RootSet(np.array(real[:found]), np.array(imag[:found]), status, degree)

    # ==================================================
    #                  internal helpers
    # ==================================================
    def _strip_zero_roots(self, real: list[float], imag: list[float]) -> None:
        while self._n > 0 and self._p[self._n] == 0.0:
            j = self._degree - self._n
            real[j] = 0.0
            imag[j] = 0.0
            self._n_plus_one -= 1
            self._n -= 1

    def _scale_coefficients(self, lo: float) -> None:
        """Multiply p by a power of the base when its moduli risk over/underflow."""
        p = self._p
        n_plus_one = self._n_plus_one

        largest = 0.0
        smallest = _MAXIMUM_FLOAT
        for i in range(n_plus_one):
            x = abs(p[i])
            if x > largest:
                largest = x
            if x != 0.0 and x < smallest:
                smallest = x

        sc = lo / smallest
        if sc <= 1.0:
            do_scaling = _MAXIMUM_FLOAT / sc < largest
        else:
            do_scaling = largest < 10.0

        if do_scaling:
            exponent = int(math.log(sc) / math.log(_BASE) + 0.5)
            factor = _BASE ** exponent
            if factor != 1.0:
                for i in range(n_plus_one):
                    p[i] *= factor

    def _root_modulus_bound(self) -> float:
        """Lower bound on the root moduli, from the Cauchy polynomial."""
        n = self._n
        pt = [abs(c) for c in self._p[: n + 1]]
        pt[n] = -pt[n]

        # upper estimate of the bound
        x = math.exp((math.log(-pt[n]) - math.log(pt[0])) / n)

        # newton step at the origin, if better
        if pt[n - 1] != 0.0:
            xm = -pt[n] / pt[n - 1]
            if xm < x:
                x = xm

        # chop the interval (0, x) until ff <= 0
        while True:
            xm = x * 0.1
            ff = pt[0]
            for i in range(1, n + 1):
                ff = ff * xm + pt[i]
            if ff <= 0.0:
                break
            x = xm

        # newton iteration until x converges to two decimal places
        dx = x
        while abs(dx / x) > 0.005:
            ff = pt[0]
            df = ff
            for i in range(1, n):
                ff = ff * x + pt[i]
                df = df * x + ff
            ff = ff * x + pt[n]
            dx = ff / df
            x -= dx

        return x

    def _no_shift_steps(self) -> None:
        """Scaled derivative as the initial K polynomial, then 5 unshifted steps."""
        n = self._n
        p = self._p
        k = self._k

        for i in range(1, n):
            k[i] = (n - i) * p[i] / n
        k[0] = p[0]

        aa = p[n]
        bb = p[n - 1]
        zerok = k[n - 1] == 0.0

        for _ in range(_NO_SHIFT_STEPS):
            cc = k[n - 1]
            if zerok:
                # unscaled recurrence
                for j in range(n - 1, 0, -1):
                    k[j] = k[j - 1]
                k[0] = 0.0
                zerok = k[n - 1] == 0.0
            else:
                t = -aa / cc
                for j in range(n - 1, 0, -1):
                    k[j] = t * k[j - 1] + p[j]
                k[0] = p[0]
                zerok = abs(k[n - 1]) <= abs(bb) * _ETA_N

    def _fixed_shift(self, max_steps: int) -> int:
        """Stage two: up to *max_steps* fixed-shift K polynomials.

        Watches the linear (s) and quadratic (v) estimate sequences and hands
        over to a stage-three iteration once one of them settles. Returns the
        number of zeros found (0, 1 or 2).
        """
        n = self._n
        k = self._k

        self._a, self._b = _quadratic_synthetic_division(
            self._n_plus_one, self._u, self._v, self._p, self._qp)
        itype = self._calc_sc()

        betav = _BETA_INITIAL
        betas = _BETA_INITIAL
        oss = self._real_s
        ovv = self._v
        ots = otv = 1.0
        ui = vi = 0.0

        for step in range(1, max_steps + 1):
            # next K polynomial and new estimate of v
            self._next_k(itype)
            itype = self._calc_sc()
            ui, vi = self._newest(itype, ui, vi)
            vv = vi

            # estimate s
            ss = -self._p[n] / k[n - 1] if k[n - 1] != 0.0 else 0.0

            tv = 1.0
            ts = 1.0
            if step != 1 and itype != 3:
                # relative measures of convergence of the s and v sequences
                if vv != 0.0:
                    tv = abs((vv - ovv) / vv)
                if ss != 0.0:
                    ts = abs((ss - oss) / ss)

                # if decreasing, multiply the two most recent measures
                tvv = tv * otv if tv < otv else 1.0
                tss = ts * ots if ts < ots else 1.0

                vpass = tvv < betav
                spass = tss < betas

                if spass or vpass:
                    svu = self._u
                    svv = self._v
                    self._svk[:n] = k[:n]
                    s = ss

                    vtry = False
                    stry = False
                    quadratic_next = not (spass and (not vpass or tss < tvv))

                    while True:
                        try_real = not quadratic_next
                        if quadratic_next:
                            nz = self._quadratic_iteration(ui, vi)
                            if nz > 0:
                                return nz
                            vtry = True
                            betav *= 0.25
                            if not stry and spass:
                                k[:n] = self._svk[:n]
                                try_real = True

                        if try_real:
                            nz, s, near_double = self._real_iteration(s)
                            if nz > 0:
                                return nz
                            stry = True
                            betas *= 0.25
                            if near_double:
                                # almost double real zero: go quadratic
                                ui = -(s + s)
                                vi = s * s
                                quadratic_next = True
                                continue

                        # restore and try quadratic if the v sequence converges
                        self._u = svu
                        self._v = svv
                        k[:n] = self._svk[:n]
                        if vpass and not vtry:
                            quadratic_next = True
                            continue
                        break

                    # recompute qp and scalars to continue the second stage
                    self._a, self._b = _quadratic_synthetic_division(
                        self._n_plus_one, self._u, self._v, self._p, self._qp)
                    itype = self._calc_sc()

            ovv = vv
            oss = ss
            otv = tv
            ots = ts

        return 0

    def _quadratic_iteration(self, uu: float, vv: float) -> int:
        """Variable-shift iteration for a quadratic factor; returns 0 or 2.

        Converges only if the two zeros are equimodular or nearly so.
        """
        n = self._n
        qp = self._qp
        are = self._are
        mre = self._mre

        omp = 0.0
        relstp = 0.0
        tried = False
        steps = 0
        self._u = uu
        self._v = vv

        while True:
            sr, si, lr, li = solve_quadratic(1.0, self._u, self._v)
            self._real_sz, self._imag_sz = sr, si
            self._real_lz, self._imag_lz = lr, li

            # real zeros not close to a multiple or opposite-sign pair
            if abs(abs(sr) - abs(lr)) > 0.01 * abs(lr):
                return 0

            self._a, self._b = _quadratic_synthetic_division(
                self._n_plus_one, self._u, self._v, self._p, qp)
            a, b = self._a, self._b
            mp = abs(a - sr * b) + abs(si * b)

            # rigorous bound on the rounding error in evaluating p
            zm = math.sqrt(abs(self._v))
            ee = 2.0 * abs(qp[0])
            t = -sr * b
            for i in range(1, n):
                ee = ee * zm + abs(qp[i])
            ee = ee * zm + abs(a + t)
            ee = ((5.0 * mre + 4.0 * are) * ee
                  - (5.0 * mre + 2.0 * are) * (abs(a + t) + abs(b) * zm)
                  + 2.0 * are * abs(t))

            if mp <= 20.0 * ee:
                return 2

            steps += 1
            if steps > _QUADRATIC_STEPS:
                return 0

            if steps >= 2 and relstp <= 0.01 and mp >= omp and not tried:
                # a cluster is stalling convergence: five fixed-shift steps
                # with u, v nudged toward it
                relstp = math.sqrt(max(relstp, _ETA))
                self._u -= self._u * relstp
                self._v += self._v * relstp
                self._a, self._b = _quadratic_synthetic_division(
                    self._n_plus_one, self._u, self._v, self._p, qp)
                for _ in range(5):
                    itype = self._calc_sc()
                    self._next_k(itype)
                tried = True
                steps = 0

            omp = mp

            itype = self._calc_sc()
            self._next_k(itype)
            itype = self._calc_sc()
            ui, vi = self._newest(itype, 0.0, 0.0)

            if vi == 0.0:
                return 0

            relstp = abs((vi - self._v) / vi)
            self._u = ui
            self._v = vi

    def _real_iteration(self, sss: float) -> tuple[int, float, bool]:
        """Variable-shift iteration for a real zero.

        Returns ``(nz, s, near_double)``; *near_double* flags a cluster of
        zeros near the real axis, with *s* the last iterate.
        """
        n = self._n
        n_plus_one = self._n_plus_one
        p, qp, k, qk = self._p, self._qp, self._k, self._qk
        are = self._are
        mre = self._mre

        t = 0.0
        omp = 0.0
        steps = 0
        s = sss

        while True:
            # evaluate p at s
            pv = p[0]
            qp[0] = pv
            for i in range(1, n_plus_one):
                pv = pv * s + p[i]
                qp[i] = pv
            mp = abs(pv)

            # rigorous bound on the error in evaluating p
            ms = abs(s)
            ee = (mre / (are + mre)) * abs(qp[0])
            for i in range(1, n_plus_one):
                ee = ee * ms + abs(qp[i])

            if mp <= 20.0 * ((are + mre) * ee - mre * mp):
                self._real_sz = s
                self._imag_sz = 0.0
                return 1, sss, False

            steps += 1
            if steps > _REAL_STEPS:
                return 0, sss, False

            if steps >= 2 and abs(t) <= 0.001 * abs(s - t) and mp > omp:
                return 0, s, True

            omp = mp

            # next K polynomial
            kv = k[0]
            qk[0] = kv
            for i in range(1, n):
                kv = kv * s + k[i]
                qk[i] = kv

            if abs(kv) <= abs(k[n - 1]) * _ETA_N:
                k[0] = 0.0
                for i in range(1, n):
                    k[i] = qk[i - 1]
            else:
                t = -pv / kv
                k[0] = qp[0]
                for i in range(1, n):
                    k[i] = t * qk[i - 1] + qp[i]

            kv = k[0]
            for i in range(1, n):
                kv = kv * s + k[i]

            t = 0.0
            if abs(kv) > abs(k[n - 1]) * _ETA_N:
                t = -pv / kv
            s += t

    def _calc_sc(self) -> int:
        """Scalars for the next K polynomial; returns the normalisation type.

        3: the quadratic is almost a factor of K; 2: formulas divided by d;
        1: formulas divided by c.
        """
        n = self._n
        k = self._k
        self._c, self._d = _quadratic_synthetic_division(n, self._u, self._v, k, self._qk)
        a, b, c, d = self._a, self._b, self._c, self._d
        u, v = self._u, self._v

        if abs(c) <= abs(k[n - 1]) * _ETA_N_SQUARED and abs(d) <= abs(k[n - 2]) * _ETA_N_SQUARED:
            return 3

        if abs(d) >= abs(c):
            self._e = a / d
            self._f = c / d
            self._g = u * b
            self._h = v * b
            self._a3 = (a + self._g) * self._e + self._h * (b / d)
            self._a1 = b * self._f - a
            self._a7 = (self._f + u) * a + self._h
            return 2

        self._e = a / c
        self._f = d / c
        self._g = u * self._e
        self._h = v * b
        self._a3 = a * self._e + (self._h / c + self._g) * b
        self._a1 = b - a * (d / c)
        self._a7 = a + self._g * d + self._h * self._f
        return 1

    def _next_k(self, itype: int) -> None:
        n = self._n
        k, qk, qp = self._k, self._qk, self._qp

        if itype == 3:
            k[0] = 0.0
            k[1] = 0.0
            for i in range(2, n):
                k[i] = qk[i - 2]
            return

        temp = self._b if itype == 1 else self._a
        if abs(self._a1) <= abs(temp) * _ETA_N:
            # a1 nearly zero
            k[0] = 0.0
            k[1] = -self._a7 * qp[0]
            for i in range(2, n):
                k[i] = self._a3 * qk[i - 2] - self._a7 * qp[i - 1]
            return

        self._a7 /= self._a1
        self._a3 /= self._a1
        k[0] = qp[0]
        k[1] = qp[1] - self._a7 * qp[0]
        for i in range(2, n):
            k[i] = self._a3 * qk[i - 2] - self._a7 * qp[i - 1] + qp[i]

    def _newest(self, itype: int, uu: float, vv: float) -> tuple[float, float]:
        """New estimates of the quadratic coefficients; (uu, vv) if undetermined."""
        if itype == 3:
            return 0.0, 0.0

        n = self._n
        k, p = self._k, self._p
        a, b, c, d = self._a, self._b, self._c, self._d
        u, v = self._u, self._v
        f, h = self._f, self._h
        a1, a3, a7 = self._a1, self._a3, self._a7

        if itype == 2:
            a4 = (a + self._g) * f + h
            a5 = (f + u) * c + v * d
        else:
            a4 = a + u * b + h * f
            a5 = c + (u + v * f) * d

        b1 = -k[n - 1] / p[n]
        b2 = -(k[n - 2] + b1 * p[n - 1]) / p[n]
        c1 = v * b2 * a1
        c2 = b1 * a7
        c3 = b1 * b1 * a3
        c4 = c1 - c2 - c3
        temp = a5 + b1 * a4 - c4
        if temp != 0.0:
            return u - (u * (c3 + c2) + v * (b1 * a1 + b2 * a7)) / temp, v * (1.0 + c4 / temp)
        return uu, vv
