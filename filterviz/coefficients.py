# coefficients.py — filter configuration and coefficient snapshots
# -----------------------------------------------------------------
# • FilterConfig : K coefficient slots, response resolution, dB limits
# • CoefficientSet : immutable feedforward ("a", x side) / feedback
#   ("b", y side) vectors handed to analysis and audio
# • "<a|b><index>" name protocol and lenient text parsing used by edits
# -----------------------------------------------------------------
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Final, Iterable, Sequence

import numpy as np
from loguru import logger

__all__ = [
    "FilterConfig",
    "CoefficientSet",
    "parse_coefficient_name",
    "coefficient_name",
    "parse_coefficient_text",
]

_NUM_COEFFS: Final = 12
_NUM_FREQUENCIES: Final = 8192
_LOG_BASE: Final = 1000.0
_DB_FLOOR: Final = -60.0
_DB_CEILING: Final = 1000.0
_STABILITY_DECIMALS: Final = 4
_FS: Final = 44_100

_NAME_RE: Final = re.compile(r"^\s*([ab])\s*(\d+)\s*$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Fixed sizes and limits shared by every component.

    Parameters
    ----------
    num_coeffs : int, default 12
        Total coefficient slots K; half feed forward, half feed back.
    num_frequencies : int, default 8192
        Response samples M over (0, π].
    log_base : float, default 1000
        Base of the logarithmic frequency warping.
    db_floor, db_ceiling : float
        Limits applied to the magnitude response in dB.
    stability_decimals : int, default 4
        Decimals kept when comparing pole moduli to 1.
    sample_rate : int, default 44100
        Only used to label frequencies and to render audio.
    """

    num_coeffs: int = _NUM_COEFFS
    num_frequencies: int = _NUM_FREQUENCIES
    log_base: float = _LOG_BASE
    db_floor: float = _DB_FLOOR
    db_ceiling: float = _DB_CEILING
    stability_decimals: int = _STABILITY_DECIMALS
    sample_rate: int = _FS

    def __post_init__(self):
        if self.num_coeffs < 2 or self.num_coeffs % 2:
            raise ValueError("num_coeffs must be an even number >= 2")
        if self.num_frequencies <= 0:
            raise ValueError("num_frequencies must be positive")
        if self.log_base <= 1.0:
            raise ValueError("log_base must be greater than 1")
        if self.db_floor >= self.db_ceiling:
            raise ValueError("db_floor must be below db_ceiling")
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")

    @property
    def order(self) -> int:
        """Slots per side (K/2); also the IIR history length."""
        return self.num_coeffs // 2


# ------------------------------------------------------------------
# Name / text protocol
# ------------------------------------------------------------------

def parse_coefficient_name(name: str, order: int = _NUM_COEFFS // 2) -> tuple[str, int]:
    """``"a3"`` → ``("a", 3)``; raises ValueError for unknown names."""
    m = _NAME_RE.match(name)
    if m is None:
        raise ValueError(f"unknown coefficient name {name!r}")
    side, index = m.group(1).lower(), int(m.group(2))
    if index >= order:
        raise ValueError(f"coefficient index {index} out of range 0..{order - 1}")
    return side, index


def coefficient_name(side: str, index: int) -> str:
    return f"{side}{index}"


def parse_coefficient_text(text: str) -> float:
    """Lenient float parse: empty, malformed or non-finite text reads as 0."""
    try:
        value = float(text.strip())
    except (AttributeError, ValueError):
        logger.debug("coefficient text {!r} is not a number, using 0", text)
        return 0.0
    if not math.isfinite(value):
        logger.debug("coefficient text {!r} is not finite, using 0", text)
        return 0.0
    return value


# ------------------------------------------------------------------
# Snapshot
# ------------------------------------------------------------------

def _as_vector(values: Iterable[float], order: int, what: str) -> tuple[float, ...]:
    vec = tuple(float(v) for v in values)
    if len(vec) != order:
        raise ValueError(f"{what} needs {order} values, got {len(vec)}")
    if not all(math.isfinite(v) for v in vec):
        raise ValueError(f"{what} values must be finite")
    return vec


@dataclass(frozen=True, slots=True)
class CoefficientSet:
    """Immutable coefficient snapshot for ``y[n] = Σ a_i x[n-i] + Σ b_j y[n-j]``.

    ``feedback[0]`` is kept so both sides have the same shape; it never
    enters the recursion.
    """

    feedforward: tuple[float, ...]
    feedback: tuple[float, ...]
    config: FilterConfig = field(default_factory=FilterConfig, compare=False)

    def __post_init__(self):
        order = self.config.order
        object.__setattr__(self, "feedforward", _as_vector(self.feedforward, order, "feedforward"))
        object.__setattr__(self, "feedback", _as_vector(self.feedback, order, "feedback"))

    # ---------- constructors ----------
    @classmethod
    def default(cls, config: FilterConfig | None = None) -> "CoefficientSet":
        """Identity filter: ``a0 = 1``, everything else 0."""
        config = config or FilterConfig()
        ff = [0.0] * config.order
        ff[0] = 1.0
        return cls(tuple(ff), (0.0,) * config.order, config)

    @classmethod
    def from_lists(cls, feedforward: Sequence[float], feedback: Sequence[float] = (),
                   config: FilterConfig | None = None) -> "CoefficientSet":
        """Build from partial lists; missing trailing slots are 0."""
        config = config or FilterConfig()
        order = config.order
        if len(feedforward) > order or len(feedback) > order:
            raise ValueError(f"at most {order} coefficients per side")
        ff = list(feedforward) + [0.0] * (order - len(feedforward))
        fb = list(feedback) + [0.0] * (order - len(feedback))
        return cls(tuple(ff), tuple(fb), config)

    @classmethod
    def from_flat(cls, values: Sequence[float], config: FilterConfig | None = None) -> "CoefficientSet":
        """K-length vector, feedforward slots first."""
        config = config or FilterConfig()
        if len(values) != config.num_coeffs:
            raise ValueError(f"expected {config.num_coeffs} values, got {len(values)}")
        order = config.order
        return cls(tuple(values[:order]), tuple(values[order:]), config)

    def with_value(self, name: str, value: float) -> "CoefficientSet":
        """Copy with the named slot replaced."""
        side, index = parse_coefficient_name(name, self.config.order)
        if side == "a":
            ff = list(self.feedforward)
            ff[index] = value
            return CoefficientSet(tuple(ff), self.feedback, self.config)
        fb = list(self.feedback)
        fb[index] = value
        return CoefficientSet(self.feedforward, tuple(fb), self.config)

    # ---------- queries ----------
    def get(self, name: str) -> float:
        side, index = parse_coefficient_name(name, self.config.order)
        return self.feedforward[index] if side == "a" else self.feedback[index]

    def highest_feedforward_order(self) -> int:
        """Largest lag i with a non-zero a[i]; 0 if none."""
        for i in range(len(self.feedforward) - 1, -1, -1):
            if self.feedforward[i] != 0.0:
                return i
        return 0

    def highest_feedback_order(self) -> int:
        """Largest lag j >= 1 with a non-zero b[j]; 0 if none."""
        for j in range(len(self.feedback) - 1, 0, -1):
            if self.feedback[j] != 0.0:
                return j
        return 0

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        return np.array(self.feedforward), np.array(self.feedback)

    def to_flat(self) -> tuple[float, ...]:
        return self.feedforward + self.feedback
