# utils.py — common numeric helpers
# -----------------------------------
# • dB / linear helpers
# • hard limiting for samples handed to an audio sink
# • fixed-decimal rounding used by the display/stability checks
# -----------------------------------
from __future__ import annotations

import math
from typing import Final

import numpy as np

__all__ = [
    "db_to_lin",
    "lin_to_db",
    "clamp",
    "output_limit",
    "round_to",
    "DBL_EPSILON",
]

DBL_EPSILON: Final = float(np.finfo(np.float64).eps)

# ------------------------------------------------------------------
# dB helpers
# ------------------------------------------------------------------

def db_to_lin(db: float) -> float:
    return 10 ** (db / 20.0)


def lin_to_db(lin: float, floor_db: float = -60.0, ceiling_db: float = 1000.0) -> float:
    """Linear magnitude → dB, limited to [floor_db, ceiling_db].

    An exact zero maps to *floor_db* instead of -inf.
    """
    if lin <= 0.0:
        return floor_db
    return clamp(20.0 * math.log10(lin), floor_db, ceiling_db)

# ------------------------------------------------------------------
# Limiting
# ------------------------------------------------------------------

def clamp(x: float, lo: float, hi: float) -> float:
    return min(max(x, lo), hi)


def output_limit(x: float) -> float:
    """Saturate a sample to [-1, 1]."""
    return clamp(x, -1.0, 1.0)

# ------------------------------------------------------------------
# Misc util
# ------------------------------------------------------------------

def round_to(x: float, decimals: int = 4) -> float:
    """Round half away from zero at *decimals* places (C ``round`` semantics)."""
    scale = 10.0 ** decimals
    return math.copysign(math.floor(abs(x) * scale + 0.5), x) / scale
