# filterviz/__init__.py
from loguru import logger

from .rootfinder import PolynomialRootFinder, RootSet, RootStatus, solve_quadratic
from .polynomial import Polynomial
from .coefficients import CoefficientSet, FilterConfig
from .analysis import (PoleZeroAnalysis, StabilityState, analyze_roots, classify_stability,
                       find_poles, find_zeros)
from .response import (DisplayScale, ResponseCurve, compute_response, display_scale,
                       frequency_grid, frequency_to_axis, log_grid_frequencies)
from .equations import TransferFunctionText, difference_equation, transfer_function
from .iir import IIRFilterCore
from .engine import AudioSnapshot, FilterEngine
from .utils import db_to_lin, lin_to_db, output_limit

logger.disable("filterviz")

__all__ = [
    "PolynomialRootFinder", "RootSet", "RootStatus", "solve_quadratic",
    "Polynomial", "CoefficientSet", "FilterConfig",
    "PoleZeroAnalysis", "StabilityState", "analyze_roots", "classify_stability",
    "find_poles", "find_zeros",
    "DisplayScale", "ResponseCurve", "compute_response", "display_scale",
    "frequency_grid", "frequency_to_axis", "log_grid_frequencies",
    "TransferFunctionText", "difference_equation", "transfer_function",
    "IIRFilterCore", "AudioSnapshot", "FilterEngine",
    "db_to_lin", "lin_to_db", "output_limit",
]
