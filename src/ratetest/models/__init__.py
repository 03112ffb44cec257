"""
Kinetic model identifiers and fitted model containers.
"""

from .codes import (
    RATES,
    RATE_CODES,
    CANONICAL_MODELS,
    variable_rates,
    is_nested,
    comparison_name,
    order_models,
)
from .fits import ModelFit, FitBank

__all__ = [
    "RATES",
    "RATE_CODES",
    "CANONICAL_MODELS",
    "variable_rates",
    "is_nested",
    "comparison_name",
    "order_models",
    "ModelFit",
    "FitBank",
]
