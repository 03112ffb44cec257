"""
Statistical analysis of rate variability.

This module provides likelihood ratio tests between nested kinetic models,
chi-squared masking of comparisons, Brown's method for dependent p-values,
and the per-rate orchestration built on them.
"""

from .lrt import calculate_lrt, loglik_ratio_test, safe_loglik_ratio_test
from .mask import chisq_mask, resolve_threshold
from .brown import brown_combine, brown_method_mask, transformed_covariance
from .rate_pvals import (
    llr_pvalue_matrix,
    rate_pvalues,
    compare_rates,
    best_models,
    select_by_aic,
)
from .results import RatePvalsResult, gene_class

__all__ = [
    "calculate_lrt",
    "loglik_ratio_test",
    "safe_loglik_ratio_test",
    "chisq_mask",
    "resolve_threshold",
    "brown_combine",
    "brown_method_mask",
    "transformed_covariance",
    "llr_pvalue_matrix",
    "rate_pvalues",
    "compare_rates",
    "best_models",
    "select_by_aic",
    "RatePvalsResult",
    "gene_class",
]
