"""
ratetest: per-gene tests of time-varying RNA kinetic rates.

Given a bank of nested kinetic models fitted to each gene (models where
synthesis, degradation and processing are either constant or allowed to
vary), ratetest assigns one p-value per gene and per rate measuring the
evidence that the rate varies in time.

Quick Start
-----------
Combine likelihood ratio tests with Brown's method:

>>> from ratetest import KineticModel, read_fit_table, rate_pvals
>>> model = KineticModel(read_fit_table("fits.tsv"))
>>> pvals = rate_pvals(model)
>>> print(pvals.head())

Use a different chi-squared threshold for one call, or permanently:

>>> pvals = rate_pvals(model, c_tsh=0.2)
>>> model.config = model.config.replace(chisquare=0.2)

Select the best model by AIC instead:

>>> from ratetest import RatesConfig
>>> pvals = rate_pvals(model, config=RatesConfig(model_selection="aic"))
"""

__version__ = "0.1.0"

# High-level API
from .api import (
    rate_pvals,
    rate_pvals_report,
    KineticModel,
    KineticExperiment,
)
from .config import RatesConfig

# Model containers
from .models.fits import ModelFit, FitBank
from .models.codes import RATES, CANONICAL_MODELS

# Analysis building blocks
from .analysis import (
    loglik_ratio_test,
    chisq_mask,
    brown_combine,
    brown_method_mask,
    compare_rates,
    select_by_aic,
    best_models,
    gene_class,
    RatePvalsResult,
)

# I/O
from .io.fits import read_fit_table

from .exceptions import (
    RateTestError,
    LRTError,
    ShapeMismatchError,
    ConfigurationError,
    FitTableError,
)

__all__ = [
    # Simple API - Start here!
    "rate_pvals",
    "rate_pvals_report",
    "KineticModel",
    "KineticExperiment",
    "RatesConfig",

    # Models
    "ModelFit",
    "FitBank",
    "RATES",
    "CANONICAL_MODELS",

    # Analysis
    "loglik_ratio_test",
    "chisq_mask",
    "brown_combine",
    "brown_method_mask",
    "compare_rates",
    "select_by_aic",
    "best_models",
    "gene_class",
    "RatePvalsResult",

    # I/O
    "read_fit_table",

    # Errors
    "RateTestError",
    "LRTError",
    "ShapeMismatchError",
    "ConfigurationError",
    "FitTableError",

    # Version
    "__version__",
]
