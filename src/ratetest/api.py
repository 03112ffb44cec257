"""
High-level API for ratetest.

This module provides the objects that carry a fitted model bank together with
its configuration, and the ``rate_pvals`` entry point that dispatches to the
likelihood ratio test or AIC strategy.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

import pandas as pd

from .analysis.rate_pvals import compare_rates, select_by_aic, best_models
from .analysis.results import RatePvalsResult
from .config import MODEL_SELECTION_MODES, RatesConfig
from .exceptions import ConfigurationError
from .models.fits import FitBank


@dataclass
class KineticModel:
    """
    Bank of kinetic models fitted to each gene, with its settings.

    Attributes
    ----------
    fits : FitBank
        Fitted models per gene
    config : RatesConfig
        Model selection mode, thresholds and comparison lists
    chisq : pd.DataFrame, optional
        Genes x models chi-squared p-values computed elsewhere. When None,
        the ``chisq_pvalue`` stored on each fit is used.
    aic_scores : pd.DataFrame, optional
        Genes x models AIC values computed elsewhere. When None, AIC is
        derived from each fit.

    Examples
    --------
    >>> from ratetest import KineticModel, ModelFit, FitBank
    >>> model = KineticModel(FitBank({
    ...     "gene1": {"0": ModelFit(-20.0, 3, 0.01), "a": ModelFit(-10.0, 5, 0.6)},
    ... }))
    >>> model.rate_pvals().columns.tolist()
    ['synthesis', 'degradation', 'processing']
    """

    fits: FitBank
    config: RatesConfig = field(default_factory=RatesConfig)
    chisq: Optional[pd.DataFrame] = None
    aic_scores: Optional[pd.DataFrame] = None

    @property
    def genes(self):
        return self.fits.genes

    def chisqtest(self) -> pd.DataFrame:
        """Genes x models chi-squared goodness-of-fit p-values."""
        if self.chisq is not None:
            return self.chisq
        return self.fits.chisqtest()

    def logLik(self) -> pd.DataFrame:
        """Genes x models log-likelihoods."""
        return self.fits.loglik()

    def AIC(self) -> pd.DataFrame:
        """Genes x models AIC values, NaN where undefined."""
        if self.aic_scores is not None:
            return self.aic_scores
        return self.fits.aic()

    def best_models(self) -> pd.Series:
        """Model selected by AIC for each gene."""
        return best_models(self.fits, self.AIC())

    def rate_pvals(self, c_tsh: Optional[float] = None, **kwargs) -> pd.DataFrame:
        """Shortcut for ``rate_pvals(self, c_tsh)``."""
        return rate_pvals(self, c_tsh, **kwargs)


@dataclass
class KineticExperiment:
    """
    Container holding a ``KineticModel`` along with experiment metadata.

    Only the wrapped model takes part in rate testing.
    """

    model: KineticModel
    name: Optional[str] = None


def rate_pvals(
    model: Union[KineticModel, KineticExperiment],
    c_tsh: Optional[float] = None,
    config: Optional[RatesConfig] = None,
    n_jobs: int = 1,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    One p-value per gene and rate for rate variability.

    In "llr" mode the p-values combine, with Brown's method, the likelihood
    ratio tests configured for each rate, keeping only comparisons where the
    chi-squared p-value of either model is at or below ``c_tsh``. In "aic"
    mode the chi-squared p-value of the model with the lowest AIC is assigned
    to the rates that model lets vary.

    Parameters
    ----------
    model : KineticModel or KineticExperiment
        Fitted models; an experiment is unwrapped to its model
    c_tsh : float, optional
        Chi-squared threshold; defaults to the configured
        ``thresholds.chisquare``
    config : RatesConfig, optional
        Overrides the model's own configuration
    n_jobs : int, default=1
        Worker threads for the "llr" strategy
    verbose : bool, default=False
        Print progress

    Returns
    -------
    pd.DataFrame
        Index = genes, columns = synthesis, degradation, processing;
        values in [0, 1] or NaN

    Raises
    ------
    ConfigurationError
        If the model selection mode is unknown or the threshold is missing

    Examples
    --------
    >>> pvals = rate_pvals(model)                 # doctest: +SKIP
    >>> pvals = rate_pvals(model, c_tsh=0.2)      # doctest: +SKIP
    """
    if isinstance(model, KineticExperiment):
        return rate_pvals(model.model, c_tsh, config, n_jobs, verbose)

    if config is None:
        config = model.config
    mode = config.model_selection

    if mode == "llr":
        return compare_rates(
            model.fits,
            config,
            chisq=model.chisqtest(),
            c_tsh=c_tsh,
            n_jobs=n_jobs,
            verbose=verbose,
        )
    elif mode == "aic":
        if verbose:
            print(f"Selecting best model by AIC for {len(model.fits)} genes")
        return select_by_aic(model.fits, chisq=model.chisqtest(), aic=model.AIC())
    raise ConfigurationError(
        "modelSelection",
        f"unknown mode {mode!r}; expected one of {list(MODEL_SELECTION_MODES)}",
    )


def rate_pvals_report(
    model: Union[KineticModel, KineticExperiment],
    c_tsh: Optional[float] = None,
    config: Optional[RatesConfig] = None,
    n_jobs: int = 1,
    verbose: bool = False,
) -> RatePvalsResult:
    """
    Like ``rate_pvals`` but wraps the table in a ``RatePvalsResult``.

    Examples
    --------
    >>> report = rate_pvals_report(model)         # doctest: +SKIP
    >>> print(report.summary())                   # doctest: +SKIP
    >>> report.gene_class()                       # doctest: +SKIP
    """
    if isinstance(model, KineticExperiment):
        model = model.model
    if config is None:
        config = model.config

    pvals = rate_pvals(model, c_tsh, config, n_jobs, verbose)
    threshold = None
    if config.model_selection == "llr":
        threshold = c_tsh if c_tsh is not None else config.chisquare
    return RatePvalsResult(
        pvals=pvals,
        model_selection=config.model_selection,
        chisquare=threshold,
        brown=dict(config.brown),
    )
