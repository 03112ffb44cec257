"""
Likelihood ratio tests between nested kinetic models.
"""

import warnings
from typing import Optional, Tuple

import numpy as np
from scipy.stats import chi2

from ..exceptions import LRTError
from ..models.fits import ModelFit


def calculate_lrt(
    lnL_null: float, lnL_alt: float, df: int, warn: bool = True
) -> Tuple[float, float]:
    """
    Calculate likelihood ratio test statistic and p-value.

    The likelihood ratio test statistic is:
        LRT = 2 * (lnL_alt - lnL_null)

    Under the null hypothesis, LRT follows a chi-square distribution
    with degrees of freedom equal to the difference in the number of
    free parameters between the models.

    Parameters
    ----------
    lnL_null : float
        Log-likelihood of the null (simpler) model
    lnL_alt : float
        Log-likelihood of the alternative (richer) model
    df : int
        Degrees of freedom (difference in number of parameters)
    warn : bool, default=True
        Emit a UserWarning when the statistic is negative

    Returns
    -------
    lrt_statistic : float
        The LRT statistic (>= 0)
    pvalue : float
        Upper-tail p-value from the chi-square distribution

    Notes
    -----
    If lnL_alt < lnL_null the richer model fits worse than the model nested
    in it, which points at a failed optimization. The function warns
    (unless warn=False) and returns LRT=0 and p-value=1.0.
    """
    lrt_statistic = 2 * (lnL_alt - lnL_null)

    if lrt_statistic < 0:
        if warn:
            warnings.warn(
                f"Negative LRT detected (LRT={lrt_statistic:.6f}). "
                "The null model fits better than the alternative. "
                "Setting LRT=0 and p-value=1.0.",
                UserWarning
            )
        lrt_statistic = 0.0
        pvalue = 1.0
    elif lrt_statistic == 0:
        pvalue = 1.0
    else:
        pvalue = float(chi2.sf(lrt_statistic, df))

    return lrt_statistic, pvalue


def loglik_ratio_test(
    null_fit: Optional[ModelFit],
    alt_fit: Optional[ModelFit],
    warn: bool = True,
) -> float:
    """
    P-value that ``alt_fit`` is not significantly better than ``null_fit``.

    Parameters
    ----------
    null_fit : ModelFit
        Fit of the simpler model, nested in the alternative
    alt_fit : ModelFit
        Fit of the richer model
    warn : bool, default=True
        Warn on a negative LRT statistic

    Returns
    -------
    float
        P-value in [0, 1]

    Raises
    ------
    LRTError
        If a fit is missing, did not converge, has a non-finite
        log-likelihood, or the models are not nested (df <= 0)
    """
    if null_fit is None or alt_fit is None:
        raise LRTError("missing model fit")
    if not null_fit.usable or not alt_fit.usable:
        raise LRTError("model fit did not converge or has non-finite log-likelihood")

    df = alt_fit.n_params - null_fit.n_params
    if df <= 0:
        raise LRTError(
            f"models are not nested: alternative has {alt_fit.n_params} "
            f"parameters, null has {null_fit.n_params}"
        )

    _, pvalue = calculate_lrt(null_fit.logLik, alt_fit.logLik, df, warn=warn)
    if not np.isfinite(pvalue):
        raise LRTError(f"non-finite p-value ({pvalue})")
    return pvalue


def safe_loglik_ratio_test(null_fit: Optional[ModelFit], alt_fit: Optional[ModelFit]) -> float:
    """
    Batch form of ``loglik_ratio_test``.

    Failures come back as NaN and negative statistics map silently to 1, so
    one unusable comparison never interrupts a gene-wide computation.
    """
    try:
        return loglik_ratio_test(null_fit, alt_fit, warn=False)
    except (LRTError, ValueError, FloatingPointError):
        return np.nan
