"""
Brown's method for combining dependent p-values.

Each p-value is transformed to ``-2 ln p``. For independent tests the sum of
the transforms follows a chi-square distribution with ``2k`` degrees of
freedom (Fisher's method). Brown's method matches the first two moments of
the sum under dependence with a scaled chi-square ``c * chi2(f)``:

    E = 2k
    Var = 4k + 2 * sum_{i<j} cov(-2 ln p_i, -2 ln p_j)
    c = Var / (2 E)
    f = 2 E^2 / Var

The covariance between tests is estimated across genes (empirical Brown's
method), so tests that share data are not treated as independent evidence.

References
----------
Brown, M. B. (1975). A method for combining non-independent, one-sided tests
of significance. Biometrics, 31(4), 987-992.

Poole, W., Gibbs, D. L., Shmulevich, I., Bernard, B., & Knijnenburg, T. A.
(2016). Combining dependent P-values with an empirical adaptation of Brown's
method. Bioinformatics, 32(17), i430-i436.
"""

from typing import Optional

import numpy as np
import pandas as pd
from scipy.stats import chi2

from ..exceptions import ShapeMismatchError

# smallest p-value fed to the log transform
_P_FLOOR = np.finfo(float).tiny


def _transform(pvalues) -> np.ndarray:
    p = np.clip(np.asarray(pvalues, dtype=float), _P_FLOOR, 1.0)
    return -2.0 * np.log(p)


def transformed_covariance(pvals: pd.DataFrame) -> pd.DataFrame:
    """
    Covariance of ``-2 ln p`` between every pair of test columns.

    Computed across genes using pairwise-complete observations. Pairs with
    fewer than two complete genes get covariance 0. The diagonal is not used
    by ``brown_combine`` (each transform has variance 4 under the null).

    Parameters
    ----------
    pvals : pd.DataFrame
        Genes x tests p-value matrix

    Returns
    -------
    pd.DataFrame
        Tests x tests covariance matrix
    """
    transformed = pd.DataFrame(
        _transform(pvals.to_numpy(dtype=float)),
        index=pvals.index,
        columns=pvals.columns,
    )
    covariance = transformed.cov(min_periods=2)
    return covariance.fillna(0.0)


def brown_combine(pvalues, covariance: Optional[np.ndarray] = None) -> float:
    """
    Combine p-values with Brown's method.

    Parameters
    ----------
    pvalues : array-like
        P-values to combine (no NaN)
    covariance : np.ndarray, optional
        k x k covariance of the ``-2 ln p`` transforms. Only off-diagonal
        entries are used. None means independent tests (Fisher's method).

    Returns
    -------
    float
        Combined p-value in [0, 1]

    Examples
    --------
    >>> round(brown_combine([0.01, 0.02]), 6) == round(
    ...     float(chi2.sf(-2 * np.log(0.01 * 0.02), 4)), 6)
    True
    """
    p = np.asarray(pvalues, dtype=float)
    k = p.size
    if k == 0:
        return 1.0
    if k == 1:
        return float(np.clip(p[0], 0.0, 1.0))

    statistic = _transform(p).sum()
    expected = 2.0 * k
    variance = 4.0 * k
    if covariance is not None:
        cov = np.asarray(covariance, dtype=float)
        variance += 2.0 * np.nansum(np.triu(cov, k=1))
    # strongly negative covariance estimates would collapse the variance
    variance = max(variance, np.finfo(float).eps)

    scale = variance / (2.0 * expected)
    dof = 2.0 * expected ** 2 / variance
    combined = chi2.sf(statistic / scale, dof)
    return float(np.clip(combined, 0.0, 1.0))


def _check_aligned(pvals: pd.DataFrame, mask: pd.DataFrame):
    if pvals.shape != mask.shape:
        raise ShapeMismatchError(
            f"p-value matrix has shape {pvals.shape} but mask has shape {mask.shape}"
        )
    if not pvals.index.equals(mask.index):
        raise ShapeMismatchError("p-value matrix and mask have different gene order")
    if not pvals.columns.equals(mask.columns):
        raise ShapeMismatchError(
            f"p-value matrix columns {list(pvals.columns)} do not match "
            f"mask columns {list(mask.columns)}"
        )


def brown_method_mask(pvals: pd.DataFrame, mask: pd.DataFrame) -> pd.Series:
    """
    Combine, per gene, the p-values of the comparisons kept by the mask.

    Parameters
    ----------
    pvals : pd.DataFrame
        Genes x comparisons likelihood ratio test p-values (NaN allowed)
    mask : pd.DataFrame
        Genes x comparisons booleans, aligned with ``pvals``

    Returns
    -------
    pd.Series
        One p-value per gene. 1 when the mask keeps no comparison, NaN when
        every kept comparison is NaN, the single value unchanged when exactly
        one is usable, Brown's combination otherwise.

    Raises
    ------
    ShapeMismatchError
        If ``pvals`` and ``mask`` are not aligned
    """
    _check_aligned(pvals, mask)

    values = pvals.to_numpy(dtype=float)
    keep = mask.to_numpy(dtype=bool)
    covariance = transformed_covariance(pvals).to_numpy() if values.shape[1] > 1 else None

    combined = np.empty(len(pvals))
    for i in range(len(pvals)):
        selected = np.flatnonzero(keep[i])
        if selected.size == 0:
            combined[i] = 1.0
            continue
        selected = selected[np.isfinite(values[i, selected])]
        if selected.size == 0:
            combined[i] = np.nan
        elif selected.size == 1:
            combined[i] = values[i, selected[0]]
        else:
            combined[i] = brown_combine(
                values[i, selected], covariance[np.ix_(selected, selected)]
            )
    return pd.Series(combined, index=pvals.index)
