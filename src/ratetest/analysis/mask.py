"""
Chi-squared masking of model comparisons.

A comparison (null, alt) is kept for a gene when the chi-squared
goodness-of-fit p-value of either model is at or below the threshold.
"""

from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import RatesConfig
from ..exceptions import ConfigurationError
from ..models.codes import comparison_name


def resolve_threshold(c_tsh: Optional[float], config: Optional[RatesConfig]) -> float:
    """
    Chi-squared threshold for one call.

    An explicit ``c_tsh`` takes precedence over ``config.chisquare``. Any real
    number is accepted: a threshold of 1 or more keeps every comparison with a
    chi-squared p-value, a negative one masks everything out.

    Raises
    ------
    ConfigurationError
        If neither is set, or the value is not a number
    """
    threshold = c_tsh
    if threshold is None and config is not None:
        threshold = config.chisquare
    if threshold is None:
        raise ConfigurationError(
            "thresholds.chisquare",
            "no chi-squared threshold given and none configured",
        )
    try:
        threshold = float(threshold)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            "thresholds.chisquare", f"{threshold!r} is not a number"
        ) from e
    return threshold


def _column(chisq: pd.DataFrame, model_id: str) -> np.ndarray:
    if model_id in chisq.columns:
        return chisq[model_id].to_numpy(dtype=float)
    return np.full(len(chisq), np.nan)


def chisq_mask(
    chisq: pd.DataFrame,
    comparisons: Sequence[Tuple[str, str]],
    threshold: float,
) -> pd.DataFrame:
    """
    Boolean genes x comparisons mask of trustworthy comparisons.

    Parameters
    ----------
    chisq : pd.DataFrame
        Genes x models chi-squared p-values
    comparisons : sequence of (str, str)
        (null, alternative) model pairs
    threshold : float
        Chi-squared threshold (``cTsh``)

    Returns
    -------
    pd.DataFrame
        Same index as ``chisq``, one boolean column per comparison,
        labelled ``null_VS_alt``

    Examples
    --------
    >>> chisq = pd.DataFrame({"a": [0.05], "b": [0.3]}, index=["g1"])
    >>> bool(chisq_mask(chisq, [("a", "b")], 0.1).iloc[0, 0])
    True
    >>> bool(chisq_mask(chisq, [("a", "b")], 0.01).iloc[0, 0])
    False
    """
    columns = {}
    # NaN <= threshold is False, so missing goodness-of-fit never validates
    with np.errstate(invalid="ignore"):
        for null_id, alt_id in comparisons:
            null_ok = _column(chisq, null_id) <= threshold
            alt_ok = _column(chisq, alt_id) <= threshold
            columns[comparison_name((null_id, alt_id))] = null_ok | alt_ok
    mask = pd.DataFrame(columns, index=chisq.index, dtype=bool)
    # keep comparison order even when the list is empty
    return mask.reindex(columns=[comparison_name(c) for c in comparisons])
