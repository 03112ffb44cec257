"""
Per-gene, per-rate p-values of rate variability.

Two strategies are available:

- ``compare_rates``: likelihood ratio tests between nested models, masked by
  chi-squared goodness of fit and combined per rate with Brown's method.
- ``select_by_aic``: pick the best model per gene by AIC and report its
  chi-squared p-value for the rates that model lets vary.
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import RatesConfig
from ..exceptions import ConfigurationError
from ..models.codes import RATES, comparison_name, order_models, variable_rates
from ..models.fits import FitBank
from .brown import brown_method_mask
from .lrt import safe_loglik_ratio_test
from .mask import chisq_mask, resolve_threshold


def _empty_table(genes) -> pd.DataFrame:
    return pd.DataFrame(
        index=pd.Index(list(genes), name="gene"), columns=list(RATES), dtype=float
    )


def _align_to_bank(bank: FitBank, table: pd.DataFrame, key: str, label: str) -> pd.DataFrame:
    missing = [gene for gene in bank.genes if gene not in table.index]
    if missing:
        raise ConfigurationError(
            key,
            f"{label} matrix has no row for {len(missing)} gene(s), "
            f"e.g. {missing[:3]}",
        )
    return table.loc[bank.genes]


def _aligned_chisq(bank: FitBank, chisq: Optional[pd.DataFrame]) -> pd.DataFrame:
    if chisq is None:
        return bank.chisqtest()
    return _align_to_bank(bank, chisq, "chisqtest", "chi-squared")


def _has_usable_fit(bank: FitBank, comparisons: Sequence[Tuple[str, str]]) -> np.ndarray:
    referenced = {model_id for pair in comparisons for model_id in pair}
    return np.array([
        any(
            fit is not None and fit.usable
            for model_id, fit in bank[gene].items()
            if model_id in referenced
        )
        for gene in bank.genes
    ], dtype=bool)


def llr_pvalue_matrix(
    bank: FitBank, comparisons: Sequence[Tuple[str, str]]
) -> pd.DataFrame:
    """
    Genes x comparisons matrix of likelihood ratio test p-values.

    Cells that cannot be tested (missing, unconverged or non-nested fits)
    are NaN. The result is two-dimensional for any number of comparisons.

    Parameters
    ----------
    bank : FitBank
        Fitted models per gene
    comparisons : sequence of (str, str)
        (null, alternative) model pairs

    Returns
    -------
    pd.DataFrame
        Index = bank genes, columns = ``null_VS_alt`` labels
    """
    values = np.full((len(bank), len(comparisons)), np.nan)
    for i, gene in enumerate(bank.genes):
        fits = bank[gene]
        for j, (null_id, alt_id) in enumerate(comparisons):
            values[i, j] = safe_loglik_ratio_test(fits.get(null_id), fits.get(alt_id))
    matrix = pd.DataFrame(
        values,
        index=pd.Index(bank.genes, name="gene"),
        columns=[comparison_name(c) for c in comparisons],
    )
    return matrix


def rate_pvalues(
    bank: FitBank,
    rate: str,
    comparisons: Sequence[Tuple[str, str]],
    chisq: pd.DataFrame,
    threshold: float,
) -> pd.Series:
    """
    Combined p-value per gene for a single rate.

    Parameters
    ----------
    bank : FitBank
        Fitted models per gene
    rate : str
        Rate name, used in messages
    comparisons : sequence of (str, str)
        Comparisons configured for this rate
    chisq : pd.DataFrame
        Genes x models chi-squared p-values aligned with ``bank``
    threshold : float
        Chi-squared threshold

    Returns
    -------
    pd.Series
        Combined p-value per gene, named after the rate
    """
    if not comparisons:
        raise ConfigurationError(f"llrtests.{rate}", "comparison list is empty")

    pvals = llr_pvalue_matrix(bank, comparisons)
    mask = chisq_mask(chisq, comparisons, threshold)

    n_failed = int((pvals.isna() & mask).to_numpy().sum())
    if n_failed:
        warnings.warn(
            f"{n_failed} likelihood ratio test(s) for {rate} could not be "
            "computed and were reported as NaN.",
            UserWarning
        )

    combined = brown_method_mask(pvals, mask)
    combined[~_has_usable_fit(bank, comparisons)] = np.nan
    combined.name = rate
    return combined


def compare_rates(
    bank: FitBank,
    config: RatesConfig,
    chisq: Optional[pd.DataFrame] = None,
    c_tsh: Optional[float] = None,
    n_jobs: int = 1,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Rate p-values from masked likelihood ratio tests and Brown's method.

    Parameters
    ----------
    bank : FitBank
        Fitted models per gene
    config : RatesConfig
        Comparison lists and default chi-squared threshold
    chisq : pd.DataFrame, optional
        Genes x models chi-squared p-values. Defaults to the values stored on
        the fits (``bank.chisqtest()``).
    c_tsh : float, optional
        Chi-squared threshold overriding ``config.chisquare``
    n_jobs : int, default=1
        Number of worker threads; the three rates are independent
    verbose : bool, default=False
        Print progress

    Returns
    -------
    pd.DataFrame
        Genes x (synthesis, degradation, processing)
    """
    threshold = resolve_threshold(c_tsh, config)
    chisq = _aligned_chisq(bank, chisq)

    if verbose:
        print(f"Testing {len(bank)} genes (chi-squared threshold = {threshold})")

    def run(rate: str) -> pd.Series:
        comparisons = config.comparisons(rate)
        if verbose:
            names = ", ".join(comparison_name(c) for c in comparisons)
            print(f"  {rate}: {names}")
        return rate_pvalues(bank, rate, comparisons, chisq, threshold)

    if n_jobs > 1:
        with ThreadPoolExecutor(max_workers=min(n_jobs, len(RATES))) as executor:
            futures = {rate: executor.submit(run, rate) for rate in RATES}
            results: Dict[str, pd.Series] = {
                rate: future.result() for rate, future in futures.items()
            }
    else:
        results = {rate: run(rate) for rate in RATES}

    table = _empty_table(bank.genes)
    for rate in RATES:
        table[rate] = results[rate].to_numpy()
    return table


def best_models(bank: FitBank, aic: Optional[pd.DataFrame] = None) -> pd.Series:
    """
    Model with the lowest AIC for each gene.

    Missing AIC values are never selected. Ties go to the first model in
    canonical order. Genes without any AIC value get None.

    Parameters
    ----------
    bank : FitBank
        Fitted models per gene
    aic : pd.DataFrame, optional
        Genes x models AIC values. Defaults to ``bank.aic()``.

    Returns
    -------
    pd.Series
        Selected model identifier (or None) per gene

    Raises
    ------
    ConfigurationError
        If ``aic`` has no row for some gene of ``bank``
    """
    if aic is None:
        aic = bank.aic()
    else:
        aic = _align_to_bank(bank, aic, "AIC", "AIC")
        aic = aic[order_models(aic.columns)]
    scores = aic.to_numpy(dtype=float).copy()
    scores[np.isnan(scores)] = np.inf

    selected = []
    for row in scores:
        if row.size == 0 or np.all(np.isposinf(row)):
            selected.append(None)
        else:
            selected.append(aic.columns[int(np.argmin(row))])
    return pd.Series(selected, index=aic.index, dtype=object, name="model")


def select_by_aic(
    bank: FitBank,
    chisq: Optional[pd.DataFrame] = None,
    aic: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    Rate p-values from the best model by AIC.

    The chi-squared p-value of the selected model is reported for every rate
    it lets vary (``a`` synthesis, ``b`` degradation, ``c`` processing).
    Other rates, and every rate of a gene without a selectable model, get 1.

    Parameters
    ----------
    bank : FitBank
        Fitted models per gene
    chisq : pd.DataFrame, optional
        Genes x models chi-squared p-values. Defaults to ``bank.chisqtest()``.
    aic : pd.DataFrame, optional
        Genes x models AIC values. Defaults to ``bank.aic()``.

    Returns
    -------
    pd.DataFrame
        Genes x (synthesis, degradation, processing)
    """
    chisq = _aligned_chisq(bank, chisq)
    selected = best_models(bank, aic)

    table = _empty_table(bank.genes)
    table[:] = 1.0
    for gene, model_id in selected.items():
        if model_id is None:
            continue
        pvalue = chisq.at[gene, model_id] if model_id in chisq.columns else np.nan
        for rate in variable_rates(model_id):
            table.at[gene, rate] = pvalue
    return table
