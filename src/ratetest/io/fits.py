"""
Reading fitted model tables.

A fit table is a long-format table with one row per (gene, model)::

    gene    model   logLik   n_params  chisq_pvalue  converged
    gene1   0       -20.5    3         0.002         True
    gene1   a       -12.1    5         0.41          True

``chisq_pvalue`` and ``converged`` are optional.
"""

from pathlib import Path
from typing import Dict, Optional, TextIO, Union

import pandas as pd

from ..exceptions import FitTableError
from ..models.fits import FitBank, ModelFit

REQUIRED_COLUMNS = ("gene", "model", "logLik", "n_params")

_TRUE_STRINGS = {"true", "t", "yes", "1"}


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if pd.isna(value):
        return False
    return bool(value)


def read_fit_table(
    source: Union[str, Path, TextIO], sep: Optional[str] = None
) -> FitBank:
    """
    Load a long-format fit table into a FitBank.

    Parameters
    ----------
    source : str, Path or file-like
        Table to read
    sep : str, optional
        Column separator. Inferred from the file suffix when omitted
        (comma for ``.csv``, tab otherwise).

    Returns
    -------
    FitBank
        Fits in order of first gene appearance

    Raises
    ------
    FitTableError
        If required columns are missing or a (gene, model) pair repeats
    """
    if sep is None:
        suffix = Path(source).suffix.lower() if isinstance(source, (str, Path)) else ""
        sep = "," if suffix == ".csv" else "\t"

    try:
        table = pd.read_csv(source, sep=sep, dtype={"gene": str, "model": str})
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FitTableError(f"Could not parse fit table: {e}") from e

    missing = [column for column in REQUIRED_COLUMNS if column not in table.columns]
    if missing:
        raise FitTableError(
            f"Fit table is missing required column(s) {missing}; "
            f"found {list(table.columns)}"
        )

    duplicated = table.duplicated(subset=["gene", "model"])
    if duplicated.any():
        first = table.loc[duplicated, ["gene", "model"]].iloc[0]
        raise FitTableError(
            f"Duplicate fit for gene {first['gene']!r}, model {first['model']!r}"
        )

    fits: Dict[str, Dict[str, ModelFit]] = {}
    for row in table.itertuples(index=False):
        chisq_pvalue = getattr(row, "chisq_pvalue", None)
        converged = getattr(row, "converged", True)
        if pd.isna(row.n_params):
            raise FitTableError(
                f"Missing n_params for gene {row.gene!r}, model {row.model!r}"
            )
        fit = ModelFit(
            logLik=float(row.logLik),
            n_params=int(row.n_params),
            chisq_pvalue=None if pd.isna(chisq_pvalue) else float(chisq_pvalue),
            converged=_parse_bool(converged),
        )
        fits.setdefault(row.gene, {})[row.model] = fit
    return FitBank(fits)
