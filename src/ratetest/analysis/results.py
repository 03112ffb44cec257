"""
Result objects and gene classification for rate p-values.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
import json

import numpy as np
import pandas as pd

from ..config import DEFAULT_BROWN
from ..models.codes import RATES, RATE_CODES


def gene_class(
    pvals: pd.DataFrame, brown: Optional[Mapping[str, float]] = None
) -> pd.Series:
    """
    Classify genes by which rates vary significantly.

    The class of a gene concatenates the codes (``a`` synthesis,
    ``b`` degradation, ``c`` processing) of every rate whose p-value is
    below its threshold; ``"0"`` when none is.

    Parameters
    ----------
    pvals : pd.DataFrame
        Genes x (synthesis, degradation, processing) p-values
    brown : dict, optional
        Per-rate thresholds, defaults to 0.01 for each rate

    Returns
    -------
    pd.Series
        Class code per gene

    Examples
    --------
    >>> pvals = pd.DataFrame(
    ...     {"synthesis": [0.001, 0.5], "degradation": [0.002, 0.5],
    ...      "processing": [0.9, np.nan]},
    ...     index=["g1", "g2"])
    >>> gene_class(pvals).tolist()
    ['ab', '0']
    """
    thresholds = dict(DEFAULT_BROWN)
    if brown is not None:
        thresholds.update(brown)

    # NaN < threshold is False: missing p-values never mark a rate variable
    with np.errstate(invalid="ignore"):
        significant = {
            rate: pvals[rate].to_numpy(dtype=float) < thresholds[rate] for rate in RATES
        }
    classes = []
    for i in range(len(pvals)):
        code = "".join(RATE_CODES[rate] for rate in RATES if significant[rate][i])
        classes.append(code or "0")
    return pd.Series(classes, index=pvals.index, name="class")


@dataclass
class RatePvalsResult:
    """
    Rate p-values together with the settings that produced them.

    Attributes
    ----------
    pvals : pd.DataFrame
        Genes x (synthesis, degradation, processing)
    model_selection : str
        "llr" or "aic"
    chisquare : float, optional
        Chi-squared threshold used (llr mode only)
    brown : dict
        Per-rate thresholds for ``significant`` and ``gene_class``
    """

    pvals: pd.DataFrame
    model_selection: str
    chisquare: Optional[float] = None
    brown: Optional[Dict[str, float]] = None

    def __post_init__(self):
        if self.brown is None:
            self.brown = dict(DEFAULT_BROWN)

    @property
    def genes(self):
        return list(self.pvals.index)

    def significant(self, alpha: Optional[float] = None) -> pd.DataFrame:
        """
        Boolean table of significant rates.

        Parameters
        ----------
        alpha : float, optional
            Common significance level. Defaults to the per-rate Brown
            thresholds.
        """
        with np.errstate(invalid="ignore"):
            if alpha is not None:
                return self.pvals < alpha
            return pd.DataFrame(
                {rate: self.pvals[rate] < self.brown[rate] for rate in RATES},
                index=self.pvals.index,
            )

    def gene_class(self) -> pd.Series:
        """Class code per gene (see ``gene_class``)."""
        return gene_class(self.pvals, self.brown)

    def summary(self) -> str:
        """
        Generate a formatted summary.

        Returns
        -------
        str
            Multi-line summary with per-rate counts
        """
        lines = []
        lines.append("=" * 70)
        lines.append("Rate variability p-values")
        lines.append("=" * 70)
        lines.append("")
        lines.append(f"Model selection:      {self.model_selection}")
        if self.chisquare is not None:
            lines.append(f"Chi-squared cutoff:   {self.chisquare}")
        lines.append(f"Genes:                {len(self.pvals)}")
        lines.append("")
        lines.append(f"{'Rate':<14} {'Threshold':>10} {'Significant':>12} {'Missing':>8}")
        lines.append("-" * 70)
        significant = self.significant()
        for rate in RATES:
            lines.append(
                f"{rate:<14} "
                f"{self.brown[rate]:>10.4g} "
                f"{int(significant[rate].sum()):>12d} "
                f"{int(self.pvals[rate].isna().sum()):>8d}"
            )
        lines.append("")
        counts = self.gene_class().value_counts()
        lines.append("Gene classes:")
        for code, count in counts.items():
            lines.append(f"  {code:<4} {count}")
        lines.append("=" * 70)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Export results as a dictionary.

        Missing p-values are exported as None.
        """
        genes = {}
        for gene, row in self.pvals.iterrows():
            genes[str(gene)] = {
                rate: (None if pd.isna(row[rate]) else float(row[rate])) for rate in RATES
            }
        return {
            "model_selection": self.model_selection,
            "chisquare": self.chisquare,
            "brown": dict(self.brown),
            "pvals": genes,
        }

    def to_json(self, indent: int = 2) -> str:
        """Export results as a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def to_tsv(self, include_class: bool = False) -> str:
        """
        Export the p-value table as tab-separated text.

        Parameters
        ----------
        include_class : bool, default=False
            Append a ``class`` column with ``gene_class``
        """
        table = self.pvals.copy()
        if include_class:
            table["class"] = self.gene_class()
        return table.to_csv(sep="\t", na_rep="NA", index_label="gene")

    def __str__(self) -> str:
        return self.summary()
