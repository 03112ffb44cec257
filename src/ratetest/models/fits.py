"""
Fitted kinetic models and the per-gene fit bank.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

import numpy as np
import pandas as pd

from .codes import order_models


@dataclass(frozen=True)
class ModelFit:
    """
    One kinetic model fitted to one gene.

    Attributes
    ----------
    logLik : float
        Log-likelihood of the fitted model
    n_params : int
        Number of free parameters
    chisq_pvalue : float, optional
        Goodness-of-fit p-value from the chi-squared test
    converged : bool
        Whether the optimizer converged
    params : dict
        Fitted parameter values (informational)
    """

    logLik: float
    n_params: int
    chisq_pvalue: Optional[float] = None
    converged: bool = True
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def usable(self) -> bool:
        """Fit converged and has a finite log-likelihood."""
        return bool(self.converged) and np.isfinite(self.logLik)

    @property
    def aic(self) -> float:
        """Akaike Information Criterion: 2k - 2 lnL (NaN if unusable)."""
        if not np.isfinite(self.logLik):
            return np.nan
        return 2 * self.n_params - 2 * self.logLik


class FitBank:
    """
    Ordered collection of model fits: gene -> model id -> ModelFit.

    Gene order is the insertion order of ``fits`` and is preserved by every
    matrix view.

    Examples
    --------
    >>> bank = FitBank({
    ...     "gene1": {"0": ModelFit(-10.0, 3, 0.01), "a": ModelFit(-4.0, 5, 0.4)},
    ... })
    >>> bank.models
    ['0', 'a']
    >>> float(bank.loglik().loc["gene1", "a"])
    -4.0
    """

    def __init__(self, fits: Mapping[str, Mapping[str, Optional[ModelFit]]]):
        self._fits: Dict[str, Dict[str, Optional[ModelFit]]] = {
            str(gene): dict(models) for gene, models in fits.items()
        }

    @property
    def genes(self) -> List[str]:
        return list(self._fits)

    @property
    def models(self) -> List[str]:
        """Model identifiers present in the bank, in canonical order."""
        return order_models(
            model_id for models in self._fits.values() for model_id in models
        )

    def get(self, gene: str, model_id: str) -> Optional[ModelFit]:
        """Fit of ``model_id`` for ``gene``, or None if absent."""
        return self._fits.get(gene, {}).get(model_id)

    def __getitem__(self, gene: str) -> Dict[str, Optional[ModelFit]]:
        return self._fits[gene]

    def __contains__(self, gene: object) -> bool:
        return gene in self._fits

    def __iter__(self) -> Iterator[str]:
        return iter(self._fits)

    def __len__(self) -> int:
        return len(self._fits)

    def __repr__(self) -> str:
        return f"FitBank(n_genes={len(self)}, models={self.models})"

    def _matrix(self, attribute: str, models: Optional[List[str]] = None) -> pd.DataFrame:
        columns = self.models if models is None else list(models)
        values = np.full((len(self), len(columns)), np.nan)
        for i, gene in enumerate(self._fits):
            for j, model_id in enumerate(columns):
                fit = self.get(gene, model_id)
                if fit is None:
                    continue
                value = getattr(fit, attribute)
                if value is not None:
                    values[i, j] = float(value)
        matrix = pd.DataFrame(values, index=self.genes, columns=columns)
        matrix.index.name = "gene"
        return matrix

    def loglik(self, models: Optional[List[str]] = None) -> pd.DataFrame:
        """Genes x models matrix of log-likelihoods."""
        return self._matrix("logLik", models)

    def chisqtest(self, models: Optional[List[str]] = None) -> pd.DataFrame:
        """Genes x models matrix of chi-squared goodness-of-fit p-values."""
        return self._matrix("chisq_pvalue", models)

    def aic(self, models: Optional[List[str]] = None) -> pd.DataFrame:
        """Genes x models matrix of AIC values, NaN where undefined."""
        return self._matrix("aic", models)
