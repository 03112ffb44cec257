"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest
from scipy.stats import chi2
from typer.testing import CliRunner

from ratetest.config import RatesConfig
from ratetest.models.codes import CANONICAL_MODELS
from ratetest.models.fits import FitBank, ModelFit


def n_params_for(model_id):
    """Free parameters of a model: 3 for constant rates, +2 per varying rate."""
    return 3 if model_id == "0" else 3 + 2 * len(model_id)


def alt_loglik(lnL_null, pvalue, df=2):
    """Log-likelihood an alternative needs for the LRT to give ``pvalue``."""
    return lnL_null + chi2.isf(pvalue, df) / 2


@pytest.fixture
def single_comparison_config():
    """One comparison per rate, all against the constant model."""
    return RatesConfig(
        chisquare=0.1,
        llrtests={
            "synthesis": [("0", "a")],
            "degradation": [("0", "b")],
            "processing": [("0", "c")],
        },
    )


@pytest.fixture
def two_gene_bank():
    """
    gene1: LLR p-values 0.02 (synthesis), 0.4 (degradation), processing fit
    missing; the constant model fits poorly so every comparison is kept.
    gene2: every model fits well, so every comparison is masked out.
    """
    return FitBank({
        "gene1": {
            "0": ModelFit(-50.0, 3, chisq_pvalue=0.01),
            "a": ModelFit(alt_loglik(-50.0, 0.02), 5, chisq_pvalue=0.3),
            "b": ModelFit(alt_loglik(-50.0, 0.4), 5, chisq_pvalue=0.2),
        },
        "gene2": {
            "0": ModelFit(-40.0, 3, chisq_pvalue=0.5),
            "a": ModelFit(-39.0, 5, chisq_pvalue=0.6),
            "b": ModelFit(-38.0, 5, chisq_pvalue=0.7),
            "c": ModelFit(-39.5, 5, chisq_pvalue=0.8),
        },
    })


@pytest.fixture
def full_bank():
    """Eight genes with all eight models fitted, deterministic values."""
    rng = np.random.default_rng(42)
    fits = {}
    for g in range(8):
        base = -100.0 - 10 * g
        # larger gains for rates that "really" vary in this gene
        gains = {"a": rng.uniform(0, 8), "b": rng.uniform(0, 8), "c": rng.uniform(0, 8)}
        models = {}
        for model_id in CANONICAL_MODELS:
            gain = sum(gains[code] for code in model_id if code in gains)
            models[model_id] = ModelFit(
                logLik=base + gain,
                n_params=n_params_for(model_id),
                chisq_pvalue=float(rng.uniform(0, 0.3)),
            )
        fits[f"gene{g + 1}"] = models
    return FitBank(fits)


@pytest.fixture
def fit_table_file(tmp_path):
    """Long-format fit table on disk."""
    content = "\n".join([
        "gene\tmodel\tlogLik\tn_params\tchisq_pvalue\tconverged",
        "geneB\t0\t-50.0\t3\t0.01\tTrue",
        "geneB\ta\t-40.0\t5\t0.30\tTrue",
        "geneB\tb\t-49.5\t5\t0.02\tTrue",
        "geneB\tc\t-49.9\t5\t0.03\tTrue",
        "geneA\t0\t-30.0\t3\t0.50\tTrue",
        "geneA\ta\t-29.8\t5\t0.55\tTrue",
        "geneA\tb\t-29.9\t5\t0.60\tFalse",
        "geneA\tc\t-29.0\t5\t0.70\tTrue",
    ]) + "\n"
    path = tmp_path / "fits.tsv"
    path.write_text(content)
    return path


@pytest.fixture
def cli_runner():
    """CLI test runner for Typer apps."""
    return CliRunner()
