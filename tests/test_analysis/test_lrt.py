"""
Tests for likelihood ratio test calculations.
"""

import warnings

import pytest
import numpy as np
from scipy.stats import chi2

from ratetest.analysis.lrt import calculate_lrt, loglik_ratio_test, safe_loglik_ratio_test
from ratetest.exceptions import LRTError
from ratetest.models.fits import ModelFit


class TestCalculateLRT:
    """Tests for the calculate_lrt function."""

    def test_basic_lrt_calculation(self):
        """Test basic LRT calculation with known values."""
        lrt_stat, pvalue = calculate_lrt(-1000.0, -995.0, 2)

        assert lrt_stat == 10.0
        assert np.isclose(pvalue, chi2.sf(10.0, 2))

    def test_identical_likelihoods(self):
        """Test when null and alternative have same likelihood."""
        lrt_stat, pvalue = calculate_lrt(-900.0, -900.0, df=2)

        assert lrt_stat == 0.0
        assert pvalue == 1.0

    def test_negative_lrt_warning(self):
        """Negative LRT warns and returns conservative values."""
        with pytest.warns(UserWarning, match="Negative LRT detected"):
            lrt_stat, pvalue = calculate_lrt(-995.0, -1000.0, df=2)

        assert lrt_stat == 0.0
        assert pvalue == 1.0

    def test_negative_lrt_silent(self):
        """warn=False suppresses the warning but keeps the values."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            lrt_stat, pvalue = calculate_lrt(-995.0, -1000.0, df=2, warn=False)

        assert lrt_stat == 0.0
        assert pvalue == 1.0

    def test_different_df(self):
        """P-value grows with degrees of freedom for the same statistic."""
        _, pvalue1 = calculate_lrt(-1000.0, -995.0, df=1)
        _, pvalue3 = calculate_lrt(-1000.0, -995.0, df=3)

        assert np.isclose(pvalue1, chi2.sf(10.0, 1))
        assert np.isclose(pvalue3, chi2.sf(10.0, 3))
        assert pvalue3 > pvalue1


class TestLoglikRatioTest:
    """Tests for the pairwise tester on model fits."""

    def test_uses_parameter_difference_as_df(self):
        null = ModelFit(logLik=-20.0, n_params=3)
        alt = ModelFit(logLik=-17.0, n_params=7)

        pvalue = loglik_ratio_test(null, alt)

        assert np.isclose(pvalue, chi2.sf(6.0, 4))

    def test_strong_signal(self):
        null = ModelFit(logLik=-1000.0, n_params=3)
        alt = ModelFit(logLik=-950.0, n_params=5)

        assert loglik_ratio_test(null, alt) < 0.001

    @pytest.mark.parametrize("null, alt", [
        (None, ModelFit(-10.0, 5)),
        (ModelFit(-10.0, 3), None),
        (ModelFit(np.nan, 3), ModelFit(-10.0, 5)),
        (ModelFit(-10.0, 3), ModelFit(-np.inf, 5)),
        (ModelFit(-10.0, 3, converged=False), ModelFit(-9.0, 5)),
    ])
    def test_unusable_fits_raise(self, null, alt):
        with pytest.raises(LRTError):
            loglik_ratio_test(null, alt)

    def test_not_nested_raises(self):
        """Equal or reversed parameter counts cannot be a nested pair."""
        with pytest.raises(LRTError, match="not nested"):
            loglik_ratio_test(ModelFit(-10.0, 5), ModelFit(-9.0, 5))
        with pytest.raises(LRTError, match="not nested"):
            loglik_ratio_test(ModelFit(-10.0, 7), ModelFit(-9.0, 5))

    def test_safe_version_returns_nan(self):
        assert np.isnan(safe_loglik_ratio_test(None, ModelFit(-10.0, 5)))
        assert np.isnan(safe_loglik_ratio_test(ModelFit(-10.0, 5), ModelFit(-9.0, 5)))

    def test_safe_version_matches_on_valid_fits(self):
        null = ModelFit(logLik=-20.0, n_params=3)
        alt = ModelFit(logLik=-15.0, n_params=5)

        assert safe_loglik_ratio_test(null, alt) == loglik_ratio_test(null, alt)

    def test_safe_version_negative_lrt_is_one(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            pvalue = safe_loglik_ratio_test(ModelFit(-10.0, 3), ModelFit(-12.0, 5))
        assert pvalue == 1.0
