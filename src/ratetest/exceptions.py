"""
Exception types raised by ratetest.
"""


class RateTestError(Exception):
    """Base class for all ratetest errors."""


class LRTError(RateTestError):
    """A single likelihood ratio test could not be computed."""


class ShapeMismatchError(RateTestError, ValueError):
    """P-value and mask matrices are not aligned."""


class ConfigurationError(RateTestError, ValueError):
    """
    Invalid or missing configuration.

    Parameters
    ----------
    key : str
        Dotted configuration key that caused the problem
        (e.g. ``thresholds.chisquare``)
    message : str
        Description of the problem
    """

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


class FitTableError(RateTestError, ValueError):
    """Malformed fit table."""
