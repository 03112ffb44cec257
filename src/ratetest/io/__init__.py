"""
Input/output utilities for fitted model tables.
"""

from .fits import read_fit_table, REQUIRED_COLUMNS

__all__ = ["read_fit_table", "REQUIRED_COLUMNS"]
