"""
Model identifier conventions.

A model identifier lists the kinetic rates that are allowed to vary in time:
``a`` for synthesis, ``b`` for degradation and ``c`` for processing. The
identifier ``"0"`` denotes the model where every rate is constant.
"""

from typing import FrozenSet, Iterable, List, Tuple

RATES = ("synthesis", "degradation", "processing")

RATE_CODES = {
    "synthesis": "a",
    "degradation": "b",
    "processing": "c",
}

CANONICAL_MODELS = ("0", "a", "b", "c", "ab", "ac", "bc", "abc")

COMPARISON_SEPARATOR = "_VS_"


def variable_rates(model_id: str) -> FrozenSet[str]:
    """
    Rates that are free (time-varying) in a model.

    Parameters
    ----------
    model_id : str
        Model identifier (e.g. "ab")

    Returns
    -------
    frozenset of str
        Subset of RATES

    Examples
    --------
    >>> sorted(variable_rates("ac"))
    ['processing', 'synthesis']
    >>> variable_rates("0")
    frozenset()
    """
    return frozenset(rate for rate, code in RATE_CODES.items() if code in model_id)


def is_nested(null_id: str, alt_id: str) -> bool:
    """True if ``null_id`` is obtained from ``alt_id`` by fixing rates."""
    null_rates = variable_rates(null_id)
    alt_rates = variable_rates(alt_id)
    return null_rates < alt_rates


def comparison_name(comparison: Tuple[str, str]) -> str:
    """Column label of a comparison, e.g. ``('0', 'a') -> '0_VS_a'``."""
    null_id, alt_id = comparison
    return f"{null_id}{COMPARISON_SEPARATOR}{alt_id}"


def order_models(model_ids: Iterable[str]) -> List[str]:
    """
    Sort model identifiers in canonical order.

    Known identifiers come first in CANONICAL_MODELS order, unknown ones
    follow in first-seen order.
    """
    seen = []
    for model_id in model_ids:
        if model_id not in seen:
            seen.append(model_id)
    known = [m for m in CANONICAL_MODELS if m in seen]
    unknown = [m for m in seen if m not in CANONICAL_MODELS]
    return known + unknown
