"""
Configuration for rate p-value computation.

The configuration is an immutable value passed explicitly into every
computation. Key names in ``from_dict``/``to_dict`` follow the nested layout
used in configuration files::

    {
        "modelSelection": "llr",
        "thresholds": {
            "chisquare": 0.1,
            "brown": {"synthesis": 0.01, "degradation": 0.01, "processing": 0.01}
        },
        "llrtests": {
            "synthesis": [["0", "a"], ["b", "ab"], ["c", "ac"], ["bc", "abc"]],
            ...
        }
    }
"""

import dataclasses
import json
import numbers
from types import MappingProxyType
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import ConfigurationError
from .models.codes import RATES, is_nested

Comparison = Tuple[str, str]

MODEL_SELECTION_MODES = ("llr", "aic")

DEFAULT_CHISQUARE = 0.1

DEFAULT_BROWN = {
    "synthesis": 0.01,
    "degradation": 0.01,
    "processing": 0.01,
}

DEFAULT_LLRTESTS: Dict[str, Tuple[Comparison, ...]] = {
    "synthesis": (("0", "a"), ("b", "ab"), ("c", "ac"), ("bc", "abc")),
    "degradation": (("0", "b"), ("a", "ab"), ("c", "bc"), ("ac", "abc")),
    "processing": (("0", "c"), ("a", "ac"), ("b", "bc"), ("ab", "abc")),
}


def _normalize_llrtests(llrtests: Mapping[str, Any]) -> Mapping[str, Tuple[Comparison, ...]]:
    unknown = set(llrtests) - set(RATES)
    if unknown:
        raise ConfigurationError(
            "llrtests", f"unknown rate(s) {sorted(unknown)}; expected {list(RATES)}"
        )
    normalized = {}
    for rate in RATES:
        key = f"llrtests.{rate}"
        if rate not in llrtests:
            raise ConfigurationError(key, "missing comparison list")
        pairs = []
        for pair in llrtests[rate]:
            if isinstance(pair, str) or len(pair) != 2:
                raise ConfigurationError(
                    key, f"comparison {pair!r} must be a (null, alternative) pair"
                )
            null_id, alt_id = str(pair[0]), str(pair[1])
            if not is_nested(null_id, alt_id):
                raise ConfigurationError(
                    key, f"{null_id!r} is not nested in {alt_id!r}"
                )
            pairs.append((null_id, alt_id))
        if not pairs:
            raise ConfigurationError(key, "comparison list is empty")
        normalized[rate] = tuple(pairs)
    return MappingProxyType(normalized)


@dataclass(frozen=True)
class RatesConfig:
    """
    Settings controlling how rate p-values are computed.

    Attributes
    ----------
    model_selection : str
        "llr" (likelihood ratio tests combined with Brown's method) or
        "aic" (best model by AIC)
    chisquare : float, optional
        Default chi-squared threshold used to mask comparisons
    brown : mapping
        Per-rate significance thresholds used for gene classification
        (read-only after construction)
    llrtests : mapping
        Per-rate tuple of (null, alternative) model comparisons, each null
        model nested in its alternative (read-only after construction)
    """

    model_selection: str = "llr"
    chisquare: Optional[float] = DEFAULT_CHISQUARE
    brown: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_BROWN))
    llrtests: Mapping[str, Tuple[Comparison, ...]] = field(
        default_factory=lambda: dict(DEFAULT_LLRTESTS)
    )

    def __post_init__(self):
        if self.model_selection not in MODEL_SELECTION_MODES:
            raise ConfigurationError(
                "modelSelection",
                f"unknown mode {self.model_selection!r}; "
                f"expected one of {list(MODEL_SELECTION_MODES)}",
            )
        if self.chisquare is not None and not isinstance(self.chisquare, numbers.Real):
            raise ConfigurationError(
                "thresholds.chisquare", f"{self.chisquare!r} is not a number"
            )
        missing = [rate for rate in RATES if rate not in self.brown]
        if missing:
            raise ConfigurationError("thresholds.brown", f"missing rate(s) {missing}")
        # frozen: normalized values are written through object.__setattr__
        object.__setattr__(
            self, "brown", MappingProxyType({rate: float(self.brown[rate]) for rate in RATES})
        )
        object.__setattr__(self, "llrtests", _normalize_llrtests(self.llrtests))

    def __hash__(self):
        return hash((
            self.model_selection,
            self.chisquare,
            tuple(self.brown.items()),
            tuple(self.llrtests.items()),
        ))

    def comparisons(self, rate: str) -> Tuple[Comparison, ...]:
        """Configured comparisons for one rate."""
        if rate not in self.llrtests:
            raise ConfigurationError(f"llrtests.{rate}", "unknown rate")
        return self.llrtests[rate]

    def replace(self, **changes) -> "RatesConfig":
        """
        Return a copy with some fields changed.

        Examples
        --------
        >>> config = RatesConfig()
        >>> config.replace(chisquare=0.2).chisquare
        0.2
        """
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RatesConfig":
        """
        Build a configuration from a nested dictionary.

        Missing keys take their default values.
        """
        kwargs: Dict[str, Any] = {}
        if "modelSelection" in data:
            kwargs["model_selection"] = data["modelSelection"]
        thresholds = data.get("thresholds", {})
        if "chisquare" in thresholds:
            kwargs["chisquare"] = thresholds["chisquare"]
        if "brown" in thresholds:
            brown = dict(DEFAULT_BROWN)
            brown.update(thresholds["brown"])
            kwargs["brown"] = brown
        if "llrtests" in data:
            kwargs["llrtests"] = data["llrtests"]
        return cls(**kwargs)

    @classmethod
    def from_json(cls, filepath: Union[str, Path]) -> "RatesConfig":
        """Load a configuration from a JSON file."""
        with open(filepath, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(str(filepath), f"invalid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Export as a nested dictionary (inverse of ``from_dict``)."""
        return {
            "modelSelection": self.model_selection,
            "thresholds": {
                "chisquare": self.chisquare,
                "brown": dict(self.brown),
            },
            "llrtests": {
                rate: [list(pair) for pair in pairs]
                for rate, pairs in self.llrtests.items()
            },
        }
