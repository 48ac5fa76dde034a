"""Confidence intervals: percentile (empirical) and analytic (normal approximation)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np
from scipy import stats

from bootstrap_quant.utils.checks import check_level

from .errors import InvalidInputError

__all__ = ["ConfidenceInterval", "interval", "interval_analytic"]


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float
    level: float
    method: Literal["percentile", "analytic"] = "percentile"

    @property
    def midpoint(self) -> float:
        return 0.5 * (self.lower + self.upper)

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> dict[str, float | str]:
        return {
            "lower": self.lower,
            "upper": self.upper,
            "level": self.level,
            "method": self.method,
        }


def _quantile(array: np.ndarray, q: float) -> float:
    return float(np.quantile(array, q, method="linear"))


def interval(
    estimates: Sequence[float] | np.ndarray, level: float = 0.95
) -> ConfidenceInterval:
    """Percentile interval from the empirical distribution of ``estimates``.

    Bounds are the ``(1 - level) / 2`` and ``1 - (1 - level) / 2`` quantiles,
    interpolating linearly between order statistics.
    """

    level = check_level(level, context="interval")
    array = np.asarray(estimates, dtype=float).reshape(-1)
    if array.size == 0:
        raise InvalidInputError("[interval] estimate collection is empty")
    if not np.isfinite(array).all():
        raise InvalidInputError("[interval] estimate collection contains non-finite values")

    tail = (1.0 - level) / 2.0
    return ConfidenceInterval(
        lower=_quantile(array, tail),
        upper=_quantile(array, 1.0 - tail),
        level=level,
        method="percentile",
    )


def interval_analytic(
    estimate: float, standard_error: float, level: float = 0.95
) -> ConfidenceInterval:
    """Normal-approximation interval ``estimate ± z * standard_error``.

    The standard error comes from a closed-form expression specific to the
    statistic (see :mod:`bootstrap_quant.statistics`), not from the bootstrap.
    """

    level = check_level(level, context="interval_analytic")
    estimate = float(estimate)
    standard_error = float(standard_error)
    if not math.isfinite(estimate):
        raise InvalidInputError(f"[interval_analytic] estimate must be finite, got {estimate}")
    if not math.isfinite(standard_error) or standard_error < 0:
        raise InvalidInputError(
            f"[interval_analytic] standard_error must be finite and >= 0, got {standard_error}"
        )

    z_lower = float(stats.norm.ppf((1.0 - level) / 2.0))
    z_upper = float(stats.norm.ppf((1.0 + level) / 2.0))
    return ConfidenceInterval(
        lower=estimate + z_lower * standard_error,
        upper=estimate + z_upper * standard_error,
        level=level,
        method="analytic",
    )
