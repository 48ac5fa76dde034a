"""Statistic registry.

``get_statistic("es", alpha=0.01)`` returns a picklable callable ready for
:func:`bootstrap_quant.replicate_parallel`; ``analytic_standard_error`` gives
the closed-form standard error for the statistics that have one.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Optional

import numpy as np

from .measures import (
    DegenerateSampleError,
    EmptyTailError,
    expected_shortfall,
    mean,
    mean_standard_error,
    sharpe_ratio,
    sharpe_standard_error,
    value_at_risk,
)

__all__ = [
    "STATISTICS",
    "DegenerateSampleError",
    "EmptyTailError",
    "analytic_standard_error",
    "expected_shortfall",
    "get_statistic",
    "mean",
    "mean_standard_error",
    "sharpe_ratio",
    "sharpe_standard_error",
    "value_at_risk",
]

STATISTICS: dict[str, Callable[..., float]] = {
    "mean": mean,
    "sharpe": sharpe_ratio,
    "var": value_at_risk,
    "es": expected_shortfall,
}


def get_statistic(name: str, **params: Any) -> Callable[[np.ndarray], float]:
    try:
        func = STATISTICS[name.lower()]
    except KeyError as exc:
        known = ", ".join(sorted(STATISTICS))
        raise KeyError(f"Unknown statistic '{name}'. Available: {known}") from exc
    return partial(func, **params) if params else func


def analytic_standard_error(name: str, sample: np.ndarray, **params: Any) -> Optional[float]:
    """Closed-form SE of ``name`` on the full sample, or ``None`` if there is none."""

    key = name.lower()
    if key == "mean":
        return mean_standard_error(sample)
    if key == "sharpe":
        estimate = get_statistic("sharpe", **params)(sample)
        return sharpe_standard_error(estimate, int(np.shape(sample)[0]), **params)
    return None
