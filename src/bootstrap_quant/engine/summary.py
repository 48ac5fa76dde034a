"""Summaries of a bootstrap estimate collection."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

__all__ = ["BootstrapResult", "summarize"]


def _finite_or_none(value: float) -> float | None:
    value = float(value)
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class BootstrapResult:
    """Immutable outcome of one bootstrap run.

    ``estimates`` holds one statistic value per resample, in the order they
    were produced; the array is read-only. ``standard_error`` is the sample
    standard deviation (ddof=1) of the estimates and is ``nan`` when only one
    resample was drawn. :meth:`to_dict` reports non-finite values as ``None``
    so the payload stays valid JSON.
    """

    mean: float
    standard_error: float
    estimates: np.ndarray = field(repr=False)

    @property
    def n_resamples(self) -> int:
        return int(self.estimates.size)

    def interval(self, level: float = 0.95):
        """Percentile confidence interval of the estimates."""
        from .intervals import interval

        return interval(self.estimates, level)

    def to_dict(self, *, include_estimates: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "mean": _finite_or_none(self.mean),
            "standard_error": _finite_or_none(self.standard_error),
            "n_resamples": self.n_resamples,
        }
        if include_estimates:
            payload["estimates"] = self.estimates.tolist()
        return payload


def summarize(estimates: Sequence[float] | np.ndarray) -> BootstrapResult:
    """Build a :class:`BootstrapResult` from a non-empty estimate collection."""

    array = np.array(estimates, dtype=float, copy=True).reshape(-1)
    if array.size == 0:
        raise ValueError("cannot summarise an empty estimate collection")
    array.setflags(write=False)

    mean = float(np.mean(array))
    if array.size < 2:
        standard_error = float("nan")
    else:
        standard_error = float(np.std(array, ddof=1))
    return BootstrapResult(mean=mean, standard_error=standard_error, estimates=array)
