"""Single-resample evaluation."""

from __future__ import annotations

import numbers
from typing import Callable

import numpy as np

from .errors import StatisticFailure

__all__ = ["Statistic", "resample_indices", "draw_resample", "evaluate_resample"]

Statistic = Callable[[np.ndarray], float]


def resample_indices(n: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``n`` indices uniformly from ``{0, ..., n-1}`` with replacement."""

    return rng.integers(0, n, size=n)


def draw_resample(sample: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Gather ``len(sample)`` rows of ``sample`` drawn with replacement, in draw order."""

    return sample[resample_indices(sample.shape[0], rng)]


def _as_scalar(value: object) -> float:
    if isinstance(value, np.ndarray):
        if value.size != 1:
            raise TypeError(f"statistic returned an array of shape {value.shape}")
        value = value.reshape(()).item()
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise TypeError(f"statistic returned {type(value).__name__}, expected a real scalar")
    return float(value)


def evaluate_resample(
    sample: np.ndarray,
    statistic: Statistic,
    rng: np.random.Generator,
    *,
    resample_index: int | None = None,
) -> float:
    """Draw one resample and evaluate ``statistic`` on it.

    Any exception raised by the statistic, and any value that is not a finite
    real scalar, is reported as :class:`StatisticFailure`; the resample is
    never skipped or replaced.
    """

    resample = draw_resample(sample, rng)
    try:
        raw = statistic(resample)
    except Exception as exc:
        raise StatisticFailure(
            f"statistic {_name(statistic)} raised {type(exc).__name__}: {exc}",
            resample_index=resample_index,
        ) from exc

    try:
        value = _as_scalar(raw)
    except TypeError as exc:
        raise StatisticFailure(
            f"statistic {_name(statistic)} is not scalar-valued: {exc}",
            resample_index=resample_index,
        ) from exc
    if not np.isfinite(value):
        raise StatisticFailure(
            f"statistic {_name(statistic)} returned non-finite value {value}",
            resample_index=resample_index,
        )
    return value


def _name(statistic: Statistic) -> str:
    func = getattr(statistic, "func", statistic)  # functools.partial
    return getattr(func, "__qualname__", None) or repr(statistic)
