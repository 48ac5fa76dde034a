"""Friendly input validation for the replication engine.

Every helper raises :class:`~bootstrap_quant.engine.errors.InvalidInputError`
with a message prefixed by ``context`` (usually the calling function), so a
bad run is rejected before any resample is drawn.
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np
import pandas as pd

from bootstrap_quant.engine.errors import InvalidInputError

__all__ = [
    "as_sample",
    "check_replicate_count",
    "check_worker_count",
    "check_level",
    "check_timeout",
]


def _fail(message: str, context: str) -> InvalidInputError:
    if context:
        message = f"[{context}] {message}"
    return InvalidInputError(message)


def as_sample(data: Any, *, context: str = "") -> np.ndarray:
    """Return ``data`` as a read-only float array of shape ``(n,)`` or ``(n, k)``.

    Rows are observations; a 2-D sample keeps paired columns together when
    resampled. The array is a private copy, so callers mutating their input
    afterwards cannot affect a run in progress.
    """

    if isinstance(data, (pd.DataFrame, pd.Series)):
        data = data.to_numpy()
    try:
        array = np.array(data, dtype=float, copy=True)
    except (TypeError, ValueError) as exc:
        raise _fail(f"sample must be numeric: {exc}", context) from exc

    if array.ndim == 0 or array.ndim > 2:
        raise _fail(
            f"sample must be 1-D or 2-D (rows are observations), got ndim={array.ndim}",
            context,
        )
    if array.shape[0] == 0:
        raise _fail("sample is empty", context)
    if array.ndim == 2 and array.shape[1] == 0:
        raise _fail("sample has no columns", context)
    if not np.isfinite(array).all():
        bad = np.argwhere(~np.isfinite(array))
        details = ", ".join(str(tuple(int(i) for i in idx)) for idx in bad[:5])
        raise _fail(f"sample contains non-finite values at {details}", context)

    array.setflags(write=False)
    return array


def check_replicate_count(n_resamples: Any, *, context: str = "") -> int:
    if isinstance(n_resamples, bool) or not isinstance(n_resamples, numbers.Integral):
        raise _fail(
            f"n_resamples must be an integer, got {type(n_resamples).__name__}",
            context,
        )
    if n_resamples < 1:
        raise _fail(f"n_resamples must be >= 1, got {n_resamples}", context)
    return int(n_resamples)


def check_worker_count(workers: Any, *, context: str = "") -> int:
    if isinstance(workers, bool) or not isinstance(workers, numbers.Integral):
        raise _fail(
            f"workers must be an integer, got {type(workers).__name__}", context
        )
    if workers < 1:
        raise _fail(f"workers must be >= 1, got {workers}", context)
    return int(workers)


def check_level(level: Any, *, context: str = "") -> float:
    try:
        value = float(level)
    except (TypeError, ValueError) as exc:
        raise _fail(f"level must be a number in (0, 1), got {level!r}", context) from exc
    if not 0.0 < value < 1.0:
        raise _fail(f"level must lie in (0, 1), got {value}", context)
    return value


def check_timeout(timeout: Any, *, context: str = "") -> float | None:
    if timeout is None:
        return None
    try:
        value = float(timeout)
    except (TypeError, ValueError) as exc:
        raise _fail(f"timeout must be a number of seconds, got {timeout!r}", context) from exc
    if not value > 0:
        raise _fail(f"timeout must be positive, got {value}", context)
    return value
