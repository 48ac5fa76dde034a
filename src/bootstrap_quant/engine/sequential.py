"""Single-path replication: the baseline bootstrap loop."""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from bootstrap_quant.utils.checks import as_sample, check_replicate_count
from bootstrap_quant.utils.seed import register_seed_logging, rng_factory
from bootstrap_quant.utils.timing import time_block

from .resampler import Statistic, evaluate_resample
from .summary import BootstrapResult, summarize

__all__ = ["replicate_estimates", "replicate"]

logger = logging.getLogger(__name__)


def replicate_estimates(
    sample: np.ndarray,
    statistic: Statistic,
    n_resamples: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Evaluate ``statistic`` on ``n_resamples`` independent resamples.

    ``sample`` must already be validated. Estimates are returned in
    invocation order; the first failing resample aborts the loop.
    """

    estimates = np.empty(n_resamples, dtype=float)
    for index in range(n_resamples):
        estimates[index] = evaluate_resample(sample, statistic, rng, resample_index=index)
    return estimates


def replicate(
    sample: Any,
    statistic: Statistic,
    n_resamples: int,
    *,
    seed: Optional[int] = None,
) -> BootstrapResult:
    """Sequential bootstrap of ``statistic`` over ``sample``.

    Parameters
    ----------
    sample : array-like
        1-D observations, or 2-D with one observation per row (paired
        columns are resampled together).
    statistic : callable
        Pure function mapping a resample to a real scalar.
    n_resamples : int
        Number of resamples B (>= 1).
    seed : int, optional
        Master seed; the same seed and inputs reproduce the same estimates.

    Raises
    ------
    InvalidInputError
        Empty/non-finite sample or B < 1.
    StatisticFailure
        The statistic failed on some resample; no result is produced.
    """

    data = as_sample(sample, context="replicate")
    n_resamples = check_replicate_count(n_resamples, context="replicate")

    logger.info(
        "Sequential bootstrap: n=%d, B=%d",
        data.shape[0],
        n_resamples,
        extra={"n_resamples": n_resamples, "backend": "sequential"},
    )
    register_seed_logging(logger, seed)
    with time_block("sequential replicate", logger=logger):
        estimates = replicate_estimates(data, statistic, n_resamples, rng_factory(seed))
    return summarize(estimates)
