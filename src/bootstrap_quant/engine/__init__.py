"""Resampling/replication engine.

Public entry points:

- ``replicate(sample, statistic, n_resamples, seed=None)``
- ``replicate_parallel(sample, statistic, n_resamples, workers=None, ...)``
- ``interval(estimates, level)`` / ``interval_analytic(estimate, se, level)``
"""

from .errors import (
    BootstrapError,
    InvalidInputError,
    ReplicationTimeout,
    StatisticFailure,
    WorkerFailure,
)
from .intervals import ConfidenceInterval, interval, interval_analytic
from .parallel import replicate_parallel
from .partition import default_worker_count, partition_replicates
from .resampler import draw_resample, evaluate_resample, resample_indices
from .sequential import replicate, replicate_estimates
from .summary import BootstrapResult, summarize

__all__ = [
    "BootstrapError",
    "InvalidInputError",
    "ReplicationTimeout",
    "StatisticFailure",
    "WorkerFailure",
    "ConfidenceInterval",
    "interval",
    "interval_analytic",
    "replicate_parallel",
    "default_worker_count",
    "partition_replicates",
    "draw_resample",
    "evaluate_resample",
    "resample_indices",
    "replicate",
    "replicate_estimates",
    "BootstrapResult",
    "summarize",
]
