"""Split a replicate count across workers."""

from __future__ import annotations

import joblib

from bootstrap_quant.utils.checks import check_replicate_count, check_worker_count

__all__ = ["partition_replicates", "default_worker_count"]


def default_worker_count() -> int:
    """Available parallelism minus one (left to the coordinator), at least 1."""

    return max(1, joblib.cpu_count() - 1)


def partition_replicates(n_resamples: int, n_workers: int) -> list[int]:
    """Balanced split of ``n_resamples`` into ``n_workers`` chunk sizes.

    Sizes differ by at most one and always sum to ``n_resamples``; the first
    ``n_resamples % n_workers`` chunks take the extra replicate. When there
    are fewer replicates than workers the trailing chunks are zero.

    >>> partition_replicates(10, 3)
    [4, 3, 3]
    """

    n_resamples = check_replicate_count(n_resamples, context="partition_replicates")
    n_workers = check_worker_count(n_workers, context="partition_replicates")
    base, remainder = divmod(n_resamples, n_workers)
    return [base + 1 if worker < remainder else base for worker in range(n_workers)]
