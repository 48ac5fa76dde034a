"""Parallel replication across independent workers.

The replicate count is split into balanced chunks, each chunk runs the
sequential loop in its own worker with its own seed stream, and the chunk
results are concatenated in worker order. Workers share nothing mutable:
each receives a copy of the sample, the statistic and a ``SeedSequence``
spawned from the master seed, so no generator is ever accessed concurrently.

A run either returns all ``B`` estimates or raises; there is no partial
result. Statistic errors keep their class (:class:`StatisticFailure`);
anything else that takes a worker down becomes :class:`WorkerFailure`.
"""

from __future__ import annotations

import concurrent.futures
import logging
import multiprocessing
import pickle
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from bootstrap_quant.utils.checks import (
    as_sample,
    check_replicate_count,
    check_timeout,
    check_worker_count,
)
from bootstrap_quant.utils.parallel import BACKENDS, parallel_map
from bootstrap_quant.utils.seed import register_seed_logging, worker_seed_sequences
from bootstrap_quant.utils.timing import time_block

from .errors import (
    InvalidInputError,
    ReplicationTimeout,
    StatisticFailure,
    WorkerFailure,
)
from .partition import default_worker_count, partition_replicates
from .resampler import Statistic
from .sequential import replicate_estimates
from .summary import BootstrapResult, summarize

__all__ = ["ChunkTask", "run_chunk", "plan_chunks", "replicate_parallel"]

logger = logging.getLogger(__name__)

_TIMEOUT_ERRORS = (
    TimeoutError,
    concurrent.futures.TimeoutError,
    multiprocessing.TimeoutError,
)


@dataclass(frozen=True)
class ChunkTask:
    """Everything one worker needs; shipped by value to the worker."""

    worker_id: int
    n_resamples: int
    seed_sequence: np.random.SeedSequence
    sample: np.ndarray
    statistic: Statistic


def run_chunk(task: ChunkTask) -> np.ndarray:
    """Worker entry point: sequential loop over the chunk with its own stream."""

    rng = np.random.default_rng(task.seed_sequence)
    try:
        return replicate_estimates(task.sample, task.statistic, task.n_resamples, rng)
    except StatisticFailure as exc:
        exc.worker_id = task.worker_id
        raise


def plan_chunks(
    sample: np.ndarray,
    statistic: Statistic,
    n_resamples: int,
    workers: int,
    seed: Optional[int],
) -> list[ChunkTask]:
    """One task per non-empty chunk; worker ``i`` always gets seed child ``i``."""

    sizes = partition_replicates(n_resamples, workers)
    seeds = worker_seed_sequences(seed, workers)
    return [
        ChunkTask(
            worker_id=worker_id,
            n_resamples=size,
            seed_sequence=seed_sequence,
            sample=sample,
            statistic=statistic,
        )
        for worker_id, (size, seed_sequence) in enumerate(zip(sizes, seeds))
        if size > 0
    ]


def _ensure_picklable(statistic: Statistic) -> None:
    try:
        pickle.dumps(statistic)
    except (pickle.PicklingError, AttributeError, TypeError) as exc:
        raise InvalidInputError(
            "[replicate_parallel] statistic cannot be pickled for the 'process' "
            "backend; use a module-level function or functools.partial of one "
            f"({type(exc).__name__}: {exc})"
        ) from exc


def replicate_parallel(
    sample: Any,
    statistic: Statistic,
    n_resamples: int,
    *,
    workers: Optional[int] = None,
    seed: Optional[int] = None,
    backend: str = "process",
    timeout: Optional[float] = None,
) -> BootstrapResult:
    """Bootstrap ``statistic`` over ``sample`` using independent workers.

    Parameters
    ----------
    sample : array-like
        1-D observations, or 2-D with one observation per row.
    statistic : callable
        Pure function of a resample; must be picklable for ``backend="process"``.
    n_resamples : int
        Total number of resamples B; the result always holds exactly B.
    workers : int, optional
        Worker count; defaults to available parallelism minus one.
    seed : int, optional
        Master seed. Fixed seed and worker count reproduce the run; other
        worker counts give a different (equally valid) collection.
    backend : {"process", "thread", "joblib", "sequential"}
        Pool used to run the chunks.
    timeout : float, optional
        Deadline in seconds for the whole run. The process pool is torn down
        when it expires and joblib applies it per chunk. Threads cannot be
        interrupted, so with ``backend="thread"`` the
        :class:`ReplicationTimeout` is raised only after the chunks already
        running have finished.

    Raises
    ------
    InvalidInputError
        Bad sample, B, worker count, backend, timeout or unpicklable statistic.
    StatisticFailure
        The statistic failed in some worker.
    WorkerFailure
        A worker terminated abnormally; :class:`ReplicationTimeout` when the
        deadline expired.
    """

    data = as_sample(sample, context="replicate_parallel")
    n_resamples = check_replicate_count(n_resamples, context="replicate_parallel")
    if workers is None:
        workers = default_worker_count()
    workers = check_worker_count(workers, context="replicate_parallel")
    if backend not in BACKENDS:
        raise InvalidInputError(
            f"[replicate_parallel] unknown backend {backend!r}; expected one of {BACKENDS}"
        )
    timeout = check_timeout(timeout, context="replicate_parallel")
    if backend == "process":
        _ensure_picklable(statistic)

    tasks = plan_chunks(data, statistic, n_resamples, workers, seed)
    logger.info(
        "Parallel bootstrap: n=%d, B=%d, workers=%d, backend=%s, chunks=%s",
        data.shape[0],
        n_resamples,
        len(tasks),
        backend,
        [task.n_resamples for task in tasks],
        extra={"n_resamples": n_resamples, "workers": len(tasks), "backend": backend},
    )
    register_seed_logging(logger, seed)

    try:
        with time_block("parallel replicate", logger=logger):
            chunk_estimates = parallel_map(
                run_chunk,
                tasks,
                backend=backend,
                max_workers=len(tasks),
                timeout=timeout,
            )
    except StatisticFailure:
        raise
    except _TIMEOUT_ERRORS as exc:
        raise ReplicationTimeout(
            f"parallel bootstrap exceeded the {timeout}s deadline"
        ) from exc
    except BrokenProcessPool as exc:
        raise WorkerFailure(f"worker process terminated abruptly: {exc}") from exc
    except SystemExit as exc:
        if backend == "sequential":
            raise
        raise WorkerFailure(f"worker exited with status {exc.code}") from exc
    except Exception as exc:
        raise WorkerFailure(
            f"worker failed with {type(exc).__name__}: {exc}"
        ) from exc

    estimates = np.concatenate(chunk_estimates)
    if estimates.size != n_resamples:
        raise WorkerFailure(
            f"workers returned {estimates.size} estimates, expected {n_resamples}"
        )
    return summarize(estimates)
