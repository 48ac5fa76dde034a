"""Parallel execution helpers.

``parallel_map`` abstracts over ``ThreadPoolExecutor``, ``ProcessPoolExecutor``
and joblib with map-like semantics and all-or-nothing failure handling:

- results come back in input order;
- the first task that raises aborts the whole job: pending tasks are
  cancelled, live worker processes are terminated and the worker's exception
  propagates unchanged;
- the pool is created per call and torn down on every exit path, so repeated
  invocations never leak worker processes;
- an optional ``timeout`` (seconds, whole job) raises ``TimeoutError``.

Backends: ``process`` (default), ``thread``, ``joblib`` (loky) and
``sequential`` (in-process loop, handy for debugging).
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import (
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from typing import Any, Callable, Iterable, List, Optional

from joblib import Parallel, delayed

from bootstrap_quant.config.constants import SUPPORTED_BACKENDS as BACKENDS

__all__ = ["BACKENDS", "parallel_map", "terminate_workers"]

logger = logging.getLogger(__name__)

_EXECUTORS: dict[str, type[Executor]] = {
    "thread": ThreadPoolExecutor,
    "process": ProcessPoolExecutor,
}


def terminate_workers(executor: Executor) -> None:
    """Kill the live processes of a ``ProcessPoolExecutor``.

    Threads cannot be interrupted; for a ``ThreadPoolExecutor`` this is a
    no-op and running tasks are left to finish.
    """

    if not isinstance(executor, ProcessPoolExecutor):
        return
    native = getattr(executor, "terminate_workers", None)
    if callable(native):  # Python >= 3.14
        native()
        return
    processes = getattr(executor, "_processes", None) or {}
    for process in list(processes.values()):
        if process.is_alive():
            process.terminate()


def _abort(executor: Executor, futures: Iterable[Future]) -> None:
    for future in futures:
        future.cancel()
    terminate_workers(executor)
    executor.shutdown(wait=True, cancel_futures=True)


def _run_executor(
    func: Callable[[Any], Any],
    items: List[Any],
    backend: str,
    max_workers: Optional[int],
    timeout: Optional[float],
) -> List[Any]:
    executor = _EXECUTORS[backend](max_workers=max_workers)
    future_to_pos: dict[Future, int] = {}
    try:
        # submit em vez de map para controle fino sobre exceções e timeouts
        for pos, item in enumerate(items):
            future_to_pos[executor.submit(func, item)] = pos
        results: List[Any] = [None] * len(items)
        for future in as_completed(future_to_pos, timeout=timeout):
            results[future_to_pos[future]] = future.result()
    except BaseException as exc:
        logger.error(
            "Aborting parallel job after %s: %s; tearing down %s pool",
            type(exc).__name__,
            exc,
            backend,
        )
        _abort(executor, future_to_pos)
        raise
    executor.shutdown(wait=True)
    return results


def parallel_map(
    func: Callable[[Any], Any],
    iterable: Iterable[Any],
    backend: str = "process",
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None,
) -> List[Any]:
    """
    Map ``func`` over ``iterable`` in parallel, failing fast.

    Args:
        func (Callable): Função aplicada a cada item. Precisa ser picklable
                         para o backend ``process``.
        iterable (Iterable): Itens a processar.
        backend (str): 'process' (padrão), 'thread', 'joblib' ou 'sequential'.
        max_workers (Optional[int]): Número máximo de workers.
        timeout (Optional[float]): Prazo, em segundos, para o job inteiro.
                                   No backend ``thread`` as tarefas em curso
                                   não são interrompidas: o ``TimeoutError``
                                   só sai depois que elas terminam.

    Returns:
        List[Any]: Resultados na mesma ordem do iterável de entrada.

    Raises:
        TimeoutError: Se o job exceder ``timeout``.
        Exception: A primeira exceção levantada por um worker, inalterada.
    """
    if backend not in BACKENDS:
        raise ValueError(
            f"Backend '{backend}' não reconhecido. Use {', '.join(repr(b) for b in BACKENDS)}."
        )

    items = list(iterable)
    job_name = getattr(func, "__name__", "anonymous_job")
    logger.debug(
        "Iniciando job paralelo '%s' com backend '%s' (%d tarefas, max_workers=%s)",
        job_name,
        backend,
        len(items),
        max_workers,
    )
    start_time = time.perf_counter()

    if backend == "sequential":
        results = [func(item) for item in items]
    elif backend == "joblib":
        # loky: processos robustos com cloudpickle; aborta workers em falha/timeout
        runner = Parallel(n_jobs=max_workers or -1, backend="loky", timeout=timeout)
        results = runner(delayed(func)(item) for item in items)
    else:
        results = _run_executor(func, items, backend, max_workers, timeout)

    logger.debug(
        "Job '%s' concluído em %.2fs.", job_name, time.perf_counter() - start_time
    )
    return results
