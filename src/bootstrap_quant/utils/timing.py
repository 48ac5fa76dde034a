"""Timing helpers for replication runs.

- ``time_block(name, logger=None, collect_metrics=None)`` logs the wall-clock
  duration of a block with ``time.perf_counter()``;
- ``Timer`` is a reusable start/stop stopwatch.

Set ``TIMING_ENABLED = False`` to turn both into no-ops.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

__all__ = ["TIMING_ENABLED", "time_block", "Timer"]

# Flag para desativar todos os timers, útil para produção.
TIMING_ENABLED = True

default_logger = logging.getLogger(__name__)


@contextmanager
def time_block(
    name: str,
    logger: Optional[logging.Logger] = None,
    collect_metrics: Optional[Dict[str, float]] = None,
) -> Iterator[None]:
    """
    Context manager para medir e registrar o tempo de execução de um bloco.

    Args:
        name (str): Nome descritivo do bloco medido.
        logger (Optional[logging.Logger]): Logger a ser usado. Se None, usa o logger do módulo.
        collect_metrics (Optional[Dict]): Dicionário que recebe a duração sob a chave
                                          ``timing.<name>``.
    """
    if not TIMING_ENABLED:
        yield
        return

    log = logger or default_logger
    start_time = time.perf_counter()

    try:
        yield
    finally:
        duration = time.perf_counter() - start_time
        log.info("Block '%s' executed in %.4fs", name, duration)
        if collect_metrics is not None:
            metric_name = f"timing.{name.replace(' ', '_').lower()}"
            collect_metrics[metric_name] = duration


class Timer:
    """Reusable stopwatch, handy inside loops."""

    def __init__(self) -> None:
        self._start_time: Optional[float] = None
        self._stop_time: Optional[float] = None

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._stop_time = None
        return self

    def stop(self) -> float:
        if self._start_time is None:
            raise RuntimeError("Timer não foi iniciado. Chame start() primeiro.")
        self._stop_time = time.perf_counter()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Seconds between start and stop, or since start while running."""
        if self._start_time is None:
            return 0.0
        if self._stop_time is None:
            return time.perf_counter() - self._start_time
        return self._stop_time - self._start_time

    def __repr__(self) -> str:
        status = "running" if self._stop_time is None else "stopped"
        return f"<Timer status={status} elapsed={self.elapsed:.4f}s>"
