"""Deterministic seed management.

Centralises how random generators are built so that a bootstrap run is
reproducible from a single master seed:

- ``rng_factory(seed)`` returns an isolated ``numpy.random.Generator``;
- ``worker_seed_sequences(seed, n)`` derives one independent stream per
  worker from the master seed and the worker index;
- ``register_seed_logging(logger, seed)`` records the seed for audit.

The global ``np.random`` state is never touched.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

__all__ = [
    "MAX_SEED_VALUE",
    "normalize_seed",
    "rng_factory",
    "worker_seed_sequences",
    "spawn_generators",
    "register_seed_logging",
]

# Constante para normalização da seed
MAX_SEED_VALUE = 2**32


def normalize_seed(seed: Optional[int]) -> Optional[int]:
    """Map any integer seed to ``[0, 2**32 - 1]``; ``None`` stays ``None``."""

    if seed is None:
        return None
    return abs(int(seed)) % MAX_SEED_VALUE


def rng_factory(seed: Optional[int] = None) -> np.random.Generator:
    """
    Cria um gerador isolado (PCG64) que não afeta o estado global `np.random`.

    Args:
        seed (Optional[int]): A seed para o gerador. Se None, a inicialização
                              será não-determinística.
    """
    return np.random.default_rng(normalize_seed(seed))


def worker_seed_sequences(seed: Optional[int], n_workers: int) -> list[np.random.SeedSequence]:
    """Spawn ``n_workers`` statistically independent seed sequences.

    Child ``i`` is ``SeedSequence(seed, spawn_key=(i,))``, so the stream of a
    given worker depends only on the master seed and its index. With
    ``seed=None`` fresh OS entropy is drawn once and shared as the root.
    """

    if n_workers < 1:
        raise ValueError("n_workers must be at least 1")
    root = np.random.SeedSequence(normalize_seed(seed))
    return root.spawn(n_workers)


def spawn_generators(seed: Optional[int], n_workers: int) -> list[np.random.Generator]:
    return [np.random.default_rng(child) for child in worker_seed_sequences(seed, n_workers)]


def register_seed_logging(logger: logging.Logger, seed: Optional[int]) -> None:
    """Loga a seed utilizada para fins de auditoria e reprodutibilidade."""
    if seed is None:
        logger.info("Execução sem seed fixa (entropia do sistema)")
    else:
        logger.info("Execução utilizando a seed: %s", normalize_seed(seed))
