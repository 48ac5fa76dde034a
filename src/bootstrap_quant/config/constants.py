"""Constantes centrais utilizadas em múltiplos módulos.

Consolida valores padrão do bootstrap (número de reamostragens, nível de
confiança), parâmetros das estatísticas financeiras e os backends de
paralelismo suportados, evitando literais mágicos espalhados pelo projeto.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_CONFIDENCE_LEVEL",
    "DEFAULT_N_RESAMPLES",
    "DEFAULT_PARALLEL_BACKEND",
    "DEFAULT_RANDOM_SEED",
    "DEFAULT_TAIL_ALPHA",
    "SUPPORTED_BACKENDS",
    "TRADING_DAYS_IN_YEAR",
]


TRADING_DAYS_IN_YEAR: Final[int] = 252
"""Número típico de pregões em mercados globais."""

DEFAULT_N_RESAMPLES: Final[int] = 1000
DEFAULT_CONFIDENCE_LEVEL: Final[float] = 0.95
DEFAULT_RANDOM_SEED: Final[int] = 42

DEFAULT_TAIL_ALPHA: Final[float] = 0.05
"""Probabilidade de cauda usada por VaR/Expected Shortfall."""

SUPPORTED_BACKENDS: Final[tuple[str, ...]] = ("process", "thread", "joblib", "sequential")
DEFAULT_PARALLEL_BACKEND: Final[str] = "process"
