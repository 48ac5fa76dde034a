"""Bootstrap Quant Lab.

Non-parametric bootstrap engine for scalar statistics over a fixed sample,
with sequential and parallel replication, standard errors and confidence
intervals. Consumed mainly via:

- Library: ``from bootstrap_quant import replicate, replicate_parallel, interval``
- CLI: ``bootstrap-quant run --data returns.csv --statistic sharpe``
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .engine import (
    BootstrapError,
    BootstrapResult,
    ConfidenceInterval,
    InvalidInputError,
    ReplicationTimeout,
    StatisticFailure,
    WorkerFailure,
    interval,
    interval_analytic,
    replicate,
    replicate_parallel,
)

try:  # pragma: no cover - depende de instalação do pacote
    __version__ = version("bootstrap-quant-lab")
except PackageNotFoundError:  # pragma: no cover - fallback para ambiente sem install
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "BootstrapError",
    "BootstrapResult",
    "ConfidenceInterval",
    "InvalidInputError",
    "ReplicationTimeout",
    "StatisticFailure",
    "WorkerFailure",
    "interval",
    "interval_analytic",
    "replicate",
    "replicate_parallel",
]
