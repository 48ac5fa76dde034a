"""Pydantic schemas for run configuration.

A bootstrap run is described by a YAML file that validates against
:class:`BootstrapConfig`:

.. code-block:: yaml

    name: sharpe_daily
    data:
      path: data/returns.csv
      column: portfolio
      rf_column: rf
    statistic:
      name: sharpe
      params: {periods_per_year: 252}
    n_resamples: 5000
    level: 0.95
    seed: 7
    workers: 3
    backend: process
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_N_RESAMPLES,
    DEFAULT_PARALLEL_BACKEND,
)

__all__ = ["DataSourceConfig", "StatisticConfig", "BootstrapConfig"]

StatisticName = Literal["mean", "sharpe", "var", "es"]
BackendName = Literal["process", "thread", "joblib", "sequential"]


class DataSourceConfig(BaseModel):
    """Where the sample comes from.

    Attributes
    ----------
    path : str
        CSV/Parquet/pickle file with one observation per row
    column : Optional[str]
        Column holding the observations; the single column when omitted
    rf_column : Optional[str]
        Paired risk-free column, resampled together with ``column``
    """

    path: str = Field(min_length=1, description="Path to the data file")
    column: str | None = Field(default=None, description="Observation column")
    rf_column: str | None = Field(default=None, description="Paired risk-free column")


class StatisticConfig(BaseModel):
    """Statistic to bootstrap and its keyword parameters."""

    name: StatisticName = Field(default="mean", description="Registered statistic")
    params: dict[str, float] = Field(
        default_factory=dict, description="Keyword arguments for the statistic"
    )

    @field_validator("name", mode="before")
    @classmethod
    def normalise_name(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class BootstrapConfig(BaseModel):
    """Full bootstrap run configuration.

    Attributes
    ----------
    n_resamples : int
        Number of resamples B (>= 1)
    level : float
        Confidence level in (0, 1)
    seed : Optional[int]
        Master seed; ``None`` uses fresh entropy
    parallel : bool
        Run through the parallel replicator
    workers : Optional[int]
        Worker count; ``None`` means available parallelism minus one
    timeout : Optional[float]
        Deadline in seconds for parallel runs
    analytic : bool
        Also report the closed-form normal interval when available
    """

    name: str = Field(default="bootstrap", description="Run identifier")
    data: DataSourceConfig | None = Field(default=None, description="Sample source")
    statistic: StatisticConfig = Field(default_factory=StatisticConfig)
    n_resamples: int = Field(default=DEFAULT_N_RESAMPLES, ge=1)
    level: float = Field(default=DEFAULT_CONFIDENCE_LEVEL, gt=0, lt=1)
    seed: int | None = Field(default=None)
    parallel: bool = Field(default=True)
    workers: int | None = Field(default=None, ge=1)
    backend: BackendName = Field(default=DEFAULT_PARALLEL_BACKEND)
    timeout: float | None = Field(default=None, gt=0)
    analytic: bool = Field(default=False)

    @field_validator("backend", mode="before")
    @classmethod
    def normalise_backend(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v
