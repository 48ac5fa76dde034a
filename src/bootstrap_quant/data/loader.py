"""Lightweight helpers to load a bootstrap sample from tabular files."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from bootstrap_quant.engine.errors import InvalidInputError

__all__ = ["read_dataframe", "load_sample"]

logger = logging.getLogger(__name__)


def read_dataframe(path: Path) -> pd.DataFrame:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in {".parquet", ".pq"}:
        frame = pd.read_parquet(path)
    elif suffix in {".csv"}:
        frame = pd.read_csv(path, index_col=0, parse_dates=True)
    elif suffix in {".pkl", ".pickle"}:
        frame = pd.read_pickle(path)
    else:
        raise InvalidInputError(f"Unsupported data format for {path}")
    if isinstance(frame, pd.Series):
        frame = frame.to_frame()
    return frame


def _pick_column(frame: pd.DataFrame, column: str | None, path: Path) -> str:
    if column is not None:
        if column not in frame.columns:
            raise InvalidInputError(
                f"Column '{column}' not found in {path}; available: {list(frame.columns)}"
            )
        return column
    if frame.shape[1] == 1:
        return frame.columns[0]
    raise InvalidInputError(
        f"{path} has {frame.shape[1]} columns; choose one with column=..."
    )


def load_sample(
    path: Path | str,
    *,
    column: str | None = None,
    rf_column: str | None = None,
) -> np.ndarray:
    """Load observations (and optionally a paired risk-free column) as floats.

    Returns a 1-D array, or an ``(n, 2)`` array ``[returns, rf]`` when
    ``rf_column`` is given. Rows with any missing value are dropped.
    """

    path = Path(path)
    frame = read_dataframe(path)
    if frame.empty:
        raise InvalidInputError(f"Data file {path} is empty")

    columns = [_pick_column(frame, column, path)]
    if rf_column is not None:
        columns.append(_pick_column(frame, rf_column, path))

    selected = frame[columns].apply(pd.to_numeric, errors="coerce")
    cleaned = selected.replace([np.inf, -np.inf], np.nan).dropna(how="any")
    dropped = len(selected) - len(cleaned)
    if dropped:
        logger.warning("Dropped %d incomplete row(s) from %s", dropped, path)
    if cleaned.empty:
        raise InvalidInputError(f"No complete observations left in {path}")

    values = cleaned.to_numpy(dtype=float)
    if rf_column is None:
        return values[:, 0]
    return values
