"""Sample loading from CSV/Parquet/pickle files."""

from .loader import load_sample, read_dataframe

__all__ = ["load_sample", "read_dataframe"]
