"""Distribution plot of bootstrap estimates.

Returns the Matplotlib ``Axes`` so callers can compose and save figures.
"""

from __future__ import annotations

from collections.abc import Iterable

import matplotlib.pyplot as plt

from bootstrap_quant.engine.intervals import ConfidenceInterval
from bootstrap_quant.engine.summary import BootstrapResult

__all__ = ["plot_distribution"]

_LINESTYLES = {"percentile": "--", "analytic": ":"}


def plot_distribution(
    result: BootstrapResult,
    intervals: Iterable[ConfidenceInterval] = (),
    *,
    ax: plt.Axes | None = None,
    bins: int | str = "auto",
    title: str | None = None,
) -> plt.Axes:
    """Histogram of the estimates with the bootstrap mean and interval bounds."""

    if ax is None:
        _, ax = plt.subplots(figsize=(8, 4.5))

    ax.hist(result.estimates, bins=bins, color="#4C72B0", alpha=0.75, edgecolor="white")
    ax.axvline(result.mean, color="black", linewidth=1.5, label=f"mean = {result.mean:.4g}")

    for ci in intervals:
        style = _LINESTYLES.get(ci.method, "-.")
        label = f"{ci.method} {ci.level:.0%} CI"
        ax.axvline(ci.lower, color="#C44E52", linestyle=style, label=label)
        ax.axvline(ci.upper, color="#C44E52", linestyle=style)

    ax.set_xlabel("estimate")
    ax.set_ylabel("frequency")
    ax.set_title(title or f"Bootstrap distribution (B = {result.n_resamples})")
    ax.legend(loc="best", fontsize="small")
    return ax
