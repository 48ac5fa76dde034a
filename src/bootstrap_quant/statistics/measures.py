"""Risk/return statistics consumed by the bootstrap engine.

Every function here is pure, takes a numpy array and returns a float, so it
can be shipped to worker processes as-is (or wrapped in ``functools.partial``).
A 2-D input is a paired sample: column 0 holds returns and column 1, when
present, the matching risk-free rate.
"""

from __future__ import annotations

import numpy as np

from bootstrap_quant.config.constants import DEFAULT_TAIL_ALPHA, TRADING_DAYS_IN_YEAR

__all__ = [
    "DegenerateSampleError",
    "EmptyTailError",
    "mean",
    "sharpe_ratio",
    "value_at_risk",
    "expected_shortfall",
    "mean_standard_error",
    "sharpe_standard_error",
]

SMALL_EPS = 1e-12


class DegenerateSampleError(ValueError):
    """The statistic is undefined on this sample (e.g. zero volatility)."""


class EmptyTailError(DegenerateSampleError):
    """No observation lies strictly below the tail quantile."""


def _returns(x: np.ndarray) -> np.ndarray:
    array = np.asarray(x, dtype=float)
    if array.ndim == 2:
        return array[:, 0]
    return array.reshape(-1)


def _excess_returns(x: np.ndarray) -> np.ndarray:
    array = np.asarray(x, dtype=float)
    if array.ndim == 2 and array.shape[1] > 1:
        return array[:, 0] - array[:, 1]
    return _returns(array)


def _check_alpha(alpha: float) -> float:
    alpha = float(alpha)
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must lie in (0, 1), got {alpha}")
    return alpha


def mean(x: np.ndarray) -> float:
    return float(np.mean(_returns(x)))


def sharpe_ratio(x: np.ndarray, periods_per_year: float = TRADING_DAYS_IN_YEAR) -> float:
    """Annualised Sharpe ratio of (excess) returns, sample volatility (ddof=1)."""

    excess = _excess_returns(x)
    if excess.size < 2:
        raise DegenerateSampleError("Sharpe ratio needs at least two observations")
    vol = float(np.std(excess, ddof=1))
    scale = max(1.0, float(np.max(np.abs(excess))))
    if vol <= SMALL_EPS * scale:
        raise DegenerateSampleError("Sharpe ratio undefined: zero volatility")
    return float(np.mean(excess) / vol * np.sqrt(periods_per_year))


def value_at_risk(x: np.ndarray, alpha: float = DEFAULT_TAIL_ALPHA) -> float:
    """Historical VaR as a positive loss: minus the ``alpha``-quantile of returns."""

    alpha = _check_alpha(alpha)
    returns = _returns(x)
    return float(-np.quantile(returns, alpha, method="linear"))


def expected_shortfall(x: np.ndarray, alpha: float = DEFAULT_TAIL_ALPHA) -> float:
    """Mean loss of the returns strictly below the ``alpha``-quantile.

    Small samples (or resamples repeating their minimum) can leave the tail
    empty; that raises :class:`EmptyTailError` instead of dividing by zero.
    """

    alpha = _check_alpha(alpha)
    returns = _returns(x)
    cutoff = np.quantile(returns, alpha, method="linear")
    tail = returns[returns < cutoff]
    if tail.size == 0:
        raise EmptyTailError(
            f"no observation below the {alpha:.2%} quantile ({cutoff:.6g}) out of {returns.size}"
        )
    return float(-tail.mean())


def mean_standard_error(x: np.ndarray) -> float:
    """Closed-form standard error of the mean, ``s / sqrt(n)``."""

    returns = _returns(x)
    if returns.size < 2:
        raise DegenerateSampleError("standard error needs at least two observations")
    return float(np.std(returns, ddof=1) / np.sqrt(returns.size))


def sharpe_standard_error(
    sharpe: float, n_obs: int, periods_per_year: float = TRADING_DAYS_IN_YEAR
) -> float:
    """Asymptotic standard error of an annualised Sharpe ratio under i.i.d. returns.

    Lo (2002): ``sqrt((1 + SR**2 / 2) / n)`` on the per-period ratio, scaled
    back by ``sqrt(periods_per_year)``.
    """

    if n_obs < 2:
        raise DegenerateSampleError("standard error needs at least two observations")
    per_period = float(sharpe) / np.sqrt(periods_per_year)
    se = np.sqrt((1.0 + 0.5 * per_period**2) / n_obs)
    return float(se * np.sqrt(periods_per_year))
