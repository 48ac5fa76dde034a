from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from bootstrap_quant.engine import (
    InvalidInputError,
    StatisticFailure,
    interval,
    replicate,
)
from bootstrap_quant.engine.resampler import draw_resample, evaluate_resample
from bootstrap_quant.statistics import expected_shortfall, get_statistic, mean


def test_replicate_returns_one_estimate_per_resample(symmetric_sample):
    result = replicate(symmetric_sample, mean, 250, seed=1)

    assert result.n_resamples == 250
    assert result.estimates.shape == (250,)
    assert np.isfinite(result.estimates).all()


def test_small_sample_mean_scenario():
    result = replicate([1.0, 2.0, 3.0, 4.0, 5.0], np.mean, 1000, seed=42)

    assert 2.4 <= result.mean <= 3.6
    assert 0.4 < result.standard_error < 0.9
    ci = interval(result.estimates, 0.95)
    assert ci.lower < 3.0 < ci.upper


def test_bootstrap_mean_converges_to_sample_mean(symmetric_sample):
    result = replicate(symmetric_sample, mean, 20_000, seed=3)

    assert result.mean == pytest.approx(symmetric_sample.mean(), abs=0.01)
    expected_se = symmetric_sample.std(ddof=0) / np.sqrt(symmetric_sample.size)
    assert result.standard_error == pytest.approx(expected_se, rel=0.05)


def test_constant_sample_has_zero_standard_error():
    result = replicate(np.full(30, 7.0), mean, 200, seed=0)

    assert result.mean == pytest.approx(7.0)
    assert result.standard_error == pytest.approx(0.0, abs=1e-12)
    ci = result.interval(0.9)
    assert ci.lower == pytest.approx(7.0)
    assert ci.upper == pytest.approx(7.0)


def test_constant_statistic_yields_constant_estimates(symmetric_sample):
    result = replicate(symmetric_sample, lambda x: 7.0, 300, seed=4)

    assert np.all(result.estimates == 7.0)
    assert result.mean == 7.0
    assert result.standard_error == 0.0


def test_same_seed_reproduces_estimates(symmetric_sample):
    first = replicate(symmetric_sample, mean, 100, seed=99)
    second = replicate(symmetric_sample, mean, 100, seed=99)
    other = replicate(symmetric_sample, mean, 100, seed=100)

    np.testing.assert_array_equal(first.estimates, second.estimates)
    assert not np.array_equal(first.estimates, other.estimates)


def test_single_resample_reports_nan_standard_error(symmetric_sample):
    result = replicate(symmetric_sample, mean, 1, seed=5)

    assert result.n_resamples == 1
    assert np.isnan(result.standard_error)


def test_estimates_are_read_only(symmetric_sample):
    result = replicate(symmetric_sample, mean, 10, seed=5)

    with pytest.raises(ValueError):
        result.estimates[0] = 0.0


def test_paired_rows_are_resampled_together():
    paired = np.column_stack([np.arange(50.0), np.arange(50.0) * 10])

    def paired_ratio(resample):
        assert np.allclose(resample[:, 1], resample[:, 0] * 10)
        return float(resample[:, 0].mean())

    result = replicate(paired, paired_ratio, 50, seed=2)
    assert result.n_resamples == 50


def test_dataframe_input_is_accepted(daily_returns):
    frame = pd.DataFrame({"portfolio": daily_returns})

    result = replicate(frame["portfolio"], get_statistic("sharpe"), 50, seed=8)
    assert result.n_resamples == 50


@pytest.mark.parametrize("n_resamples", [0, -3, 2.5, True, "10"])
def test_invalid_replicate_count_is_rejected(symmetric_sample, n_resamples):
    with pytest.raises(InvalidInputError):
        replicate(symmetric_sample, mean, n_resamples)


@pytest.mark.parametrize("sample", [[], [1.0, np.nan], [1.0, np.inf], np.zeros((2, 2, 2))])
def test_invalid_sample_is_rejected(sample):
    with pytest.raises(InvalidInputError):
        replicate(sample, mean, 10)


def test_statistic_never_invoked_on_invalid_input():
    calls = []

    with pytest.raises(InvalidInputError):
        replicate([], lambda x: calls.append(x) or 0.0, 10)
    assert calls == []


def test_always_failing_statistic_raises_statistic_failure():
    with pytest.raises(StatisticFailure) as excinfo:
        replicate(np.full(20, 0.01), expected_shortfall, 10, seed=0)

    assert excinfo.value.resample_index == 0
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_failure_on_a_later_resample_aborts_run():
    calls = []

    def flaky(resample):
        calls.append(1)
        if len(calls) == 4:
            raise RuntimeError("boom")
        return float(resample.mean())

    with pytest.raises(StatisticFailure, match="boom") as excinfo:
        replicate(np.arange(10.0), flaky, 10, seed=0)
    assert excinfo.value.resample_index == 3
    assert len(calls) == 4


@pytest.mark.parametrize(
    "statistic",
    [lambda x: float("nan"), lambda x: np.inf, lambda x: x[:2], lambda x: "1.0"],
)
def test_non_finite_or_non_scalar_values_are_failures(statistic):
    with pytest.raises(StatisticFailure):
        replicate(np.arange(10.0), statistic, 3, seed=0)


def test_draw_resample_keeps_length_and_values():
    sample = np.array([1.0, 5.0, 9.0])
    resample = draw_resample(sample, np.random.default_rng(0))

    assert resample.shape == sample.shape
    assert set(resample).issubset(set(sample))


def test_evaluate_resample_accepts_numpy_scalars():
    value = evaluate_resample(
        np.arange(5.0), lambda x: np.float32(x.sum()), np.random.default_rng(0)
    )
    assert isinstance(value, float)
