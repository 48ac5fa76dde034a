from __future__ import annotations

import numpy as np
import pytest

from bootstrap_quant.engine import BootstrapResult
from bootstrap_quant.engine.summary import summarize


def test_summarize_uses_sample_standard_deviation():
    result = summarize([1.0, 2.0, 3.0, 4.0])

    assert result.mean == pytest.approx(2.5)
    assert result.standard_error == pytest.approx(np.std([1, 2, 3, 4], ddof=1))
    assert result.n_resamples == 4


def test_summarize_copies_its_input():
    source = np.array([1.0, 2.0, 3.0])
    result = summarize(source)

    source[0] = 100.0
    assert result.estimates[0] == 1.0
    assert not result.estimates.flags.writeable


def test_summarize_rejects_empty_collection():
    with pytest.raises(ValueError):
        summarize([])


def test_result_is_frozen():
    result = summarize([1.0, 2.0])

    with pytest.raises(AttributeError):
        result.mean = 0.0  # type: ignore[misc]


def test_to_dict_excludes_estimates_by_default():
    result = summarize([1.0, 3.0])

    assert result.to_dict() == {
        "mean": 2.0,
        "standard_error": pytest.approx(np.sqrt(2.0)),
        "n_resamples": 2,
    }
    assert result.to_dict(include_estimates=True)["estimates"] == [1.0, 3.0]


def test_to_dict_reports_single_resample_standard_error_as_none():
    result = summarize([1.5])

    assert np.isnan(result.standard_error)
    assert result.to_dict() == {"mean": 1.5, "standard_error": None, "n_resamples": 1}


def test_interval_shortcut_matches_percentile_interval():
    result = summarize(np.linspace(0.0, 1.0, 101))

    ci = result.interval(0.9)
    assert ci.lower == pytest.approx(0.05)
    assert ci.upper == pytest.approx(0.95)


def test_repr_hides_estimates():
    result = BootstrapResult(mean=1.0, standard_error=0.1, estimates=np.zeros(3))

    assert "estimates" not in repr(result)
