from __future__ import annotations

import numpy as np
import pytest

from bootstrap_quant.config import reset_settings_cache


@pytest.fixture
def symmetric_sample() -> np.ndarray:
    """200 normal draws; the bootstrap distribution of their mean is near-symmetric."""

    return np.random.default_rng(2024).normal(loc=0.5, scale=2.0, size=200)


@pytest.fixture
def daily_returns() -> np.ndarray:
    return np.random.default_rng(11).normal(loc=0.0005, scale=0.01, size=500)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()
