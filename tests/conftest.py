"""Shared fixtures for rtweekend tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """A seeded generator so sampling-based tests are reproducible."""
    return np.random.default_rng(12345)
