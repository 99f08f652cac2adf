"""Shared fixtures for compose tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def well_conditioned_matrix(rng):
    n = 6
    return rng.standard_normal((n, n)) + n * np.eye(n)
