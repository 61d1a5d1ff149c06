'''
Pytest configuration and fixtures for the symvec test suite.

Provides seeded random generators, symmetric and positive definite test
matrices, and an autouse fixture that restores the default configuration
after every test.
'''

from typing import Callable

import numpy as np
import pytest

from symvec.core.config import get_config_manager


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def random_symmetric(rng: np.random.Generator) -> Callable[[int], np.ndarray]:
    """Factory for random symmetric n×n matrices."""
    def _make(n: int) -> np.ndarray:
        A = rng.standard_normal((n, n))
        return (A + A.T) / 2
    return _make


@pytest.fixture
def random_spd(rng: np.random.Generator) -> Callable[[int], np.ndarray]:
    """Factory for random well-conditioned symmetric positive definite matrices."""
    def _make(n: int) -> np.ndarray:
        A = rng.standard_normal((n, n))
        return A @ A.T + n * np.eye(n)
    return _make


@pytest.fixture
def singular_matrix() -> np.ndarray:
    """A 3×3 symmetric matrix of rank 2."""
    return np.array([
        [2.0, 1.0, 3.0],
        [1.0, 1.0, 2.0],
        [3.0, 2.0, 5.0]
    ])


@pytest.fixture(autouse=True)
def reset_configuration():
    """Restore default configuration after each test."""
    yield
    get_config_manager().reset()
