"""Shared fixtures for the einjax test suite."""

import jax
import numpy as np
import pytest

from einjax.core.index import IndexType
from einjax.core.storage import DIMENSION
from einjax.core.tensor import Tensor

UP = IndexType.UP
DOWN = IndexType.DOWN

# ------------------------------------------------------------------ #
# Random key fixtures                                                  #
# ------------------------------------------------------------------ #

@pytest.fixture
def rng():
    return jax.random.PRNGKey(42)


@pytest.fixture
def rng2():
    return jax.random.PRNGKey(99)


# ------------------------------------------------------------------ #
# Tensor fixtures                                                      #
# ------------------------------------------------------------------ #

@pytest.fixture
def mixed_matrix(rng):
    """Rank-2 tensor A^a_b with random components."""
    data = jax.random.normal(rng, (DIMENSION, DIMENSION))
    return Tensor.from_components((UP, DOWN), data)


@pytest.fixture
def up_vector():
    """u^a = (1, 2, 3, 4)."""
    return Tensor.from_components([UP], [1.0, 2.0, 3.0, 4.0])


@pytest.fixture
def down_vector():
    """v_a = (0.5, -1, 2, 0.25)."""
    return Tensor.from_components([DOWN], [0.5, -1.0, 2.0, 0.25])


@pytest.fixture
def christoffel():
    """Gamma^a_bc with components a + 2b - c + 1 (no symmetry assumed)."""
    values = np.fromfunction(
        lambda a, b, c: a + 2.0 * b - c + 1.0, (DIMENSION,) * 3
    )
    return Tensor.from_components((UP, DOWN, DOWN), values)
