"""Commonly used constant tensors."""

from __future__ import annotations

import jax.numpy as jnp

from einjax.core.index import IndexType
from einjax.core.storage import DIMENSION
from einjax.core.tensor import Tensor


def kronecker_delta() -> Tensor:
    """The identity map delta^a_b: types (UP, DOWN), identity components."""
    return Tensor.from_components(
        (IndexType.UP, IndexType.DOWN), jnp.eye(DIMENSION, dtype=jnp.float64)
    )


def minkowski_metric(signature: int = -1, contravariant: bool = False) -> Tensor:
    """Flat spacetime metric diag(signature, 1, ..., 1).

    Args:
        signature:     Sign of the time-time component, -1 for (-,+,+,+)
                       or +1 for a Euclidean metric.
        contravariant: Return eta^ab (UP, UP) instead of eta_ab (DOWN, DOWN).
                       The diagonal is its own inverse, so the components
                       are the same.

    Raises:
        ValueError: If *signature* is not +1 or -1.
    """
    if signature not in (-1, 1):
        raise ValueError(f"signature must be +1 or -1, got {signature}")
    index_type = IndexType.UP if contravariant else IndexType.DOWN
    diagonal = jnp.ones(DIMENSION, dtype=jnp.float64).at[0].set(float(signature))
    return Tensor.from_components((index_type, index_type), jnp.diag(diagonal))
