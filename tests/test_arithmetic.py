"""Tests for scalar, additive and multiplicative tensor arithmetic."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from einjax.core.errors import IndexTypeMismatchError
from einjax.core.index import IndexType
from einjax.core.storage import DIMENSION
from einjax.core.tensor import Tensor

UP = IndexType.UP
DOWN = IndexType.DOWN


@pytest.fixture
def pair(rng, rng2):
    """Two random (UP, DOWN) tensors."""
    a = Tensor.from_components((UP, DOWN), jax.random.normal(rng, (DIMENSION,) * 2))
    b = Tensor.from_components((UP, DOWN), jax.random.normal(rng2, (DIMENSION,) * 2))
    return a, b


class TestScalarMultiplication:
    def test_scales_every_component(self, mixed_matrix):
        result = mixed_matrix * 2.5
        np.testing.assert_allclose(result.todense(), 2.5 * mixed_matrix.todense())

    def test_commutative(self, mixed_matrix):
        assert (3.0 * mixed_matrix).allclose(mixed_matrix * 3.0)

    def test_linear(self, mixed_matrix):
        assert ((mixed_matrix * 2.0) * -1.5).allclose(mixed_matrix * (2.0 * -1.5))

    def test_keeps_types_and_labels(self):
        t = Tensor.from_string("^a_b") * 2
        assert t.types == (UP, DOWN)
        assert t.labels() == ("a", "b")

    def test_in_place(self, mixed_matrix):
        before = np.asarray(mixed_matrix.todense())
        alias = mixed_matrix
        mixed_matrix *= 4.0
        assert mixed_matrix is alias
        np.testing.assert_allclose(mixed_matrix.todense(), 4.0 * before)

    def test_numpy_and_jax_scalars(self, mixed_matrix):
        assert (mixed_matrix * np.float64(2.0)).allclose(mixed_matrix * 2.0)
        assert (mixed_matrix * jnp.asarray(2.0)).allclose(mixed_matrix * 2.0)

    def test_division(self, mixed_matrix):
        assert (mixed_matrix / 4.0).allclose(mixed_matrix * 0.25)

    def test_negation(self, mixed_matrix):
        assert (-mixed_matrix).allclose(mixed_matrix * -1)

    def test_unsupported_operand(self, mixed_matrix):
        with pytest.raises(TypeError):
            mixed_matrix * "x"


class TestAddition:
    def test_componentwise(self, pair):
        a, b = pair
        np.testing.assert_allclose((a + b).todense(), a.todense() + b.todense())

    def test_commutative(self, pair):
        a, b = pair
        assert (a + b).allclose(b + a)

    def test_associative(self, pair, mixed_matrix):
        a, b = pair
        c = mixed_matrix
        assert ((a + b) + c).allclose(a + (b + c))

    def test_left_labels_preserved(self, pair):
        a, b = pair
        result = a["ab"] + b["cd"]
        assert result.labels() == ("a", "b")

    def test_rank_mismatch_raises(self, mixed_matrix, up_vector):
        with pytest.raises(IndexTypeMismatchError, match="rank and types"):
            mixed_matrix + up_vector

    def test_type_order_mismatch_raises(self, mixed_matrix):
        swapped = Tensor(2, [DOWN, UP])
        with pytest.raises(IndexTypeMismatchError):
            mixed_matrix + swapped

    def test_mismatch_is_value_error(self, mixed_matrix):
        with pytest.raises(ValueError):
            mixed_matrix + Tensor(2, [UP, UP])

    def test_in_place(self, pair):
        a, b = pair
        expected = np.asarray(a.todense()) + np.asarray(b.todense())
        a += b
        np.testing.assert_allclose(a.todense(), expected)

    def test_in_place_mismatch_raises(self, mixed_matrix):
        with pytest.raises(IndexTypeMismatchError):
            mixed_matrix += Tensor(2, [DOWN, DOWN])

    def test_scalar_addend_unsupported(self, mixed_matrix):
        with pytest.raises(TypeError):
            mixed_matrix + 1.0


class TestSubtraction:
    def test_self_difference_is_zero(self, mixed_matrix):
        np.testing.assert_allclose((mixed_matrix - mixed_matrix).get_components(), 0.0)

    def test_componentwise(self, pair):
        a, b = pair
        np.testing.assert_allclose((a - b).todense(), a.todense() - b.todense())

    def test_mismatch_raises(self, mixed_matrix):
        with pytest.raises(IndexTypeMismatchError):
            mixed_matrix - Tensor(2, [DOWN, DOWN])

    def test_in_place(self, pair):
        a, b = pair
        expected = np.asarray(a.todense()) - np.asarray(b.todense())
        a -= b
        np.testing.assert_allclose(a.todense(), expected)


class TestTensorMultiplication:
    def test_inner_product_is_scalar(self, up_vector, down_vector):
        result = up_vector["a"] * down_vector["a"]
        assert result.rank == 0
        expected = sum(
            up_vector.get_component((i,)) * down_vector.get_component((i,))
            for i in range(DIMENSION)
        )
        np.testing.assert_allclose(float(result), expected, rtol=1e-12)

    def test_outer_product_rank(self, up_vector, down_vector):
        result = up_vector * down_vector
        assert result.rank == 2
        assert result.types == (UP, DOWN)
        np.testing.assert_allclose(
            result.todense(),
            np.outer(np.asarray(up_vector.todense()), np.asarray(down_vector.todense())),
        )

    def test_labels_concatenate(self, up_vector, mixed_matrix):
        result = up_vector["a"] * mixed_matrix["bc"]
        assert result.labels() == ("a", "b", "c")

    def test_contraction_within_operand(self, mixed_matrix, up_vector):
        t = Tensor.from_components((UP, DOWN), mixed_matrix.todense())
        t.name_indices("aa")
        result = t * up_vector["b"]
        expected = np.trace(np.asarray(mixed_matrix.todense())) * np.asarray(
            up_vector.todense()
        )
        assert result.labels() == ("b",)
        np.testing.assert_allclose(result.todense(), expected, rtol=1e-12)

    def test_in_place_multiply_rebinds(self, up_vector, down_vector):
        u = up_vector["a"]
        u *= down_vector["a"]
        assert u.rank == 0

    def test_scalar_times_product(self, up_vector, down_vector):
        result = -2.0 * (up_vector["a"] * down_vector["a"])
        expected = -2.0 * float(up_vector["a"] * down_vector["a"])
        np.testing.assert_allclose(float(result), expected)
