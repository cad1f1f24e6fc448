"""The Tensor class: components at a point plus index algebra.

A Tensor holds the components of a rank-r tensor at a single point of a
``DIMENSION``-dimensional manifold, together with per-axis metadata
(variance and abstract label). Components are kept in one JAX array of
shape ``(DIMENSION,) * rank`` whose row-major flattening is the flat
storage order exposed by get_components().

Abstract labels drive Einstein summation::

    >>> gamma = Tensor.from_string("^a_b_c")
    >>> u = Tensor(1, [IndexType.UP])
    >>> accel = gamma["abc"] * u["b"] * u["c"]   # rank 1, type ^a

Labels are attached in two explicit ways:

- ``t.name_indices("ab")`` relabels *t* in place and returns None.
- ``t["ab"]`` / ``t.indexed("ab")`` returns a labeled copy for use in an
  expression; *t* itself is untouched.

Tensor is registered as a JAX pytree node (leaves: the component array;
aux data: the indices), so it can be passed through jax.jit and jax.vmap.
"""

from __future__ import annotations

import numbers
import operator
from collections.abc import Sequence
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from einjax.contraction.contractor import (
    contract_pair,
    contract_pending,
    find_pending_pair,
    multiply,
)
from einjax.core.errors import IndexTypeMismatchError
from einjax.core.index import (
    IndexType,
    Label,
    TensorIndex,
    format_index_string,
    make_indices,
    parse_index_string,
)
from einjax.core.storage import DIMENSION, flat_index, multi_index, num_components

# Tolerance used by Tensor.allclose
ATOL = 1e-12


def _is_scalar(value: Any) -> bool:
    if isinstance(value, numbers.Real):
        return True
    return isinstance(value, jax.Array) and value.ndim == 0


def _coerce_components(values: Any, rank: int) -> jax.Array:
    """Accept flat (storage order) or fully shaped component values."""
    shape = (DIMENSION,) * rank
    data = jnp.asarray(values, dtype=jnp.float64)
    if data.shape not in ((num_components(rank),), shape):
        raise ValueError(
            f"Expected {num_components(rank)} components (flat) or shape "
            f"{shape} for a rank-{rank} tensor, got shape {data.shape}"
        )
    return data.reshape(shape)


@jax.tree_util.register_pytree_node_class
class Tensor:
    """Dense tensor of fixed dimension with abstract index labels.

    Args:
        rank:   Number of axes.
        types:  Variance of each axis (IndexType, or +1 / -1).
        labels: Optional initial labels, one per axis (a string such as
                ``"abc"`` or a sequence). Defaults to all unnamed.

    Raises:
        ValueError: If rank is negative or len(types) != rank.
        ContractionError: If the labels repeat on axes of equal variance.
    """

    def __init__(
        self,
        rank: int,
        types: Sequence[IndexType | int],
        labels: str | Sequence[Label] | None = None,
    ) -> None:
        rank = operator.index(rank)
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        types = tuple(types)
        if len(types) != rank:
            raise ValueError(f"rank is {rank} but {len(types)} index types given")
        indices = make_indices(types, labels)
        find_pending_pair(indices)
        self._indices = indices
        self._data = jnp.zeros((DIMENSION,) * rank, dtype=jnp.float64)

    @classmethod
    def _from_parts(
        cls,
        data: jax.Array,
        indices: tuple[TensorIndex, ...],
    ) -> Tensor:
        obj = object.__new__(cls)
        obj._data = data
        obj._indices = tuple(indices)
        return obj

    # --- Pytree interface ---

    def tree_flatten(self) -> tuple[tuple[jax.Array], tuple[TensorIndex, ...]]:
        return (self._data,), self._indices

    @classmethod
    def tree_unflatten(
        cls,
        aux: tuple[TensorIndex, ...],
        children: tuple[jax.Array],
    ) -> Tensor:
        return cls._from_parts(children[0], aux)

    # --- Factory methods ---

    @classmethod
    def zeros(cls, types: Sequence[IndexType | int]) -> Tensor:
        types = tuple(types)
        return cls(len(types), types)

    @classmethod
    def from_string(cls, text: str) -> Tensor:
        """Create a zero tensor from an index string such as ``"^a_b_c"``.

        The markers give the types (``^`` up, ``_`` down) and the
        characters after them the initial labels.

        Raises:
            IndexStringError: If the string does not follow the grammar.
            ContractionError: If a label repeats on axes of equal variance.
        """
        indices = parse_index_string(text)
        find_pending_pair(indices)
        data = jnp.zeros((DIMENSION,) * len(indices), dtype=jnp.float64)
        return cls._from_parts(data, indices)

    @classmethod
    def from_components(
        cls,
        types: Sequence[IndexType | int],
        values: Any,
        labels: str | Sequence[Label] | None = None,
    ) -> Tensor:
        """Create a tensor from existing component values.

        Args:
            types:  Variance of each axis.
            values: Either ``DIMENSION**rank`` values in storage order or an
                    array of shape ``(DIMENSION,) * rank``.
            labels: Optional initial labels.

        Raises:
            ValueError: If the values do not fit the rank.
        """
        types = tuple(types)
        tensor = cls(len(types), types, labels)
        tensor._data = _coerce_components(values, len(types))
        return tensor

    def copy(self) -> Tensor:
        """Return a copy with the same components and types, labels cleared."""
        return self._from_parts(
            self._data, tuple(idx.unlabeled() for idx in self._indices)
        )

    # --- Metadata ---

    @property
    def indices(self) -> tuple[TensorIndex, ...]:
        return self._indices

    @property
    def rank(self) -> int:
        return len(self._indices)

    @property
    def types(self) -> tuple[IndexType, ...]:
        return tuple(idx.type for idx in self._indices)

    @property
    def shape(self) -> tuple[int, ...]:
        return (DIMENSION,) * self.rank

    @property
    def dtype(self) -> Any:
        return self._data.dtype

    def labels(self) -> tuple[Label, ...]:
        """Return the label of each axis in order (None if unnamed)."""
        return tuple(idx.label for idx in self._indices)

    # --- Storage ---

    def index(self, indices: Sequence[int]) -> int:
        """Flat storage offset of a multi-index (row-major)."""
        return flat_index(indices, self.rank)

    def index_to_indices(self, offset: int) -> tuple[int, ...]:
        """Multi-index of a flat storage offset, axis 0 first."""
        return multi_index(offset, self.rank)

    def get_component(self, indices: Sequence[int]) -> float:
        """Return one component.

        Raises:
            ComponentIndexError: If the multi-index is out of range.
        """
        return float(self._data.reshape(-1)[self.index(indices)])

    def set_component(self, indices: Sequence[int], value: float) -> None:
        """Set one component in place.

        Raises:
            ComponentIndexError: If the multi-index is out of range.
        """
        offset = self.index(indices)
        flat = self._data.reshape(-1).at[offset].set(value)
        self._data = flat.reshape(self.shape)

    def get_components(self) -> jax.Array:
        """Return all components as a flat array in storage order.

        JAX arrays are immutable: write changes back with set_components().
        """
        return self._data.reshape(-1)

    def set_components(self, values: Any) -> None:
        """Replace all components at once (flat storage order or full shape).

        Raises:
            ValueError: If the number of values does not match.
        """
        self._data = _coerce_components(values, self.rank)

    def todense(self) -> jax.Array:
        return self._data

    def __float__(self) -> float:
        if self.rank != 0:
            raise TypeError(
                f"Only rank-0 tensors convert to float, this one has rank {self.rank}"
            )
        return float(self._data)

    # --- Index naming ---

    def name_indices(self, labels: str | Sequence[Label] | None) -> None:
        """Assign abstract labels in place.

        Args:
            labels: One label per axis (``"abc"`` or a sequence). ``None`` or
                an empty sequence clears every label. ``"."``, ``"-"``,
                ``"0"`` and ``0`` leave that axis unnamed.

        Raises:
            ValueError: If the number of labels does not match the rank.
            ContractionError: If the labels repeat on axes of equal variance.
        """
        indices = make_indices(self.types, labels)
        find_pending_pair(indices)
        self._indices = indices

    def indexed(self, labels: str | Sequence[Label] | None) -> Tensor:
        """Return a labeled copy, contracting any pair the labels close.

        ``delta.indexed("aa")`` on a mixed tensor yields its trace.
        """
        labeled = self._from_parts(self._data, make_indices(self.types, labels))
        return contract_pending(labeled)

    def __getitem__(self, labels: str | Sequence[Label]) -> Tensor:
        if isinstance(labels, numbers.Integral):
            raise TypeError(
                "Tensor subscripts are index labels; use get_component() for "
                "numeric access"
            )
        if labels is not None and not isinstance(labels, (str, tuple, list)):
            labels = (labels,)
        return self.indexed(labels)

    def __setitem__(self, labels: Any, value: Any) -> None:
        raise TypeError(
            "Tensor[...] returns a labeled copy and cannot be assigned to; use "
            "name_indices() to relabel in place or set_component() to write values"
        )

    def relabel(self, old: Label, new: Label) -> Tensor:
        """Return a copy with one label renamed.

        Raises:
            KeyError: If *old* is not found among the tensor's labels.
            ContractionError: If the new label repeats on an axis of the
                same variance.
        """
        found = False
        new_indices = []
        for idx in self._indices:
            if old is not None and idx.label == old:
                new_indices.append(idx.relabel(new))
                found = True
            else:
                new_indices.append(idx)
        if not found:
            raise KeyError(f"Label {old!r} not found in tensor with labels {self.labels()}")
        new_indices = tuple(new_indices)
        find_pending_pair(new_indices)
        return self._from_parts(self._data, new_indices)

    # --- Contraction ---

    def contract(
        self,
        index1: int | None = None,
        index2: int | None = None,
        optimize: str = "auto",
    ) -> Tensor:
        """Trace over axes.

        With no arguments, every pending label pair is contracted (first
        found first). With two axis positions, that pair is traced
        regardless of labels.

        Raises:
            ContractionError: If the requested axes share variance, coincide
                or are out of range, or the labels are ambiguous.
        """
        if index1 is None and index2 is None:
            result = contract_pending(self, optimize=optimize)
            if result is self:
                result = self._from_parts(self._data, self._indices)
            return result
        if index1 is None or index2 is None:
            raise TypeError("contract() takes either no axes or two axes")
        return contract_pair(self, index1, index2, optimize=optimize)

    # --- Arithmetic ---

    def _check_compatible(self, other: Tensor, op: str) -> None:
        if self.types != other.types:
            raise IndexTypeMismatchError(
                f"Cannot {op} tensors with index types "
                f"{format_index_string(self._indices)!r} and "
                f"{format_index_string(other._indices)!r}: rank and types must match"
            )

    def __mul__(self, other: Any) -> Tensor:
        if isinstance(other, Tensor):
            return multiply(self, other)
        if _is_scalar(other):
            return self._from_parts(self._data * other, self._indices)
        return NotImplemented

    def __rmul__(self, other: Any) -> Tensor:
        if _is_scalar(other):
            return self._from_parts(other * self._data, self._indices)
        return NotImplemented

    def __imul__(self, other: Any) -> Tensor:
        if _is_scalar(other):
            self._data = self._data * other
            return self
        return NotImplemented

    def __truediv__(self, other: Any) -> Tensor:
        if _is_scalar(other):
            return self._from_parts(self._data / other, self._indices)
        return NotImplemented

    def __neg__(self) -> Tensor:
        return -1 * self

    def __add__(self, other: Any) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_compatible(other, "add")
        return self._from_parts(self._data + other._data, self._indices)

    def __iadd__(self, other: Any) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_compatible(other, "add")
        self._data = self._data + other._data
        return self

    def __sub__(self, other: Any) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self + (-1) * other

    def __isub__(self, other: Any) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        self += (-1) * other
        return self

    # --- Comparison / display ---

    def allclose(self, other: Tensor, atol: float = ATOL) -> bool:
        """True if both tensors have the same types and close components."""
        if self.types != other.types:
            return False
        return bool(np.allclose(np.asarray(self._data), np.asarray(other._data), atol=atol))

    def __repr__(self) -> str:
        return (
            f"Tensor(rank={self.rank}, "
            f"indices={format_index_string(self._indices)!r}, dtype={self.dtype})"
        )
