r"""Contraction engine driven by abstract index labels.

Primary API::

    contract(\*tensors, optimize="auto") -> Tensor

Labels drive contraction: two axes carrying the same label and opposite
variance are summed over (Einstein convention). Unnamed axes and labels
that appear once are free and survive into the result in their original
order.

Evaluation model:
1. The operands are combined into a single outer product whose indices are
   the concatenation of the operands' indices.
2. The first pending pair (lexicographic scan over axis pairs) is traced
   out, reducing rank by 2.
3. Step 2 repeats until no pending pair remains.

The numeric kernels translate an axis pair to an einsum subscript string
and evaluate it through opt_einsum with the JAX backend.

Lower-level API::

    find_pending_pair(indices) -> (i, j) | None
    contract_pair(tensor, axis1, axis2) -> Tensor
    contract_pending(tensor) -> Tensor
    multiply(a, b) -> Tensor
    trace_pair(data, axis1, axis2) -> jax.Array
    outer_product(a, b) -> jax.Array
"""

from __future__ import annotations

import logging
import operator
import string
from collections import Counter
from collections.abc import Sequence
from functools import reduce
from typing import TYPE_CHECKING

import jax
import opt_einsum

from einjax.core.errors import ContractionError
from einjax.core.index import TensorIndex, format_index_string

if TYPE_CHECKING:
    from einjax.core.tensor import Tensor

logger = logging.getLogger(__name__)

_SUBSCRIPT_CHARS = string.ascii_lowercase + string.ascii_uppercase


# ---------- Pair detection ----------

def find_pending_pair(indices: Sequence[TensorIndex]) -> tuple[int, int] | None:
    """Find the first pair of axes that must be summed over.

    Pairs ``(i, j)`` with ``i < j`` are scanned in lexicographic order. A pair
    is pending when both axes carry the same (non-sentinel) label and their
    variance differs.

    Args:
        indices: Per-axis metadata of the tensor.

    Returns:
        The first pending pair, or None if nothing is left to contract.

    Raises:
        ContractionError: If a label is used on more than two axes, or two
            axes share a label and the same variance.
    """
    label_counts = Counter(idx.label for idx in indices if idx.is_named)
    for label, count in label_counts.items():
        if count > 2:
            raise ContractionError(
                f"Label {label!r} appears {count} times in "
                f"{format_index_string(indices)!r}. Labels must appear at most "
                f"2 times (one up, one down)."
            )

    first: tuple[int, int] | None = None
    for i, idx_i in enumerate(indices):
        if not idx_i.is_named:
            continue
        for j in range(i + 1, len(indices)):
            idx_j = indices[j]
            if idx_j.label != idx_i.label:
                continue
            if not idx_i.contractible_with(idx_j):
                raise ContractionError(
                    f"Label {idx_i.label!r} repeats on axes {i} and {j} of "
                    f"{format_index_string(indices)!r} but both are "
                    f"{idx_i.type.name.lower()}; a contraction needs one up "
                    f"and one down index."
                )
            if first is None:
                first = (i, j)
    return first


# ---------- Numeric kernels ----------

def trace_pair(
    data: jax.Array,
    axis1: int,
    axis2: int,
    optimize: str = "auto",
) -> jax.Array:
    """Sum an array over two of its axes taken equal.

    ``result[rest] = sum_s data[..., s (at axis1), ..., s (at axis2), ...]``
    with the remaining axes kept in their original relative order.

    Args:
        data:     Array of shape ``(DIMENSION,) * rank``.
        axis1:    First axis to eliminate.
        axis2:    Second axis to eliminate.
        optimize: opt_einsum optimizer.

    Returns:
        Array with ``data.ndim - 2`` axes.
    """
    if data.ndim > len(_SUBSCRIPT_CHARS):
        raise ValueError(
            f"Rank {data.ndim} exceeds the {len(_SUBSCRIPT_CHARS)} axes "
            f"supported by einsum encoding."
        )
    chars = list(_SUBSCRIPT_CHARS[: data.ndim])
    chars[axis2] = chars[axis1]
    output = "".join(c for pos, c in enumerate(chars) if pos not in (axis1, axis2))
    subscripts = "".join(chars) + "->" + output
    return opt_einsum.contract(subscripts, data, optimize=optimize, backend="jax")


def outer_product(a: jax.Array, b: jax.Array, optimize: str = "auto") -> jax.Array:
    """Outer product: ``result[i..., j...] = a[i...] * b[j...]``."""
    if a.ndim == 0 or b.ndim == 0:
        return a * b
    if a.ndim + b.ndim > len(_SUBSCRIPT_CHARS):
        raise ValueError(
            f"Rank {a.ndim + b.ndim} exceeds the {len(_SUBSCRIPT_CHARS)} axes "
            f"supported by einsum encoding."
        )
    left = _SUBSCRIPT_CHARS[: a.ndim]
    right = _SUBSCRIPT_CHARS[a.ndim : a.ndim + b.ndim]
    subscripts = f"{left},{right}->{left}{right}"
    return opt_einsum.contract(subscripts, a, b, optimize=optimize, backend="jax")


# ---------- Tensor-level operations ----------

def contract_pair(
    tensor: Tensor,
    axis1: int,
    axis2: int,
    optimize: str = "auto",
) -> Tensor:
    """Trace a tensor over two explicit axis positions.

    The two indices are removed; the remaining indices keep their types,
    labels and relative order.

    Raises:
        ContractionError: If an axis is out of range, the axes coincide, or
            both axes have the same variance.
    """
    rank = tensor.rank
    try:
        axis1, axis2 = operator.index(axis1), operator.index(axis2)
    except TypeError:
        raise ContractionError(
            f"Axes must be integers, got {axis1!r} and {axis2!r}"
        ) from None
    for axis in (axis1, axis2):
        if not 0 <= axis < rank:
            raise ContractionError(
                f"Axis {axis} is out of range for a rank-{rank} tensor"
            )
    if axis1 == axis2:
        raise ContractionError(f"Cannot contract axis {axis1} with itself")
    if axis1 > axis2:
        axis1, axis2 = axis2, axis1

    indices = tensor.indices
    if not indices[axis1].contractible_with(indices[axis2]):
        raise ContractionError(
            f"Axes {axis1} and {axis2} of {format_index_string(indices)!r} are "
            f"both {indices[axis1].type.name.lower()}; a contraction needs one "
            f"up and one down index."
        )

    logger.debug(
        "contracting axes (%d, %d) of %s", axis1, axis2, format_index_string(indices)
    )
    data = trace_pair(tensor.todense(), axis1, axis2, optimize=optimize)
    remaining = tuple(
        idx for pos, idx in enumerate(indices) if pos not in (axis1, axis2)
    )
    return type(tensor)._from_parts(data, remaining)


def contract_pending(tensor: Tensor, optimize: str = "auto") -> Tensor:
    """Contract every pending label pair, first-found first.

    Returns the tensor unchanged (same object) if no pair is pending.
    """
    pair = find_pending_pair(tensor.indices)
    while pair is not None:
        tensor = contract_pair(tensor, *pair, optimize=optimize)
        pair = find_pending_pair(tensor.indices)
    return tensor


def multiply(a: Tensor, b: Tensor, optimize: str = "auto") -> Tensor:
    """Outer product of two tensors followed by automatic contraction.

    The intermediate has rank ``a.rank + b.rank``, indices ``a.indices +
    b.indices`` and components ``a[i...] * b[j...]``. Pending label pairs
    (across or within the operands) are then summed out.
    """
    data = outer_product(a.todense(), b.todense(), optimize=optimize)
    product = type(a)._from_parts(data, a.indices + b.indices)
    return contract_pending(product, optimize=optimize)


def contract(*tensors: Tensor, optimize: str = "auto") -> Tensor:
    """Multiply any number of labeled tensors and sum over shared labels.

    Example:
        >>> accel = contract(gamma["abc"], u["b"], u["c"])

    Args:
        *tensors: One or more tensors, usually already labeled.
        optimize: opt_einsum optimizer for the kernels.

    Returns:
        The fully contracted product. With one argument, the tensor with
        its own pending pairs contracted.

    Raises:
        ValueError: If no tensors are given.
        ContractionError: If the combined labels are ambiguous.
    """
    if not tensors:
        raise ValueError("contract() requires at least one tensor")
    if len(tensors) == 1:
        return contract_pending(tensors[0], optimize=optimize)
    return reduce(lambda acc, t: multiply(acc, t, optimize=optimize), tensors)
