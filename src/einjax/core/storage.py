"""Flat component storage: multi-index <-> offset mapping.

Components of a rank-r tensor are stored contiguously, row-major (last
axis fastest), so the multi-index ``(i0, ..., i_{r-1})`` lives at offset::

    i0 * D**(r-1) + i1 * D**(r-2) + ... + i_{r-1}

where ``D = DIMENSION``. A rank-0 tensor has a single component at
offset 0 and an empty multi-index.
"""

from __future__ import annotations

import operator
from collections.abc import Sequence

from einjax.core.errors import ComponentIndexError

# Number of values each axis can take (spacetime dimension)
DIMENSION = 4


def num_components(rank: int) -> int:
    return DIMENSION**rank


def _check_axis_value(value: object, axis: int) -> int:
    try:
        value = operator.index(value)
    except TypeError:
        raise ComponentIndexError(
            f"Index for axis {axis} must be an integer, got {value!r}"
        ) from None
    if not 0 <= value < DIMENSION:
        raise ComponentIndexError(
            f"Index {value} for axis {axis} is out of range [0, {DIMENSION})"
        )
    return value


def flat_index(indices: Sequence[int], rank: int) -> int:
    """Convert a rank-length multi-index into a flat storage offset.

    Args:
        indices: One value in ``[0, DIMENSION)`` per axis.
        rank:    Rank of the tensor the offset refers to.

    Returns:
        The row-major offset.

    Raises:
        ComponentIndexError: If the length differs from *rank* or any value
            is out of range.
    """
    indices = tuple(indices)
    if len(indices) != rank:
        raise ComponentIndexError(
            f"Expected {rank} indices but received {len(indices)}: {indices}"
        )
    offset = 0
    for axis, value in enumerate(indices):
        offset = offset * DIMENSION + _check_axis_value(value, axis)
    return offset


def multi_index(offset: int, rank: int) -> tuple[int, ...]:
    """Convert a flat offset back into a multi-index, axis 0 first.

    Raises:
        ComponentIndexError: If *offset* is outside ``[0, DIMENSION**rank)``.
    """
    try:
        offset = operator.index(offset)
    except TypeError:
        raise ComponentIndexError(f"Offset must be an integer, got {offset!r}") from None
    size = num_components(rank)
    if not 0 <= offset < size:
        raise ComponentIndexError(f"Offset {offset} is out of range [0, {size})")
    indices = [0] * rank
    for axis in range(rank - 1, -1, -1):
        offset, indices[axis] = divmod(offset, DIMENSION)
    return tuple(indices)

