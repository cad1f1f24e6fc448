"""Per-axis metadata: variance type and abstract index label.

Each axis of a tensor is described by a TensorIndex, which carries:
- The variance of the axis (covariant/down or contravariant/up)
- An optional abstract label used to declare intended contractions

Labels are the user-facing API for Einstein summation. Two axes carrying
the same label and opposite variance are summed over when an expression
is evaluated. An axis without a label is never summed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from einjax.core.errors import IndexStringError

# Label type: a single character, or None for "not named"
Label = str | None

# Values accepted on input as "do not sum over this axis"
SENTINEL_LABELS = frozenset({"", "0", ".", "-"})

_TYPE_MARKERS = {"^": 1, "_": -1}


class IndexType(IntEnum):
    """Variance of a tensor axis.

    COVARIANT (-1):    Covector-type index, written as a subscript.
    CONTRAVARIANT (+1): Vector-type index, written as a superscript.

    DOWN and UP are synonyms. Only axes of opposite type may be
    contracted with one another.
    """

    COVARIANT = -1
    CONTRAVARIANT = 1
    DOWN = -1
    UP = 1

    def __neg__(self) -> IndexType:
        return IndexType(-int(self))

    @property
    def marker(self) -> str:
        """The index-string prefix for this type: ``^`` or ``_``."""
        return "^" if self == IndexType.UP else "_"


def normalize_label(label: object) -> Label:
    """Map any sentinel spelling to None and validate a real label.

    Raises:
        ValueError: If *label* is neither a sentinel nor a single character.
    """
    if label is None or label == 0:
        return None
    if not isinstance(label, str):
        raise ValueError(f"Index label must be a single character, got {label!r}")
    if label in SENTINEL_LABELS:
        return None
    if len(label) != 1:
        raise ValueError(f"Index label must be a single character, got {label!r}")
    return label


@dataclass(frozen=True, slots=True)
class TensorIndex:
    """Metadata for one axis of a tensor.

    Attributes:
        type:   Variance of the axis.
        label:  Abstract index label, or None if the axis is not named.

    Example:
        >>> idx = TensorIndex(IndexType.UP, "a")
        >>> idx.dual()
        TensorIndex(type=COVARIANT, label='a')
    """

    type: IndexType
    label: Label = None

    def __post_init__(self) -> None:
        # Coerce (use object.__setattr__ since frozen)
        object.__setattr__(self, "type", IndexType(int(self.type)))
        object.__setattr__(self, "label", normalize_label(self.label))

    @property
    def is_named(self) -> bool:
        return self.label is not None

    def relabel(self, new_label: object) -> TensorIndex:
        return TensorIndex(self.type, new_label)

    def unlabeled(self) -> TensorIndex:
        return TensorIndex(self.type, None)

    def dual(self) -> TensorIndex:
        """Return the same axis with the opposite variance."""
        return TensorIndex(-self.type, self.label)

    def contractible_with(self, other: TensorIndex) -> bool:
        """True if a trace over this axis and *other* is meaningful."""
        return self.type != other.type

    def __repr__(self) -> str:
        return f"TensorIndex(type={self.type.name}, label={self.label!r})"


def make_indices(
    types: Sequence[IndexType | int],
    labels: str | Sequence[object] | None = None,
) -> tuple[TensorIndex, ...]:
    """Zip a types sequence and an optional labels sequence into indices.

    Raises:
        ValueError: If *labels* is given with a length other than len(types).
    """
    if labels is None or len(labels) == 0:
        return tuple(TensorIndex(t) for t in types)
    if len(labels) != len(types):
        raise ValueError(
            f"Expected {len(types)} labels but received {len(labels)}: {labels!r}"
        )
    return tuple(TensorIndex(t, lbl) for t, lbl in zip(types, labels))


def parse_index_string(text: str) -> tuple[TensorIndex, ...]:
    """Parse the compact index grammar, e.g. ``"^a_b_c"``.

    Each token is ``^`` (contravariant) or ``_`` (covariant) followed by
    one label character. A sentinel character (``.``, ``-`` or ``0``)
    leaves the axis unnamed. Whitespace is ignored.

    Args:
        text: The index string.

    Returns:
        One TensorIndex per token, in order.

    Raises:
        IndexStringError: If the string does not follow the grammar.
    """
    if not isinstance(text, str):
        raise IndexStringError(f"Index string must be a str, got {type(text).__name__}")
    chars = "".join(text.split())
    if len(chars) % 2:
        raise IndexStringError(
            f"Index string {text!r} must consist of marker/label pairs"
        )
    indices = []
    for pos in range(0, len(chars), 2):
        marker, label = chars[pos], chars[pos + 1]
        if marker not in _TYPE_MARKERS:
            raise IndexStringError(
                f"Expected '^' or '_' at position {pos} of {text!r}, got {marker!r}"
            )
        if label in _TYPE_MARKERS:
            raise IndexStringError(
                f"Missing label after {marker!r} at position {pos} of {text!r}"
            )
        indices.append(TensorIndex(IndexType(_TYPE_MARKERS[marker]), label))
    return tuple(indices)


def format_index_string(indices: Sequence[TensorIndex]) -> str:
    """Inverse of parse_index_string; unnamed axes are written as ``.``."""
    return "".join(f"{idx.type.marker}{idx.label or '.'}" for idx in indices)
