"""Usage errors raised by tensor operations.

Each error also derives from the builtin exception a caller would expect
(``ValueError`` for bad arguments, ``IndexError`` for out-of-range access),
so ``except ValueError`` keeps working for code that does not care about
the finer distinction.
"""


class EinjaxError(Exception):
    pass


class IndexTypeMismatchError(EinjaxError, ValueError):
    """Operands of an addition do not share rank and index types."""


class ContractionError(EinjaxError, ValueError):
    """Two axes cannot be summed over, or the labels are ambiguous."""


class ComponentIndexError(EinjaxError, IndexError):
    """A multi-index or flat offset lies outside the component storage."""


class IndexStringError(EinjaxError, ValueError):
    pass


__all__ = [
    "EinjaxError",
    "IndexTypeMismatchError",
    "ContractionError",
    "ComponentIndexError",
    "IndexStringError",
]
