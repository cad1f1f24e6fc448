"""Core tensor, index and storage definitions."""

from einjax.core.errors import (
    ComponentIndexError,
    ContractionError,
    EinjaxError,
    IndexStringError,
    IndexTypeMismatchError,
)
from einjax.core.index import (
    IndexType,
    Label,
    TensorIndex,
    format_index_string,
    parse_index_string,
)
from einjax.core.special import kronecker_delta, minkowski_metric
from einjax.core.storage import DIMENSION, flat_index, multi_index, num_components
from einjax.core.tensor import ATOL, Tensor

__all__ = [
    "DIMENSION",
    "ATOL",
    "IndexType",
    "Label",
    "TensorIndex",
    "parse_index_string",
    "format_index_string",
    "flat_index",
    "multi_index",
    "num_components",
    "Tensor",
    "kronecker_delta",
    "minkowski_metric",
    "EinjaxError",
    "IndexTypeMismatchError",
    "ContractionError",
    "ComponentIndexError",
    "IndexStringError",
]
