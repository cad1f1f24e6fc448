"""einjax: dense tensor algebra at a point with Einstein index notation.

Label-based contraction:
    Each tensor axis has a variance (up or down) and an optional one-character
    label. Multiplying labeled tensors forms their outer product and sums over
    every label that appears once up and once down.

.. note::
    Importing ``einjax`` enables JAX 64-bit mode (``jax_enable_x64``).
    All components are ``float64``.

Quick start::

    from einjax import IndexType, Tensor

    gamma = Tensor.from_string("^a_b_c")
    u = Tensor(1, [IndexType.UP])
    u.set_components([1.0, 0.2, 0.0, 0.0])
    accel = -1 * gamma["abc"] * u["b"] * u["c"]
    print(accel.labels())    # ('a',)
"""

import logging

import jax

jax.config.update("jax_enable_x64", True)

# einjax.core must load before einjax.contraction (tensor.py imports the engine)
from einjax.core.errors import (
    ComponentIndexError,
    ContractionError,
    EinjaxError,
    IndexStringError,
    IndexTypeMismatchError,
)
from einjax.core.index import IndexType, Label, TensorIndex, parse_index_string
from einjax.core.special import kronecker_delta, minkowski_metric
from einjax.core.storage import DIMENSION
from einjax.core.tensor import ATOL, Tensor
from einjax.contraction.contractor import (
    contract,
    contract_pair,
    find_pending_pair,
    multiply,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DIMENSION",
    "ATOL",
    # Index
    "IndexType",
    "Label",
    "TensorIndex",
    "parse_index_string",
    # Tensor
    "Tensor",
    "kronecker_delta",
    "minkowski_metric",
    # Contraction
    "contract",
    "contract_pair",
    "find_pending_pair",
    "multiply",
    # Errors
    "EinjaxError",
    "IndexTypeMismatchError",
    "ContractionError",
    "ComponentIndexError",
    "IndexStringError",
]
