"""Label-driven contraction engine."""

from einjax.contraction.contractor import (
    contract,
    contract_pair,
    contract_pending,
    find_pending_pair,
    multiply,
    outer_product,
    trace_pair,
)

__all__ = [
    "contract",
    "contract_pair",
    "contract_pending",
    "find_pending_pair",
    "multiply",
    "outer_product",
    "trace_pair",
]
