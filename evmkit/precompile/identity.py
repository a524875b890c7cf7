"""The identity precompile, which returns its input."""

from __future__ import annotations

from evmkit.errors import PrecompileError, PrecompileErrorKind, PrecompileResult
from evmkit.precompile.cost import calc_linear_cost_u32

IDENTITY_BASE = 15
IDENTITY_PER_WORD = 3


def identity_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """Copy ``data`` to the output."""
    gas_used = calc_linear_cost_u32(len(data), IDENTITY_BASE, IDENTITY_PER_WORD)
    if gas_used > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return gas_used, bytes(data)