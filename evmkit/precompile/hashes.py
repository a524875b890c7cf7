"""SHA-256 and RIPEMD-160 precompiles."""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160

from evmkit.errors import PrecompileError, PrecompileErrorKind, PrecompileResult
from evmkit.precompile.cost import calc_linear_cost_u32


def sha256_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """SHA-256 digest of ``data``."""
    cost = calc_linear_cost_u32(len(data), 60, 12)
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return cost, hashlib.sha256(bytes(data)).digest()


def ripemd160_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """RIPEMD-160 digest of ``data``, left-padded with zeros to 32 bytes."""
    gas_used = calc_linear_cost_u32(len(data), 600, 120)
    if gas_used > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    digest = RIPEMD160.new(bytes(data)).digest()
    return gas_used, bytes(12) + digest