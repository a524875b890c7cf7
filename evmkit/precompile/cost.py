"""Gas cost helpers shared by precompiles."""

from __future__ import annotations


def calc_linear_cost_u32(length: int, base: int, word: int) -> int:
    """Base cost plus ``word`` for every started 32-byte word of input."""
    return (length + 31) // 32 * word + base