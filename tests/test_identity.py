import pytest
from hypothesis import given
from hypothesis import strategies as st

from evmkit.errors import PrecompileError, PrecompileErrorKind
from evmkit.precompile.cost import calc_linear_cost_u32
from evmkit.precompile.identity import identity_run


def test_empty_input():
    assert identity_run(b"", 15) == (15, b"")


@given(st.binary(max_size=500))
def test_returns_input(data):
    cost, out = identity_run(data, 10**9)
    assert out == data
    assert cost == calc_linear_cost_u32(len(data), 15, 3)


def test_accepts_bytearray():
    assert identity_run(bytearray(b"abc"), 100)[1] == b"abc"


def test_out_of_gas():
    needed = calc_linear_cost_u32(64, 15, 3)
    with pytest.raises(PrecompileError) as info:
        identity_run(bytes(64), needed - 1)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS