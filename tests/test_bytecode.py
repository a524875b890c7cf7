import pytest
from hypothesis import given, strategies as st

from evmkit.bits import B256
from evmkit.bytecode import (
    AnalysedState,
    Bytecode,
    CheckedState,
    JumpMap,
    RawState,
)
from evmkit.utilities import KECCAK_EMPTY, keccak256


def test_default_is_single_stop():
    code = Bytecode.default()
    assert code.bytecode == b"\x00"
    assert code.hash == KECCAK_EMPTY
    assert len(code) == 0
    assert code.is_empty()
    assert code.original_bytes() == b""
    assert isinstance(code.state, AnalysedState)
    assert code.state.jump_map.is_valid(0) is False


def test_new_raw_empty_uses_empty_hash():
    code = Bytecode.new_raw(b"")
    assert code.hash == KECCAK_EMPTY
    assert code.state == RawState()
    assert code.is_empty()


def test_new_raw_hashes_data():
    data = bytes([0x60, 0x01, 0x60, 0x02])
    code = Bytecode.new_raw(data)
    assert code.hash == keccak256(data)
    assert len(code) == len(data)
    assert code.original_bytes() == data


def test_new_raw_with_hash_keeps_hash():
    given_hash = B256(b"\x11" * 32)
    code = Bytecode.new_raw_with_hash(b"\x01\x02", given_hash)
    assert code.hash == given_hash


def test_new_checked_hash_rules():
    assert Bytecode.new_checked(b"\x00" * 33, 0).hash == KECCAK_EMPTY
    padded = b"\x60\x00" + bytes(33)
    assert Bytecode.new_checked(padded, 2).hash == keccak256(padded)
    explicit = B256(b"\x22" * 32)
    assert Bytecode.new_checked(padded, 2, explicit).hash == explicit


def test_to_checked_pads_and_keeps_original():
    data = b"\x60\x01\x56"
    checked = Bytecode.new_raw(data).to_checked()
    assert checked.state == CheckedState(length=len(data))
    assert checked.bytecode == data + bytes(33)
    assert checked.original_bytes() == data
    assert checked.hash == keccak256(data)


def test_to_checked_is_idempotent():
    checked = Bytecode.new_raw(b"\x01").to_checked()
    assert checked.to_checked() is checked
    default = Bytecode.default()
    assert default.to_checked() is default


@given(st.binary(max_size=64))
def test_to_checked_preserves_length(data):
    raw = Bytecode.new_raw(data)
    checked = raw.to_checked()
    assert len(checked) == len(raw)
    assert checked.original_bytes() == raw.original_bytes()
    assert checked.is_empty() == (len(data) == 0)


def test_jump_map_bits_are_lsb_first():
    jump_map = JumpMap.from_bytes(b"\x05")
    assert jump_map.is_valid(0)
    assert not jump_map.is_valid(1)
    assert jump_map.is_valid(2)
    assert not jump_map.is_valid(8)
    assert not jump_map.is_valid(-1)


@given(st.binary(max_size=16))
def test_jump_map_round_trip(data):
    assert JumpMap.from_bytes(data).as_bytes() == data


def test_jump_map_rejects_oversized_length():
    with pytest.raises(ValueError):
        JumpMap(b"\x00", 9)