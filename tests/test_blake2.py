import hashlib
import struct

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from evmkit.errors import PrecompileError, PrecompileErrorKind
from evmkit.precompile.blake2 import IV, blake2_run, compress

# Parameter block word 0 for a 64-byte digest without key (RFC 7693).
_PARAM = 0x01010040


def _initial_state():
    h = list(IV)
    h[0] ^= _PARAM
    return h


def _message_words(message):
    return struct.unpack("<16Q", message.ljust(128, b"\x00"))


def _precompile_input(rounds, h, m, t, flag):
    return (
        rounds.to_bytes(4, "big")
        + struct.pack("<8Q", *h)
        + struct.pack("<16Q", *m)
        + struct.pack("<2Q", *t)
        + bytes([flag])
    )


def test_compress_matches_blake2b_abc():
    state = compress(12, _initial_state(), _message_words(b"abc"), (3, 0), True)
    assert struct.pack("<8Q", *state) == hashlib.blake2b(b"abc").digest()


@settings(max_examples=25)
@given(st.binary(max_size=128))
def test_compress_matches_blake2b_single_block(message):
    state = compress(
        12, _initial_state(), _message_words(message), (len(message), 0), True
    )
    assert struct.pack("<8Q", *state) == hashlib.blake2b(message).digest()


def test_run_matches_blake2b():
    message = b"precompile"
    data = _precompile_input(
        12, _initial_state(), _message_words(message), (len(message), 0), 1
    )
    gas, out = blake2_run(data, 12)
    assert gas == 12
    assert out == hashlib.blake2b(message).digest()


def test_final_flag_changes_result():
    h, m = _initial_state(), _message_words(b"abc")
    _, final = blake2_run(_precompile_input(12, h, m, (3, 0), 1), 100)
    _, not_final = blake2_run(_precompile_input(12, h, m, (3, 0), 0), 100)
    assert final == hashlib.blake2b(b"abc").digest()
    assert not_final != final
    assert len(not_final) == 64


def test_out_of_gas():
    data = _precompile_input(12, _initial_state(), _message_words(b""), (0, 0), 1)
    with pytest.raises(PrecompileError) as info:
        blake2_run(data, 11)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


@pytest.mark.parametrize("length", [0, 212, 214])
def test_wrong_length(length):
    with pytest.raises(PrecompileError) as info:
        blake2_run(bytes(length), 10**6)
    assert info.value.kind is PrecompileErrorKind.BLAKE2_WRONG_LENGTH


def test_wrong_final_flag():
    data = bytes(212) + b"\x02"
    with pytest.raises(PrecompileError) as info:
        blake2_run(data, 10**6)
    assert info.value.kind is PrecompileErrorKind.BLAKE2_WRONG_FINAL_INDICATOR_FLAG


def test_compress_rejects_bad_sizes():
    with pytest.raises(ValueError):
        compress(1, [0] * 7, [0] * 16, [0, 0], False)