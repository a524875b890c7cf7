import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from evmkit.bits import B160, B256
from evmkit.log import Log


def test_defaults():
    log = Log()
    assert log.address == B160.zero()
    assert log.topics == ()
    assert log.data == b""


def test_coerces_fields():
    log = Log(address=bytes(20), topics=[bytes(32)], data=bytearray(b"\x01"))
    assert isinstance(log.address, B160)
    assert log.topics == (B256.zero(),)
    assert isinstance(log.data, bytes)


def test_rejects_wrong_topic_size():
    with pytest.raises(ValueError):
        Log(topics=[bytes(31)])


def test_is_frozen():
    log = Log(data=b"abc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        log.data = b"x"
    assert log.data == b"abc"


def test_equality_and_hash():
    a = Log(B160.from_u64(7), (B256.zero(),), b"ab")
    b = Log(B160.from_u64(7), [B256.zero()], b"ab")
    assert a == b
    assert hash(a) == hash(b)


def test_to_dict_uses_hex():
    log = Log(B160.from_u64(1), (), b"\x00\xff")
    encoded = log.to_dict()
    assert encoded["address"] == B160.from_u64(1).to_hex()
    assert encoded["data"] == "0x" + b"\x00\xff".hex()
    assert encoded["topics"] == []


@given(
    st.binary(min_size=20, max_size=20),
    st.lists(st.binary(min_size=32, max_size=32), max_size=4),
    st.binary(max_size=64),
)
def test_dict_roundtrip(address, topics, data):
    log = Log(B160(address), tuple(B256(t) for t in topics), data)
    assert Log.from_dict(log.to_dict()) == log