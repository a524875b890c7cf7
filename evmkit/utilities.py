"""Hashing, contract address derivation and hex helpers."""

from __future__ import annotations

import binascii

from Crypto.Hash import keccak

from evmkit.bits import B160, B256

KECCAK_EMPTY = B256.from_hex(
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
)


def keccak256(data: bytes) -> B256:
    """Keccak-256 digest of ``data``."""
    return B256(keccak.new(digest_bits=256, data=bytes(data)).digest())


def _rlp_length_prefix(length: int, offset: int) -> bytes:
    if length < 56:
        return bytes([offset + length])
    encoded = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([offset + 55 + len(encoded)]) + encoded


def _rlp_bytes(item: bytes) -> bytes:
    if len(item) == 1 and item[0] < 0x80:
        return item
    return _rlp_length_prefix(len(item), 0x80) + item


def _rlp_uint(value: int) -> bytes:
    return _rlp_bytes(value.to_bytes((value.bit_length() + 7) // 8, "big"))


def create_address(caller: B160, nonce: int) -> B160:
    """Address of a contract made with CREATE by ``caller`` at ``nonce``."""
    if nonce < 0 or nonce >= 1 << 64:
        raise OverflowError(f"nonce {nonce} is not a 64-bit unsigned integer")
    payload = _rlp_bytes(bytes(B160(caller))) + _rlp_uint(nonce)
    encoded = _rlp_length_prefix(len(payload), 0xC0) + payload
    return B160(keccak256(encoded)[12:])


def create2_address(caller: B160, code_hash: B256, salt: int) -> B160:
    """Address of a contract made with CREATE2."""
    if salt < 0 or salt >= 1 << 256:
        raise OverflowError(f"salt {salt} is not a 256-bit unsigned integer")
    preimage = (
        b"\xff"
        + bytes(B160(caller))
        + salt.to_bytes(32, "big")
        + bytes(B256(code_hash))
    )
    return B160(keccak256(preimage)[12:])


def encode_hex_bytes(data: bytes) -> str:
    """Encode bytes as a ``0x``-prefixed hex string."""
    return "0x" + bytes(data).hex()


def decode_hex_bytes(text: str) -> bytes:
    """Decode a hex string, with or without ``0x`` prefix.

    Raises ValueError on odd length or non-hex characters.
    """
    digits = text[2:] if text.startswith("0x") else text
    try:
        return binascii.unhexlify(digits)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"invalid hex string: {exc}") from exc