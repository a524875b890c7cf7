"""Fixed-size byte strings used for hashes and addresses."""

from __future__ import annotations

import os
from typing import ClassVar, TypeVar

_T = TypeVar("_T", bound="FixedBytes")

_WHITESPACE = frozenset(b" \r\n\t")


class FromHexError(ValueError):
    """A non-hex character was found while decoding a hex string."""

    def __init__(self, character: str, index: int) -> None:
        super().__init__(f"invalid hex character: {character}, at {index}")
        self.character = character
        self.index = index


def _nibble(byte: int) -> int | None:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    return None


def _decode_hex_into(text: str, size: int, stripped: bool) -> bytes:
    """Decode hex digits into a zero-filled buffer of ``size`` bytes.

    Whitespace is skipped; bytes not reached by digits stay zero.
    """
    raw = text.encode("utf-8")
    out = bytearray(size)
    modulus = len(raw) % 2
    buf = 0
    pos = 0
    for index, byte in enumerate(raw):
        if byte in _WHITESPACE:
            continue
        value = _nibble(byte)
        if value is None:
            raise FromHexError(chr(byte), index + (2 if stripped else 0))
        buf = ((buf << 4) | value) & 0xFF
        modulus += 1
        if modulus == 2:
            modulus = 0
            out[pos] = buf
            pos += 1
    return bytes(out)


class FixedBytes(bytes):
    """Immutable byte string with a length fixed by the subclass."""

    SIZE: ClassVar[int] = 0

    def __new__(cls: type[_T], data: bytes | bytearray | memoryview) -> _T:
        if isinstance(data, int):
            raise TypeError(f"{cls.__name__} expects bytes, not an integer")
        raw = bytes(data)
        if len(raw) != cls.SIZE:
            raise ValueError(
                f"{cls.__name__} needs exactly {cls.SIZE} bytes, got {len(raw)}"
            )
        return super().__new__(cls, raw)

    @classmethod
    def zero(cls: type[_T]) -> _T:
        """Return the all-zero value."""
        return cls(bytes(cls.SIZE))

    @classmethod
    def random(cls: type[_T]) -> _T:
        """Return a value filled with random bytes."""
        return cls(os.urandom(cls.SIZE))

    @classmethod
    def from_hex(cls: type[_T], text: str) -> _T:
        """Parse a hex string, with or without a ``0x`` prefix."""
        stripped = text.startswith("0x")
        digits = text[2:] if stripped else text
        expected = 2 * cls.SIZE
        if len(digits) != expected:
            raise ValueError(
                f"invalid length {len(digits)}, expected a (both 0x-prefixed or not) "
                f"hex string with length of {expected}"
            )
        return cls(_decode_hex_into(digits, cls.SIZE, stripped))

    def to_hex(self) -> str:
        """Return the ``0x``-prefixed lower-case hex form."""
        return "0x" + self.hex()

    @classmethod
    def from_int(cls: type[_T], value: int) -> _T:
        """Build the big-endian encoding of an unsigned integer."""
        if value < 0 or value >= 1 << (8 * cls.SIZE):
            raise OverflowError(f"{value} does not fit in {cls.SIZE} bytes")
        return cls(value.to_bytes(cls.SIZE, "big"))

    def to_int(self) -> int:
        """Interpret the bytes as a big-endian unsigned integer."""
        return int.from_bytes(self, "big")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_hex()!r})"

    def __str__(self) -> str:
        return self.to_hex()


class B256(FixedBytes):
    """256-bit value, such as a keccak hash."""

    SIZE = 32

    def to_b160(self) -> B160:
        """Keep the low 20 bytes."""
        return B160(self[12:])


class B160(FixedBytes):
    """160-bit value, such as an account address."""

    SIZE = 20

    @classmethod
    def from_u64(cls, value: int) -> B160:
        """Address whose last eight bytes hold ``value`` big-endian."""
        if value < 0 or value >= 1 << 64:
            raise OverflowError(f"{value} is not a 64-bit unsigned integer")
        return cls(bytes(12) + value.to_bytes(8, "big"))

    def to_b256(self) -> B256:
        """Left-pad with zeros to 32 bytes."""
        return B256(bytes(12) + bytes(self))


Address = B160
Hash = B256