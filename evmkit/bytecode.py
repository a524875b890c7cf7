"""Contract bytecode and its analysis state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from evmkit.bits import B256
from evmkit.utilities import KECCAK_EMPTY, keccak256

_CHECKED_PADDING = 33


@dataclass(frozen=True)
class JumpMap:
    """Bit map of valid jump destinations, least significant bit first."""

    raw: bytes = b""
    bit_length: Optional[int] = None

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        object.__setattr__(self, "raw", raw)
        if self.bit_length is None:
            object.__setattr__(self, "bit_length", 8 * len(raw))
        elif not 0 <= self.bit_length <= 8 * len(raw):
            raise ValueError(
                f"bit length {self.bit_length} does not fit in {len(raw)} bytes"
            )

    @classmethod
    def from_bytes(cls, data: bytes) -> JumpMap:
        """Build a jump map covering every bit of ``data``."""
        return cls(bytes(data))

    def as_bytes(self) -> bytes:
        """Raw bytes backing the map."""
        return self.raw

    def is_valid(self, pc: int) -> bool:
        """True if ``pc`` is a valid jump destination."""
        if pc < 0 or pc >= self.bit_length:
            return False
        return bool((self.raw[pc >> 3] >> (pc & 7)) & 1)


@dataclass(frozen=True)
class RawState:
    """Bytecode as given, not yet checked."""


@dataclass(frozen=True)
class CheckedState:
    """Bytecode padded so that it ends in STOP; ``length`` is the original size."""

    length: int


@dataclass(frozen=True)
class AnalysedState:
    """Checked bytecode with its jump destinations worked out."""

    length: int
    jump_map: JumpMap


BytecodeState = Union[RawState, CheckedState, AnalysedState]


@dataclass(frozen=True)
class Bytecode:
    """Code of an account together with its hash and analysis state."""

    bytecode: bytes
    hash: B256
    state: BytecodeState = field(default_factory=RawState)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bytecode", bytes(self.bytecode))
        object.__setattr__(self, "hash", B256(self.hash))

    @classmethod
    def default(cls) -> Bytecode:
        """Bytecode holding a single STOP opcode."""
        return cls(
            bytecode=b"\x00",
            hash=KECCAK_EMPTY,
            state=AnalysedState(length=0, jump_map=JumpMap(b"\x00", 1)),
        )

    @classmethod
    def new_raw(cls, data: bytes) -> Bytecode:
        """Raw bytecode, hashing it."""
        data = bytes(data)
        code_hash = KECCAK_EMPTY if not data else keccak256(data)
        return cls(bytecode=data, hash=code_hash, state=RawState())

    @classmethod
    def new_raw_with_hash(cls, data: bytes, code_hash: B256) -> Bytecode:
        """Raw bytecode with a hash the caller vouches for."""
        return cls(bytecode=data, hash=code_hash, state=RawState())

    @classmethod
    def new_checked(
        cls, data: bytes, length: int, code_hash: Optional[B256] = None
    ) -> Bytecode:
        """Checked bytecode; ``data`` must already end with STOP padding."""
        data = bytes(data)
        if code_hash is None:
            code_hash = KECCAK_EMPTY if length == 0 else keccak256(data)
        return cls(bytecode=data, hash=code_hash, state=CheckedState(length=length))

    def original_bytes(self) -> bytes:
        """The bytecode without any padding."""
        if isinstance(self.state, RawState):
            return self.bytecode
        return self.bytecode[: self.state.length]

    def is_empty(self) -> bool:
        """True if the original bytecode has no bytes."""
        return len(self) == 0

    def __len__(self) -> int:
        if isinstance(self.state, RawState):
            return len(self.bytecode)
        return self.state.length

    def to_checked(self) -> Bytecode:
        """Pad raw bytecode with zeros; other states are returned unchanged."""
        if not isinstance(self.state, RawState):
            return self
        length = len(self.bytecode)
        return Bytecode(
            bytecode=self.bytecode + bytes(_CHECKED_PADDING),
            hash=self.hash,
            state=CheckedState(length=length),
        )