"""Event log records emitted during execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from evmkit.bits import B160, B256
from evmkit.utilities import decode_hex_bytes, encode_hex_bytes


@dataclass(frozen=True)
class Log:
    """A log entry: emitting address, indexed topics and data."""

    address: B160 = field(default_factory=B160.zero)
    topics: tuple[B256, ...] = ()
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", B160(self.address))
        object.__setattr__(self, "topics", tuple(B256(t) for t in self.topics))
        object.__setattr__(self, "data", bytes(self.data))

    def to_dict(self) -> dict[str, Any]:
        """Hex-encoded mapping suitable for JSON."""
        return {
            "address": self.address.to_hex(),
            "topics": [topic.to_hex() for topic in self.topics],
            "data": encode_hex_bytes(self.data),
        }

    @classmethod
    def from_dict(cls, value: dict[str, Any]) -> Log:
        """Build a log from the mapping produced by :meth:`to_dict`."""
        return cls(
            address=B160.from_hex(value["address"]),
            topics=tuple(B256.from_hex(t) for t in value["topics"]),
            data=decode_hex_bytes(value["data"]),
        )