"""Sets of precompiled contracts active at each hard fork."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, Iterator, List, Optional

from evmkit.bits import B160
from evmkit.errors import PrecompileResult
from evmkit.log import Log
from evmkit.precompile import blake2, bn128, hashes, identity, secp256k1
from evmkit.specification import SpecId

PrecompileFn = Callable[[bytes, int], PrecompileResult]


class PrecompileSpecId(enum.IntEnum):
    """Hard forks at which the set of precompiles changed."""

    HOMESTEAD = 0
    BYZANTIUM = 1
    ISTANBUL = 2
    BERLIN = 3
    LATEST = 4

    @classmethod
    def from_spec_id(cls, spec_id: SpecId) -> PrecompileSpecId:
        """The precompile set in force at the given hard fork."""
        spec_id = SpecId(spec_id)
        if spec_id is SpecId.LATEST:
            return cls.LATEST
        if spec_id >= SpecId.BERLIN:
            return cls.BERLIN
        if spec_id >= SpecId.ISTANBUL:
            return cls.ISTANBUL
        if spec_id >= SpecId.BYZANTIUM:
            return cls.BYZANTIUM
        return cls.HOMESTEAD

    def enabled(self, spec_id: int) -> bool:
        """True if ``spec_id`` is at or after this one."""
        return spec_id >= self.value


class PrecompileKind(enum.Enum):
    """Whether a precompile is a standard one or supplied by the user."""

    STANDARD = "Standard"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class Precompile:
    """A precompiled contract: call it with input bytes and a gas limit."""

    kind: PrecompileKind
    function: PrecompileFn

    def __call__(self, data: bytes, gas_limit: int) -> PrecompileResult:
        return self.function(data, gas_limit)

    def __repr__(self) -> str:
        return self.kind.value


@dataclass
class PrecompileOutput:
    """Cost, output and logs of a precompile call."""

    cost: int
    output: bytes
    logs: List[Log] = field(default_factory=list)

    @classmethod
    def without_logs(cls, cost: int, output: bytes) -> PrecompileOutput:
        """Output with no logs."""
        return cls(cost=cost, output=bytes(output))


def _standard(function: PrecompileFn) -> Precompile:
    return Precompile(PrecompileKind.STANDARD, function)


@dataclass
class Precompiles:
    """Precompiled contracts keyed by their address."""

    fun: Dict[B160, Precompile]

    _instances: ClassVar[Dict[PrecompileSpecId, "Precompiles"]] = {}

    @classmethod
    def _cached(
        cls,
        spec: PrecompileSpecId,
        base: Optional[Precompiles],
        additions: Dict[int, PrecompileFn],
    ) -> Precompiles:
        instance = cls._instances.get(spec)
        if instance is None:
            fun = dict(base.fun) if base is not None else {}
            fun.update(
                (B160.from_u64(number), _standard(function))
                for number, function in additions.items()
            )
            instance = cls(fun)
            cls._instances[spec] = instance
        return instance

    @classmethod
    def homestead(cls) -> Precompiles:
        """ECRECOVER, SHA-256, RIPEMD-160 and identity."""
        return cls._cached(
            PrecompileSpecId.HOMESTEAD,
            None,
            {
                1: secp256k1.ec_recover_run,
                2: hashes.sha256_run,
                3: hashes.ripemd160_run,
                4: identity.identity_run,
            },
        )

    @classmethod
    def byzantium(cls) -> Precompiles:
        """Homestead plus the alt_bn128 operations (EIP-196, EIP-197)."""
        return cls._cached(
            PrecompileSpecId.BYZANTIUM,
            cls.homestead(),
            {
                6: bn128.add_byzantium,
                7: bn128.mul_byzantium,
                8: bn128.pair_byzantium,
            },
        )

    @classmethod
    def istanbul(cls) -> Precompiles:
        """Byzantium plus BLAKE2 F (EIP-152) and cheaper alt_bn128 (EIP-1108)."""
        return cls._cached(
            PrecompileSpecId.ISTANBUL,
            cls.byzantium(),
            {
                9: blake2.blake2_run,
                6: bn128.add_istanbul,
                7: bn128.mul_istanbul,
                8: bn128.pair_istanbul,
            },
        )

    @classmethod
    def berlin(cls) -> Precompiles:
        """The Berlin set."""
        return cls._cached(PrecompileSpecId.BERLIN, cls.istanbul(), {})

    @classmethod
    def latest(cls) -> Precompiles:
        """The newest set, currently Berlin."""
        return cls.berlin()

    @classmethod
    def new(cls, spec: PrecompileSpecId) -> Precompiles:
        """The set for ``spec``."""
        builders = {
            PrecompileSpecId.HOMESTEAD: cls.homestead,
            PrecompileSpecId.BYZANTIUM: cls.byzantium,
            PrecompileSpecId.ISTANBUL: cls.istanbul,
            PrecompileSpecId.BERLIN: cls.berlin,
            PrecompileSpecId.LATEST: cls.latest,
        }
        return builders[PrecompileSpecId(spec)]()

    def addresses(self) -> Iterator[B160]:
        """Addresses that hold a precompile."""
        return iter(self.fun)

    def contains(self, address: B160) -> bool:
        """True if a precompile lives at ``address``."""
        return address in self.fun

    def get(self, address: B160) -> Optional[Precompile]:
        """The precompile at ``address``, or None."""
        return self.fun.get(address)

    def is_empty(self) -> bool:
        """True if the set holds no precompiles."""
        return not self.fun

    def __len__(self) -> int:
        return len(self.fun)