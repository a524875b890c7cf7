"""Execution environment: configuration, block and transaction."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from evmkit.bits import B160, B256
from evmkit.specification import SpecId

U256_MAX = (1 << 256) - 1
U64_MAX = (1 << 64) - 1


class AnalysisKind(enum.Enum):
    """How bytecode created by CREATE/CREATE2 is prepared."""

    RAW = "raw"
    CHECK = "check"
    ANALYSE = "analyse"


@dataclass(frozen=True)
class CreateScheme:
    """CREATE when ``salt`` is None, otherwise CREATE2 with that salt."""

    salt: Optional[int] = None

    @classmethod
    def create(cls) -> CreateScheme:
        """The legacy CREATE scheme."""
        return cls()

    @classmethod
    def create2(cls, salt: int) -> CreateScheme:
        """The CREATE2 scheme with ``salt``."""
        if salt < 0 or salt > U256_MAX:
            raise OverflowError(f"salt {salt} is not a 256-bit unsigned integer")
        return cls(salt=salt)

    def is_create2(self) -> bool:
        """True for CREATE2."""
        return self.salt is not None


@dataclass(frozen=True)
class TransactTo:
    """Target of a transaction: a call to an address or a contract creation."""

    address: Optional[B160] = None
    scheme: Optional[CreateScheme] = None

    def __post_init__(self) -> None:
        if (self.address is None) == (self.scheme is None):
            raise ValueError("exactly one of address and scheme must be given")
        if self.address is not None:
            object.__setattr__(self, "address", B160(self.address))

    @classmethod
    def call(cls, address: B160) -> TransactTo:
        """Call the account at ``address``."""
        return cls(address=address)

    @classmethod
    def create(cls, scheme: Optional[CreateScheme] = None) -> TransactTo:
        """Create a contract, with CREATE unless another scheme is given."""
        return cls(scheme=scheme if scheme is not None else CreateScheme.create())

    def is_create(self) -> bool:
        """True for contract creation."""
        return self.scheme is not None


@dataclass
class CfgEnv:
    """Chain configuration and execution switches."""

    chain_id: int = 1
    spec_id: SpecId = SpecId.LATEST
    perf_all_precompiles_have_balance: bool = False
    perf_analyse_created_bytecodes: AnalysisKind = AnalysisKind.ANALYSE
    limit_contract_code_size: Optional[int] = None
    memory_limit: int = 2**32 - 1
    disable_balance_check: bool = False
    disable_block_gas_limit: bool = False
    disable_eip3607: bool = False
    disable_gas_refund: bool = False
    disable_base_fee: bool = False


@dataclass
class BlockEnv:
    """Values of the block being executed."""

    number: int = 0
    coinbase: B160 = field(default_factory=B160.zero)
    timestamp: int = 1
    difficulty: int = 0
    prevrandao: Optional[B256] = field(default_factory=B256.zero)
    basefee: int = 0
    gas_limit: int = U256_MAX


@dataclass
class TxEnv:
    """Values of the transaction being executed."""

    caller: B160 = field(default_factory=B160.zero)
    gas_limit: int = U64_MAX
    gas_price: int = 0
    gas_priority_fee: Optional[int] = None
    transact_to: TransactTo = field(
        default_factory=lambda: TransactTo.call(B160.zero())
    )
    value: int = 0
    data: bytes = b""
    chain_id: Optional[int] = None
    nonce: Optional[int] = None
    access_list: List[Tuple[B160, List[int]]] = field(default_factory=list)


@dataclass
class Env:
    """Configuration, block and transaction together."""

    cfg: CfgEnv = field(default_factory=CfgEnv)
    block: BlockEnv = field(default_factory=BlockEnv)
    tx: TxEnv = field(default_factory=TxEnv)

    def effective_gas_price(self) -> int:
        """Gas price paid, capped by base fee plus priority fee if one is set."""
        if self.tx.gas_priority_fee is None:
            return self.tx.gas_price
        capped = (self.block.basefee + self.tx.gas_priority_fee) & U256_MAX
        return min(self.tx.gas_price, capped)