"""Outcomes of executing a transaction and the errors that stop it."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from evmkit.bits import B160
from evmkit.log import Log
from evmkit.state import Account


class Eval(enum.Enum):
    """How a successful execution ended."""

    STOP = "stop"
    RETURN = "return"
    SELF_DESTRUCT = "self_destruct"


class OutOfGasError(enum.Enum):
    """What ran out of gas."""

    BASIC_OUT_OF_GAS = "basic"
    MEMORY_LIMIT = "memory_limit"
    MEMORY = "memory"
    PRECOMPILE = "precompile"
    INVALID_OPERAND = "invalid_operand"


class HaltReason(enum.Enum):
    """Why execution halted, consuming all gas."""

    OUT_OF_GAS = "out_of_gas"
    OPCODE_NOT_FOUND = "opcode_not_found"
    INVALID_FE_OPCODE = "invalid_fe_opcode"
    INVALID_JUMP = "invalid_jump"
    NOT_ACTIVATED = "not_activated"
    STACK_UNDERFLOW = "stack_underflow"
    STACK_OVERFLOW = "stack_overflow"
    OUT_OF_OFFSET = "out_of_offset"
    CREATE_COLLISION = "create_collision"
    PRECOMPILE_ERROR = "precompile_error"
    NONCE_OVERFLOW = "nonce_overflow"
    CREATE_CONTRACT_SIZE_LIMIT = "create_contract_size_limit"
    CREATE_CONTRACT_STARTING_WITH_EF = "create_contract_starting_with_ef"
    CREATE_INITCODE_SIZE_LIMIT = "create_initcode_size_limit"
    OVERFLOW_PAYMENT = "overflow_payment"
    STATE_CHANGE_DURING_STATIC_CALL = "state_change_during_static_call"
    CALL_NOT_ALLOWED_INSIDE_STATIC = "call_not_allowed_inside_static"
    OUT_OF_FUND = "out_of_fund"
    CALL_TOO_DEEP = "call_too_deep"


@dataclass(frozen=True)
class Output:
    """Data returned by a call, or by a creation with its new address."""

    data: bytes = b""
    created: bool = False
    address: Optional[B160] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if self.address is not None:
            if not self.created:
                raise ValueError("only a creation output carries an address")
            object.__setattr__(self, "address", B160(self.address))

    @classmethod
    def call(cls, data: bytes) -> Output:
        """Output of a call."""
        return cls(data=data)

    @classmethod
    def create(cls, data: bytes, address: Optional[B160] = None) -> Output:
        """Output of a creation."""
        return cls(data=data, created=True, address=address)

    def into_data(self) -> bytes:
        """The returned data."""
        return self.data


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Common base of success, revert and halt results."""

    gas_used: int

    def is_success(self) -> bool:
        """True only for a successful execution."""
        return False

    def logs(self) -> List[Log]:
        """Logs emitted; empty unless execution succeeded."""
        return []


@dataclass(frozen=True, kw_only=True)
class SuccessResult(ExecutionResult):
    """Execution returned successfully."""

    reason: Eval
    gas_refunded: int = 0
    log_entries: Tuple[Log, ...] = ()
    output: Output = field(default_factory=Output)

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_entries", tuple(self.log_entries))

    def is_success(self) -> bool:
        return True

    def logs(self) -> List[Log]:
        return list(self.log_entries)


@dataclass(frozen=True, kw_only=True)
class RevertResult(ExecutionResult):
    """Reverted by REVERT without spending all gas."""

    output: bytes = b""


@dataclass(frozen=True, kw_only=True)
class HaltResult(ExecutionResult):
    """Halted, spending all gas; ``out_of_gas`` details an OUT_OF_GAS halt."""

    reason: HaltReason
    out_of_gas: Optional[OutOfGasError] = None

    def __post_init__(self) -> None:
        is_oog = self.reason is HaltReason.OUT_OF_GAS
        if is_oog != (self.out_of_gas is not None):
            raise ValueError("out_of_gas is given exactly when the reason is OUT_OF_GAS")


@dataclass
class ResultAndState:
    """Execution result and the accounts it changed."""

    result: ExecutionResult
    state: Dict[B160, Account] = field(default_factory=dict)


class InvalidTransactionKind(enum.Enum):
    """Why a transaction is not valid."""

    GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE = "gas max fee greater than priority fee"
    GAS_PRICE_LESS_THAN_BASEFEE = "gas price less than basefee"
    CALLER_GAS_LIMIT_MORE_THAN_BLOCK = "caller gas limit more than block"
    CALL_GAS_COST_MORE_THAN_GAS_LIMIT = "call gas cost more than gas limit"
    REJECT_CALLER_WITH_CODE = "reject caller with code"
    LACK_OF_FUND_FOR_GAS_LIMIT = "lack of fund for gas limit"
    OVERFLOW_PAYMENT_IN_TRANSACTION = "overflow payment in transaction"
    NONCE_OVERFLOW_IN_TRANSACTION = "nonce overflow in transaction"
    NONCE_TOO_HIGH = "nonce too high"
    NONCE_TOO_LOW = "nonce too low"
    CREATE_INITCODE_SIZE_LIMIT = "create initcode size limit"
    INVALID_CHAIN_ID = "invalid chain id"


_FUND_KINDS = frozenset({InvalidTransactionKind.LACK_OF_FUND_FOR_GAS_LIMIT})
_NONCE_KINDS = frozenset(
    {InvalidTransactionKind.NONCE_TOO_HIGH, InvalidTransactionKind.NONCE_TOO_LOW}
)


@dataclass(frozen=True)
class InvalidTransaction:
    """A validation failure; some kinds carry the values compared."""

    kind: InvalidTransactionKind
    gas_limit: Optional[int] = None
    balance: Optional[int] = None
    tx: Optional[int] = None
    state: Optional[int] = None

    def __post_init__(self) -> None:
        has_fund = self.gas_limit is not None and self.balance is not None
        no_fund = self.gas_limit is None and self.balance is None
        has_nonce = self.tx is not None and self.state is not None
        no_nonce = self.tx is None and self.state is None
        if self.kind in _FUND_KINDS:
            valid = has_fund and no_nonce
        elif self.kind in _NONCE_KINDS:
            valid = has_nonce and no_fund
        else:
            valid = no_fund and no_nonce
        if not valid:
            raise ValueError(f"wrong details for {self.kind.name}")

    def __str__(self) -> str:
        if self.kind in _FUND_KINDS:
            return f"{self.kind.value} (gas limit {self.gas_limit}, balance {self.balance})"
        if self.kind in _NONCE_KINDS:
            return f"{self.kind.value} (tx {self.tx}, state {self.state})"
        return self.kind.value


class EVMError(Exception):
    """Execution could not be carried out."""


class TransactionError(EVMError):
    """The transaction is invalid."""

    def __init__(self, invalid: InvalidTransaction) -> None:
        super().__init__(str(invalid))
        self.invalid = invalid


class PrevrandaoNotSetError(EVMError):
    """The block has no prevrandao value although one is required."""

    def __init__(self) -> None:
        super().__init__("prevrandao is not set")


class DatabaseError(EVMError):
    """The database failed; ``error`` is what it reported."""

    def __init__(self, error: object) -> None:
        super().__init__(f"database error: {error}")
        self.error = error