"""Account state held while executing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from evmkit.bits import B160, B256
from evmkit.bytecode import Bytecode
from evmkit.utilities import KECCAK_EMPTY


@dataclass
class StorageSlot:
    """A storage value as loaded and as currently set."""

    original_value: int = 0
    present_value: int = 0

    @classmethod
    def new(cls, original: int) -> StorageSlot:
        """Slot whose present value equals its original value."""
        return cls(original_value=original, present_value=original)

    def is_changed(self) -> bool:
        """True if the present value differs from the original."""
        return self.original_value != self.present_value


Storage = Dict[int, StorageSlot]


@dataclass
class AccountInfo:
    """Balance, nonce and code of an account.

    Equality looks at balance, nonce and code hash only.
    """

    balance: int = 0
    nonce: int = 0
    code_hash: B256 = KECCAK_EMPTY
    code: Optional[Bytecode] = field(default_factory=Bytecode.default, compare=False)

    @classmethod
    def from_balance(cls, balance: int) -> AccountInfo:
        """Default account holding ``balance``."""
        return cls(balance=balance)

    def is_empty(self) -> bool:
        """True for no balance, zero nonce and no code."""
        code_empty = self.code_hash in (KECCAK_EMPTY, B256.zero())
        return self.balance == 0 and self.nonce == 0 and code_empty

    def exists(self) -> bool:
        """True unless the account is empty."""
        return not self.is_empty()


@dataclass
class Account:
    """Account info with cached storage and lifecycle flags."""

    info: AccountInfo = field(default_factory=AccountInfo)
    storage: Storage = field(default_factory=dict)
    storage_cleared: bool = False
    is_destroyed: bool = False
    is_touched: bool = False
    is_not_existing: bool = False

    @classmethod
    def from_info(cls, info: AccountInfo) -> Account:
        """Existing account with empty storage cache."""
        return cls(info=info)

    @classmethod
    def new_not_existing(cls) -> Account:
        """Default account marked as not existing."""
        return cls(is_not_existing=True)

    def is_empty(self) -> bool:
        """True if the account info is empty."""
        return self.info.is_empty()


State = Dict[B160, Account]