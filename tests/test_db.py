from typing import Dict, Optional

import pytest

from evmkit.bits import B160, B256
from evmkit.bytecode import Bytecode
from evmkit.db import (
    BlockHash,
    BlockHashComponentError,
    Database,
    DatabaseCommit,
    DatabaseComponentError,
    DatabaseComponents,
    RefDBWrapper,
    State,
    StateComponentError,
)
from evmkit.state import Account, AccountInfo


class MemoryState(State):
    def __init__(self) -> None:
        self.accounts: Dict[B160, AccountInfo] = {}
        self.codes: Dict[B256, Bytecode] = {}
        self.slots: Dict[tuple, int] = {}

    def basic(self, address: B160) -> Optional[AccountInfo]:
        return self.accounts.get(address)

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        return self.codes[code_hash]

    def storage(self, address: B160, index: int) -> int:
        return self.slots.get((address, index), 0)


class FailingState(State):
    def basic(self, address):
        raise RuntimeError("state offline")

    def code_by_hash(self, code_hash):
        raise RuntimeError("state offline")

    def storage(self, address, index):
        raise RuntimeError("state offline")


class NumberHashes(BlockHash):
    def block_hash(self, number: int) -> B256:
        return B256.from_int(number)


class FailingHashes(BlockHash):
    def block_hash(self, number):
        raise LookupError(number)


class MemoryDb(Database, DatabaseCommit):
    def __init__(self) -> None:
        self.accounts: Dict[B160, AccountInfo] = {}

    def basic(self, address):
        return self.accounts.get(address)

    def code_by_hash(self, code_hash):
        return Bytecode.default()

    def storage(self, address, index):
        return 0

    def block_hash(self, number):
        return B256.zero()

    def commit(self, changes):
        for address, account in changes.items():
            self.accounts[address] = account.info


@pytest.fixture
def state() -> MemoryState:
    memory = MemoryState()
    address = B160.from_u64(7)
    memory.accounts[address] = AccountInfo.from_balance(100)
    code = Bytecode.new_raw(b"\x60\x00")
    memory.codes[code.hash] = code
    memory.slots[(address, 3)] = 42
    return memory


def test_components_delegate_to_state(state):
    db = DatabaseComponents(state, NumberHashes())
    address = B160.from_u64(7)
    assert db.basic(address).balance == 100
    assert db.basic(B160.from_u64(8)) is None
    assert db.storage(address, 3) == 42
    assert db.storage(address, 4) == 0
    code = Bytecode.new_raw(b"\x60\x00")
    assert db.code_by_hash(code.hash) == code


def test_components_delegate_block_hash(state):
    db = DatabaseComponents(state, NumberHashes())
    assert db.block_hash(5) == B256.from_int(5)


def test_state_failure_is_wrapped():
    db = DatabaseComponents(FailingState(), NumberHashes())
    with pytest.raises(StateComponentError) as info:
        db.basic(B160.zero())
    assert isinstance(info.value.error, RuntimeError)
    with pytest.raises(StateComponentError):
        db.storage(B160.zero(), 1)
    with pytest.raises(StateComponentError):
        db.code_by_hash(B256.zero())


def test_missing_code_is_state_error(state):
    db = DatabaseComponents(state, NumberHashes())
    with pytest.raises(StateComponentError) as info:
        db.code_by_hash(B256.zero())
    assert isinstance(info.value.error, KeyError)


def test_block_hash_failure_is_wrapped(state):
    db = DatabaseComponents(state, FailingHashes())
    with pytest.raises(BlockHashComponentError) as info:
        db.block_hash(9)
    assert isinstance(info.value, DatabaseComponentError)
    assert info.value.error.args == (9,)


def test_ref_wrapper_delegates(state):
    inner = DatabaseComponents(state, NumberHashes())
    wrapper = RefDBWrapper(inner)
    address = B160.from_u64(7)
    assert wrapper.basic(address) == inner.basic(address)
    assert wrapper.storage(address, 3) == 42
    assert wrapper.block_hash(11) == B256.from_int(11)
    code = Bytecode.new_raw(b"\x60\x00")
    assert wrapper.code_by_hash(code.hash) == code


def test_commit_applies_changes():
    db = MemoryDb()
    address = B160.from_u64(1)
    db.commit({address: Account.from_info(AccountInfo.from_balance(5))})
    assert db.basic(address).balance == 5


@pytest.mark.parametrize("cls", [State, BlockHash, Database, DatabaseCommit])
def test_interfaces_are_abstract(cls):
    with pytest.raises(TypeError):
        cls()