"""Database interfaces through which execution reads and commits state."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Dict, Optional

from evmkit.bits import B160, B256
from evmkit.bytecode import Bytecode
from evmkit.state import Account, AccountInfo


class State(abc.ABC):
    """Source of account information, code and storage."""

    @abc.abstractmethod
    def basic(self, address: B160) -> Optional[AccountInfo]:
        """Basic account information, or None if the account is unknown."""

    @abc.abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code with the given hash."""

    @abc.abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""


class BlockHash(abc.ABC):
    """Source of historical block hashes."""

    @abc.abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with the given number."""


class Database(State, BlockHash):
    """Everything execution reads: accounts, code, storage and block hashes."""


class DatabaseCommit(abc.ABC):
    """A database that accepts the state changes of an execution."""

    @abc.abstractmethod
    def commit(self, changes: Dict[B160, Account]) -> None:
        """Apply the changed accounts."""


@dataclass
class RefDBWrapper(Database):
    """Presents another database through the :class:`Database` interface."""

    db: Database

    def basic(self, address: B160) -> Optional[AccountInfo]:
        return self.db.basic(address)

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        return self.db.code_by_hash(code_hash)

    def storage(self, address: B160, index: int) -> int:
        return self.db.storage(address, index)

    def block_hash(self, number: int) -> B256:
        return self.db.block_hash(number)


class DatabaseComponentError(Exception):
    """A component of :class:`DatabaseComponents` failed; ``error`` is its error."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error))
        self.error = error


class StateComponentError(DatabaseComponentError):
    """The state component failed."""


class BlockHashComponentError(DatabaseComponentError):
    """The block hash component failed."""


@dataclass
class DatabaseComponents(Database):
    """A database assembled from a state source and a block hash source."""

    state: State
    block_hashes: BlockHash

    def basic(self, address: B160) -> Optional[AccountInfo]:
        try:
            return self.state.basic(address)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        try:
            return self.state.code_by_hash(code_hash)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def storage(self, address: B160, index: int) -> int:
        try:
            return self.state.storage(address, index)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def block_hash(self, number: int) -> B256:
        try:
            return self.block_hashes.block_hash(number)
        except Exception as exc:
            raise BlockHashComponentError(exc) from exc