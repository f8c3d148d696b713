"""Exception hierarchy shared by the contract stores."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ContractStoreError",
    "ContractNotFoundError",
    "OwnerMismatchError",
    "ContractIdCollisionError",
    "StoreUnavailableError",
    "MalformedRecordError",
    "ContractAlreadyExistsError",
    "UnknownColumnError",
]


class ContractStoreError(RuntimeError):
    """Base class for every error raised by a contract store."""


class ContractNotFoundError(ContractStoreError, LookupError):
    """Raised when no contract matches the requested key."""

    def __init__(self, contract_id: str) -> None:
        super().__init__(f"Contract {contract_id!r} does not exist")
        self.contract_id = contract_id


class OwnerMismatchError(ContractStoreError):
    """Raised when a write targets a contract held by another owner."""

    def __init__(self, contract_id: str, owner_id: str) -> None:
        super().__init__(f"Contract {contract_id!r} is not owned by {owner_id!r}")
        self.contract_id = contract_id
        self.owner_id = owner_id


class ContractIdCollisionError(ContractStoreError):
    """A freshly generated contract id already exists in the table.

    This is not a retry condition: it means the id space is exhausted or the
    random source is broken.
    """

    def __init__(self, contract_id: str) -> None:
        super().__init__(
            f"Generated contract id {contract_id!r} already exists; "
            "the random source or the table is corrupted"
        )
        self.contract_id = contract_id


class StoreUnavailableError(ContractStoreError):
    """The backing store could not be reached or rejected the request."""


class MalformedRecordError(StoreUnavailableError):
    """A stored record could not be decoded."""

    def __init__(self, message: str, *, record: Optional[object] = None) -> None:
        super().__init__(message)
        self.record = record


class ContractAlreadyExistsError(ContractStoreError):
    """The relational store already holds a contract for this owner."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"A contract already exists for owner {owner_id!r}")
        self.owner_id = owner_id


class UnknownColumnError(ContractStoreError, ValueError):
    """An account update named a column that the table does not have."""

    def __init__(self, table: str, column: str) -> None:
        super().__init__(f"Table {table!r} has no column {column!r}")
        self.table = table
        self.column = column
