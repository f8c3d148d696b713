"""Storage layer for student academic contracts.

Two independent backends are provided:

* :class:`~contractform.stores.DynamoDBContractStore` keeps any number of
  contracts per owner in a DynamoDB table keyed by a random contract id.
* :class:`~contractform.stores.SQLContractStore` keeps a single, flattened
  contract per owner in a relational database.

The backends do not share data and are not interchangeable.
"""

from __future__ import annotations

from .errors import (
    ContractAlreadyExistsError,
    ContractIdCollisionError,
    ContractNotFoundError,
    ContractStoreError,
    MalformedRecordError,
    OwnerMismatchError,
    StoreUnavailableError,
    UnknownColumnError,
)
from .ids import new_contract_id
from .models import ClassEntry, ContractEntry, ContractForm
from .stores import ContractStore, DynamoDBContractStore, SQLContractStore

__version__ = "0.1.0"

__all__ = [
    "ClassEntry",
    "ContractAlreadyExistsError",
    "ContractEntry",
    "ContractForm",
    "ContractIdCollisionError",
    "ContractNotFoundError",
    "ContractStore",
    "ContractStoreError",
    "DynamoDBContractStore",
    "MalformedRecordError",
    "OwnerMismatchError",
    "SQLContractStore",
    "StoreUnavailableError",
    "UnknownColumnError",
    "new_contract_id",
]
