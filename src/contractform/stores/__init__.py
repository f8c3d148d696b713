"""Persistence adapters for contract records."""

from .interface import ContractStore
from .dynamodb import DynamoDBContractStore, entry_to_item, item_to_entry
from .sql import SQLContractStore

__all__ = [
    "ContractStore",
    "DynamoDBContractStore",
    "SQLContractStore",
    "entry_to_item",
    "item_to_entry",
]
