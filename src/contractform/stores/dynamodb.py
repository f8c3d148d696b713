"""DynamoDB-backed contract store.

Contracts live in a single table keyed by ``ContractId`` with a global
secondary index on ``GoogleId`` (the owner id). Uniqueness of new ids and
ownership checks on updates are both enforced server-side through conditional
expressions; this module holds no locks and never retries.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from contractform.errors import (
    ContractIdCollisionError,
    ContractNotFoundError,
    MalformedRecordError,
    OwnerMismatchError,
    StoreUnavailableError,
)
from contractform.ids import new_contract_id
from contractform.models import ContractEntry

from .interface import ContractStore

logger = logging.getLogger(__name__)

__all__ = [
    "CONTRACT_ID",
    "OWNER_ID",
    "CONTRACT_DATA",
    "LAST_MODIFIED",
    "DEFAULT_TABLE",
    "DEFAULT_INDEX",
    "DEFAULT_PROFILE",
    "DEFAULT_REGION",
    "DynamoDBContractStore",
    "entry_to_item",
    "item_to_entry",
]

CONTRACT_ID = "ContractId"
OWNER_ID = "GoogleId"
CONTRACT_DATA = "ContractData"
LAST_MODIFIED = "DateLastModified"

DEFAULT_TABLE = "Contracts"
DEFAULT_INDEX = "GoogleId-index"
DEFAULT_PROFILE = "ContractTableManager"
DEFAULT_REGION = "us-east-1"

_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
_RESOURCE_NOT_FOUND = "ResourceNotFoundException"

AttributeMap = Dict[str, Dict[str, Any]]


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def entry_to_item(entry: ContractEntry) -> AttributeMap:
    """Encode ``entry`` as a DynamoDB attribute map."""

    return {
        CONTRACT_ID: {"S": entry.contract_id},
        OWNER_ID: {"S": entry.owner_id},
        CONTRACT_DATA: {"S": entry.contract_data},
        LAST_MODIFIED: {"N": str(entry.last_modified)},
    }


def _attribute(item: Mapping[str, Any], name: str, type_key: str) -> str:
    value = item.get(name)
    if not isinstance(value, Mapping) or type_key not in value:
        raise MalformedRecordError(
            f"Contract record is missing {type_key} attribute {name!r}", record=item
        )
    return str(value[type_key])


def item_to_entry(item: Optional[Mapping[str, Any]]) -> ContractEntry:
    """Decode a DynamoDB attribute map into a :class:`ContractEntry`.

    All four attributes are required; a partial record is rejected with
    :class:`MalformedRecordError`.
    """

    if not isinstance(item, Mapping):
        raise MalformedRecordError("Contract record is not an attribute map", record=item)
    raw_modified = _attribute(item, LAST_MODIFIED, "N")
    try:
        last_modified = int(raw_modified)
    except ValueError as exc:
        raise MalformedRecordError(
            f"{LAST_MODIFIED} is not an integer: {raw_modified!r}", record=item
        ) from exc
    return ContractEntry(
        contract_id=_attribute(item, CONTRACT_ID, "S"),
        owner_id=_attribute(item, OWNER_ID, "S"),
        contract_data=_attribute(item, CONTRACT_DATA, "S"),
        last_modified=last_modified,
    )


def _items_to_entries(items: Iterable[Mapping[str, Any]]) -> List[ContractEntry]:
    return [item_to_entry(item) for item in items]


class DynamoDBContractStore(ContractStore):
    """Persist :class:`ContractEntry` objects in a DynamoDB table."""

    def __init__(
        self,
        client: Any,
        *,
        table_name: str = DEFAULT_TABLE,
        index_name: str = DEFAULT_INDEX,
        clock: Optional[Callable[[], int]] = None,
        random_bits: Optional[Callable[[int], int]] = None,
    ) -> None:
        self._client = client
        self.table_name = table_name
        self.index_name = index_name
        self._clock = clock or _epoch_millis
        self._random_bits = random_bits
        self._last_timestamp = 0

    @classmethod
    def from_profile(
        cls,
        profile_name: Optional[str] = DEFAULT_PROFILE,
        *,
        region_name: str = DEFAULT_REGION,
        endpoint_url: Optional[str] = None,
        table_name: str = DEFAULT_TABLE,
        index_name: str = DEFAULT_INDEX,
    ) -> "DynamoDBContractStore":
        """Build a store whose client uses the named AWS credentials profile.

        Fails fast when the profile is unknown or resolves no credentials.
        """

        try:
            session = boto3.Session(profile_name=profile_name, region_name=region_name)
        except ProfileNotFound as exc:
            raise StoreUnavailableError(f"AWS profile {profile_name!r} is not configured") from exc
        if session.get_credentials() is None:
            raise StoreUnavailableError(f"No AWS credentials found for profile {profile_name!r}")
        client = session.client(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=BotoConfig(retries={"max_attempts": 1, "mode": "standard"}),
        )
        logger.info("Created DynamoDB client for profile %s in %s", profile_name, region_name)
        return cls(client, table_name=table_name, index_name=index_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _call(self, operation: str, *, passthrough: tuple[str, ...] = (), **kwargs: Any) -> Dict[str, Any]:
        try:
            return getattr(self._client, operation)(**kwargs)
        except ClientError as exc:
            if _error_code(exc) in passthrough:
                raise
            raise StoreUnavailableError(
                f"DynamoDB {operation} on table {self.table_name!r} failed: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise StoreUnavailableError(
                f"DynamoDB {operation} on table {self.table_name!r} failed: {exc}"
            ) from exc

    def _timestamp(self) -> int:
        # Never hand out the same millisecond twice from one store.
        now = int(self._clock())
        if now <= self._last_timestamp:
            now = self._last_timestamp + 1
        self._last_timestamp = now
        return now

    def _new_contract_id(self) -> str:
        if self._random_bits is None:
            return new_contract_id()
        return new_contract_id(self._random_bits)

    # ------------------------------------------------------------------
    # Table lifecycle
    # ------------------------------------------------------------------
    def describe_table(self) -> Dict[str, Any]:
        """Return the DynamoDB description of the backing table."""

        try:
            response = self._call(
                "describe_table",
                passthrough=(_RESOURCE_NOT_FOUND,),
                TableName=self.table_name,
            )
        except ClientError as exc:
            raise StoreUnavailableError(
                f"Could not find table {self.table_name!r}, does it exist?"
            ) from exc
        return dict(response.get("Table", {}))

    def initialize(self) -> "DynamoDBContractStore":
        """Check that the backing table exists before serving requests."""

        description = self.describe_table()
        logger.info(
            "Using DynamoDB table %s (status=%s)",
            self.table_name,
            description.get("TableStatus", "unknown"),
        )
        return self

    # ------------------------------------------------------------------
    # ContractStore API
    # ------------------------------------------------------------------
    def create_contract(self, owner_id: str, data: str) -> str:
        contract_id = self._new_contract_id()
        entry = ContractEntry(
            contract_id=contract_id,
            owner_id=owner_id,
            contract_data=data,
            last_modified=self._timestamp(),
        )
        try:
            self._call(
                "put_item",
                passthrough=(_CONDITIONAL_CHECK_FAILED,),
                TableName=self.table_name,
                Item=entry_to_item(entry),
                ConditionExpression=f"attribute_not_exists({CONTRACT_ID})",
            )
        except ClientError as exc:
            logger.error(
                "Contract id collision on create: %s already exists in %s (owner %s)",
                contract_id,
                self.table_name,
                owner_id,
            )
            raise ContractIdCollisionError(contract_id) from exc
        logger.info("Created contract %s for owner %s", contract_id, owner_id)
        return contract_id

    def _get_item(self, contract_id: str) -> Optional[Mapping[str, Any]]:
        response = self._call(
            "get_item",
            TableName=self.table_name,
            Key={CONTRACT_ID: {"S": contract_id}},
            ConsistentRead=True,
        )
        return response.get("Item")

    def get_by_contract_id(self, contract_id: str) -> ContractEntry:
        logger.debug("Fetching contract %s", contract_id)
        item = self._get_item(contract_id)
        if item is None:
            raise ContractNotFoundError(contract_id)
        return item_to_entry(item)

    def get_contract(self, contract_id: str, owner_id: str) -> Optional[ContractEntry]:
        item = self._get_item(contract_id)
        if item is None:
            return None
        entry = item_to_entry(item)
        if entry.owner_id != owner_id:
            logger.debug("Contract %s is not owned by %s", contract_id, owner_id)
            return None
        return entry

    def get_contracts_by_owner_id(self, owner_id: str) -> List[ContractEntry]:
        logger.debug("Querying %s for owner %s", self.index_name, owner_id)
        response = self._call(
            "query",
            TableName=self.table_name,
            IndexName=self.index_name,
            KeyConditionExpression=f"{OWNER_ID} = :google_id",
            ExpressionAttributeValues={":google_id": {"S": owner_id}},
        )
        if response.get("LastEvaluatedKey"):
            logger.warning("Owner query for %s returned a truncated page", owner_id)
        return _items_to_entries(response.get("Items", []))

    def get_all_contracts(self) -> List[ContractEntry]:
        response = self._call("scan", TableName=self.table_name)
        if response.get("LastEvaluatedKey"):
            logger.warning("Scan of %s returned a truncated page", self.table_name)
        items = response.get("Items", [])
        logger.debug("Scan of %s returned %d contracts", self.table_name, len(items))
        return _items_to_entries(items)

    def update_contract(self, contract_id: str, owner_id: str, new_data: str) -> ContractEntry:
        timestamp = self._timestamp()
        try:
            response = self._call(
                "update_item",
                passthrough=(_CONDITIONAL_CHECK_FAILED,),
                TableName=self.table_name,
                Key={CONTRACT_ID: {"S": contract_id}},
                ConditionExpression=f"{OWNER_ID} = :google_id",
                UpdateExpression=(
                    f"SET {CONTRACT_DATA} = :contract_data, {LAST_MODIFIED} = :date_last_modified"
                ),
                ExpressionAttributeValues={
                    ":google_id": {"S": owner_id},
                    ":contract_data": {"S": new_data},
                    ":date_last_modified": {"N": str(timestamp)},
                },
                ReturnValues="ALL_NEW",
                ReturnValuesOnConditionCheckFailure="ALL_OLD",
            )
        except ClientError as exc:
            # A missing item also fails the owner condition; ALL_OLD tells them apart.
            if exc.response.get("Item") is None:
                raise ContractNotFoundError(contract_id) from exc
            logger.warning("Rejected update of contract %s by owner %s", contract_id, owner_id)
            raise OwnerMismatchError(contract_id, owner_id) from exc
        logger.info("Updated contract %s for owner %s", contract_id, owner_id)
        return item_to_entry(response.get("Attributes"))
