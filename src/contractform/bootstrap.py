"""Factory helpers for wiring the contract stores from configuration."""

from __future__ import annotations

from sqlalchemy import create_engine

from .config import ContractformConfig, DynamoDBConfig, SQLConfig
from .stores.dynamodb import DynamoDBContractStore
from .stores.sql import SQLContractStore

__all__ = [
    "build_contract_store",
    "build_sql_store",
    "build_stores",
]


def build_contract_store(config: DynamoDBConfig, *, initialize: bool = True) -> DynamoDBContractStore:
    """Instantiate the DynamoDB store described by ``config``.

    The table is described once so a missing table or bad credentials fail
    here instead of on the first request.
    """

    if not config.table:
        raise RuntimeError("dynamodb.table must be configured")
    store = DynamoDBContractStore.from_profile(
        config.profile,
        region_name=config.region,
        endpoint_url=config.endpoint_url,
        table_name=config.table,
        index_name=config.index_name,
    )
    if initialize:
        store.initialize()
    return store


def build_sql_store(config: SQLConfig) -> SQLContractStore:
    """Instantiate the relational store described by ``config``."""

    if not config.dsn:
        raise RuntimeError("sql.dsn must be configured")
    engine = create_engine(config.dsn, echo=config.echo)
    return SQLContractStore(engine)


def build_stores(config: ContractformConfig) -> tuple[DynamoDBContractStore, SQLContractStore]:
    """Construct both stores using ``config``."""

    return build_contract_store(config.dynamodb), build_sql_store(config.sql)
