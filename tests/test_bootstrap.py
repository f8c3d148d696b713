from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ProfileNotFound

from contractform.bootstrap import build_contract_store, build_sql_store, build_stores
from contractform.config import ContractformConfig, DynamoDBConfig, SQLConfig
from contractform.errors import StoreUnavailableError
from contractform.stores.dynamodb import DynamoDBContractStore
from contractform.stores.sql import SQLContractStore

from .helpers.dynamodb import FakeDynamoDBClient


class _StubSession:
    instances: list["_StubSession"] = []
    credentials: Any = object()
    client_factory = FakeDynamoDBClient

    def __init__(self, profile_name: str | None = None, region_name: str | None = None) -> None:
        self.profile_name = profile_name
        self.region_name = region_name
        self.client_kwargs: dict[str, Any] = {}
        _StubSession.instances.append(self)

    def get_credentials(self) -> Any:
        return self.credentials

    def client(self, service_name: str, **kwargs: Any) -> Any:
        assert service_name == "dynamodb"
        self.client_kwargs = kwargs
        return _StubSession.client_factory()


@pytest.fixture()
def stub_session(monkeypatch: pytest.MonkeyPatch) -> type[_StubSession]:
    _StubSession.instances = []
    _StubSession.credentials = object()
    _StubSession.client_factory = FakeDynamoDBClient
    monkeypatch.setattr("contractform.stores.dynamodb.boto3.Session", _StubSession)
    return _StubSession


def test_build_contract_store_uses_profile(stub_session) -> None:
    cfg = DynamoDBConfig(profile="ContractTableManager", endpoint_url="http://localhost:8000")

    store = build_contract_store(cfg)

    assert isinstance(store, DynamoDBContractStore)
    session = stub_session.instances[-1]
    assert session.profile_name == "ContractTableManager"
    assert session.region_name == "us-east-1"
    assert session.client_kwargs["endpoint_url"] == "http://localhost:8000"
    assert session.client_kwargs["config"].retries["max_attempts"] == 1


def test_build_contract_store_checks_table(stub_session) -> None:
    stub_session.client_factory = lambda: FakeDynamoDBClient(table_name="SomethingElse")
    with pytest.raises(StoreUnavailableError, match="Contracts"):
        build_contract_store(DynamoDBConfig())


def test_build_contract_store_without_credentials(stub_session) -> None:
    stub_session.credentials = None
    with pytest.raises(StoreUnavailableError, match="credentials"):
        build_contract_store(DynamoDBConfig())


def test_build_contract_store_unknown_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing_profile(**kwargs: Any) -> Any:
        raise ProfileNotFound(profile=kwargs.get("profile_name"))

    monkeypatch.setattr("contractform.stores.dynamodb.boto3.Session", _missing_profile)
    with pytest.raises(StoreUnavailableError, match="ContractTableManager"):
        build_contract_store(DynamoDBConfig())


def test_build_sql_store(tmp_path: Path) -> None:
    pytest.importorskip("sqlalchemy")
    dsn = f"sqlite:///{tmp_path / 'contracts.db'}"

    store = build_sql_store(SQLConfig(dsn=dsn))

    assert isinstance(store, SQLContractStore)
    assert str(store.engine.url) == dsn
    store.engine.dispose()


def test_build_sql_store_requires_dsn() -> None:
    with pytest.raises(RuntimeError):
        build_sql_store(SQLConfig(dsn=""))


def test_build_stores(stub_session, tmp_path: Path) -> None:
    config = ContractformConfig(sql=SQLConfig(dsn=f"sqlite:///{tmp_path / 'contracts.db'}"))

    keyed, relational = build_stores(config)

    assert isinstance(keyed, DynamoDBContractStore)
    assert isinstance(relational, SQLContractStore)
    relational.engine.dispose()
