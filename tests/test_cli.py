from __future__ import annotations

import json
from pathlib import Path

import pytest
import sqlalchemy as sa

from contractform import cli
from contractform.errors import StoreUnavailableError
from contractform.stores.dynamodb import DynamoDBContractStore

from .helpers.dynamodb import FakeDynamoDBClient


@pytest.fixture()
def seeded_store(monkeypatch: pytest.MonkeyPatch) -> DynamoDBContractStore:
    store = DynamoDBContractStore(FakeDynamoDBClient(), clock=lambda: 5)
    store.create_contract("105457190982729373873", json.dumps({"nNumber": "N1"}))
    store.create_contract("someone-else", json.dumps({"nNumber": "N2"}))

    def _build(config, *, initialize: bool = True):  # type: ignore[no-untyped-def]
        return store

    monkeypatch.setattr(cli, "build_contract_store", _build)
    return store


def test_describe_prints_table_and_owner_contracts(seeded_store, capsys) -> None:
    exit_code = cli.main(["describe", "--owner-id", "105457190982729373873"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Table description" in out
    assert '"TableName": "Contracts"' in out
    assert "Contracts for 105457190982729373873: 1" in out
    assert "someone-else" not in out


def test_describe_without_owner(seeded_store, capsys) -> None:
    assert cli.main(["describe"]) == 0
    assert "Contracts for" not in capsys.readouterr().out


def test_store_errors_exit_with_status_one(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    def _unavailable(config, *, initialize: bool = True):  # type: ignore[no-untyped-def]
        raise StoreUnavailableError("Could not find table 'Contracts', does it exist?")

    monkeypatch.setattr(cli, "build_contract_store", _unavailable)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["describe"])

    assert excinfo.value.code == 1
    assert "does it exist" in capsys.readouterr().err


def test_sql_schema_create_and_drop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    db_path = tmp_path / "contracts.db"
    config_path = tmp_path / "contractform.toml"
    config_path.write_text(f"[sql]\ndsn = 'sqlite:///{db_path}'\n", encoding="utf-8")
    monkeypatch.delenv("CONTRACTFORM_SQL_DSN", raising=False)

    assert cli.main(["--config", str(config_path), "sql-schema", "create"]) == 0
    assert "Tables created successfully" in capsys.readouterr().out

    engine = sa.create_engine(f"sqlite:///{db_path}")
    try:
        assert {"Contracts", "Classes"} <= set(sa.inspect(engine).get_table_names())
    finally:
        engine.dispose()

    assert cli.main(["--config", str(config_path), "sql-schema", "drop"]) == 0
    assert "Tables dropped successfully" in capsys.readouterr().out


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
