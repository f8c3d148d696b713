"""Pytest configuration for the contractform test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the in-repo package sources are importable without requiring an
# editable installation.  This mirrors what ``pip install -e .`` does.
ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = ROOT / "src"

if SRC_DIR.exists():
    str_path = str(SRC_DIR)
    if str_path not in sys.path:
        sys.path.insert(0, str_path)

from contractform.stores.dynamodb import DynamoDBContractStore  # noqa: E402

from .helpers.dynamodb import FakeDynamoDBClient  # noqa: E402


class _TickingClock:
    """Clock returning a fixed start time advanced one millisecond per call."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture()
def dynamodb_client() -> FakeDynamoDBClient:
    return FakeDynamoDBClient()


@pytest.fixture()
def clock() -> _TickingClock:
    return _TickingClock()


@pytest.fixture()
def contract_store(dynamodb_client: FakeDynamoDBClient, clock: _TickingClock) -> DynamoDBContractStore:
    return DynamoDBContractStore(dynamodb_client, clock=clock)


@pytest.fixture()
def sql_engine(tmp_path: Path):
    from sqlalchemy import create_engine

    db_path = tmp_path / "contracts.db"
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        yield engine
    finally:
        engine.dispose()
