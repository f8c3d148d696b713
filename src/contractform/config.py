from __future__ import annotations

"""Configuration helpers for the contract stores."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, MutableMapping
import os

import tomllib

from .stores.dynamodb import DEFAULT_INDEX, DEFAULT_PROFILE, DEFAULT_REGION, DEFAULT_TABLE

__all__ = [
    "DynamoDBConfig",
    "SQLConfig",
    "ContractformConfig",
    "load_config",
]


@dataclass(slots=True)
class DynamoDBConfig:
    """Connection settings for the DynamoDB contract table."""

    table: str = DEFAULT_TABLE
    index_name: str = DEFAULT_INDEX
    region: str = DEFAULT_REGION
    profile: str | None = DEFAULT_PROFILE
    endpoint_url: str | None = None


@dataclass(slots=True)
class SQLConfig:
    """Connection settings for the relational contract store."""

    dsn: str = "sqlite:///ContractsNCF.db"
    echo: bool = False


@dataclass(slots=True)
class ContractformConfig:
    """Top level configuration."""

    dynamodb: DynamoDBConfig = field(default_factory=DynamoDBConfig)
    sql: SQLConfig = field(default_factory=SQLConfig)


def _first_existing_path(paths: list[str | os.PathLike[str] | None]) -> Path | None:
    for candidate in paths:
        if not candidate:
            continue
        resolved = Path(candidate).expanduser()
        if resolved.is_file():
            return resolved
    return None


def _load_toml(path: Path | None) -> Mapping[str, Any]:
    if not path:
        return {}
    try:
        data = path.read_bytes()
    except OSError:
        return {}
    try:
        return tomllib.loads(data.decode("utf-8"))
    except tomllib.TOMLDecodeError:
        return {}


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return default


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _section(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = payload.get(name) if isinstance(payload, MutableMapping) else None
    return section if isinstance(section, MutableMapping) else {}


def load_config(path: str | os.PathLike[str] | None = None) -> ContractformConfig:
    """Load configuration from ``path`` or fall back to defaults."""

    env_path = os.getenv("CONTRACTFORM_CONFIG")
    config_path = _first_existing_path([path, env_path])
    payload = _load_toml(config_path)

    dynamodb_section = _section(payload, "dynamodb")
    sql_section = _section(payload, "sql")

    dynamodb = DynamoDBConfig()
    dynamodb.table = _text(dynamodb_section.get("table")) or dynamodb.table
    dynamodb.index_name = _text(dynamodb_section.get("index_name")) or dynamodb.index_name
    dynamodb.region = _text(dynamodb_section.get("region")) or dynamodb.region
    if "profile" in dynamodb_section:
        # An empty profile selects boto3's default credential chain.
        dynamodb.profile = _text(dynamodb_section.get("profile"))
    dynamodb.endpoint_url = _text(dynamodb_section.get("endpoint_url"))

    sql = SQLConfig()
    sql.dsn = _text(sql_section.get("dsn")) or sql.dsn
    sql.echo = _parse_bool(sql_section.get("echo"), sql.echo)

    env_table = os.getenv("CONTRACTFORM_DYNAMODB_TABLE")
    if env_table:
        dynamodb.table = env_table.strip() or dynamodb.table

    env_index = os.getenv("CONTRACTFORM_DYNAMODB_INDEX")
    if env_index:
        dynamodb.index_name = env_index.strip() or dynamodb.index_name

    env_region = os.getenv("CONTRACTFORM_AWS_REGION")
    if env_region:
        dynamodb.region = env_region.strip() or dynamodb.region

    env_profile = os.getenv("CONTRACTFORM_AWS_PROFILE")
    if env_profile is not None:
        dynamodb.profile = env_profile.strip() or None

    env_endpoint = os.getenv("CONTRACTFORM_DYNAMODB_ENDPOINT")
    if env_endpoint:
        dynamodb.endpoint_url = env_endpoint.strip() or None

    env_dsn = os.getenv("CONTRACTFORM_SQL_DSN")
    if env_dsn:
        sql.dsn = env_dsn.strip() or sql.dsn

    return ContractformConfig(dynamodb=dynamodb, sql=sql)
