"""Diagnostic and administrative command line for the contract stores."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Iterable

from .bootstrap import build_contract_store, build_sql_store
from .config import load_config
from .errors import ContractStoreError

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contractform",
        description="Inspect the contract table or manage the relational schema",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help="Path to the TOML configuration (defaults to CONTRACTFORM_CONFIG)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log store operations at debug level",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    describe = commands.add_parser(
        "describe",
        help="Print the DynamoDB table description and one owner's contracts",
    )
    describe.add_argument("--owner-id", help="Owner whose contracts should be listed")

    schema = commands.add_parser("sql-schema", help="Create or drop the relational tables")
    schema.add_argument("action", choices=("create", "drop"))
    return parser


def _describe(args: argparse.Namespace) -> None:
    config = load_config(args.config_path)
    store = build_contract_store(config.dynamodb)
    description = store.describe_table()
    print(f"Table description: {json.dumps(description, indent=2, default=str)}")
    if args.owner_id:
        entries = store.get_contracts_by_owner_id(args.owner_id)
        print(f"Contracts for {args.owner_id}: {len(entries)}")
        for entry in entries:
            print(json.dumps(asdict(entry)))


def _sql_schema(args: argparse.Namespace) -> None:
    config = load_config(args.config_path)
    store = build_sql_store(config.sql)
    try:
        if args.action == "create":
            store.create_schema()
            print("Tables created successfully")
        else:
            store.drop_schema()
            print("Tables dropped successfully")
    finally:
        store.engine.dispose()


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if not logging.getLogger().handlers:
        level = logging.DEBUG if args.verbose else logging.INFO
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    handlers = {"describe": _describe, "sql-schema": _sql_schema}
    try:
        handlers[args.command](args)
    except ContractStoreError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(1, f"error: {exc}\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
