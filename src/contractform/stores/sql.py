"""Relational contract store built on SQLAlchemy Core.

Unlike the DynamoDB store, rows are keyed by owner id: the ``Contracts`` table
holds at most one contract per owner and flattens the document into typed
columns. The ``Classes`` table is part of the schema but nothing writes to it
yet.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, NoSuchTableError, SQLAlchemyError

from contractform.errors import (
    ContractAlreadyExistsError,
    StoreUnavailableError,
    UnknownColumnError,
)
from contractform.models import ContractForm

logger = logging.getLogger(__name__)

__all__ = [
    "ACCOUNTS_TABLE",
    "metadata",
    "contracts_table",
    "classes_table",
    "SQLContractStore",
]

ACCOUNTS_TABLE = "Accounts"

metadata = sa.MetaData()

contracts_table = sa.Table(
    "Contracts",
    metadata,
    sa.Column("GoogleID", sa.String, primary_key=True, nullable=False),
    sa.Column("StudentID", sa.String(20)),
    sa.Column("FirstName", sa.String(20)),
    sa.Column("LastName", sa.String(20)),
    sa.Column("Semester", sa.String(6)),
    sa.Column("Year", sa.Integer),
    sa.Column("StudyLocation", sa.String(10)),
    sa.Column("ExpectedGraduationYear", sa.Integer),
    sa.Column("BoxNumber", sa.Integer),
    sa.Column("Goals", sa.Text),
    sa.Column("CertificationCriteria", sa.Text),
    sa.Column("OtherActivities", sa.Text),
    sa.Column("AdvisorName", sa.String(20)),
)

classes_table = sa.Table(
    "Classes",
    metadata,
    sa.Column("G_ID", sa.String, sa.ForeignKey("Contracts.GoogleID"), primary_key=True),
    sa.Column("Sem", sa.String(6), primary_key=True),
    sa.Column("Yr", sa.Integer, primary_key=True),
    sa.Column("CourseCode", sa.Integer),
    sa.Column("CourseName", sa.String(20), primary_key=True),
    sa.Column("Internship", sa.String(5)),
    sa.Column("Session", sa.String(3)),
    sa.Column("InstructorName", sa.String(20)),
)

# (column, ContractForm attribute)
_FORM_COLUMNS: tuple[tuple[str, str], ...] = (
    ("StudentID", "student_id"),
    ("FirstName", "first_name"),
    ("LastName", "last_name"),
    ("Semester", "semester"),
    ("Year", "contract_year"),
    ("StudyLocation", "study_location"),
    ("ExpectedGraduationYear", "expected_grad_year"),
    ("BoxNumber", "box_number"),
    ("Goals", "goals"),
    ("CertificationCriteria", "certification_criteria"),
    ("OtherActivities", "other_activities"),
    ("AdvisorName", "advisor_name"),
)


def _form_to_row(owner_id: str, form: ContractForm) -> Dict[str, Any]:
    row: Dict[str, Any] = {"GoogleID": owner_id}
    for column, attribute in _FORM_COLUMNS:
        row[column] = getattr(form, attribute)
    return row


def _row_to_form(row: Any) -> ContractForm:
    mapping = row._mapping
    return ContractForm(**{attribute: mapping[column] for column, attribute in _FORM_COLUMNS})


class SQLContractStore:
    """Persist one flattened contract per owner in a relational database.

    Every operation opens its own connection from ``engine`` and releases it
    before returning, whether it succeeds or fails.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        """Create the ``Contracts`` and ``Classes`` tables when missing."""

        try:
            metadata.create_all(self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not create contract tables: {exc}") from exc
        logger.info("Contract tables are present on %s", self._engine.url)

    def drop_schema(self) -> None:
        """Drop the contract tables if they exist."""

        try:
            metadata.drop_all(self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not drop contract tables: {exc}") from exc
        logger.info("Dropped contract tables on %s", self._engine.url)

    def save_new_contract(self, owner_id: str, form: ContractForm) -> None:
        """Insert the contract of ``owner_id``.

        Raises :class:`ContractAlreadyExistsError` when the owner already has
        a row.
        """

        if not owner_id:
            raise ValueError("owner_id is required")
        statement = sa.insert(contracts_table).values(_form_to_row(owner_id, form))
        try:
            with self._engine.begin() as connection:
                connection.execute(statement)
        except IntegrityError as exc:
            raise ContractAlreadyExistsError(owner_id) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not save contract for {owner_id!r}: {exc}") from exc
        logger.info("Saved contract row for owner %s", owner_id)

    def load_contract(self, owner_id: str) -> Optional[ContractForm]:
        statement = sa.select(contracts_table).where(contracts_table.c.GoogleID == owner_id)
        try:
            with self._engine.connect() as connection:
                row = connection.execute(statement).first()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not load contract for {owner_id!r}: {exc}") from exc
        if row is None:
            return None
        return _row_to_form(row)

    def _accounts_table(self) -> sa.Table:
        try:
            return sa.Table(ACCOUNTS_TABLE, sa.MetaData(), autoload_with=self._engine)
        except NoSuchTableError as exc:
            raise StoreUnavailableError(f"Table {ACCOUNTS_TABLE!r} does not exist") from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not inspect {ACCOUNTS_TABLE!r}: {exc}") from exc

    def update_account(self, username: str, field: str, value: Any) -> int:
        """Set column ``field`` to ``value`` for the account ``username``.

        Column names cannot be bound as parameters, so ``field`` must name an
        existing column of the reflected ``Accounts`` table. Returns the
        number of rows changed.
        """

        accounts = self._accounts_table()
        if field not in accounts.c:
            raise UnknownColumnError(ACCOUNTS_TABLE, field)
        if "Username" not in accounts.c:
            raise UnknownColumnError(ACCOUNTS_TABLE, "Username")
        statement = (
            sa.update(accounts)
            .where(accounts.c.Username == username)
            .values({accounts.c[field]: value})
        )
        try:
            with self._engine.begin() as connection:
                result = connection.execute(statement)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Could not update account {username!r}: {exc}") from exc
        logger.info("Updated %s.%s for %s (%d rows)", ACCOUNTS_TABLE, field, username, result.rowcount)
        return result.rowcount
