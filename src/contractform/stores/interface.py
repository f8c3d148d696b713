"""Interface implemented by keyed contract stores."""

from __future__ import annotations

from typing import List, Optional, Protocol

from contractform.models import ContractEntry


class ContractStore(Protocol):
    """Operations exposed by a store of contracts keyed by contract id."""

    def create_contract(self, owner_id: str, data: str) -> str:
        """Persist a new contract for ``owner_id`` and return its id."""
        ...

    def get_by_contract_id(self, contract_id: str) -> ContractEntry:
        """Return the contract stored under ``contract_id``.

        Raises :class:`~contractform.errors.ContractNotFoundError` when absent.
        """
        ...

    def get_contract(self, contract_id: str, owner_id: str) -> Optional[ContractEntry]:
        """Return the contract only when it exists and belongs to ``owner_id``."""
        ...

    def get_contracts_by_owner_id(self, owner_id: str) -> List[ContractEntry]:
        ...

    def get_all_contracts(self) -> List[ContractEntry]:
        ...

    def update_contract(self, contract_id: str, owner_id: str, new_data: str) -> ContractEntry:
        """Replace the payload of a contract held by ``owner_id``."""
        ...


__all__ = ["ContractStore"]
