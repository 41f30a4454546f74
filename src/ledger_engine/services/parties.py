"""Customer and supplier directory."""

import logging

from ledger_engine.exceptions import (
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Party, PartyKind
from ledger_engine.services.base import BaseService

logger = logging.getLogger(__name__)

PartyRef = Party | int | str
"""A party given as a record, an id, or a code."""

TAX_ID_LENGTH = (5, 20)


def _check_tax_id(tax_id: str) -> str:
    """Strip a tax id and check its length; blank means none."""
    tax_id = (tax_id or "").strip()
    low, high = TAX_ID_LENGTH
    if tax_id and not low <= len(tax_id) <= high:
        raise ValidationError(
            f"Tax ID must be between {low} and {high} characters", field="tax_id"
        )
    return tax_id


class PartyDirectory(BaseService):
    """Keeps the customers and suppliers invoices are issued to."""

    def create(
        self,
        kind: PartyKind,
        code: str,
        name: str,
        *,
        tax_id: str = "",
        email: str = "",
        phone: str = "",
        address: str = "",
    ) -> Party:
        """Register a customer or supplier.

        Codes are unique per kind; a customer and a supplier may share one.

        Raises:
            ValidationError: Blank code or name, or a malformed tax id
            DuplicateError: Code already used by a party of the same kind
        """
        kind = PartyKind(kind)
        code = (code or "").strip()
        name = (name or "").strip()
        logger.info("Creating %s: %s - %s", kind, code, name)

        if not code:
            raise ValidationError(f"{kind.capitalize()} code cannot be empty", field="code")
        if not name:
            raise ValidationError(f"{kind.capitalize()} name cannot be empty", field="name")
        tax_id = _check_tax_id(tax_id)

        with self.store.transaction():
            if self.store.parties.find_by_code(kind, code) is not None:
                raise DuplicateError(kind.capitalize(), code)
            party = Party(
                kind=kind,
                code=code,
                name=name,
                tax_id=tax_id,
                email=email,
                phone=phone,
                address=address,
            )
            self.store.parties.save(party)

        logger.info("%s created: %s (ID: %s)", kind.capitalize(), code, party.id)
        return party

    def create_customer(self, code: str, name: str, **details: str) -> Party:
        return self.create(PartyKind.CUSTOMER, code, name, **details)

    def create_supplier(self, code: str, name: str, **details: str) -> Party:
        return self.create(PartyKind.SUPPLIER, code, name, **details)

    def update(self, party: Party) -> Party:
        """Persist contact detail changes."""
        if not party.name.strip():
            raise ValidationError("Party name cannot be empty", field="name")
        party.tax_id = _check_tax_id(party.tax_id)
        with self.store.transaction():
            other = self.store.parties.find_by_code(party.kind, party.code)
            if other is not None and other.id != party.id:
                raise DuplicateError(party.kind.capitalize(), party.code)
            self.store.parties.update(party)
        return party

    def deactivate(self, party_id: int) -> Party:
        logger.info("Deactivating party with ID: %s", party_id)
        with self.store.transaction():
            party = self.get(party_id)
            party.active = False
            self.store.parties.update(party)
        return party

    def delete(self, party_id: int) -> None:
        """Delete a party that no invoice references."""
        with self.store.transaction():
            party = self.get(party_id)
            field_name = "customer_id" if party.kind == PartyKind.CUSTOMER else "supplier_id"
            if any(getattr(i, field_name) == party.id for i in self.store.invoices.find_all()):
                msg = f"Cannot delete {party.kind} {party.code} referenced by invoices"
                raise StateConflictError(msg)
            self.store.parties.delete(party)
        logger.info("Party deleted: %s", party.code)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve(self, kind: PartyKind, ref: PartyRef) -> Party:
        """Load a party of the given kind from a record, an id, or a code.

        Raises:
            NotFoundError: No such party
            ValidationError: The party exists but is of the other kind
        """
        if isinstance(ref, Party):
            party = self.get(ref.id) if ref.id is not None else None
        elif isinstance(ref, int):
            party = self.get(ref)
        else:
            party = self.store.parties.find_by_code(kind, ref)
        if party is None:
            raise NotFoundError(PartyKind(kind).capitalize(), ref)
        if party.kind != kind:
            raise ValidationError(f"{party.code} is a {party.kind}, not a {kind}", field="party")
        return party

    def get(self, party_id: int) -> Party:
        return self.store.parties.get(party_id)

    def find_by_id(self, party_id: int) -> Party | None:
        return self.store.parties.find_by_id(party_id)

    def find_by_code(self, kind: PartyKind, code: str) -> Party | None:
        return self.store.parties.find_by_code(PartyKind(kind), code)

    def find_customers(self, *, active_only: bool = False) -> list[Party]:
        return self.store.parties.find_by_kind(PartyKind.CUSTOMER, active_only=active_only)

    def find_suppliers(self, *, active_only: bool = False) -> list[Party]:
        return self.store.parties.find_by_kind(PartyKind.SUPPLIER, active_only=active_only)

    def search(self, fragment: str, kind: PartyKind | None = None) -> list[Party]:
        """Case-insensitive match on name, code or tax id."""
        needle = fragment.lower()
        kinds = [PartyKind(kind)] if kind else list(PartyKind)
        return [
            p
            for k in kinds
            for p in self.store.parties.find_by_kind(k)
            if needle in p.name.lower() or needle in p.code.lower() or needle in p.tax_id.lower()
        ]
