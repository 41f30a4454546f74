"""Tests for the customer and supplier directory."""

from datetime import date

import pytest

from ledger_engine import Ledger
from ledger_engine.exceptions import (
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Party, PartyKind


class TestCreate:
    """Tests for PartyDirectory.create."""

    def test_creates_customer(self, customer: Party) -> None:
        """Should store a stripped, active customer."""
        assert customer.id is not None
        assert customer.kind == PartyKind.CUSTOMER
        assert customer.tax_id == "B12345678"
        assert customer.active

    def test_codes_unique_per_kind(self, ledger: Ledger, customer: Party) -> None:
        """Should reject a repeated code but allow it for the other kind."""
        with pytest.raises(DuplicateError):
            ledger.parties.create_customer("C001", "Someone Else")

        supplier = ledger.parties.create_supplier("C001", "Acme Ltd")
        assert supplier.kind == PartyKind.SUPPLIER

    @pytest.mark.parametrize(("code", "name"), [("", "Name"), ("C9", "  ")])
    def test_rejects_blank_fields(self, ledger: Ledger, code: str, name: str) -> None:
        """Should require a code and a name."""
        with pytest.raises(ValidationError):
            ledger.parties.create(PartyKind.CUSTOMER, code, name)

    @pytest.mark.parametrize("tax_id", ["1234", "X" * 21, "  B12  "])
    def test_rejects_bad_tax_id_length(self, ledger: Ledger, tax_id: str) -> None:
        """Should require a tax id of 5 to 20 characters when one is given."""
        with pytest.raises(ValidationError) as exc_info:
            ledger.parties.create_customer("C9", "Beta SA", tax_id=tax_id)

        assert exc_info.value.field == "tax_id"
        assert ledger.parties.find_customers() == []

    @pytest.mark.parametrize("tax_id", ["", "   ", "12345", "X" * 20])
    def test_accepts_valid_tax_id(self, ledger: Ledger, tax_id: str) -> None:
        """Should accept a blank tax id or one within the length bounds."""
        party = ledger.parties.create_supplier("S9", "Gamma GmbH", tax_id=tax_id)

        assert party.tax_id == tax_id.strip()


class TestUpdate:
    """Tests for update and deactivate."""

    def test_updates_contact_details(self, ledger: Ledger, customer: Party) -> None:
        """Should persist changed details."""
        customer.email = "billing@acme.test"

        ledger.parties.update(customer)

        assert ledger.parties.get(customer.id).email == "billing@acme.test"

    def test_update_rejects_bad_tax_id(self, ledger: Ledger, customer: Party) -> None:
        """Should keep the stored tax id when the new one is too short."""
        customer.tax_id = "B1"

        with pytest.raises(ValidationError, match="Tax ID"):
            ledger.parties.update(customer)

        assert ledger.parties.get(customer.id).tax_id == "B12345678"

    def test_deactivate(self, ledger: Ledger, customer: Party) -> None:
        """Should drop a deactivated customer from the active list."""
        ledger.parties.deactivate(customer.id)

        assert ledger.parties.find_customers(active_only=True) == []
        assert len(ledger.parties.find_customers()) == 1


class TestDelete:
    """Tests for delete."""

    def test_deletes_unreferenced(self, ledger: Ledger, supplier: Party) -> None:
        """Should delete a party with no invoices."""
        ledger.parties.delete(supplier.id)

        assert ledger.parties.find_by_id(supplier.id) is None

    def test_rejects_referenced(self, ledger: Ledger, customer: Party) -> None:
        """Should refuse to delete a party used by an invoice."""
        ledger.invoices.create_sale_invoice(customer, date(2025, 4, 1))

        with pytest.raises(StateConflictError):
            ledger.parties.delete(customer.id)


class TestResolve:
    """Tests for resolve and search."""

    def test_by_code_and_id(self, ledger: Ledger, customer: Party) -> None:
        """Should accept a code, an id or a record."""
        assert ledger.parties.resolve(PartyKind.CUSTOMER, "C001").id == customer.id
        assert ledger.parties.resolve(PartyKind.CUSTOMER, customer.id).code == "C001"
        assert ledger.parties.resolve(PartyKind.CUSTOMER, customer).name == "Acme Ltd"

    def test_unknown_code(self, ledger: Ledger) -> None:
        """Should raise not-found for an unknown code."""
        with pytest.raises(NotFoundError):
            ledger.parties.resolve(PartyKind.SUPPLIER, "S404")

    def test_wrong_kind(self, ledger: Ledger, supplier: Party) -> None:
        """Should reject a supplier resolved as a customer."""
        with pytest.raises(ValidationError):
            ledger.parties.resolve(PartyKind.CUSTOMER, supplier.id)

    def test_search(self, ledger: Ledger, customer: Party, supplier: Party) -> None:
        """Should match name, code or tax id case-insensitively."""
        assert [p.code for p in ledger.parties.search("acme")] == ["C001"]
        assert [p.code for p in ledger.parties.search("b1234")] == ["C001"]
        assert [p.code for p in ledger.parties.search("s0")] == ["S001"]
        assert ledger.parties.search("office", kind=PartyKind.CUSTOMER) == []
