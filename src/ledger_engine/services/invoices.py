"""Invoice lifecycle and automatic journal entries."""

import logging
from datetime import date
from decimal import Decimal

from ledger_engine.exceptions import (
    ConsistencyError,
    DuplicateError,
    MissingDefaultAccountError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import (
    Account,
    AccountType,
    Invoice,
    InvoiceLine,
    InvoiceStatus,
    InvoiceType,
    JournalEntry,
    Party,
    PartyKind,
)
from ledger_engine.money import ZERO, to_decimal
from ledger_engine.services.accounts import AccountLedger, AccountRef
from ledger_engine.services.base import BaseService
from ledger_engine.services.journal import JournalEntryEngine
from ledger_engine.services.parties import PartyDirectory, PartyRef
from ledger_engine.storage.store import LedgerStore

logger = logging.getLogger(__name__)

_MAX_TAX_RATE = Decimal(100)
_LINE_ACCOUNT_TYPES = {
    InvoiceType.SALE: (AccountType.INCOME,),
    InvoiceType.PURCHASE: (AccountType.EXPENSE, AccountType.ASSET),
}


class InvoiceLifecycle(BaseService):
    """Drives invoices through DRAFT -> POSTED -> PAID, or to CANCELLED.

    Posting synthesizes one balanced journal entry from the invoice lines
    using the default accounts in ``LedgerConfig``; cancelling a posted
    invoice reverses that entry.
    """

    def __init__(
        self,
        store: LedgerStore,
        config,
        accounts: AccountLedger,
        journal: JournalEntryEngine,
        parties: PartyDirectory,
    ) -> None:
        super().__init__(store, config)
        self.accounts = accounts
        self.journal = journal
        self.parties = parties

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_sale_invoice(
        self, customer: PartyRef, invoice_date: date, due_date: date | None = None
    ) -> Invoice:
        """Create a DRAFT sale invoice for a customer."""
        with self.store.transaction():
            party = self._active_party(PartyKind.CUSTOMER, customer)
            invoice = self._create(InvoiceType.SALE, invoice_date, due_date, customer_id=party.id)
        logger.info("Sales invoice created: %s", invoice.number)
        return invoice

    def create_purchase_invoice(
        self, supplier: PartyRef, invoice_date: date, due_date: date | None = None
    ) -> Invoice:
        """Create a DRAFT purchase invoice for a supplier."""
        with self.store.transaction():
            party = self._active_party(PartyKind.SUPPLIER, supplier)
            invoice = self._create(
                InvoiceType.PURCHASE, invoice_date, due_date, supplier_id=party.id
            )
        logger.info("Purchase invoice created: %s", invoice.number)
        return invoice

    def create(
        self,
        number: str,
        invoice_type: InvoiceType,
        invoice_date: date,
        due_date: date | None = None,
        customer: PartyRef | None = None,
        supplier: PartyRef | None = None,
    ) -> Invoice:
        """Create a DRAFT invoice with a caller-chosen number.

        Sale invoices take exactly a customer and purchase invoices exactly a
        supplier.

        Raises:
            ValidationError: Blank number or wrong party for the type
            DuplicateError: Number already in use
        """
        invoice_type = InvoiceType(invoice_type)
        number = (number or "").strip()
        logger.info("Creating invoice: %s", number)
        if not number:
            raise ValidationError("Invoice number cannot be empty", field="number")

        if invoice_type is InvoiceType.SALE:
            if customer is None or supplier is not None:
                raise ValidationError("A sale invoice needs a customer and no supplier")
        elif supplier is None or customer is not None:
            raise ValidationError("A purchase invoice needs a supplier and no customer")

        with self.store.transaction():
            if self.store.invoices.find_by_number(number) is not None:
                raise DuplicateError("Invoice", number)
            if invoice_type is InvoiceType.SALE:
                party = self._active_party(PartyKind.CUSTOMER, customer)
                invoice = self._create(
                    invoice_type, invoice_date, due_date, number=number, customer_id=party.id
                )
            else:
                party = self._active_party(PartyKind.SUPPLIER, supplier)
                invoice = self._create(
                    invoice_type, invoice_date, due_date, number=number, supplier_id=party.id
                )
        logger.info("Invoice created: %s", invoice.number)
        return invoice

    def _create(
        self,
        invoice_type: InvoiceType,
        invoice_date: date,
        due_date: date | None,
        *,
        number: str | None = None,
        customer_id: int | None = None,
        supplier_id: int | None = None,
    ) -> Invoice:
        if due_date is not None and due_date < invoice_date:
            msg = f"Due date {due_date} is before invoice date {invoice_date}"
            raise ValidationError(msg, field="due_date")

        invoice = Invoice(
            number=number or self._next_number(invoice_type, invoice_date.year),
            invoice_type=invoice_type,
            date=invoice_date,
            due_date=due_date,
            customer_id=customer_id,
            supplier_id=supplier_id,
        )
        self.store.invoices.save(invoice)
        return invoice

    def _next_number(self, invoice_type: InvoiceType, year: int) -> str:
        # Numbers skipped by a rolled-back transaction are reused.
        while True:
            seq = self.store.next_value(f"invoice:{invoice_type.prefix}:{year}")
            number = f"{invoice_type.prefix}-{year}-{seq:05d}"
            if self.store.invoices.find_by_number(number) is None:
                return number

    def _active_party(self, kind: PartyKind, ref: PartyRef) -> Party:
        party = self.parties.resolve(kind, ref)
        if not party.active:
            raise StateConflictError(f"{kind.capitalize()} {party.code} is inactive")
        return party

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def add_line(
        self,
        invoice: Invoice,
        description: str,
        quantity: Decimal | int | str,
        unit_price: Decimal | int | str,
        tax_rate: Decimal | int | str = ZERO,
        account: AccountRef | None = None,
    ) -> Invoice:
        """Add a priced line to a DRAFT invoice and refresh its totals.

        Raises:
            StateConflictError: The invoice is not a draft
            ValidationError: Quantity <= 0, negative price, tax rate outside 0..100
            NotFoundError: Unknown account
            ValidationError: The account type does not suit the invoice type
        """
        logger.debug("Adding line to invoice %s: %s", invoice.number, description)

        if invoice.status != InvoiceStatus.DRAFT:
            logger.error("Cannot modify non-draft invoice: %s", invoice.number)
            raise StateConflictError(f"Can only modify draft invoices ({invoice.number})")

        qty = to_decimal(quantity, field="quantity")
        price = to_decimal(unit_price, field="unit_price")
        rate = to_decimal(tax_rate, field="tax_rate")
        if qty <= 0:
            raise ValidationError(f"Quantity must be positive: {qty}", field="quantity")
        if price < 0:
            raise ValidationError(f"Unit price cannot be negative: {price}", field="unit_price")
        if not ZERO <= rate <= _MAX_TAX_RATE:
            raise ValidationError(f"Tax rate must be between 0 and 100: {rate}", field="tax_rate")

        with self.store.transaction():
            account_id = (
                self._line_account(invoice, account).id if account is not None else None
            )
            invoice.add_line(
                InvoiceLine(
                    description=description,
                    quantity=qty,
                    unit_price=price,
                    tax_rate=rate,
                    account_id=account_id,
                    scale=self.config.money_scale,
                )
            )
            try:
                self.store.invoices.update(invoice)
            except Exception:
                invoice.lines.pop()
                invoice.calculate_totals()
                raise

        return invoice

    def _line_account(self, invoice: Invoice, ref: AccountRef) -> Account:
        """Resolve a line account: INCOME for sales, EXPENSE or ASSET for purchases."""
        account = self.accounts.resolve(ref)
        allowed = _LINE_ACCOUNT_TYPES[invoice.invoice_type]
        if account.account_type not in allowed:
            names = " or ".join(allowed)
            raise ValidationError(
                f"{invoice.invoice_type.capitalize()} lines need an {names} account, "
                f"got {account.code} ({account.account_type})",
                field="account",
            )
        return account

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def post(self, invoice_id: int) -> Invoice:
        """Post a DRAFT invoice, generating and posting its journal entry.

        Raises:
            StateConflictError: The invoice is not a draft
            ConsistencyError: No lines, or a default account is missing
            ValidationError: The invoice total is not positive
        """
        logger.info("Posting invoice ID: %s", invoice_id)

        with self.store.transaction():
            invoice = self.get(invoice_id)

            if invoice.status != InvoiceStatus.DRAFT:
                logger.error("Cannot post non-draft invoice: %s", invoice.number)
                raise StateConflictError(f"Can only post draft invoices ({invoice.number})")
            if not invoice.lines:
                logger.error("Invoice %s has no lines", invoice.number)
                raise ConsistencyError(f"Invoice {invoice.number} has no lines")
            if invoice.total <= 0:
                raise ValidationError(
                    f"Invoice {invoice.number} total must be positive: {invoice.total}",
                    field="total",
                )

            logger.debug("Creating journal entry for invoice %s", invoice.number)
            entry = self.journal.create(invoice.date, f"Invoice {invoice.number}", invoice.number)
            if invoice.invoice_type is InvoiceType.SALE:
                entry = self._sale_lines(invoice, entry)
            else:
                entry = self._purchase_lines(invoice, entry)
            entry = self.journal.post(entry.id)

            invoice.journal_entry_id = entry.id
            invoice.status = InvoiceStatus.POSTED
            self.store.invoices.update(invoice)

        logger.info(
            "Invoice %s posted with journal entry #%s", invoice.number, entry.entry_number
        )
        return invoice

    def _sale_lines(self, invoice: Invoice, entry: JournalEntry) -> JournalEntry:
        receivables = self._default_account("receivables", self.config.receivables_account)
        entry = self.journal.add_line(
            entry, receivables, debit=invoice.total, memo=f"Invoice {invoice.number}"
        )

        revenue: Account | None = None
        for line in invoice.lines:
            if line.subtotal == 0:
                continue
            if line.account_id is not None:
                target = line.account_id
            else:
                revenue = revenue or self._default_account("revenue", self.config.revenue_account)
                target = revenue
            entry = self.journal.add_line(entry, target, credit=line.subtotal, memo=line.description)

        if invoice.tax_amount > 0:
            tax = self._default_account("tax_payable", self.config.tax_payable_account)
            entry = self.journal.add_line(
                entry, tax, credit=invoice.tax_amount, memo=f"Tax Invoice {invoice.number}"
            )
        return entry

    def _purchase_lines(self, invoice: Invoice, entry: JournalEntry) -> JournalEntry:
        expense: Account | None = None
        for line in invoice.lines:
            if line.subtotal == 0:
                continue
            if line.account_id is not None:
                target = line.account_id
            else:
                expense = expense or self._default_account("expense", self.config.expense_account)
                target = expense
            entry = self.journal.add_line(entry, target, debit=line.subtotal, memo=line.description)

        if invoice.tax_amount > 0:
            tax = self._default_account("tax_payable", self.config.tax_payable_account)
            entry = self.journal.add_line(
                entry, tax, debit=invoice.tax_amount, memo=f"Tax Invoice {invoice.number}"
            )

        payables = self._default_account("payables", self.config.payables_account)
        return self.journal.add_line(
            entry, payables, credit=invoice.total, memo=f"Invoice {invoice.number}"
        )

    def _default_account(self, role: str, code: str) -> Account:
        account = self.store.accounts.find_by_code(code)
        if account is None:
            logger.error("Default %s account not found: %s", role, code)
            raise MissingDefaultAccountError(role, code)
        return account

    def cancel(self, invoice_id: int, cancel_date: date | None = None) -> Invoice:
        """Cancel an invoice, reversing its journal entry if it was posted.

        Raises:
            StateConflictError: The invoice is already PAID or CANCELLED
        """
        logger.info("Cancelling invoice ID: %s", invoice_id)

        with self.store.transaction():
            invoice = self.get(invoice_id)
            if invoice.status.is_terminal:
                logger.error("Cannot cancel %s invoice: %s", invoice.status, invoice.number)
                raise StateConflictError(
                    f"Cannot cancel invoice {invoice.number} in status {invoice.status}"
                )

            if invoice.status == InvoiceStatus.POSTED and invoice.journal_entry_id is not None:
                self.journal.reverse(
                    invoice.journal_entry_id,
                    cancel_date,
                    f"Cancellation of invoice {invoice.number}",
                )

            invoice.status = InvoiceStatus.CANCELLED
            self.store.invoices.update(invoice)

        logger.info("Invoice %s cancelled", invoice.number)
        return invoice

    def mark_as_paid(self, invoice_id: int) -> Invoice:
        """Move a POSTED invoice to PAID. No journal entry is recorded."""
        logger.info("Marking invoice ID %s as paid", invoice_id)

        with self.store.transaction():
            invoice = self.get(invoice_id)
            if invoice.status != InvoiceStatus.POSTED:
                msg = (
                    f"Only posted invoices can be marked as paid "
                    f"({invoice.number} is {invoice.status})"
                )
                raise StateConflictError(msg)
            invoice.status = InvoiceStatus.PAID
            self.store.invoices.update(invoice)

        logger.info("Invoice %s marked as paid", invoice.number)
        return invoice

    def delete(self, invoice_id: int) -> None:
        logger.info("Deleting invoice ID: %s", invoice_id)
        with self.store.transaction():
            invoice = self.get(invoice_id)
            if invoice.status != InvoiceStatus.DRAFT:
                raise StateConflictError(f"Cannot delete non-draft invoice {invoice.number}")
            self.store.invoices.delete(invoice)
        logger.info("Invoice deleted: %s", invoice.number)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, invoice_id: int) -> Invoice:
        invoice = self.store.invoices.find_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def find_by_id(self, invoice_id: int) -> Invoice | None:
        return self.store.invoices.find_by_id(invoice_id)

    def find_by_number(self, number: str) -> Invoice | None:
        return self.store.invoices.find_by_number(number)

    def find_all(self) -> list[Invoice]:
        return self.store.invoices.find_all()

    def find_by_status(self, status: InvoiceStatus) -> list[Invoice]:
        return self.store.invoices.find_by_status(InvoiceStatus(status))

    def find_by_type(self, invoice_type: InvoiceType) -> list[Invoice]:
        return self.store.invoices.find_by_type(InvoiceType(invoice_type))

    def find_by_date_range(self, start: date, end: date) -> list[Invoice]:
        return self.store.invoices.find_by_date_range(start, end)
