"""Invoice records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

_HUNDRED = Decimal(100)


class InvoiceType(StrEnum):
    """Commercial direction of an invoice."""

    SALE = "SALE"
    PURCHASE = "PURCHASE"

    @property
    def prefix(self) -> str:
        """Number prefix used when allocating invoice numbers."""
        return "S" if self is InvoiceType.SALE else "P"


class InvoiceStatus(StrEnum):
    """Invoice lifecycle states.

    DRAFT -> POSTED -> PAID
    DRAFT -> CANCELLED
    POSTED -> CANCELLED (posts a reversing entry)
    """

    DRAFT = "DRAFT"
    POSTED = "POSTED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Return True for PAID and CANCELLED."""
        return self in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


@dataclass
class InvoiceLine:
    """A priced line on an invoice.

    ``subtotal``, ``tax_amount`` and ``total`` are derived from the inputs on
    construction, so values read from a ledger file are never trusted.
    """

    description: str
    quantity: Decimal = Decimal(1)
    unit_price: Decimal = Decimal(0)
    tax_rate: Decimal = Decimal(0)
    account_id: int | None = None
    subtotal: Decimal = Decimal(0)
    tax_amount: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    scale: int = 2

    def __post_init__(self) -> None:
        self.recalculate()

    def recalculate(self) -> None:
        """Recompute derived amounts, rounded half-up to ``scale`` places."""
        exponent = Decimal(1).scaleb(-self.scale)
        self.subtotal = (self.quantity * self.unit_price).quantize(
            exponent, rounding=ROUND_HALF_UP
        )
        self.tax_amount = (self.subtotal * self.tax_rate / _HUNDRED).quantize(
            exponent, rounding=ROUND_HALF_UP
        )
        self.total = self.subtotal + self.tax_amount


@dataclass
class Invoice:
    """A sale or purchase invoice.

    Attributes:
        number: Invoice number (e.g., "S-2025-00001")
        invoice_type: SALE (customer) or PURCHASE (supplier)
        status: Lifecycle state
        customer_id: Set for sale invoices
        supplier_id: Set for purchase invoices
        lines: Ordered invoice lines
        journal_entry_id: Entry created when the invoice was posted
    """

    number: str
    invoice_type: InvoiceType
    date: date
    due_date: date | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    customer_id: int | None = None
    supplier_id: int | None = None
    lines: list[InvoiceLine] = field(default_factory=list)
    subtotal: Decimal = Decimal(0)
    tax_amount: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    notes: str = ""
    journal_entry_id: int | None = None
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.calculate_totals()

    def add_line(self, line: InvoiceLine) -> None:
        """Append a line and refresh totals."""
        self.lines.append(line)
        self.calculate_totals()

    def calculate_totals(self) -> None:
        """Recompute subtotal, tax and total as sums over the lines."""
        self.subtotal = sum((line.subtotal for line in self.lines), Decimal(0))
        self.tax_amount = sum((line.tax_amount for line in self.lines), Decimal(0))
        self.total = self.subtotal + self.tax_amount

    @property
    def is_draft(self) -> bool:
        return self.status == InvoiceStatus.DRAFT
