"""Report result models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from ledger_engine.models.accounts import AccountType
from ledger_engine.models.invoices import InvoiceStatus


class AccountBalance(BaseModel):
    """An account with its balance for a report."""

    code: str
    name: str
    account_type: AccountType
    balance: Decimal


class TrialBalanceRow(BaseModel):
    code: str
    name: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)


class TrialBalance(BaseModel):
    """Non-zero balances split into debit and credit columns."""

    as_of: date | None = None
    rows: list[TrialBalanceRow] = Field(default_factory=list)
    total_debit: Decimal = Decimal(0)
    total_credit: Decimal = Decimal(0)

    @computed_field
    @property
    def balanced(self) -> bool:
        return self.total_debit == self.total_credit


class BalanceSheet(BaseModel):
    """Assets against liabilities plus equity.

    ``net_income`` is the unclosed result of income and expense accounts; it
    belongs on the equity side until it is transferred to retained earnings.
    """

    as_of: date | None = None
    assets: list[AccountBalance] = Field(default_factory=list)
    liabilities: list[AccountBalance] = Field(default_factory=list)
    equity: list[AccountBalance] = Field(default_factory=list)
    total_assets: Decimal = Decimal(0)
    total_liabilities: Decimal = Decimal(0)
    total_equity: Decimal = Decimal(0)
    net_income: Decimal = Decimal(0)

    @computed_field
    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity + self.net_income

    @computed_field
    @property
    def balanced(self) -> bool:
        return self.total_assets == self.total_liabilities_and_equity


class IncomeStatement(BaseModel):
    start: date | None = None
    end: date | None = None
    income: list[AccountBalance] = Field(default_factory=list)
    expenses: list[AccountBalance] = Field(default_factory=list)
    total_income: Decimal = Decimal(0)
    total_expenses: Decimal = Decimal(0)

    @computed_field
    @property
    def net_income(self) -> Decimal:
        return self.total_income - self.total_expenses


class LedgerMovement(BaseModel):
    """One posted line on an account with the balance after it."""

    entry_date: date
    entry_number: int
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


class AccountLedgerReport(BaseModel):
    account: str
    start: date | None = None
    end: date | None = None
    movements: list[LedgerMovement] = Field(default_factory=list)
    final_balance: Decimal = Decimal(0)


class JournalLineView(BaseModel):
    account: str
    memo: str = ""
    debit: Decimal
    credit: Decimal


class JournalEntryView(BaseModel):
    entry_number: int
    entry_date: date
    description: str
    reference: str | None = None
    posted: bool
    lines: list[JournalLineView] = Field(default_factory=list)
    total_debit: Decimal
    total_credit: Decimal


class JournalReport(BaseModel):
    start: date
    end: date
    entries: list[JournalEntryView] = Field(default_factory=list)


class SummaryStats(BaseModel):
    """Record counts across the ledger. Pending invoices are drafts."""

    total_accounts: int = 0
    active_accounts: int = 0
    total_customers: int = 0
    total_suppliers: int = 0
    total_invoices: int = 0
    pending_invoices: int = 0
    total_journal_entries: int = 0


class FinancialKPIs(BaseModel):
    """Invoice-based indicators for a period.

    Revenue and expenses are the totals of PAID sale and purchase invoices
    dated in the period. Receivables and payables are the totals of POSTED
    (issued, unpaid) invoices regardless of date.
    """

    start: date
    end: date
    total_revenue: Decimal = Decimal(0)
    total_expenses: Decimal = Decimal(0)
    accounts_receivable: Decimal = Decimal(0)
    accounts_payable: Decimal = Decimal(0)

    @computed_field
    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses


class MonthlyRevenue(BaseModel):
    month: int
    revenue: Decimal = Decimal(0)


class CustomerTotal(BaseModel):
    code: str
    name: str
    invoice_count: int = 0
    total_amount: Decimal = Decimal(0)


class Dashboard(BaseModel):
    """Every dashboard figure computed from one consistent view of the store."""

    summary: SummaryStats
    kpis: FinancialKPIs
    invoices_by_status: dict[InvoiceStatus, int]
    balances_by_type: dict[AccountType, Decimal]
    monthly_revenue: list[MonthlyRevenue]
    top_customers: list[CustomerTotal]
