"""Financial reports computed from accounts and posted entries."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from ledger_engine.exceptions import NotFoundError, ValidationError
from ledger_engine.models import (
    Account,
    AccountType,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    PartyKind,
)
from ledger_engine.models.reports import (
    AccountBalance,
    AccountLedgerReport,
    BalanceSheet,
    CustomerTotal,
    Dashboard,
    FinancialKPIs,
    IncomeStatement,
    JournalEntryView,
    JournalLineView,
    JournalReport,
    LedgerMovement,
    MonthlyRevenue,
    SummaryStats,
    TrialBalance,
    TrialBalanceRow,
)
from ledger_engine.money import ZERO
from ledger_engine.services.accounts import AccountRef
from ledger_engine.services.base import BaseService

logger = logging.getLogger(__name__)


class ReportService(BaseService):
    """Read-only reports.

    Without dates every report uses the stored account balances. With
    dates, balances are rebuilt from posted journal lines in the range.
    """

    def trial_balance(self, as_of: date | None = None) -> TrialBalance:
        """List non-zero balances in debit/credit columns.

        A positive balance sits on the account's natural side (debit for
        ASSET/EXPENSE, credit for the others); a negative one flips side.
        """
        logger.debug("Building trial balance as of %s", as_of)
        report = TrialBalance(as_of=as_of)
        for account, balance in self._balances(end=as_of):
            if balance == 0:
                continue
            row = TrialBalanceRow(code=account.code, name=account.name)
            debit_side = account.account_type.increases_with_debit == (balance > 0)
            if debit_side:
                row.debit = abs(balance)
                report.total_debit += row.debit
            else:
                row.credit = abs(balance)
                report.total_credit += row.credit
            report.rows.append(row)
        return report

    def balance_sheet(self, as_of: date | None = None) -> BalanceSheet:
        logger.debug("Building balance sheet as of %s", as_of)
        grouped = self._grouped(end=as_of)
        report = BalanceSheet(
            as_of=as_of,
            assets=grouped[AccountType.ASSET],
            liabilities=grouped[AccountType.LIABILITY],
            equity=grouped[AccountType.EQUITY],
        )
        report.total_assets = _total(report.assets)
        report.total_liabilities = _total(report.liabilities)
        report.total_equity = _total(report.equity)
        report.net_income = _total(grouped[AccountType.INCOME]) - _total(
            grouped[AccountType.EXPENSE]
        )
        return report

    def income_statement(
        self, start: date | None = None, end: date | None = None
    ) -> IncomeStatement:
        logger.debug("Building income statement from %s to %s", start, end)
        grouped = self._grouped(start=start, end=end)
        report = IncomeStatement(
            start=start,
            end=end,
            income=grouped[AccountType.INCOME],
            expenses=grouped[AccountType.EXPENSE],
        )
        report.total_income = _total(report.income)
        report.total_expenses = _total(report.expenses)
        return report

    def account_ledger(
        self,
        account: AccountRef,
        start: date | None = None,
        end: date | None = None,
    ) -> AccountLedgerReport:
        """Posted movements on one account with a running balance.

        The running balance starts at zero at ``start``.
        """
        target = self._resolve(account)
        logger.debug("Building ledger for %s from %s to %s", target.code, start, end)
        report = AccountLedgerReport(account=f"{target.code} - {target.name}", start=start, end=end)

        running = ZERO
        for entry, line in self.store.journal_entries.find_lines_by_account(target.id, start, end):
            running += target.account_type.balance_change(line.debit, line.credit)
            report.movements.append(
                LedgerMovement(
                    entry_date=entry.date,
                    entry_number=entry.entry_number,
                    description=line.memo or entry.description,
                    debit=line.debit,
                    credit=line.credit,
                    balance=running,
                )
            )
        report.final_balance = running
        return report

    def journal(self, start: date, end: date) -> JournalReport:
        """Every entry dated in the range, posted or not, with its lines."""
        logger.debug("Building journal from %s to %s", start, end)
        labels = {a.id: a.label for a in self.store.accounts.find_all()}
        report = JournalReport(start=start, end=end)
        for entry in self.store.journal_entries.find_by_date_range(start, end):
            report.entries.append(
                JournalEntryView(
                    entry_number=entry.entry_number,
                    entry_date=entry.date,
                    description=entry.description,
                    reference=entry.reference,
                    posted=entry.posted,
                    lines=[
                        JournalLineView(
                            account=labels.get(line.account_id, str(line.account_id)),
                            memo=line.memo,
                            debit=line.debit,
                            credit=line.credit,
                        )
                        for line in entry.lines
                    ],
                    total_debit=entry.total_debit,
                    total_credit=entry.total_credit,
                )
            )
        return report

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def summary_stats(self) -> SummaryStats:
        logger.debug("Generating dashboard summary statistics")
        with self.store.lock:
            accounts = self.store.accounts.find_all()
            return SummaryStats(
                total_accounts=len(accounts),
                active_accounts=sum(1 for a in accounts if a.active),
                total_customers=len(self.store.parties.find_by_kind(PartyKind.CUSTOMER)),
                total_suppliers=len(self.store.parties.find_by_kind(PartyKind.SUPPLIER)),
                total_invoices=self.store.invoices.count(),
                pending_invoices=len(self.store.invoices.find_by_status(InvoiceStatus.DRAFT)),
                total_journal_entries=self.store.journal_entries.count(),
            )

    def financial_kpis(self, start: date, end: date) -> FinancialKPIs:
        """Paid revenue and expenses in a period plus open receivables and payables."""
        logger.debug("Calculating financial KPIs from %s to %s", start, end)
        _check_range(start, end)
        with self.store.lock:
            return FinancialKPIs(
                start=start,
                end=end,
                total_revenue=_sum_totals(self._paid(InvoiceType.SALE, start, end)),
                total_expenses=_sum_totals(self._paid(InvoiceType.PURCHASE, start, end)),
                accounts_receivable=_sum_totals(self._outstanding(InvoiceType.SALE)),
                accounts_payable=_sum_totals(self._outstanding(InvoiceType.PURCHASE)),
            )

    def invoices_by_status(self) -> dict[InvoiceStatus, int]:
        """Invoice count for every status, zero included."""
        counts = dict.fromkeys(InvoiceStatus, 0)
        for invoice in self.store.invoices.find_all():
            counts[invoice.status] += 1
        return counts

    def balances_by_type(self) -> dict[AccountType, Decimal]:
        """Sum of stored balances of active accounts, per account type."""
        totals = dict.fromkeys(AccountType, ZERO)
        for account in self.store.accounts.find_active():
            totals[account.account_type] += account.balance
        return totals

    def monthly_revenue(self, year: int) -> list[MonthlyRevenue]:
        """Paid sale invoice totals for each month of a year."""
        logger.debug("Getting monthly revenue trend for %s", year)
        revenue = dict.fromkeys(range(1, 13), ZERO)
        for invoice in self._paid(InvoiceType.SALE, date(year, 1, 1), date(year, 12, 31)):
            revenue[invoice.date.month] += invoice.total
        return [MonthlyRevenue(month=month, revenue=amount) for month, amount in revenue.items()]

    def top_customers(self, limit: int = 5) -> list[CustomerTotal]:
        """Active customers ranked by the total of their non-cancelled sale invoices."""
        if limit <= 0:
            raise ValidationError(f"Limit must be positive: {limit}", field="limit")
        logger.debug("Getting top %s customers", limit)

        with self.store.lock:
            customers = self.store.parties.find_by_kind(PartyKind.CUSTOMER, active_only=True)
            invoices = [
                i
                for i in self.store.invoices.find_by_type(InvoiceType.SALE)
                if i.status != InvoiceStatus.CANCELLED
            ]

        rows = []
        for customer in customers:
            own = [i for i in invoices if i.customer_id == customer.id]
            rows.append(
                CustomerTotal(
                    code=customer.code,
                    name=customer.name,
                    invoice_count=len(own),
                    total_amount=_sum_totals(own),
                )
            )
        rows.sort(key=lambda row: (-row.total_amount, row.code))
        return rows[:limit]

    def dashboard(self, start: date, end: date, *, top: int = 5) -> Dashboard:
        """All dashboard figures at once; the revenue trend covers ``end.year``."""
        with self.store.lock:
            return Dashboard(
                summary=self.summary_stats(),
                kpis=self.financial_kpis(start, end),
                invoices_by_status=self.invoices_by_status(),
                balances_by_type=self.balances_by_type(),
                monthly_revenue=self.monthly_revenue(end.year),
                top_customers=self.top_customers(top),
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, ref: AccountRef) -> Account:
        if isinstance(ref, Account):
            return self.store.accounts.get(ref.id)
        if isinstance(ref, int):
            return self.store.accounts.get(ref)
        account = self.store.accounts.find_by_code(ref)
        if account is None:
            raise NotFoundError("Account", ref)
        return account

    def _balances(
        self, start: date | None = None, end: date | None = None
    ) -> list[tuple[Account, Decimal]]:
        accounts = self.store.accounts.find_all()
        if start is None and end is None:
            return [(a, a.balance) for a in accounts]

        movements: defaultdict[int, Decimal] = defaultdict(Decimal)
        by_id = {a.id: a for a in accounts}
        for entry in self.store.journal_entries.find_all():
            if not entry.posted:
                continue
            if (start is not None and entry.date < start) or (end is not None and entry.date > end):
                continue
            for line in entry.lines:
                account = by_id.get(line.account_id)
                if account is not None:
                    movements[account.id] += account.account_type.balance_change(
                        line.debit, line.credit
                    )
        return [(a, movements.get(a.id, ZERO)) for a in accounts]

    def _paid(self, invoice_type: InvoiceType, start: date, end: date) -> list[Invoice]:
        return [
            i
            for i in self.store.invoices.find_by_date_range(start, end)
            if i.invoice_type == invoice_type and i.status == InvoiceStatus.PAID
        ]

    def _outstanding(self, invoice_type: InvoiceType) -> list[Invoice]:
        return [
            i
            for i in self.store.invoices.find_by_status(InvoiceStatus.POSTED)
            if i.invoice_type == invoice_type
        ]

    def _grouped(
        self, start: date | None = None, end: date | None = None
    ) -> dict[AccountType, list[AccountBalance]]:
        grouped: dict[AccountType, list[AccountBalance]] = {t: [] for t in AccountType}
        for account, balance in self._balances(start, end):
            if balance != 0:
                grouped[account.account_type].append(
                    AccountBalance(
                        code=account.code,
                        name=account.name,
                        account_type=account.account_type,
                        balance=balance,
                    )
                )
        return grouped


def _total(rows: list[AccountBalance]) -> Decimal:
    return sum((row.balance for row in rows), ZERO)


def _sum_totals(invoices: list[Invoice]) -> Decimal:
    return sum((invoice.total for invoice in invoices), ZERO)


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError(f"End date {end} is before start date {start}", field="end")
