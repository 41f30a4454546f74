"""Tests for financial reports."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_engine import JournalEntryBuilder, Ledger
from ledger_engine.exceptions import NotFoundError, ValidationError
from ledger_engine.models import AccountType, InvoiceStatus, Party


@pytest.fixture
def books(ledger: Ledger, customer: Party) -> Ledger:
    """Capital contribution in January, a taxed sale in April, an expense in May."""
    ledger.journal.record(
        JournalEntryBuilder(date(2025, 1, 10), "Share capital")
        .debit("1.1.02", "1000")
        .credit("3.1", "1000")
        .build(),
        post=True,
    )
    invoice = ledger.invoices.create_sale_invoice(customer, date(2025, 4, 1))
    invoice = ledger.invoices.add_line(invoice, "Widget", 2, "100", 21)
    ledger.invoices.post(invoice.id)
    ledger.journal.record(
        JournalEntryBuilder(date(2025, 5, 5), "Stationery")
        .debit("5.1.02", "50", memo="Pens")
        .credit("1.1.01", "50")
        .build(),
        post=True,
    )
    # Drafts never show up in balances
    ledger.journal.record(
        JournalEntryBuilder(date(2025, 5, 6), "Draft")
        .debit("5.1.01", "999")
        .credit("1.1.01", "999")
        .build()
    )
    return ledger


class TestTrialBalance:
    """Tests for the trial balance."""

    def test_balances(self, books: Ledger) -> None:
        """Should put every non-zero balance on one side and balance."""
        report = books.reports.trial_balance()

        rows = {row.code: (row.debit, row.credit) for row in report.rows}
        assert rows == {
            "1.1.01": (Decimal(0), Decimal("50")),
            "1.1.02": (Decimal("1000"), Decimal(0)),
            "1.1.03": (Decimal("242.00"), Decimal(0)),
            "2.1.02": (Decimal(0), Decimal("42.00")),
            "3.1": (Decimal(0), Decimal("1000")),
            "4.1.01": (Decimal(0), Decimal("200.00")),
            "5.1.02": (Decimal("50"), Decimal(0)),
        }
        assert report.total_debit == Decimal("1292.00")
        assert report.total_credit == Decimal("1292.00")
        assert report.balanced

    def test_as_of(self, books: Ledger) -> None:
        """Should only count entries up to the date."""
        report = books.reports.trial_balance(date(2025, 1, 31))

        assert [row.code for row in report.rows] == ["1.1.02", "3.1"]
        assert report.balanced

    def test_empty_ledger(self, ledger: Ledger) -> None:
        """Should be empty and balanced without postings."""
        report = ledger.reports.trial_balance()

        assert report.rows == []
        assert report.balanced


class TestBalanceSheet:
    """Tests for the balance sheet."""

    def test_assets_equal_liabilities_and_equity(self, books: Ledger) -> None:
        """Should balance once unclosed net income is included."""
        report = books.reports.balance_sheet()

        assert report.total_assets == Decimal("1192.00")
        assert report.total_liabilities == Decimal("42.00")
        assert report.total_equity == Decimal("1000")
        assert report.net_income == Decimal("150.00")
        assert report.total_liabilities_and_equity == Decimal("1192.00")
        assert report.balanced

    def test_serializes_computed_fields(self, books: Ledger) -> None:
        """Should include computed totals in the JSON dump."""
        data = books.reports.balance_sheet().model_dump(mode="json")

        assert data["balanced"] is True
        assert data["total_liabilities_and_equity"] == "1192.00"


class TestIncomeStatement:
    """Tests for the income statement."""

    def test_whole_history(self, books: Ledger) -> None:
        """Should net income against expenses."""
        report = books.reports.income_statement()

        assert report.total_income == Decimal("200.00")
        assert report.total_expenses == Decimal("50")
        assert report.net_income == Decimal("150.00")

    def test_period(self, books: Ledger) -> None:
        """Should restrict to the period."""
        report = books.reports.income_statement(date(2025, 4, 1), date(2025, 4, 30))

        assert [row.code for row in report.income] == ["4.1.01"]
        assert report.expenses == []
        assert report.net_income == Decimal("200.00")


class TestAccountLedger:
    """Tests for the per-account ledger."""

    def test_running_balance(self, books: Ledger) -> None:
        """Should list posted movements with a running balance."""
        report = books.reports.account_ledger("5.1.02")

        assert report.account == "5.1.02 - Administrative Expenses"
        assert [m.description for m in report.movements] == ["Pens"]
        assert report.final_balance == Decimal("50")

    def test_credit_normal_account(self, books: Ledger) -> None:
        """Should grow a liability with credits."""
        report = books.reports.account_ledger("2.1.02")

        assert report.movements[0].credit == Decimal("42.00")
        assert report.final_balance == Decimal("42.00")

    def test_unknown_account(self, books: Ledger) -> None:
        """Should raise not-found for an unknown code."""
        with pytest.raises(NotFoundError):
            books.reports.account_ledger("8.8")


class TestJournal:
    """Tests for the journal report."""

    def test_lists_entries_in_range(self, books: Ledger) -> None:
        """Should include drafts and label accounts."""
        report = books.reports.journal(date(2025, 5, 1), date(2025, 5, 31))

        assert [e.description for e in report.entries] == ["Stationery", "Draft"]
        assert [e.posted for e in report.entries] == [True, False]
        assert report.entries[0].lines[0].account == "5.1.02 - Administrative Expenses"
        assert report.entries[0].total_debit == Decimal("50")


@pytest.fixture
def trading(books: Ledger, customer: Party, supplier: Party) -> Ledger:
    """The books plus a paid sale, a paid purchase, a draft and a cancelled invoice.

    Acme's April invoice (242.00) stays posted and unpaid.
    """
    beta = books.parties.create_customer("C002", "Beta SA")
    sale = books.invoices.create_sale_invoice(beta, date(2025, 3, 15))
    sale = books.invoices.add_line(sale, "Service", 1, "500")
    books.invoices.post(sale.id)
    books.invoices.mark_as_paid(sale.id)

    purchase = books.invoices.create_purchase_invoice(supplier, date(2025, 5, 20))
    purchase = books.invoices.add_line(purchase, "Paper", 10, "5.00", 21)
    books.invoices.post(purchase.id)
    books.invoices.mark_as_paid(purchase.id)

    draft = books.invoices.create_purchase_invoice(supplier, date(2025, 6, 1))
    books.invoices.add_line(draft, "Ink", 1, "20")

    cancelled = books.invoices.create_sale_invoice(customer, date(2025, 6, 2))
    cancelled = books.invoices.add_line(cancelled, "Returned order", 1, "1000")
    books.invoices.cancel(cancelled.id)
    return books


class TestDashboard:
    """Tests for the dashboard figures."""

    def test_summary_stats(self, trading: Ledger) -> None:
        """Should count records, with drafts as pending invoices."""
        stats = trading.reports.summary_stats()

        assert stats.total_accounts == 20
        assert stats.active_accounts == 20
        assert stats.total_customers == 2
        assert stats.total_suppliers == 1
        assert stats.total_invoices == 5
        assert stats.pending_invoices == 1
        assert stats.total_journal_entries == 6

    def test_financial_kpis(self, trading: Ledger) -> None:
        """Should total paid invoices in the period and open ones overall."""
        kpis = trading.reports.financial_kpis(date(2025, 1, 1), date(2025, 12, 31))

        assert kpis.total_revenue == Decimal("500.00")
        assert kpis.total_expenses == Decimal("60.50")
        assert kpis.net_income == Decimal("439.50")
        assert kpis.accounts_receivable == Decimal("242.00")
        assert kpis.accounts_payable == Decimal(0)

    def test_financial_kpis_period(self, trading: Ledger) -> None:
        """Should leave out paid invoices dated before the period."""
        kpis = trading.reports.financial_kpis(date(2025, 4, 1), date(2025, 12, 31))

        assert kpis.total_revenue == Decimal(0)
        assert kpis.total_expenses == Decimal("60.50")
        assert kpis.accounts_receivable == Decimal("242.00")

    def test_financial_kpis_rejects_reversed_range(self, trading: Ledger) -> None:
        """Should refuse an end date before the start date."""
        with pytest.raises(ValidationError):
            trading.reports.financial_kpis(date(2025, 2, 1), date(2025, 1, 1))

    def test_invoices_by_status(self, trading: Ledger) -> None:
        """Should count every status."""
        assert trading.reports.invoices_by_status() == {
            InvoiceStatus.DRAFT: 1,
            InvoiceStatus.POSTED: 1,
            InvoiceStatus.PAID: 2,
            InvoiceStatus.CANCELLED: 1,
        }

    def test_invoices_by_status_empty(self, ledger: Ledger) -> None:
        """Should report zero for every status without invoices."""
        assert set(ledger.reports.invoices_by_status().values()) == {0}

    def test_balances_by_type(self, trading: Ledger) -> None:
        """Should sum stored balances per type and satisfy the accounting equation."""
        balances = trading.reports.balances_by_type()

        assert balances == {
            AccountType.ASSET: Decimal("1692.00"),
            AccountType.LIABILITY: Decimal("92.00"),
            AccountType.EQUITY: Decimal("1000"),
            AccountType.INCOME: Decimal("700.00"),
            AccountType.EXPENSE: Decimal("100.00"),
        }
        assert balances[AccountType.ASSET] == (
            balances[AccountType.LIABILITY]
            + balances[AccountType.EQUITY]
            + balances[AccountType.INCOME]
            - balances[AccountType.EXPENSE]
        )

    def test_balances_by_type_skips_inactive(self, trading: Ledger) -> None:
        """Should leave deactivated accounts out."""
        trading.accounts.deactivate(trading.accounts.get_by_code("1.1.02").id)

        assert trading.reports.balances_by_type()[AccountType.ASSET] == Decimal("692.00")

    def test_monthly_revenue(self, trading: Ledger) -> None:
        """Should place paid sale totals in their month."""
        trend = trading.reports.monthly_revenue(2025)

        assert [m.month for m in trend] == list(range(1, 13))
        assert {m.month: m.revenue for m in trend if m.revenue} == {3: Decimal("500.00")}
        assert all(m.revenue == 0 for m in trading.reports.monthly_revenue(2024))

    def test_top_customers(self, trading: Ledger) -> None:
        """Should rank active customers by non-cancelled invoice totals."""
        top = trading.reports.top_customers()

        assert [(c.code, c.invoice_count, c.total_amount) for c in top] == [
            ("C002", 1, Decimal("500.00")),
            ("C001", 1, Decimal("242.00")),
        ]
        assert [c.code for c in trading.reports.top_customers(1)] == ["C002"]

    def test_top_customers_skips_inactive(self, trading: Ledger) -> None:
        """Should leave deactivated customers out."""
        beta = trading.parties.find_by_code("customer", "C002")
        trading.parties.deactivate(beta.id)

        assert [c.code for c in trading.reports.top_customers()] == ["C001"]

    def test_top_customers_rejects_bad_limit(self, trading: Ledger) -> None:
        """Should require a positive limit."""
        with pytest.raises(ValidationError):
            trading.reports.top_customers(0)

    def test_dashboard(self, trading: Ledger) -> None:
        """Should bundle every figure and serialize to JSON."""
        report = trading.reports.dashboard(date(2025, 1, 1), date(2025, 6, 30), top=1)

        assert report.summary.total_invoices == 5
        assert report.kpis.total_revenue == Decimal("500.00")
        assert report.invoices_by_status[InvoiceStatus.PAID] == 2
        assert len(report.monthly_revenue) == 12
        assert [c.code for c in report.top_customers] == ["C002"]
        data = report.model_dump(mode="json")
        assert data["kpis"]["net_income"] == "439.50"
        assert data["invoices_by_status"]["CANCELLED"] == 1
