"""Invoice commands."""

import typer

from ledger_engine.cli.config import CLIConfig, OutputFormat, parse_amount, parse_date
from ledger_engine.cli.formatters import format_output, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.exceptions import NotFoundError
from ledger_engine.ledger import Ledger
from ledger_engine.models import Invoice, InvoiceStatus, InvoiceType
from ledger_engine.retry import retry_on_conflict

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["number", "type", "date", "due_date", "party", "status", "subtotal", "tax_amount", "total"]


def _get_invoice(ledger: Ledger, number: str) -> Invoice:
    invoice = ledger.invoices.find_by_number(number)
    if invoice is None:
        raise NotFoundError("Invoice", number)
    return invoice


def _invoice_row(ledger: Ledger, invoice: Invoice) -> dict[str, object]:
    party_id = invoice.customer_id if invoice.invoice_type is InvoiceType.SALE else invoice.supplier_id
    party = ledger.parties.find_by_id(party_id) if party_id is not None else None
    return {
        "number": invoice.number,
        "type": invoice.invoice_type,
        "date": invoice.date,
        "due_date": invoice.due_date,
        "party": party.name if party else "",
        "status": invoice.status,
        "subtotal": invoice.subtotal,
        "tax_amount": invoice.tax_amount,
        "total": invoice.total,
    }


@app.command("create-sale")
def create_sale(
    ctx: typer.Context,
    customer: str = typer.Argument(..., help="Customer code."),
    invoice_date: str = typer.Argument(..., help="Invoice date (YYYY-MM-DD)."),
    due_date: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)."),
) -> None:
    """Create a draft sale invoice."""
    config: CLIConfig = ctx.obj
    day = parse_date(invoice_date)
    due = parse_date(due_date, "--due")

    with open_ledger(config) as ledger:
        invoice = ledger.invoices.create_sale_invoice(customer, day, due)

    print_success(f"Sale invoice {invoice.number} created.")


@app.command("create-purchase")
def create_purchase(
    ctx: typer.Context,
    supplier: str = typer.Argument(..., help="Supplier code."),
    invoice_date: str = typer.Argument(..., help="Invoice date (YYYY-MM-DD)."),
    due_date: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)."),
) -> None:
    """Create a draft purchase invoice."""
    config: CLIConfig = ctx.obj
    day = parse_date(invoice_date)
    due = parse_date(due_date, "--due")

    with open_ledger(config) as ledger:
        invoice = ledger.invoices.create_purchase_invoice(supplier, day, due)

    print_success(f"Purchase invoice {invoice.number} created.")


@app.command("add-line")
def add_line(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
    description: str = typer.Argument(..., help="Line description."),
    quantity: str = typer.Argument(..., help="Quantity."),
    unit_price: str = typer.Argument(..., help="Unit price."),
    tax_rate: str = typer.Option("0", "--tax", "-t", help="Tax rate in percent (0-100)."),
    account: str | None = typer.Option(
        None,
        "--account",
        "-a",
        help="Revenue/expense account code (default from config).",
    ),
) -> None:
    """Add a line to a draft invoice."""
    config: CLIConfig = ctx.obj
    qty = parse_amount(quantity, "quantity")
    price = parse_amount(unit_price, "unit price")
    rate = parse_amount(tax_rate, "tax rate")

    with open_ledger(config) as ledger:
        invoice = ledger.invoices.add_line(
            _get_invoice(ledger, number), description, qty, price, rate, account
        )

    print_success(f"Line added to {number}. Total: {invoice.total:,.2f}")


@app.command("post")
def post_invoice(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
) -> None:
    """Post a draft invoice and its journal entry."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        invoice = retry_on_conflict(ledger.invoices.post)(_get_invoice(ledger, number).id)
        entry = ledger.journal.get(invoice.journal_entry_id)

    print_success(f"Invoice {number} posted with journal entry #{entry.entry_number}.")


@app.command("cancel")
def cancel_invoice(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
    cancel_date: str | None = typer.Option(
        None,
        "--date",
        help="Date of the reversing entry (YYYY-MM-DD, default: today).",
    ),
) -> None:
    """Cancel an invoice, reversing its entry if it was posted."""
    config: CLIConfig = ctx.obj
    day = parse_date(cancel_date)

    with open_ledger(config) as ledger:
        retry_on_conflict(ledger.invoices.cancel)(_get_invoice(ledger, number).id, day)

    print_success(f"Invoice {number} cancelled.")


@app.command("pay")
def mark_as_paid(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
) -> None:
    """Mark a posted invoice as paid."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        retry_on_conflict(ledger.invoices.mark_as_paid)(_get_invoice(ledger, number).id)

    print_success(f"Invoice {number} marked as paid.")


@app.command("delete")
def delete_invoice(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
) -> None:
    """Delete a draft invoice."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.invoices.delete(_get_invoice(ledger, number).id)

    print_success(f"Invoice {number} deleted.")


@app.command("list")
def list_invoices(
    ctx: typer.Context,
    status: InvoiceStatus | None = typer.Option(
        None,
        "--status",
        "-s",
        help="Filter by status.",
        case_sensitive=False,
    ),
    invoice_type: InvoiceType | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Filter by type.",
        case_sensitive=False,
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List invoices."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        invoices = ledger.invoices.find_all()
        if status is not None:
            invoices = [i for i in invoices if i.status == status]
        if invoice_type is not None:
            invoices = [i for i in invoices if i.invoice_type == invoice_type]
        rows = [_invoice_row(ledger, i) for i in invoices]

    format_output(rows, output, title="Invoices", columns=_COLUMNS)


@app.command("show")
def show_invoice(
    ctx: typer.Context,
    number: str = typer.Argument(..., help="Invoice number."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show an invoice with its lines."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        invoice = _get_invoice(ledger, number)
        header = _invoice_row(ledger, invoice)

    if output != OutputFormat.TABLE:
        format_output(invoice, output)
        return

    format_output(header, output, title=f"Invoice {number}", columns=_COLUMNS)
    format_output(
        invoice.lines,
        output,
        title="Lines",
        columns=["description", "quantity", "unit_price", "tax_rate", "subtotal", "tax_amount", "total"],
    )
