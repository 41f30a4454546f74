"""Chart of accounts commands."""

import typer
from rich.tree import Tree

from ledger_engine.cli.config import CLIConfig, OutputFormat
from ledger_engine.cli.formatters import console, format_output, print_info, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.models import Account, AccountNode, AccountType

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["code", "name", "account_type", "balance", "active"]


def _account_row(account: Account) -> dict[str, object]:
    return {
        "id": account.id,
        "code": account.code,
        "name": account.name,
        "account_type": account.account_type,
        "parent_id": account.parent_id,
        "depth": account.depth,
        "balance": account.balance,
        "active": account.active,
    }


@app.command("init")
def init_accounts(ctx: typer.Context) -> None:
    """Seed the default chart of accounts and the current fiscal year."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        created = ledger.accounts.initialize_default_accounts()
        fiscal_year = ledger.fiscal_years.initialize_current_year()

    if created:
        print_success(f"Created {len(created)} accounts.")
    else:
        print_info("Chart of accounts already initialized.")
    print_info(f"Current fiscal year: {fiscal_year.year}")


@app.command("create")
def create_account(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Dotted account code (e.g., 1.1.04)."),
    name: str = typer.Argument(..., help="Account name."),
    account_type: AccountType = typer.Argument(..., help="Account type.", case_sensitive=False),
    parent: str | None = typer.Option(
        None,
        "--parent",
        "-p",
        help="Parent account code.",
    ),
    description: str = typer.Option(
        "",
        "--description",
        "-d",
        help="Free-text description.",
    ),
) -> None:
    """Create an account."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        account = ledger.accounts.create_account(
            code, name, account_type, parent, description=description
        )

    print_success(f"Account {account.label} created.")


@app.command("list")
def list_accounts(
    ctx: typer.Context,
    account_type: AccountType | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Only accounts of this type.",
        case_sensitive=False,
    ),
    active: bool = typer.Option(
        False,
        "--active",
        help="Only active accounts.",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List accounts ordered by code."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        if account_type is not None:
            accounts = ledger.accounts.find_by_type(account_type)
        elif active:
            accounts = ledger.accounts.find_active()
        else:
            accounts = ledger.accounts.find_all()

    if active:
        accounts = [a for a in accounts if a.active]

    columns = _COLUMNS if output == OutputFormat.TABLE else None
    format_output([_account_row(a) for a in accounts], output, title="Accounts", columns=columns)


@app.command("show")
def show_account(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Account code."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show one account."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        account = ledger.accounts.get_by_code(code)

    format_output(_account_row(account), output, title=f"Account {account.code}")


@app.command("tree")
def account_tree(ctx: typer.Context) -> None:
    """Show the chart of accounts as a tree with balances."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        forest = ledger.accounts.tree()

    if not forest:
        console.print("[dim]No accounts. Run 'ledger-cli accounts init' first.[/dim]")
        return

    root = Tree("[bold]Chart of Accounts[/bold]")

    def add(branch: Tree, node: AccountNode) -> None:
        account = node.account
        style = "" if account.active else "[dim]"
        label = f"{style}{account.code}  {account.name}"
        if account.balance:
            label += f"  [cyan]{account.balance:,.2f}[/cyan]"
        child = branch.add(label)
        for sub in node.children:
            add(child, sub)

    for node in forest:
        add(root, node)
    console.print(root)


@app.command("deactivate")
def deactivate_account(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Account code."),
) -> None:
    """Deactivate an account (no new lines can use it)."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        account = ledger.accounts.deactivate(ledger.accounts.get_by_code(code).id)

    print_success(f"Account {account.label} deactivated.")


@app.command("activate")
def activate_account(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Account code."),
) -> None:
    """Re-activate an account."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        account = ledger.accounts.activate(ledger.accounts.get_by_code(code).id)

    print_success(f"Account {account.label} activated.")


@app.command("delete")
def delete_account(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Account code."),
) -> None:
    """Delete a leaf account with a zero balance."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.accounts.delete_account(ledger.accounts.get_by_code(code).id)

    print_success(f"Account {code} deleted.")
