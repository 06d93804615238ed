"""Expense recording commands."""

import click
from cashdrawer.cli.error_handling import handle_domain_error
from cashdrawer.cli.method_resolution import resolve_method_or_exit
from cashdrawer.cli.options import operator_option
from cashdrawer.domain.errors import DomainError
from cashdrawer.domain.ledger import LedgerService
from cashdrawer.domain.payment_method import PaymentMethodService
from cashdrawer.utils.amount_parser import parse_amount


@click.group()
def expense_group():
    """Record expenses."""
    pass


@expense_group.command("record")
@click.argument("amount", metavar="AMOUNT")
@click.argument("description", metavar="DESCRIPTION")
@click.option("--method", "-m", help="Payment method name or ID the expense was paid with")
@click.option("--notes", "-n", help="Optional notes")
@operator_option(required=False)
@click.pass_context
def record_expense(
    ctx, amount: str, description: str, method: str | None, notes: str | None, operator_id: int | None
):
    """Record an expense.

    Only expenses paid with a payment method count against a cash session;
    expenses paid in cash lower the expected cash in the drawer.

    Examples:
        cashdrawer expense record 10 "Cleaning supplies" --method Cash
        cashdrawer expense record 250 "Rent"
    """
    db = ctx.obj["db"]
    method_id = None
    if method is not None:
        method_id = resolve_method_or_exit(ctx, PaymentMethodService(db), method)
    service = LedgerService(db)

    try:
        expense_id = service.record_expense(
            description=description,
            amount=parse_amount(amount),
            payment_method_id=method_id,
            notes=notes,
            created_by=operator_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded expense {expense_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
