"""Payment recording commands."""

import click
from cashdrawer.cli.error_handling import handle_domain_error
from cashdrawer.cli.method_resolution import resolve_method_or_exit
from cashdrawer.domain.entities import PaymentSource
from cashdrawer.domain.errors import DomainError
from cashdrawer.domain.ledger import LedgerService
from cashdrawer.domain.payment_method import PaymentMethodService
from cashdrawer.utils.amount_parser import parse_amount


@click.group()
def payment_group():
    """Record tendered payments."""
    pass


@payment_group.command("record")
@click.argument("amount", metavar="AMOUNT")
@click.option("--method", "-m", required=True, help="Payment method name or ID")
@click.option(
    "--source",
    type=click.Choice([s.value for s in PaymentSource]),
    default=PaymentSource.SALE.value,
    show_default=True,
    help="Whether the payment settles a sale or is a standalone payment",
)
@click.pass_context
def record_payment(ctx, amount: str, method: str, source: str):
    """Record a payment received in the drawer's tenders.

    Examples:
        cashdrawer payment record 50.00 --method Cash
        cashdrawer payment record 120 --method Card --source payment
    """
    db = ctx.obj["db"]
    method_id = resolve_method_or_exit(ctx, PaymentMethodService(db), method)
    service = LedgerService(db)

    try:
        payment_id = service.record_payment(
            payment_method_id=method_id,
            amount=parse_amount(amount),
            source=PaymentSource(source),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded payment {payment_id}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
