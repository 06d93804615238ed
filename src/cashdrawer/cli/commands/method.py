"""Payment method commands."""

import click
from cashdrawer.cli.error_handling import handle_domain_error
from cashdrawer.domain.errors import DomainError
from cashdrawer.domain.payment_method import PaymentMethodService
from cashdrawer.domain.snapshot import resolve_cash_method_id


@click.group()
def method_group():
    """Manage payment methods (tenders)."""
    pass


@method_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--inactive", is_flag=True, help="Create the method as inactive")
@click.option("--cash", "is_cash", is_flag=True, help="Mark the method as the physical cash tender")
@click.pass_context
def add_method(ctx, name: str, inactive: bool, is_cash: bool):
    """Add a payment method.

    The active method named "Cash" is the physical cash tender. Use --cash to
    mark a differently named method as cash when no "Cash" method exists.

    Examples:
        cashdrawer method add "Cash"
        cashdrawer method add "Card"
        cashdrawer method add "Efectivo" --cash
    """
    db = ctx.obj["db"]
    service = PaymentMethodService(db)

    try:
        method_id = service.create_method(name=name, is_active=not inactive, is_cash=is_cash)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created payment method '{name.strip()}' (ID: {method_id})")


@method_group.command("list")
@click.option("--active-only", is_flag=True, help="Only show active methods")
@click.pass_context
def list_methods(ctx, active_only: bool):
    """List payment methods."""
    db = ctx.obj["db"]
    service = PaymentMethodService(db)

    methods = service.list_methods(active_only=active_only)
    if not methods:
        click.echo("No payment methods found.")
        return

    cash_method_id = resolve_cash_method_id(methods)

    click.echo("\nPayment Methods:")
    click.echo("-" * 60)
    for m in methods:
        status = "active" if m.is_active else "inactive"
        marker = " [cash]" if m.id == cash_method_id else ""
        click.echo(f"ID: {m.id:3d} | {m.name:20s} | {status}{marker}")


def register_commands(cli):
    """Register payment method commands with main CLI."""
    cli.add_command(method_group, name="method")
