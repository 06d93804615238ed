"""Cash session commands."""

import click
from cashdrawer.cli.date_filters import resolve_cli_date_range
from cashdrawer.cli.error_handling import handle_domain_error
from cashdrawer.cli.options import operator_option
from cashdrawer.domain.cash_session import CashSessionService
from cashdrawer.domain.entities import BalanceSnapshot, CountedBuckets
from cashdrawer.domain.errors import DomainError
from cashdrawer.utils.amount_parser import parse_amount


def _format_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S UTC") if value is not None else "-"


def _format_optional(value) -> str:
    return f"{value:,.2f}" if value is not None else "-"


def _display_snapshot(snapshot: BalanceSnapshot) -> None:
    """Print the cash breakdown and per-method balances of a snapshot."""
    session = snapshot.session
    click.echo(f"\nCash session {session.id} ({session.status.value})")
    click.echo("-" * 60)
    click.echo(f"Opened:  {_format_time(session.opened_at)} by user {session.opened_by}")
    if session.closed_at is not None:
        click.echo(f"Closed:  {_format_time(session.closed_at)} by user {session.closed_by}")

    click.echo("")
    click.echo(f"{'Opening amount:':20s} {session.opening_amount:>14,.2f}")
    click.echo(f"{'Cash payments:':20s} {snapshot.cash_payments:>14,.2f}")
    click.echo(f"{'Movements in:':20s} {snapshot.movements_in:>14,.2f}")
    click.echo(f"{'Movements out:':20s} {snapshot.movements_out:>14,.2f}")
    click.echo(f"{'Cash expenses:':20s} {snapshot.cash_expenses:>14,.2f}")
    click.echo(f"{'Expected cash:':20s} {snapshot.expected_cash:>14,.2f}")
    if snapshot.counted_cash is not None:
        click.echo(f"{'Counted cash:':20s} {snapshot.counted_cash:>14,.2f}")
        click.echo(f"{'Variance:':20s} {snapshot.cash_variance:>14,.2f}")

    if snapshot.cash_method_id is None:
        click.echo("\nNo active cash payment method; cash payments and expenses are not included.")

    if not snapshot.methods:
        return

    click.echo("\nBy payment method:")
    click.echo(f"{'Method':20s} {'Expected':>12s} {'Counted':>12s} {'Variance':>12s}")
    for method in snapshot.methods:
        name = method.name + (" *" if method.id == snapshot.cash_method_id else "")
        click.echo(
            f"{name:20s} "
            f"{snapshot.method_balances[method.id]:>12,.2f} "
            f"{_format_optional(snapshot.counted_for(method.id)):>12s} "
            f"{_format_optional(snapshot.variance_for(method.id)):>12s}"
        )


@click.group()
def session_group():
    """Manage cash sessions."""
    pass


@session_group.command("open")
@click.argument("amount", metavar="AMOUNT")
@operator_option()
@click.pass_context
def open_session(ctx, amount: str, operator_id: int):
    """Open a cash session with AMOUNT in the drawer.

    Only one session can be open at a time.

    Examples:
        cashdrawer session open 100 --operator 1
        cashdrawer session open "$1,250.00" --operator 1
    """
    db = ctx.obj["db"]
    service = CashSessionService(db)

    try:
        session = service.open_session(parse_amount(amount), operator_id=operator_id)
        click.echo(f"Opened cash session {session.id} with {session.opening_amount:,.2f}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@session_group.command("current")
@click.pass_context
def current_session(ctx):
    """Show the open cash session and its running balance."""
    db = ctx.obj["db"]
    service = CashSessionService(db)

    snapshot = service.get_open_snapshot()
    if snapshot is None:
        click.echo("No open cash session.")
        return

    _display_snapshot(snapshot)


@session_group.command("movement")
@click.argument("session_id", metavar="SESSION_ID", type=int)
@click.argument("kind", metavar="KIND")
@click.argument("amount", metavar="AMOUNT")
@click.option("--note", "-n", help="Reason for the movement")
@operator_option()
@click.pass_context
def add_movement(ctx, session_id: int, kind: str, amount: str, note: str | None, operator_id: int):
    """Record cash put into (KIND "in") or taken out of (KIND "out") the drawer.

    Examples:
        cashdrawer session movement 1 in 20 --operator 1
        cashdrawer session movement 1 out 15.50 --note "Change run" --operator 1
    """
    db = ctx.obj["db"]
    service = CashSessionService(db)

    try:
        movement = service.add_movement(
            session_id=session_id,
            kind=kind,
            amount=parse_amount(amount),
            note=note,
            operator_id=operator_id,
        )
        click.echo(
            f"Recorded {movement.kind.value} movement of {movement.amount:,.2f} "
            f"on session {session_id} (ID: {movement.id})"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@session_group.command("movements")
@click.option("--session", "session_id", type=int, help="Only movements of this session")
@click.pass_context
def list_movements(ctx, session_id: int | None):
    """List cash movements, newest first."""
    db = ctx.obj["db"]
    service = CashSessionService(db)

    movements = service.list_movements(session_id)
    if not movements:
        click.echo("No movements found.")
        return

    click.echo("\nMovements:")
    click.echo("-" * 80)
    for m in movements:
        note = f" | {m.note}" if m.note else ""
        click.echo(
            f"ID: {m.id:3d} | Session {m.session_id:3d} | {_format_time(m.created_at)} | "
            f"{m.kind.value:3s} | {m.amount:>10,.2f}{note}"
        )


@session_group.command("close")
@click.argument("session_id", metavar="SESSION_ID", type=int)
@click.option("--cash", required=True, help="Counted cash in the drawer")
@click.option("--card", default="0", show_default=True, help="Counted card total")
@click.option("--transfer", default="0", show_default=True, help="Counted transfer total")
@click.option("--other", default="0", show_default=True, help="Counted total of other tenders")
@operator_option()
@click.pass_context
def close_session(
    ctx, session_id: int, cash: str, card: str, transfer: str, other: str, operator_id: int
):
    """Close a cash session against the counted totals.

    Card, transfer and other totals are matched to the payment methods of
    the same name.

    Examples:
        cashdrawer session close 1 --cash 295 --operator 1
        cashdrawer session close 1 --cash 295 --card 120.50 --operator 1
    """
    db = ctx.obj["db"]
    service = CashSessionService(db)

    try:
        counted = CountedBuckets(
            cash=parse_amount(cash),
            card=parse_amount(card),
            transfer=parse_amount(transfer),
            other=parse_amount(other),
        )
        snapshot = service.close_session(session_id, counted, operator_id=operator_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Closed cash session {session_id}")
    _display_snapshot(snapshot)


@session_group.command("show")
@click.argument("session_id", metavar="SESSION_ID", type=int)
@click.pass_context
def show_session(ctx, session_id: int):
    """Show the balance snapshot of a session."""
    db = ctx.obj["db"]
    service = CashSessionService(db)

    try:
        _display_snapshot(service.get_snapshot(session_id))
    except DomainError as e:
        handle_domain_error(ctx, e)


@session_group.command("closures")
@click.option("--start-date", "-s", help="Only sessions closed on or after this date")
@click.option("--end-date", "-e", help="Only sessions closed on or before this date")
@click.option("--today", is_flag=True, help="Sessions closed today")
@click.option("--this-week", is_flag=True, help="Sessions closed this week")
@click.option("--this-month", is_flag=True, help="Sessions closed this month")
@click.option("--last-month", is_flag=True, help="Sessions closed last month")
@click.pass_context
def list_closures(
    ctx,
    start_date: str | None,
    end_date: str | None,
    today: bool,
    this_week: bool,
    this_month: bool,
    last_month: bool,
):
    """List closed sessions with their expected and counted cash.

    Dates are UTC calendar days.

    Examples:
        cashdrawer session closures
        cashdrawer session closures --this-month
        cashdrawer session closures --start-date 2024-01-01 --end-date 2024-01-31
    """
    db = ctx.obj["db"]
    service = CashSessionService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "today": today,
            "this-week": this_week,
            "this-month": this_month,
            "last-month": last_month,
        },
    )

    try:
        sessions = service.list_closures(start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not sessions:
        click.echo("No closed sessions found.")
        return

    click.echo("\nClosed sessions:")
    click.echo("-" * 90)
    for s in sessions:
        closure = service.get_closure(s.id)
        expected = closure.expected_cash if closure else None
        counted = closure.counted_cash if closure else None
        variance = closure.cash_variance if closure else None
        click.echo(
            f"ID: {s.id:3d} | Closed {_format_time(s.closed_at)} by user {s.closed_by} | "
            f"Expected {_format_optional(expected)} | Counted {_format_optional(counted)} | "
            f"Variance {_format_optional(variance)}"
        )


def register_commands(cli):
    """Register cash session commands with main CLI."""
    cli.add_command(session_group, name="session")
