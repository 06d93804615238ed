"""CLI helpers for payment method resolution."""

from __future__ import annotations

import click
from cashdrawer.domain.errors import DomainError
from cashdrawer.domain.payment_method import PaymentMethodService
from cashdrawer.utils.method_resolver import resolve_payment_method


def resolve_method_or_exit(
    ctx: click.Context, method_service: PaymentMethodService, method: str | int
) -> int:
    """Resolve payment method name or ID, or exit with a CLI error."""
    try:
        return resolve_payment_method(method_service, method)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
