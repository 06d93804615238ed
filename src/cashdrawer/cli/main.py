"""Main CLI entry point."""

import click
from cashdrawer.cli.error_handling import handle_domain_error
from cashdrawer.database.factories import create_database, create_sqlite_database
from cashdrawer.domain.errors import DomainError
from cashdrawer.logging_config import LOG_FORMATS, configure_logging

# Import and register all commands at module level
from cashdrawer.cli.commands import (
    method,
    session,
    payment,
    expense,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHDRAWER_DB_PATH environment variable)",
    envvar="CASHDRAWER_DB_PATH",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    envvar="CASHDRAWER_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics written to stderr",
)
@click.option(
    "--log-format",
    default="text",
    show_default=True,
    envvar="CASHDRAWER_LOG_FORMAT",
    type=click.Choice(LOG_FORMATS),
    help="Log output format",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_format: str):
    """Cashdrawer - Cash drawer reconciliation for the back office.

    Open a cash session, record cash movements during the shift, and close
    it against the counted drawer to see the expected balance and variance.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level, fmt=log_format)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database()
        db.connect()
        try:
            db.initialize_schema()
        except DomainError as e:
            handle_domain_error(ctx, e)
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
method.register_commands(cli)
session.register_commands(cli)
payment.register_commands(cli)
expense.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
