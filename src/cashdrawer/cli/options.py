"""Shared CLI options."""

import click


def operator_option(required: bool = True):
    """Option carrying the ID of the user performing the command."""
    return click.option(
        "--operator",
        "operator_id",
        type=int,
        envvar="CASHDRAWER_OPERATOR_ID",
        required=required,
        help="Operator user ID (defaults to CASHDRAWER_OPERATOR_ID environment variable)",
    )
