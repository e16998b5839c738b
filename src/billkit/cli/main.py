"""Main CLI entry point."""

import click
from billkit.config import load_settings
from billkit.database.factories import create_sqlite_database
from billkit.domain.errors import DomainError
from billkit.engine import InvoicingEngine
from billkit.logging_config import configure_logging

# Import and register all commands at module level
from billkit.cli.commands import (
    customer,
    quote,
    invoice,
    payment,
    dashboard,
)

DEFAULT_OWNER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BILLKIT_DB_PATH environment variable)",
    envvar="BILLKIT_DB_PATH",
)
@click.option(
    "--owner",
    default=DEFAULT_OWNER,
    show_default=True,
    help="Owner identity all documents are scoped to (overrides BILLKIT_OWNER)",
    envvar="BILLKIT_OWNER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for JSON logs on stderr (overrides BILLKIT_LOG_LEVEL)",
    envvar="BILLKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, owner: str, log_level: str | None):
    """Billkit - Quotes, invoices and payments.

    Issue quotes, convert accepted quotes into invoices, record payments
    and keep each invoice's status in line with its reconciled payments.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings()
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        configure_logging(level=(log_level or settings.log_level).upper())

        if not owner or not owner.strip():
            click.echo("Error: Owner must not be empty (use --owner or BILLKIT_OWNER)", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path or settings.database_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings
        ctx.obj["engine"] = InvoicingEngine(db, owner.strip(), settings=settings)


# Register all commands
customer.register_commands(cli)
quote.register_commands(cli)
invoice.register_commands(cli)
payment.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
