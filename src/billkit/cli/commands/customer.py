"""Customer management commands."""

import click

from billkit.cli.error_handling import unwrap


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.option("--address", help="Postal address")
@click.pass_context
def create_customer(ctx, name: str, email: str | None, phone: str | None, address: str | None):
    """Create a new customer.

    Examples:
        billkit customer create "Acme Corp"
        billkit customer create "Acme Corp" --email billing@acme.example --phone 03-1234-5678
    """
    engine = ctx.obj["engine"]
    customer = unwrap(ctx, engine.create_customer(name, email=email, phone=phone, address=address))
    click.echo(f"Created customer '{customer.name}' (ID: {customer.id})")


@customer_group.command("list")
@click.option("--search", help="Match name, email or phone")
@click.pass_context
def list_customers(ctx, search: str | None):
    """List customers."""
    engine = ctx.obj["engine"]
    customers = unwrap(ctx, engine.list_customers(search))
    if not customers:
        click.echo("No customers found.")
        return

    click.echo("\nCustomers:")
    click.echo("-" * 80)
    for c in customers:
        click.echo(f"ID: {c.id:3d} | {c.name:30s} | {c.email or '':25s} | {c.phone or ''}")


@customer_group.command("update")
@click.argument("customer_id", type=int)
@click.option("--name", required=True, help="Customer name")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.option("--address", help="Postal address")
@click.pass_context
def update_customer(
    ctx, customer_id: int, name: str, email: str | None, phone: str | None, address: str | None
):
    """Replace a customer's details.

    Fields that are not given are cleared.
    """
    engine = ctx.obj["engine"]
    customer = unwrap(
        ctx, engine.update_customer(customer_id, name, email=email, phone=phone, address=address)
    )
    click.echo(f"Updated customer '{customer.name}' (ID: {customer.id})")


@customer_group.command("delete")
@click.argument("customer_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_customer(ctx, customer_id: int, yes: bool):
    """Delete a customer.

    The customer can only be deleted if no quotes or invoices reference it.
    """
    engine = ctx.obj["engine"]
    if not yes and not click.confirm(f"Are you sure you want to delete customer {customer_id}?"):
        click.echo("Deletion cancelled.")
        return

    unwrap(ctx, engine.delete_customer(customer_id))
    click.echo(f"Deleted customer {customer_id}")


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")
