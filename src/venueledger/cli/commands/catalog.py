"""Catalog commands: seasons, vendors, categories, packages and services."""

import re

import click

from venueledger.cli.error_handling import handle_domain_error
from venueledger.database.mappers import SERVICE_SECTIONS
from venueledger.domain.entities import ExpenseCategory, Package, ServiceSelection
from venueledger.domain.errors import DomainError
from venueledger.domain.ledger import LedgerStore
from venueledger.utils.amount_parser import format_inr, parse_amount


def parse_service_selection(value: str) -> tuple[str, ServiceSelection]:
    """Parse ``SERVICE_ID=VALUE`` into an ID and a typed selection.

    "true"/"false" become booleans, whole numbers become ints and anything
    else is kept as the selected option text.

    Raises:
        ValueError: If the value has no ``=`` or an empty service ID
    """
    service_id, sep, raw = value.partition("=")
    service_id = service_id.strip()
    raw = raw.strip()
    if not sep or not service_id:
        raise ValueError(f"Expected SERVICE_ID=VALUE, got '{value}'")
    if raw.lower() in ("true", "yes"):
        return service_id, True
    if raw.lower() in ("false", "no"):
        return service_id, False
    if re.fullmatch(r"\d+", raw):
        return service_id, int(raw)
    return service_id, raw


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@click.command("seasons")
@click.pass_context
def list_seasons(ctx):
    """List selectable seasons."""
    store: LedgerStore = ctx.obj["store"]
    for season in store.available_seasons():
        click.echo(season)


@click.command("vendors")
@click.option("--category", help="Only vendors in this category ID")
@click.pass_context
def list_vendors(ctx, category: str | None):
    """List known vendors."""
    store: LedgerStore = ctx.obj["store"]
    names = {c.category_id: c.name for c in store.categories}

    vendors = store.vendors
    if category:
        vendors = tuple(v for v in vendors if v.category_id == category)
    if not vendors:
        click.echo("No vendors found.")
        return

    click.echo(f"{'ID':<18} {'Name':<30} {'Category':<30}")
    click.echo("-" * 80)
    for vendor in sorted(vendors, key=lambda v: v.name.lower()):
        category_name = names.get(vendor.category_id, vendor.category_id)
        click.echo(f"{vendor.vendor_id:<18} {vendor.name:<30} {category_name:<30}")


@click.command("categories")
@click.pass_context
def list_categories(ctx):
    """List expense categories."""
    store: LedgerStore = ctx.obj["store"]
    for category in store.categories:
        marker = " (manpower)" if category.requires_manpower else ""
        click.echo(f"{category.category_id:<14} {category.name}{marker}")


@click.command("add-category")
@click.argument("name")
@click.option("--id", "category_id", help="Category ID (defaults to a slug of the name)")
@click.option("--manpower", is_flag=True, help="Expenses in this category need a head count and rate")
@click.pass_context
def add_category(ctx, name: str, category_id: str | None, manpower: bool):
    """Add an expense category.

    Examples:
        venueledger add-category Security --manpower
    """
    store: LedgerStore = ctx.obj["store"]
    category = ExpenseCategory(
        category_id=category_id or _slug(name),
        name=name.strip(),
        requires_manpower=manpower,
    )
    try:
        store.add_category(category)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added category {category.category_id}: {category.name}")


@click.command("packages")
@click.option("--verbose", "-v", is_flag=True, help="Show the services each package includes")
@click.pass_context
def list_packages(ctx, verbose: bool):
    """List booking packages."""
    store: LedgerStore = ctx.obj["store"]
    for package in store.packages:
        click.echo(f"{package.package_id:<10} {package.name:<20} {format_inr(package.price):>12}")
        if verbose:
            for service_id, selection in sorted(package.services.items()):
                click.echo(f"    {service_id}: {selection}")


@click.command("set-package")
@click.argument("package_id")
@click.option("--name", required=True, help="Display name")
@click.option("--price", required=True, help="Package price")
@click.option(
    "--service",
    "services",
    multiple=True,
    help="Included service as SERVICE_ID=VALUE (repeatable)",
)
@click.pass_context
def set_package(ctx, package_id: str, name: str, price: str, services: tuple[str, ...]):
    """Add a package or replace the one with the same ID.

    Examples:
        venueledger set-package platinum --name Platinum --price 250000 \\
            --service lawn=true --service chairs=400
    """
    store: LedgerStore = ctx.obj["store"]
    try:
        package = Package(
            package_id=package_id,
            name=name,
            price=parse_amount(price),
            services=dict(parse_service_selection(s) for s in services),
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    existing = [p for p in store.packages if p.package_id != package_id]
    replaced = len(existing) != len(store.packages)
    try:
        store.set_packages(existing + [package])
    except DomainError as e:
        handle_domain_error(ctx, e)

    verb = "Updated" if replaced else "Added"
    click.echo(f"{verb} package {package_id}: {name} ({format_inr(package.price)})")


@click.command("services")
@click.pass_context
def list_services(ctx):
    """List configurable booking services by section."""
    store: LedgerStore = ctx.obj["store"]
    config = store.services_config
    for section in SERVICE_SECTIONS:
        services = getattr(config, section)
        if not services:
            continue
        click.echo(f"{section.capitalize()}:")
        for service in services:
            extra = f" [{', '.join(service.options)}]" if service.options else ""
            click.echo(f"  {service.service_id:<16} {service.name} ({service.type}){extra}")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(list_seasons)
    cli.add_command(list_vendors)
    cli.add_command(list_categories)
    cli.add_command(add_category)
    cli.add_command(list_packages)
    cli.add_command(set_package)
    cli.add_command(list_services)
