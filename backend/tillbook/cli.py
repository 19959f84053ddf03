# Overview: Flask CLI command groups for bootstrap and inspection.

# Commands (run from the backend directory with FLASK_APP=wsgi.py):
#
# Bootstrap:
# - flask tillbook init-db [--store "Main Store"] [--location "Main Floor"]
#   Create all tables plus a default store and location if none exist.
# - flask tillbook seed-tenders
#   Create the default tenders when the registry is empty.
#
# Staff:
# - flask staff create --name "Ada Obi" --username ada --password "Password123!" --role manager --location-id 1
#   Create a staff member (prompts if options are omitted).
#
# Tills:
# - flask tills list [--status OPEN]
#   List recent tills with optional status filter.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import TillbookError
from .extensions import db
from .formatting import format_currency, format_datetime
from .models import Location, Store
from .models.staff import STAFF_ROLES
from .models.tills import TILL_STATUSES
from .services import staff_service, tender_service, till_service


@click.group('tillbook')
def tillbook_group():
    """Database bootstrap commands."""


@tillbook_group.command('init-db')
@click.option('--store', 'store_name', default='Main Store', help='Default store name')
@click.option('--location', 'location_name', default='Main Floor', help='Default location name')
@with_appcontext
def init_db(store_name, location_name):
    """Create tables and a default store/location. Safe to run repeatedly."""
    db.create_all()
    click.echo("PASS Tables created")

    store = db.session.query(Store).first()
    if not store:
        store = Store(name=store_name)
        db.session.add(store)
        db.session.commit()
        click.echo(f"PASS Created store: {store.name} (ID: {store.id})")
    else:
        click.echo(f"PASS Using existing store: {store.name} (ID: {store.id})")

    location = db.session.query(Location).filter_by(store_id=store.id).first()
    if not location:
        location = Location(store_id=store.id, name=location_name)
        db.session.add(location)
        db.session.commit()
        click.echo(f"PASS Created location: {location.name} (ID: {location.id})")
    else:
        click.echo(f"PASS Using existing location: {location.name} (ID: {location.id})")


@tillbook_group.command('seed-tenders')
@with_appcontext
def seed_tenders():
    """Create the default tenders if the registry is empty."""
    tenders, created = tender_service.seed_default_tenders()
    if created:
        click.echo(f"PASS Created {len(tenders)} default tenders")
    else:
        click.echo(f"WARN  Registry already has {len(tenders)} tenders, skipping")
    for tender in tenders:
        click.echo(f"  {tender.till_order:>2}  {tender.name:<24} {tender.classification}")


@click.group('staff')
def staff_group():
    """Staff bootstrap commands."""


@staff_group.command('create')
@click.option('--name', prompt=True, help='Full name')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(STAFF_ROLES)), default='staff', prompt=True, help='Role')
@click.option('--location-id', type=int, default=None, help='Home location ID')
@with_appcontext
def create_staff_cli(name, username, password, role, location_id):
    """
    Create a staff member.

    Password must have 8+ chars, uppercase, lowercase, digit and special char.
    """
    try:
        staff = staff_service.create_staff(
            {"name": name, "username": username, "role": role, "location_id": location_id},
            password,
        )
    except TillbookError as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Created staff: {staff.name} ({staff.username}) with role '{staff.role}'")


@click.group('tills')
def tills_group():
    """Till inspection commands."""


@tills_group.command('list')
@click.option('--status', type=click.Choice(list(TILL_STATUSES)), default=None, help='Filter by status')
@click.option('--limit', type=int, default=20, help='Max rows')
@with_appcontext
def list_tills_cli(status, limit):
    """List recent tills, newest first."""
    tills = till_service.list_tills(status=status, limit=limit)
    if not tills:
        click.echo("No tills found")
        return

    symbol = current_app.config.get("CURRENCY_SYMBOL", "₦")
    for till in tills:
        closing = format_currency(till.closing_balance_cents, symbol) if till.closing_balance_cents is not None else "-"
        click.echo(
            f"#{till.id:<5} {till.status:<10} {till.staff_name:<20} {till.location_name or '-':<16} "
            f"open {format_currency(till.opening_balance_cents, symbol):>14}  close {closing:>14}  "
            f"{format_datetime(till.opened_at)}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(tillbook_group)
    app.cli.add_command(staff_group)
    app.cli.add_command(tills_group)
