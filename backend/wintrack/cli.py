# Overview: Flask CLI command groups for bootstrap, user inspection and feed checks.

# backend/wintrack/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init
#   Idempotent: creates tables and the default admin account.
#
# Users:
# - python -m flask users list [--role collector]
#   List users with role and status.
# - python -m flask users create --username jdoe --fullname "Juan Dela Cruz" --password "Password123!" --role collector
#   Create a user (prompts if options are omitted).
#
# External feeds:
# - python -m flask feeds check
#   Read every configured EXTERNAL_FEED_URL_n and report rows or the failure.

import click
from flask.cli import with_appcontext

from .extensions import db, get_feed_client
from .models import User
from .permissions import Role
from .services.auth_service import create_user, list_users, PasswordValidationError


DEFAULT_ADMIN_PASSWORD = "Password123!"


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@click.option('--admin-username', default='admin', show_default=True, help='Default admin username')
@with_appcontext
def init_system(admin_username):
    """Create all tables and the default admin (skipped if it exists)."""
    click.echo("START Initializing database...")
    db.create_all()
    click.echo("PASS Tables created")

    existing = db.session.query(User).filter_by(username=admin_username).first()
    if existing:
        click.echo(f"WARN  User '{admin_username}' already exists, skipping...")
        return

    try:
        create_user(
            username=admin_username,
            password=DEFAULT_ADMIN_PASSWORD,
            fullname="System Administrator",
            role=Role.ADMIN.value,
        )
    except (ValueError, PasswordValidationError) as e:
        click.echo(f"FAIL Failed to create '{admin_username}': {e}")
        return

    click.echo(f"PASS Created user: {admin_username} with role 'admin'")
    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    click.echo(f"   {admin_username} / {DEFAULT_ADMIN_PASSWORD}")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--fullname', prompt=True, help='Full name (matched against record collectors)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([r.value for r in Role]), prompt=True, help='Role')
@click.option('--area', help='Service area')
@click.option('--franchise', 'franchise_name', help='Franchise name')
@with_appcontext
def create_user_cli(username, fullname, password, role, area, franchise_name):
    """Create a user."""
    try:
        user = create_user(
            username=username,
            password=password,
            fullname=fullname,
            role=role,
            area=area,
            franchise_name=franchise_name,
        )
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        return
    except ValueError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) with role '{user.role}'")


@users_group.command('list')
@click.option('--role', help='Filter by role')
@click.option('--status', help='Filter by status')
@with_appcontext
def list_users_cli(role, status):
    """List all users with their roles."""
    users = list_users({"role": role, "status": status})

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Username':<20} {'Full name':<30} {'Role':<17} {'Status'}")
    click.echo("="*90)

    for user in users:
        click.echo(f"{user.id:<5} {user.username:<20} {user.fullname:<30} {user.role:<17} {user.status}")

    click.echo("="*90 + "\n")


@click.group('feeds')
def feeds_group():
    """External pending feed commands."""


@feeds_group.command('check')
@with_appcontext
def check_feeds_cli():
    """Read every configured feed once and report the outcome."""
    client = get_feed_client()
    if not client.is_configured:
        click.echo("WARN  No external feeds configured (EXTERNAL_FEED_URL_1 .. EXTERNAL_FEED_URL_10)")
        return

    for outcome in client.fetch_all():
        if outcome.ok:
            click.echo(f"PASS Feed {outcome.source}: {len(outcome.rows)} rows ({outcome.url})")
        else:
            click.echo(f"FAIL Feed {outcome.source}: {outcome.error} ({outcome.url})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(feeds_group)
