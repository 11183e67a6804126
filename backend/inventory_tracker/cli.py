# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/inventory_tracker/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to "inventory_tracker:create_app".
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--admin-username admin --admin-email admin@example.com]
#   Idempotent bootstrap: creates tables, the reserved system account (id 0), and optionally a first admin.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List active users (use --all to include deleted ones).
# - python -m flask users create --username bob --email bob@example.com --password secret [--admin]
#   Create a user (prompts if options are omitted).
# - python -m flask users delete bob
#   Deactivate a user. The system account cannot be deleted.
#
# Audit trail:
# - python -m flask audit list [--item 1234] [--limit 50]
#   Newest audit entries first, optionally for one item.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import InventoryError
from .models import AuditLogEntry, User
from .models.auth import SYSTEM_USER_ID
from .services import get_services
from .services.auth_service import generate_password, generate_token, hash_password


SYSTEM_USERNAME = "system"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--admin-username', default=None, help='Create a first admin account with this username')
@click.option('--admin-email', default=None, help='Email for the first admin account')
@click.option('--admin-password', default=None, help='Password for the first admin (generated if omitted)')
@with_appcontext
def init_system(admin_username, admin_email, admin_password):
    """
    Initialize the database: tables, the system account, and an optional admin.

    The system account (id 0) owns bootstrap data. It gets a random password
    nobody knows and can never be deleted.
    """
    click.echo("START Initializing inventory tracker...")
    db.create_all()

    system_user = db.session.get(User, SYSTEM_USER_ID)
    if system_user is None:
        system_user = User(
            id=SYSTEM_USER_ID,
            username=SYSTEM_USERNAME,
            email="",
            password_hash=hash_password(generate_password(32)),
            token=generate_token(),
            is_admin=True,
            is_active=True,
        )
        db.session.add(system_user)
        db.session.commit()
        click.echo(f"PASS Created system account '{SYSTEM_USERNAME}' (ID: {SYSTEM_USER_ID})")
    else:
        click.echo(f"PASS Using existing system account '{system_user.username}'")

    if admin_username:
        users = get_services().users
        if users.check_by_username(admin_username).valid:
            click.echo(f"PASS Admin '{admin_username}' already exists")
        else:
            password = admin_password or generate_password()
            users.add_user(
                username=admin_username,
                email=admin_email or f"{admin_username}@localhost",
                password=password,
                is_admin=True,
            )
            click.echo(f"PASS Created admin: {admin_username}")
            if not admin_password:
                click.echo(f"     Generated password: {password}")
                click.echo("SECURITY Change this password after the first login!")

    click.echo("DONE System initialized.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--admin', 'is_admin', is_flag=True, help='Grant admin rights')
@with_appcontext
def create_user_cli(username, email, password, is_admin):
    """Create a new user. Passwords are hashed with bcrypt."""
    try:
        identity = get_services().users.add_user(username, email, password, is_admin=is_admin)
    except InventoryError as e:
        click.echo(f"FAIL Failed to create user: {e}")
        return

    role = "admin" if identity.is_admin else "user"
    click.echo(f"PASS Created {role}: {identity.username} ({identity.email}) ID: {identity.id}")


@users_group.command('list')
@click.option('--all', 'include_inactive', is_flag=True, help='Include deleted users')
@with_appcontext
def list_users(include_inactive):
    """List users."""
    query = db.session.query(User)
    if not include_inactive:
        query = query.filter_by(is_active=True)

    users = query.order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<30} {'Active':<8} {'Admin'}")
    click.echo("="*80)

    for user in users:
        active_str = "Yes" if user.is_active else "No"
        admin_str = "Yes" if user.is_admin else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {user.email:<30} {active_str:<8} {admin_str}")

    click.echo("="*80 + "\n")


@users_group.command('delete')
@click.argument('username')
@with_appcontext
def delete_user_cli(username):
    """Deactivate a user by username."""
    users = get_services().users
    target = users.check_by_username(username)
    if not target.valid:
        click.echo(f"FAIL User '{username}' not found or already deleted")
        return

    try:
        users.delete_user(target.id, SYSTEM_USER_ID)
    except InventoryError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Deleted user: {username}")


# =============================================================================
# AUDIT INSPECTION
# =============================================================================

@click.group('audit')
def audit_group():
    """Audit trail inspection."""


@audit_group.command('list')
@click.option('--item', 'item_id', default=None, help='Only entries for this item id')
@click.option('--limit', default=50, show_default=True, help='Newest N entries')
@with_appcontext
def list_audit(item_id, limit):
    """List audit entries, newest first."""
    query = db.session.query(AuditLogEntry)
    if item_id:
        query = query.filter_by(object_id=item_id)

    entries = query.order_by(AuditLogEntry.occurred_at.desc(), AuditLogEntry.id.desc()).limit(limit).all()
    if not entries:
        click.echo("No audit entries found.")
        return

    for entry in entries:
        row = entry.to_dict()
        click.echo(
            f"{row['occurred_at']}  user={row['user_id']:<5} item={row['object_id']:<20} "
            f"{row['action']:<12} {row['details']}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(audit_group)
