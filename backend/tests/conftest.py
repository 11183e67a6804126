"""
Pytest fixtures for the inventory tracker backend tests.

Provides an app on an in-memory SQLite database, a test client, seeded
users with their auth headers, and in-memory fakes for the stores and the
email sender used by the service unit tests.
"""

import pytest

from inventory_tracker import create_app
from inventory_tracker.errors import EmailDeliveryError, StorageError
from inventory_tracker.extensions import db
from inventory_tracker.models import User
from inventory_tracker.models.auth import SYSTEM_USER_ID
from inventory_tracker.services import get_services
from inventory_tracker.services.auth_service import hash_password
from inventory_tracker.stores.identity_store import Identity
from inventory_tracker.stores.item_store import ItemDetail


ADMIN_PASSWORD = "AdminPass123"
USER_PASSWORD = "UserPass123"


# =============================================================================
# FAKES
# =============================================================================

class FakeEmailSender:
    """Records sent mail; set fail=True to make every send raise."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to_address, subject, html_body):
        if self.fail:
            raise EmailDeliveryError("smtp relay unavailable")
        self.sent.append({"to": to_address, "subject": subject, "body": html_body})


class FakeItemStore:
    """In-memory item store that records every call in self.calls."""

    def __init__(self):
        self.rows = {}
        self.deleted = set()
        self.audit = []
        self.calls = []
        self.fail_audit = False

    @property
    def writes(self):
        return [name for name, _ in self.calls if name in {"insert", "update", "set_status", "soft_delete"}]

    def exists(self, item_id):
        self.calls.append(("exists", item_id))
        return item_id in self.rows and item_id not in self.deleted

    def search(self, query):
        self.calls.append(("search", query))
        needle = query.lower()
        return [
            item for item_id, item in self.rows.items()
            if item_id not in self.deleted and (
                item_id == query
                or any(needle in value.lower() for value in (item.name, item.category, item.details, item.location))
            )
        ]

    def insert(self, item):
        self.calls.append(("insert", item.id))
        self.rows[item.id] = item
        self.deleted.discard(item.id)

    def update(self, item):
        self.calls.append(("update", item.id))
        item.status = self.rows[item.id].status
        self.rows[item.id] = item

    def set_status(self, item_id, status, actor_id):
        self.calls.append(("set_status", item_id))
        self.rows[item_id].status = status
        self.rows[item_id].last_performed_by = actor_id

    def soft_delete(self, item_id, actor_id):
        self.calls.append(("soft_delete", item_id))
        if item_id not in self.rows or item_id in self.deleted:
            return 0
        self.deleted.add(item_id)
        self.rows[item_id].last_performed_by = actor_id
        return 1

    def append_audit_log(self, actor_id, object_id, action, details=""):
        self.calls.append(("append_audit_log", object_id))
        if self.fail_audit:
            raise StorageError("failed to append audit log")
        self.audit.append((actor_id, object_id, action, details))


class FakeIdentityStore:
    """In-memory identity store keyed by id; soft-deleted users are kept with active=False."""

    def __init__(self):
        self.users = {}
        self.active = {}
        self.updates = []
        self.fail_lookups = False

    def add(self, identity, active=True):
        self.users[identity.id] = identity
        self.active[identity.id] = active
        return identity

    def _active_users(self):
        return [u for uid, u in self.users.items() if self.active[uid]]

    def find_by_username(self, username):
        if self.fail_lookups:
            raise StorageError("failed to look up user by username")
        return next((u for u in self._active_users() if u.username == username), None)

    def find_by_token(self, token):
        if self.fail_lookups:
            raise StorageError("failed to look up user by token")
        return next((u for u in self._active_users() if u.token == token), None)

    def insert(self, username, email, password_hash, token, is_admin):
        identity = Identity(
            id=max(self.users, default=0) + 1,
            username=username,
            email=email,
            is_admin=is_admin,
            token=token,
            password_hash=password_hash,
            valid=True,
        )
        return self.add(identity)

    def update(self, identity):
        self.updates.append(identity.id)
        self.users[identity.id] = identity

    def soft_delete(self, user_id):
        if not self.active.get(user_id):
            return 0
        self.active[user_id] = False
        return 1

    def list_active(self):
        return self._active_users()


def make_item(item_id="1", **overrides) -> ItemDetail:
    fields = {"id": item_id, "name": "foo", "category": "tools", "quantity": 1}
    fields.update(overrides)
    return ItemDetail(**fields)


@pytest.fixture
def item_store():
    return FakeItemStore()


@pytest.fixture
def identity_store():
    return FakeIdentityStore()


@pytest.fixture
def mailer():
    return FakeEmailSender()


# =============================================================================
# APP FIXTURES
# =============================================================================

@pytest.fixture
def app(mailer):
    """Create application on a fresh in-memory database."""
    app = create_app(
        {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
            'BCRYPT_ROUNDS': 4,
            'UPC_URL': '',
            'EMAIL_SMTP_SERV': '',
        },
        email_sender=mailer,
    )

    with app.app_context():
        db.create_all()
        db.session.add(User(
            id=SYSTEM_USER_ID,
            username="system",
            email="system@localhost",
            password_hash=hash_password("SystemPass123", rounds=4),
            token="system-token",
            is_admin=True,
        ))
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def admin_user(services):
    """Active admin created through the user service."""
    return services.users.add_user("admin", "Admin@Example.com", ADMIN_PASSWORD, is_admin=True)


@pytest.fixture
def regular_user(services):
    """Active non-admin user."""
    return services.users.add_user("bob", "bob@example.com", USER_PASSWORD, is_admin=False)


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user.token)


@pytest.fixture
def user_headers(regular_user):
    return auth_headers(regular_user.token)
