from __future__ import annotations

from ..extensions import db

# The reserved account that owns bootstrap data. It can never be deleted.
SYSTEM_USER_ID = 0


class User(db.Model):
    """
    User accounts for authentication and attribution.

    The bearer token lives on the account row: it is generated once when the
    account is created and handed back unchanged on every successful login.
    Deleting a user only flips is_active, so audit rows keep resolving.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        db.UniqueConstraint("token", name="uq_users_token"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    # 32 hex characters from secrets.token_hex
    token = db.Column(db.String(64), nullable=False, index=True)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} admin={self.is_admin}>"
