# Overview: Identity persistence contract and its SQLAlchemy implementation.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import StorageError, UserAlreadyExistsError
from ..models import User


logger = logging.getLogger(__name__)


@dataclass
class Identity:
    """
    A resolved user, or the absence of one.

    valid=False means "nobody": an empty or unknown token, a failed login,
    or a username lookup that matched nothing. It is a normal outcome, not
    an error.
    """

    id: int = 0
    username: str = ""
    email: str = ""
    is_admin: bool = False
    token: str = field(default="", repr=False)
    password_hash: str = field(default="", repr=False)
    valid: bool = False

    @classmethod
    def invalid(cls) -> "Identity":
        return cls()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "is_admin": self.is_admin,
        }


class IdentityStore(Protocol):
    def find_by_username(self, username: str) -> Identity | None: ...

    def find_by_token(self, token: str) -> Identity | None: ...

    def insert(self, username: str, email: str, password_hash: str, token: str, is_admin: bool) -> Identity: ...

    def update(self, identity: Identity) -> None: ...

    def soft_delete(self, user_id: int) -> int: ...

    def list_active(self) -> list[Identity]: ...


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        username=user.username,
        email=user.email,
        is_admin=bool(user.is_admin),
        token=user.token,
        password_hash=user.password_hash,
        valid=True,
    )


class SqlIdentityStore:
    """Identity store backed by the Flask-SQLAlchemy session. Only active users are ever returned."""

    def __init__(self, database):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def _fail(self, action: str, exc: Exception) -> StorageError:
        self.session.rollback()
        logger.error("Identity store failed to %s: %s", action, exc)
        return StorageError(f"failed to {action}")

    def _find_one(self, action: str, **criteria) -> Identity | None:
        try:
            user = self.session.query(User).filter_by(is_active=True, **criteria).first()
        except SQLAlchemyError as exc:
            raise self._fail(action, exc) from exc
        return _to_identity(user) if user else None

    def find_by_username(self, username: str) -> Identity | None:
        return self._find_one("look up user by username", username=username)

    def find_by_token(self, token: str) -> Identity | None:
        return self._find_one("look up user by token", token=token)

    def insert(self, username: str, email: str, password_hash: str, token: str, is_admin: bool) -> Identity:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            token=token,
            is_admin=is_admin,
            is_active=True,
        )
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            raise self._fail("insert user", exc) from exc
        return _to_identity(user)

    def update(self, identity: Identity) -> None:
        try:
            self.session.query(User).filter_by(id=identity.id, is_active=True).update(
                {
                    User.email: identity.email,
                    User.password_hash: identity.password_hash,
                    User.is_admin: identity.is_admin,
                },
                synchronize_session=False,
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update user", exc) from exc

    def soft_delete(self, user_id: int) -> int:
        try:
            affected = self.session.query(User).filter_by(id=user_id, is_active=True).update(
                {User.is_active: False},
                synchronize_session=False,
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete user", exc) from exc
        return affected

    def list_active(self) -> list[Identity]:
        try:
            users = self.session.query(User).filter_by(is_active=True).order_by(User.username).all()
        except SQLAlchemyError as exc:
            raise self._fail("list users", exc) from exc
        return [_to_identity(user) for user in users]
