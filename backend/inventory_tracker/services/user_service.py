# Overview: Service-layer operations for users; credential checks, account administration and password reset.

"""
User administration.

Admin-only operations (add, delete, list) are gated at the route boundary by
require_admin. add_user repeats the check when it is handed the acting
identity, so no write happens for a non-admin even if a caller skips the
decorator.

The system account (id 0) owns bootstrap data and can never be deleted or
have its password reset.
"""

import logging

from ..errors import (
    SystemAccountError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from ..models.auth import SYSTEM_USER_ID
from ..stores.identity_store import Identity, IdentityStore
from .auth_service import (
    AuthGate,
    DEFAULT_BCRYPT_ROUNDS,
    generate_password,
    generate_token,
    hash_password,
    verify_password,
)
from .email_service import EmailSender


logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Inventory Password Reset"


def _require(value, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must not be blank")
    return value.strip()


class UserService:
    def __init__(
        self,
        identity_store: IdentityStore,
        email_sender: EmailSender,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self.identity_store = identity_store
        self.email_sender = email_sender
        self.bcrypt_rounds = bcrypt_rounds
        self.gate = AuthGate(identity_store)

    def check_credentials(self, username: str, password: str) -> Identity:
        """
        Return the active user matching username and password.

        A wrong username or password is an invalid Identity, not an error.
        """
        if not username or not password:
            return Identity.invalid()

        identity = self.identity_store.find_by_username(username)
        if identity is None or not verify_password(password, identity.password_hash):
            return Identity.invalid()
        return identity

    def check_by_token(self, token: str | None) -> Identity:
        return self.gate.resolve(token)

    def check_by_username(self, username: str, requesting_actor_id: int = SYSTEM_USER_ID) -> Identity:
        """Look up an active user for an administrative action. Missing users come back invalid."""
        logger.debug("User %s looked up username %r", requesting_actor_id, username)
        if not username:
            return Identity.invalid()

        identity = self.identity_store.find_by_username(username)
        return identity if identity is not None else Identity.invalid()

    def add_user(
        self,
        username: str,
        email: str,
        password: str,
        is_admin: bool = False,
        actor: Identity | None = None,
    ) -> Identity:
        if actor is not None and not (actor.valid and actor.is_admin):
            raise UnauthorizedError("you are not authorized to perform this action")

        username = _require(username, "username")
        email = _require(email, "email").lower()
        password = _require(password, "password")

        identity = self.identity_store.insert(
            username=username,
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            token=generate_token(),
            is_admin=bool(is_admin),
        )
        logger.info("Created user %r (admin=%s)", identity.username, identity.is_admin)
        return identity

    def list_users(self) -> list[Identity]:
        return self.identity_store.list_active()

    def delete_user(self, target_id: int, actor_id: int) -> None:
        if target_id == SYSTEM_USER_ID:
            raise SystemAccountError("cannot delete System user")

        affected = self.identity_store.soft_delete(target_id)
        if affected <= 0:
            raise UserNotFoundError()

        logger.info("User %s deleted user %s", actor_id, target_id)

    def reset_password(self, username: str, claimed_email: str) -> None:
        """
        Email a freshly generated password to the user's address on file.

        The new hash is only stored after the email went out, so a failed
        send leaves the old password working.
        """
        username = _require(username, "username")
        claimed_email = _require(claimed_email, "email")

        target = self.check_by_username(username)
        if not target.valid:
            raise UserNotFoundError()
        if target.id == SYSTEM_USER_ID:
            raise SystemAccountError("cannot reset System user")

        if target.email.lower() != claimed_email.lower():
            raise ValidationError("no username with that email on record")

        new_password = generate_password()
        self.email_sender.send(
            target.email,
            PASSWORD_RESET_SUBJECT,
            f"<p>Your new password is <b>{new_password}</b>. Please change it once you log in. </p>",
        )

        target.password_hash = hash_password(new_password, rounds=self.bcrypt_rounds)
        self.identity_store.update(target)
        logger.info("Password reset for user %r", target.username)
