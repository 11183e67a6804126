# Overview: Service-layer operations for auth; password hashing, token generation and the authentication gate.

"""
Authentication primitives and the token gate.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12 by default)
- Account tokens come from secrets.token_hex and are generated once per
  account; login hands the same token back every time
- An empty or unknown token resolves to an invalid Identity, never an error
"""

import secrets
import string

import bcrypt

from ..stores.identity_store import Identity, IdentityStore


DEFAULT_BCRYPT_ROUNDS = 12

# Alphabet for generated passwords (password reset)
_PASSWORD_ALPHABET = string.ascii_uppercase + string.digits
GENERATED_PASSWORD_LENGTH = 12


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash password using bcrypt. Returns the hash as a string for storage."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def generate_token() -> str:
    """32 hex characters (16 bytes) from a cryptographically secure RNG."""
    return secrets.token_hex(16)


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


class AuthGate:
    """
    Resolves bearer tokens to identities.

    The Required and Optional access policies are applied at the route
    boundary (see decorators.py); the gate itself only answers "who is this".
    Store failures propagate as StorageError, which is distinct from an
    invalid token.
    """

    def __init__(self, identity_store: IdentityStore):
        self.identity_store = identity_store

    def resolve(self, token: str | None) -> Identity:
        if not token:
            return Identity.invalid()

        identity = self.identity_store.find_by_token(token)
        if identity is None:
            return Identity.invalid()
        return identity
